"""Response envelopes and error mapping for the HTTP layer.

Every response has the shape ``{"success": true, "data": ..., "meta": ...}``
or ``{"success": false, "error": {"code": ..., "message": ...}}``.
"""

import logging
import math
from contextlib import contextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from agentpack.errors import (
    ConfigError,
    ConflictError,
    NotFoundError,
    ReferentialIntegrityError,
    StorageError,
    ValidationError,
)
from agentpack.models import CamelModel
from agentpack.utils.identifiers import generate_request_id, utc_timestamp

logger = logging.getLogger(__name__)

_STATUS_CODES = (
    (ValidationError, 400),
    (NotFoundError, 404),
    (ConflictError, 409),
    (ReferentialIntegrityError, 409),
    (StorageError, 500),
)


class ApiError(Exception):
    """An error with a route-specific code and status."""

    def __init__(self, status_code: int, code: str, message: str, details: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message
        self.details = details


def _jsonable(data: Any) -> Any:
    if isinstance(data, CamelModel):
        return data.to_payload()
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json")
    if isinstance(data, (list, tuple)):
        return [_jsonable(item) for item in data]
    if isinstance(data, dict):
        return {key: _jsonable(value) for key, value in data.items()}
    return data


def success(data: Any = None, *, status_code: int = 200, meta: dict | None = None) -> JSONResponse:
    body = {
        "success": True,
        "data": _jsonable(data),
        "meta": {
            "timestamp": utc_timestamp(),
            "requestId": generate_request_id(),
            **(meta or {}),
        },
    }
    return JSONResponse(body, status_code=status_code)


def paginate(items: list, page: int, limit: int) -> tuple[list, dict]:
    """Slice one page of ``items`` and describe the paging in list ``meta``."""
    total = len(items)
    start = (page - 1) * limit
    meta = {
        "total": total,
        "page": page,
        "limit": limit,
        "totalPages": math.ceil(total / limit),
    }
    return items[start:start + limit], meta


def failure(status_code: int, code: str, message: str, details: Any = None) -> JSONResponse:
    error = {"code": code, "message": message}
    if details is not None:
        error["details"] = _jsonable(details)
    return JSONResponse({"success": False, "error": error}, status_code=status_code)


def status_for(exc: ConfigError) -> int:
    for error_class, status_code in _STATUS_CODES:
        if isinstance(exc, error_class):
            return status_code
    return 500


@contextmanager
def translate_errors(fallback_code: str, *, invalid_code: str | None = None):
    """Give storage and unexpected failures the route's own error code.

    Validation errors keep the generic code unless ``invalid_code`` is
    set. Other core errors pass through to the app-level handler.
    """
    try:
        yield
    except ApiError:
        raise
    except ValidationError as exc:
        if invalid_code is None:
            raise
        raise ApiError(400, invalid_code, exc.message) from exc
    except StorageError as exc:
        logger.exception("%s: %s", fallback_code, exc.message)
        raise ApiError(500, fallback_code, exc.message) from exc
    except ConfigError:
        raise
    except Exception as exc:
        logger.exception("Unhandled error (%s)", fallback_code)
        raise ApiError(500, fallback_code, str(exc) or "Internal server error") from exc


async def _api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return failure(exc.status_code, exc.code, exc.message, exc.details)


async def _config_error_handler(request: Request, exc: ConfigError) -> JSONResponse:
    return failure(status_for(exc), exc.code, exc.message, exc.details)


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    message = errors[0].get("msg", "Malformed request") if errors else "Malformed request"
    return failure(400, "VALIDATION_ERROR", message)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, _api_error_handler)
    app.add_exception_handler(ConfigError, _config_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)

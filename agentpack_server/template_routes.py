"""API routes for agent and workflow templates."""

from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from agentpack.models import TemplateKind
from agentpack.templates import TemplateEngine
from agentpack.validation import sanitize_string
from agentpack_server.dependencies import get_engine
from agentpack_server.envelope import ApiError, success, translate_errors

router = APIRouter(tags=["templates"])


@router.get("/agent-templates")
def list_templates(
    kind: TemplateKind | None = None, engine: TemplateEngine = Depends(get_engine)
) -> JSONResponse:
    """List templates, optionally only those producing ``kind``."""
    with translate_errors("TEMPLATES_FETCH_ERROR"):
        templates = engine.list_templates(kind)
    return success(templates, meta={"total": len(templates)})


@router.get("/agent-templates/{template_id}")
def get_template(template_id: str, engine: TemplateEngine = Depends(get_engine)) -> JSONResponse:
    with translate_errors("TEMPLATES_FETCH_ERROR"):
        template = engine.get_template(template_id)
    return success(template)


@router.post("/agent-templates")
def create_from_template(
    payload: Any = Body(None), engine: TemplateEngine = Depends(get_engine)
) -> JSONResponse:
    """Create an agent or workflow from a template plus overrides.

    Body: ``{"templateId": "...", "overrides": {...}}``. Overrides replace
    the template's value per field.
    """
    payload = payload if isinstance(payload, dict) else {}
    template_id = sanitize_string(payload.get("templateId"))
    if template_id is None:
        raise ApiError(400, "MISSING_TEMPLATE_ID", "templateId is required")
    with translate_errors("TEMPLATE_CREATE_ERROR"):
        record = engine.create_from_template(template_id, payload.get("overrides"))
    return success(record, status_code=201)

"""Error taxonomy for the configuration core.

Every error carries a stable ``code``. The core only raises these; mapping
them to transport status codes is left to the request handler layer.
"""


class ConfigError(Exception):
    """Base class for all configuration core errors."""

    code = "CONFIG_ERROR"

    def __init__(self, message: str, *, code: str | None = None, details=None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.details = details


class ValidationError(ConfigError):
    """A caller-supplied payload fails a required-field or type constraint."""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, *, field: str | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.field = field


class NotFoundError(ConfigError):
    """A referenced id does not exist."""

    code = "NOT_FOUND"

    def __init__(self, kind: str, entity_id: str, **kwargs):
        kwargs.setdefault("code", f"{kind.upper()}_NOT_FOUND")
        super().__init__(f"{entity_label(kind)} not found: {entity_id}", **kwargs)
        self.kind = kind
        self.entity_id = entity_id


class ConflictError(ConfigError):
    """A create or update collides with an existing record."""

    code = "CONFLICT"


class ReferentialIntegrityError(ConfigError):
    """A delete would orphan a reference held by another record."""

    code = "REFERENTIAL_INTEGRITY"


class StorageError(ConfigError):
    """The underlying persistence failed (I/O or serialization)."""

    code = "STORAGE_ERROR"


_LABELS = {
    "agent": "Agent",
    "workflow": "Workflow",
    "mcp": "MCP server",
    "template": "Template",
}


def entity_label(kind: str) -> str:
    """Human-readable name of an entity kind for error messages."""
    return _LABELS.get(kind, kind)

"""Agent Pack configuration core: entity store, validation and templates."""

from agentpack.errors import (
    ConfigError,
    ConflictError,
    NotFoundError,
    ReferentialIntegrityError,
    StorageError,
    ValidationError,
)
from agentpack.settings import Settings
from agentpack.storage import ConfigStore
from agentpack.templates import TemplateEngine

__all__ = [
    # Errors
    "ConfigError",
    "ConflictError",
    "NotFoundError",
    "ReferentialIntegrityError",
    "StorageError",
    "ValidationError",
    # High-level APIs
    "ConfigStore",
    "Settings",
    "TemplateEngine",
]

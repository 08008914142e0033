"""Templates: read-only blueprints for new agents and workflows."""

from enum import Enum
from typing import Any

from pydantic import Field

from agentpack.models.base import StoredRecord


class TemplateKind(str, Enum):
    """Which entity kind a template produces."""

    agent = "agent"
    workflow = "workflow"


class Template(StoredRecord):
    """A reusable set of default field values.

    ``defaults`` uses the same camelCase field names as a create payload
    for the target kind. Applying a template never changes it.
    """

    kind: TemplateKind
    name: str
    description: str | None = None
    category: str | None = None
    tags: list[str] = Field(default_factory=list)
    defaults: dict[str, Any] = Field(default_factory=dict)

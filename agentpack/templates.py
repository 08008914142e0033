"""Template engine: derive new agents and workflows from stored templates."""

import copy
import logging
from typing import Any

from agentpack.errors import ValidationError
from agentpack.models import (
    AgentConfig,
    AgentInput,
    Template,
    TemplateKind,
    WorkflowConfig,
    WorkflowInput,
)
from agentpack.storage import ConfigStore
from agentpack.validation import to_wire_keys, validate_agent, validate_workflow

logger = logging.getLogger(__name__)

_LLM_KEYS = ("llmProvider", "llmModel", "llmConfig")


class TemplateEngine:
    """Applies templates on top of a ``ConfigStore``.

    Overrides are merged shallowly: an override replaces the template's
    value for that field wholesale, including object and list values. Keys
    are compared by wire name, so ``system_prompt`` overrides
    ``systemPrompt``. The merged payload then goes through the same
    validation as a hand-written one.
    """

    def __init__(self, store: ConfigStore):
        self.store = store

    def list_templates(self, kind: TemplateKind | None = None) -> list[Template]:
        return self.store.list_templates(kind)

    def get_template(self, template_id: str) -> Template:
        return self.store.get_template(template_id)

    def apply_template(
        self, template_id: str, overrides: dict[str, Any] | None = None
    ) -> AgentInput | WorkflowInput:
        """Return the validated input a template produces with ``overrides``."""
        if overrides is None:
            overrides = {}
        if not isinstance(overrides, dict):
            raise ValidationError("Template overrides must be a JSON object", field="overrides")

        template = self.store.get_template(template_id)
        defaults = to_wire_keys(copy.deepcopy(template.defaults))
        overrides = to_wire_keys(overrides)
        if template.kind == TemplateKind.agent and (
            "llmProvider" in overrides or "llmConfig" in overrides
        ):
            # a new provider without a model gets that provider's default model
            for key in _LLM_KEYS:
                defaults.pop(key, None)

        merged = {**defaults, **overrides}
        if template.kind == TemplateKind.agent:
            return validate_agent(merged, self.store.get_providers())
        return validate_workflow(merged)

    def create_from_template(
        self, template_id: str, overrides: dict[str, Any] | None = None
    ) -> AgentConfig | WorkflowConfig:
        """Apply a template and persist the result.

        Nothing is written unless the merged payload is valid.
        """
        data = self.apply_template(template_id, overrides)
        if isinstance(data, AgentInput):
            record = self.store.create_agent(data)
        else:
            record = self.store.create_workflow(data)
        logger.info("Created %s from template %s", record.id, template_id)
        return record

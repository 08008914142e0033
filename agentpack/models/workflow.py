"""Workflow configuration models.

A workflow is an ordered composition of agent steps. Steps reference agents
by id and do not own them.
"""

from enum import Enum

from pydantic import Field

from agentpack.models.base import CamelModel, StoredRecord


class WorkflowStatus(str, Enum):
    """Drafts may be saved without any steps."""

    draft = "draft"
    active = "active"


class WorkflowStep(CamelModel):
    """A single step run by one agent."""

    agent_id: str
    name: str | None = None
    description: str | None = None


class WorkflowInput(CamelModel):
    """A validated workflow payload, before the store assigns ids."""

    id: str | None = None
    name: str
    description: str | None = None
    status: WorkflowStatus = WorkflowStatus.active
    steps: list[WorkflowStep] = Field(default_factory=list)
    main_agent_id: str | None = None
    tags: list[str] = Field(default_factory=list)

    @property
    def agent_ids(self) -> list[str]:
        """Distinct agent ids referenced by the steps, in step order."""
        seen: list[str] = []
        for step in self.steps:
            if step.agent_id not in seen:
                seen.append(step.agent_id)
        return seen


class WorkflowConfig(StoredRecord, WorkflowInput):
    """A stored workflow configuration."""

    id: str

"""Agent configuration models."""

from enum import Enum

from pydantic import Field

from agentpack.models.base import CamelModel, StoredRecord


class AgentRole(str, Enum):
    """Position an agent takes inside a workflow."""

    main = "main"  # plans and coordinates
    sub = "sub"  # executes a delegated task
    synthesis = "synthesis"  # merges results


class AgentInput(CamelModel):
    """A validated agent payload, before the store assigns ids."""

    id: str | None = None
    name: str
    description: str | None = None
    role: AgentRole = AgentRole.sub
    system_prompt: str | None = None

    # must be a pair listed in the provider catalog
    llm_provider: str
    llm_model: str

    enabled_tools: list[str] = Field(default_factory=list)
    knowledge_base_paths: list[str] = Field(default_factory=list)
    mcp_server_ids: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)


class AgentConfig(StoredRecord, AgentInput):
    """A stored agent configuration."""

    id: str

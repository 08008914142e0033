"""MCP (Model Context Protocol) server definitions.

An MCP server is an external tool-provider process that agents can be bound
to. The admin platform only stores how to launch it.
"""

from enum import Enum

from pydantic import Field

from agentpack.models.base import CamelModel, StoredRecord


class MCPServerStatus(str, Enum):
    """Whether a definition is offered to agents."""

    active = "active"
    disabled = "disabled"


class MCPTool(CamelModel):
    """A tool exposed by an MCP server."""

    name: str
    description: str | None = None


class MCPServerInput(CamelModel):
    """A validated MCP server payload, before the store assigns ids."""

    id: str | None = None
    name: str
    description: str | None = None
    command: str
    args: list[str] = Field(default_factory=list)
    env: dict[str, str] = Field(default_factory=dict)
    tags: list[str] = Field(default_factory=list)
    providers: list[str] = Field(default_factory=list)
    supported_models: list[str] = Field(default_factory=list)
    status: MCPServerStatus = MCPServerStatus.active
    timeout: float | None = None  # seconds
    tools: list[MCPTool] = Field(default_factory=list)


class MCPServerDefinition(StoredRecord, MCPServerInput):
    """A stored MCP server definition."""

    id: str

"""Configuration entity models."""

from agentpack.models.agent import (
    AgentConfig,
    AgentInput,
    AgentRole,
)
from agentpack.models.base import CamelModel, StoredRecord
from agentpack.models.mcp_server import (
    MCPServerDefinition,
    MCPServerInput,
    MCPServerStatus,
    MCPTool,
)
from agentpack.models.provider import LLMProvider, ProviderCatalog
from agentpack.models.template import Template, TemplateKind
from agentpack.models.workflow import (
    WorkflowConfig,
    WorkflowInput,
    WorkflowStatus,
    WorkflowStep,
)

__all__ = [
    "CamelModel",
    "StoredRecord",
    # Agents
    "AgentConfig",
    "AgentInput",
    "AgentRole",
    # Workflows
    "WorkflowConfig",
    "WorkflowInput",
    "WorkflowStatus",
    "WorkflowStep",
    # MCP servers
    "MCPServerDefinition",
    "MCPServerInput",
    "MCPServerStatus",
    "MCPTool",
    # Templates
    "Template",
    "TemplateKind",
    # Providers
    "LLMProvider",
    "ProviderCatalog",
]

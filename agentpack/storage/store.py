"""The entity store: CRUD for every configuration kind under one root.

Each kind lives in its own JSON file with its own writer lock. Operations
that span kinds (workflow -> agent references) take the agents lock before
the workflows lock, always in that order.
"""

import copy
import logging
import os
from pathlib import Path
from typing import Any

from agentpack.errors import (
    ConflictError,
    NotFoundError,
    ReferentialIntegrityError,
    StorageError,
)
from agentpack.models import (
    AgentConfig,
    AgentInput,
    MCPServerDefinition,
    MCPServerInput,
    MCPServerStatus,
    ProviderCatalog,
    Template,
    TemplateKind,
    WorkflowConfig,
    WorkflowInput,
)
from agentpack.storage.collection import JsonCollection, read_json, write_json_atomic
from agentpack.storage.defaults import (
    DEFAULT_APP_CONFIG,
    DEFAULT_PROVIDERS,
    DEFAULT_TOOLS_CONFIG,
    built_in_mcp_servers,
    built_in_templates,
    default_catalog,
)
from agentpack.utils.identifiers import utc_timestamp
from agentpack.validation import (
    merge_payload,
    validate_agent,
    validate_mcp_server,
    validate_workflow,
)

logger = logging.getLogger(__name__)

PROVIDERS_FILE = "llm-providers.json"
APP_CONFIG_FILE = "app-config.json"
TOOLS_CONFIG_FILE = "tools-config.json"

# written into an agent's primary knowledge base directory
MCP_BINDING_FILE = ".mcp.json"


class ConfigStore:
    """File-backed store for agents, workflows, MCP servers and templates.

    Create methods take payloads that already went through the validation
    pipeline. Update methods take normalized wire-named changes, merge them
    onto the stored record and validate the merged result again, so updated
    records hold the same invariants as new ones.
    """

    def __init__(self, root: Path | str):
        self.root = Path(root)
        self.agents = JsonCollection(self.root / "agents.json", AgentConfig, "agent")
        self.workflows = JsonCollection(self.root / "workflows.json", WorkflowConfig, "workflow")
        self.mcp_servers = JsonCollection(
            self.root / "mcp-servers.json", MCPServerDefinition, "mcp", key="servers"
        )
        self.templates = JsonCollection(self.root / "templates.json", Template, "template")

    def initialize(self, seed_defaults: bool = True) -> None:
        """Create the config root and, optionally, the built-in records.

        Built-in MCP servers and the provider catalog are only written when
        their file is missing; built-in templates are added by id.
        """
        self.root.mkdir(parents=True, exist_ok=True)
        if not seed_defaults:
            return
        now = utc_timestamp()
        providers_path = self.root / PROVIDERS_FILE
        if not providers_path.exists():
            write_json_atomic(providers_path, DEFAULT_PROVIDERS)
        app_config_path = self.root / APP_CONFIG_FILE
        if not app_config_path.exists():
            app_config = copy.deepcopy(DEFAULT_APP_CONFIG)
            app_config["storage"]["configRoot"] = str(self.root)
            write_json_atomic(app_config_path, app_config)
        tools_config_path = self.root / TOOLS_CONFIG_FILE
        if not tools_config_path.exists():
            write_json_atomic(tools_config_path, DEFAULT_TOOLS_CONFIG)
        if not self.mcp_servers.path.exists():
            self.mcp_servers.seed(built_in_mcp_servers(now))
        self.templates.seed(built_in_templates(now))
        logger.info("Config store ready at %s", self.root)

    def get_providers(self) -> ProviderCatalog:
        data = read_json(self.root / PROVIDERS_FILE)
        if data is None:
            return default_catalog()
        try:
            return ProviderCatalog.model_validate(data)
        except ValueError as exc:
            raise StorageError(f"Invalid provider catalog in {self.root / PROVIDERS_FILE}: {exc}") from exc

    def _read_settings(self, filename: str, default: dict) -> dict[str, Any]:
        data = read_json(self.root / filename)
        if data is None:
            return copy.deepcopy(default)
        if not isinstance(data, dict):
            raise StorageError(f"Unexpected layout in {self.root / filename}: expected an object")
        return data

    def get_app_config(self) -> dict[str, Any]:
        return self._read_settings(APP_CONFIG_FILE, DEFAULT_APP_CONFIG)

    def get_tools_config(self) -> dict[str, Any]:
        return self._read_settings(TOOLS_CONFIG_FILE, DEFAULT_TOOLS_CONFIG)

    # --- Agents ---

    def list_agents(self) -> list[AgentConfig]:
        return self.agents.list_all()

    def get_agent(self, agent_id: str) -> AgentConfig:
        return self.agents.get(agent_id)

    def create_agent(self, data: AgentInput) -> AgentConfig:
        agent = self.agents.create(data.model_dump())
        self.sync_mcp_bindings(agent)
        return agent

    def update_agent(self, agent_id: str, changes: dict) -> AgentConfig:
        # switching provider without naming a model picks the provider default
        if "llmProvider" in changes and "llmModel" not in changes:
            changes = {**changes, "llmModel": None}
        with self.agents.lock:
            current = self.agents.get(agent_id)
            data = validate_agent(merge_payload(current.to_payload(), changes), self.get_providers())
            agent = self.agents.update(agent_id, data.model_dump(exclude={"id"}))
        self.sync_mcp_bindings(agent)
        return agent

    def sync_mcp_bindings(self, agent: AgentConfig) -> Path | None:
        """Mirror the agent's MCP servers into its primary knowledge base.

        Writes the selected definitions to ``.mcp.json`` in the first
        knowledge base path, or removes that file when the agent has no MCP
        servers. The agent record is already saved, so failures are logged
        and not raised. Returns the binding file path when one was written.
        """
        if not agent.knowledge_base_paths:
            return None
        target_dir = Path(agent.knowledge_base_paths[0])
        if not os.path.isabs(target_dir):
            logger.warning("Skip MCP binding for %s: %s is not absolute here", agent.id, target_dir)
            return None

        target = target_dir / MCP_BINDING_FILE
        try:
            if not agent.mcp_server_ids:
                target.unlink(missing_ok=True)
                return None
            selected = [s for s in self.mcp_servers.list_all() if s.id in agent.mcp_server_ids]
            write_json_atomic(target, [server.to_payload() for server in selected])
        except (OSError, StorageError) as exc:
            logger.warning("Failed to sync MCP binding file %s: %s", target, exc)
            return None
        logger.info("Wrote %d MCP binding(s) for %s to %s", len(selected), agent.id, target)
        return target

    def delete_agent(self, agent_id: str) -> None:
        """Delete an agent unless a workflow still references it."""
        with self.agents.lock, self.workflows.lock:
            self.agents.get(agent_id)
            using = self.workflows_using_agent(agent_id)
            if using:
                raise ReferentialIntegrityError(
                    f"Agent {agent_id} is used by {len(using)} workflow(s)",
                    code="AGENT_IN_USE",
                    details=[{"id": w.id, "name": w.name} for w in using],
                )
            self.agents.delete(agent_id)

    # --- Workflows ---

    def list_workflows(self) -> list[WorkflowConfig]:
        return self.workflows.list_all()

    def get_workflow(self, workflow_id: str) -> WorkflowConfig:
        return self.workflows.get(workflow_id)

    def workflows_using_agent(self, agent_id: str) -> list[WorkflowConfig]:
        return [
            workflow
            for workflow in self.workflows.list_all()
            if agent_id in workflow.agent_ids or workflow.main_agent_id == agent_id
        ]

    def _check_agents_exist(self, workflow: WorkflowInput) -> None:
        known = {agent.id for agent in self.agents.list_all()}
        for agent_id in workflow.agent_ids:
            if agent_id not in known:
                raise NotFoundError("agent", agent_id)

    def create_workflow(self, data: WorkflowInput) -> WorkflowConfig:
        with self.agents.lock, self.workflows.lock:
            self._check_agents_exist(data)
            return self.workflows.create(data.model_dump())

    def update_workflow(self, workflow_id: str, changes: dict) -> WorkflowConfig:
        with self.agents.lock, self.workflows.lock:
            current = self.workflows.get(workflow_id)
            data = validate_workflow(merge_payload(current.to_payload(), changes))
            self._check_agents_exist(data)
            return self.workflows.update(workflow_id, data.model_dump(exclude={"id"}))

    def add_workflow_steps(self, workflow_id: str, agent_ids: list[str]) -> WorkflowConfig:
        """Append one step per agent not already used by the workflow."""
        with self.agents.lock, self.workflows.lock:
            current = self.workflows.get(workflow_id)
            steps = [step.to_payload() for step in current.steps]
            present = set(current.agent_ids)
            for agent_id in agent_ids:
                if agent_id not in present:
                    steps.append({"agentId": agent_id})
                    present.add(agent_id)
            return self.update_workflow(workflow_id, {"steps": steps})

    def delete_workflow(self, workflow_id: str) -> None:
        self.workflows.delete(workflow_id)

    # --- MCP servers ---

    def list_mcp_servers(self) -> list[MCPServerDefinition]:
        return self.mcp_servers.list_all()

    def get_mcp_server(self, server_id: str) -> MCPServerDefinition:
        return self.mcp_servers.get(server_id)

    def _check_mcp_name(self, data: MCPServerInput, exclude_id: str | None = None) -> None:
        if data.status != MCPServerStatus.active:
            return
        for server in self.mcp_servers.list_all():
            if (
                server.id != exclude_id
                and server.status == MCPServerStatus.active
                and server.name == data.name
            ):
                raise ConflictError(
                    f"An active MCP server named '{data.name}' already exists",
                    code="MCP_NAME_CONFLICT",
                )

    def create_mcp_server(self, data: MCPServerInput) -> MCPServerDefinition:
        with self.mcp_servers.lock:
            self._check_mcp_name(data)
            return self.mcp_servers.create(data.model_dump())

    def update_mcp_server(self, server_id: str, changes: dict) -> MCPServerDefinition:
        with self.mcp_servers.lock:
            current = self.mcp_servers.get(server_id)
            data = validate_mcp_server(merge_payload(current.to_payload(), changes))
            self._check_mcp_name(data, exclude_id=server_id)
            return self.mcp_servers.update(server_id, data.model_dump(exclude={"id"}))

    def delete_mcp_server(self, server_id: str) -> None:
        self.mcp_servers.delete(server_id)

    # --- Templates ---

    def list_templates(self, kind: TemplateKind | None = None) -> list[Template]:
        templates = self.templates.list_all()
        if kind is not None:
            templates = [t for t in templates if t.kind == kind]
        return templates

    def get_template(self, template_id: str) -> Template:
        return self.templates.get(template_id)

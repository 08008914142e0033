"""End-to-end tests for the config HTTP API."""

import pytest
from fastapi.testclient import TestClient

from agentpack.errors import StorageError
from agentpack.settings import Settings
from agentpack.storage import ConfigStore
from agentpack_server.app import create_app


@pytest.fixture
def client(tmp_path):
    app = create_app(Settings(config_root=tmp_path / "config"))
    with TestClient(app) as client:
        yield client


def create_agent(client, name="Planner", **extra):
    response = client.post("/api/agents", json={"name": name, **extra})
    assert response.status_code == 201
    return response.json()["data"]


def create_workflow(client, agent_ids, **extra):
    payload = {"name": "Review", "steps": [{"agentId": a} for a in agent_ids], **extra}
    response = client.post("/api/workflows", json=payload)
    assert response.status_code == 201
    return response.json()["data"]


class TestHealth:
    """Root endpoint."""

    def test_root(self, client):
        """The root should report ok and list the config endpoint."""
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert response.json()["endpoints"]["config"] == "/api/config"


class TestConfigRoutes:
    """The aggregate configuration view and maintenance actions."""

    def test_aggregate_with_stats(self, client):
        """GET /api/config should bundle every kind with counts."""
        agent = create_agent(client)
        create_workflow(client, [agent["id"]])

        response = client.get("/api/config")
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["stats"] == {"totalAgents": 1, "totalWorkflows": 1}
        assert [a["id"] for a in data["agents"]] == [agent["id"]]
        assert len(data["workflows"]) == 1
        assert data["appConfig"]["app"]["name"] == "Pack Agents"
        assert "tools" in data["toolsConfig"]

    def test_initialize_action(self, client):
        """The initialize action should succeed on an existing root."""
        response = client.post("/api/config", json={"action": "initialize"})
        assert response.status_code == 200
        assert response.json()["data"] == {"message": "Configuration initialized"}

    def test_unknown_action(self, client):
        """Any other action should be rejected with INVALID_ACTION."""
        for payload in ({"action": "reset"}, {}, None):
            response = client.post("/api/config", json=payload)
            assert response.status_code == 400
            assert response.json()["error"]["code"] == "INVALID_ACTION"


class TestMCPServerRoutes:
    """Registering and managing MCP server definitions."""

    def test_register_minimal_server(self, client):
        """A name and command should register an active server in the envelope."""
        response = client.post("/api/mcp-servers", json={"name": "search", "command": "npx mcp-search"})
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["status"] == "active"
        assert body["data"]["args"] == []
        assert body["data"]["env"] == {}
        assert body["meta"]["timestamp"]
        assert body["meta"]["requestId"]

        listing = client.get("/api/mcp-servers").json()
        assert [s["name"] for s in listing["data"]].count("search") == 1
        assert listing["meta"]["total"] == len(listing["data"])

    def test_missing_name(self, client):
        """A payload without a name should be rejected naming the field."""
        response = client.post("/api/mcp-servers", json={})
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "INVALID_MCP_PAYLOAD"
        assert "name" in error["message"]

    def test_missing_command(self, client):
        """A payload without a command should be rejected naming the field."""
        response = client.post("/api/mcp-servers", json={"name": "x"})
        assert response.status_code == 400
        assert "command" in response.json()["error"]["message"]

    def test_oversized_timeout_is_dropped(self, client):
        """A huge integer timeout should be dropped rather than fail the request."""
        response = client.post(
            "/api/mcp-servers", json={"name": "search", "command": "npx", "timeout": 10**400}
        )
        assert response.status_code == 201
        assert "timeout" not in response.json()["data"]

    def test_duplicate_active_name(self, client):
        """A second active server with the same name should get 409."""
        client.post("/api/mcp-servers", json={"name": "search", "command": "npx"})
        response = client.post("/api/mcp-servers", json={"name": "search", "command": "npx"})
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "MCP_NAME_CONFLICT"

    def test_update_and_delete(self, client):
        """An update should apply well-shaped fields and delete should remove the server."""
        server = client.post("/api/mcp-servers", json={"name": "search", "command": "npx"}).json()["data"]
        url = f"/api/mcp-servers/{server['id']}"

        response = client.put(url, json={"description": "Web search", "args": "bad"})
        assert response.status_code == 200
        assert response.json()["data"]["description"] == "Web search"
        assert response.json()["data"]["command"] == "npx"

        assert client.delete(url).status_code == 200
        response = client.get(url)
        assert response.status_code == 404
        assert response.json()["success"] is False
        assert response.json()["error"]["code"] == "MCP_NOT_FOUND"

    def test_null_clears_fields(self, client):
        """Null values in an update should clear the matching fields."""
        server = client.post(
            "/api/mcp-servers",
            json={"name": "search", "command": "npx", "description": "d", "args": ["-y"]},
        ).json()["data"]
        response = client.put(
            f"/api/mcp-servers/{server['id']}", json={"description": None, "args": None}
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert "description" not in data
        assert data["args"] == []

    def test_empty_update(self, client):
        """An update with nothing usable should be rejected."""
        response = client.put("/api/mcp-servers/code-quality", json={"unknown": 1})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "EMPTY_UPDATES"

    def test_update_unknown_server(self, client):
        """Updating an unknown server should return 404."""
        response = client.put("/api/mcp-servers/nope", json={"description": "d"})
        assert response.status_code == 404

    def test_storage_failure_uses_route_code(self, client, monkeypatch):
        """A storage failure should surface as 500 with the route's code."""
        def broken(self, data):
            raise StorageError("disk full")

        monkeypatch.setattr(ConfigStore, "create_mcp_server", broken)
        response = client.post("/api/mcp-servers", json={"name": "search", "command": "npx"})
        assert response.status_code == 500
        assert response.json()["error"] == {"code": "CREATE_MCP_ERROR", "message": "disk full"}

    def test_malformed_json(self, client):
        """A body that is not valid JSON should get a 400 failure envelope."""
        response = client.post(
            "/api/mcp-servers", content="{bad", headers={"content-type": "application/json"}
        )
        assert response.status_code == 400
        assert response.json()["success"] is False


class TestAgentRoutes:
    """Agent CRUD, listing and provider catalog."""

    def test_create_uses_default_model(self, client):
        """An agent without an LLM choice should get the catalog default."""
        agent = create_agent(client)
        assert agent["llmProvider"] == "claude"
        assert agent["llmModel"] == "claude-sonnet-4-20250514"
        assert client.get(f"/api/agents/{agent['id']}").json()["data"] == agent

    def test_unsupported_model(self, client):
        """An unsupported provider/model pair should be rejected."""
        response = client.post(
            "/api/agents", json={"name": "A", "llmProvider": "openai", "llmModel": "nope"}
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_relative_knowledge_path(self, client):
        """Relative knowledge paths should be rejected and listed in details."""
        response = client.post(
            "/api/agents", json={"name": "A", "knowledgeBasePaths": ["/srv/kb", "docs/kb"]}
        )
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "INVALID_KNOWLEDGE_PATH"
        assert error["details"] == ["docs/kb"]

    def test_single_knowledge_path(self, client, tmp_path):
        """A single path string should be stored as a list."""
        path = str(tmp_path / "kb")
        agent = create_agent(client, knowledgeBasePaths=path)
        assert agent["knowledgeBasePaths"] == [path]

    def test_list_filters_and_paginates(self, client):
        """Listing should filter by role and search, and page the results."""
        create_agent(client, "Planner", role="main")
        create_agent(client, "Writer")
        create_agent(client, "Editor", description="Polishes the writer's drafts")

        body = client.get("/api/agents", params={"limit": 2}).json()
        assert len(body["data"]) == 2
        assert body["meta"]["total"] == 3
        assert body["meta"]["totalPages"] == 2

        body = client.get("/api/agents", params={"role": "main"}).json()
        assert [a["name"] for a in body["data"]] == ["Planner"]

        body = client.get("/api/agents", params={"search": "writer"}).json()
        assert [a["name"] for a in body["data"]] == ["Writer", "Editor"]

    def test_role_all_lists_everything(self, client):
        """role=all should behave like no role filter."""
        create_agent(client, "Planner", role="main")
        create_agent(client, "Writer")
        response = client.get("/api/agents", params={"role": "all"})
        assert response.status_code == 200
        assert [a["name"] for a in response.json()["data"]] == ["Planner", "Writer"]

    def test_empty_listing_has_zero_pages(self, client):
        """An empty listing should report zero pages."""
        meta = client.get("/api/agents").json()["meta"]
        assert meta["total"] == 0
        assert meta["totalPages"] == 0

    def test_update_agent(self, client):
        """Switching provider should pick that provider's default model."""
        agent = create_agent(client)
        response = client.put(f"/api/agents/{agent['id']}", json={"llmProvider": "openai"})
        assert response.status_code == 200
        assert response.json()["data"]["llmModel"] == "gpt-4"

    def test_agent_in_use(self, client):
        """An agent used by a workflow should get 409 until the workflow is gone."""
        agent = create_agent(client)
        workflow = create_workflow(client, [agent["id"]])

        response = client.delete(f"/api/agents/{agent['id']}")
        assert response.status_code == 409
        error = response.json()["error"]
        assert error["code"] == "AGENT_IN_USE"
        assert error["details"] == [{"id": workflow["id"], "name": "Review"}]

        assert client.delete(f"/api/workflows/{workflow['id']}").status_code == 200
        assert client.delete(f"/api/agents/{agent['id']}").status_code == 200

    def test_providers(self, client):
        """The provider catalog should list each provider's models."""
        data = client.get("/api/llm-providers").json()["data"]
        assert "gpt-4" in data["providers"]["openai"]["models"]


class TestWorkflowRoutes:
    """Workflow creation and step management."""

    def test_unknown_agent(self, client):
        """A workflow naming an unknown agent should get 404."""
        response = client.post("/api/workflows", json={"name": "Review", "agentIds": ["ghost"]})
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "AGENT_NOT_FOUND"

    def test_active_workflow_needs_steps(self, client):
        """An active workflow without steps should be rejected."""
        response = client.post("/api/workflows", json={"name": "Review"})
        assert response.status_code == 400

    def test_list_meta_pages(self, client):
        """Workflow listings should carry the same paging meta as agents."""
        agent = create_agent(client)
        create_workflow(client, [agent["id"]])
        meta = client.get("/api/workflows", params={"limit": 1}).json()["meta"]
        assert meta["total"] == 1
        assert meta["totalPages"] == 1

    def test_add_agents_and_set_main(self, client):
        """Adding agents should append new steps and the main agent should be settable."""
        planner = create_agent(client, "Planner", role="main")
        writer = create_agent(client, "Writer")
        workflow = create_workflow(client, [writer["id"]])
        base = f"/api/workflows/{workflow['id']}"

        response = client.post(f"{base}/agents", json={"agentIds": [planner["id"], writer["id"]]})
        assert response.status_code == 200
        assert [s["agentId"] for s in response.json()["data"]["steps"]] == [writer["id"], planner["id"]]

        response = client.put(f"{base}/main-agent", json={"mainAgentId": planner["id"]})
        assert response.status_code == 200
        assert response.json()["data"]["mainAgentId"] == planner["id"]

    def test_add_agents_requires_list(self, client):
        """agentIds that is not a list should be rejected."""
        agent = create_agent(client)
        workflow = create_workflow(client, [agent["id"]])
        response = client.post(f"/api/workflows/{workflow['id']}/agents", json={"agentIds": "x"})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_AGENT_IDS"

    def test_main_agent_required(self, client):
        """The main agent should be supplied and be one of the steps."""
        agent = create_agent(client)
        workflow = create_workflow(client, [agent["id"]])
        url = f"/api/workflows/{workflow['id']}/main-agent"

        response = client.put(url, json={})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "MISSING_MAIN_AGENT_ID"

        other = create_agent(client, "Other")
        response = client.put(url, json={"mainAgentId": other["id"]})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"


class TestTemplateRoutes:
    """Listing templates and creating records from them."""

    def test_list_by_kind(self, client):
        """Filtering by kind should return only that kind."""
        body = client.get("/api/agent-templates", params={"kind": "agent"}).json()
        ids = {t["id"] for t in body["data"]}
        assert "code-analyst-template" in ids
        assert all(t["kind"] == "agent" for t in body["data"])

    def test_missing_template_id(self, client):
        """A body without a usable templateId should get MISSING_TEMPLATE_ID."""
        for payload in ({}, {"templateId": "  "}, None):
            response = client.post("/api/agent-templates", json=payload)
            assert response.status_code == 400
            assert response.json()["error"]["code"] == "MISSING_TEMPLATE_ID"

    def test_unknown_template(self, client):
        """An unknown template id should get 404."""
        response = client.post("/api/agent-templates", json={"templateId": "nope"})
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "TEMPLATE_NOT_FOUND"

    def test_create_from_template(self, client):
        """Overrides should apply on top of the template defaults."""
        response = client.post(
            "/api/agent-templates",
            json={"templateId": "code-analyst-template", "overrides": {"name": "custom"}},
        )
        assert response.status_code == 201
        agent = response.json()["data"]
        assert agent["name"] == "custom"
        assert agent["enabledTools"] == ["Read", "Grep", "Glob"]
        assert client.get(f"/api/agents/{agent['id']}").status_code == 200

    def test_snake_case_override(self, client):
        """A snake_case override should replace the template's camelCase value."""
        response = client.post(
            "/api/agent-templates",
            json={"templateId": "code-analyst-template", "overrides": {"system_prompt": "Be brief."}},
        )
        assert response.status_code == 201
        assert response.json()["data"]["systemPrompt"] == "Be brief."

"""API routes for agent configurations."""

from typing import Any

from fastapi import APIRouter, Body, Depends, Query
from fastapi.responses import JSONResponse

from agentpack.models import AgentConfig
from agentpack.storage import ConfigStore
from agentpack.validation import normalize_agent_updates, validate_agent
from agentpack_server.dependencies import get_store
from agentpack_server.envelope import ApiError, paginate, success, translate_errors

router = APIRouter(tags=["agents"])


def _matches(agent: AgentConfig, search: str) -> bool:
    needle = search.lower()
    return (
        needle in agent.name.lower()
        or needle in (agent.description or "").lower()
        or any(needle in tag.lower() for tag in agent.tags)
    )


@router.get("/agents")
def list_agents(
    role: str | None = None,
    search: str | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=500),
    store: ConfigStore = Depends(get_store),
) -> JSONResponse:
    """List agents, optionally filtered by role or a search term.

    ``role=all`` is the same as no role filter.
    """
    with translate_errors("AGENTS_FETCH_ERROR"):
        agents = store.list_agents()

    if role and role != "all":
        agents = [agent for agent in agents if agent.role.value == role]
    if search:
        agents = [agent for agent in agents if _matches(agent, search)]

    agents, meta = paginate(agents, page, limit)
    return success(agents, meta=meta)


@router.post("/agents")
def create_agent(payload: Any = Body(None), store: ConfigStore = Depends(get_store)) -> JSONResponse:
    """Validate and create a new agent."""
    with translate_errors("AGENT_CREATE_ERROR"):
        agent = store.create_agent(validate_agent(payload, store.get_providers()))
    return success(agent, status_code=201)


@router.get("/agents/{agent_id}")
def get_agent(agent_id: str, store: ConfigStore = Depends(get_store)) -> JSONResponse:
    with translate_errors("AGENTS_FETCH_ERROR"):
        agent = store.get_agent(agent_id)
    return success(agent)


@router.put("/agents/{agent_id}")
def update_agent(
    agent_id: str, payload: Any = Body(None), store: ConfigStore = Depends(get_store)
) -> JSONResponse:
    """Update the supplied fields of an agent; the rest keep their values."""
    with translate_errors("AGENT_UPDATE_ERROR"):
        changes = normalize_agent_updates(payload)
        if not changes:
            raise ApiError(400, "EMPTY_UPDATES", "No fields to update")
        agent = store.update_agent(agent_id, changes)
    return success(agent)


@router.delete("/agents/{agent_id}")
def delete_agent(agent_id: str, store: ConfigStore = Depends(get_store)) -> JSONResponse:
    """Delete an agent that no workflow references."""
    with translate_errors("AGENT_DELETE_ERROR"):
        store.delete_agent(agent_id)
    return success({"deleted": agent_id})


@router.get("/llm-providers")
def list_llm_providers(store: ConfigStore = Depends(get_store)) -> JSONResponse:
    """Supported provider/model combinations for agents."""
    with translate_errors("PROVIDERS_FETCH_ERROR"):
        catalog = store.get_providers()
    return success(catalog)

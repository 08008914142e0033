"""API routes for workflow configurations."""

from typing import Any

from fastapi import APIRouter, Body, Depends, Query
from fastapi.responses import JSONResponse

from agentpack.storage import ConfigStore
from agentpack.validation import (
    normalize_workflow_updates,
    sanitize_array,
    sanitize_string,
    validate_workflow,
)
from agentpack_server.dependencies import get_store
from agentpack_server.envelope import ApiError, paginate, success, translate_errors

router = APIRouter(tags=["workflows"])


def _field(payload: Any, name: str) -> Any:
    return payload.get(name) if isinstance(payload, dict) else None


@router.get("/workflows")
def list_workflows(
    search: str | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=500),
    store: ConfigStore = Depends(get_store),
) -> JSONResponse:
    """List workflows, optionally filtered by a search term."""
    with translate_errors("WORKFLOW_LIST_ERROR"):
        workflows = store.list_workflows()

    if search:
        needle = search.lower()
        workflows = [
            workflow
            for workflow in workflows
            if needle in workflow.name.lower() or needle in (workflow.description or "").lower()
        ]

    workflows, meta = paginate(workflows, page, limit)
    return success(workflows, meta=meta)


@router.post("/workflows")
def create_workflow(payload: Any = Body(None), store: ConfigStore = Depends(get_store)) -> JSONResponse:
    """Validate and create a workflow; every step's agent must exist."""
    with translate_errors("WORKFLOW_CREATE_ERROR"):
        workflow = store.create_workflow(validate_workflow(payload))
    return success(workflow, status_code=201)


@router.get("/workflows/{workflow_id}")
def get_workflow(workflow_id: str, store: ConfigStore = Depends(get_store)) -> JSONResponse:
    with translate_errors("WORKFLOW_FETCH_ERROR"):
        workflow = store.get_workflow(workflow_id)
    return success(workflow)


@router.put("/workflows/{workflow_id}")
def update_workflow(
    workflow_id: str, payload: Any = Body(None), store: ConfigStore = Depends(get_store)
) -> JSONResponse:
    with translate_errors("WORKFLOW_UPDATE_ERROR"):
        changes = normalize_workflow_updates(payload)
        if not changes:
            raise ApiError(400, "EMPTY_UPDATES", "No fields to update")
        workflow = store.update_workflow(workflow_id, changes)
    return success(workflow)


@router.delete("/workflows/{workflow_id}")
def delete_workflow(workflow_id: str, store: ConfigStore = Depends(get_store)) -> JSONResponse:
    with translate_errors("WORKFLOW_DELETE_ERROR"):
        store.delete_workflow(workflow_id)
    return success({"deleted": workflow_id})


@router.post("/workflows/{workflow_id}/agents")
def add_workflow_agents(
    workflow_id: str, payload: Any = Body(None), store: ConfigStore = Depends(get_store)
) -> JSONResponse:
    """Append steps for agents the workflow does not use yet."""
    agent_ids = _field(payload, "agentIds")
    if not isinstance(agent_ids, list):
        raise ApiError(400, "INVALID_AGENT_IDS", "agentIds must be provided as an array")
    with translate_errors("WORKFLOW_AGENT_ADD_ERROR"):
        workflow = store.add_workflow_steps(workflow_id, sanitize_array(agent_ids))
    return success(workflow)


@router.put("/workflows/{workflow_id}/main-agent")
def set_main_agent(
    workflow_id: str, payload: Any = Body(None), store: ConfigStore = Depends(get_store)
) -> JSONResponse:
    """Choose which of the workflow's agents coordinates it."""
    main_agent_id = sanitize_string(_field(payload, "mainAgentId"))
    if main_agent_id is None:
        raise ApiError(400, "MISSING_MAIN_AGENT_ID", "mainAgentId must be provided")
    with translate_errors("WORKFLOW_MAIN_AGENT_ERROR"):
        workflow = store.update_workflow(workflow_id, {"mainAgentId": main_agent_id})
    return success(workflow)

"""API routes for the configuration root as a whole."""

from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from agentpack.settings import Settings
from agentpack.storage import ConfigStore
from agentpack_server.dependencies import get_settings, get_store
from agentpack_server.envelope import ApiError, success, translate_errors

router = APIRouter(tags=["config"])


@router.get("/config")
def get_config(store: ConfigStore = Depends(get_store)) -> JSONResponse:
    """Agents, workflows and app settings in one response, with counts."""
    with translate_errors("CONFIG_LOAD_ERROR"):
        agents = store.list_agents()
        workflows = store.list_workflows()
        app_config = store.get_app_config()
        tools_config = store.get_tools_config()

    return success({
        "agents": agents,
        "workflows": workflows,
        "appConfig": app_config,
        "toolsConfig": tools_config,
        "stats": {
            "totalAgents": len(agents),
            "totalWorkflows": len(workflows),
        },
    })


@router.post("/config")
def run_config_action(
    payload: Any = Body(None),
    store: ConfigStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    """Run a maintenance action; only ``initialize`` is supported."""
    action = payload.get("action") if isinstance(payload, dict) else None
    if action != "initialize":
        raise ApiError(400, "INVALID_ACTION", f"Unsupported action: {action}")
    with translate_errors("CONFIG_ACTION_ERROR"):
        store.initialize(seed_defaults=settings.seed_defaults)
    return success({"message": "Configuration initialized"})

"""API routes for MCP server definitions."""

from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from agentpack.storage import ConfigStore
from agentpack.validation import normalize_mcp_updates, validate_mcp_server
from agentpack_server.dependencies import get_store
from agentpack_server.envelope import ApiError, success, translate_errors

router = APIRouter(tags=["mcp"])


@router.get("/mcp-servers")
def list_mcp_servers(store: ConfigStore = Depends(get_store)) -> JSONResponse:
    """List all MCP server definitions."""
    with translate_errors("MCP_FETCH_ERROR"):
        servers = store.list_mcp_servers()
    return success(servers, meta={"total": len(servers)})


@router.post("/mcp-servers")
def create_mcp_server(
    payload: Any = Body(None), store: ConfigStore = Depends(get_store)
) -> JSONResponse:
    """Validate and register a new MCP server definition."""
    with translate_errors("CREATE_MCP_ERROR", invalid_code="INVALID_MCP_PAYLOAD"):
        server = store.create_mcp_server(validate_mcp_server(payload))
    return success(server, status_code=201)


@router.get("/mcp-servers/{server_id}")
def get_mcp_server(server_id: str, store: ConfigStore = Depends(get_store)) -> JSONResponse:
    with translate_errors("MCP_FETCH_ERROR"):
        server = store.get_mcp_server(server_id)
    return success(server)


@router.put("/mcp-servers/{server_id}")
def update_mcp_server(
    server_id: str, payload: Any = Body(None), store: ConfigStore = Depends(get_store)
) -> JSONResponse:
    """Update the supplied fields of an MCP server definition."""
    with translate_errors("UPDATE_MCP_ERROR", invalid_code="INVALID_MCP_PAYLOAD"):
        changes = normalize_mcp_updates(payload)
        if not changes:
            raise ApiError(400, "EMPTY_UPDATES", "No fields to update")
        server = store.update_mcp_server(server_id, changes)
    return success(server)


@router.delete("/mcp-servers/{server_id}")
def delete_mcp_server(server_id: str, store: ConfigStore = Depends(get_store)) -> JSONResponse:
    with translate_errors("DELETE_MCP_ERROR"):
        store.delete_mcp_server(server_id)
    return success({"deleted": server_id})

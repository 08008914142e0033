"""Validation and sanitization of untrusted configuration payloads.

Every function here is pure. Payloads arrive as decoded JSON with camelCase
keys (snake_case keys are accepted too) and leave as typed ``*Input`` models.

The pipeline is strict about required fields and lenient about everything
else: malformed optional data is normalized or dropped, never reported.
Sanitizing an already sanitized payload returns it unchanged.
"""

import json
import math
import os
import re
from typing import Any

from pydantic.alias_generators import to_camel

from agentpack.errors import ValidationError
from agentpack.models import (
    AgentInput,
    AgentRole,
    MCPServerInput,
    MCPServerStatus,
    ProviderCatalog,
    WorkflowInput,
    WorkflowStatus,
)


# --- Field sanitizers ---


def sanitize_string(value: Any) -> str | None:
    """Trim a string; non-strings and blank strings become ``None``."""
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def sanitize_array(value: Any) -> list[str]:
    """Keep the non-blank string items of a list, trimmed."""
    if not isinstance(value, list):
        return []
    items = []
    for item in value:
        item = sanitize_string(item)
        if item is not None:
            items.append(item)
    return items


def _stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (bool, dict, list)):
        return json.dumps(value)
    return str(value)


def sanitize_env(value: Any) -> dict[str, str]:
    """Normalize an environment mapping.

    Keys are trimmed and blank keys dropped; values are stringified but
    otherwise left as given.
    """
    if not isinstance(value, dict):
        return {}
    env = {}
    for key, raw in value.items():
        key = sanitize_string(key)
        if key is not None:
            env[key] = _stringify(raw)
    return env


def _sanitize_objects(value: Any, key: str, extra: tuple[str, ...]) -> list[dict]:
    # objects without a usable ``key`` are filtered out, not rejected
    if not isinstance(value, list):
        return []
    objects = []
    for item in value:
        if not isinstance(item, dict):
            continue
        required = sanitize_string(_get(item, key))
        if required is None:
            continue
        obj = {to_camel(key): required}
        for name in extra:
            optional = sanitize_string(_get(item, name))
            if optional is not None:
                obj[to_camel(name)] = optional
        objects.append(obj)
    return objects


def sanitize_tools(value: Any) -> list[dict]:
    """Keep tool descriptors that have a non-blank ``name``."""
    return _sanitize_objects(value, "name", ("description",))


def sanitize_steps(value: Any) -> list[dict]:
    """Keep workflow steps that have a non-blank ``agentId``."""
    return _sanitize_objects(value, "agent_id", ("name", "description"))


def sanitize_choice(value: Any, choices: type) -> str | None:
    """Return the enum value if ``value`` is one of ``choices``, else ``None``."""
    if isinstance(value, choices):
        return value.value
    if not isinstance(value, str):
        return None
    allowed = {choice.value for choice in choices}
    return value if value in allowed else None


def sanitize_timeout(value: Any) -> float | None:
    """Accept a finite positive number of seconds."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        seconds = float(value)
    except OverflowError:
        return None
    if not math.isfinite(seconds) or seconds <= 0:
        return None
    return seconds


def sanitize_paths(value: Any) -> list[str]:
    """Like ``sanitize_array``, but a single string is a one-item list."""
    if isinstance(value, str):
        value = [value]
    return sanitize_array(value)


_WINDOWS_DRIVE = re.compile(r"^[a-zA-Z]:\\")


def is_absolute_knowledge_path(path: str) -> bool:
    """POSIX absolute paths and Windows drive paths (``C:\\...``) qualify."""
    return os.path.isabs(path) or bool(_WINDOWS_DRIVE.match(path))


_SANITIZERS = {
    "string": sanitize_string,
    "array": sanitize_array,
    "paths": sanitize_paths,
    "mapping": sanitize_env,
    "tools": sanitize_tools,
    "steps": sanitize_steps,
    "timeout": sanitize_timeout,
}

# shapes a supplied update value must have to be applied
_UPDATE_SHAPES = {
    "string": (str,),
    "array": (list,),
    "paths": (list, str),
    "mapping": (dict,),
    "tools": (list,),
    "steps": (list,),
}


# --- Field tables per entity kind ---


MCP_FIELDS = {
    "id": "string",
    "name": "string",
    "description": "string",
    "command": "string",
    "args": "array",
    "env": "mapping",
    "tags": "array",
    "providers": "array",
    "supported_models": "array",
    "status": MCPServerStatus,
    "timeout": "timeout",
    "tools": "tools",
}

AGENT_FIELDS = {
    "id": "string",
    "name": "string",
    "description": "string",
    "role": AgentRole,
    "system_prompt": "string",
    "llm_provider": "string",
    "llm_model": "string",
    "enabled_tools": "array",
    "knowledge_base_paths": "paths",
    "mcp_server_ids": "array",
    "tags": "array",
}

WORKFLOW_FIELDS = {
    "id": "string",
    "name": "string",
    "description": "string",
    "status": WorkflowStatus,
    "steps": "steps",
    "main_agent_id": "string",
    "tags": "array",
}


def _get(payload: dict, field: str) -> Any:
    camel = to_camel(field)
    if camel in payload:
        return payload[camel]
    return payload.get(field)


def _has(payload: dict, field: str) -> bool:
    return to_camel(field) in payload or field in payload


def _sanitize(kind, value: Any) -> Any:
    if isinstance(kind, type):
        return sanitize_choice(value, kind)
    return _SANITIZERS[kind](value)


def _require_object(payload: Any) -> dict:
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def _sanitize_fields(payload: dict, fields: dict) -> dict:
    data = {}
    for field, kind in fields.items():
        value = _sanitize(kind, _get(payload, field))
        if value is not None:
            data[field] = value
    return data


def _require(data: dict, field: str, message: str) -> None:
    if not data.get(field):
        raise ValidationError(message, field=to_camel(field))


def _llm_selection(payload: dict) -> dict:
    # the older agent shape nests the provider under ``llmConfig``
    nested = _get(payload, "llm_config")
    if _has(payload, "llm_provider") or _has(payload, "llm_model"):
        return payload
    if isinstance(nested, dict):
        selection = {"llmProvider": nested.get("provider"), "llmModel": nested.get("model")}
        return {key: value for key, value in selection.items() if value is not None}
    return payload


def to_wire_keys(payload: dict) -> dict:
    """Rename snake_case keys to their camelCase wire names."""
    return {
        (to_camel(key) if isinstance(key, str) and "_" in key else key): value
        for key, value in payload.items()
    }


# --- Full payload validation ---


def validate_mcp_server(payload: Any) -> MCPServerInput:
    """Validate a create payload for an MCP server definition."""
    payload = _require_object(payload)
    data = _sanitize_fields(payload, MCP_FIELDS)
    _require(data, "name", "MCP server name is required")
    _require(data, "command", "MCP server command is required")
    return MCPServerInput(**data)


def validate_agent(payload: Any, catalog: ProviderCatalog) -> AgentInput:
    """Validate a create payload for an agent.

    A missing provider falls back to the catalog's first provider and a
    missing model to the provider's default model. An explicit pair the
    catalog does not list is rejected.
    """
    payload = _require_object(payload)
    data = _sanitize_fields(payload, AGENT_FIELDS)
    _require(data, "name", "Agent name is required")

    invalid = [p for p in data.get("knowledge_base_paths", []) if not is_absolute_knowledge_path(p)]
    if invalid:
        raise ValidationError(
            "Knowledge base paths must be absolute",
            field="knowledgeBasePaths",
            code="INVALID_KNOWLEDGE_PATH",
            details=invalid,
        )

    selection = _llm_selection(payload)
    provider = sanitize_string(_get(selection, "llm_provider")) or catalog.default_provider
    model = sanitize_string(_get(selection, "llm_model"))
    if provider is not None and model is None:
        model = catalog.default_model(provider)
    if provider is None or model is None or not catalog.supports(provider, model):
        raise ValidationError(
            f"Unsupported LLM provider/model combination: {provider}/{model}",
            field="llmModel",
        )
    data["llm_provider"] = provider
    data["llm_model"] = model
    return AgentInput(**data)


def validate_workflow(payload: Any) -> WorkflowInput:
    """Validate a create payload for a workflow.

    Agent ids are only checked for shape here; whether they exist is
    checked by the store when the workflow is persisted.
    """
    payload = _require_object(payload)
    data = _sanitize_fields(payload, WORKFLOW_FIELDS)
    _require(data, "name", "Workflow name is required")

    if not _has(payload, "steps") and _has(payload, "agent_ids"):
        data["steps"] = [{"agentId": agent_id} for agent_id in sanitize_array(_get(payload, "agent_ids"))]

    workflow = WorkflowInput(**data)
    if not workflow.steps and workflow.status != WorkflowStatus.draft:
        raise ValidationError(
            "Workflow steps are required unless the workflow is a draft",
            field="steps",
        )
    if workflow.main_agent_id and workflow.main_agent_id not in workflow.agent_ids:
        raise ValidationError(
            "Main agent must be one of the workflow steps",
            field="mainAgentId",
        )
    return workflow


# --- Partial updates ---


def _normalize_updates(payload: Any, fields: dict) -> dict:
    """Keep only the supplied fields whose values have a usable shape.

    Returns wire-named changes. ``None`` means the field should be cleared:
    a JSON ``null`` or a blank string clears an optional field.
    """
    payload = _require_object(payload)
    changes = {}
    for field, kind in fields.items():
        if field == "id" or not _has(payload, field):
            continue
        value = _get(payload, field)
        if isinstance(kind, type):
            value = sanitize_choice(value, kind)
            if value is None:
                continue
        elif value is None:
            pass
        elif kind == "timeout":
            value = sanitize_timeout(value)
            if value is None:
                continue
        elif isinstance(value, _UPDATE_SHAPES[kind]):
            value = _sanitize(kind, value)
        else:
            continue
        changes[to_camel(field)] = value
    return changes


def normalize_mcp_updates(payload: Any) -> dict:
    """Normalize a partial update for an MCP server definition."""
    return _normalize_updates(payload, MCP_FIELDS)


def normalize_agent_updates(payload: Any) -> dict:
    """Normalize a partial update for an agent."""
    payload = _require_object(payload)
    return _normalize_updates({**payload, **_llm_selection(payload)}, AGENT_FIELDS)


def normalize_workflow_updates(payload: Any) -> dict:
    """Normalize a partial update for a workflow."""
    return _normalize_updates(payload, WORKFLOW_FIELDS)


def merge_payload(current: dict, changes: dict) -> dict:
    """Apply wire-named ``changes`` onto ``current``; ``None`` removes a key."""
    merged = dict(current)
    for key, value in changes.items():
        if value is None:
            merged.pop(key, None)
        else:
            merged[key] = value
    return merged

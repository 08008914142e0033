"""Durable storage for configuration entities."""

from agentpack.storage.collection import JsonCollection, read_json, write_json_atomic
from agentpack.storage.store import ConfigStore

__all__ = [
    "ConfigStore",
    "JsonCollection",
    "read_json",
    "write_json_atomic",
]

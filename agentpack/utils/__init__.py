"""Utility functions for agentpack."""

from agentpack.utils.identifiers import (
    generate_id,
    generate_request_id,
    utc_timestamp,
)

__all__ = [
    "generate_id",
    "generate_request_id",
    "utc_timestamp",
]

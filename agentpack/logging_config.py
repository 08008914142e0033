"""Logging setup for the agentpack service.

Text output is meant for local runs; ``json`` emits one JSON object per
line through python-json-logger for log shippers.
"""

import logging
import sys

from pythonjsonlogger.json import JsonFormatter

TEXT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
JSON_FIELDS = "%(asctime)s %(levelname)s %(name)s %(message)s"

LOGGER_NAMES = ("agentpack", "agentpack_server")


def setup_logging(level: str = "INFO", fmt: str = "text") -> None:
    """Send the ``agentpack`` and ``agentpack_server`` loggers to stderr."""
    handler = logging.StreamHandler(sys.stderr)
    if fmt == "json":
        handler.setFormatter(JsonFormatter(JSON_FIELDS, rename_fields={"levelname": "level"}))
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    for name in LOGGER_NAMES:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        logger.handlers = [handler]
        logger.propagate = False

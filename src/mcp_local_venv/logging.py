"""Structured logging for environment operations."""
import json
import logging
import sys
from typing import Any, List

import structlog
from structlog.types import EventDict, Processor

# Root of every logger handed out by get_logger(__name__) in this package.
APP_LOGGER = "mcp_local_venv"


def render_json_line(_: Any, __: str, event_dict: EventDict) -> str:
    """Render an event as one compact JSON line.

    Subprocess commands, directories and return codes end up under ``data``.
    """
    line = {
        "ts": event_dict.pop("timestamp", None),
        "lvl": event_dict.pop("level", "???"),
        "logger": event_dict.pop("logger", None),
        "msg": event_dict.pop("event", ""),
    }
    if event_dict:
        line["data"] = event_dict
    return json.dumps(line, separators=(",", ":"), default=str)


def build_processors(json_output: bool) -> List[Processor]:
    """Processor chain ending in a JSON line or a console renderer."""
    processors: List[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
    ]
    if json_output:
        processors.append(render_json_line)
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))
    return processors


def configure_logging(level: str = "INFO", json_output: bool = False) -> None:
    """Send this package's logs to stderr.

    The MCP server owns stdout for JSON-RPC, so it asks for JSON lines on
    stderr; library callers get console output.
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))

    app_logger = logging.getLogger(APP_LOGGER)
    app_logger.handlers = [handler]
    app_logger.setLevel(level)
    app_logger.propagate = False

    structlog.configure(
        processors=build_processors(json_output),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)

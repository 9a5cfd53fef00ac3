"""
keygate.observability.logging

Structured logging configuration shared by the proxy server and the admin CLI.

Responsibilities:
- Configure `structlog`: JSON lines for the server, console rendering for the CLI.
- Provide a small wrapper for obtaining bound loggers.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

import structlog


def configure_logging(
    *,
    service_name: str,
    level: str,
    stream: TextIO | None = None,
    json_logs: bool = True,
) -> None:
    """
    The server logs JSON to stdout; keygate-admin keeps stdout for command
    output and sends human-readable logs to stderr.
    """

    logging.basicConfig(
        format="%(message)s",
        stream=stream or sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
        force=True,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            _add_service_name(service_name),
            structlog.processors.dict_tracebacks if json_logs else _passthrough,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def _passthrough(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    return event_dict


def _add_service_name(service_name: str):
    # Lets proxy and admin logs share one sink and still be told apart.
    def processor(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event_dict.setdefault("service", service_name)
        return event_dict

    return processor


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


# --- Module Notes -----------------------------------------------------------
# Loggers never receive credentials: callers are logged by id, providers by name
# and upstream URL.

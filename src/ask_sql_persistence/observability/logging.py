"""
ask_sql_persistence.observability.logging

Structured logging configuration for skills using the adapter.

Responsibilities:
- Configure `structlog` for JSON logs (CloudWatch picks these up line by line).
- Provide bound loggers tagged with the package component.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog


def configure_logging(*, service_name: str, level: str) -> None:
    """
    Structured JSON logs on stdout.

    Optional: the adapter logs through `get_logger` either way, but without this
    call structlog falls back to its default console renderer.
    """

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            _add_service_name(service_name),
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def _add_service_name(service_name: str):
    def processor(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event_dict.setdefault("service", service_name)
        return event_dict

    return processor


# Bound on every logger this package creates.
COMPONENT = "persistence"


def get_logger(name: str, **initial_values: Any) -> structlog.stdlib.BoundLogger:
    initial_values.setdefault("component", COMPONENT)
    return structlog.get_logger(name, **initial_values)


# --- Module Notes -----------------------------------------------------------
# Lambda-hosted skills usually call configure_logging once in the handler module,
# next to SkillBuilder construction.

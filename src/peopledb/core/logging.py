"""
Structured logging for peopledb.

Repositories log through ``get_logger(__name__)`` and emit short
snake_case events with key/value context::

    logger.debug("entity_saved", entity_type="Person", entity_id=42)

Rendering:
    - JSON (ECS field names: ``@timestamp``, ``log.level``, ``service.name``)
      when stdout is not a TTY or ``json_format=True``; ``log.logger`` carries the module name
    - coloured key/value console output otherwise

A :class:`~peopledb.core.errors.PeopleDBError` passed as ``error=`` is
expanded into its structured ``to_dict()`` form.

Examples:
    >>> from peopledb.core.logging import configure_logging, get_logger
    >>> configure_logging(level="DEBUG", service="peopledb-cli")
    >>> get_logger(__name__).info("schema_created", tables=2)

Tags:
    logging, structlog, observability, peopledb
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from peopledb.core.errors import PeopleDBError

_ECS_RENAMES = {"timestamp": "@timestamp", "level": "log.level", "logger_name": "log.logger"}


def _service_stamp(service: str) -> Processor:
    def stamp(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service.name", service)
        return event_dict

    return stamp


def _expand_domain_errors(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    error = event_dict.get("error")
    if isinstance(error, PeopleDBError):
        event_dict["error"] = error.to_dict()
    return event_dict


def _ecs_field_names(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    for old, new in _ECS_RENAMES.items():
        if old in event_dict:
            event_dict[new] = event_dict.pop(old)
    return event_dict


def configure_logging(
    level: str = "INFO",
    json_format: bool | None = None,
    service: str = "peopledb",
    add_timestamp: bool = True,
    cache_loggers: bool = True,
) -> None:
    """Configure structlog (and the stdlib root logger) for the process.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Force JSON (True) or console (False); None picks JSON off a TTY
        service: Value of ``service.name`` on every event
        add_timestamp: Stamp events with an ISO-8601 UTC timestamp
        cache_loggers: Cache bound loggers on first use.  Short-lived
            processes that swap ``sys.stdout`` (CLI runners) pass False.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level!r}")

    if json_format is None:
        json_format = not sys.stdout.isatty()

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        _service_stamp(service),
        _expand_domain_errors,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
    ]
    if add_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso", utc=True))

    if json_format:
        processors += [_ecs_field_names, structlog.processors.JSONRenderer(default=str)]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=cache_loggers,
    )

    # stdlib loggers (SQLAlchemy echo) share the threshold
    logging.basicConfig(format="%(name)s %(levelname)s %(message)s", stream=sys.stderr, level=numeric_level)
    logging.getLogger("peopledb").setLevel(numeric_level)


def get_logger(name: str | None = None) -> Any:
    """Structured logger; ``name`` is bound as ``logger_name`` (``log.logger`` in JSON)."""
    if name is None:
        return structlog.get_logger()
    return structlog.get_logger(logger_name=name)


class LogContext:
    """Bind key/values to every event logged inside the ``with`` block.

    Example:
        with LogContext(repository="PeopleRepository"):
            logger.info("save_started")
    """

    def __init__(self, **context: Any):
        self._context = context
        self._tokens: dict[str, Any] = {}

    def __enter__(self) -> LogContext:
        self._tokens = structlog.contextvars.bind_contextvars(**self._context)
        return self

    def __exit__(self, *exc_info: Any) -> None:
        structlog.contextvars.reset_contextvars(**self._tokens)


__all__ = [
    "configure_logging",
    "get_logger",
    "LogContext",
]

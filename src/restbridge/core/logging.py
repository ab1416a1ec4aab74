"""
Structured logging for restbridge.

Everything the server logs goes through structlog.  The dispatch stack
(uvicorn, starlette, fastapi) logs through the standard library instead, so
the bootstrap installs a bridge handler on the root logger that forwards each
stdlib record into the same structlog sink.

Configuration Flow:
    ::

        configure_logging(level="INFO", json_format=True, service="restbridge")

            ↓
        structlog processor chain:
          1. TimeStamper(iso)
          2. add_log_level
          3. add_service_metadata
          4. elasticsearch_compatible (JSON only)
          5. JSONRenderer / ConsoleRenderer

        install_logging_bridge("INFO")

            ↓
        root logger handlers cleared, one StructlogBridgeHandler installed:
          logging.getLogger("uvicorn.error").info("...")
            → structlog.get_logger(logger_name="uvicorn.error").log(INFO, "...")

Examples:
    >>> from restbridge.core.logging import configure_logging, get_logger
    >>> configure_logging(level="INFO", json_format=True)
    >>> logger = get_logger(__name__)
    >>> logger.info("bootstrap_started", namespace="restbridge.rest")

Guardrails:
    - ``install_logging_bridge`` is idempotent: existing root handlers are
      removed before the bridge handler is added, so repeated calls always
      leave exactly one bridge handler.
    - The bridge writes through structlog's own logger factory, never back
      into stdlib logging, so records cannot loop.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

# Store service name for metadata
_SERVICE_NAME = "restbridge"


def _add_service_metadata(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add service-level metadata to all logs."""
    event_dict.setdefault("service.name", _SERVICE_NAME)
    return event_dict


def _elasticsearch_compatible(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Make field names Elasticsearch/ECS compatible."""
    if "timestamp" in event_dict:
        event_dict["@timestamp"] = event_dict.pop("timestamp")

    if "level" in event_dict:
        event_dict["log.level"] = event_dict.pop("level")

    if "logger_name" in event_dict:
        event_dict["log.logger"] = event_dict.pop("logger_name")

    return event_dict


def _resolve_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def configure_logging(
    level: str = "INFO",
    json_format: bool | None = None,
    service: str = "restbridge",
    add_timestamp: bool = True,
) -> None:
    """Configure structured logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: True for JSON, False for console, None for auto (JSON if not tty)
        service: Service name to include in logs
        add_timestamp: Include ISO timestamp in logs
    """
    global _SERVICE_NAME
    _SERVICE_NAME = service

    if json_format is None:
        json_format = not sys.stdout.isatty()

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        _add_service_metadata,
    ]

    if add_timestamp:
        shared_processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if json_format:
        shared_processors.append(structlog.processors.format_exc_info)
        shared_processors.append(_elasticsearch_compatible)
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.make_filtering_bound_logger(_resolve_level(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger.

    The logger is lazily bound, so module-level loggers pick up the
    configuration applied later by :func:`configure_logging`.
    """
    if name:
        return structlog.get_logger(logger_name=name)
    return structlog.get_logger()


# ── stdlib bridge ────────────────────────────────────────────────────────


class StructlogBridgeHandler(logging.Handler):
    """Forward standard-library log records into structlog."""

    _LEVELS = (logging.CRITICAL, logging.ERROR, logging.WARNING, logging.INFO, logging.DEBUG)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            extra: dict[str, Any] = {}
            if record.exc_info:
                extra["exc_info"] = record.exc_info
            # structlog only knows the standard levels; round custom ones down
            level = next((lvl for lvl in self._LEVELS if record.levelno >= lvl), logging.DEBUG)
            get_logger(record.name).log(level, record.getMessage(), **extra)
        except Exception:  # noqa: BLE001
            self.handleError(record)


def install_logging_bridge(level: str | int = "INFO") -> StructlogBridgeHandler:
    """Route every stdlib record reaching the root logger into structlog.

    Existing root handlers are removed first, which makes the call idempotent.
    Returns the installed handler.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = StructlogBridgeHandler()
    root.addHandler(handler)
    root.setLevel(_resolve_level(level))
    return handler


def bridge_handlers() -> list[StructlogBridgeHandler]:
    """Bridge handlers currently attached to the root logger."""
    return [h for h in logging.getLogger().handlers if isinstance(h, StructlogBridgeHandler)]


__all__ = [
    "configure_logging",
    "get_logger",
    "install_logging_bridge",
    "bridge_handlers",
    "StructlogBridgeHandler",
]

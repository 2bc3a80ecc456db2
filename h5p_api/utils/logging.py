# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Structured logging configuration using structlog.

Modules log through the standard library (logging.getLogger(__name__))
with %-style arguments. Those records are routed through a structlog
ProcessorFormatter so they carry the request context bound by the API
layer (request_id, path, principal_id) and are rendered the same way as
native structlog events: JSON outside development, colored console
output in development.

Upload payloads and credentials never reach the output. Any event key
listed in REDACTED_KEYS is replaced before rendering.

Example:
    >>> import logging
    >>> from h5p_api.utils.logging import setup_logging, bind_context
    >>> from h5p_api.core.config import get_settings
    >>> setup_logging(get_settings())
    >>> bind_context(request_id="3f2a", principal_id="user-7")
    >>> logging.getLogger("h5p_api.services").info("Ingested content: id=%s", 42)
"""

import logging
import sys
from typing import TYPE_CHECKING

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

if TYPE_CHECKING:
    from h5p_api.core.config.settings import Settings

SERVICE_NAME = "h5p-contentbank-api"

# Event keys whose values are never rendered
REDACTED_KEYS = frozenset({"payload_base64", "data", "api_key", "x-api-key"})
REDACTED = "[redacted]"

HANDLER_NAME = "h5p_api"


def redact_sensitive(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
    """Replace upload payloads and credentials in an event."""
    for key in event_dict.keys() & REDACTED_KEYS:
        event_dict[key] = REDACTED
    return event_dict


def _service_info(environment: str) -> Processor:
    def add_service_info(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service", SERVICE_NAME)
        event_dict.setdefault("environment", environment)
        return event_dict

    return add_service_info


def _shared_processors(settings: "Settings") -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _service_info(settings.environment),
        redact_sensitive,
    ]


def build_formatter(settings: "Settings") -> structlog.stdlib.ProcessorFormatter:
    """Build the formatter used for every record on the output handler.

    Args:
        settings: Application settings; the environment and debug flag
            choose between console and JSON rendering.

    Returns:
        Formatter rendering both standard library and structlog records.
    """
    renderer: Processor
    if settings.is_development or settings.debug:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    else:
        renderer = structlog.processors.JSONRenderer()

    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_shared_processors(settings),
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ],
    )


def setup_logging(settings: "Settings") -> None:
    """Configure structured logging for the application.

    Safe to call more than once; the output handler is replaced rather
    than duplicated.

    Args:
        settings: Application settings containing log_level and debug flag.
    """
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_shared_processors(settings),
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(build_formatter(settings))

    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == HANDLER_NAME]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(log_level)

    # Third-party loggers stay quiet unless something is wrong
    for logger_name in [
        "uvicorn",
        "uvicorn.access",
        "uvicorn.error",
        "httpx",
        "httpcore",
        "sqlalchemy",
        "asyncio",
    ]:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    logging.getLogger("h5p_api").setLevel(log_level)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger for the given module name.

    Args:
        name: Usually __name__ of the calling module.

    Returns:
        A bound structlog logger instance.
    """
    return structlog.get_logger(name)


def bind_context(**kwargs: object) -> None:
    """Bind request-scoped values (request_id, path, principal_id) to the log context.

    Args:
        **kwargs: Key-value pairs to bind to the logging context.
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables.

    Called by the request middleware before anything is bound.
    """
    structlog.contextvars.clear_contextvars()

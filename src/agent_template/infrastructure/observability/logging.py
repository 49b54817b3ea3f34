"""
Structured logging configuration.

Every module logs through ``get_logger(__name__)``. Per-request values such
as the request ID are bound with ``structlog.contextvars`` by the HTTP
middleware and merged into each entry.
"""
from typing import Any, Optional

import structlog

from agent_template.config.settings import Settings, get_settings


def _service_info(app_name: str, environment: str):
    def processor(logger: Any, method_name: str, event_dict: dict) -> dict:
        event_dict.setdefault("service", app_name)
        event_dict.setdefault("environment", environment)
        return event_dict

    return processor


def _renderer(settings: Settings):
    if settings.log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=not settings.is_production,
        pad_event=25,
        exception_formatter=structlog.dev.plain_traceback,
    )


def configure_logging(settings: Optional[Settings] = None) -> None:
    """
    Configure structlog for the application.

    Entries below ``settings.log_level`` are dropped. ``log_format`` picks
    JSON lines or the colored development console.
    """
    settings = settings or get_settings()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            _service_info(settings.app_name, settings.environment),
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            _renderer(settings),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(settings.log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None) -> structlog.BoundLogger:
    """
    Usage:
        >>> logger = get_logger(__name__)
        >>> logger.info("Agent created", agent_id="123")
    """
    return structlog.get_logger(name)

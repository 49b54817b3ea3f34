"""Observability infrastructure: structured logging."""

from agent_template.infrastructure.observability.logging import (
    configure_logging,
    get_logger,
)

__all__ = [
    "configure_logging",
    "get_logger",
]

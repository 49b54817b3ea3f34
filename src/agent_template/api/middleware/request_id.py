"""
Request ID tracking middleware.

Every request gets a UUID4 identifier. It is stored on ``request.state``,
bound into the structlog context for the duration of the request and
echoed in the X-Request-ID response header.
"""
import uuid
from typing import Optional

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from agent_template.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def is_valid_uuid(value: str) -> bool:
    """True only for the canonical string form of a UUID4."""
    try:
        parsed = uuid.UUID(value, version=4)
    except (ValueError, AttributeError, TypeError):
        return False
    return str(parsed) == value


def get_request_id() -> Optional[str]:
    """Request ID bound for the request currently being handled, if any."""
    return structlog.contextvars.get_contextvars().get("request_id")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Accept a valid incoming X-Request-ID or generate a new one."""

    async def dispatch(self, request: Request, call_next) -> Response:
        incoming = request.headers.get(REQUEST_ID_HEADER)

        if incoming and is_valid_uuid(incoming):
            request_id = incoming
        else:
            if incoming:
                logger.warning(
                    "Invalid X-Request-ID received, generating new one",
                    invalid_id=incoming,
                )
            request_id = str(uuid.uuid4())

        request.state.request_id = request_id
        with structlog.contextvars.bound_contextvars(request_id=request_id):
            response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response

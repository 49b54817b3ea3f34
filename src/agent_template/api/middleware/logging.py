"""Access logging for the agents API."""
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from agent_template.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

# Polled by load balancers; logging them only adds noise
HEALTH_CHECK_PATHS = frozenset({"/health", "/ping", "/agents/health/ping"})


def _log_method(log, status_code: int):
    if status_code >= 500:
        return log.error
    if status_code >= 400:
        return log.warning
    return log.info


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Log one entry per request with its status and duration.

    Adds ``X-Process-Time`` (seconds) and ``X-Process-Time-Ms`` headers.
    Streaming responses are timed until their headers are sent.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.url.path in HEALTH_CHECK_PATHS:
            return await call_next(request)

        log = logger.bind(
            method=request.method,
            path=request.url.path,
            client_ip=request.client.host if request.client else None,
        )
        if request.query_params:
            log = log.bind(query_params=str(request.query_params))

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            log.error(
                "Request failed with exception",
                error=str(e),
                error_type=type(e).__name__,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            raise

        elapsed = time.perf_counter() - started
        duration_ms = round(elapsed * 1000, 2)
        _log_method(log, response.status_code)(
            "Request completed",
            status_code=response.status_code,
            duration_ms=duration_ms,
        )

        response.headers["X-Process-Time"] = f"{elapsed:.6f}"
        response.headers["X-Process-Time-Ms"] = str(duration_ms)
        return response

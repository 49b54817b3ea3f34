"""FastAPI middleware components."""

from agent_template.api.middleware.request_id import (
    REQUEST_ID_HEADER,
    RequestIDMiddleware,
    get_request_id,
    is_valid_uuid,
)

__all__ = [
    "REQUEST_ID_HEADER",
    "RequestIDMiddleware",
    "get_request_id",
    "is_valid_uuid",
]

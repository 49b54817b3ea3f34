"""Error response schemas and error codes."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class ErrorCode(str, Enum):
    """Machine-readable codes carried by every error response."""

    # 400
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_AGENT_CONFIG = "INVALID_AGENT_CONFIG"
    TOOL_EXECUTION_ERROR = "TOOL_EXECUTION_ERROR"

    # 404
    NOT_FOUND = "NOT_FOUND"
    AGENT_NOT_FOUND = "AGENT_NOT_FOUND"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"

    # 5xx
    INTERNAL_ERROR = "INTERNAL_ERROR"
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
    TIMEOUT = "TIMEOUT"


class FieldError(BaseModel):
    """One failing field of a rejected request body or query."""

    field: str = Field(
        ...,
        description="Dotted location of the field",
        examples=["body.name", "query.take"],
    )
    message: str = Field(..., examples=["This field is required"])
    code: Optional[str] = Field(None, examples=["MISSING", "ENUM"])
    value: Optional[Any] = Field(None, description="The rejected input")


class ErrorDetail(BaseModel):
    code: ErrorCode
    message: str = Field(..., examples=['Agent with ID "abc" not found'])
    details: Optional[list[FieldError]] = Field(
        None,
        description="Field-level errors (validation failures only)",
    )
    context: Optional[dict[str, Any]] = Field(
        None,
        description="Identifiers and values relevant to the failure",
        examples=[{"agent_id": "abc"}, {"tool_name": "echo", "reason": "boom"}],
    )


class ErrorResponse(BaseModel):
    """
    Body of every non-2xx response.

    Example:
        {
            "error": {"code": "AGENT_NOT_FOUND", "message": "...", "context": {"agent_id": "abc"}},
            "request_id": "7f0c...",
            "suggested_action": "Please verify the agent ID is correct or create a new agent"
        }
    """

    error: ErrorDetail
    request_id: str
    suggested_action: Optional[str] = None

"""
Errors raised by the agent template.

Each class fixes an HTTP status and an ErrorCode; the API turns any AppError
into a JSON error body. Other exceptions are not caught by the API.

    raise AgentNotFound("3f2c...")
    raise InvalidAgentConfig("Agent name cannot be empty")
"""

from typing import Any, Optional

from agent_template.api.schemas.errors import ErrorCode


class AppError(Exception):
    """
    Base for every handled error.

    Subclasses override ``status_code``, ``error_code``, ``default_message``
    and ``default_suggested_action``. ``details`` ends up as the ``context``
    of the error response.
    """

    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR
    status_code: int = 500
    default_message: str = "An unexpected error occurred"
    default_suggested_action: Optional[str] = None

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        suggested_action: Optional[str] = None,
    ):
        self.message = message or self.default_message
        self.details = details or {}
        self.suggested_action = suggested_action or self.default_suggested_action
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"error_code": self.error_code.value, "message": self.message}
        if self.details:
            result["details"] = self.details
        if self.suggested_action:
            result["suggested_action"] = self.suggested_action
        return result


# --- 400 ---


class ValidationError(AppError):
    status_code = 400
    error_code = ErrorCode.VALIDATION_ERROR
    default_message = "Validation failed"
    default_suggested_action = "Please check your input and try again"


class InvalidAgentConfig(ValidationError):
    """Agent configuration is missing required values or holds invalid ones."""

    error_code = ErrorCode.INVALID_AGENT_CONFIG
    default_suggested_action = (
        "Please provide a name, an agent type and an LLM model, "
        "and check numeric limits"
    )

    def __init__(self, reason: str, details: Optional[dict[str, Any]] = None):
        self.reason = reason
        super().__init__(
            message=f"Invalid agent configuration: {reason}",
            details={"reason": reason, **(details or {})},
        )


class ToolExecutionFailed(AppError):
    """A registered tool was missing or raised while executing."""

    status_code = 400
    error_code = ErrorCode.TOOL_EXECUTION_ERROR

    def __init__(self, tool_name: str, reason: str):
        self.tool_name = tool_name
        self.reason = reason
        super().__init__(
            message=f'Tool "{tool_name}" execution failed: {reason}',
            details={"tool_name": tool_name, "reason": reason},
        )


# --- 404 ---


class NotFound(AppError):
    status_code = 404
    error_code = ErrorCode.NOT_FOUND
    default_message = "Resource not found"
    default_suggested_action = "Please check the resource ID and try again"


class AgentNotFound(NotFound):
    error_code = ErrorCode.AGENT_NOT_FOUND
    default_suggested_action = "Please verify the agent ID is correct or create a new agent"

    def __init__(self, agent_id: str):
        self.agent_id = agent_id
        super().__init__(
            message=f'Agent with ID "{agent_id}" not found',
            details={"agent_id": agent_id},
        )


class SessionNotFound(NotFound):
    error_code = ErrorCode.SESSION_NOT_FOUND
    default_suggested_action = "The session may have expired. Start a new run to open a new session"

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(
            message=f'Session with ID "{session_id}" not found',
            details={"session_id": session_id},
        )


# --- 5xx ---


class LLMError(AppError):
    """The chat model provider failed or rejected the request."""

    status_code = 502
    error_code = ErrorCode.EXTERNAL_SERVICE_ERROR
    default_message = "Language model service error"
    default_suggested_action = "The AI service is currently unavailable. Please try again in a few moments"


class AgentTimeout(AppError):
    status_code = 504
    error_code = ErrorCode.TIMEOUT
    default_message = "Agent execution timed out"
    default_suggested_action = (
        "The agent took too long to respond. Try a simpler request "
        "or raise the agent's timeout_ms"
    )

"""Domain entities, value types and exceptions."""

from agent_template.domain.agent import Agent
from agent_template.domain.exceptions import (
    AgentNotFound,
    AgentTimeout,
    AppError,
    InvalidAgentConfig,
    LLMError,
    NotFound,
    SessionNotFound,
    ToolExecutionFailed,
    ValidationError,
)
from agent_template.domain.models import (
    AgentConfig,
    AgentExecutionResult,
    AgentType,
    LLMModelConfig,
    LLMProvider,
    Page,
    SessionStatus,
    ToolDefinition,
)
from agent_template.domain.session import Session

__all__ = [
    "Agent",
    "AgentConfig",
    "AgentExecutionResult",
    "AgentType",
    "LLMModelConfig",
    "LLMProvider",
    "Page",
    "Session",
    "SessionStatus",
    "ToolDefinition",
    "AppError",
    "ValidationError",
    "InvalidAgentConfig",
    "ToolExecutionFailed",
    "NotFound",
    "AgentNotFound",
    "SessionNotFound",
    "LLMError",
    "AgentTimeout",
]

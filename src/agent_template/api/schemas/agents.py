"""Request and response schemas for the agents API."""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

from agent_template.domain.models import AgentType, LLMProvider


class CreateAgentRequest(BaseModel):
    """Request body for creating an agent."""

    model_config = {"str_strip_whitespace": True}

    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Unique agent name",
        examples=["support-bot"],
    )
    description: Optional[str] = Field(
        None,
        description="What the agent is for",
        examples=["Answers questions about billing"],
    )
    type: AgentType = Field(
        ...,
        description="Agent kind",
        examples=["general", "specialized", "multi-agent"],
    )
    llm_provider: LLMProvider = Field(
        ...,
        description="Chat model provider",
        examples=["openai", "anthropic", "azure"],
    )
    llm_model: str = Field(
        ...,
        min_length=1,
        description="Provider model identifier",
        examples=["gpt-4", "claude-3-opus-20240229"],
    )
    temperature: Optional[float] = Field(
        None,
        ge=0,
        le=2,
        description="Sampling temperature",
        examples=[0.7],
    )
    max_tokens: Optional[int] = Field(
        None,
        gt=0,
        description="Maximum tokens per response",
        examples=[1024],
    )
    system_prompt: Optional[str] = Field(
        None,
        description="Prompt prepended to every run",
        examples=["You are a helpful assistant."],
    )
    max_iterations: Optional[int] = Field(
        None,
        gt=0,
        description="Cap on agent/tool loop iterations",
        examples=[10],
    )
    timeout_ms: Optional[int] = Field(
        None,
        gt=0,
        description="Run timeout in milliseconds",
        examples=[30000],
    )
    tools: list[str] = Field(
        default_factory=list,
        description="IDs of registered tools the agent may call",
        examples=[["echo"]],
    )
    enable_memory: bool = Field(
        default=False,
        description="Keep conversation history between runs of a session",
    )
    enable_streaming: bool = Field(
        default=False,
        description="Allow the streaming endpoint for this agent",
    )
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Free-form metadata",
        examples=[{"team": "billing"}],
    )


class AgentResponse(BaseModel):
    """An agent as returned by the API."""

    id: str = Field(..., description="Agent ID (UUID4)")
    name: str
    description: Optional[str] = None
    type: AgentType
    is_active: bool
    llm_provider: LLMProvider
    llm_model: str
    max_iterations: Optional[int] = None
    timeout_ms: Optional[int] = None
    system_prompt: Optional[str] = None
    tools: list[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class AgentListResponse(BaseModel):
    """A page of agents."""

    items: list[AgentResponse]
    total: int = Field(..., ge=0, description="Total number of agents")
    skip: int = Field(..., ge=0)
    take: int = Field(..., ge=1)


class RunAgentRequest(BaseModel):
    """Request body for running an agent."""

    query: str = Field(
        ...,
        min_length=1,
        max_length=10000,
        description="User message for the agent",
        examples=["What is the capital of France?"],
    )
    session_id: Optional[str] = Field(
        None,
        description="Continue an existing session instead of opening a new one",
    )


class AgentExecutionResponse(BaseModel):
    """Outcome of a run."""

    session_id: str
    success: bool
    output: Optional[str] = None
    iterations: int = 0
    duration_ms: float = 0.0
    error: Optional[str] = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class PingResponse(BaseModel):
    status: str = "ok"

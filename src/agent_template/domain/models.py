"""
Value types shared across layers.

AgentConfig and LLMModelConfig only check types. The business rules
(non-empty name, positive timeout, ...) live on the Agent entity so the
same messages are produced for HTTP, YAML and programmatic callers.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Awaitable, Callable, NamedTuple, Sequence, Union

import yaml
from pydantic import BaseModel, Field


class AgentType(str, Enum):
    """Kinds of agents the template knows how to describe."""

    GENERAL = "general"
    SPECIALIZED = "specialized"
    MULTI_AGENT = "multi-agent"


class LLMProvider(str, Enum):
    """Supported chat model providers."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    AZURE = "azure"


class SessionStatus(str, Enum):
    """Lifecycle states of a conversation session."""

    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    FAILED = "failed"
    INTERRUPTED = "interrupted"


class LLMModelConfig(BaseModel):
    """
    Chat model selection for an agent.

    Attributes:
        provider: Which provider client to build
        model_name: Provider model identifier (e.g., "gpt-4", "claude-3-opus")
        temperature: Sampling temperature, 0.0-2.0
        max_tokens: Maximum tokens in a response
        top_p: Nucleus sampling cutoff, 0.0-1.0
    """

    model_config = {"protected_namespaces": ()}

    provider: LLMProvider = LLMProvider.OPENAI
    model_name: str = ""
    temperature: float | None = None
    max_tokens: int | None = None
    top_p: float | None = None


class AgentConfig(BaseModel):
    """
    Configuration for one agent.

    Attributes:
        type: Agent kind (general, specialized, multi-agent)
        name: Unique human readable name
        description: Free text description
        llm_config: Chat model selection
        max_iterations: Cap on agent/tool loop iterations
        timeout_ms: Run timeout in milliseconds
        system_prompt: Prompt prepended to every run
        enable_memory: Keep conversation history between runs of a session
        enable_streaming: Allow the streaming endpoint for this agent
        tools: Tool ids this agent may call
        metadata: Additional custom configuration
    """

    type: AgentType | None = None
    name: str = ""
    description: str | None = None
    llm_config: LLMModelConfig | None = None
    max_iterations: int | None = None
    timeout_ms: int | None = None
    system_prompt: str | None = None
    enable_memory: bool = False
    enable_streaming: bool = False
    tools: list[str] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)

    def merge(self, changes: dict[str, Any]) -> AgentConfig:
        """
        Merge this config with a dict of changes, changes taking precedence.

        Metadata is merged key by key; every other field is replaced.

        Args:
            changes: Field values to apply

        Returns:
            New merged configuration
        """
        data = self.model_dump()
        changes = dict(changes)

        if changes.get("metadata"):
            data["metadata"] = {**data.get("metadata", {}), **changes.pop("metadata")}

        data.update(changes)
        return AgentConfig.model_validate(data)

    @classmethod
    def from_yaml(cls, file_path: str | Path) -> AgentConfig:
        """
        Load configuration from YAML file.

        Args:
            file_path: Path to YAML configuration file

        Returns:
            Loaded configuration

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If YAML is invalid
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {file_path}")

        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {file_path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(f"Expected a mapping in {file_path}, got {type(data).__name__}")

        return cls.model_validate(data)

    def to_yaml(self, file_path: str | Path) -> None:
        """
        Save configuration to YAML file.

        Args:
            file_path: Path to save configuration
        """
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            yaml.safe_dump(
                self.model_dump(mode="json", exclude_none=True),
                f,
                default_flow_style=False,
                sort_keys=False,
            )


ToolExecuteFn = Callable[[dict[str, Any]], Union[Any, Awaitable[Any]]]


@dataclass
class ToolDefinition:
    """
    A callable an agent can use.

    ``schema`` maps parameter names to loose JSON-schema style descriptions;
    it is not enforced. ``execute`` receives the whole input mapping and may
    be sync or async.
    """

    id: str
    name: str
    description: str
    schema: dict[str, Any]
    execute: ToolExecuteFn


@dataclass
class AgentExecutionResult:
    """Outcome of a single agent run."""

    session_id: str
    success: bool
    output: str | None = None
    iterations: int = 0
    duration_ms: float = 0.0
    error: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


class Page(NamedTuple):
    """Result of an offset-paginated query."""
    items: Sequence[Any]
    total: int
    skip: int
    take: int

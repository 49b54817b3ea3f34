"""Agent entity."""

from __future__ import annotations
import uuid
from datetime import datetime, timezone
from typing import Any

from agent_template.domain.exceptions import InvalidAgentConfig
from agent_template.domain.models import AgentConfig, AgentType


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Agent:
    """
    A configured LLM-driven conversational agent.

    The configuration is validated on construction and on every update;
    a failed update leaves the previous configuration in place.

    Example:
        >>> agent = Agent(AgentConfig(
        ...     name="support",
        ...     type=AgentType.GENERAL,
        ...     llm_config=LLMModelConfig(model_name="gpt-4"),
        ... ))
        >>> agent.is_active
        True
    """

    def __init__(
        self,
        config: AgentConfig,
        id: str | None = None,
        is_active: bool = True,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ):
        self._validate_config(config)
        self._id = id or str(uuid.uuid4())
        self._config = config
        self._is_active = is_active
        self._created_at = created_at or _utcnow()
        self._updated_at = updated_at or _utcnow()

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._config.name

    @property
    def type(self) -> AgentType:
        return self._config.type

    @property
    def config(self) -> AgentConfig:
        """Copy of the current configuration."""
        return self._config.model_copy(deep=True)

    @property
    def is_active(self) -> bool:
        return self._is_active

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    def activate(self) -> None:
        if not self._is_active:
            self._is_active = True
            self._touch()

    def deactivate(self) -> None:
        if self._is_active:
            self._is_active = False
            self._touch()

    def update_config(self, **changes: Any) -> None:
        """
        Merge ``changes`` into the configuration.

        Raises:
            InvalidAgentConfig: If the merged configuration is invalid
        """
        merged = self._config.merge(changes)
        self._validate_config(merged)
        self._config = merged
        self._touch()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self._id,
            "config": self._config.model_dump(mode="json"),
            "is_active": self._is_active,
            "created_at": self._created_at.isoformat(),
            "updated_at": self._updated_at.isoformat(),
        }

    def _touch(self) -> None:
        self._updated_at = _utcnow()

    @staticmethod
    def _validate_config(config: AgentConfig) -> None:
        if not config.name or not config.name.strip():
            raise InvalidAgentConfig("Agent name cannot be empty")

        if not config.type:
            raise InvalidAgentConfig("Agent type is required")

        if config.llm_config is None or not config.llm_config.model_name:
            raise InvalidAgentConfig("LLM configuration with model name is required")

        if config.max_iterations is not None and config.max_iterations < 1:
            raise InvalidAgentConfig("Max iterations must be greater than 0")

        if config.timeout_ms is not None and config.timeout_ms <= 0:
            raise InvalidAgentConfig("Timeout must be greater than 0")

    def __repr__(self) -> str:
        return f"Agent(id={self._id!r}, name={self.name!r}, active={self._is_active})"

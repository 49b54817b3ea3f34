"""Create agent use case."""
from __future__ import annotations

from typing import Any, Mapping, Optional

from pydantic import ValidationError as PydanticValidationError

from agent_template.domain.agent import Agent
from agent_template.domain.exceptions import InvalidAgentConfig
from agent_template.domain.models import AgentConfig
from agent_template.infrastructure.observability.logging import get_logger
from agent_template.interfaces.repository import IAgentRepository
from agent_template.interfaces.tool import IToolRegistry

logger = get_logger(__name__)


def _coerce_config(config: Any) -> AgentConfig:
    if isinstance(config, AgentConfig):
        return config
    if not isinstance(config, Mapping):
        raise InvalidAgentConfig("Configuration must be an object")
    try:
        return AgentConfig.model_validate(dict(config))
    except PydanticValidationError as e:
        fields = ", ".join(".".join(str(loc) for loc in err["loc"]) for err in e.errors())
        raise InvalidAgentConfig(
            f"Invalid fields: {fields}",
            details={"errors": e.errors(include_url=False, include_context=False)},
        ) from e


def _validate(config: AgentConfig) -> None:
    if not config.name or not config.name.strip():
        raise InvalidAgentConfig("Agent name is required")

    if not config.type:
        raise InvalidAgentConfig("Agent type is required")

    if config.llm_config is None:
        raise InvalidAgentConfig("LLM configuration is required")

    if not config.llm_config.model_name:
        raise InvalidAgentConfig("LLM model name is required")


class CreateAgent:
    """
    Validate a configuration, reject duplicate names and persist a new agent.

    Example:
        >>> agent = await CreateAgent(repo).execute({
        ...     "name": "support",
        ...     "type": "general",
        ...     "llm_config": {"provider": "openai", "model_name": "gpt-4"},
        ... })
    """

    def __init__(
        self,
        agent_repository: IAgentRepository,
        tool_registry: Optional[IToolRegistry] = None,
    ):
        self._agents = agent_repository
        self._tools = tool_registry

    async def execute(self, config: AgentConfig | Mapping[str, Any]) -> Agent:
        config = _coerce_config(config)
        _validate(config)

        if await self._agents.find_by_name(config.name) is not None:
            raise InvalidAgentConfig(f'Agent with name "{config.name}" already exists')

        if self._tools is not None:
            unknown = [tool_id for tool_id in config.tools if not self._tools.tool_exists(tool_id)]
            if unknown:
                raise InvalidAgentConfig(
                    f"Unknown tools: {', '.join(unknown)}",
                    details={"unknown_tools": unknown},
                )

        agent = Agent(config)
        await self._agents.save(agent)

        logger.info(
            "Agent created",
            agent_id=agent.id,
            name=agent.name,
            type=agent.type.value,
            model=config.llm_config.model_name,
        )
        return agent

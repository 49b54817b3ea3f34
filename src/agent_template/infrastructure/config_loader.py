"""
Load agent definitions from a directory of YAML files.

Each ``*.yaml`` / ``*.yml`` file holds one AgentConfig mapping, e.g.::

    name: support-bot
    type: general
    llm_config:
      provider: openai
      model_name: gpt-4
    tools: [echo]
"""

from __future__ import annotations

from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from agent_template.application.use_cases.create_agent import CreateAgent
from agent_template.domain.agent import Agent
from agent_template.domain.exceptions import AppError
from agent_template.domain.models import AgentConfig
from agent_template.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")


class AgentConfigLoader:
    """
    Reads agent configurations from ``config_dir``.

    Files that fail to parse are logged and skipped so one bad file does not
    prevent the service from starting.
    """

    def __init__(self, config_dir: str | Path):
        self.config_dir = Path(config_dir)

    def files(self) -> list[Path]:
        if not self.config_dir.is_dir():
            return []
        return sorted(
            path for path in self.config_dir.iterdir()
            if path.is_file() and path.suffix in YAML_SUFFIXES
        )

    def load_all(self) -> list[AgentConfig]:
        configs = []
        for path in self.files():
            try:
                configs.append(AgentConfig.from_yaml(path))
            except (ValueError, PydanticValidationError) as e:
                logger.warning("Skipping invalid agent config file", path=str(path), error=str(e))
        return configs

    async def seed(self, create_agent: CreateAgent) -> list[Agent]:
        """
        Create an agent for every valid file.

        Returns:
            The agents that were created
        """
        if not self.config_dir.is_dir():
            logger.warning("Agent config directory not found", config_dir=str(self.config_dir))
            return []

        created = []
        for config in self.load_all():
            try:
                created.append(await create_agent.execute(config))
            except AppError as e:
                logger.warning("Skipping agent config", name=config.name, error=e.message)

        logger.info("Agents seeded from config", config_dir=str(self.config_dir), count=len(created))
        return created

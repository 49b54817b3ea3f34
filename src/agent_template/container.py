"""
Application container.

Builds every repository, service and use case once and hands them to the
API layer. Tests build their own container with an overridden Settings
(or swapped-in fakes) and pass it to ``create_app``.
"""

from __future__ import annotations

from typing import Optional

from agent_template.application.use_cases import CreateAgent, GetAgent, ListAgents, RunAgent
from agent_template.config.settings import Settings, get_settings
from agent_template.infrastructure.config_loader import AgentConfigLoader
from agent_template.infrastructure.llm import LLMService
from agent_template.infrastructure.memory import InMemoryMemoryService
from agent_template.infrastructure.observability.logging import get_logger
from agent_template.infrastructure.repositories import (
    InMemoryAgentRepository,
    InMemorySessionRepository,
)
from agent_template.infrastructure.tools import ToolRegistry
from agent_template.infrastructure.tools.builtin import builtin_tools
from agent_template.interfaces import (
    IAgentRepository,
    ILLMService,
    IMemoryService,
    ISessionRepository,
    IToolRegistry,
)

logger = get_logger(__name__)


def build_memory_service(settings: Settings) -> IMemoryService:
    if settings.memory_backend == "in-memory":
        return InMemoryMemoryService()
    raise ValueError(
        f"Memory backend {settings.memory_backend!r} is not available; "
        "only 'in-memory' is implemented"
    )


class Container:
    """
    Explicit wiring of the application graph.

    Any component may be passed in to replace the default implementation.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        agent_repository: Optional[IAgentRepository] = None,
        session_repository: Optional[ISessionRepository] = None,
        tool_registry: Optional[IToolRegistry] = None,
        llm_service: Optional[ILLMService] = None,
        memory_service: Optional[IMemoryService] = None,
    ):
        self.settings = settings or get_settings()
        self.agent_repository = agent_repository or InMemoryAgentRepository()
        self.session_repository = session_repository or InMemorySessionRepository()
        self.llm_service = llm_service or LLMService(self.settings)
        self.memory_service = memory_service or build_memory_service(self.settings)

        if tool_registry is None:
            tool_registry = ToolRegistry()
            for tool in builtin_tools():
                tool_registry.register(tool)
        self.tool_registry = tool_registry

        self.create_agent = CreateAgent(self.agent_repository, self.tool_registry)
        self.get_agent = GetAgent(self.agent_repository)
        self.list_agents = ListAgents(self.agent_repository)
        self.run_agent = RunAgent(
            self.agent_repository,
            self.session_repository,
            self.llm_service,
            self.tool_registry,
            self.memory_service,
            self.settings,
        )

    async def seed_agents(self) -> int:
        """Create agents from ``settings.agent_config_dir`` if it is set."""
        if not self.settings.agent_config_dir:
            return 0
        loader = AgentConfigLoader(self.settings.agent_config_dir)
        created = await loader.seed(self.create_agent)
        return len(created)

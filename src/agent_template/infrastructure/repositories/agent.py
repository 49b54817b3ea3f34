# src/agent_template/infrastructure/repositories/agent.py
"""
In-memory agent repository.

Agents live in a dict keyed by ID for the lifetime of the process.
Insertion order is the listing order.
"""
from agent_template.domain.agent import Agent
from agent_template.domain.exceptions import AgentNotFound
from agent_template.domain.models import Page
from agent_template.infrastructure.observability.logging import get_logger
from agent_template.interfaces.repository import IAgentRepository

logger = get_logger(__name__)


class InMemoryAgentRepository(IAgentRepository):
    """
    Dict-backed IAgentRepository.

    Example:
        >>> repo = InMemoryAgentRepository()
        >>> await repo.save(agent)
        >>> page = await repo.find_all(skip=0, take=10)
        >>> page.total
        1
    """

    def __init__(self):
        self._agents: dict[str, Agent] = {}

    async def find_by_id(self, agent_id: str) -> Agent | None:
        return self._agents.get(agent_id)

    async def find_by_name(self, name: str) -> Agent | None:
        for agent in self._agents.values():
            if agent.name == name:
                return agent
        return None

    async def find_all(self, skip: int = 0, take: int = 10) -> Page:
        agents = list(self._agents.values())
        return Page(
            items=agents[skip:skip + take],
            total=len(agents),
            skip=skip,
            take=take,
        )

    async def save(self, agent: Agent) -> Agent:
        self._agents[agent.id] = agent
        logger.debug("Agent saved", agent_id=agent.id, name=agent.name)
        return agent

    async def update(self, agent: Agent) -> Agent:
        if agent.id not in self._agents:
            raise AgentNotFound(agent.id)
        self._agents[agent.id] = agent
        return agent

    async def delete(self, agent_id: str) -> None:
        if self._agents.pop(agent_id, None) is not None:
            logger.debug("Agent deleted", agent_id=agent_id)

    async def exists(self, agent_id: str) -> bool:
        return agent_id in self._agents

    async def count(self) -> int:
        return len(self._agents)

    def clear(self) -> None:
        """Remove all agents (useful for testing)."""
        self._agents.clear()

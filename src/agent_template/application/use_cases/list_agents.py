"""List agents use case."""
from agent_template.domain.models import Page
from agent_template.interfaces.repository import IAgentRepository


class ListAgents:
    def __init__(self, agent_repository: IAgentRepository):
        self._agents = agent_repository

    async def execute(self, skip: int = 0, take: int = 10) -> Page:
        return await self._agents.find_all(skip=skip, take=take)

"""Get agent use case."""
from agent_template.domain.agent import Agent
from agent_template.domain.exceptions import AgentNotFound
from agent_template.interfaces.repository import IAgentRepository


class GetAgent:
    def __init__(self, agent_repository: IAgentRepository):
        self._agents = agent_repository

    async def execute(self, agent_id: str) -> Agent:
        agent = await self._agents.find_by_id(agent_id)
        if agent is None:
            raise AgentNotFound(agent_id)
        return agent

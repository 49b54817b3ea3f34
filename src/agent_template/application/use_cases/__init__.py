"""Use cases."""

from agent_template.application.use_cases.create_agent import CreateAgent
from agent_template.application.use_cases.get_agent import GetAgent
from agent_template.application.use_cases.list_agents import ListAgents
from agent_template.application.use_cases.run_agent import RunAgent

__all__ = [
    "CreateAgent",
    "GetAgent",
    "ListAgents",
    "RunAgent",
]

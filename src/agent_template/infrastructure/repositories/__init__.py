"""In-memory repository implementations."""

from agent_template.infrastructure.repositories.agent import InMemoryAgentRepository
from agent_template.infrastructure.repositories.session import InMemorySessionRepository

__all__ = [
    "InMemoryAgentRepository",
    "InMemorySessionRepository",
]

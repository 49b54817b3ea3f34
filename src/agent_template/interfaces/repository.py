# src/agent_template/interfaces/repository.py
from __future__ import annotations
from abc import ABC, abstractmethod

from agent_template.domain.agent import Agent
from agent_template.domain.models import Page, SessionStatus
from agent_template.domain.session import Session


class IAgentRepository(ABC):
    """
    Storage port for Agent entities.

    Example:
        class PostgresAgentRepository(IAgentRepository):
            async def find_by_id(self, agent_id: str) -> Agent | None:
                ...
    """

    @abstractmethod
    async def find_by_id(self, agent_id: str) -> Agent | None:
        """Get agent by ID."""
        pass

    @abstractmethod
    async def find_by_name(self, name: str) -> Agent | None:
        """Get agent by exact name."""
        pass

    @abstractmethod
    async def find_all(self, skip: int = 0, take: int = 10) -> Page:
        """Get a page of agents in insertion order."""
        pass

    @abstractmethod
    async def save(self, agent: Agent) -> Agent:
        """Insert or overwrite an agent."""
        pass

    @abstractmethod
    async def update(self, agent: Agent) -> Agent:
        """Overwrite an existing agent. Raises AgentNotFound if missing."""
        pass

    @abstractmethod
    async def delete(self, agent_id: str) -> None:
        """Delete agent by ID. Missing IDs are ignored."""
        pass

    @abstractmethod
    async def exists(self, agent_id: str) -> bool:
        pass

    @abstractmethod
    async def count(self) -> int:
        pass


class ISessionRepository(ABC):
    """Storage port for Session entities."""

    @abstractmethod
    async def find_by_id(self, session_id: str) -> Session | None:
        """Get session by ID."""
        pass

    @abstractmethod
    async def find_by_agent_id(self, agent_id: str, skip: int = 0, take: int = 10) -> Page:
        """Get a page of sessions owned by an agent."""
        pass

    @abstractmethod
    async def find_by_status(self, status: SessionStatus, skip: int = 0, take: int = 10) -> Page:
        """Get a page of sessions in a given status."""
        pass

    @abstractmethod
    async def find_active_by_agent_id(self, agent_id: str) -> list[Session]:
        """Get all sessions of an agent that are active and not expired."""
        pass

    @abstractmethod
    async def save(self, session: Session) -> Session:
        pass

    @abstractmethod
    async def update(self, session: Session) -> Session:
        """Overwrite an existing session. Raises SessionNotFound if missing."""
        pass

    @abstractmethod
    async def delete(self, session_id: str) -> None:
        pass

    @abstractmethod
    async def exists(self, session_id: str) -> bool:
        pass

    @abstractmethod
    async def delete_expired_sessions(self) -> int:
        """Remove expired sessions and return how many were removed."""
        pass

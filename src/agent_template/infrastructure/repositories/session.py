# src/agent_template/infrastructure/repositories/session.py
"""In-memory session repository."""
from agent_template.domain.exceptions import SessionNotFound
from agent_template.domain.models import Page, SessionStatus
from agent_template.domain.session import Session
from agent_template.infrastructure.observability.logging import get_logger
from agent_template.interfaces.repository import ISessionRepository

logger = get_logger(__name__)


def _paginate(sessions: list[Session], skip: int, take: int) -> Page:
    return Page(
        items=sessions[skip:skip + take],
        total=len(sessions),
        skip=skip,
        take=take,
    )


class InMemorySessionRepository(ISessionRepository):
    """Dict-backed ISessionRepository keyed by session ID."""

    def __init__(self):
        self._sessions: dict[str, Session] = {}

    async def find_by_id(self, session_id: str) -> Session | None:
        return self._sessions.get(session_id)

    async def find_by_agent_id(self, agent_id: str, skip: int = 0, take: int = 10) -> Page:
        owned = [s for s in self._sessions.values() if s.agent_id == agent_id]
        return _paginate(owned, skip, take)

    async def find_by_status(self, status: SessionStatus, skip: int = 0, take: int = 10) -> Page:
        matching = [s for s in self._sessions.values() if s.status == status]
        return _paginate(matching, skip, take)

    async def find_active_by_agent_id(self, agent_id: str) -> list[Session]:
        return [
            s for s in self._sessions.values()
            if s.agent_id == agent_id and s.is_active()
        ]

    async def save(self, session: Session) -> Session:
        self._sessions[session.session_id] = session
        return session

    async def update(self, session: Session) -> Session:
        if session.session_id not in self._sessions:
            raise SessionNotFound(session.session_id)
        self._sessions[session.session_id] = session
        return session

    async def delete(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    async def exists(self, session_id: str) -> bool:
        return session_id in self._sessions

    async def delete_expired_sessions(self) -> int:
        expired = [sid for sid, s in self._sessions.items() if s.is_expired()]
        for session_id in expired:
            del self._sessions[session_id]

        if expired:
            logger.info("Expired sessions removed", count=len(expired))
        return len(expired)

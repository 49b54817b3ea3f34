"""Session entity."""

from __future__ import annotations
import uuid
from datetime import datetime, timezone
from typing import Any

from agent_template.domain.exceptions import ValidationError
from agent_template.domain.models import SessionStatus


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Session:
    """
    One conversation between a caller and an agent.

    Status changes never raise. ``pause``, ``resume`` and ``complete`` are
    ignored when the current status does not allow them; ``fail`` and
    ``interrupt`` always apply.
    """

    def __init__(
        self,
        agent_id: str,
        session_id: str | None = None,
        status: SessionStatus = SessionStatus.ACTIVE,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
        metadata: dict[str, Any] | None = None,
        expires_at: datetime | None = None,
    ):
        if not agent_id or not agent_id.strip():
            raise ValidationError("Agent ID cannot be empty", details={"field": "agent_id"})

        self._session_id = session_id or str(uuid.uuid4())
        self._agent_id = agent_id
        self._status = status
        self._created_at = created_at or _utcnow()
        self._updated_at = updated_at or _utcnow()
        self._expires_at = expires_at
        self._metadata: dict[str, Any] = dict(metadata or {})

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def agent_id(self) -> str:
        return self._agent_id

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    @property
    def expires_at(self) -> datetime | None:
        return self._expires_at

    @property
    def metadata(self) -> dict[str, Any]:
        return dict(self._metadata)

    def is_expired(self, now: datetime | None = None) -> bool:
        if self._expires_at is None:
            return False
        return (now or _utcnow()) > self._expires_at

    def is_active(self) -> bool:
        if self.is_expired():
            return False
        return self._status == SessionStatus.ACTIVE

    def pause(self) -> None:
        if self._status == SessionStatus.ACTIVE:
            self._set_status(SessionStatus.PAUSED)

    def resume(self) -> None:
        if self._status == SessionStatus.PAUSED:
            self._set_status(SessionStatus.ACTIVE)

    def complete(self) -> None:
        if self._status in (SessionStatus.ACTIVE, SessionStatus.PAUSED):
            self._set_status(SessionStatus.COMPLETED)

    def fail(self, reason: str | None = None) -> None:
        self._set_status(SessionStatus.FAILED)
        if reason:
            self._metadata["failure_reason"] = reason

    def interrupt(self, reason: str | None = None) -> None:
        self._set_status(SessionStatus.INTERRUPTED)
        if reason:
            self._metadata["interrupt_reason"] = reason

    def set_expiration(self, expires_at: datetime) -> None:
        self._expires_at = expires_at
        self._touch()

    def update_metadata(self, metadata: dict[str, Any]) -> None:
        self._metadata = {**self._metadata, **metadata}
        self._touch()

    def info(self) -> dict[str, Any]:
        """Summary without metadata."""
        return {
            "session_id": self._session_id,
            "agent_id": self._agent_id,
            "status": self._status.value,
            "created_at": self._created_at.isoformat(),
            "updated_at": self._updated_at.isoformat(),
            "expires_at": self._expires_at.isoformat() if self._expires_at else None,
        }

    def to_dict(self) -> dict[str, Any]:
        return {**self.info(), "metadata": dict(self._metadata)}

    def _set_status(self, status: SessionStatus) -> None:
        self._status = status
        self._touch()

    def _touch(self) -> None:
        self._updated_at = _utcnow()

    def __repr__(self) -> str:
        return (
            f"Session(session_id={self._session_id!r}, agent_id={self._agent_id!r}, "
            f"status={self._status.value})"
        )

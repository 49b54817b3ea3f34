# tests/unit/domain/test_session.py
"""Unit tests for the Session entity."""

from datetime import datetime, timedelta, timezone

import pytest

from agent_template.domain import ValidationError
from agent_template.domain.models import SessionStatus
from agent_template.domain.session import Session


def now() -> datetime:
    return datetime.now(timezone.utc)


@pytest.mark.unit
class TestSession:
    """Test session state and transitions."""

    def test_defaults(self):
        """Test a new session is active with a generated ID."""
        session = Session(agent_id="agent-1")

        assert session.session_id
        assert session.agent_id == "agent-1"
        assert session.status == SessionStatus.ACTIVE
        assert session.expires_at is None
        assert session.is_active() is True

    def test_empty_agent_id_rejected(self):
        """Test an empty agent ID raises a validation error."""
        with pytest.raises(ValidationError, match="Agent ID cannot be empty"):
            Session(agent_id="")

    def test_pause_and_resume(self):
        """Test pause from active and resume from paused."""
        session = Session(agent_id="agent-1")

        session.pause()
        assert session.status == SessionStatus.PAUSED
        assert session.is_active() is False

        session.resume()
        assert session.status == SessionStatus.ACTIVE

    def test_resume_when_active_is_ignored(self):
        """Test resume only applies to paused sessions."""
        session = Session(agent_id="agent-1")

        session.resume()

        assert session.status == SessionStatus.ACTIVE

    def test_complete_from_paused(self):
        """Test complete is allowed from paused."""
        session = Session(agent_id="agent-1")
        session.pause()

        session.complete()

        assert session.status == SessionStatus.COMPLETED

    def test_complete_from_failed_does_not_raise(self):
        """Test complete on a failed session is ignored without error."""
        session = Session(agent_id="agent-1")
        session.fail("boom")

        session.complete()

        assert session.status == SessionStatus.FAILED

    def test_fail_records_reason(self):
        """Test fail stores the failure reason."""
        session = Session(agent_id="agent-1")

        session.fail("LLM unavailable")

        assert session.status == SessionStatus.FAILED
        assert session.metadata["failure_reason"] == "LLM unavailable"

    def test_interrupt_from_completed(self):
        """Test interrupt applies from any status."""
        session = Session(agent_id="agent-1")
        session.complete()

        session.interrupt("timeout")

        assert session.status == SessionStatus.INTERRUPTED
        assert session.metadata["interrupt_reason"] == "timeout"

    def test_expired_session_is_not_active(self):
        """Test an expired session reports inactive even with active status."""
        session = Session(agent_id="agent-1", expires_at=now() - timedelta(minutes=1))

        assert session.status == SessionStatus.ACTIVE
        assert session.is_expired() is True
        assert session.is_active() is False

    def test_set_expiration(self):
        """Test setting a future expiration keeps the session active."""
        session = Session(agent_id="agent-1")
        expires_at = now() + timedelta(hours=1)

        session.set_expiration(expires_at)

        assert session.expires_at == expires_at
        assert session.is_active() is True

    def test_update_metadata_merges(self):
        """Test metadata updates are merged."""
        session = Session(agent_id="agent-1", metadata={"channel": "web"})

        session.update_metadata({"locale": "en"})

        assert session.metadata == {"channel": "web", "locale": "en"}

    def test_info_omits_metadata(self):
        """Test info() is a summary without metadata."""
        session = Session(agent_id="agent-1", metadata={"channel": "web"})

        info = session.info()

        assert "metadata" not in info
        assert info["status"] == "active"
        assert session.to_dict()["metadata"] == {"channel": "web"}

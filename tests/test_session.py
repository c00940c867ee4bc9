"""Tests for the access gate."""

import pytest
from datetime import datetime, timedelta, timezone

from finance_tracker.config import AccessGateSettings
from finance_tracker.models.audit import AuditEventType
from finance_tracker.session import EXPIRY_KEY, AccessGate

T0 = datetime(2024, 3, 10, 9, 0, tzinfo=timezone.utc)


class RecordingAuditLogger:
    def __init__(self):
        self.events = []

    def log(self, event):
        self.events.append(event)


@pytest.fixture
def audit():
    return RecordingAuditLogger()


@pytest.fixture
def state():
    return {}


@pytest.fixture
def gate(state, audit):
    return AccessGate("kedjora123", timedelta(minutes=10), state, audit)


class TestAccessGate:
    """Tests for login, expiry and logout."""

    def test_closed_by_default(self, gate):
        assert gate.is_authenticated(T0) is False
        assert gate.remaining(T0) == timedelta(0)

    def test_wrong_password(self, gate, state, audit):
        assert gate.login("salah", T0) is False
        assert EXPIRY_KEY not in state
        assert audit.events[-1].event_type == AuditEventType.LOGIN_FAILED

    def test_login_opens_window(self, gate, state, audit):
        assert gate.login("kedjora123", T0) is True
        assert state[EXPIRY_KEY] == T0 + timedelta(minutes=10)
        assert gate.is_authenticated(T0 + timedelta(minutes=9, seconds=59)) is True
        assert gate.remaining(T0 + timedelta(minutes=4)) == timedelta(minutes=6)
        assert audit.events[-1].event_type == AuditEventType.LOGIN_SUCCEEDED

    def test_window_expires(self, gate, state, audit):
        gate.login("kedjora123", T0)
        assert gate.is_authenticated(T0 + timedelta(minutes=10)) is False
        assert EXPIRY_KEY not in state
        assert audit.events[-1].event_type == AuditEventType.SESSION_EXPIRED

        # Cleared state stays closed without a second expiry event
        assert gate.is_authenticated(T0 + timedelta(minutes=11)) is False
        assert len(audit.events) == 2

    def test_relogin_extends_window(self, gate):
        gate.login("kedjora123", T0)
        gate.login("kedjora123", T0 + timedelta(minutes=8))
        assert gate.is_authenticated(T0 + timedelta(minutes=15)) is True

    def test_logout(self, gate, state):
        gate.login("kedjora123", T0)
        gate.logout()
        assert EXPIRY_KEY not in state
        assert gate.is_authenticated(T0) is False
        gate.logout()

    def test_state_is_shared(self, state, audit):
        """A second gate over the same session state sees the login."""
        AccessGate("pw", timedelta(minutes=1), state, audit).login("pw", T0)
        other = AccessGate("pw", timedelta(minutes=1), state, audit)
        assert other.is_authenticated(T0 + timedelta(seconds=30)) is True

    def test_from_settings(self, state, audit):
        settings = AccessGateSettings(password="rahasia", session_minutes=5)
        gate = AccessGate.from_settings(settings, state, audit)
        assert gate.login("kedjora123", T0) is False
        assert gate.login("rahasia", T0) is True
        assert gate.expires_at == T0 + timedelta(minutes=5)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

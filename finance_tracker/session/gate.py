"""
Access Gate

A time-boxed password check in front of the dashboard. This is a cosmetic
gate for a single operator, NOT a security boundary: the secret lives in
configuration and the expiry lives in client session state.
"""

import hmac
from collections.abc import MutableMapping
from datetime import datetime, timedelta, timezone
from typing import Optional

from finance_tracker.audit import AuditLogger
from finance_tracker.config import AccessGateSettings
from finance_tracker.models.audit import AuditEventBuilder

EXPIRY_KEY = "auth_expiry"


class AccessGate:
    """
    Password gate with a fixed validity window.

    The expiry timestamp is kept in `state`, any mutable mapping
    (Streamlit's session_state in the app).
    """

    def __init__(
        self,
        password: str,
        session_duration: timedelta,
        state: MutableMapping,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._password = password
        self._duration = session_duration
        self._state = state
        self._audit = audit_logger or AuditLogger()

    @classmethod
    def from_settings(
        cls,
        settings: AccessGateSettings,
        state: MutableMapping,
        audit_logger: Optional[AuditLogger] = None,
    ) -> "AccessGate":
        return cls(
            password=settings.password,
            session_duration=timedelta(minutes=settings.session_minutes),
            state=state,
            audit_logger=audit_logger,
        )

    @staticmethod
    def _now(now: Optional[datetime]) -> datetime:
        return now or datetime.now(timezone.utc)

    @property
    def expires_at(self) -> Optional[datetime]:
        return self._state.get(EXPIRY_KEY)

    def login(self, candidate: str, now: Optional[datetime] = None) -> bool:
        """Open the gate for one session window if the password matches."""
        if not hmac.compare_digest(candidate.encode(), self._password.encode()):
            self._audit.log(AuditEventBuilder.login_failed())
            return False

        expires_at = self._now(now) + self._duration
        self._state[EXPIRY_KEY] = expires_at
        self._audit.log(AuditEventBuilder.login_succeeded(expires_at))
        return True

    def is_authenticated(self, now: Optional[datetime] = None) -> bool:
        """
        True while the session window is open.

        An expired window is cleared so the next check starts fresh.
        """
        expires_at = self.expires_at
        if expires_at is None:
            return False
        if self._now(now) < expires_at:
            return True

        self._state.pop(EXPIRY_KEY, None)
        self._audit.log(AuditEventBuilder.session_expired(expires_at))
        return False

    def remaining(self, now: Optional[datetime] = None) -> timedelta:
        """Time left in the window, zero when closed."""
        expires_at = self.expires_at
        if expires_at is None:
            return timedelta(0)
        return max(expires_at - self._now(now), timedelta(0))

    def logout(self) -> None:
        self._state.pop(EXPIRY_KEY, None)

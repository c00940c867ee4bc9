"""Access gate package."""

from finance_tracker.session.gate import EXPIRY_KEY, AccessGate

__all__ = ["EXPIRY_KEY", "AccessGate"]

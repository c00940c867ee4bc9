"""
Audit Models for the Finance Tracker

Every store operation and gate decision produces an audit event. Events are
written to the structured local log; they are never persisted next to the
records themselves.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Storage
    BACKEND_SELECTED = "backend_selected"
    RECORDS_LOADED = "records_loaded"
    LOAD_FAILED = "load_failed"
    RECORD_ADDED = "record_added"
    ADD_FAILED = "add_failed"
    RECORD_REMOVED = "record_removed"
    REMOVE_FAILED = "remove_failed"
    ROW_SKIPPED = "row_skipped"

    # Access gate
    LOGIN_SUCCEEDED = "login_succeeded"
    LOGIN_FAILED = "login_failed"
    SESSION_EXPIRED = "session_expired"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """A single audit event."""

    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )
    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # What entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Entity kind, e.g. 'transaction' or 'invoice'"
    )
    entity_id: Optional[str] = None

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None
    is_user_action: bool = False

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.record_added("transaction", tx.id)
        event = AuditEventBuilder.load_failed("invoice", str(exc))
    """

    @staticmethod
    def backend_selected(backend: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BACKEND_SELECTED,
            description=f"Storage backend selected: {backend}",
            details={"backend": backend},
        )

    @staticmethod
    def records_loaded(entity_type: str, count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORDS_LOADED,
            severity=AuditSeverity.DEBUG,
            entity_type=entity_type,
            description=f"Loaded {count} {entity_type} records",
            details={"count": count},
        )

    @staticmethod
    def load_failed(entity_type: str, error: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOAD_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type=entity_type,
            description=f"Failed to load {entity_type} records",
            error_message=error,
        )

    @staticmethod
    def record_added(entity_type: str, entity_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_ADDED,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{entity_type.capitalize()} added",
            is_user_action=True,
        )

    @staticmethod
    def add_failed(entity_type: str, error: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ADD_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type=entity_type,
            description=f"Failed to add {entity_type}",
            error_message=error,
            is_user_action=True,
        )

    @staticmethod
    def record_removed(entity_type: str, entity_id: str, found: bool) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_REMOVED,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{entity_type.capitalize()} removed",
            details={"found": found},
            is_user_action=True,
        )

    @staticmethod
    def remove_failed(entity_type: str, entity_id: str, error: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REMOVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"Failed to remove {entity_type}",
            error_message=error,
            is_user_action=True,
        )

    @staticmethod
    def row_skipped(entity_type: str, row_number: int, error: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ROW_SKIPPED,
            severity=AuditSeverity.WARNING,
            entity_type=entity_type,
            description=f"Skipped malformed {entity_type} row {row_number}",
            details={"row_number": row_number},
            error_message=error,
        )

    @staticmethod
    def login_succeeded(expires_at: datetime) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOGIN_SUCCEEDED,
            description="Access gate opened",
            details={"expires_at": expires_at.isoformat()},
            is_user_action=True,
        )

    @staticmethod
    def login_failed() -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOGIN_FAILED,
            severity=AuditSeverity.WARNING,
            description="Wrong access gate password",
            is_user_action=True,
        )

    @staticmethod
    def session_expired(expired_at: datetime) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SESSION_EXPIRED,
            description="Access gate session expired",
            details={"expired_at": expired_at.isoformat()},
        )

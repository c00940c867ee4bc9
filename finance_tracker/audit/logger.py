"""
Audit Logger

Every store mutation, load and gate decision is logged as a structured
event. The logger:
- Writes JSON lines through structlog on top of stdlib logging
- Never raises into the caller
"""

import logging
import sys
from typing import Optional

import structlog

from finance_tracker.models.audit import AuditEvent, AuditSeverity


def configure_logging(debug: bool = False) -> None:
    """
    Configure stdlib logging and structlog for the process.

    Safe to call more than once; the last call wins.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=logging.DEBUG if debug else logging.INFO,
        force=True,
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class AuditLogger:
    """Central audit logging service."""

    def __init__(self, logger_name: Optional[str] = None):
        self._logger = structlog.get_logger(logger_name or "finance_tracker.audit")

    def log(self, event: AuditEvent) -> None:
        """Log an audit event at the level matching its severity."""
        log_dict = event.to_log_dict()
        log_dict.pop("event_type", None)
        event_name = event.event_type.value

        try:
            if event.severity == AuditSeverity.ERROR:
                self._logger.error(event_name, **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning(event_name, **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug(event_name, **log_dict)
            else:
                self._logger.info(event_name, **log_dict)
        except (TypeError, ValueError, OSError) as e:
            # A broken log sink must not fail the operation being audited
            print(f"WARNING: Failed to write audit event: {e}", file=sys.stderr)

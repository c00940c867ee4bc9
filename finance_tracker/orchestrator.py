"""
Application Wiring

This module resolves configuration once and builds every component the
dashboard needs.

DESIGN DECISION: The backend switch is decided exactly once per process.
If the remote store is configured, BOTH stores use Google Sheets; otherwise
BOTH fall back to local JSON blobs. There is no per-record choice and no
migration between backends at runtime.
"""

from collections.abc import MutableMapping
from datetime import tzinfo
from typing import NamedTuple, Optional

from finance_tracker.audit import AuditLogger, configure_logging
from finance_tracker.config import Settings, get_settings, remote_store_configured
from finance_tracker.models.audit import AuditEventBuilder
from finance_tracker.services.storage import (
    GoogleSheetsClient,
    GoogleSheetsInvoiceBackend,
    GoogleSheetsTransactionBackend,
    LocalInvoiceBackend,
    LocalTransactionBackend,
    StorageBackend,
)
from finance_tracker.session import AccessGate
from finance_tracker.stores import InvoiceStore, TransactionStore


class AppComponents(NamedTuple):
    """Everything the presentation layer talks to."""
    backend: StorageBackend
    transactions: TransactionStore
    invoices: InvoiceStore
    settings: Settings
    tz: Optional[tzinfo]
    audit_logger: AuditLogger

    def access_gate(self, state: MutableMapping) -> AccessGate:
        """Gate bound to one client's session state."""
        return AccessGate.from_settings(
            self.settings.access_gate, state, self.audit_logger
        )


def select_backend(settings: Settings) -> StorageBackend:
    if remote_store_configured(settings):
        return StorageBackend.GOOGLE_SHEETS
    return StorageBackend.LOCAL


def create_app_components(
    settings: Optional[Settings] = None,
    backend: Optional[StorageBackend] = None,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        settings: Settings to use; defaults to the cached process settings.
        backend: Force a backend instead of detecting one.

    Returns:
        AppComponents with both stores sharing the selected backend kind
    """
    settings = settings or get_settings()
    app_settings = settings.app
    configure_logging(debug=app_settings.debug_mode)
    audit_logger = AuditLogger()

    backend = backend or select_backend(settings)
    tz = app_settings.tzinfo

    if backend == StorageBackend.GOOGLE_SHEETS:
        sheets_client = GoogleSheetsClient(settings.google_sheets)
        transaction_backend = GoogleSheetsTransactionBackend(sheets_client, audit_logger)
        invoice_backend = GoogleSheetsInvoiceBackend(sheets_client, audit_logger)
    else:
        local = settings.local_store
        transaction_backend = LocalTransactionBackend(local.data_dir, local.transactions_key)
        invoice_backend = LocalInvoiceBackend(local.data_dir, local.invoices_key)

    audit_logger.log(AuditEventBuilder.backend_selected(backend.value))

    return AppComponents(
        backend=backend,
        transactions=TransactionStore(transaction_backend, audit_logger),
        invoices=InvoiceStore(invoice_backend, audit_logger, tz=tz),
        settings=settings,
        tz=tz,
        audit_logger=audit_logger,
    )

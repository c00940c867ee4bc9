"""
Record Stores

DESIGN DECISION: The in-memory collection is the source of truth for the
session. The backing medium is read once at startup and written right
after every mutation; the store never re-reads it on its own.

Stores expose the same state to the UI for both entity kinds:
- records: newest first
- loading: True until the first load settles
- error:   a short user-facing message, or None

There is no locking. A store is meant to be driven from one thread of
control, one operation at a time.
"""

from datetime import datetime, tzinfo
from decimal import Decimal
from typing import Generic, Optional

from finance_tracker.audit import AuditLogger
from finance_tracker.models.audit import AuditEventBuilder
from finance_tracker.models.records import (
    Invoice,
    InvoiceDraft,
    Transaction,
    TransactionDraft,
)
from finance_tracker.services.storage import RecordBackend, StorageError
from finance_tracker.services.storage.interface import D, R
from finance_tracker.stats import generate_invoice_number


class RecordStore(Generic[R, D]):
    """
    Load, add and remove records of one entity kind.

    The backend is chosen by the caller once, at construction time.
    """

    load_error_message = "Gagal memuat data"
    add_error_message = "Gagal menambahkan data"
    remove_error_message = "Gagal menghapus data"

    def __init__(
        self,
        backend: RecordBackend[R, D],
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._backend = backend
        self._audit = audit_logger or AuditLogger()
        self.records: list[R] = []
        self.loading: bool = True
        self.error: Optional[str] = None

    @property
    def entity_type(self) -> str:
        return self._backend.entity_type

    @property
    def backend(self) -> RecordBackend[R, D]:
        return self._backend

    def get(self, record_id: str) -> Optional[R]:
        """Find a record in the in-memory collection."""
        return next((r for r in self.records if r.id == record_id), None)

    async def load(self) -> None:
        """
        Fetch the full collection from the backend.

        On failure the previous collection is kept and `error` is set.
        Never raises.
        """
        self.loading = True
        try:
            self.records = await self._backend.fetch_all()
            self.error = None
            self._audit.log(
                AuditEventBuilder.records_loaded(self.entity_type, len(self.records))
            )
        except StorageError as e:
            self.error = self.load_error_message
            self._audit.log(AuditEventBuilder.load_failed(self.entity_type, str(e)))
        finally:
            self.loading = False

    async def refetch(self) -> None:
        await self.load()

    async def add(self, draft: D) -> R:
        """
        Persist a new record and prepend it to the collection.

        The collection only changes after the backend write succeeded.

        Raises:
            StorageError: After setting `error`, so the caller can keep
                its form open
        """
        try:
            record = await self._backend.insert(draft)
        except StorageError as e:
            self.error = self.add_error_message
            self._audit.log(AuditEventBuilder.add_failed(self.entity_type, str(e)))
            raise

        self.records = [record, *self.records]
        self._audit.log(AuditEventBuilder.record_added(self.entity_type, record.id))
        return record

    async def remove(self, record_id: str) -> None:
        """
        Delete a record from the backend and the collection.

        The backend delete is issued even when the id is not in memory;
        the collection is left untouched in that case.

        Raises:
            StorageError: After setting `error`
        """
        try:
            found = await self._backend.delete(record_id)
        except StorageError as e:
            self.error = self.remove_error_message
            self._audit.log(
                AuditEventBuilder.remove_failed(self.entity_type, record_id, str(e))
            )
            raise

        self.records = [r for r in self.records if r.id != record_id]
        self._audit.log(
            AuditEventBuilder.record_removed(self.entity_type, record_id, found)
        )


class TransactionStore(RecordStore[Transaction, TransactionDraft]):
    """Income and expense transactions."""

    load_error_message = "Gagal memuat transaksi"
    add_error_message = "Gagal menambahkan transaksi"
    remove_error_message = "Gagal menghapus transaksi"


class InvoiceStore(RecordStore[Invoice, InvoiceDraft]):
    """Internal invoices."""

    load_error_message = "Gagal memuat invoice"
    add_error_message = "Gagal menambahkan invoice"
    remove_error_message = "Gagal menghapus invoice"

    def __init__(
        self,
        backend: RecordBackend[Invoice, InvoiceDraft],
        audit_logger: Optional[AuditLogger] = None,
        tz: Optional[tzinfo] = None,
    ):
        super().__init__(backend, audit_logger)
        self._tz = tz

    def next_invoice_number(self, invoice_date: datetime) -> str:
        return generate_invoice_number(self.records, invoice_date, self._tz)

    async def create_invoice(
        self,
        description: str,
        amount: Decimal,
        invoice_date: datetime,
    ) -> Invoice:
        """
        Number and add an invoice.

        The number comes from the in-memory collection, so two sessions
        creating invoices at the same time can produce the same number.
        """
        draft = InvoiceDraft(
            invoice_number=self.next_invoice_number(invoice_date),
            description=description,
            amount=amount,
            date=invoice_date,
        )
        return await self.add(draft)

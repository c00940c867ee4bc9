"""Record store package."""

from finance_tracker.stores.record_store import (
    InvoiceStore,
    RecordStore,
    TransactionStore,
)

__all__ = ["InvoiceStore", "RecordStore", "TransactionStore"]

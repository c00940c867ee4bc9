"""Services package."""

from finance_tracker.services.storage import (
    ConnectionError,
    GoogleSheetsClient,
    GoogleSheetsInvoiceBackend,
    GoogleSheetsTransactionBackend,
    LoadFailure,
    LocalInvoiceBackend,
    LocalTransactionBackend,
    RecordBackend,
    StorageBackend,
    StorageError,
    WriteFailure,
)

__all__ = [
    "ConnectionError",
    "GoogleSheetsClient",
    "GoogleSheetsInvoiceBackend",
    "GoogleSheetsTransactionBackend",
    "LoadFailure",
    "LocalInvoiceBackend",
    "LocalTransactionBackend",
    "RecordBackend",
    "StorageBackend",
    "StorageError",
    "WriteFailure",
]

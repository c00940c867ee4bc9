"""
Storage Services Package

Provides the abstract record backend interface and its two implementations:
Google Sheets (remote) and local JSON blobs (fallback).
"""

from finance_tracker.services.storage.interface import (
    ConnectionError,
    LoadFailure,
    RecordBackend,
    StorageBackend,
    StorageError,
    WriteFailure,
)
from finance_tracker.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsInvoiceBackend,
    GoogleSheetsTransactionBackend,
)
from finance_tracker.services.storage.local_json import (
    LocalInvoiceBackend,
    LocalTransactionBackend,
)
from finance_tracker.services.storage.ordering import newest_first

__all__ = [
    # Interface
    "RecordBackend",
    "StorageBackend",
    "newest_first",
    # Exceptions
    "ConnectionError",
    "LoadFailure",
    "StorageError",
    "WriteFailure",
    # Google Sheets implementation
    "GoogleSheetsClient",
    "GoogleSheetsInvoiceBackend",
    "GoogleSheetsTransactionBackend",
    # Local fallback implementation
    "LocalInvoiceBackend",
    "LocalTransactionBackend",
]

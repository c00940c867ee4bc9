"""
Abstract Storage Interface

DESIGN DECISION: Both entity kinds (transactions and invoices) are persisted
through the same small interface. This allows us to:
1. Pick the remote or the local backend once, at startup
2. Keep the record stores and the aggregation engine unaware of the backend
3. Test stores against a local directory instead of the network

The interface is intentionally tiny: select-all, insert-one, delete-by-id.
Records are never updated.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel

R = TypeVar("R", bound=BaseModel)
D = TypeVar("D", bound=BaseModel)


class StorageBackend(str, Enum):
    """Which backing medium the process uses."""
    GOOGLE_SHEETS = "google_sheets"
    LOCAL = "local"


class RecordBackend(ABC, Generic[R, D]):
    """
    Abstract interface for one entity kind's backing medium.

    R is the stored record type, D the draft (record without id) type.
    """

    entity_type: str = "record"

    @abstractmethod
    async def fetch_all(self) -> list[R]:
        """
        Fetch the whole collection.

        Returns:
            All records, ordered by date descending (newest first)

        Raises:
            LoadFailure: If the backing medium cannot be read
        """
        pass

    @abstractmethod
    async def insert(self, draft: D) -> R:
        """
        Persist a new record.

        The backend assigns the id and the creation timestamp.

        Args:
            draft: The record to create, without id

        Returns:
            The created record as stored

        Raises:
            WriteFailure: If the write fails
        """
        pass

    @abstractmethod
    async def delete(self, record_id: str) -> bool:
        """
        Delete a record by id.

        Args:
            record_id: The record's unique identifier

        Returns:
            True if a record was deleted, False if none matched

        Raises:
            WriteFailure: If the delete fails
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class LoadFailure(StorageError):
    """Fetching a collection failed."""
    pass


class WriteFailure(StorageError):
    """Adding or deleting a record failed."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass

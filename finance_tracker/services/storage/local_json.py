"""
Local JSON Storage Implementation

Fallback used when no remote store is configured. Each entity kind lives in
one JSON file named after a fixed logical key, holding the whole collection
in insertion order (latest added first). Reads sort it by date.

Every mutation is a read-modify-write of the entire blob. There is no
locking: two processes writing the same blob race and the last writer wins.
"""

import os
from datetime import datetime, timezone
from pathlib import Path
from uuid import uuid4

from pydantic import TypeAdapter, ValidationError

from finance_tracker.models.records import (
    Invoice,
    InvoiceDraft,
    Transaction,
    TransactionDraft,
)
from finance_tracker.services.storage.interface import (
    D,
    LoadFailure,
    R,
    RecordBackend,
    WriteFailure,
)
from finance_tracker.services.storage.ordering import newest_first


class LocalJsonBackend(RecordBackend[R, D]):
    """
    One serialized blob per entity kind.

    The blob stays in insertion order (new records prepended), so removing a
    just-added record restores it byte for byte. `fetch_all` sorts by date.
    """

    record_type: type

    def __init__(self, data_dir: Path, key: str):
        self._data_dir = Path(data_dir)
        self._key = key
        self._adapter = TypeAdapter(list[self.record_type])

    @property
    def path(self) -> Path:
        return self._data_dir / f"{self._key}.json"

    def _read(self) -> list[R]:
        """Read the whole blob. A missing blob is an empty collection."""
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            return []
        except OSError as e:
            raise LoadFailure(f"Failed to read {self.path}: {e}") from e

        try:
            return self._adapter.validate_json(raw)
        except ValidationError as e:
            raise LoadFailure(f"Corrupt {self.entity_type} blob {self.path}: {e}") from e

    def _write(self, records: list[R]) -> None:
        """Replace the blob atomically."""
        payload = self._adapter.dump_json(records, indent=2)
        tmp_path = self.path.with_suffix(".json.tmp")
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            tmp_path.write_bytes(payload)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise WriteFailure(f"Failed to write {self.path}: {e}") from e

    def _from_draft(self, draft: D) -> R:
        return self.record_type(
            id=str(uuid4()),
            created_at=datetime.now(timezone.utc),
            **draft.model_dump(),
        )

    async def fetch_all(self) -> list[R]:
        """Return the stored collection, newest first by date."""
        return newest_first(self._read())

    async def insert(self, draft: D) -> R:
        """Prepend a new record and write the blob back."""
        try:
            current = self._read()
        except LoadFailure as e:
            raise WriteFailure(str(e)) from e

        record = self._from_draft(draft)
        self._write([record, *current])
        return record

    async def delete(self, record_id: str) -> bool:
        """Drop every record with this id. An absent id leaves the blob untouched."""
        try:
            current = self._read()
        except LoadFailure as e:
            raise WriteFailure(str(e)) from e

        remaining = [r for r in current if r.id != record_id]
        if len(remaining) == len(current):
            return False

        self._write(remaining)
        return True


class LocalTransactionBackend(LocalJsonBackend[Transaction, TransactionDraft]):
    entity_type = "transaction"
    record_type = Transaction


class LocalInvoiceBackend(LocalJsonBackend[Invoice, InvoiceDraft]):
    entity_type = "invoice"
    record_type = Invoice

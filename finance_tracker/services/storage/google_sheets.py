"""
Google Sheets Storage Implementation

DESIGN DECISION: The remote backend is a spreadsheet with one worksheet per
logical table ("transactions", "invoices"):
1. The owner can view and export the data directly in Sheets
2. No database server to run
3. Built-in backup

TRADEOFFS:
- Not suitable for high-volume data (fine for one operator)
- No transactions and no optimistic-concurrency token; concurrent writers
  can lose updates
- Limited query capabilities (we sort in Python)

Columns are snake_case. Every cell comes back as a string, so amounts and
timestamps are coerced on read.
"""

from abc import abstractmethod
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

import gspread
from google.oauth2.service_account import Credentials
from pydantic import ValidationError

from finance_tracker.audit import AuditLogger
from finance_tracker.config import GoogleSheetsSettings
from finance_tracker.models.audit import AuditEventBuilder
from finance_tracker.models.records import (
    Invoice,
    InvoiceDraft,
    Transaction,
    TransactionDraft,
)
from finance_tracker.services.storage.interface import (
    ConnectionError,
    D,
    LoadFailure,
    R,
    RecordBackend,
    StorageError,
    WriteFailure,
)
from finance_tracker.services.storage.ordering import newest_first


TRANSACTION_COLUMNS = [
    "id",
    "amount",
    "description",
    "date",
    "type",
    "category",
    "created_at",
]

INVOICE_COLUMNS = [
    "id",
    "invoice_number",
    "description",
    "amount",
    "date",
    "created_at",
]

SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/drive",
]


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and worksheet lookup. Connection is lazy and
    happens on first use.
    """

    def __init__(self, settings: GoogleSheetsSettings):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings

    @property
    def settings(self) -> GoogleSheetsSettings:
        return self._settings

    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=SCOPES,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError as e:
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                ) from e
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}") from e

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound as e:
                raise ConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                ) from e
        return self._spreadsheet

    def get_worksheet(self, title: str, columns: list[str]) -> gspread.Worksheet:
        """Get or create a worksheet, writing the header row on creation."""
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(title)
        except gspread.WorksheetNotFound:
            sheet = spreadsheet.add_worksheet(
                title=title,
                rows=1000,
                cols=len(columns),
            )
            sheet.append_row(columns)
        return sheet


class GoogleSheetsRecordBackend(RecordBackend[R, D]):
    """
    Shared row handling for one worksheet.

    Subclasses define the columns and how a draft becomes a record.
    Records are stored one per row; row 1 is the header.
    """

    columns: list[str] = []

    def __init__(
        self,
        client: GoogleSheetsClient,
        sheet_name: str,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._client = client
        self._sheet_name = sheet_name
        self._audit = audit_logger or AuditLogger()

    def _sheet(self) -> gspread.Worksheet:
        return self._client.get_worksheet(self._sheet_name, self.columns)

    @abstractmethod
    def _to_record(self, data: dict) -> R:
        """Validate a column->value mapping into a record."""

    @abstractmethod
    def _from_draft(self, draft: D, record_id: str, created_at: datetime) -> R:
        """Build the stored record for a draft."""

    def _record_to_row(self, record: R) -> list[str]:
        """Convert a record to a spreadsheet row in column order."""
        data = record.model_dump(mode="json")
        return ["" if data.get(col) is None else str(data[col]) for col in self.columns]

    def _row_to_record(self, row: list[str]) -> R:
        """Convert a spreadsheet row to a record."""
        padded = list(row) + [""] * (len(self.columns) - len(row))
        data = {col: value for col, value in zip(self.columns, padded) if value}
        return self._to_record(data)

    async def fetch_all(self) -> list[R]:
        """Fetch every row, newest first. Malformed rows are skipped."""
        try:
            all_rows = self._sheet().get_all_values()[1:]  # Skip header
        except StorageError as e:
            raise LoadFailure(str(e)) from e
        except Exception as e:
            raise LoadFailure(f"Failed to load {self.entity_type} rows: {e}") from e

        records = []
        for row_number, row in enumerate(all_rows, start=2):
            if not row or not row[0]:
                continue
            try:
                records.append(self._row_to_record(row))
            except (ValidationError, ValueError) as e:
                self._audit.log(
                    AuditEventBuilder.row_skipped(self.entity_type, row_number, str(e))
                )

        return newest_first(records)

    async def insert(self, draft: D) -> R:
        """Append one row. The id and creation timestamp are assigned here."""
        record = self._from_draft(draft, str(uuid4()), datetime.now(timezone.utc))
        try:
            self._sheet().append_row(
                self._record_to_row(record), value_input_option="RAW"
            )
        except Exception as e:
            raise WriteFailure(f"Failed to save {self.entity_type}: {e}") from e
        return record

    async def delete(self, record_id: str) -> bool:
        """Delete the first row whose id matches."""
        try:
            sheet = self._sheet()
            all_rows = sheet.get_all_values()

            for idx, row in enumerate(all_rows[1:], start=2):  # Row 1 is header
                if row and row[0] == record_id:
                    sheet.delete_rows(idx)
                    return True

            return False
        except Exception as e:
            raise WriteFailure(f"Failed to delete {self.entity_type}: {e}") from e


class GoogleSheetsTransactionBackend(GoogleSheetsRecordBackend[Transaction, TransactionDraft]):
    """Transactions worksheet."""

    entity_type = "transaction"
    columns = TRANSACTION_COLUMNS

    def __init__(self, client: GoogleSheetsClient, audit_logger: Optional[AuditLogger] = None):
        super().__init__(client, client.settings.transactions_sheet_name, audit_logger)

    def _to_record(self, data: dict) -> Transaction:
        return Transaction.model_validate(data)

    def _from_draft(
        self, draft: TransactionDraft, record_id: str, created_at: datetime
    ) -> Transaction:
        return Transaction(
            id=record_id,
            created_at=created_at,
            **draft.model_dump(),
        )


class GoogleSheetsInvoiceBackend(GoogleSheetsRecordBackend[Invoice, InvoiceDraft]):
    """Invoices worksheet."""

    entity_type = "invoice"
    columns = INVOICE_COLUMNS

    def __init__(self, client: GoogleSheetsClient, audit_logger: Optional[AuditLogger] = None):
        super().__init__(client, client.settings.invoices_sheet_name, audit_logger)

    def _to_record(self, data: dict) -> Invoice:
        return Invoice.model_validate(data)

    def _from_draft(
        self, draft: InvoiceDraft, record_id: str, created_at: datetime
    ) -> Invoice:
        return Invoice(
            id=record_id,
            created_at=created_at,
            **draft.model_dump(),
        )

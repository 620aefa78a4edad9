"""
Main Orchestrator for SpendMate

This module ties together all the components and defines the
end-to-end flows for:
1. Expense Entry (form or receipt photo -> validate -> save)
2. Insights (expense list -> AI summary)
3. Reports (filtered list -> CSV / print view)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing is saved without passing validation
- A scanned receipt only pre-fills the form; the user still saves it
- AI failures become fixed messages, never exceptions in the UI
- Every step is audited

The UI talks to these flows and to ExpenseStore; it never calls an
agent or a storage backend directly.
"""

from typing import Iterable, Optional, Sequence
from uuid import UUID

import structlog

from spendmate.agents import (
    EMPTY_INSIGHT_MESSAGE,
    INSIGHT_FAILURE_MESSAGE,
    NO_EXPENSES_MESSAGE,
    InsightAgent,
    ReceiptAgent,
    ReceiptParseError,
)
from spendmate.audit import AuditLogger, create_correlation_id, get_audit_logger
from spendmate.config import get_settings
from spendmate.export import build_csv, export_filename, render_print_view
from spendmate.models import (
    AuditEventBuilder,
    ExpenseCategory,
    ExpenseForm,
    ExpenseRecord,
    ValidationResult,
)
from spendmate.services.storage import (
    JsonFileStorage,
    KeyValueStorageInterface,
    NotFoundError,
)
from spendmate.store import ExpenseStore
from spendmate.validation import ExpenseValidator


logger = structlog.get_logger(__name__)


SCAN_FAILURE_MESSAGE = "Could not scan receipt. Please enter details manually."
SCAN_SUCCESS_MESSAGE = "Receipt scanned. Review the details and save."
SCAN_UNAVAILABLE_MESSAGE = "Receipt scanning is not configured. Please enter details manually."
EMPTY_UPLOAD_MESSAGE = "The uploaded file is empty."


class ExpenseEntryFlow:
    """
    Orchestrates adding, editing and removing expenses.

    Flow (add / edit):
    1. Optional: Scan receipt -> pre-filled ExpenseForm
    2. User reviews and edits the form
    3. Validate -> on failure, report inline and save nothing
    4. Save -> store.add (new) or store.update (editing)
    """

    def __init__(
        self,
        store: ExpenseStore,
        receipt_agent: Optional[ReceiptAgent] = None,
        validator: Optional[ExpenseValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._receipt_agent = receipt_agent
        self._validator = validator or ExpenseValidator()
        self._audit_logger = audit_logger or get_audit_logger()
        self._app_settings = get_settings().app

    @property
    def can_scan(self) -> bool:
        return self._receipt_agent is not None

    def check_upload(self, filename: str, file_size: int) -> tuple[bool, str]:
        """
        Check an upload before it is sent anywhere.

        Returns:
            (is_acceptable, message)
        """
        if file_size <= 0:
            return False, EMPTY_UPLOAD_MESSAGE

        extension = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
        allowed = self._app_settings.supported_formats_list
        if extension not in allowed:
            return False, f"Unsupported file type. Please upload one of: {', '.join(allowed)}"

        if file_size > self._app_settings.max_upload_size_bytes:
            return False, f"File is too large. Maximum size is {self._app_settings.max_upload_size_mb} MB."

        return True, ""

    async def scan_receipt(
        self,
        image_bytes: bytes,
        filename: str,
        mime_type: str,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[Optional[ExpenseForm], str]:
        """
        Read a receipt photo into a pre-filled form.

        Returns:
            (form, message). form is None when the upload was rejected
            or the scan failed; the user then enters details manually.
        """
        correlation_id = correlation_id or create_correlation_id()

        if not self.can_scan:
            return None, SCAN_UNAVAILABLE_MESSAGE

        ok, message = self.check_upload(filename, len(image_bytes))
        if not ok:
            return None, message

        try:
            receipt = await self._receipt_agent.parse_receipt(image_bytes, mime_type)
        except ReceiptParseError as e:
            self._audit_logger.log(AuditEventBuilder.receipt_parse_failed(
                error_message=str(e),
                correlation_id=correlation_id,
            ))
            return None, SCAN_FAILURE_MESSAGE

        self._audit_logger.log(AuditEventBuilder.receipt_parsed(
            merchant=receipt.merchant,
            amount=str(receipt.amount),
            correlation_id=correlation_id,
        ))
        return ExpenseForm.from_receipt(receipt), SCAN_SUCCESS_MESSAGE

    def save_expense(
        self,
        form: ExpenseForm,
        editing_id: Optional[UUID] = None,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[Optional[ExpenseRecord], ValidationResult, str]:
        """
        Validate and save a form.

        When editing_id is given the existing expense is replaced and
        keeps its id; otherwise a new expense is added at the front.

        Returns:
            (record, validation_result, message). record is None when
            nothing was saved.
        """
        result = self._validator.validate(form)
        if not result.is_valid:
            self._audit_logger.log(AuditEventBuilder.validation_failed(
                fields=result.error_fields,
                correlation_id=correlation_id,
            ))
            return None, result, self._validator.get_user_friendly_summary(result)

        record = self._validator.to_record(form, expense_id=editing_id)

        if editing_id is None:
            self._store.add(record)
            return record, result, "Expense added."

        try:
            self._store.update(record)
        except NotFoundError:
            return None, result, "This expense no longer exists."
        return record, result, "Expense updated."

    def delete_expense(self, expense_id: UUID) -> bool:
        return self._store.delete(expense_id)

    def bulk_delete(self, expense_ids: Iterable[UUID]) -> int:
        return self._store.bulk_delete(expense_ids)

    def bulk_update_category(self, expense_ids: Iterable[UUID], category: ExpenseCategory) -> int:
        return self._store.bulk_update_category(expense_ids, category)


class InsightFlow:
    """
    Orchestrates the AI spending summary.

    Always returns a displayable string.
    """

    def __init__(
        self,
        store: ExpenseStore,
        insight_agent: Optional[InsightAgent] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._insight_agent = insight_agent
        self._audit_logger = audit_logger or get_audit_logger()

    @property
    def is_available(self) -> bool:
        return self._insight_agent is not None

    async def generate(self) -> str:
        """Summarise the store's expenses, newest first."""
        if not self.is_available:
            return INSIGHT_FAILURE_MESSAGE

        expenses = self._store.expenses
        text = await self._insight_agent.generate_insights(expenses)

        if text in (INSIGHT_FAILURE_MESSAGE, EMPTY_INSIGHT_MESSAGE):
            self._audit_logger.log(AuditEventBuilder.insights_failed(text))
        elif text != NO_EXPENSES_MESSAGE:
            self._audit_logger.log(AuditEventBuilder.insights_generated(len(expenses)))

        return text


class ReportFlow:
    """
    Exports whatever list the user is currently looking at.

    Building an export is free of side effects; the download is
    audited separately through record_download, since the UI renders
    export content before the user clicks anything.
    """

    def __init__(self, audit_logger: Optional[AuditLogger] = None):
        self._audit_logger = audit_logger or get_audit_logger()

    def export_csv(self, records: Sequence[ExpenseRecord]) -> tuple[str, str]:
        """
        Returns:
            (filename, csv_text)
        """
        return export_filename(), build_csv(records)

    def print_view(self, records: Sequence[ExpenseRecord]) -> str:
        return render_print_view(records)

    def record_download(self, export_format: str, row_count: int) -> None:
        self._audit_logger.log(AuditEventBuilder.export_generated(export_format, row_count))


def create_app_components(
    storage: Optional[KeyValueStorageInterface] = None,
    use_ai: bool = True,
) -> tuple[ExpenseStore, ExpenseEntryFlow, InsightFlow, ReportFlow]:
    """
    Factory function to create all application components.

    Args:
        storage: Key-value backend. Defaults to the JSON file from
                 StorageSettings.
        use_ai: Whether to initialize the Gemini agents.
                Set to False for testing without an API key.

    Returns:
        (store, entry_flow, insight_flow, report_flow)
    """
    audit_logger = get_audit_logger()
    store = ExpenseStore.open(storage or JsonFileStorage(), audit_logger=audit_logger)

    receipt_agent = None
    insight_agent = None
    if use_ai:
        try:
            receipt_agent = ReceiptAgent()
            insight_agent = InsightAgent()
        except Exception as e:
            # Gemini not configured - the tracker works without it
            logger.warning("ai_not_configured", error=str(e))
            audit_logger.log(AuditEventBuilder.system_error(
                error_type="ai_not_configured",
                error_message=str(e),
                details={"service": "gemini"},
            ))
            receipt_agent = None
            insight_agent = None

    entry_flow = ExpenseEntryFlow(
        store,
        receipt_agent=receipt_agent,
        audit_logger=audit_logger,
    )
    insight_flow = InsightFlow(
        store,
        insight_agent=insight_agent,
        audit_logger=audit_logger,
    )
    report_flow = ReportFlow(audit_logger=audit_logger)

    return store, entry_flow, insight_flow, report_flow

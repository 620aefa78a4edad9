"""
Tests for SpendMate data models

Test strategy:
1. Unit tests for individual components (models, validators)
2. Integration tests for flows (with fake AI models)
3. No real API calls in tests
"""

import pytest
from datetime import date
from decimal import Decimal
from uuid import uuid4

from pydantic import ValidationError

from spendmate.models import (
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
    BudgetUsage,
    CategoryTotal,
    ExpenseCategory,
    ExpenseForm,
    ExpenseRecord,
    ExpenseStats,
    FilterState,
    ReceiptData,
    SortOrder,
    ValidationIssue,
    ValidationResult,
    to_money,
)


class TestMoney:
    """Tests for amount normalisation."""

    def test_quantizes_to_cents(self):
        assert to_money("12.345") == Decimal("12.34")
        assert to_money(5) == Decimal("5.00")
        assert to_money(" 7.5 ") == Decimal("7.50")

    def test_float_goes_through_string(self):
        """0.1 must not pick up binary float noise."""
        assert to_money(0.1) == Decimal("0.10")

    @pytest.mark.parametrize("value", ["abc", "", None, True, "NaN", "Infinity"])
    def test_rejects_non_numbers(self, value):
        with pytest.raises(ValueError):
            to_money(value)


class TestExpenseCategory:
    """Tests for category coercion."""

    def test_exact_value(self):
        assert ExpenseCategory.coerce("Food") == ExpenseCategory.FOOD

    def test_case_insensitive(self):
        assert ExpenseCategory.coerce("  transport ") == ExpenseCategory.TRANSPORT

    def test_unknown_falls_back_to_other(self):
        assert ExpenseCategory.coerce("Groceries") == ExpenseCategory.OTHER
        assert ExpenseCategory.coerce(None) == ExpenseCategory.OTHER
        assert ExpenseCategory.coerce(42) == ExpenseCategory.OTHER

    def test_enum_passthrough(self):
        assert ExpenseCategory.coerce(ExpenseCategory.HEALTH) == ExpenseCategory.HEALTH


class TestExpenseRecord:
    """Tests for the core expense model."""

    def test_creation(self):
        """Test ExpenseRecord creation with defaults."""
        record = ExpenseRecord(merchant="Starbucks", amount="4.50", date=date(2024, 1, 5))
        assert record.merchant == "Starbucks"
        assert record.amount == Decimal("4.50")
        assert record.category == ExpenseCategory.OTHER
        assert record.notes is None
        assert record.is_recurring is False
        assert record.id is not None

    def test_strips_whitespace(self):
        record = ExpenseRecord(merchant="  Walmart  ", amount=1, date=date(2024, 1, 5))
        assert record.merchant == "Walmart"

    def test_rejects_blank_merchant(self):
        with pytest.raises(ValidationError):
            ExpenseRecord(merchant="   ", amount=1, date=date(2024, 1, 5))

    @pytest.mark.parametrize("amount", [0, "-5", "0.001"])
    def test_rejects_non_positive_amount(self, amount):
        """Amounts that round to zero or below are rejected."""
        with pytest.raises(ValidationError):
            ExpenseRecord(merchant="X", amount=amount, date=date(2024, 1, 5))

    def test_unknown_category_becomes_other(self):
        record = ExpenseRecord(merchant="X", amount=1, date=date(2024, 1, 5), category="Pets")
        assert record.category == ExpenseCategory.OTHER

    def test_id_is_frozen(self):
        record = ExpenseRecord(merchant="X", amount=1, date=date(2024, 1, 5))
        with pytest.raises(ValidationError):
            record.id = uuid4()

    def test_storage_dict_uses_camel_case_flag(self):
        record = ExpenseRecord(
            merchant="Netflix",
            amount="15.99",
            date=date(2024, 2, 1),
            category=ExpenseCategory.ENTERTAINMENT,
            is_recurring=True,
        )
        data = record.to_storage_dict()
        assert data["isRecurring"] is True
        assert data["date"] == "2024-02-01"
        assert data["category"] == "Entertainment"
        assert data["id"] == str(record.id)

    def test_reads_storage_dict(self):
        """Records written by to_storage_dict load back unchanged."""
        original = ExpenseRecord(merchant="Netflix", amount="15.99", date=date(2024, 2, 1), is_recurring=True)
        loaded = ExpenseRecord.model_validate(original.to_storage_dict())
        assert loaded == original

    def test_missing_recurring_flag_is_false(self):
        record = ExpenseRecord.model_validate({
            "merchant": "Shell",
            "amount": 40,
            "date": "2024-01-10",
            "isRecurring": None,
        })
        assert record.is_recurring is False


class TestReceiptData:
    """Tests for scanned receipt data."""

    def test_defaults(self):
        receipt = ReceiptData()
        assert receipt.merchant == "Unknown Merchant"
        assert receipt.amount == Decimal("0.00")
        assert receipt.date == date.today()
        assert receipt.category == ExpenseCategory.OTHER

    def test_zero_amount_allowed(self):
        """The scanner may not find a total."""
        assert ReceiptData(amount=0).amount == Decimal("0.00")

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError):
            ReceiptData(amount=-1)


class TestExpenseForm:
    """Tests for the entry form model."""

    def test_blank_form(self):
        form = ExpenseForm()
        assert form.merchant == ""
        assert form.amount is None
        assert form.date is None
        assert form.category == ExpenseCategory.FOOD

    def test_from_record(self, make_expense):
        record = make_expense(notes="latte", is_recurring=True)
        form = ExpenseForm.from_record(record)
        assert form.merchant == record.merchant
        assert form.amount == record.amount
        assert form.notes == "latte"
        assert form.is_recurring is True

    def test_from_receipt_marks_notes(self):
        receipt = ReceiptData(merchant="Target", amount="23.10", date=date(2024, 3, 2), category="Shopping")
        form = ExpenseForm.from_receipt(receipt)
        assert form.merchant == "Target"
        assert form.amount == Decimal("23.10")
        assert form.category == ExpenseCategory.SHOPPING
        assert form.notes == "Scanned from receipt"


class TestValidationModels:
    """Tests for validation result models."""

    def test_validation_result_counts(self):
        result = ValidationResult(
            is_valid=False,
            issues=[
                ValidationIssue(field="merchant", issue_type="missing", message="m", severity="error"),
                ValidationIssue(field="notes", issue_type="hint", message="n", severity="info"),
            ],
        )
        assert result.has_errors
        assert result.error_count == 1
        assert result.error_fields == ["merchant"]

    def test_invalid_severity_rejected(self):
        with pytest.raises(ValidationError):
            ValidationIssue(field="x", issue_type="y", message="z", severity="fatal")


class TestQueryModels:
    """Tests for filter and statistics models."""

    def test_filter_state_defaults(self):
        filters = FilterState()
        assert filters.search == ""
        assert filters.category == "All"
        assert filters.sort_order == SortOrder.NEWEST

    def test_filter_state_accepts_category_name(self):
        assert FilterState(category="Food").category == ExpenseCategory.FOOD

    def test_highest_category(self):
        stats = ExpenseStats(
            total=Decimal("80"),
            count=2,
            average=Decimal("40"),
            category_totals=[
                CategoryTotal(category=ExpenseCategory.FOOD, total=Decimal("50")),
                CategoryTotal(category=ExpenseCategory.TRANSPORT, total=Decimal("30")),
            ],
        )
        assert stats.highest_category == "Food"
        assert stats.category_total_map()[ExpenseCategory.TRANSPORT] == Decimal("30")

    def test_highest_category_empty(self):
        stats = ExpenseStats(total=Decimal("0"), count=0, average=Decimal("0"))
        assert stats.highest_category == "N/A"

    def test_budget_usage_without_limit(self):
        usage = BudgetUsage(spent=Decimal("10"))
        assert not usage.has_limit
        assert usage.percentage is None


class TestAuditModels:
    """Tests for audit event models."""

    def test_expense_added_event(self):
        expense_id = uuid4()
        event = AuditEventBuilder.expense_added(
            expense_id=expense_id,
            merchant="Starbucks",
            amount="4.50",
        )
        assert event.event_type == AuditEventType.EXPENSE_ADDED
        assert event.entity_id == expense_id
        assert event.severity == AuditSeverity.INFO

    def test_state_reset_is_warning(self):
        event = AuditEventBuilder.state_reset("gemini-expenses-data", "bad json")
        assert event.severity == AuditSeverity.WARNING
        assert event.error_message == "bad json"

    def test_to_log_dict(self):
        event = AuditEventBuilder.bulk_deleted(requested=3, removed=2)
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == AuditEventType.BULK_DELETED.value
        assert log_dict["details"]["removed"] == 2
        assert "timestamp" in log_dict

    def test_timestamp_is_timezone_aware(self):
        event = AuditEventBuilder.theme_changed("dark")
        assert event.timestamp.tzinfo is not None
        assert event.timestamp.utcoffset().total_seconds() == 0

"""Tests for manual entry validation."""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from spendmate.models import ExpenseCategory, ExpenseForm
from spendmate.validation import REQUIRED_FIELDS_MESSAGE, ExpenseValidator


@pytest.fixture
def validator():
    return ExpenseValidator()


def valid_form(**overrides):
    values = dict(
        merchant="Starbucks",
        amount=Decimal("4.50"),
        date=date(2024, 1, 5),
        category=ExpenseCategory.FOOD,
    )
    values.update(overrides)
    return ExpenseForm(**values)


class TestExpenseValidator:
    """Required fields, amount and notes checks."""

    def test_valid_form(self, validator):
        result = validator.validate(valid_form())
        assert result.is_valid
        assert result.issues == []
        assert validator.get_user_friendly_summary(result) == ""

    @pytest.mark.parametrize("field,value", [
        ("merchant", ""),
        ("merchant", "   "),
        ("amount", None),
        ("date", None),
    ])
    def test_missing_required_field(self, validator, field, value):
        result = validator.validate(valid_form(**{field: value}))
        assert not result.is_valid
        assert result.error_fields == [field]
        assert validator.get_user_friendly_summary(result) == REQUIRED_FIELDS_MESSAGE

    def test_blank_form_reports_every_missing_field(self, validator):
        result = validator.validate(ExpenseForm())
        assert result.error_fields == ["merchant", "amount", "date"]

    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-3")])
    def test_non_positive_amount(self, validator, amount):
        result = validator.validate(valid_form(amount=amount))
        assert not result.is_valid
        assert result.issues[0].issue_type == "invalid_value"
        assert "greater than zero" in validator.get_user_friendly_summary(result)

    def test_notes_too_long(self, validator):
        result = validator.validate(valid_form(notes="x" * 1001))
        assert not result.is_valid
        assert result.issues[0].issue_type == "too_long"


class TestToRecord:
    """Building records from validated forms."""

    def test_new_record(self, validator):
        record = validator.to_record(valid_form(notes="", is_recurring=True))
        assert record.merchant == "Starbucks"
        assert record.amount == Decimal("4.50")
        assert record.notes is None
        assert record.is_recurring is True

    def test_keeps_id_when_editing(self, validator):
        expense_id = uuid4()
        record = validator.to_record(valid_form(), expense_id=expense_id)
        assert record.id == expense_id

class TestRecordConstraints:
    """Anything that passes validation must build a stored record."""

    def test_merchant_at_limit(self, validator):
        result = validator.validate(valid_form(merchant="m" * 200))
        assert result.is_valid
        assert len(validator.to_record(valid_form(merchant="m" * 200)).merchant) == 200

    def test_merchant_over_limit(self, validator):
        result = validator.validate(valid_form(merchant="m" * 201))
        assert not result.is_valid
        assert result.error_fields == ["merchant"]
        assert result.issues[0].issue_type == "too_long"
        assert "200 characters" in validator.get_user_friendly_summary(result)

    @pytest.mark.parametrize("amount", [Decimal("0.004"), Decimal("0.005")])
    def test_amount_rounding_to_zero(self, validator, amount):
        result = validator.validate(valid_form(amount=amount))
        assert not result.is_valid
        assert result.issues[0].issue_type == "invalid_value"

    def test_sub_cent_amount_rounding_up(self, validator):
        form = valid_form(amount=Decimal("0.006"))
        assert validator.validate(form).is_valid
        assert validator.to_record(form).amount == Decimal("0.01")

    def test_notes_at_limit(self, validator):
        form = valid_form(notes="n" * 1000)
        assert validator.validate(form).is_valid
        assert len(validator.to_record(form).notes) == 1000

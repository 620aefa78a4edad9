"""
Manual Entry Validation

Checks a submitted expense form before anything reaches the store:
- merchant, amount and date are required
- amount must still be positive once rounded to cents
- merchant and notes are length-limited the same way the stored
  record is

IMPORTANT: Validation NEVER silently fixes issues.
It reports them inline and the entry is not saved.
"""

from typing import Optional
from uuid import UUID

from spendmate.models import (
    ExpenseForm,
    ExpenseRecord,
    ValidationIssue,
    ValidationResult,
    to_money,
)


REQUIRED_FIELDS_MESSAGE = "Please fill in all required fields."

MAX_MERCHANT_LENGTH = 200
MAX_NOTES_LENGTH = 1000


class ExpenseValidator:
    """Validates the add/edit expense form."""

    def validate(self, form: ExpenseForm) -> ValidationResult:
        """
        Validate a form submission.

        Returns a ValidationResult; is_valid is False when any
        error-level issue was found.
        """
        issues: list[ValidationIssue] = []

        if not form.merchant:
            issues.append(ValidationIssue(
                field="merchant",
                issue_type="missing",
                message="Merchant is required",
                severity="error",
            ))
        elif len(form.merchant) > MAX_MERCHANT_LENGTH:
            issues.append(ValidationIssue(
                field="merchant",
                issue_type="too_long",
                message=f"Merchant must be at most {MAX_MERCHANT_LENGTH} characters",
                severity="error",
            ))

        if form.amount is None:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="missing",
                message="Amount is required",
                severity="error",
            ))
        elif not self._is_positive_money(form.amount):
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount must be greater than zero",
                severity="error",
            ))

        if form.date is None:
            issues.append(ValidationIssue(
                field="date",
                issue_type="missing",
                message="Date is required",
                severity="error",
            ))

        if len(form.notes) > MAX_NOTES_LENGTH:
            issues.append(ValidationIssue(
                field="notes",
                issue_type="too_long",
                message=f"Notes must be at most {MAX_NOTES_LENGTH} characters",
                severity="error",
            ))

        is_valid = not any(issue.severity == "error" for issue in issues)
        return ValidationResult(is_valid=is_valid, issues=issues)

    @staticmethod
    def _is_positive_money(amount) -> bool:
        """True when the amount is still above zero at two decimal places."""
        try:
            return to_money(amount) > 0
        except ValueError:
            return False

    def to_record(
        self,
        form: ExpenseForm,
        expense_id: Optional[UUID] = None,
    ) -> ExpenseRecord:
        """
        Build the record for a form that passed validation.

        When editing, pass the existing id so the record replaces the
        original; otherwise a new id is assigned.
        """
        fields = dict(
            merchant=form.merchant,
            amount=form.amount,
            date=form.date,
            category=form.category,
            notes=form.notes or None,
            is_recurring=form.is_recurring,
        )
        if expense_id is not None:
            fields["id"] = expense_id
        return ExpenseRecord(**fields)

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """
        Message shown above the form.

        Missing fields get the single generic prompt; other problems
        are listed individually.
        """
        if result.is_valid:
            return ""

        if any(issue.issue_type == "missing" for issue in result.issues):
            return REQUIRED_FIELDS_MESSAGE

        return " ".join(issue.message + "." for issue in result.issues if issue.severity == "error")

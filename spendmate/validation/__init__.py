"""Validation package."""

from spendmate.validation.validator import (
    MAX_MERCHANT_LENGTH,
    MAX_NOTES_LENGTH,
    REQUIRED_FIELDS_MESSAGE,
    ExpenseValidator,
)

__all__ = [
    "MAX_MERCHANT_LENGTH",
    "MAX_NOTES_LENGTH",
    "REQUIRED_FIELDS_MESSAGE",
    "ExpenseValidator",
]

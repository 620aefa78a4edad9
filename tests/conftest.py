"""Shared fixtures for SpendMate tests."""

from datetime import date
from decimal import Decimal

import pytest

from spendmate.audit import AuditLogger
from spendmate.models import ExpenseCategory, ExpenseRecord
from spendmate.services.storage import InMemoryStorage
from spendmate.store import ExpenseStore


@pytest.fixture
def audit_logger():
    return AuditLogger()


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def store(storage, audit_logger):
    return ExpenseStore.open(storage, audit_logger=audit_logger, default_budget=Decimal("2000"))


@pytest.fixture
def make_expense():
    """Factory for expense records with sensible defaults."""
    def _make(
        merchant="Starbucks",
        amount="10.00",
        on=date(2024, 1, 5),
        category=ExpenseCategory.FOOD,
        notes=None,
        is_recurring=False,
    ):
        return ExpenseRecord(
            merchant=merchant,
            amount=amount,
            date=on,
            category=category,
            notes=notes,
            is_recurring=is_recurring,
        )
    return _make

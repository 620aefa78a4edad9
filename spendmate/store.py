"""
Expense Record Store

Holds the expense list, the overall budget, per-category budgets and
the theme preference. This is the only writer of persisted state.

DESIGN DECISION: Every mutation rewrites the affected key in full.
There is no change log and no partial update - the lists are small
and a full overwrite can never leave half-applied state behind.

Loading is forgiving: anything that cannot be parsed is replaced by
its default and logged, never raised. A user with a corrupt data file
gets an empty tracker, not a crash.
"""

import json
from decimal import Decimal
from typing import Iterable, Optional
from uuid import UUID

import structlog
from pydantic import ValidationError

from spendmate.audit import AuditLogger, get_audit_logger
from spendmate.config import get_settings
from spendmate.models import (
    AuditEventBuilder,
    CategoryBudgets,
    ExpenseCategory,
    ExpenseRecord,
    Theme,
    to_money,
)
from spendmate.services.storage import (
    DuplicateError,
    KeyValueStorageInterface,
    NotFoundError,
)


logger = structlog.get_logger(__name__)


class ExpenseStore:
    """
    Process-wide expense state, passed explicitly to whoever needs it.

    Expenses are kept newest-first: new records go to the front.
    Accessors return copies, so callers cannot mutate the store
    without going through a method that persists.
    """

    def __init__(
        self,
        storage: KeyValueStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        default_budget: Optional[Decimal] = None,
    ):
        self._storage = storage
        self._audit = audit_logger or get_audit_logger()
        self._keys = get_settings().storage
        self._default_budget = to_money(
            default_budget if default_budget is not None else get_settings().app.default_budget
        )

        self._expenses: list[ExpenseRecord] = []
        self._budget: Decimal = self._default_budget
        self._category_budgets: CategoryBudgets = {}
        self._theme: Theme = Theme.LIGHT

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    @classmethod
    def open(
        cls,
        storage: KeyValueStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        default_budget: Optional[Decimal] = None,
    ) -> "ExpenseStore":
        """Create a store and rehydrate it from storage."""
        store = cls(storage, audit_logger=audit_logger, default_budget=default_budget)
        store.load()
        return store

    def load(self) -> None:
        """
        Rehydrate all state from storage.

        Never raises for bad data: each key falls back to its default.
        """
        self._expenses = self._load_expenses()
        self._budget = self._load_budget()
        self._category_budgets = self._load_category_budgets()
        self._theme = self._load_theme()
        self._audit.log(AuditEventBuilder.state_loaded(len(self._expenses)))

    def _reset(self, key: str, error: str) -> None:
        self._audit.log(AuditEventBuilder.state_reset(key, error))

    def _load_expenses(self) -> list[ExpenseRecord]:
        key = self._keys.expenses_key
        raw = self._storage.get_item(key)
        if not raw:
            return []

        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError(f"expected a list, got {type(data).__name__}")
            records = [ExpenseRecord.model_validate(item) for item in data]
        except (ValueError, TypeError, ValidationError) as e:
            # ValidationError and JSONDecodeError are both ValueErrors
            self._reset(key, str(e))
            return []

        unique: list[ExpenseRecord] = []
        seen: set[UUID] = set()
        for record in records:
            if record.id in seen:
                logger.warning("duplicate_expense_id_dropped", expense_id=str(record.id))
                continue
            seen.add(record.id)
            unique.append(record)
        return unique

    def _load_budget(self) -> Decimal:
        key = self._keys.budget_key
        raw = self._storage.get_item(key)
        if not raw:
            return self._default_budget
        try:
            budget = to_money(raw)
        except ValueError as e:
            self._reset(key, str(e))
            return self._default_budget
        if budget <= 0:
            self._reset(key, f"budget must be positive, got {raw!r}")
            return self._default_budget
        return budget

    def _load_category_budgets(self) -> CategoryBudgets:
        key = self._keys.category_budgets_key
        raw = self._storage.get_item(key)
        if not raw:
            return {}
        try:
            data = json.loads(raw)
            if not isinstance(data, dict):
                raise ValueError(f"expected a mapping, got {type(data).__name__}")
            budgets: CategoryBudgets = {}
            valid_names = {category.value for category in ExpenseCategory}
            for name, value in data.items():
                if name not in valid_names or value is None:
                    continue
                amount = to_money(value)
                if amount > 0:
                    budgets[ExpenseCategory(name)] = amount
        except (ValueError, TypeError) as e:
            self._reset(key, str(e))
            return {}
        return budgets

    def _load_theme(self) -> Theme:
        raw = self._storage.get_item(self._keys.theme_key)
        try:
            return Theme(raw) if raw else Theme.LIGHT
        except ValueError:
            return Theme.LIGHT

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def _save_expenses(self) -> None:
        payload = [record.to_storage_dict() for record in self._expenses]
        self._storage.set_item(self._keys.expenses_key, json.dumps(payload))

    def _save_budget(self) -> None:
        self._storage.set_item(self._keys.budget_key, str(self._budget))

    def _save_category_budgets(self) -> None:
        payload = {category.value: str(amount) for category, amount in self._category_budgets.items()}
        self._storage.set_item(self._keys.category_budgets_key, json.dumps(payload))

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    @property
    def expenses(self) -> list[ExpenseRecord]:
        return list(self._expenses)

    @property
    def budget(self) -> Decimal:
        return self._budget

    @property
    def category_budgets(self) -> CategoryBudgets:
        return dict(self._category_budgets)

    @property
    def theme(self) -> Theme:
        return self._theme

    def __len__(self) -> int:
        return len(self._expenses)

    def get(self, expense_id: UUID) -> Optional[ExpenseRecord]:
        for record in self._expenses:
            if record.id == expense_id:
                return record
        return None

    # -------------------------------------------------------------------------
    # Single-record mutations
    # -------------------------------------------------------------------------

    def add(self, record: ExpenseRecord) -> ExpenseRecord:
        """
        Add a new expense at the front of the list.

        Raises:
            DuplicateError: If an expense with the same id exists
        """
        if self.get(record.id) is not None:
            raise DuplicateError(f"Expense already exists: {record.id}")
        self._expenses.insert(0, record)
        self._save_expenses()
        self._audit.log(AuditEventBuilder.expense_added(
            expense_id=record.id,
            merchant=record.merchant,
            amount=str(record.amount),
        ))
        return record

    def update(self, record: ExpenseRecord) -> ExpenseRecord:
        """
        Replace the stored expense that has the same id.

        Raises:
            NotFoundError: If no expense has that id
        """
        for idx, existing in enumerate(self._expenses):
            if existing.id == record.id:
                self._expenses[idx] = record
                self._save_expenses()
                self._audit.log(AuditEventBuilder.expense_updated(
                    expense_id=record.id,
                    merchant=record.merchant,
                    amount=str(record.amount),
                ))
                return record
        raise NotFoundError(f"Expense not found: {record.id}")

    def delete(self, expense_id: UUID) -> bool:
        """Delete one expense. Returns False if it was not there."""
        before = len(self._expenses)
        self._expenses = [e for e in self._expenses if e.id != expense_id]
        if len(self._expenses) == before:
            return False
        self._save_expenses()
        self._audit.log(AuditEventBuilder.expense_deleted(expense_id))
        return True

    # -------------------------------------------------------------------------
    # Bulk mutations
    # -------------------------------------------------------------------------

    def bulk_delete(self, expense_ids: Iterable[UUID]) -> int:
        """
        Remove every expense whose id is in the set.

        Ids that are not present are ignored. Returns how many were removed.
        """
        ids = set(expense_ids)
        before = len(self._expenses)
        self._expenses = [e for e in self._expenses if e.id not in ids]
        removed = before - len(self._expenses)
        self._save_expenses()
        self._audit.log(AuditEventBuilder.bulk_deleted(requested=len(ids), removed=removed))
        return removed

    def bulk_update_category(
        self,
        expense_ids: Iterable[UUID],
        category: ExpenseCategory,
    ) -> int:
        """
        Move every matching expense to a category.

        Only the category changes; every other field is copied as-is.
        Returns how many expenses matched.
        """
        ids = set(expense_ids)
        category = ExpenseCategory(category)
        changed = 0
        updated = []
        for record in self._expenses:
            if record.id in ids:
                record = record.model_copy(update={"category": category})
                changed += 1
            updated.append(record)
        self._expenses = updated
        self._save_expenses()
        self._audit.log(AuditEventBuilder.bulk_recategorized(
            category=category.value,
            requested=len(ids),
            changed=changed,
        ))
        return changed

    # -------------------------------------------------------------------------
    # Budgets and preferences
    # -------------------------------------------------------------------------

    def set_budget(self, amount) -> Decimal:
        """
        Set the overall budget.

        Raises:
            ValueError: If the amount is not a positive number
        """
        budget = to_money(amount)
        if budget <= 0:
            raise ValueError("Budget must be greater than zero")
        self._budget = budget
        self._save_budget()
        self._audit.log(AuditEventBuilder.budget_updated(str(budget)))
        return budget

    def set_category_budget(self, category: ExpenseCategory, amount) -> Optional[Decimal]:
        """
        Set or clear the budget for one category.

        None or zero clears the limit. Negative amounts are rejected.
        """
        category = ExpenseCategory(category)
        limit = None if amount is None else to_money(amount)
        if limit is not None and limit < 0:
            raise ValueError("Category budget cannot be negative")

        if limit:
            self._category_budgets[category] = limit
        else:
            self._category_budgets.pop(category, None)
        self._save_category_budgets()
        self._audit.log(AuditEventBuilder.category_budget_updated(
            category=category.value,
            amount=str(limit) if limit else "none",
        ))
        return limit or None

    def set_theme(self, theme: Theme) -> Theme:
        self._theme = Theme(theme)
        self._storage.set_item(self._keys.theme_key, self._theme.value)
        self._audit.log(AuditEventBuilder.theme_changed(self._theme.value))
        return self._theme

    def toggle_theme(self) -> Theme:
        return self.set_theme(Theme.DARK if self._theme == Theme.LIGHT else Theme.LIGHT)

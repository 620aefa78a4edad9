"""
Filter and Sort Pipeline for the expense list.

Pure functions: the store is never touched here. The list page
derives what to display, and the ids of the displayed rows feed
the bulk operations on the store.
"""

from datetime import date
from typing import Iterable, Optional
from uuid import UUID

from spendmate.models import (
    ALL_CATEGORIES,
    CategoryFilter,
    ExpenseCategory,
    ExpenseRecord,
    FilterState,
    SortOrder,
)


def matches_search(expense: ExpenseRecord, search: str) -> bool:
    """Case-insensitive substring match on merchant or notes."""
    if not search:
        return True
    needle = search.lower()
    if needle in expense.merchant.lower():
        return True
    return bool(expense.notes) and needle in expense.notes.lower()


def matches_category(expense: ExpenseRecord, category: CategoryFilter) -> bool:
    if category == ALL_CATEGORIES:
        return True
    return expense.category == ExpenseCategory(category)


def matches_date_range(
    expense: ExpenseRecord,
    start_date: Optional[date],
    end_date: Optional[date],
) -> bool:
    """Both bounds are inclusive; a missing bound is open."""
    if start_date and expense.date < start_date:
        return False
    if end_date and expense.date > end_date:
        return False
    return True


def filter_expenses(
    expenses: Iterable[ExpenseRecord],
    filters: FilterState,
) -> list[ExpenseRecord]:
    """Keep the expenses that pass every active filter, in original order."""
    return [
        e for e in expenses
        if matches_search(e, filters.search)
        and matches_category(e, filters.category)
        and matches_date_range(e, filters.start_date, filters.end_date)
    ]


def sort_expenses(
    expenses: Iterable[ExpenseRecord],
    sort_order: SortOrder,
) -> list[ExpenseRecord]:
    """
    Sort by date or amount.

    sorted() is stable, including with reverse=True, so equal keys
    keep their incoming order.
    """
    sort_order = SortOrder(sort_order)
    if sort_order == SortOrder.NEWEST:
        return sorted(expenses, key=lambda e: e.date, reverse=True)
    if sort_order == SortOrder.OLDEST:
        return sorted(expenses, key=lambda e: e.date)
    if sort_order == SortOrder.HIGHEST:
        return sorted(expenses, key=lambda e: e.amount, reverse=True)
    return sorted(expenses, key=lambda e: e.amount)


def apply_filters(
    expenses: Iterable[ExpenseRecord],
    filters: FilterState,
) -> list[ExpenseRecord]:
    """Filter, then sort the filtered subset."""
    return sort_expenses(filter_expenses(expenses, filters), filters.sort_order)


def toggle_select_all(
    selected: set[UUID],
    visible: Iterable[ExpenseRecord],
) -> set[UUID]:
    """
    The list's "select all" checkbox.

    If every visible row is already selected, clear the selection.
    Otherwise select exactly the visible rows.
    """
    visible_ids = {e.id for e in visible}
    if visible_ids and selected == visible_ids:
        return set()
    return visible_ids

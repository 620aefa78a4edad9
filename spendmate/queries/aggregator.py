"""
Expense Aggregation

DESIGN DECISION: Statistics are recomputed from the full list on every
change. There is no cache and no incremental state - personal expense
lists are small, and a pure function over the list is trivially correct.

Known limitation: month buckets are keyed by short month name only
("Jan", "Feb", ...). January 2024 and January 2025 land in the same
bucket.
"""

from decimal import Decimal
from typing import Iterable, Mapping, Optional

from spendmate.models import (
    BudgetUsage,
    CategoryTotal,
    ExpenseCategory,
    ExpenseRecord,
    ExpenseStats,
)


ZERO = Decimal("0")


def month_label(record: ExpenseRecord) -> str:
    """Short month name for the record's date, e.g. 'Jan'."""
    return record.date.strftime("%b")


def compute_stats(expenses: Iterable[ExpenseRecord]) -> ExpenseStats:
    """
    Derive summary statistics from an expense list.

    - total: sum of all amounts
    - count: number of expenses
    - average: total / count, or 0 for an empty list
    - category_totals: per-category sums, largest first (ties keep first-seen order)
    - month_totals: per-month sums keyed by short month name, first-seen order
    """
    expenses = list(expenses)

    total = sum((e.amount for e in expenses), ZERO)
    count = len(expenses)
    average = total / count if count else ZERO

    by_category: dict[ExpenseCategory, Decimal] = {}
    by_month: dict[str, Decimal] = {}
    for expense in expenses:
        by_category[expense.category] = by_category.get(expense.category, ZERO) + expense.amount
        label = month_label(expense)
        by_month[label] = by_month.get(label, ZERO) + expense.amount

    category_totals = sorted(
        (CategoryTotal(category=cat, total=amount) for cat, amount in by_category.items()),
        key=lambda entry: entry.total,
        reverse=True,
    )

    return ExpenseStats(
        total=total,
        count=count,
        average=average,
        category_totals=category_totals,
        month_totals=by_month,
    )


def budget_usage(spent: Decimal, limit: Optional[Decimal]) -> BudgetUsage:
    """
    How much of a limit has been spent.

    percentage = min(spent / limit * 100, 100). A missing or zero limit
    means "no limit set": no percentage and never over budget.
    """
    if not limit or limit <= 0:
        return BudgetUsage(spent=spent)

    percentage = min(float(spent / limit * 100), 100.0)
    return BudgetUsage(
        spent=spent,
        limit=limit,
        percentage=percentage,
        is_over_budget=spent > limit,
    )


def category_budget_usage(
    stats: ExpenseStats,
    category_budgets: Mapping[ExpenseCategory, Decimal],
) -> dict[ExpenseCategory, BudgetUsage]:
    """
    Budget usage for every category, in enum order.

    Categories without spending report 0 spent.
    """
    totals = stats.category_total_map()
    return {
        category: budget_usage(totals.get(category, ZERO), category_budgets.get(category))
        for category in ExpenseCategory
    }

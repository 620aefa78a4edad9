"""Aggregation and list-query package."""

from spendmate.queries.aggregator import (
    budget_usage,
    category_budget_usage,
    compute_stats,
    month_label,
)
from spendmate.queries.filters import (
    apply_filters,
    filter_expenses,
    matches_search,
    sort_expenses,
    toggle_select_all,
)

__all__ = [
    "apply_filters",
    "budget_usage",
    "category_budget_usage",
    "compute_stats",
    "filter_expenses",
    "matches_search",
    "month_label",
    "sort_expenses",
    "toggle_select_all",
]

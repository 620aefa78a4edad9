"""Tests for the expense list filter/sort pipeline."""

from datetime import date
from decimal import Decimal

import pytest

from spendmate.models import ExpenseCategory, FilterState, SortOrder
from spendmate.queries import (
    apply_filters,
    filter_expenses,
    matches_search,
    sort_expenses,
    toggle_select_all,
)


@pytest.fixture
def expenses(make_expense):
    return [
        make_expense(merchant="Starbucks", amount=5, on=date(2024, 1, 5), category=ExpenseCategory.FOOD),
        make_expense(merchant="Walmart", amount=80, on=date(2024, 1, 20), category=ExpenseCategory.SHOPPING,
                     notes="weekly groceries"),
        make_expense(merchant="Uber", amount=22, on=date(2024, 2, 3), category=ExpenseCategory.TRANSPORT),
        make_expense(merchant="Shell", amount=45, on=date(2024, 2, 14), category=ExpenseCategory.TRANSPORT),
    ]


class TestSearch:
    """Case-insensitive search over merchant and notes."""

    def test_star_matches_starbucks_not_walmart(self, make_expense):
        assert matches_search(make_expense(merchant="Starbucks"), "star")
        assert not matches_search(make_expense(merchant="Walmart"), "star")

    def test_searches_notes(self, expenses):
        result = filter_expenses(expenses, FilterState(search="GROCER"))
        assert [e.merchant for e in result] == ["Walmart"]

    def test_empty_search_matches_everything(self, expenses):
        assert filter_expenses(expenses, FilterState()) == expenses


class TestFilters:
    """Category and date-range filters."""

    def test_category(self, expenses):
        result = filter_expenses(expenses, FilterState(category=ExpenseCategory.TRANSPORT))
        assert [e.merchant for e in result] == ["Uber", "Shell"]

    def test_all_categories(self, expenses):
        assert len(filter_expenses(expenses, FilterState(category="All"))) == 4

    def test_date_range_is_inclusive(self, expenses):
        result = filter_expenses(
            expenses,
            FilterState(start_date=date(2024, 1, 20), end_date=date(2024, 2, 3)),
        )
        assert [e.merchant for e in result] == ["Walmart", "Uber"]

    def test_open_ended_range(self, expenses):
        result = filter_expenses(expenses, FilterState(start_date=date(2024, 2, 1)))
        assert [e.merchant for e in result] == ["Uber", "Shell"]

    def test_filters_combine(self, expenses):
        result = filter_expenses(
            expenses,
            FilterState(search="u", category=ExpenseCategory.TRANSPORT, end_date=date(2024, 2, 10)),
        )
        assert [e.merchant for e in result] == ["Uber"]

    def test_filtering_is_idempotent(self, expenses):
        filters = FilterState(search="s", category="All", start_date=date(2024, 1, 1))
        once = filter_expenses(expenses, filters)
        assert filter_expenses(once, filters) == once


class TestSort:
    """Sort orders over the filtered subset."""

    def test_newest_and_oldest(self, expenses):
        newest = sort_expenses(expenses, SortOrder.NEWEST)
        assert [e.merchant for e in newest] == ["Shell", "Uber", "Walmart", "Starbucks"]
        oldest = sort_expenses(expenses, SortOrder.OLDEST)
        assert oldest == list(reversed(newest))

    def test_highest_is_reverse_of_lowest(self, expenses):
        highest = sort_expenses(expenses, SortOrder.HIGHEST)
        lowest = sort_expenses(expenses, SortOrder.LOWEST)
        assert [e.amount for e in highest] == [Decimal("80"), Decimal("45"), Decimal("22"), Decimal("5")]
        assert highest == list(reversed(lowest))

    def test_ties_keep_incoming_order(self, make_expense):
        a = make_expense(merchant="A", amount=10)
        b = make_expense(merchant="B", amount=10)
        assert sort_expenses([a, b], SortOrder.HIGHEST) == [a, b]
        assert sort_expenses([a, b], SortOrder.LOWEST) == [a, b]

    def test_sort_applies_to_filtered_subset(self, expenses):
        result = apply_filters(
            expenses,
            FilterState(category=ExpenseCategory.TRANSPORT, sort_order=SortOrder.HIGHEST),
        )
        assert [e.merchant for e in result] == ["Shell", "Uber"]


class TestSelectAll:
    """The list's select-all toggle."""

    def test_selects_all_visible(self, expenses):
        assert toggle_select_all(set(), expenses) == {e.id for e in expenses}

    def test_partial_selection_selects_all(self, expenses):
        assert toggle_select_all({expenses[0].id}, expenses) == {e.id for e in expenses}

    def test_full_selection_clears(self, expenses):
        assert toggle_select_all({e.id for e in expenses}, expenses) == set()

    def test_empty_view(self):
        assert toggle_select_all(set(), []) == set()

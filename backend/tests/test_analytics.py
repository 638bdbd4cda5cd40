from datetime import datetime

import pytest

from conftest import make_budget, make_tx
from finance_tracker.services.analytics import (
    budget_comparison,
    category_summary,
    dashboard_stats,
    monthly_expenses,
    recent_transactions,
)


class TestCategorySummary:
    def test_two_category_split(self):
        txns = [
            make_tx("expense", 1200, "Food & Dining", "2024-01-16"),
            make_tx("expense", 800, "Utilities", "2024-01-17"),
        ]
        assert category_summary(txns) == [
            {"category": "Food & Dining", "amount": 1200.0, "count": 1, "percentage": 60.0},
            {"category": "Utilities", "amount": 800.0, "count": 1, "percentage": 40.0},
        ]

    def test_income_ignored(self):
        txns = [
            make_tx("income", 5000, "Salary"),
            make_tx("expense", 100, "Gas"),
        ]
        result = category_summary(txns)
        assert [r["category"] for r in result] == ["Gas"]
        assert result[0]["percentage"] == 100.0

    def test_groups_sum_and_count(self):
        txns = [
            make_tx("expense", 10.25, "Gas"),
            make_tx("expense", 4.75, "Gas"),
            make_tx("expense", 30, "Shopping"),
        ]
        result = category_summary(txns)
        assert result[0]["category"] == "Shopping"
        assert result[0]["percentage"] == pytest.approx(200 / 3)
        assert result[1]["amount"] == 15.0
        assert result[1]["count"] == 2

    def test_percentages_sum_to_100(self):
        txns = [
            make_tx("expense", 33.33, "Gas"),
            make_tx("expense", 12.10, "Travel"),
            make_tx("expense", 7.01, "Other"),
            make_tx("expense", 99.99, "Shopping"),
        ]
        result = category_summary(txns)
        assert sum(r["percentage"] for r in result) == pytest.approx(100.0)
        total = sum(r["amount"] for r in result)
        assert sum(r["percentage"] / 100 * total for r in result) == pytest.approx(total)

    def test_date_range_inclusive(self):
        txns = [
            make_tx("expense", 10, "Gas", "2024-01-31"),
            make_tx("expense", 20, "Gas", "2024-02-01"),
            make_tx("expense", 40, "Gas", "2024-02-29"),
            make_tx("expense", 80, "Gas", "2024-03-01"),
        ]
        result = category_summary(txns, "2024-02-01", "2024-02-29")
        assert result == [{"category": "Gas", "amount": 60.0, "count": 2, "percentage": 100.0}]

    def test_open_ended_range(self):
        txns = [
            make_tx("expense", 10, "Gas", "2024-01-31"),
            make_tx("expense", 20, "Gas", "2024-02-01"),
        ]
        assert category_summary(txns, start_date="2024-02-01")[0]["amount"] == 20.0
        assert category_summary(txns, end_date="2024-01-31")[0]["amount"] == 10.0

    def test_ties_keep_discovery_order(self):
        txns = [
            make_tx("expense", 50, "Travel"),
            make_tx("expense", 50, "Education"),
            make_tx("expense", 50, "Gas"),
        ]
        assert [r["category"] for r in category_summary(txns)] == ["Travel", "Education", "Gas"]

    def test_empty(self):
        assert category_summary([]) == []

    def test_idempotent(self):
        txns = [
            make_tx("expense", 12.5, "Gas"),
            make_tx("expense", 7.5, "Travel"),
        ]
        assert category_summary(txns) == category_summary(txns)


class TestMonthlyExpenses:
    def test_grouped_and_sorted(self):
        txns = [
            make_tx("expense", 300, "Gas", "2024-02-10"),
            make_tx("expense", 1000, "Gas", "2024-01-05"),
            make_tx("expense", 1000, "Travel", "2024-02-11"),
            make_tx("income", 9999, "Salary", "2024-03-01"),
        ]
        assert monthly_expenses(txns) == [
            {"month": "2024-01", "amount": 1000.0, "count": 1},
            {"month": "2024-02", "amount": 1300.0, "count": 2},
        ]

    def test_year_boundary_ordering(self):
        txns = [
            make_tx("expense", 1, "Gas", "2024-01-01"),
            make_tx("expense", 1, "Gas", "2023-12-31"),
        ]
        assert [m["month"] for m in monthly_expenses(txns)] == ["2023-12", "2024-01"]

    def test_short_date_skipped(self):
        txns = [
            make_tx("expense", 5, "Gas", "2024"),
            make_tx("expense", 5, "Gas", "2024-04-02"),
        ]
        assert monthly_expenses(txns) == [{"month": "2024-04", "amount": 5.0, "count": 1}]

    def test_empty(self):
        assert monthly_expenses([]) == []


class TestBudgetComparison:
    def test_actual_remaining_percentage(self):
        budgets = [make_budget("Food & Dining", "2024-03", 500)]
        txns = [
            make_tx("expense", 125, "Food & Dining", "2024-03-02"),
            make_tx("expense", 250, "Food & Dining", "2024-03-31"),
            make_tx("expense", 999, "Food & Dining", "2024-04-01"),
            make_tx("income", 999, "Food & Dining", "2024-03-05"),
        ]
        assert budget_comparison(budgets, txns, "2024-03") == [
            {
                "category": "Food & Dining",
                "budgeted": 500.0,
                "actual": 375.0,
                "remaining": 125.0,
                "percentage": 75.0,
            }
        ]

    def test_overspend_gives_negative_remaining(self):
        budgets = [make_budget("Gas", "2024-03", 100)]
        txns = [make_tx("expense", 150, "Gas", "2024-03-10")]
        row = budget_comparison(budgets, txns, "2024-03")[0]
        assert row["remaining"] == -50.0
        assert row["percentage"] == 150.0

    def test_unbudgeted_category_omitted(self):
        budgets = [make_budget("Gas", "2024-03", 100)]
        txns = [
            make_tx("expense", 10, "Gas", "2024-03-10"),
            make_tx("expense", 500, "Shopping", "2024-03-10"),
        ]
        assert [r["category"] for r in budget_comparison(budgets, txns, "2024-03")] == ["Gas"]

    def test_other_month_budgets_ignored(self):
        budgets = [make_budget("Gas", "2024-02", 100), make_budget("Gas", "2024-03", 200)]
        result = budget_comparison(budgets, [], "2024-03")
        assert result == [
            {"category": "Gas", "budgeted": 200.0, "actual": 0.0, "remaining": 200.0, "percentage": 0.0}
        ]

    def test_zero_budget_has_zero_percentage(self):
        budgets = [make_budget("Gas", "2024-03", 0)]
        txns = [make_tx("expense", 10, "Gas", "2024-03-10")]
        assert budget_comparison(budgets, txns, "2024-03")[0]["percentage"] == 0.0

    def test_short_month_window(self):
        budgets = [make_budget("Gas", "2023-02", 100)]
        txns = [
            make_tx("expense", 10, "Gas", "2023-02-28"),
            make_tx("expense", 20, "Gas", "2023-03-01"),
        ]
        assert budget_comparison(budgets, txns, "2023-02")[0]["actual"] == 10.0

    def test_empty(self):
        assert budget_comparison([], [], "2024-03") == []


class TestDashboardStats:
    def test_totals(self):
        txns = [
            make_tx("income", 5000, "Salary"),
            make_tx("expense", 1200, "Food & Dining"),
            make_tx("expense", 800, "Bills & Utilities"),
        ]
        stats = dashboard_stats(txns)
        assert stats["total_income"] == 5000.0
        assert stats["total_expenses"] == 2000.0
        assert stats["net_amount"] == 3000.0
        assert stats["transaction_count"] == 3

    def test_top_categories_capped_at_five(self):
        cats = ["Gas", "Travel", "Other", "Shopping", "Education", "Healthcare", "Insurance"]
        txns = [make_tx("expense", 10 * (i + 1), c) for i, c in enumerate(cats)]
        top = dashboard_stats(txns)["top_categories"]
        assert len(top) == 5
        assert [t["category"] for t in top] == ["Insurance", "Healthcare", "Education", "Shopping", "Other"]

    def test_recent_transactions_order(self):
        older = make_tx("expense", 1, "Gas", "2024-01-10", datetime(2024, 1, 10, 9), id_=1)
        same_day_early = make_tx("expense", 1, "Gas", "2024-01-12", datetime(2024, 1, 12, 8), id_=2)
        same_day_late = make_tx("expense", 1, "Gas", "2024-01-12", datetime(2024, 1, 12, 20), id_=3)
        newest = make_tx("income", 1, "Salary", "2024-01-15", datetime(2024, 1, 1), id_=4)
        ordered = recent_transactions([older, same_day_early, same_day_late, newest])
        assert [t.id for t in ordered] == [4, 3, 2, 1]

    def test_recent_transactions_limited_to_five(self):
        txns = [make_tx("expense", 1, "Gas", f"2024-01-{d:02d}", id_=d) for d in range(1, 9)]
        recent = dashboard_stats(txns)["recent_transactions"]
        assert [t.id for t in recent] == [8, 7, 6, 5, 4]

    def test_empty(self):
        assert dashboard_stats([]) == {
            "total_income": 0.0,
            "total_expenses": 0.0,
            "net_amount": 0.0,
            "transaction_count": 0,
            "top_categories": [],
            "recent_transactions": [],
        }

    def test_idempotent(self):
        txns = [
            make_tx("income", 100, "Salary", "2024-01-01", id_=1),
            make_tx("expense", 40, "Gas", "2024-01-02", id_=2),
        ]
        assert dashboard_stats(txns) == dashboard_stats(txns)

"""Tests for the deterministic advisors."""

from datetime import date

import pytest

from flowguide.agents import (
    AdviceAdvisor,
    BudgetPlanner,
    MonthlyReportBuilder,
    ReceiptExtractor,
    SpendingForecaster,
    add_months,
    health_score,
    smart_insights,
)
from flowguide.models import AdviceCategory

from conftest import ScriptedRandom


def txn(type_, amount, day, category=None):
    return {"type": type_, "amount": amount, "date": day, "category": category}


class TestAddMonths:
    def test_clamps_day_to_month_end(self):
        assert add_months(date(2025, 1, 31), 1) == date(2025, 2, 28)

    def test_crosses_year_boundary(self):
        assert add_months(date(2024, 12, 1), 1) == date(2025, 1, 1)
        assert add_months(date(2025, 1, 15), -1) == date(2024, 12, 15)


class TestBudgetPlanner:
    """Budget plans from fixed percentages."""

    def test_plan_contents(self):
        plan = BudgetPlanner().build_plan("u1", 5000, fixed_expenses=1200, age=34)

        assert plan.emergency_fund_target == 30000
        assert plan.budget_percentages["housing"] == 30
        assert sum(plan.budget_percentages.values()) == 100
        assert plan.investment_split == {"stocks": 60, "bonds": 30, "cash": 10}
        assert plan.lifestyle == "moderate"
        assert plan.savings_plan.startswith(
            "Based on your income of $5000.00, we recommend saving $1000.00 per month (20% of income)."
        )

    def test_plan_is_storable(self):
        record = BudgetPlanner().build_plan("u1", 3000).to_record()
        assert record["user_id"] == "u1"
        assert record["fixed_expenses"] == 0


class TestMonthlyReport:
    """Report for the calendar month before today."""

    def test_previous_month_summary(self):
        transactions = [
            txn("income", 5000, "2025-02-01", "Salary"),
            txn("expense", 2100, "2025-02-03T10:00:00.000Z", "Housing"),
            txn("expense", 300, "2025-02-20", "Food"),
            txn("expense", 999, "2025-03-02", "Food"),
            txn("expense", 999, "2025-01-31", "Food"),
        ]

        report = MonthlyReportBuilder().build("u1", transactions, date(2025, 3, 15))

        assert report.month == "2025-02"
        assert report.total_income == 5000
        assert report.total_expenses == 2400
        assert report.biggest_category == "Housing"
        assert report.biggest_category_amount == 2100
        assert report.good_habits == ["Maintained positive cash flow", "Consistent financial monitoring"]
        assert report.bad_habits == ["High spending in Housing"]
        assert report.suggestions == [
            "Great job! Consider increasing savings",
            "Review your Housing expenses for optimization",
            "Set up automatic savings transfers",
        ]

    def test_overspending_month(self):
        transactions = [txn("expense", 50, f"2025-01-{day:02d}") for day in range(1, 13)]

        report = MonthlyReportBuilder().build("u1", transactions, date(2025, 2, 1))

        assert "Actively tracking expenses" in report.good_habits
        assert "Spending exceeded income" in report.bad_habits
        assert report.biggest_category is None
        assert report.suggestions[0] == "Consider reducing discretionary spending"
        assert report.suggestions[1] == "Track your expenses by category for better insights"


class TestSpendingForecast:
    def test_forecast_with_shortage(self):
        transactions = [
            txn("expense", 500, "2025-01-20"),
            txn("expense", 300, "2025-01-10"),
            txn("income", 2000, "2025-01-01"),
        ]

        forecast = SpendingForecaster().build("u1", transactions, 1000, date(2025, 1, 31))

        assert forecast.forecast_month == "2025-02"
        assert forecast.predicted_expenses == pytest.approx(840)
        assert forecast.predicted_income == 2000
        assert forecast.cash_shortage_date == "2025-02-28"
        assert forecast.overspend_risk == "low"
        assert forecast.safe_to_spend == pytest.approx(1160)
        assert forecast.confidence_score == 75

    def test_fallbacks_without_history(self):
        forecast = SpendingForecaster().build("u1", [], 0, date(2025, 12, 5))

        assert forecast.forecast_month == "2026-01"
        assert forecast.predicted_expenses == pytest.approx(1050)
        assert forecast.predicted_income == 2000
        assert forecast.cash_shortage_date is None
        assert forecast.safe_to_spend == pytest.approx(950)

    @pytest.mark.parametrize(
        "expenses, income, risk",
        [(1900, 2000, "high"), (1500, 2000, "medium"), (1000, 2000, "low")],
    )
    def test_overspend_risk(self, expenses, income, risk):
        assert SpendingForecaster().overspend_risk(expenses, income) == risk


class TestDashboardScoring:
    def test_health_score_caps_at_100(self):
        goals = [{"target_amount": 100, "current_amount": 150}]
        result = health_score(10000, 4000, goals, investment_count=3, member_count=2)

        assert result.score == 100
        assert result.level == "Excellent"
        assert result.recommendation == "Keep up the great financial habits!"

    def test_health_score_base(self):
        result = health_score(0, 100, [])

        assert result.score == 50
        assert result.level == "Fair"

    def test_health_score_good(self):
        goals = [{"target_amount": 100, "current_amount": 0}]
        result = health_score(1000, 800, goals)

        # 50 + 10 (ratio 0.8) + 5 (positive balance)
        assert result.score == 65
        assert result.level == "Good"

    def test_high_spending_insight(self):
        insights = smart_insights(1000, 900, [])

        assert [i.title for i in insights] == ["High Spending Alert"]
        assert insights[0].actionable is True

    def test_fallback_insight(self):
        insights = smart_insights(1000, 100, [])
        assert [i.title for i in insights] == ["Track More Transactions"]

    def test_insights_are_capped_at_three(self):
        goals = [{"target_amount": 10, "current_amount": 10}]
        insights = smart_insights(1000, 900, goals, balance=5000)

        assert [i.title for i in insights] == [
            "High Spending Alert",
            "Invest Your Surplus",
            "All Goals Achieved!",
        ]


class TestAdviceAdvisor:
    def test_emergency_answer(self):
        answer = AdviceAdvisor().answer(AdviceCategory.EMERGENCY, "How much?", 1500, 4000, 1000)
        assert "$3,000" in answer
        assert "50%" in answer

    def test_savings_answer_below_target(self):
        answer = AdviceAdvisor().answer("savings", "Enough?", 0, 5000, 4500)
        assert "$1,000" in answer
        assert "$500" in answer

    def test_planning_answer(self):
        answer = AdviceAdvisor().answer(AdviceCategory.PLANNING, "Remodel?", 0, 0, 0)
        assert "milestones" in answer


class TestReceiptExtractor:
    def test_extract_fields(self):
        extracted = ReceiptExtractor(rng=ScriptedRandom(default=0.5)).extract(date(2025, 2, 1))

        assert extracted == {
            "amount": 60.0,
            "merchant": "Starbucks",
            "date": "2025-02-01",
            "category": "Food",
            "tax": 5.0,
        }

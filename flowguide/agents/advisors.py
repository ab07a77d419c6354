"""
Advisors for FlowGuide

Everything the UI presents as "AI" output is produced here from plain
arithmetic over stored records and fixed text templates. There is no
model behind any of it: the same inputs always give the same output
(the receipt extractor is the one exception, it is a random mock).

BOUNDARIES:
- Advisors never touch the store. They take records in and hand back
  payload models; the orchestrator decides what to persist.
- Amounts are coerced with the same numeric rules as the entity API.
"""

import calendar
import random
from datetime import date, timedelta
from typing import Any, Iterable, Optional

from pydantic import BaseModel, Field

from flowguide.api.queries import parse_timestamp, to_number
from flowguide.models import (
    AdviceCategory,
    BudgetPlanCreate,
    MonthlyReportCreate,
    SpendingForecastCreate,
)

Record = dict[str, Any]


def add_months(base: date, months: int) -> date:
    """Shift a date by whole months, clamping the day to the target month."""
    total_month = (base.month - 1) + months
    year = base.year + total_month // 12
    month = (total_month % 12) + 1
    day = min(base.day, calendar.monthrange(year, month)[1])
    return base.replace(year=year, month=month, day=day)


def month_key(day: date) -> str:
    """Period string used by reports and forecasts (``YYYY-MM``)."""
    return f"{day.year:04d}-{day.month:02d}"


def _record_day(record: Record, field: str = "date") -> Optional[date]:
    value = record.get(field)
    if not value:
        return None
    moment = parse_timestamp(value)
    if moment.year == 1:
        return None
    return moment.date()


# =============================================================================
# RESULT MODELS
# =============================================================================

class HealthScore(BaseModel):
    """Financial health score shown on the dashboard."""

    score: int = Field(ge=0, le=100)
    level: str
    recommendation: str


class Insight(BaseModel):
    """One dashboard recommendation."""

    title: str
    description: str
    actionable: bool = False


# =============================================================================
# BUDGET PLANNER
# =============================================================================

class BudgetPlanner:
    """Builds a budget plan from income and fixed expenses."""

    BUDGET_PERCENTAGES = {
        "housing": 30,
        "food": 15,
        "transportation": 10,
        "savings": 20,
        "entertainment": 10,
        "healthcare": 5,
        "other": 10,
    }
    INVESTMENT_SPLIT = {"stocks": 60, "bonds": 30, "cash": 10}
    EMERGENCY_FUND_MONTHS = 6
    SAVINGS_RATE = 0.2

    def build_plan(
        self,
        user_id: str,
        income: float,
        fixed_expenses: Optional[float] = None,
        age: Optional[int] = None,
        responsibilities: Optional[str] = None,
        lifestyle: str = "moderate",
    ) -> BudgetPlanCreate:
        income = to_number(income)
        savings_plan = (
            f"Based on your income of ${income:.2f}, we recommend saving "
            f"${income * self.SAVINGS_RATE:.2f} per month ({self.SAVINGS_RATE:.0%} of income). "
            "This will help you build a strong financial foundation."
        )

        return BudgetPlanCreate(
            user_id=user_id,
            age=age or None,
            income=income,
            responsibilities=responsibilities or None,
            fixed_expenses=to_number(fixed_expenses),
            lifestyle=lifestyle,
            budget_percentages=dict(self.BUDGET_PERCENTAGES),
            savings_plan=savings_plan,
            emergency_fund_target=income * self.EMERGENCY_FUND_MONTHS,
            investment_split=dict(self.INVESTMENT_SPLIT),
        )


# =============================================================================
# MONTHLY REPORT
# =============================================================================

class MonthlyReportBuilder:
    """
    Summarizes the calendar month before ``today``.

    Habits and suggestions follow fixed rules:
    - positive cash flow and more than 10 transactions count as good habits
    - spending above income, or one category above 40% of income, count as bad
    """

    ACTIVE_TRACKING_THRESHOLD = 10
    CATEGORY_SHARE_LIMIT = 0.4

    def build(
        self,
        user_id: str,
        transactions: Iterable[Record],
        today: date,
    ) -> MonthlyReportCreate:
        month_start = add_months(today.replace(day=1), -1)
        month_end = today.replace(day=1) - timedelta(days=1)

        in_month = []
        for transaction in transactions:
            day = _record_day(transaction)
            if day is not None and month_start <= day <= month_end:
                in_month.append(transaction)

        income = sum(to_number(t.get("amount")) for t in in_month if t.get("type") == "income")
        expenses = sum(to_number(t.get("amount")) for t in in_month if t.get("type") == "expense")

        category_totals: dict[str, float] = {}
        for transaction in in_month:
            if transaction.get("type") != "expense" or not transaction.get("category"):
                continue
            category = transaction["category"]
            category_totals[category] = category_totals.get(category, 0.0) + to_number(
                transaction.get("amount")
            )

        biggest = max(category_totals.items(), key=lambda item: item[1], default=None)

        good_habits = []
        if income > expenses:
            good_habits.append("Maintained positive cash flow")
        if len(in_month) > self.ACTIVE_TRACKING_THRESHOLD:
            good_habits.append("Actively tracking expenses")
        good_habits.append("Consistent financial monitoring")

        bad_habits = []
        if expenses > income:
            bad_habits.append("Spending exceeded income")
        if biggest and biggest[1] > income * self.CATEGORY_SHARE_LIMIT:
            bad_habits.append(f"High spending in {biggest[0]}")

        suggestions = [
            "Consider reducing discretionary spending"
            if expenses > income
            else "Great job! Consider increasing savings",
            f"Review your {biggest[0]} expenses for optimization"
            if biggest
            else "Track your expenses by category for better insights",
            "Set up automatic savings transfers",
        ]

        return MonthlyReportCreate(
            user_id=user_id,
            month=month_key(month_start),
            total_income=income,
            total_expenses=expenses,
            biggest_category=biggest[0] if biggest else None,
            biggest_category_amount=biggest[1] if biggest else None,
            good_habits=good_habits,
            bad_habits=bad_habits,
            suggestions=suggestions,
        )


# =============================================================================
# SPENDING FORECAST
# =============================================================================

class SpendingForecaster:
    """
    Projects next month's spending from the most recent transactions.

    Expects transactions newest first, as returned by ``get_transactions``.
    """

    SAMPLE_SIZE = 30
    FALLBACK_EXPENSES = 1000.0
    FALLBACK_INCOME = 2000.0
    GROWTH_FACTOR = 1.05
    SHORTAGE_HORIZON_DAYS = 60
    CONFIDENCE_SCORE = 75

    def overspend_risk(self, predicted_expenses: float, predicted_income: float) -> str:
        if predicted_expenses > predicted_income * 0.9:
            return "high"
        if predicted_expenses > predicted_income * 0.7:
            return "medium"
        return "low"

    def build(
        self,
        user_id: str,
        transactions: list[Record],
        balance: float,
        today: date,
    ) -> SpendingForecastCreate:
        expenses = [t for t in transactions if t.get("type") == "expense"][:self.SAMPLE_SIZE]
        incomes = [t for t in transactions if t.get("type") == "income"][:self.SAMPLE_SIZE]

        avg_expenses = sum(to_number(t.get("amount")) for t in expenses) or self.FALLBACK_EXPENSES
        avg_income = sum(to_number(t.get("amount")) for t in incomes) or self.FALLBACK_INCOME

        predicted_expenses = avg_expenses * self.GROWTH_FACTOR
        predicted_income = avg_income

        days_until_shortage = int(balance // (avg_expenses / 30)) if balance > 0 else 0
        cash_shortage_date = None
        if 0 < days_until_shortage < self.SHORTAGE_HORIZON_DAYS:
            cash_shortage_date = add_months(today, 1).isoformat()

        return SpendingForecastCreate(
            user_id=user_id,
            forecast_month=month_key(add_months(today.replace(day=1), 1)),
            predicted_expenses=predicted_expenses,
            predicted_income=predicted_income,
            cash_shortage_date=cash_shortage_date,
            overspend_risk=self.overspend_risk(predicted_expenses, predicted_income),
            safe_to_spend=max(0.0, predicted_income - predicted_expenses),
            confidence_score=self.CONFIDENCE_SCORE,
        )


# =============================================================================
# DASHBOARD SCORING
# =============================================================================

def _completed_goals(goals: list[Record]) -> int:
    return sum(
        1
        for goal in goals
        if to_number(goal.get("current_amount")) >= to_number(goal.get("target_amount"))
    )


def health_score(
    total_income: float,
    total_expenses: float,
    goals: list[Record],
    investment_count: int = 0,
    member_count: int = 0,
) -> HealthScore:
    """
    Score the household from 0 to 100.

    Starts at 50 and adds points for spending ratio (max 20), savings
    (max 15), goal completion (max 15), investments (max 10) and tracked
    family members (max 10).
    """
    score = 50
    balance = total_income - total_expenses

    if total_income > 0:
        ratio = total_expenses / total_income
        if ratio < 0.5:
            score += 20
        elif ratio < 0.7:
            score += 15
        elif ratio < 0.9:
            score += 10

    if balance > 5000:
        score += 15
    elif balance > 2000:
        score += 10
    elif balance > 0:
        score += 5

    progress = (_completed_goals(goals) / len(goals) * 100) if goals else 0
    if progress >= 75:
        score += 15
    elif progress >= 50:
        score += 10
    elif progress >= 25:
        score += 5

    if investment_count > 0:
        score += min(10, investment_count * 3)
    if member_count > 0:
        score += min(10, member_count * 2)

    score = min(100, score)

    if score >= 80:
        level, recommendation = "Excellent", "Keep up the great financial habits!"
    elif score >= 60:
        level, recommendation = "Good", "Consider increasing your savings rate"
    elif score >= 40:
        level, recommendation = "Fair", "Work on reducing expenses"
    else:
        level, recommendation = "Poor", "Focus on building your emergency fund"

    return HealthScore(score=round(score), level=level, recommendation=recommendation)


def smart_insights(
    total_income: float,
    total_expenses: float,
    goals: list[Record],
    balance: Optional[float] = None,
) -> list[Insight]:
    """
    Up to three dashboard insights, with a fallback when nothing applies.

    ``balance`` defaults to income minus expenses; pass the account
    balance when it includes money outside the given totals.
    """
    insights = []
    if balance is None:
        balance = total_income - total_expenses

    if total_expenses > total_income * 0.8:
        insights.append(Insight(
            title="High Spending Alert",
            description="Your expenses are 80%+ of income",
            actionable=True,
        ))

    if balance > total_income * 2:
        insights.append(Insight(
            title="Invest Your Surplus",
            description="You have significant savings to invest",
            actionable=True,
        ))

    if goals and _completed_goals(goals) == len(goals):
        insights.append(Insight(
            title="All Goals Achieved!",
            description="You have completed all your financial goals",
        ))

    if not insights:
        insights.append(Insight(
            title="Track More Transactions",
            description="Add more transaction data for better insights",
        ))

    return insights[:3]


# =============================================================================
# ADVICE
# =============================================================================

class AdviceAdvisor:
    """Templated answers for the three advice categories."""

    EMERGENCY_RUNWAY_MONTHS = 3

    def answer(
        self,
        category: AdviceCategory,
        question: str,
        balance: float,
        monthly_income: float,
        monthly_expenses: float,
    ) -> str:
        category = AdviceCategory(category)

        if category == AdviceCategory.EMERGENCY:
            target = monthly_expenses * self.EMERGENCY_RUNWAY_MONTHS
            if target <= 0:
                return (
                    "Record a month of expenses first so we can size your "
                    "emergency buffer."
                )
            funded = max(0.0, balance) / target
            return (
                f"Target ${target:,.0f} for a {self.EMERGENCY_RUNWAY_MONTHS}-month runway "
                f"given your spending. You are {min(funded, 1.0):.0%} of the way there, "
                "keep auto-transfers on."
            )

        if category == AdviceCategory.SAVINGS:
            recommended = monthly_income * BudgetPlanner.SAVINGS_RATE
            surplus = monthly_income - monthly_expenses
            if surplus >= recommended:
                return (
                    f"You keep ${surplus:,.0f} a month after expenses, above the "
                    f"${recommended:,.0f} (20%) target. Route the difference into investments."
                )
            return (
                f"Aim to save ${recommended:,.0f} a month (20% of income). You currently "
                f"keep ${max(surplus, 0.0):,.0f}; trim discretionary spending to close the gap."
            )

        return (
            "Break the plan into monthly milestones, fund it from surplus cash flow "
            "first, and keep your emergency buffer untouched."
        )


# =============================================================================
# RECEIPT EXTRACTION (mock)
# =============================================================================

class ReceiptExtractor:
    """Pretends to read a receipt image and returns plausible fields."""

    MERCHANTS = ["Starbucks", "Walmart", "Amazon", "Target", "Whole Foods"]
    CATEGORIES = ["Food", "Shopping", "Groceries", "Entertainment"]

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    def extract(self, today: date) -> dict[str, Any]:
        return {
            "amount": round(self._rng.random() * 100 + 10, 2),
            "merchant": self._rng.choice(self.MERCHANTS),
            "date": today.isoformat(),
            "category": self._rng.choice(self.CATEGORIES),
            "tax": round(self._rng.random() * 10, 2),
        }

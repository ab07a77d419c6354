"""Advisors package."""

from flowguide.agents.advisors import (
    AdviceAdvisor,
    BudgetPlanner,
    HealthScore,
    Insight,
    MonthlyReportBuilder,
    ReceiptExtractor,
    SpendingForecaster,
    add_months,
    health_score,
    month_key,
    smart_insights,
)

__all__ = [
    "AdviceAdvisor",
    "BudgetPlanner",
    "HealthScore",
    "Insight",
    "MonthlyReportBuilder",
    "ReceiptExtractor",
    "SpendingForecaster",
    "add_months",
    "health_score",
    "month_key",
    "smart_insights",
]

"""
Data Models Package

Pydantic models for every FlowGuide entity, used to validate input at
the UI boundary before it reaches the entity API.
"""

from flowguide.models.records import (
    AdviceCategory,
    AdviceHistoryCreate,
    AlertCreate,
    AlertSeverity,
    AlertType,
    BillCreate,
    BillStatus,
    BudgetPlanCreate,
    ContactChannel,
    FamilyMemberCreate,
    GoalCreate,
    InvestmentCreate,
    InvestmentType,
    MonthlyReportCreate,
    OpenMapping,
    ProfileUpdate,
    ReceiptCreate,
    RecordPayload,
    Relationship,
    SafetyLogCreate,
    SafetyLogType,
    SpendingForecastCreate,
    TransactionCreate,
    TransactionType,
    UserRole,
    VoiceSmsHistoryCreate,
)

__all__ = [
    # Enums
    "AdviceCategory",
    "AlertSeverity",
    "AlertType",
    "BillStatus",
    "ContactChannel",
    "InvestmentType",
    "Relationship",
    "SafetyLogType",
    "TransactionType",
    "UserRole",
    # Payloads
    "AdviceHistoryCreate",
    "AlertCreate",
    "BillCreate",
    "BudgetPlanCreate",
    "FamilyMemberCreate",
    "GoalCreate",
    "InvestmentCreate",
    "MonthlyReportCreate",
    "OpenMapping",
    "ProfileUpdate",
    "ReceiptCreate",
    "RecordPayload",
    "SafetyLogCreate",
    "SpendingForecastCreate",
    "TransactionCreate",
    "VoiceSmsHistoryCreate",
]

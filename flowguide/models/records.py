"""
Record Models for FlowGuide

These models describe what the UI is allowed to send to the entity API.
They validate at the UI boundary: the demo store itself accepts any
mapping verbatim, so a payload that skipped these models is stored as-is.

Each ``*Create`` model holds the fields a caller provides. Server-assigned
fields (id, created_at, updated_at) are stamped by the entity API.
"""

from datetime import date
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# Free-form JSON blobs (receipt extraction, budget percentages, investment split)
OpenMapping = dict[str, Union[str, float, int]]


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class UserRole(str, Enum):
    USER = "user"
    ADMIN = "admin"


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class BillStatus(str, Enum):
    UPCOMING = "upcoming"
    PAID = "paid"


class Relationship(str, Enum):
    SELF = "self"
    SPOUSE = "spouse"
    CHILD = "child"
    PARENT = "parent"
    OTHER = "other"


class InvestmentType(str, Enum):
    STOCKS = "stocks"
    BONDS = "bonds"
    REAL_ESTATE = "real_estate"
    CRYPTO = "crypto"
    MUTUAL_FUNDS = "mutual_funds"
    OTHER = "other"


class AlertType(str, Enum):
    LOW_BALANCE = "low_balance"
    BILL_DUE = "bill_due"
    GOAL_BEHIND = "goal_behind"
    OVERSPEND_WARNING = "overspend_warning"


class AlertSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


class AdviceCategory(str, Enum):
    SAVINGS = "savings"
    EMERGENCY = "emergency"
    PLANNING = "planning"


class ContactChannel(str, Enum):
    VOICE = "voice"
    SMS = "sms"


class SafetyLogType(str, Enum):
    HIGH_RISK = "high_risk"
    FALLBACK = "fallback"
    ASR_FAILURE = "asr_failure"
    INCONSISTENCY = "inconsistency"


# =============================================================================
# BASE
# =============================================================================

class RecordPayload(BaseModel):
    """Base for every payload sent to the entity API."""

    model_config = ConfigDict(str_strip_whitespace=True, use_enum_values=True)

    def to_record(self) -> dict[str, Any]:
        """Plain JSON-compatible mapping, ready for the store."""
        return self.model_dump(mode="json")


# =============================================================================
# PROFILE
# =============================================================================

class ProfileUpdate(RecordPayload):
    """Partial profile update. Unset fields are left untouched."""

    email: Optional[str] = None
    phone: Optional[str] = None
    name: Optional[str] = Field(default=None, max_length=200)
    language_preference: Optional[str] = Field(default=None, max_length=10)
    primary_income_type: Optional[str] = None

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_unset=True)


# =============================================================================
# MONEY MOVEMENT
# =============================================================================

class TransactionCreate(RecordPayload):
    user_id: str
    member_id: Optional[str] = None
    type: TransactionType
    amount: float = Field(..., ge=0, description="Amount, always non-negative")
    category: Optional[str] = None
    description: Optional[str] = Field(default=None, max_length=500)
    date: date


class BillCreate(RecordPayload):
    user_id: str
    name: str = Field(..., min_length=1, max_length=200)
    amount: float = Field(..., ge=0)
    due_date: date
    status: BillStatus = BillStatus.UPCOMING
    category: Optional[str] = None


class ReceiptCreate(RecordPayload):
    user_id: str
    image_url: Optional[str] = None
    amount: float = Field(..., ge=0)
    merchant: Optional[str] = None
    date: date
    category: Optional[str] = None
    tax_amount: Optional[float] = Field(default=None, ge=0)
    extracted_data: OpenMapping = Field(default_factory=dict)


# =============================================================================
# PLANNING
# =============================================================================

class GoalCreate(RecordPayload):
    """
    A savings goal.

    ``current_amount`` may exceed ``target_amount``; progress is never clamped.
    """

    user_id: str
    name: str = Field(..., min_length=1, max_length=200)
    target_amount: float = Field(..., gt=0)
    current_amount: float = Field(default=0, ge=0)
    deadline: Optional[date] = None


class FamilyMemberCreate(RecordPayload):
    user_id: str
    name: str = Field(..., min_length=1, max_length=200)
    relationship: Relationship
    email: Optional[str] = None
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    occupation: Optional[str] = None
    monthly_income: float = Field(default=0, ge=0)
    is_active: bool = True
    avatar_url: Optional[str] = None


class InvestmentCreate(RecordPayload):
    user_id: str
    member_id: Optional[str] = None
    name: str = Field(..., min_length=1, max_length=200)
    type: InvestmentType
    initial_amount: float = Field(..., ge=0)
    current_value: float = Field(..., ge=0)
    purchase_date: date
    expected_return_rate: float = Field(default=0, description="Percent per year")
    notes: Optional[str] = None


class BudgetPlanCreate(RecordPayload):
    user_id: str
    age: Optional[int] = Field(default=None, ge=0, le=130)
    income: float = Field(..., ge=0)
    responsibilities: Optional[str] = None
    fixed_expenses: Optional[float] = Field(default=None, ge=0)
    lifestyle: Optional[str] = None
    budget_percentages: OpenMapping = Field(default_factory=dict)
    savings_plan: Optional[str] = None
    emergency_fund_target: Optional[float] = None
    investment_split: OpenMapping = Field(default_factory=dict)


# =============================================================================
# GENERATED INSIGHTS
# =============================================================================

class MonthlyReportCreate(RecordPayload):
    user_id: str
    month: str = Field(..., description="Period string, sortable (YYYY-MM or YYYY-MM-DD)")
    total_income: float
    total_expenses: float
    biggest_category: Optional[str] = None
    biggest_category_amount: Optional[float] = None
    good_habits: list[str] = Field(default_factory=list)
    bad_habits: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)


class SpendingForecastCreate(RecordPayload):
    user_id: str
    forecast_month: str
    predicted_expenses: float
    predicted_income: Optional[float] = None
    cash_shortage_date: Optional[str] = None
    overspend_risk: Optional[str] = None
    safe_to_spend: Optional[float] = None
    confidence_score: Optional[float] = None


class AdviceHistoryCreate(RecordPayload):
    user_id: str
    category: AdviceCategory
    question: str = Field(..., min_length=1)
    answer: str


# =============================================================================
# NOTIFICATIONS AND LOGS
# =============================================================================

class AlertCreate(RecordPayload):
    user_id: str
    type: AlertType
    title: str = Field(..., min_length=1, max_length=200)
    message: str
    severity: AlertSeverity = AlertSeverity.INFO
    is_read: bool = False


class VoiceSmsHistoryCreate(RecordPayload):
    user_id: str
    type: ContactChannel
    content: str
    summary: Optional[str] = None


class SafetyLogCreate(RecordPayload):
    user_id: str
    log_type: SafetyLogType
    description: str
    risk_score: Optional[float] = None

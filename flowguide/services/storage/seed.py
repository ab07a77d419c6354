"""
Built-in Seed Data

The demo store starts from this dataset whenever no valid persisted
state exists, and returns to it on reset. Timestamps are relative to the
moment of seeding, so a fresh seed always shows "recent" activity.

Only the default demo user owns domain records. The other demo users
have a profile and nothing else.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from flowguide.services.storage.identity import to_iso


TableSet = dict[str, list[dict[str, Any]]]

# Every recognized table and the prefix used for generated ids.
TABLE_ID_PREFIXES: dict[str, str] = {
    "profiles": "profile",
    "transactions": "txn",
    "bills": "bill",
    "goals": "goal",
    "family_members": "member",
    "investments": "investment",
    "alerts": "alert",
    "advice_history": "advice",
    "voice_sms_history": "voice",
    "safety_logs": "safety",
    "monthly_reports": "report",
    "receipts": "receipt",
    "budget_plans": "budget",
    "spending_forecasts": "forecast",
}

TABLE_NAMES: tuple[str, ...] = tuple(TABLE_ID_PREFIXES)

# Tables whose records carry an updated_at column.
TIMESTAMPED_TABLES: frozenset[str] = frozenset({"profiles", "investments"})

DEMO_USERS: list[dict[str, str]] = [
    {
        "id": "demo-alex",
        "name": "Alex Martinez",
        "email": "alex@flowguide.demo",
        "title": "Design Lead, Brightwave Health",
        "household": "Martinez Family",
        "location": "San Francisco, CA",
        "timezone": "America/Los_Angeles",
    },
    {
        "id": "demo-jordan",
        "name": "Jordan Singh",
        "email": "jordan@flowguide.demo",
        "title": "Operations Director, Northwind Logistics",
        "household": "Singh Household",
        "location": "Seattle, WA",
        "timezone": "America/Los_Angeles",
    },
    {
        "id": "demo-maya",
        "name": "Maya Chen",
        "email": "maya@flowguide.demo",
        "title": "Product Marketing Lead, Stellar AI",
        "household": "Chen Household",
        "location": "Austin, TX",
        "timezone": "America/Chicago",
    },
]

DEFAULT_USER_ID = DEMO_USERS[0]["id"]


def get_demo_user(user_id: str) -> Optional[dict[str, str]]:
    for user in DEMO_USERS:
        if user["id"] == user_id:
            return dict(user)
    return None


def build_seed_data(now: Optional[datetime] = None) -> TableSet:
    """
    Build a fresh copy of the seed table set.

    Args:
        now: Reference moment for relative timestamps (defaults to UTC now)

    Returns:
        A new mapping of table name to list of records. Every call returns
        independent objects.
    """
    now = now or datetime.now(timezone.utc)

    def days_ago(days: int) -> str:
        return to_iso(now - timedelta(days=days))

    def days_from_now(days: int) -> str:
        return to_iso(now + timedelta(days=days))

    uid = DEFAULT_USER_ID

    profiles = [
        {
            "id": user["id"],
            "email": user["email"],
            "phone": f"+1 (415) 555-{2100 + index * 37:04d}",
            "name": user["name"],
            "language_preference": "en",
            "primary_income_type": "freelance" if index == 2 else "salary",
            "role": "user",
            "created_at": days_ago(200 - index * 15),
            "updated_at": days_ago(7 - index * 2),
        }
        for index, user in enumerate(DEMO_USERS)
    ]

    family_members = [
        {
            "id": "member-alex",
            "user_id": uid,
            "name": "Alex Martinez",
            "relationship": "self",
            "email": "alex@flowguide.demo",
            "phone": "+1 (415) 555-2100",
            "date_of_birth": "1991-04-12",
            "occupation": "Design Lead",
            "monthly_income": 8200,
            "is_active": True,
            "avatar_url": None,
            "created_at": days_ago(320),
        },
        {
            "id": "member-jamie",
            "user_id": uid,
            "name": "Jamie Wu",
            "relationship": "spouse",
            "email": "jamie@flowguide.demo",
            "phone": "+1 (415) 555-2144",
            "date_of_birth": "1990-07-05",
            "occupation": "Pediatric Nurse",
            "monthly_income": 5100,
            "is_active": True,
            "avatar_url": None,
            "created_at": days_ago(300),
        },
        {
            "id": "member-mila",
            "user_id": uid,
            "name": "Mila Martinez",
            "relationship": "child",
            "email": None,
            "phone": None,
            "date_of_birth": "2020-08-18",
            "occupation": None,
            "monthly_income": 0,
            "is_active": True,
            "avatar_url": None,
            "created_at": days_ago(200),
        },
    ]

    def txn(id_, type_, amount, category, description, age):
        return {
            "id": id_,
            "user_id": uid,
            "member_id": None,
            "type": type_,
            "amount": amount,
            "category": category,
            "description": description,
            "date": days_ago(age),
            "created_at": days_ago(age),
        }

    transactions = [
        txn("txn-salary", "income", 5400, "Salary", "Brightwave Health payroll", 4),
        txn("txn-freelance", "income", 1200, "Freelance", "Brand sprint for Nimbus Labs", 11),
        txn("txn-mortgage", "expense", 2100, "Housing", "Mortgage payment", 2),
        txn("txn-groceries", "expense", 265.4, "Groceries", "Weekly family groceries", 3),
        txn("txn-childcare", "expense", 680, "Childcare", "Daycare tuition", 6),
        txn("txn-utilities", "expense", 145.23, "Utilities", "Energy + water", 5),
        txn("txn-investment", "expense", 450, "Investments", "Brokerage auto-invest", 8),
    ]

    bills = [
        {
            "id": "bill-mortgage",
            "user_id": uid,
            "name": "Mortgage Payment",
            "amount": 2100,
            "due_date": days_from_now(5),
            "status": "upcoming",
            "category": "Housing",
            "created_at": days_ago(20),
        },
        {
            "id": "bill-internet",
            "user_id": uid,
            "name": "Fiber Internet",
            "amount": 95,
            "due_date": days_ago(7),
            "status": "paid",
            "category": "Utilities",
            "created_at": days_ago(60),
        },
        {
            "id": "bill-card",
            "user_id": uid,
            "name": "Travel Rewards Card",
            "amount": 640,
            "due_date": days_from_now(10),
            "status": "upcoming",
            "category": "Credit Cards",
            "created_at": days_ago(18),
        },
    ]

    goals = [
        {
            "id": "goal-emergency",
            "user_id": uid,
            "name": "Emergency Fund",
            "target_amount": 20000,
            "current_amount": 12500,
            "deadline": days_from_now(240),
            "created_at": days_ago(150),
        },
        {
            "id": "goal-vacation",
            "user_id": uid,
            "name": "Summer Adventure",
            "target_amount": 6000,
            "current_amount": 2500,
            "deadline": days_from_now(120),
            "created_at": days_ago(90),
        },
        {
            "id": "goal-remodel",
            "user_id": uid,
            "name": "Kitchen Remodel",
            "target_amount": 15000,
            "current_amount": 4800,
            "deadline": days_from_now(300),
            "created_at": days_ago(60),
        },
    ]

    investments = [
        {
            "id": "inv-vti",
            "user_id": uid,
            "member_id": "member-alex",
            "name": "Vanguard Total Market",
            "type": "stocks",
            "initial_amount": 10000,
            "current_value": 14250,
            "purchase_date": days_ago(420),
            "expected_return_rate": 8,
            "notes": "Automated contribution every payday",
            "created_at": days_ago(420),
            "updated_at": days_ago(5),
        },
        {
            "id": "inv-savings",
            "user_id": uid,
            "member_id": "member-jamie",
            "name": "High Yield Savings",
            "type": "other",
            "initial_amount": 7000,
            "current_value": 7150,
            "purchase_date": days_ago(280),
            "expected_return_rate": 4.8,
            "notes": "Emergency reserve bucket",
            "created_at": days_ago(280),
            "updated_at": days_ago(9),
        },
        {
            "id": "inv-reit",
            "user_id": uid,
            "member_id": None,
            "name": "Greenbuild REIT",
            "type": "real_estate",
            "initial_amount": 5000,
            "current_value": 5600,
            "purchase_date": days_ago(365),
            "expected_return_rate": 6.3,
            "notes": "Quarterly dividend reinvested",
            "created_at": days_ago(365),
            "updated_at": days_ago(30),
        },
    ]

    alerts = [
        {
            "id": "alert-low-balance",
            "user_id": uid,
            "type": "low_balance",
            "title": "Balance dipped below $1,000",
            "message": "Cover childcare expenses with the checking buffer or transfer from HYSA.",
            "severity": "critical",
            "is_read": False,
            "created_at": days_ago(1),
        },
        {
            "id": "alert-bill",
            "user_id": uid,
            "type": "bill_due",
            "title": "Mortgage due in 5 days",
            "message": "Schedule your payment to keep the on-time streak going.",
            "severity": "warning",
            "is_read": False,
            "created_at": days_ago(2),
        },
        {
            "id": "alert-goal",
            "user_id": uid,
            "type": "goal_behind",
            "title": "Emergency fund pacing",
            "message": "You are 62% funded. Add $500 this week to stay green.",
            "severity": "info",
            "is_read": True,
            "created_at": days_ago(5),
        },
        {
            "id": "alert-spend",
            "user_id": uid,
            "type": "overspend_warning",
            "title": "Dining out is trending high",
            "message": "Consider one less takeout night to stay within budget.",
            "severity": "warning",
            "is_read": True,
            "created_at": days_ago(7),
        },
    ]

    advice_history = [
        {
            "id": "advice-emergency",
            "user_id": uid,
            "category": "emergency",
            "question": "How much should we keep in cash buffers?",
            "answer": (
                "Target $24K for a 3-month runway given your burn. "
                "You are halfway there, keep auto-transfers on."
            ),
            "created_at": days_ago(15),
        },
        {
            "id": "advice-savings",
            "user_id": uid,
            "category": "savings",
            "question": "Are we investing enough toward retirement?",
            "answer": (
                "Increasing the 401(k) deferral by 2% covers the shortfall "
                "while keeping monthly cash flow healthy."
            ),
            "created_at": days_ago(28),
        },
        {
            "id": "advice-planning",
            "user_id": uid,
            "category": "planning",
            "question": "Best way to fund the kitchen remodel?",
            "answer": (
                "Blend savings with a low-rate HELOC draw so you maintain "
                "liquidity for emergencies."
            ),
            "created_at": days_ago(40),
        },
    ]

    voice_sms_history = [
        {
            "id": "voice-checkin",
            "user_id": uid,
            "type": "voice",
            "content": "Called FlowGuide assistant to move $500 into HYSA.",
            "summary": "Transfer completed; reminder set for next paycheck.",
            "created_at": days_ago(6),
        },
        {
            "id": "sms-alert",
            "user_id": uid,
            "type": "sms",
            "content": 'Texted "status" to confirm mortgage autopay.',
            "summary": "Autopay confirmed for March 1st.",
            "created_at": days_ago(12),
        },
    ]

    safety_logs = [
        {
            "id": "safety-spend",
            "user_id": uid,
            "log_type": "inconsistency",
            "description": "Detected duplicate grocery transaction. Flagged for review.",
            "risk_score": 12,
            "created_at": days_ago(9),
        },
        {
            "id": "safety-voice",
            "user_id": uid,
            "log_type": "fallback",
            "description": "Voice command timed out. Prompted user to retry via SMS.",
            "risk_score": 6,
            "created_at": days_ago(3),
        },
    ]

    monthly_reports = [
        {
            "id": "report-2025-02",
            "user_id": uid,
            "month": "2025-02",
            "total_income": 8200,
            "total_expenses": 6120,
            "biggest_category": "Housing",
            "biggest_category_amount": 2100,
            "good_habits": ["Automated savings hit target", "Credit card in grace period"],
            "bad_habits": ["Dining out trending +18%"],
            "suggestions": ["Lock in HELOC refinance while rates dip"],
            "created_at": days_ago(10),
        },
        {
            "id": "report-2025-01",
            "user_id": uid,
            "month": "2025-01",
            "total_income": 7900,
            "total_expenses": 5980,
            "biggest_category": "Childcare",
            "biggest_category_amount": 820,
            "good_habits": ["Invested windfall bonus"],
            "bad_habits": ["Utilities over baseline during cold snap"],
            "suggestions": ["Schedule home energy audit"],
            "created_at": days_ago(40),
        },
        {
            "id": "report-2024-12",
            "user_id": uid,
            "month": "2024-12",
            "total_income": 7800,
            "total_expenses": 6400,
            "biggest_category": "Gifts",
            "biggest_category_amount": 950,
            "good_habits": ["Year-end Roth contribution complete"],
            "bad_habits": ["Subscription creep of +$42/mo"],
            "suggestions": ["Audit subscriptions before Q2"],
            "created_at": days_ago(70),
        },
    ]

    receipts = [
        {
            "id": "receipt-grocery",
            "user_id": uid,
            "image_url": None,
            "amount": 112.45,
            "merchant": "Whole Harvest Market",
            "date": days_ago(5),
            "category": "Groceries",
            "tax_amount": 8.12,
            "extracted_data": {"items": 24, "payment": "VISA 4321"},
            "created_at": days_ago(5),
        },
        {
            "id": "receipt-hardware",
            "user_id": uid,
            "image_url": None,
            "amount": 286.9,
            "merchant": "Mission Hardware",
            "date": days_ago(9),
            "category": "Home",
            "tax_amount": 21.05,
            "extracted_data": {"project": "Backyard planter"},
            "created_at": days_ago(9),
        },
    ]

    budget_plans = [
        {
            "id": "budget-2025",
            "user_id": uid,
            "age": 34,
            "income": 168000,
            "responsibilities": "Mortgage, daycare, car lease",
            "fixed_expenses": 72000,
            "lifestyle": "Balanced",
            "budget_percentages": {"needs": 55, "wants": 25, "goals": 20},
            "savings_plan": "Automate $1,650/mo split between HYSA and brokerage accounts.",
            "emergency_fund_target": 24000,
            "investment_split": {"stocks": 60, "bonds": 20, "cash": 20},
            "created_at": days_ago(25),
        },
    ]

    spending_forecasts = [
        {
            "id": "forecast-mar",
            "user_id": uid,
            "forecast_month": "2025-03",
            "predicted_expenses": 6200,
            "predicted_income": 8300,
            "cash_shortage_date": None,
            "overspend_risk": "medium",
            "safe_to_spend": 1850,
            "confidence_score": 82,
            "created_at": days_ago(5),
        },
        {
            "id": "forecast-apr",
            "user_id": uid,
            "forecast_month": "2025-04",
            "predicted_expenses": 6400,
            "predicted_income": 8400,
            "cash_shortage_date": None,
            "overspend_risk": "low",
            "safe_to_spend": 2100,
            "confidence_score": 78,
            "created_at": days_ago(2),
        },
    ]

    return {
        "profiles": profiles,
        "transactions": transactions,
        "bills": bills,
        "goals": goals,
        "family_members": family_members,
        "investments": investments,
        "alerts": alerts,
        "advice_history": advice_history,
        "voice_sms_history": voice_sms_history,
        "safety_logs": safety_logs,
        "monthly_reports": monthly_reports,
        "receipts": receipts,
        "budget_plans": budget_plans,
        "spending_forecasts": spending_forecasts,
    }

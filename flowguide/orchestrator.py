"""
Main Orchestrator for FlowGuide

Ties the entity API to the advisors and defines the flows the UI runs:
1. Monthly report (transactions → report → saved report)
2. Spending forecast (transactions + balance → forecast → saved forecast)
3. Budget plan (income and lifestyle → plan → saved plan)
4. Receipt scan (image → extracted fields → receipt + expense transaction)
5. Advice (question → templated answer → advice history)
6. Dashboard (balance, totals, health score, insights, unread alerts)

Every flow goes through ``FlowGuideAPI``, so each step pays the simulated
latency and may surface the one-shot ``NetworkHiccupError``. Flows do not
retry; the UI shows the error and the user tries again.
"""

from datetime import date, timedelta
from typing import Any, Callable, Optional

from pydantic import BaseModel, Field

from flowguide.agents import (
    AdviceAdvisor,
    BudgetPlanner,
    HealthScore,
    Insight,
    MonthlyReportBuilder,
    ReceiptExtractor,
    SpendingForecaster,
    health_score,
    smart_insights,
)
from flowguide.api import FlowGuideAPI, compute_balance, parse_timestamp, to_number
from flowguide.audit import AuditLogger, get_logger
from flowguide.config import Settings, get_settings
from flowguide.models import (
    AdviceCategory,
    AdviceHistoryCreate,
    ReceiptCreate,
    TransactionCreate,
    TransactionType,
)
from flowguide.services.auth import DemoAuth
from flowguide.services.network import NetworkSimulator
from flowguide.services.storage import FileSlot, KeyValueSlot, TableStore

Record = dict[str, Any]

ADVICE_WINDOW_DAYS = 30

logger = get_logger(__name__)


class DashboardSummary(BaseModel):
    """Everything the dashboard page renders for one user."""

    user_id: str
    balance: float
    total_income: float
    total_expenses: float
    family_income: float = 0
    investment_value: float = 0
    health: HealthScore
    insights: list[Insight] = Field(default_factory=list)
    unread_alerts: list[dict[str, Any]] = Field(default_factory=list)
    recent_transactions: list[dict[str, Any]] = Field(default_factory=list)


def _totals(transactions: list[Record]) -> tuple[float, float]:
    income = sum(to_number(t.get("amount")) for t in transactions if t.get("type") == "income")
    expenses = sum(to_number(t.get("amount")) for t in transactions if t.get("type") != "income")
    return income, expenses


class FinanceFlow:
    """
    Orchestrates the advisor flows on top of the entity API.

    Advisors only compute; this class loads their inputs and saves
    their outputs.
    """

    def __init__(
        self,
        api: FlowGuideAPI,
        budget_planner: Optional[BudgetPlanner] = None,
        report_builder: Optional[MonthlyReportBuilder] = None,
        forecaster: Optional[SpendingForecaster] = None,
        advisor: Optional[AdviceAdvisor] = None,
        receipt_extractor: Optional[ReceiptExtractor] = None,
        today: Callable[[], date] = date.today,
    ):
        self._api = api
        self._budget_planner = budget_planner or BudgetPlanner()
        self._report_builder = report_builder or MonthlyReportBuilder()
        self._forecaster = forecaster or SpendingForecaster()
        self._advisor = advisor or AdviceAdvisor()
        self._receipt_extractor = receipt_extractor or ReceiptExtractor()
        self._today = today

    @property
    def api(self) -> FlowGuideAPI:
        return self._api

    async def _all_transactions(self, user_id: str) -> list[Record]:
        return await self._api.get_transactions(user_id, limit=None)

    async def generate_monthly_report(self, user_id: str) -> Record:
        """Build and save the report for last calendar month."""
        transactions = await self._all_transactions(user_id)
        report = self._report_builder.build(user_id, transactions, self._today())
        saved = await self._api.create_monthly_report(report)
        logger.info("monthly_report_generated", user_id=user_id, month=saved["month"])
        return saved

    async def generate_forecast(self, user_id: str) -> Record:
        """Build and save next month's spending forecast."""
        transactions = await self._all_transactions(user_id)
        balance = await self._api.get_balance(user_id)
        forecast = self._forecaster.build(user_id, transactions, balance, self._today())
        saved = await self._api.create_spending_forecast(forecast)
        logger.info(
            "forecast_generated",
            user_id=user_id,
            forecast_month=saved["forecast_month"],
            risk=saved["overspend_risk"],
        )
        return saved

    async def generate_budget_plan(
        self,
        user_id: str,
        income: float,
        fixed_expenses: Optional[float] = None,
        age: Optional[int] = None,
        responsibilities: Optional[str] = None,
        lifestyle: str = "moderate",
    ) -> Record:
        plan = self._budget_planner.build_plan(
            user_id,
            income,
            fixed_expenses=fixed_expenses,
            age=age,
            responsibilities=responsibilities,
            lifestyle=lifestyle,
        )
        return await self._api.create_budget_plan(plan)

    async def scan_receipt(
        self,
        user_id: str,
        image_url: Optional[str] = None,
    ) -> tuple[Record, Record]:
        """
        Extract a receipt and book it as an expense.

        The receipt is saved first, then the transaction. If the second
        call fails the receipt stays saved without its transaction.

        Returns:
            (receipt, transaction)
        """
        today = self._today()
        extracted = self._receipt_extractor.extract(today)

        receipt = await self._api.create_receipt(ReceiptCreate(
            user_id=user_id,
            image_url=image_url,
            amount=extracted["amount"],
            merchant=extracted["merchant"],
            date=today,
            category=extracted["category"],
            tax_amount=extracted["tax"],
            extracted_data=extracted,
        ))

        transaction = await self._api.create_transaction(TransactionCreate(
            user_id=user_id,
            type=TransactionType.EXPENSE,
            amount=extracted["amount"],
            category=extracted["category"],
            description=f"Receipt from {extracted['merchant']}",
            date=today,
        ))

        logger.info(
            "receipt_scanned",
            user_id=user_id,
            receipt_id=receipt["id"],
            transaction_id=transaction["id"],
        )
        return receipt, transaction

    async def ask_advice(
        self,
        user_id: str,
        category: AdviceCategory,
        question: str,
    ) -> Record:
        """Answer from the last 30 days of transactions and save the exchange."""
        transactions = await self._all_transactions(user_id)
        balance = await self._api.get_balance(user_id)

        window_start = self._today() - timedelta(days=ADVICE_WINDOW_DAYS)
        recent = [
            t for t in transactions
            if parse_timestamp(t.get("date")).date() >= window_start
        ]
        income, expenses = _totals(recent)

        answer = self._advisor.answer(category, question, balance, income, expenses)
        return await self._api.create_advice_history(AdviceHistoryCreate(
            user_id=user_id,
            category=category,
            question=question,
            answer=answer,
        ))

    async def dashboard_summary(self, user_id: str) -> DashboardSummary:
        transactions = await self._all_transactions(user_id)
        goals = await self._api.get_goals(user_id)
        investments = await self._api.get_investments(user_id)
        members = await self._api.get_family_members(user_id)
        unread = await self._api.get_unread_alerts(user_id)

        income, expenses = _totals(transactions)
        active_members = [m for m in members if m.get("is_active")]

        return DashboardSummary(
            user_id=user_id,
            balance=compute_balance(transactions),
            total_income=income,
            total_expenses=expenses,
            family_income=sum(to_number(m.get("monthly_income")) for m in active_members),
            investment_value=sum(to_number(i.get("current_value")) for i in investments),
            health=health_score(
                income,
                expenses,
                goals,
                investment_count=len(investments),
                member_count=len(active_members),
            ),
            insights=smart_insights(income, expenses, goals),
            unread_alerts=unread,
            recent_transactions=transactions[:5],
        )


def create_app_components(
    settings: Optional[Settings] = None,
    slot: Optional[KeyValueSlot] = None,
) -> tuple[FlowGuideAPI, FinanceFlow, DemoAuth]:
    """
    Factory function to create all application components.

    Args:
        settings: Root settings (read from the environment when omitted)
        slot: Durable medium. Defaults to files under ``store.data_dir``.
              Pass a ``MemorySlot`` for testing without the disk.

    Returns:
        (api, finance_flow, auth)
    """
    settings = settings or get_settings()
    store_settings = settings.store

    slot = slot or FileSlot(store_settings.data_dir)
    audit_logger = AuditLogger()

    store = TableStore(
        slot,
        storage_key=store_settings.storage_key,
        audit_logger=audit_logger,
    )
    store.initialize()

    network = NetworkSimulator.from_settings(store_settings, audit_logger=audit_logger)
    api = FlowGuideAPI(store, network)
    finance_flow = FinanceFlow(api)
    auth = DemoAuth(slot, network, storage_key=store_settings.auth_storage_key)

    return api, finance_flow, auth

"""
Entity API

One family of async functions per entity, consumed by the UI. Every call
goes through the network simulator, so any of them may raise
``NetworkHiccupError`` once per simulator.

Queries are always scoped to the owning user. Create functions stamp the
server-assigned fields (id, created_at and, for profiles and investments,
updated_at) and perform no validation: whatever the caller sends is
stored. Validate with ``flowguide.models`` before calling.
"""

from typing import Any, Callable, Mapping, Optional, Union

from flowguide.api.queries import (
    apply_limit,
    by_date_then_created,
    by_due_date,
    by_period_desc,
    compute_balance,
    filter_by_user,
    newest_first,
    oldest_first,
    sum_field,
)
from flowguide.models import RecordPayload
from flowguide.services.network import NetworkSimulator
from flowguide.services.storage import (
    NotFoundError,
    TableStore,
    generate_id,
    now_iso,
)
from flowguide.services.storage.seed import TABLE_ID_PREFIXES

Record = dict[str, Any]
Payload = Union[RecordPayload, Mapping[str, Any]]
Sorter = Callable[[list[Record]], list[Record]]

DEFAULT_TRANSACTION_LIMIT = 50


def _as_record(payload: Payload) -> Record:
    if isinstance(payload, RecordPayload):
        return payload.to_record()
    return dict(payload)


class FlowGuideAPI:
    """
    Entity-level access to the demo store.

    Args:
        store: An initialized table store
        network: Simulator wrapping every call
    """

    def __init__(self, store: TableStore, network: NetworkSimulator):
        self._store = store
        self._network = network

    @property
    def store(self) -> TableStore:
        return self._store

    @property
    def network(self) -> NetworkSimulator:
        return self._network

    # -------------------------------------------------------------------------
    # Shared call sites
    # -------------------------------------------------------------------------

    async def _list(
        self,
        table: str,
        user_id: str,
        sort: Sorter,
        limit: Optional[int] = None,
        where: Optional[Callable[[Record], bool]] = None,
    ) -> list[Record]:
        def query() -> list[Record]:
            rows = filter_by_user(self._store.get_table(table), user_id)
            if where is not None:
                rows = [row for row in rows if where(row)]
            return apply_limit(sort(rows), limit)

        return await self._network.run(query)

    async def _create(
        self,
        table: str,
        payload: Payload,
        with_updated_at: bool = False,
    ) -> Record:
        def insert() -> Record:
            timestamp = now_iso()
            record = {
                **_as_record(payload),
                "id": generate_id(TABLE_ID_PREFIXES[table]),
                "created_at": timestamp,
            }
            if with_updated_at:
                record["updated_at"] = timestamp
            return self._store.insert_record(table, record)

        return await self._network.run(insert)

    async def _update(
        self,
        table: str,
        record_id: str,
        updates: Payload,
        touch: bool = False,
    ) -> Optional[Record]:
        def update() -> Optional[Record]:
            changes = _as_record(updates)
            if touch:
                changes["updated_at"] = now_iso()
            return self._store.update_record(table, record_id, changes)

        return await self._network.run(update)

    async def _delete(self, table: str, record_id: str) -> None:
        await self._network.run(lambda: self._store.delete_record(table, record_id))

    # -------------------------------------------------------------------------
    # Profiles
    # -------------------------------------------------------------------------

    async def get_profile(self, user_id: str) -> Optional[Record]:
        def find() -> Optional[Record]:
            for profile in self._store.get_table("profiles"):
                if profile.get("id") == user_id:
                    return profile
            return None

        return await self._network.run(find)

    async def update_profile(self, user_id: str, updates: Payload) -> Optional[Record]:
        return await self._update("profiles", user_id, updates, touch=True)

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    async def get_transactions(
        self,
        user_id: str,
        limit: Optional[int] = DEFAULT_TRANSACTION_LIMIT,
    ) -> list[Record]:
        return await self._list("transactions", user_id, by_date_then_created("date"), limit)

    async def create_transaction(self, transaction: Payload) -> Record:
        return await self._create("transactions", transaction)

    async def update_transaction(self, transaction_id: str, updates: Payload) -> Optional[Record]:
        return await self._update("transactions", transaction_id, updates)

    async def delete_transaction(self, transaction_id: str) -> None:
        await self._delete("transactions", transaction_id)

    async def get_balance(self, user_id: str) -> float:
        return await self._network.run(
            lambda: compute_balance(filter_by_user(self._store.get_table("transactions"), user_id))
        )

    # -------------------------------------------------------------------------
    # Bills
    # -------------------------------------------------------------------------

    async def get_bills(self, user_id: str, limit: Optional[int] = None) -> list[Record]:
        return await self._list("bills", user_id, by_due_date, limit)

    async def create_bill(self, bill: Payload) -> Record:
        return await self._create("bills", bill)

    async def update_bill(self, bill_id: str, updates: Payload) -> Optional[Record]:
        return await self._update("bills", bill_id, updates)

    async def delete_bill(self, bill_id: str) -> None:
        await self._delete("bills", bill_id)

    # -------------------------------------------------------------------------
    # Goals
    # -------------------------------------------------------------------------

    async def get_goals(self, user_id: str, limit: Optional[int] = None) -> list[Record]:
        return await self._list("goals", user_id, newest_first("created_at"), limit)

    async def create_goal(self, goal: Payload) -> Record:
        return await self._create("goals", goal)

    async def update_goal(self, goal_id: str, updates: Payload) -> Optional[Record]:
        return await self._update("goals", goal_id, updates)

    async def delete_goal(self, goal_id: str) -> None:
        await self._delete("goals", goal_id)

    # -------------------------------------------------------------------------
    # Advice, voice/SMS and safety history
    # -------------------------------------------------------------------------

    async def get_advice_history(self, user_id: str, limit: Optional[int] = None) -> list[Record]:
        return await self._list("advice_history", user_id, newest_first("created_at"), limit)

    async def create_advice_history(self, advice: Payload) -> Record:
        return await self._create("advice_history", advice)

    async def get_voice_sms_history(self, user_id: str, limit: Optional[int] = None) -> list[Record]:
        return await self._list("voice_sms_history", user_id, newest_first("created_at"), limit)

    async def create_voice_sms_history(self, history: Payload) -> Record:
        return await self._create("voice_sms_history", history)

    async def get_safety_logs(self, user_id: str, limit: Optional[int] = None) -> list[Record]:
        return await self._list("safety_logs", user_id, newest_first("created_at"), limit)

    async def create_safety_log(self, log: Payload) -> Record:
        return await self._create("safety_logs", log)

    # -------------------------------------------------------------------------
    # Alerts
    # -------------------------------------------------------------------------

    async def get_alerts(self, user_id: str, limit: Optional[int] = None) -> list[Record]:
        return await self._list("alerts", user_id, newest_first("created_at"), limit)

    async def get_unread_alerts(self, user_id: str, limit: Optional[int] = None) -> list[Record]:
        return await self._list(
            "alerts",
            user_id,
            newest_first("created_at"),
            limit,
            where=lambda alert: not alert.get("is_read"),
        )

    async def create_alert(self, alert: Payload) -> Record:
        record = _as_record(alert)
        if record.get("is_read") is None:
            record["is_read"] = False
        return await self._create("alerts", record)

    async def mark_alert_as_read(self, alert_id: str) -> None:
        """
        Raises:
            NotFoundError: If no alert has this id
        """
        def mark() -> None:
            if self._store.update_record("alerts", alert_id, {"is_read": True}) is None:
                raise NotFoundError("Alert not found")

        await self._network.run(mark)

    async def delete_alert(self, alert_id: str) -> None:
        await self._delete("alerts", alert_id)

    # -------------------------------------------------------------------------
    # Monthly reports
    # -------------------------------------------------------------------------

    async def get_monthly_reports(self, user_id: str, limit: Optional[int] = None) -> list[Record]:
        return await self._list("monthly_reports", user_id, by_period_desc("month"), limit)

    async def get_monthly_report(self, user_id: str, month: str) -> Optional[Record]:
        def find() -> Optional[Record]:
            for report in filter_by_user(self._store.get_table("monthly_reports"), user_id):
                if report.get("month") == month:
                    return report
            return None

        return await self._network.run(find)

    async def create_monthly_report(self, report: Payload) -> Record:
        return await self._create("monthly_reports", report)

    # -------------------------------------------------------------------------
    # Receipts
    # -------------------------------------------------------------------------

    async def get_receipts(self, user_id: str, limit: Optional[int] = None) -> list[Record]:
        return await self._list("receipts", user_id, by_date_then_created("date"), limit)

    async def create_receipt(self, receipt: Payload) -> Record:
        return await self._create("receipts", receipt)

    async def delete_receipt(self, receipt_id: str) -> None:
        await self._delete("receipts", receipt_id)

    # -------------------------------------------------------------------------
    # Budget plans and forecasts
    # -------------------------------------------------------------------------

    async def get_budget_plans(self, user_id: str, limit: Optional[int] = None) -> list[Record]:
        return await self._list("budget_plans", user_id, newest_first("created_at"), limit)

    async def create_budget_plan(self, plan: Payload) -> Record:
        return await self._create("budget_plans", plan)

    async def get_spending_forecasts(self, user_id: str, limit: Optional[int] = None) -> list[Record]:
        return await self._list(
            "spending_forecasts", user_id, by_period_desc("forecast_month"), limit
        )

    async def create_spending_forecast(self, forecast: Payload) -> Record:
        return await self._create("spending_forecasts", forecast)

    # -------------------------------------------------------------------------
    # Family members
    # -------------------------------------------------------------------------

    async def get_family_members(self, user_id: str, limit: Optional[int] = None) -> list[Record]:
        return await self._list("family_members", user_id, oldest_first("created_at"), limit)

    async def create_family_member(self, member: Payload) -> Record:
        return await self._create("family_members", member)

    async def update_family_member(self, member_id: str, updates: Payload) -> Optional[Record]:
        return await self._update("family_members", member_id, updates)

    async def delete_family_member(self, member_id: str) -> None:
        await self._delete("family_members", member_id)

    async def get_total_family_income(self, user_id: str) -> float:
        """Sum of monthly income over active family members."""
        def total() -> float:
            members = filter_by_user(self._store.get_table("family_members"), user_id)
            return sum_field((m for m in members if m.get("is_active")), "monthly_income")

        return await self._network.run(total)

    # -------------------------------------------------------------------------
    # Investments
    # -------------------------------------------------------------------------

    async def get_investments(self, user_id: str, limit: Optional[int] = None) -> list[Record]:
        return await self._list("investments", user_id, newest_first("created_at"), limit)

    async def create_investment(self, investment: Payload) -> Record:
        return await self._create("investments", investment, with_updated_at=True)

    async def update_investment(self, investment_id: str, updates: Payload) -> Optional[Record]:
        return await self._update("investments", investment_id, updates, touch=True)

    async def delete_investment(self, investment_id: str) -> None:
        await self._delete("investments", investment_id)

    async def get_total_investment_value(self, user_id: str) -> float:
        return await self._network.run(
            lambda: sum_field(
                filter_by_user(self._store.get_table("investments"), user_id),
                "current_value",
            )
        )

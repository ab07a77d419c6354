"""Tests for the entity API and its query helpers."""

import asyncio
from datetime import date

import pytest

from flowguide.api import FlowGuideAPI, compute_balance, parse_timestamp, to_number
from flowguide.models import GoalCreate, TransactionCreate, TransactionType
from flowguide.services.network import NetworkHiccupError, NetworkSimulator
from flowguide.services.storage import DEFAULT_USER_ID, NotFoundError

from conftest import ScriptedRandom


USER = DEFAULT_USER_ID


def run(coro):
    return asyncio.run(coro)


class TestQueryHelpers:
    """Coercion and aggregation helpers."""

    def test_balance_computation(self):
        transactions = [
            {"type": "income", "amount": 100},
            {"type": "expense", "amount": 30},
            {"type": "income", "amount": 5.5},
        ]
        assert compute_balance(transactions) == pytest.approx(75.5)

    def test_balance_coerces_amounts(self):
        transactions = [
            {"type": "income", "amount": "250.5"},
            {"type": "expense", "amount": "abc"},
            {"type": "expense", "amount": None},
            {"type": "expense", "amount": 50},
        ]
        assert compute_balance(transactions) == pytest.approx(200.5)

    def test_to_number(self):
        assert to_number("12") == 12.0
        assert to_number(float("nan")) == 0.0
        assert to_number([1]) == 0.0

    def test_parse_timestamp_accepts_dates_and_timestamps(self):
        assert parse_timestamp("2025-01-02").year == 2025
        assert parse_timestamp("2025-01-02T10:00:00.000Z").hour == 10
        assert parse_timestamp("garbage") < parse_timestamp("1970-01-01")


class TestScoping:
    """Queries never leak another user's records."""

    def test_list_queries_are_scoped(self, api, store):
        run(api.create_transaction({"user_id": "demo-jordan", "type": "income", "amount": 1, "date": "2025-01-01"}))
        run(api.create_goal({"user_id": "demo-jordan", "name": "Boat", "target_amount": 10}))

        for getter in (api.get_transactions, api.get_goals, api.get_bills, api.get_alerts):
            rows = run(getter(USER))
            assert rows
            assert all(row["user_id"] == USER for row in rows)

        jordan = run(api.get_transactions("demo-jordan"))
        assert [row["user_id"] for row in jordan] == ["demo-jordan"]

    def test_unknown_user_sees_nothing(self, api):
        assert run(api.get_bills("nobody")) == []
        assert run(api.get_balance("nobody")) == 0


class TestOrdering:
    """Sort orders per entity."""

    def test_bills_by_ascending_due_date(self, api, store):
        store.set_table("bills", [])
        for due in ["2025-03-01", "2025-01-01", "2025-02-01"]:
            run(api.create_bill({"user_id": USER, "name": due, "amount": 1, "due_date": due}))

        bills = run(api.get_bills(USER))
        assert [bill["due_date"] for bill in bills] == ["2025-01-01", "2025-02-01", "2025-03-01"]

    def test_seed_bills_order(self, api):
        bills = run(api.get_bills(USER))
        assert [bill["id"] for bill in bills] == ["bill-internet", "bill-mortgage", "bill-card"]

    def test_transactions_newest_date_first(self, api):
        ids = [txn["id"] for txn in run(api.get_transactions(USER))]
        assert ids == [
            "txn-mortgage",
            "txn-groceries",
            "txn-salary",
            "txn-utilities",
            "txn-childcare",
            "txn-investment",
            "txn-freelance",
        ]

    def test_transactions_same_date_newest_created_first(self, api, store):
        store.set_table("transactions", [
            {"id": "a", "user_id": USER, "type": "expense", "amount": 1,
             "date": "2025-01-01", "created_at": "2025-01-01T08:00:00.000Z"},
            {"id": "b", "user_id": USER, "type": "expense", "amount": 1,
             "date": "2025-01-01", "created_at": "2025-01-01T09:00:00.000Z"},
        ])
        assert [txn["id"] for txn in run(api.get_transactions(USER))] == ["b", "a"]

    def test_transactions_default_limit(self, api, store):
        store.set_table("transactions", [
            {"id": f"t{i}", "user_id": USER, "type": "expense", "amount": 1,
             "date": f"2024-01-{(i % 28) + 1:02d}"}
            for i in range(60)
        ])
        assert len(run(api.get_transactions(USER))) == 50
        assert len(run(api.get_transactions(USER, limit=None))) == 60
        assert len(run(api.get_transactions(USER, limit=3))) == 3

    def test_monthly_reports_latest_month_first(self, api):
        months = [report["month"] for report in run(api.get_monthly_reports(USER))]
        assert months == ["2025-02", "2025-01", "2024-12"]

    def test_family_members_oldest_first(self, api):
        ids = [member["id"] for member in run(api.get_family_members(USER))]
        assert ids == ["member-alex", "member-jamie", "member-mila"]

    def test_limit_applies_after_sort(self, api):
        goals = run(api.get_goals(USER, limit=1))
        assert [goal["id"] for goal in goals] == ["goal-remodel"]


class TestCrud:
    """Create, update and delete through the API."""

    def test_create_stamps_server_fields(self, api):
        created = run(api.create_transaction(TransactionCreate(
            user_id=USER,
            type=TransactionType.EXPENSE,
            amount=12.5,
            category="Coffee",
            date=date(2025, 1, 5),
        )))

        assert created["id"].startswith("txn_")
        assert created["created_at"].endswith("Z")
        assert created["type"] == "expense"
        assert created["date"] == "2025-01-05"

    def test_create_investment_sets_updated_at(self, api):
        created = run(api.create_investment({
            "user_id": USER, "name": "Bonds", "type": "bonds",
            "initial_amount": 100, "current_value": 100, "purchase_date": "2025-01-01",
        }))
        assert created["updated_at"] == created["created_at"]

    def test_update_profile_stamps_updated_at(self, api):
        before = run(api.get_profile(USER))
        updated = run(api.update_profile(USER, {"name": "Alex M."}))

        assert updated["name"] == "Alex M."
        assert updated["updated_at"] != before["updated_at"]

    def test_update_missing_returns_none(self, api):
        assert run(api.update_bill("missing", {"amount": 5})) is None

    def test_delete_returns_none(self, api):
        assert run(api.delete_transaction("txn-salary")) is None
        assert run(api.delete_transaction("txn-salary")) is None
        assert all(txn["id"] != "txn-salary" for txn in run(api.get_transactions(USER)))

    def test_goal_can_exceed_target(self, api):
        """Progress is never clamped to the target."""
        goal = run(api.create_goal(GoalCreate(
            user_id=USER, name="New laptop", target_amount=1000, current_amount=0,
        )))

        current = goal["current_amount"]
        for deposit in (400, 700):
            current += deposit
            run(api.update_goal(goal["id"], {"current_amount": current}))

        saved = [g for g in run(api.get_goals(USER)) if g["id"] == goal["id"]][0]
        assert saved["current_amount"] == 1100


class TestAlerts:
    def test_unread_alerts(self, api):
        unread = run(api.get_unread_alerts(USER))
        assert [alert["id"] for alert in unread] == ["alert-low-balance", "alert-bill"]

    def test_create_alert_defaults_unread(self, api):
        created = run(api.create_alert({
            "user_id": USER, "type": "bill_due", "title": "Water", "message": "Due soon",
            "severity": "info",
        }))
        assert created["is_read"] is False

    def test_mark_alert_as_read(self, api):
        run(api.mark_alert_as_read("alert-bill"))
        unread = run(api.get_unread_alerts(USER))
        assert [alert["id"] for alert in unread] == ["alert-low-balance"]

    def test_mark_missing_alert_raises(self, api):
        with pytest.raises(NotFoundError, match="Alert not found"):
            run(api.mark_alert_as_read("alert-missing"))


class TestAggregates:
    def test_seed_balance(self, api):
        assert run(api.get_balance(USER)) == pytest.approx(2959.37)

    def test_family_income_counts_active_members_only(self, api):
        run(api.update_family_member("member-jamie", {"is_active": False}))
        assert run(api.get_total_family_income(USER)) == pytest.approx(8200)

    def test_total_investment_value(self, api):
        assert run(api.get_total_investment_value(USER)) == pytest.approx(27000)

    def test_get_monthly_report_by_month(self, api):
        report = run(api.get_monthly_report(USER, "2025-01"))
        assert report["biggest_category"] == "Childcare"
        assert run(api.get_monthly_report(USER, "1999-01")) is None


class TestNetworkBehaviour:
    def test_first_call_can_fail_once(self, store, sleep):
        api = FlowGuideAPI(store, NetworkSimulator(rng=ScriptedRandom(default=0.0), sleep=sleep))

        with pytest.raises(NetworkHiccupError):
            run(api.get_bills(USER))
        assert len(run(api.get_bills(USER))) == 3

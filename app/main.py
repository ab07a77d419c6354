"""
Streamlit Frontend for FlowGuide

The household-facing UI. Everything here reads and writes through the
entity API, so pages feel like a remote app: calls take a moment and
the first unlucky one fails with a "network hiccup" the user can retry.

DESIGN PRINCIPLES:
1. Every page is scoped to the signed-in demo user
2. Errors are shown in plain language, never as tracebacks
3. Input is validated with the payload models before it is saved
"""

import asyncio
from datetime import date

import streamlit as st
from pydantic import ValidationError

from flowguide.config import get_settings, validate_all_settings
from flowguide.currency import convert, fetch_rate, format_currency
from flowguide.models import (
    AdviceCategory,
    AlertCreate,
    AlertSeverity,
    AlertType,
    BillCreate,
    FamilyMemberCreate,
    GoalCreate,
    InvestmentCreate,
    InvestmentType,
    Relationship,
    TransactionCreate,
    TransactionType,
)
from flowguide.orchestrator import FinanceFlow, create_app_components
from flowguide.api import FlowGuideAPI
from flowguide.services.auth import DemoAuth
from flowguide.services.calls import CallService, CallServiceError
from flowguide.services.network import NetworkHiccupError
from flowguide.services.storage import DEFAULT_USER_ID, StorageError


# Page configuration
st.set_page_config(
    page_title="FlowGuide",
    page_icon="💸",
    layout="wide",
    initial_sidebar_state="expanded",
)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_components():
    """Get or create application components (cached)."""
    return create_app_components()


def call_api(coro, spinner: str = "Loading..."):
    """Run an API call, showing hiccups and store errors as friendly messages."""
    with st.spinner(spinner):
        try:
            return run_async(coro)
        except NetworkHiccupError as e:
            st.warning(f"📡 {e}")
            return None
        except StorageError as e:
            st.error(f"⚠️ {e}")
            return None


def reset_demo_data(api: FlowGuideAPI) -> None:
    """Restore the seed tables. The spent network hiccup stays spent."""
    api.store.reset_store()


def money(amount: float) -> str:
    currency = st.session_state.get("currency", get_settings().app.default_currency)
    rate = st.session_state.get("rate")
    return format_currency(convert(amount, rate), currency)


def main():
    """Main application entry point."""
    api, flow, auth = get_components()

    session = auth.get_session()
    user_id = session.user.id if session else DEFAULT_USER_ID

    st.sidebar.title("💸 FlowGuide")
    if session:
        st.sidebar.caption(f"Signed in as {session.user.email}")
    else:
        if st.sidebar.button("Sign in to demo"):
            run_async(auth.sign_in())
            st.rerun()
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        [
            "🏠 Dashboard",
            "💳 Transactions",
            "🧾 Bills",
            "🎯 Goals",
            "👨‍👩‍👧 Family & Investments",
            "📈 Reports & Forecasts",
            "🧮 Budget Planner",
            "📷 Receipt Scanner",
            "💬 Advice",
            "🔔 Alerts",
            "⚙️ Settings",
        ],
        index=0,
    )

    if page == "🏠 Dashboard":
        render_dashboard_page(flow, user_id)
    elif page == "💳 Transactions":
        render_transactions_page(api, user_id)
    elif page == "🧾 Bills":
        render_bills_page(api, user_id)
    elif page == "🎯 Goals":
        render_goals_page(api, user_id)
    elif page == "👨‍👩‍👧 Family & Investments":
        render_family_page(api, user_id)
    elif page == "📈 Reports & Forecasts":
        render_reports_page(api, flow, user_id)
    elif page == "🧮 Budget Planner":
        render_budget_page(api, flow, user_id)
    elif page == "📷 Receipt Scanner":
        render_receipts_page(api, flow, user_id)
    elif page == "💬 Advice":
        render_advice_page(api, flow, user_id)
    elif page == "🔔 Alerts":
        render_alerts_page(api, user_id)
    elif page == "⚙️ Settings":
        render_settings_page(api, auth)


def render_dashboard_page(flow: FinanceFlow, user_id: str):
    st.title("🏠 Dashboard")

    summary = call_api(flow.dashboard_summary(user_id))
    if summary is None:
        return

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Balance", money(summary.balance))
    col2.metric("Income", money(summary.total_income))
    col3.metric("Expenses", money(summary.total_expenses))
    col4.metric("Health score", f"{summary.health.score} ({summary.health.level})")
    st.caption(summary.health.recommendation)

    st.markdown("### Insights")
    for insight in summary.insights:
        icon = "⚡" if insight.actionable else "💡"
        st.info(f"{icon} **{insight.title}**: {insight.description}")

    if summary.unread_alerts:
        st.markdown(f"### 🔔 {len(summary.unread_alerts)} unread alerts")
        for alert in summary.unread_alerts[:3]:
            st.warning(f"**{alert.get('title')}**: {alert.get('message')}")

    st.markdown("### Recent transactions")
    for txn in summary.recent_transactions:
        sign = "+" if txn.get("type") == "income" else "-"
        st.write(f"{txn.get('date', '')[:10]} · {txn.get('description') or txn.get('category')} · {sign}{money(float(txn.get('amount') or 0))}")


def render_transactions_page(api: FlowGuideAPI, user_id: str):
    st.title("💳 Transactions")

    with st.form("new_transaction"):
        col1, col2, col3 = st.columns(3)
        txn_type = col1.selectbox("Type", list(TransactionType), format_func=lambda t: t.value.title())
        amount = col2.number_input("Amount", min_value=0.0, step=10.0)
        txn_date = col3.date_input("Date", value=date.today())
        category = st.text_input("Category")
        description = st.text_input("Description")
        submitted = st.form_submit_button("Add transaction", type="primary")

    if submitted:
        try:
            payload = TransactionCreate(
                user_id=user_id,
                type=txn_type,
                amount=amount,
                category=category or None,
                description=description or None,
                date=txn_date,
            )
        except ValidationError as e:
            st.error(f"Please check the form: {e.errors()[0]['msg']}")
        else:
            if call_api(api.create_transaction(payload), "Saving..."):
                st.success("✅ Transaction saved")

    transactions = call_api(api.get_transactions(user_id)) or []
    for txn in transactions:
        col1, col2 = st.columns([5, 1])
        col1.write(
            f"{str(txn.get('date', ''))[:10]} · {txn.get('category') or '-'} · "
            f"{txn.get('description') or ''} · {txn.get('type')} {money(float(txn.get('amount') or 0))}"
        )
        if col2.button("Delete", key=f"del_{txn['id']}"):
            call_api(api.delete_transaction(txn["id"]), "Deleting...")
            st.rerun()


def render_bills_page(api: FlowGuideAPI, user_id: str):
    st.title("🧾 Bills")

    with st.form("new_bill"):
        name = st.text_input("Bill name")
        col1, col2 = st.columns(2)
        amount = col1.number_input("Amount", min_value=0.0, step=10.0)
        due_date = col2.date_input("Due date", value=date.today())
        submitted = st.form_submit_button("Add bill", type="primary")

    if submitted:
        try:
            payload = BillCreate(user_id=user_id, name=name, amount=amount, due_date=due_date)
        except ValidationError as e:
            st.error(f"Please check the form: {e.errors()[0]['msg']}")
        else:
            if call_api(api.create_bill(payload), "Saving..."):
                st.success("✅ Bill saved")

    for bill in call_api(api.get_bills(user_id)) or []:
        col1, col2 = st.columns([5, 1])
        col1.write(f"{str(bill.get('due_date'))[:10]} · {bill.get('name')} · {money(float(bill.get('amount') or 0))} · {bill.get('status')}")
        if bill.get("status") != "paid" and col2.button("Mark paid", key=f"paid_{bill['id']}"):
            call_api(api.update_bill(bill["id"], {"status": "paid"}), "Updating...")
            st.rerun()


def render_goals_page(api: FlowGuideAPI, user_id: str):
    st.title("🎯 Goals")

    with st.form("new_goal"):
        name = st.text_input("Goal")
        col1, col2 = st.columns(2)
        target = col1.number_input("Target amount", min_value=0.0, step=100.0)
        current = col2.number_input("Saved so far", min_value=0.0, step=100.0)
        submitted = st.form_submit_button("Add goal", type="primary")

    if submitted:
        try:
            payload = GoalCreate(user_id=user_id, name=name, target_amount=target, current_amount=current)
        except ValidationError as e:
            st.error(f"Please check the form: {e.errors()[0]['msg']}")
        else:
            if call_api(api.create_goal(payload), "Saving..."):
                st.success("✅ Goal saved")

    for goal in call_api(api.get_goals(user_id)) or []:
        target = float(goal.get("target_amount") or 0)
        current = float(goal.get("current_amount") or 0)
        progress = current / target if target else 0
        st.write(f"**{goal.get('name')}** · {money(current)} of {money(target)}")
        st.progress(min(progress, 1.0))


def render_family_page(api: FlowGuideAPI, user_id: str):
    st.title("👨‍👩‍👧 Family & Investments")

    total_income = call_api(api.get_total_family_income(user_id))
    total_value = call_api(api.get_total_investment_value(user_id))
    col1, col2 = st.columns(2)
    if total_income is not None:
        col1.metric("Family monthly income", money(total_income))
    if total_value is not None:
        col2.metric("Portfolio value", money(total_value))

    st.markdown("### Family members")
    with st.form("new_member"):
        name = st.text_input("Name")
        relationship = st.selectbox("Relationship", list(Relationship), format_func=lambda r: r.value.title())
        income = st.number_input("Monthly income", min_value=0.0, step=100.0)
        submitted = st.form_submit_button("Add member")
    if submitted:
        try:
            payload = FamilyMemberCreate(user_id=user_id, name=name, relationship=relationship, monthly_income=income)
        except ValidationError as e:
            st.error(f"Please check the form: {e.errors()[0]['msg']}")
        else:
            call_api(api.create_family_member(payload), "Saving...")

    for member in call_api(api.get_family_members(user_id)) or []:
        status = "active" if member.get("is_active") else "inactive"
        st.write(f"{member.get('name')} · {member.get('relationship')} · {money(float(member.get('monthly_income') or 0))} · {status}")

    st.markdown("### Investments")
    with st.form("new_investment"):
        name = st.text_input("Investment name")
        inv_type = st.selectbox("Type", list(InvestmentType), format_func=lambda t: t.value.replace("_", " ").title())
        col1, col2 = st.columns(2)
        initial = col1.number_input("Initial amount", min_value=0.0, step=100.0)
        current = col2.number_input("Current value", min_value=0.0, step=100.0)
        submitted = st.form_submit_button("Add investment")
    if submitted:
        try:
            payload = InvestmentCreate(
                user_id=user_id,
                name=name,
                type=inv_type,
                initial_amount=initial,
                current_value=current,
                purchase_date=date.today(),
            )
        except ValidationError as e:
            st.error(f"Please check the form: {e.errors()[0]['msg']}")
        else:
            call_api(api.create_investment(payload), "Saving...")

    for investment in call_api(api.get_investments(user_id)) or []:
        st.write(f"{investment.get('name')} · {investment.get('type')} · {money(float(investment.get('current_value') or 0))}")


def render_reports_page(api: FlowGuideAPI, flow: FinanceFlow, user_id: str):
    st.title("📈 Reports & Forecasts")

    col1, col2 = st.columns(2)
    if col1.button("Generate last month's report", type="primary"):
        if call_api(flow.generate_monthly_report(user_id), "Building report..."):
            st.success("✅ Report saved")
    if col2.button("Forecast next month"):
        if call_api(flow.generate_forecast(user_id), "Forecasting..."):
            st.success("✅ Forecast saved")

    st.markdown("### Monthly reports")
    for report in call_api(api.get_monthly_reports(user_id)) or []:
        with st.expander(f"{report.get('month')}: {money(float(report.get('total_income') or 0))} in, {money(float(report.get('total_expenses') or 0))} out"):
            st.write("**Good habits:**", ", ".join(report.get("good_habits") or []))
            st.write("**Watch out for:**", ", ".join(report.get("bad_habits") or []) or "Nothing")
            for suggestion in report.get("suggestions") or []:
                st.write(f"- {suggestion}")

    st.markdown("### Spending forecasts")
    for forecast in call_api(api.get_spending_forecasts(user_id)) or []:
        st.write(
            f"{forecast.get('forecast_month')} · predicted spend "
            f"{money(float(forecast.get('predicted_expenses') or 0))} · risk {forecast.get('overspend_risk')} · "
            f"safe to spend {money(float(forecast.get('safe_to_spend') or 0))}"
        )


def render_budget_page(api: FlowGuideAPI, flow: FinanceFlow, user_id: str):
    st.title("🧮 Budget Planner")

    with st.form("budget"):
        col1, col2 = st.columns(2)
        income = col1.number_input("Monthly income", min_value=0.0, step=100.0)
        fixed = col2.number_input("Fixed expenses", min_value=0.0, step=50.0)
        age = col1.number_input("Age", min_value=0, max_value=130, value=30)
        lifestyle = col2.selectbox("Lifestyle", ["frugal", "moderate", "comfortable"], index=1)
        responsibilities = st.text_input("Responsibilities")
        submitted = st.form_submit_button("Generate plan", type="primary")

    if submitted:
        plan = call_api(
            flow.generate_budget_plan(user_id, income, fixed, int(age), responsibilities, lifestyle),
            "Planning...",
        )
        if plan:
            st.success(plan["savings_plan"])
            st.bar_chart(plan["budget_percentages"])
            st.metric("Emergency fund target", money(plan["emergency_fund_target"]))

    st.markdown("### Saved plans")
    for plan in call_api(api.get_budget_plans(user_id)) or []:
        st.write(f"{plan.get('created_at', '')[:10]} · income {money(float(plan.get('income') or 0))} · {plan.get('lifestyle')}")


def render_receipts_page(api: FlowGuideAPI, flow: FinanceFlow, user_id: str):
    st.title("📷 Receipt Scanner")

    uploaded_file = st.file_uploader("Receipt photo", type=["jpg", "jpeg", "png", "webp"])
    if uploaded_file and st.button("🔍 Scan receipt", type="primary"):
        result = call_api(flow.scan_receipt(user_id, image_url=uploaded_file.name), "Scanning...")
        if result:
            receipt, _ = result
            st.success(f"✅ {receipt['merchant']} · {money(receipt['amount'])} saved as an expense")

    for receipt in call_api(api.get_receipts(user_id)) or []:
        st.write(f"{str(receipt.get('date'))[:10]} · {receipt.get('merchant')} · {money(float(receipt.get('amount') or 0))}")


def render_advice_page(api: FlowGuideAPI, flow: FinanceFlow, user_id: str):
    st.title("💬 Advice")

    category = st.selectbox("Topic", list(AdviceCategory), format_func=lambda c: c.value.title())
    question = st.text_input("Your question", placeholder="How much should I keep for emergencies?")
    if st.button("Ask", type="primary") and question:
        advice = call_api(flow.ask_advice(user_id, category, question), "Thinking...")
        if advice:
            st.info(advice["answer"])

    st.markdown("### History")
    for entry in call_api(api.get_advice_history(user_id)) or []:
        with st.expander(f"[{entry.get('category')}] {entry.get('question')}"):
            st.write(entry.get("answer"))


def render_alerts_page(api: FlowGuideAPI, user_id: str):
    st.title("🔔 Alerts")

    with st.expander("Create a reminder"):
        title = st.text_input("Title")
        message = st.text_input("Message")
        severity = st.selectbox("Severity", list(AlertSeverity), format_func=lambda s: s.value.title())
        if st.button("Add alert") and title:
            payload = AlertCreate(
                user_id=user_id,
                type=AlertType.BILL_DUE,
                title=title,
                message=message,
                severity=severity,
            )
            call_api(api.create_alert(payload), "Saving...")

    for alert in call_api(api.get_alerts(user_id)) or []:
        col1, col2 = st.columns([5, 1])
        marker = "" if alert.get("is_read") else "🆕 "
        col1.write(f"{marker}**{alert.get('title')}**: {alert.get('message')}")
        if not alert.get("is_read") and col2.button("Read", key=f"read_{alert['id']}"):
            call_api(api.mark_alert_as_read(alert["id"]), "Updating...")
            st.rerun()


def render_settings_page(api: FlowGuideAPI, auth: DemoAuth):
    st.title("⚙️ Settings")

    st.markdown("### Display currency")
    currency = st.selectbox("Currency", ["USD", "INR"], index=0)
    if currency != st.session_state.get("currency", "USD"):
        st.session_state.currency = currency
        st.session_state.rate = fetch_rate("USD", currency) if currency != "USD" else None
        if currency != "USD" and st.session_state.rate is None:
            st.warning("Exchange rate unavailable, showing USD amounts.")

    st.markdown("### Call me")
    phone = st.text_input("Phone number", placeholder="+15551234567")
    if st.button("📞 Request a call") and phone:
        try:
            sid = CallService().place_call(phone)
            st.success(f"Call initiated ({sid})")
        except CallServiceError as e:
            st.error(str(e))

    st.markdown("### Connection Status")
    status = validate_all_settings()
    for name, key in [("Demo store", "store"), ("Twilio (calls)", "calls"), ("App", "app")]:
        if status.get(key, False):
            st.success(f"✅ {name}")
        else:
            st.error(f"❌ {name} - {status.get(f'{key}_error', 'Not configured')}")

    st.markdown("### Demo data")
    if st.button("Reset demo data"):
        reset_demo_data(api)
        st.success("Demo data restored")

    if auth.get_session() and st.button("Sign out"):
        run_async(auth.sign_out())
        st.rerun()


if __name__ == "__main__":
    main()

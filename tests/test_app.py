"""Tests for the Streamlit helpers that sit between pages and the API."""

import asyncio
from contextlib import nullcontext

import pytest

from flowguide.api import FlowGuideAPI
from flowguide.services.network import NetworkHiccupError, NetworkSimulator

from app import main as ui
from conftest import RecordingSleep, ScriptedRandom


@pytest.fixture
def messages(monkeypatch):
    """Capture what the helpers show instead of drawing it."""
    shown = []
    monkeypatch.setattr(ui.st, "spinner", lambda text: nullcontext())
    monkeypatch.setattr(ui.st, "warning", lambda text: shown.append(("warning", text)))
    monkeypatch.setattr(ui.st, "error", lambda text: shown.append(("error", text)))
    return shown


class TestCallApi:
    """Errors from the API become messages, never tracebacks."""

    def test_returns_result(self, api, messages):
        alerts = ui.call_api(api.get_alerts("demo-alex"))

        assert isinstance(alerts, list)
        assert messages == []

    def test_network_hiccup_is_a_warning(self, messages):
        async def hiccup():
            raise NetworkHiccupError("Demo network hiccup. Please retry.")

        assert ui.call_api(hiccup()) is None
        assert messages == [("warning", "📡 Demo network hiccup. Please retry.")]

    def test_missing_alert_is_an_error(self, api, messages):
        assert ui.call_api(api.mark_alert_as_read("alert-missing")) is None
        assert messages == [("error", "⚠️ Alert not found")]


class TestResetDemoData:
    def test_restores_tables_and_keeps_hiccup_spent(self, store):
        network = NetworkSimulator(rng=ScriptedRandom(default=0.0), sleep=RecordingSleep())
        api = FlowGuideAPI(store, network)
        with pytest.raises(NetworkHiccupError):
            asyncio.run(network.run(lambda: None))
        store.set_table("alerts", [])

        ui.reset_demo_data(api)

        assert store.get_table("alerts") != []
        assert network.has_failed_once is True
        assert asyncio.run(network.run(lambda: "ok")) == "ok"

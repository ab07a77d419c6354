"""Tests for currency helpers (no real HTTP)."""

import pytest
import requests

from flowguide import currency
from flowguide.currency import convert, fetch_rate, format_currency


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} error")

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


@pytest.fixture
def no_wait(monkeypatch):
    monkeypatch.setattr("time.sleep", lambda seconds: None)


class TestFetchRate:
    def test_returns_rate(self, monkeypatch):
        seen = {}

        def fake_get(url, params=None, timeout=None):
            seen.update(url=url, params=params)
            return FakeResponse({"rates": {"INR": 83.1}})

        monkeypatch.setattr(currency.requests, "get", fake_get)

        assert fetch_rate("USD", "INR") == 83.1
        assert seen == {
            "url": "https://api.exchangerate.host/latest",
            "params": {"base": "USD", "symbols": "INR"},
        }

    def test_missing_rate_returns_none(self, monkeypatch):
        monkeypatch.setattr(currency.requests, "get", lambda *a, **k: FakeResponse({"success": False}))
        assert fetch_rate("USD", "INR") is None

    def test_http_error_returns_none(self, monkeypatch):
        monkeypatch.setattr(currency.requests, "get", lambda *a, **k: FakeResponse({}, status_code=503))
        assert fetch_rate("USD", "INR") is None

    def test_bad_json_returns_none(self, monkeypatch):
        monkeypatch.setattr(currency.requests, "get", lambda *a, **k: FakeResponse(ValueError("not json")))
        assert fetch_rate("USD", "INR") is None

    def test_connection_errors_are_retried(self, monkeypatch, no_wait):
        attempts = []

        def failing_get(*args, **kwargs):
            attempts.append(1)
            raise requests.exceptions.ConnectionError("offline")

        monkeypatch.setattr(currency.requests, "get", failing_get)

        assert fetch_rate("USD", "INR") is None
        assert len(attempts) == 3


class TestConvertAndFormat:
    def test_convert(self):
        assert convert(10, 2.5) == 25
        assert convert(10, None) == 10
        assert convert(10, float("nan")) == 10
        assert convert(10, 0) == 10

    def test_format_currency(self):
        assert format_currency(1234.5) == "$1,234.50"
        assert format_currency(99, "INR") == "₹99.00"
        assert format_currency(-5, "usd") == "-$5.00"
        assert format_currency(7, "JPY") == "JPY 7.00"

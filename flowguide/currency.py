"""
Currency helpers: exchange rates and amount formatting.

Rates come from exchangerate.host. A failed lookup never raises; callers
get ``None`` and keep showing amounts in the base currency.
"""

import math
from typing import Any, Optional

import requests
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from flowguide.audit import get_logger


RATES_URL = "https://api.exchangerate.host/latest"
REQUEST_TIMEOUT_SECONDS = 10

CURRENCY_SYMBOLS = {
    "USD": "$",
    "INR": "₹",
    "EUR": "€",
    "GBP": "£",
}

logger = get_logger(__name__)


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.5, max=4),
    retry=retry_if_exception_type(requests.exceptions.ConnectionError),
    reraise=True,
)
def _request_rates(base: str, symbol: str) -> dict[str, Any]:
    response = requests.get(
        RATES_URL,
        params={"base": base, "symbols": symbol},
        timeout=REQUEST_TIMEOUT_SECONDS,
    )
    response.raise_for_status()
    return response.json()


def fetch_rate(from_currency: str = "USD", to_currency: str = "INR") -> Optional[float]:
    """
    Look up the exchange rate between two currencies.

    Returns:
        Units of ``to_currency`` per unit of ``from_currency``, or None
        when the service is unreachable or has no rate for the pair
    """
    try:
        data = _request_rates(from_currency, to_currency)
    except (requests.exceptions.RequestException, ValueError) as e:
        logger.warning(
            "rate_lookup_failed",
            base=from_currency,
            symbol=to_currency,
            error=str(e),
        )
        return None

    rates = data.get("rates") if isinstance(data, dict) else None
    if not isinstance(rates, dict):
        return None
    rate = rates.get(to_currency)
    if rate is None:
        return None
    try:
        return float(rate)
    except (TypeError, ValueError):
        return None


def convert(amount: float, rate: Optional[float]) -> float:
    """Apply a rate. A missing, zero or non-numeric rate leaves the amount as-is."""
    if not rate:
        return amount
    try:
        rate = float(rate)
    except (TypeError, ValueError):
        return amount
    if math.isnan(rate):
        return amount
    return amount * rate


def format_currency(amount: float, currency: str = "USD") -> str:
    """Render ``amount`` with two decimals, e.g. ``$1,234.50`` or ``₹99.00``."""
    code = (currency or "USD").upper()
    symbol = CURRENCY_SYMBOLS.get(code)
    sign = "-" if amount < 0 else ""
    if symbol is None:
        return f"{sign}{code} {abs(amount):,.2f}"
    return f"{sign}{symbol}{abs(amount):,.2f}"

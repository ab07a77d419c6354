"""
Query helpers shared by the entity API.

Stored values are loosely typed: dates may be full ISO timestamps or bare
``YYYY-MM-DD`` strings, and amounts may arrive as strings from a real
backend. These helpers coerce them without raising.
"""

import math
from datetime import date, datetime, timezone
from typing import Any, Callable, Iterable, Optional

Record = dict[str, Any]

# Sorts unparsable timestamps after every real one in descending order.
_EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


def parse_timestamp(value: Any) -> datetime:
    """Parse a stored date/timestamp into an aware datetime."""
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, date):
        moment = datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value:
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            moment = datetime.fromisoformat(text)
        except ValueError:
            return _EARLIEST
    else:
        return _EARLIEST

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def to_number(value: Any) -> float:
    """Numeric coercion for stored amounts. Anything unusable counts as 0."""
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip() or 0)
        except ValueError:
            return 0.0
    else:
        return 0.0
    return 0.0 if math.isnan(number) else number


def filter_by_user(records: Iterable[Record], user_id: str) -> list[Record]:
    return [record for record in records if record.get("user_id") == user_id]


def apply_limit(records: list[Record], limit: Optional[int]) -> list[Record]:
    if limit is None:
        return records
    return records[:max(limit, 0)]


# Sort orders. Python's sort is stable, so equal keys keep storage order.

def newest_first(field: str) -> Callable[[list[Record]], list[Record]]:
    def sort(records: list[Record]) -> list[Record]:
        return sorted(records, key=lambda r: parse_timestamp(r.get(field)), reverse=True)
    return sort


def oldest_first(field: str) -> Callable[[list[Record]], list[Record]]:
    def sort(records: list[Record]) -> list[Record]:
        return sorted(records, key=lambda r: parse_timestamp(r.get(field)))
    return sort


def by_date_then_created(field: str = "date") -> Callable[[list[Record]], list[Record]]:
    """Newest ``field`` first, newest ``created_at`` breaking ties."""
    def sort(records: list[Record]) -> list[Record]:
        return sorted(
            records,
            key=lambda r: (parse_timestamp(r.get(field)), parse_timestamp(r.get("created_at"))),
            reverse=True,
        )
    return sort


def by_due_date(records: list[Record]) -> list[Record]:
    """Soonest due date first, id breaking ties."""
    return sorted(
        records,
        key=lambda r: (parse_timestamp(r.get("due_date")), str(r.get("id", ""))),
    )


def by_period_desc(field: str) -> Callable[[list[Record]], list[Record]]:
    """Latest period string first (``2025-03`` before ``2025-02``)."""
    def sort(records: list[Record]) -> list[Record]:
        return sorted(records, key=lambda r: str(r.get(field) or ""), reverse=True)
    return sort


def sum_field(records: Iterable[Record], field: str) -> float:
    return sum(to_number(record.get(field)) for record in records)


def compute_balance(transactions: Iterable[Record]) -> float:
    """Income minus expenses. Anything that is not income counts as expense."""
    balance = 0.0
    for transaction in transactions:
        amount = to_number(transaction.get("amount"))
        if transaction.get("type") == "income":
            balance += amount
        else:
            balance -= amount
    return balance

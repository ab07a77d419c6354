"""Entity API package."""

from flowguide.api.entities import DEFAULT_TRANSACTION_LIMIT, FlowGuideAPI
from flowguide.api.queries import compute_balance, parse_timestamp, to_number

__all__ = [
    "DEFAULT_TRANSACTION_LIMIT",
    "FlowGuideAPI",
    "compute_balance",
    "parse_timestamp",
    "to_number",
]

"""Record identifiers and timestamps."""

from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4


def generate_id(prefix: str) -> str:
    """Build a record id such as ``txn_3f0c...``."""
    return f"{prefix}_{uuid4()}"


def to_iso(moment: datetime) -> str:
    """Render a datetime as ISO-8601 UTC with milliseconds and a ``Z`` suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def now_iso(now: Optional[datetime] = None) -> str:
    """Current timestamp in the same format the store writes."""
    return to_iso(now or datetime.now(timezone.utc))

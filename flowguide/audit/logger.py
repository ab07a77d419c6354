"""
Audit Logger

Every mutation of the demo store is logged, together with the events
the store handles silently on the caller's behalf:
- corrupted persisted data replaced by the seed set
- persistence writes that failed and were dropped
- simulated network failures

The audit logger never raises. A logging problem must not break a
store operation.
"""

from typing import Any, Optional

import structlog


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def get_logger(name: Optional[str] = None) -> Any:
    """Return a structlog logger bound to the given name."""
    return structlog.get_logger(name)


class AuditLogger:
    """
    Structured audit trail for the demo store.

    Each method maps to one event name so log queries can filter
    on ``event`` alone.
    """

    def __init__(self, logger: Optional[Any] = None):
        self._logger = logger or get_logger("flowguide.store")

    def record_mutation(
        self,
        table: str,
        operation: str,
        record_id: Optional[str] = None,
        **details: Any,
    ) -> None:
        """Log an insert, update, delete, set or reset."""
        self._logger.info(
            "store_mutation",
            table=table,
            operation=operation,
            record_id=record_id,
            **details,
        )

    def record_reseed(self, reason: str) -> None:
        """Log that the table set was replaced by the seed data."""
        self._logger.warning("store_reseeded", reason=reason)

    def record_persist_failure(self, key: str, error: Exception) -> None:
        """Log a dropped persistence write."""
        self._logger.warning(
            "store_persist_failed",
            storage_key=key,
            error=str(error),
        )

    def record_network_failure(self, message: str) -> None:
        """Log the injected network hiccup."""
        self._logger.warning("network_failure_injected", error_message=message)

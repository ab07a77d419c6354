"""
Network Simulation

Wraps demo-store operations so they behave like remote requests: each
call waits a random latency, and the first unlucky call raises a
"network hiccup". After that one failure no further failure is injected
for the lifetime of the simulator, which lets the UI exercise its error
paths once without becoming unreliable.

The random source and the sleep function are injectable so tests can
force or suppress the failure and skip the wait.
"""

import asyncio
import inspect
import random
from typing import Any, Awaitable, Callable, Optional, TypeVar, Union

from flowguide.audit import AuditLogger


T = TypeVar("T")

DEFAULT_MIN_LATENCY_MS = 150
DEFAULT_MAX_LATENCY_MS = 450
DEFAULT_FAILURE_PROBABILITY = 0.08


class NetworkHiccupError(Exception):
    """Simulated transient failure. Retrying the call will succeed."""

    def __init__(self, message: str = "Demo network hiccup. Please retry."):
        super().__init__(message)


class NetworkSimulator:
    """
    Latency and one-shot failure injection around store operations.

    Attributes:
        has_failed_once: Set after the injected failure fires. Cleared only
            by ``reset_failure()``.
    """

    def __init__(
        self,
        min_latency_ms: int = DEFAULT_MIN_LATENCY_MS,
        max_latency_ms: int = DEFAULT_MAX_LATENCY_MS,
        failure_probability: float = DEFAULT_FAILURE_PROBABILITY,
        allow_failure: bool = True,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self.min_latency_ms = min_latency_ms
        self.max_latency_ms = max_latency_ms
        self.failure_probability = failure_probability
        self.allow_failure = allow_failure
        self.has_failed_once = False
        self._rng = rng or random.Random()
        self._sleep = sleep
        self._audit = audit_logger or AuditLogger()

    @classmethod
    def from_settings(cls, settings, **overrides) -> "NetworkSimulator":
        """Build a simulator from ``StoreSettings``."""
        options = {
            "min_latency_ms": settings.min_latency_ms,
            "max_latency_ms": settings.max_latency_ms,
            "failure_probability": settings.failure_probability,
            "allow_failure": settings.allow_failure,
        }
        options.update(overrides)
        return cls(**options)

    def reset_failure(self) -> None:
        """Re-arm the one-shot failure."""
        self.has_failed_once = False

    async def simulate_latency(
        self,
        min_ms: Optional[int] = None,
        max_ms: Optional[int] = None,
    ) -> None:
        """Wait a whole number of milliseconds drawn uniformly from [min, max]."""
        low = self.min_latency_ms if min_ms is None else min_ms
        high = self.max_latency_ms if max_ms is None else max_ms
        if high < low:
            low, high = high, low
        duration_ms = self._rng.randint(low, high)
        await self._sleep(duration_ms / 1000)

    def maybe_fail_once(self) -> None:
        """Raise the injected failure if this call is the unlucky one."""
        if self.has_failed_once:
            return

        if self._rng.random() < self.failure_probability:
            self.has_failed_once = True
            error = NetworkHiccupError()
            self._audit.record_network_failure(str(error))
            raise error

    async def run(
        self,
        operation: Callable[[], Union[T, Awaitable[T]]],
        allow_failure: Optional[bool] = None,
        min_latency_ms: Optional[int] = None,
        max_latency_ms: Optional[int] = None,
    ) -> T:
        """
        Run ``operation`` as if it were a remote call.

        Args:
            operation: Zero-argument callable, sync or returning an awaitable
            allow_failure: Override the simulator's failure injection setting
            min_latency_ms: Override the lower latency bound for this call
            max_latency_ms: Override the upper latency bound for this call

        Raises:
            NetworkHiccupError: At most once per simulator
        """
        await self.simulate_latency(min_latency_ms, max_latency_ms)

        failure_enabled = self.allow_failure if allow_failure is None else allow_failure
        if failure_enabled:
            self.maybe_fail_once()

        result = operation()
        if inspect.isawaitable(result):
            result = await result
        return result

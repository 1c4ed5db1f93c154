"""
Retry policies — backoff shape, attempt budget and time budget per effect.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from orderflow.domain import Effect, EffectName, Fetch


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """
    How a failed effect call is re-invoked.

    Intervals and timeout are in seconds. `timeout` bounds the whole call,
    attempts and backoff sleeps together.
    """

    initial_interval: float = 1.0
    backoff_coefficient: float = 2.0
    maximum_interval: float = 30.0
    maximum_attempts: int = 10
    timeout: float = 120.0

    def __post_init__(self) -> None:
        if self.maximum_attempts < 1:
            raise ValueError("maximum_attempts must be at least 1")
        if self.initial_interval < 0 or self.maximum_interval < 0:
            raise ValueError("backoff intervals must not be negative")
        if self.backoff_coefficient < 1:
            raise ValueError("backoff_coefficient must be >= 1")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")

    def intervals(self) -> Iterator[float]:
        """Sleeps between consecutive attempts; one fewer than the attempts."""
        interval = self.initial_interval
        for _ in range(self.maximum_attempts - 1):
            yield min(interval, self.maximum_interval)
            interval *= self.backoff_coefficient


# ═══════════════════════════════════════════════════════════════════════════════
# Named Policies
# ═══════════════════════════════════════════════════════════════════════════════

STORE = RetryPolicy(
    initial_interval=0.5,
    backoff_coefficient=2.0,
    maximum_interval=1.6,
    maximum_attempts=9,
    timeout=120.0,
)
"""Local persistent store: short ceiling on backoff."""

EXTERNAL_API = RetryPolicy(
    initial_interval=0.5,
    backoff_coefficient=2.0,
    maximum_interval=3.0,
    maximum_attempts=10,
    timeout=150.0,
)
"""Remote pricing-style service: longer budget, more attempts."""

CACHE = RetryPolicy(
    initial_interval=0.25,
    backoff_coefficient=2.0,
    maximum_interval=10.0,
    maximum_attempts=10,
    timeout=120.0,
)
"""Cache: start retrying fast."""

DEFAULT = RetryPolicy()
"""Notification, alerting and telemetry sinks."""


type PolicyTable = Mapping[EffectName, RetryPolicy]


def policy_table(
    *,
    store: RetryPolicy = STORE,
    external_api: RetryPolicy = EXTERNAL_API,
    cache: RetryPolicy = CACHE,
    default: RetryPolicy = DEFAULT,
) -> PolicyTable:
    """Map every read and write to the policy of its group."""
    return MappingProxyType({
        Fetch.ORDER: store,
        Fetch.CUSTOMER: store,
        Fetch.PRODUCTS: store,
        Fetch.DISCOUNT_RULES: external_api,
        Effect.UPDATE_INVENTORY: store,
        Effect.UPDATE_TOTAL_PURCHASES: store,
        Effect.SET_CACHE: cache,
        Effect.SEND_EMAIL: default,
        Effect.TRACK_EVENT: default,
        Effect.SEND_ALERTS: default,
    })


DEFAULT_POLICIES: PolicyTable = policy_table()


def policy_for(name: EffectName, table: PolicyTable = DEFAULT_POLICIES) -> RetryPolicy:
    return table.get(name, DEFAULT)


__all__ = (
    "RetryPolicy",
    "STORE",
    "EXTERNAL_API",
    "CACHE",
    "DEFAULT",
    "PolicyTable",
    "policy_table",
    "DEFAULT_POLICIES",
    "policy_for",
)

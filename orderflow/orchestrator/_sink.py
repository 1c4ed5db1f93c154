"""
Outcome sinks — where applied-effect outcomes are observed.

Optional effects report here and nowhere else; the caller of
`process_order` never sees them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from kungfu import Result, Ok, Error

from orderflow.domain import Effect, EffectFailure
from orderflow.effects import Category
from orderflow.logging import get_logger

# ═══════════════════════════════════════════════════════════════════════════════
# EffectOutcome
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class EffectOutcome:
    """How one applied effect ended."""

    order_id: str
    effect: Effect
    category: Category
    result: Result[None, EffectFailure]

    @property
    def succeeded(self) -> bool:
        return isinstance(self.result, Ok)

    @property
    def failure(self) -> EffectFailure | None:
        match self.result:
            case Error(failure):
                return failure
            case _:
                return None


# ═══════════════════════════════════════════════════════════════════════════════
# Sink Protocol — Users Implement This
# ═══════════════════════════════════════════════════════════════════════════════


class OutcomeSink(Protocol):
    """
    Observer for effect outcomes.

    Implement this to forward outcomes to metrics, tracing, a dead-letter
    queue, etc.

    Example:
        class StatsdSink:
            def __init__(self, client: StatsClient) -> None:
                self.client = client

            async def record(self, outcome: EffectOutcome) -> None:
                status = "ok" if outcome.succeeded else "failed"
                self.client.incr(f"effects.{outcome.effect}.{status}")
    """

    async def record(self, outcome: EffectOutcome) -> None:
        ...


# ═══════════════════════════════════════════════════════════════════════════════
# Built-in Sinks
# ═══════════════════════════════════════════════════════════════════════════════


class LoggingSink:
    """Log successes at INFO and failures at WARNING."""

    def __init__(self, name: str = "outcomes") -> None:
        self._logger = get_logger(name)

    async def record(self, outcome: EffectOutcome) -> None:
        failure = outcome.failure
        if failure is None:
            self._logger.info(
                "%s effect %s applied for order %s",
                outcome.category, outcome.effect, outcome.order_id,
            )
        else:
            self._logger.warning(
                "%s effect %s failed for order %s after %d attempt(s): %s",
                outcome.category, outcome.effect, outcome.order_id,
                failure.attempts, failure,
            )


@dataclass
class MemorySink:
    """Keep every outcome; handy in tests."""

    outcomes: list[EffectOutcome] = field(default_factory=list[EffectOutcome])

    async def record(self, outcome: EffectOutcome) -> None:
        self.outcomes.append(outcome)

    def failures(self) -> list[EffectFailure]:
        return [o.failure for o in self.outcomes if o.failure is not None]

    def for_effect(self, effect: Effect) -> list[EffectOutcome]:
        return [o for o in self.outcomes if o.effect == effect]


__all__ = (
    "EffectOutcome",
    "OutcomeSink",
    "LoggingSink",
    "MemorySink",
)

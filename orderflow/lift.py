"""
Lift — helpers for turning effect calls into lazy results.

Re-exports from combinators.lift with orderflow-specific additions.
"""

from __future__ import annotations

from kungfu import LazyCoroResult

from combinators.lift import catching_async

from orderflow._types import Attempted, EffectCall
from orderflow.domain import EffectFailure, EffectName
from orderflow.retry import RetryPolicy, Sleep, invoke_with_retry


def effect_call[T](
    name: EffectName,
    call: EffectCall[T],
    policy: RetryPolicy,
    sleep: Sleep,
) -> LazyCoroResult[T, EffectFailure]:
    """
    One retried effect call as a lazy computation.

    Fails with the `EffectFailure` once the policy is spent. Suited to
    `combinators.parallel`, which stops at the first failure.
    Cancellation propagates to the caller.
    """
    async def _run() -> Attempted[T]:
        return await invoke_with_retry(name, call, policy, sleep=sleep)
    return LazyCoroResult(_run)


def settled[T](
    name: EffectName,
    call: EffectCall[T],
    policy: RetryPolicy,
    sleep: Sleep,
) -> LazyCoroResult[Attempted[T], str]:
    """
    One retried effect call whose outcome is the value.

    The effect's own failure travels inside the Ok, so running many of these
    through `combinators.parallel` collects every outcome instead of stopping
    at the first failed one.

    Used for writes: cancellation mid-retry becomes a CANCELLED failure.
    """
    return catching_async(
        lambda: invoke_with_retry(name, call, policy, sleep=sleep, cancel_as_failure=True),
        on_error=str,
    )


__all__ = (
    "catching_async",
    "effect_call",
    "settled",
)

"""
invoke_with_retry() — re-invoke a failing effect call under a policy.

Attempt, and on failure sleep min(interval, maximum_interval), grow the
interval by the coefficient, and try again. Give up when the attempt budget
or the time budget runs out and hand back the last failure as a value.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

from kungfu import Result, Ok, Error

from orderflow._types import EffectCall
from orderflow.domain import EffectFailure, EffectName, FailureKind
from orderflow.logging import get_logger
from orderflow.retry._policy import RetryPolicy

type Sleep = Callable[[float], Awaitable[object]]

logger = get_logger("retry")


def _describe(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


async def invoke_with_retry[T](
    name: EffectName,
    call: EffectCall[T],
    policy: RetryPolicy,
    *,
    sleep: Sleep = asyncio.sleep,
    cancel_as_failure: bool = False,
) -> Result[T, EffectFailure]:
    """
    Run `call` until it succeeds or `policy` is spent.

    Exceptions raised by `call` never escape; they become an
    `EffectFailure` carrying the last cause and the number of attempts.
    Cancellation while an attempt or a backoff sleep is pending is logged
    and re-raised. With `cancel_as_failure` it is reported as a CANCELLED
    failure of this effect instead; writes use this so an interrupted retry
    loop still leaves an outcome behind.

    Example:
        result = await invoke_with_retry(
            Effect.UPDATE_INVENTORY,
            lambda: products.update_inventory(updates),
            STORE,
            cancel_as_failure=True,
        )
        match result:
            case Ok(_):
                ...
            case Error(failure):
                print(failure)  # "Failed to update inventory: ..."
    """
    loop = asyncio.get_running_loop()
    deadline = loop.time() + policy.timeout
    backoff = policy.intervals()
    attempt = 0
    cause = "not attempted"
    kind = FailureKind.ERROR

    try:
        while True:
            attempt += 1
            budget = asyncio.timeout(deadline - loop.time())
            try:
                async with budget:
                    value = await call()
            except TimeoutError as exc:
                if not budget.expired():
                    # The collaborator raised TimeoutError itself; an ordinary failure.
                    cause, kind = _describe(exc), FailureKind.ERROR
                else:
                    cause = f"timed out after {policy.timeout:g}s"
                    kind = FailureKind.TIMEOUT
                    break
            except Exception as exc:
                cause, kind = _describe(exc), FailureKind.ERROR
            else:
                if attempt > 1:
                    logger.info("%s succeeded on attempt %d", name, attempt)
                return Ok(value)

            delay = next(backoff, None)
            if delay is None:
                break
            if loop.time() + delay >= deadline:
                logger.warning("%s: next retry would exceed the %gs budget", name, policy.timeout)
                break

            logger.warning(
                "%s attempt %d/%d failed: %s; retrying in %.2fs",
                name, attempt, policy.maximum_attempts, cause, delay,
            )
            await sleep(delay)

    except asyncio.CancelledError:
        logger.error("%s cancelled during attempt %d", name, attempt)
        if not cancel_as_failure:
            raise
        task = asyncio.current_task()
        if task is not None:
            task.uncancel()
        return Error(EffectFailure(name, "cancelled", attempt, FailureKind.CANCELLED))

    logger.error("%s gave up after %d attempt(s): %s", name, attempt, cause)
    return Error(EffectFailure(name, cause, attempt, kind))


__all__ = ("Sleep", "invoke_with_retry")

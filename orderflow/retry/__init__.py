"""
Retry — durable re-invocation of effect calls.

    from orderflow import retry as R

    result = await R.invoke_with_retry(
        Effect.SET_CACHE,
        lambda: cache.set(key, value, 3600),
        R.policy_for(Effect.SET_CACHE),
    )

Policies are grouped by the kind of collaborator behind the call:
store, external API, cache, and a default for the fire-and-log sinks.
"""

from __future__ import annotations

from orderflow.retry._policy import (
    RetryPolicy,
    STORE,
    EXTERNAL_API,
    CACHE,
    DEFAULT,
    PolicyTable,
    policy_table,
    DEFAULT_POLICIES,
    policy_for,
)
from orderflow.retry._run import Sleep, invoke_with_retry

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
    "Sleep",
    "invoke_with_retry",
)

"""
Core types for orderflow.

Re-exports from kungfu + effect-call aliases.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from kungfu import Result, Ok, Error, LazyCoroResult

from orderflow.domain import EffectFailure, ProcessedOrder, ProcessFailure

# ═══════════════════════════════════════════════════════════════════════════════
# Effect Calls
# ═══════════════════════════════════════════════════════════════════════════════

type EffectCall[T] = Callable[[], Awaitable[T]]
"""A zero-argument coroutine factory; one call is one attempt."""

type Attempted[T] = Result[T, EffectFailure]
"""What the retry wrapper hands back for an effect call."""

type Outcome = Result[ProcessedOrder, ProcessFailure]
"""The only two things `process_order` can return."""

# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    # Re-exports from kungfu
    "Result",
    "Ok",
    "Error",
    "LazyCoroResult",
    # Aliases
    "EffectCall",
    "Attempted",
    "Outcome",
)

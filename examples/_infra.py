"""Shared infrastructure for examples."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine
from typing import Any

from kungfu import Ok, Error

from orderflow import Outcome
from orderflow.config import get_settings
from orderflow.logging import configure_logging


# Collaborator that fails on purpose
class Broken:
    """Wrap a collaborator so that `method` raises the first `times` calls."""

    def __init__(self, inner: Any, method: str, error: str, times: int | None = None) -> None:
        self._inner = inner
        self._method = method
        self._error = error
        self._times = times
        self._calls = 0

    def __getattr__(self, name: str) -> Any:
        attr = getattr(self._inner, name)
        if name != self._method:
            return attr

        async def broken(*args: Any, **kwargs: Any) -> Any:
            self._calls += 1
            if self._times is None or self._calls <= self._times:
                print(f"  ✗ {self._method}: {self._error}")
                raise RuntimeError(self._error)
            return await attr(*args, **kwargs)

        return broken


# Helpers
def banner(title: str) -> None:
    print(f"\n{'─' * 50}\n{title}\n{'─' * 50}")


def show(result: Outcome) -> None:
    match result:
        case Ok(order):
            print(f"\n✓ {order.order_id}: total ${order.total:.2f}, {order.loyalty_points} points")
        case Error(failure):
            print(f"\n✗ failed while {failure.stage}:")
            for message in failure.messages():
                print(f"  - {message}")


def run(main: Callable[[], Coroutine[object, object, None]], level: str | None = None) -> None:
    configure_logging(level or get_settings().log_level)
    asyncio.run(main())

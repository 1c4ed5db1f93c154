"""Shared fixtures for orderflow tests."""

from __future__ import annotations

from typing import Any

import pytest

from orderflow.effects import AppEffects, sample_effects
from orderflow.orchestrator import MemorySink, Orchestrator
from orderflow.retry import PolicyTable, policy_table
from tests.fakes import FAST


@pytest.fixture
def fast_policies() -> PolicyTable:
    return policy_table(store=FAST, external_api=FAST, cache=FAST, default=FAST)


@pytest.fixture
def effects() -> AppEffects:
    return sample_effects()


@pytest.fixture
def sink() -> MemorySink:
    return MemorySink()


@pytest.fixture
def orchestrator_for(fast_policies: PolicyTable, sink: MemorySink):
    """Build an orchestrator with zero-backoff policies and the memory sink."""

    def build(effects: AppEffects, **overrides: Any) -> Orchestrator:
        kwargs: dict[str, Any] = {"policies": fast_policies, "sink": sink}
        kwargs.update(overrides)
        return Orchestrator(effects, **kwargs)

    return build

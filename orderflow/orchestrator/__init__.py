"""
Orchestrator — process an order end to end.

    from orderflow import orchestrator as O

    async with O.Orchestrator(effects, sink=O.MemorySink()) as orchestrator:
        result = await orchestrator.process_order("order-123")

Outcome: Ok(ProcessedOrder) or Error(ProcessFailure). Optional effects are
reported to the sink, never to the caller.
"""

from __future__ import annotations

from orderflow.domain import Stage, ProcessFailure
from orderflow.orchestrator._sink import (
    EffectOutcome,
    OutcomeSink,
    LoggingSink,
    MemorySink,
)
from orderflow.orchestrator._run import Inputs, Orchestrator

__all__ = (
    "Stage",
    "ProcessFailure",
    "EffectOutcome",
    "OutcomeSink",
    "LoggingSink",
    "MemorySink",
    "Inputs",
    "Orchestrator",
)

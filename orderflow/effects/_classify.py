"""
Effect classifier — which writes must succeed.

A classification is a plain table. Moving an effect between categories is a
one-line edit here, never a change to the orchestrator.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from types import MappingProxyType

from orderflow.domain import Effect


class Category(StrEnum):
    CRITICAL = "critical"
    OPTIONAL = "optional"


type Classification = Mapping[Effect, Category]


PARTITIONED: Classification = MappingProxyType({
    Effect.UPDATE_INVENTORY: Category.CRITICAL,
    Effect.UPDATE_TOTAL_PURCHASES: Category.CRITICAL,
    Effect.SET_CACHE: Category.OPTIONAL,
    Effect.SEND_EMAIL: Category.OPTIONAL,
    Effect.TRACK_EVENT: Category.OPTIONAL,
    Effect.SEND_ALERTS: Category.OPTIONAL,
})
"""Inventory and billing must land; the rest is best-effort."""

ALL_CRITICAL: Classification = MappingProxyType({e: Category.CRITICAL for e in Effect})
"""Every write must land (strict mode)."""


def classify(effect: Effect, classification: Classification = PARTITIONED) -> Category:
    return classification[effect]


def partition(
    effects: list[Effect],
    classification: Classification = PARTITIONED,
) -> tuple[list[Effect], list[Effect]]:
    """Split effects into (critical, optional), keeping their order."""
    critical = [e for e in effects if classify(e, classification) is Category.CRITICAL]
    optional = [e for e in effects if classify(e, classification) is Category.OPTIONAL]
    return critical, optional


__all__ = (
    "Category",
    "Classification",
    "PARTITIONED",
    "ALL_CRITICAL",
    "classify",
    "partition",
)

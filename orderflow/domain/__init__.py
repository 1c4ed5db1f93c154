"""
Domain — orders, customers, products and everything derived from them.

    from orderflow import domain as D

    order = D.Order("order-123", "cust-456", lines, created_at)
"""

from __future__ import annotations

from orderflow.domain._types import (
    Tier,
    OrderLine,
    Order,
    Customer,
    Product,
    DiscountRule,
    LineSummary,
    ProcessedOrder,
    InventoryUpdate,
    CacheEntry,
    Notification,
    AnalyticsEvent,
    MissingProductAlert,
    EffectPlan,
)
from orderflow.domain._names import Fetch, Effect, EffectName, FAILURE_LABELS
from orderflow.domain._errors import (
    FailureKind,
    NotFound,
    EffectFailure,
    Cause,
    Stage,
    ProcessFailure,
)

__all__ = (
    "Tier",
    "OrderLine",
    "Order",
    "Customer",
    "Product",
    "DiscountRule",
    "LineSummary",
    "ProcessedOrder",
    "InventoryUpdate",
    "CacheEntry",
    "Notification",
    "AnalyticsEvent",
    "MissingProductAlert",
    "EffectPlan",
    "Fetch",
    "Effect",
    "EffectName",
    "FAILURE_LABELS",
    "FailureKind",
    "NotFound",
    "EffectFailure",
    "Cause",
    "Stage",
    "ProcessFailure",
)

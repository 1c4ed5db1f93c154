"""
Payloads — write-side data derived from a processed order.
"""

from __future__ import annotations

import json
from collections.abc import Sequence

from orderflow.domain import (
    AnalyticsEvent,
    CacheEntry,
    Customer,
    EffectPlan,
    InventoryUpdate,
    LineSummary,
    MissingProductAlert,
    Notification,
    Order,
    ProcessedOrder,
    Tier,
)

CACHE_TTL_SECONDS = 3600
ORDER_PROCESSED = "order_processed"


def inventory_updates(lines: Sequence[LineSummary]) -> tuple[InventoryUpdate, ...]:
    # Stock leaves the warehouse, hence the negative delta.
    return tuple(InventoryUpdate(line.product_id, -line.quantity) for line in lines)


def confirmation_email(customer: Customer, processed: ProcessedOrder) -> Notification:
    body = "\n".join((
        "Thank you for your order!",
        "",
        f"Subtotal: ${processed.subtotal:.2f}",
        f"Discount: -${processed.discount:.2f}",
        f"Total: ${processed.total:.2f}",
        "",
        f"You earned {processed.loyalty_points} loyalty points!",
    ))
    return Notification(
        to=customer.email,
        subject=f"Order {processed.order_id} Confirmed",
        body=body,
    )


def cache_entry(processed: ProcessedOrder) -> CacheEntry:
    return CacheEntry(
        key=f"processed-order:{processed.order_id}",
        value=json.dumps(processed.to_dict()),
        ttl_seconds=CACHE_TTL_SECONDS,
    )


def analytics_event(processed: ProcessedOrder, tier: Tier) -> AnalyticsEvent:
    return AnalyticsEvent(
        event=ORDER_PROCESSED,
        order_id=processed.order_id,
        total=processed.total,
        customer_tier=tier,
    )


def missing_product_alerts(
    order_id: str,
    missing: Sequence[str],
) -> tuple[MissingProductAlert, ...]:
    return tuple(MissingProductAlert(product_id=pid, order_id=order_id) for pid in missing)


def derive_effects(
    order: Order,
    customer: Customer,
    processed: ProcessedOrder,
    missing: Sequence[str],
) -> EffectPlan:
    """Build every write payload for one processed order."""
    return EffectPlan(
        customer_id=customer.id,
        inventory_updates=inventory_updates(processed.lines),
        purchase_amount=processed.total,
        cache_entry=cache_entry(processed),
        notification=confirmation_email(customer, processed),
        analytics_event=analytics_event(processed, customer.tier),
        missing_product_alerts=missing_product_alerts(order.id, missing),
    )


__all__ = (
    "CACHE_TTL_SECONDS",
    "ORDER_PROCESSED",
    "inventory_updates",
    "confirmation_email",
    "cache_entry",
    "analytics_event",
    "missing_product_alerts",
    "derive_effects",
)

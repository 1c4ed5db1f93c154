"""
Compute — the pure middle of `process_order`.

    from orderflow import compute as K

    processed, missing = K.compute(order, customer, products, rules)
    plan = K.derive_effects(order, customer, processed, missing)
"""

from __future__ import annotations

from orderflow.compute._pricing import (
    line_items,
    subtotal,
    find_discount_rule,
    discount,
    loyalty_points,
    compute,
)
from orderflow.compute._payloads import (
    CACHE_TTL_SECONDS,
    ORDER_PROCESSED,
    inventory_updates,
    confirmation_email,
    cache_entry,
    analytics_event,
    missing_product_alerts,
    derive_effects,
)

__all__ = (
    "line_items",
    "subtotal",
    "find_discount_rule",
    "discount",
    "loyalty_points",
    "compute",
    "CACHE_TTL_SECONDS",
    "ORDER_PROCESSED",
    "inventory_updates",
    "confirmation_email",
    "cache_entry",
    "analytics_event",
    "missing_product_alerts",
    "derive_effects",
)

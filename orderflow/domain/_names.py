"""
Effect identities.

`Fetch` names the reads, `Effect` names the writes. Both are string enums so
they can key configuration tables and show up readably in logs.
"""

from __future__ import annotations

from enum import StrEnum


class Fetch(StrEnum):
    ORDER = "get_order"
    CUSTOMER = "get_customer"
    PRODUCTS = "get_products"
    DISCOUNT_RULES = "get_discount_rules"


class Effect(StrEnum):
    UPDATE_INVENTORY = "update_inventory"
    UPDATE_TOTAL_PURCHASES = "update_total_purchases"
    SET_CACHE = "set_cache"
    SEND_EMAIL = "send_email"
    TRACK_EVENT = "track_event"
    SEND_ALERTS = "send_alerts"


type EffectName = Fetch | Effect


FAILURE_LABELS: dict[EffectName, str] = {
    Fetch.ORDER: "Failed to fetch order",
    Fetch.CUSTOMER: "Failed to fetch customer",
    Fetch.PRODUCTS: "Failed to fetch products",
    Fetch.DISCOUNT_RULES: "Failed to fetch discount rules",
    Effect.UPDATE_INVENTORY: "Failed to update inventory",
    Effect.UPDATE_TOTAL_PURCHASES: "Failed to update customer purchases",
    Effect.SET_CACHE: "Cache set failed",
    Effect.SEND_EMAIL: "Email send failed",
    Effect.TRACK_EVENT: "Analytics tracking failed",
    Effect.SEND_ALERTS: "Alert send failed",
}


__all__ = ("Fetch", "Effect", "EffectName", "FAILURE_LABELS")

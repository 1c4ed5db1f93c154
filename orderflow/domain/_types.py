"""
Domain types — what is read, what is computed, what is written.

Order, Customer and Product are read from collaborators and never mutated
here. Everything else is built fresh for one `process_order` call.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import StrEnum

# ═══════════════════════════════════════════════════════════════════════════════
# Read Side
# ═══════════════════════════════════════════════════════════════════════════════


class Tier(StrEnum):
    STANDARD = "standard"
    PREMIUM = "premium"
    VIP = "vip"


@dataclass(frozen=True, slots=True)
class OrderLine:
    product_id: str
    quantity: int
    unit_price: Decimal

    def __post_init__(self) -> None:
        if self.quantity <= 0:
            raise ValueError(f"quantity must be positive, got {self.quantity}")
        if self.unit_price < 0:
            raise ValueError(f"unit_price must not be negative, got {self.unit_price}")


@dataclass(frozen=True, slots=True)
class Order:
    id: str
    customer_id: str
    lines: tuple[OrderLine, ...]
    created_at: datetime

    @property
    def product_ids(self) -> tuple[str, ...]:
        """Unique product ids, first-seen order."""
        return tuple(dict.fromkeys(line.product_id for line in self.lines))


@dataclass(frozen=True, slots=True)
class Customer:
    id: str
    email: str
    tier: Tier
    total_purchases: Decimal


@dataclass(frozen=True, slots=True)
class Product:
    id: str
    name: str
    stock: int
    category: str


@dataclass(frozen=True, slots=True)
class DiscountRule:
    tier: Tier
    min_purchase: Decimal
    discount_percent: Decimal

    def __post_init__(self) -> None:
        if self.min_purchase < 0:
            raise ValueError("min_purchase must not be negative")
        if not 0 <= self.discount_percent <= 100:
            raise ValueError(f"discount_percent must be within 0..100, got {self.discount_percent}")


# ═══════════════════════════════════════════════════════════════════════════════
# Computed
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class LineSummary:
    product_id: str
    product_name: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal


@dataclass(frozen=True, slots=True)
class ProcessedOrder:
    """
    Result of the computation stage.

    Invariant: total == subtotal - discount and 0 <= discount <= subtotal.
    """

    order_id: str
    customer_id: str
    subtotal: Decimal
    discount: Decimal
    total: Decimal
    loyalty_points: int
    lines: tuple[LineSummary, ...]

    def to_dict(self) -> dict[str, object]:
        """JSON-ready view; money is rendered as strings."""
        return {
            "order_id": self.order_id,
            "customer_id": self.customer_id,
            "subtotal": str(self.subtotal),
            "discount": str(self.discount),
            "total": str(self.total),
            "loyalty_points": self.loyalty_points,
            "lines": [
                {
                    "product_id": line.product_id,
                    "product_name": line.product_name,
                    "quantity": line.quantity,
                    "line_total": str(line.line_total),
                }
                for line in self.lines
            ],
        }


# ═══════════════════════════════════════════════════════════════════════════════
# Effect Payloads
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class InventoryUpdate:
    product_id: str
    quantity_change: int


@dataclass(frozen=True, slots=True)
class CacheEntry:
    key: str
    value: str
    ttl_seconds: int


@dataclass(frozen=True, slots=True)
class Notification:
    to: str
    subject: str
    body: str


@dataclass(frozen=True, slots=True)
class AnalyticsEvent:
    event: str
    order_id: str
    total: Decimal
    customer_tier: Tier


@dataclass(frozen=True, slots=True)
class MissingProductAlert:
    product_id: str
    order_id: str
    type: str = "missing_product"


@dataclass(frozen=True, slots=True)
class EffectPlan:
    """Every write payload derived from one computed order."""

    customer_id: str
    inventory_updates: tuple[InventoryUpdate, ...]
    purchase_amount: Decimal
    cache_entry: CacheEntry
    notification: Notification
    analytics_event: AnalyticsEvent
    missing_product_alerts: tuple[MissingProductAlert, ...]


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

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
)

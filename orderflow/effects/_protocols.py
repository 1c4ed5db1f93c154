"""
Effect interfaces — one narrow protocol per collaborator.

Reads return None (or a shorter mapping) for absent entities; that is data,
not failure. Writes return None and raise on failure; the retry wrapper turns
the exception into an `EffectFailure`.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol

from orderflow.domain import (
    Customer,
    DiscountRule,
    InventoryUpdate,
    MissingProductAlert,
    Order,
    Product,
    Tier,
)

# ═══════════════════════════════════════════════════════════════════════════════
# Stores
# ═══════════════════════════════════════════════════════════════════════════════


class OrderRepository(Protocol):
    async def get_by_id(self, order_id: str) -> Order | None:
        ...


class CustomerRepository(Protocol):
    async def get_by_id(self, customer_id: str) -> Customer | None:
        ...

    async def update_total_purchases(self, customer_id: str, amount: Decimal) -> None:
        """Add `amount` to the customer's cumulative purchases."""
        ...


class ProductRepository(Protocol):
    async def get_by_ids(self, product_ids: Sequence[str]) -> Mapping[str, Product]:
        """Products keyed by id. Unknown ids are simply left out."""
        ...

    async def update_inventory(self, updates: Sequence[InventoryUpdate]) -> None:
        """Apply stock deltas; all or nothing."""
        ...


# ═══════════════════════════════════════════════════════════════════════════════
# Remote Services
# ═══════════════════════════════════════════════════════════════════════════════


class PricingService(Protocol):
    async def get_discount_rules(self) -> Sequence[DiscountRule]:
        """Rules in evaluation order."""
        ...


class CacheService(Protocol):
    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        ...


class NotificationService(Protocol):
    async def send_email(self, to: str, subject: str, body: str) -> None:
        ...


class MonitoringService(Protocol):
    async def send_alerts(self, alerts: Sequence[MissingProductAlert]) -> None:
        ...


class AnalyticsService(Protocol):
    async def track_event(
        self,
        event: str,
        order_id: str,
        total: Decimal,
        tier: Tier,
    ) -> None:
        ...


# ═══════════════════════════════════════════════════════════════════════════════
# AppEffects — everything the orchestrator talks to
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class AppEffects:
    """
    The collaborators for one process, built once and shared.

    Example:
        effects = AppEffects(
            orders=PostgresOrders(pool),
            customers=PostgresCustomers(pool),
            products=PostgresProducts(pool),
            pricing=HttpPricing(client),
            cache=RedisCache(redis),
            notifications=SmtpMailer(smtp),
            monitoring=CloudWatchAlerts(cw),
            analytics=KinesisEvents(kinesis),
        )
    """

    orders: OrderRepository
    customers: CustomerRepository
    products: ProductRepository
    pricing: PricingService
    cache: CacheService
    notifications: NotificationService
    monitoring: MonitoringService
    analytics: AnalyticsService


__all__ = (
    "OrderRepository",
    "CustomerRepository",
    "ProductRepository",
    "PricingService",
    "CacheService",
    "NotificationService",
    "MonitoringService",
    "AnalyticsService",
    "AppEffects",
)

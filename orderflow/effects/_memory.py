"""
In-memory collaborators — dict-backed implementations of every protocol.

Used by the examples and tests in place of the real stores and services.
Every write is recorded so callers can see what landed.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal

from orderflow.domain import (
    AnalyticsEvent,
    CacheEntry,
    Customer,
    DiscountRule,
    InventoryUpdate,
    MissingProductAlert,
    Notification,
    Order,
    OrderLine,
    Product,
    Tier,
)
from orderflow.effects._protocols import AppEffects

# ═══════════════════════════════════════════════════════════════════════════════
# Stores
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass
class InMemoryOrders:
    _orders: dict[str, Order] = field(default_factory=dict[str, Order])

    def seed(self, *orders: Order) -> None:
        self._orders.update({o.id: o for o in orders})

    async def get_by_id(self, order_id: str) -> Order | None:
        return self._orders.get(order_id)


@dataclass
class InMemoryCustomers:
    _customers: dict[str, Customer] = field(default_factory=dict[str, Customer])
    purchase_updates: list[tuple[str, Decimal]] = field(
        default_factory=list[tuple[str, Decimal]]
    )

    def seed(self, *customers: Customer) -> None:
        self._customers.update({c.id: c for c in customers})

    async def get_by_id(self, customer_id: str) -> Customer | None:
        return self._customers.get(customer_id)

    async def update_total_purchases(self, customer_id: str, amount: Decimal) -> None:
        customer = self._customers.get(customer_id)
        if customer is None:
            raise KeyError(f"customer {customer_id} does not exist")
        self._customers[customer_id] = Customer(
            id=customer.id,
            email=customer.email,
            tier=customer.tier,
            total_purchases=customer.total_purchases + amount,
        )
        self.purchase_updates.append((customer_id, amount))


@dataclass
class InMemoryProducts:
    _products: dict[str, Product] = field(default_factory=dict[str, Product])
    inventory_updates: list[InventoryUpdate] = field(default_factory=list[InventoryUpdate])

    def seed(self, *products: Product) -> None:
        self._products.update({p.id: p for p in products})

    def stock(self, product_id: str) -> int:
        return self._products[product_id].stock

    async def get_by_ids(self, product_ids: Sequence[str]) -> dict[str, Product]:
        return {pid: self._products[pid] for pid in product_ids if pid in self._products}

    async def update_inventory(self, updates: Sequence[InventoryUpdate]) -> None:
        # Validate everything first so a bad id leaves stock untouched.
        for update in updates:
            if update.product_id not in self._products:
                raise KeyError(f"product {update.product_id} does not exist")
        for update in updates:
            p = self._products[update.product_id]
            self._products[p.id] = Product(p.id, p.name, p.stock + update.quantity_change, p.category)
        self.inventory_updates.extend(updates)


# ═══════════════════════════════════════════════════════════════════════════════
# Services
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass
class InMemoryPricing:
    rules: list[DiscountRule] = field(default_factory=list[DiscountRule])

    async def get_discount_rules(self) -> list[DiscountRule]:
        return list(self.rules)


@dataclass
class InMemoryCache:
    entries: dict[str, CacheEntry] = field(default_factory=dict[str, CacheEntry])

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self.entries[key] = CacheEntry(key, value, ttl_seconds)


@dataclass
class InMemoryMailer:
    sent: list[Notification] = field(default_factory=list[Notification])

    async def send_email(self, to: str, subject: str, body: str) -> None:
        self.sent.append(Notification(to, subject, body))


@dataclass
class InMemoryMonitoring:
    alerts: list[MissingProductAlert] = field(default_factory=list[MissingProductAlert])

    async def send_alerts(self, alerts: Sequence[MissingProductAlert]) -> None:
        self.alerts.extend(alerts)


@dataclass
class InMemoryAnalytics:
    events: list[AnalyticsEvent] = field(default_factory=list[AnalyticsEvent])

    async def track_event(
        self,
        event: str,
        order_id: str,
        total: Decimal,
        tier: Tier,
    ) -> None:
        self.events.append(AnalyticsEvent(event, order_id, total, tier))


# ═══════════════════════════════════════════════════════════════════════════════
# Wiring
# ═══════════════════════════════════════════════════════════════════════════════


def memory_effects(
    *,
    orders: Sequence[Order] = (),
    customers: Sequence[Customer] = (),
    products: Sequence[Product] = (),
    rules: Sequence[DiscountRule] = (),
) -> AppEffects:
    """Build an `AppEffects` over fresh in-memory collaborators."""
    order_repo = InMemoryOrders()
    order_repo.seed(*orders)
    customer_repo = InMemoryCustomers()
    customer_repo.seed(*customers)
    product_repo = InMemoryProducts()
    product_repo.seed(*products)

    return AppEffects(
        orders=order_repo,
        customers=customer_repo,
        products=product_repo,
        pricing=InMemoryPricing(list(rules)),
        cache=InMemoryCache(),
        notifications=InMemoryMailer(),
        monitoring=InMemoryMonitoring(),
        analytics=InMemoryAnalytics(),
    )


def sample_effects() -> AppEffects:
    """The reference scenario: a premium customer ordering two products."""
    return memory_effects(
        orders=[
            Order(
                id="order-123",
                customer_id="cust-456",
                lines=(
                    OrderLine("prod-1", 2, Decimal("25.00")),
                    OrderLine("prod-2", 1, Decimal("50.00")),
                ),
                created_at=datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc),
            ),
        ],
        customers=[
            Customer("cust-456", "customer@example.com", Tier.PREMIUM, Decimal("500.00")),
        ],
        products=[
            Product("prod-1", "Widget", 100, "gadgets"),
            Product("prod-2", "Gizmo", 50, "gadgets"),
        ],
        rules=[
            DiscountRule(Tier.STANDARD, Decimal("100"), Decimal("5")),
            DiscountRule(Tier.PREMIUM, Decimal("50"), Decimal("10")),
            DiscountRule(Tier.VIP, Decimal("0"), Decimal("15")),
        ],
    )


__all__ = (
    "InMemoryOrders",
    "InMemoryCustomers",
    "InMemoryProducts",
    "InMemoryPricing",
    "InMemoryCache",
    "InMemoryMailer",
    "InMemoryMonitoring",
    "InMemoryAnalytics",
    "memory_effects",
    "sample_effects",
)

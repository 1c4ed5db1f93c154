"""
Effects — the collaborators `process_order` reads from and writes to.

    from orderflow import effects as F

    F.classify(F.Effect.SEND_EMAIL)          # Category.OPTIONAL
    F.classify(F.Effect.SEND_EMAIL, F.ALL_CRITICAL)  # Category.CRITICAL

    effects = F.memory_effects(orders=[...], customers=[...])
"""

from __future__ import annotations

from orderflow.domain import Fetch, Effect, EffectName
from orderflow.effects._protocols import (
    OrderRepository,
    CustomerRepository,
    ProductRepository,
    PricingService,
    CacheService,
    NotificationService,
    MonitoringService,
    AnalyticsService,
    AppEffects,
)
from orderflow.effects._classify import (
    Category,
    Classification,
    PARTITIONED,
    ALL_CRITICAL,
    classify,
    partition,
)
from orderflow.effects._memory import (
    InMemoryOrders,
    InMemoryCustomers,
    InMemoryProducts,
    InMemoryPricing,
    InMemoryCache,
    InMemoryMailer,
    InMemoryMonitoring,
    InMemoryAnalytics,
    memory_effects,
    sample_effects,
)

__all__ = (
    "Fetch",
    "Effect",
    "EffectName",
    "OrderRepository",
    "CustomerRepository",
    "ProductRepository",
    "PricingService",
    "CacheService",
    "NotificationService",
    "MonitoringService",
    "AnalyticsService",
    "AppEffects",
    "Category",
    "Classification",
    "PARTITIONED",
    "ALL_CRITICAL",
    "classify",
    "partition",
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

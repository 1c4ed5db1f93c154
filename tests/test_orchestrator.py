"""End-to-end tests for Orchestrator.process_order() over in-memory collaborators."""

import asyncio
import logging
from decimal import Decimal
from types import MappingProxyType

import pytest

from orderflow.domain import Effect, Fetch, MissingProductAlert, ProcessedOrder, Stage, Tier
from orderflow.effects import ALL_CRITICAL, Category, memory_effects
from orderflow.orchestrator import EffectOutcome, LoggingSink
from tests.fakes import (
    Blocking,
    Counting,
    Flaky,
    error_value,
    make_customer,
    make_order,
    make_product,
    ok_value,
    swap,
)


class BlockingMailer:
    """Mailer that holds every send until `release` is set."""

    def __init__(self) -> None:
        self.release = asyncio.Event()
        self.sent: list[str] = []

    async def send_email(self, to: str, subject: str, body: str) -> None:
        await self.release.wait()
        self.sent.append(to)


class ExplodingSink:
    def __init__(self) -> None:
        self.seen = 0

    async def record(self, outcome: EffectOutcome) -> None:
        self.seen += 1
        raise RuntimeError("sink is down")


# ═══════════════════════════════════════════════════════════════════════════════
# Happy path
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_reference_order_is_processed(effects, orchestrator_for, sink):
    orchestrator = orchestrator_for(effects)

    processed = ok_value(await orchestrator.process_order("order-123"))
    await orchestrator.drain()

    assert isinstance(processed, ProcessedOrder)
    assert processed.subtotal == Decimal("100")
    assert processed.discount == Decimal("10")
    assert processed.total == Decimal("90")
    assert processed.loyalty_points == 13

    assert effects.products.stock("prod-1") == 98
    assert effects.products.stock("prod-2") == 49
    assert effects.customers.purchase_updates == [("cust-456", Decimal("90"))]

    [mail] = effects.notifications.sent
    assert mail.to == "customer@example.com"
    assert mail.subject == "Order order-123 Confirmed"
    assert "processed-order:order-123" in effects.cache.entries
    [event] = effects.analytics.events
    assert event.total == Decimal("90")
    assert event.customer_tier is Tier.PREMIUM
    assert effects.monitoring.alerts == []

    assert [o.effect for o in sink.outcomes] == [Effect.SET_CACHE, Effect.SEND_EMAIL, Effect.TRACK_EVENT]
    assert all(o.succeeded and o.category is Category.OPTIONAL for o in sink.outcomes)
    assert orchestrator.pending == 0


@pytest.mark.asyncio
async def test_context_manager_waits_for_optional_effects(effects, orchestrator_for):
    async with orchestrator_for(effects) as orchestrator:
        ok_value(await orchestrator.process_order("order-123"))

    assert orchestrator.pending == 0
    assert len(effects.notifications.sent) == 1
    assert len(effects.analytics.events) == 1


@pytest.mark.asyncio
async def test_returns_before_optional_effects_finish(effects, orchestrator_for, sink):
    mailer = BlockingMailer()
    orchestrator = orchestrator_for(swap(effects, notifications=mailer))

    ok_value(await orchestrator.process_order("order-123"))

    assert orchestrator.pending == 1
    assert mailer.sent == []
    assert effects.products.stock("prod-1") == 98

    mailer.release.set()
    await orchestrator.drain()

    assert mailer.sent == ["customer@example.com"]
    assert orchestrator.pending == 0
    assert len(sink.outcomes) == 3


@pytest.mark.asyncio
async def test_processing_the_same_order_twice_applies_effects_twice(effects, orchestrator_for):
    orchestrator = orchestrator_for(effects)

    first = ok_value(await orchestrator.process_order("order-123"))
    second = ok_value(await orchestrator.process_order("order-123"))
    await orchestrator.drain()

    assert first.total == second.total
    assert effects.products.stock("prod-1") == 96
    assert len(effects.customers.purchase_updates) == 2


# ═══════════════════════════════════════════════════════════════════════════════
# FETCHING
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_unknown_order_stops_before_customer_read(effects, orchestrator_for):
    customers = Counting(effects.customers)
    orchestrator = orchestrator_for(swap(effects, customers=customers))

    failure = error_value(await orchestrator.process_order("order-404"))

    assert failure.stage is Stage.FETCHING
    assert failure.messages() == ["Order order-404 not found"]
    assert customers.calls == {}


@pytest.mark.asyncio
async def test_unknown_customer_stops_before_product_read(orchestrator_for):
    effects = memory_effects(
        orders=[make_order(("prod-1", 1, "10"), customer_id="cust-404")],
        products=[make_product("prod-1")],
    )
    products = Counting(effects.products)
    pricing = Counting(effects.pricing)
    orchestrator = orchestrator_for(swap(effects, products=products, pricing=pricing))

    failure = error_value(await orchestrator.process_order("order-1"))

    assert failure.stage is Stage.FETCHING
    assert str(failure) == "Customer cust-404 not found"
    assert products.calls == {}
    assert pricing.calls == {}


@pytest.mark.asyncio
async def test_failing_order_read_is_retried_then_reported(effects, orchestrator_for):
    orders = Flaky(effects.orders, "get_by_id", error="connection refused")
    orchestrator = orchestrator_for(swap(effects, orders=orders))

    failure = error_value(await orchestrator.process_order("order-123"))

    assert failure.stage is Stage.FETCHING
    [cause] = failure.causes
    assert cause.effect is Fetch.ORDER
    assert cause.attempts == 3
    assert str(cause) == "Failed to fetch order: connection refused"
    assert orders.calls == 3


class ReadOnlyReads:
    """Serve products as a read-only mapping and rules as a tuple."""

    def __init__(self, inner) -> None:
        self._inner = inner

    def __getattr__(self, name):
        return getattr(self._inner, name)

    async def get_by_ids(self, product_ids):
        return MappingProxyType(await self._inner.get_by_ids(product_ids))

    async def get_discount_rules(self):
        return tuple(await self._inner.get_discount_rules())


@pytest.mark.asyncio
async def test_read_only_collections_are_accepted(effects, orchestrator_for):
    reads = swap(effects, products=ReadOnlyReads(effects.products), pricing=ReadOnlyReads(effects.pricing))
    orchestrator = orchestrator_for(reads)

    processed = ok_value(await orchestrator.process_order("order-123"))
    await orchestrator.drain()

    assert processed.discount == Decimal("10")
    assert processed.total == Decimal("90")
    assert effects.products.stock("prod-1") == 98


@pytest.mark.asyncio
async def test_pricing_failure_is_a_fetch_failure(effects, orchestrator_for):
    pricing = Flaky(effects.pricing, "get_discount_rules")
    orchestrator = orchestrator_for(swap(effects, pricing=pricing))

    failure = error_value(await orchestrator.process_order("order-123"))

    assert failure.stage is Stage.FETCHING
    assert failure.messages() == ["Failed to fetch discount rules: service unavailable"]
    assert effects.products.inventory_updates == []


@pytest.mark.asyncio
@pytest.mark.parametrize("collaborator", ["orders", "customers"])
async def test_cancelling_during_fetch_cancels_the_order(effects, orchestrator_for, collaborator):
    blocked = Blocking(getattr(effects, collaborator), "get_by_id")
    orchestrator = orchestrator_for(swap(effects, **{collaborator: blocked}))

    task = asyncio.create_task(orchestrator.process_order("order-123"))
    await blocked.started.wait()
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
    assert task.cancelled()
    assert effects.products.inventory_updates == []
    assert effects.customers.purchase_updates == []


@pytest.mark.asyncio
async def test_caller_timeout_during_fetch_is_raised(effects, orchestrator_for):
    orders = Blocking(effects.orders, "get_by_id")
    orchestrator = orchestrator_for(swap(effects, orders=orders))

    with pytest.raises(TimeoutError):
        async with asyncio.timeout(0.05):
            await orchestrator.process_order("order-123")


@pytest.mark.asyncio
async def test_flaky_read_recovers(effects, orchestrator_for):
    customers = Flaky(effects.customers, "get_by_id", times=2)
    orchestrator = orchestrator_for(swap(effects, customers=customers))

    processed = ok_value(await orchestrator.process_order("order-123"))

    assert processed.total == Decimal("90")
    assert customers.calls == 3


# ═══════════════════════════════════════════════════════════════════════════════
# Missing products
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_missing_product_is_skipped_and_alerted(orchestrator_for, sink):
    effects = memory_effects(
        orders=[make_order(("prod-1", 2, "10"), ("ghost", 1, "99"))],
        customers=[make_customer()],
        products=[make_product("prod-1", stock=5)],
    )
    orchestrator = orchestrator_for(effects)

    processed = ok_value(await orchestrator.process_order("order-1"))
    await orchestrator.drain()

    assert [line.product_id for line in processed.lines] == ["prod-1"]
    assert processed.subtotal == Decimal("20")
    assert effects.products.stock("prod-1") == 3
    assert effects.monitoring.alerts == [MissingProductAlert("ghost", "order-1")]
    assert sink.for_effect(Effect.SEND_ALERTS)[0].succeeded


@pytest.mark.asyncio
async def test_no_alerts_without_missing_products(effects, orchestrator_for, sink):
    orchestrator = orchestrator_for(effects)

    ok_value(await orchestrator.process_order("order-123"))
    await orchestrator.drain()

    assert sink.for_effect(Effect.SEND_ALERTS) == []


# ═══════════════════════════════════════════════════════════════════════════════
# APPLYING_CRITICAL
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_inventory_failure_fails_the_order(effects, orchestrator_for, sink):
    products = Flaky(effects.products, "update_inventory")
    customers = Counting(effects.customers)
    orchestrator = orchestrator_for(swap(effects, products=products, customers=customers))

    failure = error_value(await orchestrator.process_order("order-123"))

    assert failure.stage is Stage.APPLYING_CRITICAL
    assert failure.messages() == ["Failed to update inventory: service unavailable"]
    assert failure.causes[0].attempts == 3
    # The sibling critical effect was still dispatched.
    assert customers.calls["update_total_purchases"] == 1

    assert orchestrator.pending == 0
    assert effects.notifications.sent == []
    assert effects.cache.entries == {}
    assert sink.outcomes == []


@pytest.mark.asyncio
async def test_every_critical_failure_is_reported_in_order(effects, orchestrator_for):
    products = Flaky(effects.products, "update_inventory", error="disk full")
    customers = Flaky(effects.customers, "update_total_purchases", error="deadlock")
    orchestrator = orchestrator_for(swap(effects, products=products, customers=customers))

    failure = error_value(await orchestrator.process_order("order-123"))

    assert failure.stage is Stage.APPLYING_CRITICAL
    assert failure.messages() == [
        "Failed to update inventory: disk full",
        "Failed to update customer purchases: deadlock",
    ]
    assert str(failure) == "; ".join(failure.messages())


@pytest.mark.asyncio
async def test_critical_effects_are_all_started_before_any_finishes(effects, orchestrator_for):
    products = Blocking(effects.products, "update_inventory")
    customers = Blocking(effects.customers, "update_total_purchases")
    orchestrator = orchestrator_for(swap(effects, products=products, customers=customers))

    task = asyncio.create_task(orchestrator.process_order("order-123"))
    async with asyncio.timeout(1.0):
        await products.started.wait()
        await customers.started.wait()

    assert not task.done()
    assert effects.products.inventory_updates == []

    products.release.set()
    customers.release.set()
    ok_value(await task)
    await orchestrator.drain()

    assert effects.products.stock("prod-1") == 98
    assert effects.customers.purchase_updates == [("cust-456", Decimal("90"))]


@pytest.mark.asyncio
async def test_critical_effect_succeeds_on_retry(effects, orchestrator_for):
    products = Flaky(effects.products, "update_inventory", times=2)
    orchestrator = orchestrator_for(swap(effects, products=products))

    ok_value(await orchestrator.process_order("order-123"))
    await orchestrator.drain()

    assert products.calls == 3
    assert effects.products.stock("prod-1") == 98
    assert len(effects.notifications.sent) == 1


# ═══════════════════════════════════════════════════════════════════════════════
# APPLYING_OPTIONAL
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_optional_failure_does_not_change_the_result(effects, orchestrator_for, sink):
    mailer = Flaky(effects.notifications, "send_email")
    orchestrator = orchestrator_for(swap(effects, notifications=mailer))

    processed = ok_value(await orchestrator.process_order("order-123"))
    await orchestrator.drain()

    assert processed.total == Decimal("90")
    [failure] = sink.failures()
    assert str(failure) == "Email send failed: service unavailable"
    assert failure.attempts == 3
    [outcome] = sink.for_effect(Effect.SEND_EMAIL)
    assert outcome.category is Category.OPTIONAL
    assert not outcome.succeeded
    # Siblings still ran.
    assert "processed-order:order-123" in effects.cache.entries
    assert len(effects.analytics.events) == 1


@pytest.mark.asyncio
async def test_strict_classification_makes_email_critical(effects, orchestrator_for, sink):
    mailer = Flaky(effects.notifications, "send_email")
    orchestrator = orchestrator_for(swap(effects, notifications=mailer), classification=ALL_CRITICAL)

    failure = error_value(await orchestrator.process_order("order-123"))

    assert failure.stage is Stage.APPLYING_CRITICAL
    assert failure.messages() == ["Email send failed: service unavailable"]
    assert orchestrator.pending == 0
    assert sink.outcomes == []


@pytest.mark.asyncio
async def test_broken_sink_is_tolerated(effects, orchestrator_for, caplog):
    sink = ExplodingSink()
    orchestrator = orchestrator_for(effects, sink=sink)

    with caplog.at_level(logging.ERROR, logger="orderflow"):
        ok_value(await orchestrator.process_order("order-123"))
        await orchestrator.drain()

    assert sink.seen == 3
    assert len(effects.notifications.sent) == 1
    assert "sink could not record" in caplog.text


@pytest.mark.asyncio
async def test_logging_sink_reports_failures(effects, orchestrator_for, caplog):
    mailer = Flaky(effects.notifications, "send_email")
    orchestrator = orchestrator_for(swap(effects, notifications=mailer), sink=LoggingSink())

    with caplog.at_level(logging.INFO, logger="orderflow"):
        ok_value(await orchestrator.process_order("order-123"))
        await orchestrator.drain()

    warnings = [r for r in caplog.records if r.name == "orderflow.outcomes" and r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "Email send failed: service unavailable" in warnings[0].getMessage()

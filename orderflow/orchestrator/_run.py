"""
Orchestrator — fetch, compute, apply critical effects, fire optional ones.

    FETCHING → COMPUTING → APPLYING_CRITICAL → APPLYING_OPTIONAL → DONE
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from types import TracebackType
from typing import TYPE_CHECKING, Self

import combinators as C
from kungfu import Result, Ok, Error

from orderflow._types import Attempted, EffectCall, Outcome
from orderflow.compute import compute, derive_effects
from orderflow.domain import (
    Customer,
    DiscountRule,
    Effect,
    EffectFailure,
    EffectName,
    EffectPlan,
    Fetch,
    NotFound,
    Order,
    ProcessFailure,
    Product,
    Stage,
)
from orderflow.effects import AppEffects, Category, Classification, PARTITIONED, partition
from orderflow.lift import effect_call, settled
from orderflow.logging import get_logger
from orderflow.orchestrator._sink import EffectOutcome, LoggingSink, OutcomeSink
from orderflow.retry import DEFAULT_POLICIES, PolicyTable, RetryPolicy, Sleep, policy_for

if TYPE_CHECKING:
    from orderflow.config import OrderflowSettings

logger = get_logger("orchestrator")


@dataclass(frozen=True, slots=True)
class Inputs:
    """Everything read during FETCHING; shared read-only afterwards."""

    order: Order
    customer: Customer
    products: Mapping[str, Product]
    rules: Sequence[DiscountRule]


def _fail(stage: Stage, *causes: NotFound | EffectFailure) -> Error[ProcessFailure]:
    return Error(ProcessFailure(stage, causes))


class Orchestrator:
    """
    Runs `process_order` against one set of collaborators.

    Critical effects are awaited and every failure among them is reported.
    Optional effects run in a background task whose outcomes go to `sink`;
    they never change what `process_order` returns.

    Example:
        async with Orchestrator(effects, sink=MemorySink()) as orchestrator:
            match await orchestrator.process_order("order-123"):
                case Ok(processed):
                    print(processed.total)
                case Error(failure):
                    print(failure.messages())
    """

    def __init__(
        self,
        effects: AppEffects,
        *,
        policies: PolicyTable = DEFAULT_POLICIES,
        classification: Classification = PARTITIONED,
        sink: OutcomeSink | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._effects = effects
        self._policies = policies
        self._classification = classification
        self._sink: OutcomeSink = sink if sink is not None else LoggingSink()
        self._sleep = sleep
        self._background: set[asyncio.Task[None]] = set()

    @classmethod
    def from_settings(
        cls,
        effects: AppEffects,
        settings: OrderflowSettings | None = None,
        *,
        sink: OutcomeSink | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> Orchestrator:
        """Build with the retry table and classification from configuration."""
        from orderflow.config import get_settings

        settings = settings or get_settings()
        return cls(
            effects,
            policies=settings.policies(),
            classification=settings.classification(),
            sink=sink,
            sleep=sleep,
        )

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.drain()

    @property
    def pending(self) -> int:
        """Optional-effect batches still running."""
        return len(self._background)

    # ═══════════════════════════════════════════════════════════════════════════
    # process_order()
    # ═══════════════════════════════════════════════════════════════════════════

    async def process_order(self, order_id: str) -> Outcome:
        """
        Process one order.

        Returns Ok(ProcessedOrder) once every critical effect has landed, or
        Error(ProcessFailure) with every cause that stopped it.
        """
        logger.debug("order %s: %s", order_id, Stage.FETCHING)
        match await self.fetch_inputs(order_id):
            case Error(failure):
                logger.info("order %s failed while fetching: %s", order_id, failure)
                return Error(failure)
            case Ok(inputs):
                pass

        logger.debug("order %s: %s", order_id, Stage.COMPUTING)
        processed, missing = compute(inputs.order, inputs.customer, inputs.products, inputs.rules)
        plan = derive_effects(inputs.order, inputs.customer, processed, missing)
        if missing:
            logger.warning("order %s references unknown products: %s", order_id, ", ".join(missing))

        calls = self.effect_calls(plan)
        critical, optional = partition(list(calls), self._classification)

        logger.debug("order %s: %s", order_id, Stage.APPLYING_CRITICAL)
        failures = await self.apply_critical(order_id, critical, calls)
        if failures:
            logger.error(
                "order %s: %d critical effect(s) failed: %s",
                order_id, len(failures), "; ".join(str(f) for f in failures),
            )
            return _fail(Stage.APPLYING_CRITICAL, *failures)

        logger.debug("order %s: %s", order_id, Stage.APPLYING_OPTIONAL)
        self.dispatch_optional(order_id, optional, calls)

        logger.debug("order %s: %s", order_id, Stage.DONE)
        return Ok(processed)

    # ═══════════════════════════════════════════════════════════════════════════
    # FETCHING
    # ═══════════════════════════════════════════════════════════════════════════

    async def fetch_inputs(self, order_id: str) -> Result[Inputs, ProcessFailure]:
        """
        Read order, then customer, then products and rules side by side.

        A missing order stops before the customer is read; a missing
        customer stops before products and rules are read.
        """
        effects = self._effects

        match await self._read(Fetch.ORDER, lambda: effects.orders.get_by_id(order_id)):
            case Error(failure):
                return _fail(Stage.FETCHING, failure)
            case Ok(None):
                return _fail(Stage.FETCHING, NotFound("Order", order_id))
            case Ok(found):
                order: Order = found

        match await self._read(Fetch.CUSTOMER, lambda: effects.customers.get_by_id(order.customer_id)):
            case Error(failure):
                return _fail(Stage.FETCHING, failure)
            case Ok(None):
                return _fail(Stage.FETCHING, NotFound("Customer", order.customer_id))
            case Ok(found):
                customer: Customer = found

        fetched = await C.parallel(
            effect_call(
                Fetch.PRODUCTS,
                lambda: effects.products.get_by_ids(order.product_ids),
                self._policy(Fetch.PRODUCTS),
                self._sleep,
            ),
            effect_call(
                Fetch.DISCOUNT_RULES,
                effects.pricing.get_discount_rules,
                self._policy(Fetch.DISCOUNT_RULES),
                self._sleep,
            ),
        )

        match fetched:
            case Error(failure):
                return _fail(Stage.FETCHING, failure)
            case Ok([products, rules]):
                return Ok(Inputs(order, customer, products, rules))

    async def _read[T](self, name: Fetch, call: EffectCall[T]) -> Attempted[T]:
        return await effect_call(name, call, self._policy(name), self._sleep)

    # ═══════════════════════════════════════════════════════════════════════════
    # APPLYING_CRITICAL
    # ═══════════════════════════════════════════════════════════════════════════

    def effect_calls(self, plan: EffectPlan) -> dict[Effect, EffectCall[None]]:
        """
        Bind each write to its payload, in dispatch order.

        Alerts are only sent when some product was missing.
        """
        e = self._effects
        entry = plan.cache_entry
        mail = plan.notification
        event = plan.analytics_event

        calls: dict[Effect, EffectCall[None]] = {
            Effect.UPDATE_INVENTORY: lambda: e.products.update_inventory(plan.inventory_updates),
            Effect.UPDATE_TOTAL_PURCHASES: lambda: e.customers.update_total_purchases(
                plan.customer_id, plan.purchase_amount
            ),
            Effect.SET_CACHE: lambda: e.cache.set(entry.key, entry.value, entry.ttl_seconds),
            Effect.SEND_EMAIL: lambda: e.notifications.send_email(mail.to, mail.subject, mail.body),
            Effect.TRACK_EVENT: lambda: e.analytics.track_event(
                event.event, event.order_id, event.total, event.customer_tier
            ),
        }
        if plan.missing_product_alerts:
            calls[Effect.SEND_ALERTS] = lambda: e.monitoring.send_alerts(plan.missing_product_alerts)
        return calls

    async def apply_critical(
        self,
        order_id: str,
        critical: Sequence[Effect],
        calls: dict[Effect, EffectCall[None]],
    ) -> list[EffectFailure]:
        """
        Dispatch every critical effect at once and collect all failures.

        Returns the failures in dispatch order; empty means all landed.
        """
        if not critical:
            return []

        results = await self._settle_all(critical, calls)
        failures: list[EffectFailure] = []
        for effect, result in zip(critical, results):
            match result:
                case Ok(_):
                    logger.info("order %s: critical effect %s applied", order_id, effect)
                case Error(failure):
                    failures.append(failure)
        return failures

    async def _settle_all(
        self,
        effects: Sequence[Effect],
        calls: dict[Effect, EffectCall[None]],
    ) -> list[Attempted[None]]:
        """Run effects concurrently; one outcome per effect, same order."""
        gathered = await C.parallel(*[
            settled(effect, calls[effect], self._policy(effect), self._sleep)
            for effect in effects
        ])
        match gathered:
            case Ok(results):
                return list(results)
            case Error(reason):
                # invoke_with_retry returns its failures; reaching here means it raised.
                logger.error("effect batch %s crashed: %s", [str(e) for e in effects], reason)
                return [Error(EffectFailure(effect, str(reason), 0)) for effect in effects]

    # ═══════════════════════════════════════════════════════════════════════════
    # APPLYING_OPTIONAL
    # ═══════════════════════════════════════════════════════════════════════════

    def dispatch_optional(
        self,
        order_id: str,
        optional: Sequence[Effect],
        calls: dict[Effect, EffectCall[None]],
    ) -> None:
        """Start optional effects in the background and return immediately."""
        if not optional:
            return
        task = asyncio.create_task(
            self._apply_optional(order_id, list(optional), calls),
            name=f"optional-effects:{order_id}",
        )
        self._background.add(task)
        task.add_done_callback(self._forget)

    async def _apply_optional(
        self,
        order_id: str,
        optional: list[Effect],
        calls: dict[Effect, EffectCall[None]],
    ) -> None:
        results = await self._settle_all(optional, calls)
        for effect, result in zip(optional, results):
            await self._observe(EffectOutcome(order_id, effect, Category.OPTIONAL, result))

    async def _observe(self, outcome: EffectOutcome) -> None:
        try:
            await self._sink.record(outcome)
        except Exception:
            logger.exception(
                "sink could not record %s for order %s (succeeded=%s)",
                outcome.effect, outcome.order_id, outcome.succeeded,
            )

    def _forget(self, task: asyncio.Task[None]) -> None:
        self._background.discard(task)
        if task.cancelled():
            logger.warning("%s was cancelled before all outcomes were recorded", task.get_name())
            return
        exc = task.exception()
        if exc is not None:
            logger.error("%s crashed", task.get_name(), exc_info=exc)

    async def drain(self) -> None:
        """Wait until every optional-effect batch started so far has finished."""
        while self._background:
            await asyncio.gather(*self._background, return_exceptions=True)

    # ═══════════════════════════════════════════════════════════════════════════
    # Helpers
    # ═══════════════════════════════════════════════════════════════════════════

    def _policy(self, name: EffectName) -> RetryPolicy:
        return policy_for(name, self._policies)


__all__ = ("Inputs", "Orchestrator")

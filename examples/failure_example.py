"""
Failures — critical vs optional effects.

An optional failure is reported to the sink and the order still succeeds.
A critical failure fails the order with every cause listed.
"""

from dataclasses import replace

from orderflow.effects import ALL_CRITICAL, sample_effects
from orderflow.orchestrator import MemorySink, Orchestrator
from orderflow.retry import RetryPolicy, policy_table
from examples._infra import Broken, banner, run, show

QUICK = RetryPolicy(initial_interval=0.05, maximum_interval=0.2, maximum_attempts=3, timeout=5.0)
POLICIES = policy_table(store=QUICK, external_api=QUICK, cache=QUICK, default=QUICK)


async def main() -> None:
    banner("Mail server down (optional)")
    effects = sample_effects()
    effects = replace(effects, notifications=Broken(effects.notifications, "send_email", "SMTP 421"))
    sink = MemorySink()
    async with Orchestrator(effects, policies=POLICIES, sink=sink) as orchestrator:
        show(await orchestrator.process_order("order-123"))
    for failure in sink.failures():
        print(f"  sink saw: {failure} ({failure.attempts} attempts)")

    banner("Inventory and billing down (critical)")
    effects = sample_effects()
    effects = replace(
        effects,
        products=Broken(effects.products, "update_inventory", "lock timeout"),
        customers=Broken(effects.customers, "update_total_purchases", "replica read-only"),
    )
    async with Orchestrator(effects, policies=POLICIES) as orchestrator:
        show(await orchestrator.process_order("order-123"))

    banner("Inventory recovers on the third try")
    effects = sample_effects()
    effects = replace(effects, products=Broken(effects.products, "update_inventory", "busy", times=2))
    async with Orchestrator(effects, policies=POLICIES) as orchestrator:
        show(await orchestrator.process_order("order-123"))

    banner("Strict mode: mail server down")
    effects = sample_effects()
    effects = replace(effects, notifications=Broken(effects.notifications, "send_email", "SMTP 421"))
    async with Orchestrator(effects, policies=POLICIES, classification=ALL_CRITICAL) as orchestrator:
        show(await orchestrator.process_order("order-123"))


if __name__ == "__main__":
    run(main, level="WARNING")

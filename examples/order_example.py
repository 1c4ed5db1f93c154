"""
Order processing — the reference order, end to end.

Level 3: orderflow.orchestrator
Level 2: orderflow.compute
Level 1: kungfu.Result
"""

from orderflow.effects import sample_effects
from orderflow.orchestrator import MemorySink, Orchestrator
from examples._infra import banner, run, show


async def main() -> None:
    banner("Process order-123")

    effects = sample_effects()
    sink = MemorySink()

    async with Orchestrator(effects, sink=sink) as orchestrator:
        result = await orchestrator.process_order("order-123")
        print(f"\nReturned with {orchestrator.pending} optional batch(es) still running")

    show(result)

    print("\nAfter drain:")
    print(f"  stock prod-1: {effects.products.stock('prod-1')}")
    print(f"  stock prod-2: {effects.products.stock('prod-2')}")
    for mail in effects.notifications.sent:
        print(f"  mail to {mail.to}: {mail.subject}")
    for outcome in sink.outcomes:
        print(f"  {outcome.effect}: {'ok' if outcome.succeeded else outcome.failure}")

    banner("Process a missing order")
    async with Orchestrator(effects, sink=sink) as orchestrator:
        show(await orchestrator.process_order("order-999"))


if __name__ == "__main__":
    run(main)

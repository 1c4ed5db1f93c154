"""
Pricing — line items, discount, loyalty points.

Pure functions: values in, values out. `compute` never fails; an unknown
product is reported back as data.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from decimal import Decimal

from orderflow.domain import (
    Customer,
    DiscountRule,
    LineSummary,
    Order,
    ProcessedOrder,
    Product,
    Tier,
)

ZERO = Decimal(0)


def line_items(
    order: Order,
    products: Mapping[str, Product],
) -> tuple[tuple[LineSummary, ...], tuple[str, ...]]:
    """Split order lines into summaries and the ids missing from the catalog."""
    lines: list[LineSummary] = []
    missing: list[str] = []

    for line in order.lines:
        product = products.get(line.product_id)
        if product is None:
            missing.append(line.product_id)
            continue
        lines.append(LineSummary(
            product_id=line.product_id,
            product_name=product.name,
            quantity=line.quantity,
            unit_price=line.unit_price,
            line_total=line.quantity * line.unit_price,
        ))

    return tuple(lines), tuple(missing)


def subtotal(lines: Sequence[LineSummary]) -> Decimal:
    return sum((line.line_total for line in lines), ZERO)


def find_discount_rule(
    rules: Sequence[DiscountRule],
    tier: Tier,
    amount: Decimal,
) -> DiscountRule | None:
    """First rule for the tier whose threshold the amount reaches."""
    for rule in rules:
        if rule.tier == tier and amount >= rule.min_purchase:
            return rule
    return None


def discount(amount: Decimal, rule: DiscountRule | None) -> Decimal:
    if rule is None:
        return ZERO
    return amount * rule.discount_percent / 100


def loyalty_points(total: Decimal, tier: Tier) -> int:
    base = math.floor(total / 10)
    match tier:
        case Tier.VIP:
            return base * 2
        case Tier.PREMIUM:
            return base * 3 // 2
        case _:
            return base


def compute(
    order: Order,
    customer: Customer,
    products: Mapping[str, Product],
    rules: Sequence[DiscountRule],
) -> tuple[ProcessedOrder, tuple[str, ...]]:
    """
    Turn fetched inputs into a processed order.

    Returns the processed order and the product ids that were not in
    `products`, in the order they were met.
    """
    lines, missing = line_items(order, products)
    amount = subtotal(lines)
    off = discount(amount, find_discount_rule(rules, customer.tier, amount))
    total = amount - off

    processed = ProcessedOrder(
        order_id=order.id,
        customer_id=customer.id,
        subtotal=amount,
        discount=off,
        total=total,
        loyalty_points=loyalty_points(total, customer.tier),
        lines=lines,
    )
    return processed, missing


__all__ = (
    "line_items",
    "subtotal",
    "find_discount_rule",
    "discount",
    "loyalty_points",
    "compute",
)

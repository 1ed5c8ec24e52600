from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional

from ..engine.context import (
    RATE_NOT_SET,
    CostPolicy,
    LocalAmount,
    OrderCostContext,
    RateNotSet,
    SupplierOrder,
    ZERO,
    to_decimal,
)
from .line_cost import line_cost_total, line_shipping_cost_total

D = Decimal


@dataclass(frozen=True)
class OrderTotals:
    line_count: int
    total_items: int
    total_weight: D
    total_volume: D
    total_products_value_source: D
    total_value_with_fees_source: D
    total_order_value_local: LocalAmount
    total_fees_local: LocalAmount
    fees_per_line: LocalAmount
    total_cost_price_local: LocalAmount

    # stored delivery figures (local currency, independent of the rate)
    total_delivery_fees_local: D
    total_other_delivery_fees_local: D
    deliveries_count: int
    delivered_count: int
    in_progress_count: int

    # cross-checks, display only
    per_line_shipping_total_local: D
    shipping_reconciliation_gap: D
    landed_cost_check_local: LocalAmount


def _sum(values: Iterable[D]) -> D:
    return sum(values, ZERO)


def _mul_rate(amount: D, rate: LocalAmount) -> LocalAmount:
    if isinstance(rate, RateNotSet):
        return RATE_NOT_SET
    return amount * rate


def fees_per_line(order: SupplierOrder) -> LocalAmount:
    """(bank + shipping fees) × rate, split equally over the lines."""
    rate = order.rate
    if isinstance(rate, RateNotSet):
        return RATE_NOT_SET
    count = len(order.lines)
    if count == 0:
        return ZERO
    return order.aggregate_fees_source * rate / count


def aggregate_order(
    order: SupplierOrder,
    policy: Optional[CostPolicy] = None,
    ctx: Optional[OrderCostContext] = None,
) -> OrderTotals:
    ctx = ctx or OrderCostContext(order=order, policy=policy or CostPolicy())
    policy = ctx.policy
    rate = order.rate
    lines = order.lines

    total_products = _sum(l.line_value_source for l in lines)
    per_line_fees = fees_per_line(order)

    if isinstance(rate, RateNotSet):
        total_cost: LocalAmount = RATE_NOT_SET
    else:
        total_cost = _sum(
            line_cost_total(l, ctx.delivery_for(l), rate, per_line_fees, policy)
            for l in lines
        )

    per_line_shipping = _sum(
        line_shipping_cost_total(l, ctx.delivery_for(l), policy) for l in lines
    )

    deliveries = order.deliveries
    delivery_fees = _sum(to_decimal(d.shipping_fees_local) for d in deliveries)
    other_fees = _sum(to_decimal(d.other_fees_local) for d in deliveries)
    delivered = sum(1 for d in deliveries if d.status == policy.delivered_status)
    in_progress = sum(
        1
        for d in deliveries
        if d.status not in (policy.delivered_status, policy.cancelled_status)
    )

    order_value_local = _mul_rate(total_products, rate)
    fees_local = _mul_rate(order.aggregate_fees_source, rate)
    if isinstance(order_value_local, RateNotSet) or isinstance(fees_local, RateNotSet):
        landed_check: LocalAmount = RATE_NOT_SET
    else:
        landed_check = order_value_local + delivery_fees + fees_local

    return OrderTotals(
        line_count=len(lines),
        total_items=sum(l.quantity for l in lines),
        total_weight=_sum(l.line_weight_total for l in lines),
        total_volume=_sum(l.line_volume_total for l in lines),
        total_products_value_source=total_products,
        total_value_with_fees_source=total_products + order.aggregate_fees_source,
        total_order_value_local=order_value_local,
        total_fees_local=fees_local,
        fees_per_line=per_line_fees,
        total_cost_price_local=total_cost,
        total_delivery_fees_local=delivery_fees,
        total_other_delivery_fees_local=other_fees,
        deliveries_count=len(deliveries),
        delivered_count=delivered,
        in_progress_count=in_progress,
        per_line_shipping_total_local=per_line_shipping,
        shipping_reconciliation_gap=delivery_fees - per_line_shipping,
        landed_cost_check_local=landed_check,
    )

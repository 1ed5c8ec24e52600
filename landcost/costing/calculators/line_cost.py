from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Optional, Tuple

from ..engine.context import (
    RATE_NOT_SET,
    CostPolicy,
    DeliveryRequest,
    LocalAmount,
    OrderCostContext,
    OrderLine,
    RateNotSet,
    TransportType,
    ZERO,
    to_decimal,
)
from ..engine.line_state import LineCostState
from ..explain.formatter import format_amount, format_quantity

D = Decimal


def _normalize_rate(exchange_rate: Any) -> LocalAmount:
    if isinstance(exchange_rate, RateNotSet):
        return RATE_NOT_SET
    rate = to_decimal(exchange_rate)
    if rate <= ZERO:
        return RATE_NOT_SET
    return rate


def _line_shipping(
    line: OrderLine, delivery: Optional[DeliveryRequest], policy: CostPolicy
) -> Tuple[D, Dict[str, Any]]:
    """(cost, meta) of the shipping attributable to one line, in local currency."""
    if delivery is None or delivery.agency is None:
        return ZERO, {"basis": "none"}

    agency = delivery.agency
    transport = TransportType(delivery.transport_type)
    unit_weight = to_decimal(line.unit_weight_kg)
    unit_cbm = to_decimal(line.unit_volume_cbm)
    qty = line.quantity

    if transport == TransportType.SEA and unit_cbm > ZERO:
        total_cbm = unit_cbm * qty
        price = to_decimal(agency.sea_price_per_cbm)
        return total_cbm * price, {"basis": "cbm", "cbm": total_cbm, "price": price}

    if transport == TransportType.AIR and unit_weight > ZERO:
        total_weight = unit_weight * qty
        price = to_decimal(agency.air_price_per_kg)
        return total_weight * price, {"basis": "kg", "kg": total_weight, "price": price}

    if transport == TransportType.EXPRESS and unit_weight > ZERO:
        total_weight = unit_weight * qty
        price = agency.express_price_or_fallback(policy.express_fallback_multiplier)
        return total_weight * price, {"basis": "kg", "kg": total_weight, "price": price}

    if transport == TransportType.SEA and unit_weight > ZERO:
        total_weight = unit_weight * qty
        total_cbm = total_weight / policy.kg_per_cbm
        price = to_decimal(agency.sea_price_per_cbm)
        return total_cbm * price, {
            "basis": "volumetric",
            "kg": total_weight,
            "cbm": total_cbm,
            "price": price,
        }

    return ZERO, {"basis": "none"}


def line_shipping_cost_total(
    line: OrderLine,
    delivery: Optional[DeliveryRequest],
    policy: Optional[CostPolicy] = None,
) -> D:
    cost, _ = _line_shipping(line, delivery, policy or CostPolicy())
    return cost


def line_shipping_cost_per_unit(
    line: OrderLine,
    delivery: Optional[DeliveryRequest],
    policy: Optional[CostPolicy] = None,
) -> D:
    if line.quantity <= 0:
        return ZERO
    return line_shipping_cost_total(line, delivery, policy) / line.quantity


def unit_cost_price(
    line: OrderLine,
    delivery: Optional[DeliveryRequest],
    exchange_rate: Any,
    fees_per_line: LocalAmount,
    policy: Optional[CostPolicy] = None,
) -> LocalAmount:
    """
    Landed unit cost in local currency:
    unit price × rate + shipping per unit + fees_per_line / quantity.
    RATE_NOT_SET when the order has no exchange rate.
    """
    rate = _normalize_rate(exchange_rate)
    if isinstance(rate, RateNotSet) or isinstance(fees_per_line, RateNotSet):
        return RATE_NOT_SET

    purchase = to_decimal(line.unit_price_source) * rate
    shipping = line_shipping_cost_per_unit(line, delivery, policy)
    fee_share = to_decimal(fees_per_line) / line.quantity if line.quantity > 0 else ZERO
    return purchase + shipping + fee_share


def line_cost_total(
    line: OrderLine,
    delivery: Optional[DeliveryRequest],
    exchange_rate: Any,
    fees_per_line: LocalAmount,
    policy: Optional[CostPolicy] = None,
) -> LocalAmount:
    unit = unit_cost_price(line, delivery, exchange_rate, fees_per_line, policy)
    if isinstance(unit, RateNotSet):
        return RATE_NOT_SET
    return unit * line.quantity


def apply_line_costs(
    ctx: OrderCostContext, state: LineCostState, fees_per_line: LocalAmount
) -> LineCostState:
    """
    Fill a LineCostState from the order context and write the explain trail.
    Same arithmetic as the functions above.
    """
    policy = ctx.policy
    line = state.line
    src = policy.source_currency
    cur = policy.local_currency
    delivery = ctx.delivery_for(line)

    if delivery is not None:
        state.delivery_id = delivery.delivery_id
        state.transport_type = TransportType(delivery.transport_type)
        if line.delivery_id is not None and line.delivery_id != delivery.delivery_id:
            used = delivery.delivery_id or "the newest delivery"
            state.breakdown.add_warning(
                "UNKNOWN_DELIVERY",
                f"Delivery {line.delivery_id} is not on this order: rates of {used} used",
            )

    cost, meta = _line_shipping(line, delivery, policy)
    state.shipping_cost_total = cost
    state.shipping_cost_per_unit = cost / line.quantity if line.quantity > 0 else ZERO
    state.volume_fallback = meta["basis"] == "volumetric"
    if state.volume_fallback:
        state.breakdown.add_warning(
            "VOLUMETRIC_FALLBACK",
            f"No volume: sea shipping estimated from weight at {format_quantity(policy.kg_per_cbm)} kg/CBM",
        )

    rate = ctx.rate
    if isinstance(rate, RateNotSet):
        state.breakdown.add_undefined("RATE_NOT_SET", "Exchange rate not set: landed cost undefined")
    else:
        purchase = to_decimal(line.unit_price_source) * rate
        state.purchase_unit_local = purchase
        state.breakdown.add_step(
            "PURCHASE",
            f"Purchase: {format_quantity(to_decimal(line.unit_price_source))} {src} × "
            f"{format_quantity(rate)} = {format_amount(purchase)} {cur}",
        )

    if meta["basis"] == "none":
        state.breakdown.add_meta("SHIPPING", "Shipping: 0 (no weight/volume or no agency)")
    else:
        if meta["basis"] == "cbm":
            basis = f"{format_quantity(meta['cbm'])} CBM × {format_quantity(meta['price'])} {cur}/CBM"
        elif meta["basis"] == "volumetric":
            basis = (
                f"{format_quantity(meta['kg'])} kg ÷ {format_quantity(policy.kg_per_cbm)} CBM "
                f"× {format_quantity(meta['price'])} {cur}/CBM"
            )
        else:
            basis = f"{format_quantity(meta['kg'])} kg × {format_quantity(meta['price'])} {cur}/kg"
        state.breakdown.add_step(
            "SHIPPING",
            f"Shipping: {basis} = {format_amount(cost)} {cur}"
            f" ({format_amount(state.shipping_cost_per_unit)} {cur}/unit)",
        )

    if isinstance(fees_per_line, RateNotSet):
        state.fee_share_per_unit = RATE_NOT_SET
    else:
        share = fees_per_line / line.quantity if line.quantity > 0 else ZERO
        state.fee_share_per_unit = share
        state.breakdown.add_step(
            "FEE_SHARE",
            f"Fees share: {format_amount(fees_per_line)} {cur} ÷ {line.quantity}"
            f" = {format_amount(share)} {cur}/unit",
        )

    state.unit_cost_price = unit_cost_price(line, delivery, rate, fees_per_line, policy)
    state.line_cost_total = line_cost_total(line, delivery, rate, fees_per_line, policy)

    if not isinstance(state.unit_cost_price, RateNotSet):
        state.breakdown.add_step(
            "LANDED_COST",
            f"Landed: {format_amount(state.unit_cost_price)} {cur}/unit × {line.quantity}"
            f" = {format_amount(state.line_cost_total)} {cur}",
        )

    return state

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional

from ..calculators.aggregates import OrderTotals, aggregate_order, fees_per_line
from ..calculators.line_cost import apply_line_costs
from ..calculators.shipping_fee import ShippingFeeEstimate, calculate_shipping_fee
from .context import (
    CostPolicy,
    DeliveryRequest,
    LocalAmount,
    OrderCostContext,
    RateNotSet,
    ShippingAgencyRates,
    SupplierOrder,
    TransportType,
    ZERO,
    is_defined,
)
from .line_state import LineCostState

D = Decimal


@dataclass(frozen=True)
class LineCostOutput:
    line_id: Optional[str]
    product_name: str
    quantity: int
    delivery_id: Optional[str]
    transport_type: Optional[str]
    unit_price_source: D
    line_value_source: D
    line_weight_total: D
    line_volume_total: D
    purchase_unit_local: LocalAmount
    shipping_cost_total: D
    shipping_cost_per_unit: D
    fee_share_per_unit: LocalAmount
    unit_cost_price: LocalAmount
    line_cost_total: LocalAmount
    volume_fallback: bool
    ads_amount: Optional[D] = None
    steps: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class DeliveryOutput:
    delivery_id: Optional[str]
    transport_type: str
    is_express_surcharge: bool
    agency_name: Optional[str]
    status: Optional[str]
    shipping_fees_local: Optional[D]
    other_fees_local: Optional[D]
    total_fees_local: D
    estimate: ShippingFeeEstimate


@dataclass(frozen=True)
class OrderCostReport:
    order_id: Optional[str]
    source_currency: str
    local_currency: str
    exchange_rate: LocalAmount
    totals: OrderTotals
    lines: List[LineCostOutput] = field(default_factory=list)
    deliveries: List[DeliveryOutput] = field(default_factory=list)
    warnings: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def rate_defined(self) -> bool:
        return is_defined(self.exchange_rate)


class CostAllocationEngine:
    """
    Stateless landed-cost pipeline: every call recomputes from the order it
    is given. Nothing is cached or written back.
    """

    def __init__(self, policy: Optional[CostPolicy] = None):
        self.policy = policy or CostPolicy()

    def estimate_shipping_fee(
        self,
        request: DeliveryRequest,
        agency: Optional[ShippingAgencyRates] = None,
    ) -> ShippingFeeEstimate:
        return calculate_shipping_fee(request, agency, self.policy)

    def build_report(self, order: SupplierOrder) -> OrderCostReport:
        ctx = OrderCostContext(order=order, policy=self.policy)
        self._check_order(ctx)

        per_line_fees = fees_per_line(order)
        states: List[LineCostState] = []
        for line in order.lines:
            state = LineCostState(line=line)
            states.append(apply_line_costs(ctx, state, per_line_fees))

        totals = aggregate_order(order, ctx=ctx)
        if totals.deliveries_count and totals.shipping_reconciliation_gap != ZERO:
            ctx.warn(
                "SHIPPING_RECONCILIATION_GAP",
                "Stored delivery fees differ from the per-line shipping computed from agency rates.",
                stored=str(totals.total_delivery_fees_local),
                computed=str(totals.per_line_shipping_total_local),
            )

        return OrderCostReport(
            order_id=order.order_id,
            source_currency=self.policy.source_currency,
            local_currency=self.policy.local_currency,
            exchange_rate=order.rate,
            totals=totals,
            lines=[self._line_output(s) for s in states],
            deliveries=[self._delivery_output(d) for d in order.deliveries],
            warnings=list(ctx.warnings),
        )

    def _check_order(self, ctx: OrderCostContext) -> None:
        order = ctx.order
        if isinstance(order.rate, RateNotSet):
            ctx.warn(
                "RATE_NOT_SET",
                "Exchange rate not set: local-currency figures are undefined.",
            )
        if not order.deliveries:
            ctx.warn("NO_DELIVERY", "No delivery recorded: per-line shipping is 0.")
            return
        if len(order.deliveries) > 1 and any(l.delivery_id is None for l in order.lines):
            ctx.warn(
                "MULTIPLE_DELIVERIES_FIRST_USED",
                "Several deliveries: unassigned lines use the first delivery's rates.",
                delivery_id=order.deliveries[0].delivery_id,
            )
        for d in order.deliveries:
            if d.agency is None:
                ctx.warn(
                    "NO_AGENCY",
                    "Delivery has no shipping agency: its shipping cost cannot be computed.",
                    delivery_id=d.delivery_id,
                )

    @staticmethod
    def _line_output(s: LineCostState) -> LineCostOutput:
        line = s.line
        return LineCostOutput(
            line_id=line.line_id,
            product_name=line.product_name,
            quantity=line.quantity,
            delivery_id=s.delivery_id,
            transport_type=s.transport_type.value if s.transport_type else None,
            unit_price_source=line.unit_price_source or ZERO,
            line_value_source=line.line_value_source,
            line_weight_total=line.line_weight_total,
            line_volume_total=line.line_volume_total,
            purchase_unit_local=s.purchase_unit_local,
            shipping_cost_total=s.shipping_cost_total,
            shipping_cost_per_unit=s.shipping_cost_per_unit,
            fee_share_per_unit=s.fee_share_per_unit,
            unit_cost_price=s.unit_cost_price,
            line_cost_total=s.line_cost_total,
            volume_fallback=s.volume_fallback,
            ads_amount=line.ads_amount,
            steps=s.steps,
        )

    def _delivery_output(self, d: DeliveryRequest) -> DeliveryOutput:
        return DeliveryOutput(
            delivery_id=d.delivery_id,
            transport_type=TransportType(d.transport_type).value,
            is_express_surcharge=d.is_express_surcharge,
            agency_name=d.agency.name if d.agency else None,
            status=d.status,
            shipping_fees_local=d.shipping_fees_local,
            other_fees_local=d.other_fees_local,
            total_fees_local=d.total_fees_local,
            estimate=self.estimate_shipping_fee(d),
        )

# landcost/schemas/costing.py
from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from landcost.costing.calculators.shipping_fee import ShippingFeeEstimate
from landcost.costing.engine.context import LocalAmount, RateNotSet
from landcost.costing.engine.cost_engine import (
    DeliveryOutput,
    LineCostOutput,
    OrderCostReport,
)

from .supplier_order import TransportTypeIn

RateStatus = Literal["OK", "RATE_NOT_SET"]


def _num(value: Optional[Decimal]) -> Optional[float]:
    return None if value is None else float(value)


def _local(value: LocalAmount) -> Optional[float]:
    """RATE_NOT_SET goes out as null, never as 0."""
    if isinstance(value, RateNotSet):
        return None
    return float(value)


# -----------------------------
# Shipping fee estimate
# -----------------------------


class AgencyRatesIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    air_price_per_kg: Optional[Decimal] = Field(None, ge=0)
    sea_price_per_cbm: Optional[Decimal] = Field(None, ge=0)
    express_cost_per_kg: Optional[Decimal] = Field(None, ge=0)


class ShippingFeeRequest(BaseModel):
    """
    Unsaved delivery form: agency by id, or inline rates. Neither means
    "no agency selected".
    """

    model_config = ConfigDict(extra="forbid")

    type: TransportTypeIn = "air"
    is_express: bool = False
    weight_kg: Optional[Decimal] = Field(None, ge=0)
    cbm: Optional[Decimal] = Field(None, ge=0)
    shipping_agency_id: Optional[str] = None
    rates: Optional[AgencyRatesIn] = None

    @model_validator(mode="after")
    def _one_agency_source(self) -> "ShippingFeeRequest":
        if self.shipping_agency_id and self.rates is not None:
            raise ValueError("give shipping_agency_id or rates, not both")
        return self


class ShippingFeeResponse(BaseModel):
    fee: Optional[float] = None
    trace: str = ""
    status: str
    hint: str = ""
    base_fee: Optional[float] = None
    surcharge_applied: bool = False
    volume_fallback: bool = False

    @classmethod
    def from_estimate(cls, e: ShippingFeeEstimate) -> "ShippingFeeResponse":
        return cls(
            fee=_num(e.fee),
            trace=e.trace,
            status=e.status.value,
            hint=e.hint,
            base_fee=_num(e.base_fee),
            surcharge_applied=e.surcharge_applied,
            volume_fallback=e.volume_fallback,
        )


# -----------------------------
# Cost report
# -----------------------------


class LineCostOut(BaseModel):
    line_id: Optional[str] = None
    product_name: str
    quantity: int
    delivery_id: Optional[str] = None
    transport_type: Optional[str] = None
    unit_price_source: float
    line_value_source: float
    line_weight_total: float
    line_volume_total: float
    purchase_unit_local: Optional[float] = None
    shipping_cost_total: float
    shipping_cost_per_unit: float
    fee_share_per_unit: Optional[float] = None
    unit_cost_price: Optional[float] = None
    line_cost_total: Optional[float] = None
    volume_fallback: bool = False
    ads_amount: Optional[float] = None
    steps: List[str] = Field(default_factory=list)

    @classmethod
    def from_line(cls, l: LineCostOutput) -> "LineCostOut":
        return cls(
            line_id=l.line_id,
            product_name=l.product_name,
            quantity=l.quantity,
            delivery_id=l.delivery_id,
            transport_type=l.transport_type,
            unit_price_source=float(l.unit_price_source),
            line_value_source=float(l.line_value_source),
            line_weight_total=float(l.line_weight_total),
            line_volume_total=float(l.line_volume_total),
            purchase_unit_local=_local(l.purchase_unit_local),
            shipping_cost_total=float(l.shipping_cost_total),
            shipping_cost_per_unit=float(l.shipping_cost_per_unit),
            fee_share_per_unit=_local(l.fee_share_per_unit),
            unit_cost_price=_local(l.unit_cost_price),
            line_cost_total=_local(l.line_cost_total),
            volume_fallback=l.volume_fallback,
            ads_amount=_num(l.ads_amount),
            steps=list(l.steps),
        )


class DeliveryCostOut(BaseModel):
    delivery_id: Optional[str] = None
    transport_type: str
    is_express: bool
    agency_name: Optional[str] = None
    status: Optional[str] = None
    shipping_fees_local: Optional[float] = None
    other_fees_local: Optional[float] = None
    total_fees_local: float
    estimate: ShippingFeeResponse

    @classmethod
    def from_delivery(cls, d: DeliveryOutput) -> "DeliveryCostOut":
        return cls(
            delivery_id=d.delivery_id,
            transport_type=d.transport_type,
            is_express=d.is_express_surcharge,
            agency_name=d.agency_name,
            status=d.status,
            shipping_fees_local=_num(d.shipping_fees_local),
            other_fees_local=_num(d.other_fees_local),
            total_fees_local=float(d.total_fees_local),
            estimate=ShippingFeeResponse.from_estimate(d.estimate),
        )


class OrderTotalsOut(BaseModel):
    line_count: int
    total_items: int
    total_weight: float
    total_volume: float
    total_products_value_source: float
    total_value_with_fees_source: float
    total_order_value_local: Optional[float] = None
    total_fees_local: Optional[float] = None
    fees_per_line: Optional[float] = None
    total_cost_price_local: Optional[float] = None
    total_delivery_fees_local: float
    total_other_delivery_fees_local: float
    deliveries_count: int
    delivered_count: int
    in_progress_count: int
    per_line_shipping_total_local: float
    shipping_reconciliation_gap: float
    landed_cost_check_local: Optional[float] = None


class CostReportOut(BaseModel):
    order_id: Optional[str] = None
    source_currency: str
    local_currency: str
    exchange_rate: Optional[float] = None
    rate_status: RateStatus
    totals: OrderTotalsOut
    lines: List[LineCostOut] = Field(default_factory=list)
    deliveries: List[DeliveryCostOut] = Field(default_factory=list)
    warnings: List[Dict[str, Any]] = Field(default_factory=list)

    @classmethod
    def from_report(cls, r: OrderCostReport) -> "CostReportOut":
        t = r.totals
        totals = OrderTotalsOut(
            line_count=t.line_count,
            total_items=t.total_items,
            total_weight=float(t.total_weight),
            total_volume=float(t.total_volume),
            total_products_value_source=float(t.total_products_value_source),
            total_value_with_fees_source=float(t.total_value_with_fees_source),
            total_order_value_local=_local(t.total_order_value_local),
            total_fees_local=_local(t.total_fees_local),
            fees_per_line=_local(t.fees_per_line),
            total_cost_price_local=_local(t.total_cost_price_local),
            total_delivery_fees_local=float(t.total_delivery_fees_local),
            total_other_delivery_fees_local=float(t.total_other_delivery_fees_local),
            deliveries_count=t.deliveries_count,
            delivered_count=t.delivered_count,
            in_progress_count=t.in_progress_count,
            per_line_shipping_total_local=float(t.per_line_shipping_total_local),
            shipping_reconciliation_gap=float(t.shipping_reconciliation_gap),
            landed_cost_check_local=_local(t.landed_cost_check_local),
        )
        return cls(
            order_id=r.order_id,
            source_currency=r.source_currency,
            local_currency=r.local_currency,
            exchange_rate=_local(r.exchange_rate),
            rate_status="OK" if r.rate_defined else "RATE_NOT_SET",
            totals=totals,
            lines=[LineCostOut.from_line(l) for l in r.lines],
            deliveries=[DeliveryCostOut.from_delivery(d) for d in r.deliveries],
            warnings=[
                {"code": w["code"], "message": w["message"], "meta": _plain(w["meta"])}
                for w in r.warnings
            ],
        )


def _plain(meta: Dict[str, Any]) -> Dict[str, Any]:
    return {k: (str(v) if isinstance(v, Decimal) else v) for k, v in meta.items()}

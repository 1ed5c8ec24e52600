from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional, Union

D = Decimal

ZERO = D("0")


# -----------------------------
# Sentinels
# -----------------------------


class RateNotSet(str, Enum):
    """
    Local-currency figure that cannot be computed because the order has no
    exchange rate. Never equal to (or coerced into) a numeric zero.
    """

    RATE_NOT_SET = "RATE_NOT_SET"

    def __bool__(self) -> bool:
        return False


RATE_NOT_SET = RateNotSet.RATE_NOT_SET

LocalAmount = Union[D, RateNotSet]


def is_defined(value: LocalAmount) -> bool:
    return not isinstance(value, RateNotSet)


def to_decimal(value: Any) -> D:
    """Coerce None / '' / numbers / strings into a Decimal, missing -> 0."""
    if value is None or value == "":
        return ZERO
    if isinstance(value, D):
        return value
    return D(str(value))


# -----------------------------
# Transport
# -----------------------------


class TransportType(str, Enum):
    AIR = "air"
    SEA = "sea"
    EXPRESS = "express"


@dataclass(frozen=True)
class ShippingAgencyRates:
    """
    Per-agency price quotes in local currency. Absent or zero = not offered.
    """

    air_price_per_kg: Optional[D] = None
    sea_price_per_cbm: Optional[D] = None
    express_price_per_kg: Optional[D] = None
    agency_id: Optional[str] = None
    name: Optional[str] = None

    def __post_init__(self) -> None:
        for attr in ("air_price_per_kg", "sea_price_per_cbm", "express_price_per_kg"):
            value = getattr(self, attr)
            if value is not None and value < ZERO:
                raise ValueError(f"{attr} must be non-negative, got {value}")

    def express_price_or_fallback(self, fallback_multiplier: D) -> D:
        express = self.express_price_per_kg or ZERO
        if express > ZERO:
            return express
        return (self.air_price_per_kg or ZERO) * fallback_multiplier


@dataclass(frozen=True)
class DeliveryRequest:
    transport_type: TransportType = TransportType.AIR
    is_express_surcharge: bool = False
    # order-level quantities, not per unit
    weight_kg: Optional[D] = None
    volume_cbm: Optional[D] = None
    agency: Optional[ShippingAgencyRates] = None

    # stored figures of a saved delivery
    delivery_id: Optional[str] = None
    shipping_fees_local: Optional[D] = None
    other_fees_local: Optional[D] = None
    status: Optional[str] = None

    @property
    def total_fees_local(self) -> D:
        return to_decimal(self.shipping_fees_local) + to_decimal(self.other_fees_local)


# -----------------------------
# Order
# -----------------------------


@dataclass(frozen=True)
class OrderLine:
    product_name: str
    quantity: int
    unit_price_source: Optional[D] = None
    unit_weight_kg: Optional[D] = None
    unit_volume_cbm: Optional[D] = None
    line_id: Optional[str] = None
    delivery_id: Optional[str] = None
    ads_amount: Optional[D] = None

    @property
    def line_weight_total(self) -> D:
        return to_decimal(self.unit_weight_kg) * self.quantity

    @property
    def line_volume_total(self) -> D:
        return to_decimal(self.unit_volume_cbm) * self.quantity

    @property
    def line_value_source(self) -> D:
        return to_decimal(self.unit_price_source) * self.quantity


@dataclass(frozen=True)
class SupplierOrder:
    exchange_rate: Optional[D] = None
    bank_fees_source: Optional[D] = None
    shipping_fees_source: Optional[D] = None
    lines: List[OrderLine] = field(default_factory=list)
    # newest first; deliveries[0] is the representative delivery
    deliveries: List[DeliveryRequest] = field(default_factory=list)

    order_id: Optional[str] = None
    title: Optional[str] = None
    order_number: Optional[str] = None

    @property
    def rate(self) -> LocalAmount:
        rate = to_decimal(self.exchange_rate)
        if rate <= ZERO:
            return RATE_NOT_SET
        return rate

    @property
    def aggregate_fees_source(self) -> D:
        return to_decimal(self.bank_fees_source) + to_decimal(self.shipping_fees_source)


# -----------------------------
# Policy
# -----------------------------


@dataclass(frozen=True)
class CostPolicy:
    express_surcharge_multiplier: D = D("1.3")
    express_fallback_multiplier: D = D("1.5")
    kg_per_cbm: D = D("167")
    source_currency: str = "USD"
    local_currency: str = "F CFA"
    delivered_status: str = "Livré"
    cancelled_status: str = "Annulé"

    @property
    def express_surcharge_pct(self) -> D:
        return (self.express_surcharge_multiplier - D("1")) * D("100")


# -----------------------------
# Runtime context (per request)
# -----------------------------


@dataclass
class OrderCostContext:
    """
    Explicit per-request value handed to every calculator.
    Holds the order, the policy and the warning accumulator; nothing global.
    """

    order: SupplierOrder
    policy: CostPolicy = field(default_factory=CostPolicy)
    warnings: List[Dict[str, Any]] = field(default_factory=list)

    def warn(self, code: str, message: str, **meta: Any) -> None:
        if any(w["code"] == code and w["meta"] == meta for w in self.warnings):
            return
        self.warnings.append({"code": code, "message": message, "meta": meta})

    @property
    def rate(self) -> LocalAmount:
        return self.order.rate

    def delivery_for(self, line: OrderLine) -> Optional[DeliveryRequest]:
        """
        Explicit assignment wins; otherwise the first delivery drives costs.
        """
        deliveries = self.order.deliveries
        if not deliveries:
            return None
        if line.delivery_id is not None:
            for d in deliveries:
                if d.delivery_id == line.delivery_id:
                    return d
            self.warn(
                "UNKNOWN_DELIVERY",
                f"Line {line.line_id or line.product_name} references unknown delivery "
                f"{line.delivery_id}; first delivery used.",
                line_id=line.line_id,
                delivery_id=line.delivery_id,
            )
        return deliveries[0]

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional

from ..engine.context import (
    CostPolicy,
    DeliveryRequest,
    ShippingAgencyRates,
    TransportType,
    ZERO,
    to_decimal,
)
from ..explain.formatter import format_amount, format_quantity

D = Decimal

NO_AGENCY_HINT = "Select a shipping agency to calculate fees"


class FeeStatus(str, Enum):
    COMPUTED = "COMPUTED"
    NO_AGENCY = "NO_AGENCY"
    NOT_OFFERED = "NOT_OFFERED"
    MISSING_MEASUREMENT = "MISSING_MEASUREMENT"


@dataclass(frozen=True)
class ShippingFeeEstimate:
    """
    fee is None ("empty") unless a figure was actually computed; an empty fee
    is shown as guidance, never as 0.
    """

    fee: Optional[D]
    trace: str
    status: FeeStatus
    hint: str = ""
    base_fee: Optional[D] = None
    surcharge_applied: bool = False
    volume_fallback: bool = False

    @property
    def is_empty(self) -> bool:
        return self.fee is None


def _empty(status: FeeStatus, *, trace: str = "", hint: str = "") -> ShippingFeeEstimate:
    return ShippingFeeEstimate(fee=None, trace=trace, status=status, hint=hint)


def _fmt_cbm(cbm: D) -> str:
    return format_quantity(cbm.quantize(D("0.001")))


def _unit_price(
    transport: TransportType, agency: ShippingAgencyRates, policy: CostPolicy
) -> D:
    if transport == TransportType.AIR:
        return to_decimal(agency.air_price_per_kg)
    if transport == TransportType.SEA:
        return to_decimal(agency.sea_price_per_cbm)
    return agency.express_price_or_fallback(policy.express_fallback_multiplier)


def calculate_shipping_fee(
    request: DeliveryRequest,
    agency: Optional[ShippingAgencyRates] = None,
    policy: Optional[CostPolicy] = None,
) -> ShippingFeeEstimate:
    """
    Estimate the aggregate shipping fee of one delivery from its agency's rate
    table. Pure; callers debounce recomputation themselves.

    `agency` defaults to the agency attached to the request.
    """
    policy = policy or CostPolicy()
    agency = agency if agency is not None else request.agency
    cur = policy.local_currency

    if agency is None:
        return _empty(FeeStatus.NO_AGENCY, hint=NO_AGENCY_HINT)

    transport = TransportType(request.transport_type)
    price = _unit_price(transport, agency, policy)

    if price <= ZERO:
        return _empty(
            FeeStatus.NOT_OFFERED,
            hint=f"Agency does not offer {transport.value} freight",
        )

    weight = to_decimal(request.weight_kg)
    volume = to_decimal(request.volume_cbm)
    volume_fallback = False

    if transport == TransportType.AIR and weight > ZERO:
        base = weight * price
        trace = f"{format_quantity(weight)} kg × {format_quantity(price)} {cur}/kg"
    elif transport == TransportType.SEA and volume > ZERO:
        base = volume * price
        trace = f"{format_quantity(volume)} CBM × {format_quantity(price)} {cur}/CBM"
    elif transport == TransportType.SEA and weight > ZERO:
        # volumetric-weight fallback: 1 CBM ~ kg_per_cbm kg
        cbm = weight / policy.kg_per_cbm
        base = cbm * price
        volume_fallback = True
        trace = (
            f"{format_quantity(weight)} kg ÷ {format_quantity(policy.kg_per_cbm)} = "
            f"{_fmt_cbm(cbm)} CBM × {format_quantity(price)} {cur}/CBM"
        )
    elif transport == TransportType.EXPRESS and weight > ZERO:
        base = weight * price
        trace = f"{format_quantity(weight)} kg × {format_quantity(price)} {cur}/kg"
        if not (agency.express_price_per_kg or ZERO) > ZERO:
            trace += f" (air × {format_quantity(policy.express_fallback_multiplier)})"
    else:
        if transport == TransportType.SEA:
            hint = f"Price: {format_quantity(price)} {cur}/CBM - enter volume to calculate"
        else:
            hint = f"Price: {format_quantity(price)} {cur}/kg - enter weight to calculate"
        return _empty(FeeStatus.MISSING_MEASUREMENT, trace=hint, hint=hint)

    fee = base
    trace += f" = {format_amount(base)} {cur}"

    surcharge = bool(request.is_express_surcharge) and transport != TransportType.EXPRESS
    if surcharge:
        fee = base * policy.express_surcharge_multiplier
        trace += (
            f" + {format_quantity(policy.express_surcharge_pct)}% express"
            f" = {format_amount(fee)} {cur}"
        )

    return ShippingFeeEstimate(
        fee=fee,
        trace=trace,
        status=FeeStatus.COMPUTED,
        base_fee=base,
        surcharge_applied=surcharge,
        volume_fallback=volume_fallback,
    )

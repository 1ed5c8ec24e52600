# landcost/routers/costing.py
from __future__ import annotations

import time

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from landcost.core.logging_config import logger
from landcost.costing.engine.context import DeliveryRequest, ShippingAgencyRates, TransportType
from landcost.costing.engine.cost_engine import CostAllocationEngine
from landcost.costing.engine.policy import get_cost_policy
from landcost.db import get_db
from landcost.observability.metrics import latency_hist, shipping_fee_counter
from landcost.repositories.errors import RecordNotFound
from landcost.repositories.shipping_agencies import agency_rates, get_agency
from landcost.schemas.costing import ShippingFeeRequest, ShippingFeeResponse

router = APIRouter(prefix="/api/costing", tags=["costing"])


def get_engine() -> CostAllocationEngine:
    return CostAllocationEngine(get_cost_policy())


@router.post("/shipping-fee", response_model=ShippingFeeResponse)
def estimate_shipping_fee(
    payload: ShippingFeeRequest,
    request: Request,
    db: Session = Depends(get_db),
    engine: CostAllocationEngine = Depends(get_engine),
) -> ShippingFeeResponse:
    t0 = time.time()

    agency = None
    if payload.shipping_agency_id:
        try:
            agency = agency_rates(get_agency(db, payload.shipping_agency_id))
        except RecordNotFound as e:
            raise HTTPException(status_code=404, detail={"message": str(e)})
    elif payload.rates is not None:
        agency = ShippingAgencyRates(
            air_price_per_kg=payload.rates.air_price_per_kg,
            sea_price_per_cbm=payload.rates.sea_price_per_cbm,
            express_price_per_kg=payload.rates.express_cost_per_kg,
        )

    estimate = engine.estimate_shipping_fee(
        DeliveryRequest(
            transport_type=TransportType(payload.type),
            is_express_surcharge=payload.is_express,
            weight_kg=payload.weight_kg,
            volume_cbm=payload.cbm,
        ),
        agency,
    )

    duration = time.time() - t0
    shipping_fee_counter.labels(status=estimate.status.value).inc()
    latency_hist.labels(route="/api/costing/shipping-fee").observe(duration)
    logger.bind(
        request_id=getattr(request.state, "request_id", None),
        transport_type=payload.type,
        status=estimate.status.value,
        duration_ms=round(duration * 1000, 2),
    ).info("shipping_fee_estimate")

    return ShippingFeeResponse.from_estimate(estimate)

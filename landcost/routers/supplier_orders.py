# landcost/routers/supplier_orders.py
from __future__ import annotations

import time
from typing import List, Literal

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from landcost.core.logging_config import logger
from landcost.costing.engine.cost_engine import CostAllocationEngine
from landcost.costing.explain.report_renderer import render_cost_report_text
from landcost.db import get_db
from landcost.observability.metrics import cost_report_counter, latency_hist
from landcost.repositories import supplier_orders as repo
from landcost.repositories.errors import RecordNotFound
from landcost.schemas.costing import CostReportOut
from landcost.schemas.supplier_order import (
    DeliveryCreate,
    DeliveryOut,
    DeliveryUpdate,
    OrderItemCreate,
    OrderItemOut,
    OrderItemUpdate,
    SupplierOrderCreate,
    SupplierOrderDetailOut,
    SupplierOrderOut,
    SupplierOrderUpdate,
)

from .costing import get_engine

router = APIRouter(prefix="/api/supplier-orders", tags=["supplier-orders"])


def _not_found(e: RecordNotFound) -> HTTPException:
    return HTTPException(status_code=404, detail={"message": str(e)})


def _bad_request(e: ValueError) -> HTTPException:
    return HTTPException(status_code=400, detail={"message": str(e)})


# ----------------------------
# Orders
# ----------------------------
@router.get("", response_model=List[SupplierOrderOut])
def list_orders(db: Session = Depends(get_db)):
    return repo.list_orders(db)


@router.post("", response_model=SupplierOrderOut, status_code=201)
def create_order(payload: SupplierOrderCreate, db: Session = Depends(get_db)):
    try:
        return repo.create_order(db, payload.model_dump())
    except ValueError as e:
        raise _bad_request(e)


@router.get("/{order_id}", response_model=SupplierOrderDetailOut)
def get_order(order_id: str, db: Session = Depends(get_db)):
    try:
        order = repo.get_order(db, order_id)
    except RecordNotFound as e:
        raise _not_found(e)
    return SupplierOrderDetailOut.from_row(order)


@router.patch("/{order_id}", response_model=SupplierOrderOut)
def update_order(order_id: str, payload: SupplierOrderUpdate, db: Session = Depends(get_db)):
    try:
        return repo.update_order(db, order_id, payload.model_dump(exclude_unset=True))
    except RecordNotFound as e:
        raise _not_found(e)
    except ValueError as e:
        raise _bad_request(e)


@router.delete("/{order_id}", status_code=204)
def delete_order(order_id: str, db: Session = Depends(get_db)):
    try:
        repo.delete_order(db, order_id)
    except RecordNotFound as e:
        raise _not_found(e)


# ----------------------------
# Items
# ----------------------------
@router.post("/{order_id}/items", response_model=OrderItemOut, status_code=201)
def add_item(order_id: str, payload: OrderItemCreate, db: Session = Depends(get_db)):
    try:
        return repo.add_item(db, order_id, payload.model_dump())
    except RecordNotFound as e:
        raise _not_found(e)
    except ValueError as e:
        raise _bad_request(e)


@router.patch("/{order_id}/items/{item_id}", response_model=OrderItemOut)
def update_item(
    order_id: str, item_id: str, payload: OrderItemUpdate, db: Session = Depends(get_db)
):
    try:
        return repo.update_item(db, order_id, item_id, payload.model_dump(exclude_unset=True))
    except RecordNotFound as e:
        raise _not_found(e)
    except ValueError as e:
        raise _bad_request(e)


@router.delete("/{order_id}/items/{item_id}", status_code=204)
def delete_item(order_id: str, item_id: str, db: Session = Depends(get_db)):
    try:
        repo.delete_item(db, order_id, item_id)
    except RecordNotFound as e:
        raise _not_found(e)


# ----------------------------
# Deliveries
# ----------------------------
@router.post("/{order_id}/deliveries", response_model=DeliveryOut, status_code=201)
def add_delivery(
    order_id: str,
    payload: DeliveryCreate,
    db: Session = Depends(get_db),
    engine: CostAllocationEngine = Depends(get_engine),
):
    try:
        delivery = repo.add_delivery(db, order_id, payload.model_dump(), policy=engine.policy)
    except RecordNotFound as e:
        raise _not_found(e)
    except ValueError as e:
        raise _bad_request(e)
    return DeliveryOut.from_row(delivery)


@router.patch("/{order_id}/deliveries/{delivery_id}", response_model=DeliveryOut)
def update_delivery(
    order_id: str,
    delivery_id: str,
    payload: DeliveryUpdate,
    db: Session = Depends(get_db),
    engine: CostAllocationEngine = Depends(get_engine),
):
    try:
        delivery = repo.update_delivery(
            db,
            order_id,
            delivery_id,
            payload.model_dump(exclude_unset=True),
            policy=engine.policy,
        )
    except RecordNotFound as e:
        raise _not_found(e)
    except ValueError as e:
        raise _bad_request(e)
    return DeliveryOut.from_row(delivery)


@router.delete("/{order_id}/deliveries/{delivery_id}", status_code=204)
def delete_delivery(order_id: str, delivery_id: str, db: Session = Depends(get_db)):
    try:
        repo.delete_delivery(db, order_id, delivery_id)
    except RecordNotFound as e:
        raise _not_found(e)


# ----------------------------
# Cost report
# ----------------------------
@router.get("/{order_id}/cost-report", response_model=CostReportOut)
def cost_report(
    order_id: str,
    request: Request,
    format: Literal["json", "text"] = "json",
    db: Session = Depends(get_db),
    engine: CostAllocationEngine = Depends(get_engine),
):
    t0 = time.time()
    try:
        order = repo.load_supplier_order(db, order_id)
    except RecordNotFound as e:
        cost_report_counter.labels(result="not_found").inc()
        raise _not_found(e)

    report = engine.build_report(order)
    result = "ok" if report.rate_defined else "rate_not_set"

    duration = time.time() - t0
    cost_report_counter.labels(result=result).inc()
    latency_hist.labels(route="/api/supplier-orders/{order_id}/cost-report").observe(duration)
    logger.bind(
        request_id=getattr(request.state, "request_id", None),
        order_id=order_id,
        line_count=report.totals.line_count,
        warning_count=len(report.warnings),
        result=result,
        duration_ms=round(duration * 1000, 2),
    ).info("cost_report")

    if format == "text":
        return PlainTextResponse(render_cost_report_text(report))
    return CostReportOut.from_report(report)

# landcost/repositories/supplier_orders.py
from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from landcost.core.logging_config import logger
from landcost.costing.calculators.shipping_fee import calculate_shipping_fee
from landcost.costing.engine import context as ctx
from landcost.costing.engine.context import CostPolicy, TransportType
from landcost.costing.engine.policy import get_cost_policy
from landcost.models.shipping_agency import ShippingAgency
from landcost.models.supplier_order import (
    DELIVERY_STATUSES,
    Delivery,
    SupplierOrder,
    SupplierOrderItem,
)

from .errors import RecordNotFound
from .shipping_agencies import agency_rates, check_non_negative, get_agency

ORDER_AMOUNT_FIELDS = ("total_amount_usd", "bank_fees_usd", "shipping_fees_usd", "usd_xof_value")
ITEM_AMOUNT_FIELDS = ("unit_price_usd", "unit_weight", "unit_cbm", "ads_amount")
DELIVERY_AMOUNT_FIELDS = ("weight_kg", "cbm", "shipping_fees_xof", "other_fees_xof")
FEE_INPUT_FIELDS = ("weight_kg", "cbm", "type", "is_express", "shipping_agency_id")


# -----------------------------
# Orders
# -----------------------------


def list_orders(db: Session) -> List[SupplierOrder]:
    return db.query(SupplierOrder).order_by(SupplierOrder.created_at.desc()).all()


def get_order(db: Session, order_id: str) -> SupplierOrder:
    order = db.query(SupplierOrder).filter(SupplierOrder.id == order_id).first()
    if not order:
        raise RecordNotFound("Supplier order", order_id)
    return order


def create_order(db: Session, data: Dict[str, Any]) -> SupplierOrder:
    if not (data.get("title") or "").strip():
        raise ValueError("title is required")
    check_non_negative(data, ORDER_AMOUNT_FIELDS)

    order = SupplierOrder(**data)
    db.add(order)
    db.commit()
    db.refresh(order)
    logger.bind(order_id=order.id).info("supplier_order_created")
    return order


def update_order(db: Session, order_id: str, data: Dict[str, Any]) -> SupplierOrder:
    order = get_order(db, order_id)
    if "title" in data and not (data["title"] or "").strip():
        raise ValueError("title is required")
    check_non_negative(data, ORDER_AMOUNT_FIELDS)

    for key, value in data.items():
        setattr(order, key, value)
    db.commit()
    db.refresh(order)
    return order


def delete_order(db: Session, order_id: str) -> None:
    order = get_order(db, order_id)
    db.delete(order)
    db.commit()
    logger.bind(order_id=order_id).info("supplier_order_deleted")


# -----------------------------
# Items
# -----------------------------


def _check_item(db: Session, order_id: str, data: Dict[str, Any]) -> None:
    if "product_name" in data and not (data["product_name"] or "").strip():
        raise ValueError("product_name is required")
    if "quantity" in data and (data["quantity"] is None or data["quantity"] <= 0):
        raise ValueError("quantity must be > 0")
    check_non_negative(data, ITEM_AMOUNT_FIELDS)

    delivery_id = data.get("delivery_id")
    if delivery_id is not None:
        delivery = db.query(Delivery).filter(Delivery.id == delivery_id).first()
        if delivery is None or delivery.supplier_order_id != order_id:
            raise ValueError(f"delivery {delivery_id} is not part of this supplier order")


def get_item(db: Session, order_id: str, item_id: str) -> SupplierOrderItem:
    item = (
        db.query(SupplierOrderItem)
        .filter(
            SupplierOrderItem.id == item_id,
            SupplierOrderItem.supplier_order_id == order_id,
        )
        .first()
    )
    if not item:
        raise RecordNotFound("Order item", item_id)
    return item


def add_item(db: Session, order_id: str, data: Dict[str, Any]) -> SupplierOrderItem:
    get_order(db, order_id)
    data = {"quantity": 1, **data}
    if not (data.get("product_name") or "").strip():
        raise ValueError("product_name is required")
    _check_item(db, order_id, data)

    item = SupplierOrderItem(supplier_order_id=order_id, **data)
    db.add(item)
    db.commit()
    db.refresh(item)
    return item


def update_item(
    db: Session, order_id: str, item_id: str, data: Dict[str, Any]
) -> SupplierOrderItem:
    item = get_item(db, order_id, item_id)
    _check_item(db, order_id, data)

    for key, value in data.items():
        setattr(item, key, value)
    db.commit()
    db.refresh(item)
    return item


def delete_item(db: Session, order_id: str, item_id: str) -> None:
    item = get_item(db, order_id, item_id)
    db.delete(item)
    db.commit()


# -----------------------------
# Deliveries
# -----------------------------


def get_delivery(db: Session, order_id: str, delivery_id: str) -> Delivery:
    delivery = (
        db.query(Delivery)
        .filter(Delivery.id == delivery_id, Delivery.supplier_order_id == order_id)
        .first()
    )
    if not delivery:
        raise RecordNotFound("Delivery", delivery_id)
    return delivery


def _check_delivery(db: Session, data: Dict[str, Any]) -> None:
    if "type" in data:
        try:
            TransportType(data["type"])
        except ValueError:
            raise ValueError(f"unknown delivery type: {data['type']!r}")
    if "status" in data and data["status"] not in DELIVERY_STATUSES:
        raise ValueError(f"unknown delivery status: {data['status']!r}")
    if "is_express" in data and data["is_express"] is None:
        raise ValueError("is_express must be true or false")
    check_non_negative(data, DELIVERY_AMOUNT_FIELDS)
    if data.get("shipping_agency_id") is not None:
        get_agency(db, data["shipping_agency_id"])


def _delivery_request(delivery: Delivery) -> ctx.DeliveryRequest:
    agency: Optional[ShippingAgency] = delivery.agency
    return ctx.DeliveryRequest(
        transport_type=TransportType(delivery.type),
        is_express_surcharge=bool(delivery.is_express),
        weight_kg=delivery.weight_kg,
        volume_cbm=delivery.cbm,
        agency=agency_rates(agency) if agency is not None else None,
        delivery_id=delivery.id,
        shipping_fees_local=delivery.shipping_fees_xof,
        other_fees_local=delivery.other_fees_xof,
        status=delivery.status,
    )


def _prefill_fee(delivery: Delivery, policy: Optional[CostPolicy]) -> None:
    """An unset fee takes the calculator estimate, as the delivery form does."""
    if delivery.shipping_fees_xof is not None:
        return
    estimate = calculate_shipping_fee(_delivery_request(delivery), policy=policy)
    if estimate.fee is not None:
        delivery.shipping_fees_xof = estimate.fee
    logger.bind(
        delivery_id=delivery.id,
        status=estimate.status.value,
        fee=str(estimate.fee) if estimate.fee is not None else None,
    ).info("delivery_fee_prefilled")


def add_delivery(
    db: Session,
    order_id: str,
    data: Dict[str, Any],
    policy: Optional[CostPolicy] = None,
) -> Delivery:
    get_order(db, order_id)
    _check_delivery(db, data)

    delivery = Delivery(supplier_order_id=order_id, **data)
    db.add(delivery)
    db.flush()
    db.refresh(delivery)
    _prefill_fee(delivery, policy or get_cost_policy())
    db.commit()
    db.refresh(delivery)
    return delivery


def update_delivery(
    db: Session,
    order_id: str,
    delivery_id: str,
    data: Dict[str, Any],
    policy: Optional[CostPolicy] = None,
) -> Delivery:
    delivery = get_delivery(db, order_id, delivery_id)
    _check_delivery(db, data)

    for key, value in data.items():
        setattr(delivery, key, value)
    # a changed fee input re-estimates the stored fee
    if "shipping_fees_xof" not in data and any(k in data for k in FEE_INPUT_FIELDS):
        delivery.shipping_fees_xof = None
    db.flush()
    db.refresh(delivery)
    _prefill_fee(delivery, policy or get_cost_policy())
    db.commit()
    db.refresh(delivery)
    return delivery


def delete_delivery(db: Session, order_id: str, delivery_id: str) -> None:
    delivery = get_delivery(db, order_id, delivery_id)
    # assigned lines fall back to the latest delivery
    db.query(SupplierOrderItem).filter(SupplierOrderItem.delivery_id == delivery_id).update(
        {SupplierOrderItem.delivery_id: None}, synchronize_session=False
    )
    db.delete(delivery)
    db.commit()


# -----------------------------
# Engine mapping
# -----------------------------


def _dec(value: Any) -> Optional[Decimal]:
    if value is None:
        return None
    return Decimal(str(value))


def load_supplier_order(db: Session, order_id: str) -> ctx.SupplierOrder:
    """
    Snapshot of a stored order as engine input. Deliveries newest first, so
    deliveries[0] is the latest one.
    """
    order = get_order(db, order_id)
    deliveries = (
        db.query(Delivery)
        .filter(Delivery.supplier_order_id == order_id)
        .order_by(Delivery.created_at.desc())
        .all()
    )
    items = (
        db.query(SupplierOrderItem)
        .filter(SupplierOrderItem.supplier_order_id == order_id)
        .order_by(SupplierOrderItem.created_at.asc())
        .all()
    )

    return ctx.SupplierOrder(
        exchange_rate=_dec(order.usd_xof_value),
        bank_fees_source=_dec(order.bank_fees_usd),
        shipping_fees_source=_dec(order.shipping_fees_usd),
        lines=[
            ctx.OrderLine(
                product_name=i.product_name,
                quantity=i.quantity,
                unit_price_source=_dec(i.unit_price_usd),
                unit_weight_kg=_dec(i.unit_weight),
                unit_volume_cbm=_dec(i.unit_cbm),
                line_id=i.id,
                delivery_id=i.delivery_id,
                ads_amount=_dec(i.ads_amount),
            )
            for i in items
        ],
        deliveries=[_delivery_request(d) for d in deliveries],
        order_id=order.id,
        title=order.title,
        order_number=order.order_number,
    )

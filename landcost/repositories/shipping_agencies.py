# landcost/repositories/shipping_agencies.py
from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from landcost.costing.engine.context import ShippingAgencyRates
from landcost.models.shipping_agency import ShippingAgency
from landcost.models.supplier_order import Delivery

from .errors import RecordNotFound

PRICE_FIELDS = ("air_price_per_kg", "sea_price_per_cbm", "express_cost_per_kg")


def check_non_negative(data: Dict[str, Any], fields) -> None:
    for name in fields:
        value = data.get(name)
        if value is not None and Decimal(str(value)) < 0:
            raise ValueError(f"{name} must be >= 0")


def _check_name(data: Dict[str, Any]) -> None:
    if "name" in data and not (data["name"] or "").strip():
        raise ValueError("name is required")


def list_agencies(db: Session) -> List[ShippingAgency]:
    return db.query(ShippingAgency).order_by(ShippingAgency.name.asc()).all()


def get_agency(db: Session, agency_id: str) -> ShippingAgency:
    agency = db.query(ShippingAgency).filter(ShippingAgency.id == agency_id).first()
    if not agency:
        raise RecordNotFound("Shipping agency", agency_id)
    return agency


def create_agency(db: Session, data: Dict[str, Any]) -> ShippingAgency:
    if not (data.get("name") or "").strip():
        raise ValueError("name is required")
    check_non_negative(data, PRICE_FIELDS)

    agency = ShippingAgency(**data)
    db.add(agency)
    db.commit()
    db.refresh(agency)
    return agency


def update_agency(db: Session, agency_id: str, data: Dict[str, Any]) -> ShippingAgency:
    agency = get_agency(db, agency_id)
    _check_name(data)
    check_non_negative(data, PRICE_FIELDS)

    for key, value in data.items():
        setattr(agency, key, value)
    db.commit()
    db.refresh(agency)
    return agency


def delete_agency(db: Session, agency_id: str) -> None:
    agency = get_agency(db, agency_id)
    # deliveries keep their stored fees but lose the rate table
    db.query(Delivery).filter(Delivery.shipping_agency_id == agency_id).update(
        {Delivery.shipping_agency_id: None}, synchronize_session=False
    )
    db.delete(agency)
    db.commit()


def agency_rates(agency: ShippingAgency) -> ShippingAgencyRates:
    return ShippingAgencyRates(
        air_price_per_kg=agency.air_price_per_kg,
        sea_price_per_cbm=agency.sea_price_per_cbm,
        express_price_per_kg=agency.express_cost_per_kg,
        agency_id=agency.id,
        name=agency.name,
    )

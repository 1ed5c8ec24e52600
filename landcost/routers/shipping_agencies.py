# landcost/routers/shipping_agencies.py
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from landcost.core.logging_config import logger
from landcost.db import get_db
from landcost.repositories import shipping_agencies as repo
from landcost.repositories.errors import RecordNotFound
from landcost.schemas.shipping_agency import (
    ShippingAgencyCreate,
    ShippingAgencyOut,
    ShippingAgencyUpdate,
)

router = APIRouter(prefix="/api/shipping-agencies", tags=["shipping-agencies"])


@router.get("", response_model=List[ShippingAgencyOut])
def list_agencies(db: Session = Depends(get_db)):
    return repo.list_agencies(db)


@router.post("", response_model=ShippingAgencyOut, status_code=201)
def create_agency(payload: ShippingAgencyCreate, db: Session = Depends(get_db)):
    try:
        agency = repo.create_agency(db, payload.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=400, detail={"message": str(e)})

    logger.bind(agency_id=agency.id, name=agency.name).info("shipping_agency_created")
    return agency


@router.get("/{agency_id}", response_model=ShippingAgencyOut)
def get_agency(agency_id: str, db: Session = Depends(get_db)):
    try:
        return repo.get_agency(db, agency_id)
    except RecordNotFound as e:
        raise HTTPException(status_code=404, detail={"message": str(e)})


@router.patch("/{agency_id}", response_model=ShippingAgencyOut)
def update_agency(
    agency_id: str, payload: ShippingAgencyUpdate, db: Session = Depends(get_db)
):
    try:
        agency = repo.update_agency(db, agency_id, payload.model_dump(exclude_unset=True))
    except RecordNotFound as e:
        raise HTTPException(status_code=404, detail={"message": str(e)})
    except ValueError as e:
        raise HTTPException(status_code=400, detail={"message": str(e)})

    logger.bind(agency_id=agency_id).info("shipping_agency_updated")
    return agency


@router.delete("/{agency_id}", status_code=204)
def delete_agency(agency_id: str, db: Session = Depends(get_db)):
    try:
        repo.delete_agency(db, agency_id)
    except RecordNotFound as e:
        raise HTTPException(status_code=404, detail={"message": str(e)})

    logger.bind(agency_id=agency_id).info("shipping_agency_deleted")

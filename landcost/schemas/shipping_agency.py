# landcost/schemas/shipping_agency.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, constr


class ShippingAgencyCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: constr(strip_whitespace=True, min_length=1)  # type: ignore
    phone: Optional[str] = None
    air_price_per_kg: Optional[Decimal] = Field(None, ge=0)
    sea_price_per_cbm: Optional[Decimal] = Field(None, ge=0)
    express_cost_per_kg: Optional[Decimal] = Field(None, ge=0)
    notes: Optional[str] = None


class ShippingAgencyUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: Optional[constr(strip_whitespace=True, min_length=1)] = None  # type: ignore
    phone: Optional[str] = None
    air_price_per_kg: Optional[Decimal] = Field(None, ge=0)
    sea_price_per_cbm: Optional[Decimal] = Field(None, ge=0)
    express_cost_per_kg: Optional[Decimal] = Field(None, ge=0)
    notes: Optional[str] = None


class ShippingAgencyOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    phone: Optional[str] = None
    air_price_per_kg: Optional[float] = None
    sea_price_per_cbm: Optional[float] = None
    express_cost_per_kg: Optional[float] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

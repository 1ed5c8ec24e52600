# landcost/schemas/supplier_order.py
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, constr

TransportTypeIn = Literal["air", "sea", "express"]
DeliveryStatusIn = Literal["En cours", "Livré", "Retardé", "Annulé"]


# -----------------------------
# Orders
# -----------------------------


class SupplierOrderCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: constr(strip_whitespace=True, min_length=1)  # type: ignore
    order_number: Optional[str] = None
    order_date: Optional[date] = None
    total_amount_usd: Optional[Decimal] = Field(None, ge=0)
    bank_fees_usd: Optional[Decimal] = Field(None, ge=0)
    shipping_fees_usd: Optional[Decimal] = Field(None, ge=0)
    # local units per 1 USD; leave empty until the transfer is done
    usd_xof_value: Optional[Decimal] = Field(None, ge=0)
    notes: Optional[str] = None


class SupplierOrderUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: Optional[constr(strip_whitespace=True, min_length=1)] = None  # type: ignore
    order_number: Optional[str] = None
    order_date: Optional[date] = None
    total_amount_usd: Optional[Decimal] = Field(None, ge=0)
    bank_fees_usd: Optional[Decimal] = Field(None, ge=0)
    shipping_fees_usd: Optional[Decimal] = Field(None, ge=0)
    usd_xof_value: Optional[Decimal] = Field(None, ge=0)
    notes: Optional[str] = None


# -----------------------------
# Items
# -----------------------------


class OrderItemCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    product_name: constr(strip_whitespace=True, min_length=1)  # type: ignore
    quantity: int = Field(1, gt=0)
    unit_price_usd: Optional[Decimal] = Field(None, ge=0)
    unit_weight: Optional[Decimal] = Field(None, ge=0)
    unit_cbm: Optional[Decimal] = Field(None, ge=0)
    ads_amount: Optional[Decimal] = Field(None, ge=0)
    image_url: Optional[str] = None
    delivery_id: Optional[str] = None
    notes: Optional[str] = None


class OrderItemUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    product_name: Optional[constr(strip_whitespace=True, min_length=1)] = None  # type: ignore
    quantity: Optional[int] = Field(None, gt=0)
    unit_price_usd: Optional[Decimal] = Field(None, ge=0)
    unit_weight: Optional[Decimal] = Field(None, ge=0)
    unit_cbm: Optional[Decimal] = Field(None, ge=0)
    ads_amount: Optional[Decimal] = Field(None, ge=0)
    image_url: Optional[str] = None
    delivery_id: Optional[str] = None
    notes: Optional[str] = None


class OrderItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    supplier_order_id: str
    delivery_id: Optional[str] = None
    product_name: str
    quantity: int
    unit_price_usd: Optional[float] = None
    unit_weight: Optional[float] = None
    unit_cbm: Optional[float] = None
    ads_amount: Optional[float] = None
    image_url: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# -----------------------------
# Deliveries
# -----------------------------


class DeliveryCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    shipping_agency_id: Optional[str] = None
    type: TransportTypeIn = "air"
    is_express: bool = False
    weight_kg: Optional[Decimal] = Field(None, ge=0)
    cbm: Optional[Decimal] = Field(None, ge=0)
    # empty = take the calculator estimate
    shipping_fees_xof: Optional[Decimal] = Field(None, ge=0)
    other_fees_xof: Optional[Decimal] = Field(None, ge=0)
    send_date: Optional[date] = None
    receive_date: Optional[date] = None
    tracking_number: Optional[str] = None
    status: DeliveryStatusIn = "En cours"
    notes: Optional[str] = None


class DeliveryUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    shipping_agency_id: Optional[str] = None
    type: Optional[TransportTypeIn] = None
    is_express: Optional[bool] = None
    weight_kg: Optional[Decimal] = Field(None, ge=0)
    cbm: Optional[Decimal] = Field(None, ge=0)
    shipping_fees_xof: Optional[Decimal] = Field(None, ge=0)
    other_fees_xof: Optional[Decimal] = Field(None, ge=0)
    send_date: Optional[date] = None
    receive_date: Optional[date] = None
    tracking_number: Optional[str] = None
    status: Optional[DeliveryStatusIn] = None
    notes: Optional[str] = None


class DeliveryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    supplier_order_id: str
    shipping_agency_id: Optional[str] = None
    type: str
    is_express: bool
    weight_kg: Optional[float] = None
    cbm: Optional[float] = None
    shipping_fees_xof: Optional[float] = None
    other_fees_xof: Optional[float] = None
    total_fees_xof: float = 0.0
    send_date: Optional[date] = None
    receive_date: Optional[date] = None
    tracking_number: Optional[str] = None
    status: str
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row) -> "DeliveryOut":
        out = cls.model_validate(row)
        out.total_fees_xof = (out.shipping_fees_xof or 0.0) + (out.other_fees_xof or 0.0)
        return out


class SupplierOrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    order_number: Optional[str] = None
    order_date: Optional[date] = None
    total_amount_usd: Optional[float] = None
    bank_fees_usd: Optional[float] = None
    shipping_fees_usd: Optional[float] = None
    usd_xof_value: Optional[float] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


class SupplierOrderDetailOut(SupplierOrderOut):
    items: List[OrderItemOut] = Field(default_factory=list)
    deliveries: List[DeliveryOut] = Field(default_factory=list)

    @classmethod
    def from_row(cls, row) -> "SupplierOrderDetailOut":
        out = cls.model_validate(row)
        out.deliveries = [DeliveryOut.from_row(d) for d in row.deliveries]
        return out

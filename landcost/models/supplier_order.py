# landcost/models/supplier_order.py
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from uuid import uuid4

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from landcost.db import Base

from .shipping_agency import ShippingAgency, _now

DELIVERY_STATUSES = ("En cours", "Livré", "Retardé", "Annulé")


class SupplierOrder(Base):
    __tablename__ = "supplier_orders"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    order_number: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, index=True)
    order_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    # source currency (USD)
    total_amount_usd: Mapped[Optional[Decimal]] = mapped_column(Numeric(18, 4), nullable=True)
    bank_fees_usd: Mapped[Optional[Decimal]] = mapped_column(Numeric(18, 4), nullable=True)
    shipping_fees_usd: Mapped[Optional[Decimal]] = mapped_column(Numeric(18, 4), nullable=True)
    # local units per 1 USD; NULL/0 = rate not set
    usd_xof_value: Mapped[Optional[Decimal]] = mapped_column(Numeric(18, 6), nullable=True)

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_now, nullable=False
    )

    items: Mapped[List["SupplierOrderItem"]] = relationship(
        "SupplierOrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="SupplierOrderItem.created_at",
    )
    deliveries: Mapped[List["Delivery"]] = relationship(
        "Delivery",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="Delivery.created_at.desc()",
    )

    def __repr__(self) -> str:
        return f"<SupplierOrder id={self.id} title={self.title!r}>"


class Delivery(Base):
    __tablename__ = "deliveries"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    supplier_order_id: Mapped[str] = mapped_column(
        ForeignKey("supplier_orders.id", ondelete="CASCADE"), index=True, nullable=False
    )
    shipping_agency_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("shipping_agencies.id", ondelete="SET NULL"), nullable=True
    )

    type: Mapped[str] = mapped_column(String(20), nullable=False, default="air")  # air | sea | express
    is_express: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    weight_kg: Mapped[Optional[Decimal]] = mapped_column(Numeric(18, 4), nullable=True)
    cbm: Mapped[Optional[Decimal]] = mapped_column(Numeric(18, 6), nullable=True)

    # local currency
    shipping_fees_xof: Mapped[Optional[Decimal]] = mapped_column(Numeric(18, 4), nullable=True)
    other_fees_xof: Mapped[Optional[Decimal]] = mapped_column(Numeric(18, 4), nullable=True)

    send_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    receive_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    tracking_number: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    status: Mapped[str] = mapped_column(String(30), nullable=False, default="En cours")
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_now, nullable=False
    )

    order: Mapped["SupplierOrder"] = relationship("SupplierOrder", back_populates="deliveries")
    agency: Mapped[Optional[ShippingAgency]] = relationship("ShippingAgency", lazy="joined")

    def __repr__(self) -> str:
        return f"<Delivery id={self.id} order={self.supplier_order_id} type={self.type}>"


class SupplierOrderItem(Base):
    __tablename__ = "supplier_order_items"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    supplier_order_id: Mapped[str] = mapped_column(
        ForeignKey("supplier_orders.id", ondelete="CASCADE"), index=True, nullable=False
    )
    # optional explicit assignment; NULL = latest delivery of the order
    delivery_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("deliveries.id", ondelete="SET NULL"), nullable=True
    )

    product_name: Mapped[str] = mapped_column(String(200), nullable=False)
    unit_price_usd: Mapped[Optional[Decimal]] = mapped_column(Numeric(18, 4), nullable=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    unit_weight: Mapped[Optional[Decimal]] = mapped_column(Numeric(18, 6), nullable=True)
    unit_cbm: Mapped[Optional[Decimal]] = mapped_column(Numeric(18, 6), nullable=True)
    ads_amount: Mapped[Optional[Decimal]] = mapped_column(Numeric(18, 4), nullable=True)
    image_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_now, nullable=False
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), onupdate=_now, nullable=True
    )

    order: Mapped["SupplierOrder"] = relationship("SupplierOrder", back_populates="items")

    def __repr__(self) -> str:
        return f"<SupplierOrderItem id={self.id} product={self.product_name!r}>"

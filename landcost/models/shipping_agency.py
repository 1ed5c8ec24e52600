# landcost/models/shipping_agency.py
from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional
from uuid import uuid4

from sqlalchemy import DateTime, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from landcost.db import Base


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ShippingAgency(Base):
    __tablename__ = "shipping_agencies"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    # local currency (F CFA); NULL or 0 = mode not offered
    air_price_per_kg: Mapped[Optional[Decimal]] = mapped_column(Numeric(18, 4), nullable=True)
    sea_price_per_cbm: Mapped[Optional[Decimal]] = mapped_column(Numeric(18, 4), nullable=True)
    express_cost_per_kg: Mapped[Optional[Decimal]] = mapped_column(Numeric(18, 4), nullable=True)

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_now, nullable=False
    )

    def __repr__(self) -> str:
        return f"<ShippingAgency id={self.id} name={self.name!r}>"

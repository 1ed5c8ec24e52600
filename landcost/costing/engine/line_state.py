from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from landcost.costing.explain.breakdown_builder import Breakdown

from .context import RATE_NOT_SET, LocalAmount, OrderLine, TransportType, ZERO

D = Decimal


@dataclass
class LineCostState:
    # Input
    line: OrderLine
    transport_type: Optional[TransportType] = None
    delivery_id: Optional[str] = None

    # Explainability, one trail per line
    breakdown: Breakdown = field(default_factory=Breakdown)

    # Computed
    purchase_unit_local: LocalAmount = RATE_NOT_SET
    shipping_cost_total: D = ZERO
    shipping_cost_per_unit: D = ZERO
    fee_share_per_unit: LocalAmount = RATE_NOT_SET
    unit_cost_price: LocalAmount = RATE_NOT_SET
    line_cost_total: LocalAmount = RATE_NOT_SET
    volume_fallback: bool = False

    @property
    def steps(self) -> List[str]:
        return self.breakdown.as_strings()

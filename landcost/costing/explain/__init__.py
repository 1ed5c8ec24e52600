from __future__ import annotations

from .breakdown_builder import Breakdown, BreakdownEntry, BreakdownKind
from .formatter import format_amount, format_local, format_quantity

__all__ = [
    "Breakdown",
    "BreakdownEntry",
    "BreakdownKind",
    "format_amount",
    "format_local",
    "format_quantity",
]

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Optional

from landcost.costing.engine.context import LocalAmount, RateNotSet

D = Decimal

RATE_NOT_SET_TEXT = "rate not set"


def _clean_step(s: str) -> str:
    return str(s).replace("\r", "").replace("\n", " ").replace("\t", " ").strip()


def format_amount(value: Optional[D], places: int = 2) -> str:
    """
    Display rounding. Internal figures keep full precision; only here do we
    quantize (half-up, like the back-office toFixed output).
    """
    if value is None:
        return "-"
    exp = D(1).scaleb(-places)
    return str(D(value).quantize(exp, rounding=ROUND_HALF_UP))


def format_quantity(value: Optional[D]) -> str:
    """10 -> '10', 10.50 -> '10.5', 0.333 -> '0.333'."""
    if value is None:
        return "-"
    d = D(value)
    if d == d.to_integral_value():
        return str(d.quantize(D(1)))
    return format(d.normalize(), "f")


def format_local(value: LocalAmount, currency: str = "F CFA", places: int = 2) -> str:
    if isinstance(value, RateNotSet):
        return RATE_NOT_SET_TEXT
    return f"{format_amount(value, places)} {currency}"


def format_steps_bullets(steps: Iterable[str], bullet: str = "•") -> List[str]:
    items = [_clean_step(s) for s in steps if str(s).strip()]
    return [f"{bullet} {s}" for s in items]


def format_steps_bullets_text(steps: Iterable[str], bullet: str = "•") -> str:
    return "\n".join(format_steps_bullets(steps, bullet=bullet))


def format_notices_header(title: str, notices: list[dict], bullet: str = "•") -> str:
    """Title plus one bullet per warning, '' when there are none."""
    if not notices:
        return ""
    lines = [title]
    for n in notices:
        msg = _clean_step(n.get("message") or "")
        code = _clean_step(n.get("code") or "")
        if code and msg:
            lines.append(f"{bullet} [{code}] {msg}")
        elif msg:
            lines.append(f"{bullet} {msg}")
        elif code:
            lines.append(f"{bullet} [{code}]")
    return "\n".join(lines)

from __future__ import annotations

from typing import TYPE_CHECKING, List

from .formatter import (
    format_amount,
    format_local,
    format_notices_header,
    format_quantity,
    format_steps_bullets_text,
)

if TYPE_CHECKING:
    from ..engine.cost_engine import OrderCostReport


def render_cost_report_text(report: "OrderCostReport") -> str:
    """
    Plain-text summary of a cost report: totals, warnings, then one block
    per line with its explain steps.
    """
    cur = report.local_currency
    src = report.source_currency
    t = report.totals

    parts: List[str] = []
    if report.order_id:
        parts.append(f"Supplier order: {report.order_id}")
    parts.append(f"Exchange rate: {format_local(report.exchange_rate, cur, places=0)}")
    parts.append(f"Lines: {t.line_count} | Items: {t.total_items}")
    parts.append(
        f"Weight: {format_quantity(t.total_weight)} kg | Volume: {format_quantity(t.total_volume)} CBM"
    )
    parts.append(f"Products value: {format_amount(t.total_products_value_source)} {src}")
    parts.append(f"Value with fees: {format_amount(t.total_value_with_fees_source)} {src}")
    parts.append(f"Order value: {format_local(t.total_order_value_local, cur)}")
    parts.append(f"Fees per line: {format_local(t.fees_per_line, cur)}")
    parts.append(f"Delivery fees: {format_amount(t.total_delivery_fees_local)} {cur}")
    parts.append(f"Total landed cost: {format_local(t.total_cost_price_local, cur)}")
    parts.append(
        f"Deliveries: {t.deliveries_count} ({t.delivered_count} delivered, {t.in_progress_count} in progress)"
    )
    parts.append("")

    if report.warnings:
        parts.append(format_notices_header("WARNINGS", report.warnings))
        parts.append("")

    parts.append("LINES")
    parts.append("-----")
    for line in report.lines:
        parts.append(
            f"- {line.product_name} | qty={line.quantity}"
            f" | unit={format_local(line.unit_cost_price, cur)}"
            f" | total={format_local(line.line_cost_total, cur)}"
        )
        if line.steps:
            parts.append(format_steps_bullets_text(line.steps))
        else:
            parts.append("• (no breakdown steps)")
        parts.append("")

    return "\n".join(parts).rstrip() + "\n"

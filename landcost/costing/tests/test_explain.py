from dataclasses import replace
from decimal import Decimal

import pytest

from landcost.costing.engine.context import RATE_NOT_SET
from landcost.costing.explain.breakdown_builder import Breakdown, BreakdownKind
from landcost.costing.explain.formatter import (
    format_amount,
    format_local,
    format_notices_header,
    format_quantity,
    format_steps_bullets_text,
)
from landcost.costing.explain.report_renderer import render_cost_report_text

D = Decimal


def test_formatters():
    steps = ["A", "B"]
    assert format_steps_bullets_text(steps).splitlines() == ["• A", "• B"]


def test_amount_rounding_is_half_up():
    assert format_amount(D("2.005")) == "2.01"
    assert format_amount(D("50000")) == "50000.00"
    assert format_amount(None) == "-"


def test_quantity_strips_trailing_zeros():
    assert format_quantity(D("10")) == "10"
    assert format_quantity(D("10.50")) == "10.5"
    assert format_quantity(D("7500.0")) == "7500"


def test_rate_not_set_is_rendered_as_text():
    assert format_local(RATE_NOT_SET) == "rate not set"
    assert format_local(D("1200")) == "1200.00 F CFA"


def test_notices_header():
    assert format_notices_header("WARNINGS", []) == ""
    text = format_notices_header("WARNINGS", [{"code": "NO_DELIVERY", "message": "No delivery"}])
    assert text.splitlines() == ["WARNINGS", "• [NO_DELIVERY] No delivery"]


def test_breakdown_renders_in_order():
    b = Breakdown()
    b.add_step("PURCHASE", "Purchase: 2 USD × 600 = 1200.00 F CFA")
    b.add_undefined("RATE_NOT_SET", "rate missing")
    b.add_warning("UNKNOWN_DELIVERY", "Delivery x is not on this order")
    b.add_meta("SHIPPING", "Shipping: 0")

    assert b.as_strings() == [
        "Purchase: 2 USD × 600 = 1200.00 F CFA",
        "UNDEFINED: rate missing",
        "WARNING: Delivery x is not on this order",
        "META: Shipping: 0",
    ]
    assert b.codes(BreakdownKind.WARNING) == ["UNKNOWN_DELIVERY"]


@pytest.mark.parametrize("code", ["purchase", "AB", "FEE-SHARE"])
def test_breakdown_rejects_bad_codes(code):
    with pytest.raises(ValueError):
        Breakdown().add_step(code, "x")


def test_breakdown_rejects_multiline_messages():
    with pytest.raises(ValueError):
        Breakdown().add_step("PURCHASE", "a\nb")


def test_text_report(engine, sample_order):
    text = render_cost_report_text(engine.build_report(sample_order))

    assert "Supplier order: o1" in text
    assert "Total landed cost: 35200.00 F CFA" in text
    assert "- Phone case | qty=4 | unit=2425.00 F CFA | total=9700.00 F CFA" in text
    assert "• Purchase: 2 USD × 600 = 1200.00 F CFA" in text
    assert "WARNINGS" not in text


def test_text_report_without_rate(engine, sample_order):
    text = render_cost_report_text(engine.build_report(replace(sample_order, exchange_rate=None)))

    assert "Exchange rate: rate not set" in text
    assert "Total landed cost: rate not set" in text
    assert "[RATE_NOT_SET]" in text

from __future__ import annotations

from decimal import Decimal

import pytest

from landcost.costing.engine.context import (
    CostPolicy,
    DeliveryRequest,
    OrderCostContext,
    OrderLine,
    ShippingAgencyRates,
    SupplierOrder,
    TransportType,
)
from landcost.costing.engine.cost_engine import CostAllocationEngine

D = Decimal


@pytest.fixture
def policy():
    return CostPolicy()


@pytest.fixture
def engine(policy):
    return CostAllocationEngine(policy)


@pytest.fixture
def air_agency():
    return ShippingAgencyRates(air_price_per_kg=D("5000"), agency_id="ag1", name="Air Cargo")


@pytest.fixture
def full_agency():
    return ShippingAgencyRates(
        air_price_per_kg=D("1000"),
        sea_price_per_cbm=D("100000"),
        express_price_per_kg=D("7000"),
        agency_id="ag2",
        name="All Modes",
    )


@pytest.fixture
def air_delivery(full_agency):
    return DeliveryRequest(
        transport_type=TransportType.AIR,
        agency=full_agency,
        delivery_id="d1",
        shipping_fees_local=D("400"),
        status="En cours",
    )


@pytest.fixture
def sample_order(air_delivery):
    # 2 lines, fees 10 + 5 USD at 600 -> 4500 per line
    return SupplierOrder(
        exchange_rate=D("600"),
        bank_fees_source=D("10"),
        shipping_fees_source=D("5"),
        lines=[
            OrderLine(
                product_name="Phone case",
                quantity=4,
                unit_price_source=D("2"),
                unit_weight_kg=D("0.1"),
                line_id="l1",
            ),
            OrderLine(
                product_name="Charger",
                quantity=10,
                unit_price_source=D("3.5"),
                line_id="l2",
            ),
        ],
        deliveries=[air_delivery],
        order_id="o1",
    )


@pytest.fixture
def ctx(sample_order, policy):
    return OrderCostContext(order=sample_order, policy=policy)

from .engine.context import (  # noqa
    RATE_NOT_SET,
    CostPolicy,
    DeliveryRequest,
    OrderLine,
    RateNotSet,
    ShippingAgencyRates,
    SupplierOrder,
    TransportType,
)
from .engine.cost_engine import CostAllocationEngine, OrderCostReport  # noqa
from .engine.policy import PolicyError, get_cost_policy, load_cost_policy  # noqa

from .aggregates import OrderTotals, aggregate_order, fees_per_line  # noqa
from .line_cost import (  # noqa
    apply_line_costs,
    line_cost_total,
    line_shipping_cost_per_unit,
    line_shipping_cost_total,
    unit_cost_price,
)
from .shipping_fee import FeeStatus, ShippingFeeEstimate, calculate_shipping_fee  # noqa

# landcost/observability/metrics.py
from fastapi import APIRouter
from starlette.responses import Response

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

router = APIRouter(tags=["observability"])

cost_report_counter = Counter(
    "landcost_cost_report_total",
    "Cost reports built",
    ["result"],  # ok|rate_not_set|not_found
)

shipping_fee_counter = Counter(
    "landcost_shipping_fee_estimate_total",
    "Shipping fee estimates",
    ["status"],  # COMPUTED|NO_AGENCY|NOT_OFFERED|MISSING_MEASUREMENT
)

latency_hist = Histogram(
    "landcost_api_latency_seconds",
    "API latency per route",
    ["route"],  # e.g. /api/supplier-orders/{order_id}/cost-report
)


@router.get("/metrics", include_in_schema=True)
def metrics() -> Response:
    # Prometheus expects text/plain; version=0.0.4
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

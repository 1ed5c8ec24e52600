# landcost/main.py
import time
from uuid import uuid4

from fastapi import FastAPI, Request

from landcost.config import settings
from landcost.core.logging_config import setup_logging, logger
from landcost.db import Base, engine
from landcost import models  # noqa: F401  (registers SQLAlchemy models)
from landcost.observability.metrics import router as metrics_router
from landcost.routers import costing, shipping_agencies, supplier_orders


# ----------------------------------------------------
# App init
# ----------------------------------------------------
app = FastAPI(title="Landcost", version="0.1.0")

setup_logging()
logger.info("startup", service="landcost-api", env=settings.app_env)


# ----------------------------------------------------
# Health
# ----------------------------------------------------
@app.get("/health", include_in_schema=True)
def health() -> dict:
    return {"status": "ok"}


# ----------------------------------------------------
# Logging middleware
# ----------------------------------------------------
@app.middleware("http")
async def logging_middleware(request: Request, call_next):
    start = time.time()

    request_id = request.headers.get("X-Request-ID") or uuid4().hex
    request.state.request_id = request_id
    client_ip = request.client.host if request.client else "unknown"

    bound_logger = logger.bind(
        request_id=request_id,
        ip=client_ip,
        endpoint=str(request.url.path),
        method=request.method,
    )

    bound_logger.info("request_started")
    response = await call_next(request)
    latency_ms = round((time.time() - start) * 1000, 2)

    bound_logger.bind(status_code=response.status_code, latency_ms=latency_ms).info(
        "request_finished"
    )
    response.headers["X-Request-ID"] = request_id
    return response


# ----------------------------------------------------
# Routers
# ----------------------------------------------------
app.include_router(shipping_agencies.router)
app.include_router(supplier_orders.router)
app.include_router(costing.router)
if settings.metrics_enabled:
    app.include_router(metrics_router)  # /metrics


# ----------------------------------------------------
# Startup
# ----------------------------------------------------
@app.on_event("startup")
def on_startup():
    Base.metadata.create_all(bind=engine)

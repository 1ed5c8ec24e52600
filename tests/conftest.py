import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from landcost import models  # noqa: F401  (registers SQLAlchemy models)
from landcost.db import Base, get_db
from landcost.main import app


@pytest.fixture
def session_factory():
    # one in-memory database per test
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(bind=engine, autocommit=False, autoflush=False)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def client(session_factory):
    def _get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def agency(client):
    r = client.post(
        "/api/shipping-agencies",
        json={"name": "Dakar Cargo", "air_price_per_kg": 1000, "sea_price_per_cbm": 100000},
    )
    assert r.status_code == 201, r.text
    return r.json()


@pytest.fixture
def order(client):
    r = client.post(
        "/api/supplier-orders",
        json={
            "title": "Guangzhou batch",
            "order_number": "SO-001",
            "bank_fees_usd": 10,
            "shipping_fees_usd": 5,
            "usd_xof_value": 600,
        },
    )
    assert r.status_code == 201, r.text
    return r.json()


@pytest.fixture
def order_with_lines(client, order, agency):
    oid = order["id"]
    for item in (
        {"product_name": "Phone case", "quantity": 4, "unit_price_usd": 2, "unit_weight": 0.1},
        {"product_name": "Charger", "quantity": 10, "unit_price_usd": 3.5},
    ):
        r = client.post(f"/api/supplier-orders/{oid}/items", json=item)
        assert r.status_code == 201, r.text
    r = client.post(
        f"/api/supplier-orders/{oid}/deliveries",
        json={"shipping_agency_id": agency["id"], "type": "air", "weight_kg": 0.4},
    )
    assert r.status_code == 201, r.text
    return order

def test_agency_crud(client):
    r = client.post(
        "/api/shipping-agencies",
        json={"name": "  Sahel Express ", "phone": "+221 77 000 00 00", "air_price_per_kg": 5000},
    )
    assert r.status_code == 201
    created = r.json()
    assert created["name"] == "Sahel Express"
    assert created["air_price_per_kg"] == 5000
    assert created["sea_price_per_cbm"] is None

    aid = created["id"]
    assert client.get(f"/api/shipping-agencies/{aid}").json()["name"] == "Sahel Express"
    assert [a["id"] for a in client.get("/api/shipping-agencies").json()] == [aid]

    r = client.patch(f"/api/shipping-agencies/{aid}", json={"sea_price_per_cbm": 120000})
    assert r.status_code == 200
    assert r.json()["sea_price_per_cbm"] == 120000
    assert r.json()["air_price_per_kg"] == 5000

    assert client.delete(f"/api/shipping-agencies/{aid}").status_code == 204
    r = client.get(f"/api/shipping-agencies/{aid}")
    assert r.status_code == 404
    assert "not found" in r.json()["detail"]["message"]


def test_agency_validation(client):
    assert client.post("/api/shipping-agencies", json={"name": ""}).status_code == 422
    r = client.post("/api/shipping-agencies", json={"name": "X", "air_price_per_kg": -1})
    assert r.status_code == 422
    r = client.post("/api/shipping-agencies", json={"name": "X", "fax": "1"})
    assert r.status_code == 422


def test_unknown_agency_is_404(client):
    assert client.patch("/api/shipping-agencies/nope", json={"name": "Y"}).status_code == 404
    assert client.delete("/api/shipping-agencies/nope").status_code == 404


def test_deleting_agency_keeps_delivery(client, order, agency):
    oid = order["id"]
    r = client.post(
        f"/api/supplier-orders/{oid}/deliveries",
        json={"shipping_agency_id": agency["id"], "weight_kg": 2},
    )
    assert r.json()["shipping_fees_xof"] == 2000

    assert client.delete(f"/api/shipping-agencies/{agency['id']}").status_code == 204

    deliveries = client.get(f"/api/supplier-orders/{oid}").json()["deliveries"]
    assert deliveries[0]["shipping_agency_id"] is None
    assert deliveries[0]["shipping_fees_xof"] == 2000

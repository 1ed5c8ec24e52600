URL = "/api/costing/shipping-fee"


def test_inline_rates_with_express_surcharge(client):
    r = client.post(
        URL,
        json={"type": "air", "weight_kg": 10, "is_express": True, "rates": {"air_price_per_kg": 5000}},
    )

    assert r.status_code == 200
    body = r.json()
    assert body["fee"] == 65000
    assert body["base_fee"] == 50000
    assert body["status"] == "COMPUTED"
    assert body["trace"] == "10 kg × 5000 F CFA/kg = 50000.00 F CFA + 30% express = 65000.00 F CFA"


def test_agency_by_id(client, agency):
    r = client.post(URL, json={"type": "sea", "weight_kg": 334, "shipping_agency_id": agency["id"]})

    body = r.json()
    assert body["fee"] == 200000
    assert body["volume_fallback"] is True


def test_no_agency_leaves_fee_empty(client):
    body = client.post(URL, json={"type": "air", "weight_kg": 10}).json()

    assert body["fee"] is None
    assert body["status"] == "NO_AGENCY"
    assert body["hint"] == "Select a shipping agency to calculate fees"


def test_missing_weight_shows_price(client):
    body = client.post(URL, json={"type": "air", "rates": {"air_price_per_kg": 5000}}).json()

    assert body["fee"] is None
    assert body["trace"] == "Price: 5000 F CFA/kg - enter weight to calculate"


def test_bad_requests(client):
    assert client.post(URL, json={"shipping_agency_id": "nope", "weight_kg": 1}).status_code == 404
    assert client.post(
        URL, json={"shipping_agency_id": "x", "rates": {"air_price_per_kg": 1}}
    ).status_code == 422
    assert client.post(URL, json={"type": "rail"}).status_code == 422

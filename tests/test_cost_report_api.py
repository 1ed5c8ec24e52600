def test_cost_report(client, order_with_lines):
    r = client.get(f"/api/supplier-orders/{order_with_lines['id']}/cost-report")
    assert r.status_code == 200
    report = r.json()

    assert report["rate_status"] == "OK"
    assert report["exchange_rate"] == 600
    assert report["local_currency"] == "F CFA"

    case, charger = report["lines"]
    assert case["product_name"] == "Phone case"
    assert case["shipping_cost_per_unit"] == 100
    assert case["fee_share_per_unit"] == 1125
    assert case["unit_cost_price"] == 2425
    assert case["line_cost_total"] == 9700
    assert case["steps"][0] == "Purchase: 2 USD × 600 = 1200.00 F CFA"
    assert charger["unit_cost_price"] == 2550

    totals = report["totals"]
    assert totals["total_items"] == 14
    assert totals["fees_per_line"] == 4500
    assert totals["total_cost_price_local"] == 35200
    assert totals["total_delivery_fees_local"] == 400
    assert totals["shipping_reconciliation_gap"] == 0
    assert report["warnings"] == []

    assert report["deliveries"][0]["estimate"]["status"] == "COMPUTED"
    assert report["deliveries"][0]["estimate"]["trace"] == "0.4 kg × 1000 F CFA/kg = 400.00 F CFA"


def test_cost_report_without_rate_serializes_null(client, order_with_lines):
    oid = order_with_lines["id"]
    client.patch(f"/api/supplier-orders/{oid}", json={"usd_xof_value": None})

    report = client.get(f"/api/supplier-orders/{oid}/cost-report").json()

    assert report["rate_status"] == "RATE_NOT_SET"
    assert report["exchange_rate"] is None
    assert report["totals"]["total_cost_price_local"] is None
    assert report["totals"]["fees_per_line"] is None
    assert all(l["unit_cost_price"] is None for l in report["lines"])
    assert "RATE_NOT_SET" in [w["code"] for w in report["warnings"]]
    # source-currency figures stay defined
    assert report["totals"]["total_products_value_source"] == 43


def test_cost_report_gap_warning(client, order_with_lines):
    oid = order_with_lines["id"]
    delivery = client.get(f"/api/supplier-orders/{oid}").json()["deliveries"][0]
    client.patch(
        f"/api/supplier-orders/{oid}/deliveries/{delivery['id']}",
        json={"shipping_fees_xof": 1000},
    )

    report = client.get(f"/api/supplier-orders/{oid}/cost-report").json()

    assert report["totals"]["shipping_reconciliation_gap"] == 600
    assert report["totals"]["total_cost_price_local"] == 35200
    assert "SHIPPING_RECONCILIATION_GAP" in [w["code"] for w in report["warnings"]]


def test_cost_report_uses_assigned_delivery(client, order_with_lines, agency):
    oid = order_with_lines["id"]
    sea = client.post(
        f"/api/supplier-orders/{oid}/deliveries",
        json={"shipping_agency_id": agency["id"], "type": "sea", "cbm": 1},
    ).json()
    older_air = client.get(f"/api/supplier-orders/{oid}").json()["deliveries"][1]
    items = client.get(f"/api/supplier-orders/{oid}").json()["items"]
    client.patch(
        f"/api/supplier-orders/{oid}/items/{items[0]['id']}",
        json={"delivery_id": older_air["id"]},
    )

    report = client.get(f"/api/supplier-orders/{oid}/cost-report").json()

    case, charger = report["lines"]
    assert case["delivery_id"] == older_air["id"]
    assert case["transport_type"] == "air"
    assert case["shipping_cost_total"] == 400
    assert charger["delivery_id"] == sea["id"]
    assert "MULTIPLE_DELIVERIES_FIRST_USED" in [w["code"] for w in report["warnings"]]


def test_cost_report_as_text(client, order_with_lines):
    r = client.get(f"/api/supplier-orders/{order_with_lines['id']}/cost-report?format=text")

    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/plain")
    assert "Total landed cost: 35200.00 F CFA" in r.text
    assert "• Purchase: 2 USD × 600 = 1200.00 F CFA" in r.text


def test_cost_report_unknown_order(client):
    r = client.get("/api/supplier-orders/nope/cost-report")

    assert r.status_code == 404
    assert r.json()["detail"]["message"] == "Supplier order nope not found"


def test_cost_report_carries_ads_amount(client, order_with_lines):
    oid = order_with_lines["id"]
    items = client.get(f"/api/supplier-orders/{oid}").json()["items"]
    charger = next(i for i in items if i["product_name"] == "Charger")
    client.patch(f"/api/supplier-orders/{oid}/items/{charger['id']}", json={"ads_amount": 12.5})

    lines = client.get(f"/api/supplier-orders/{oid}/cost-report").json()["lines"]

    by_name = {l["product_name"]: l for l in lines}
    assert by_name["Charger"]["ads_amount"] == 12.5
    assert by_name["Phone case"]["ads_amount"] is None
    # ads spend is reported, not folded into the landed cost
    assert by_name["Charger"]["unit_cost_price"] == 2550

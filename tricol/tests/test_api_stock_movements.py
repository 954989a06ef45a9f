from datetime import date, timedelta

import pytest


@pytest.fixture
def order_id(client):
    sid = client.post("/v1/suppliers", json={"company_name": "ABC SARL"}).json()["id"]
    p1 = client.post("/v1/products", json={"name": "P1", "unit_price": 1, "quantity": 100}).json()["id"]
    p2 = client.post("/v1/products", json={"name": "P2", "unit_price": 1, "quantity": 100}).json()["id"]
    resp = client.post(
        "/v1/orders",
        json={
            "supplier_id": sid,
            "lines": [{"product_id": p1, "quantity": 10}, {"product_id": p2, "quantity": 5}],
        },
    )
    return resp.json()["id"]


def test_create_movement_computes_quantity(client, order_id):
    resp = client.post(
        "/v1/stock-movements",
        json={"order_id": order_id, "movement_type": "IN", "quantity": 999},
    )

    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["movement_type"] == "IN"
    assert body["quantity"] == 15
    assert body["order_id"] == order_id
    assert body["movement_date"] == date.today().isoformat()


def test_create_movement_keeps_supplied_date(client, order_id):
    day = (date.today() - timedelta(days=2)).isoformat()

    created = client.post(
        "/v1/stock-movements",
        json={"order_id": order_id, "movement_type": "OUT", "movement_date": day},
    ).json()

    resp = client.get(f"/v1/stock-movements/{created['id']}")
    assert resp.status_code == 200
    assert resp.json()["movement_type"] == "OUT"
    assert resp.json()["movement_date"] == day


def test_create_movement_bad_date(client, order_id):
    resp = client.post(
        "/v1/stock-movements",
        json={"order_id": order_id, "movement_type": "IN", "movement_date": "31/12/2024"},
    )
    assert resp.status_code == 400


def test_create_movement_unknown_order(client):
    resp = client.post("/v1/stock-movements", json={"order_id": 77, "movement_type": "IN"})
    assert resp.status_code == 404
    assert resp.json()["error"] == "ORDER_NOT_FOUND"


def test_list_and_total(client, order_id):
    for movement_type in ("IN", "OUT"):
        client.post("/v1/stock-movements", json={"order_id": order_id, "movement_type": movement_type})

    resp = client.get("/v1/stock-movements", params={"page": 0, "size": 10})
    assert resp.status_code == 200
    assert len(resp.json()["content"]) == 2

    resp = client.get("/v1/stock-movements", params={"movement_type": "OUT"})
    assert resp.json()["total_elements"] == 1

    assert client.get("/v1/stock-movements/total").json() == {"total_quantity": 30}


def test_get_movement_not_found(client):
    assert client.get("/v1/stock-movements/5").status_code == 404

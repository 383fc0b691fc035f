from fastapi.testclient import TestClient

import engine

CART_WISE = {"type": "cart-wise", "details": {"threshold": 100, "discount": 10}}
PRODUCT_WISE = {"type": "product-wise", "details": {"product_id": 1, "discount": 20}}
BXGY = {"type": "bxgy", "details": {
    "buy_products": [{"product_id": 1, "quantity": 2}, {"product_id": 2, "quantity": 3}],
    "get_products": [{"product_id": 5, "quantity": 1}],
    "repetition_limit": 5,
}}

CART = {"items": [
    {"product_id": 1, "quantity": 4, "price": 50},
    {"product_id": 5, "quantity": 10, "price": 30},
]}


def _create(client, body):
    r = client.post("/coupons", json=body)
    assert r.status_code == 201
    return r.json()


def test_create_coupon_normalizes_type(client):
    created = _create(client, {"type": "  Cart-Wise ", "details": CART_WISE["details"]})

    assert created["id"] == 1
    assert created["type"] == "cart-wise"
    assert created["details"] == {"threshold": 100, "discount": 10}


def test_create_coupon_rejects_bad_type(client):
    r = client.post("/coupons", json={"type": "percent", "details": {}})
    assert r.status_code == 400
    body = r.json()
    assert body["error"] == "Invalid Coupon"
    assert "percent" in body["message"]
    assert body["status"] == 400


def test_create_coupon_requires_type_and_details(client):
    assert client.post("/coupons", json={"details": {"threshold": 1}}).status_code == 400
    assert client.post("/coupons", json={"type": "bxgy"}).status_code == 400


def test_malformed_json(client):
    r = client.post("/coupons", content="{not json", headers={"Content-Type": "application/json"})
    assert r.status_code == 400
    assert r.json()["error"] == "Invalid JSON"


def test_crud_round(client):
    first = _create(client, CART_WISE)
    second = _create(client, PRODUCT_WISE)

    r = client.get("/coupons")
    assert [c["id"] for c in r.json()] == [first["id"], second["id"]]

    assert client.get(f"/coupons/{second['id']}").json()["type"] == "product-wise"

    r = client.put(f"/coupons/{first['id']}", json={"type": "cart-wise", "details": {"threshold": 50, "discount": 5}})
    assert r.status_code == 200
    assert r.json()["details"]["threshold"] == 50

    r = client.delete(f"/coupons/{first['id']}")
    assert r.json() == {"message": "Coupon deleted successfully."}
    assert client.get(f"/coupons/{first['id']}").status_code == 404


def test_update_requires_both_fields(client):
    coupon = _create(client, CART_WISE)
    r = client.put(f"/coupons/{coupon['id']}", json={"type": "cart-wise"})
    assert r.status_code == 400


def test_unknown_coupon_is_404(client):
    r = client.get("/coupons/99")
    assert r.status_code == 404
    assert r.json()["message"] == "Coupon not found with ID: 99"
    assert client.delete("/coupons/99").status_code == 404
    assert client.post("/apply-coupon/99", json=CART).status_code == 404


def test_applicable_coupons(client):
    cart_wise = _create(client, CART_WISE)
    _create(client, PRODUCT_WISE)    # product 1: 4 * 50 * 0.2 = 40
    bxgy = _create(client, BXGY)
    _create(client, {"type": "product-wise", "details": {"product_id": 42, "discount": 20}})

    r = client.post("/applicable-coupons", json=CART)
    assert r.status_code == 200
    coupons = r.json()["applicable_coupons"]

    assert [c["coupon_id"] for c in coupons] == [cart_wise["id"], 2, bxgy["id"]]
    assert coupons[0]["discount"] == 50.0
    assert coupons[1]["discount"] == 40.0
    assert coupons[2] == {"coupon_id": bxgy["id"], "type": "bxgy", "discount": 60.0}


def test_applicable_coupons_skips_malformed_rules(client):
    _create(client, {"type": "cart-wise", "details": {"threshold": "high", "discount": 10}})

    r = client.post("/applicable-coupons", json=CART)
    assert r.json() == {"applicable_coupons": []}


def test_apply_bxgy(client):
    coupon = _create(client, BXGY)

    r = client.post(f"/apply-coupon/{coupon['id']}", json=CART)
    assert r.status_code == 200
    cart = r.json()["updated_cart"]

    assert cart["total_price"] == 500.0
    assert cart["total_discount"] == 60.0
    assert cart["final_price"] == 440.0
    assert cart["items"] == [
        {"product_id": 1, "quantity": 4, "price": 50.0, "total_discount": 0.0},
        {"product_id": 5, "quantity": 12, "price": 30.0, "total_discount": 60.0},
    ]


def test_apply_without_cart(client):
    coupon = _create(client, CART_WISE)

    r = client.post(f"/apply-coupon/{coupon['id']}")
    assert r.status_code == 200
    assert r.json() == {"updated_cart": {
        "items": [], "total_price": 0.0, "total_discount": 0.0, "final_price": 0.0,
    }}


def test_apply_rejects_negative_quantity(client):
    coupon = _create(client, CART_WISE)
    r = client.post(f"/apply-coupon/{coupon['id']}", json={"items": [{"product_id": 1, "quantity": -1, "price": 5}]})
    assert r.status_code == 400


def test_unexpected_error_is_500(client, monkeypatch):
    def explode(cart, coupons):
        raise RuntimeError("boom")

    monkeypatch.setattr(engine, "list_applicable", explode)
    client = TestClient(client.app, raise_server_exceptions=False)

    r = client.post("/applicable-coupons", json=CART)
    assert r.status_code == 500
    body = r.json()
    assert body["error"] == "Internal Server Error"
    assert body["message"] == "boom"
    assert body["status"] == 500
    assert "timestamp" in body

import uuid

from storefront.db import models
from storefront.db.repositories import cart as cart_repo


def test_empty_cart(client, user, auth_headers):
    r = client.get("/api/cart", headers=auth_headers(user))
    assert r.status_code == 200
    assert r.json()["data"] == {"items": [], "totalAmount": 0, "totalItems": 0}


def test_cart_requires_auth(client):
    assert client.get("/api/cart").status_code == 401


def test_add_items_and_totals(client, user, auth_headers, product_factory):
    shirt = product_factory("Shirt", price=1000, stock=5)
    hat = product_factory("Hat", price=2500, stock=5)
    h = auth_headers(user)

    r = client.post("/api/cart", json={"productId": str(shirt.id), "quantity": 2}, headers=h)
    assert r.status_code == 200
    assert r.json()["message"] == "Added to cart"
    assert r.json()["data"]["product"]["name"] == "Shirt"
    client.post("/api/cart", json={"productId": str(hat.id)}, headers=h)

    cart = client.get("/api/cart", headers=h).json()["data"]
    assert cart["totalAmount"] == 4500
    assert cart["totalItems"] == 3
    assert {i["product"]["name"] for i in cart["items"]} == {"Shirt", "Hat"}
    assert cart["items"][0]["product"]["category"]["slug"] == "default"


def test_add_existing_line_accumulates_within_stock(client, user, auth_headers, product_factory):
    p = product_factory("Mug", stock=3)
    h = auth_headers(user)
    client.post("/api/cart", json={"productId": str(p.id), "quantity": 2}, headers=h)
    r = client.post("/api/cart", json={"productId": str(p.id), "quantity": 1}, headers=h)
    assert r.json()["data"]["quantity"] == 3

    r = client.post("/api/cart", json={"productId": str(p.id), "quantity": 1}, headers=h)
    assert r.status_code == 400
    assert r.json()["error"] == "Insufficient stock for requested quantity"


def test_add_falls_back_to_update_when_line_appears_concurrently(client, user, auth_headers, product_factory, monkeypatch):
    p = product_factory("Mug", stock=5)
    h = auth_headers(user)
    client.post("/api/cart", json={"productId": str(p.id), "quantity": 2}, headers=h)

    real_lookup = cart_repo.get_line_for_product
    calls = {"n": 0}

    def stale_first_lookup(db, user_id, product_id):
        # The first lookup misses the line, as if the other insert had not committed yet
        calls["n"] += 1
        return None if calls["n"] == 1 else real_lookup(db, user_id, product_id)

    monkeypatch.setattr(cart_repo, "get_line_for_product", stale_first_lookup)
    r = client.post("/api/cart", json={"productId": str(p.id), "quantity": 1}, headers=h)
    assert r.status_code == 200
    assert r.json()["data"]["quantity"] == 3
    assert calls["n"] == 2

    cart = client.get("/api/cart", headers=h).json()["data"]
    assert len(cart["items"]) == 1
    assert cart["totalItems"] == 3


def test_add_validation(client, user, auth_headers, product_factory):
    p = product_factory("Mug", stock=1)
    h = auth_headers(user)
    for body in ({}, {"productId": str(p.id), "quantity": 0}):
        r = client.post("/api/cart", json=body, headers=h)
        assert r.status_code == 400
        assert r.json()["error"] == "Invalid product or quantity"

    r = client.post("/api/cart", json={"productId": str(uuid.uuid4())}, headers=h)
    assert r.status_code == 404
    assert r.json()["error"] == "Product not found"

    r = client.post("/api/cart", json={"productId": str(p.id), "quantity": 2}, headers=h)
    assert r.status_code == 400
    assert r.json()["error"] == "Insufficient stock"


def test_update_quantity(client, user, auth_headers, product_factory):
    p = product_factory("Mug", stock=4)
    h = auth_headers(user)
    item_id = client.post("/api/cart", json={"productId": str(p.id)}, headers=h).json()["data"]["id"]

    r = client.put(f"/api/cart/{item_id}", json={"quantity": 4}, headers=h)
    assert r.status_code == 200
    assert r.json()["message"] == "Quantity updated"
    assert r.json()["data"]["quantity"] == 4

    r = client.put(f"/api/cart/{item_id}", json={"quantity": 5}, headers=h)
    assert r.json()["error"] == "Insufficient stock"
    for body in ({}, {"quantity": 0}):
        r = client.put(f"/api/cart/{item_id}", json=body, headers=h)
        assert r.status_code == 400
        assert r.json()["error"] == "Invalid quantity"


def test_lines_of_other_users_are_invisible(client, user, user_factory, auth_headers, product_factory):
    p = product_factory("Mug", stock=4)
    item_id = client.post("/api/cart", json={"productId": str(p.id)}, headers=auth_headers(user)).json()["data"]["id"]
    intruder = auth_headers(user_factory("intruder@example.com"))

    r = client.put(f"/api/cart/{item_id}", json={"quantity": 1}, headers=intruder)
    assert r.status_code == 404
    assert r.json()["error"] == "Cart item not found"
    assert client.delete(f"/api/cart/{item_id}", headers=intruder).status_code == 404
    assert client.delete("/api/cart/not-a-uuid", headers=intruder).status_code == 404


def test_remove_and_clear(client, user, auth_headers, product_factory):
    h = auth_headers(user)
    a = product_factory("A")
    b = product_factory("B")
    item_id = client.post("/api/cart", json={"productId": str(a.id)}, headers=h).json()["data"]["id"]
    client.post("/api/cart", json={"productId": str(b.id)}, headers=h)

    r = client.delete(f"/api/cart/{item_id}", headers=h)
    assert r.json()["message"] == "Removed from cart"
    assert len(client.get("/api/cart", headers=h).json()["data"]["items"]) == 1

    r = client.delete("/api/cart", headers=h)
    assert r.json()["message"] == "Cart cleared"
    assert client.get("/api/cart", headers=h).json()["data"]["items"] == []


def test_merge_clamps_to_stock_and_skips_unknown(client, user, auth_headers, product_factory, db_session):
    h = auth_headers(user)
    mug = product_factory("Mug", price=500, stock=3)
    cap = product_factory("Cap", price=700, stock=10)
    gone = product_factory("Sold Out", stock=0)
    client.post("/api/cart", json={"productId": str(mug.id), "quantity": 2}, headers=h)

    r = client.post(
        "/api/cart/merge",
        json={
            "items": [
                {"productId": str(mug.id), "quantity": 5},
                {"productId": str(cap.id), "quantity": 2},
                {"productId": str(gone.id), "quantity": 1},
                {"productId": str(uuid.uuid4()), "quantity": 1},
                {"productId": "garbage", "quantity": 1},
                {"productId": str(cap.id), "quantity": -3},
            ]
        },
        headers=h,
    )
    assert r.status_code == 200
    cart = r.json()["data"]
    quantities = {i["product"]["name"]: i["quantity"] for i in cart["items"]}
    assert quantities == {"Mug": 3, "Cap": 2}
    assert cart["totalAmount"] == 3 * 500 + 2 * 700
    assert db_session.query(models.CartItem).filter_by(user_id=user.id).count() == 2

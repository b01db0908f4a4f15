
def test_cart_requires_login(client):
    assert client.get("/api/cart").status_code == 401
    assert client.post("/api/cart", json={"action": "add", "productId": "x"}).status_code == 401


def test_get_cart_for_new_user(make_client):
    alice = make_client("alice")

    resp = alice.get("/api/cart")

    assert resp.status_code == 200
    body = resp.json()
    assert body["cart"]["userId"] == "alice"
    assert body["cart"]["items"] == []
    assert body["totals"] == {"subtotal": 0.0, "tax": 0.0, "grandTotal": 0.0}


def test_add_update_remove_flow(make_client, make_product):
    make_product("Calculus", "10.00", slug="calc")
    make_product("Algebra", "5.50", slug="alg")
    alice = make_client("alice")

    resp = alice.post("/api/cart", json={"action": "add", "productId": "calc", "quantity": "2"})
    assert resp.status_code == 200
    assert resp.json()["ok"] is True

    resp = alice.post("/api/cart", json={"action": "add", "productId": "alg"})
    body = resp.json()
    assert body["cart"]["items"] == [
        {"productId": "calc", "name": "Calculus", "price": 10.0, "quantity": 2},
        {"productId": "alg", "name": "Algebra", "price": 5.5, "quantity": 1},
    ]
    assert body["totals"] == {"subtotal": 25.5, "tax": 1.79, "grandTotal": 27.29}

    resp = alice.post("/api/cart", json={"action": "update", "productId": "calc", "quantity": 0})
    assert [i["productId"] for i in resp.json()["cart"]["items"]] == ["alg"]

    resp = alice.post("/api/cart", json={"action": "remove", "productId": "alg"})
    assert resp.json()["cart"]["items"] == []

    resp = alice.post("/api/cart", json={"action": "remove", "productId": "alg"})
    assert resp.status_code == 200


def test_validation_and_not_found_errors(make_client, make_product):
    make_product("Calculus", "10.00", slug="calc")
    alice = make_client("alice")

    resp = alice.post("/api/cart", json={"action": "add"})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Missing product id."

    assert alice.post("/api/cart", json={"action": "add", "productId": "nope"}).status_code == 404
    assert alice.post("/api/cart", json={"action": "update", "productId": "calc", "quantity": 2}).status_code == 404


def test_oversized_quantity_is_bad_request(make_client, make_product):
    make_product("Calculus", "10.00", slug="calc")
    alice = make_client("alice")
    huge = "99999999999999999999"

    resp = alice.post("/api/cart", json={"action": "add", "productId": "calc", "quantity": huge})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Quantity cannot exceed 999."

    alice.post("/api/cart", json={"action": "add", "productId": "calc", "quantity": 998})
    resp = alice.post("/api/cart", json={"action": "add", "productId": "calc", "quantity": 2})
    assert resp.status_code == 400

    resp = alice.post("/api/cart", json={"action": "update", "productId": "calc", "quantity": huge})
    assert resp.status_code == 400
    assert alice.get("/api/cart").json()["cart"]["items"][0]["quantity"] == 998


def test_unsupported_action(make_client):
    alice = make_client("alice")

    resp = alice.post("/api/cart", json={"action": "teleport"})

    assert resp.status_code == 405
    assert alice.post("/api/cart", json={}).status_code == 405


def test_checkout_empty_cart(make_client):
    alice = make_client("alice")

    resp = alice.post("/api/cart", json={"action": "checkout"})

    assert resp.status_code == 400
    assert alice.get("/api/orders").json()["orders"] == []
    assert alice.get("/api/checkout/confirmation").json() == {"confirmed": False}


def test_checkout_flow(make_client, make_product):
    make_product("Calculus", "10.00", slug="calc")
    make_product("Algebra", "5.50", slug="alg")
    alice = make_client("alice")
    bob = make_client("bob")
    alice.post("/api/cart", json={"action": "add", "productId": "calc", "quantity": 2})
    alice.post("/api/cart", json={"action": "add", "productId": "alg"})
    bob.post("/api/cart", json={"action": "add", "productId": "calc"})

    resp = alice.post("/api/cart", json={"action": "checkout"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["ok"] is True
    order_id = body["orderId"]

    order = alice.get(f"/api/orders/{order_id}").json()["order"]
    assert order["status"] == "paid"
    assert order["total"] == 27.29

    assert alice.get("/api/cart").json()["cart"]["items"] == []
    assert bob.get("/api/cart").json()["cart"]["items"] == []

    products = {p["id"]: p for p in alice.get("/api/products").json()["products"]}
    assert products["calc"]["status"] == "sold"
    assert products["alg"]["status"] == "sold"

    # sold products can no longer be added
    assert bob.post("/api/cart", json={"action": "add", "productId": "calc"}).status_code == 409

    # confirmation flag is consumed once
    assert alice.get("/api/checkout/confirmation").json() == {"confirmed": True}
    assert alice.get("/api/checkout/confirmation").json() == {"confirmed": False}


def test_confirmation_requires_login(client):
    assert client.get("/api/checkout/confirmation").status_code == 401


def test_non_json_body_is_bad_request(make_client):
    alice = make_client("alice")

    resp = alice.post("/api/cart", content=b"action=add", headers={"content-type": "application/json"})

    assert resp.status_code == 400

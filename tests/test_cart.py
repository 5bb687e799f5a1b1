from sqlmodel import select

from ecofinds.models.interaction import UserProduct
from ecofinds.repositories.interaction_repo import InteractionRepository


def test_add_rejects_quantity_above_stock(client, register, make_product):
    seller, _ = register()
    buyer, _ = register(email="buyer@example.com", display_name="Buyer")
    product = make_product(seller, quantity=5)

    resp = client.post("/api/cart/add", json={"productId": product["id"], "quantity": 6}, headers=buyer)
    assert resp.status_code == 400
    assert resp.json() == {
        "success": False,
        "message": "Not enough stock available",
        "availableQuantity": 5,
    }


def test_add_validation(client, register, make_product):
    buyer, _ = register(email="buyer@example.com", display_name="Buyer")
    resp = client.post("/api/cart/add", json={"productId": 1, "quantity": 0}, headers=buyer)
    assert resp.status_code == 400
    resp = client.post("/api/cart/add", json={"productId": 999}, headers=buyer)
    assert resp.status_code == 404


def test_add_again_replaces_quantity(client, register, make_product, add_image):
    seller, seller_id = register()
    buyer, buyer_id = register(email="buyer@example.com", display_name="Buyer")
    product = make_product(seller, quantity=5)
    add_image(product["id"], "https://cdn.test/p.png")

    first = client.post("/api/cart/add", json={"productId": product["id"], "quantity": 2}, headers=buyer)
    assert first.status_code == 200
    second = client.post("/api/cart/add", json={"productId": product["id"], "quantity": 3}, headers=buyer)
    item = second.json()["data"]

    assert item["id"] == first.json()["data"]["id"]
    assert item["quantity"] == 3
    assert item["userId"] == buyer_id
    assert item["interaction"] == "CART"
    assert item["product"]["primaryImage"] == "https://cdn.test/p.png"
    assert item["product"]["seller"]["id"] == seller_id

    cart = client.get("/api/cart", headers=buyer).json()["data"]
    assert len(cart["items"]) == 1
    assert cart["items"][0]["quantity"] == 3


def test_cart_summary(client, register, make_product):
    seller, seller_id = register()
    buyer, _ = register(email="buyer@example.com", display_name="Buyer")
    lamp = make_product(seller, title="Lamp", price=10.25, quantity=10, category="FURNITURE")
    book = make_product(seller, title="Book", price=3.5, quantity=10, category="BOOKS")
    chair = make_product(seller, title="Chair", price=20, quantity=10, category="FURNITURE")
    client.post("/api/product-lists", json={"productId": book["id"], "status": "RESERVED"}, headers=seller)

    for product, qty in ((lamp, 2), (book, 1), (chair, 1)):
        resp = client.post("/api/cart/add", json={"productId": product["id"], "quantity": qty}, headers=buyer)
        assert resp.status_code == 200

    data = client.get("/api/cart", headers=buyer).json()["data"]
    details = data["cartDetails"]
    assert details["totalItems"] == 4
    assert details["uniqueItems"] == 3
    assert details["subtotal"] == 44.0
    by_cat = {row["category"]: row for row in details["itemsByCategory"]}
    assert by_cat["FURNITURE"] == {"category": "FURNITURE", "itemCount": 3, "subtotal": 40.5}
    assert by_cat["BOOKS"]["subtotal"] == 3.5

    # most recently added first
    assert [line["product"]["name"] for line in data["items"]] == ["Chair", "Book", "Lamp"]
    lamp_line = data["items"][2]
    assert lamp_line["itemTotal"] == 20.5
    assert lamp_line["product"]["stock"] == 10
    assert lamp_line["product"]["status"] == "ACTIVE"
    assert lamp_line["product"]["imageUrl"] is None
    assert lamp_line["seller"]["id"] == seller_id
    assert lamp_line["seller"]["phone"] is None
    assert data["items"][1]["product"]["status"] == "RESERVED"


def test_update_item(client, register, make_product):
    seller, _ = register()
    buyer, _ = register(email="buyer@example.com", display_name="Buyer")
    intruder, _ = register(email="intruder@example.com", display_name="Intruder")
    product = make_product(seller, quantity=4)
    item = client.post("/api/cart/add", json={"productId": product["id"]}, headers=buyer).json()["data"]

    resp = client.patch(f"/api/cart/update/{item['id']}", json={"quantity": 4}, headers=buyer)
    assert resp.status_code == 200
    assert resp.json()["data"]["quantity"] == 4

    resp = client.patch(f"/api/cart/update/{item['id']}", json={"quantity": 5}, headers=buyer)
    assert resp.status_code == 400
    assert resp.json()["availableQuantity"] == 4

    resp = client.patch(f"/api/cart/update/{item['id']}", json={"quantity": 0}, headers=buyer)
    assert resp.status_code == 400

    resp = client.patch(f"/api/cart/update/{item['id']}", json={"quantity": 1}, headers=intruder)
    assert resp.status_code == 404


def test_cart_item_id_must_be_a_cart_row(client, register, make_product):
    seller, _ = register()
    buyer, _ = register(email="buyer@example.com", display_name="Buyer")
    product = make_product(seller)
    fav = client.post(
        "/api/user-products",
        json={"productId": product["id"], "interaction": "FAVORITE"},
        headers=buyer,
    ).json()["data"]

    assert client.delete(f"/api/cart/remove/{fav['id']}", headers=buyer).status_code == 404


def test_remove_and_clear(client, register, make_product):
    seller, _ = register()
    buyer, _ = register(email="buyer@example.com", display_name="Buyer")
    a = make_product(seller, title="A")
    b = make_product(seller, title="B")
    item = client.post("/api/cart/add", json={"productId": a["id"]}, headers=buyer).json()["data"]
    client.post("/api/cart/add", json={"productId": b["id"]}, headers=buyer)
    client.post("/api/user-products", json={"productId": a["id"], "interaction": "FAVORITE"}, headers=buyer)

    assert client.delete(f"/api/cart/remove/{item['id']}", headers=buyer).status_code == 200
    assert client.delete(f"/api/cart/remove/{item['id']}", headers=buyer).status_code == 404
    assert len(client.get("/api/cart", headers=buyer).json()["data"]["items"]) == 1

    assert client.delete("/api/cart/clear", headers=buyer).status_code == 200
    assert client.get("/api/cart", headers=buyer).json()["data"]["items"] == []
    assert client.delete("/api/cart/clear", headers=buyer).status_code == 200

    favorites = client.get("/api/user-products/favorite", headers=buyer).json()["data"]
    assert len(favorites) == 1


def test_cart_requires_auth(client):
    assert client.get("/api/cart").status_code == 401


def test_add_race_updates_the_existing_row(client, register, make_product, session, monkeypatch):
    seller, _ = register()
    buyer, buyer_id = register(email="buyer@example.com", display_name="Buyer")
    product = make_product(seller, quantity=5)
    first = client.post("/api/cart/add", json={"productId": product["id"], "quantity": 1}, headers=buyer)
    first_id = first.json()["data"]["id"]

    # The first lookup misses the row another request already inserted.
    real_get_item = InteractionRepository.get_item
    lookups = []

    def miss_once(self, *args, **kwargs):
        lookups.append(args)
        if len(lookups) == 1:
            return None
        return real_get_item(self, *args, **kwargs)

    monkeypatch.setattr(InteractionRepository, "get_item", miss_once)

    resp = client.post("/api/cart/add", json={"productId": product["id"], "quantity": 3}, headers=buyer)
    assert resp.status_code == 200
    assert resp.json()["data"]["id"] == first_id
    assert resp.json()["data"]["quantity"] == 3
    assert len(lookups) == 2

    rows = session.exec(
        select(UserProduct).where(
            UserProduct.user_id == buyer_id,
            UserProduct.interaction == "CART",
        )
    ).all()
    assert [(row.id, row.quantity) for row in rows] == [(first_id, 3)]

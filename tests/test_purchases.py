from datetime import datetime, timezone

import pytest

from ecofinds.models.purchase import Purchase


@pytest.fixture
def add_purchase(session):
    def _add_purchase(user_id, product_id, *, quantity=1, price=10.0, status="COMPLETED", day=1):
        purchase = Purchase(
            user_id=user_id,
            product_id=product_id,
            quantity=quantity,
            price_at_purchase=price,
            status=status,
            purchase_date=datetime(2024, 3, day, 12, tzinfo=timezone.utc),
        )
        session.add(purchase)
        session.commit()
        session.refresh(purchase)
        return purchase

    return _add_purchase


def test_history_with_lifetime_summary(client, register, make_product, add_purchase, add_image):
    seller, seller_id = register()
    buyer, buyer_id = register(email="buyer@example.com", display_name="Buyer")
    _, other_id = register(email="other@example.com", display_name="Other")
    lamp = make_product(seller, title="Lamp")
    add_image(lamp["id"], "https://cdn.test/lamp.png")

    add_purchase(buyer_id, lamp["id"], quantity=2, price=10.0, day=1)
    add_purchase(buyer_id, lamp["id"], quantity=3, price=5.5, day=2)
    add_purchase(buyer_id, lamp["id"], quantity=1, price=99.0, status="CANCELLED", day=3)
    add_purchase(other_id, lamp["id"], quantity=1, price=1.0, day=4)

    resp = client.get("/api/purchases/history", headers=buyer)
    assert resp.status_code == 200
    data = resp.json()["data"]

    assert [p["status"] for p in data["purchases"]] == ["CANCELLED", "COMPLETED", "COMPLETED"]
    first = data["purchases"][1]
    assert first["totalAmount"] == 16.5
    assert first["priceAtPurchase"] == 5.5
    assert first["product"] == {
        "id": lamp["id"],
        "name": "Lamp",
        "category": "FURNITURE",
        "primaryImage": "https://cdn.test/lamp.png",
    }
    assert first["seller"]["id"] == seller_id
    assert data["pagination"]["totalItems"] == 3
    assert data["summary"] == {"totalPurchases": 2, "totalItems": 5, "totalSpent": 36.5}

    # filters scope the page, never the summary
    filtered = client.get(
        "/api/purchases/history",
        params={"status": "cancelled"},
        headers=buyer,
    ).json()["data"]
    assert len(filtered["purchases"]) == 1
    assert filtered["summary"] == data["summary"]


def test_history_date_range_and_sort(client, register, make_product, add_purchase):
    seller, _ = register()
    buyer, buyer_id = register(email="buyer@example.com", display_name="Buyer")
    product = make_product(seller)
    for day in (1, 5, 10):
        add_purchase(buyer_id, product["id"], day=day, quantity=day)

    data = client.get(
        "/api/purchases/history",
        params={
            "startDate": "2024-03-05T00:00:00Z",
            "endDate": "2024-03-10T23:59:59Z",
            "sortBy": "quantity",
            "sortOrder": "asc",
        },
        headers=buyer,
    ).json()["data"]
    assert [p["quantity"] for p in data["purchases"]] == [5, 10]


def test_history_rejects_bad_status(client, register):
    buyer, _ = register(email="buyer@example.com", display_name="Buyer")
    resp = client.get("/api/purchases/history", params={"status": "lost"}, headers=buyer)
    assert resp.status_code == 400


def test_purchase_detail(client, register, make_product, add_purchase):
    seller, seller_id = register()
    buyer, buyer_id = register(email="buyer@example.com", display_name="Buyer")
    stranger, _ = register(email="stranger@example.com", display_name="Stranger")
    client.post(
        "/api/users/profile",
        json={
            "fullName": "Sam Seller",
            "phoneNumber": "+100000",
            "address": {"city": "Pune", "state": "MH", "country": "IN"},
        },
        headers=seller,
    )
    product = make_product(seller, brand="Acme", length=30)
    purchase = add_purchase(buyer_id, product["id"], quantity=2, price=12.5)

    resp = client.get(f"/api/purchases/{purchase.id}", headers=buyer)
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["purchase"]["totalAmount"] == 25.0
    assert data["product"]["specifications"]["brand"] == "Acme"
    assert data["product"]["specifications"]["dimensions"]["length"] == 30
    assert data["seller"]["id"] == seller_id
    assert data["seller"]["phone"] == "+100000"
    assert data["seller"]["address"]["city"] == "Pune"

    assert client.get(f"/api/purchases/{purchase.id}", headers=stranger).status_code == 404
    assert client.get("/api/purchases/999", headers=buyer).status_code == 404

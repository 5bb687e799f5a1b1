from sqlmodel import select

from ecofinds.models.interaction import UserProduct
from ecofinds.repositories.interaction_repo import InteractionRepository


def _record(client, headers, product_id, interaction, **extra):
    return client.post(
        "/api/user-products",
        json={"productId": product_id, "interaction": interaction, **extra},
        headers=headers,
    )


def test_refavorite_keeps_one_row(client, register, make_product, session):
    seller, _ = register()
    buyer, buyer_id = register(email="buyer@example.com", display_name="Buyer")
    product = make_product(seller)

    first = _record(client, buyer, product["id"], "FAVORITE")
    assert first.status_code == 200
    second = _record(client, buyer, product["id"], "favorite", notes="still want it")
    assert second.json()["data"]["id"] == first.json()["data"]["id"]
    assert second.json()["data"]["notes"] == "still want it"

    rows = session.exec(
        select(UserProduct).where(
            UserProduct.user_id == buyer_id,
            UserProduct.interaction == "FAVORITE",
        )
    ).all()
    assert len(rows) == 1


def test_rerecord_keeps_notes_when_not_supplied(client, register, make_product):
    seller, _ = register()
    buyer, _ = register(email="buyer@example.com", display_name="Buyer")
    product = make_product(seller)

    _record(client, buyer, product["id"], "WISHLIST", notes="birthday")
    data = _record(client, buyer, product["id"], "WISHLIST").json()["data"]
    assert data["notes"] == "birthday"


def test_record_validation(client, register):
    buyer, _ = register(email="buyer@example.com", display_name="Buyer")
    assert _record(client, buyer, 999, "VIEWED").status_code == 404
    assert _record(client, buyer, 1, "SHARED").status_code == 400


def test_list_by_kind(client, register, make_product, add_image):
    seller, seller_id = register()
    buyer, _ = register(email="buyer@example.com", display_name="Buyer")
    a = make_product(seller, title="A")
    b = make_product(seller, title="B")
    add_image(b["id"], "https://cdn.test/b.png")

    _record(client, buyer, a["id"], "FAVORITE")
    _record(client, buyer, b["id"], "FAVORITE")
    _record(client, buyer, a["id"], "VIEWED")

    resp = client.get("/api/user-products/favorite", headers=buyer)
    assert resp.status_code == 200
    rows = resp.json()["data"]
    assert [r["product"]["title"] for r in rows] == ["B", "A"]
    assert rows[0]["product"]["primaryImage"] == "https://cdn.test/b.png"
    assert rows[0]["product"]["favoriteCount"] == 1
    assert rows[0]["product"]["seller"]["id"] == seller_id

    viewed = client.get("/api/user-products/VIEWED", headers=buyer).json()["data"]
    assert [r["productId"] for r in viewed] == [a["id"]]

    assert client.get("/api/user-products/unknown", headers=buyer).status_code == 400


def test_remove_interaction(client, register, make_product):
    seller, _ = register()
    buyer, _ = register(email="buyer@example.com", display_name="Buyer")
    product = make_product(seller)
    _record(client, buyer, product["id"], "FAVORITE")

    url = f"/api/user-products/{product['id']}/favorite"
    assert client.delete(url, headers=buyer).status_code == 200
    assert client.delete(url, headers=buyer).status_code == 404
    assert client.get("/api/user-products/FAVORITE", headers=buyer).json()["data"] == []


def test_record_race_updates_the_existing_row(client, register, make_product, session, monkeypatch):
    seller, _ = register()
    buyer, buyer_id = register(email="buyer@example.com", display_name="Buyer")
    product = make_product(seller)
    first = _record(client, buyer, product["id"], "WISHLIST", notes="birthday")

    real_get_item = InteractionRepository.get_item
    lookups = []

    def miss_once(self, *args, **kwargs):
        lookups.append(args)
        if len(lookups) == 1:
            return None
        return real_get_item(self, *args, **kwargs)

    monkeypatch.setattr(InteractionRepository, "get_item", miss_once)

    resp = _record(client, buyer, product["id"], "WISHLIST", notes="christmas")
    assert resp.status_code == 200
    assert resp.json()["data"]["id"] == first.json()["data"]["id"]
    assert resp.json()["data"]["notes"] == "christmas"

    rows = session.exec(
        select(UserProduct).where(
            UserProduct.user_id == buyer_id,
            UserProduct.interaction == "WISHLIST",
        )
    ).all()
    assert len(rows) == 1

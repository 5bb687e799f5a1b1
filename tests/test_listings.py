from ecofinds.repositories.listing_repo import ListingRepository


def _list(client, headers, product_id, **extra):
    return client.post(
        "/api/product-lists",
        json={"productId": product_id, **extra},
        headers=headers,
    )


def test_create_listing_defaults_to_active(client, register, make_product):
    headers, user_id = register()
    product = make_product(headers, title="Bike", price=120)

    resp = _list(client, headers, product["id"])
    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["status"] == "ACTIVE"
    assert data["name"] == "Bike"
    assert data["price"] == 120
    assert data["sellerId"] == user_id


def test_create_listing_rules(client, register, make_product):
    headers, _ = register()
    other_headers, _ = register(email="other@example.com", display_name="Other")
    product = make_product(headers)

    assert _list(client, headers, 999).status_code == 404
    assert _list(client, other_headers, product["id"]).status_code == 403

    assert _list(client, headers, product["id"], status="reserved").status_code == 201
    dup = _list(client, headers, product["id"])
    assert dup.status_code == 400
    assert dup.json()["message"] == "Product already has a list entry"


def test_search_filters_and_sort(client, register, make_product):
    headers, seller_id = register()
    other_headers, other_id = register(email="other@example.com", display_name="Other")

    cheap = make_product(headers, title="Cheap", price=5, category="BOOKS")
    mid = make_product(headers, title="Mid", price=50, category="BOOKS")
    pricey = make_product(other_headers, title="Pricey", price=500, category="ELECTRONICS")
    for h, p in ((headers, cheap), (headers, mid), (other_headers, pricey)):
        assert _list(client, h, p["id"]).status_code == 201

    data = client.get("/api/product-lists", params={"minPrice": 5, "maxPrice": 50}).json()["data"]
    assert {i["name"] for i in data["items"]} == {"Cheap", "Mid"}

    data = client.get(
        "/api/product-lists",
        params={"category": "books", "sortBy": "price", "sortOrder": "asc"},
    ).json()["data"]
    assert [i["name"] for i in data["items"]] == ["Cheap", "Mid"]

    data = client.get("/api/product-lists", params={"sellerId": other_id}).json()["data"]
    assert [i["product"]["id"] for i in data["items"]] == [pricey["id"]]
    assert data["items"][0]["product"]["seller"]["id"] == other_id

    data = client.get("/api/product-lists", params={"limit": 2}).json()["data"]
    assert [i["name"] for i in data["items"]] == ["Pricey", "Mid"]
    assert data["pagination"] == {
        "currentPage": 1,
        "totalPages": 2,
        "totalItems": 3,
        "hasMore": True,
    }


def test_search_rejects_bad_sort(client):
    assert client.get("/api/product-lists", params={"sortBy": "bogus"}).status_code == 400
    assert client.get("/api/product-lists", params={"sortOrder": "up"}).status_code == 400
    assert client.get("/api/product-lists", params={"status": "gone"}).status_code == 400


def test_search_item_carries_primary_image(client, register, make_product, add_image):
    headers, _ = register()
    product = make_product(headers)
    add_image(product["id"], "https://cdn.test/x.png")
    _list(client, headers, product["id"])

    item = client.get("/api/product-lists").json()["data"]["items"][0]
    assert item["product"]["primaryImage"] == "https://cdn.test/x.png"
    assert item["product"]["images"][0]["url"] == "https://cdn.test/x.png"


def test_update_status(client, register, make_product):
    headers, _ = register()
    other_headers, _ = register(email="other@example.com", display_name="Other")
    product = make_product(headers)
    listing = _list(client, headers, product["id"]).json()["data"]

    resp = client.patch(
        f"/api/product-lists/{listing['id']}/status",
        json={"status": "sold"},
        headers=headers,
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["status"] == "SOLD"

    resp = client.patch(
        f"/api/product-lists/{listing['id']}/status",
        json={"status": "ACTIVE"},
        headers=other_headers,
    )
    assert resp.status_code == 403

    resp = client.patch(
        "/api/product-lists/999/status",
        json={"status": "ACTIVE"},
        headers=headers,
    )
    assert resp.status_code == 404

    resp = client.patch(
        f"/api/product-lists/{listing['id']}/status",
        json={"status": "LOST"},
        headers=headers,
    )
    assert resp.status_code == 400


def test_delete_listing_keeps_product(client, register, make_product):
    headers, _ = register()
    product = make_product(headers)
    listing = _list(client, headers, product["id"]).json()["data"]

    assert client.delete(f"/api/product-lists/{listing['id']}", headers=headers).status_code == 200
    assert client.get("/api/product-lists").json()["data"]["items"] == []
    assert client.get(f"/api/products/{product['id']}").status_code == 200
    assert client.delete(f"/api/product-lists/{listing['id']}", headers=headers).status_code == 404


def test_create_listing_race_is_rejected(client, register, make_product, monkeypatch):
    headers, _ = register()
    product = make_product(headers)
    assert _list(client, headers, product["id"]).status_code == 201
    # The existing row is not seen by the pre-check; the unique index decides.
    monkeypatch.setattr(ListingRepository, "get_for_product", lambda self, session, product_id: None)

    resp = _list(client, headers, product["id"])
    assert resp.status_code == 400
    assert resp.json()["message"] == "Product already has a list entry"

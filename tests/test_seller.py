def _interact(client, headers, product_id, kind):
    resp = client.post(
        "/api/user-products",
        json={"productId": product_id, "interaction": kind},
        headers=headers,
    )
    assert resp.status_code == 200


def test_seller_listings_status_and_counters(client, register, make_product, add_image):
    seller, _ = register()
    buyer, _ = register(email="buyer@example.com", display_name="Buyer")
    listed = make_product(seller, title="Listed", category="BOOKS", quantity=2)
    make_product(seller, title="Unlisted", category="SPORTS", quantity=5)
    add_image(listed["id"], "https://cdn.test/l.png")
    client.post("/api/product-lists", json={"productId": listed["id"], "status": "SOLD"}, headers=seller)
    _interact(client, buyer, listed["id"], "VIEWED")
    _interact(client, buyer, listed["id"], "FAVORITE")

    data = client.get("/api/users/listings", headers=seller).json()["data"]
    by_title = {item["title"]: item for item in data["listings"]}
    assert by_title["Unlisted"]["status"] == "UNLISTED"
    assert by_title["Listed"]["status"] == "SOLD"
    assert by_title["Listed"]["primaryImage"] == "https://cdn.test/l.png"
    assert by_title["Listed"]["stats"] == {"views": 2, "favorites": 0}
    assert data["stats"] is None

    data = client.get(
        "/api/users/listings",
        params={"includeStats": "true"},
        headers=seller,
    ).json()["data"]
    by_title = {item["title"]: item for item in data["listings"]}
    assert by_title["Listed"]["stats"] == {"views": 2, "favorites": 1}
    assert data["stats"] == {
        "totalListings": 2,
        "totalQuantity": 7,
        "byStatus": {"SOLD": 1},
        "byCategory": {"BOOKS": 1, "SPORTS": 1},
    }


def test_seller_listings_filters(client, register, make_product):
    seller, _ = register()
    other, _ = register(email="other@example.com", display_name="Other")
    a = make_product(seller, title="A", price=30)
    make_product(seller, title="B", price=10, category="BOOKS")
    make_product(other, title="Not mine")
    client.post("/api/product-lists", json={"productId": a["id"]}, headers=seller)

    data = client.get("/api/users/listings", params={"status": "active"}, headers=seller).json()["data"]
    assert [i["title"] for i in data["listings"]] == ["A"]
    assert data["pagination"]["totalItems"] == 1

    data = client.get(
        "/api/users/listings",
        params={"sortBy": "price", "sortOrder": "asc"},
        headers=seller,
    ).json()["data"]
    assert [i["title"] for i in data["listings"]] == ["B", "A"]

    data = client.get("/api/users/listings", params={"category": "books"}, headers=seller).json()["data"]
    assert [i["title"] for i in data["listings"]] == ["B"]


def test_seller_stats(client, register, make_product):
    seller, _ = register()
    buyer, _ = register(email="buyer@example.com", display_name="Buyer")

    empty = client.get("/api/users/listings/stats", headers=seller).json()["data"]
    assert empty["overview"] == {
        "totalListings": 0,
        "totalQuantity": 0,
        "averagePrice": 0,
        "minPrice": 0,
        "maxPrice": 0,
    }
    assert empty["statusDistribution"] == {}
    assert empty["interactions"] == {}

    a = make_product(seller, price=10, quantity=1, category="BOOKS")
    b = make_product(seller, price=25, quantity=4, category="BOOKS")
    client.post("/api/product-lists", json={"productId": a["id"]}, headers=seller)
    _interact(client, buyer, a["id"], "VIEWED")
    _interact(client, buyer, b["id"], "VIEWED")
    _interact(client, buyer, b["id"], "FAVORITE")
    _interact(client, buyer, b["id"], "WISHLIST")

    data = client.get("/api/users/listings/stats", headers=seller).json()["data"]
    assert data["overview"] == {
        "totalListings": 2,
        "totalQuantity": 5,
        "averagePrice": 17.5,
        "minPrice": 10,
        "maxPrice": 25,
    }
    assert data["statusDistribution"] == {"ACTIVE": 1}
    assert data["categoryDistribution"] == {"BOOKS": 2}
    assert data["interactions"] == {"viewed": 2, "favorite": 1}


def test_listing_detail(client, register, make_product, add_image):
    seller, _ = register()
    other, _ = register(email="other@example.com", display_name="Other")
    product = make_product(seller, brand="Acme", hasManual=True)
    add_image(product["id"], "https://cdn.test/1.png", is_primary=True)

    viewers = []
    for i in range(6):
        headers, user_id = register(email=f"viewer{i}@example.com", display_name=f"Viewer {i}")
        _interact(client, headers, product["id"], "VIEWED")
        viewers.append(user_id)

    resp = client.get(f"/api/users/listings/{product['id']}", headers=seller)
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["status"] == "UNLISTED"
    assert data["images"] == [{"id": data["images"][0]["id"], "url": "https://cdn.test/1.png", "isPrimary": True}]
    assert data["specs"]["brand"] == "Acme"
    assert data["specs"]["hasManual"] is True
    assert data["stats"]["views"] == 6
    assert data["stats"]["favorites"] == 0
    recent = data["stats"]["recentViewers"]
    assert [v["userId"] for v in recent] == list(reversed(viewers))[:5]
    assert recent[0]["displayName"] == "Viewer 5"
    assert data["dates"]["listed"] is None

    assert client.get(f"/api/users/listings/{product['id']}", headers=other).status_code == 404


def test_seller_listings_rejects_unknown_status(client, register):
    seller, _ = register()
    resp = client.get("/api/users/listings", params={"status": "lost"}, headers=seller)
    assert resp.status_code == 400

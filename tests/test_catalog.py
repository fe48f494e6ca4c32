import uuid

from conftest import API, auth_headers


def create_product(client, admin, **fields):
    body = {"name": "Rose Serum", "price": 40.0, "stock_quantity": 10}
    body.update(fields)
    return client.post(f"{API}/products", json=body, headers=auth_headers(admin))


def test_create_product_generates_unique_slug(client, admin):
    first = create_product(client, admin, name="Rose Serum!")
    second = create_product(client, admin, name="rose  serum")

    assert first.status_code == 201, first.text
    assert first.json()["slug"] == "rose-serum"
    assert second.json()["slug"] == "rose-serum-2"


def test_effective_price(client, admin):
    discounted = create_product(client, admin, price=40.0, discount_price=30.0).json()
    ignored = create_product(client, admin, price=40.0, discount_price=45.0).json()

    assert discounted["effective_price"] == 30.0
    assert ignored["effective_price"] == 40.0


def test_create_product_requires_admin(client, customer):
    resp = create_product(client, customer)
    assert resp.status_code == 403


def test_create_product_unknown_category(client, admin):
    resp = create_product(client, admin, category_id=str(uuid.uuid4()))
    assert resp.status_code == 404


def test_soft_delete_and_restore(client, admin):
    product_id = create_product(client, admin).json()["id"]

    deleted = client.delete(f"{API}/products/{product_id}", headers=auth_headers(admin))
    assert deleted.status_code == 200
    assert deleted.json()["is_active"] is False
    assert client.get(f"{API}/products").json() == []
    assert client.get(f"{API}/products/{product_id}").status_code == 404
    hidden = client.get(f"{API}/products/{product_id}", headers=auth_headers(admin))
    assert hidden.status_code == 200

    restored = client.post(
        f"{API}/products/{product_id}/activate", headers=auth_headers(admin)
    )
    assert restored.json()["is_active"] is True
    assert [p["id"] for p in client.get(f"{API}/products").json()] == [product_id]


def test_list_filters(client, admin):
    category = client.post(
        f"{API}/categories", json={"name": "Skincare"}, headers=auth_headers(admin)
    ).json()
    in_cat = create_product(client, admin, name="Night Cream", category_id=category["id"]).json()
    create_product(client, admin, name="Lip Gloss", description="Shiny finish")

    by_category = client.get(f"{API}/products", params={"category_id": category["id"]}).json()
    by_search = client.get(f"{API}/products", params={"search": "shiny"}).json()

    assert [p["id"] for p in by_category] == [in_cat["id"]]
    assert [p["name"] for p in by_search] == ["Lip Gloss"]


def test_update_product(client, admin):
    product_id = create_product(client, admin).json()["id"]

    resp = client.patch(
        f"{API}/products/{product_id}",
        json={"price": 55.0, "slug": "Rose Serum XL"},
        headers=auth_headers(admin),
    )

    assert resp.status_code == 200
    assert resp.json()["price"] == 55.0
    assert resp.json()["slug"] == "rose-serum-xl"


def test_low_stock_listing(client, admin, make_product):
    low = make_product(name="Low", stock=2)
    make_product(name="Plenty", stock=50)

    resp = client.get(f"{API}/products/low-stock", headers=auth_headers(admin))

    assert resp.status_code == 200
    assert [p["id"] for p in resp.json()] == [str(low.id)]


def test_product_image_upload(client, admin, monkeypatch):
    uploaded: list[str] = []
    deleted: list[str] = []

    def fake_upload(path, file_bytes, content_type):
        uploaded.append(path)
        return f"https://cdn.example.com/{path}"

    monkeypatch.setattr("app.services.product_service.upload_to_storage", fake_upload)
    monkeypatch.setattr("app.services.product_service.delete_public_url", deleted.append)

    product_id = create_product(client, admin).json()["id"]
    files = {"file": ("face.png", b"\x89PNG fake", "image/png")}

    first = client.post(
        f"{API}/products/{product_id}/image", files=files, headers=auth_headers(admin)
    )
    second = client.post(
        f"{API}/products/{product_id}/image", files=files, headers=auth_headers(admin)
    )

    assert first.status_code == 200
    assert uploaded[0].startswith(f"products/{product_id}/")
    assert uploaded[0].endswith(".png")
    assert second.json()["image_url"] == f"https://cdn.example.com/{uploaded[1]}"
    assert deleted == [first.json()["image_url"]]


def test_product_image_rejects_type(client, admin):
    product_id = create_product(client, admin).json()["id"]
    files = {"file": ("notes.txt", b"hello", "text/plain")}

    resp = client.post(
        f"{API}/products/{product_id}/image", files=files, headers=auth_headers(admin)
    )

    assert resp.status_code == 400


def test_category_conflict_and_soft_delete(client, admin):
    headers = auth_headers(admin)
    created = client.post(f"{API}/categories", json={"name": "Makeup"}, headers=headers)
    duplicate = client.post(f"{API}/categories", json={"name": "Makeup"}, headers=headers)

    assert created.status_code == 201
    assert duplicate.status_code == 409

    category_id = created.json()["id"]
    client.delete(f"{API}/categories/{category_id}", headers=headers)

    assert client.get(f"{API}/categories").json() == []
    hidden = client.get(f"{API}/categories", params={"include_inactive": True}).json()
    assert [c["id"] for c in hidden] == [category_id]


def test_brand_crud(client, admin):
    headers = auth_headers(admin)
    brand = client.post(
        f"{API}/brands", json={"name": "Lumiere", "country": "France"}, headers=headers
    ).json()
    other = client.post(f"{API}/brands", json={"name": "Aurora"}, headers=headers).json()

    updated = client.patch(
        f"{API}/brands/{brand['id']}", json={"country": "Belgium"}, headers=headers
    )
    clash = client.patch(
        f"{API}/brands/{other['id']}", json={"name": "Lumiere"}, headers=headers
    )

    assert updated.json()["country"] == "Belgium"
    assert clash.status_code == 409
    assert client.get(f"{API}/brands/{uuid.uuid4()}").status_code == 404


def test_deactivated_product_hidden_from_customers(client, admin, customer):
    product_id = create_product(client, admin).json()["id"]
    client.delete(f"{API}/products/{product_id}", headers=auth_headers(admin))

    resp = client.get(f"{API}/products/{product_id}", headers=auth_headers(customer))

    assert resp.status_code == 404


def test_update_product_null_keeps_required_fields(client, admin):
    product_id = create_product(client, admin, price=40.0, discount_price=30.0).json()["id"]

    resp = client.patch(
        f"{API}/products/{product_id}",
        json={"price": None, "name": None, "stock_quantity": None, "is_active": None},
        headers=auth_headers(admin),
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["price"] == 40.0
    assert body["name"] == "Rose Serum"
    assert body["stock_quantity"] == 10
    assert body["is_active"] is True


def test_update_product_null_clears_optional_fields(client, admin):
    product_id = create_product(
        client, admin, price=40.0, discount_price=30.0, description="Hydrating"
    ).json()["id"]

    resp = client.patch(
        f"{API}/products/{product_id}",
        json={"discount_price": None, "description": None},
        headers=auth_headers(admin),
    )

    assert resp.status_code == 200
    assert resp.json()["discount_price"] is None
    assert resp.json()["description"] is None
    assert resp.json()["effective_price"] == 40.0


def test_update_category_and_brand_null_name(client, admin):
    headers = auth_headers(admin)
    category = client.post(
        f"{API}/categories",
        json={"name": "Haircare", "description": "Shampoo and more"},
        headers=headers,
    ).json()
    brand = client.post(
        f"{API}/brands", json={"name": "Verde", "country": "Italy"}, headers=headers
    ).json()

    cat_resp = client.patch(
        f"{API}/categories/{category['id']}",
        json={"name": None, "description": None},
        headers=headers,
    )
    brand_resp = client.patch(
        f"{API}/brands/{brand['id']}", json={"name": None, "country": None}, headers=headers
    )

    assert cat_resp.status_code == 200
    assert cat_resp.json()["name"] == "Haircare"
    assert cat_resp.json()["description"] is None
    assert brand_resp.status_code == 200
    assert brand_resp.json()["name"] == "Verde"
    assert brand_resp.json()["country"] is None


def test_featured_products(client, admin):
    featured = create_product(client, admin, name="Glow Drops", is_featured=True).json()
    create_product(client, admin, name="Plain Toner")
    hidden = create_product(client, admin, name="Old Drops", is_featured=True).json()
    client.delete(f"{API}/products/{hidden['id']}", headers=auth_headers(admin))

    resp = client.get(f"{API}/products/featured")

    assert resp.status_code == 200
    assert [p["id"] for p in resp.json()] == [featured["id"]]


def test_top_selling_products(client, session, make_product):
    best = make_product(name="Best")
    middle = make_product(name="Middle")
    retired = make_product(name="Retired", is_active=False)
    for product, sold in ((best, 40), (middle, 7), (retired, 90)):
        product.sold_count = sold
        session.add(product)
    session.commit()

    resp = client.get(f"{API}/products/top-selling", params={"limit": 5})

    assert resp.status_code == 200
    assert [p["name"] for p in resp.json()] == ["Best", "Middle"]

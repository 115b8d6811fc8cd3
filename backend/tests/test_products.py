"""
Product tests, including the locked id allocation under concurrent creation.
"""

from concurrent.futures import ThreadPoolExecutor

import pytest

from database import SessionLocal
from models.product import Product
from routes.products import create_product
from schemas.product import ProductCreate
from utils.errors import StoreError


PRODUCT = {"id": 99, "name": "Basic Tee", "price": 79000, "size": "M", "color": "white", "category": "clothing"}


def _create(client, headers, **overrides):
    return client.post("/products", json=dict(PRODUCT, **overrides), headers=headers)


class TestCreateProduct:

    def test_server_assigns_next_id(self, client, admin_headers):
        first = _create(client, admin_headers)
        assert first.status_code == 201
        body = first.json()
        assert body["id"] == 1  # hint of 99 ignored
        assert body["available"] is True
        assert body["stock"] == 0

        second = _create(client, admin_headers, id=1, name="Denim Jacket")
        assert second.json()["id"] == 2

    def test_next_id_follows_current_maximum(self, client, db_session, admin_headers):
        db_session.add(Product(id=41, name="Legacy", price=1, size="S", color="red", category="accessory"))
        db_session.commit()
        assert _create(client, admin_headers).json()["id"] == 42

    @pytest.mark.parametrize(
        "overrides",
        [
            {"category": "food"},
            {"price": -1},
            {"price": "cheap"},
            {"name": ""},
        ],
    )
    def test_invalid_input_is_rejected(self, client, db_session, admin_headers, overrides):
        resp = _create(client, admin_headers, **overrides)
        assert resp.status_code == 400
        assert resp.json()["status"] == "error"
        assert db_session.query(Product).count() == 0

    @pytest.mark.parametrize("missing", ["id", "name", "price", "size", "color", "category"])
    def test_missing_field_is_rejected(self, client, db_session, admin_headers, missing):
        payload = {k: v for k, v in PRODUCT.items() if k != missing}
        resp = client.post("/products", json=payload, headers=admin_headers)
        assert resp.status_code == 400
        assert db_session.query(Product).count() == 0

    def test_failed_insert_rolls_back_and_releases_lock(self, db_session):
        # Bypass schema validation so the CHECK constraint fails inside the flow
        bad = ProductCreate.model_construct(id=1, name="Broken", price=-10, size="M", color="red", category="clothing")
        with pytest.raises(StoreError):
            create_product(db_session, bad)
        assert db_session.query(Product).count() == 0

        good = create_product(db_session, ProductCreate(**PRODUCT))
        assert good.id == 1

    def test_concurrent_creation_never_duplicates_ids(self, db_session):
        def worker(n):
            session = SessionLocal()
            try:
                payload = ProductCreate(**dict(PRODUCT, name=f"Tee {n}", id=1))
                return create_product(session, payload).id
            finally:
                session.close()

        with ThreadPoolExecutor(max_workers=8) as pool:
            ids = list(pool.map(worker, range(40)))

        assert len(set(ids)) == 40
        assert sorted(ids) == list(range(1, 41))
        assert db_session.query(Product).count() == 40


class TestProductCrud:

    def test_list_and_filter_available(self, client, admin_headers):
        _create(client, admin_headers)
        second = _create(client, admin_headers, name="Belt", category="accessory").json()
        client.put(f"/products/{second['id']}", json=dict(PRODUCT, available=False), headers=admin_headers)

        all_items = client.get("/products", headers=admin_headers).json()
        assert all_items["count"] == 2

        available = client.get("/products", params={"available": "true"}, headers=admin_headers).json()
        assert available["count"] == 1
        assert available["data"][0]["id"] == 1

    def test_get_product(self, client, admin_headers):
        _create(client, admin_headers)
        resp = client.get("/products/1", headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json()["name"] == "Basic Tee"

    def test_get_missing_product(self, client, admin_headers):
        resp = client.get("/products/123", headers=admin_headers)
        assert resp.status_code == 404
        assert resp.json()["status"] == "error"

    def test_update_keeps_availability_when_omitted(self, client, admin_headers):
        _create(client, admin_headers)
        resp = client.put("/products/1", json=dict(PRODUCT, price=90000, color="black"), headers=admin_headers)
        assert resp.status_code == 200
        body = resp.json()
        assert body["price"] == 90000
        assert body["color"] == "black"
        assert body["available"] is True
        assert body["id"] == 1

    def test_update_validates_full_payload(self, client, admin_headers):
        _create(client, admin_headers)
        resp = client.put("/products/1", json={"name": "Only name"}, headers=admin_headers)
        assert resp.status_code == 400

    def test_update_missing_product(self, client, admin_headers):
        resp = client.put("/products/7", json=PRODUCT, headers=admin_headers)
        assert resp.status_code == 404

    def test_delete_product(self, client, admin_headers):
        _create(client, admin_headers)
        resp = client.delete("/products/1", headers=admin_headers)
        assert resp.status_code == 204
        assert client.get("/products/1", headers=admin_headers).status_code == 404
        assert client.delete("/products/1", headers=admin_headers).status_code == 404

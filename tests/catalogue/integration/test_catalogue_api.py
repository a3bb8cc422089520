"""Integration tests for the catalogue endpoints, customer and admin, via TestClient."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean import current_domain
from storefront.api import admin_router, register_error_handlers, storefront_router
from storefront.catalogue.variant import Variant


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(storefront_router)
    app.include_router(admin_router)
    register_error_handlers(app)
    return TestClient(app)


def _create_product(client, **overrides):
    """Helper: POST /api/admin/products and return the response body."""
    defaults = {
        "name": "Denim Jacket",
        "category": "jackets",
        "available_sizes": ["S", "M", "L"],
        "first_variant": {
            "color": "Indigo",
            "cost_price": 30.0,
            "selling_price": 80.0,
            "stock_quantity": 4,
        },
    }
    defaults.update(overrides)
    response = client.post("/api/admin/products", json=defaults)
    assert response.status_code == 201
    return response.json()


class TestAdminProductEndpoints:
    def test_create_product_with_first_variant(self, client, ledger):
        body = _create_product(client)
        assert body["success"] is True
        assert body["variant_id"] is not None

        variant = current_domain.repository_for(Variant).get(body["variant_id"])
        assert variant.product_id == body["product_id"]
        assert variant.sizes == ["S", "M", "L"]
        assert ledger.level(body["variant_id"]).stock_quantity == 4

    def test_create_product_without_variant(self, client):
        body = _create_product(client, first_variant=None)
        assert body["variant_id"] is None

    def test_create_product_requires_name(self, client):
        response = client.post("/api/admin/products", json={"category": "jackets"})
        assert response.status_code == 422

    def test_list_all_products_includes_inactive(self, client):
        _create_product(client, name="Hidden", is_active=False)

        response = client.get("/api/admin/products")
        assert response.status_code == 200
        [product] = response.json()
        assert product["name"] == "Hidden"
        assert product["variant_count"] == 1
        assert product["total_stock"] == 4

    def test_update_product(self, client):
        body = _create_product(client)

        response = client.patch(f"/api/admin/products/{body['product_id']}", json={"is_active": False})
        assert response.status_code == 200
        assert response.json() == {"success": True}

        assert client.get("/api/products").json() == []

    def test_update_unknown_product(self, client):
        response = client.patch("/api/admin/products/missing", json={"name": "X"})
        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Product not found"}

    def test_delete_product_removes_variants(self, client):
        body = _create_product(client)

        response = client.delete(f"/api/admin/products/{body['product_id']}")
        assert response.status_code == 200

        stock = client.get(f"/api/variants/{body['variant_id']}/stock")
        assert stock.status_code == 404
        assert client.get("/api/admin/products").json() == []


class TestAdminVariantEndpoints:
    def test_add_variant(self, client):
        product = _create_product(client, first_variant=None)

        response = client.post(
            "/api/admin/variants",
            json={
                "product_id": product["product_id"],
                "color": "Black",
                "available_sizes": ["M"],
                "cost_price": 25.0,
                "selling_price": 70.0,
            },
        )
        assert response.status_code == 201
        variant_id = response.json()["variant_id"]

        stock = client.get(f"/api/variants/{variant_id}/stock").json()
        assert stock == {"id": variant_id, "color": "Black", "stock_quantity": 10}

    def test_add_variant_to_unknown_product(self, client):
        response = client.post(
            "/api/admin/variants",
            json={"product_id": "missing", "color": "Black", "selling_price": 70.0},
        )
        assert response.status_code == 404

    def test_admin_variants_show_cost_price(self, client):
        product = _create_product(client)

        response = client.get(f"/api/admin/products/{product['product_id']}/variants")
        [variant] = response.json()
        assert variant["cost_price"] == 30.0
        assert variant["stock_quantity"] == 4

    def test_set_stock(self, client):
        product = _create_product(client)

        response = client.patch(f"/api/admin/variants/{product['variant_id']}/stock", json={"stock_quantity": 0})
        assert response.status_code == 200

        stock = client.get(f"/api/variants/{product['variant_id']}/stock").json()
        assert stock["stock_quantity"] == 0

    def test_set_negative_stock_rejected(self, client):
        product = _create_product(client)
        response = client.patch(f"/api/admin/variants/{product['variant_id']}/stock", json={"stock_quantity": -1})
        assert response.status_code == 422

    def test_delete_variant(self, client):
        product = _create_product(client)

        response = client.delete(f"/api/admin/variants/{product['variant_id']}")
        assert response.status_code == 200
        assert client.get(f"/api/variants/{product['variant_id']}/stock").status_code == 404


class TestCustomerCatalogueEndpoints:
    def test_list_products_in_stock(self, client):
        _create_product(client, name="Denim Jacket")
        _create_product(
            client,
            name="Sold Out Coat",
            first_variant={"color": "Grey", "selling_price": 90.0, "stock_quantity": 0},
        )

        response = client.get("/api/products")
        assert response.status_code == 200
        assert [p["name"] for p in response.json()] == ["Denim Jacket"]

    def test_filter_by_category(self, client):
        _create_product(client, name="Denim Jacket", category="jackets")
        _create_product(client, name="Oxford Shirt", category="shirts")

        shirts = client.get("/api/products", params={"category": "shirts"}).json()
        assert [p["name"] for p in shirts] == ["Oxford Shirt"]
        assert len(client.get("/api/products", params={"category": "all"}).json()) == 2

    def test_customer_variants_hide_cost_price(self, client):
        product = _create_product(client)

        response = client.get(f"/api/products/{product['product_id']}/variants")
        [variant] = response.json()
        assert "cost_price" not in variant
        assert variant["selling_price"] == 80.0
        assert variant["available_sizes"] == ["S", "M", "L"]

    def test_stock_of_unknown_variant(self, client):
        response = client.get("/api/variants/missing/stock")
        assert response.status_code == 404
        assert response.json()["success"] is False

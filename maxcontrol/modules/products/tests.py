"""
Tests para el módulo de Productos
"""

import pytest
from decimal import Decimal
from uuid import uuid4


@pytest.fixture
def category(client, admin_headers):
    return client.post("/api/categories", json={"name": "Vidros"}, headers=admin_headers).json()


@pytest.fixture
def product_payload(category):
    return {
        "name": "Vidro temperado 8mm",
        "description": "Incolor",
        "pricing_model": "m2",
        "base_price": "180.5",
        "unit": "m²",
        "supplier_cost": "95.00",
        "category_id": category["id"]
    }


class TestProductEndpoints:

    def test_create_product(self, client, admin_headers, product_payload):
        response = client.post("/api/products", json=product_payload, headers=admin_headers)
        assert response.status_code == 201

        data = response.json()
        assert data["pricing_model"] == "m2"
        assert Decimal(data["base_price"]) == Decimal("180.50")

    def test_unknown_category(self, client, admin_headers, product_payload):
        product_payload["category_id"] = str(uuid4())
        response = client.post("/api/products", json=product_payload, headers=admin_headers)
        assert response.status_code == 404

    def test_invalid_pricing_model(self, client, admin_headers, product_payload):
        product_payload["pricing_model"] = "kg"
        response = client.post("/api/products", json=product_payload, headers=admin_headers)
        assert response.status_code == 400

    def test_filter_by_category(self, client, admin_headers, viewer_headers, product_payload):
        client.post("/api/products", json=product_payload, headers=admin_headers)
        client.post("/api/products", json={"name": "Silicone", "base_price": "25.00"}, headers=admin_headers)

        all_products = client.get("/api/products", headers=viewer_headers).json()
        assert [p["name"] for p in all_products] == ["Silicone", "Vidro temperado 8mm"]

        filtered = client.get(
            f"/api/products?category_id={product_payload['category_id']}", headers=viewer_headers
        ).json()
        assert [p["name"] for p in filtered] == ["Vidro temperado 8mm"]

    def test_update_and_delete(self, client, admin_headers, product_payload):
        product = client.post("/api/products", json=product_payload, headers=admin_headers).json()

        product_payload["base_price"] = "200.00"
        response = client.put(f"/api/products/{product['id']}", json=product_payload, headers=admin_headers)
        assert Decimal(response.json()["base_price"]) == Decimal("200.00")

        assert client.delete(f"/api/products/{product['id']}", headers=admin_headers).status_code == 200
        assert client.get(f"/api/products/{product['id']}", headers=admin_headers).status_code == 404

    def test_sales_cannot_write(self, client, sales_headers, product_payload):
        response = client.post("/api/products", json=product_payload, headers=sales_headers)
        assert response.status_code == 403

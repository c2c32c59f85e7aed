"""
Tests para el módulo de Categorías
"""

from decimal import Decimal

from maxcontrol.modules.products.models import Product


class TestCategoryEndpoints:

    def test_create_and_list(self, client, admin_headers, viewer_headers):
        response = client.post("/api/categories", json={"name": "  Vidros  "}, headers=admin_headers)
        assert response.status_code == 201
        assert response.json()["name"] == "Vidros"

        names = [c["name"] for c in client.get("/api/categories", headers=viewer_headers).json()]
        assert names == ["Vidros"]

    def test_missing_name(self, client, admin_headers):
        assert client.post("/api/categories", json={}, headers=admin_headers).status_code == 400
        assert client.post("/api/categories", json={"name": "   "}, headers=admin_headers).status_code == 400

    def test_duplicate_name(self, client, admin_headers):
        client.post("/api/categories", json={"name": "Espelhos"}, headers=admin_headers)
        response = client.post("/api/categories", json={"name": "Espelhos"}, headers=admin_headers)
        assert response.status_code == 409

    def test_update(self, client, admin_headers):
        category = client.post("/api/categories", json={"name": "Box"}, headers=admin_headers).json()
        response = client.put(f"/api/categories/{category['id']}", json={"name": "Box de banheiro"}, headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["name"] == "Box de banheiro"

    def test_delete_unlinks_products(self, client, admin_headers, db_session):
        category = client.post("/api/categories", json={"name": "Ferragens"}, headers=admin_headers).json()
        product = client.post("/api/products", json={
            "name": "Dobradiça",
            "base_price": "12.00",
            "category_id": category["id"]
        }, headers=admin_headers).json()

        assert client.delete(f"/api/categories/{category['id']}", headers=admin_headers).status_code == 200

        db_session.expire_all()
        stored = db_session.query(Product).one()
        assert str(stored.id) == product["id"]
        assert stored.category_id is None

    def test_sales_cannot_create(self, client, sales_headers):
        assert client.post("/api/categories", json={"name": "X"}, headers=sales_headers).status_code == 403

"""
Tests para el módulo de Proveedores

Cubren CRUD de proveedores, deudas y créditos, saldo y eliminación en cascada.
"""

import pytest
from decimal import Decimal
from uuid import uuid4

from maxcontrol.modules.suppliers.models import Supplier, SupplierDebt, SupplierCredit


# ===== FIXTURES =====

@pytest.fixture
def supplier(client, sales_headers):
    response = client.post("/api/suppliers", json={
        "name": "Vidros Paulista Ltda",
        "cnpj": "11222333000181",
        "phone": "(11) 3333-2222",
        "notes": "Entrega às terças"
    }, headers=sales_headers)
    assert response.status_code == 201
    return response.json()


def _add_debt(client, headers, supplier_id, amount, day="2024-05-10"):
    return client.post(f"/api/suppliers/{supplier_id}/debts", json={
        "description": "Chapas de vidro",
        "total_amount": amount,
        "date_added": day
    }, headers=headers)


def _add_credit(client, headers, supplier_id, amount, day="2024-05-20"):
    return client.post(f"/api/suppliers/{supplier_id}/credits", json={
        "amount": amount,
        "date": day,
        "description": "Pix"
    }, headers=headers)


# ===== TESTS DE ENDPOINTS =====

class TestSupplierEndpoints:
    """Tests de la API /api/suppliers"""

    def test_create_formats_cnpj(self, supplier):
        assert supplier["cnpj"] == "11.222.333/0001-81"

    def test_invalid_cnpj(self, client, sales_headers):
        response = client.post("/api/suppliers", json={
            "name": "Fornecedor", "cnpj": "11222333000180"
        }, headers=sales_headers)
        assert response.status_code == 400

    def test_update_supplier(self, client, sales_headers, supplier):
        response = client.put(f"/api/suppliers/{supplier['id']}", json={
            "name": "Vidros Paulista S.A.",
            "phone": "(11) 3333-0000"
        }, headers=sales_headers)
        assert response.status_code == 200
        assert response.json()["name"] == "Vidros Paulista S.A."
        assert response.json()["cnpj"] is None

    def test_debts_and_credits(self, client, sales_headers, supplier):
        supplier_id = supplier["id"]
        assert _add_debt(client, sales_headers, supplier_id, "1000.00").status_code == 201
        assert _add_debt(client, sales_headers, supplier_id, "250.50", day="2024-06-01").status_code == 201
        assert _add_credit(client, sales_headers, supplier_id, "400.00").status_code == 201

        debts = client.get(f"/api/suppliers/{supplier_id}/debts", headers=sales_headers).json()
        assert [d["date_added"] for d in debts] == ["2024-06-01", "2024-05-10"]

        credits = client.get(f"/api/suppliers/{supplier_id}/credits", headers=sales_headers).json()
        assert len(credits) == 1

        balance = client.get(f"/api/suppliers/{supplier_id}/balance", headers=sales_headers).json()
        assert Decimal(balance["total_debts"]) == Decimal("1250.50")
        assert Decimal(balance["total_credits"]) == Decimal("400.00")
        assert Decimal(balance["balance"]) == Decimal("850.50")

    def test_all_debts_and_credits(self, client, sales_headers, supplier):
        other = client.post("/api/suppliers", json={"name": "Alumínios Sul"}, headers=sales_headers).json()
        _add_debt(client, sales_headers, supplier["id"], "10.00")
        _add_debt(client, sales_headers, other["id"], "20.00")
        _add_credit(client, sales_headers, other["id"], "5.00")

        assert len(client.get("/api/suppliers/debts", headers=sales_headers).json()) == 2
        assert len(client.get("/api/suppliers/credits", headers=sales_headers).json()) == 1

    def test_debt_for_unknown_supplier(self, client, sales_headers):
        response = _add_debt(client, sales_headers, uuid4(), "10.00")
        assert response.status_code == 404

    def test_delete_transaction(self, client, sales_headers, admin_headers, supplier):
        debt = _add_debt(client, sales_headers, supplier["id"], "10.00").json()
        credit = _add_credit(client, sales_headers, supplier["id"], "5.00").json()

        assert client.delete(f"/api/suppliers/transactions/debt/{debt['id']}", headers=admin_headers).status_code == 200
        assert client.delete(f"/api/suppliers/transactions/credit/{credit['id']}", headers=admin_headers).status_code == 200
        assert client.delete(f"/api/suppliers/transactions/debt/{debt['id']}", headers=admin_headers).status_code == 404

    def test_delete_transaction_wrong_type(self, client, sales_headers, admin_headers, supplier):
        debt = _add_debt(client, sales_headers, supplier["id"], "10.00").json()

        # Una deuda no se encuentra como crédito
        response = client.delete(f"/api/suppliers/transactions/credit/{debt['id']}", headers=admin_headers)
        assert response.status_code == 404

        response = client.delete(f"/api/suppliers/transactions/payment/{debt['id']}", headers=admin_headers)
        assert response.status_code == 400

    def test_delete_transaction_requires_admin(self, client, sales_headers, supplier):
        debt = _add_debt(client, sales_headers, supplier["id"], "10.00").json()
        response = client.delete(f"/api/suppliers/transactions/debt/{debt['id']}", headers=sales_headers)
        assert response.status_code == 403

    def test_delete_supplier_cascades(self, client, sales_headers, admin_headers, supplier, db_session):
        _add_debt(client, sales_headers, supplier["id"], "10.00")
        _add_credit(client, sales_headers, supplier["id"], "5.00")

        response = client.delete(f"/api/suppliers/{supplier['id']}", headers=admin_headers)
        assert response.status_code == 200

        db_session.expire_all()
        assert db_session.query(Supplier).count() == 0
        assert db_session.query(SupplierDebt).count() == 0
        assert db_session.query(SupplierCredit).count() == 0

    def test_list_ordered_by_name(self, client, viewer_headers, sales_headers):
        for name in ["Zinco Ltda", "Acrílicos"]:
            client.post("/api/suppliers", json={"name": name}, headers=sales_headers)

        response = client.get("/api/suppliers", headers=viewer_headers)
        assert [s["name"] for s in response.json()] == ["Acrílicos", "Zinco Ltda"]

"""
Tests para el módulo de Clientes

Cubren:
- Validación de CPF / CNPJ y formato del documento
- Sincronización de anticipos al actualizar
- Crédito disponible (anticipos menos anticipos aplicados en cotizaciones)
- Eliminación: cotizaciones desvinculadas, anticipos eliminados
"""

import pytest
from decimal import Decimal
from uuid import uuid4

from pydantic import ValidationError

from maxcontrol.modules.customers.models import Customer, DownPayment, DocumentType
from maxcontrol.modules.customers.schemas import CustomerCreate
from maxcontrol.modules.quotes.models import Quote


# ===== FIXTURES =====

@pytest.fixture
def customer_payload():
    return {
        "name": "João da Silva",
        "document_type": "CPF",
        "document_number": "52998224725",
        "phone": "(11) 95555-4444",
        "email": "joao@email.com",
        "city": "São Paulo"
    }


@pytest.fixture
def created_customer(client, sales_headers, customer_payload):
    response = client.post("/api/customers", json=customer_payload, headers=sales_headers)
    assert response.status_code == 201
    return response.json()


def _quote_for(db_session, customer_id, applied: str, number: str):
    db_session.add(Quote(
        quote_number=number,
        customer_id=customer_id,
        client_name="João da Silva",
        items=[],
        company_info_snapshot={},
        down_payment_applied=Decimal(applied),
        salesperson_username="vendedor"
    ))
    db_session.commit()


# ===== TESTS DE ESQUEMAS =====

class TestCustomerDocument:
    """Tests para validación del documento del cliente"""

    def test_cpf_is_formatted(self, customer_payload):
        customer = CustomerCreate(**customer_payload)
        assert customer.document_number == "529.982.247-25"

    def test_cnpj_is_formatted(self, customer_payload):
        customer_payload.update(document_type="CNPJ", document_number="11222333000181")
        assert CustomerCreate(**customer_payload).document_number == "11.222.333/0001-81"

    def test_invalid_cpf(self, customer_payload):
        customer_payload["document_number"] = "12345678900"
        with pytest.raises(ValidationError):
            CustomerCreate(**customer_payload)

    def test_no_document(self, customer_payload):
        customer_payload.update(document_type="N/A", document_number="qualquer")
        customer = CustomerCreate(**customer_payload)
        assert customer.document_type == DocumentType.NONE


# ===== TESTS DE ENDPOINTS =====

class TestCustomerEndpoints:
    """Tests de la API /api/customers"""

    def test_create_customer(self, created_customer):
        assert created_customer["document_number"] == "529.982.247-25"
        assert created_customer["down_payments"] == []
        assert Decimal(created_customer["available_credit"]) == Decimal("0")

    def test_invalid_document_is_bad_request(self, client, sales_headers, customer_payload):
        customer_payload["document_number"] = "111.111.111-11"
        response = client.post("/api/customers", json=customer_payload, headers=sales_headers)
        assert response.status_code == 400

    def test_missing_phone_is_bad_request(self, client, sales_headers, customer_payload):
        customer_payload.pop("phone")
        response = client.post("/api/customers", json=customer_payload, headers=sales_headers)
        assert response.status_code == 400

    def test_list_ordered_by_name(self, client, sales_headers, customer_payload):
        for name in ["Zeca", "Ana", "Marcos"]:
            client.post("/api/customers", json={"name": name, "phone": "1"}, headers=sales_headers)

        response = client.get("/api/customers", headers=sales_headers)
        assert [c["name"] for c in response.json()] == ["Ana", "Marcos", "Zeca"]

    def test_update_replaces_down_payments(self, client, sales_headers, created_customer, customer_payload):
        customer_id = created_customer["id"]
        customer_payload["down_payments"] = [
            {"amount": "200.00", "date": "2024-03-01", "description": "Sinal"},
            {"amount": "100.00", "date": "2024-04-01"}
        ]
        response = client.put(f"/api/customers/{customer_id}", json=customer_payload, headers=sales_headers)
        assert response.status_code == 200
        assert len(response.json()["down_payments"]) == 2

        customer_payload["down_payments"] = [{"amount": "50.00", "date": "2024-05-01"}]
        response = client.put(f"/api/customers/{customer_id}", json=customer_payload, headers=sales_headers)

        data = response.json()
        assert [Decimal(dp["amount"]) for dp in data["down_payments"]] == [Decimal("50.00")]
        assert Decimal(data["available_credit"]) == Decimal("50.00")

    def test_update_without_down_payments_keeps_them(
        self, client, sales_headers, created_customer, customer_payload
    ):
        customer_id = created_customer["id"]
        customer_payload["down_payments"] = [{"amount": "75.00", "date": "2024-03-01"}]
        client.put(f"/api/customers/{customer_id}", json=customer_payload, headers=sales_headers)

        customer_payload.pop("down_payments")
        customer_payload["name"] = "João Silva"
        response = client.put(f"/api/customers/{customer_id}", json=customer_payload, headers=sales_headers)

        data = response.json()
        assert data["name"] == "João Silva"
        assert len(data["down_payments"]) == 1

    def test_available_credit_discounts_applied_amounts(
        self, client, sales_headers, created_customer, customer_payload, db_session
    ):
        customer_id = created_customer["id"]
        customer_payload["down_payments"] = [{"amount": "500.00", "date": "2024-03-01"}]
        client.put(f"/api/customers/{customer_id}", json=customer_payload, headers=sales_headers)

        customer = db_session.query(Customer).one()
        _quote_for(db_session, customer.id, "120.00", "ORC-240301-001")
        _quote_for(db_session, customer.id, "80.00", "ORC-240301-002")

        response = client.get(f"/api/customers/{customer_id}", headers=sales_headers)
        assert Decimal(response.json()["available_credit"]) == Decimal("300.00")

    def test_delete_unlinks_quotes_and_removes_down_payments(
        self, client, sales_headers, created_customer, customer_payload, db_session
    ):
        customer_id = created_customer["id"]
        customer_payload["down_payments"] = [{"amount": "500.00", "date": "2024-03-01"}]
        client.put(f"/api/customers/{customer_id}", json=customer_payload, headers=sales_headers)

        customer = db_session.query(Customer).one()
        _quote_for(db_session, customer.id, "0", "ORC-240301-001")

        response = client.delete(f"/api/customers/{customer_id}", headers=sales_headers)
        assert response.status_code == 200

        db_session.expire_all()
        assert db_session.query(Customer).count() == 0
        assert db_session.query(DownPayment).count() == 0
        quote = db_session.query(Quote).one()
        assert quote.customer_id is None

    def test_get_unknown_customer(self, client, sales_headers):
        response = client.get(f"/api/customers/{uuid4()}", headers=sales_headers)
        assert response.status_code == 404

    def test_viewer_cannot_write(self, client, viewer_headers, customer_payload):
        response = client.post("/api/customers", json=customer_payload, headers=viewer_headers)
        assert response.status_code == 403

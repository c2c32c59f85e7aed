"""
Tests para el módulo de Cotizaciones

Cubren:
- Numeración ORC-YYMMDD-NNN secuencial por día
- Cálculo de líneas (unidad y m2), descuentos y total con tarjeta
- Copia congelada de la información de la empresa
- Vendedor tomado del usuario autenticado
- Filtros y permisos
"""

import pytest
from datetime import date
from decimal import Decimal
from uuid import uuid4

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError

from maxcontrol.modules.company.models import CompanyInfo
from maxcontrol.modules.products.models import PricingModel
from maxcontrol.modules.quotes.calculator import QuoteCalculator
from maxcontrol.modules.quotes.models import Quote, QuoteSequence, DiscountType, QuoteStatus
from maxcontrol.modules.quotes.numbering import QuoteNumberGenerator
from maxcontrol.modules.quotes.schemas import QuoteCreate, QuoteItem
from maxcontrol.modules.quotes.service import QuoteService, is_number_conflict


# ===== FIXTURES =====

@pytest.fixture
def quote_payload():
    return {
        "client_name": "Maria Souza",
        "client_contact": "(11) 91234-5678",
        "items": [
            {
                "product_name": "Espelho bisotado",
                "pricing_model": "unidade",
                "quantity": "2",
                "unit_price": "150.00"
            },
            {
                "product_name": "Vidro temperado 8mm",
                "pricing_model": "m2",
                "width": "1.5",
                "height": "2",
                "item_count_for_area_calc": 2,
                "unit_price": "100.00"
            }
        ],
        "discount_type": "fixed",
        "discount_value": "50.00",
        "status": "draft"
    }


def _insert_quote(db_session, number: str):
    db_session.add(Quote(
        quote_number=number,
        client_name="Importado",
        items=[],
        company_info_snapshot={},
        salesperson_username="legado"
    ))
    db_session.commit()


# ===== TESTS DE NUMERACIÓN =====

class TestQuoteNumbering:
    """Tests para QuoteNumberGenerator"""

    def test_prefix_uses_short_date(self):
        assert QuoteNumberGenerator.quote_number_prefix(date(2024, 6, 15)) == "ORC-240615"

    def test_format_pads_to_three_digits(self):
        assert QuoteNumberGenerator.format_quote_number("ORC-240615", 7) == "ORC-240615-007"
        assert QuoteNumberGenerator.format_quote_number("ORC-240615", 1234) == "ORC-240615-1234"

    def test_parse_sequence(self):
        assert QuoteNumberGenerator.parse_sequence("ORC-240615-042") == 42
        assert QuoteNumberGenerator.parse_sequence("ORC-240615-abc") == 0

    def test_first_and_second_number_of_the_day(self, db_session):
        """Primera cotización del día → 001, la siguiente → 002"""
        generator = QuoteNumberGenerator(db_session)
        day = date(2024, 6, 15)

        assert generator.next_number(day) == "ORC-240615-001"
        db_session.commit()
        assert generator.next_number(day) == "ORC-240615-002"
        db_session.commit()

    def test_sequence_restarts_each_day(self, db_session):
        generator = QuoteNumberGenerator(db_session)
        assert generator.next_number(date(2024, 6, 15)) == "ORC-240615-001"
        assert generator.next_number(date(2024, 6, 16)) == "ORC-240616-001"

    def test_continues_after_existing_numbers(self, db_session):
        """Sin contador, la secuencia continúa desde el mayor número existente"""
        _insert_quote(db_session, "ORC-240615-001")
        _insert_quote(db_session, "ORC-240615-009")
        _insert_quote(db_session, "ORC-240614-050")

        generator = QuoteNumberGenerator(db_session)
        assert generator.next_number(date(2024, 6, 15)) == "ORC-240615-010"

    def test_rollback_releases_number(self, db_session):
        generator = QuoteNumberGenerator(db_session)
        generator.next_number(date(2024, 6, 15))
        db_session.rollback()

        assert generator.next_number(date(2024, 6, 15)) == "ORC-240615-001"


# ===== TESTS DE CÁLCULO =====

class TestQuoteCalculator:
    """Tests para QuoteCalculator"""

    def test_unit_line(self):
        calculator = QuoteCalculator(card_surcharge_percentage=5)
        item = calculator.calculate_line(QuoteItem(
            product_name="Box", quantity=Decimal("3"), unit_price=Decimal("19.99")
        ))
        assert item.total_price == Decimal("59.97")

    def test_area_line_uses_width_height_and_pieces(self):
        calculator = QuoteCalculator(card_surcharge_percentage=5)
        item = calculator.calculate_line(QuoteItem(
            product_name="Vidro",
            pricing_model=PricingModel.PER_SQUARE_METER,
            width=Decimal("1.5"),
            height=Decimal("2"),
            item_count_for_area_calc=2,
            unit_price=Decimal("100.00")
        ))
        assert item.quantity == Decimal("6.000")
        assert item.total_price == Decimal("600.00")

    def test_area_item_without_measures_requires_quantity(self):
        with pytest.raises(ValueError):
            QuoteItem(product_name="Vidro", pricing_model=PricingModel.PER_SQUARE_METER, unit_price=Decimal("10"))

    def test_percentage_discount_and_card_surcharge(self):
        calculator = QuoteCalculator(card_surcharge_percentage=5)
        items = [calculator.calculate_line(QuoteItem(
            product_name="Porta", quantity=Decimal("1"), unit_price=Decimal("1000.00")
        ))]
        totals = calculator.calculate_totals(items, DiscountType.PERCENTAGE, Decimal("10"))

        assert totals.subtotal == Decimal("1000.00")
        assert totals.discount_amount_calculated == Decimal("100.00")
        assert totals.total_cash == Decimal("900.00")
        assert totals.total_card == Decimal("945.00")

    def test_fixed_discount_is_capped_at_subtotal(self):
        calculator = QuoteCalculator(card_surcharge_percentage=0)
        items = [calculator.calculate_line(QuoteItem(
            product_name="Puxador", quantity=Decimal("1"), unit_price=Decimal("30.00")
        ))]
        totals = calculator.calculate_totals(items, DiscountType.FIXED, Decimal("50.00"))

        assert totals.discount_amount_calculated == Decimal("30.00")
        assert totals.total_cash == Decimal("0.00")

    def test_rounds_half_up(self):
        calculator = QuoteCalculator(card_surcharge_percentage=5)
        items = [calculator.calculate_line(QuoteItem(
            product_name="Peça", quantity=Decimal("1"), unit_price=Decimal("0.10")
        ))]
        totals = calculator.calculate_totals(items, DiscountType.NONE, Decimal("0"))
        # 0.10 * 1.05 = 0.105 → 0.11
        assert totals.total_card == Decimal("0.11")


# ===== TESTS DE SERVICIOS =====

class TestQuoteService:
    """Tests para QuoteService"""

    def test_create_requires_company_info(self, db_session, sales_context, quote_payload):
        with pytest.raises(HTTPException) as exc:
            QuoteService(db_session).create_quote(QuoteCreate(**quote_payload), sales_context)
        assert exc.value.status_code == 500
        assert db_session.query(Quote).count() == 0

    def test_create_with_given_date(self, db_session, sales_context, company_info, quote_payload):
        service = QuoteService(db_session)
        first = service.create_quote(QuoteCreate(**quote_payload), sales_context, today=date(2024, 6, 15))
        second = service.create_quote(QuoteCreate(**quote_payload), sales_context, today=date(2024, 6, 15))

        assert first.quote_number == "ORC-240615-001"
        assert second.quote_number == "ORC-240615-002"
        sequence = db_session.query(QuoteSequence).filter(QuoteSequence.date_prefix == "ORC-240615").one()
        assert sequence.current_number == 2

    def test_retries_when_number_is_taken(self, db_session, sales_context, company_info, quote_payload):
        """Si el número ya fue usado por otra transacción se asigna el siguiente"""
        service = QuoteService(db_session)
        day = date(2024, 6, 15)
        service.create_quote(QuoteCreate(**quote_payload), sales_context, today=day)

        # Otro proceso guardó 002 sin pasar por el contador
        _insert_quote(db_session, "ORC-240615-002")

        quote = service.create_quote(QuoteCreate(**quote_payload), sales_context, today=day)
        assert quote.quote_number == "ORC-240615-003"

    def test_other_integrity_errors_are_not_retried(self, db_session, sales_context, company_info, quote_payload, monkeypatch):
        """Solo los choques de número se reintentan"""
        calls = []

        def failing_commit():
            calls.append(1)
            raise IntegrityError("INSERT INTO quotes", {}, Exception("NOT NULL constraint failed: quotes.client_name"))

        monkeypatch.setattr(db_session, "commit", failing_commit)

        with pytest.raises(HTTPException) as exc:
            QuoteService(db_session).create_quote(QuoteCreate(**quote_payload), sales_context)

        assert exc.value.status_code == 500
        assert exc.value.detail == "Error creando cotización"
        assert len(calls) == 1

    def test_number_conflict_is_detected_by_constraint(self):
        taken = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: quotes.quote_number"))
        other = IntegrityError("INSERT", {}, Exception("FOREIGN KEY constraint failed"))
        assert is_number_conflict(taken)
        assert not is_number_conflict(other)

    def test_unknown_customer(self, db_session, sales_context, company_info, quote_payload):
        quote_payload["customer_id"] = str(uuid4())
        with pytest.raises(HTTPException) as exc:
            QuoteService(db_session).create_quote(QuoteCreate(**quote_payload), sales_context)
        assert exc.value.status_code == 404


# ===== TESTS DE ENDPOINTS =====

class TestQuoteEndpoints:
    """Tests de la API /api/quotes"""

    def test_create_quote(self, client, sales_headers, company_info, quote_payload):
        response = client.post("/api/quotes", json=quote_payload, headers=sales_headers)
        assert response.status_code == 201

        data = response.json()
        today = date.today()
        assert data["quote_number"] == f"ORC-{today:%y%m%d}-001"
        assert Decimal(data["subtotal"]) == Decimal("900.00")
        assert Decimal(data["discount_amount_calculated"]) == Decimal("50.00")
        assert Decimal(data["total_cash"]) == Decimal("850.00")
        assert Decimal(data["total_card"]) == Decimal("892.50")
        assert Decimal(data["items"][1]["total_price"]) == Decimal("600.00")
        assert data["salesperson_username"] == "vendedor"
        assert data["salesperson_full_name"] == "Carla Vendedora"
        assert data["company_info_snapshot"]["name"] == "Vidraçaria Max"

    def test_client_sent_totals_are_ignored(self, client, sales_headers, company_info, quote_payload):
        quote_payload["items"][0]["total_price"] = "1.00"
        response = client.post("/api/quotes", json=quote_payload, headers=sales_headers)
        assert Decimal(response.json()["items"][0]["total_price"]) == Decimal("300.00")

    def test_missing_client_name(self, client, sales_headers, company_info, quote_payload):
        quote_payload.pop("client_name")
        response = client.post("/api/quotes", json=quote_payload, headers=sales_headers)
        assert response.status_code == 400

    def test_requires_at_least_one_item(self, client, sales_headers, company_info, quote_payload):
        quote_payload["items"] = []
        response = client.post("/api/quotes", json=quote_payload, headers=sales_headers)
        assert response.status_code == 400

    def test_amount_out_of_range_is_bad_request(self, client, sales_headers, company_info, quote_payload):
        quote_payload["items"][0]["unit_price"] = "1e30"
        response = client.post("/api/quotes", json=quote_payload, headers=sales_headers)
        assert response.status_code == 400
        assert "unit_price" in response.json()["detail"]

    def test_total_out_of_range_is_bad_request(self, client, sales_headers, company_info, quote_payload):
        area_item = quote_payload["items"][1]
        area_item.update({
            "width": "9999999",
            "height": "9999999",
            "item_count_for_area_calc": 100000,
            "unit_price": "9999999999999.99"
        })
        response = client.post("/api/quotes", json=quote_payload, headers=sales_headers)
        assert response.status_code == 400
        assert response.json()["detail"] == "Total de la cotización fuera de rango"

    def test_missing_company_info_is_server_error(self, client, sales_headers, quote_payload):
        response = client.post("/api/quotes", json=quote_payload, headers=sales_headers)
        assert response.status_code == 500
        assert response.json()["detail"] == "Información de la empresa no configurada"

    def test_snapshot_is_frozen(self, client, admin_headers, company_info, quote_payload, db_session):
        created = client.post("/api/quotes", json=quote_payload, headers=admin_headers).json()

        response = client.put("/api/settings/company-info", json={"name": "Nova Razão Social"}, headers=admin_headers)
        assert response.status_code == 200

        quote = client.get(f"/api/quotes/{created['id']}", headers=admin_headers).json()
        assert quote["company_info_snapshot"]["name"] == "Vidraçaria Max"

    def test_update_keeps_number_snapshot_and_salesperson(
        self, client, sales_headers, admin_headers, company_info, quote_payload
    ):
        created = client.post("/api/quotes", json=quote_payload, headers=sales_headers).json()

        quote_payload["status"] = "accepted"
        quote_payload["discount_type"] = "none"
        response = client.put(f"/api/quotes/{created['id']}", json=quote_payload, headers=admin_headers)
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "accepted"
        assert data["quote_number"] == created["quote_number"]
        assert data["salesperson_username"] == "vendedor"
        assert data["company_info_snapshot"] == created["company_info_snapshot"]
        assert Decimal(data["total_cash"]) == Decimal("900.00")

    def test_list_filters(self, client, sales_headers, company_info, quote_payload):
        client.post("/api/quotes", json=quote_payload, headers=sales_headers)
        quote_payload["status"] = "sent"
        client.post("/api/quotes", json=quote_payload, headers=sales_headers)

        response = client.get("/api/quotes", headers=sales_headers)
        assert len(response.json()) == 2

        response = client.get("/api/quotes?status=sent", headers=sales_headers)
        assert [q["status"] for q in response.json()] == ["sent"]

    def test_filter_by_customer(self, client, sales_headers, company_info, quote_payload):
        customer = client.post("/api/customers", json={
            "name": "Cliente Filtro", "phone": "1199999999"
        }, headers=sales_headers).json()

        client.post("/api/quotes", json=quote_payload, headers=sales_headers)
        quote_payload["customer_id"] = customer["id"]
        client.post("/api/quotes", json=quote_payload, headers=sales_headers)

        response = client.get(f"/api/quotes?customer_id={customer['id']}", headers=sales_headers)
        assert len(response.json()) == 1
        assert response.json()[0]["customer_id"] == customer["id"]

    def test_delete_quote(self, client, sales_headers, company_info, quote_payload):
        created = client.post("/api/quotes", json=quote_payload, headers=sales_headers).json()

        assert client.delete(f"/api/quotes/{created['id']}", headers=sales_headers).status_code == 200
        assert client.get(f"/api/quotes/{created['id']}", headers=sales_headers).status_code == 404

    def test_viewer_cannot_create(self, client, viewer_headers, company_info, quote_payload):
        response = client.post("/api/quotes", json=quote_payload, headers=viewer_headers)
        assert response.status_code == 403

    def test_viewer_can_list(self, client, viewer_headers):
        response = client.get("/api/quotes", headers=viewer_headers)
        assert response.status_code == 200
        assert response.json() == []

"""
Tests para el módulo de Cuentas por Pagar

Cubren:
- División del total en cuotas (la última absorbe el redondeo)
- Vencimientos semanales y mensuales con ajuste a fin de mes
- Creación atómica de series (rollback si falla el commit)
- Eliminación de una entrada y de una serie completa
- Acceso exclusivo de administradores
"""

import pytest
from datetime import date, timedelta
from decimal import Decimal
from uuid import uuid4

from fastapi import HTTPException

from maxcontrol.modules.accounts_payable.installments import (
    build_installment_plan, split_amount, installment_due_date
)
from maxcontrol.modules.accounts_payable.models import AccountsPayableEntry, Cadence
from maxcontrol.modules.accounts_payable.schemas import AccountsPayableCreate
from maxcontrol.modules.accounts_payable.service import AccountsPayableService


# ===== FIXTURES =====

@pytest.fixture
def monthly_request():
    return {
        "name": "Compra de vidrio temperado",
        "total_amount": "100.00",
        "due_date": "2024-01-31",
        "cadence": "monthly",
        "number_of_installments": 3,
        "notes": "Boleto bancario"
    }


# ===== TESTS DEL GENERADOR DE CUOTAS =====

class TestSplitAmount:
    """Tests para la división del total"""

    def test_three_installments_of_one_hundred(self):
        """100.00 en 3 cuotas → 33.33, 33.33, 33.34"""
        assert split_amount(Decimal("100.00"), 3) == [
            Decimal("33.33"), Decimal("33.33"), Decimal("33.34")
        ]

    @pytest.mark.parametrize("total,count", [
        ("100.00", 3),
        ("1000.00", 7),
        ("0.10", 3),
        ("999.99", 12),
        ("250.01", 2),
    ])
    def test_sum_matches_total(self, total, count):
        """La suma de las cuotas es exactamente el total"""
        amounts = split_amount(Decimal(total), count)
        assert len(amounts) == count
        assert sum(amounts) == Decimal(total)

    def test_exact_division_keeps_equal_installments(self):
        assert split_amount(Decimal("120.00"), 4) == [Decimal("30.00")] * 4


class TestDueDates:
    """Tests para el cálculo de vencimientos"""

    def test_monthly_clamps_to_end_of_month(self):
        """31/01/2024 mensual → 29/02/2024 y 31/03/2024 (año bisiesto)"""
        first = date(2024, 1, 31)
        dates = [installment_due_date(first, Cadence.MONTHLY, i) for i in range(3)]
        assert dates == [date(2024, 1, 31), date(2024, 2, 29), date(2024, 3, 31)]

    def test_monthly_is_computed_from_first_date(self):
        """Cada cuota se calcula desde la primera fecha, no desde la anterior"""
        first = date(2023, 1, 31)
        assert installment_due_date(first, Cadence.MONTHLY, 1) == date(2023, 2, 28)
        assert installment_due_date(first, Cadence.MONTHLY, 2) == date(2023, 3, 31)

    def test_weekly_advances_seven_days(self):
        first = date(2024, 6, 15)
        for i in range(5):
            assert installment_due_date(first, Cadence.WEEKLY, i) == first + timedelta(days=7 * i)


class TestBuildInstallmentPlan:
    """Tests para la expansión de la solicitud en entradas"""

    def test_series_metadata(self):
        plan = build_installment_plan(
            name="Aluguel",
            total_amount=Decimal("100.00"),
            first_due_date=date(2024, 1, 31),
            cadence=Cadence.MONTHLY,
            installment_count=3,
            notes="Contrato 2024"
        )

        assert [p.name for p in plan] == ["Aluguel - 1/3", "Aluguel - 2/3", "Aluguel - 3/3"]
        assert [p.installment_number_of_series for p in plan] == [1, 2, 3]
        assert {p.total_installments_in_series for p in plan} == {3}
        assert len({p.series_id for p in plan}) == 1
        assert plan[0].series_id.startswith("series_")

    def test_notes_only_on_first_installment(self):
        plan = build_installment_plan(
            name="Aluguel",
            total_amount=Decimal("90.00"),
            first_due_date=date(2024, 5, 1),
            cadence=Cadence.WEEKLY,
            installment_count=3,
            notes="Contrato 2024"
        )
        assert plan[0].notes == "Contrato 2024"
        assert plan[1].notes is None
        assert plan[2].notes is None

    def test_series_members_are_unpaid(self):
        plan = build_installment_plan(
            name="Aluguel",
            total_amount=Decimal("90.00"),
            first_due_date=date(2024, 5, 1),
            cadence=Cadence.WEEKLY,
            installment_count=3,
            is_paid=True
        )
        assert all(not p.is_paid for p in plan)

    def test_later_installments_are_after_first(self):
        plan = build_installment_plan(
            name="Energia",
            total_amount=Decimal("500.00"),
            first_due_date=date(2024, 8, 31),
            cadence=Cadence.MONTHLY,
            installment_count=6
        )
        assert all(p.due_date > plan[0].due_date for p in plan[1:])

    @pytest.mark.parametrize("cadence,count", [
        (Cadence.NONE, 5),
        (Cadence.MONTHLY, 1),
        (Cadence.WEEKLY, 0),
        (Cadence.MONTHLY, None),
    ])
    def test_single_entry_without_series(self, cadence, count):
        """Sin periodicidad o con una sola cuota se genera una entrada simple"""
        plan = build_installment_plan(
            name="Internet",
            total_amount=Decimal("120.50"),
            first_due_date=date(2024, 3, 10),
            cadence=cadence,
            installment_count=count,
            notes="Mensalidade",
            is_paid=True
        )
        assert len(plan) == 1
        entry = plan[0]
        assert entry.name == "Internet"
        assert entry.amount == Decimal("120.50")
        assert entry.is_paid is True
        assert entry.notes == "Mensalidade"
        assert entry.series_id is None
        assert entry.total_installments_in_series is None
        assert entry.installment_number_of_series is None


# ===== TESTS DE SERVICIOS =====

class TestAccountsPayableService:
    """Tests para AccountsPayableService"""

    def test_create_series_persists_all_rows(self, db_session):
        service = AccountsPayableService(db_session)
        entries = service.create_entries(AccountsPayableCreate(
            name="Fornecedor X",
            total_amount=Decimal("100.00"),
            due_date=date(2024, 1, 31),
            cadence=Cadence.MONTHLY,
            number_of_installments=3
        ))

        assert len(entries) == 3
        stored = db_session.query(AccountsPayableEntry).all()
        assert len(stored) == 3
        assert sum(e.amount for e in stored) == Decimal("100.00")

    def test_commit_failure_rolls_back_whole_series(self, db_session, monkeypatch):
        """Si falla el commit no queda ninguna cuota guardada"""
        service = AccountsPayableService(db_session)

        def failing_commit():
            raise RuntimeError("conexión perdida")

        monkeypatch.setattr(db_session, "commit", failing_commit)

        with pytest.raises(HTTPException) as exc:
            service.create_entries(AccountsPayableCreate(
                name="Fornecedor X",
                total_amount=Decimal("300.00"),
                due_date=date(2024, 1, 10),
                cadence=Cadence.WEEKLY,
                number_of_installments=4
            ))

        assert exc.value.status_code == 500
        monkeypatch.undo()
        assert db_session.query(AccountsPayableEntry).count() == 0

    def test_delete_series_only_removes_its_rows(self, db_session):
        service = AccountsPayableService(db_session)
        series_a = service.create_entries(AccountsPayableCreate(
            name="Serie A", total_amount=Decimal("90.00"), due_date=date(2024, 1, 1),
            cadence=Cadence.MONTHLY, number_of_installments=3
        ))
        series_b = service.create_entries(AccountsPayableCreate(
            name="Serie B", total_amount=Decimal("40.00"), due_date=date(2024, 1, 1),
            cadence=Cadence.WEEKLY, number_of_installments=2
        ))
        service.create_entries(AccountsPayableCreate(
            name="Avulsa", total_amount=Decimal("10.00"), due_date=date(2024, 1, 5)
        ))

        result = service.delete_series(series_a[0].series_id)

        assert result.deleted == 3
        remaining = db_session.query(AccountsPayableEntry).all()
        assert len(remaining) == 3
        assert {e.series_id for e in remaining} == {series_b[0].series_id, None}

    def test_delete_unknown_series(self, db_session):
        with pytest.raises(HTTPException) as exc:
            AccountsPayableService(db_session).delete_series("series_inexistente")
        assert exc.value.status_code == 404


# ===== TESTS DE ENDPOINTS =====

class TestAccountsPayableEndpoints:
    """Tests de la API /api/accounts-payable"""

    def test_create_series(self, client, admin_headers, monthly_request):
        response = client.post("/api/accounts-payable", json=monthly_request, headers=admin_headers)
        assert response.status_code == 201

        entries = response.json()
        assert len(entries) == 3
        assert [Decimal(e["amount"]) for e in entries] == [
            Decimal("33.33"), Decimal("33.33"), Decimal("33.34")
        ]
        assert [e["due_date"] for e in entries] == ["2024-01-31", "2024-02-29", "2024-03-31"]
        assert entries[0]["notes"] == "Boleto bancario"
        assert entries[1]["notes"] is None

    def test_create_single_entry(self, client, admin_headers):
        response = client.post("/api/accounts-payable", json={
            "name": "Conta de luz",
            "total_amount": "230.45",
            "due_date": "2024-07-10",
            "is_paid": True
        }, headers=admin_headers)

        assert response.status_code == 201
        entries = response.json()
        assert len(entries) == 1
        assert entries[0]["is_paid"] is True
        assert entries[0]["series_id"] is None

    def test_zero_installments_creates_single_entry(self, client, admin_headers):
        response = client.post("/api/accounts-payable", json={
            "name": "Aluguel",
            "total_amount": "1500.00",
            "due_date": "2024-07-05",
            "cadence": "monthly",
            "number_of_installments": 0
        }, headers=admin_headers)

        assert response.status_code == 201
        entries = response.json()
        assert len(entries) == 1
        assert entries[0]["name"] == "Aluguel"
        assert entries[0]["series_id"] is None
        assert entries[0]["total_installments_in_series"] is None

    def test_amount_out_of_range_is_bad_request(self, client, admin_headers, db_session):
        response = client.post("/api/accounts-payable", json={
            "name": "Conta",
            "total_amount": "1e30",
            "due_date": "2024-01-01"
        }, headers=admin_headers)

        assert response.status_code == 400
        assert "total_amount" in response.json()["detail"]
        assert db_session.query(AccountsPayableEntry).count() == 0

    def test_amount_rounds_half_up(self, client, admin_headers):
        response = client.post("/api/accounts-payable", json={
            "name": "Conta",
            "total_amount": "10.005",
            "due_date": "2024-01-01"
        }, headers=admin_headers)

        assert response.status_code == 201
        assert Decimal(response.json()[0]["amount"]) == Decimal("10.01")

    def test_missing_name_is_bad_request(self, client, admin_headers):
        response = client.post("/api/accounts-payable", json={
            "total_amount": "10.00",
            "due_date": "2024-07-10"
        }, headers=admin_headers)
        assert response.status_code == 400
        assert "name" in response.json()["detail"]

    def test_list_ordered_by_due_date_and_filtered(self, client, admin_headers):
        client.post("/api/accounts-payable", json={
            "name": "Depois", "total_amount": "10.00", "due_date": "2024-09-01"
        }, headers=admin_headers)
        client.post("/api/accounts-payable", json={
            "name": "Antes", "total_amount": "10.00", "due_date": "2024-01-01", "is_paid": True
        }, headers=admin_headers)

        response = client.get("/api/accounts-payable", headers=admin_headers)
        assert [e["name"] for e in response.json()] == ["Antes", "Depois"]

        response = client.get("/api/accounts-payable?is_paid=false", headers=admin_headers)
        assert [e["name"] for e in response.json()] == ["Depois"]

    def test_toggle_paid(self, client, admin_headers):
        created = client.post("/api/accounts-payable", json={
            "name": "Água", "total_amount": "80.00", "due_date": "2024-02-10"
        }, headers=admin_headers).json()[0]

        response = client.post(f"/api/accounts-payable/{created['id']}/toggle-paid", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["is_paid"] is True

        response = client.post(f"/api/accounts-payable/{created['id']}/toggle-paid", headers=admin_headers)
        assert response.json()["is_paid"] is False

    def test_update_entry_keeps_series_data(self, client, admin_headers, monthly_request):
        entries = client.post("/api/accounts-payable", json=monthly_request, headers=admin_headers).json()
        second = entries[1]

        response = client.put(f"/api/accounts-payable/{second['id']}", json={
            "name": "Parcela renegociada",
            "amount": "40.00",
            "due_date": "2024-03-05",
            "is_paid": True
        }, headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Parcela renegociada"
        assert Decimal(data["amount"]) == Decimal("40.00")
        assert data["series_id"] == second["series_id"]
        assert data["installment_number_of_series"] == 2

    def test_delete_entry(self, client, admin_headers):
        created = client.post("/api/accounts-payable", json={
            "name": "Telefone", "total_amount": "50.00", "due_date": "2024-02-10"
        }, headers=admin_headers).json()[0]

        assert client.delete(f"/api/accounts-payable/{created['id']}", headers=admin_headers).status_code == 200
        assert client.delete(f"/api/accounts-payable/{created['id']}", headers=admin_headers).status_code == 404

    def test_delete_series_endpoint(self, client, admin_headers, monthly_request):
        entries = client.post("/api/accounts-payable", json=monthly_request, headers=admin_headers).json()
        series_id = entries[0]["series_id"]

        response = client.delete(f"/api/accounts-payable/series/{series_id}", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["deleted"] == 3

        response = client.delete(f"/api/accounts-payable/series/{series_id}", headers=admin_headers)
        assert response.status_code == 404

    def test_update_unknown_entry(self, client, admin_headers):
        response = client.put(f"/api/accounts-payable/{uuid4()}", json={
            "name": "X", "amount": "1.00", "due_date": "2024-01-01"
        }, headers=admin_headers)
        assert response.status_code == 404

    def test_only_admin_can_access(self, client, sales_headers, viewer_headers):
        assert client.get("/api/accounts-payable", headers=sales_headers).status_code == 403
        assert client.get("/api/accounts-payable", headers=viewer_headers).status_code == 403
        assert client.get("/api/accounts-payable").status_code in (401, 403)

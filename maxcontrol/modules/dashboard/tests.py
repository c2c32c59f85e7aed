"""
Tests para el módulo de Dashboard

Las cotizaciones se insertan directamente con fecha de creación controlada.
"""

import pytest
from datetime import date, datetime
from decimal import Decimal

from maxcontrol.modules.products.models import Product
from maxcontrol.modules.quotes.models import Quote, QuoteStatus
from maxcontrol.modules.dashboard.service import DashboardService, month_range


_counter = {"n": 0}


def _quote(db_session, status, total, created_at, username="vendedor", full_name="Carla Vendedora"):
    _counter["n"] += 1
    db_session.add(Quote(
        quote_number=f"ORC-TEST-{_counter['n']:04d}",
        client_name="Cliente",
        items=[],
        company_info_snapshot={},
        status=status,
        total_cash=Decimal(total),
        salesperson_username=username,
        salesperson_full_name=full_name,
        created_at=created_at
    ))
    db_session.commit()


@pytest.fixture
def sales_history(db_session):
    _quote(db_session, QuoteStatus.ACCEPTED, "100.00", datetime(2023, 1, 15, 10, 0))
    _quote(db_session, QuoteStatus.CONVERTED_TO_ORDER, "50.00", datetime(2023, 1, 20, 10, 0))
    _quote(db_session, QuoteStatus.ACCEPTED, "300.00", datetime(2023, 12, 5, 10, 0), username="admin", full_name="Administrador")
    _quote(db_session, QuoteStatus.REJECTED, "999.00", datetime(2023, 3, 1, 10, 0))
    _quote(db_session, QuoteStatus.DRAFT, "10.00", datetime(2023, 4, 1, 10, 0))
    _quote(db_session, QuoteStatus.ACCEPTED, "70.00", datetime(2021, 6, 1, 10, 0))


class TestMonthRange:

    def test_december_rolls_over(self):
        assert month_range(2023, 12) == (datetime(2023, 12, 1), datetime(2024, 1, 1))

    def test_regular_month(self):
        assert month_range(2024, 2) == (datetime(2024, 2, 1), datetime(2024, 3, 1))


class TestDashboardService:
    """Tests para DashboardService"""

    def test_sales_chart_buckets(self, db_session, sales_history):
        chart = DashboardService(db_session).get_sales_chart(2023)

        assert len(chart.monthly_sales) == 12
        assert chart.monthly_sales[0] == Decimal("150.00")
        assert chart.monthly_sales[11] == Decimal("300.00")
        assert chart.monthly_sales[2] == Decimal("0.00")  # rechazada no cuenta
        assert sum(chart.monthly_sales) == Decimal("450.00")

    def test_available_years_include_current(self, db_session, sales_history):
        years = DashboardService(db_session).get_available_years()
        current = date.today().year
        assert years == sorted({2023, 2021, current}, reverse=True)

    def test_sales_by_user(self, db_session, sales_history):
        result = DashboardService(db_session).get_sales_by_user(2023)

        assert [u.salesperson_username for u in result.users] == ["admin", "vendedor"]
        vendedor = result.users[1]
        assert vendedor.accepted_quotes == 2
        assert vendedor.total_sales == Decimal("150.00")

    def test_sales_by_user_for_month(self, db_session, sales_history):
        result = DashboardService(db_session).get_sales_by_user(2023, 12)
        assert [u.salesperson_username for u in result.users] == ["admin"]

    def test_recent_accepted_only_current_month(self, db_session, sales_history):
        quotes = DashboardService(db_session).get_recent_accepted_quotes(today=date(2023, 1, 31))
        assert [q.total_cash for q in quotes] == [Decimal("50.00"), Decimal("100.00")]

    def test_recent_accepted_limit(self, db_session):
        for day in range(1, 13):
            _quote(db_session, QuoteStatus.ACCEPTED, "1.00", datetime(2024, 3, day, 9, 0))

        quotes = DashboardService(db_session).get_recent_accepted_quotes(today=date(2024, 3, 20))
        assert len(quotes) == 10
        assert quotes[0].created_at.day == 12

    def test_draft_quotes_limit(self, db_session):
        for day in range(1, 8):
            _quote(db_session, QuoteStatus.DRAFT, "1.00", datetime(2024, 3, day, 9, 0))

        drafts = DashboardService(db_session).get_draft_quotes()
        assert len(drafts) == 5
        assert drafts[0].created_at.day == 7


class TestDashboardEndpoints:
    """Tests de la API /api/dashboard"""

    def test_stats_without_company(self, client, viewer_headers, db_session):
        db_session.add(Product(name="Espelho", base_price=Decimal("10.00")))
        db_session.commit()

        data = client.get("/api/dashboard/stats", headers=viewer_headers).json()
        assert data == {"product_count": 1, "quote_count": 0, "company_name": "Sua Empresa"}

    def test_stats_with_company(self, client, viewer_headers, company_info):
        data = client.get("/api/dashboard/stats", headers=viewer_headers).json()
        assert data["company_name"] == "Vidraçaria Max"

    def test_sales_chart_endpoint(self, client, viewer_headers, sales_history):
        response = client.get("/api/dashboard/sales-chart?year=2023", headers=viewer_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["year"] == 2023
        assert Decimal(data["monthly_sales"][0]) == Decimal("150.00")
        assert 2021 in data["available_years"]

    def test_sales_chart_defaults_to_current_year(self, client, viewer_headers):
        data = client.get("/api/dashboard/sales-chart", headers=viewer_headers).json()
        assert data["year"] == date.today().year
        assert data["available_years"] == [date.today().year]
        assert all(Decimal(v) == 0 for v in data["monthly_sales"])

    def test_draft_quotes_endpoint(self, client, viewer_headers, sales_history):
        data = client.get("/api/dashboard/draft-quotes", headers=viewer_headers).json()
        assert len(data) == 1
        assert data[0]["status"] == "draft"

    def test_sales_by_user_endpoint(self, client, viewer_headers, sales_history):
        data = client.get("/api/dashboard/sales-by-user?year=2023", headers=viewer_headers).json()
        assert {u["salesperson_username"] for u in data["users"]} == {"admin", "vendedor"}

    def test_requires_authentication(self, client):
        assert client.get("/api/dashboard/stats").status_code in (401, 403)

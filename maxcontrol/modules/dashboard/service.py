"""
Agregaciones del dashboard

Se consideran ventas las cotizaciones aceptadas o convertidas en pedido;
el valor de la venta es total_cash.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional, Tuple
import logging

from sqlalchemy import desc, extract, func
from sqlalchemy.orm import Session

from maxcontrol.core.config import settings
from maxcontrol.modules.company.service import CompanyInfoService
from maxcontrol.modules.products.models import Product
from maxcontrol.modules.quotes.models import Quote, QuoteStatus, SOLD_STATUSES
from maxcontrol.modules.dashboard.schemas import (
    DashboardStats, SalesChartResponse, UserSales, SalesByUserResponse
)

logger = logging.getLogger(__name__)

DRAFT_QUOTES_LIMIT = 5
RECENT_ACCEPTED_LIMIT = 10


def year_range(year: int) -> Tuple[datetime, datetime]:
    return datetime(year, 1, 1), datetime(year + 1, 1, 1)


def month_range(year: int, month: int) -> Tuple[datetime, datetime]:
    start = datetime(year, month, 1)
    end = datetime(year + 1, 1, 1) if month == 12 else datetime(year, month + 1, 1)
    return start, end


class DashboardService:
    def __init__(self, db: Session):
        self.db = db

    def _sold_quotes_query(self):
        return self.db.query(Quote).filter(Quote.status.in_(SOLD_STATUSES))

    def get_stats(self) -> DashboardStats:
        """Cantidad de productos, cantidad de cotizaciones y nombre de la empresa"""
        company_info = CompanyInfoService(self.db).find_company_info()
        return DashboardStats(
            product_count=self.db.query(func.count(Product.id)).scalar() or 0,
            quote_count=self.db.query(func.count(Quote.id)).scalar() or 0,
            company_name=company_info.name if company_info else settings.DEFAULT_COMPANY_NAME
        )

    def get_available_years(self) -> List[int]:
        rows = self.db.query(
            extract('year', Quote.created_at)
        ).filter(Quote.status.in_(SOLD_STATUSES)).distinct().all()
        years = {int(year) for (year,) in rows if year is not None}
        years.add(date.today().year)
        return sorted(years, reverse=True)

    def get_sales_chart(self, year: Optional[int] = None) -> SalesChartResponse:
        """Ventas por mes del año (12 valores)"""
        year = year or date.today().year
        start, end = year_range(year)

        month_col = extract('month', Quote.created_at)
        rows = self.db.query(
            month_col,
            func.coalesce(func.sum(Quote.total_cash), 0)
        ).filter(
            Quote.status.in_(SOLD_STATUSES),
            Quote.created_at >= start,
            Quote.created_at < end
        ).group_by(month_col).all()

        monthly_sales = [Decimal('0.00')] * 12
        for month, total in rows:
            monthly_sales[int(month) - 1] = Decimal(str(total)).quantize(Decimal('0.01'))

        return SalesChartResponse(
            year=year,
            monthly_sales=monthly_sales,
            available_years=self.get_available_years()
        )

    def get_draft_quotes(self) -> List[Quote]:
        """Últimos borradores"""
        return self.db.query(Quote).filter(
            Quote.status == QuoteStatus.DRAFT
        ).order_by(desc(Quote.created_at)).limit(DRAFT_QUOTES_LIMIT).all()

    def get_recent_accepted_quotes(self, today: Optional[date] = None) -> List[Quote]:
        """Últimas ventas del mes en curso"""
        today = today or date.today()
        start, end = month_range(today.year, today.month)
        return self._sold_quotes_query().filter(
            Quote.created_at >= start,
            Quote.created_at < end
        ).order_by(desc(Quote.created_at)).limit(RECENT_ACCEPTED_LIMIT).all()

    def get_sales_by_user(self, year: Optional[int] = None, month: Optional[int] = None) -> SalesByUserResponse:
        """Cotizaciones aceptadas y total vendido por vendedor"""
        year = year or date.today().year
        start, end = month_range(year, month) if month else year_range(year)

        rows = self.db.query(
            Quote.salesperson_username,
            func.max(Quote.salesperson_full_name),
            func.count(Quote.id),
            func.coalesce(func.sum(Quote.total_cash), 0)
        ).filter(
            Quote.status.in_(SOLD_STATUSES),
            Quote.created_at >= start,
            Quote.created_at < end
        ).group_by(Quote.salesperson_username).all()

        users = [
            UserSales(
                salesperson_username=username,
                salesperson_full_name=full_name,
                accepted_quotes=count,
                total_sales=Decimal(str(total)).quantize(Decimal('0.01'))
            )
            for username, full_name, count, total in rows
        ]
        users.sort(key=lambda u: u.total_sales, reverse=True)

        return SalesByUserResponse(year=year, month=month, users=users)

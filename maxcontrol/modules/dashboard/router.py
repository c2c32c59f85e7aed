"""
Dashboard Router

Indicadores de la página de inicio y rendimiento de ventas por usuario.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from maxcontrol.database.database import get_db
from maxcontrol.modules.auth.dependencies import require_any_role
from maxcontrol.modules.quotes.schemas import QuoteSummary
from maxcontrol.modules.dashboard.service import DashboardService
from maxcontrol.modules.dashboard.schemas import DashboardStats, SalesChartResponse, SalesByUserResponse

router = APIRouter(
    prefix="/api/dashboard",
    tags=["Dashboard"],
    dependencies=[Depends(require_any_role())]
)


@router.get("/stats", response_model=DashboardStats)
def get_stats(db: Session = Depends(get_db)):
    return DashboardService(db).get_stats()


@router.get("/sales-chart", response_model=SalesChartResponse)
def get_sales_chart(
    year: Optional[int] = Query(None, ge=2000, le=2100, description="Año (por defecto el actual)"),
    db: Session = Depends(get_db)
):
    """
    Ventas mensuales del año seleccionado y años disponibles
    """
    return DashboardService(db).get_sales_chart(year)


@router.get("/draft-quotes", response_model=List[QuoteSummary])
def get_draft_quotes(db: Session = Depends(get_db)):
    return DashboardService(db).get_draft_quotes()


@router.get("/recent-accepted-quotes", response_model=List[QuoteSummary])
def get_recent_accepted_quotes(db: Session = Depends(get_db)):
    return DashboardService(db).get_recent_accepted_quotes()


@router.get("/sales-by-user", response_model=SalesByUserResponse)
def get_sales_by_user(
    year: Optional[int] = Query(None, ge=2000, le=2100),
    month: Optional[int] = Query(None, ge=1, le=12),
    db: Session = Depends(get_db)
):
    """
    Rendimiento de ventas por vendedor en el año (o mes) seleccionado
    """
    return DashboardService(db).get_sales_by_user(year, month)

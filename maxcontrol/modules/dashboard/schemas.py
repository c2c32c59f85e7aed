from pydantic import BaseModel, Field
from decimal import Decimal
from typing import List, Optional


class DashboardStats(BaseModel):
    product_count: int
    quote_count: int
    company_name: str


class SalesChartResponse(BaseModel):
    year: int
    monthly_sales: List[Decimal] = Field(..., description="Ventas por mes, enero a diciembre")
    available_years: List[int] = Field(..., description="Años con ventas y el año actual, de mayor a menor")


class UserSales(BaseModel):
    salesperson_username: str
    salesperson_full_name: Optional[str] = None
    accepted_quotes: int
    total_sales: Decimal


class SalesByUserResponse(BaseModel):
    year: int
    month: Optional[int] = None
    users: List[UserSales]

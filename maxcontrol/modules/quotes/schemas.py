"""
Esquemas Pydantic para el módulo de Cotizaciones
"""

from pydantic import BaseModel, Field, field_validator, model_validator
from decimal import Decimal
from typing import Optional, List, Dict, Any
from uuid import UUID
from datetime import date, datetime

from maxcontrol.common.validators import validate_money
from maxcontrol.modules.products.models import PricingModel
from maxcontrol.modules.quotes.models import QuoteStatus, DiscountType


# ===== ITEMS =====

class QuoteItem(BaseModel):
    """Ítem de la cotización. El total de línea se calcula en el servidor."""
    product_id: Optional[UUID] = None
    product_name: str = Field(..., min_length=1, max_length=200)
    pricing_model: PricingModel = PricingModel.PER_UNIT
    quantity: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=3)
    unit_price: Decimal = Field(..., ge=0)
    total_price: Optional[Decimal] = None

    # Medidas para productos por m2
    width: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=3)
    height: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=3)
    item_count_for_area_calc: Optional[int] = Field(None, ge=1, le=100000)

    @field_validator('unit_price')
    @classmethod
    def validate_price(cls, v):
        return validate_money(v)

    @model_validator(mode='after')
    def validate_quantity(self):
        has_area = self.width is not None and self.height is not None
        if self.pricing_model == PricingModel.PER_SQUARE_METER and has_area:
            return self
        if self.quantity is None:
            raise ValueError(f"Cantidad requerida para el ítem '{self.product_name}'")
        return self

    @property
    def uses_area(self) -> bool:
        return (
            self.pricing_model == PricingModel.PER_SQUARE_METER
            and self.width is not None
            and self.height is not None
        )


# ===== QUOTES =====

class QuoteBase(BaseModel):
    customer_id: Optional[UUID] = None
    client_name: str = Field(..., max_length=200, description="Nombre del cliente")
    client_contact: Optional[str] = Field(None, max_length=200)
    items: List[QuoteItem] = Field(..., min_length=1, description="Ítems de la cotización")
    discount_type: DiscountType = DiscountType.NONE
    discount_value: Decimal = Field(Decimal('0'), ge=0)
    down_payment_applied: Decimal = Field(Decimal('0'), ge=0)
    selected_payment_method: Optional[str] = Field(None, max_length=50)
    payment_date: Optional[date] = None
    delivery_deadline: Optional[date] = None
    notes: Optional[str] = None
    status: QuoteStatus = QuoteStatus.DRAFT

    @field_validator('client_name')
    @classmethod
    def validate_client_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('El nombre del cliente es obligatorio')
        return v

    @field_validator('discount_value', 'down_payment_applied')
    @classmethod
    def validate_decimals(cls, v):
        return validate_money(v)

    @model_validator(mode='after')
    def validate_discount(self):
        if self.discount_type == DiscountType.PERCENTAGE and self.discount_value > 100:
            raise ValueError('El descuento porcentual no puede superar 100')
        if self.discount_type == DiscountType.NONE:
            self.discount_value = Decimal('0.00')
        return self


class QuoteCreate(QuoteBase):
    pass


class QuoteUpdate(QuoteBase):
    """Número, snapshot de empresa y vendedor no se modifican"""
    pass


class QuoteTotals(BaseModel):
    subtotal: Decimal
    discount_amount_calculated: Decimal
    subtotal_after_discount: Decimal
    total_cash: Decimal
    total_card: Decimal


class QuoteOut(QuoteBase):
    id: UUID
    quote_number: str
    subtotal: Decimal
    discount_amount_calculated: Decimal
    subtotal_after_discount: Decimal
    total_cash: Decimal
    total_card: Decimal
    company_info_snapshot: Dict[str, Any]
    salesperson_username: str
    salesperson_full_name: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class QuoteSummary(BaseModel):
    """Vista reducida usada en listados del dashboard"""
    id: UUID
    quote_number: str
    client_name: str
    total_cash: Decimal
    status: QuoteStatus
    salesperson_username: str
    salesperson_full_name: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True

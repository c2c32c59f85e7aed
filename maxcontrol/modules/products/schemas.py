from pydantic import BaseModel, Field, field_validator
from decimal import Decimal
from typing import Optional
from uuid import UUID
from datetime import datetime

from maxcontrol.common.validators import validate_money
from maxcontrol.modules.products.models import PricingModel


class ProductBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200, description="Nombre del producto")
    description: Optional[str] = Field(None, description="Descripción comercial")
    pricing_model: PricingModel = Field(PricingModel.PER_UNIT, description="Modelo de precio")
    base_price: Decimal = Field(..., ge=0, description="Precio base")
    unit: Optional[str] = Field(None, max_length=30)
    custom_cash_price: Optional[Decimal] = Field(None, ge=0)
    custom_card_price: Optional[Decimal] = Field(None, ge=0)
    supplier_cost: Optional[Decimal] = Field(None, ge=0)
    category_id: Optional[UUID] = None

    @field_validator('base_price', 'custom_cash_price', 'custom_card_price', 'supplier_cost')
    @classmethod
    def validate_decimals(cls, v):
        return validate_money(v)


class ProductCreate(ProductBase):
    pass


class ProductUpdate(ProductBase):
    pass


class ProductOut(ProductBase):
    id: UUID
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

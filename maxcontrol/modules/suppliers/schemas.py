from pydantic import BaseModel, Field, field_validator
from decimal import Decimal
from typing import Optional
from uuid import UUID
from datetime import date as Date, datetime

from maxcontrol.common.validators import validate_cnpj, format_cnpj, validate_money


class SupplierBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200, description="Nombre del proveedor")
    cnpj: Optional[str] = Field(None, max_length=20)
    phone: Optional[str] = Field(None, max_length=50)
    email: Optional[str] = Field(None, max_length=100)
    address: Optional[str] = None
    notes: Optional[str] = None

    @field_validator('name')
    @classmethod
    def strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('El nombre es obligatorio')
        return v


class SupplierCreate(SupplierBase):

    @field_validator('cnpj')
    @classmethod
    def validate_cnpj_format(cls, v):
        if v and v.strip():
            if not validate_cnpj(v):
                raise ValueError('CNPJ inválido')
            return format_cnpj(v)
        return None


class SupplierUpdate(SupplierCreate):
    pass


class SupplierOut(SupplierBase):
    id: UUID
    created_at: datetime

    class Config:
        from_attributes = True


# ===== DEBTS =====

class SupplierDebtCreate(BaseModel):
    description: Optional[str] = Field(None, max_length=255)
    total_amount: Decimal = Field(..., gt=0, description="Valor total de la deuda")
    date_added: Date = Field(default_factory=Date.today)

    @field_validator('total_amount')
    @classmethod
    def validate_decimals(cls, v):
        return validate_money(v)


class SupplierDebtOut(SupplierDebtCreate):
    id: UUID
    supplier_id: UUID

    class Config:
        from_attributes = True


# ===== CREDITS =====

class SupplierCreditCreate(BaseModel):
    amount: Decimal = Field(..., gt=0, description="Valor abonado")
    date: Date = Field(default_factory=Date.today)
    description: Optional[str] = Field(None, max_length=255)

    @field_validator('amount')
    @classmethod
    def validate_decimals(cls, v):
        return validate_money(v)


class SupplierCreditOut(SupplierCreditCreate):
    id: UUID
    supplier_id: UUID

    class Config:
        from_attributes = True


class SupplierBalance(BaseModel):
    supplier_id: UUID
    total_debts: Decimal
    total_credits: Decimal
    balance: Decimal = Field(..., description="Deudas menos créditos")

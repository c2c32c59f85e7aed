"""
Esquemas Pydantic para el módulo de Clientes
"""

from pydantic import BaseModel, Field, field_validator, model_validator
from decimal import Decimal
from typing import Optional, List
from uuid import UUID
from datetime import date as Date, datetime

from maxcontrol.common.validators import validate_cpf, validate_cnpj, format_cpf, format_cnpj, validate_money
from maxcontrol.modules.customers.models import DocumentType


# ===== DOWN PAYMENT SCHEMAS =====

class DownPaymentBase(BaseModel):
    amount: Decimal = Field(..., gt=0, description="Monto del anticipo")
    date: Date = Field(default_factory=Date.today, description="Fecha del anticipo")
    description: Optional[str] = Field(None, max_length=255)

    @field_validator('amount')
    @classmethod
    def validate_decimals(cls, v):
        return validate_money(v)


class DownPaymentIn(DownPaymentBase):
    id: Optional[UUID] = Field(None, description="ID existente (se conserva al sincronizar)")


class DownPaymentOut(DownPaymentBase):
    id: UUID
    customer_id: UUID

    class Config:
        from_attributes = True


# ===== CUSTOMER SCHEMAS =====

class CustomerBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200, description="Nombre del cliente")
    document_type: DocumentType = Field(DocumentType.NONE, description="CPF, CNPJ o N/A")
    document_number: Optional[str] = Field(None, max_length=20)
    phone: str = Field(..., min_length=1, max_length=50)
    email: Optional[str] = Field(None, max_length=100)
    address: Optional[str] = None
    city: Optional[str] = Field(None, max_length=100)
    postal_code: Optional[str] = Field(None, max_length=20)

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        if v and v.strip():
            if '@' not in v or '.' not in v:
                raise ValueError('Email debe tener formato válido')
        return v or None


class CustomerCreate(CustomerBase):

    @model_validator(mode='after')
    def validate_document(self):
        number = (self.document_number or '').strip()
        if self.document_type == DocumentType.NONE or not number:
            self.document_number = number or None
            return self
        if self.document_type == DocumentType.CPF:
            if not validate_cpf(number):
                raise ValueError('CPF inválido')
            self.document_number = format_cpf(number)
        elif self.document_type == DocumentType.CNPJ:
            if not validate_cnpj(number):
                raise ValueError('CNPJ inválido')
            self.document_number = format_cnpj(number)
        return self


class CustomerUpdate(CustomerCreate):
    # None conserva los anticipos actuales; una lista los reemplaza por completo
    down_payments: Optional[List[DownPaymentIn]] = None


class CustomerOut(CustomerBase):
    id: UUID
    created_at: datetime
    down_payments: List[DownPaymentOut] = []
    available_credit: Decimal = Decimal('0.00')

    class Config:
        from_attributes = True

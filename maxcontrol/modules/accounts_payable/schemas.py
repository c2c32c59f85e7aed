from pydantic import BaseModel, Field, field_validator
from decimal import Decimal
from typing import Optional
from uuid import UUID
from datetime import date, datetime

from maxcontrol.common.validators import validate_money
from maxcontrol.modules.accounts_payable.models import Cadence


class AccountsPayableCreate(BaseModel):
    """
    Solicitud de cuenta por pagar

    Con cadence none o number_of_installments <= 1 se crea una sola entrada;
    en otro caso total_amount se divide en cuotas.
    """
    name: str = Field(..., max_length=200)
    total_amount: Decimal = Field(..., gt=0, description="Valor total a pagar")
    due_date: date = Field(..., description="Vencimiento de la primera cuota")
    is_paid: bool = False
    cadence: Cadence = Field(Cadence.NONE, description="none, weekly o monthly")
    number_of_installments: Optional[int] = Field(1, ge=0, le=360)
    notes: Optional[str] = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('El nombre es obligatorio')
        return v

    @field_validator('total_amount')
    @classmethod
    def validate_decimals(cls, v):
        return validate_money(v)


class AccountsPayableUpdate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    amount: Decimal = Field(..., gt=0)
    due_date: date
    is_paid: bool = False
    notes: Optional[str] = None

    @field_validator('amount')
    @classmethod
    def validate_decimals(cls, v):
        return validate_money(v)


class PlannedEntry(BaseModel):
    """Entrada calculada, todavía no persistida"""
    name: str
    amount: Decimal
    due_date: date
    is_paid: bool = False
    notes: Optional[str] = None
    series_id: Optional[str] = None
    total_installments_in_series: Optional[int] = None
    installment_number_of_series: Optional[int] = None


class AccountsPayableOut(PlannedEntry):
    id: UUID
    created_at: datetime

    class Config:
        from_attributes = True


class SeriesDeleteResult(BaseModel):
    series_id: str
    deleted: int
    message: str

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID

from maxcontrol.database.database import get_db
from maxcontrol.modules.auth.dependencies import require_admin
from maxcontrol.modules.accounts_payable.service import AccountsPayableService
from maxcontrol.modules.accounts_payable.schemas import (
    AccountsPayableCreate, AccountsPayableUpdate, AccountsPayableOut, SeriesDeleteResult
)

router = APIRouter(
    prefix="/api/accounts-payable",
    tags=["Accounts Payable"],
    dependencies=[Depends(require_admin())]
)


@router.get("", response_model=List[AccountsPayableOut])
def list_entries(
    is_paid: Optional[bool] = Query(None, description="Filtrar por estado de pago"),
    db: Session = Depends(get_db)
):
    return AccountsPayableService(db).get_entries(is_paid)


@router.post("", response_model=List[AccountsPayableOut], status_code=status.HTTP_201_CREATED)
def create_entries(
    data: AccountsPayableCreate,
    db: Session = Depends(get_db)
):
    """
    Crear cuenta por pagar

    - **cadence**: none (entrada única), weekly o monthly
    - **number_of_installments**: cantidad de cuotas cuando hay periodicidad

    Retorna la lista de entradas creadas.
    """
    return AccountsPayableService(db).create_entries(data)


@router.delete("/series/{series_id}", response_model=SeriesDeleteResult)
def delete_series(
    series_id: str,
    db: Session = Depends(get_db)
):
    """Eliminar todas las cuotas de una serie"""
    return AccountsPayableService(db).delete_series(series_id)


@router.put("/{entry_id}", response_model=AccountsPayableOut)
def update_entry(
    entry_id: UUID,
    data: AccountsPayableUpdate,
    db: Session = Depends(get_db)
):
    return AccountsPayableService(db).update_entry(entry_id, data)


@router.post("/{entry_id}/toggle-paid", response_model=AccountsPayableOut)
def toggle_paid(
    entry_id: UUID,
    db: Session = Depends(get_db)
):
    return AccountsPayableService(db).toggle_paid(entry_id)


@router.delete("/{entry_id}")
def delete_entry(
    entry_id: UUID,
    db: Session = Depends(get_db)
):
    return AccountsPayableService(db).delete_entry(entry_id)

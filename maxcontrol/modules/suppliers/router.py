from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID

from maxcontrol.database.database import get_db
from maxcontrol.modules.auth.dependencies import require_admin, require_seller, require_any_role
from maxcontrol.modules.suppliers.models import TransactionType
from maxcontrol.modules.suppliers.service import SupplierService
from maxcontrol.modules.suppliers.schemas import (
    SupplierCreate, SupplierUpdate, SupplierOut,
    SupplierDebtCreate, SupplierDebtOut,
    SupplierCreditCreate, SupplierCreditOut,
    SupplierBalance
)

router = APIRouter(prefix="/api/suppliers", tags=["Suppliers"])


@router.get("", response_model=List[SupplierOut])
def list_suppliers(
    db: Session = Depends(get_db),
    auth_context = Depends(require_any_role())
):
    return SupplierService(db).get_suppliers()


@router.post("", response_model=SupplierOut, status_code=status.HTTP_201_CREATED)
def create_supplier(
    data: SupplierCreate,
    db: Session = Depends(get_db),
    auth_context = Depends(require_seller())
):
    return SupplierService(db).create_supplier(data)


# ===== ALL DEBTS / CREDITS =====

@router.get("/debts", response_model=List[SupplierDebtOut])
def list_all_debts(
    db: Session = Depends(get_db),
    auth_context = Depends(require_any_role())
):
    """Todas las deudas de todos los proveedores"""
    return SupplierService(db).get_all_debts()


@router.get("/credits", response_model=List[SupplierCreditOut])
def list_all_credits(
    db: Session = Depends(get_db),
    auth_context = Depends(require_any_role())
):
    """Todos los créditos de todos los proveedores"""
    return SupplierService(db).get_all_credits()


@router.delete("/transactions/{transaction_type}/{transaction_id}")
def delete_transaction(
    transaction_type: TransactionType,
    transaction_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(require_admin())
):
    """
    Eliminar un movimiento

    - **transaction_type**: debt o credit
    """
    return SupplierService(db).delete_transaction(transaction_type, transaction_id)


# ===== SUPPLIER BY ID =====

@router.put("/{supplier_id}", response_model=SupplierOut)
def update_supplier(
    supplier_id: UUID,
    data: SupplierUpdate,
    db: Session = Depends(get_db),
    auth_context = Depends(require_seller())
):
    return SupplierService(db).update_supplier(supplier_id, data)


@router.delete("/{supplier_id}")
def delete_supplier(
    supplier_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(require_admin())
):
    """Eliminar proveedor con todas sus deudas y créditos"""
    return SupplierService(db).delete_supplier(supplier_id)


@router.get("/{supplier_id}/debts", response_model=List[SupplierDebtOut])
def list_supplier_debts(
    supplier_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(require_any_role())
):
    return SupplierService(db).get_supplier_debts(supplier_id)


@router.post("/{supplier_id}/debts", response_model=SupplierDebtOut, status_code=status.HTTP_201_CREATED)
def add_supplier_debt(
    supplier_id: UUID,
    data: SupplierDebtCreate,
    db: Session = Depends(get_db),
    auth_context = Depends(require_seller())
):
    return SupplierService(db).add_debt(supplier_id, data)


@router.get("/{supplier_id}/credits", response_model=List[SupplierCreditOut])
def list_supplier_credits(
    supplier_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(require_any_role())
):
    return SupplierService(db).get_supplier_credits(supplier_id)


@router.post("/{supplier_id}/credits", response_model=SupplierCreditOut, status_code=status.HTTP_201_CREATED)
def add_supplier_credit(
    supplier_id: UUID,
    data: SupplierCreditCreate,
    db: Session = Depends(get_db),
    auth_context = Depends(require_seller())
):
    return SupplierService(db).add_credit(supplier_id, data)


@router.get("/{supplier_id}/balance", response_model=SupplierBalance)
def get_supplier_balance(
    supplier_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(require_any_role())
):
    """Total de deudas, total de créditos y saldo pendiente"""
    return SupplierService(db).get_balance(supplier_id)

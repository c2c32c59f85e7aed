"""
Routers FastAPI para el módulo de Clientes
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID

from maxcontrol.database.database import get_db
from maxcontrol.modules.auth.dependencies import require_seller, require_any_role
from maxcontrol.modules.customers.service import CustomerService
from maxcontrol.modules.customers.schemas import CustomerCreate, CustomerUpdate, CustomerOut

router = APIRouter(prefix="/api/customers", tags=["Customers"])


@router.get("", response_model=List[CustomerOut])
def list_customers(
    db: Session = Depends(get_db),
    auth_context = Depends(require_any_role())
):
    """
    Listar clientes con anticipos y crédito disponible
    """
    return CustomerService(db).list_customers()


@router.get("/{customer_id}", response_model=CustomerOut)
def get_customer(
    customer_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(require_any_role())
):
    return CustomerService(db).get_customer_detail(customer_id)


@router.post("", response_model=CustomerOut, status_code=status.HTTP_201_CREATED)
def create_customer(
    data: CustomerCreate,
    db: Session = Depends(get_db),
    auth_context = Depends(require_seller())
):
    return CustomerService(db).create_customer(data)


@router.put("/{customer_id}", response_model=CustomerOut)
def update_customer(
    customer_id: UUID,
    data: CustomerUpdate,
    db: Session = Depends(get_db),
    auth_context = Depends(require_seller())
):
    """
    Actualizar cliente y sincronizar sus anticipos
    """
    return CustomerService(db).update_customer(customer_id, data)


@router.delete("/{customer_id}")
def delete_customer(
    customer_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(require_seller())
):
    """
    Eliminar cliente

    Las cotizaciones quedan desvinculadas; los anticipos se eliminan.
    """
    return CustomerService(db).delete_customer(customer_id)

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID

from maxcontrol.database.database import get_db
from maxcontrol.modules.auth.dependencies import require_seller, require_any_role
from maxcontrol.modules.quotes.models import QuoteStatus
from maxcontrol.modules.quotes.service import QuoteService
from maxcontrol.modules.quotes.schemas import QuoteCreate, QuoteUpdate, QuoteOut

router = APIRouter(prefix="/api/quotes", tags=["Quotes"])


@router.post("", response_model=QuoteOut, status_code=status.HTTP_201_CREATED)
def create_quote(
    data: QuoteCreate,
    db: Session = Depends(get_db),
    auth_context = Depends(require_seller())
):
    """
    Crear cotización

    - Número ORC-YYMMDD-NNN asignado automáticamente
    - Totales calculados en el servidor
    - Copia de la información de la empresa al momento de la creación
    - Vendedor tomado del usuario autenticado
    """
    return QuoteService(db).create_quote(data, auth_context)


@router.get("", response_model=List[QuoteOut])
def list_quotes(
    customer_id: Optional[UUID] = Query(None, description="Filtrar por cliente"),
    quote_status: Optional[QuoteStatus] = Query(None, alias="status", description="Filtrar por estado"),
    db: Session = Depends(get_db),
    auth_context = Depends(require_any_role())
):
    return QuoteService(db).get_quotes(customer_id, quote_status)


@router.get("/{quote_id}", response_model=QuoteOut)
def get_quote(
    quote_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(require_any_role())
):
    return QuoteService(db).get_quote_by_id(quote_id)


@router.put("/{quote_id}", response_model=QuoteOut)
def update_quote(
    quote_id: UUID,
    data: QuoteUpdate,
    db: Session = Depends(get_db),
    auth_context = Depends(require_seller())
):
    return QuoteService(db).update_quote(quote_id, data)


@router.delete("/{quote_id}")
def delete_quote(
    quote_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(require_seller())
):
    return QuoteService(db).delete_quote(quote_id)

"""
Servicios de negocio para el módulo de Cotizaciones
"""

from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from sqlalchemy import desc
from datetime import date, datetime
from decimal import InvalidOperation
from typing import List, Optional, Dict, Tuple
from uuid import UUID
import logging

from maxcontrol.core.config import settings
from maxcontrol.common.validators import MAX_MONEY
from maxcontrol.modules.auth.schemas import AuthContext
from maxcontrol.modules.company.service import CompanyInfoService
from maxcontrol.modules.customers.models import Customer
from maxcontrol.modules.quotes.calculator import QuoteCalculator
from maxcontrol.modules.quotes.models import Quote, QuoteStatus
from maxcontrol.modules.quotes.numbering import QuoteNumberGenerator
from maxcontrol.modules.quotes.schemas import QuoteCreate, QuoteUpdate, QuoteBase, QuoteItem, QuoteTotals

logger = logging.getLogger(__name__)

# Restricciones únicas que indican un número de cotización ya tomado
NUMBER_CONFLICT_MARKERS = ("quote_number", "date_prefix")


def is_number_conflict(error: IntegrityError) -> bool:
    message = str(error.orig).lower()
    return any(marker in message for marker in NUMBER_CONFLICT_MARKERS)


class QuoteService:
    def __init__(self, db: Session):
        self.db = db
        self.calculator = QuoteCalculator()

    def _require_customer(self, customer_id: Optional[UUID]) -> None:
        if customer_id is None:
            return
        exists = self.db.query(Customer.id).filter(Customer.id == customer_id).first()
        if not exists:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Cliente no encontrado"
            )

    def _calculate(self, data: QuoteBase) -> Tuple[List[QuoteItem], QuoteTotals]:
        """Calcular líneas y totales; 400 si el resultado no cabe en Numeric(15, 2)"""
        try:
            items = [self.calculator.calculate_line(item) for item in data.items]
            totals = self.calculator.calculate_totals(items, data.discount_type, data.discount_value)
        except InvalidOperation:
            totals = None

        if totals is None or max(totals.subtotal, totals.total_card) > MAX_MONEY:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Total de la cotización fuera de rango"
            )
        return items, totals

    def _apply(self, quote: Quote, data: QuoteBase, items: List[QuoteItem], totals: QuoteTotals) -> None:
        """Copiar datos editables y los totales ya calculados"""
        values = data.model_dump(exclude={"items"})
        for field, value in values.items():
            setattr(quote, field, value)

        quote.items = [item.model_dump(mode="json") for item in items]
        for field, value in totals.model_dump().items():
            setattr(quote, field, value)

    def create_quote(self, data: QuoteCreate, auth_context: AuthContext, today: Optional[date] = None) -> Quote:
        """
        Crear cotización

        Asigna el siguiente número del día, congela la información de la empresa
        y registra al vendedor que la crea. Si el número choca con otro creado en
        paralelo, se reintenta con un número nuevo.
        """
        self._require_customer(data.customer_id)
        items, totals = self._calculate(data)
        company_snapshot = CompanyInfoService(self.db).snapshot()
        generator = QuoteNumberGenerator(self.db)

        for attempt in range(1, settings.QUOTE_NUMBER_MAX_ATTEMPTS + 1):
            try:
                quote = Quote(
                    quote_number=generator.next_number(today, resync=attempt > 1),
                    company_info_snapshot=company_snapshot,
                    salesperson_username=auth_context.username,
                    salesperson_full_name=auth_context.full_name,
                    created_at=datetime.now()
                )
                self._apply(quote, data, items, totals)

                self.db.add(quote)
                self.db.commit()
                self.db.refresh(quote)
                logger.info(f"Quote {quote.quote_number} created by {auth_context.username}")
                return quote

            except IntegrityError as e:
                self.db.rollback()
                if not is_number_conflict(e):
                    logger.exception("Error creating quote")
                    raise HTTPException(
                        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                        detail="Error creando cotización"
                    )
                logger.warning(f"Quote number conflict, retrying (attempt {attempt})")
            except Exception:
                self.db.rollback()
                logger.exception("Error creating quote")
                raise HTTPException(
                    status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                    detail="Error creando cotización"
                )

        logger.error(f"Could not assign a quote number after {settings.QUOTE_NUMBER_MAX_ATTEMPTS} attempts")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="No fue posible asignar número a la cotización"
        )

    def get_quotes(self, customer_id: Optional[UUID] = None, quote_status: Optional[QuoteStatus] = None) -> List[Quote]:
        """Listar cotizaciones, más recientes primero"""
        query = self.db.query(Quote)
        if customer_id:
            query = query.filter(Quote.customer_id == customer_id)
        if quote_status:
            query = query.filter(Quote.status == quote_status)
        return query.order_by(desc(Quote.created_at), desc(Quote.quote_number)).all()

    def get_quote_by_id(self, quote_id: UUID) -> Quote:
        quote = self.db.query(Quote).filter(Quote.id == quote_id).first()
        if not quote:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Cotización no encontrada"
            )
        return quote

    def update_quote(self, quote_id: UUID, data: QuoteUpdate) -> Quote:
        """Actualizar cotización recalculando totales"""
        quote = self.get_quote_by_id(quote_id)
        self._require_customer(data.customer_id)
        items, totals = self._calculate(data)
        try:
            self._apply(quote, data, items, totals)
            self.db.commit()
            self.db.refresh(quote)
            logger.info(f"Quote {quote.quote_number} updated (status {quote.status.value})")
            return quote
        except Exception:
            self.db.rollback()
            logger.exception(f"Error updating quote {quote_id}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error actualizando cotización"
            )

    def delete_quote(self, quote_id: UUID) -> Dict[str, str]:
        quote = self.get_quote_by_id(quote_id)
        try:
            self.db.delete(quote)
            self.db.commit()
            logger.info(f"Quote {quote.quote_number} deleted")
            return {"message": "Cotización eliminada"}
        except Exception:
            self.db.rollback()
            logger.exception(f"Error deleting quote {quote_id}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error eliminando cotización"
            )

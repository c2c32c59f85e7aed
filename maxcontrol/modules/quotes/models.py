"""
Modelos SQLAlchemy para el módulo de Cotizaciones (Quotes)

- Cotizaciones con ítems, totales calculados y copia congelada de la
  información de la empresa al momento de la creación
- Secuencias de numeración diaria (ORC-YYMMDD-NNN)
"""

from maxcontrol.database.database import Base
from maxcontrol.common.mixins import BaseMixin
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, Numeric, Enum, Date, Text, JSON, Uuid
from sqlalchemy.orm import relationship
from datetime import datetime
import enum


class QuoteStatus(str, enum.Enum):
    """Estados de la cotización"""
    DRAFT = "draft"                            # Borrador
    SENT = "sent"                              # Enviada al cliente
    ACCEPTED = "accepted"                      # Aceptada
    REJECTED = "rejected"                      # Rechazada
    CONVERTED_TO_ORDER = "converted_to_order"  # Convertida en pedido
    CANCELLED = "cancelled"                    # Cancelada


class DiscountType(str, enum.Enum):
    NONE = "none"
    PERCENTAGE = "percentage"
    FIXED = "fixed"


# Estados que cuentan como venta en los reportes
SOLD_STATUSES = (QuoteStatus.ACCEPTED, QuoteStatus.CONVERTED_TO_ORDER)


class Quote(Base, BaseMixin):
    __tablename__ = "quotes"

    quote_number = Column(String(30), nullable=False, unique=True, index=True)
    customer_id = Column(Uuid(as_uuid=True), ForeignKey("customers.id", ondelete="SET NULL"), nullable=True, index=True)

    client_name = Column(String(200), nullable=False)
    client_contact = Column(String(200), nullable=True)

    # Lista de ítems (producto, cantidad, precio, medidas)
    items = Column(JSON, nullable=False, default=list)

    # Totales calculados
    subtotal = Column(Numeric(15, 2), nullable=False, default=0)
    discount_type = Column(Enum(DiscountType), nullable=False, default=DiscountType.NONE)
    discount_value = Column(Numeric(15, 2), nullable=False, default=0)
    discount_amount_calculated = Column(Numeric(15, 2), nullable=False, default=0)
    subtotal_after_discount = Column(Numeric(15, 2), nullable=False, default=0)
    total_cash = Column(Numeric(15, 2), nullable=False, default=0)
    total_card = Column(Numeric(15, 2), nullable=False, default=0)
    down_payment_applied = Column(Numeric(15, 2), nullable=False, default=0)

    selected_payment_method = Column(String(50), nullable=True)
    payment_date = Column(Date, nullable=True)
    delivery_deadline = Column(Date, nullable=True)
    notes = Column(Text, nullable=True)
    status = Column(Enum(QuoteStatus), nullable=False, default=QuoteStatus.DRAFT, index=True)

    # Copia congelada de company_info
    company_info_snapshot = Column(JSON, nullable=False)

    salesperson_username = Column(String(100), nullable=False, index=True)
    salesperson_full_name = Column(String(200), nullable=True)

    # Relationships
    customer = relationship("Customer")


class QuoteSequence(Base):
    """Contador de numeración de cotizaciones por día"""
    __tablename__ = "quote_sequences"

    id = Column(Integer, primary_key=True, autoincrement=True)
    date_prefix = Column(String(20), nullable=False, unique=True)  # Ej: "ORC-240615"
    current_number = Column(Integer, nullable=False, default=0)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)

"""
Modelos SQLAlchemy para el módulo de Clientes

- Clientes (Customer) con documento CPF / CNPJ
- Anticipos (DownPayment): pagos adelantados que el cliente puede
  aplicar después en sus cotizaciones
"""

from maxcontrol.database.database import Base
from maxcontrol.common.mixins import BaseMixin
from sqlalchemy import Column, String, ForeignKey, Numeric, Date, Text, Enum, Uuid
from sqlalchemy.orm import relationship
from datetime import date
import enum


class DocumentType(str, enum.Enum):
    """Tipos de documento del cliente"""
    CPF = "CPF"       # Persona natural
    CNPJ = "CNPJ"     # Persona jurídica
    NONE = "N/A"      # Sin documento


class Customer(Base, BaseMixin):
    __tablename__ = "customers"

    name = Column(String(200), nullable=False, index=True)
    document_type = Column(Enum(DocumentType), nullable=False, default=DocumentType.NONE)
    document_number = Column(String(20), nullable=True, index=True)
    phone = Column(String(50), nullable=False)
    email = Column(String(100), nullable=True)
    address = Column(Text, nullable=True)
    city = Column(String(100), nullable=True)
    postal_code = Column(String(20), nullable=True)

    # Relationships
    down_payments = relationship(
        "DownPayment",
        back_populates="customer",
        cascade="all, delete-orphan",
        order_by="DownPayment.date"
    )


class DownPayment(Base, BaseMixin):
    """Anticipo recibido de un cliente"""
    __tablename__ = "down_payments"

    customer_id = Column(Uuid(as_uuid=True), ForeignKey("customers.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Numeric(15, 2), nullable=False)
    date = Column(Date, nullable=False, default=date.today)
    description = Column(String(255), nullable=True)

    # Relationships
    customer = relationship("Customer", back_populates="down_payments")

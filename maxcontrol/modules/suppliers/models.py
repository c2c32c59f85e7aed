"""
Modelos SQLAlchemy para el módulo de Proveedores

- Proveedores (Supplier)
- Deudas con el proveedor (SupplierDebt)
- Créditos / abonos a favor (SupplierCredit)

Al eliminar un proveedor se eliminan sus deudas y créditos.
"""

from maxcontrol.database.database import Base
from maxcontrol.common.mixins import BaseMixin
from sqlalchemy import Column, String, ForeignKey, Numeric, Date, Text, Uuid
from sqlalchemy.orm import relationship
from datetime import date
import enum


class Supplier(Base, BaseMixin):
    __tablename__ = "suppliers"

    name = Column(String(200), nullable=False, index=True)
    cnpj = Column(String(20), nullable=True)
    phone = Column(String(50), nullable=True)
    email = Column(String(100), nullable=True)
    address = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)

    # Relationships
    debts = relationship("SupplierDebt", back_populates="supplier", cascade="all, delete-orphan")
    credits = relationship("SupplierCredit", back_populates="supplier", cascade="all, delete-orphan")


class SupplierDebt(Base, BaseMixin):
    """Compra o cuenta pendiente con el proveedor"""
    __tablename__ = "supplier_debts"

    supplier_id = Column(Uuid(as_uuid=True), ForeignKey("suppliers.id", ondelete="CASCADE"), nullable=False, index=True)
    description = Column(String(255), nullable=True)
    total_amount = Column(Numeric(15, 2), nullable=False)
    date_added = Column(Date, nullable=False, default=date.today)

    supplier = relationship("Supplier", back_populates="debts")


class SupplierCredit(Base, BaseMixin):
    """Pago o abono realizado al proveedor"""
    __tablename__ = "supplier_credits"

    supplier_id = Column(Uuid(as_uuid=True), ForeignKey("suppliers.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Numeric(15, 2), nullable=False)
    date = Column(Date, nullable=False, default=date.today)
    description = Column(String(255), nullable=True)

    supplier = relationship("Supplier", back_populates="credits")


class TransactionType(str, enum.Enum):
    """Tipo de movimiento con el proveedor"""
    DEBT = "debt"
    CREDIT = "credit"

"""
Modelos SQLAlchemy para Cuentas por Pagar

Una entrada puede ser individual o pertenecer a una serie de cuotas
generada a partir de una sola solicitud (series_id compartido).
"""

from maxcontrol.database.database import Base
from maxcontrol.common.mixins import BaseMixin
from sqlalchemy import Column, String, Boolean, Integer, Numeric, Date, Text
import enum


class Cadence(str, enum.Enum):
    """Periodicidad de las cuotas"""
    NONE = "none"        # Entrada única
    WEEKLY = "weekly"    # Cada 7 días
    MONTHLY = "monthly"  # Cada mes calendario


class AccountsPayableEntry(Base, BaseMixin):
    __tablename__ = "accounts_payable"

    name = Column(String(255), nullable=False)
    amount = Column(Numeric(15, 2), nullable=False)
    due_date = Column(Date, nullable=False, index=True)
    is_paid = Column(Boolean, nullable=False, default=False)
    notes = Column(Text, nullable=True)

    # Solo para cuotas de una serie
    series_id = Column(String(64), nullable=True, index=True)
    total_installments_in_series = Column(Integer, nullable=True)
    installment_number_of_series = Column(Integer, nullable=True)

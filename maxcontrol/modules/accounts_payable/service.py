"""
Servicios de negocio para Cuentas por Pagar
"""

from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional, Dict
from uuid import UUID
import logging

from maxcontrol.modules.accounts_payable.installments import build_installment_plan
from maxcontrol.modules.accounts_payable.models import AccountsPayableEntry
from maxcontrol.modules.accounts_payable.schemas import (
    AccountsPayableCreate, AccountsPayableUpdate, SeriesDeleteResult
)

logger = logging.getLogger(__name__)


class AccountsPayableService:
    def __init__(self, db: Session):
        self.db = db

    def get_entries(self, is_paid: Optional[bool] = None) -> List[AccountsPayableEntry]:
        """Listar entradas por fecha de vencimiento"""
        query = self.db.query(AccountsPayableEntry)
        if is_paid is not None:
            query = query.filter(AccountsPayableEntry.is_paid == is_paid)
        return query.order_by(
            AccountsPayableEntry.due_date.asc(),
            AccountsPayableEntry.installment_number_of_series.asc()
        ).all()

    def get_entry_by_id(self, entry_id: UUID) -> AccountsPayableEntry:
        entry = self.db.query(AccountsPayableEntry).filter(AccountsPayableEntry.id == entry_id).first()
        if not entry:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Cuenta por pagar no encontrada"
            )
        return entry

    def create_entries(self, data: AccountsPayableCreate) -> List[AccountsPayableEntry]:
        """
        Crear una entrada o una serie de cuotas

        Todas las cuotas de la serie se guardan en una sola transacción: si
        falla alguna, no se guarda ninguna.
        """
        plan = build_installment_plan(
            name=data.name,
            total_amount=data.total_amount,
            first_due_date=data.due_date,
            cadence=data.cadence,
            installment_count=data.number_of_installments,
            notes=data.notes,
            is_paid=data.is_paid
        )

        try:
            entries = [AccountsPayableEntry(**planned.model_dump()) for planned in plan]
            self.db.add_all(entries)
            self.db.commit()
            for entry in entries:
                self.db.refresh(entry)

            if entries[0].series_id:
                logger.info(f"Series {entries[0].series_id} created with {len(entries)} installments for '{data.name}'")
            else:
                logger.info(f"Accounts payable entry '{data.name}' created")
            return entries

        except Exception:
            self.db.rollback()
            logger.exception(f"Error creating accounts payable for '{data.name}'")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error creando cuentas por pagar"
            )

    def update_entry(self, entry_id: UUID, data: AccountsPayableUpdate) -> AccountsPayableEntry:
        """Actualizar una entrada. Los datos de serie no cambian."""
        entry = self.get_entry_by_id(entry_id)
        try:
            for field, value in data.model_dump().items():
                setattr(entry, field, value)
            self.db.commit()
            self.db.refresh(entry)
            return entry
        except Exception:
            self.db.rollback()
            logger.exception(f"Error updating accounts payable entry {entry_id}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error actualizando cuenta por pagar"
            )

    def toggle_paid(self, entry_id: UUID) -> AccountsPayableEntry:
        """Marcar como pagada / pendiente"""
        entry = self.get_entry_by_id(entry_id)
        try:
            entry.is_paid = not entry.is_paid
            self.db.commit()
            self.db.refresh(entry)
            return entry
        except Exception:
            self.db.rollback()
            logger.exception(f"Error toggling accounts payable entry {entry_id}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error actualizando cuenta por pagar"
            )

    def delete_entry(self, entry_id: UUID) -> Dict[str, str]:
        entry = self.get_entry_by_id(entry_id)
        try:
            self.db.delete(entry)
            self.db.commit()
            logger.info(f"Accounts payable entry {entry_id} deleted")
            return {"message": "Cuenta por pagar eliminada"}
        except Exception:
            self.db.rollback()
            logger.exception(f"Error deleting accounts payable entry {entry_id}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error eliminando cuenta por pagar"
            )

    def delete_series(self, series_id: str) -> SeriesDeleteResult:
        """Eliminar todas las cuotas de una serie"""
        try:
            deleted = self.db.query(AccountsPayableEntry).filter(
                AccountsPayableEntry.series_id == series_id
            ).delete(synchronize_session=False)

            if not deleted:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="No se encontraron cuotas para esta serie"
                )

            self.db.commit()
            logger.info(f"Series {series_id} deleted ({deleted} entries)")
            return SeriesDeleteResult(
                series_id=series_id,
                deleted=deleted,
                message=f"{deleted} cuotas de la serie eliminadas"
            )
        except HTTPException:
            self.db.rollback()
            raise
        except Exception:
            self.db.rollback()
            logger.exception(f"Error deleting series {series_id}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error eliminando la serie"
            )

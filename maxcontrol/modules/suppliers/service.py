"""
Servicios de negocio para el módulo de Proveedores
"""

from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy import func
from decimal import Decimal
from typing import List, Dict
from uuid import UUID
import logging

from maxcontrol.modules.suppliers.models import (
    Supplier, SupplierDebt, SupplierCredit, TransactionType
)
from maxcontrol.modules.suppliers.schemas import (
    SupplierCreate, SupplierUpdate, SupplierDebtCreate, SupplierCreditCreate, SupplierBalance
)

logger = logging.getLogger(__name__)


class SupplierService:
    """Servicio para proveedores y sus movimientos"""

    def __init__(self, db: Session):
        self.db = db

    # ===== SUPPLIERS =====

    def get_suppliers(self) -> List[Supplier]:
        return self.db.query(Supplier).order_by(Supplier.name.asc()).all()

    def get_supplier_by_id(self, supplier_id: UUID) -> Supplier:
        supplier = self.db.query(Supplier).filter(Supplier.id == supplier_id).first()
        if not supplier:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Proveedor no encontrado"
            )
        return supplier

    def create_supplier(self, data: SupplierCreate) -> Supplier:
        try:
            supplier = Supplier(**data.model_dump())
            self.db.add(supplier)
            self.db.commit()
            self.db.refresh(supplier)
            logger.info(f"Supplier {supplier.name} created")
            return supplier
        except Exception:
            self.db.rollback()
            logger.exception("Error creating supplier")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error creando proveedor"
            )

    def update_supplier(self, supplier_id: UUID, data: SupplierUpdate) -> Supplier:
        supplier = self.get_supplier_by_id(supplier_id)
        try:
            for field, value in data.model_dump().items():
                setattr(supplier, field, value)
            self.db.commit()
            self.db.refresh(supplier)
            return supplier
        except Exception:
            self.db.rollback()
            logger.exception(f"Error updating supplier {supplier_id}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error actualizando proveedor"
            )

    def delete_supplier(self, supplier_id: UUID) -> Dict[str, str]:
        """Eliminar proveedor junto con todas sus deudas y créditos"""
        supplier = self.get_supplier_by_id(supplier_id)
        try:
            self.db.delete(supplier)
            self.db.commit()
            logger.info(f"Supplier {supplier_id} deleted with its debts and credits")
            return {"message": "Proveedor y registros asociados eliminados"}
        except Exception:
            self.db.rollback()
            logger.exception(f"Error deleting supplier {supplier_id}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error eliminando proveedor"
            )

    # ===== DEBTS & CREDITS =====

    def get_supplier_debts(self, supplier_id: UUID) -> List[SupplierDebt]:
        self.get_supplier_by_id(supplier_id)
        return self.db.query(SupplierDebt).filter(
            SupplierDebt.supplier_id == supplier_id
        ).order_by(SupplierDebt.date_added.desc()).all()

    def get_supplier_credits(self, supplier_id: UUID) -> List[SupplierCredit]:
        self.get_supplier_by_id(supplier_id)
        return self.db.query(SupplierCredit).filter(
            SupplierCredit.supplier_id == supplier_id
        ).order_by(SupplierCredit.date.desc()).all()

    def get_all_debts(self) -> List[SupplierDebt]:
        return self.db.query(SupplierDebt).order_by(SupplierDebt.date_added.desc()).all()

    def get_all_credits(self) -> List[SupplierCredit]:
        return self.db.query(SupplierCredit).order_by(SupplierCredit.date.desc()).all()

    def add_debt(self, supplier_id: UUID, data: SupplierDebtCreate) -> SupplierDebt:
        self.get_supplier_by_id(supplier_id)
        return self._add(SupplierDebt(supplier_id=supplier_id, **data.model_dump()), "deuda")

    def add_credit(self, supplier_id: UUID, data: SupplierCreditCreate) -> SupplierCredit:
        self.get_supplier_by_id(supplier_id)
        return self._add(SupplierCredit(supplier_id=supplier_id, **data.model_dump()), "crédito")

    def _add(self, transaction, label: str):
        try:
            self.db.add(transaction)
            self.db.commit()
            self.db.refresh(transaction)
            return transaction
        except Exception:
            self.db.rollback()
            logger.exception(f"Error adding supplier {label}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error registrando {label}"
            )

    def delete_transaction(self, transaction_type: TransactionType, transaction_id: UUID) -> Dict[str, str]:
        """Eliminar una deuda o un crédito por ID"""
        model = SupplierDebt if transaction_type == TransactionType.DEBT else SupplierCredit
        try:
            deleted = self.db.query(model).filter(
                model.id == transaction_id
            ).delete(synchronize_session=False)
            if not deleted:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Movimiento no encontrado"
                )
            self.db.commit()
            logger.info(f"Supplier {transaction_type.value} {transaction_id} deleted")
            return {"message": "Movimiento eliminado"}
        except HTTPException:
            self.db.rollback()
            raise
        except Exception:
            self.db.rollback()
            logger.exception(f"Error deleting supplier {transaction_type.value} {transaction_id}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error eliminando movimiento"
            )

    def get_balance(self, supplier_id: UUID) -> SupplierBalance:
        """Saldo pendiente con el proveedor: deudas menos créditos"""
        self.get_supplier_by_id(supplier_id)

        total_debts = self.db.query(
            func.coalesce(func.sum(SupplierDebt.total_amount), 0)
        ).filter(SupplierDebt.supplier_id == supplier_id).scalar()

        total_credits = self.db.query(
            func.coalesce(func.sum(SupplierCredit.amount), 0)
        ).filter(SupplierCredit.supplier_id == supplier_id).scalar()

        debts = Decimal(str(total_debts)).quantize(Decimal('0.01'))
        credits = Decimal(str(total_credits)).quantize(Decimal('0.01'))

        return SupplierBalance(
            supplier_id=supplier_id,
            total_debts=debts,
            total_credits=credits,
            balance=debts - credits
        )

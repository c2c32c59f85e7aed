"""
Servicios de negocio para el módulo de Clientes

- CRUD de clientes
- Sincronización de anticipos en una sola transacción
- Crédito disponible: anticipos recibidos menos anticipos ya aplicados en cotizaciones
"""

from fastapi import HTTPException, status
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import func
from decimal import Decimal
from typing import List, Dict
from uuid import UUID
import logging

from maxcontrol.modules.customers.models import Customer, DownPayment
from maxcontrol.modules.customers.schemas import CustomerCreate, CustomerUpdate, CustomerOut
from maxcontrol.modules.quotes.models import Quote

logger = logging.getLogger(__name__)


class CustomerService:
    """Servicio principal para gestión de clientes"""

    def __init__(self, db: Session):
        self.db = db

    def _applied_down_payments(self, customer_ids: List[UUID]) -> Dict[UUID, Decimal]:
        if not customer_ids:
            return {}
        rows = self.db.query(
            Quote.customer_id,
            func.coalesce(func.sum(Quote.down_payment_applied), 0)
        ).filter(
            Quote.customer_id.in_(customer_ids)
        ).group_by(Quote.customer_id).all()
        return {customer_id: Decimal(str(total)) for customer_id, total in rows}

    def _to_out(self, customer: Customer, applied: Decimal) -> CustomerOut:
        received = sum((dp.amount for dp in customer.down_payments), Decimal('0'))
        out = CustomerOut.model_validate(customer)
        out.available_credit = (Decimal(received) - applied).quantize(Decimal('0.01'))
        return out

    def get_customer(self, customer_id: UUID) -> Customer:
        customer = self.db.query(Customer).options(
            selectinload(Customer.down_payments)
        ).filter(Customer.id == customer_id).first()

        if not customer:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Cliente no encontrado"
            )
        return customer

    def get_customer_detail(self, customer_id: UUID) -> CustomerOut:
        customer = self.get_customer(customer_id)
        applied = self._applied_down_payments([customer.id])
        return self._to_out(customer, applied.get(customer.id, Decimal('0')))

    def list_customers(self) -> List[CustomerOut]:
        """Listar clientes con sus anticipos, ordenados por nombre"""
        customers = self.db.query(Customer).options(
            selectinload(Customer.down_payments)
        ).order_by(Customer.name.asc()).all()

        applied = self._applied_down_payments([c.id for c in customers])
        return [self._to_out(c, applied.get(c.id, Decimal('0'))) for c in customers]

    def create_customer(self, data: CustomerCreate) -> CustomerOut:
        """Crear cliente (sin anticipos)"""
        try:
            customer = Customer(**data.model_dump())
            self.db.add(customer)
            self.db.commit()
            self.db.refresh(customer)
            logger.info(f"Customer {customer.name} created")
            return self._to_out(customer, Decimal('0'))
        except Exception:
            self.db.rollback()
            logger.exception("Error creating customer")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error creando cliente"
            )

    def update_customer(self, customer_id: UUID, data: CustomerUpdate) -> CustomerOut:
        """
        Actualizar cliente

        Si se envía la lista de anticipos, reemplaza por completo los anticipos
        actuales. Datos del cliente y anticipos se guardan en la misma transacción.
        """
        customer = self.get_customer(customer_id)
        try:
            values = data.model_dump(exclude={"down_payments"})
            for field, value in values.items():
                setattr(customer, field, value)

            if data.down_payments is not None:
                customer.down_payments.clear()
                self.db.flush()
                for dp in data.down_payments:
                    payment = DownPayment(
                        amount=dp.amount,
                        date=dp.date,
                        description=dp.description
                    )
                    if dp.id:
                        payment.id = dp.id
                    customer.down_payments.append(payment)

            self.db.commit()
            self.db.refresh(customer)
            logger.info(f"Customer {customer_id} updated ({len(customer.down_payments)} down payments)")
            return self.get_customer_detail(customer_id)

        except Exception:
            self.db.rollback()
            logger.exception(f"Error updating customer {customer_id}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error actualizando cliente"
            )

    def delete_customer(self, customer_id: UUID) -> Dict[str, str]:
        """
        Eliminar cliente

        Las cotizaciones del cliente se conservan sin referencia al cliente;
        los anticipos se eliminan junto con el cliente.
        """
        customer = self.get_customer(customer_id)
        try:
            unlinked = self.db.query(Quote).filter(
                Quote.customer_id == customer_id
            ).update({Quote.customer_id: None}, synchronize_session=False)

            self.db.delete(customer)
            self.db.commit()
            logger.info(f"Customer {customer_id} deleted, {unlinked} quotes unlinked")
            return {"message": "Cliente eliminado y cotizaciones desvinculadas"}

        except Exception:
            self.db.rollback()
            logger.exception(f"Error deleting customer {customer_id}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error eliminando cliente"
            )

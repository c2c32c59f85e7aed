"""
Generación de series de cuotas para cuentas por pagar

Función pura: recibe la solicitud y devuelve las entradas a persistir.
- Cada cuota = total / n redondeado a 2 decimales; la última absorbe la
  diferencia para que la suma sea exactamente el total.
- Vencimientos: la primera fecha tal cual, luego +i semanas o +i meses
  calendario (31/01 + 1 mes = último día de febrero).
- Nombre "{name} - {i}/{n}"; las notas solo van en la primera cuota.
"""

from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional
from uuid import uuid4

from dateutil.relativedelta import relativedelta

from maxcontrol.modules.accounts_payable.models import Cadence
from maxcontrol.modules.accounts_payable.schemas import PlannedEntry

CENT = Decimal('0.01')


def new_series_id() -> str:
    return f"series_{uuid4()}"


def installment_due_date(first_due_date: date, cadence: Cadence, index: int) -> date:
    """Vencimiento de la cuota index (0 = primera)"""
    if index == 0:
        return first_due_date
    if cadence == Cadence.WEEKLY:
        return first_due_date + timedelta(weeks=index)
    # relativedelta ajusta al último día válido del mes
    return first_due_date + relativedelta(months=index)


def split_amount(total_amount: Decimal, count: int) -> List[Decimal]:
    """Dividir total_amount en count partes que suman exactamente el total"""
    total = Decimal(total_amount).quantize(CENT, rounding=ROUND_HALF_UP)
    per_installment = (total / count).quantize(CENT, rounding=ROUND_HALF_UP)
    last = total - per_installment * (count - 1)
    return [per_installment] * (count - 1) + [last]


def build_installment_plan(
    name: str,
    total_amount: Decimal,
    first_due_date: date,
    cadence: Cadence,
    installment_count: Optional[int],
    notes: Optional[str] = None,
    is_paid: bool = False,
    series_id: Optional[str] = None,
) -> List[PlannedEntry]:
    """
    Expandir una solicitud en las entradas a crear.

    Con cadence none o installment_count vacío o <= 1 devuelve una sola entrada sin
    datos de serie (is_paid se respeta). En otro caso devuelve
    installment_count cuotas no pagadas que comparten series_id.
    """
    if cadence == Cadence.NONE or not installment_count or installment_count <= 1:
        return [PlannedEntry(
            name=name,
            amount=Decimal(total_amount).quantize(CENT, rounding=ROUND_HALF_UP),
            due_date=first_due_date,
            is_paid=is_paid,
            notes=notes
        )]

    series_id = series_id or new_series_id()
    amounts = split_amount(total_amount, installment_count)

    return [
        PlannedEntry(
            name=f"{name} - {i + 1}/{installment_count}",
            amount=amount,
            due_date=installment_due_date(first_due_date, cadence, i),
            is_paid=False,
            notes=notes if i == 0 else None,
            series_id=series_id,
            total_installments_in_series=installment_count,
            installment_number_of_series=i + 1
        )
        for i, amount in enumerate(amounts)
    ]

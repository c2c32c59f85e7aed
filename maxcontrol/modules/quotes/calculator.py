"""
Cálculo de totales de cotizaciones
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional

from maxcontrol.core.config import settings
from maxcontrol.modules.quotes.models import DiscountType
from maxcontrol.modules.quotes.schemas import QuoteItem, QuoteTotals

CENT = Decimal('0.01')
AREA_PRECISION = Decimal('0.001')


def round_money(value) -> Decimal:
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


class QuoteCalculator:
    """Helper para calcular líneas y totales de una cotización"""

    def __init__(self, card_surcharge_percentage: Optional[float] = None):
        if card_surcharge_percentage is None:
            card_surcharge_percentage = settings.CARD_SURCHARGE_PERCENTAGE
        self.card_surcharge = Decimal(str(card_surcharge_percentage))

    def calculate_line(self, item: QuoteItem) -> QuoteItem:
        """
        Calcular cantidad y total de una línea

        Para productos por m2 con medidas: cantidad = ancho x alto x piezas.

        Returns:
            Copia del ítem con quantity y total_price calculados
        """
        quantity = item.quantity
        if item.uses_area:
            pieces = item.item_count_for_area_calc or 1
            quantity = (item.width * item.height * pieces).quantize(AREA_PRECISION, rounding=ROUND_HALF_UP)

        return item.model_copy(update={
            "quantity": quantity,
            "total_price": round_money(quantity * item.unit_price)
        })

    def calculate_discount(self, subtotal: Decimal, discount_type: DiscountType, discount_value: Decimal) -> Decimal:
        if discount_type == DiscountType.PERCENTAGE:
            return round_money(subtotal * discount_value / Decimal('100'))
        if discount_type == DiscountType.FIXED:
            return round_money(min(discount_value, subtotal))
        return Decimal('0.00')

    def calculate_totals(
        self,
        items: List[QuoteItem],
        discount_type: DiscountType,
        discount_value: Decimal
    ) -> QuoteTotals:
        """
        Calcular totales de la cotización

        Args:
            items: Ítems ya calculados con calculate_line
            discount_type: none, percentage o fixed
            discount_value: Porcentaje o valor fijo del descuento

        Returns:
            Subtotal, descuento, total en efectivo y total con tarjeta
        """
        subtotal = round_money(sum((item.total_price for item in items), Decimal('0')))
        discount = self.calculate_discount(subtotal, discount_type, discount_value)
        total_cash = subtotal - discount
        total_card = round_money(total_cash * (1 + self.card_surcharge / Decimal('100')))

        return QuoteTotals(
            subtotal=subtotal,
            discount_amount_calculated=discount,
            subtotal_after_discount=total_cash,
            total_cash=total_cash,
            total_card=total_card
        )

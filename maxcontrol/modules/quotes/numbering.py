"""
Numeración de cotizaciones: ORC-YYMMDD-NNN

El sufijo es secuencial por fecha. El contador vive en quote_sequences y se
incrementa con bloqueo de fila dentro de la misma transacción que inserta la
cotización. Si todavía no existe contador para la fecha, se inicializa con el
mayor número ya usado en quotes para ese prefijo.
"""

from datetime import date
from typing import Optional
import logging

from sqlalchemy.orm import Session

from maxcontrol.core.config import settings
from maxcontrol.modules.quotes.models import Quote, QuoteSequence

logger = logging.getLogger(__name__)


class QuoteNumberGenerator:

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def quote_number_prefix(day: date) -> str:
        """ORC- + fecha en formato YYMMDD"""
        return f"{settings.QUOTE_NUMBER_PREFIX}{day:%y%m%d}"

    @staticmethod
    def format_quote_number(prefix: str, sequence: int) -> str:
        return f"{prefix}-{sequence:0{settings.QUOTE_SEQUENCE_PADDING}d}"

    @staticmethod
    def parse_sequence(quote_number: str) -> int:
        """Sufijo numérico después del último guión; 0 si no es numérico"""
        try:
            return int(quote_number.rsplit("-", 1)[1])
        except (IndexError, ValueError):
            return 0

    def last_used_sequence(self, prefix: str) -> int:
        """Mayor sufijo ya usado en quotes para el prefijo"""
        numbers = self.db.query(Quote.quote_number).filter(
            Quote.quote_number.like(f"{prefix}-%")
        ).all()
        return max((self.parse_sequence(n) for (n,) in numbers), default=0)

    def next_number(self, today: Optional[date] = None, resync: bool = False) -> str:
        """
        Reservar el siguiente número para la fecha dada (hoy por defecto).

        El incremento queda pendiente en la sesión; se confirma con el commit
        de la cotización o se descarta con su rollback. Con resync el contador
        se alinea primero con los números ya guardados en quotes.
        """
        prefix = self.quote_number_prefix(today or date.today())

        sequence = self.db.query(QuoteSequence).filter(
            QuoteSequence.date_prefix == prefix
        ).with_for_update().first()

        if not sequence:
            sequence = QuoteSequence(
                date_prefix=prefix,
                current_number=self.last_used_sequence(prefix)
            )
            self.db.add(sequence)
            self.db.flush()
        elif resync:
            sequence.current_number = max(sequence.current_number, self.last_used_sequence(prefix))

        sequence.current_number += 1
        number = self.format_quote_number(prefix, sequence.current_number)
        logger.debug(f"Quote number {number} reserved")
        return number

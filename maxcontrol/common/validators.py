"""
Validadores de documentos brasileños (CPF / CNPJ) y de valores monetarios
"""
import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP


CNPJ_FIRST_WEIGHTS = [5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2]
CNPJ_SECOND_WEIGHTS = [6] + CNPJ_FIRST_WEIGHTS

CENT = Decimal("0.01")
# Mayor valor que cabe en Numeric(15, 2)
MAX_MONEY = Decimal("9999999999999.99")


def only_digits(value: str) -> str:
    """Elimina puntos, guiones, barras y espacios"""
    return re.sub(r'\D', '', value or '')


def _cpf_digit(digits: str, first_weight: int) -> int:
    total = sum(int(d) * w for d, w in zip(digits, range(first_weight, 1, -1)))
    rest = (total * 10) % 11
    return 0 if rest == 10 else rest


def validate_cpf(cpf: str) -> bool:
    """
    Valida CPF.
    - 11 dígitos
    - No todos iguales (ej: 111.111.111-11)
    - Dos dígitos verificadores
    Ejemplo: 529.982.247-25
    """
    cleaned = only_digits(cpf)

    if len(cleaned) != 11:
        return False

    if cleaned == cleaned[0] * 11:
        return False

    first = _cpf_digit(cleaned[:9], 10)
    second = _cpf_digit(cleaned[:10], 11)

    return cleaned[-2:] == f"{first}{second}"


def _cnpj_digit(digits: str, weights: list) -> int:
    rest = sum(int(d) * w for d, w in zip(digits, weights)) % 11
    return 0 if rest < 2 else 11 - rest


def validate_cnpj(cnpj: str) -> bool:
    """
    Valida CNPJ.
    - 14 dígitos
    - No todos iguales
    - Dos dígitos verificadores
    Ejemplo: 11.222.333/0001-81
    """
    cleaned = only_digits(cnpj)

    if len(cleaned) != 14:
        return False

    if cleaned == cleaned[0] * 14:
        return False

    first = _cnpj_digit(cleaned[:12], CNPJ_FIRST_WEIGHTS)
    second = _cnpj_digit(cleaned[:13], CNPJ_SECOND_WEIGHTS)

    return cleaned[-2:] == f"{first}{second}"


def format_cpf(cpf: str) -> str:
    """
    Formatea CPF al formato estándar XXX.XXX.XXX-XX
    """
    if not validate_cpf(cpf):
        return cpf  # Retorna sin cambios si no es válido

    c = only_digits(cpf)
    return f"{c[:3]}.{c[3:6]}.{c[6:9]}-{c[9:]}"


def format_cnpj(cnpj: str) -> str:
    """
    Formatea CNPJ al formato estándar XX.XXX.XXX/XXXX-XX
    """
    if not validate_cnpj(cnpj):
        return cnpj  # Retorna sin cambios si no es válido

    c = only_digits(cnpj)
    return f"{c[:2]}.{c[2:5]}.{c[5:8]}/{c[8:12]}-{c[12:]}"


def validate_money(value):
    """
    Redondea un valor monetario a centavos (ROUND_HALF_UP).

    Lanza ValueError si el valor no cabe en Numeric(15, 2), para que llegue
    al cliente como error de validación.
    """
    if value is None:
        return value
    try:
        rounded = Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValueError('Valor fuera de rango')
    if abs(rounded) > MAX_MONEY:
        raise ValueError('Valor fuera de rango')
    return rounded

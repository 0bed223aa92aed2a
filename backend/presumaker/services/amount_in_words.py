"""
Monto en letras
Proyecto: PresuMaker (Generador de Presupuestos)

Escribe un importe en letras, en español, para el total del documento:
    2500 CRC -> "DOS MIL QUINIENTOS COLONES CON 00/100"

Lógica explícita por grupos de dígitos (unidades, decenas, centenas,
miles, millones, billones); no depende de locale.
"""

from decimal import Decimal
from typing import Union

from presumaker.schemas.budget import Currency
from presumaker.services.totals_service import round_money

UNITS = ("", "UN", "DOS", "TRES", "CUATRO", "CINCO", "SEIS", "SIETE", "OCHO", "NUEVE")

TEENS = {10: "DIEZ", 11: "ONCE", 12: "DOCE", 13: "TRECE", 14: "CATORCE", 15: "QUINCE"}

TENS = {
    3: "TREINTA",
    4: "CUARENTA",
    5: "CINCUENTA",
    6: "SESENTA",
    7: "SETENTA",
    8: "OCHENTA",
    9: "NOVENTA",
}

HUNDREDS = {
    2: "DOSCIENTOS",
    3: "TRESCIENTOS",
    4: "CUATROCIENTOS",
    5: "QUINIENTOS",
    6: "SEISCIENTOS",
    7: "SETECIENTOS",
    8: "OCHOCIENTOS",
    9: "NOVECIENTOS",
}

CURRENCY_NAMES = {
    Currency.CRC: "COLONES",
    Currency.USD: "DÓLARES",
}


def _join(*parts: str) -> str:
    return " ".join(part for part in parts if part)


def _tens(number: int) -> str:
    """0-99."""
    tens, unit = divmod(number, 10)
    if tens == 0:
        return UNITS[unit]
    if tens == 1:
        return TEENS.get(number) or "DIECI" + UNITS[unit]
    if tens == 2:
        return "VEINTE" if unit == 0 else "VEINTI" + UNITS[unit]
    if unit == 0:
        return TENS[tens]
    return f"{TENS[tens]} Y {UNITS[unit]}"


def _hundreds(number: int) -> str:
    """0-999."""
    hundreds, rest = divmod(number, 100)
    if hundreds == 0:
        return _tens(rest)
    if hundreds == 1:
        return "CIEN" if rest == 0 else _join("CIENTO", _tens(rest))
    return _join(HUNDREDS[hundreds], _tens(rest))


def _thousands(number: int) -> str:
    """0-999999; también sirve para contar millones."""
    thousands, rest = divmod(number, 1000)
    if thousands == 0:
        prefix = ""
    elif thousands == 1:
        prefix = "MIL"
    else:
        prefix = _join(_hundreds(thousands), "MIL")
    return _join(prefix, _hundreds(rest))


def _millions(number: int) -> str:
    """0-999999999999."""
    millions, rest = divmod(number, 1_000_000)
    if millions == 0:
        prefix = ""
    elif millions == 1:
        prefix = "UN MILLON"
    else:
        prefix = _join(_thousands(millions), "MILLONES")
    return _join(prefix, _thousands(rest))


def _billions(number: int) -> str:
    """Cualquier entero; los billones se cuentan a su vez en letras."""
    billions, rest = divmod(number, 10**12)
    if billions == 0:
        prefix = ""
    elif billions == 1:
        prefix = "UN BILLON"
    else:
        prefix = _join(_billions(billions), "BILLONES")
    return _join(prefix, _millions(rest))


def integer_to_words(number: int) -> str:
    """
    Escribe un entero no negativo en letras.

    >>> integer_to_words(0)
    'CERO'
    >>> integer_to_words(1_000_021)
    'UN MILLON VEINTIUN'
    """
    if number == 0:
        return "CERO"
    return _billions(number)


def amount_to_words(amount: Union[Decimal, int, float, str], currency: Currency) -> str:
    """
    Forma legal en letras de un importe monetario.

    El importe se redondea a dos decimales antes de separar entero
    y céntimos, así los céntimos nunca llegan a 100.

    Args:
        amount: Importe no negativo (se usa su valor absoluto)
        currency: Moneda, define el sufijo en plural

    Returns:
        Texto como "CIENTO UN COLONES CON 50/100"
    """
    value = round_money(Decimal(str(amount)).copy_abs())
    integer_part = int(value)
    cents = int((value - integer_part) * 100)
    currency_name = CURRENCY_NAMES[Currency(currency)]
    return f"{integer_to_words(integer_part)} {currency_name} CON {cents:02d}/100"


__all__ = [
    "integer_to_words",
    "amount_to_words",
]

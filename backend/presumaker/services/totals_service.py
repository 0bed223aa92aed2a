"""
Calculadora de totales
Proyecto: PresuMaker (Generador de Presupuestos)

Convierte líneas de detalle + configuración en un TotalsSummary.

Política de tolerancia: ningún campo numérico genera error. Vacíos,
textos no numéricos, NaN e infinitos valen cero; el tipo de cambio
inválido o cero vale 1. También valen cero los textos con guion bajo
("1_000") y las magnitudes fuera de 10^-18 .. 10^18.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Any, Iterable

from presumaker.schemas.budget import BudgetConfig, BudgetItem, TotalsSummary

ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")
CENTS = Decimal("0.01")

# Exponente decimal máximo (en valor absoluto) de una entrada numérica
MAX_EXPONENT = 18


def to_decimal(value: Any) -> Decimal:
    """
    Convierte cualquier entrada a Decimal sin lanzar errores.

    Args:
        value: Número, texto o None

    Returns:
        Decimal equivalente, o 0 si el valor no es un número finito
        o su magnitud queda fuera de 10^-MAX_EXPONENT .. 10^MAX_EXPONENT
    """
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        result = value
    else:
        text = str(value).strip()
        if not text or "_" in text:
            return ZERO
        try:
            result = Decimal(text)
        except InvalidOperation:
            return ZERO
    if not result.is_finite() or result.is_zero():
        return ZERO
    if abs(result.adjusted()) > MAX_EXPONENT:
        return ZERO
    return result


def round_money(amount: Decimal) -> Decimal:
    """Redondea a céntimos (HALF_UP) con la precisión que pida el importe."""
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, amount.adjusted() + 4)
        return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def exchange_rate_of(config: BudgetConfig) -> Decimal:
    """Tipo de cambio efectivo (1 si falta, no es numérico o es cero)."""
    rate = to_decimal(config.exchange_rate)
    return rate if rate != ZERO else ONE


def convert_amount(amount: Decimal, config: BudgetConfig) -> Decimal:
    """
    Pasa un importe de la moneda base a la moneda de presentación.

    Identidad en CRC; división entre el tipo de cambio en USD.
    """
    if config.is_alternate_currency:
        return amount / exchange_rate_of(config)
    return amount


def line_subtotal(item: BudgetItem) -> Decimal:
    """Cantidad x precio unitario en la moneda base."""
    return to_decimal(item.quantity) * to_decimal(item.unit_price)


def calculate_totals(items: Iterable[BudgetItem], config: BudgetConfig) -> TotalsSummary:
    """
    Calcula el resumen de totales.

    El descuento se aplica primero sobre el subtotal; el impuesto se
    calcula sobre la base imponible ya descontada.

    Args:
        items: Líneas de detalle (precios en CRC)
        config: Descuento, impuesto, moneda y tipo de cambio

    Returns:
        TotalsSummary en la moneda de presentación
    """
    base_subtotal = sum((line_subtotal(item) for item in items), ZERO)
    subtotal = convert_amount(base_subtotal, config)

    discount_amount = subtotal * (to_decimal(config.discount_percent) / HUNDRED)
    taxable_amount = subtotal - discount_amount
    tax_amount = taxable_amount * (to_decimal(config.tax_percent) / HUNDRED)

    return TotalsSummary(
        subtotal=subtotal,
        discount_amount=discount_amount,
        taxable_amount=taxable_amount,
        tax_amount=tax_amount,
        total=taxable_amount + tax_amount,
    )


__all__ = [
    "to_decimal",
    "round_money",
    "exchange_rate_of",
    "convert_amount",
    "line_subtotal",
    "calculate_totals",
]

"""
Pruebas de la calculadora de totales.

Ejecutar con: pytest tests/test_totals_service.py -v
"""

from decimal import Decimal

import pytest

from presumaker.schemas.budget import BudgetConfig, BudgetItem, Currency
from presumaker.services.totals_service import (
    calculate_totals,
    convert_amount,
    exchange_rate_of,
    line_subtotal,
    round_money,
    to_decimal,
)


class TestToDecimal:
    """Conversión tolerante de entradas del formulario."""

    @pytest.mark.parametrize("value,expected", [
        ("12.5", Decimal("12.5")),
        (" 3 ", Decimal("3")),
        (7, Decimal("7")),
        (Decimal("0.01"), Decimal("0.01")),
        ("1e2", Decimal("100")),
    ])
    def test_numeric_values(self, value, expected):
        assert to_decimal(value) == expected

    @pytest.mark.parametrize("value", [None, "", "   ", "abc", "12,5x", "NaN", "Infinity", True])
    def test_invalid_values_are_zero(self, value):
        assert to_decimal(value) == Decimal("0")

    @pytest.mark.parametrize("value", ["1_000", "1_000.50", "_5"])
    def test_underscore_separators_are_rejected(self, value):
        """Solo se aceptan números escritos como en el formulario."""
        assert to_decimal(value) == Decimal("0")

    @pytest.mark.parametrize("value", ["1e999999", "-1e999999", "1e-999999", "1E+19", Decimal("1e50")])
    def test_out_of_range_magnitude_is_zero(self, value):
        assert to_decimal(value) == Decimal("0")

    def test_magnitude_limits_are_inclusive(self):
        assert to_decimal("9.99e18") == Decimal("9.99e18")
        assert to_decimal("1e-18") == Decimal("1e-18")


class TestCalculateTotals:
    """Suma, descuento e impuesto."""

    def test_reference_scenario_in_base_currency(self, two_items, crc_config):
        """2 x 100 + 1 x 50, 10% de descuento, 13% de impuesto."""
        totals = calculate_totals(two_items, crc_config)

        assert totals.subtotal == Decimal("250")
        assert totals.discount_amount == Decimal("25")
        assert totals.taxable_amount == Decimal("225")
        assert totals.tax_amount == Decimal("29.25")
        assert totals.total == Decimal("254.25")

    def test_reference_scenario_in_dollars(self, two_items, usd_config):
        """Mismo presupuesto presentado en USD a 500."""
        totals = calculate_totals(two_items, usd_config)

        assert totals.subtotal == Decimal("0.50")
        assert totals.discount_amount == Decimal("0.05")
        assert totals.taxable_amount == Decimal("0.45")
        assert totals.tax_amount == Decimal("0.0585")
        assert totals.total == Decimal("0.5085")

    def test_subtotal_is_sum_of_lines(self):
        items = [
            BudgetItem(quantity="3", unit_price="10.50"),
            BudgetItem(quantity="0.5", unit_price="200"),
            BudgetItem(quantity=4, unit_price=1),
        ]
        totals = calculate_totals(items, BudgetConfig(discount_percent="", tax_percent=""))

        assert totals.subtotal == sum(line_subtotal(item) for item in items)
        assert totals.subtotal == Decimal("135.50")
        assert totals.total == totals.subtotal

    def test_invalid_fields_count_as_zero(self):
        """Cantidades, precios y porcentajes inválidos nunca producen error."""
        items = [
            BudgetItem(quantity="abc", unit_price="100"),
            BudgetItem(quantity="2", unit_price=""),
            BudgetItem(quantity="1", unit_price="40"),
        ]
        config = BudgetConfig(discount_percent="diez", tax_percent=None)

        totals = calculate_totals(items, config)

        assert totals.subtotal == Decimal("40")
        assert totals.discount_amount == Decimal("0")
        assert totals.tax_amount == Decimal("0")
        assert totals.total == Decimal("40")

    def test_discount_applies_before_tax(self):
        items = [BudgetItem(quantity=1, unit_price=1000)]
        config = BudgetConfig(discount_percent=50, tax_percent=10)

        totals = calculate_totals(items, config)

        # 10% de 500, no de 1000
        assert totals.tax_amount == Decimal("50")
        assert totals.total == Decimal("550")

    def test_totals_are_consistent(self, two_items, crc_config):
        totals = calculate_totals(two_items, crc_config)

        assert totals.taxable_amount == totals.subtotal - totals.discount_amount
        assert totals.total == totals.taxable_amount + totals.tax_amount

    def test_empty_item_list(self):
        totals = calculate_totals([], BudgetConfig())
        assert totals.total == Decimal("0")

    def test_huge_quantity_counts_as_zero(self):
        items = [
            BudgetItem(quantity="1e999999", unit_price="10"),
            BudgetItem(quantity="1", unit_price="40"),
        ]
        config = BudgetConfig(discount_percent="1e999999", tax_percent=13)

        totals = calculate_totals(items, config)

        assert totals.subtotal == Decimal("40")
        assert totals.discount_amount == Decimal("0")
        assert totals.total == Decimal("45.2")

    def test_largest_inputs_stay_finite(self):
        items = [BudgetItem(quantity="9e18", unit_price="9e18")]
        config = BudgetConfig(currency=Currency.USD, exchange_rate="1e-18", tax_percent=13)

        totals = calculate_totals(items, config)

        assert totals.total.is_finite()
        assert totals.total > Decimal("1e55")


class TestRoundMoney:
    """Redondeo a céntimos para presentación."""

    def test_half_up(self):
        assert round_money(Decimal("0.505")) == Decimal("0.51")
        assert round_money(Decimal("0.5085")) == Decimal("0.51")

    def test_amount_beyond_default_precision(self):
        """Importes de más de 28 dígitos se redondean sin InvalidOperation."""
        amount = Decimal("1234567890123456789012345678901.235")

        assert str(round_money(amount)) == "1234567890123456789012345678901.24"


class TestCurrencyConversion:
    """Conversión de la moneda base (CRC) a la de presentación."""

    def test_identity_in_base_currency(self):
        config = BudgetConfig(currency=Currency.CRC, exchange_rate="515")
        assert convert_amount(Decimal("1030"), config) == Decimal("1030")

    def test_division_in_alternate_currency(self):
        config = BudgetConfig(currency=Currency.USD, exchange_rate="515")
        assert convert_amount(Decimal("1030"), config) == Decimal("2")

    @pytest.mark.parametrize("rate", ["0", "", "abc", None, "0.00"])
    def test_invalid_rate_defaults_to_one(self, rate, two_items):
        config = BudgetConfig(currency=Currency.USD, exchange_rate=rate)

        assert exchange_rate_of(config) == Decimal("1")
        assert calculate_totals(two_items, config).subtotal == Decimal("250")

    def test_conversion_round_trip(self):
        config = BudgetConfig(currency=Currency.USD, exchange_rate="515.37")
        base = Decimal("123456.78")

        converted = convert_amount(base, config)

        assert abs(converted * exchange_rate_of(config) - base) < Decimal("1e-20")

    def test_rate_ignored_in_base_currency(self, two_items):
        config = BudgetConfig(currency=Currency.CRC, exchange_rate="0")
        assert calculate_totals(two_items, config).subtotal == Decimal("250")

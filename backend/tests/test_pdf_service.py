"""
Pruebas del PdfService: paginación, contexto de la plantilla y HTML.

WeasyPrint se reemplaza por un mock; el HTML se renderiza de verdad.

Ejecutar con: pytest tests/test_pdf_service.py -v
"""

import logging
from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest

from presumaker.schemas.budget import ClientData, CompanyData, DocumentMetadata, OfferConditions
from presumaker.services.pdf_service import (
    TEMPLATES_DIR,
    PdfService,
    embeddable_logo,
    format_amount,
    format_number,
    paginate,
)


@pytest.fixture
def pdf_service():
    return PdfService(items_per_page=14, page_size="letter")


# ============================================================
# Formato y paginación
# ============================================================


class TestFormatting:

    @pytest.mark.parametrize("amount,expected", [
        (Decimal("0"), "0.00"),
        (Decimal("1234.5"), "1,234.50"),
        (Decimal("0.505"), "0.51"),
        (Decimal("1000000"), "1,000,000.00"),
        (Decimal("1E+30"), "1" + ",000" * 10 + ".00"),
        (Decimal("1234567890123456789012345678901.235"), "1,234,567,890,123,456,789,012,345,678,901.24"),
    ])
    def test_format_amount(self, amount, expected):
        assert format_amount(amount) == expected

    @pytest.mark.parametrize("value,expected", [
        ("2", "2"),
        ("2.50", "2.5"),
        ("", "0"),
        ("abc", "0"),
        (Decimal("0.125"), "0.125"),
    ])
    def test_format_number(self, value, expected):
        assert format_number(value) == expected


class TestPaginate:

    @pytest.mark.parametrize("count,per_page,sizes", [
        (0, 14, [0]),
        (1, 14, [1]),
        (14, 14, [14]),
        (15, 14, [14, 1]),
        (30, 14, [14, 14, 2]),
        (5, 1, [1, 1, 1, 1, 1]),
    ])
    def test_page_sizes(self, count, per_page, sizes):
        pages = paginate(list(range(count)), per_page)
        assert [len(page) for page in pages] == sizes

    def test_keeps_order(self):
        pages = paginate(list(range(30)), 14)
        assert [n for page in pages for n in page] == list(range(30))

    def test_invalid_page_size(self):
        with pytest.raises(ValueError):
            paginate([1, 2], 0)


class TestEmbeddableLogo:

    def test_valid_data_uri(self, png_data_uri):
        assert embeddable_logo(png_data_uri) == png_data_uri

    def test_empty_logo(self):
        assert embeddable_logo("") is None

    @pytest.mark.parametrize("logo", [
        "https://carbatk.com/logo.png",
        "/var/www/logo.png",
        "data:text/plain;base64,aG9sYQ==",
        "data:image/png;base64,@@no-es-base64@@",
    ])
    def test_invalid_logo_is_skipped(self, logo, caplog):
        with caplog.at_level(logging.WARNING):
            assert embeddable_logo(logo) is None
        assert "se omite" in caplog.text


# ============================================================
# Contexto de la plantilla
# ============================================================


class TestBuildContext:

    def test_single_page_budget(self, pdf_service, budget):
        context = pdf_service.build_context(budget)

        assert context["total_pages"] == 1
        assert context["pages"][0]["is_last"] is True
        assert context["currency"] == "CRC"
        assert context["page_size"] == "letter"

        rows = context["pages"][0]["rows"]
        assert rows[0] == {
            "number": 1,
            "code": "SRV-01",
            "quantity": "2",
            "description": "Mantenimiento",
            "unit_price": "CRC 100.00",
            "total": "CRC 200.00",
        }

    def test_totals_block(self, pdf_service, budget):
        totals = pdf_service.build_context(budget)["totals"]

        assert totals == {
            "subtotal": "CRC 250.00",
            "discount": "-CRC 25.00",
            "discount_percent": "10",
            "tax": "CRC 29.25",
            "tax_percent": "13",
            "total": "CRC 254.25",
            "in_words": "DOSCIENTOS CINCUENTA Y CUATRO COLONES CON 25/100",
            "exchange_rate": None,
        }

    def test_alternate_currency(self, pdf_service, budget_factory, two_items, usd_config):
        context = pdf_service.build_context(budget_factory(two_items, usd_config))

        assert context["currency"] == "USD"
        assert context["pages"][0]["rows"][0]["unit_price"] == "$0.20"
        assert context["pages"][0]["rows"][0]["total"] == "$0.40"
        assert context["totals"]["subtotal"] == "$0.50"
        assert context["totals"]["total"] == "$0.51"
        assert context["totals"]["in_words"] == "CERO DÓLARES CON 51/100"
        assert context["totals"]["exchange_rate"] == "CRC 500.00"

    def test_row_numbers_continue_across_pages(self, pdf_service, budget_factory, many_items):
        context = pdf_service.build_context(budget_factory(many_items))

        assert context["total_pages"] == 3
        numbers = [row["number"] for page in context["pages"] for row in page["rows"]]
        assert numbers == list(range(1, 31))
        assert context["pages"][1]["rows"][0]["number"] == 15
        assert [page["is_last"] for page in context["pages"]] == [False, False, True]
        assert [page["number"] for page in context["pages"]] == [1, 2, 3]

    def test_placeholders_for_missing_data(self, pdf_service, budget_factory, two_items):
        budget = budget_factory(
            two_items,
            client=ClientData(),
            metadata=DocumentMetadata(issue_date=date(2025, 1, 10)),
            offer_conditions=OfferConditions(validity_days="", delivery_time="", payment_terms=""),
            issuer=CompanyData(name="CarbaTK Soluciones", sinpe="6274-8990"),
        )

        context = pdf_service.build_context(budget)

        assert context["recipient"] == {
            "company_name": "Cliente Particular",
            "company_phone": "N/A",
            "company_email": "N/A",
            "contact_name": "N/A",
            "contact_phone": "N/A",
            "contact_email": "N/A",
        }
        assert context["document"]["proforma_number"] == "---"
        assert context["document"]["vendor"] == "---"
        assert context["document"]["payment_terms"] == "Contado"
        assert context["document"]["issue_date"] == "10/01/2025"
        assert context["document"]["expiry_date"] == "10/01/2025"
        assert context["terms"][0] == "Vigencia del presupuesto: N/A días naturales."
        assert context["terms"][1] == "Tiempo estimado de entrega: N/A."
        assert context["payment_methods"] == [
            {"method": "SINPE", "details": "6274-8990"},
            {"method": "Cuenta IBAN", "details": "N/A"},
            {"method": "Banco", "details": "N/A"},
        ]
        assert context["issuer"]["logo"] is None

    def test_issuer_block(self, pdf_service, budget, png_data_uri):
        issuer = pdf_service.build_context(budget)["issuer"]

        assert issuer["contact"] == "+506 6274-8990 | info@carbatk.com"
        assert issuer["social"] == "www.carbatk.com | WA: +506 6274-8990"
        assert issuer["logo"] == png_data_uri

    def test_precomputed_totals_are_used(self, pdf_service, budget):
        totals = budget.totals.model_copy(update={"total": Decimal("1")})
        assert pdf_service.build_context(budget, totals)["totals"]["total"] == "CRC 1.00"


# ============================================================
# HTML y PDF
# ============================================================


class TestRender:

    def test_render_html_pages(self, pdf_service, budget_factory, many_items):
        html = pdf_service.render_html(budget_factory(many_items))

        assert "Página 1 de 3" in html
        assert "Página 3 de 3" in html
        assert html.count("TÉRMINOS Y CONDICIONES:") == 3
        assert html.count("MÉTODOS DE PAGO:") == 3
        assert html.count("--- última línea ---") == 1
        assert html.count("TOTAL: ") == 1
        assert "@page { size: letter; margin: 0; }" in html

    def test_render_html_escapes_user_text(self, pdf_service, budget_factory, two_items):
        budget = budget_factory(
            two_items,
            client=ClientData(company_name="<script>alert(1)</script>"),
        )

        html = pdf_service.render_html(budget)

        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test_exchange_note_only_for_alternate_currency(
        self, pdf_service, budget_factory, two_items, crc_config, usd_config
    ):
        assert "T. Cambio:" not in pdf_service.render_html(budget_factory(two_items, crc_config))
        assert "T. Cambio: CRC 500.00" in pdf_service.render_html(budget_factory(two_items, usd_config))

    def test_generate_pdf(self, pdf_service, budget):
        html_class = MagicMock()
        html_class.return_value.write_pdf.return_value = b"%PDF-1.7 prueba"

        with patch("presumaker.services.pdf_service._get_weasyprint", return_value=html_class):
            result = pdf_service.generate_budget_pdf(budget)

        assert result == b"%PDF-1.7 prueba"
        kwargs = html_class.call_args.kwargs
        assert kwargs["base_url"] == TEMPLATES_DIR
        assert "Proforma #: P-2025-001" in kwargs["string"]
        assert "CRC 254.25" in kwargs["string"]

    def test_generate_pdf_propagates_renderer_errors(self, pdf_service, budget):
        html_class = MagicMock()
        html_class.return_value.write_pdf.side_effect = RuntimeError("sin Pango")

        with patch("presumaker.services.pdf_service._get_weasyprint", return_value=html_class):
            with pytest.raises(RuntimeError):
                pdf_service.generate_budget_pdf(budget)

"""
Service para la generación del PDF con WeasyPrint + Jinja2.
Proyecto: PresuMaker (Generador de Presupuestos)

Pagina las líneas de detalle y arma cada página con el mismo esquema:
encabezado, recuadro del destinatario, tabla, totales (solo la última
página), términos y condiciones, métodos de pago y número de página.
"""

import base64
import binascii
import logging
import math
import os
import re
from decimal import Decimal
from typing import Optional, Sequence, TypeVar

from jinja2 import Environment, FileSystemLoader, select_autoescape

from presumaker.core.config import settings
from presumaker.schemas.budget import BudgetItem, CompleteBudget, Currency, TotalsSummary
from presumaker.services.amount_in_words import amount_to_words
from presumaker.services.totals_service import (
    calculate_totals,
    convert_amount,
    exchange_rate_of,
    round_money,
    to_decimal,
)

logger = logging.getLogger(__name__)

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
TEMPLATES_DIR = os.path.join(BASE_DIR, "templates")

NOT_AVAILABLE = "N/A"
MISSING = "---"
DATE_FORMAT = "%d/%m/%Y"

CURRENCY_SYMBOLS = {
    Currency.CRC: "CRC ",
    Currency.USD: "$",
}

EMBEDDABLE_LOGO = re.compile(
    r"^data:image/(?:png|jpe?g|gif|webp|svg\+xml);base64,(?P<payload>.+)$",
    re.DOTALL,
)

T = TypeVar("T")


def _get_weasyprint():
    """Import diferido de weasyprint: requiere librerías nativas (Pango)."""
    try:
        from weasyprint import HTML
        return HTML
    except OSError as e:
        raise RuntimeError(
            "No se encontraron las dependencias nativas de WeasyPrint. "
            "Instale Pango (p. ej. apt install libpango-1.0-0 libpangoft2-1.0-0)"
        ) from e


# -------------------------------------------------------------------
# Formato
# -------------------------------------------------------------------

def format_amount(amount: Decimal) -> str:
    """Dos decimales con separador de miles: 1234.5 -> "1,234.50"."""
    return f"{round_money(amount):,.2f}"


def format_money(amount: Decimal, currency: Currency) -> str:
    return f"{CURRENCY_SYMBOLS[currency]}{format_amount(amount)}"


def format_number(value) -> str:
    """Número sin ceros sobrantes: "2.50" -> "2.5", "" -> "0"."""
    number = to_decimal(value)
    if number == number.to_integral_value():
        return str(int(number))
    return format(number.normalize(), "f")


def _or(value: Optional[str], placeholder: str) -> str:
    text = (value or "").strip()
    return text or placeholder


def embeddable_logo(logo: Optional[str]) -> Optional[str]:
    """
    Devuelve el logo si se puede incrustar en el documento.

    Solo se aceptan data URIs de imagen en base64 válido. Cualquier
    otro formato (URL, ruta, base64 corrupto) se omite con un warning;
    el documento se genera igual.
    """
    if not logo:
        return None
    match = EMBEDDABLE_LOGO.match(logo.strip())
    if match is None:
        logger.warning("El logo no es un data URI de imagen; se omite del documento")
        return None
    try:
        base64.b64decode(match.group("payload"), validate=True)
    except (binascii.Error, ValueError) as e:
        logger.warning("El logo tiene base64 inválido (%s); se omite del documento", e)
        return None
    return logo.strip()


def paginate(items: Sequence[T], per_page: int) -> list[list[T]]:
    """
    Reparte las líneas en páginas de a lo sumo per_page líneas.

    Devuelve ceil(N / per_page) páginas y nunca menos de una.
    """
    if per_page < 1:
        raise ValueError("per_page debe ser al menos 1")
    total_pages = max(1, math.ceil(len(items) / per_page))
    return [list(items[i * per_page:(i + 1) * per_page]) for i in range(total_pages)]


class PdfService:
    """
    Genera el PDF del presupuesto desde una plantilla HTML/CSS.

    El llamador entrega un CompleteBudget ya validado; los totales se
    pueden pasar precalculados o se derivan aquí.
    """

    def __init__(
        self,
        items_per_page: Optional[int] = None,
        page_size: Optional[str] = None,
    ):
        self.items_per_page = items_per_page or settings.pdf_items_per_page
        self.page_size = page_size or settings.pdf_page_size
        self.env = Environment(
            loader=FileSystemLoader(TEMPLATES_DIR),
            autoescape=select_autoescape(["html"]),
        )

    def build_context(
        self,
        budget: CompleteBudget,
        totals: Optional[TotalsSummary] = None,
    ) -> dict:
        """
        Arma el contexto de la plantilla.

        Args:
            budget: Presupuesto completo
            totals: Totales precalculados (opcional)

        Returns:
            dict con los bloques comunes y la lista de páginas
        """
        if totals is None:
            totals = calculate_totals(budget.items, budget.config)

        config = budget.config
        currency = config.currency
        issuer = budget.issuer
        client = budget.client
        metadata = budget.metadata
        conditions = budget.offer_conditions

        chunks = paginate(budget.items, self.items_per_page)
        total_pages = len(chunks)

        pages = []
        row_number = 0
        for index, chunk in enumerate(chunks):
            rows = []
            for item in chunk:
                row_number += 1
                rows.append(self._row(row_number, item, budget))
            pages.append({
                "number": index + 1,
                "rows": rows,
                "is_last": index == total_pages - 1,
            })

        social = issuer.website or ""
        if issuer.whatsapp:
            social = f"{social} | WA: {issuer.whatsapp}" if social else f"WA: {issuer.whatsapp}"

        validity = conditions.validity_days
        validity_text = _or(str(validity) if validity is not None else "", NOT_AVAILABLE)
        payment_terms = _or(conditions.payment_terms, "Contado")

        totals_block = {
            "subtotal": format_money(totals.subtotal, currency),
            "discount": f"-{format_money(totals.discount_amount, currency)}",
            "discount_percent": format_number(config.discount_percent),
            "tax": format_money(totals.tax_amount, currency),
            "tax_percent": format_number(config.tax_percent),
            "total": format_money(totals.total, currency),
            "in_words": amount_to_words(totals.total, currency),
            "exchange_rate": (
                f"CRC {format_amount(exchange_rate_of(config))}"
                if config.is_alternate_currency
                else None
            ),
        }

        return {
            "page_size": self.page_size,
            "currency": currency.value,
            "issuer": {
                "name": issuer.name,
                "id_number": issuer.id_number,
                "address": issuer.address,
                "contact": " | ".join(p for p in (issuer.phone, issuer.email) if p),
                "social": social,
                "logo": embeddable_logo(issuer.logo),
            },
            "document": {
                "title": "Presupuesto",
                "proforma_number": _or(metadata.proforma_number, MISSING),
                "payment_terms": payment_terms,
                "issue_date": metadata.issue_date.strftime(DATE_FORMAT),
                "expiry_date": (
                    metadata.expiry_date.strftime(DATE_FORMAT)
                    if metadata.expiry_date
                    else MISSING
                ),
                "vendor": _or(metadata.vendor, MISSING),
            },
            "recipient": {
                "company_name": _or(client.company_name, "Cliente Particular"),
                "company_phone": _or(client.company_phone, NOT_AVAILABLE),
                "company_email": _or(client.company_email, NOT_AVAILABLE),
                "contact_name": _or(client.contact_name, NOT_AVAILABLE),
                "contact_phone": _or(client.contact_phone, NOT_AVAILABLE),
                "contact_email": _or(client.contact_email, NOT_AVAILABLE),
            },
            "terms": [
                f"Vigencia del presupuesto: {validity_text} días naturales.",
                f"Tiempo estimado de entrega: {_or(conditions.delivery_time, NOT_AVAILABLE)}.",
                f"Garantía ofrecida: {_or(conditions.warranty, NOT_AVAILABLE)}.",
                f"Condiciones de pago: {payment_terms}.",
                "Precios sujetos a cambios sin previo aviso.",
            ],
            "payment_methods": [
                {"method": "SINPE", "details": _or(issuer.sinpe, NOT_AVAILABLE)},
                {"method": "Cuenta IBAN", "details": _or(issuer.iban, NOT_AVAILABLE)},
                {"method": "Banco", "details": _or(issuer.bank, NOT_AVAILABLE)},
            ],
            "totals": totals_block,
            "pages": pages,
            "total_pages": total_pages,
        }

    @staticmethod
    def _row(number: int, item: BudgetItem, budget: CompleteBudget) -> dict:
        currency = budget.config.currency
        quantity = to_decimal(item.quantity)
        price = convert_amount(to_decimal(item.unit_price), budget.config)
        return {
            "number": number,
            "code": item.code or "",
            "quantity": format_number(quantity),
            "description": item.description,
            "unit_price": format_money(price, currency),
            "total": format_money(quantity * price, currency),
        }

    def render_html(
        self,
        budget: CompleteBudget,
        totals: Optional[TotalsSummary] = None,
    ) -> str:
        """Documento completo en HTML (también sirve de vista previa)."""
        template = self.env.get_template("budget_template.html")
        return template.render(self.build_context(budget, totals))

    def generate_budget_pdf(
        self,
        budget: CompleteBudget,
        totals: Optional[TotalsSummary] = None,
    ) -> bytes:
        """
        Genera el PDF del presupuesto.

        Args:
            budget: Presupuesto completo
            totals: Totales precalculados (opcional)

        Returns:
            bytes: PDF binario listo para abrir o descargar
        """
        HTML = _get_weasyprint()

        html_out = self.render_html(budget, totals)
        pdf_bytes = HTML(string=html_out, base_url=TEMPLATES_DIR).write_pdf()
        logger.info(
            "PDF generado: proforma %s, %s líneas",
            budget.metadata.proforma_number or MISSING,
            len(budget.items),
        )
        return pdf_bytes


__all__ = [
    "PdfService",
    "paginate",
    "embeddable_logo",
    "format_amount",
    "format_money",
    "format_number",
]

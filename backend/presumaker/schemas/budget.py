"""
Schemas Pydantic del presupuesto
Proyecto: PresuMaker (Generador de Presupuestos)

Contiene:
- Enum: Currency
- Datos del emisor, cliente, metadatos y condiciones de la oferta
- Línea de detalle y configuración (descuento, impuesto, moneda)
- Resumen de totales (siempre derivado, nunca almacenado)
- CompleteBudget: la instantánea completa que recibe el generador

Los campos numéricos capturados en el formulario (cantidad, precio,
porcentajes, tipo de cambio, vigencia) aceptan número, texto o vacío:
se guardan tal cual y se convierten a Decimal al calcular, donde
cualquier valor no numérico vale cero.
"""

import uuid
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
    model_validator,
)
from pydantic.networks import validate_email


# Valor numérico tal como lo escribió el usuario
NumericInput = Optional[Union[Decimal, str]]


def _keep_raw_numeric(value: Any) -> NumericInput:
    """Normaliza la entrada sin rechazarla: Decimal y texto pasan intactos."""
    if value is None or isinstance(value, (Decimal, str)):
        return value
    if isinstance(value, bool):
        return str(int(value))
    return str(value)


# -------------------------------------------------------------------
# Enum
# -------------------------------------------------------------------

class Currency(str, Enum):
    """Monedas soportadas. Los precios siempre se capturan en CRC."""
    CRC = "CRC"
    USD = "USD"


BASE_CURRENCY = Currency.CRC


# -------------------------------------------------------------------
# Emisor y cliente
# -------------------------------------------------------------------

class CompanyData(BaseModel):
    """Datos del emisor (la empresa del usuario)."""

    name: str = Field(default="", description="Nombre comercial")
    address: str = Field(default="", description="Dirección")
    phone: str = Field(default="", description="Teléfono")
    email: str = Field(default="", description="Correo electrónico")
    website: str = Field(default="", description="Sitio web")
    logo: str = Field(
        default="",
        description="Logo como data URI (data:image/png;base64,...) o URL",
    )
    id_number: str = Field(default="", description="Cédula jurídica o física")
    whatsapp: str = Field(default="", description="Número de WhatsApp")
    sinpe: str = Field(default="", description="Número SINPE Móvil")
    iban: str = Field(default="", description="Cuenta IBAN")
    bank: str = Field(default="", description="Nombre del banco")

    model_config = ConfigDict(from_attributes=True)


class ClientData(BaseModel):
    """
    Datos del cliente destinatario.

    Los correos siguen la política "vacío es válido": un campo vacío
    se acepta, solo un formato visiblemente incorrecto se rechaza.
    """

    company_name: str = Field(default="", description="Nombre de la empresa")
    company_phone: str = Field(default="", description="Teléfono de la empresa")
    company_email: str = Field(default="", description="Correo para cotizaciones")
    contact_name: str = Field(default="", description="Nombre del contacto")
    contact_phone: str = Field(default="", description="Teléfono del contacto")
    contact_email: str = Field(default="", description="Correo del contacto")

    @field_validator("company_email", "contact_email")
    @classmethod
    def validate_optional_email(cls, v: str) -> str:
        """Valida el formato solo cuando el correo no está vacío."""
        v = v.strip()
        if not v:
            return ""
        _, normalized = validate_email(v)
        return normalized


# -------------------------------------------------------------------
# Línea de detalle
# -------------------------------------------------------------------

class BudgetItem(BaseModel):
    """
    Línea de detalle del presupuesto.

    El id solo sirve para agregar/quitar/actualizar en la lista;
    no es una clave de negocio.
    """

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        description="Identificador único de la línea",
    )
    code: str = Field(default="", description="Código del artículo")
    quantity: NumericInput = Field(default="", description="Cantidad")
    description: str = Field(default="", description="Descripción")
    unit_price: NumericInput = Field(
        default="",
        description="Precio unitario en la moneda base (CRC)",
    )

    @field_validator("quantity", "unit_price", mode="before")
    @classmethod
    def keep_raw_numeric(cls, v: Any) -> NumericInput:
        return _keep_raw_numeric(v)


# -------------------------------------------------------------------
# Condiciones y metadatos
# -------------------------------------------------------------------

class OfferConditions(BaseModel):
    """Condiciones de la oferta impresas en términos y condiciones."""

    validity_days: NumericInput = Field(
        default="30",
        description="Vigencia del presupuesto en días naturales",
    )
    delivery_time: str = Field(
        default="3-5 días hábiles",
        description="Tiempo estimado de entrega",
    )
    warranty: str = Field(
        default="1 año contra defectos de fábrica",
        description="Garantía ofrecida",
    )
    payment_terms: str = Field(default="Contado", description="Condiciones de pago")

    @field_validator("validity_days", mode="before")
    @classmethod
    def keep_raw_numeric(cls, v: Any) -> NumericInput:
        return _keep_raw_numeric(v)


class DocumentMetadata(BaseModel):
    """
    Metadatos del documento.

    expiry_date es de solo lectura: se recalcula como
    issue_date + vigencia cada vez que se valida un CompleteBudget.
    """

    proforma_number: str = Field(default="", description="Número de proforma")
    issue_date: date = Field(default_factory=date.today, description="Fecha de emisión")
    expiry_date: Optional[date] = Field(
        default=None,
        description="Fecha de vencimiento (derivada)",
    )
    vendor: str = Field(default="", description="Nombre del vendedor")


class BudgetConfig(BaseModel):
    """Descuento, impuesto, moneda de presentación y tipo de cambio."""

    discount_percent: NumericInput = Field(default="", description="Descuento (%)")
    tax_percent: NumericInput = Field(default="13", description="Impuesto (%)")
    currency: Currency = Field(default=Currency.CRC, description="Moneda de presentación")
    exchange_rate: NumericInput = Field(
        default="515.00",
        description="Colones por dólar; solo aplica cuando la moneda es USD",
    )

    @field_validator("discount_percent", "tax_percent", "exchange_rate", mode="before")
    @classmethod
    def keep_raw_numeric(cls, v: Any) -> NumericInput:
        return _keep_raw_numeric(v)

    @property
    def is_alternate_currency(self) -> bool:
        return self.currency != BASE_CURRENCY


# -------------------------------------------------------------------
# Totales
# -------------------------------------------------------------------

class TotalsSummary(BaseModel):
    """
    Resumen de totales en la moneda de presentación.

    Los importes no se redondean aquí; el redondeo a dos decimales
    ocurre al presentarlos.
    """

    subtotal: Decimal = Field(..., description="Subtotal")
    discount_amount: Decimal = Field(..., description="Monto del descuento")
    taxable_amount: Decimal = Field(..., description="Base imponible (subtotal - descuento)")
    tax_amount: Decimal = Field(..., description="Monto del impuesto")
    total: Decimal = Field(..., description="Total general")


# -------------------------------------------------------------------
# Presupuesto completo
# -------------------------------------------------------------------

class CompleteBudget(BaseModel):
    """
    Instantánea completa de un presupuesto.

    Es la única fuente de verdad: totales y fecha de vencimiento se
    derivan de ella en cada lectura.
    """

    metadata: DocumentMetadata = Field(default_factory=DocumentMetadata)
    client: ClientData = Field(default_factory=ClientData)
    items: list[BudgetItem] = Field(
        ...,
        min_length=1,
        description="Líneas de detalle (al menos una)",
    )
    config: BudgetConfig = Field(default_factory=BudgetConfig)
    offer_conditions: OfferConditions = Field(default_factory=OfferConditions)
    issuer: CompanyData = Field(default_factory=CompanyData)
    version: str = Field(default="1.0", description="Versión del formato")

    @model_validator(mode="after")
    def derive_expiry_date(self) -> "CompleteBudget":
        """Recalcula el vencimiento; un valor enviado por el cliente se descarta."""
        from presumaker.services.budget_service import refresh_metadata

        self.metadata = refresh_metadata(self.metadata, self.offer_conditions)
        return self

    @computed_field
    @property
    def totals(self) -> TotalsSummary:
        """Totales derivados de las líneas y la configuración."""
        from presumaker.services.totals_service import calculate_totals

        return calculate_totals(self.items, self.config)


class BudgetSummary(BaseModel):
    """Resumen que devuelve la API para la vista previa del formulario."""

    totals: TotalsSummary
    expiry_date: date
    amount_in_words: str
    total_pages: int


__all__ = [
    "Currency",
    "BASE_CURRENCY",
    "NumericInput",
    "CompanyData",
    "ClientData",
    "BudgetItem",
    "OfferConditions",
    "DocumentMetadata",
    "BudgetConfig",
    "TotalsSummary",
    "CompleteBudget",
    "BudgetSummary",
]

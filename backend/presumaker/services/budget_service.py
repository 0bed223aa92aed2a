"""
Service Layer del presupuesto en edición
Proyecto: PresuMaker (Generador de Presupuestos)

Operaciones puras sobre el estado del formulario:
- Agregar / quitar / actualizar líneas por id (siempre queda al menos una)
- Recalcular la fecha de vencimiento a partir de emisión + vigencia
- Construir el presupuesto inicial de un usuario

Ninguna función modifica sus argumentos: cada mutación devuelve
una lista o modelo nuevo y los derivados se recalculan al leer.
"""

import base64
import logging
import mimetypes
from datetime import date, timedelta
from pathlib import Path
from typing import Any, Optional

from presumaker.core.config import Settings, settings as default_settings
from presumaker.core.exceptions import BusinessValidationError, NotFoundError
from presumaker.schemas.budget import (
    BudgetConfig,
    BudgetItem,
    CompanyData,
    CompleteBudget,
    Currency,
    DocumentMetadata,
    OfferConditions,
)
from presumaker.services.totals_service import to_decimal

logger = logging.getLogger(__name__)

EDITABLE_ITEM_FIELDS = frozenset({"code", "quantity", "description", "unit_price"})


def compute_expiry_date(issue_date: date, validity_days: Any) -> date:
    """
    Fecha de vencimiento = emisión + vigencia en días naturales.

    Una vigencia vacía, no numérica o de magnitud absurda (ver
    to_decimal) cuenta como 0 días; los decimales se truncan.
    """
    days = int(to_decimal(validity_days))
    try:
        return issue_date + timedelta(days=days)
    except OverflowError:
        raise BusinessValidationError(
            f"Vigencia de {days} días fuera del rango de fechas soportado"
        )


def refresh_metadata(
    metadata: DocumentMetadata,
    offer_conditions: OfferConditions,
) -> DocumentMetadata:
    """Devuelve los metadatos con el vencimiento recalculado."""
    expiry = compute_expiry_date(metadata.issue_date, offer_conditions.validity_days)
    return metadata.model_copy(update={"expiry_date": expiry})


def load_logo_data_uri(path: Optional[str]) -> str:
    """
    Lee una imagen del disco y la devuelve como data URI.

    Un archivo inexistente o ilegible no es fatal: se registra un
    warning y el emisor queda sin logo.
    """
    if not path:
        return ""
    mime_type, _ = mimetypes.guess_type(path)
    if not mime_type or not mime_type.startswith("image/"):
        logger.warning("El logo %s no es una imagen reconocida; se omite", path)
        return ""
    try:
        payload = Path(path).read_bytes()
    except OSError as e:
        logger.warning("No se pudo leer el logo %s: %s", path, e)
        return ""
    return f"data:{mime_type};base64,{base64.b64encode(payload).decode('ascii')}"


class BudgetService:
    """
    Service para el estado editable de un presupuesto.

    No depende de FastAPI ni de la base de datos: recibe y devuelve
    schemas, por lo que se puede usar desde la API, scripts o pruebas.
    """

    def __init__(self, app_settings: Optional[Settings] = None):
        self.settings = app_settings or default_settings

    # ------------------------------------------------------------
    # Líneas de detalle
    # ------------------------------------------------------------

    @staticmethod
    def new_item() -> BudgetItem:
        """Línea vacía con un id nuevo."""
        return BudgetItem()

    def add_item(self, items: list[BudgetItem]) -> list[BudgetItem]:
        """Agrega una línea vacía al final."""
        return [*items, self.new_item()]

    def remove_item(self, items: list[BudgetItem], item_id: str) -> list[BudgetItem]:
        """
        Quita una línea por id.

        Si es la única línea no se quita: la lista editable nunca queda vacía.

        Raises:
            NotFoundError: Si no existe una línea con ese id
        """
        self._find(items, item_id)
        if len(items) <= 1:
            logger.debug("Se ignora quitar la única línea del presupuesto (%s)", item_id)
            return list(items)
        return [item for item in items if item.id != item_id]

    def update_item(
        self,
        items: list[BudgetItem],
        item_id: str,
        **changes: Any,
    ) -> list[BudgetItem]:
        """
        Actualiza campos de una línea identificada por id.

        Raises:
            NotFoundError: Si no existe una línea con ese id
            BusinessValidationError: Si se intenta cambiar un campo no editable
        """
        unknown = set(changes) - EDITABLE_ITEM_FIELDS
        if unknown:
            raise BusinessValidationError(
                f"Campos no editables en la línea: {', '.join(sorted(unknown))}"
            )
        target = self._find(items, item_id)
        updated = BudgetItem.model_validate({**target.model_dump(), **changes})
        return [updated if item.id == item_id else item for item in items]

    @staticmethod
    def _find(items: list[BudgetItem], item_id: str) -> BudgetItem:
        for item in items:
            if item.id == item_id:
                return item
        raise NotFoundError(f"Línea con id {item_id} no encontrada")

    # ------------------------------------------------------------
    # Presupuesto inicial
    # ------------------------------------------------------------

    def default_issuer(self) -> CompanyData:
        """Emisor configurado en settings."""
        s = self.settings
        return CompanyData(
            name=s.issuer_name,
            address=s.issuer_address,
            phone=s.issuer_phone,
            email=s.issuer_email,
            website=s.issuer_website,
            logo=load_logo_data_uri(s.issuer_logo_path),
            id_number=s.issuer_id_number,
            whatsapp=s.issuer_whatsapp,
            sinpe=s.issuer_sinpe,
            iban=s.issuer_iban,
            bank=s.issuer_bank,
        )

    def default_budget(
        self,
        issuer: Optional[CompanyData] = None,
        vendor: str = "",
        today: Optional[date] = None,
    ) -> CompleteBudget:
        """
        Estado inicial del formulario: una línea vacía, emisión hoy,
        vigencia por defecto, impuesto por defecto, CRC.
        """
        s = self.settings
        return CompleteBudget(
            metadata=DocumentMetadata(issue_date=today or date.today(), vendor=vendor),
            items=[self.new_item()],
            config=BudgetConfig(
                discount_percent="",
                tax_percent=s.default_tax_percent,
                currency=Currency.CRC,
                exchange_rate=s.default_exchange_rate,
            ),
            offer_conditions=OfferConditions(validity_days=str(s.default_validity_days)),
            issuer=issuer or self.default_issuer(),
        )


def get_budget_service() -> BudgetService:
    """Factory para obtener una instancia del service."""
    return BudgetService()


__all__ = [
    "BudgetService",
    "compute_expiry_date",
    "refresh_metadata",
    "load_logo_data_uri",
    "get_budget_service",
]

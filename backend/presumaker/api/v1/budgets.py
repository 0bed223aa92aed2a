"""
Router FastAPI del presupuesto
Proyecto: PresuMaker (Generador de Presupuestos)

Endpoints para calcular totales, previsualizar y generar el PDF.
Cada solicitud trae el presupuesto completo; nada se guarda.
"""

import logging
import re

from fastapi import APIRouter, Depends, status
from fastapi.responses import HTMLResponse, Response

from presumaker.core.deps import CurrentUser
from presumaker.core.exceptions import DocumentGenerationError
from presumaker.schemas.budget import BudgetSummary, CompleteBudget
from presumaker.services.amount_in_words import amount_to_words
from presumaker.services.budget_service import BudgetService, get_budget_service
from presumaker.services.pdf_service import PdfService, paginate

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/budgets",
    tags=["Presupuestos"],
)


# -------------------------------------------------------------------
# Dependency Injection
# -------------------------------------------------------------------

def get_pdf_service() -> PdfService:
    """Dependency para obtener una instancia del PdfService."""
    return PdfService()


def _pdf_filename(budget: CompleteBudget) -> str:
    number = re.sub(r"[^A-Za-z0-9_-]+", "-", budget.metadata.proforma_number).strip("-")
    return f"presupuesto-{number or 'borrador'}.pdf"


# -------------------------------------------------------------------
# Endpoints
# -------------------------------------------------------------------

@router.get(
    "/default",
    name="presupuesto_inicial",
    summary="Presupuesto inicial",
    description="Devuelve un presupuesto vacío con los valores por defecto.",
    response_model=CompleteBudget,
    status_code=status.HTTP_200_OK,
)
async def get_default_budget(
    current_user: CurrentUser,
    service: BudgetService = Depends(get_budget_service),
) -> CompleteBudget:
    """
    Presupuesto inicial: una línea vacía, emisión hoy, emisor configurado
    y el usuario actual como vendedor.
    """
    return service.default_budget(vendor=current_user.full_name)


@router.post(
    "/summary",
    name="presupuesto_resumen",
    summary="Totales del presupuesto",
    description="Calcula totales, vencimiento, monto en letras y número de páginas.",
    response_model=BudgetSummary,
    status_code=status.HTTP_200_OK,
)
async def get_budget_summary(
    budget: CompleteBudget,
    current_user: CurrentUser,
    pdf_service: PdfService = Depends(get_pdf_service),
) -> BudgetSummary:
    """
    Resumen derivado del presupuesto recibido.

    Los campos numéricos inválidos valen cero; nunca producen error.
    """
    totals = budget.totals
    return BudgetSummary(
        totals=totals,
        expiry_date=budget.metadata.expiry_date,
        amount_in_words=amount_to_words(totals.total, budget.config.currency),
        total_pages=len(paginate(budget.items, pdf_service.items_per_page)),
    )


@router.post(
    "/preview",
    name="presupuesto_vista_previa",
    summary="Vista previa HTML",
    response_class=HTMLResponse,
    status_code=status.HTTP_200_OK,
)
def preview_budget(
    budget: CompleteBudget,
    current_user: CurrentUser,
    pdf_service: PdfService = Depends(get_pdf_service),
) -> HTMLResponse:
    """Documento en HTML con la misma maquetación que el PDF."""
    try:
        html = pdf_service.render_html(budget, budget.totals)
    except Exception:
        logger.exception("Error al maquetar la vista previa del presupuesto")
        raise DocumentGenerationError()
    return HTMLResponse(content=html)


@router.post(
    "/pdf",
    name="presupuesto_pdf",
    summary="Generar PDF",
    description="Genera el PDF y lo devuelve para abrirlo en el navegador.",
    response_class=Response,
    status_code=status.HTTP_200_OK,
)
def generate_budget_pdf(
    budget: CompleteBudget,
    current_user: CurrentUser,
    pdf_service: PdfService = Depends(get_pdf_service),
) -> Response:
    """
    Genera el PDF del presupuesto.

    Cualquier error durante la maquetación se registra y se responde
    con un aviso genérico; nunca se devuelve un documento parcial.

    Raises:
        DocumentGenerationError: Si la generación falla
    """
    try:
        pdf_bytes = pdf_service.generate_budget_pdf(budget, budget.totals)
    except Exception:
        logger.exception(
            "Error al generar el PDF (proforma %s, usuario %s)",
            budget.metadata.proforma_number or "---",
            current_user.username,
        )
        raise DocumentGenerationError()

    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="{_pdf_filename(budget)}"'},
    )


__all__ = ["router"]

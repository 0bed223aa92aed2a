"""
Schemas Pydantic
Proyecto: PresuMaker (Generador de Presupuestos)

Import centralizado de los schemas de la API.
"""

from presumaker.schemas.budget import (
    BASE_CURRENCY,
    BudgetConfig,
    BudgetItem,
    BudgetSummary,
    ClientData,
    CompanyData,
    CompleteBudget,
    Currency,
    DocumentMetadata,
    OfferConditions,
    TotalsSummary,
)
from presumaker.schemas.token import TokenPayload, TokenRefresh, TokenResponse
from presumaker.schemas.user import UserCreate, UserLogin, UserResponse

__all__ = [
    # Presupuesto
    "BASE_CURRENCY",
    "BudgetConfig",
    "BudgetItem",
    "BudgetSummary",
    "ClientData",
    "CompanyData",
    "CompleteBudget",
    "Currency",
    "DocumentMetadata",
    "OfferConditions",
    "TotalsSummary",
    # Autenticación
    "TokenPayload",
    "TokenRefresh",
    "TokenResponse",
    "UserCreate",
    "UserLogin",
    "UserResponse",
]

"""
API v1 Routes
Proyecto: PresuMaker (Generador de Presupuestos)

Router versión 1 de la API.
"""

from fastapi import APIRouter

from presumaker.api.v1 import auth, budgets

api_v1_router = APIRouter(prefix="/api/v1")

api_v1_router.include_router(auth.router)
api_v1_router.include_router(budgets.router)

__all__ = ["api_v1_router"]

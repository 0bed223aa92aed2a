"""
API Routes
Proyecto: PresuMaker (Generador de Presupuestos)

Módulo para la agregación de los routers versionados.
"""

from presumaker.api.v1 import api_v1_router

__all__ = ["api_v1_router"]

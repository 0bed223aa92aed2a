"""
Schemas Pydantic para la autenticación JWT
Proyecto: PresuMaker (Generador de Presupuestos)
"""

from datetime import datetime

from pydantic import BaseModel, Field


class TokenResponse(BaseModel):
    """
    Respuesta con los tokens JWT.

    Attributes:
        access_token: Token de acceso JWT
        refresh_token: Token de refresh JWT
        token_type: Tipo de token (por defecto: bearer)
    """

    access_token: str = Field(..., description="Token de acceso JWT")
    refresh_token: str = Field(..., description="Token de refresh JWT")
    token_type: str = Field(
        default="bearer",
        description="Tipo de token",
    )


class TokenRefresh(BaseModel):
    """Solicitud de refresh de tokens."""

    refresh_token: str = Field(..., description="Token de refresh JWT")


class TokenPayload(BaseModel):
    """
    Payload contenido en los tokens JWT.

    Attributes:
        sub: Subject - ID del usuario como texto
        role: Rol del usuario
        exp: Fecha/hora de expiración
        type: Tipo de token ("access" o "refresh")
    """

    sub: str = Field(..., description="ID de usuario")
    role: str = Field(..., description="Rol del usuario")
    exp: datetime = Field(..., description="Fecha/hora de expiración")
    type: str = Field(..., description="Tipo de token (access/refresh)")


__all__ = [
    "TokenResponse",
    "TokenRefresh",
    "TokenPayload",
]

"""
Schemas Pydantic para la entidad User
Proyecto: PresuMaker (Generador de Presupuestos)
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from presumaker.models.user import UserRole


class UserCreate(BaseModel):
    """
    Alta o actualización de un usuario.

    Attributes:
        username: Nombre de usuario (único)
        password: Contraseña en claro (mín. 8, máx. 72 caracteres por bcrypt)
        full_name: Nombre completo; se usa como vendedor por defecto
        role: Rol del usuario (por defecto: operador)
    """

    username: str = Field(
        ...,
        min_length=1,
        max_length=50,
        pattern=r"^[A-Za-z0-9_.-]+$",
        description="Nombre de usuario único",
    )
    password: str = Field(
        ...,
        min_length=8,
        max_length=72,
        description="Contraseña en claro (mín. 8, máx. 72 caracteres)",
    )
    full_name: str = Field(default="", max_length=100, description="Nombre completo")
    role: UserRole = Field(default=UserRole.OPERATOR, description="Rol del usuario")


class UserLogin(BaseModel):
    """
    Credenciales de inicio de sesión.

    Attributes:
        username: Nombre de usuario
        password: Contraseña en claro (solo viaja al servidor, nunca se guarda)
    """

    username: str = Field(..., min_length=1, max_length=50, description="Nombre de usuario")
    password: str = Field(..., min_length=1, description="Contraseña en claro")


class UserResponse(BaseModel):
    """Datos públicos de un usuario."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(..., description="UUID del usuario")
    username: str = Field(..., description="Nombre de usuario")
    full_name: str = Field(..., description="Nombre completo del usuario")
    role: UserRole = Field(..., description="Rol del usuario")
    is_active: bool = Field(..., description="Indica si el usuario está activo")
    created_at: datetime = Field(..., description="Fecha/hora de creación")


__all__ = [
    "UserCreate",
    "UserLogin",
    "UserResponse",
]

"""
Modelo SQLAlchemy para la entidad User
Proyecto: PresuMaker (Generador de Presupuestos)

Usuarios con credenciales hasheadas, verificadas en el servidor.
"""

from __future__ import annotations
from datetime import datetime
from enum import Enum
import uuid

from sqlalchemy import Boolean, DateTime, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from presumaker.models import Base


class UserRole(str, Enum):
    """Roles de usuario en el sistema."""
    ADMIN = "administrador"
    OPERATOR = "operador"


class User(Base):
    """
    Usuario del sistema.

    Attributes:
        id: UUID primary key, generado automáticamente
        username: Nombre de usuario único
        hashed_password: Contraseña hasheada (bcrypt)
        full_name: Nombre completo, usado como vendedor por defecto
        role: Rol del usuario (administrador, operador)
        is_active: Indica si el usuario puede iniciar sesión
        created_at: Fecha/hora de creación
        updated_at: Fecha/hora de la última modificación
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        doc="UUID primary key",
    )

    username: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        nullable=False,
        doc="Nombre de usuario único",
    )

    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="Contraseña hasheada",
    )

    full_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        default="",
        doc="Nombre completo del usuario",
    )

    role: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=UserRole.OPERATOR.value,
        doc="Rol del usuario",
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
        doc="Indica si el usuario está activo",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        doc="Fecha/hora de creación del registro",
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
        doc="Fecha/hora de la última modificación",
    )

    __table_args__ = (
        Index("ix_users_username", "username"),
        Index("ix_users_role", "role"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username}, role={self.role})>"

"""
Modelos SQLAlchemy
Proyecto: PresuMaker (Generador de Presupuestos)

Solo los usuarios se persisten; emisores, clientes y presupuestos
llegan completos en cada solicitud y no se guardan aquí.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Clase base para todos los modelos SQLAlchemy."""
    pass


from presumaker.models.user import User, UserRole

__all__ = [
    "Base",
    "User",
    "UserRole",
]

"""
Dependency Injection para autenticación
Proyecto: PresuMaker (Generador de Presupuestos)
"""

from typing import Annotated, Optional
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from presumaker.core.database import get_db
from presumaker.core.exceptions import AuthorizationError
from presumaker.core.security import decode_token
from presumaker.models.user import User, UserRole

oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl="/api/v1/auth/login",
    auto_error=False,
)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Obtiene el usuario actual a partir del token JWT.

    Raises:
        HTTPException 401: Si el token es inválido o expiró, o el usuario no está activo
    """
    if not token:
        raise _unauthorized("Token de autenticación no proporcionado")

    token_data = decode_token(token)

    if token_data.type != "access":
        raise _unauthorized("Token de refresh no válido para esta operación")

    try:
        user_id = UUID(token_data.sub)
    except ValueError:
        raise _unauthorized("ID de usuario inválido en el token")

    result = await db.execute(
        select(User).where(User.id == user_id)
    )
    user = result.scalar_one_or_none()

    if not user:
        raise _unauthorized("Usuario no encontrado")

    if not user.is_active:
        raise _unauthorized("Usuario desactivado")

    return user


def require_role(*allowed_roles: str):
    """
    Factory de una dependency que verifica el rol del usuario.

    Example:
        @router.get("/solo-admin")
        async def endpoint(user: User = Depends(require_role("administrador"))):
            ...
    """
    async def role_checker(
        current_user: Annotated[User, Depends(get_current_user)]
    ) -> User:
        if current_user.role not in allowed_roles:
            raise AuthorizationError(
                f"Acceso denegado. Rol requerido: {', '.join(allowed_roles)}"
            )
        return current_user

    return role_checker


CurrentUser = Annotated[User, Depends(get_current_user)]
AdminUser = Annotated[User, Depends(require_role(UserRole.ADMIN.value))]


__all__ = [
    "get_current_user",
    "require_role",
    "oauth2_scheme",
    "CurrentUser",
    "AdminUser",
]

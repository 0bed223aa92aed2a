"""
Servicio de autenticación
Proyecto: PresuMaker (Generador de Presupuestos)

Login, refresh de tokens y alta de usuarios. Las contraseñas
se comparan siempre contra hashes guardados en el servidor.
"""

import logging
from typing import Iterable
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from presumaker.core.exceptions import NotFoundError
from presumaker.core.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    verify_password,
)
from presumaker.models.user import User, UserRole
from presumaker.schemas.token import TokenResponse
from presumaker.schemas.user import UserCreate, UserLogin

logger = logging.getLogger(__name__)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


class AuthService:
    """Servicio para la gestión de la autenticación."""

    async def login(self, db: AsyncSession, data: UserLogin) -> TokenResponse:
        """
        Autentica un usuario y devuelve los tokens JWT.

        Args:
            db: Sesión de base de datos
            data: Credenciales del usuario

        Returns:
            TokenResponse con access y refresh token

        Raises:
            HTTPException 401: Si las credenciales son inválidas
        """
        result = await db.execute(
            select(User).where(User.username == data.username)
        )
        user = result.scalar_one_or_none()

        # Mismo mensaje para usuario inexistente y contraseña incorrecta
        if not user or not verify_password(data.password, user.hashed_password):
            logger.warning("Intento de login fallido para el usuario %s", data.username)
            raise _unauthorized("Usuario o contraseña incorrectos")

        if not user.is_active:
            raise _unauthorized("Usuario desactivado")

        logger.info("Login correcto: %s (%s)", user.username, user.role)
        return TokenResponse(
            access_token=create_access_token(str(user.id), user.role),
            refresh_token=create_refresh_token(str(user.id), user.role),
            token_type="bearer",
        )

    async def refresh(self, db: AsyncSession, refresh_token: str) -> TokenResponse:
        """
        Renueva los tokens JWT a partir de un refresh token.

        Raises:
            HTTPException 401: Si el refresh token es inválido
        """
        token_data = decode_token(refresh_token)

        if token_data.type != "refresh":
            raise _unauthorized("Token de acceso no válido para el refresh")

        try:
            user_id = UUID(token_data.sub)
        except ValueError:
            raise _unauthorized("ID de usuario inválido en el token")

        try:
            user = await self.get_user_by_id(db, user_id)
        except NotFoundError:
            raise _unauthorized("Usuario no encontrado")

        if not user.is_active:
            raise _unauthorized("Usuario desactivado")

        return TokenResponse(
            access_token=create_access_token(str(user.id), user.role),
            refresh_token=create_refresh_token(str(user.id), user.role),
            token_type="bearer",
        )

    async def get_user_by_id(self, db: AsyncSession, user_id: UUID) -> User:
        """
        Obtiene un usuario por ID.

        Raises:
            NotFoundError: Si el usuario no existe
        """
        result = await db.execute(
            select(User).where(User.id == user_id)
        )
        user = result.scalar_one_or_none()

        if not user:
            raise NotFoundError(f"Usuario con ID {user_id} no encontrado")

        return user

    async def save_user(self, db: AsyncSession, data: UserCreate) -> User:
        """
        Crea un usuario o actualiza uno existente con el mismo username.

        La contraseña se guarda solo como hash.

        Args:
            db: Sesión de base de datos
            data: Datos del usuario

        Returns:
            El usuario creado o actualizado
        """
        result = await db.execute(
            select(User).where(User.username == data.username)
        )
        user = result.scalar_one_or_none()

        if user is None:
            user = User(username=data.username)
            db.add(user)
            logger.info("Usuario creado: %s", data.username)
        else:
            logger.info("Usuario actualizado: %s", data.username)

        user.hashed_password = hash_password(data.password)
        user.full_name = data.full_name or data.username
        user.role = data.role.value
        user.is_active = True

        await db.flush()
        await db.refresh(user)
        return user

    async def seed_users(self, db: AsyncSession, entries: Iterable[str]) -> list[User]:
        """
        Da de alta los usuarios iniciales (formato usuario:contraseña:rol).

        Returns:
            Lista de usuarios creados o actualizados
        """
        users = []
        for entry in entries:
            username, password, role = entry.split(":")
            users.append(
                await self.save_user(
                    db,
                    UserCreate(username=username, password=password, role=UserRole(role)),
                )
            )
        return users


def get_auth_service() -> AuthService:
    """Factory para obtener una instancia del servicio de autenticación."""
    return AuthService()


__all__ = [
    "AuthService",
    "get_auth_service",
]

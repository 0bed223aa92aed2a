"""
Router de autenticación
Proyecto: PresuMaker (Generador de Presupuestos)

Endpoints para login, refresh de tokens, perfil y gestión de usuarios.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from presumaker.core.database import get_db
from presumaker.core.deps import AdminUser, CurrentUser
from presumaker.schemas.token import TokenRefresh, TokenResponse
from presumaker.schemas.user import UserCreate, UserLogin, UserResponse
from presumaker.services.auth_service import AuthService, get_auth_service

router = APIRouter(
    prefix="/auth",
    tags=["Autenticación"],
)


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Iniciar sesión",
)
async def login(
    data: UserLogin,
    db: AsyncSession = Depends(get_db),
    service: AuthService = Depends(get_auth_service),
):
    """
    Verifica las credenciales en el servidor y devuelve los tokens JWT.
    """
    return await service.login(db, data)


@router.post(
    "/refresh",
    response_model=TokenResponse,
    summary="Renovar tokens",
)
async def refresh(
    data: TokenRefresh,
    db: AsyncSession = Depends(get_db),
    service: AuthService = Depends(get_auth_service),
):
    """Renueva los tokens JWT usando un refresh token."""
    return await service.refresh(db, data.refresh_token)


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Perfil del usuario actual",
)
async def get_me(current_user: CurrentUser):
    """Devuelve los datos del usuario autenticado."""
    return current_user


@router.post(
    "/users",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Crear o actualizar un usuario",
)
async def save_user(
    data: UserCreate,
    admin: AdminUser,
    db: AsyncSession = Depends(get_db),
    service: AuthService = Depends(get_auth_service),
):
    """
    Crea un usuario o reemplaza la contraseña y el rol de uno existente.

    Requiere rol administrador.
    """
    user = await service.save_user(db, data)
    await db.commit()
    return user


__all__ = ["router"]

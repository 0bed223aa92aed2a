"""
Configuración de la base de datos - SQLAlchemy 2.0 Async
Proyecto: PresuMaker (Generador de Presupuestos)

Define engine, session factory y dependency injection para FastAPI.
La base de datos solo guarda usuarios; los presupuestos viajan
completos en cada solicitud.
"""

import logging
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from presumaker.core.config import settings

logger = logging.getLogger(__name__)

# ------------------------------------------------------------
# Engine Async SQLAlchemy 2.0
# ------------------------------------------------------------
engine: AsyncEngine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    pool_pre_ping=True,
)


# ------------------------------------------------------------
# Session Factory
# ------------------------------------------------------------
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency injection para FastAPI.

    Abre una sesión por solicitud y la cierra al terminar.

    Yields:
        AsyncSession: Sesión async de base de datos
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def create_tables(drop_existing: bool = False) -> None:
    """
    Crea las tablas que falten.

    Args:
        drop_existing: Borra antes todas las tablas (reinicio completo)
    """
    from presumaker.models import Base

    async with engine.begin() as conn:
        if drop_existing:
            await conn.run_sync(Base.metadata.drop_all)
            logger.warning("Tablas borradas")
        await conn.run_sync(Base.metadata.create_all)


async def init_db() -> None:
    """
    Inicializa la base de datos.

    Crea las tablas que falten y verifica la conexión.
    """
    try:
        await create_tables()
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("Conexión a la base de datos establecida")
    except Exception as e:
        logger.error("Error de conexión a la base de datos: %s", e)
        raise


async def close_db() -> None:
    """Cierra las conexiones de la base de datos durante el apagado."""
    await engine.dispose()
    logger.info("Conexiones de base de datos cerradas")

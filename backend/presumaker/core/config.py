"""
Configuración de la aplicación - Settings
Proyecto: PresuMaker (Generador de Presupuestos)

Define los parámetros de la aplicación cargados desde variables de entorno.
"""


from __future__ import annotations
import logging
from functools import lru_cache
from typing import Literal, Optional
from decimal import Decimal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Configuración de la aplicación.

    Carga los parámetros desde variables de entorno (prefijo PRESUMAKER_).
    Los valores por defecto sirven para desarrollo local.

    Para obtener la instancia singleton:
    - En FastAPI: usar `Depends(get_settings)`
    - En otros lugares: usar `get_settings()` directamente
    """

    model_config = SettingsConfigDict(
        env_prefix="PRESUMAKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # ------------------------------------------------------------
    # Base de datos (solo usuarios)
    # ------------------------------------------------------------
    database_url: str = Field(
        default="sqlite+aiosqlite:///./presumaker.db",
        description="URL de conexión a la base de datos (formato async)",
    )

    # ------------------------------------------------------------
    # Aplicación
    # ------------------------------------------------------------
    app_name: str = Field(
        default="PresuMaker",
        description="Nombre de la aplicación",
    )

    app_version: str = Field(
        default="1.0.0",
        description="Versión de la aplicación",
    )

    app_env: Literal["development", "production", "testing"] = Field(
        default="development",
        description="Entorno de ejecución (development | production | testing)",
    )

    debug: bool = Field(
        default=False,
        description="Modo debug",
    )

    secret_key: str = Field(
        default="changeme-in-production",
        description="Clave secreta para firmar tokens",
    )

    access_token_expire_minutes: int = Field(
        default=30,
        description="Minutos de validez del access token JWT",
    )

    refresh_token_expire_days: int = Field(
        default=7,
        description="Días de validez del refresh token JWT",
    )

    jwt_algorithm: str = Field(
        default="HS256",
        description="Algoritmo de firma JWT",
    )

    backend_port: int = Field(
        default=8000,
        description="Puerto del backend",
    )

    # ------------------------------------------------------------
    # CORS
    # ------------------------------------------------------------
    cors_origins: list[str] = Field(
        default_factory=lambda: [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ],
        description="Orígenes CORS permitidos",
    )

    # ------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Nivel de logging",
    )

    # ------------------------------------------------------------
    # Documento PDF
    # ------------------------------------------------------------
    pdf_items_per_page: int = Field(
        default=14,
        ge=1,
        description="Líneas de detalle por página (según la geometría de la hoja)",
    )

    pdf_page_size: Literal["letter", "A4"] = Field(
        default="letter",
        description="Tamaño de página del documento",
    )

    # ------------------------------------------------------------
    # Valores por defecto del presupuesto
    # ------------------------------------------------------------
    default_tax_percent: Decimal = Field(
        default=Decimal("13"),
        description="Impuesto sugerido para presupuestos nuevos",
    )

    default_exchange_rate: Decimal = Field(
        default=Decimal("515.00"),
        description="Tipo de cambio CRC por USD sugerido",
    )

    default_validity_days: int = Field(
        default=30,
        ge=0,
        description="Vigencia sugerida del presupuesto en días naturales",
    )

    # ------------------------------------------------------------
    # Emisor por defecto
    # ------------------------------------------------------------
    issuer_name: str = Field(default="CarbaTK Soluciones", description="Nombre del emisor")
    issuer_address: str = Field(default="San José, Costa Rica", description="Dirección del emisor")
    issuer_phone: str = Field(default="", description="Teléfono del emisor")
    issuer_email: str = Field(default="", description="Correo del emisor")
    issuer_website: str = Field(default="", description="Sitio web del emisor")
    issuer_id_number: str = Field(default="", description="Cédula jurídica o física del emisor")
    issuer_whatsapp: str = Field(default="", description="WhatsApp del emisor")
    issuer_sinpe: str = Field(default="", description="Número SINPE Móvil")
    issuer_iban: str = Field(default="", description="Cuenta IBAN")
    issuer_bank: str = Field(default="", description="Banco")
    issuer_logo_path: Optional[str] = Field(
        default=None,
        description="Ruta a una imagen de logo (se incrusta como data URI)",
    )

    # ------------------------------------------------------------
    # Usuarios iniciales
    # ------------------------------------------------------------
    seed_users: list[str] = Field(
        default_factory=list,
        description="Usuarios iniciales en formato usuario:contraseña:rol",
    )

    @property
    def is_production(self) -> bool:
        """Indica si la aplicación corre en producción."""
        return self.app_env == "production"

    @property
    def is_development(self) -> bool:
        """Indica si la aplicación corre en desarrollo."""
        return self.app_env == "development"

    # ------------------------------------------------------------
    # Validadores
    # ------------------------------------------------------------

    @field_validator("issuer_iban")
    @classmethod
    def validate_issuer_iban(cls, v: str) -> str:
        """Valida el formato del IBAN costarricense (CR + 20 dígitos)."""
        v = v.replace(" ", "")
        if not v:
            return v
        if not v.upper().startswith("CR"):
            raise ValueError("El IBAN costarricense debe iniciar con 'CR'")
        if len(v) != 22:
            raise ValueError("El IBAN costarricense debe tener 22 caracteres")
        return v.upper()

    @field_validator("default_tax_percent", "default_exchange_rate", mode="before")
    @classmethod
    def convert_decimal_from_string(cls, v) -> Decimal:
        """Acepta decimales con coma convirtiéndolos a punto."""
        if v is None:
            return v
        if isinstance(v, str):
            v = v.replace(",", ".")
        return Decimal(str(v))

    @field_validator("seed_users")
    @classmethod
    def validate_seed_users(cls, v: list[str]) -> list[str]:
        """Verifica el formato usuario:contraseña:rol de cada entrada."""
        for entry in v:
            parts = entry.split(":")
            if len(parts) != 3 or not all(parts):
                raise ValueError(
                    f"Usuario inicial inválido '{entry}': formato esperado usuario:contraseña:rol"
                )
            if parts[2] not in ("administrador", "operador"):
                raise ValueError(f"Rol desconocido '{parts[2]}' para el usuario '{parts[0]}'")
        return v

    @field_validator("issuer_logo_path")
    @classmethod
    def validate_issuer_logo_path(cls, v: Optional[str]) -> Optional[str]:
        """Emite un warning si la ruta del logo es relativa."""
        if v and not v.startswith("/"):
            logging.getLogger(__name__).warning(
                "issuer_logo_path es relativo: %s. Use una ruta absoluta en producción.", v
            )
        return v

    @model_validator(mode="after")
    def validate_production_settings(self) -> "Settings":
        """Bloquea credenciales y opciones de desarrollo en producción."""
        if self.app_env != "production":
            return self

        errors = []

        if self.secret_key == "changeme-in-production" or len(self.secret_key) < 32:
            errors.append("- secret_key: debe cambiarse y tener al menos 32 caracteres")

        if self.debug:
            errors.append("- debug: debe ser False en producción")

        for origin in self.cors_origins:
            if "localhost" in origin or "127.0.0.1" in origin:
                errors.append(
                    f"- cors_origins: el origen '{origin}' no está permitido en producción"
                )

        if errors:
            error_msg = "Error de configuración en producción:\n" + "\n".join(errors)
            raise ValueError(error_msg)

        return self


@lru_cache()
def get_settings() -> Settings:
    """
    Devuelve la instancia singleton de la configuración.

    En pruebas, usar get_settings.cache_clear() para reiniciarla.

    Returns:
        Settings: Configuración de la aplicación
    """
    return Settings()


settings = get_settings()

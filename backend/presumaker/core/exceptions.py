"""
Excepciones de la aplicación.
Proyecto: PresuMaker (Generador de Presupuestos)

Define excepciones propias del dominio para un manejo centralizado
de errores.

NOTA: BusinessValidationError es distinta de pydantic.ValidationError.
- pydantic.ValidationError: errores de formato/tipo en los datos de entrada (FastAPI → 422)
- BusinessValidationError: violaciones de reglas de negocio (nuestro handler → 422)

Los campos numéricos del presupuesto nunca generan errores: se convierten
a cero (ver services/totals_service.py).
"""

from typing import Any, Dict, Optional

__all__ = [
    "AppException",
    "NotFoundError",
    "BusinessValidationError",
    "AuthorizationError",
    "DocumentGenerationError",
]


class AppException(Exception):
    """
    Excepción base de la aplicación.

    Attributes:
        status_code: Código HTTP a devolver al cliente
        error_code: Identificador único del error para el frontend
        detail: Mensaje legible para el usuario
        extra: Datos adicionales para el frontend
    """

    status_code: int = 500
    error_code: str = "INTERNAL_SERVER_ERROR"

    def __init__(
        self,
        detail: str,
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.detail = detail
        self.error_code = error_code if error_code is not None else self.error_code
        self.extra = extra
        self.status_code = self.__class__.status_code
        super().__init__(detail)


class NotFoundError(AppException):
    """Se lanza cuando un recurso (usuario, línea de detalle) no existe."""

    status_code: int = 404
    error_code: str = "RESOURCE_NOT_FOUND"

    def __init__(
        self,
        detail: str = "Recurso no encontrado",
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(detail, error_code, extra)


class BusinessValidationError(ValueError, AppException):
    """
    Violación de una regla de negocio.

    Hereda de ValueError para que los validadores de Pydantic la capturen.

    Ejemplos:
        - "El presupuesto debe tener al menos una línea de detalle"
        - "Correo electrónico con formato inválido"
    """

    status_code: int = 422
    error_code: str = "BUSINESS_VALIDATION_ERROR"

    def __init__(
        self,
        detail: str = "Validación de datos fallida",
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        # AppException.__init__ directo para no pasar por ValueError
        AppException.__init__(self, detail, error_code, extra)


class AuthorizationError(AppException):
    """
    Acceso no autorizado a un recurso u operación.

    Ejemplo: un operador intentando una acción reservada a administradores.
    """

    status_code: int = 403
    error_code: str = "FORBIDDEN"

    def __init__(
        self,
        detail: str = "Acceso no autorizado",
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(detail, error_code, extra)


class DocumentGenerationError(AppException):
    """
    Falla inesperada al maquetar o generar el documento.

    La causa real queda en el log; al usuario nunca se le entrega
    un documento parcial.
    """

    status_code: int = 500
    error_code: str = "DOCUMENT_GENERATION_FAILED"

    def __init__(
        self,
        detail: str = "No se pudo generar el documento. Intente de nuevo.",
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(detail, error_code, extra)

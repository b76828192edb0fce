"""Normalized client errors and the status-to-message normalizer."""

from __future__ import annotations

from enum import Enum
import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

CONNECTIVITY_MESSAGE = "No se puede conectar con el servidor. Verifica tu conexión a internet."
SESSION_EXPIRED_MESSAGE = "Sesión expirada. Por favor inicia sesión nuevamente."
FORBIDDEN_MESSAGE = "No tienes permisos para realizar esta acción."
NOT_FOUND_MESSAGE = "El recurso solicitado no fue encontrado."
VALIDATION_MESSAGE = "Datos inválidos. Verifica la información ingresada."
RATE_LIMITED_MESSAGE = "Demasiadas solicitudes. Intenta nuevamente en unos momentos."
INTERNAL_ERROR_MESSAGE = "Error interno del servidor. Nuestro equipo ha sido notificado."
UNAVAILABLE_MESSAGE = "Servicio temporalmente no disponible. Intenta nuevamente más tarde."


class ErrorKind(str, Enum):
    """Failure taxonomy surfaced to callers."""

    CONNECTIVITY = "connectivity"
    AUTHORIZATION = "authorization"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    RATE_LIMITED = "rate_limited"
    SERVER_FAULT = "server_fault"
    ENVELOPE = "envelope"
    UNEXPECTED = "unexpected"


class ApiError(Exception):
    """Single error shape every client operation fails with."""

    def __init__(
        self,
        *,
        status_code: int | None,
        message: str,
        cause: BaseException | None = None,
        data: Any = None,
        kind: ErrorKind = ErrorKind.UNEXPECTED,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.cause = cause
        self.data = data
        self.kind = kind

    @property
    def is_connectivity(self) -> bool:
        return self.status_code is None

    def field_errors(self) -> dict[str, str] | None:
        """Return the field-keyed error map carried by a 4xx body, if any."""
        if not isinstance(self.data, dict):
            return None
        errors = self.data.get("errors")
        if not isinstance(errors, dict) or not errors:
            return None
        return {str(field): str(issue) for field, issue in errors.items()}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status_code={self.status_code!r}, message={self.message!r})"


class EnvelopeError(ApiError):
    """Raised when a 2xx response encodes a failure inside its envelope."""

    def __init__(
        self,
        *,
        message: str,
        status_code: int | None = None,
        data: Any = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(
            status_code=status_code,
            message=message,
            cause=cause,
            data=data,
            kind=ErrorKind.ENVELOPE,
        )


_FIXED_MESSAGES: dict[int, tuple[str, ErrorKind]] = {
    401: (SESSION_EXPIRED_MESSAGE, ErrorKind.AUTHORIZATION),
    403: (FORBIDDEN_MESSAGE, ErrorKind.FORBIDDEN),
    404: (NOT_FOUND_MESSAGE, ErrorKind.NOT_FOUND),
    429: (RATE_LIMITED_MESSAGE, ErrorKind.RATE_LIMITED),
    500: (INTERNAL_ERROR_MESSAGE, ErrorKind.SERVER_FAULT),
    503: (UNAVAILABLE_MESSAGE, ErrorKind.SERVER_FAULT),
}


def _backend_message(data: Any) -> str | None:
    if not isinstance(data, dict):
        return None
    for key in ("message", "msg"):
        value = data.get(key)
        if isinstance(value, str) and value:
            return value
    return None


def _kind_for_status(status_code: int) -> ErrorKind:
    if status_code in (400, 422):
        return ErrorKind.VALIDATION
    if status_code >= 500:
        return ErrorKind.SERVER_FAULT
    return ErrorKind.UNEXPECTED


def status_message(status_code: int, data: Any = None, raw_message: str | None = None) -> tuple[str, ErrorKind]:
    """Map one HTTP status and body to its user-facing message and kind."""
    fixed = _FIXED_MESSAGES.get(status_code)
    if fixed is not None:
        return fixed

    supplied = _backend_message(data)
    if status_code == 422:
        return supplied or VALIDATION_MESSAGE, ErrorKind.VALIDATION
    if supplied:
        return supplied, _kind_for_status(status_code)

    raw = raw_message or f"Request failed with status code {status_code}"
    return f"Error {status_code}: {raw}", _kind_for_status(status_code)


def _decode_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        try:
            return response.text or None
        except Exception:
            return None


def normalize_status_error(response: httpx.Response, cause: BaseException | None = None) -> ApiError:
    """Convert a non-2xx response into the normalized error shape."""
    data = _decode_body(response)
    message, kind = status_message(response.status_code, data)
    logger.error("API Error [%s]: %s", response.status_code, message)
    return ApiError(
        status_code=response.status_code,
        message=message,
        cause=cause,
        data=data,
        kind=kind,
    )


def normalize_connectivity_error(cause: BaseException | None) -> ApiError:
    """Convert a failure where no response was received into a normalized error."""
    logger.error("Network Error: %s (%r)", CONNECTIVITY_MESSAGE, cause)
    return ApiError(
        status_code=None,
        message=CONNECTIVITY_MESSAGE,
        cause=cause,
        kind=ErrorKind.CONNECTIVITY,
    )

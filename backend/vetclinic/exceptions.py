"""
VetClinic Backend — Custom Exception Hierarchy
================================================

What:  Application-specific exceptions for the different error scenarios.
Why:   Each exception maps to one HTTP status code; global handlers in
       main.py turn them into structured JSON responses, so services never
       build HTTP responses themselves.
How:   Each exception class carries a user-facing message and an optional
       context dict (logged, never returned to the client for 5xx).

Exception Hierarchy:
    VetClinicError (base)
    ├── ValidationError          → 400 Bad Request
    ├── AuthenticationError      → 401 Unauthorized
    ├── PermissionDeniedError    → 403 Forbidden
    ├── NotFoundError            → 404 Not Found
    ├── DatabaseError            → 500 Internal Server Error
    └── RateLimitExceededError   → 429 Too Many Requests
"""

from typing import Any, Dict, Optional


class VetClinicError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info
    """

    def __init__(
        self,
        message: str = "Ocurrió un error inesperado",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(VetClinicError):
    """
    Raised when client input fails a business rule.

    When:    Empty fields, unknown fields on update, duplicate email,
             a referenced veterinarian that no longer exists.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "Los datos enviados no son válidos",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class AuthenticationError(VetClinicError):
    """
    Raised when the bearer credential is missing, malformed, expired,
    or resolves to a veterinarian that does not exist.

    HTTP:    401 Unauthorized
    """

    def __init__(
        self,
        message: str = "Formato del token no válido",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class PermissionDeniedError(VetClinicError):
    """
    Raised when an authenticated veterinarian acts on something they do not own,
    or when an inactive account tries to log in.

    HTTP:    403 Forbidden
    """

    def __init__(
        self,
        message: str = "Lo sentimos, no tienes permisos para esta acción",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(VetClinicError):
    """
    Raised when a requested document does not exist, or when the identifier
    is not a well-formed ObjectId (no lookup is attempted in that case).

    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "recurso",
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if message is None:
            message = f"Lo sentimos, no existe el {resource}"
            if resource_id is not None:
                message = f"Lo sentimos, no existe el {resource} con ID {resource_id}"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(VetClinicError):
    """
    Raised when a document store operation fails unexpectedly.

    When:    Connection lost, server selection timeout, write error.
    HTTP:    500 Internal Server Error

    The client always receives a generic message; the driver error is
    kept in `context` and logged server-side.
    """

    def __init__(
        self,
        message: str = "Error interno del servidor",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(VetClinicError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    HTTP:    429 Too Many Requests
    """

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Demasiadas solicitudes. Espera {retry_after} segundos antes de reintentar."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after

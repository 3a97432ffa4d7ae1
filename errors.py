"""
Error hierarchy

Every error raised on purpose by a handler derives from ServiceError and
carries the HTTP status it maps to. The global handlers in main.py turn
them into ``{"error": message}`` bodies.
"""

from typing import Optional

GENERIC_ERROR_MESSAGE = "An error occurred"


class ServiceError(Exception):
    """Base exception for all errors the API reports on purpose."""

    def __init__(self, message: str, code: str, http_status: int = 500):
        super().__init__(message)
        self.message = message
        self.code = code
        self.http_status = http_status

    @property
    def public_message(self) -> str:
        return self.message

    def to_response(self) -> dict:
        return {"error": self.public_message}


# 4xx

class ValidationError(ServiceError):
    """Missing or malformed input."""
    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, "VALIDATION_ERROR", 400)
        self.field = field


class AuthError(ServiceError):
    """Credentials did not check out."""
    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message, "AUTH_ERROR", 401)


class NotFoundError(ServiceError):
    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(f"{resource_type} '{resource_id}' not found", "NOT_FOUND", 404)


class ConflictError(ServiceError):
    """A unique key already exists."""
    def __init__(self, message: str):
        super().__init__(message, "CONFLICT", 409)


# 5xx

class StoreError(ServiceError):
    """The document store failed or is unavailable.

    The message is only logged; clients always get the generic body.
    """
    def __init__(self, message: str, operation: str = "unknown"):
        super().__init__(f"Store {operation} failed: {message}", "STORE_ERROR", 500)
        self.operation = operation

    @property
    def public_message(self) -> str:
        return GENERIC_ERROR_MESSAGE

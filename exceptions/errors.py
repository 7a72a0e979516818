"""
Custom exception classes for the application.

HTTP failures from the SP-API are not wrapped here: they propagate
as the requests exceptions raised by the transport.
"""

from typing import Optional, Any


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "PRODUCT_NOT_FOUND")
        message: Human-readable message
        status_code: HTTP-equivalent status code
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class NotFoundError(AppError):
    """Resource not found (404)."""

    def __init__(
        self,
        resource: str,
        identifier: str,
        code: Optional[str] = None
    ):
        super().__init__(
            code=code or f"{resource.upper()}_NOT_FOUND",
            message=f"{resource} not found",
            status_code=404,
            details={"id": identifier}
        )


class ValidationError(AppError):
    """Validation failed (422)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=422,
            details=details
        )


class DatabaseError(AppError):
    """Database operation failed (500)."""

    def __init__(
        self,
        operation: str,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code="DATABASE_ERROR",
            message=f"Database {operation} failed: {message}",
            status_code=500,
            details={"operation": operation, **(details or {})}
        )


# ===================
# AUTH ERRORS
# ===================

class AuthError(AppError):
    """Supabase Auth rejected the request (401)."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(
            code="AUTH_ERROR",
            message=message,
            status_code=401,
            details=details
        )


# ===================
# PRODUCT ERRORS
# ===================

class ProductNotFoundError(NotFoundError):
    """Product not found."""

    def __init__(self, identifier: str):
        super().__init__(
            resource="Product",
            identifier=identifier,
            code="PRODUCT_NOT_FOUND"
        )


class MissingOwnerError(ValidationError):
    """Record is missing its owning user."""

    def __init__(self, resource: str):
        super().__init__(
            code="MISSING_OWNER",
            message=f"{resource} must have a user_id",
            details={"resource": resource}
        )


# ===================
# SHIPMENT ERRORS
# ===================

class ShipmentNotFoundError(NotFoundError):
    """Shipment not found."""

    def __init__(self, shipment_id: str):
        super().__init__(
            resource="Shipment",
            identifier=shipment_id,
            code="SHIPMENT_NOT_FOUND"
        )


# ===================
# SP-API ERRORS
# ===================

class MissingRefreshTokenError(ValidationError):
    """Token refresh attempted without a refresh token."""

    def __init__(self):
        super().__init__(
            code="SP_API_NO_REFRESH_TOKEN",
            message="No refresh token available"
        )


class MissingRequiredFieldsError(ValidationError):
    """New record is missing fields its stored form requires."""

    def __init__(self, resource: str, missing: list[str]):
        super().__init__(
            code="MISSING_REQUIRED_FIELDS",
            message=f"{resource} missing required fields: {', '.join(missing)}",
            details={"resource": resource, "missing": missing}
        )

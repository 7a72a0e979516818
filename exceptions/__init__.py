"""
Custom exceptions module.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    NotFoundError,
    ValidationError,
    DatabaseError,

    # Auth
    AuthError,

    # Products
    ProductNotFoundError,
    MissingOwnerError,

    # Shipments
    ShipmentNotFoundError,

    # SP-API
    MissingRefreshTokenError,
    MissingRequiredFieldsError,
)

__all__ = [
    # Base
    "AppError",
    "NotFoundError",
    "ValidationError",
    "DatabaseError",

    # Auth
    "AuthError",

    # Products
    "ProductNotFoundError",
    "MissingOwnerError",

    # Shipments
    "ShipmentNotFoundError",

    # SP-API
    "MissingRefreshTokenError",
    "MissingRequiredFieldsError",
]

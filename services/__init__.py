"""
Backend services.

Each service handles one table group in Supabase.
"""

from services.auth_service import AuthService, get_auth_service
from services.product_service import ProductService, get_product_service
from services.shipment_service import ShipmentService, get_shipment_service
from services.settings_service import SettingsService, get_settings_service

__all__ = [
    "AuthService",
    "get_auth_service",
    "ProductService",
    "get_product_service",
    "ShipmentService",
    "get_shipment_service",
    "SettingsService",
    "get_settings_service",
]

"""
Pydantic models for validation and serialization.
"""

from models.base import (
    BaseSchema,
    TimestampMixin,
    to_insert_payload,
    to_update_payload,
)
from models.address import Address
from models.user import (
    User,
    AmazonCredentials,
    AmazonCredentialsUpdate,
)
from models.product import (
    ProductCondition,
    ProductCreate,
    ProductUpdate,
    Product,
    ProductFilters,
    BundleComponent,
    BundleCreate,
    Bundle,
)
from models.shipment import (
    ShipmentStatus,
    LabelPrepType,
    PrepInstruction,
    PrepOwner,
    PlanStatus,
    PrepDetails,
    ShipmentCreate,
    Shipment,
    ShipmentFilters,
    ShipmentItemCreate,
    ShipmentItem,
    ShipmentPlanItem,
    ShipmentPlanCreate,
    ShipmentPlan,
)
from models.report import (
    ReportType,
    ReportProcessingStatus,
    Report,
)
from models.settings import (
    NotificationPreferences,
    ApiRateLimitConfig,
    GlobalSettingsUpdate,
    GlobalSettings,
)

__all__ = [
    # Base
    "BaseSchema",
    "TimestampMixin",
    "to_insert_payload",
    "to_update_payload",

    # Users / credentials
    "Address",
    "User",
    "AmazonCredentials",
    "AmazonCredentialsUpdate",

    # Products
    "ProductCondition",
    "ProductCreate",
    "ProductUpdate",
    "Product",
    "ProductFilters",
    "BundleComponent",
    "BundleCreate",
    "Bundle",

    # Shipments
    "ShipmentStatus",
    "LabelPrepType",
    "PrepInstruction",
    "PrepOwner",
    "PlanStatus",
    "PrepDetails",
    "ShipmentCreate",
    "Shipment",
    "ShipmentFilters",
    "ShipmentItemCreate",
    "ShipmentItem",
    "ShipmentPlanItem",
    "ShipmentPlanCreate",
    "ShipmentPlan",

    # Reports
    "ReportType",
    "ReportProcessingStatus",
    "Report",

    # Settings
    "NotificationPreferences",
    "ApiRateLimitConfig",
    "GlobalSettingsUpdate",
    "GlobalSettings",
]

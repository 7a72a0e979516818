"""
Inbound shipment, shipment item and shipment plan schemas.

Enumerations mirror the SP-API FBA Inbound vocabulary.
"""

from pydantic import BaseModel, Field
from typing import Optional
from enum import Enum
from datetime import datetime

from models.base import BaseSchema, TimestampMixin
from models.address import Address
from models.product import ProductCondition


class ShipmentStatus(str, Enum):
    """Inbound shipment status values."""
    WORKING = "WORKING"
    SHIPPED = "SHIPPED"
    IN_TRANSIT = "IN_TRANSIT"
    DELIVERED = "DELIVERED"
    CHECKED_IN = "CHECKED_IN"
    RECEIVING = "RECEIVING"
    CLOSED = "CLOSED"
    CANCELLED = "CANCELLED"
    DELETED = "DELETED"
    ERROR = "ERROR"


class LabelPrepType(str, Enum):
    """Who labels the units."""
    NO_LABEL = "NO_LABEL"
    SELLER_LABEL = "SELLER_LABEL"
    AMAZON_LABEL = "AMAZON_LABEL"


class PrepInstruction(str, Enum):
    """Preparation required before units are sent."""
    POLYBAGGING = "POLYBAGGING"
    BUBBLE_WRAPPING = "BUBBLE_WRAPPING"
    TAPING = "TAPING"
    BLACK_SHRINK_WRAPPING = "BLACK_SHRINK_WRAPPING"
    LABELING = "LABELING"
    HANG_GARMENT = "HANG_GARMENT"


class PrepOwner(str, Enum):
    """Who performs the prep."""
    AMAZON = "AMAZON"
    SELLER = "SELLER"


class PlanStatus(str, Enum):
    """Local lifecycle of a shipment plan."""
    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
    CONFIRMED = "CONFIRMED"


class PrepDetails(BaseSchema):
    """Prep instruction paired with its owner."""
    prep_instruction: PrepInstruction
    prep_owner: PrepOwner


# ===================
# SHIPMENTS
# ===================

class ShipmentCreate(BaseSchema):
    """
    Create a new inbound shipment.

    shipment_id is the Amazon-assigned id returned by plan creation.
    """

    user_id: str = Field(..., description="Owning user UUID")
    shipment_id: str = Field(..., min_length=1, description="Amazon shipment ID")
    shipment_name: str = Field(..., min_length=1, max_length=200)
    destination_fulfillment_center_id: str = Field(..., min_length=1)
    ship_from_address: Address
    label_prep_type: LabelPrepType = LabelPrepType.SELLER_LABEL
    shipment_status: ShipmentStatus = ShipmentStatus.WORKING
    shipped_quantity: int = Field(0, ge=0)
    received_quantity: int = Field(0, ge=0)


class Shipment(BaseSchema, TimestampMixin):
    """Shipment record as stored in the backend."""

    id: str
    user_id: str
    shipment_id: str
    shipment_name: str
    destination_fulfillment_center_id: str
    ship_from_address: Address
    label_prep_type: LabelPrepType
    shipment_status: ShipmentStatus
    shipped_quantity: int = 0
    received_quantity: int = 0


class ShipmentFilters(BaseModel):
    """Optional filters applied when listing shipments."""
    status: Optional[ShipmentStatus] = None
    fulfillment_center_id: Optional[str] = None


# ===================
# SHIPMENT ITEMS
# ===================

class ShipmentItemCreate(BaseSchema):
    """
    Add an item to a shipment.

    shipment_id is filled in by the service from the target shipment.
    """

    shipment_id: Optional[str] = None
    seller_sku: str = Field(..., min_length=1)
    fnsku: str = ""
    quantity_shipped: int = Field(..., ge=0)
    quantity_received: int = Field(0, ge=0)
    quantity_in_case: Optional[int] = Field(None, ge=1)
    release_date: Optional[datetime] = None
    prep_details_list: Optional[list[PrepDetails]] = None


class ShipmentItem(BaseSchema, TimestampMixin):
    """Shipment item record as stored in the backend."""

    id: str
    shipment_id: str
    seller_sku: str
    fnsku: str = ""
    quantity_shipped: int
    quantity_received: int = 0
    quantity_in_case: Optional[int] = None
    release_date: Optional[datetime] = None
    prep_details_list: Optional[list[PrepDetails]] = None


# ===================
# SHIPMENT PLANS
# ===================

class ShipmentPlanItem(BaseSchema):
    """One SKU line in a shipment plan."""
    seller_sku: str = Field(..., min_length=1)
    asin: str = Field(..., min_length=1)
    condition: ProductCondition = ProductCondition.NEW
    quantity: int = Field(..., ge=1)
    quantity_in_case: Optional[int] = Field(None, ge=1)
    prep_details_list: Optional[list[PrepDetails]] = None


class ShipmentPlanCreate(BaseSchema):
    """Create a new shipment plan."""

    user_id: str = Field(..., description="Owning user UUID")
    plan_id: Optional[str] = Field(None, description="Amazon plan ID")
    items: list[ShipmentPlanItem] = Field(default_factory=list)
    ship_to_address: Optional[Address] = None
    label_prep_preference: LabelPrepType = LabelPrepType.SELLER_LABEL
    status: PlanStatus = PlanStatus.DRAFT


class ShipmentPlan(BaseSchema, TimestampMixin):
    """Shipment plan record as stored in the backend."""

    id: str
    user_id: str
    plan_id: Optional[str] = None
    items: list[ShipmentPlanItem] = Field(default_factory=list)
    ship_to_address: Optional[Address] = None
    label_prep_preference: LabelPrepType
    status: PlanStatus = PlanStatus.DRAFT

"""
Address schemas (ship-from / ship-to).
"""

from pydantic import Field
from typing import Optional
from datetime import datetime

from models.base import BaseSchema


class Address(BaseSchema):
    """
    Postal address in the shape the SP-API inbound endpoints expect.

    Saved addresses carry id/user_id; inline ones embedded in a
    shipment or plan do not.
    """

    id: Optional[str] = None
    user_id: Optional[str] = None
    name: str = Field(..., min_length=1, max_length=100)
    address_line1: str = Field(..., min_length=1, max_length=180)
    address_line2: Optional[str] = Field(None, max_length=60)
    city: str = Field(..., min_length=1, max_length=30)
    state_or_province_code: str = Field(..., min_length=1, max_length=30)
    country_code: str = Field(..., min_length=2, max_length=2)
    postal_code: str = Field(..., min_length=1, max_length=30)
    is_default: Optional[bool] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

"""
Product and bundle schemas for validation and serialization.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional
from enum import Enum

from models.base import BaseSchema, TimestampMixin


class ProductCondition(str, Enum):
    """Item condition values accepted by the SP-API."""
    NEW = "NEW"
    USED_LIKE_NEW = "USED_LIKE_NEW"
    USED_VERY_GOOD = "USED_VERY_GOOD"
    USED_GOOD = "USED_GOOD"
    USED_ACCEPTABLE = "USED_ACCEPTABLE"
    REFURBISHED = "REFURBISHED"
    COLLECTIBLE_LIKE_NEW = "COLLECTIBLE_LIKE_NEW"
    COLLECTIBLE_VERY_GOOD = "COLLECTIBLE_VERY_GOOD"
    COLLECTIBLE_GOOD = "COLLECTIBLE_GOOD"
    COLLECTIBLE_ACCEPTABLE = "COLLECTIBLE_ACCEPTABLE"


class ProductCreate(BaseSchema):
    """
    Create a new product.

    Required: asin, marketplace_id
    user_id may be left unset while the product is a draft
    (e.g. imported from Amazon) but must be filled before insert.
    """

    user_id: Optional[str] = Field(
        None,
        description="Owning user UUID"
    )
    asin: str = Field(
        ...,
        min_length=1,
        max_length=20,
        description="Amazon Standard Identification Number",
        examples=["B08N5WRWNW"]
    )
    seller_sku: str = Field(
        "",
        max_length=40,
        description="Seller SKU (may be filled in after import)"
    )
    product_name: str = Field("", max_length=500)
    description: Optional[str] = None
    condition: ProductCondition = Field(
        ProductCondition.NEW,
        description="Item condition"
    )
    price: Optional[float] = Field(None, ge=0)
    image_urls: list[str] = Field(default_factory=list)
    marketplace_id: str = Field(..., min_length=1)
    fnsku: Optional[str] = None

    @field_validator("asin")
    @classmethod
    def asin_uppercase(cls, v: str) -> str:
        """ASINs are uppercase alphanumerics."""
        return v.upper()


class ProductUpdate(BaseSchema):
    """
    Update existing product.

    All fields optional - only provided fields are updated.
    """

    asin: Optional[str] = Field(None, min_length=1, max_length=20)
    seller_sku: Optional[str] = Field(None, max_length=40)
    product_name: Optional[str] = Field(None, max_length=500)
    description: Optional[str] = None
    condition: Optional[ProductCondition] = None
    price: Optional[float] = Field(None, ge=0)
    image_urls: Optional[list[str]] = None
    marketplace_id: Optional[str] = None
    fnsku: Optional[str] = None


class Product(BaseSchema, TimestampMixin):
    """
    Product record as stored in the backend.
    """

    id: str = Field(..., description="Product UUID")
    user_id: str = Field(..., description="Owning user UUID")
    asin: str
    seller_sku: str = ""
    product_name: str = ""
    description: Optional[str] = None
    condition: ProductCondition = ProductCondition.NEW
    price: Optional[float] = None
    image_urls: list[str] = Field(default_factory=list)
    marketplace_id: str
    fnsku: Optional[str] = None


class ProductFilters(BaseModel):
    """Optional filters applied when listing products."""
    marketplace_id: Optional[str] = None
    condition: Optional[ProductCondition] = None


# ===================
# BUNDLES
# ===================

class BundleComponent(BaseSchema):
    """One component of a bundle."""
    asin: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=1)
    product: Optional[Product] = None


class BundleCreate(BaseSchema):
    """Create a new bundle."""

    user_id: str = Field(..., description="Owning user UUID")
    asin: str = Field(..., min_length=1, description="ASIN of the bundle listing")
    description: str = ""
    components: list[BundleComponent] = Field(default_factory=list)
    total_cost: Optional[float] = Field(None, ge=0)


class Bundle(BaseSchema, TimestampMixin):
    """Bundle record as stored in the backend."""

    id: str
    user_id: str
    asin: str
    description: str = ""
    components: list[BundleComponent] = Field(default_factory=list)
    total_cost: Optional[float] = None

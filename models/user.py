"""
User and Amazon credential schemas.
"""

from pydantic import Field
from typing import Any, Optional
from datetime import datetime

from models.base import BaseSchema, TimestampMixin


class User(BaseSchema, TimestampMixin):
    """Authenticated user (from Supabase Auth)."""

    id: str
    email: str
    name: Optional[str] = None

    @classmethod
    def from_auth_user(cls, auth_user: Any) -> "User":
        """Build from a Supabase Auth user object."""
        metadata = getattr(auth_user, "user_metadata", None) or {}
        return cls(
            id=auth_user.id,
            email=auth_user.email or "",
            name=metadata.get("name"),
            created_at=auth_user.created_at,
            updated_at=getattr(auth_user, "updated_at", None),
        )


class AmazonCredentialsUpdate(BaseSchema):
    """
    Save Amazon credentials.

    All fields optional - only provided fields are written.
    """

    seller_id: Optional[str] = None
    refresh_token: Optional[str] = None
    access_token: Optional[str] = None
    access_token_expiry: Optional[datetime] = None
    marketplace_id: Optional[str] = None
    region: Optional[str] = None


class AmazonCredentials(BaseSchema, TimestampMixin):
    """
    SP-API credential set for one seller account.

    access_token and its expiry are short-lived and replaced on refresh.
    """

    id: str
    user_id: str
    seller_id: str
    refresh_token: str = Field("", description="LWA refresh token")
    access_token: Optional[str] = None
    access_token_expiry: Optional[datetime] = None
    marketplace_id: str
    region: str = "na"

"""
Per-user global settings schemas.

One row per user in global_settings, created on first save.
"""

from pydantic import Field
from typing import Optional

from models.base import BaseSchema, TimestampMixin
from models.shipment import PrepDetails


class NotificationPreferences(BaseSchema):
    """Which notifications the user wants."""
    email_notifications: bool = True
    shipment_status_updates: bool = True
    report_completion_alerts: bool = True
    inventory_alerts: bool = True


class ApiRateLimitConfig(BaseSchema):
    """Per-API request limits chosen by the user."""
    catalog_api_limit: int = Field(2, ge=0)
    fba_inbound_api_limit: int = Field(2, ge=0)
    reports_api_limit: int = Field(1, ge=0)
    retry_attempts: int = Field(1, ge=0)
    backoff_multiplier: float = Field(2.0, ge=1)


class GlobalSettingsUpdate(BaseSchema):
    """
    Update global settings.

    All fields optional - only provided fields are updated.
    """

    shipment_naming_convention: Optional[str] = Field(None, max_length=200)
    default_prep_preferences: Optional[list[PrepDetails]] = None
    notification_preferences: Optional[NotificationPreferences] = None
    api_rate_limit_config: Optional[ApiRateLimitConfig] = None
    timezone: Optional[str] = None
    language: Optional[str] = None


class GlobalSettings(BaseSchema, TimestampMixin):
    """Global settings record as stored in the backend."""

    id: str
    user_id: str
    shipment_naming_convention: Optional[str] = None
    default_prep_preferences: Optional[list[PrepDetails]] = None
    notification_preferences: Optional[NotificationPreferences] = None
    api_rate_limit_config: Optional[ApiRateLimitConfig] = None
    timezone: Optional[str] = None
    language: Optional[str] = None

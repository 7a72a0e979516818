"""
Base schemas and mixins for all models.
"""

from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import Optional


class BaseSchema(BaseModel):
    """
    Base for all schemas.

    Features:
        - Auto-trim whitespace from strings
        - Validate on attribute assignment
        - Allow ORM objects (from_attributes)
    """
    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
        validate_assignment=True
    )


class TimestampMixin(BaseModel):
    """Add backend-assigned timestamps to response models."""
    created_at: datetime
    updated_at: Optional[datetime] = None


def to_insert_payload(data: BaseModel) -> dict:
    """Serialize a create schema for insert (JSON-safe, no None fields)."""
    return data.model_dump(mode="json", exclude_none=True)


def to_update_payload(data: BaseModel) -> dict:
    """Serialize an update schema keeping only the fields the caller set."""
    return data.model_dump(mode="json", exclude_unset=True)

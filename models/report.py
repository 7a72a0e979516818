"""
Report schemas (SP-API Reports tracking).
"""

from pydantic import Field
from typing import Optional
from enum import Enum
from datetime import datetime

from models.base import BaseSchema, TimestampMixin


class ReportType(str, Enum):
    """Report types requested from the Reports API."""
    FBA_INVENTORY = "GET_FBA_MYI_UNSUPPRESSED_INVENTORY_DATA"
    FBA_SHIPMENTS = "GET_FBA_FULFILLMENT_REMOVAL_SHIPMENT_DETAIL_DATA"
    FEE_PREVIEW = "GET_FBA_ESTIMATED_FBA_FEES_TXT_DATA"
    INVENTORY_REPORT = "GET_MERCHANT_LISTINGS_ALL_DATA"


class ReportProcessingStatus(str, Enum):
    """Processing status reported by the Reports API."""
    QUEUED = "QUEUED"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"
    CANCELLED = "CANCELLED"
    FATAL = "FATAL"


TERMINAL_REPORT_STATUSES = {
    ReportProcessingStatus.DONE,
    ReportProcessingStatus.CANCELLED,
    ReportProcessingStatus.FATAL,
}


class Report(BaseSchema, TimestampMixin):
    """Report record as stored in the backend."""

    id: str
    user_id: str
    report_id: Optional[str] = Field(None, description="Amazon report ID")
    report_type: ReportType
    processing_status: ReportProcessingStatus = ReportProcessingStatus.QUEUED
    data_start_time: Optional[datetime] = None
    data_end_time: Optional[datetime] = None
    report_document_id: Optional[str] = None

    @property
    def is_finished(self) -> bool:
        """Whether polling can stop."""
        return self.processing_status in TERMINAL_REPORT_STATUSES

"""
Unit tests for model helpers and enum vocabularies.
"""

import pytest
from pydantic import ValidationError

from models.address import Address
from models.base import to_insert_payload, to_update_payload
from models.product import ProductCreate, ProductUpdate, ProductCondition
from models.report import Report, ReportProcessingStatus, ReportType
from models.shipment import ShipmentStatus, LabelPrepType, PrepInstruction, PrepOwner

from tests.factories import AddressFactory


class TestAddress:
    """Tests for Address validation."""

    def test_second_line_optional(self):
        address = Address(**AddressFactory.create())

        assert address.address_line2 is None
        assert address.country_code == "US"

    def test_country_code_must_be_two_letters(self):
        with pytest.raises(ValidationError):
            Address(**AddressFactory.create(country_code="USA"))


class TestReport:
    """Tests for Report.is_finished"""

    @pytest.mark.parametrize("status,finished", [
        (ReportProcessingStatus.QUEUED, False),
        (ReportProcessingStatus.IN_PROGRESS, False),
        (ReportProcessingStatus.DONE, True),
        (ReportProcessingStatus.CANCELLED, True),
        (ReportProcessingStatus.FATAL, True),
    ])
    def test_is_finished(self, status, finished):
        report = Report(
            id="r-1",
            user_id="user-1",
            report_type=ReportType.INVENTORY_REPORT,
            processing_status=status,
            created_at="2026-01-01T00:00:00+00:00",
        )

        assert report.is_finished is finished


class TestPayloads:
    """Tests for insert/update serialization."""

    def test_insert_payload_drops_none_and_uses_values(self):
        data = ProductCreate(user_id="user-1", asin=" b0abc ", marketplace_id="ATVPDKIKX0DER")

        payload = to_insert_payload(data)

        assert payload["asin"] == "B0ABC"
        assert payload["condition"] == "NEW"
        assert "price" not in payload
        assert "fnsku" not in payload

    def test_update_payload_keeps_explicit_none(self):
        payload = to_update_payload(ProductUpdate(fnsku=None, price=3.0))

        assert payload == {"fnsku": None, "price": 3.0}


class TestEnums:
    """The stored values must match the SP-API vocabulary."""

    def test_shipment_status_values(self):
        assert {s.value for s in ShipmentStatus} == {
            "WORKING", "SHIPPED", "IN_TRANSIT", "DELIVERED", "CHECKED_IN",
            "RECEIVING", "CLOSED", "CANCELLED", "DELETED", "ERROR",
        }

    def test_condition_count(self):
        assert len(ProductCondition) == 10

    def test_prep_enums(self):
        assert LabelPrepType("AMAZON_LABEL") is LabelPrepType.AMAZON_LABEL
        assert PrepInstruction("POLYBAGGING") is PrepInstruction.POLYBAGGING
        assert {o.value for o in PrepOwner} == {"AMAZON", "SELLER"}


class TestErrors:
    """Tests for the AppError hierarchy."""

    def test_not_found_carries_code_and_details(self):
        from exceptions import ProductNotFoundError

        error = ProductNotFoundError("B0MISSING1")

        assert error.code == "PRODUCT_NOT_FOUND"
        assert error.message == "Product not found"
        assert error.status_code == 404
        assert error.details == {"id": "B0MISSING1"}

    def test_missing_refresh_token_is_validation_error(self):
        from exceptions import MissingRefreshTokenError, ValidationError as AppValidationError

        error = MissingRefreshTokenError()

        assert isinstance(error, AppValidationError)
        assert error.code == "SP_API_NO_REFRESH_TOKEN"
        assert str(error) == "No refresh token available"

"""
Unit tests for config.database helpers.
"""

from unittest.mock import patch

from postgrest.exceptions import APIError

from config.database import (
    check_connection,
    is_no_rows_error,
    reset_connection,
    get_supabase_client,
    NO_ROWS_ERROR_CODE,
)

from tests.factories import ProductFactory, ShipmentFactory


class TestIsNoRowsError:
    """Tests for is_no_rows_error()"""

    def test_recognizes_pgrst116(self):
        error = APIError({"message": "no rows", "code": NO_ROWS_ERROR_CODE})

        assert is_no_rows_error(error) is True

    def test_other_codes_are_not_absence(self):
        assert is_no_rows_error(APIError({"message": "down", "code": "08006"})) is False
        assert is_no_rows_error(ValueError("boom")) is False


class TestCheckConnection:
    """Tests for check_connection()"""

    def test_healthy_reports_counts(self, mock_db, mock_supabase):
        mock_supabase.set_table_data("products", ProductFactory.create_batch(3))
        mock_supabase.set_table_data("shipments", ShipmentFactory.create_batch(1))

        status = check_connection()

        assert status == {"status": "healthy", "products_count": 3, "shipments_count": 1}

    def test_unhealthy_on_failure(self, mock_db, mock_supabase):
        mock_supabase.fail_table("products")

        status = check_connection()

        assert status["status"] == "unhealthy"
        assert "connection refused" in status["error"]


class TestResetConnection:
    """Tests for reset_connection()"""

    def test_clears_cached_client(self):
        with patch("config.database.create_client") as create_client:
            reset_connection()
            first = get_supabase_client()
            reset_connection()
            second = get_supabase_client()

        assert create_client.call_count == 2
        assert first is create_client.return_value
        assert second is create_client.return_value
        reset_connection()

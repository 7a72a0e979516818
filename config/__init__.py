"""
Configuration module.

Exports:
    get_settings: Function to get settings (cached)
    get_supabase_client: Function to get Supabase client
    check_connection: Health check function
"""

from config.settings import get_settings, Settings
from config.database import (
    get_supabase_client,
    check_connection,
    reset_connection,
    is_no_rows_error,
    NO_ROWS_ERROR_CODE,
    DatabaseConnectionError,
)

__all__ = [
    # Settings
    "get_settings",
    "Settings",

    # Database
    "get_supabase_client",
    "check_connection",
    "reset_connection",
    "is_no_rows_error",
    "NO_ROWS_ERROR_CODE",
    "DatabaseConnectionError",
]

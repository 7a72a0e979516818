"""
Settings service for per-user global settings and Amazon credentials.

Both tables hold at most one row per user. Saves are upserts keyed by
user_id; a missing row reads as None rather than an error.
"""

from typing import Optional
from datetime import datetime, timezone
import structlog

from config import get_supabase_client, is_no_rows_error
from models.base import to_update_payload
from models.settings import GlobalSettingsUpdate, GlobalSettings
from models.user import AmazonCredentialsUpdate, AmazonCredentials
from exceptions import DatabaseError, MissingRequiredFieldsError

logger = structlog.get_logger(__name__)

# Non-defaulted fields of AmazonCredentials
REQUIRED_CREDENTIAL_FIELDS = ("seller_id", "marketplace_id")


class SettingsService:
    """
    Settings business logic.

    Handles reads and owner-keyed upserts for settings and credentials.
    """

    def __init__(self):
        self.db = get_supabase_client()
        self.settings_table = "global_settings"
        self.credentials_table = "amazon_credentials"

    # ===================
    # HELPERS
    # ===================

    def _get_one(self, table: str, user_id: str, columns: str = "*") -> Optional[dict]:
        """Fetch the user's single row from table, or None if absent."""
        try:
            result = (
                self.db.table(table)
                .select(columns)
                .eq("user_id", user_id)
                .single()
                .execute()
            )
            return result.data

        except Exception as e:
            if is_no_rows_error(e):
                logger.debug("row_not_found", table=table, user_id=user_id)
                return None
            logger.error("settings_select_failed", table=table, user_id=user_id, error=str(e))
            raise DatabaseError("select", str(e))

    def _upsert(
        self,
        table: str,
        user_id: str,
        values: dict,
        resource: str,
        required_on_insert: tuple[str, ...] = ()
    ) -> dict:
        """
        Update the user's row if it exists, otherwise insert one.

        Args:
            required_on_insert: Fields a new row must carry; checked
                before anything is written

        Returns:
            The stored row

        Raises:
            MissingRequiredFieldsError: If no row exists yet and values
                lacks a required field
        """
        existing = self._get_one(table, user_id, columns="id")

        if not existing:
            missing = [field for field in required_on_insert if not values.get(field)]
            if missing:
                logger.warning(
                    "settings_insert_incomplete",
                    table=table,
                    user_id=user_id,
                    missing=missing
                )
                raise MissingRequiredFieldsError(resource, missing)

        try:
            if existing:
                logger.info("updating_user_row", table=table, user_id=user_id)
                result = (
                    self.db.table(table)
                    .update({
                        **values,
                        "updated_at": datetime.now(timezone.utc).isoformat()
                    })
                    .eq("user_id", user_id)
                    .execute()
                )
            else:
                logger.info("creating_user_row", table=table, user_id=user_id)
                result = (
                    self.db.table(table)
                    .insert({**values, "user_id": user_id})
                    .execute()
                )

            return result.data[0]

        except Exception as e:
            logger.error("settings_upsert_failed", table=table, user_id=user_id, error=str(e))
            raise DatabaseError("upsert", str(e))

    # ===================
    # GLOBAL SETTINGS
    # ===================

    def get_global_settings(self, user_id: str) -> Optional[GlobalSettings]:
        """
        Get a user's global settings.

        Returns:
            GlobalSettings, or None if the user never saved any
        """
        logger.info("getting_global_settings", user_id=user_id)

        row = self._get_one(self.settings_table, user_id)
        return GlobalSettings(**row) if row else None

    def upsert_global_settings(
        self,
        user_id: str,
        data: GlobalSettingsUpdate
    ) -> GlobalSettings:
        """Create or update a user's global settings."""
        row = self._upsert(
            self.settings_table,
            user_id,
            to_update_payload(data),
            resource="Global settings"
        )

        logger.info("global_settings_saved", user_id=user_id)
        return GlobalSettings(**row)

    # ===================
    # AMAZON CREDENTIALS
    # ===================

    def get_amazon_credentials(self, user_id: str) -> Optional[AmazonCredentials]:
        """
        Get a user's Amazon credentials.

        Returns:
            AmazonCredentials, or None if not connected yet
        """
        logger.info("getting_amazon_credentials", user_id=user_id)

        row = self._get_one(self.credentials_table, user_id)
        return AmazonCredentials(**row) if row else None

    def save_amazon_credentials(
        self,
        user_id: str,
        data: AmazonCredentialsUpdate
    ) -> AmazonCredentials:
        """
        Create or update a user's Amazon credentials.

        The first save must include seller_id and marketplace_id; later
        saves may send any subset of fields.

        Raises:
            MissingRequiredFieldsError: If a first save lacks a required field
        """
        row = self._upsert(
            self.credentials_table,
            user_id,
            to_update_payload(data),
            resource="Amazon credentials",
            required_on_insert=REQUIRED_CREDENTIAL_FIELDS
        )

        # Never log token values
        logger.info("amazon_credentials_saved", user_id=user_id)
        return AmazonCredentials(**row)


# Singleton instance
_settings_service: Optional[SettingsService] = None


def get_settings_service() -> SettingsService:
    """Get or create SettingsService instance."""
    global _settings_service
    if _settings_service is None:
        _settings_service = SettingsService()
    return _settings_service

"""
Settings slice: global settings and Amazon credentials for the user.
"""

from typing import Optional

from models.settings import GlobalSettings, GlobalSettingsUpdate
from models.user import AmazonCredentials, AmazonCredentialsUpdate
from services.settings_service import SettingsService, get_settings_service
from store.base import Slice, SliceState, slice_operation


class SettingsState(SliceState):
    global_settings: Optional[GlobalSettings] = None
    amazon_credentials: Optional[AmazonCredentials] = None


class SettingsSlice(Slice):
    """Settings and credential reads/upserts reduced into local state."""

    name = "settings"

    def __init__(self, service: Optional[SettingsService] = None):
        super().__init__(SettingsState())
        self._service = service

    @property
    def service(self) -> SettingsService:
        if self._service is None:
            self._service = get_settings_service()
        return self._service

    # ===================
    # OPERATIONS
    # ===================

    @slice_operation("settings/fetchGlobalSettings", "Failed to fetch settings")
    def fetch_global_settings(self, user_id: str) -> Optional[GlobalSettings]:
        settings = self.service.get_global_settings(user_id)
        self.state.global_settings = settings
        return settings

    @slice_operation("settings/updateGlobalSettings", "Failed to update settings")
    def update_global_settings(
        self,
        user_id: str,
        settings: GlobalSettingsUpdate
    ) -> GlobalSettings:
        saved = self.service.upsert_global_settings(user_id, settings)
        self.state.global_settings = saved
        return saved

    @slice_operation("settings/fetchAmazonCredentials", "Failed to fetch Amazon credentials")
    def fetch_amazon_credentials(self, user_id: str) -> Optional[AmazonCredentials]:
        credentials = self.service.get_amazon_credentials(user_id)
        self.state.amazon_credentials = credentials
        return credentials

    @slice_operation("settings/saveAmazonCredentials", "Failed to save Amazon credentials")
    def save_amazon_credentials(
        self,
        user_id: str,
        credentials: AmazonCredentialsUpdate
    ) -> AmazonCredentials:
        saved = self.service.save_amazon_credentials(user_id, credentials)
        self.state.amazon_credentials = saved
        return saved

    # ===================
    # LOCAL REDUCERS
    # ===================

    def update_local_settings(self, changes: GlobalSettingsUpdate) -> None:
        """Merge unsaved changes into the loaded settings (no-op if none loaded)."""
        current = self.state.global_settings
        if current is None:
            return
        self.state.global_settings = GlobalSettings(
            **{**current.model_dump(), **changes.model_dump(exclude_unset=True)}
        )

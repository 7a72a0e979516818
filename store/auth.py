"""
Auth slice: the signed-in user.
"""

from typing import Optional

from models.user import User
from services.auth_service import AuthService, get_auth_service
from store.base import Slice, SliceState, slice_operation


class AuthState(SliceState):
    user: Optional[User] = None
    is_authenticated: bool = False


class AuthSlice(Slice):
    """Login, registration, logout and session restore."""

    name = "auth"

    def __init__(self, service: Optional[AuthService] = None):
        super().__init__(AuthState())
        self._service = service

    @property
    def service(self) -> AuthService:
        if self._service is None:
            self._service = get_auth_service()
        return self._service

    # ===================
    # OPERATIONS
    # ===================

    @slice_operation("auth/login", "Login failed")
    def login_user(self, email: str, password: str) -> User:
        user = self.service.sign_in(email, password)
        self.state.user = user
        self.state.is_authenticated = True
        return user

    @slice_operation("auth/register", "Registration failed")
    def register_user(self, email: str, password: str) -> User:
        user = self.service.sign_up(email, password)
        self.state.user = user
        self.state.is_authenticated = True
        return user

    @slice_operation("auth/logout", "Logout failed")
    def logout_user(self) -> bool:
        self.service.sign_out()
        self.state.user = None
        self.state.is_authenticated = False
        return True

    @slice_operation("auth/fetchCurrentUser", "Failed to fetch current user")
    def fetch_current_user(self) -> Optional[User]:
        user = self.service.get_current_user()
        self.set_user(user)
        return user

    # ===================
    # LOCAL REDUCERS
    # ===================

    def set_user(self, user: Optional[User]) -> None:
        self.state.user = user
        self.state.is_authenticated = user is not None

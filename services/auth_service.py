"""
Auth service wrapping Supabase Auth.
"""

from typing import Optional
import structlog

from config import get_supabase_client
from models.user import User
from exceptions import AuthError

logger = structlog.get_logger(__name__)


class AuthService:
    """Email/password sign-in, sign-up and session lookup."""

    def __init__(self):
        self.db = get_supabase_client()

    def sign_in(self, email: str, password: str) -> User:
        """
        Sign in with email and password.

        Raises:
            AuthError: If Supabase rejects the credentials
        """
        logger.info("signing_in", email=email)

        try:
            response = self.db.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except Exception as e:
            logger.warning("sign_in_failed", email=email, error=str(e))
            raise AuthError(str(e) or "Login failed") from e

        if response.user is None:
            raise AuthError("Login failed")

        logger.info("signed_in", user_id=response.user.id)
        return User.from_auth_user(response.user)

    def sign_up(self, email: str, password: str) -> User:
        """
        Register a new account.

        Raises:
            AuthError: If registration is rejected
        """
        logger.info("signing_up", email=email)

        try:
            response = self.db.auth.sign_up({"email": email, "password": password})
        except Exception as e:
            logger.warning("sign_up_failed", email=email, error=str(e))
            raise AuthError(str(e) or "Registration failed") from e

        if response.user is None:
            raise AuthError("Registration failed")

        logger.info("signed_up", user_id=response.user.id)
        return User.from_auth_user(response.user)

    def sign_out(self) -> None:
        """End the current session."""
        try:
            self.db.auth.sign_out()
        except Exception as e:
            logger.warning("sign_out_failed", error=str(e))
            raise AuthError(str(e) or "Logout failed") from e

        logger.info("signed_out")

    def get_current_user(self) -> Optional[User]:
        """
        Get the user of the current session.

        Returns:
            User, or None when nobody is signed in
        """
        try:
            response = self.db.auth.get_user()
        except Exception as e:
            logger.warning("get_current_user_failed", error=str(e))
            raise AuthError(str(e) or "Failed to fetch current user") from e

        if response is None or response.user is None:
            return None
        return User.from_auth_user(response.user)


# Singleton instance
_auth_service: Optional[AuthService] = None


def get_auth_service() -> AuthService:
    """Get or create AuthService instance."""
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService()
    return _auth_service

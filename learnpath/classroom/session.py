"""
AuthSession - The signed-in user and the login/register/logout actions.

The token and user record live in LocalStorage so a session survives an
app restart; ApiClient reads the token from the same storage.
"""

import logging
from typing import Optional

from learnpath.api import ApiClient, ApiError, UnauthorizedError
from learnpath.schemas import AuthResult, User
from learnpath.storage import TOKEN_KEY, USER_KEY, LocalStorage

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """Login or registration failed; the message is safe to show the user."""

    pass


class AuthSession:
    def __init__(self, api: ApiClient, storage: LocalStorage):
        self.api = api
        self.storage = storage
        self.user: Optional[User] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None and self.storage.get_item(TOKEN_KEY) is not None

    def restore(self) -> Optional[User]:
        """Rehydrate the user from storage (None if no valid session is stored)."""
        raw_user = self.storage.get_item(USER_KEY)
        if raw_user is None or self.storage.get_item(TOKEN_KEY) is None:
            self.user = None
            return None
        try:
            self.user = User.model_validate(raw_user)
        except ValueError:
            logger.warning("Stored user record is invalid, clearing session")
            self.logout()
        return self.user

    async def login(self, username: str, password: str) -> User:
        """
        Authenticate and store the session.

        Raises:
            AuthError: On missing input or rejected credentials
        """
        if not username or not password:
            raise AuthError("Username and password are required")
        try:
            result = await self.api.auth.login(username, password)
        except ApiError as e:
            raise AuthError(e.message or "Login failed") from e
        except ValueError as e:
            logger.error(f"Malformed login response: {e}")
            raise AuthError("Login failed: unexpected response from server") from e
        return self._store(result)

    async def register(self, username: str, email: str, password: str) -> User:
        """
        Create an account and sign in.

        Raises:
            AuthError: On missing input or a rejected registration
        """
        if not username or not password:
            raise AuthError("Username and password are required")
        if not email:
            raise AuthError("Email is required for registration")
        try:
            result = await self.api.auth.register(username, email, password)
        except ApiError as e:
            raise AuthError(e.message or "Registration failed") from e
        except ValueError as e:
            logger.error(f"Malformed registration response: {e}")
            raise AuthError("Registration failed: unexpected response from server") from e
        return self._store(result)

    async def refresh_profile(self) -> Optional[User]:
        """Reload the user record from the backend; keeps the cached one on failure."""
        try:
            user = await self.api.auth.profile()
        except UnauthorizedError:
            self.user = None
            raise
        except (ApiError, ValueError) as e:
            logger.warning(f"Could not refresh profile: {e}")
            return self.user
        self.user = user
        self.storage.set_item(USER_KEY, user.model_dump(mode="json"))
        return user

    def logout(self):
        self.user = None
        self.storage.remove_item(TOKEN_KEY)
        self.storage.remove_item(USER_KEY)

    def _store(self, result: AuthResult) -> User:
        self.storage.set_item(TOKEN_KEY, result.token)
        self.storage.set_item(USER_KEY, result.user.model_dump(mode="json"))
        self.user = result.user
        logger.info(f"Signed in as {result.user.username}")
        return result.user

"""
auth_service.py — Session and account management
Login/signup, token verification on startup, profile edits and the
password reset flow. The token and user are persisted through SessionStore.
"""
import logging

from grabgoals.api_client import ApiClient
from grabgoals.exceptions import ApiError, BackendUnavailable, InvalidInput, NotAuthenticated
from grabgoals.models.schemas import User
from grabgoals.session_store import SessionStore

logger = logging.getLogger(__name__)

USERNAME_TAKEN = "Username already exists"


class AuthService:
    def __init__(self, api: ApiClient, store: SessionStore):
        self.api = api
        self.store = store
        self.token: str | None = None
        self.user: User | None = None
        self.view_user: User | None = None

    @property
    def is_logged_in(self) -> bool:
        return self.token is not None and self.user is not None

    def current_token(self) -> str | None:
        return self.token

    # ------------------------------------------------------------------
    def _set_session(self, token: str, user: User) -> None:
        self.token = token
        self.user = user
        self.store.save(token, user)

    def _clear_session(self) -> None:
        self.token = None
        self.user = None
        self.store.clear()

    # ------------------------------------------------------------------
    async def initialize(self) -> bool:
        """Restore a stored session if the backend still accepts its token."""
        try:
            stored = self.store.load()
            if not stored:
                return False
            token, user = stored
            if await self.verify_token(token):
                self.token = token
                self.user = user
                return True
            self._clear_session()
            return False
        except Exception as e:
            logger.error(f"Failed to initialize auth: {e}")
            self._clear_session()
            return False

    async def verify_token(self, token: str) -> bool:
        try:
            data = await self.api.post("/auth/verify-token", token=token)
            return bool(data and data.get("valid"))
        except BackendUnavailable as e:
            logger.error(f"Token verification failed: {e}")
            return False

    # ------------------------------------------------------------------
    async def signup(self, username: str, email: str, password: str) -> User:
        try:
            data = await self.api.post(
                "/auth/signup",
                json={"username": username, "email": email, "password": password},
                auth=False,
            )
        except ApiError as e:
            if USERNAME_TAKEN in e.message:
                raise InvalidInput("Username is already taken") from e
            raise
        user = User.model_validate(data["user"])
        self._set_session(data["token"], user)
        return user

    async def login(self, email: str, password: str) -> User:
        data = await self.api.post(
            "/auth/login",
            json={"email": email, "password": password},
            auth=False,
        )
        user = User.model_validate(data["user"])
        self._set_session(data["token"], user)
        logger.info(f"Logged in as {user.username}")
        return user

    async def logout(self) -> None:
        self._clear_session()

    # ------------------------------------------------------------------
    async def fetch_view_user(self, user_id: int) -> User | None:
        """Load another user's profile for display. Failures are logged only."""
        try:
            data = await self.api.get(f"/profile/{user_id}")
            self.view_user = User.model_validate(data)
        except BackendUnavailable as e:
            logger.error(f"Failed to fetch viewed user: {e}")
        return self.view_user

    async def get_profile(self, user_id: int) -> User | None:
        if not self.token:
            return None
        data = await self.api.get(f"/profile/{user_id}")
        self._set_session(self.token, User.model_validate(data))
        return self.user

    async def update_profile(self, user_id: int, username: str) -> User | None:
        if not self.token:
            return None
        if not username or not username.strip():
            raise InvalidInput("Username cannot be empty")
        try:
            data = await self.api.patch(f"/profile/{user_id}", json={"username": username})
        except ApiError as e:
            if e.message == USERNAME_TAKEN:
                raise InvalidInput("Username is already taken") from e
            raise ApiError("Failed to update profile", e.status_code) from e
        self._set_session(self.token, User.model_validate(data))
        return self.user

    async def update_profile_image(self, user_id: int, filename: str, content: bytes,
                                   content_type: str = "image/jpeg") -> User | None:
        if not self.token:
            return None
        data = await self.api.post(
            f"/profile/{user_id}/image-upload",
            files={"profileImage": (filename, content, content_type)},
        )
        self._set_session(self.token, User.model_validate(data))
        return self.user

    # ------------------------------------------------------------------
    async def request_password_reset(self, email: str) -> dict:
        return await self.api.post("/auth/forgot-password", json={"email": email}, auth=False)

    async def verify_reset_code(self, email: str, reset_token: int) -> dict:
        return await self.api.post(
            "/auth/verify-code",
            json={"email": email, "reset_token": reset_token},
            auth=False,
        )

    async def reset_password(self, email: str, entered_code: int, new_password: str) -> dict:
        return await self.api.patch(
            "/auth/reset-password",
            json={"email": email, "newPassword": new_password, "reset_token": entered_code},
            auth=False,
        )

    async def verify_current_password(self, email: str, current_password: str) -> bool:
        data = await self.api.post(
            "/auth/verify-current-password",
            json={"email": email, "currentPassword": current_password},
        )
        if data and data.get("error"):
            raise ApiError(data["error"] or "Current password is incorrect")
        return True

    async def change_password(self, email: str, current_password: str, new_password: str) -> None:
        data = await self.api.patch(
            "/auth/change-password",
            json={"email": email, "currentPassword": current_password, "newPassword": new_password},
        )
        if data and data.get("error"):
            raise ApiError(data["error"] or "Current password is incorrect")

    async def delete_user(self, user_id: int) -> None:
        if not self.token:
            raise NotAuthenticated("No token available")
        try:
            await self.api.delete(f"/auth/delete-user/{user_id}")
        except ApiError as e:
            logger.error(f"Failed to delete user: {e}")
            raise
        await self.logout()

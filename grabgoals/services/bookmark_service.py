"""
bookmark_service.py — Saved posts for the logged-in user
"""
import logging

from grabgoals.api_client import ApiClient
from grabgoals.exceptions import BackendUnavailable, NotAuthenticated, Unauthorized
from grabgoals.models.schemas import Post
from grabgoals.services.auth_service import AuthService

logger = logging.getLogger(__name__)


class BookmarkService:
    def __init__(self, api: ApiClient, auth: AuthService):
        self.api = api
        self.auth = auth

    def _require_token(self) -> None:
        if not self.auth.token:
            logger.info("No token, login required")
            raise NotAuthenticated("Unauthorized")

    async def bookmark_post(self, user_id: int, post_id: int) -> None:
        self._require_token()
        await self.api.post("/bookmarks", json={"userId": user_id, "postId": post_id})

    async def unbookmark_post(self, user_id: int, post_id: int) -> None:
        self._require_token()
        await self.api.delete(f"/bookmarks/{user_id}/{post_id}")

    async def _fetch(self, path: str) -> list[Post]:
        self._require_token()
        try:
            data = await self.api.get(path)
        except Unauthorized:
            raise
        except BackendUnavailable as e:
            logger.error(f"Failed to fetch {path}: {e}")
            return []
        return [Post.model_validate(p) for p in data or []]

    async def fetch_bookmarked_posts(self, user_id: int) -> list[Post]:
        return await self._fetch(f"/bookmarks/{user_id}")

    async def fetch_bookmarked_post_detail(self, user_id: int) -> list[Post]:
        return await self._fetch(f"/bookmarks/{user_id}/detailed")

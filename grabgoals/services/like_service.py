"""
like_service.py — Likes on posts, with optimistic toggling for list views
"""
import logging

from grabgoals.api_client import ApiClient
from grabgoals.exceptions import BackendUnavailable

logger = logging.getLogger(__name__)


class LikeService:
    def __init__(self, api: ApiClient):
        self.api = api

    async def like_post(self, post_id: int, user_id: int) -> None:
        await self.api.post("/likes", json={"user_id": user_id, "post_id": post_id})

    async def unlike_post(self, post_id: int, user_id: int) -> None:
        await self.api.delete("/likes", json={"user_id": user_id, "post_id": post_id})

    async def get_like_status(self, post_id: int, user_id: int) -> bool:
        data = await self.api.get(f"/likes/status/{post_id}/{user_id}")
        return bool(data and data.get("liked"))

    async def fetch_like_count(self, post_id: int) -> int:
        data = await self.api.get(f"/likes/count/{post_id}")
        return int((data or {}).get("count", 0))

    async def toggle_like(self, post_id: int, user_id: int, liked: bool, count: int) -> tuple[bool, int]:
        """Flip the like state, returning the new (liked, count).

        On failure the previous (liked, count) is returned unchanged.
        """
        try:
            if liked:
                await self.unlike_post(post_id, user_id)
                return False, max(count - 1, 0)
            await self.like_post(post_id, user_id)
            return True, count + 1
        except BackendUnavailable as e:
            logger.error(f"Error toggling like on post {post_id}: {e}")
            return liked, count

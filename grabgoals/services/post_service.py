"""
post_service.py — Posts published after a nailed goal
"""
import logging

from grabgoals.api_client import ApiClient
from grabgoals.models.schemas import Post
from grabgoals.services.auth_service import AuthService

logger = logging.getLogger(__name__)


class PostService:
    def __init__(self, api: ApiClient, auth: AuthService):
        self.api = api
        self.auth = auth
        self.nailed_posts: list[Post] = []

    async def fetch_nailed_posts(self, user_id: int) -> list[Post]:
        data = await self.api.get(f"/posts/nailed/{user_id}")
        self.nailed_posts = [Post.model_validate(p) for p in data or []]
        return self.nailed_posts

    async def fetch_all_posts(self) -> list[Post]:
        params = {"viewerId": self.auth.user.id} if self.auth.user else None
        data = await self.api.get("/posts", params=params)
        return [Post.model_validate(p) for p in data or []]

    async def create_post(self, user_id: int, goal_id: int, image_url: str, description: str) -> Post:
        logger.debug(f"createPost user={user_id} goal={goal_id} image={image_url}")
        try:
            data = await self.api.post(
                "/posts",
                json={
                    "user_id": user_id,
                    "goal_id": goal_id,
                    "image_url": image_url,
                    "description": description,
                },
            )
        except Exception as e:
            logger.error(f"createPost failed: {e}")
            raise
        post = Post.model_validate(data)
        self.nailed_posts.append(post)
        return post

    async def upload_post_image(self, filename: str, content: bytes, content_type: str = "image/jpeg") -> str:
        """Upload an image and return the URL the backend stored it under."""
        data = await self.api.post(
            "/posts/upload-image",
            files={"image": (filename or "photo.jpg", content, content_type)},
        )
        return data["imageUrl"]

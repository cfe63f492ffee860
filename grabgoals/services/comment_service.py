"""
comment_service.py — Comments per post
Adds and edits are applied locally first and rolled back if the backend
refuses them; deletes only happen once the backend confirms.
"""
import itertools
import logging
from datetime import datetime, timezone

from grabgoals.api_client import ApiClient
from grabgoals.exceptions import BackendUnavailable, Unauthorized
from grabgoals.models.schemas import Comment
from grabgoals.services.auth_service import AuthService

logger = logging.getLogger(__name__)

DEFAULT_PROFILE_IMAGE = "/images/DefaultProfile.png"


class CommentService:
    def __init__(self, api: ApiClient, auth: AuthService):
        self.api = api
        self.auth = auth
        self.comments_by_post: dict[int, list[Comment]] = {}
        # Placeholder ids for comments the backend hasn't acknowledged yet
        self._temp_ids = itertools.count(-1, -1)

    async def fetch_comments(self, post_id: int) -> list[Comment]:
        try:
            data = await self.api.get(f"/comments/{post_id}")
        except Unauthorized:
            raise
        except BackendUnavailable as e:
            logger.error(f"Error fetching comments: {e}")
            data = []
        if not isinstance(data, list):
            logger.error(f"Invalid comments data for post {post_id}: {data!r}")
            data = []
        self.comments_by_post[post_id] = [Comment.model_validate(c) for c in data]
        return self.comments_by_post[post_id]

    async def add_comment(self, user_id: int, post_id: int, content: str) -> Comment | None:
        user = self.auth.user
        temp = Comment(
            id=next(self._temp_ids),
            user_id=user_id,
            post_id=post_id,
            content=content,
            username=user.username if user else "You",
            profile_image=(user.profile_image if user else None) or DEFAULT_PROFILE_IMAGE,
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        previous = list(self.comments_by_post.get(post_id, []))
        self.comments_by_post[post_id] = [temp] + previous

        try:
            data = await self.api.post(
                "/comments",
                json={"user_id": user_id, "post_id": post_id, "content": content},
            )
        except Unauthorized:
            self.comments_by_post[post_id] = previous
            raise
        except BackendUnavailable as e:
            logger.error(f"Error adding comment: {e}")
            self.comments_by_post[post_id] = previous
            return None

        merged = temp.model_copy(update={k: v for k, v in (data or {}).items() if k in Comment.model_fields})
        self.comments_by_post[post_id] = [
            merged if c.id == temp.id else c for c in self.comments_by_post[post_id]
        ]
        return merged

    async def edit_comment(self, post_id: int, comment_id: int, content: str) -> Comment | None:
        previous = list(self.comments_by_post.get(post_id, []))
        target = next((c for c in previous if c.id == comment_id), None)
        if target is None:
            logger.error(f"Comment not found for editing: {comment_id}")
            return None

        self.comments_by_post[post_id] = [
            c.model_copy(update={"content": content}) if c.id == comment_id else c for c in previous
        ]
        try:
            data = await self.api.patch(f"/comments/{comment_id}", json={"content": content})
        except BackendUnavailable as e:
            logger.error(f"Error editing comment: {e}")
            self.comments_by_post[post_id] = previous
            raise

        # Keep the author fields we already show; the edit endpoint doesn't join them
        update = {k: v for k, v in (data or {}).items() if k in Comment.model_fields}
        update.update(username=target.username, profile_image=target.profile_image, content=update.get("content", content))
        edited = target.model_copy(update=update)
        self.comments_by_post[post_id] = [
            edited if c.id == comment_id else c for c in self.comments_by_post[post_id]
        ]
        return edited

    async def delete_comment(self, post_id: int, comment_id: int) -> bool:
        try:
            await self.api.delete(f"/comments/{comment_id}")
        except Unauthorized:
            raise
        except BackendUnavailable as e:
            logger.error(f"Error deleting comment: {e}")
            return False
        self.comments_by_post[post_id] = [
            c for c in self.comments_by_post.get(post_id, []) if c.id != comment_id
        ]
        return True

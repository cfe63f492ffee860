"""
follower_service.py — Follow graph for dashboards
"""
from grabgoals.api_client import ApiClient
from grabgoals.models.schemas import User
from grabgoals.services.auth_service import AuthService


class FollowerService:
    def __init__(self, api: ApiClient, auth: AuthService):
        self.api = api
        self.auth = auth
        self.followers: list[User] = []

    async def fetch_followers(self, user_id: int) -> list[User] | None:
        if not self.auth.token:
            return None
        data = await self.api.get(f"/followers/followers/{user_id}")
        self.followers = [User.model_validate(u) for u in data or []]
        return self.followers

    async def follow_user(self, follower_id: int, following_id: int) -> None:
        if not self.auth.token:
            return
        await self.api.post(
            "/followers",
            json={"follower_id": follower_id, "following_id": following_id},
        )
        await self.fetch_followers(following_id)

    async def unfollow_user(self, follower_id: int, following_id: int) -> None:
        if not self.auth.token:
            return
        await self.api.delete(
            "/followers",
            json={"follower_id": follower_id, "following_id": following_id},
        )
        await self.fetch_followers(following_id)

    def is_following(self, user_id: int) -> bool:
        """Whether user_id appears among the last fetched followers."""
        return any(u.id == user_id for u in self.followers)

"""
notification_service.py — In-app notifications (likes, comments, follows)
"""
from grabgoals.api_client import ApiClient
from grabgoals.models.schemas import Notification


class NotificationService:
    def __init__(self, api: ApiClient):
        self.api = api

    async def fetch_notifications(self, user_id: int) -> list[Notification]:
        data = await self.api.get(f"/notifications/{user_id}")
        return [Notification.model_validate(n) for n in data or []]

    async def mark_as_read(self, notification_id: int) -> None:
        await self.api.put(f"/notifications/{notification_id}/read")

    async def delete_notification(self, notification_id: int) -> None:
        await self.api.delete(f"/notifications/{notification_id}")

    @staticmethod
    def unread_count(notifications: list[Notification]) -> int:
        return sum(1 for n in notifications if not n.is_read)

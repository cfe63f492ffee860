from grabgoals.models.schemas import User, Goal, Post, Comment, Notification, ChartBucket
from grabgoals.models.stored_session import StoredSession

__all__ = [
    "User",
    "Goal",
    "Post",
    "Comment",
    "Notification",
    "ChartBucket",
    "StoredSession",
]

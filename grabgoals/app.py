"""
app.py — Application container
Builds every client service once at startup and hands them to each other by
reference, so nothing looks collaborators up from global state.
"""
import logging

import httpx

from grabgoals.api_client import ApiClient
from grabgoals.config import API_BASE_URL, DATABASE_URL, LOG_LEVEL, REQUEST_TIMEOUT, TICK_SECONDS
from grabgoals.database import init_db, make_engine, make_session_factory
from grabgoals.services.auth_service import AuthService
from grabgoals.services.bookmark_service import BookmarkService
from grabgoals.services.comment_service import CommentService
from grabgoals.services.follower_service import FollowerService
from grabgoals.services.goal_controller import GoalController
from grabgoals.services.goal_service import GoalService
from grabgoals.services.like_service import LikeService
from grabgoals.services.notification_service import NotificationService
from grabgoals.services.notifier import LoggingNotifier, Notifier
from grabgoals.services.post_service import PostService
from grabgoals.session_store import SessionStore

logger = logging.getLogger(__name__)


def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


class GrabGoalsApp:
    def __init__(
        self,
        base_url: str = API_BASE_URL,
        database_url: str = DATABASE_URL,
        notifier: Notifier | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = REQUEST_TIMEOUT,
        tick_seconds: float = TICK_SECONDS,
        timer_factory=None,
    ):
        self.engine = make_engine(database_url)
        init_db(self.engine)
        self.store = SessionStore(make_session_factory(self.engine))
        self.notifier = notifier or LoggingNotifier()

        self.api = ApiClient(base_url, timeout, transport=transport)
        self.auth = AuthService(self.api, self.store)
        self.api.token_provider = self.auth.current_token

        self.goals = GoalService(self.api)
        self.posts = PostService(self.api, self.auth)
        self.likes = LikeService(self.api)
        self.comments = CommentService(self.api, self.auth)
        self.bookmarks = BookmarkService(self.api, self.auth)
        self.followers = FollowerService(self.api, self.auth)
        self.notifications = NotificationService(self.api)
        self.controller = GoalController(
            self.auth,
            self.goals,
            self.posts,
            notifier=self.notifier,
            tick_seconds=tick_seconds,
            timer_factory=timer_factory,
        )

    async def startup(self) -> bool:
        """Restore the stored session. Returns whether a user is logged in."""
        restored = await self.auth.initialize()
        logger.info(f"grabgoals client ready ({'logged in' if restored else 'logged out'})")
        return restored

    async def aclose(self) -> None:
        await self.controller.close()
        await self.api.aclose()
        self.engine.dispose()

    async def __aenter__(self):
        await self.startup()
        return self

    async def __aexit__(self, *exc):
        await self.aclose()

"""
goal_controller.py — Lifecycle of the single active timed goal

    IDLE --start--> RUNNING --countdown hits 0--> NAILED_IT --post/dismiss--> IDLE
                       |
                       +--fail_out / app backgrounded--> FAILED_OUT --status saved--> IDLE

Every public operation checks its starting state before awaiting anything, and
all local state changes happen before the first await. Whichever of the
zero-crossing and fail_out() is processed first wins; the other sees a
non-RUNNING controller and does nothing.

Backend failures while saving a terminal status are logged and shown to the
user but never undo the local transition: the time ran out, or the user gave
up, whatever the server says.
"""
import logging
from enum import Enum
from typing import Callable

from grabgoals.config import STATUS_FAILED_OUT, STATUS_NAILED_IT, TICK_SECONDS
from grabgoals.exceptions import (
    BackendUnavailable,
    GoalAlreadyActive,
    InvalidInput,
    NotAuthenticated,
)
from grabgoals.models.schemas import Goal, Post
from grabgoals.services import notifier as toast
from grabgoals.services.auth_service import AuthService
from grabgoals.services.goal_service import GoalService
from grabgoals.services.notifier import LoggingNotifier, Notifier
from grabgoals.services.post_service import PostService
from grabgoals.services.timer import IntervalTimer
from grabgoals.utils.formatting import format_countdown

logger = logging.getLogger(__name__)

# Host lifecycle states that forfeit a running goal
FORFEIT_APP_STATES = ("background", "inactive")
BACKGROUND_MESSAGE = "😢 App backgrounded. Failed out."


class GoalState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    NAILED_IT = "nailed it"
    FAILED_OUT = "failed out"


class GoalController:
    def __init__(
        self,
        auth: AuthService,
        goals: GoalService,
        posts: PostService,
        notifier: Notifier | None = None,
        tick_seconds: float = TICK_SECONDS,
        timer_factory: Callable | None = None,
    ):
        self.auth = auth
        self.goals = goals
        self.posts = posts
        self.notifier = notifier or LoggingNotifier()
        self.tick_seconds = tick_seconds
        self.timer_factory = timer_factory or IntervalTimer

        self._state = GoalState.IDLE
        self._starting = False
        self._forfeit_pending = False
        self._timer = None
        self._listeners: list[Callable[[GoalState, GoalState], None]] = []

        self.goal: Goal | None = None
        self.seconds_left: int | None = None
        self.last_outcome: GoalState | None = None

    # ------------------------------------------------------------------
    @property
    def state(self) -> GoalState:
        return self._state

    @property
    def remaining_display(self) -> str | None:
        if self.seconds_left is None:
            return None
        return format_countdown(self.seconds_left)

    def add_listener(self, callback: Callable[[GoalState, GoalState], None]) -> None:
        """callback(old_state, new_state) runs after every transition."""
        self._listeners.append(callback)

    def _transition(self, new_state: GoalState) -> None:
        old_state = self._state
        self._state = new_state
        logger.info(f"Goal state {old_state.value} -> {new_state.value}")
        for callback in list(self._listeners):
            try:
                callback(old_state, new_state)
            except Exception:
                logger.exception("Goal state listener failed")

    def _start_timer(self) -> None:
        self._timer = self.timer_factory(self.tick_seconds, self.tick)
        self._timer.start()

    def _stop_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    # ------------------------------------------------------------------
    async def start(self, title: str, duration_minutes: int) -> Goal:
        """Create the goal on the backend and begin the countdown."""
        if self._state is not GoalState.IDLE or self._starting:
            raise GoalAlreadyActive("A goal is already in progress")
        if not title or not title.strip():
            raise InvalidInput("Title is required")
        if isinstance(duration_minutes, bool) or not isinstance(duration_minutes, int) or duration_minutes <= 0:
            raise InvalidInput("Duration must be a positive number of minutes")

        user = self.auth.user
        if user is None:
            self.notifier.show(toast.INFO, "Oops! looks like you're not logged in.")
            raise NotAuthenticated()

        self._starting = True
        self._forfeit_pending = False
        try:
            goal = await self.goals.create_goal(user.id, title, duration_minutes)
        except BackendUnavailable as e:
            logger.error(f"Error creating goal: {e}")
            self.notifier.show(toast.ERROR, "Error creating goal")
            raise
        finally:
            self._starting = False

        self.goal = goal
        self.seconds_left = duration_minutes * 60
        self.last_outcome = None
        self._transition(GoalState.RUNNING)
        if self._forfeit_pending:
            # App left the foreground while the goal was being created
            self._forfeit_pending = False
            await self.fail_out(BACKGROUND_MESSAGE)
            return goal
        self._start_timer()
        self.notifier.show(toast.SUCCESS, "Goal started!")
        return goal

    async def tick(self) -> None:
        """One second of countdown. Does nothing unless RUNNING."""
        if self._state is not GoalState.RUNNING:
            return
        self.seconds_left -= 1
        if self.seconds_left > 0:
            return
        await self._nail_it()

    async def _nail_it(self) -> None:
        goal = self.goal
        self._stop_timer()
        self.seconds_left = 0
        self.last_outcome = GoalState.NAILED_IT
        self._transition(GoalState.NAILED_IT)
        self.notifier.show(toast.SUCCESS, "💪 Nailed it!")

        try:
            await self.goals.update_goal(goal.id, STATUS_NAILED_IT)
        except BackendUnavailable as e:
            logger.error(f"Error updating goal {goal.id}: {e}")
            self.notifier.show(toast.ERROR, "Error updating goal status. Please try again.")

    # ------------------------------------------------------------------
    async def submit_post(self, image_url: str, description: str) -> Post:
        """Publish the post for the goal just nailed, then go back to IDLE.

        On failure the controller stays in NAILED_IT so the user can retry
        or dismiss.
        """
        user = self.auth.user
        if self._state is not GoalState.NAILED_IT or user is None or self.goal is None:
            self.notifier.show(toast.ERROR, "Cannot post: User or goal not available.")
            raise InvalidInput("Cannot post: User or goal not available.")

        goal_id = self.goal.id
        try:
            post = await self.posts.create_post(user.id, goal_id, image_url, description)
        except BackendUnavailable as e:
            logger.error(f"Error creating post for goal {goal_id}: {e}")
            self.notifier.show(toast.ERROR, "Error creating post.")
            raise

        self.notifier.show(toast.SUCCESS, "Post created!")
        if self._state is GoalState.NAILED_IT and self.goal is not None and self.goal.id == goal_id:
            self._finish()
        return post

    def dismiss_post(self) -> None:
        """Skip the post; the nailed goal stays nailed without one."""
        if self._state is not GoalState.NAILED_IT:
            return
        self._finish()

    def _finish(self) -> None:
        self.goal = None
        self.seconds_left = None
        if self._state is not GoalState.IDLE:
            self._transition(GoalState.IDLE)

    # ------------------------------------------------------------------
    async def fail_out(self, message: str = "😢 Failed out") -> None:
        """Give up on the running goal. Does nothing unless RUNNING."""
        if self._state is not GoalState.RUNNING:
            return
        self._stop_timer()
        goal = self.goal
        self.seconds_left = None
        self.last_outcome = GoalState.FAILED_OUT
        self._transition(GoalState.FAILED_OUT)

        try:
            await self.goals.update_goal(goal.id, STATUS_FAILED_OUT)
            self.notifier.show(toast.ERROR, message)
        except BackendUnavailable as e:
            logger.error(f"Error updating goal {goal.id}: {e}")
            self.notifier.show(toast.ERROR, "Error updating goal status.")
        finally:
            self._finish()

    async def handle_app_state(self, next_state: str) -> None:
        """Host lifecycle hook: leaving the foreground forfeits a running goal.

        If the goal is still being created, the forfeit happens as soon as
        the backend returns it.
        """
        if next_state not in FORFEIT_APP_STATES:
            return
        if self._starting:
            logger.info(f"App went {next_state} while a goal was being created")
            self._forfeit_pending = True
        elif self._state is GoalState.RUNNING:
            logger.info(f"App went {next_state} with goal {self.goal.id} running")
            await self.fail_out(BACKGROUND_MESSAGE)

    async def close(self) -> None:
        """Drop the timer and any local goal; called when the hosting view goes away.

        Nothing is sent to the backend.
        """
        self._stop_timer()
        self._forfeit_pending = False
        if self._state is not GoalState.IDLE:
            self._finish()

"""
goal_service.py — Goal records on the backend
Create a timed goal, flip it to its terminal status, and list a user's goals
for the dashboard.
"""
import logging

from pydantic import ValidationError

from grabgoals.api_client import ApiClient
from grabgoals.config import STATUS_FAILED_OUT, STATUS_NAILED_IT, TERMINAL_STATUSES
from grabgoals.exceptions import ApiError, InvalidInput
from grabgoals.models.schemas import Goal

logger = logging.getLogger(__name__)


class GoalService:
    def __init__(self, api: ApiClient):
        self.api = api
        self.goals: list[Goal] = []

    async def create_goal(self, user_id: int, title: str, duration: int) -> Goal:
        data = await self.api.post(
            "/goals",
            json={"user_id": user_id, "title": title, "duration": duration},
        )
        try:
            goal = Goal.model_validate(data)
        except ValidationError as e:
            logger.error(f"Invalid goal payload from create: {e}")
            raise ApiError("Invalid goal payload") from e
        logger.info(f"Goal {goal.id} created: {title} ({duration} min)")
        return goal

    async def update_goal(self, goal_id: int, status: str) -> Goal | None:
        if status not in TERMINAL_STATUSES:
            raise InvalidInput(f"Unknown goal status: {status}")
        data = await self.api.patch(f"/goals/{goal_id}", json={"status": status})
        for i, g in enumerate(self.goals):
            if g.id == goal_id:
                self.goals[i] = g.model_copy(update={"status": status})
        # The status is saved by now; a partial reply body is not an error
        try:
            return Goal.model_validate(data)
        except ValidationError:
            logger.debug(f"Goal {goal_id} update returned a partial record: {data!r}")
            return None

    async def fetch_goals(self, user_id: int) -> list[Goal]:
        data = await self.api.get(f"/goals/{user_id}")
        self.goals = [Goal.model_validate(g) for g in data or []]
        return self.goals

    def nailed_goals(self) -> list[Goal]:
        return [g for g in self.goals if g.status == STATUS_NAILED_IT]

    def failed_goals(self) -> list[Goal]:
        return [g for g in self.goals if g.status == STATUS_FAILED_OUT]

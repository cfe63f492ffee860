import pytest

from grabgoals.exceptions import ApiError, BackendUnavailable, GoalAlreadyActive, InvalidInput, NotAuthenticated
from grabgoals.services.goal_controller import GoalState
from tests.conftest import ManualTimer


def record_transitions(controller) -> list[tuple[GoalState, GoalState]]:
    seen = []
    controller.add_listener(lambda old, new: seen.append((old, new)))
    return seen


async def run_ticks(controller, count: int) -> None:
    for _ in range(count):
        await controller.tick()


class TestStart:
    async def test_requires_logged_in_user(self, controller, fake_db, notifier):
        with pytest.raises(NotAuthenticated):
            await controller.start("read", 5)

        assert controller.state is GoalState.IDLE
        assert fake_db.goals == {}
        assert notifier.notices == [("info", "Oops! looks like you're not logged in.")]

    @pytest.mark.parametrize("title,duration", [("", 5), ("   ", 5), ("read", 0), ("read", -3), ("read", True)])
    async def test_rejects_invalid_input(self, controller, user, fake_db, title, duration):
        with pytest.raises(InvalidInput):
            await controller.start(title, duration)

        assert controller.state is GoalState.IDLE
        assert fake_db.goals == {}

    async def test_creates_goal_and_starts_countdown(self, controller, user, fake_db, notifier):
        goal = await controller.start("pushups", 5)

        assert controller.state is GoalState.RUNNING
        assert controller.seconds_left == 300
        assert controller.remaining_display == "5:00"
        assert controller.goal.id == goal.id
        assert fake_db.goals[goal.id]["status"] == "in_progress"
        assert fake_db.goals[goal.id]["user_id"] == user.id
        assert ManualTimer.instances[-1].started
        assert notifier.messages() == ["Goal started!"]

    async def test_backend_failure_keeps_idle(self, controller, user, fake_db, notifier):
        fake_db.fail("POST", "/api/goals")

        with pytest.raises(BackendUnavailable):
            await controller.start("read", 1)

        assert controller.state is GoalState.IDLE
        assert controller.goal is None
        assert ManualTimer.instances == []
        assert notifier.messages() == ["Error creating goal"]

    async def test_malformed_create_reply_is_a_backend_error(self, controller, user, fake_db, notifier):
        fake_db.reply("POST", "/api/goals", {"id": 3})

        with pytest.raises(ApiError, match="Invalid goal payload"):
            await controller.start("read", 1)

        assert controller.state is GoalState.IDLE
        assert controller.goal is None
        assert ManualTimer.instances == []
        assert notifier.messages() == ["Error creating goal"]

    async def test_only_one_goal_at_a_time(self, controller, user, fake_db):
        await controller.start("read", 1)

        with pytest.raises(GoalAlreadyActive):
            await controller.start("write", 1)

        assert len(fake_db.goals) == 1
        assert controller.goal.title == "read"


class TestCountdown:
    async def test_tick_decrements(self, controller, user):
        await controller.start("read", 5)
        await controller.tick()

        assert controller.seconds_left == 299
        assert controller.remaining_display == "4:59"

    async def test_read_for_one_minute_nails_it(self, controller, user, fake_db, notifier):
        goal = await controller.start("read", 1)
        timer = ManualTimer.instances[-1]

        await run_ticks(controller, 60)

        assert controller.state is GoalState.NAILED_IT
        assert controller.last_outcome is GoalState.NAILED_IT
        assert fake_db.goals[goal.id]["status"] == "nailed it"
        assert timer.cancelled
        assert "💪 Nailed it!" in notifier.messages()

        await controller.tick()
        assert controller.state is GoalState.NAILED_IT
        assert controller.seconds_left == 0

    @pytest.mark.parametrize("minutes", [1, 2, 3])
    async def test_nails_it_exactly_at_zero(self, controller, user, minutes):
        await controller.start("stretch", minutes)

        await run_ticks(controller, minutes * 60 - 1)
        assert controller.state is GoalState.RUNNING
        assert controller.seconds_left == 1

        await controller.tick()
        assert controller.state is GoalState.NAILED_IT

    async def test_tick_when_idle_is_noop(self, controller):
        await controller.tick()
        assert controller.state is GoalState.IDLE
        assert controller.seconds_left is None

    async def test_partial_status_reply_when_nailing(self, controller, user, fake_db, notifier):
        goal = await controller.start("read", 1)
        fake_db.reply("PATCH", "/api/goals/", {"id": goal.id, "status": "nailed it"})

        await run_ticks(controller, 60)

        assert controller.state is GoalState.NAILED_IT
        assert notifier.notices[-1] == ("success", "💪 Nailed it!")

    async def test_status_failure_does_not_revert_nailed_it(self, controller, user, fake_db, notifier):
        goal = await controller.start("read", 1)
        fake_db.fail("PATCH", "/api/goals/")

        await run_ticks(controller, 60)

        assert controller.state is GoalState.NAILED_IT
        assert fake_db.goals[goal.id]["status"] == "in_progress"
        assert notifier.notices[-1] == ("error", "Error updating goal status. Please try again.")

        controller.dismiss_post()
        assert controller.state is GoalState.IDLE


class TestFailOut:
    async def test_pushups_fail_out_at_tick_ten(self, controller, user, fake_db, notifier):
        goal = await controller.start("pushups", 5)
        timer = ManualTimer.instances[-1]
        await run_ticks(controller, 10)
        seen = record_transitions(controller)

        states_during_update = []
        original_update = controller.goals.update_goal

        async def spy(goal_id, status):
            states_during_update.append(controller.state)
            return await original_update(goal_id, status)

        controller.goals.update_goal = spy
        await controller.fail_out()

        assert states_during_update == [GoalState.FAILED_OUT]
        assert seen == [
            (GoalState.RUNNING, GoalState.FAILED_OUT),
            (GoalState.FAILED_OUT, GoalState.IDLE),
        ]
        assert controller.last_outcome is GoalState.FAILED_OUT
        assert controller.seconds_left is None
        assert controller.goal is None
        assert timer.cancelled
        assert fake_db.goals[goal.id]["status"] == "failed out"
        assert notifier.notices[-1] == ("error", "😢 Failed out")

    async def test_partial_status_reply_still_ends_idle(self, controller, user, fake_db, notifier):
        goal = await controller.start("read", 5)
        fake_db.reply("PATCH", "/api/goals/", {"id": goal.id, "status": "failed out"})

        await controller.handle_app_state("background")

        assert controller.state is GoalState.IDLE
        assert controller.last_outcome is GoalState.FAILED_OUT
        assert notifier.notices[-1] == ("error", "😢 App backgrounded. Failed out.")

    async def test_fail_out_when_idle_is_noop(self, controller, fake_db, notifier):
        seen = record_transitions(controller)

        await controller.fail_out()

        assert controller.state is GoalState.IDLE
        assert seen == []
        assert fake_db.calls == []
        assert notifier.notices == []

    async def test_fail_out_after_zero_crossing_is_noop(self, controller, user, fake_db):
        goal = await controller.start("read", 1)
        await run_ticks(controller, 60)

        await controller.fail_out()

        assert controller.state is GoalState.NAILED_IT
        assert fake_db.goals[goal.id]["status"] == "nailed it"

    async def test_status_failure_still_ends_idle(self, controller, user, fake_db, notifier):
        await controller.start("read", 5)
        fake_db.fail("PATCH", "/api/goals/")
        seen = record_transitions(controller)

        await controller.fail_out()

        assert controller.state is GoalState.IDLE
        assert GoalState.RUNNING not in [new for _, new in seen]
        assert notifier.notices[-1] == ("error", "Error updating goal status.")


class TestBackgrounding:
    @pytest.mark.parametrize("app_state", ["background", "inactive"])
    async def test_leaving_foreground_forfeits_goal(self, controller, user, fake_db, notifier, app_state):
        goal = await controller.start("deep work", 30)
        await run_ticks(controller, 3)
        seen = record_transitions(controller)

        await controller.handle_app_state(app_state)

        assert seen[0] == (GoalState.RUNNING, GoalState.FAILED_OUT)
        assert controller.state is GoalState.IDLE
        assert controller.last_outcome is GoalState.FAILED_OUT
        assert fake_db.goals[goal.id]["status"] == "failed out"
        assert notifier.notices[-1] == ("error", "😢 App backgrounded. Failed out.")

    async def test_active_does_nothing(self, controller, user):
        await controller.start("deep work", 30)

        await controller.handle_app_state("active")

        assert controller.state is GoalState.RUNNING

    async def test_background_while_goal_is_being_created(self, controller, user, fake_db, notifier):
        original_create = controller.goals.create_goal

        async def create_then_background(user_id, title, duration):
            await controller.handle_app_state("background")
            return await original_create(user_id, title, duration)

        controller.goals.create_goal = create_then_background
        goal = await controller.start("deep work", 30)

        assert controller.state is GoalState.IDLE
        assert controller.last_outcome is GoalState.FAILED_OUT
        assert fake_db.goals[goal.id]["status"] == "failed out"
        assert ManualTimer.instances == []
        assert "Goal started!" not in notifier.messages()
        assert notifier.notices[-1] == ("error", "😢 App backgrounded. Failed out.")

        controller.goals.create_goal = original_create
        await controller.start("deep work", 30)
        assert controller.state is GoalState.RUNNING

    async def test_background_when_idle_is_noop(self, controller, fake_db):
        await controller.handle_app_state("background")

        assert controller.state is GoalState.IDLE
        assert fake_db.calls == []


class TestPostFlow:
    async def test_submit_post_returns_to_idle(self, controller, user, fake_db, notifier):
        goal = await controller.start("read", 1)
        await run_ticks(controller, 60)

        post = await controller.submit_post("https://cdn.test/posts/book.jpg", "finished chapter 3")

        assert controller.state is GoalState.IDLE
        assert controller.goal is None
        assert post.goal_id == goal.id
        assert fake_db.posts[post.post_id]["description"] == "finished chapter 3"
        assert notifier.messages()[-1] == "Post created!"

    async def test_post_failure_stays_nailed_and_can_retry(self, controller, user, fake_db, notifier):
        await controller.start("read", 1)
        await run_ticks(controller, 60)
        fake_db.fail("POST", "/api/posts")

        with pytest.raises(BackendUnavailable):
            await controller.submit_post("https://cdn.test/posts/a.jpg", "done")

        assert controller.state is GoalState.NAILED_IT
        assert notifier.messages()[-1] == "Error creating post."

        fake_db.failures.clear()
        await controller.submit_post("https://cdn.test/posts/a.jpg", "done")
        assert controller.state is GoalState.IDLE

    async def test_dismiss_without_post(self, controller, user, fake_db):
        goal = await controller.start("read", 1)
        await run_ticks(controller, 60)

        controller.dismiss_post()

        assert controller.state is GoalState.IDLE
        assert fake_db.posts == {}
        assert fake_db.goals[goal.id]["status"] == "nailed it"

    async def test_submit_post_outside_nailed_it(self, controller, user, notifier):
        with pytest.raises(InvalidInput):
            await controller.submit_post("https://cdn.test/x.jpg", "nope")

        assert notifier.messages() == ["Cannot post: User or goal not available."]

    async def test_can_start_again_after_terminal(self, controller, user):
        await controller.start("read", 1)
        await controller.fail_out()

        await controller.start("read again", 1)

        assert controller.state is GoalState.RUNNING
        assert controller.last_outcome is None


async def test_close_cancels_timer_and_returns_to_idle(controller, user, fake_db):
    goal = await controller.start("read", 1)
    timer = ManualTimer.instances[-1]
    await run_ticks(controller, 5)

    await controller.close()

    assert timer.cancelled
    assert controller.state is GoalState.IDLE
    assert controller.goal is None
    assert controller.seconds_left is None
    assert fake_db.goals[goal.id]["status"] == "in_progress"

    await controller.start("read again", 1)
    assert controller.state is GoalState.RUNNING


async def test_close_after_nailing_drops_the_post_prompt(controller, user):
    await controller.start("read", 1)
    await run_ticks(controller, 60)
    seen = record_transitions(controller)

    await controller.close()
    await controller.close()

    assert controller.state is GoalState.IDLE
    assert seen == [(GoalState.NAILED_IT, GoalState.IDLE)]


async def test_listener_errors_do_not_break_transitions(controller, user):
    def broken(old, new):
        raise RuntimeError("boom")

    controller.add_listener(broken)
    await controller.start("read", 1)

    assert controller.state is GoalState.RUNNING

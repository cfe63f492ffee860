import httpx
import pytest

from grabgoals.app import GrabGoalsApp
from grabgoals.services.notifier import RecordingNotifier
from tests.fake_backend import FakeDB, create_app


class ManualTimer:
    """Timer stand-in: tests call controller.tick() themselves."""

    instances: list["ManualTimer"] = []

    def __init__(self, interval, callback):
        self.interval = interval
        self.callback = callback
        self.started = False
        self.cancelled = False
        ManualTimer.instances.append(self)

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True


@pytest.fixture
def fake_db() -> FakeDB:
    return FakeDB()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
async def client_app(fake_db, notifier):
    ManualTimer.instances = []
    app = GrabGoalsApp(
        base_url="http://test/api",
        database_url="sqlite://",
        notifier=notifier,
        transport=httpx.ASGITransport(app=create_app(fake_db)),
        timer_factory=ManualTimer,
    )
    yield app
    await app.aclose()


@pytest.fixture
async def user(client_app, fake_db):
    """A registered user, logged in on client_app."""
    fake_db.add_user("nailer", "nailer@example.com", "secret")
    return await client_app.auth.login("nailer@example.com", "secret")


@pytest.fixture
def controller(client_app):
    return client_app.controller

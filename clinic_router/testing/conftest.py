import pytest
from fastapi.testclient import TestClient

from clinic_router.config import Settings
from clinic_router.main import create_app
from clinic_router.services.notifications import LogNotifier
from clinic_router.services.router import ToolRouter
from clinic_router.services.seed import make_slot
from clinic_router.services.store import ClinicStore


def make_settings(**overrides):
    values = {"crisis_line_number": None, "enforce_single_booking": False}
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def slots():
    return [
        make_slot("Dr. Chen", "in_person", "2030-01-07T09:00:00Z"),
        make_slot("Dr. Chen", "telehealth", "2030-01-07T09:30:00Z"),
        make_slot("Dr. Rivera", "in_person", "2030-01-07T10:00:00Z"),
        make_slot("Dr. Rivera", "telehealth", "2030-01-08T14:00:00Z"),
    ]


@pytest.fixture
def store(slots):
    return ClinicStore(slots)


@pytest.fixture
def settings():
    return make_settings()


class RecordingNotifier(LogNotifier):
    def __init__(self):
        self.sent = []

    def send(self, to, channel, body):
        self.sent.append({"to": to, "channel": channel, "body": body})
        return super().send(to, channel, body)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def tool_router(store, settings, notifier):
    return ToolRouter(store, settings, notifier)


@pytest.fixture
def call(tool_router):
    """Dispatch a tool and return the envelope body"""
    def _call(name, arguments=None):
        return tool_router.dispatch(name, arguments).body
    return _call


@pytest.fixture
def client(store, settings):
    app = create_app(settings=settings, store=store)
    with TestClient(app) as c:
        yield c

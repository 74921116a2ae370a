"""
Shared test fixtures.

Unit tests get their own in-memory DBStorage and a SessionManager driven by a
controllable clock; API tests get a full app built with TestingConfig.
"""
from datetime import datetime, timedelta, timezone

import pytest

from api import create_app
from models import storage as app_storage
from models.db_storage import DBStorage
from models.user_store import UserStore
from utils.security import TokenSettings
from utils.session_manager import SessionManager

from tests.helpers import PASSWORD

ACCESS_SECRET = "unit-access-secret-0123456789abcdef"
REFRESH_SECRET = "unit-refresh-secret-0123456789abcdef"


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def db():
    storage = DBStorage("sqlite://")
    storage.reload()
    yield storage
    storage.drop_all()


@pytest.fixture
def store(db):
    return UserStore(db)


@pytest.fixture
def settings():
    return TokenSettings(
        access_secret=ACCESS_SECRET,
        access_ttl=timedelta(minutes=15),
        refresh_secret=REFRESH_SECRET,
        refresh_ttl=timedelta(days=7),
    )


@pytest.fixture
def clock():
    return FakeClock(datetime.now(timezone.utc))


@pytest.fixture
def manager(store, settings, clock):
    return SessionManager(store, settings, clock=clock)


@pytest.fixture
def user(store):
    return store.create(
        username="Alice",
        email="Alice@Example.com",
        full_name="Alice Doe",
        password=PASSWORD,
    )


@pytest.fixture
def app():
    app = create_app("test")
    yield app
    app_storage.drop_all()


@pytest.fixture
def client(app):
    # Cookies are sent explicitly so tests control exactly what the server sees
    return app.test_client(use_cookies=False)

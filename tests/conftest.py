"""Pytest fixtures for the user service tests."""

import sys
from pathlib import Path

import pytest
import pytest_asyncio

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from vod.server.db import PeeweeUserStore, create_tables  # noqa: E402
from vod.server.errors import PersistenceError  # noqa: E402
from vod.server.models import RequestContext  # noqa: E402
from vod.server.ports import UserStore  # noqa: E402
from vod.server.services import UserService  # noqa: E402


class FailingStore(UserStore):
    """Store double whose every call raises the configured error."""

    def __init__(self, error: PersistenceError):
        self.error = error
        self.calls = []

    async def create_or_save(self, user):
        self.calls.append(("create_or_save", user))
        raise self.error

    async def find_one(self, **predicate):
        self.calls.append(("find_one", predicate))
        raise self.error

    async def update_fields(self, user_id, fields):
        self.calls.append(("update_fields", user_id, fields))
        raise self.error


@pytest_asyncio.fixture
async def store(tmp_path):
    store = PeeweeUserStore(str(tmp_path / "users.db"))
    await store.connect()
    create_tables()
    yield store
    await store.disconnect()


@pytest.fixture
def service(store) -> UserService:
    return UserService(store)


@pytest.fixture
def ctx() -> RequestContext:
    return RequestContext(request_id="req-test")

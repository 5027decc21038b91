import asyncio

import pytest
from fastapi.testclient import TestClient

from dashboard.app import create_app
from dashboard.config import DashboardSettings
from database.manager import RecordStore

USERS = ("alice", "bob")


async def _seed_sessions(url):
    store = RecordStore.from_url(url)
    await store.initialize()
    tokens = {}
    for user in USERS:
        tokens[user] = await store.create_session(user, token=f"token-{user}")
    tokens["expired"] = await store.create_session("carol", ttl_seconds=-60, token="token-expired")
    await store.dispose()
    return tokens


@pytest.fixture
def store_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'focus.db'}"


@pytest.fixture
def settings(tmp_path, store_url):
    return DashboardSettings(
        _env_file=None,
        STORE_URL=store_url,
        STORE_AUTH_TOKEN="test-token",
        ENVIRONMENT="testing",
        LOGS_DIR=tmp_path / "logs",
    )


@pytest.fixture
def tokens(store_url):
    return asyncio.run(_seed_sessions(store_url))


@pytest.fixture
def client(settings, tokens):
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def alice(tokens):
    return {"Authorization": f"Bearer {tokens['alice']}"}


@pytest.fixture
def bob(tokens):
    return {"Authorization": f"Bearer {tokens['bob']}"}

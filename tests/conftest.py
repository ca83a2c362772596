"""Pytest configuration for fluxql tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from fluxql import (
    AuthTransport,
    InMemoryStore,
    QueryBuilder,
    SessionState,
)
from fluxql.config import CONFIG_PATH

NOW = 1_700_000_000_000
MINUTE = 60_000

TEST_CONFIG = {
    "app": {
        "api": {
            "public": "http://api.test/public",
            "uploadImage": "http://api.test/upload",
            "url": "http://api.test/app",
        },
        "session": {"maxMinutes": 15, "minMinutes": 5},
    },
    "environment": "test",
}


def make_session(minutes_left: float, token: str = "token-1") -> dict:
    """Store-shaped session expiring ``minutes_left`` minutes after NOW."""
    return {
        "expires": int(NOW + minutes_left * MINUTE),
        "issued": NOW - 10 * MINUTE,
        "token": token,
        "userId": "user-1",
        "username": "testuser",
    }


@pytest.fixture
def store() -> InMemoryStore:
    """Store preloaded with the test configuration."""
    return InMemoryStore({CONFIG_PATH: TEST_CONFIG})


@pytest.fixture
def client() -> MagicMock:
    """Wire client double with async ``execute`` and ``post_json``."""
    mock = MagicMock()
    mock.execute = AsyncMock(return_value={})
    mock.post_json = AsyncMock(return_value={"ok": True})
    mock.aclose = AsyncMock()
    return mock


@pytest.fixture
def session_state(store: InMemoryStore) -> SessionState:
    return SessionState(store, clock=lambda: NOW)


@pytest.fixture
def transport(
    store: InMemoryStore, client: MagicMock, session_state: SessionState
) -> AuthTransport:
    return AuthTransport(
        store=store,
        client=client,
        query_builder=QueryBuilder(),
        session_state=session_state,
    )


@pytest.fixture
def session_factory():
    """Build store-shaped sessions relative to the frozen clock."""
    return make_session

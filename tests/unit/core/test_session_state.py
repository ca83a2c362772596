"""Tests for SessionState."""

import pytest

from fluxql import InMemoryStore, Session, SessionState, SessionStatus
from fluxql.core.services.session_state import (
    SESSION_INVALIDATED,
    SESSION_PATH,
    UPDATE_SESSION_SUCCESS,
)


class TestSessionState:
    """Tests for SessionState."""

    def test_absent_without_session(self, session_state: SessionState) -> None:
        assert session_state.session.is_empty
        assert session_state.token == ""
        assert session_state.status(5) is SessionStatus.ABSENT
        assert session_state.is_active() is False

    def test_reads_store_without_caching(
        self, store: InMemoryStore, session_state: SessionState, session_factory
    ) -> None:
        store.set_state(SESSION_PATH, session_factory(30))
        assert session_state.status(5) is SessionStatus.ACTIVE

        store.set_state(SESSION_PATH, session_factory(3, token="token-2"))
        assert session_state.status(5) is SessionStatus.NEAR_EXPIRY
        assert session_state.token == "token-2"

    def test_refreshing_status(
        self, store: InMemoryStore, session_state: SessionState, session_factory
    ) -> None:
        store.set_state(SESSION_PATH, session_factory(3))

        with session_state.refreshing():
            with session_state.refreshing():
                assert session_state.status(5) is SessionStatus.REFRESHING
            assert session_state.status(5) is SessionStatus.REFRESHING

        assert session_state.status(5) is SessionStatus.NEAR_EXPIRY

    def test_expired_session_is_not_active(
        self, store: InMemoryStore, session_state: SessionState, session_factory
    ) -> None:
        store.set_state(SESSION_PATH, session_factory(-1))

        assert session_state.is_active() is False

    @pytest.mark.asyncio
    async def test_adopt_merges_and_dispatches(
        self, store: InMemoryStore, session_state: SessionState, session_factory
    ) -> None:
        store.set_state(SESSION_PATH, session_factory(3))
        refreshed = Session.from_dict({"token": "token-2", "expires": 1_700_000_900_000})

        adopted = await session_state.adopt(refreshed)

        assert adopted.token == "token-2"
        assert adopted.username == "testuser"
        assert store.get_state("user.session.token") == "token-2"
        assert store.get_state("user.session.userId") == "user-1"
        assert store.actions_of_type(UPDATE_SESSION_SUCCESS) == [
            {"session": adopted.to_dict(), "type": UPDATE_SESSION_SUCCESS}
        ]

    @pytest.mark.asyncio
    async def test_clear(
        self, store: InMemoryStore, session_state: SessionState, session_factory
    ) -> None:
        store.set_state(SESSION_PATH, session_factory(30))

        await session_state.clear()

        assert store.get_state(SESSION_PATH) == {}
        assert session_state.session.is_empty
        assert store.actions[-1] == {"type": SESSION_INVALIDATED}

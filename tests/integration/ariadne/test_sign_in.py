"""End-to-end session tests against an Ariadne mock backend.

The backend is served in-process through ``httpx.ASGITransport``; the
same ASGI app answers both the app and the public endpoint.
"""

import secrets
import time
from collections import Counter
from typing import Any

import httpx
import pytest

from fluxql import (
    ApiError,
    InMemoryStore,
    SessionInvalidated,
    UserActions,
    create_transport,
)
from fluxql.core.services.session_state import SESSION_PATH

ariadne = pytest.importorskip("ariadne")
ariadne_asgi = pytest.importorskip("ariadne.asgi")

TYPE_DEFS = """
type Query {
    users: UsersQuery!
}

type Mutation {
    users: UsersMutation!
}

type UsersQuery {
    itemById(userId: ID!): User
}

type UsersMutation {
    signIn(expires: Int, password: String!, username: String!): Session
    refreshSession(expires: Int, token: String!): Session
}

type Session {
    expires: Float
    issued: Float
    token: String
    userId: String
    username: String
}

type User {
    id: ID!
    added: Float
    modified: Float
    userId: String
    username: String
}
"""

API = {
    "public": "http://backend.test/public",
    "uploadImage": "http://backend.test/upload",
    "url": "http://backend.test/app",
}

USER = {"id": "user-1", "password": "password123", "userId": "user-1", "username": "testuser"}


class MockBackend:
    """In-memory users service with token bookkeeping."""

    def __init__(self) -> None:
        self.calls: Counter[str] = Counter()
        self.tokens: dict[str, dict[str, Any]] = {}
        self.app = ariadne_asgi.GraphQL(self._schema())

    def issue(self, expires_minutes: int) -> dict[str, Any]:
        now = int(time.time() * 1000)
        session = {
            "expires": now + expires_minutes * 60_000,
            "issued": now,
            "token": secrets.token_hex(16),
            "userId": USER["userId"],
            "username": USER["username"],
        }
        self.tokens[session["token"]] = session
        return session

    def _schema(self) -> Any:
        query = ariadne.QueryType()
        mutation = ariadne.MutationType()
        users_query = ariadne.ObjectType("UsersQuery")
        users_mutation = ariadne.ObjectType("UsersMutation")

        @query.field("users")
        def resolve_users_query(*_: Any) -> dict:
            return {}

        @mutation.field("users")
        def resolve_users_mutation(*_: Any) -> dict:
            return {}

        @users_mutation.field("signIn")
        def resolve_sign_in(_: Any, info: Any, username: str, password: str, expires: int = 15) -> dict:
            self.calls["signIn"] += 1
            if username != USER["username"] or password != USER["password"]:
                raise ValueError("Invalid username or password")
            return self.issue(expires)

        @users_mutation.field("refreshSession")
        def resolve_refresh(_: Any, info: Any, token: str, expires: int = 15) -> dict:
            self.calls["refreshSession"] += 1
            if token not in self.tokens:
                raise ValueError("invalid_session")
            del self.tokens[token]
            return self.issue(expires)

        @users_query.field("itemById")
        def resolve_item_by_id(_: Any, info: Any, userId: str) -> dict:
            self.calls["itemById"] += 1
            authorization = info.context["request"].headers.get("authorization", "")
            if authorization.removeprefix("Bearer ") not in self.tokens:
                raise ValueError("invalid_session")
            return {key: value for key, value in USER.items() if key != "password"}

        return ariadne.make_executable_schema(
            TYPE_DEFS, query, mutation, users_query, users_mutation
        )


@pytest.fixture
def backend() -> MockBackend:
    return MockBackend()


@pytest.fixture
def users(backend: MockBackend) -> UserActions:
    http_client = httpx.AsyncClient(transport=httpx.ASGITransport(app=backend.app))
    transport = create_transport(
        InMemoryStore(),
        config={"app": {"api": API, "session": {"maxMinutes": 15, "minMinutes": 5}}},
        http_client=http_client,
    )
    return UserActions(transport.store, transport)


class TestSignIn:
    """Sign-in scenarios."""

    @pytest.mark.asyncio
    async def test_sign_in_returns_session(self, users: UserActions, backend: MockBackend) -> None:
        session = await users.sign_in("testuser", "password123")

        assert session.token in backend.tokens
        assert session.expires > session.issued
        assert session.user_id == "user-1"
        assert session.username == "testuser"
        assert set(session.to_dict()) == {"expires", "issued", "token", "userId", "username"}

    @pytest.mark.asyncio
    async def test_authenticated_call_reuses_session(
        self, users: UserActions, backend: MockBackend
    ) -> None:
        session = await users.sign_in("testuser", "password123")

        user = await users.item_by_id(session.user_id)

        assert user["username"] == "testuser"
        assert backend.calls == Counter({"signIn": 1, "itemById": 1})

    @pytest.mark.asyncio
    async def test_wrong_password(self, users: UserActions, backend: MockBackend) -> None:
        session = await users.sign_in("testuser", "password123")

        with pytest.raises(ApiError, match=r"(?i)invalid|error|fail"):
            await users.sign_in("testuser", "wrong-password")

        assert users.store.get_state("user.session.token") == session.token

    @pytest.mark.asyncio
    async def test_wrong_password_without_session(self, users: UserActions) -> None:
        with pytest.raises(ApiError, match=r"(?i)invalid|error|fail"):
            await users.sign_in("testuser", "wrong-password")

        assert users.is_logged_in() is False


class TestSessionLifecycle:
    """Refresh and invalidation against the backend."""

    @pytest.mark.asyncio
    async def test_near_expiry_session_is_refreshed_once(
        self, users: UserActions, backend: MockBackend
    ) -> None:
        first = await users.sign_in("testuser", "password123", expires=3)

        await users.item_by_id("user-1")
        await users.item_by_id("user-1")

        assert backend.calls["refreshSession"] == 1
        assert first.token not in backend.tokens
        assert users.is_logged_in() is True

    @pytest.mark.asyncio
    async def test_unknown_token_invalidates_session(
        self, users: UserActions, backend: MockBackend
    ) -> None:
        await users.sign_in("testuser", "password123")
        backend.tokens.clear()

        result = await users.item_by_id("user-1")

        assert result == {}
        assert isinstance(result, SessionInvalidated)
        assert users.store.get_state(SESSION_PATH) == {}
        assert users.is_logged_in() is False

"""Tests for InMemoryStore."""

import pytest

from fluxql import InMemoryStore


class TestInMemoryStore:
    """Tests for InMemoryStore."""

    def test_dotted_paths(self) -> None:
        store = InMemoryStore()

        store.set_state("user.session", {"token": "abc"})

        assert store.get_state("user.session.token") == "abc"
        assert store.get_state("user") == {"session": {"token": "abc"}}
        assert store.get_state("user.profile.name", "n/a") == "n/a"
        assert store.get_state("user.session.token.length") is None

    def test_initial_state_is_copied(self) -> None:
        initial = {"app.config": {"environment": "test"}}

        store = InMemoryStore(initial)
        store.set_state("app.config.environment", "local")

        assert initial["app.config"]["environment"] == "test"
        assert store.get_state("app.config.environment") == "local"

    def test_set_state_replaces_scalars_on_path(self) -> None:
        store = InMemoryStore({"app": "offline"})

        store.set_state("app.networkType", "wifi")

        assert store.get_state("app") == {"networkType": "wifi"}

    @pytest.mark.asyncio
    async def test_dispatch_records_actions(self) -> None:
        store = InMemoryStore()

        recorded = await store.dispatch({"type": "TAG_ADD_ITEM_SUCCESS", "tag": {"id": "1"}})
        await store.dispatch({"type": "TAG_ADD_ITEM_ERROR", "error": "boom"})

        assert recorded == {"type": "TAG_ADD_ITEM_SUCCESS", "tag": {"id": "1"}}
        assert [action["type"] for action in store.actions] == [
            "TAG_ADD_ITEM_SUCCESS",
            "TAG_ADD_ITEM_ERROR",
        ]
        assert store.actions_of_type("TAG_ADD_ITEM_ERROR") == [
            {"type": "TAG_ADD_ITEM_ERROR", "error": "boom"}
        ]

    @pytest.mark.asyncio
    async def test_dispatch_requires_type(self) -> None:
        store = InMemoryStore()

        with pytest.raises(ValueError):
            await store.dispatch({"tag": {}})

    @pytest.mark.asyncio
    async def test_subscribers(self) -> None:
        store = InMemoryStore()
        seen: list[str] = []

        def sync_listener(action: dict) -> None:
            seen.append(f"sync:{action['type']}")

        async def async_listener(action: dict) -> None:
            seen.append(f"async:{action['type']}")

        unsubscribe = store.subscribe(sync_listener)
        store.subscribe(async_listener)

        await store.dispatch({"type": "A"})
        unsubscribe()
        await store.dispatch({"type": "B"})

        assert seen == ["sync:A", "async:A", "async:B"]

    @pytest.mark.asyncio
    async def test_clear(self) -> None:
        store = InMemoryStore({"user.session": {"token": "abc"}})
        await store.dispatch({"type": "A"})

        store.clear()

        assert store.get_state() == {}
        assert store.actions == []

"""Tests for environment configuration."""

import pytest

from fluxql import AppConfig, InMemoryStore
from fluxql.config import (
    CONFIG_PATH,
    current_environment,
    deep_merge,
    get_config_from_store,
    get_default_config,
    resolve_environment_config,
)


@pytest.fixture(autouse=True)
def clear_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("FLUXQL_STAGE", raising=False)
    monkeypatch.delenv("FLUXQL_ENV", raising=False)


class TestCurrentEnvironment:
    """Tests for current_environment."""

    def test_explicit_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FLUXQL_STAGE", "production")

        assert current_environment("test") == "test"

    def test_stage_variable_before_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FLUXQL_ENV", "development")
        assert current_environment() == "development"

        monkeypatch.setenv("FLUXQL_STAGE", "production")
        assert current_environment() == "production"

    def test_fallback(self) -> None:
        assert current_environment() == "local"


class TestDeepMerge:
    """Tests for deep_merge."""

    def test_nested_merge_without_mutation(self) -> None:
        base = {"app": {"api": {"url": "a", "public": "b"}, "session": {"minMinutes": 5}}}
        override = {"app": {"api": {"url": "c"}}}

        merged = deep_merge(base, None, override)

        assert merged == {"app": {"api": {"url": "c", "public": "b"}, "session": {"minMinutes": 5}}}
        assert base["app"]["api"]["url"] == "a"


class TestDefaults:
    """Tests for default and resolved configuration."""

    def test_local_default(self) -> None:
        config = get_default_config()

        assert config.environment == "local"
        assert config.api.url == "http://localhost:3000/app"
        assert config.session.min_minutes == 5

    def test_production_has_no_default_urls(self) -> None:
        config = get_default_config("production")

        assert config.api.url is None
        assert config.session.max_minutes == 60

    def test_unknown_environment_uses_local(self) -> None:
        config = get_default_config("staging")

        assert config.environment == "staging"
        assert config.api.public == "http://localhost:3000/public"

    def test_resolve_overrides(self) -> None:
        config = resolve_environment_config(
            {
                "local": {"app": {"session": {"minMinutes": 2}}},
                "production": {"app": {"api": {"url": "https://api.acme.io/app"}}},
            },
            environment="production",
        )

        assert config.environment == "production"
        assert config.api.url == "https://api.acme.io/app"
        assert config.session.max_minutes == 60
        assert config.session.min_minutes == 5

    def test_resolve_falls_back_to_local_section(self) -> None:
        config = resolve_environment_config(
            {"local": {"app": {"session": {"minMinutes": 2}}}},
            environment="staging",
        )

        assert config.environment == "staging"
        assert config.session.min_minutes == 2


class TestConfigFromStore:
    """Tests for get_config_from_store."""

    def test_reads_store(self) -> None:
        store = InMemoryStore({CONFIG_PATH: {"app": {"api": {"url": "http://x/app"}}, "environment": "test"}})

        config = get_config_from_store(store)

        assert config.api.url == "http://x/app"
        assert config.environment == "test"

    def test_accepts_app_config_instance(self) -> None:
        config = get_default_config("test")
        store = InMemoryStore()
        store.set_state(CONFIG_PATH, config)

        assert get_config_from_store(store) is config

    def test_falls_back_to_default(self) -> None:
        assert get_config_from_store(InMemoryStore()) == get_default_config()
        assert isinstance(get_config_from_store(InMemoryStore()), AppConfig)

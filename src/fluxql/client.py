"""Convenience wiring for a ready-to-use transport."""

from collections.abc import Mapping
from typing import Any

import httpx

from fluxql.config import (
    CONFIG_PATH,
    get_config_from_store,
    get_default_config,
    resolve_environment_config,
)
from fluxql.core.entities.config import AppConfig
from fluxql.core.interfaces.store import IStore
from fluxql.core.services.auth_transport import AuthTransport
from fluxql.infrastructure.clients.httpx_client import HttpxGraphQLClient
from fluxql.infrastructure.stores.memory import InMemoryStore


def _resolve_config(
    store: IStore,
    config: AppConfig | Mapping[str, Any] | None,
    environment: str | None,
) -> AppConfig:
    if isinstance(config, AppConfig):
        return config
    if config is not None:
        if "app" in config:
            return AppConfig.from_dict(config)
        return resolve_environment_config(config, environment)
    if store.get_state(CONFIG_PATH):
        return get_config_from_store(store)
    return get_default_config(environment)


def create_transport(
    store: IStore | None = None,
    config: AppConfig | Mapping[str, Any] | None = None,
    environment: str | None = None,
    http_client: httpx.AsyncClient | None = None,
    single_flight_refresh: bool = True,
) -> AuthTransport:
    """Create an ``AuthTransport`` with its collaborators.

    The resolved configuration is written to ``app.config`` so later
    changes made through the store are picked up by the transport.

    Args:
        store: The global store. A new ``InMemoryStore`` if None.
        config: An ``AppConfig``, a store-shaped mapping
            (``{"app": {...}}``) or a per-environment mapping
            (``{"production": {...}}``). When None, the store's existing
            ``app.config`` or the environment defaults are used.
        environment: Target environment for per-environment resolution.
        http_client: Optional ``httpx.AsyncClient`` to send requests with.
        single_flight_refresh: Share one in-flight refresh between callers.

    Returns:
        The configured transport.

    Example:
        transport = create_transport(
            config={"app": {"api": {"url": "https://api.acme.io/app",
                                    "public": "https://api.acme.io/public"}}},
        )
        users = UserActions(transport.store, transport)
    """
    store = store if store is not None else InMemoryStore()
    resolved = _resolve_config(store, config, environment)
    store.set_state(CONFIG_PATH, resolved.to_dict())
    return AuthTransport(
        store=store,
        client=HttpxGraphQLClient(http_client),
        single_flight_refresh=single_flight_refresh,
    )

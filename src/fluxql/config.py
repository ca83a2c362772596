"""Environment configuration for fluxql.

Configuration lives in the store under ``app.config`` in the shape::

    {
        "app": {
            "api": {"url": ..., "public": ..., "uploadImage": ...},
            "session": {"minMinutes": 5, "maxMinutes": 15},
        },
        "environment": "development",
    }

Usage:
    from fluxql.config import resolve_environment_config

    config = resolve_environment_config(
        {"production": {"app": {"api": {"url": "https://api.acme.io/app"}}}},
        environment="production",
    )
    store.set_state("app.config", config.to_dict())
"""

import copy
import os
from collections.abc import Mapping
from typing import Any

from fluxql.core.entities.config import AppConfig
from fluxql.core.interfaces.store import IStore

CONFIG_PATH = "app.config"
ENVIRONMENT_VARIABLES = ("FLUXQL_STAGE", "FLUXQL_ENV")
FALLBACK_ENVIRONMENT = "local"

_LOCAL_API = {
    "public": "http://localhost:3000/public",
    "uploadImage": "http://localhost:3000/upload",
    "url": "http://localhost:3000/app",
}

# Production endpoints are deployment specific and must be provided.
DEFAULT_CONFIG: dict[str, dict[str, Any]] = {
    "development": {
        "app": {"api": dict(_LOCAL_API), "session": {"maxMinutes": 15, "minMinutes": 5}},
        "environment": "development",
    },
    "local": {
        "app": {"api": dict(_LOCAL_API), "session": {"maxMinutes": 15, "minMinutes": 5}},
        "environment": "local",
    },
    "production": {
        "app": {"api": {}, "session": {"maxMinutes": 60, "minMinutes": 5}},
        "environment": "production",
    },
    "test": {
        "app": {"api": dict(_LOCAL_API), "session": {"maxMinutes": 15, "minMinutes": 5}},
        "environment": "test",
    },
}


def current_environment(environment: str | None = None) -> str:
    """Resolve the target environment name.

    Args:
        environment: Explicit environment; wins when given.

    Returns:
        The explicit value, else the first set environment variable of
        ``FLUXQL_STAGE``/``FLUXQL_ENV``, else ``local``.
    """
    if environment:
        return environment
    for name in ENVIRONMENT_VARIABLES:
        value = os.environ.get(name)
        if value:
            return value
    return FALLBACK_ENVIRONMENT


def deep_merge(*sources: Mapping[str, Any] | None) -> dict[str, Any]:
    """Recursively merge mappings; later sources win.

    Nested mappings are merged key by key, any other value replaces the
    previous one. Inputs are never mutated.
    """
    merged: dict[str, Any] = {}
    for source in sources:
        if not source:
            continue
        for key, value in source.items():
            if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
                merged[key] = deep_merge(merged[key], value)
            elif isinstance(value, Mapping):
                merged[key] = deep_merge(value)
            else:
                merged[key] = copy.copy(value)
    return merged


def get_default_config(environment: str | None = None) -> AppConfig:
    """Default configuration for ``environment``; unknown names get ``local``."""
    target = current_environment(environment)
    merged = deep_merge(DEFAULT_CONFIG.get(target) or DEFAULT_CONFIG[FALLBACK_ENVIRONMENT])
    merged["environment"] = target
    return AppConfig.from_dict(merged)


def resolve_environment_config(
    config: Mapping[str, Mapping[str, Any]] | None,
    environment: str | None = None,
) -> AppConfig:
    """Resolve a per-environment configuration mapping.

    The caller's section for the target environment is merged over that
    environment's defaults. Environments without a section of their own
    use the merged ``local`` section.

    Args:
        config: Mapping of environment name to configuration overrides.
        environment: Target environment (see ``current_environment``).

    Returns:
        The resolved AppConfig.
    """
    target = current_environment(environment)
    merged = deep_merge(DEFAULT_CONFIG, config)
    resolved = deep_merge(merged.get(target) or merged[FALLBACK_ENVIRONMENT])
    resolved["environment"] = target
    return AppConfig.from_dict(resolved)


def get_config_from_store(store: IStore) -> AppConfig:
    """Read ``app.config`` from the store, falling back to the defaults."""
    config = store.get_state(CONFIG_PATH)
    if isinstance(config, AppConfig):
        return config
    if config:
        return AppConfig.from_dict(config)
    return get_default_config()

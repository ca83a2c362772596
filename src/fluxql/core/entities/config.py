"""SDK configuration entities."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from fluxql.core.errors import ConfigurationError


@dataclass
class ApiConfig:
    """GraphQL endpoint URLs.

    ``url`` serves authenticated calls, ``public`` serves sign-up, sign-in
    and password recovery, ``upload_image`` receives image uploads.
    """

    url: str | None = None
    public: str | None = None
    upload_image: str | None = None

    def require(self, name: str) -> str:
        """Return the URL for ``name`` or raise ConfigurationError."""
        value = getattr(self, name)
        if not value:
            raise ConfigurationError(f"Missing API endpoint configuration: app.api.{name}")
        return str(value)


@dataclass
class SessionConfig:
    """Session lifetime settings, in minutes.

    ``min_minutes`` is the refresh window: a token with at most that many
    minutes left is refreshed before the next authenticated call.
    ``max_minutes`` is the lifetime requested when refreshing.
    """

    min_minutes: int = 5
    max_minutes: int = 15


@dataclass
class AppConfig:
    """Resolved configuration for one environment."""

    api: ApiConfig = field(default_factory=ApiConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    name: str | None = None
    version: str | None = None
    environment: str = "local"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "AppConfig":
        """Build from the store shape.

        Accepts either ``{"app": {...}, "environment": ...}`` or the inner
        ``app`` mapping directly, with camelCase keys.
        """
        data = data or {}
        app = data.get("app", data)
        api = app.get("api") or {}
        session = app.get("session") or {}
        defaults = SessionConfig()
        return cls(
            api=ApiConfig(
                url=api.get("url"),
                public=api.get("public"),
                upload_image=api.get("uploadImage", api.get("upload_image")),
            ),
            session=SessionConfig(
                min_minutes=session.get("minMinutes", defaults.min_minutes),
                max_minutes=session.get("maxMinutes", defaults.max_minutes),
            ),
            name=app.get("name"),
            version=app.get("version"),
            environment=data.get("environment") or "local",
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the store shape read by ``from_dict``."""
        return {
            "app": {
                "api": {
                    "public": self.api.public,
                    "uploadImage": self.api.upload_image,
                    "url": self.api.url,
                },
                "name": self.name,
                "session": {
                    "maxMinutes": self.session.max_minutes,
                    "minMinutes": self.session.min_minutes,
                },
                "version": self.version,
            },
            "environment": self.environment,
        }

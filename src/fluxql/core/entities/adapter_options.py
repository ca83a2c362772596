"""Adapter options entity."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, fields, replace
from typing import Any, Literal

Environment = Literal["development", "production", "test"]

_CAMEL_ALIASES = {
    "allowPartial": "allow_partial",
    "customValidation": "custom_validation",
}


@dataclass(frozen=True)
class AdapterOptions:
    """Options handed to every validator stage.

    Unset fields are ``None`` so that merging only overrides what the
    caller actually provided. Keys outside the known fields are kept in
    ``extra`` and passed through to adapters untouched.
    """

    strict: bool | None = None
    allow_partial: bool | None = None
    environment: Environment | None = None
    custom_validation: Callable[[Any], Any] | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def merge(self, other: "AdapterOptions | Mapping[str, Any] | None") -> "AdapterOptions":
        """Shallow-merge ``other`` on top of these options.

        Args:
            other: Options whose set fields win on conflict.

        Returns:
            A new AdapterOptions instance.
        """
        if other is None:
            return self
        overrides = AdapterOptions.coerce(other)
        changes: dict[str, Any] = {
            f.name: getattr(overrides, f.name)
            for f in fields(self)
            if f.name != "extra" and getattr(overrides, f.name) is not None
        }
        if overrides.extra:
            changes["extra"] = {**self.extra, **overrides.extra}
        return replace(self, **changes) if changes else self

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a known field or an extra key by name."""
        name = _CAMEL_ALIASES.get(key, key)
        if name != "extra" and name in {f.name for f in fields(self)}:
            value = getattr(self, name)
            return default if value is None else value
        return self.extra.get(key, default)

    @classmethod
    def coerce(cls, value: "AdapterOptions | Mapping[str, Any] | None") -> "AdapterOptions":
        """Accept an AdapterOptions, a (snake or camelCase) mapping, or None."""
        if value is None:
            return cls()
        if isinstance(value, AdapterOptions):
            return value
        known = {f.name for f in fields(cls)} - {"extra"}
        kwargs: dict[str, Any] = {}
        extra: dict[str, Any] = {}
        for key, item in value.items():
            name = _CAMEL_ALIASES.get(key, key)
            if name in known:
                kwargs[name] = item
            else:
                extra[key] = item
        return cls(**kwargs, extra=extra)

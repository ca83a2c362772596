"""Store interface."""

from collections.abc import Mapping
from typing import Any, Protocol


class IStore(Protocol):
    """Contract for the Flux-style global store.

    The SDK only reads ``app.config``, ``app.networkType`` and the
    ``user.session*`` keys; everything else it does goes through
    ``dispatch``.
    """

    def get_state(self, path: str | None = None, default: Any = None) -> Any:
        """Read the value at a dotted ``path``.

        Args:
            path: Dotted path such as ``user.session.token``. ``None``
                returns the whole state.
            default: Value returned when the path is absent.

        Returns:
            The stored value, or ``default``.
        """
        ...

    def set_state(self, path: str, value: Any) -> None:
        """Write ``value`` at a dotted ``path``.

        Args:
            path: Dotted path such as ``user.session``.
            value: The value to store.
        """
        ...

    async def dispatch(self, action: Mapping[str, Any]) -> Any:
        """Dispatch an action shaped ``{"type": ..., **payload}``.

        Args:
            action: The action to dispatch.

        Returns:
            Implementation-defined dispatch result.
        """
        ...

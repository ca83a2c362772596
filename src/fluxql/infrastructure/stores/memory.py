"""In-memory store implementation."""

import copy
import inspect
from collections.abc import Callable, Mapping
from typing import Any

Listener = Callable[[dict[str, Any]], Any]

_MISSING = object()


class InMemoryStore:
    """Dict-backed Flux-style store.

    State is addressed with dotted paths (``user.session.token``).
    Dispatched actions are appended to ``actions`` and passed to every
    subscriber; reducers are the host application's concern and are
    plugged in as subscribers.
    """

    def __init__(self, state: Mapping[str, Any] | None = None) -> None:
        """Initialize the store.

        Args:
            state: Initial state. Dotted top-level keys are expanded.
        """
        self._state: dict[str, Any] = {}
        self._actions: list[dict[str, Any]] = []
        self._listeners: list[Listener] = []
        for path, value in (state or {}).items():
            self.set_state(path, copy.deepcopy(value))

    @property
    def actions(self) -> list[dict[str, Any]]:
        """Dispatched actions, oldest first."""
        return list(self._actions)

    def actions_of_type(self, action_type: str) -> list[dict[str, Any]]:
        """Dispatched actions whose ``type`` equals ``action_type``."""
        return [action for action in self._actions if action.get("type") == action_type]

    def get_state(self, path: str | None = None, default: Any = None) -> Any:
        """Read the value at a dotted ``path``.

        Args:
            path: Dotted path; ``None`` returns the whole state.
            default: Value returned when any segment is missing.

        Returns:
            The stored value, or ``default``.
        """
        if path is None:
            return self._state
        node: Any = self._state
        for segment in path.split("."):
            if not isinstance(node, Mapping):
                return default
            node = node.get(segment, _MISSING)
            if node is _MISSING:
                return default
        return node

    def set_state(self, path: str, value: Any) -> None:
        """Write ``value`` at a dotted ``path``, creating parents as needed."""
        segments = path.split(".")
        node = self._state
        for segment in segments[:-1]:
            child = node.get(segment)
            if not isinstance(child, dict):
                child = {}
                node[segment] = child
            node = child
        node[segments[-1]] = value

    async def dispatch(self, action: Mapping[str, Any]) -> dict[str, Any]:
        """Record ``action`` and notify subscribers.

        Args:
            action: Action shaped ``{"type": ..., **payload}``.

        Returns:
            The recorded action.

        Raises:
            ValueError: If the action has no ``type``.
        """
        if not action.get("type"):
            raise ValueError("Actions require a 'type'")
        recorded = dict(action)
        self._actions.append(recorded)
        for listener in list(self._listeners):
            result = listener(recorded)
            if inspect.isawaitable(result):
                await result
        return recorded

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for dispatched actions.

        Returns:
            A callable that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def clear(self) -> None:
        """Reset state and action history."""
        self._state.clear()
        self._actions.clear()

"""Session state backed by the store."""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager

from fluxql.core.entities.session import Session, SessionStatus, current_millis
from fluxql.core.interfaces.store import IStore

logger = logging.getLogger(__name__)

SESSION_PATH = "user.session"

UPDATE_SESSION_SUCCESS = "USER_UPDATE_SESSION_SUCCESS"
UPDATE_SESSION_ERROR = "USER_UPDATE_SESSION_ERROR"
SESSION_INVALIDATED = "USER_SESSION_INVALIDATED"


class SessionState:
    """Reads and writes the session kept under ``user.session`` in the store.

    The store is the single source of truth; this class never caches the
    session, so writes made by other actions are seen immediately.
    """

    def __init__(
        self,
        store: IStore,
        clock: Callable[[], int] = current_millis,
    ) -> None:
        """Initialize the session state.

        Args:
            store: The global store.
            clock: Returns the current time in epoch milliseconds.
        """
        self._store = store
        self._clock = clock
        self._refreshing = 0

    @property
    def session(self) -> Session:
        """The current session (empty when signed out)."""
        return Session.from_dict(self._store.get_state(SESSION_PATH))

    @property
    def token(self) -> str:
        """The current bearer token, or an empty string."""
        return self.session.token or ""

    def now(self) -> int:
        return self._clock()

    def status(self, min_minutes: float) -> SessionStatus:
        """Current lifecycle state given a refresh window of ``min_minutes``."""
        if self._refreshing:
            return SessionStatus.REFRESHING
        return self.session.status(min_minutes, now=self._clock())

    def is_active(self) -> bool:
        """Whether a session exists and has not expired yet."""
        session = self.session
        return not session.is_empty and session.minutes_until_expiry(self._clock()) > 0

    @contextmanager
    def refreshing(self) -> Iterator[None]:
        """Mark the session as ``REFRESHING`` for the duration of the block."""
        self._refreshing += 1
        try:
            yield
        finally:
            self._refreshing -= 1

    async def adopt(
        self,
        session: Session,
        action_type: str = UPDATE_SESSION_SUCCESS,
    ) -> Session:
        """Store ``session``, merged over the current one, and dispatch it.

        Args:
            session: Session data returned by the backend.
            action_type: Type of the dispatched action.

        Returns:
            The stored session.
        """
        current = self.session
        merged = session if current.is_empty else current.merge(session)
        self._store.set_state(SESSION_PATH, merged.to_dict())
        await self._store.dispatch({"session": merged.to_dict(), "type": action_type})
        logger.debug("Session updated, expires at %s", merged.expires)
        return merged

    async def clear(self, action_type: str = SESSION_INVALIDATED) -> None:
        """Remove all session state and dispatch ``action_type``."""
        self._store.set_state(SESSION_PATH, {})
        await self._store.dispatch({"type": action_type})

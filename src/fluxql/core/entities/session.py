"""Session entity."""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class SessionStatus(str, Enum):
    """Lifecycle state of the authenticated session."""

    ABSENT = "absent"
    ACTIVE = "active"
    NEAR_EXPIRY = "near_expiry"
    REFRESHING = "refreshing"


def current_millis() -> int:
    """Return the current time as epoch milliseconds."""
    return int(datetime.now(timezone.utc).timestamp() * 1000)


@dataclass(frozen=True)
class Session:
    """Authenticated user's token with its issuance/expiry metadata.

    A session is either empty or has both ``token`` and ``expires`` set.
    ``issued`` and ``expires`` are epoch milliseconds.
    """

    token: str | None = None
    issued: int | None = None
    expires: int | None = None
    user_id: str | None = None
    username: str | None = None

    def __post_init__(self) -> None:
        """Enforce the all-or-nothing token/expiry pairing."""
        if (self.token is None) != (self.expires is None):
            raise ValueError("A session requires both token and expires")

    @property
    def is_empty(self) -> bool:
        return self.token is None

    def minutes_until_expiry(self, now: int | None = None) -> float:
        """Minutes left before ``expires``; negative once expired."""
        if self.expires is None:
            return 0.0
        reference = current_millis() if now is None else now
        return (self.expires - reference) / 60_000

    def status(self, min_minutes: float, now: int | None = None) -> SessionStatus:
        """Compute the freshness of the session.

        The refresh window is measured against ``expires``: a session whose
        remaining lifetime is at most ``min_minutes`` is near expiry.

        Args:
            min_minutes: Size of the refresh window in minutes.
            now: Optional reference time in epoch milliseconds.

        Returns:
            ``ABSENT``, ``ACTIVE`` or ``NEAR_EXPIRY``.
        """
        if self.is_empty:
            return SessionStatus.ABSENT
        if self.minutes_until_expiry(now) <= min_minutes:
            return SessionStatus.NEAR_EXPIRY
        return SessionStatus.ACTIVE

    def merge(self, other: "Session") -> "Session":
        """Adopt ``other``'s token data, keeping identity fields it lacks."""
        return Session(
            token=other.token,
            issued=other.issued if other.issued is not None else self.issued,
            expires=other.expires,
            user_id=other.user_id or self.user_id,
            username=other.username or self.username,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the store shape (camelCase keys, unset keys omitted)."""
        if self.is_empty:
            return {}
        data = {
            "token": self.token,
            "issued": self.issued,
            "expires": self.expires,
            "userId": self.user_id,
            "username": self.username,
        }
        return {key: value for key, value in data.items() if value is not None}

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "Session":
        """Build a Session from the store or wire shape.

        Partial payloads that lack a token or an expiry collapse to an
        empty session.
        """
        if not data or not data.get("token") or data.get("expires") is None:
            return cls()
        issued = data.get("issued")
        return cls(
            token=str(data["token"]),
            issued=int(issued) if issued is not None else None,
            expires=int(data["expires"]),
            user_id=data.get("userId") or data.get("user_id"),
            username=data.get("username"),
        )

"""Entity action modules built on the action factory."""

from fluxql.actions.users import UserActions, UserInput

__all__ = [
    "UserActions",
    "UserInput",
]

"""Store implementations."""

from fluxql.infrastructure.stores.memory import InMemoryStore

__all__ = ["InMemoryStore"]

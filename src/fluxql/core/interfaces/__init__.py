"""Core interfaces (Protocol classes) for fluxql."""

from fluxql.core.interfaces.graphql_client import IGraphQLClient
from fluxql.core.interfaces.store import IStore
from fluxql.core.interfaces.validator import IValidator

__all__ = [
    "IGraphQLClient",
    "IStore",
    "IValidator",
]

"""Infrastructure layer implementations for fluxql."""

from fluxql.infrastructure.clients import HttpxGraphQLClient
from fluxql.infrastructure.stores import InMemoryStore
from fluxql.infrastructure.validators import PydanticValidator

__all__ = [
    "HttpxGraphQLClient",
    "InMemoryStore",
    "PydanticValidator",
]

"""GraphQL wire clients."""

from fluxql.infrastructure.clients.httpx_client import HttpxGraphQLClient

__all__ = ["HttpxGraphQLClient"]

"""GraphQL wire client interface."""

from typing import Any, Protocol


class IGraphQLClient(Protocol):
    """Contract for the HTTP layer under the auth transport."""

    async def execute(
        self,
        url: str,
        document: str,
        variables: dict[str, Any] | None = None,
        operation_name: str | None = None,
        token: str = "",
    ) -> dict[str, Any]:
        """POST a GraphQL document and return the response ``data``.

        Args:
            url: Endpoint URL.
            document: The GraphQL document.
            variables: Flat variables map.
            operation_name: Name of the operation in ``document``.
            token: Bearer token; empty string sends no Authorization header.

        Returns:
            The ``data`` mapping of the GraphQL response.

        Raises:
            ApiError: If the response carries errors or the request fails.
        """
        ...

    async def post_json(
        self,
        url: str,
        payload: dict[str, Any],
        token: str = "",
    ) -> Any:
        """POST an arbitrary JSON payload outside the GraphQL envelope.

        Args:
            url: Target URL.
            payload: JSON body.
            token: Bearer token; empty string sends no Authorization header.

        Returns:
            The decoded JSON response.
        """
        ...

    async def aclose(self) -> None:
        """Release any connections the client owns."""
        ...

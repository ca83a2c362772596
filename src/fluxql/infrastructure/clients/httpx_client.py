"""httpx-based GraphQL wire client."""

import logging
from typing import Any

import httpx

from fluxql.core.errors import HTTP_ERROR_CODE, NETWORK_ERROR_CODE, ApiError, NetworkError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0

# Gateway failures without a GraphQL envelope mean the backend is unreachable.
NETWORK_STATUS_CODES = frozenset({502, 503, 504})


def auth_headers(token: str) -> dict[str, str]:
    """Build request headers, adding the bearer token when present."""
    headers = {"Accept": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


class HttpxGraphQLClient:
    """GraphQL client over ``httpx.AsyncClient``.

    A client passed in is borrowed and left open by ``aclose``; otherwise
    one is created lazily and owned by this instance.

    Example:
        async with HttpxGraphQLClient() as client:
            data = await client.execute(url, document, variables, "UsersSignIn")
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize the client.

        Args:
            http_client: Optional pre-configured httpx client (e.g. with a
                ``MockTransport`` or ``ASGITransport`` in tests).
            timeout: Request timeout in seconds for an owned client.
        """
        self._http = http_client
        self._owns_client = http_client is None
        self._timeout = timeout

    @property
    def http_client(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient(timeout=self._timeout)
        return self._http

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
            The ``data`` mapping, or an empty dict when the server sent none.

        Raises:
            NetworkError: On connectivity failures.
            InvalidSessionError: If the errors list carries ``invalid_session``.
            ApiError: On any other error list or HTTP failure.
        """
        payload: dict[str, Any] = {"query": document, "variables": variables or {}}
        if operation_name:
            payload["operationName"] = operation_name

        response = await self._post(url, payload, token)
        body = _decode(response)

        if isinstance(body, dict) and ("data" in body or "errors" in body):
            errors = body.get("errors")
            if errors:
                error = ApiError.from_response(errors)
                logger.debug("GraphQL %s returned errors: %s", operation_name, error.errors)
                raise error
            return body.get("data") or {}

        raise _status_error(response)

    async def post_json(
        self,
        url: str,
        payload: dict[str, Any],
        token: str = "",
    ) -> Any:
        """POST an arbitrary JSON payload and return the decoded response.

        Raises:
            NetworkError: On connectivity failures.
            ApiError: On a non-2xx response.
        """
        response = await self._post(url, payload, token)
        if response.is_error:
            raise _status_error(response)
        return _decode(response)

    async def aclose(self) -> None:
        """Close the owned httpx client."""
        if self._owns_client and self._http is not None:
            await self._http.aclose()
            self._http = None

    async def __aenter__(self) -> "HttpxGraphQLClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def _post(self, url: str, payload: dict[str, Any], token: str) -> httpx.Response:
        try:
            return await self.http_client.post(url, json=payload, headers=auth_headers(token))
        except httpx.TransportError as e:
            logger.warning("Request to %s failed: %s", url, e)
            raise NetworkError([NETWORK_ERROR_CODE], f"Request failed: {e}") from e


def _decode(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _status_error(response: httpx.Response) -> ApiError:
    message = f"HTTP {response.status_code} from {response.request.url}"
    if response.status_code in NETWORK_STATUS_CODES:
        return NetworkError([NETWORK_ERROR_CODE], message)
    return ApiError([HTTP_ERROR_CODE], message)

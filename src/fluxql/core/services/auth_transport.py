"""Authenticated GraphQL transport.

Decides which endpoint an operation goes to, keeps the session token
fresh before authenticated calls and classifies failures:

- ``network_error``: a retry record is dispatched to the store and the
  error is re-raised; the caller retries by invoking the action again.
- ``invalid_session``: the session is cleared and the call resolves to
  a ``SessionInvalidated`` (an empty mapping) instead of raising.
- anything else propagates unchanged.

Refresh concurrency: with ``single_flight_refresh=True`` (the default)
refreshes are serialized behind an ``asyncio.Lock`` and freshness is
re-checked once the lock is acquired, so concurrent near-expiry calls
share a single refresh mutation. With ``single_flight_refresh=False``
every near-expiry call issues its own refresh.
"""

import asyncio
import inspect
import logging
from collections.abc import Callable, Iterable, Mapping
from enum import Enum
from typing import Any

from fluxql.config import get_config_from_store
from fluxql.core.entities.config import AppConfig
from fluxql.core.entities.operation import Operation, OperationKind
from fluxql.core.entities.session import Session, SessionStatus
from fluxql.core.errors import (
    ApiError,
    InvalidSessionError,
    NetworkError,
    SessionInvalidated,
)
from fluxql.core.interfaces.graphql_client import IGraphQLClient
from fluxql.core.interfaces.store import IStore
from fluxql.core.services.query_builder import QueryBuilder, get_query_builder
from fluxql.core.services.session_state import UPDATE_SESSION_ERROR, SessionState

logger = logging.getLogger(__name__)

ResponseHandler = Callable[[dict[str, Any]], Any]

NETWORK_TYPE_PATH = "app.networkType"
OFFLINE_NETWORK_TYPES = frozenset({"none", "offline"})

NETWORK_RETRY = "APP_NETWORK_RETRY"

SESSION_COLLECTION = "users"
REFRESH_OPERATION = "refreshSession"
REFRESH_FIELDS = ("expires", "issued", "token", "userId", "username")


class Endpoint(str, Enum):
    """GraphQL endpoints; values name the ``ApiConfig`` attribute."""

    APP = "url"
    PUBLIC = "public"


def extract_result(data: Mapping[str, Any] | None, collection_name: str, field: str) -> Any:
    """Pull ``data[collection][field]``, falling back to a flat ``data[field]``.

    Args:
        data: The ``data`` mapping of a GraphQL response.
        collection_name: The collection wrapper, e.g. ``users``.
        field: The operation field, e.g. ``signIn``.

    Returns:
        The field value, or None when absent.
    """
    if not data:
        return None
    wrapper = data.get(collection_name)
    if isinstance(wrapper, Mapping) and field in wrapper:
        return wrapper[field]
    return data.get(field)


async def call_handler(handler: ResponseHandler | None, data: dict[str, Any]) -> Any:
    """Invoke a sync or async response handler."""
    if handler is None:
        return data
    result = handler(data)
    if inspect.isawaitable(result):
        result = await result
    return result


class AuthTransport:
    """Executes operations against the app or public endpoint.

    Example:
        transport = AuthTransport(store=store, client=HttpxGraphQLClient())
        data = await transport.execute(operation, requires_auth=True)
    """

    def __init__(
        self,
        store: IStore,
        client: IGraphQLClient,
        query_builder: QueryBuilder | None = None,
        session_state: SessionState | None = None,
        config: AppConfig | None = None,
        single_flight_refresh: bool = True,
    ) -> None:
        """Initialize the transport.

        Args:
            store: The global store.
            client: Wire client used for every request.
            query_builder: Document builder. Uses the shared default if None.
            session_state: Session accessor. Built over ``store`` if None.
            config: Fixed configuration. Read from ``app.config`` per call if None.
            single_flight_refresh: Share one in-flight refresh between
                concurrent callers.
        """
        self._store = store
        self._client = client
        self._builder = query_builder or get_query_builder()
        self._session = session_state or SessionState(store)
        self._config = config
        self._refresh_lock: asyncio.Lock | None = asyncio.Lock() if single_flight_refresh else None

    @property
    def store(self) -> IStore:
        return self._store

    @property
    def session_state(self) -> SessionState:
        return self._session

    @property
    def query_builder(self) -> QueryBuilder:
        return self._builder

    @property
    def config(self) -> AppConfig:
        """The configuration in effect for the next call."""
        if self._config is not None:
            return self._config
        return get_config_from_store(self._store)

    def is_offline(self) -> bool:
        """Whether the store marks network connectivity as unavailable."""
        network_type = self._store.get_state(NETWORK_TYPE_PATH)
        return str(network_type).lower() in OFFLINE_NETWORK_TYPES if network_type else False

    async def execute(
        self,
        operation: Operation,
        requires_auth: bool = True,
        on_success: ResponseHandler | None = None,
    ) -> Any:
        """Execute ``operation``.

        Args:
            operation: The operation to send.
            requires_auth: Send to the app endpoint with the session token
                (refreshing it first when near expiry). When False the
                operation goes to the public endpoint without a token.
            on_success: Handler receiving the response ``data``; its return
                value becomes the result of this call.

        Returns:
            The handler's result (or the raw ``data``), the dispatch result
            of a queued retry when offline, or ``SessionInvalidated``.

        Raises:
            NetworkError: On connectivity failures, after queueing a retry.
            InvalidSessionError: If the pre-call refresh is rejected.
            ApiError: On any other GraphQL error.
        """
        if not requires_auth:
            return await self._send(operation, Endpoint.PUBLIC, "", on_success, requires_auth)

        if self.is_offline():
            logger.warning(
                "Network unavailable, queueing %s.%s",
                operation.collection_name,
                operation.operation_name,
            )
            return await self._queue_retry(operation, on_success, requires_auth)

        try:
            await self._ensure_fresh_session()
        except NetworkError:
            logger.warning(
                "Session refresh unreachable, queueing %s.%s",
                operation.collection_name,
                operation.operation_name,
            )
            await self._queue_retry(operation, on_success, requires_auth)
            raise
        return await self._send(
            operation, Endpoint.APP, self._session.token, on_success, requires_auth
        )

    async def replay(self, retry_action: Mapping[str, Any]) -> Any:
        """Re-execute a retry record previously dispatched as ``NETWORK_RETRY``.

        A queued session refresh is re-issued for the token current at
        replay time, not the one captured in the record.
        """
        operation = retry_action["operation"]
        if (operation.collection_name, operation.operation_name) == (
            SESSION_COLLECTION,
            REFRESH_OPERATION,
        ):
            return await self.refresh_session(expires=operation.variable_values.get("expires"))
        return await self.execute(
            operation,
            requires_auth=retry_action.get("requires_auth", True),
            on_success=retry_action.get("response_handler"),
        )

    async def refresh_session(
        self,
        token: str | None = None,
        expires: int | None = None,
    ) -> Session:
        """Exchange a token for a fresh session.

        Args:
            token: Token to refresh. Defaults to the current session token.
            expires: Requested lifetime in minutes. Defaults to
                ``app.session.maxMinutes``.

        Returns:
            The adopted session, or an empty Session when there is no token.

        Raises:
            NetworkError: On connectivity failures, after queueing a retry
                whose handler adopts the refreshed session. The session is
                kept.
            InvalidSessionError: If the backend rejects the refresh; the
                session is cleared.
        """
        current = self._session.token
        if not (token or current):
            return Session()
        if self._refresh_lock is None:
            return await self._refresh(token or current, expires, queue_retry=True)

        async with self._refresh_lock:
            if token is None and self._session.token != current:
                # Refreshed (or cleared) by another caller while waiting.
                return self._session.session
            return await self._refresh(token or current, expires, queue_retry=True)

    async def _refresh(self, token: str, expires: int | None, queue_retry: bool) -> Session:
        config = self.config
        operation = Operation.create(
            kind=OperationKind.MUTATION,
            collection_name=SESSION_COLLECTION,
            operation_name=REFRESH_OPERATION,
            variables={
                "expires": {"type": "Int", "value": expires or config.session.max_minutes},
                "token": {"type": "String!", "value": token},
            },
            return_fields=REFRESH_FIELDS,
        )
        rendered = self._builder.render(operation)
        url = config.api.require(Endpoint.APP.value)

        with self._session.refreshing():
            try:
                data = await self._client.execute(
                    url,
                    rendered.document,
                    rendered.variables,
                    rendered.operation_name,
                    token,
                )
            except NetworkError:
                if queue_retry:
                    await self._queue_retry(operation, self._adopt_refreshed, True)
                raise
            except ApiError as error:
                logger.warning("Session refresh rejected: %s", error)
                await self._invalidate(error)
                raise InvalidSessionError(error.errors, f"Session refresh failed: {error}") from error

        return await self._adopt_refreshed(data)

    async def _adopt_refreshed(self, data: dict[str, Any]) -> Session:
        refreshed = Session.from_dict(extract_result(data, SESSION_COLLECTION, REFRESH_OPERATION))
        if refreshed.is_empty:
            error = InvalidSessionError(message="Session refresh returned no token")
            await self._invalidate(error)
            raise error
        return await self._session.adopt(refreshed)

    async def upload_image(self, payload: dict[str, Any]) -> Any:
        """POST an image payload to ``app.api.uploadImage`` with the session token."""
        url = self.config.api.require("upload_image")
        return await self._client.post_json(url, payload, self._session.token)

    async def aclose(self) -> None:
        """Release the wire client; a borrowed httpx client stays open."""
        await self._client.aclose()

    async def __aenter__(self) -> "AuthTransport":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def app_query(
        self,
        operation_name: str,
        collection_name: str,
        variables: Mapping[str, Any] | None = None,
        return_fields: Iterable[str] | None = None,
        on_success: ResponseHandler | None = None,
    ) -> Any:
        """Authenticated query against the app endpoint."""
        operation = Operation.create(
            OperationKind.QUERY, collection_name, operation_name, variables, return_fields
        )
        return await self.execute(operation, requires_auth=True, on_success=on_success)

    async def app_mutation(
        self,
        operation_name: str,
        collection_name: str,
        variables: Mapping[str, Any] | None = None,
        return_fields: Iterable[str] | None = None,
        on_success: ResponseHandler | None = None,
    ) -> Any:
        """Authenticated mutation against the app endpoint."""
        operation = Operation.create(
            OperationKind.MUTATION, collection_name, operation_name, variables, return_fields
        )
        return await self.execute(operation, requires_auth=True, on_success=on_success)

    async def public_query(
        self,
        operation_name: str,
        collection_name: str,
        variables: Mapping[str, Any] | None = None,
        return_fields: Iterable[str] | None = None,
        on_success: ResponseHandler | None = None,
    ) -> Any:
        """Unauthenticated query against the public endpoint."""
        operation = Operation.create(
            OperationKind.QUERY, collection_name, operation_name, variables, return_fields
        )
        return await self.execute(operation, requires_auth=False, on_success=on_success)

    async def public_mutation(
        self,
        operation_name: str,
        collection_name: str,
        variables: Mapping[str, Any] | None = None,
        return_fields: Iterable[str] | None = None,
        on_success: ResponseHandler | None = None,
    ) -> Any:
        """Unauthenticated mutation against the public endpoint."""
        operation = Operation.create(
            OperationKind.MUTATION, collection_name, operation_name, variables, return_fields
        )
        return await self.execute(operation, requires_auth=False, on_success=on_success)

    async def _ensure_fresh_session(self) -> None:
        min_minutes = self.config.session.min_minutes

        if self._refresh_lock is None:
            session = self._session.session
            if session.status(min_minutes, now=self._session.now()) is SessionStatus.NEAR_EXPIRY:
                await self._refresh(session.token or "", None, queue_retry=False)
            return

        async with self._refresh_lock:
            # Re-checked under the lock: a caller that waited finds the
            # session already refreshed.
            if self._session.status(min_minutes) is SessionStatus.NEAR_EXPIRY:
                logger.debug("Session within %s minute refresh window", min_minutes)
                await self._refresh(self._session.token, None, queue_retry=False)

    async def _send(
        self,
        operation: Operation,
        endpoint: Endpoint,
        token: str,
        on_success: ResponseHandler | None,
        requires_auth: bool,
    ) -> Any:
        url = self.config.api.require(endpoint.value)
        rendered = self._builder.render(operation)
        logger.debug("Sending %s to %s", rendered.operation_name, endpoint.name.lower())

        try:
            data = await self._client.execute(
                url,
                rendered.document,
                rendered.variables,
                rendered.operation_name,
                token,
            )
        except NetworkError:
            await self._queue_retry(operation, on_success, requires_auth)
            raise
        except InvalidSessionError as error:
            logger.warning("Session invalidated during %s", rendered.operation_name)
            await self._invalidate(error)
            return SessionInvalidated()

        return await call_handler(on_success, data)

    async def _queue_retry(
        self,
        operation: Operation,
        on_success: ResponseHandler | None,
        requires_auth: bool,
    ) -> Any:
        return await self._store.dispatch(
            {
                "operation": operation,
                "requires_auth": requires_auth,
                "response_handler": on_success,
                "type": NETWORK_RETRY,
            }
        )

    async def _invalidate(self, error: ApiError) -> None:
        await self._session.clear()
        await self._store.dispatch({"error": error, "type": UPDATE_SESSION_ERROR})

"""User and session actions."""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict

from fluxql.core.entities.action_constants import ActionConstants
from fluxql.core.entities.session import Session
from fluxql.core.errors import ApiError, SessionInvalidated
from fluxql.core.interfaces.store import IStore
from fluxql.core.interfaces.validator import IValidator
from fluxql.core.services.action_factory import EntityActions
from fluxql.core.services.auth_transport import (
    REFRESH_FIELDS,
    SESSION_COLLECTION,
    AuthTransport,
    extract_result,
)
from fluxql.core.services.validator_pipeline import OptionsLike
from fluxql.infrastructure.validators.pydantic import PydanticValidator

logger = logging.getLogger(__name__)

SIGN_IN_SUCCESS = "USER_SIGN_IN_SUCCESS"
SIGN_IN_ERROR = "USER_SIGN_IN_ERROR"
SIGN_UP_SUCCESS = "USER_SIGN_UP_SUCCESS"
SIGN_UP_ERROR = "USER_SIGN_UP_ERROR"
SIGN_OUT_SUCCESS = "USER_SIGN_OUT_SUCCESS"
FORGOT_PASSWORD_SUCCESS = "USER_FORGOT_PASSWORD_SUCCESS"
FORGOT_PASSWORD_ERROR = "USER_FORGOT_PASSWORD_ERROR"

USER_FIELDS = ("added", "id", "modified", "userId", "username")
DEFAULT_SESSION_MINUTES = 15


class UserInput(BaseModel):
    """Default schema for user payloads; unknown fields pass through."""

    model_config = ConfigDict(extra="allow")

    username: str
    password: str | None = None
    email: str | None = None
    phone: str | None = None
    first_name: str | None = None
    last_name: str | None = None


class UserActions(EntityActions):
    """Session actions plus the generic CRUD actions for ``users``.

    Sign-in, sign-up and password recovery go to the public endpoint;
    everything else is authenticated.

    Example:
        users = UserActions(store, transport)
        session = await users.sign_in("testuser", "secret")
        if users.is_logged_in():
            profile = await users.item_by_id(session.user_id)
    """

    def __init__(
        self,
        store: IStore,
        transport: AuthTransport,
        default_validator: IValidator | None = None,
        return_fields: Iterable[str] = USER_FIELDS,
        adapter: IValidator | None = None,
        adapter_options: OptionsLike = None,
    ) -> None:
        super().__init__(
            store,
            transport,
            SESSION_COLLECTION,
            default_validator or PydanticValidator(UserInput),
            return_fields=return_fields,
            constants=ActionConstants.for_entity("user"),
            adapter=adapter,
            adapter_options=adapter_options,
        )
        self._transport = transport

        self._sign_up = self.factory.create_action(
            "signUp",
            SIGN_UP_SUCCESS,
            SIGN_UP_ERROR,
            input_name="user",
            input_type="UserInput!",
            return_fields=self.return_fields,
            requires_auth=False,
        )
        self._forgot_password = self.factory.create_action(
            "forgotPassword",
            FORGOT_PASSWORD_SUCCESS,
            FORGOT_PASSWORD_ERROR,
            input_name="username",
            input_type="String!",
            requires_auth=False,
            validate=False,
        )

    async def sign_in(
        self,
        username: str,
        password: str,
        expires: int = DEFAULT_SESSION_MINUTES,
    ) -> Session:
        """Authenticate against the public endpoint and store the session.

        Args:
            username: Account username.
            password: Account password.
            expires: Requested session lifetime in minutes.

        Returns:
            The stored session.

        Raises:
            ApiError: If the credentials are rejected. The stored session
                is left untouched.
        """

        async def on_success(data: dict[str, Any]) -> Session:
            session = Session.from_dict(extract_result(data, SESSION_COLLECTION, "signIn"))
            if session.is_empty:
                raise ApiError(["sign_in_failed"], "Sign in failed: no session returned")
            return await self._transport.session_state.adopt(session, SIGN_IN_SUCCESS)

        try:
            result = await self._transport.public_mutation(
                "signIn",
                SESSION_COLLECTION,
                {
                    "expires": {"type": "Int", "value": expires},
                    "password": {"type": "String!", "value": password},
                    "username": {"type": "String!", "value": username},
                },
                REFRESH_FIELDS,
                on_success=on_success,
            )
        except Exception as error:
            logger.info("Sign in failed for %s: %s", username, error)
            await self.store.dispatch({"error": error, "type": SIGN_IN_ERROR})
            raise

        if isinstance(result, SessionInvalidated):
            return Session()
        return result

    async def sign_up(
        self,
        user: Mapping[str, Any],
        extra_fields: Iterable[str] | None = None,
        options: OptionsLike = None,
    ) -> Any:
        """Validate and register a new user on the public endpoint."""
        return await self._sign_up(user, extra_fields, options=options)

    async def forgot_password(self, username: str) -> Any:
        """Request a password recovery code for ``username``."""
        return await self._forgot_password(username)

    async def refresh_session(
        self,
        token: str | None = None,
        expires: int | None = None,
    ) -> Session:
        """Exchange the current (or given) token for a fresh session."""
        return await self._transport.refresh_session(token, expires)

    async def sign_out(self) -> bool:
        """Clear the stored session."""
        await self._transport.session_state.clear(SIGN_OUT_SUCCESS)
        return True

    def is_logged_in(self) -> bool:
        """Whether a session exists and has not expired."""
        return self._transport.session_state.is_active()

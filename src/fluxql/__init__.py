"""fluxql - GraphQL client SDK for Flux-style stores.

Builds GraphQL documents, validates entity payloads through a pluggable
validator pipeline, keeps the session token fresh before authenticated
calls and reports every outcome to the store as an action.

Example:
    from pydantic import BaseModel

    from fluxql import (
        EntityActions,
        InMemoryStore,
        PydanticValidator,
        UserActions,
        create_transport,
    )

    class TagInput(BaseModel):
        name: str
        category: str | None = None

    store = InMemoryStore()
    transport = create_transport(
        store,
        config={
            "app": {
                "api": {
                    "url": "https://api.acme.io/app",
                    "public": "https://api.acme.io/public",
                },
                "session": {"minMinutes": 5, "maxMinutes": 30},
            },
        },
    )

    users = UserActions(store, transport)
    await users.sign_in("testuser", "secret")

    tags = EntityActions(store, transport, "tags", PydanticValidator(TagInput))
    tag = await tags.add({"name": "python"}, extra_fields=["category"])

    # Hot-swap validation without rebuilding the action set
    tags.update_tag_adapter(lambda value, options: {**value, "name": value["name"].lower()})
    tags.update_tag_adapter_options({"strict": True})
"""

from fluxql.actions import UserActions, UserInput
from fluxql.client import create_transport
from fluxql.config import (
    get_config_from_store,
    get_default_config,
    resolve_environment_config,
)
from fluxql.core.entities import (
    ActionConstants,
    AdapterOptions,
    ApiConfig,
    AppConfig,
    Operation,
    OperationKind,
    OperationVariable,
    RenderedOperation,
    Session,
    SessionConfig,
    SessionStatus,
)
from fluxql.core.errors import (
    ApiError,
    ConfigurationError,
    ErrorKind,
    FluxQLError,
    InvalidSessionError,
    NetworkError,
    SessionInvalidated,
    ValidationError,
)
from fluxql.core.interfaces import IGraphQLClient, IStore, IValidator
from fluxql.core.services import (
    NETWORK_RETRY,
    ActionFactory,
    AuthTransport,
    ComposedValidator,
    EntityActions,
    QueryBuilder,
    SessionState,
    ValidatorPipeline,
    compose,
    create_entity_actions,
    create_mutation,
    create_query,
)
from fluxql.infrastructure import (
    HttpxGraphQLClient,
    InMemoryStore,
    PydanticValidator,
)

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Entities
    "ActionConstants",
    "AdapterOptions",
    "ApiConfig",
    "AppConfig",
    "SessionConfig",
    "Operation",
    "OperationKind",
    "OperationVariable",
    "RenderedOperation",
    "Session",
    "SessionStatus",
    # Errors
    "ErrorKind",
    "FluxQLError",
    "ApiError",
    "ConfigurationError",
    "InvalidSessionError",
    "NetworkError",
    "SessionInvalidated",
    "ValidationError",
    # Interfaces
    "IGraphQLClient",
    "IStore",
    "IValidator",
    # Query building
    "QueryBuilder",
    "create_mutation",
    "create_query",
    # Validation
    "ComposedValidator",
    "ValidatorPipeline",
    "compose",
    # Session and transport
    "NETWORK_RETRY",
    "AuthTransport",
    "SessionState",
    # Actions
    "ActionFactory",
    "EntityActions",
    "UserActions",
    "UserInput",
    "create_entity_actions",
    # Configuration
    "create_transport",
    "get_config_from_store",
    "get_default_config",
    "resolve_environment_config",
    # Infrastructure implementations
    "HttpxGraphQLClient",
    "InMemoryStore",
    "PydanticValidator",
]

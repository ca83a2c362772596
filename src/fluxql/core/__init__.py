"""Core domain layer for fluxql."""

from fluxql.core.entities import (
    AdapterOptions,
    AppConfig,
    Operation,
    OperationVariable,
    Session,
)
from fluxql.core.errors import (
    ApiError,
    FluxQLError,
    InvalidSessionError,
    NetworkError,
    ValidationError,
)
from fluxql.core.interfaces import IGraphQLClient, IStore, IValidator
from fluxql.core.services import (
    ActionFactory,
    AuthTransport,
    QueryBuilder,
    SessionState,
    ValidatorPipeline,
)

__all__ = [
    # Entities
    "AdapterOptions",
    "AppConfig",
    "Operation",
    "OperationVariable",
    "Session",
    # Errors
    "FluxQLError",
    "ApiError",
    "InvalidSessionError",
    "NetworkError",
    "ValidationError",
    # Interfaces
    "IGraphQLClient",
    "IStore",
    "IValidator",
    # Services
    "ActionFactory",
    "AuthTransport",
    "QueryBuilder",
    "SessionState",
    "ValidatorPipeline",
]

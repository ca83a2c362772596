"""Domain services for fluxql."""

from fluxql.core.services.action_factory import (
    ActionFactory,
    EntityActions,
    create_entity_actions,
)
from fluxql.core.services.auth_transport import (
    NETWORK_RETRY,
    AuthTransport,
    Endpoint,
    extract_result,
)
from fluxql.core.services.query_builder import (
    QueryBuilder,
    create_mutation,
    create_query,
    get_query_builder,
)
from fluxql.core.services.session_state import SESSION_PATH, SessionState
from fluxql.core.services.validator_pipeline import (
    ComposedValidator,
    ValidatorPipeline,
    compose,
)

__all__ = [
    # Query building
    "QueryBuilder",
    "create_mutation",
    "create_query",
    "get_query_builder",
    # Validation
    "ComposedValidator",
    "ValidatorPipeline",
    "compose",
    # Session and transport
    "SESSION_PATH",
    "SessionState",
    "NETWORK_RETRY",
    "AuthTransport",
    "Endpoint",
    "extract_result",
    # Actions
    "ActionFactory",
    "EntityActions",
    "create_entity_actions",
]

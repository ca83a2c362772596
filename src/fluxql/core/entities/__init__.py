"""Domain entities for fluxql."""

from fluxql.core.entities.action_constants import ActionConstants
from fluxql.core.entities.adapter_options import AdapterOptions
from fluxql.core.entities.config import ApiConfig, AppConfig, SessionConfig
from fluxql.core.entities.operation import (
    Operation,
    OperationKind,
    OperationVariable,
    RenderedOperation,
)
from fluxql.core.entities.session import Session, SessionStatus, current_millis

__all__ = [
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
    "current_millis",
]

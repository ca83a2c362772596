"""Validator implementations."""

from fluxql.infrastructure.validators.pydantic import PydanticValidator

__all__ = ["PydanticValidator"]

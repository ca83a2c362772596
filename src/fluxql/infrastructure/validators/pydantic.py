"""Default validators built from pydantic models."""

from functools import lru_cache
from typing import Any, Optional

import pydantic

from fluxql.core.entities.adapter_options import AdapterOptions
from fluxql.core.errors import ValidationError

ROOT_FIELD = "__root__"


@lru_cache(maxsize=None)
def partial_model(model: type[pydantic.BaseModel]) -> type[pydantic.BaseModel]:
    """Derive a model whose fields are all optional, for partial updates."""
    fields: dict[str, Any] = {
        name: (Optional[info.annotation], None) for name, info in model.model_fields.items()
    }
    return pydantic.create_model(
        f"Partial{model.__name__}", __config__=model.model_config, **fields
    )


def to_validation_error(error: pydantic.ValidationError) -> ValidationError:
    """Translate the first pydantic error into a fluxql ``ValidationError``."""
    first = error.errors()[0]
    field = ".".join(str(part) for part in first["loc"]) or ROOT_FIELD
    return ValidationError(field, first["msg"])


class PydanticValidator:
    """Schema validator backed by a pydantic model.

    Honors two options:

    - ``strict``: validate in pydantic strict mode (no type coercion).
    - ``allow_partial``: validate only the fields present in the input,
      as used by update actions.

    The validated payload is returned as a JSON-compatible dict, ready to
    be sent as GraphQL variables.

    Example:
        class TagInput(BaseModel):
            name: str

        validate = PydanticValidator(TagInput)
        validate({"name": "python"}, AdapterOptions())
    """

    def __init__(self, model: type[pydantic.BaseModel]) -> None:
        self.model = model

    def __call__(self, value: Any, options: AdapterOptions) -> dict[str, Any]:
        partial = bool(options.allow_partial)
        model = partial_model(self.model) if partial else self.model
        try:
            instance = model.model_validate(value, strict=options.strict)
        except pydantic.ValidationError as e:
            raise to_validation_error(e) from e
        return instance.model_dump(mode="json", exclude_unset=partial)

    def __repr__(self) -> str:
        return f"PydanticValidator({self.model.__name__})"

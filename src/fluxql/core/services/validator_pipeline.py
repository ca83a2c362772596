"""Validator composition pipeline.

Every entity validates input the same way:

1. the default validator (schema validation, mandatory);
2. the custom adapter, if one is registered;
3. ``custom_validation`` from the merged options, if present.

Each stage receives the previous stage's output. Stages are synchronous.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from fluxql.core.entities.adapter_options import AdapterOptions
from fluxql.core.interfaces.validator import IValidator
from fluxql.utils.cell import Cell

OptionsLike = AdapterOptions | Mapping[str, Any] | None


def run_stages(
    value: Any,
    default_validator: IValidator,
    adapter: IValidator | None,
    options: AdapterOptions,
) -> Any:
    """Run the three validation stages with already-merged ``options``."""
    validated = default_validator(value, options)
    if adapter is not None:
        validated = adapter(validated, options)
    if options.custom_validation is not None:
        validated = options.custom_validation(validated)
    return validated


def compose(
    default_validator: IValidator,
    custom_adapter: IValidator | None = None,
    base_options: OptionsLike = None,
) -> "ComposedValidator":
    """Compose a fixed validator from its stages.

    Args:
        default_validator: Schema validator, always run first.
        custom_adapter: Optional adapter run on the default's output.
        base_options: Options merged under every call's options.

    Returns:
        A callable ``validate(value, options=None)``.
    """
    return ComposedValidator(default_validator, custom_adapter, AdapterOptions.coerce(base_options))


@dataclass(frozen=True)
class ComposedValidator:
    """Immutable composition returned by ``compose``."""

    default_validator: IValidator
    adapter: IValidator | None
    options: AdapterOptions

    def __call__(self, value: Any, options: OptionsLike = None) -> Any:
        return run_stages(value, self.default_validator, self.adapter, self.options.merge(options))


@dataclass(frozen=True)
class _PipelineState:
    adapter: IValidator | None
    options: AdapterOptions


class ValidatorPipeline:
    """Validator whose adapter and options can be swapped at runtime.

    The adapter and base options live together in a single ``Cell``.
    ``validate`` reads the cell once on entry, so an update issued while
    a call is running only affects calls that start afterwards.
    """

    def __init__(
        self,
        default_validator: IValidator,
        adapter: IValidator | None = None,
        options: OptionsLike = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            default_validator: Schema validator, always run first.
            adapter: Optional custom adapter.
            options: Initial base options.
        """
        self._default_validator = default_validator
        self._state = Cell(_PipelineState(adapter, AdapterOptions.coerce(options)))

    @property
    def adapter(self) -> IValidator | None:
        """The currently registered custom adapter."""
        return self._state.get().adapter

    @property
    def options(self) -> AdapterOptions:
        """Snapshot of the current base options."""
        return self._state.get().options

    def validate(self, value: Any, options: OptionsLike = None) -> Any:
        """Validate ``value`` through all applicable stages.

        Args:
            value: The raw input payload.
            options: Per-call options; they win over the base options.

        Returns:
            The output of the last stage that ran.

        Raises:
            ValidationError: If any stage rejects the value.
        """
        state = self._state.get()
        merged = state.options.merge(options)
        return run_stages(value, self._default_validator, state.adapter, merged)

    __call__ = validate

    def update_adapter(self, adapter: IValidator | None) -> None:
        """Replace the custom adapter for subsequent calls."""
        self._state.update(lambda state: _PipelineState(adapter, state.options))

    def update_options(self, options: OptionsLike) -> None:
        """Shallow-merge ``options`` into the base options for subsequent calls."""
        self._state.update(lambda state: _PipelineState(state.adapter, state.options.merge(options)))

"""Validator interface."""

from typing import Any, Protocol

from fluxql.core.entities.adapter_options import AdapterOptions


class IValidator(Protocol):
    """Contract for default validators and custom adapters.

    A validator receives the payload (raw input for the default stage,
    the previous stage's output otherwise) plus the merged options, and
    returns the validated value or raises ``ValidationError``.
    """

    def __call__(self, value: Any, options: AdapterOptions) -> Any:
        """Validate and optionally transform ``value``.

        Args:
            value: The payload to validate.
            options: Options merged for this call.

        Returns:
            The validated value.

        Raises:
            ValidationError: If the payload is rejected.
        """
        ...

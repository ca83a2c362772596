"""GraphQL operation value objects."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class OperationKind(str, Enum):
    """GraphQL operation type."""

    QUERY = "query"
    MUTATION = "mutation"


@dataclass(frozen=True)
class OperationVariable:
    """A typed variable of a GraphQL operation.

    Attributes:
        name: Variable name, used both in the signature (``$name``) and
            in the field arguments (``name: $name``).
        graphql_type: GraphQL type literal, e.g. ``String!`` or ``TagInput``.
        value: The value sent in the variables map.
    """

    name: str
    graphql_type: str
    value: Any = None

    def with_value(self, value: Any) -> "OperationVariable":
        """Return a copy carrying ``value``."""
        return OperationVariable(self.name, self.graphql_type, value)


@dataclass(frozen=True)
class Operation:
    """Immutable description of a single GraphQL query or mutation."""

    kind: OperationKind
    collection_name: str
    operation_name: str
    variables: tuple[OperationVariable, ...] = ()
    return_fields: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Reject duplicate variable names."""
        names = [variable.name for variable in self.variables]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate operation variables: {', '.join(duplicates)}")

    @property
    def shape(self) -> tuple[Any, ...]:
        """Hashable description of everything that affects the document text.

        Variable values are excluded, so operations differing only in
        values share a shape.
        """
        return (
            self.kind.value,
            self.collection_name,
            self.operation_name,
            tuple((variable.name, variable.graphql_type) for variable in self.variables),
            self.return_fields,
        )

    @property
    def variable_values(self) -> dict[str, Any]:
        """Flat ``{name: value}`` map in declaration order."""
        return {variable.name: variable.value for variable in self.variables}

    @classmethod
    def create(
        cls,
        kind: OperationKind | str,
        collection_name: str,
        operation_name: str,
        variables: Mapping[str, Any] | Iterable[OperationVariable] | None = None,
        return_fields: Iterable[str] | None = None,
    ) -> "Operation":
        """Factory accepting the loose ``{name: {"type": ..., "value": ...}}`` form.

        Args:
            kind: ``query`` or ``mutation``.
            collection_name: The collection namespace, e.g. ``users``.
            operation_name: The field name inside the collection.
            variables: Either ``OperationVariable`` instances or a mapping of
                name to ``{"type": ..., "value": ...}`` (or ``(type, value)``).
            return_fields: Fields requested from the operation result.

        Returns:
            A new Operation instance.
        """
        return cls(
            kind=OperationKind(kind),
            collection_name=collection_name,
            operation_name=operation_name,
            variables=_coerce_variables(variables),
            return_fields=tuple(return_fields or ()),
        )


@dataclass(frozen=True)
class RenderedOperation:
    """A rendered GraphQL document plus its flat variables map."""

    document: str
    operation_name: str
    variables: dict[str, Any] = field(default_factory=dict)


def _coerce_variables(
    variables: Mapping[str, Any] | Iterable[OperationVariable] | None,
) -> tuple[OperationVariable, ...]:
    if variables is None:
        return ()
    if isinstance(variables, Mapping):
        coerced: list[OperationVariable] = []
        for name, spec in variables.items():
            if isinstance(spec, OperationVariable):
                coerced.append(spec)
            elif isinstance(spec, Mapping):
                coerced.append(OperationVariable(name, spec["type"], spec.get("value")))
            else:
                graphql_type, value = spec
                coerced.append(OperationVariable(name, graphql_type, value))
        return tuple(coerced)
    return tuple(variables)

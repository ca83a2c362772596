"""GraphQL document builder.

Renders an ``Operation`` into a document of the form::

    mutation UsersSignIn($password: String!, $username: String!) {
      users {
        signIn(password: $password, username: $username) {
          token
          userId
        }
      }
    }

Rendering is pure: the same operation shape always produces the same
bytes, which is what makes the rendered-document cache safe.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from cachetools import LRUCache  # type: ignore[import-untyped]

from fluxql.core.entities.operation import (
    Operation,
    OperationKind,
    OperationVariable,
    RenderedOperation,
)
from fluxql.utils.naming import pascal_case

INDENT = "  "


def field_name(operation_name: str) -> str:
    """Name of the field invoked inside the collection (spaces stripped)."""
    return operation_name.replace(" ", "")


def document_name(collection_name: str, operation_name: str) -> str:
    """Operation name declared in the document, e.g. ``UsersSignIn``."""
    return pascal_case(f"{collection_name}_{field_name(operation_name)}")


class QueryBuilder:
    """Builds GraphQL documents and variables maps from operations.

    Rendered documents are memoized in an LRU cache keyed by the
    operation shape (kind, collection, name, variable names and types,
    return fields). Variable values never enter the key.
    """

    def __init__(self, maxsize: int = 256) -> None:
        """Initialize the builder.

        Args:
            maxsize: Maximum number of rendered documents kept in memory.
        """
        self._cache: LRUCache[tuple[Any, ...], str] = LRUCache(maxsize=maxsize)
        self._hits = 0
        self._misses = 0

    @property
    def stats(self) -> dict[str, int]:
        """Document cache statistics."""
        return {
            "hits": self._hits,
            "misses": self._misses,
            "size": len(self._cache),
        }

    def render(self, operation: Operation) -> RenderedOperation:
        """Render ``operation`` into a document plus flat variables.

        Args:
            operation: The operation to render.

        Returns:
            The rendered document, its declared name and the variables map.
        """
        shape = operation.shape
        document = self._cache.get(shape)
        if document is None:
            self._misses += 1
            document = self._render_document(operation)
            self._cache[shape] = document
        else:
            self._hits += 1

        return RenderedOperation(
            document=document,
            operation_name=document_name(operation.collection_name, operation.operation_name),
            variables=operation.variable_values,
        )

    def build(
        self,
        operation_name: str,
        collection_name: str,
        variables: Mapping[str, Any] | Iterable[OperationVariable] | None = None,
        return_fields: Iterable[str] | None = None,
        kind: OperationKind | str = OperationKind.QUERY,
    ) -> RenderedOperation:
        """Build and render an operation in one step.

        Args:
            operation_name: Field name inside the collection, e.g. ``signIn``.
            collection_name: Collection namespace, e.g. ``users``.
            variables: Mapping of name to ``{"type": ..., "value": ...}`` or
                ``OperationVariable`` instances.
            return_fields: Fields selected from the result.
            kind: ``query`` or ``mutation``.

        Returns:
            The rendered operation.
        """
        operation = Operation.create(
            kind=kind,
            collection_name=collection_name,
            operation_name=operation_name,
            variables=variables,
            return_fields=return_fields,
        )
        return self.render(operation)

    def clear(self) -> None:
        """Drop all memoized documents."""
        self._cache.clear()
        self._hits = 0
        self._misses = 0

    def _render_document(self, operation: Operation) -> str:
        name = document_name(operation.collection_name, operation.operation_name)
        field = field_name(operation.operation_name)

        signature = ", ".join(
            f"${variable.name}: {variable.graphql_type}" for variable in operation.variables
        )
        arguments = ", ".join(
            f"{variable.name}: ${variable.name}" for variable in operation.variables
        )

        header = f"{operation.kind.value} {name}"
        if signature:
            header += f"({signature})"

        invocation = field
        if arguments:
            invocation += f"({arguments})"

        lines = [
            f"{header} {{",
            f"{INDENT}{operation.collection_name} {{",
        ]
        if operation.return_fields:
            lines.append(f"{INDENT * 2}{invocation} {{")
            lines.extend(f"{INDENT * 3}{item}" for item in operation.return_fields)
            lines.append(f"{INDENT * 2}}}")
        else:
            lines.append(f"{INDENT * 2}{invocation}")
        lines.append(f"{INDENT}}}")
        lines.append("}")
        return "\n".join(lines)


_default_builder = QueryBuilder()


def get_query_builder() -> QueryBuilder:
    """Return the process-wide default builder."""
    return _default_builder


def create_query(
    operation_name: str,
    collection_name: str,
    variables: Mapping[str, Any] | Iterable[OperationVariable] | None = None,
    return_fields: Iterable[str] | None = None,
) -> RenderedOperation:
    """Render a query with the default builder.

    Example:
        rendered = create_query(
            "itemById",
            "tags",
            {"tagId": {"type": "ID!", "value": "tag-1"}},
            ["id", "name"],
        )
    """
    return _default_builder.build(
        operation_name, collection_name, variables, return_fields, OperationKind.QUERY
    )


def create_mutation(
    operation_name: str,
    collection_name: str,
    variables: Mapping[str, Any] | Iterable[OperationVariable] | None = None,
    return_fields: Iterable[str] | None = None,
) -> RenderedOperation:
    """Render a mutation with the default builder."""
    return _default_builder.build(
        operation_name, collection_name, variables, return_fields, OperationKind.MUTATION
    )

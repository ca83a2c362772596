"""Action factory for entity modules.

Binds a ``ValidatorPipeline``, the query builder and an ``AuthTransport``
into async actions that validate their input, call the backend and
report the outcome to the store:

- success dispatches ``{<singular collection>: result, "type": success_type}``
- any failure dispatches ``{"error": error, "type": error_type}`` and
  re-raises, so callers see the error both in the store and as an
  exception.
"""

import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from typing import Any

from fluxql.core.entities.action_constants import ActionConstants
from fluxql.core.entities.operation import Operation, OperationKind
from fluxql.core.interfaces.store import IStore
from fluxql.core.interfaces.validator import IValidator
from fluxql.core.services.auth_transport import AuthTransport, extract_result
from fluxql.core.services.query_builder import field_name
from fluxql.core.services.validator_pipeline import OptionsLike, ValidatorPipeline
from fluxql.utils.naming import camel_case, pascal_case, singularize, split_words

logger = logging.getLogger(__name__)

Action = Callable[..., Awaitable[Any]]


class ActionFactory:
    """Creates store-dispatching actions for one collection.

    Example:
        factory = ActionFactory(store, transport, PydanticValidator(TagInput), "tags")
        add_tag = factory.create_action(
            "add",
            success_type="TAG_ADD_ITEM_SUCCESS",
            error_type="TAG_ADD_ITEM_ERROR",
            input_name="tag",
            input_type="TagInput!",
            return_fields=["id", "name"],
        )
        tag = await add_tag({"name": "python"})
    """

    def __init__(
        self,
        store: IStore,
        transport: AuthTransport,
        default_validator: IValidator,
        collection_name: str,
        adapter: IValidator | None = None,
        adapter_options: OptionsLike = None,
    ) -> None:
        """Initialize the factory.

        Args:
            store: Store receiving success and error actions.
            transport: Transport executing the operations.
            default_validator: Schema validator for this collection.
            collection_name: GraphQL collection, e.g. ``tags``.
            adapter: Optional custom adapter run after the default validator.
            adapter_options: Initial adapter options.
        """
        self._store = store
        self._transport = transport
        self._collection_name = collection_name
        self._item_key = camel_case(singularize(collection_name))
        self._pipeline = ValidatorPipeline(default_validator, adapter, adapter_options)

    @property
    def store(self) -> IStore:
        return self._store

    @property
    def collection_name(self) -> str:
        return self._collection_name

    @property
    def item_key(self) -> str:
        """Key carrying the result in success actions, e.g. ``tag``."""
        return self._item_key

    @property
    def pipeline(self) -> ValidatorPipeline:
        return self._pipeline

    def update_adapter(self, adapter: IValidator | None) -> None:
        """Swap the custom adapter used by subsequent calls."""
        self._pipeline.update_adapter(adapter)

    def update_adapter_options(self, options: OptionsLike) -> None:
        """Merge ``options`` into the adapter options used by subsequent calls."""
        self._pipeline.update_options(options)

    def create_action(
        self,
        operation_name: str,
        success_type: str,
        error_type: str,
        input_name: str | None = None,
        input_type: str | None = None,
        return_fields: Iterable[str] = (),
        kind: OperationKind | str = OperationKind.MUTATION,
        requires_auth: bool = True,
        validate: bool = True,
    ) -> Action:
        """Create an async action for one operation.

        The returned coroutine function has the signature
        ``action(value=None, extra_fields=None, variables=None, options=None)``:

        - ``value`` is sent as the ``input_name`` variable. It runs through
          the validator pipeline when ``validate`` is set and a value is
          given.
        - ``extra_fields`` are appended to ``return_fields``.
        - ``variables`` are additional ``{name: {"type": ..., "value": ...}}``
          variables.
        - ``options`` are per-call adapter options.

        Args:
            operation_name: Field inside the collection, e.g. ``add``.
            success_type: Action type dispatched on success.
            error_type: Action type dispatched on failure.
            input_name: Variable carrying ``value``.
            input_type: GraphQL type of ``input_name``, e.g. ``TagInput!``.
            return_fields: Fields requested from the result.
            kind: ``query`` or ``mutation``.
            requires_auth: Use the authenticated app endpoint.
            validate: Run ``value`` through the validator pipeline.

        Returns:
            The action coroutine function.
        """
        base_fields = tuple(return_fields)
        result_field = field_name(operation_name)
        collection_name = self._collection_name
        item_key = self._item_key
        store = self._store
        pipeline = self._pipeline
        transport = self._transport

        async def on_success(data: dict[str, Any]) -> Any:
            result = extract_result(data, collection_name, result_field)
            await store.dispatch({item_key: result, "type": success_type})
            return result

        async def action(
            value: Any = None,
            extra_fields: Iterable[str] | None = None,
            variables: Mapping[str, Any] | None = None,
            options: OptionsLike = None,
        ) -> Any:
            try:
                if value is not None and validate:
                    value = pipeline.validate(value, options)

                operation_variables: dict[str, Any] = {}
                if input_name is not None and value is not None:
                    operation_variables[input_name] = {"type": input_type, "value": value}
                operation_variables.update(variables or {})

                operation = Operation.create(
                    kind=kind,
                    collection_name=collection_name,
                    operation_name=operation_name,
                    variables=operation_variables,
                    return_fields=(*base_fields, *(extra_fields or ())),
                )
                return await transport.execute(
                    operation, requires_auth=requires_auth, on_success=on_success
                )
            except Exception as error:
                logger.debug("%s.%s failed: %s", collection_name, operation_name, error)
                await store.dispatch({"error": error, "type": error_type})
                raise

        action.__name__ = camel_case(f"{operation_name}_{item_key}")
        action.__qualname__ = action.__name__
        return action


class EntityActions:
    """The CRUD action set every entity module exposes.

    Operations live under the entity's collection:

    ``add`` / ``update``
        Mutations taking the validated entity as ``<entity>: <Entity>Input!``.
    ``delete`` (alias ``remove``)
        Mutation ``remove`` taking ``<entity>Id: ID!``; requests only
        ``id`` plus any extra fields and skips validation.
    ``item_by_id``
        Query ``itemById`` taking ``<entity>Id: ID!``.
    ``list``
        Query ``list`` taking ``from: Int`` and ``to: Int``.

    ``update_<entity>_adapter`` and ``update_<entity>_adapter_options``
    are accepted as aliases of ``update_adapter`` and
    ``update_adapter_options``.

    Example:
        tags = EntityActions(store, transport, "tags", PydanticValidator(TagInput))
        tag = await tags.add({"name": "python"})
        tags.update_tag_adapter(lambda value, options: {**value, "custom": True})
    """

    def __init__(
        self,
        store: IStore,
        transport: AuthTransport,
        collection_name: str,
        default_validator: IValidator,
        return_fields: Iterable[str] = ("id",),
        input_type: str | None = None,
        constants: ActionConstants | None = None,
        adapter: IValidator | None = None,
        adapter_options: OptionsLike = None,
    ) -> None:
        """Initialize the action set.

        Args:
            store: Store receiving success and error actions.
            transport: Transport executing the operations.
            collection_name: GraphQL collection, e.g. ``tags``.
            default_validator: Schema validator for the entity.
            return_fields: Fields requested by add, update, item_by_id and list.
            input_type: GraphQL input type. Defaults to ``<Entity>Input!``.
            constants: Action types. Defaults to ``ActionConstants.for_entity``.
            adapter: Optional custom adapter.
            adapter_options: Initial adapter options.
        """
        self.factory = ActionFactory(
            store,
            transport,
            default_validator,
            collection_name,
            adapter=adapter,
            adapter_options=adapter_options,
        )
        entity = singularize(collection_name)
        self.entity = entity
        self._alias_prefix = "update_" + "_".join(word.lower() for word in split_words(entity)) + "_"
        self.constants = constants or ActionConstants.for_entity(entity)
        self.return_fields = tuple(return_fields)

        item_key = self.factory.item_key
        self._id_name = f"{item_key}Id"
        input_type = input_type or f"{pascal_case(entity)}Input!"
        c = self.constants

        self._add = self.factory.create_action(
            "add",
            c.ADD_ITEM_SUCCESS,
            c.ADD_ITEM_ERROR,
            input_name=item_key,
            input_type=input_type,
            return_fields=self.return_fields,
        )
        self._update = self.factory.create_action(
            "update",
            c.UPDATE_ITEM_SUCCESS,
            c.UPDATE_ITEM_ERROR,
            input_name=item_key,
            input_type=input_type,
            return_fields=self.return_fields,
        )
        self._remove = self.factory.create_action(
            "remove",
            c.REMOVE_ITEM_SUCCESS,
            c.REMOVE_ITEM_ERROR,
            input_name=self._id_name,
            input_type="ID!",
            return_fields=("id",),
            validate=False,
        )
        self._item_by_id = self.factory.create_action(
            "itemById",
            c.GET_ITEM_SUCCESS,
            c.GET_ITEM_ERROR,
            input_name=self._id_name,
            input_type="ID!",
            return_fields=self.return_fields,
            kind=OperationKind.QUERY,
            validate=False,
        )
        self._list = self.factory.create_action(
            "list",
            c.GET_LIST_SUCCESS,
            c.GET_LIST_ERROR,
            return_fields=self.return_fields,
            kind=OperationKind.QUERY,
            validate=False,
        )

    @property
    def store(self) -> IStore:
        return self.factory.store

    async def add(
        self,
        item: Mapping[str, Any],
        extra_fields: Iterable[str] | None = None,
        options: OptionsLike = None,
    ) -> Any:
        """Validate and create an item."""
        return await self._add(item, extra_fields, options=options)

    async def update(
        self,
        item: Mapping[str, Any],
        extra_fields: Iterable[str] | None = None,
        options: OptionsLike = None,
    ) -> Any:
        """Validate and update an item."""
        return await self._update(item, extra_fields, options=options)

    async def delete(self, item_id: str, extra_fields: Iterable[str] | None = None) -> Any:
        """Remove an item by id, requesting ``id`` plus ``extra_fields``."""
        return await self._remove(item_id, extra_fields)

    remove = delete

    async def item_by_id(self, item_id: str, extra_fields: Iterable[str] | None = None) -> Any:
        return await self._item_by_id(item_id, extra_fields)

    async def list(
        self,
        start: int = 0,
        end: int = 10,
        extra_fields: Iterable[str] | None = None,
    ) -> Any:
        """Fetch the items in ``[start, end)``."""
        variables = {
            "from": {"type": "Int", "value": start},
            "to": {"type": "Int", "value": end},
        }
        return await self._list(None, extra_fields, variables=variables)

    def update_adapter(self, adapter: IValidator | None) -> None:
        self.factory.update_adapter(adapter)

    def update_adapter_options(self, options: OptionsLike) -> None:
        self.factory.update_adapter_options(options)

    def __getattr__(self, name: str) -> Any:
        prefix = self.__dict__.get("_alias_prefix")
        if prefix and name.startswith(prefix):
            suffix = name[len(prefix) :]
            if suffix == "adapter":
                return self.update_adapter
            if suffix == "adapter_options":
                return self.update_adapter_options
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")


def create_entity_actions(
    store: IStore,
    transport: AuthTransport,
    collection_name: str,
    default_validator: IValidator,
    options: Mapping[str, Any] | None = None,
    **kwargs: Any,
) -> EntityActions:
    """Build an ``EntityActions`` set from an actions-options mapping.

    ``options`` accepts the ``<entity>Adapter`` / ``<entity>AdapterOptions``
    keys (``tagAdapter``, ``tagAdapterOptions``) as well as ``adapter`` and
    ``adapter_options``.

    Example:
        tags = create_entity_actions(
            store, transport, "tags", validate_tag,
            {"tagAdapter": custom_adapter, "tagAdapterOptions": {"strict": True}},
        )
    """
    options = options or {}
    entity = camel_case(singularize(collection_name))
    adapter = options.get(f"{entity}Adapter", options.get("adapter"))
    adapter_options = options.get(f"{entity}AdapterOptions", options.get("adapter_options"))
    return EntityActions(
        store,
        transport,
        collection_name,
        default_validator,
        adapter=adapter,
        adapter_options=adapter_options,
        **kwargs,
    )

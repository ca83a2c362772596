"""Store action type constants."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ActionConstants:
    """Success/error action types for one entity's CRUD operations."""

    prefix: str
    ADD_ITEM_SUCCESS: str
    ADD_ITEM_ERROR: str
    UPDATE_ITEM_SUCCESS: str
    UPDATE_ITEM_ERROR: str
    REMOVE_ITEM_SUCCESS: str
    REMOVE_ITEM_ERROR: str
    GET_ITEM_SUCCESS: str
    GET_ITEM_ERROR: str
    GET_LIST_SUCCESS: str
    GET_LIST_ERROR: str

    @classmethod
    def for_entity(cls, entity: str) -> "ActionConstants":
        """Build the constants for ``entity``.

        Example:
            >>> ActionConstants.for_entity("tag").ADD_ITEM_SUCCESS
            'TAG_ADD_ITEM_SUCCESS'
        """
        prefix = entity.upper()
        names = [
            "ADD_ITEM",
            "UPDATE_ITEM",
            "REMOVE_ITEM",
            "GET_ITEM",
            "GET_LIST",
        ]
        values: dict[str, str] = {}
        for name in names:
            values[f"{name}_SUCCESS"] = f"{prefix}_{name}_SUCCESS"
            values[f"{name}_ERROR"] = f"{prefix}_{name}_ERROR"
        return cls(prefix=prefix, **values)

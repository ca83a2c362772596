"""Naming helpers for GraphQL operation and store keys."""

import re

_WORD_PATTERN = re.compile(r"[A-Z]{2,}(?=[A-Z][a-z]|[0-9]|\b|$)|[A-Z]?[a-z]+|[A-Z]+|[0-9]+")


def split_words(value: str) -> list[str]:
    """Split a string into words on separators and case boundaries.

    Args:
        value: Any identifier-ish string, e.g. ``users_signIn``.

    Returns:
        The words, e.g. ``["users", "sign", "In"]``.
    """
    return _WORD_PATTERN.findall(value)


def camel_case(value: str) -> str:
    """Convert to camelCase (``users_signIn`` -> ``usersSignIn``)."""
    words = split_words(value)
    if not words:
        return ""
    head, *tail = words
    return head.lower() + "".join(word.capitalize() for word in tail)


def pascal_case(value: str) -> str:
    """Convert to PascalCase (``users_signIn`` -> ``UsersSignIn``)."""
    camel = camel_case(value)
    return camel[:1].upper() + camel[1:]


def singularize(collection_name: str) -> str:
    """Derive the store payload key from a collection name.

    ``users`` -> ``user``, ``categories`` -> ``category``.
    """
    if collection_name.endswith("ies") and len(collection_name) > 3:
        return collection_name[:-3] + "y"
    if collection_name.endswith("s") and not collection_name.endswith("ss"):
        return collection_name[:-1]
    return collection_name

"""Utility helpers for fluxql."""

from fluxql.utils.cell import Cell
from fluxql.utils.naming import camel_case, pascal_case, singularize, split_words

__all__ = [
    "Cell",
    "camel_case",
    "pascal_case",
    "singularize",
    "split_words",
]

"""Top-level form reader and namespace declaration finder."""

from .base import (
    Collection,
    FormReadError,
    Keyword,
    Literal,
    Symbol,
    Tagged,
    is_list_headed_by,
)
from .declarations import declared_name, find_namespace_declaration
from .forms import MAX_FORM_DEPTH, CharStream, FormReader, iter_top_level_forms

__all__ = [
    "CharStream",
    "Collection",
    "FormReadError",
    "FormReader",
    "Keyword",
    "Literal",
    "MAX_FORM_DEPTH",
    "Symbol",
    "Tagged",
    "declared_name",
    "find_namespace_declaration",
    "is_list_headed_by",
    "iter_top_level_forms",
]

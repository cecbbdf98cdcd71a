"""Form types produced by the reader."""

from __future__ import annotations

from dataclasses import dataclass


class FormReadError(ValueError):
    """Raised when source text cannot be read as a sequence of forms."""

    def __init__(self, message: str, line: int) -> None:
        super().__init__(f"{message} (line {line})")
        self.reason = message
        self.line = line


@dataclass(slots=True, frozen=True)
class Symbol:
    """Bare or namespace-qualified symbol, e.g. ``ns`` or ``clojure.core/map``."""

    name: str


@dataclass(slots=True, frozen=True)
class Keyword:
    """Keyword literal; ``auto_resolved`` marks the ``::name`` form."""

    name: str
    auto_resolved: bool = False


@dataclass(slots=True, frozen=True)
class Literal:
    """Scalar literal: string, regex, char, number, nil, boolean or symbolic value."""

    kind: str
    value: object


@dataclass(slots=True, frozen=True)
class Collection:
    """Delimited form.

    ``kind`` is one of ``list``, ``vector``, ``map``, ``set``, ``fn``,
    ``conditional`` or ``conditional-splicing``. Reader macros such as
    ``'x`` expand to ``list`` collections, e.g. ``(quote x)``.
    """

    kind: str
    items: tuple[object, ...]


@dataclass(slots=True, frozen=True)
class Tagged:
    """Tagged literal such as ``#inst "2020-01-01"``."""

    tag: Symbol
    form: object


def is_list_headed_by(form: object, name: str) -> bool:
    """Return True when form is a list whose first element is the symbol ``name``."""
    if not isinstance(form, Collection) or form.kind != "list" or not form.items:
        return False
    return form.items[0] == Symbol(name)

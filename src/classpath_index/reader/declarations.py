"""Find the namespace a source file declares."""

from __future__ import annotations

from typing import TextIO

from classpath_index.logging import SOURCE_PARSE_FAILED, DiagnosticLog, record_diagnostic
from classpath_index.reader.base import (
    Collection,
    FormReadError,
    Literal,
    Symbol,
    is_list_headed_by,
)
from classpath_index.reader.forms import FormReader


def declared_name(form: Collection) -> str | None:
    """Return the second element of a declaration form as text.

    Symbols give their name and string literals their value; any other
    second element, or none, gives None.
    """
    items = form.items
    if len(items) < 2:
        return None
    name = items[1]
    if isinstance(name, Symbol):
        return name.name
    if isinstance(name, Literal) and name.kind == "string":
        return str(name.value)
    return None


def find_namespace_declaration(
    handle: TextIO,
    source: str,
    *,
    keyword: str = "ns",
    diagnostics: DiagnosticLog | None = None,
) -> str | None:
    """Scan top-level forms until the first ``(ns name ...)`` form.

    Forms before the declaration are read and discarded. A read failure is
    recorded against ``source`` and ends the scan with no result.
    """
    try:
        for form in FormReader(handle):
            if is_list_headed_by(form, keyword):
                return declared_name(form)
    except FormReadError as error:
        record_diagnostic(diagnostics, SOURCE_PARSE_FAILED, source, str(error))
    return None

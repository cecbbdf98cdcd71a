"""Tolerant character-level reader for top-level Clojure forms."""

from __future__ import annotations

import re
from collections.abc import Iterator
from typing import TextIO

from classpath_index.reader.base import (
    Collection,
    FormReadError,
    Keyword,
    Literal,
    Symbol,
    Tagged,
)

_CHUNK_SIZE = 8192
# Nesting limit for one form; each level uses up to six interpreter frames.
MAX_FORM_DEPTH = 100
_WHITESPACE = frozenset(" \t\n\r\f\v,")
# '#' and '\'' are allowed inside tokens, so they do not terminate one.
_TERMINATING = frozenset('";@^`~()[]{}\\')
_CLOSING = {"(": ")", "[": "]", "{": "}"}
_COLLECTION_KINDS = {"(": "list", "[": "vector", "{": "map"}
_QUOTE_MACROS = {"'": "quote", "`": "syntax-quote", "@": "deref"}
_STRING_ESCAPES = {
    "t": "\t",
    "r": "\r",
    "n": "\n",
    "b": "\b",
    "f": "\f",
    "\\": "\\",
    '"': '"',
}
_NAMED_CHARACTERS = {
    "newline": "\n",
    "space": " ",
    "tab": "\t",
    "backspace": "\b",
    "formfeed": "\f",
    "return": "\r",
}
_NUMBER_RE = re.compile(
    r"[+-]?(?:"
    r"0[xX][0-9A-Fa-f]+N?"
    r"|[0-9]+[rR][0-9A-Za-z]+"
    r"|[0-9]+/[0-9]+"
    r"|[0-9]+(?:\.[0-9]*)?(?:[eE][+-]?[0-9]+)?M?"
    r"|[0-9]+N"
    r")"
)

_EOF = object()
_CLOSED = object()
_DISCARDED = object()


class CharStream:
    """Pushback character stream over a text handle with chunked reads."""

    def __init__(self, handle: TextIO, chunk_size: int = _CHUNK_SIZE) -> None:
        self._handle = handle
        self._chunk_size = chunk_size
        self._buffer = ""
        self._offset = 0
        self._pushback: list[str] = []
        self.line = 1

    def read(self) -> str:
        """Return the next character, or an empty string at end of stream."""
        if self._pushback:
            char = self._pushback.pop()
        else:
            if self._offset >= len(self._buffer):
                self._buffer = self._handle.read(self._chunk_size)
                self._offset = 0
                if not self._buffer:
                    return ""
            char = self._buffer[self._offset]
            self._offset += 1
        if char == "\n":
            self.line += 1
        return char

    def unread(self, char: str) -> None:
        """Push one character back onto the stream."""
        if not char:
            return
        if char == "\n":
            self.line -= 1
        self._pushback.append(char)


class FormReader:
    """Iterate top-level forms; iteration ends at a clean end of stream.

    Malformed input raises FormReadError from ``__next__``. The reader does
    not resynchronize after an error.
    """

    def __init__(self, handle: TextIO, max_depth: int = MAX_FORM_DEPTH) -> None:
        self._stream = CharStream(handle)
        self._max_depth = max_depth
        self._depth = 0

    def __iter__(self) -> Iterator[object]:
        return self

    def __next__(self) -> object:
        form = self._read(closing=None)
        if form is _EOF:
            raise StopIteration
        return form

    def _error(self, message: str) -> FormReadError:
        return FormReadError(message, self._stream.line)

    def _skip_whitespace(self) -> str:
        """Skip whitespace and line comments; return the first significant char."""
        while True:
            char = self._stream.read()
            if char in _WHITESPACE:
                continue
            if char == ";":
                self._skip_line()
                continue
            return char

    def _skip_line(self) -> None:
        while True:
            char = self._stream.read()
            if not char or char == "\n":
                return

    def _read(self, closing: str | None) -> object:
        while True:
            char = self._skip_whitespace()
            if not char:
                if closing is None:
                    return _EOF
                raise self._error(f"EOF while reading, expected '{closing}'")
            if char == closing:
                return _CLOSED
            if char in ")]}":
                raise self._error(f"Unmatched delimiter: {char}")
            form = self._dispatch(char)
            if form is _DISCARDED:
                continue
            return form

    def _read_required(self) -> object:
        form = self._read(closing=None)
        if form is _EOF:
            raise self._error("EOF while reading")
        return form

    def _read_items(self, closing: str) -> tuple[object, ...]:
        items: list[object] = []
        while True:
            form = self._read(closing=closing)
            if form is _CLOSED:
                return tuple(items)
            items.append(form)

    def _dispatch(self, char: str) -> object:
        if self._depth >= self._max_depth:
            raise self._error("Form nested too deeply")
        self._depth += 1
        try:
            return self._dispatch_form(char)
        finally:
            self._depth -= 1

    def _dispatch_form(self, char: str) -> object:
        if char in _COLLECTION_KINDS:
            return Collection(_COLLECTION_KINDS[char], self._read_items(_CLOSING[char]))
        if char == '"':
            return Literal("string", self._read_string())
        if char in _QUOTE_MACROS:
            return Collection("list", (Symbol(_QUOTE_MACROS[char]), self._read_required()))
        if char == "~":
            following = self._stream.read()
            if following == "@":
                return Collection("list", (Symbol("unquote-splicing"), self._read_required()))
            self._stream.unread(following)
            return Collection("list", (Symbol("unquote"), self._read_required()))
        if char == "^":
            return self._read_with_metadata()
        if char == "\\":
            return Literal("char", self._read_character())
        if char == "#":
            return self._dispatch_hash()
        self._stream.unread(char)
        return self._interpret_token(self._read_token())

    def _dispatch_hash(self) -> object:
        char = self._stream.read()
        if not char:
            raise self._error("EOF while reading dispatch macro")
        if char == "{":
            return Collection("set", self._read_items("}"))
        if char == "(":
            return Collection("fn", self._read_items(")"))
        if char == '"':
            return Literal("regex", self._read_regex())
        if char == "'":
            return Collection("list", (Symbol("var"), self._read_required()))
        if char == "_":
            self._read_required()
            return _DISCARDED
        if char == "!":
            self._skip_line()
            return _DISCARDED
        if char == "^":
            return self._read_with_metadata()
        if char == "?":
            return self._read_conditional()
        if char == ":":
            return self._read_namespaced_map()
        if char == "#":
            return Literal("symbolic", self._read_token())
        if char.isalpha():
            self._stream.unread(char)
            tag = self._read_token()
            return Tagged(Symbol(tag), self._read_required())
        raise self._error(f"No dispatch macro for: #{char}")

    def _read_with_metadata(self) -> object:
        # Metadata is consumed and dropped; the annotated form is returned.
        self._read_required()
        return self._read_required()

    def _read_conditional(self) -> Collection:
        kind = "conditional"
        char = self._stream.read()
        if char == "@":
            kind = "conditional-splicing"
            char = self._stream.read()
        while char in _WHITESPACE:
            char = self._stream.read()
        if char != "(":
            raise self._error("Reader conditional body must be a list")
        return Collection(kind, self._read_items(")"))

    def _read_namespaced_map(self) -> Collection:
        prefix = self._read_token(allow_empty=True)
        if prefix.startswith(":"):
            prefix = prefix[1:]
        char = self._skip_whitespace()
        if char != "{":
            raise self._error(f"Namespaced map must specify a map: #:{prefix}")
        return Collection("map", self._read_items("}"))

    def _read_token(self, allow_empty: bool = False) -> str:
        chars: list[str] = []
        while True:
            char = self._stream.read()
            if not char or char in _WHITESPACE or char in _TERMINATING:
                self._stream.unread(char)
                break
            chars.append(char)
        if not chars and not allow_empty:
            raise self._error("Expected token")
        return "".join(chars)

    def _interpret_token(self, token: str) -> object:
        first = token[0]
        if first.isdigit() or (first in "+-" and len(token) > 1 and token[1].isdigit()):
            if _NUMBER_RE.fullmatch(token) is None:
                raise self._error(f"Invalid number: {token}")
            return Literal("number", token)
        if first == ":":
            name = token[2:] if token.startswith("::") else token[1:]
            if not name or name.endswith(":") or "::" in name:
                raise self._error(f"Invalid token: {token}")
            return Keyword(name, auto_resolved=token.startswith("::"))
        if token == "nil":
            return Literal("nil", None)
        if token in ("true", "false"):
            return Literal("boolean", token == "true")
        if token.endswith(":"):
            raise self._error(f"Invalid token: {token}")
        return Symbol(token)

    def _read_string(self) -> str:
        chars: list[str] = []
        while True:
            char = self._stream.read()
            if not char:
                raise self._error("EOF while reading string")
            if char == '"':
                return "".join(chars)
            if char != "\\":
                chars.append(char)
                continue
            escaped = self._stream.read()
            if not escaped:
                raise self._error("EOF while reading string")
            if escaped in _STRING_ESCAPES:
                chars.append(_STRING_ESCAPES[escaped])
            elif escaped == "u":
                chars.append(self._read_code_point(4, 16))
            elif escaped.isdigit():
                self._stream.unread(escaped)
                chars.append(self._read_code_point(3, 8))
            else:
                raise self._error(f"Unsupported escape character: \\{escaped}")

    def _read_code_point(self, length: int, base: int) -> str:
        digits: list[str] = []
        for _ in range(length):
            char = self._stream.read()
            if not char:
                raise self._error("EOF while reading string")
            digits.append(char)
        text = "".join(digits)
        try:
            return chr(int(text, base))
        except ValueError as error:
            raise self._error(f"Invalid escape sequence: {text}") from error

    def _read_regex(self) -> str:
        chars: list[str] = []
        while True:
            char = self._stream.read()
            if not char:
                raise self._error("EOF while reading regex")
            if char == '"':
                return "".join(chars)
            chars.append(char)
            if char == "\\":
                escaped = self._stream.read()
                if not escaped:
                    raise self._error("EOF while reading regex")
                chars.append(escaped)

    def _read_character(self) -> str:
        first = self._stream.read()
        if not first:
            raise self._error("EOF while reading character")
        rest = self._read_token(allow_empty=True)
        token = first + rest
        if len(token) == 1:
            return token
        if token in _NAMED_CHARACTERS:
            return _NAMED_CHARACTERS[token]
        try:
            if first == "u" and len(token) == 5:
                return chr(int(rest, 16))
            if first == "o" and 2 <= len(token) <= 4:
                return chr(int(rest, 8))
        except ValueError as error:
            raise self._error(f"Invalid character: \\{token}") from error
        raise self._error(f"Unsupported character: \\{token}")


def iter_top_level_forms(handle: TextIO) -> Iterator[object]:
    """Yield top-level forms from a text handle until end of stream."""
    return FormReader(handle)

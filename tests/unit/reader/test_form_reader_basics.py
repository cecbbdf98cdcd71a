from __future__ import annotations

import io

from classpath_index.reader import (
    Collection,
    Keyword,
    Literal,
    Symbol,
    Tagged,
    iter_top_level_forms,
)


def _forms(text: str) -> list[object]:
    return list(iter_top_level_forms(io.StringIO(text)))


def test_reads_nested_collections_and_scalars() -> None:
    forms = _forms('(defn f [a, b] {:k "v\\n"} #{1 2.5})')

    assert forms == [
        Collection(
            "list",
            (
                Symbol("defn"),
                Symbol("f"),
                Collection("vector", (Symbol("a"), Symbol("b"))),
                Collection("map", (Keyword("k"), Literal("string", "v\n"))),
                Collection("set", (Literal("number", "1"), Literal("number", "2.5"))),
            ),
        )
    ]


def test_comments_discard_and_shebang_produce_no_forms() -> None:
    forms = _forms("#!/usr/bin/env bb\n; a comment\n#_(ignored form) done")

    assert forms == [Symbol("done")]


def test_quote_family_expands_to_lists() -> None:
    forms = _forms("'a `b ~c ~@d @e #'f")

    assert forms == [
        Collection("list", (Symbol("quote"), Symbol("a"))),
        Collection("list", (Symbol("syntax-quote"), Symbol("b"))),
        Collection("list", (Symbol("unquote"), Symbol("c"))),
        Collection("list", (Symbol("unquote-splicing"), Symbol("d"))),
        Collection("list", (Symbol("deref"), Symbol("e"))),
        Collection("list", (Symbol("var"), Symbol("f"))),
    ]


def test_metadata_is_dropped_from_the_annotated_form() -> None:
    forms = _forms("(ns ^{:doc \"x\"} ^:no-doc my.app)")

    assert forms == [Collection("list", (Symbol("ns"), Symbol("my.app")))]


def test_dispatch_forms_are_read() -> None:
    forms = _forms('#(inc %) #"a\\d+" #?(:clj 1 :cljs 2) #:user{:a 1} ##Inf #inst "2020"')

    assert forms[0] == Collection("fn", (Symbol("inc"), Symbol("%")))
    assert forms[1] == Literal("regex", "a\\d+")
    assert forms[2].kind == "conditional"
    assert forms[3].kind == "map"
    assert forms[4] == Literal("symbolic", "Inf")
    assert forms[5] == Tagged(Symbol("inst"), Literal("string", "2020"))


def test_characters_keywords_and_literals() -> None:
    forms = _forms("\\a \\newline \\u0041 \\) ::local :ns/name nil true false -7 +x")

    assert forms == [
        Literal("char", "a"),
        Literal("char", "\n"),
        Literal("char", "A"),
        Literal("char", ")"),
        Keyword("local", auto_resolved=True),
        Keyword("ns/name"),
        Literal("nil", None),
        Literal("boolean", True),
        Literal("boolean", False),
        Literal("number", "-7"),
        Symbol("+x"),
    ]


def test_symbols_may_contain_quote_and_hash() -> None:
    assert _forms("foo' gensym#") == [Symbol("foo'"), Symbol("gensym#")]


def test_empty_and_whitespace_only_streams_yield_nothing() -> None:
    assert _forms("") == []
    assert _forms(" ,\n\t ; only a comment") == []


def test_reads_across_chunk_boundaries() -> None:
    body = " ".join(f"sym{index}" for index in range(5000))
    forms = _forms(f"(do {body})")

    assert len(forms) == 1
    assert forms[0].items[-1] == Symbol("sym4999")

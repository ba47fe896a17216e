"""Decoder for the v1 index: JavaScript literals with back-references.

The file looks like::

    var N=null,E="",T="t",U="u",searchIndex={};
    var R=["backtrace","option",...];

    searchIndex["anyhow"]={"doc":"...","i":[[3,"Chain",R[6],"...",N,N],...],"p":[[3,"Error"],...]};
    initSearch(searchIndex);addSearchOptions(searchIndex);

``R`` is a JSON array of strings shared by all packages. Every
``searchIndex["<name>"]=<literal>;`` line is parsed with the legacy literal
grammar and coerced into the same tuple shape the v2 decoder reads.
"""
from __future__ import annotations

import logging
from typing import Any

import orjson

from docsearch.decoders.common import coerce_parent_table, columns_from_tuples, expect_str
from docsearch.decoders.tuples import ITEM_TUPLE_LENGTH
from docsearch.errors import DecodeError, MalformedDocument, ShapeMismatch
from docsearch.legacy_literal import (
    InvalidElement,
    LiteralArray,
    LiteralObject,
    LiteralValue,
    parse_literal,
    to_python,
)
from docsearch.types import Err, Ok, RawItemColumns, Result

log = logging.getLogger(__name__)

REFERENCE_PREFIX = "var R="
STATEMENT_PREFIX = 'searchIndex["'
STATEMENT_SEPARATOR = '"]='

# Search-type metadata is never interpreted, so damage inside it is tolerated.
_SEARCH_TYPE_SLOT = 5


def load_references(text: str) -> tuple[str, ...]:
    """Decode the shared ``var R=[...];`` string table."""
    for line in text.splitlines():
        if not line.startswith(REFERENCE_PREFIX):
            continue
        if not line.endswith(";"):
            raise MalformedDocument("reference table line is not terminated by ';'")
        try:
            table = orjson.loads(line[len(REFERENCE_PREFIX):-1])
        except orjson.JSONDecodeError as exc:
            raise MalformedDocument(f"reference table is invalid JSON: {exc}") from exc
        if not isinstance(table, list) or not all(isinstance(s, str) for s in table):
            raise MalformedDocument("reference table is not an array of strings")
        return tuple(table)
    raise MalformedDocument("missing reference table in index")


def iter_statements(text: str) -> list[tuple[str, str]]:
    """Return ``(package name, literal source)`` for each assignment line."""
    statements: list[tuple[str, str]] = []
    for line in text.splitlines():
        if not line.startswith(STATEMENT_PREFIX) or not line.endswith(";"):
            continue
        body = line[len(STATEMENT_PREFIX):-1]
        name, sep, literal = body.partition(STATEMENT_SEPARATOR)
        if sep:
            statements.append((name, literal))
    return statements


def _member(obj: LiteralObject, key: str) -> LiteralValue:
    try:
        return obj.entries[key]
    except KeyError:
        raise ShapeMismatch(f"package is missing field {key}") from None


def _as_array(value: LiteralValue, what: str) -> LiteralArray:
    if isinstance(value, InvalidElement):
        raise value.to_error()
    if not isinstance(value, LiteralArray):
        raise ShapeMismatch(f"{what} must be an array")
    return value


def columns_from_literal(value: LiteralValue) -> RawItemColumns:
    """Coerce a parsed package literal into ``RawItemColumns``."""
    if isinstance(value, InvalidElement):
        raise value.to_error()
    if not isinstance(value, LiteralObject):
        raise ShapeMismatch("package must be an object")
    if value.invalid:
        raise value.invalid[0].to_error()

    entries: list[list[Any]] = []
    for pos, entry in enumerate(_as_array(_member(value, "i"), "item list").items):
        fields = _as_array(entry, f"item {pos}").items
        if len(fields) != ITEM_TUPLE_LENGTH:
            raise ShapeMismatch(
                f"item {pos} must have {ITEM_TUPLE_LENGTH} fields, got {len(fields)}",
            )
        if isinstance(fields[_SEARCH_TYPE_SLOT], InvalidElement):
            log.debug("ignoring damaged search type of item %d", pos)
        entries.append([to_python(field) for field in fields[:_SEARCH_TYPE_SLOT]])

    return columns_from_tuples(
        expect_str(to_python(_member(value, "doc")), "doc"),
        entries,
        coerce_parent_table(to_python(_member(value, "p"))),
    )


def load_raw(text: str) -> dict[str, Result[RawItemColumns, DecodeError]]:
    """Decode every package of a v1 index."""
    references = load_references(text)
    packages: dict[str, Result[RawItemColumns, DecodeError]] = {}
    for name, literal in iter_statements(text):
        try:
            parsed = parse_literal(literal, references)
            if parsed.errors:
                log.debug(
                    "package %s: recovered from %d literal error(s)",
                    name, len(parsed.errors),
                )
            packages[name] = Ok(columns_from_literal(parsed.value))
        except DecodeError as exc:
            packages[name] = Err(exc)
    log.debug("decoded %d v1 package(s)", len(packages))
    return packages

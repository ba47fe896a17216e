"""Shape checks shared by the epoch decoders.

Decoders receive loosely typed JSON values; these helpers turn them into the
exact types ``RawItemColumns`` needs or raise ``ShapeMismatch`` naming the
offending field.
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from docsearch.errors import ShapeMismatch
from docsearch.types import RawItemColumns


def expect_str(value: Any, what: str) -> str:
    if not isinstance(value, str):
        raise ShapeMismatch(f"{what} must be a string, got {type(value).__name__}")
    return value


def optional_str(value: Any, what: str) -> str:
    if value is None:
        return ""
    return expect_str(value, what)


def expect_int(value: Any, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ShapeMismatch(f"{what} must be an integer, got {type(value).__name__}")
    if value < 0:
        raise ShapeMismatch(f"{what} must not be negative, got {value}")
    return value


def expect_list(value: Any, what: str) -> list[Any]:
    if not isinstance(value, list):
        raise ShapeMismatch(f"{what} must be an array, got {type(value).__name__}")
    return value


def require_keys(payload: Any, keys: Sequence[str], what: str) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise ShapeMismatch(f"{what} must be an object, got {type(payload).__name__}")
    missing = [key for key in keys if key not in payload]
    if missing:
        raise ShapeMismatch(f"{what} is missing field(s) {', '.join(missing)}")
    return payload


def coerce_parent_table(value: Any) -> tuple[tuple[int, str], ...]:
    """Coerce the ``p`` field into ``(kind code, name)`` pairs.

    Newer generators append extra fields to each entry; only the first two
    are used.
    """
    table: list[tuple[int, str]] = []
    for idx, entry in enumerate(expect_list(value, "parent table")):
        entry = expect_list(entry, f"parent table entry {idx}")
        if len(entry) < 2:
            raise ShapeMismatch(
                f"parent table entry {idx} must have at least 2 fields, got {len(entry)}",
            )
        table.append((
            expect_int(entry[0], f"parent table entry {idx} kind"),
            expect_str(entry[1], f"parent table entry {idx} name"),
        ))
    return tuple(table)


def columns_from_tuples(
    doc: str,
    entries: Sequence[Sequence[Any]],
    parent_table: tuple[tuple[int, str], ...],
) -> RawItemColumns:
    """Build columns from per-item tuples ``(kind, name, path, desc, parent)``.

    Tuple encodings store the parent as a zero-based index with ``null`` for
    "no parent"; it is shifted into the 1-based sentinel scheme of
    ``RawItemColumns`` here. A non-empty path marks a path change.
    """
    type_codes: list[int] = []
    names: list[str] = []
    path_delta: dict[int, str] = {}
    descriptions: list[str] = []
    parent_refs: list[int] = []

    for pos, entry in enumerate(entries):
        kind, name, path, desc, parent = entry[:5]
        type_codes.append(expect_int(kind, f"item {pos} kind"))
        names.append(optional_str(name, f"item {pos} name"))
        path = optional_str(path, f"item {pos} path")
        if path:
            path_delta[pos] = path
        descriptions.append(optional_str(desc, f"item {pos} description"))
        if parent is None:
            parent_refs.append(0)
        else:
            parent_refs.append(expect_int(parent, f"item {pos} parent") + 1)

    return RawItemColumns(
        doc=doc,
        type_codes=tuple(type_codes),
        names=tuple(names),
        path_delta=path_delta,
        descriptions=tuple(descriptions),
        parent_refs=tuple(parent_refs),
        parent_table=parent_table,
    )

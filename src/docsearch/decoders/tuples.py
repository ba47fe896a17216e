"""Decoder for the v2 index: one JSON tuple per item.

Each package looks like::

    {"doc": "...",
     "i": [[kind, name, path, desc, parent, search_type], ...],
     "p": [[kind, name], ...]}

``name``, ``path``, ``desc`` and ``parent`` may be ``null``. ``path`` is only
filled when it differs from the previous item's path.
"""
from __future__ import annotations

import logging
from typing import Any

from docsearch.decoders.common import (
    coerce_parent_table,
    columns_from_tuples,
    expect_list,
    expect_str,
    require_keys,
)
from docsearch.decoders.envelope import load_json_document
from docsearch.errors import DecodeError, ShapeMismatch
from docsearch.types import Err, Ok, RawItemColumns, Result

log = logging.getLogger(__name__)

ITEM_TUPLE_LENGTH = 6


def columns_from_payload(payload: Any) -> RawItemColumns:
    """Convert one package payload into ``RawItemColumns``."""
    payload = require_keys(payload, ("doc", "i", "p"), "package")
    entries: list[list[Any]] = []
    for pos, entry in enumerate(expect_list(payload["i"], "item list")):
        entry = expect_list(entry, f"item {pos}")
        if len(entry) != ITEM_TUPLE_LENGTH:
            raise ShapeMismatch(
                f"item {pos} must have {ITEM_TUPLE_LENGTH} fields, got {len(entry)}",
            )
        entries.append(entry)

    return columns_from_tuples(
        expect_str(payload["doc"], "doc"),
        entries,
        coerce_parent_table(payload["p"]),
    )


def load_raw(text: str) -> dict[str, Result[RawItemColumns, DecodeError]]:
    """Decode every package of a v2 index."""
    packages: dict[str, Result[RawItemColumns, DecodeError]] = {}
    for name, payload in load_json_document(text).items():
        try:
            packages[name] = Ok(columns_from_payload(payload))
        except DecodeError as exc:
            packages[name] = Err(exc)
    log.debug("decoded %d v2 package(s)", len(packages))
    return packages

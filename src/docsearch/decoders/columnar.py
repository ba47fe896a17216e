"""Decoder for the v3 index: parallel columns per package.

Each package payload looks like::

    {"doc": "...", "t": "DIDF...", "n": ["Chain", ...], "q": [[0, "anyhow"]],
     "d": ["Iterator of ...", ...], "i": [0, 2, ...], "f": [...], "p": [[3, "Error"], ...]}

Field meanings:

* ``t``: item kinds, either an array of codes or a string where each
  uppercase letter encodes ``code = letter - 'A'``.
* ``n``: simple item names.
* ``q``: module paths, either dense (``""`` repeats the previous path) or
  sparse ``[position, path]`` pairs.
* ``d``: one-line descriptions.
* ``i``: parent references, ``0`` for none, otherwise ``p`` index + 1.
* ``p``: parent table of ``[kind, name]``.

``f`` (search types) and any other field are ignored.
"""
from __future__ import annotations

import logging
from typing import Any

from docsearch.decoders.common import (
    coerce_parent_table,
    expect_int,
    expect_list,
    expect_str,
    require_keys,
)
from docsearch.decoders.envelope import load_json_document
from docsearch.errors import DecodeError, ShapeMismatch
from docsearch.item_types import item_kind_from_letter
from docsearch.types import Err, Ok, RawItemColumns, Result

log = logging.getLogger(__name__)

REQUIRED_FIELDS: tuple[str, ...] = ("doc", "t", "n", "q", "d", "i", "p")


def decode_type_column(value: Any) -> tuple[int, ...]:
    """Decode ``t`` from either an int array or a packed letter string."""
    if isinstance(value, str):
        return tuple(int(item_kind_from_letter(letter)) for letter in value)
    return tuple(
        expect_int(code, f"type code {pos}")
        for pos, code in enumerate(expect_list(value, "type column"))
    )


def decode_path_column(value: Any) -> dict[int, str]:
    """Normalise ``q`` into a sparse ``{position: path}`` mapping.

    Dense entries advance the position one by one and ``""`` means "same as
    before". A ``[position, path]`` pair sets the position explicitly; a
    following dense entry continues after it.
    """
    delta: dict[int, str] = {}
    position = 0
    for idx, entry in enumerate(expect_list(value, "path column")):
        if isinstance(entry, str):
            if entry:
                delta[position] = entry
            position += 1
            continue
        pair = expect_list(entry, f"path entry {idx}")
        if len(pair) != 2:
            raise ShapeMismatch(f"path entry {idx} must be a [position, path] pair")
        position = expect_int(pair[0], f"path entry {idx} position")
        delta[position] = expect_str(pair[1], f"path entry {idx} path")
        position += 1
    return delta


def columns_from_payload(payload: Any) -> RawItemColumns:
    """Convert one package payload into ``RawItemColumns``."""
    payload = require_keys(payload, REQUIRED_FIELDS, "package")
    return RawItemColumns(
        doc=expect_str(payload["doc"], "doc"),
        type_codes=decode_type_column(payload["t"]),
        names=tuple(
            expect_str(name, f"name {pos}")
            for pos, name in enumerate(expect_list(payload["n"], "name column"))
        ),
        path_delta=decode_path_column(payload["q"]),
        descriptions=tuple(
            expect_str(desc, f"description {pos}")
            for pos, desc in enumerate(expect_list(payload["d"], "description column"))
        ),
        parent_refs=tuple(
            expect_int(ref, f"parent reference {pos}")
            for pos, ref in enumerate(expect_list(payload["i"], "parent column"))
        ),
        parent_table=coerce_parent_table(payload["p"]),
    )


def load_raw(text: str) -> dict[str, Result[RawItemColumns, DecodeError]]:
    """Decode every package of a v3 index."""
    packages: dict[str, Result[RawItemColumns, DecodeError]] = {}
    for name, payload in load_json_document(text).items():
        try:
            packages[name] = Ok(columns_from_payload(payload))
        except DecodeError as exc:
            packages[name] = Err(exc)
    log.debug("decoded %d v3 package(s)", len(packages))
    return packages

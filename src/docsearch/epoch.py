"""Detection of the search index encoding from its envelope markers."""

from __future__ import annotations

from typing import Literal, TypeAlias

from docsearch.errors import UnsupportedFormat

# v1: legacy JavaScript literal with sentinels and back-references
# v2: JSON document of per-item tuples
# v3: JSON document of parallel columns
Epoch: TypeAlias = Literal["v1", "v2", "v3"]

V1_PROLOGUE = 'var N=null,E="",T="t",U="u",searchIndex={};'
V2_EPILOGUE = "addSearchOptions(searchIndex);initSearch(searchIndex);"
V3_EPILOGUES: tuple[str, ...] = (
    "if (window.initSearch) {window.initSearch(searchIndex)};",
    "if (typeof exports !== 'undefined') {exports.searchIndex = searchIndex};",
)


def detect_epoch(text: str) -> Epoch | None:
    """Identify the index encoding without looking at the body.

    Only fixed prologue/epilogue strings are compared; trailing whitespace
    after the epilogue is ignored.
    """
    if text.startswith(V1_PROLOGUE):
        return "v1"

    tail = text.rstrip()
    if tail.endswith(V2_EPILOGUE):
        return "v2"
    if any(tail.endswith(marker) for marker in V3_EPILOGUES):
        return "v3"
    return None


def require_epoch(text: str) -> Epoch:
    """Like ``detect_epoch`` but raises ``UnsupportedFormat`` on no match."""
    epoch = detect_epoch(text)
    if epoch is None:
        raise UnsupportedFormat()
    return epoch

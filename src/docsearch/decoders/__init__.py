"""Epoch-specific decoders producing ``RawItemColumns`` per package."""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeAlias

from docsearch.decoders import columnar, legacy, tuples
from docsearch.epoch import Epoch, require_epoch
from docsearch.errors import DecodeError
from docsearch.types import RawItemColumns, Result

RawLoader: TypeAlias = Callable[[str], dict[str, Result[RawItemColumns, DecodeError]]]

DECODERS: dict[Epoch, RawLoader] = {
    "v1": legacy.load_raw,
    "v2": tuples.load_raw,
    "v3": columnar.load_raw,
}


def load_raw(
    text: str,
    epoch: Epoch | None = None,
) -> dict[str, Result[RawItemColumns, DecodeError]]:
    """Decode an index with the decoder for its (detected) epoch."""
    if epoch is None:
        epoch = require_epoch(text)
    return DECODERS[epoch](text)


__all__ = [
    "DECODERS",
    "RawLoader",
    "load_raw",
]

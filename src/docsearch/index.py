"""Decode-and-resolve pipeline over a raw search index.

raw text -> epoch detection -> epoch decoder -> RawItemColumns per package
-> reconstruction -> PackageIndex -> path/URL mapping.

Entry points:

* ``load_index(text)`` : reconstructed ``PackageIndex`` per package.
* ``decode_packages(text)`` : ``path -> URL`` map per package, failures kept
  as ``Err`` so the other packages stay usable.
* ``decode(text)`` : strict variant, raises the first package failure.
* ``select_package(mapping, name)`` : pick one package or raise
  ``MissingPackage``.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping

from docsearch.decoders import load_raw
from docsearch.epoch import require_epoch
from docsearch.errors import DecodeError, MissingPackage
from docsearch.reconstruct import reconstruct
from docsearch.types import Err, Ok, PackageIndex, PathUrlMap, Result
from docsearch.urls import generate_mapping

log = logging.getLogger(__name__)


def load_index(text: str) -> dict[str, Result[PackageIndex, DecodeError]]:
    """Decode and reconstruct every package of an index.

    Raises:
        UnsupportedFormat: the text has no known envelope marker.
        MalformedDocument: the envelope payload itself is unusable.
    """
    epoch = require_epoch(text)
    log.debug("detected index epoch %s", epoch)

    packages: dict[str, Result[PackageIndex, DecodeError]] = {}
    for name, raw in load_raw(text, epoch).items():
        match raw:
            case Ok(value=columns):
                try:
                    packages[name] = Ok(reconstruct(name, columns))
                except DecodeError as exc:
                    packages[name] = Err(exc)
            case Err():
                packages[name] = raw
    return packages


def decode_packages(text: str) -> dict[str, Result[PathUrlMap, DecodeError]]:
    """Decode an index into one ``path -> URL`` map per package."""
    mappings: dict[str, Result[PathUrlMap, DecodeError]] = {}
    for name, outcome in load_index(text).items():
        match outcome:
            case Ok(value=index):
                mappings[name] = Ok(generate_mapping(index))
            case Err(error=exc):
                log.warning("failed to decode package %s: %s", name, exc)
                mappings[name] = outcome
    return mappings


def decode(text: str) -> dict[str, PathUrlMap]:
    """Decode an index, failing if any package cannot be decoded."""
    mappings: dict[str, PathUrlMap] = {}
    for name, outcome in decode_packages(text).items():
        match outcome:
            case Ok(value=mapping):
                mappings[name] = mapping
            case Err(error=exc):
                raise exc
    return mappings


def successful(
    outcomes: Mapping[str, Result[PathUrlMap, DecodeError]],
) -> dict[str, PathUrlMap]:
    """Keep only the packages that decoded."""
    return {
        name: outcome.value
        for name, outcome in outcomes.items()
        if isinstance(outcome, Ok)
    }


def select_package(mapping: Mapping[str, PathUrlMap], name: str) -> PathUrlMap:
    """Return the map for ``name`` or raise ``MissingPackage``."""
    try:
        return mapping[name]
    except KeyError:
        raise MissingPackage(name) from None

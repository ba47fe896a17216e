"""Decode rustdoc search indexes and resolve item paths to documentation URLs."""

from docsearch.config import SearchConfig
from docsearch.epoch import detect_epoch
from docsearch.errors import (
    DecodeError,
    DocsearchError,
    IndexNotFound,
    InvalidVersionFormat,
    MalformedDocument,
    MalformedLiteral,
    MissingPackage,
    PathParseError,
    RetrievalError,
    ShapeMismatch,
    UnknownItemKind,
    UnresolvedReference,
    UnsupportedFormat,
)
from docsearch.index import decode, decode_packages, load_index, select_package, successful
from docsearch.item_types import ItemKind, item_kind, url_segment
from docsearch.search import CrateIndex, search, search_index_text
from docsearch.simple_path import SimplePath
from docsearch.types import Err, Ok, PackageIndex, PathUrlMap, ResolvedItem, Result
from docsearch.version import Version

__version__ = "0.3.5"

__all__ = [
    "CrateIndex",
    "DecodeError",
    "DocsearchError",
    "Err",
    "IndexNotFound",
    "InvalidVersionFormat",
    "ItemKind",
    "MalformedDocument",
    "MalformedLiteral",
    "MissingPackage",
    "Ok",
    "PackageIndex",
    "PathParseError",
    "PathUrlMap",
    "ResolvedItem",
    "Result",
    "RetrievalError",
    "SearchConfig",
    "ShapeMismatch",
    "SimplePath",
    "UnknownItemKind",
    "UnresolvedReference",
    "UnsupportedFormat",
    "Version",
    "decode",
    "decode_packages",
    "detect_epoch",
    "item_kind",
    "load_index",
    "search",
    "search_index_text",
    "select_package",
    "successful",
    "url_segment",
]

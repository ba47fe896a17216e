"""Error taxonomy for index decoding, retrieval and path parsing.

Every failure caused by malformed *input* is one of these exceptions. They
are raised inside the pipeline and either propagate (strict entry points) or
are captured per package as ``Err`` values (tolerant entry points), so
sibling packages in the same index keep decoding.

Hierarchy::

  DocsearchError
    DecodeError
      UnsupportedFormat: no known envelope marker
      MalformedDocument: envelope payload is not valid JSON
      MalformedLiteral: legacy grammar failure (span + label)
      UnresolvedReference: legacy ``R[n]`` outside the reference table
      UnknownItemKind: type code outside 0..25
      ShapeMismatch: wrong arity / value kind / column length
      MissingPackage: requested package not in the document
    RetrievalError
      IndexNotFound
      InvalidVersionFormat
    PathParseError
"""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from docsearch.types import SourceSpan


class DocsearchError(Exception):
    """Base class for all docsearch errors."""


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------

class DecodeError(DocsearchError, ValueError):
    """Raised when a search index cannot be decoded."""


class UnsupportedFormat(DecodeError):
    """The text carries none of the known index envelope markers."""

    def __init__(self) -> None:
        super().__init__("the index format is not supported by this version")


class MalformedDocument(DecodeError):
    """The envelope was recognised but its embedded payload is unusable."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"malformed index document: {detail}")
        self.detail = detail


class MalformedLiteral(DecodeError):
    """The legacy literal grammar failed at a known position."""

    def __init__(self, span: SourceSpan, label: str, excerpt: str = "") -> None:
        where = f"{span.char_start}..{span.char_end}"
        suffix = f" near {excerpt!r}" if excerpt else ""
        super().__init__(f"invalid {label} at {where}{suffix}")
        self.span = span
        self.label = label
        self.excerpt = excerpt


class UnresolvedReference(DecodeError):
    """A legacy back-reference points past the end of the reference table."""

    def __init__(self, index: int) -> None:
        super().__init__(f"reference R[{index}] is missing from the reference table")
        self.index = index


class UnknownItemKind(DecodeError):
    """A type code outside the defined item kinds."""

    def __init__(self, code: int) -> None:
        super().__init__(f"unknown item kind code {code}")
        self.code = code


class ShapeMismatch(DecodeError):
    """Decoded data does not have the expected record shape."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"unexpected index shape: {detail}")
        self.detail = detail


class MissingPackage(DecodeError):
    """The decoded document has no entry for the requested package."""

    def __init__(self, name: str) -> None:
        super().__init__(f"index didn't contain information for package {name!r}")
        self.name = name


# ---------------------------------------------------------------------------
# Retrieval
# ---------------------------------------------------------------------------

class RetrievalError(DocsearchError):
    """Raised when locating or downloading an index fails."""


class IndexNotFound(RetrievalError):
    """The documentation page did not reference a search index."""

    def __init__(self, page_url: str = "") -> None:
        where = f" at {page_url}" if page_url else ""
        super().__init__(f"couldn't find the index path in the response body{where}")
        self.page_url = page_url


class InvalidVersionFormat(RetrievalError, ValueError):
    """A version string (or an index file name carrying one) is not valid."""

    def __init__(self, value: str) -> None:
        super().__init__(f"version was not in the expected format but {value!r}")
        self.value = value


# ---------------------------------------------------------------------------
# Path parsing
# ---------------------------------------------------------------------------

class PathParseError(DocsearchError, ValueError):
    """A simple path could not be parsed."""

    def __init__(self, value: str, reason: str) -> None:
        super().__init__(f"invalid path {value!r}: {reason}")
        self.value = value
        self.reason = reason

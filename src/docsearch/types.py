"""Core types shared by every stage of the decode pipeline.

Type hierarchy:
  Ok[T] / Err[E]: per-package Result, so one broken package never hides
    its siblings
  SourceSpan: character span in the text handed to a parser
  RawItemColumns: decoder output: parallel columns plus parent table
  ResolvedItem: one fully populated item after reconstruction
  PackageIndex: all resolved items of one package
  PathUrlMap: fully-qualified path -> relative documentation URL

All dataclasses are frozen and use slots=True.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeAlias, TypeVar

from docsearch.item_types import ItemKind

T = TypeVar("T")
E = TypeVar("E")

# ---------------------------------------------------------------------------
# Result ADT
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Success case of Result[T, E].

    Usage::

        match outcome:
            case Ok(value=mapping): use(mapping)
            case Err(error=exc): log.warning("%s", exc)
    """
    value: T


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failure case of Result[T, E]. Keeps the typed error, never None."""
    error: E


Result: TypeAlias = Ok[T] | Err[E]

PathUrlMap: TypeAlias = dict[str, str]


# ---------------------------------------------------------------------------
# Spans
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class SourceSpan:
    """Half-open character span ``[char_start, char_end)``.

    Zero-length spans are allowed; they point at a position (for example the
    end of input where a closing bracket was expected).
    """

    char_start: int
    char_end: int

    def __post_init__(self) -> None:
        if self.char_start < 0:
            raise ValueError(f"char_start must be >= 0, got {self.char_start}")
        if self.char_end < self.char_start:
            raise ValueError(
                f"char_end must be >= char_start, got {self.char_end} < {self.char_start}",
            )


# ---------------------------------------------------------------------------
# Raw decoder output
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class RawItemColumns:
    """Column-oriented data for one package, as every decoder produces it.

    ``type_codes``, ``names``, ``descriptions`` and ``parent_refs`` are
    parallel and indexed by item position. ``path_delta`` only holds the
    positions where the module path changes. ``parent_refs`` uses ``0`` for
    "no parent" and ``k`` for ``parent_table[k - 1]``.
    """

    doc: str
    type_codes: tuple[int, ...]
    names: tuple[str, ...]
    path_delta: dict[int, str]
    descriptions: tuple[str, ...]
    parent_refs: tuple[int, ...]
    parent_table: tuple[tuple[int, str], ...]

    def __len__(self) -> int:
        return len(self.type_codes)


# ---------------------------------------------------------------------------
# Reconstructed records
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ResolvedItem:
    """A single item with its module path resolved."""

    kind: ItemKind
    name: str
    path: str                  # full module path, never a delta marker
    description: str           # may contain HTML, likely truncated with "…"
    parent_index: int | None = None  # index into PackageIndex.parent_table


@dataclass(frozen=True, slots=True)
class PackageIndex:
    """Decoder-agnostic record for one package of the index."""

    name: str
    doc: str
    items: tuple[ResolvedItem, ...]
    parent_table: tuple[tuple[ItemKind, str], ...] = field(default_factory=tuple)

    def parent_of(self, item: ResolvedItem) -> tuple[ItemKind, str] | None:
        if item.parent_index is None:
            return None
        return self.parent_table[item.parent_index]

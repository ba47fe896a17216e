"""Item kinds that appear in rustdoc search indexes.

The numeric codes are the ones the generator writes into the index; the URL
segment is the prefix rustdoc uses for the item's page (``struct.Foo.html``)
or anchor (``#method.bar``).
"""
from __future__ import annotations

from enum import IntEnum

from docsearch.errors import UnknownItemKind


class ItemKind(IntEnum):
    """Kind of a documented item, keyed by its index code."""

    MODULE = 0
    EXTERN_CRATE = 1
    IMPORT = 2
    STRUCT = 3
    ENUM = 4
    FUNCTION = 5
    TYPEDEF = 6
    STATIC = 7
    TRAIT = 8
    IMPL = 9
    TY_METHOD = 10
    METHOD = 11
    STRUCT_FIELD = 12
    VARIANT = 13
    MACRO = 14
    PRIMITIVE = 15
    ASSOC_TYPE = 16
    CONSTANT = 17
    ASSOC_CONST = 18
    UNION = 19
    FOREIGN_TYPE = 20
    KEYWORD = 21
    OPAQUE_TY = 22
    PROC_ATTRIBUTE = 23
    PROC_DERIVE = 24
    TRAIT_ALIAS = 25

    @property
    def segment(self) -> str:
        return _SEGMENTS[self]


_SEGMENTS: dict[ItemKind, str] = {
    ItemKind.MODULE: "mod",
    ItemKind.EXTERN_CRATE: "externcrate",
    ItemKind.IMPORT: "import",
    ItemKind.STRUCT: "struct",
    ItemKind.ENUM: "enum",
    ItemKind.FUNCTION: "fn",
    ItemKind.TYPEDEF: "type",
    ItemKind.STATIC: "static",
    ItemKind.TRAIT: "trait",
    ItemKind.IMPL: "impl",
    ItemKind.TY_METHOD: "tymethod",
    ItemKind.METHOD: "method",
    ItemKind.STRUCT_FIELD: "structfield",
    ItemKind.VARIANT: "variant",
    ItemKind.MACRO: "macro",
    ItemKind.PRIMITIVE: "primitive",
    ItemKind.ASSOC_TYPE: "associatedtype",
    ItemKind.CONSTANT: "constant",
    ItemKind.ASSOC_CONST: "associatedconstant",
    ItemKind.UNION: "union",
    ItemKind.FOREIGN_TYPE: "foreigntype",
    ItemKind.KEYWORD: "keyword",
    ItemKind.OPAQUE_TY: "opaque",
    ItemKind.PROC_ATTRIBUTE: "attr",
    ItemKind.PROC_DERIVE: "derive",
    ItemKind.TRAIT_ALIAS: "traitalias",
}

_KINDS_BY_SEGMENT: dict[str, ItemKind] = {
    segment: kind for kind, segment in _SEGMENTS.items()
}


def item_kind(code: int) -> ItemKind:
    """Look up the kind for a raw index code.

    Raises ``UnknownItemKind`` for anything outside ``0..=25``; there is no
    fallback kind because a guessed kind would produce a wrong URL.
    """
    # bool is an int subclass but never a valid code
    if isinstance(code, bool) or not isinstance(code, int):
        raise UnknownItemKind(code)
    try:
        return ItemKind(code)
    except ValueError:
        raise UnknownItemKind(code) from None


def item_kind_from_letter(letter: str) -> ItemKind:
    """Decode one character of the packed type string (``A`` = 0)."""
    if len(letter) != 1 or not ("A" <= letter <= "Z"):
        raise UnknownItemKind(ord(letter[0]) - ord("A") if letter else -1)
    return item_kind(ord(letter) - ord("A"))


def url_segment(kind: ItemKind) -> str:
    return _SEGMENTS[kind]


def kind_for_segment(segment: str) -> ItemKind:
    """Reverse lookup from a URL segment (``"fn"``) to its kind."""
    kind = _KINDS_BY_SEGMENT.get(segment)
    if kind is None:
        raise ValueError(f"unknown item URL segment {segment!r}")
    return kind

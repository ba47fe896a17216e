"""Simple paths like ``std::vec::Vec``, ``anyhow::Result`` or ``thiserror``.

A path is one or more ``::``-separated identifiers. The first segment names
the crate and selects which index to download.
"""
from __future__ import annotations

from dataclasses import dataclass

from docsearch.errors import PathParseError

STD_CRATES: frozenset[str] = frozenset({"alloc", "core", "proc_macro", "std", "test"})

STRICT_KEYWORDS: frozenset[str] = frozenset({
    "as", "break", "const", "continue", "crate", "else", "enum", "extern", "false", "fn",
    "for", "if", "impl", "in", "let", "loop", "match", "mod", "move", "mut", "pub", "ref",
    "return", "self", "Self", "static", "struct", "super", "trait", "true", "type", "unsafe",
    "use", "where", "while", "async", "await", "dyn",
})

RESERVED_KEYWORDS: frozenset[str] = frozenset({
    "abstract", "become", "box", "do", "final", "macro", "override", "priv", "typeof",
    "unsized", "virtual", "yield",
})

# Keywords that stay invalid even as raw identifiers (``r#crate``).
_RAW_FORBIDDEN: frozenset[str] = frozenset({"crate", "self", "super", "Self"})


def is_identifier_or_keyword(value: str) -> bool:
    """XID_Start followed by XID_Continue, or ``_`` plus at least one more char."""
    if value == "_":
        return False
    return value.isidentifier()


def is_raw_identifier(value: str) -> bool:
    if not value.startswith("r#"):
        return False
    rest = value[2:]
    return is_identifier_or_keyword(rest) and rest not in _RAW_FORBIDDEN


def is_non_keyword_identifier(value: str) -> bool:
    return (
        is_identifier_or_keyword(value)
        and value not in STRICT_KEYWORDS
        and value not in RESERVED_KEYWORDS
    )


def is_identifier(value: str) -> bool:
    return is_non_keyword_identifier(value) or is_raw_identifier(value)


@dataclass(frozen=True, slots=True)
class SimplePath:
    """Validated path to a crate or an item inside it."""

    value: str

    @classmethod
    def parse(cls, text: str) -> SimplePath:
        if not text:
            raise PathParseError(text, "the value is too short")
        if not all(is_identifier(segment) for segment in text.split("::")):
            raise PathParseError(text, "one or more segments aren't valid identifiers")
        return cls(text)

    @property
    def crate_name(self) -> str:
        return self.value.split("::", 1)[0]

    @property
    def is_std(self) -> bool:
        """Whether the path points into the standard library."""
        return self.crate_name in STD_CRATES

    @property
    def is_crate_only(self) -> bool:
        return "::" not in self.value

    def __str__(self) -> str:
        return self.value

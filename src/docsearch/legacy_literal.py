"""Parser for the JavaScript data literals of the legacy (v1) search index.

The legacy index is not JSON. Each package is assigned a JavaScript literal
that uses single-letter sentinels and numbered back-references into a shared
string table to save space.

Grammar (PEG-flavoured)::

    value     := null | number | string | array | object | sentinel | reference
    null      := 'null'
    number    := [0-9]+
    string    := '"' (char | escape)* '"'
    escape    := '\\' ( '"' | '\\' | '/' | 'b' | 'f' | 'n' | 'r' | 't' | 'u' HEX{4} )
    array     := '[' ws (value (ws ',' ws value)* (ws ',')?)? ws ']'
    object    := '{' ws (pair (ws ',' ws pair)* (ws ',')?)? ws '}'
    pair      := string ws ':' ws value
    sentinel  := 'N' | 'E' | 'T' | 'U'      (null, "", "t", "u")
    reference := 'R[' number ']'            (string from the reference table)
    ws        := [ \\t\\r\\n]*

Error policy:

* A malformed element inside an array or object becomes an
  ``InvalidElement`` and parsing resumes at the next ``,`` of the same
  container or at its nearest unmatched closing bracket.
* Invalid ``\\uXXXX`` escapes decode to U+FFFD instead of failing.
* Nesting deeper than ``max_depth`` and trailing garbage raise
  ``MalformedLiteral``; unknown back-references raise ``UnresolvedReference``.
  Neither is recovered.

Public API:

* ``parse_literal(text, references)``: parse into a ``LiteralParseResult``.
* ``to_python(value)``: coerce a tree into plain Python values, raising
  ``MalformedLiteral`` at the first ``InvalidElement``.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, TypeAlias

from docsearch.errors import MalformedLiteral, UnresolvedReference
from docsearch.types import SourceSpan

log = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MAX_NESTING_DEPTH = 128

REPLACEMENT_CHARACTER = "\ufffd"

_WHITESPACE: frozenset[str] = frozenset(" \t\r\n")
_CLOSERS: frozenset[str] = frozenset("]}")

_SIMPLE_ESCAPES: dict[str, str] = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

_PLAIN_RUN_RE = re.compile(r'[^"\\]+')
_NUMBER_RE = re.compile(r"[0-9]+")
_HEX4_RE = re.compile(r"[0-9a-fA-F]{4}")
_BAD_HEX_RUN_RE = re.compile(r'[^"\\]{0,4}')
_REFERENCE_RE = re.compile(r"R\[([0-9]+)\]")
# Swallows a damaged reference token up to its own closing bracket so that
# resynchronisation does not mistake that bracket for the container's end.
_BROKEN_REFERENCE_RE = re.compile(r"R\[[^\[\]{},\"]*\]?")

_EXCERPT_LENGTH = 40


# ---------------------------------------------------------------------------
# Value tree
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class LiteralNull:
    """``null`` or the ``N`` sentinel."""


@dataclass(frozen=True, slots=True)
class LiteralStr:
    value: str


@dataclass(frozen=True, slots=True)
class LiteralNum:
    value: int


@dataclass(frozen=True, slots=True)
class LiteralArray:
    items: tuple[LiteralValue, ...]


@dataclass(frozen=True, slots=True)
class LiteralObject:
    """An object literal.

    ``invalid`` holds damaged members that could not be attributed to a key
    (for example a malformed key string).
    """

    entries: dict[str, LiteralValue]
    invalid: tuple[InvalidElement, ...] = ()


@dataclass(frozen=True, slots=True)
class InvalidElement:
    """Placeholder for an element the parser skipped while recovering."""

    span: SourceSpan
    label: str
    excerpt: str = ""

    def to_error(self) -> MalformedLiteral:
        return MalformedLiteral(self.span, self.label, self.excerpt)


LiteralValue: TypeAlias = (
    LiteralNull | LiteralStr | LiteralNum | LiteralArray | LiteralObject | InvalidElement
)


@dataclass(frozen=True, slots=True)
class LiteralParseResult:
    """Parsed tree plus the errors that were recovered from along the way."""

    value: LiteralValue
    errors: tuple[MalformedLiteral, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        """True if the tree contains no recovered damage."""
        return not self.errors and not isinstance(self.value, InvalidElement)


_SENTINELS: dict[str, LiteralValue] = {
    "N": LiteralNull(),
    "E": LiteralStr(""),
    "T": LiteralStr("t"),
    "U": LiteralStr("u"),
}


# ---------------------------------------------------------------------------
# Recursive descent parser
# ---------------------------------------------------------------------------

class _ElementError(Exception):
    """Recoverable failure of a single element, caught by its container."""

    def __init__(self, start: int, end: int, label: str) -> None:
        super().__init__(label)
        self.start = start
        self.end = end
        self.label = label


class _LiteralParser:
    """Recursive descent parser over one literal.

    The reference table is read only for the lifetime of the parser.
    """

    def __init__(
        self,
        text: str,
        references: Sequence[str],
        max_depth: int,
    ) -> None:
        self._text = text
        self._references = references
        self._max_depth = max_depth
        self._pos = 0
        self._errors: list[MalformedLiteral] = []

    def _peek(self) -> str:
        if self._pos < len(self._text):
            return self._text[self._pos]
        return ""

    def _skip_ws(self) -> None:
        text = self._text
        while self._pos < len(text) and text[self._pos] in _WHITESPACE:
            self._pos += 1

    def _excerpt(self, start: int, end: int) -> str:
        stop = max(end, start + 1)
        return self._text[start:min(stop, start + _EXCERPT_LENGTH)]

    def _span(self, start: int, end: int) -> SourceSpan:
        end = min(max(end, start), len(self._text))
        return SourceSpan(char_start=min(start, end), char_end=end)

    # ─── Top-level ────────────────────────────────────────────────

    def parse(self) -> LiteralParseResult:
        self._skip_ws()
        try:
            value = self._parse_value(0)
        except _ElementError as exc:
            invalid = self._invalid(exc)
            self._errors.append(invalid.to_error())
            return LiteralParseResult(value=invalid, errors=tuple(self._errors))

        self._skip_ws()
        if self._pos < len(self._text):
            raise MalformedLiteral(
                self._span(self._pos, len(self._text)),
                "end of input",
                self._excerpt(self._pos, len(self._text)),
            )
        return LiteralParseResult(value=value, errors=tuple(self._errors))

    # ─── Values ───────────────────────────────────────────────────

    def _parse_value(self, depth: int) -> LiteralValue:
        ch = self._peek()
        if ch == "n":
            return self._parse_null()
        if ch.isdigit() and ch.isascii():
            return self._parse_number()
        if ch == '"':
            return LiteralStr(self._parse_string())
        if ch == "[":
            return self._parse_array(depth + 1)
        if ch == "{":
            return self._parse_object(depth + 1)
        if ch == "R":
            return self._parse_reference()
        sentinel = _SENTINELS.get(ch)
        if sentinel is not None:
            self._pos += 1
            return sentinel
        raise _ElementError(self._pos, self._pos + 1, "value")

    def _parse_element(self, depth: int) -> LiteralValue:
        """Parse a container member, degrading failures to InvalidElement."""
        try:
            return self._parse_value(depth)
        except _ElementError as exc:
            return self._recover(exc)

    def _parse_null(self) -> LiteralValue:
        if self._text.startswith("null", self._pos):
            self._pos += 4
            return LiteralNull()
        raise _ElementError(self._pos, self._pos + 1, "null")

    def _parse_number(self) -> LiteralValue:
        m = _NUMBER_RE.match(self._text, self._pos)
        if m is None:
            raise _ElementError(self._pos, self._pos + 1, "number")
        self._pos = m.end()
        return LiteralNum(int(m.group()))

    def _parse_reference(self) -> LiteralValue:
        m = _REFERENCE_RE.match(self._text, self._pos)
        if m is None:
            start = self._pos
            broken = _BROKEN_REFERENCE_RE.match(self._text, self._pos)
            self._pos = broken.end() if broken is not None else self._pos + 1
            raise _ElementError(start, self._pos, "reference")
        index = int(m.group(1))
        if index >= len(self._references):
            raise UnresolvedReference(index)
        self._pos = m.end()
        return LiteralStr(self._references[index])

    def _parse_string(self) -> str:
        """Parse a quoted string, leaving the position after the closing quote.

        A bad escape does not stop the scan: the rest of the string is
        consumed first so recovery starts after it.
        """
        text = self._text
        start = self._pos
        self._pos += 1  # opening quote
        chunks: list[str] = []
        bad_escape_at: int | None = None

        while True:
            m = _PLAIN_RUN_RE.match(text, self._pos)
            if m is not None:
                chunks.append(m.group())
                self._pos = m.end()

            ch = self._peek()
            if ch == "":
                raise _ElementError(start, self._pos, "string")
            if ch == '"':
                self._pos += 1
                break

            # backslash escape
            escape_start = self._pos
            self._pos += 1
            code = self._peek()
            simple = _SIMPLE_ESCAPES.get(code)
            if simple is not None:
                chunks.append(simple)
                self._pos += 1
            elif code == "u":
                self._pos += 1
                chunks.append(self._parse_unicode_escape())
            elif code == "":
                raise _ElementError(start, self._pos, "string")
            else:
                if bad_escape_at is None:
                    bad_escape_at = escape_start
                self._pos += 1

        if bad_escape_at is not None:
            raise _ElementError(start, self._pos, "string")
        return "".join(chunks)

    def _parse_unicode_escape(self) -> str:
        text = self._text
        m = _HEX4_RE.match(text, self._pos)
        if m is None:
            bad = _BAD_HEX_RUN_RE.match(text, self._pos)
            if bad is not None:
                self._pos = bad.end()
            return REPLACEMENT_CHARACTER

        code = int(m.group(), 16)
        self._pos = m.end()
        if 0xD800 <= code <= 0xDBFF and text.startswith("\\u", self._pos):
            low = _HEX4_RE.match(text, self._pos + 2)
            if low is not None and 0xDC00 <= int(low.group(), 16) <= 0xDFFF:
                self._pos = low.end()
                return chr(0x10000 + ((code - 0xD800) << 10) + (int(low.group(), 16) - 0xDC00))
        if 0xD800 <= code <= 0xDFFF:
            return REPLACEMENT_CHARACTER
        return chr(code)

    # ─── Containers ───────────────────────────────────────────────

    def _enter(self, depth: int) -> None:
        if depth > self._max_depth:
            raise MalformedLiteral(
                self._span(self._pos, self._pos + 1),
                "nesting depth",
                self._excerpt(self._pos, self._pos + 1),
            )

    def _parse_array(self, depth: int) -> LiteralValue:
        self._enter(depth)
        start = self._pos
        self._pos += 1  # '['
        items: list[LiteralValue] = []

        self._skip_ws()
        if self._peek() == "]":
            self._pos += 1
            return LiteralArray(())

        while True:
            self._skip_ws()
            items.append(self._parse_element(depth))
            if self._finish_member("]", start, "array", items):
                return LiteralArray(tuple(items))

    def _parse_object(self, depth: int) -> LiteralValue:
        self._enter(depth)
        start = self._pos
        self._pos += 1  # '{'
        entries: dict[str, LiteralValue] = {}
        invalid: list[LiteralValue] = []

        self._skip_ws()
        if self._peek() == "}":
            self._pos += 1
            return LiteralObject({})

        while True:
            self._skip_ws()
            try:
                key = self._parse_key()
            except _ElementError as exc:
                invalid.append(self._recover(exc))
            else:
                entries[key] = self._parse_element(depth)
            if self._finish_member("}", start, "object", invalid):
                return LiteralObject(
                    entries,
                    tuple(item for item in invalid if isinstance(item, InvalidElement)),
                )

    def _parse_key(self) -> str:
        if self._peek() != '"':
            raise _ElementError(self._pos, self._pos + 1, "object key")
        key = self._parse_string()
        self._skip_ws()
        if self._peek() != ":":
            raise _ElementError(self._pos, self._pos + 1, "object")
        self._pos += 1
        self._skip_ws()
        return key

    def _finish_member(
        self,
        closer: str,
        start: int,
        label: str,
        sink: list[LiteralValue],
    ) -> bool:
        """Consume the delimiter after a member.

        Returns True once the container is closed, False when another member
        follows. Junk between members is recorded in ``sink``.
        """
        while True:
            self._skip_ws()
            ch = self._peek()
            if ch == ",":
                self._pos += 1
                self._skip_ws()
                if self._peek() == closer:  # trailing comma
                    self._pos += 1
                    return True
                return False
            if ch == closer:
                self._pos += 1
                return True
            if ch == "" or ch in _CLOSERS:
                raise _ElementError(start, self._pos, label)
            sink.append(self._recover(_ElementError(self._pos, self._pos + 1, label)))

    # ─── Recovery ─────────────────────────────────────────────────

    def _invalid(self, exc: _ElementError) -> InvalidElement:
        return InvalidElement(
            span=self._span(exc.start, exc.end),
            label=exc.label,
            excerpt=self._excerpt(exc.start, exc.end),
        )

    def _recover(self, exc: _ElementError) -> InvalidElement:
        invalid = self._invalid(exc)
        self._errors.append(invalid.to_error())
        self._pos = max(self._pos, exc.start)
        self._resync()
        log.debug(
            "recovered from invalid %s at %d, resuming at %d",
            exc.label, exc.start, self._pos,
        )
        return invalid

    def _resync(self) -> None:
        """Skip to the next ``,`` of the current container or its closer."""
        text = self._text
        pos = self._pos
        nesting = 0
        while pos < len(text):
            ch = text[pos]
            if ch == '"':
                pos = _skip_quoted(text, pos)
                continue
            if ch in "[{":
                nesting += 1
            elif ch in _CLOSERS:
                if nesting == 0:
                    break
                nesting -= 1
            elif ch == "," and nesting == 0:
                break
            pos += 1
        self._pos = pos


def _skip_quoted(text: str, pos: int) -> int:
    """Return the position after the string starting at ``pos``."""
    pos += 1
    while pos < len(text):
        ch = text[pos]
        if ch == "\\":
            pos += 2
            continue
        if ch == '"':
            return pos + 1
        pos += 1
    return len(text)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_literal(
    text: str,
    references: Sequence[str] = (),
    *,
    max_depth: int = MAX_NESTING_DEPTH,
) -> LiteralParseResult:
    """Parse one legacy literal.

    Args:
        text: The literal source, without the assignment or trailing ``;``.
        references: Reference table for ``R[n]`` tokens.
        max_depth: Maximum array/object nesting.

    Returns:
        The value tree and the errors that were recovered from. A value
        that could not be parsed at all is returned as ``InvalidElement``.

    Raises:
        MalformedLiteral: nesting too deep, or trailing characters.
        UnresolvedReference: ``R[n]`` outside ``references``.
    """
    return _LiteralParser(text, references, max_depth).parse()


def to_python(value: LiteralValue) -> Any:
    """Coerce a value tree into ``None``/``str``/``int``/``list``/``dict``."""
    match value:
        case LiteralNull():
            return None
        case LiteralStr(value=s):
            return s
        case LiteralNum(value=n):
            return n
        case LiteralArray(items=items):
            return [to_python(item) for item in items]
        case LiteralObject(entries=entries, invalid=invalid):
            if invalid:
                raise invalid[0].to_error()
            return {key: to_python(item) for key, item in entries.items()}
        case InvalidElement():
            raise value.to_error()
    raise TypeError(f"not a literal value: {value!r}")

"""Crate version that is either ``latest`` or a specific semantic version."""
from __future__ import annotations

import re
from dataclasses import dataclass

from docsearch.errors import InvalidVersionFormat

LATEST = "latest"

# https://semver.org/#is-there-a-suggested-regular-expression-regex-to-check-a-semver-string
_SEMVER_RE = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-((?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
    r"(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+([0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$",
)


@dataclass(frozen=True, slots=True)
class Version:
    """``latest`` or a validated ``MAJOR.MINOR.PATCH[-pre][+build]`` string."""

    value: str = LATEST

    def __post_init__(self) -> None:
        if self.value != LATEST and _SEMVER_RE.match(self.value) is None:
            raise InvalidVersionFormat(self.value)

    @classmethod
    def parse(cls, text: str) -> Version:
        return cls(text.strip())

    @classmethod
    def latest(cls) -> Version:
        return cls(LATEST)

    @property
    def is_latest(self) -> bool:
        return self.value == LATEST

    @property
    def release(self) -> tuple[int, int, int] | None:
        """``(major, minor, patch)`` or None for ``latest``."""
        m = _SEMVER_RE.match(self.value)
        if m is None:
            return None
        return int(m.group(1)), int(m.group(2)), int(m.group(3))

    def __str__(self) -> str:
        return self.value

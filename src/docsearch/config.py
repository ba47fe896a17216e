"""Runtime settings for index retrieval.

Defaults point at the public docs services; every field can be overridden
through ``DOCSEARCH_*`` environment variables via ``SearchConfig.from_env``.
"""
from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

DEFAULT_DOCSRS_URL = "https://docs.rs"
DEFAULT_STD_URL = "https://doc.rust-lang.org/nightly"
DEFAULT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = "docsearch/0.3.5"


@dataclass(frozen=True, slots=True)
class SearchConfig:
    """Where and how to download documentation pages and indexes."""

    docsrs_url: str = DEFAULT_DOCSRS_URL
    std_url: str = DEFAULT_STD_URL
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            raise ValueError(f"timeout must be > 0, got {self.timeout}")

    @property
    def std_index_page(self) -> str:
        """Page of the ``std`` crate that references the stdlib index."""
        return f"{self.std_url}/std/index.html"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> SearchConfig:
        """Build a config from ``DOCSEARCH_*`` variables, defaults otherwise."""
        env = os.environ if environ is None else environ
        timeout_raw = env.get("DOCSEARCH_TIMEOUT", "")
        try:
            timeout = float(timeout_raw) if timeout_raw else DEFAULT_TIMEOUT
        except ValueError:
            raise ValueError(
                f"DOCSEARCH_TIMEOUT must be a number, got {timeout_raw!r}",
            ) from None
        return cls(
            docsrs_url=env.get("DOCSEARCH_DOCSRS_URL", DEFAULT_DOCSRS_URL).rstrip("/"),
            std_url=env.get("DOCSEARCH_STD_URL", DEFAULT_STD_URL).rstrip("/"),
            timeout=timeout,
            user_agent=env.get("DOCSEARCH_USER_AGENT", DEFAULT_USER_AGENT),
        )

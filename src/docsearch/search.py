"""Download, decode and query crate indexes.

    indexes = search("anyhow")
    link = indexes[0].find_link("anyhow::Result")
    # https://docs.rs/anyhow/1.0.72/anyhow/type.Result.html
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from docsearch.config import SearchConfig
from docsearch.errors import MissingPackage
from docsearch.fetch import fetch_docsrs, fetch_std
from docsearch.index import decode_packages
from docsearch.simple_path import STD_CRATES, SimplePath
from docsearch.types import Err, Ok, PathUrlMap
from docsearch.version import Version

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CrateIndex:
    """Decoded index of one crate, bound to where its docs are hosted."""

    name: str
    version: Version
    mapping: PathUrlMap = field(repr=False)
    std: bool = False
    base_url: str = ""

    def find_link(self, path: SimplePath | str) -> str | None:
        """Absolute documentation URL for ``path`` or None if unknown."""
        if isinstance(path, str):
            path = SimplePath.parse(path)
        if path.crate_name != self.name:
            return None
        if path.is_crate_only:
            return f"{self.base_url}{self.name}/index.html"
        fragment = self.mapping.get(str(path))
        if fragment is None:
            return None
        return f"{self.base_url}{fragment}"

    def __len__(self) -> int:
        return len(self.mapping)


def base_url_for(name: str, version: Version, *, std: bool, config: SearchConfig) -> str:
    if std:
        return f"{config.std_url}/"
    return f"{config.docsrs_url}/{name}/{version}/"


def search_index_text(
    text: str,
    version: Version,
    *,
    std: bool = False,
    config: SearchConfig | None = None,
    require: str | None = None,
) -> list[CrateIndex]:
    """Decode an already downloaded index into ``CrateIndex`` objects.

    Packages that fail to decode are logged and skipped. When ``require``
    names a package, its failure is raised instead, and ``MissingPackage``
    is raised if the document doesn't contain it at all.
    """
    config = config or SearchConfig()
    outcomes = decode_packages(text)

    if require is not None:
        match outcomes.get(require):
            case None:
                raise MissingPackage(require)
            case Err(error=exc):
                raise exc

    indexes: list[CrateIndex] = []
    for name, outcome in outcomes.items():
        if not isinstance(outcome, Ok):
            continue
        indexes.append(CrateIndex(
            name=name,
            version=version,
            mapping=outcome.value,
            std=std,
            base_url=base_url_for(name, version, std=std, config=config),
        ))
    return indexes


def search(
    name: str,
    version: Version | str | None = None,
    config: SearchConfig | None = None,
) -> list[CrateIndex]:
    """Download and decode the index that documents crate ``name``.

    Standard library crates share one index downloaded from the stdlib docs;
    the ``version`` argument is ignored for them. Everything else comes from
    docs.rs.
    """
    config = config or SearchConfig.from_env()
    if isinstance(version, str):
        version = Version.parse(version)

    if name in STD_CRATES:
        resolved, text = fetch_std(config)
        std = True
    else:
        resolved, text = fetch_docsrs(name, version, config)
        std = False

    indexes = search_index_text(text, resolved, std=std, config=config, require=name)
    log.info("decoded %d package(s) for %s %s", len(indexes), name, resolved)
    return indexes

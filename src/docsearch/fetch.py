"""Download search indexes from docs.rs and the stdlib documentation.

Retrieval is two requests: the crate's documentation page, which names the
index file in its markup, and then the index itself. The markup changed
across rustdoc releases, so ``find_index_path`` checks the three known
forms from newest to oldest.
"""
from __future__ import annotations

import logging
import ssl
import urllib.error
import urllib.parse
import urllib.request

import certifi
from bs4 import BeautifulSoup

from docsearch.config import SearchConfig
from docsearch.errors import IndexNotFound, InvalidVersionFormat, RetrievalError
from docsearch.version import Version

log = logging.getLogger(__name__)

INDEX_PREFIX = "search-index"
INDEX_SUFFIX = ".js"


def _ssl_context() -> ssl.SSLContext:
    return ssl.create_default_context(cafile=certifi.where())


def http_get(url: str, config: SearchConfig) -> tuple[str, str]:
    """GET ``url`` and return ``(final_url, body)`` after redirects."""
    req = urllib.request.Request(
        url,
        headers={"User-Agent": config.user_agent, "Accept": "*/*"},
    )
    log.debug("GET %s", url)
    try:
        with urllib.request.urlopen(
            req, timeout=config.timeout, context=_ssl_context(),
        ) as resp:
            final_url = resp.geturl()
            body = resp.read().decode("utf-8")
    except urllib.error.URLError as exc:
        raise RetrievalError(f"request to {url} failed: {exc}") from exc
    return final_url, body


def find_index_path(html: str) -> str | None:
    """Locate the search index file name referenced by a rustdoc page.

    Checked in order:

    1. ``data-resource-suffix`` on any element (current rustdoc); the index
       is ``search-index<suffix>.js``.
    2. ``data-search-index-js`` (short-lived intermediate form).
    3. A ``<script src="../search-index....js">`` tag (oldest form).

    The ``../`` prefix is dropped so the result is relative to the site root
    of the crate's documentation.
    """
    soup = BeautifulSoup(html, "html.parser")

    suffixed = soup.find(attrs={"data-resource-suffix": True})
    if suffixed is not None:
        return f"{INDEX_PREFIX}{suffixed['data-resource-suffix']}{INDEX_SUFFIX}"

    tagged = soup.find(attrs={"data-search-index-js": True})
    if tagged is not None:
        return _strip_parent(str(tagged["data-search-index-js"]))

    scripts = [
        str(tag["src"])
        for tag in soup.find_all("script", src=True)
        if str(tag["src"]).startswith(f"../{INDEX_PREFIX}")
    ]
    if scripts:
        return _strip_parent(scripts[-1])
    return None


def _strip_parent(path: str) -> str:
    return path.removeprefix("../")


def version_from_url(url: str) -> Version | None:
    """Read the crate version from ``/<crate>/<version>/...`` docs.rs URLs."""
    segments = urllib.parse.urlsplit(url).path.strip("/").split("/")
    if len(segments) < 2:
        return None
    try:
        return Version.parse(segments[1])
    except InvalidVersionFormat:
        return None


def version_from_index_path(path: str) -> Version:
    """Extract the toolchain version from a ``search-index<ver>.js`` name."""
    name = path.rsplit("/", 1)[-1]
    if not (name.startswith(INDEX_PREFIX) and name.endswith(INDEX_SUFFIX)):
        raise InvalidVersionFormat(name)
    return Version.parse(name[len(INDEX_PREFIX):-len(INDEX_SUFFIX)])


def fetch_docsrs(
    name: str,
    version: Version | None = None,
    config: SearchConfig | None = None,
) -> tuple[Version, str]:
    """Download the index of a crate hosted on docs.rs.

    Returns the resolved version (``latest`` is replaced by the concrete
    version docs.rs redirected to, when it did) and the raw index text.
    """
    config = config or SearchConfig()
    version = version or Version.latest()

    page_url = f"{config.docsrs_url}/{name}/{version}/{name}/"
    final_url, html = http_get(page_url, config)

    if version.is_latest:
        resolved = version_from_url(final_url)
        if resolved is not None and not resolved.is_latest:
            log.info("resolved %s latest -> %s", name, resolved)
            version = resolved

    index_path = find_index_path(html)
    if index_path is None:
        raise IndexNotFound(final_url)

    index_url = f"{config.docsrs_url}/{name}/{version}/{index_path}"
    _, text = http_get(index_url, config)
    log.info("downloaded %s index (%d chars)", name, len(text))
    return version, text


def fetch_std(config: SearchConfig | None = None) -> tuple[Version, str]:
    """Download the shared index of the standard library crates."""
    config = config or SearchConfig()
    page_url = config.std_index_page
    _, html = http_get(page_url, config)

    index_path = find_index_path(html)
    if index_path is None:
        raise IndexNotFound(page_url)
    version = version_from_index_path(index_path)

    _, text = http_get(f"{config.std_url}/{index_path}", config)
    log.info("downloaded std index %s (%d chars)", version, len(text))
    return version, text

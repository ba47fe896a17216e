"""Tests for docsearch.fetch. Network access is replaced via monkeypatch."""
from __future__ import annotations

import urllib.error
from typing import Any

import pytest

from docsearch import fetch
from docsearch.config import SearchConfig
from docsearch.errors import IndexNotFound, InvalidVersionFormat, RetrievalError
from docsearch.fetch import (
    fetch_docsrs,
    fetch_std,
    find_index_path,
    version_from_index_path,
    version_from_url,
)
from docsearch.version import Version

CONFIG = SearchConfig(docsrs_url="https://docs.example", std_url="https://std.example/nightly")

CURRENT_PAGE = """<!DOCTYPE html><html><head>
<meta name="rustdoc-vars" data-root-path="../" data-current-crate="anyhow"
      data-resource-suffix="-20230720-1.73.0" data-search-js="search-1.js">
</head><body></body></html>"""

INTERMEDIATE_PAGE = """<html><body>
<div id="rustdoc-vars" data-root-path="../" data-search-index-js="../search-index-1.58.0.js"
     data-search-js="../search-1.58.0.js"></div>
</body></html>"""

OLDEST_PAGE = """<html><body>
<script src="../main.js"></script>
<script>window.rootPath = "../";</script>
<script src="../search-index.js" defer></script>
</body></html>"""


class _FakeGet:
    """Stand-in for ``fetch.http_get`` serving canned responses in order."""

    def __init__(self, *responses: tuple[str, str]) -> None:
        self._responses = list(responses)
        self.urls: list[str] = []

    def __call__(self, url: str, config: SearchConfig) -> tuple[str, str]:
        self.urls.append(url)
        final_url, body = self._responses.pop(0)
        return final_url or url, body


class TestFindIndexPath:
    def test_resource_suffix(self) -> None:
        assert find_index_path(CURRENT_PAGE) == "search-index-20230720-1.73.0.js"

    def test_empty_resource_suffix(self) -> None:
        html = '<div id="rustdoc-vars" data-resource-suffix=""></div>'
        assert find_index_path(html) == "search-index.js"

    def test_search_index_js_attribute(self) -> None:
        assert find_index_path(INTERMEDIATE_PAGE) == "search-index-1.58.0.js"

    def test_script_tag(self) -> None:
        assert find_index_path(OLDEST_PAGE) == "search-index.js"

    def test_resource_suffix_preferred(self) -> None:
        html = CURRENT_PAGE + '<script src="../search-index-old.js"></script>'
        assert find_index_path(html) == "search-index-20230720-1.73.0.js"

    def test_not_found(self) -> None:
        assert find_index_path("<html><body><p>404</p></body></html>") is None


class TestVersionHelpers:
    def test_version_from_url(self) -> None:
        assert version_from_url("https://docs.rs/anyhow/1.0.72/anyhow/") == Version("1.0.72")
        assert version_from_url("https://docs.rs/anyhow/latest/anyhow/") == Version.latest()

    def test_version_from_url_unusable(self) -> None:
        assert version_from_url("https://docs.rs/") is None
        assert version_from_url("https://docs.rs/anyhow/crate/anyhow/") is None

    def test_version_from_index_path(self) -> None:
        assert version_from_index_path("search-index1.76.0.js") == Version("1.76.0")

    def test_version_from_index_path_invalid(self) -> None:
        with pytest.raises(InvalidVersionFormat):
            version_from_index_path("search-index-20240101-abc.js")
        with pytest.raises(InvalidVersionFormat):
            version_from_index_path("main.js")


class TestFetchDocsrs:
    def test_resolves_latest_from_redirect(self, monkeypatch: pytest.MonkeyPatch) -> None:
        fake = _FakeGet(
            ("https://docs.example/anyhow/1.0.72/anyhow/", CURRENT_PAGE),
            ("", "INDEX"),
        )
        monkeypatch.setattr(fetch, "http_get", fake)

        version, text = fetch_docsrs("anyhow", None, CONFIG)

        assert version == Version("1.0.72")
        assert text == "INDEX"
        assert fake.urls == [
            "https://docs.example/anyhow/latest/anyhow/",
            "https://docs.example/anyhow/1.0.72/search-index-20230720-1.73.0.js",
        ]

    def test_keeps_latest_without_redirect(self, monkeypatch: pytest.MonkeyPatch) -> None:
        fake = _FakeGet(("", OLDEST_PAGE), ("", "INDEX"))
        monkeypatch.setattr(fetch, "http_get", fake)

        version, _ = fetch_docsrs("anyhow", Version.latest(), CONFIG)

        assert version.is_latest
        assert fake.urls[1] == "https://docs.example/anyhow/latest/search-index.js"

    def test_explicit_version(self, monkeypatch: pytest.MonkeyPatch) -> None:
        fake = _FakeGet(("", INTERMEDIATE_PAGE), ("", "INDEX"))
        monkeypatch.setattr(fetch, "http_get", fake)

        version, _ = fetch_docsrs("anyhow", Version("1.0.0"), CONFIG)

        assert version == Version("1.0.0")
        assert fake.urls == [
            "https://docs.example/anyhow/1.0.0/anyhow/",
            "https://docs.example/anyhow/1.0.0/search-index-1.58.0.js",
        ]

    def test_index_not_found(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(fetch, "http_get", _FakeGet(("", "<html></html>")))
        with pytest.raises(IndexNotFound, match="docs.example/anyhow/1.0.0/anyhow/"):
            fetch_docsrs("anyhow", Version("1.0.0"), CONFIG)


class TestFetchStd:
    def test_version_from_index_name(self, monkeypatch: pytest.MonkeyPatch) -> None:
        page = '<div id="rustdoc-vars" data-resource-suffix="1.76.0"></div>'
        fake = _FakeGet(("", page), ("", "STD INDEX"))
        monkeypatch.setattr(fetch, "http_get", fake)

        version, text = fetch_std(CONFIG)

        assert version == Version("1.76.0")
        assert text == "STD INDEX"
        assert fake.urls == [
            "https://std.example/nightly/std/index.html",
            "https://std.example/nightly/search-index1.76.0.js",
        ]

    def test_unparseable_version(self, monkeypatch: pytest.MonkeyPatch) -> None:
        page = '<div id="rustdoc-vars" data-resource-suffix="-abc"></div>'
        monkeypatch.setattr(fetch, "http_get", _FakeGet(("", page)))
        with pytest.raises(InvalidVersionFormat):
            fetch_std(CONFIG)

    def test_index_not_found(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(fetch, "http_get", _FakeGet(("", "")))
        with pytest.raises(IndexNotFound):
            fetch_std(CONFIG)


class _FakeResponse:
    def __init__(self, url: str, body: bytes) -> None:
        self._url = url
        self._body = body

    def __enter__(self) -> _FakeResponse:
        return self

    def __exit__(self, *exc: object) -> None:
        return None

    def geturl(self) -> str:
        return self._url

    def read(self) -> bytes:
        return self._body


class TestHttpGet:
    def test_returns_final_url_and_body(self, monkeypatch: pytest.MonkeyPatch) -> None:
        seen: dict[str, Any] = {}

        def fake_urlopen(req: Any, timeout: float, context: Any) -> _FakeResponse:
            seen["url"] = req.full_url
            seen["agent"] = req.get_header("User-agent")
            seen["timeout"] = timeout
            return _FakeResponse("https://docs.example/final/", "héllo".encode())

        monkeypatch.setattr(fetch.urllib.request, "urlopen", fake_urlopen)
        config = SearchConfig(timeout=3.0, user_agent="tests")

        assert fetch.http_get("https://docs.example/start/", config) == (
            "https://docs.example/final/",
            "héllo",
        )
        assert seen == {"url": "https://docs.example/start/", "agent": "tests", "timeout": 3.0}

    def test_wraps_url_errors(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def fake_urlopen(req: Any, timeout: float, context: Any) -> _FakeResponse:
            raise urllib.error.URLError("connection refused")

        monkeypatch.setattr(fetch.urllib.request, "urlopen", fake_urlopen)
        with pytest.raises(RetrievalError, match="connection refused") as exc_info:
            fetch.http_get("https://docs.example/", CONFIG)
        assert isinstance(exc_info.value.__cause__, urllib.error.URLError)

"""Extraction of the JSON payload shared by the v2 and v3 index files.

Both encodings wrap the data in a JavaScript string::

    var searchIndex = JSON.parse('{\\
    "cratename":{"doc":"...", ...}\\
    }');
    if (window.initSearch) {window.initSearch(searchIndex)};

After the first line the file holds one line of JSON per package, each
ending in a line-continuation backslash. Those lines are joined, wrapped in
``{``/``}`` again and the generator's string escaping is reversed.
"""
from __future__ import annotations

import logging
from typing import Any

import orjson

from docsearch.errors import MalformedDocument

log = logging.getLogger(__name__)


def assemble_json_document(text: str) -> str:
    """Rebuild the JSON object text from the package lines."""
    parts = ["{"]
    for line in text.splitlines():
        if line.startswith('"') and line.endswith("\\"):
            parts.append(line[:-1])
    parts.append("}")
    document = "".join(parts)

    # Inverse of the escaping applied when the JSON is embedded in a
    # single-quoted JavaScript string.
    return (
        document.replace(r'\\"', r'\"')
        .replace(r"\'", "'")
        .replace("\\\\", "\\")
    )


def load_json_document(text: str) -> dict[str, Any]:
    """Parse the embedded JSON into a ``{package name: payload}`` dict."""
    document = assemble_json_document(text)
    try:
        payload = orjson.loads(document)
    except orjson.JSONDecodeError as exc:
        raise MalformedDocument(f"embedded JSON is invalid: {exc}") from exc
    if not isinstance(payload, dict):
        raise MalformedDocument("embedded JSON is not an object")
    log.debug("assembled index document with %d package(s)", len(payload))
    return payload

"""Resolve a Rust item path to its documentation URL.

Prints the URL (or a JSON object with ``--json``) to stdout; progress and
errors go to stderr.

Usage:
    docsearch anyhow::Result
    docsearch std::vec::Vec --json
    docsearch anyhow --version 1.0.72 --all
    docsearch anyhow::Error --index-file search-index.js --version 1.0.72

Exit codes: 0 found, 1 not found, 2 invalid input or retrieval/decoding error.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import orjson

from docsearch.config import SearchConfig
from docsearch.errors import DocsearchError
from docsearch.search import CrateIndex, search, search_index_text
from docsearch.simple_path import SimplePath
from docsearch.version import Version

log = logging.getLogger("docsearch")

EXIT_FOUND = 0
EXIT_NOT_FOUND = 1
EXIT_ERROR = 2


def dump_json(obj: object) -> None:
    sys.stdout.buffer.write(orjson.dumps(obj, option=orjson.OPT_INDENT_2))
    sys.stdout.buffer.write(b"\n")
    sys.stdout.flush()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docsearch",
        description="Find the documentation URL of a Rust item from its rustdoc search index.",
    )
    parser.add_argument("path", help="Item path, e.g. anyhow::Result or std::vec::Vec")
    parser.add_argument(
        "--version",
        default=None,
        help="Crate version (default: latest; ignored for std crates)",
    )
    parser.add_argument(
        "--index-file",
        type=Path,
        default=None,
        help="Decode a local search-index.js instead of downloading it",
    )
    parser.add_argument(
        "--all",
        action="store_true",
        help="Print every path of the crate instead of a single link",
    )
    parser.add_argument("--json", action="store_true", help="Emit JSON to stdout")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def _load_indexes(args: argparse.Namespace, path: SimplePath, config: SearchConfig) -> list[CrateIndex]:
    if args.index_file is None:
        return search(path.crate_name, args.version, config)
    text = args.index_file.read_text(encoding="utf-8")
    version = Version.parse(args.version) if args.version else Version.latest()
    return search_index_text(
        text, version, std=path.is_std, config=config, require=path.crate_name,
    )


def run(args: argparse.Namespace) -> int:
    path = SimplePath.parse(args.path)
    config = SearchConfig.from_env()
    indexes = _load_indexes(args, path, config)
    log.debug("loaded %d package index(es) for %s", len(indexes), path)
    index = next(i for i in indexes if i.name == path.crate_name)

    if args.all:
        if args.json:
            dump_json({
                "crate": index.name,
                "version": str(index.version),
                "items": {p: f"{index.base_url}{u}" for p, u in index.mapping.items()},
            })
        else:
            for item_path, url in index.mapping.items():
                print(f"{item_path}\t{index.base_url}{url}")
        return EXIT_FOUND

    link = index.find_link(path)
    if args.json:
        dump_json({
            "path": str(path),
            "crate": index.name,
            "version": str(index.version),
            "url": link,
        })
    elif link is not None:
        print(link)

    if link is None:
        print(f"{path} not found in {index.name} {index.version}", file=sys.stderr)
        return EXIT_NOT_FOUND
    return EXIT_FOUND


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )

    try:
        return run(args)
    except (DocsearchError, OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())

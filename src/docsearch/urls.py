"""Mapping from item paths to rustdoc URL fragments.

The path of an item is ``<module>::<item>``, or
``<module>::<parent>::<item>`` when it belongs to a parent item.

The URL adds the item kind: ``<module>/<kind>.<item>.html`` with ``::`` in
the module path replaced by ``/``. An item with a parent has no page of its
own; it becomes an anchor on the parent's page:
``<module>/<parent_kind>.<parent>.html#<kind>.<item>``.
"""
from __future__ import annotations

from docsearch.item_types import ItemKind
from docsearch.types import PackageIndex, PathUrlMap, ResolvedItem


def item_path(item: ResolvedItem, parent: tuple[ItemKind, str] | None = None) -> str:
    if parent is None:
        return f"{item.path}::{item.name}"
    return f"{item.path}::{parent[1]}::{item.name}"


def item_url(item: ResolvedItem, parent: tuple[ItemKind, str] | None = None) -> str:
    module = item.path.replace("::", "/")
    if parent is None:
        return f"{module}/{item.kind.segment}.{item.name}.html"
    parent_kind, parent_name = parent
    return (
        f"{module}/{parent_kind.segment}.{parent_name}.html"
        f"#{item.kind.segment}.{item.name}"
    )


def generate_mapping(index: PackageIndex) -> PathUrlMap:
    """Build the sorted ``path -> URL`` map for one package.

    When two items share a path (for example trait methods implemented on
    the same type) the later item wins.
    """
    mapping: PathUrlMap = {}
    for item in index.items:
        parent = index.parent_of(item)
        mapping[item_path(item, parent)] = item_url(item, parent)
    return dict(sorted(mapping.items()))

"""Tests for docsearch.urls: path and URL synthesis."""
from __future__ import annotations

from docsearch.item_types import ItemKind
from docsearch.types import PackageIndex, ResolvedItem
from docsearch.urls import generate_mapping, item_path, item_url


class TestItemUrl:
    def test_top_level_item(self) -> None:
        item = ResolvedItem(ItemKind.FUNCTION, "spawn", "tokio::task", "")
        assert item_path(item) == "tokio::task::spawn"
        assert item_url(item) == "tokio/task/fn.spawn.html"

    def test_item_with_parent(self) -> None:
        item = ResolvedItem(ItemKind.METHOD, "new", "anyhow", "", parent_index=0)
        parent = (ItemKind.STRUCT, "Error")
        assert item_path(item, parent) == "anyhow::Error::new"
        assert item_url(item, parent) == "anyhow/struct.Error.html#method.new"

    def test_trait_method(self) -> None:
        item = ResolvedItem(ItemKind.TY_METHOD, "context", "anyhow", "", parent_index=0)
        parent = (ItemKind.TRAIT, "Context")
        assert item_url(item, parent) == "anyhow/trait.Context.html#tymethod.context"


class TestGenerateMapping:
    def test_sorted_by_path(self) -> None:
        index = PackageIndex(
            name="demo",
            doc="",
            items=(
                ResolvedItem(ItemKind.STRUCT, "Zed", "demo", ""),
                ResolvedItem(ItemKind.MACRO, "amacro", "demo", ""),
            ),
        )
        assert list(generate_mapping(index)) == ["demo::Zed", "demo::amacro"]

    def test_later_item_wins_on_duplicate_path(self) -> None:
        index = PackageIndex(
            name="demo",
            doc="",
            items=(
                ResolvedItem(ItemKind.METHOD, "fmt", "demo", "", parent_index=0),
                ResolvedItem(ItemKind.TY_METHOD, "fmt", "demo", "", parent_index=1),
            ),
            parent_table=((ItemKind.STRUCT, "Foo"), (ItemKind.STRUCT, "Foo")),
        )
        assert generate_mapping(index) == {
            "demo::Foo::fmt": "demo/struct.Foo.html#tymethod.fmt",
        }

    def test_empty(self) -> None:
        assert generate_mapping(PackageIndex(name="demo", doc="", items=())) == {}

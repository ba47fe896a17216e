"""Tests for docsearch.item_types: index codes and URL segments."""
from __future__ import annotations

import pytest

from docsearch.errors import DecodeError, UnknownItemKind
from docsearch.item_types import (
    ItemKind,
    item_kind,
    item_kind_from_letter,
    kind_for_segment,
    url_segment,
)


class TestItemKind:
    def test_round_trip_every_code(self) -> None:
        for code in range(26):
            assert int(item_kind(code)) == code

    def test_known_codes(self) -> None:
        assert item_kind(3) is ItemKind.STRUCT
        assert item_kind(5) is ItemKind.FUNCTION
        assert item_kind(10) is ItemKind.TY_METHOD
        assert item_kind(11) is ItemKind.METHOD
        assert item_kind(25) is ItemKind.TRAIT_ALIAS

    @pytest.mark.parametrize("code", [26, 27, 100, -1])
    def test_out_of_range_raises(self, code: int) -> None:
        with pytest.raises(UnknownItemKind) as exc_info:
            item_kind(code)
        assert exc_info.value.code == code

    def test_bool_is_not_a_code(self) -> None:
        with pytest.raises(UnknownItemKind):
            item_kind(True)

    def test_unknown_kind_is_decode_error(self) -> None:
        with pytest.raises(DecodeError):
            item_kind(26)


class TestLetters:
    def test_letter_offsets(self) -> None:
        assert item_kind_from_letter("A") is ItemKind.MODULE
        assert item_kind_from_letter("D") is ItemKind.STRUCT
        assert item_kind_from_letter("L") is ItemKind.METHOD
        assert item_kind_from_letter("Z") is ItemKind.TRAIT_ALIAS

    def test_lowercase_rejected(self) -> None:
        with pytest.raises(UnknownItemKind):
            item_kind_from_letter("d")

    def test_empty_rejected(self) -> None:
        with pytest.raises(UnknownItemKind):
            item_kind_from_letter("")


class TestSegments:
    def test_segments(self) -> None:
        assert url_segment(ItemKind.FUNCTION) == "fn"
        assert url_segment(ItemKind.TYPEDEF) == "type"
        assert url_segment(ItemKind.TY_METHOD) == "tymethod"
        assert url_segment(ItemKind.ASSOC_CONST) == "associatedconstant"
        assert ItemKind.PROC_ATTRIBUTE.segment == "attr"

    def test_every_kind_has_unique_segment(self) -> None:
        segments = [kind.segment for kind in ItemKind]
        assert len(segments) == len(set(segments)) == 26

    def test_reverse_lookup(self) -> None:
        for kind in ItemKind:
            assert kind_for_segment(kind.segment) is kind

    def test_reverse_lookup_unknown(self) -> None:
        with pytest.raises(ValueError, match="unknown item URL segment"):
            kind_for_segment("nope")

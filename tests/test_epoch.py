"""Tests for docsearch.epoch: envelope marker detection."""
from __future__ import annotations

from pathlib import Path

import pytest

from docsearch.epoch import V1_PROLOGUE, V2_EPILOGUE, V3_EPILOGUES, detect_epoch, require_epoch
from docsearch.errors import UnsupportedFormat

FIXTURE_DIR = Path(__file__).resolve().parent / "fixtures" / "index"


class TestDetectEpoch:
    def test_v1_prologue(self) -> None:
        assert detect_epoch(V1_PROLOGUE + "\nvar R=[];\n") == "v1"

    def test_v2_epilogue(self) -> None:
        assert detect_epoch("var searchIndex = {};\n" + V2_EPILOGUE) == "v2"

    @pytest.mark.parametrize("marker", V3_EPILOGUES)
    def test_v3_epilogues(self, marker: str) -> None:
        assert detect_epoch("var searchIndex = {};\n" + marker) == "v3"

    def test_trailing_whitespace_ignored(self) -> None:
        assert detect_epoch("x\n" + V2_EPILOGUE + "\n\n  ") == "v2"

    def test_v1_wins_over_epilogues(self) -> None:
        text = V1_PROLOGUE + "\n" + V2_EPILOGUE
        assert detect_epoch(text) == "v1"

    def test_unknown(self) -> None:
        assert detect_epoch("") is None
        assert detect_epoch("var searchIndex = {};") is None

    def test_deterministic(self) -> None:
        text = "abc\n" + V3_EPILOGUES[0]
        assert {detect_epoch(text) for _ in range(5)} == {"v3"}

    def test_fixtures(self) -> None:
        assert detect_epoch((FIXTURE_DIR / "anyhow-1.0.0.js").read_text("utf-8")) == "v1"
        assert detect_epoch((FIXTURE_DIR / "demo-0.2.0.js").read_text("utf-8")) == "v2"
        assert detect_epoch((FIXTURE_DIR / "anyhow-1.0.72.js").read_text("utf-8")) == "v3"


class TestRequireEpoch:
    def test_raises_unsupported(self) -> None:
        with pytest.raises(UnsupportedFormat, match="not supported"):
            require_epoch("console.log('hi');")

    def test_returns_epoch(self) -> None:
        assert require_epoch(V1_PROLOGUE) == "v1"

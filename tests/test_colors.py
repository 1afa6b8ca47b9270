"""Tests for rescuebag.ui.colors – theme stylesheet and color blending."""

from __future__ import annotations

import pytest

from rescuebag.core.tiers import REQUIRED_THEME_TOKENS, TierRepository
from rescuebag.ui.colors import StatusColors, blend_hex, build_stylesheet, missing_tokens

from conftest import make_theme


# ===========================================================================
# StatusColors – constants exist
# ===========================================================================

class TestStatusColors:
    def test_are_hex(self):
        for value in (StatusColors.OPEN, StatusColors.CLOSED, StatusColors.SOLD_OUT):
            assert value.startswith("#")
            assert len(value) == 7


# ===========================================================================
# build_stylesheet
# ===========================================================================

class TestBuildStylesheet:
    def test_uses_tokens(self):
        css = build_stylesheet(make_theme(primary="#ABCDEF"))
        assert "#ABCDEF" in css
        assert "QProgressBar::chunk" in css

    def test_every_packaged_tier_builds(self, tiers: TierRepository):
        sheets = {t.key: build_stylesheet(t.color_theme) for t in tiers.all()}
        assert len(set(sheets.values())) == len(sheets)

    def test_missing_token_raises(self):
        theme = make_theme()
        del theme["card"]
        with pytest.raises(ValueError, match="card"):
            build_stylesheet(theme)

    def test_missing_tokens_helper(self):
        assert missing_tokens(make_theme()) == []
        assert missing_tokens({}) == list(REQUIRED_THEME_TOKENS)
        assert missing_tokens({**make_theme(), "border": ""}) == ["border"]


# ===========================================================================
# blend_hex
# ===========================================================================

class TestBlendHex:
    def test_t_zero_returns_a(self):
        assert blend_hex("#FF0000", "#0000FF", 0.0) == "#FF0000"

    def test_t_one_returns_b(self):
        assert blend_hex("#FF0000", "#0000FF", 1.0) == "#0000FF"

    def test_midpoint(self):
        result = blend_hex("#000000", "#FFFFFF", 0.5)
        assert 126 <= int(result[1:3], 16) <= 128

    def test_clamped(self):
        assert blend_hex("#FF0000", "#0000FF", -1.0) == "#FF0000"
        assert blend_hex("#FF0000", "#0000FF", 2.0) == "#0000FF"

    def test_invalid_inputs_return_a(self):
        assert blend_hex("FF0000", "#0000FF", 0.5) == "FF0000"
        assert blend_hex("#FFF", "#000000", 0.5) == "#FFF"
        assert blend_hex("#GGHHII", "#000000", 0.5) == "#GGHHII"

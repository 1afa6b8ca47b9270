"""Tests for rescuebag.core.tiers – YAML tier ladder."""

from __future__ import annotations

from pathlib import Path

import pytest

from rescuebag.core.tiers import DEFAULT_TIERS_PATH, Burst, TierDefinition, TierRepository

from conftest import make_theme, write_yaml


def _tier(key: str, min_orders: int, max_orders=None, **extra) -> dict:
    data = {
        "key": key,
        "name": key.title(),
        "min_orders": min_orders,
        "color_theme": make_theme(),
    }
    if max_orders is not None:
        data["max_orders"] = max_orders
    data.update(extra)
    return data


# ---------------------------------------------------------------------------
# Packaged ladder
# ---------------------------------------------------------------------------

class TestPackagedLadder:
    def test_three_tiers_in_rank_order(self, tiers: TierRepository):
        assert [t.name for t in tiers.all()] == ["Joe", "Shrek", "Zeus"]
        assert [t.rank for t in tiers.all()] == [0, 1, 2]

    def test_bounds(self, tiers: TierRepository):
        joe, shrek, zeus = tiers.all()
        assert (joe.min_orders, joe.max_orders) == (0, 4)
        assert (shrek.min_orders, shrek.max_orders) == (5, 19)
        assert (zeus.min_orders, zeus.max_orders) == (20, None)

    def test_partition_is_total_and_exclusive(self, tiers: TierRepository):
        for n in range(0, 200):
            matches = [t for t in tiers.all() if t.contains(n)]
            assert len(matches) == 1, n

    def test_lowest_tier_has_no_celebration(self, tiers: TierRepository):
        assert tiers.lowest().celebration is None

    def test_top_tier_bursts_more_than_middle(self, tiers: TierRepository):
        shrek = tiers.get("shrek")
        zeus = tiers.get("zeus")
        assert len(zeus.celebration.bursts) > len(shrek.celebration.bursts)
        assert sum(zeus.celebration.vibration) > sum(shrek.celebration.vibration)

    def test_next_after(self, tiers: TierRepository):
        assert tiers.next_after(tiers.get("joe")).key == "shrek"
        assert tiers.next_after(tiers.get("shrek")).key == "zeus"
        assert tiers.next_after(tiers.top()) is None

    def test_by_name_accepts_key_or_name(self, tiers: TierRepository):
        assert tiers.by_name("Zeus") is tiers.get("zeus")
        assert tiers.by_name("zeus") is tiers.get("zeus")
        assert tiers.by_name("Nobody") is None

    def test_get_missing_key(self, tiers: TierRepository):
        with pytest.raises(KeyError):
            tiers.get("nonexistent")

    def test_mascot_assets_are_packaged(self, tiers: TierRepository):
        assets = DEFAULT_TIERS_PATH.parent.parent / "assets"
        for tier in tiers.all():
            assert tier.mascot, tier.key
            assert (assets / tier.mascot).is_file(), tier.mascot


# ---------------------------------------------------------------------------
# TierDefinition
# ---------------------------------------------------------------------------

class TestTierDefinition:
    def test_contains_inclusive_bounds(self):
        t = TierDefinition(key="a", name="A", rank=0, min_orders=5, max_orders=9, mascot="", color_theme={})
        assert not t.contains(4)
        assert t.contains(5)
        assert t.contains(9)
        assert not t.contains(10)

    def test_unbounded(self):
        t = TierDefinition(key="a", name="A", rank=0, min_orders=20, max_orders=None, mascot="", color_theme={})
        assert t.contains(10**9)

    def test_frozen(self):
        t = TierDefinition(key="a", name="A", rank=0, min_orders=0, max_orders=None, mascot="", color_theme={})
        with pytest.raises(AttributeError):
            t.key = "b"  # type: ignore[misc]


# ---------------------------------------------------------------------------
# TierRepository – loading
# ---------------------------------------------------------------------------

class TestTierRepositoryLoading:
    def test_custom_file(self, tmp_path: Path):
        path = write_yaml(tmp_path / "tiers.yaml", {"tiers": [_tier("bronze", 0, 9), _tier("gold", 10)]})
        repo = TierRepository(path)
        assert [t.key for t in repo.all()] == ["bronze", "gold"]
        assert repo.top().key == "gold"

    def test_celebration_defaults(self, tmp_path: Path):
        path = write_yaml(
            tmp_path / "tiers.yaml",
            {"tiers": [_tier("a", 0, 1), _tier("b", 2, celebration={"colors": ["#FFFFFF"], "bursts": [{}]})]},
        )
        burst = TierRepository(path).get("b").celebration.bursts[0]
        assert burst == Burst()

    def test_perks_stripped(self, tmp_path: Path):
        path = write_yaml(tmp_path / "tiers.yaml", {"tiers": [_tier("a", 0, perks=["  x  ", " "])]})
        assert TierRepository(path).get("a").perks == ["x"]


# ---------------------------------------------------------------------------
# TierRepository – error paths
# ---------------------------------------------------------------------------

class TestTierRepositoryErrors:
    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            TierRepository(tmp_path / "missing.yaml")

    def test_empty_yaml(self, tmp_path: Path):
        (tmp_path / "tiers.yaml").write_text("", encoding="utf-8")
        with pytest.raises(ValueError, match="expected YAML"):
            TierRepository(tmp_path / "tiers.yaml")

    def test_empty_list(self, tmp_path: Path):
        path = write_yaml(tmp_path / "tiers.yaml", {"tiers": []})
        with pytest.raises(ValueError, match="empty"):
            TierRepository(path)

    def test_must_start_at_zero(self, tmp_path: Path):
        path = write_yaml(tmp_path / "tiers.yaml", {"tiers": [_tier("a", 1)]})
        with pytest.raises(ValueError, match="start at 0"):
            TierRepository(path)

    def test_gap(self, tmp_path: Path):
        path = write_yaml(tmp_path / "tiers.yaml", {"tiers": [_tier("a", 0, 4), _tier("b", 6)]})
        with pytest.raises(ValueError, match="gap or overlap"):
            TierRepository(path)

    def test_overlap(self, tmp_path: Path):
        path = write_yaml(tmp_path / "tiers.yaml", {"tiers": [_tier("a", 0, 4), _tier("b", 4)]})
        with pytest.raises(ValueError, match="gap or overlap"):
            TierRepository(path)

    def test_unbounded_middle_tier(self, tmp_path: Path):
        path = write_yaml(tmp_path / "tiers.yaml", {"tiers": [_tier("a", 0), _tier("b", 5)]})
        with pytest.raises(ValueError, match="only the top tier"):
            TierRepository(path)

    def test_bounded_top_tier(self, tmp_path: Path):
        path = write_yaml(tmp_path / "tiers.yaml", {"tiers": [_tier("a", 0, 4)]})
        with pytest.raises(ValueError, match="must not set 'max_orders'"):
            TierRepository(path)

    def test_missing_theme_token(self, tmp_path: Path):
        bad = _tier("a", 0)
        del bad["color_theme"]["border"]
        path = write_yaml(tmp_path / "tiers.yaml", {"tiers": [bad]})
        with pytest.raises(ValueError, match="border"):
            TierRepository(path)

    def test_missing_name(self, tmp_path: Path):
        bad = _tier("a", 0)
        del bad["name"]
        path = write_yaml(tmp_path / "tiers.yaml", {"tiers": [bad]})
        with pytest.raises(ValueError, match="invalid 'name'"):
            TierRepository(path)

    def test_duplicate_key(self, tmp_path: Path):
        path = write_yaml(tmp_path / "tiers.yaml", {"tiers": [_tier("a", 0, 4), _tier("a", 5)]})
        with pytest.raises(ValueError, match="duplicate"):
            TierRepository(path)

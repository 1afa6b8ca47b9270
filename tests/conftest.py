from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from rescuebag.core.tiers import REQUIRED_THEME_TOKENS, TierRepository


def make_theme(primary: str = "#112233") -> dict:
    theme = {token: "#000000" for token in REQUIRED_THEME_TOKENS}
    theme["primary"] = primary
    return theme


def write_yaml(path: Path, data) -> Path:
    path.write_text(yaml.dump(data, allow_unicode=True, default_flow_style=False), encoding="utf-8")
    return path


@pytest.fixture()
def tiers() -> TierRepository:
    """The packaged Joe / Shrek / Zeus ladder."""
    return TierRepository()

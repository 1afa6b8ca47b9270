from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

REQUIRED_THEME_TOKENS = (
    "primary",
    "primary-contrast",
    "secondary",
    "secondary-contrast",
    "background",
    "foreground",
    "muted",
    "muted-contrast",
    "accent",
    "accent-contrast",
    "card",
    "card-contrast",
    "border",
)

DEFAULT_TIERS_PATH = Path(__file__).resolve().parent.parent / "data" / "tiers.yaml"


@dataclass(frozen=True)
class Burst:
    """One confetti burst, fired ``delay_ms`` after the upgrade."""

    delay_ms: int = 0
    particle_count: int = 50
    spread: float = 55.0
    angle: float = 90.0
    origin_x: float = 0.5
    origin_y: float = 0.5
    scalar: float = 1.0


@dataclass(frozen=True)
class Celebration:
    colors: List[str]
    bursts: List[Burst]
    vibration: List[int]
    title: str = ""
    subtitle: str = ""


@dataclass(frozen=True)
class TierDefinition:
    key: str
    name: str
    rank: int
    min_orders: int
    max_orders: Optional[int]
    mascot: str
    color_theme: Dict[str, str]
    emoji: str = ""
    perks: List[str] = field(default_factory=list)
    celebration: Optional[Celebration] = None

    def contains(self, completed_orders: int) -> bool:
        if completed_orders < self.min_orders:
            return False
        return self.max_orders is None or completed_orders <= self.max_orders


class TierRepository:
    """Loyalty ladder loaded from YAML, ordered by rank.

    Ranges are checked at load time: the first tier starts at 0, each tier
    starts right after the previous one ends, and only the top tier is
    unbounded.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = Path(path) if path is not None else DEFAULT_TIERS_PATH
        self._tiers = self._load_tiers()

    def all(self) -> List[TierDefinition]:
        return list(self._tiers)

    def get(self, key: str) -> TierDefinition:
        for tier in self._tiers:
            if tier.key == key:
                return tier
        raise KeyError(key)

    def by_name(self, name: str) -> Optional[TierDefinition]:
        for tier in self._tiers:
            if tier.name == name or tier.key == name:
                return tier
        return None

    def lowest(self) -> TierDefinition:
        return self._tiers[0]

    def top(self) -> TierDefinition:
        return self._tiers[-1]

    def next_after(self, tier: TierDefinition) -> Optional[TierDefinition]:
        if tier.rank + 1 < len(self._tiers):
            return self._tiers[tier.rank + 1]
        return None

    def tier_for(self, completed_orders: int) -> TierDefinition:
        for tier in self._tiers:
            if tier.contains(completed_orders):
                return tier
        # Only reachable for negative input; ranges cover every n >= 0.
        return self._tiers[0]

    def __len__(self) -> int:
        return len(self._tiers)

    def _load_tiers(self) -> List[TierDefinition]:
        if not self._path.exists():
            raise FileNotFoundError(f"Tier file not found: {self._path}")

        name = self._path.name
        raw = yaml.safe_load(self._path.read_text(encoding="utf-8"))
        if not raw or not isinstance(raw, dict) or not isinstance(raw.get("tiers"), list):
            raise ValueError(f"{name}: expected YAML with a 'tiers' list")
        if not raw["tiers"]:
            raise ValueError(f"{name}: 'tiers' is empty")

        tiers: List[TierDefinition] = []
        seen: set[str] = set()
        for rank, entry in enumerate(raw["tiers"]):
            tier = _parse_tier(name, rank, entry)
            if tier.key in seen:
                raise ValueError(f"{name}: duplicate tier key '{tier.key}'")
            seen.add(tier.key)
            tiers.append(tier)

        _check_ranges(name, tiers)
        return tiers


def _parse_tier(file_name: str, rank: int, entry: Any) -> TierDefinition:
    if not isinstance(entry, dict):
        raise ValueError(f"{file_name}: tier #{rank} is not a mapping")
    key = entry.get("key")
    title = entry.get("name")
    if not key or not isinstance(key, str):
        raise ValueError(f"{file_name}: tier #{rank} missing or invalid 'key'")
    if not title or not isinstance(title, str):
        raise ValueError(f"{file_name}: tier '{key}' missing or invalid 'name'")
    min_orders = entry.get("min_orders")
    if not isinstance(min_orders, int) or min_orders < 0:
        raise ValueError(f"{file_name}: tier '{key}' missing or invalid 'min_orders'")
    max_orders = entry.get("max_orders")
    if max_orders is not None and (not isinstance(max_orders, int) or max_orders < min_orders):
        raise ValueError(f"{file_name}: tier '{key}' has invalid 'max_orders'")

    theme = entry.get("color_theme") or {}
    if not isinstance(theme, dict):
        raise ValueError(f"{file_name}: tier '{key}' 'color_theme' must be a mapping")
    missing = [token for token in REQUIRED_THEME_TOKENS if token not in theme]
    if missing:
        raise ValueError(f"{file_name}: tier '{key}' color_theme missing {', '.join(missing)}")

    perks = entry.get("perks") or []
    return TierDefinition(
        key=key.strip(),
        name=title.strip(),
        rank=rank,
        min_orders=min_orders,
        max_orders=max_orders,
        mascot=str(entry.get("mascot") or ""),
        color_theme={str(k): str(v) for k, v in theme.items()},
        emoji=str(entry.get("emoji") or ""),
        perks=[str(p).strip() for p in perks if str(p).strip()],
        celebration=_parse_celebration(file_name, key, entry.get("celebration")),
    )


def _parse_celebration(file_name: str, key: str, raw: Any) -> Optional[Celebration]:
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise ValueError(f"{file_name}: tier '{key}' 'celebration' must be a mapping")
    bursts = []
    for item in raw.get("bursts") or []:
        if not isinstance(item, dict):
            raise ValueError(f"{file_name}: tier '{key}' has an invalid burst")
        bursts.append(
            Burst(
                delay_ms=int(item.get("delay_ms", 0)),
                particle_count=int(item.get("particle_count", 50)),
                spread=float(item.get("spread", 55.0)),
                angle=float(item.get("angle", 90.0)),
                origin_x=float(item.get("origin_x", 0.5)),
                origin_y=float(item.get("origin_y", 0.5)),
                scalar=float(item.get("scalar", 1.0)),
            )
        )
    return Celebration(
        colors=[str(c) for c in raw.get("colors") or []],
        bursts=bursts,
        vibration=[int(ms) for ms in raw.get("vibration") or []],
        title=str(raw.get("title") or ""),
        subtitle=str(raw.get("subtitle") or ""),
    )


def _check_ranges(file_name: str, tiers: List[TierDefinition]) -> None:
    if tiers[0].min_orders != 0:
        raise ValueError(f"{file_name}: first tier must start at 0 orders")
    for prev, cur in zip(tiers, tiers[1:]):
        if prev.max_orders is None:
            raise ValueError(f"{file_name}: only the top tier may omit 'max_orders' ('{prev.key}')")
        if cur.min_orders != prev.max_orders + 1:
            raise ValueError(
                f"{file_name}: tier '{cur.key}' must start at {prev.max_orders + 1} "
                f"(gap or overlap with '{prev.key}')"
            )
    if tiers[-1].max_orders is not None:
        raise ValueError(f"{file_name}: top tier '{tiers[-1].key}' must not set 'max_orders'")

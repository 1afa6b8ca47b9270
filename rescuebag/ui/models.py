"""Data models used by the UI."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from rescuebag.core.hours import format_hours
from rescuebag.core.shops import Shop


@dataclass
class ShopState:
    """UI state for a single shop row: availability and what is left."""

    shop: Shop
    is_open: bool
    hours_label: str
    bags_left: int
    can_reserve: bool = False

    @classmethod
    def from_shop(cls, shop: Shop, now: datetime) -> "ShopState":
        is_open = shop.is_open(now)
        return cls(
            shop=shop,
            is_open=is_open,
            hours_label=format_hours(shop.hours, now),
            bags_left=shop.bags_left,
            can_reserve=is_open and shop.bags_left > 0,
        )

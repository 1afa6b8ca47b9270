from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from rescuebag.core.hours import BusinessHours, is_open_now

DEFAULT_SHOPS_PATH = Path(__file__).resolve().parent.parent / "data" / "shops.yaml"


@dataclass(frozen=True)
class MysteryBag:
    id: str
    price: float
    original_price: float
    quantity: int
    pickup_window: str = ""

    @property
    def sold_out(self) -> bool:
        return self.quantity <= 0

    @property
    def discount_percent(self) -> int:
        if self.original_price <= 0:
            return 0
        return int(round((1 - self.price / self.original_price) * 100))


@dataclass(frozen=True)
class Shop:
    id: str
    name: str
    hours: BusinessHours
    inventory: List[MysteryBag] = field(default_factory=list)
    category: str = ""
    address: str = ""
    description: str = ""
    lat: Optional[float] = None
    long: Optional[float] = None

    @property
    def bags_left(self) -> int:
        return sum(max(0, bag.quantity) for bag in self.inventory)

    def is_open(self, now: datetime) -> bool:
        return is_open_now(self.hours, now)

    def can_reserve(self, now: datetime) -> bool:
        """Purchase gate: open right now and something left to sell."""
        return self.is_open(now) and self.bags_left > 0


class ShopRepository:
    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = Path(path) if path is not None else DEFAULT_SHOPS_PATH
        self._shops = self._load_shops()

    def all(self) -> List[Shop]:
        return list(self._shops.values())

    def get(self, shop_id: str) -> Shop:
        return self._shops[shop_id]

    def open_now(self, now: datetime) -> List[Shop]:
        return [shop for shop in self._shops.values() if shop.is_open(now)]

    def _load_shops(self) -> Dict[str, Shop]:
        if not self._path.exists():
            raise FileNotFoundError(f"Shops file not found: {self._path}")
        name = self._path.name
        raw = yaml.safe_load(self._path.read_text(encoding="utf-8"))
        if raw is None:
            return {}
        if not isinstance(raw, dict) or not isinstance(raw.get("shops", []), list):
            raise ValueError(f"{name}: expected YAML with a 'shops' list")

        shops: Dict[str, Shop] = {}
        for index, record in enumerate(raw.get("shops") or []):
            shop = _parse_shop(name, index, record)
            if shop.id in shops:
                raise ValueError(f"{name}: duplicate shop id '{shop.id}'")
            shops[shop.id] = shop
        return shops


def _parse_shop(file_name: str, index: int, record: Any) -> Shop:
    if not isinstance(record, dict):
        raise ValueError(f"{file_name}: shop #{index} is not a mapping")
    shop_id = record.get("id")
    title = record.get("name")
    if not shop_id:
        raise ValueError(f"{file_name}: shop #{index} missing 'id'")
    if not title or not isinstance(title, str):
        raise ValueError(f"{file_name}: shop '{shop_id}' missing or invalid 'name'")

    bags = []
    for bag in record.get("mystery_bags") or []:
        if not isinstance(bag, dict):
            continue
        bag_id = str(bag.get("id", ""))
        try:
            price = float(bag.get("discounted_price") or 0.0)
            original_price = float(bag.get("original_price") or 0.0)
            quantity = int(bag.get("quantity_available") or 0)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"{file_name}: shop '{shop_id}' has invalid bag '{bag_id}': {exc}") from exc
        bags.append(
            MysteryBag(
                id=bag_id,
                price=price,
                original_price=original_price,
                quantity=quantity,
                pickup_window=str(bag.get("pickup_window") or ""),
            )
        )

    return Shop(
        id=str(shop_id),
        name=title.strip(),
        hours=BusinessHours.from_record(record),
        inventory=bags,
        category=str(record.get("category") or ""),
        address=str(record.get("address") or ""),
        description=str(record.get("description") or ""),
        lat=_optional_float(record.get("lat")),
        long=_optional_float(record.get("long")),
    )


def _optional_float(value: Any) -> Optional[float]:
    try:
        return float(value) if value is not None else None
    except (TypeError, ValueError):
        return None

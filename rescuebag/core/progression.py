"""Derived loyalty state: current tier, progress, and upgrade detection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from rescuebag.core.tiers import TierDefinition, TierRepository


@dataclass(frozen=True)
class ProgressionState:
    completed_orders: int
    current_tier: TierDefinition
    next_tier: Optional[TierDefinition]
    progress_percent: float
    orders_remaining: int

    @property
    def is_top_tier(self) -> bool:
        return self.next_tier is None

    @property
    def next_tier_name(self) -> Optional[str]:
        return self.next_tier.name if self.next_tier is not None else None


@dataclass(frozen=True)
class UpgradeEvent:
    previous: TierDefinition
    current: TierDefinition


def get_progression(completed_orders: int, tiers: TierRepository) -> ProgressionState:
    """Compute the progression snapshot for a completed-orders count.

    Negative counts are clamped to 0.
    """
    orders = max(0, int(completed_orders))
    current = tiers.tier_for(orders)
    nxt = tiers.next_after(current)
    if nxt is None:
        return ProgressionState(
            completed_orders=orders,
            current_tier=current,
            next_tier=None,
            progress_percent=100.0,
            orders_remaining=0,
        )
    span = nxt.min_orders - current.min_orders
    percent = (orders - current.min_orders) / span * 100.0
    return ProgressionState(
        completed_orders=orders,
        current_tier=current,
        next_tier=nxt,
        progress_percent=max(0.0, min(100.0, percent)),
        orders_remaining=nxt.min_orders - orders,
    )


def detect_upgrade(
    previous_name: Optional[str],
    current_name: str,
    tiers: TierRepository,
) -> Optional[UpgradeEvent]:
    """Return an event only when the tier rank strictly increased."""
    if previous_name is None or previous_name == current_name:
        return None
    previous = tiers.by_name(previous_name)
    current = tiers.by_name(current_name)
    if previous is None or current is None:
        return None
    if current.rank > previous.rank:
        return UpgradeEvent(previous=previous, current=current)
    return None


def cycle_debug(current: int, tiers: Optional[TierRepository] = None) -> int:
    """Jump to the next tier threshold: <5 -> 5, [5, 20) -> 20, >=20 -> 0.

    With a ladder, the thresholds are the minimums of its second and top tiers.
    """
    middle, top = 5, 20
    if tiers is not None and len(tiers) >= 2:
        middle = tiers.all()[1].min_orders
        top = tiers.top().min_orders
    if current < middle:
        return middle
    if current < top:
        return top
    return 0


class TierTracker:
    """Remembers the last observed tier so upgrades fire once.

    States are ``Initializing`` (nothing observed yet) and ``Stable(tier)``.
    The first observation only settles the state; later ones emit an
    :class:`UpgradeEvent` on a strict rank increase.
    """

    INITIALIZING = "initializing"
    STABLE = "stable"

    def __init__(self, tiers: TierRepository) -> None:
        self._tiers = tiers
        self._tier_key: Optional[str] = None

    @property
    def status(self) -> str:
        return self.INITIALIZING if self._tier_key is None else self.STABLE

    @property
    def tier_key(self) -> Optional[str]:
        return self._tier_key

    def observe(self, state: ProgressionState) -> Optional[UpgradeEvent]:
        previous = self._tier_key
        self._tier_key = state.current_tier.key
        if previous is None:
            return None
        return detect_upgrade(previous, state.current_tier.key, self._tiers)

    def reset(self) -> None:
        self._tier_key = None

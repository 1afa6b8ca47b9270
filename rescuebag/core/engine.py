"""Session-level tier engine: persisted counter, theming and celebrations."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Protocol

from rescuebag.core.progress import COMPLETED_ORDERS_KEY, ProgressStore, read_completed_orders
from rescuebag.core.progression import (
    ProgressionState,
    TierTracker,
    UpgradeEvent,
    cycle_debug,
    get_progression,
)
from rescuebag.core.tiers import Burst, TierDefinition, TierRepository

logger = logging.getLogger(__name__)

ThemeSink = Callable[[str, Dict[str, str]], None]
StateListener = Callable[[ProgressionState], None]


@dataclass(frozen=True)
class UnlockInfo:
    """Display data for the tier-unlock overlay."""

    tier_key: str
    tier_name: str
    mascot: str
    emoji: str = ""
    title: str = ""
    subtitle: str = ""
    perks: List[str] = field(default_factory=list)


class CelebrationHooks(Protocol):
    def confetti(self, colors: List[str], bursts: List[Burst]) -> None: ...

    def vibrate(self, pattern: List[int]) -> None: ...

    def open_unlock_modal(self, info: UnlockInfo) -> None: ...


class NullCelebration:
    """Celebration hooks that do nothing (headless runs, tests)."""

    def confetti(self, colors: List[str], bursts: List[Burst]) -> None:
        pass

    def vibrate(self, pattern: List[int]) -> None:
        pass

    def open_unlock_modal(self, info: UnlockInfo) -> None:
        pass


class TierEngine:
    """Owns the completed-orders counter for one session.

    Derived values are recomputed from the counter on every access. Each
    mutation is persisted and followed by :meth:`evaluate`, which pushes the
    tier theme to the theme sink and fires celebrations on an upgrade.
    """

    def __init__(
        self,
        tiers: TierRepository,
        store: ProgressStore,
        hooks: Optional[CelebrationHooks] = None,
        theme_sink: Optional[ThemeSink] = None,
    ) -> None:
        self._tiers = tiers
        self._store = store
        self._hooks: CelebrationHooks = hooks if hooks is not None else NullCelebration()
        self._theme_sink = theme_sink
        self._tracker = TierTracker(tiers)
        self._listeners: List[StateListener] = []
        self._completed_orders = read_completed_orders(store)

    @property
    def tiers(self) -> TierRepository:
        return self._tiers

    @property
    def completed_orders(self) -> int:
        return self._completed_orders

    @property
    def state(self) -> ProgressionState:
        return get_progression(self._completed_orders, self._tiers)

    @property
    def current_tier(self) -> TierDefinition:
        return self.state.current_tier

    @property
    def progress_percent(self) -> float:
        return self.state.progress_percent

    @property
    def next_tier_name(self) -> Optional[str]:
        return self.state.next_tier_name

    @property
    def orders_remaining(self) -> int:
        return self.state.orders_remaining

    @property
    def theme(self) -> Dict[str, str]:
        return dict(self.current_tier.color_theme)

    def set_hooks(self, hooks: Optional[CelebrationHooks]) -> None:
        self._hooks = hooks if hooks is not None else NullCelebration()

    def set_theme_sink(self, sink: Optional[ThemeSink]) -> None:
        self._theme_sink = sink

    def add_listener(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: StateListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def set_completed_orders(self, orders: int) -> Optional[UpgradeEvent]:
        if orders < 0:
            raise ValueError(f"completed orders must be non-negative, got {orders}")
        self._completed_orders = int(orders)
        self._store.set(COMPLETED_ORDERS_KEY, str(self._completed_orders))
        return self.evaluate()

    def increment_completed_orders(self) -> Optional[UpgradeEvent]:
        return self.set_completed_orders(self._completed_orders + 1)

    def cycle_debug(self) -> int:
        """Jump to the next tier threshold (manual testing only)."""
        target = cycle_debug(self._completed_orders, self._tiers)
        logger.info("Debug cycle: %d -> %d completed orders", self._completed_orders, target)
        self.set_completed_orders(target)
        return target

    def evaluate(self) -> Optional[UpgradeEvent]:
        state = self.state
        tier = state.current_tier
        if self._theme_sink is not None:
            try:
                self._theme_sink(tier.key, dict(tier.color_theme))
            except Exception:
                logger.warning("Applying theme for tier %s failed", tier.key, exc_info=True)

        previous_key = self._tracker.tier_key
        event = self._tracker.observe(state)
        if previous_key is not None and previous_key != tier.key:
            logger.info("Tier changed: %s -> %s (%d orders)", previous_key, tier.key, state.completed_orders)
        if event is not None:
            self._celebrate(event.current)

        for listener in list(self._listeners):
            listener(state)
        return event

    def save(self) -> bool:
        """Write the counter again (e.g. on app exit)."""
        return self._store.set(COMPLETED_ORDERS_KEY, str(self._completed_orders))

    def restart_tracking(self) -> None:
        """Forget the observed tier; the next evaluation will not celebrate."""
        self._tracker.reset()

    def _celebrate(self, tier: TierDefinition) -> None:
        celebration = tier.celebration
        if celebration is None:
            return
        info = UnlockInfo(
            tier_key=tier.key,
            tier_name=tier.name,
            mascot=tier.mascot,
            emoji=tier.emoji,
            title=celebration.title,
            subtitle=celebration.subtitle,
            perks=list(tier.perks),
        )
        self._call_hook("confetti", celebration.colors, celebration.bursts)
        self._call_hook("vibrate", celebration.vibration)
        self._call_hook("open_unlock_modal", info)

    def _call_hook(self, name: str, *args) -> None:
        try:
            getattr(self._hooks, name)(*args)
        except Exception:
            logger.warning("Celebration hook %s failed", name, exc_info=True)

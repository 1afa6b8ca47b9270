"""Loyalty card: mascot, tier name, and progress toward the next tier."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

from PySide6.QtCore import QElapsedTimer, QSize, Qt
from PySide6.QtGui import QIcon
from PySide6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QProgressBar,
    QVBoxLayout,
    QWidget,
)

from rescuebag.core.progression import ProgressionState

_ASSETS_DIR = Path(__file__).resolve().parent.parent / "assets"
_TRIPLE_CLICK_MS = 600


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


class TierProgressCard(QFrame):
    """Shows the current tier and progress; rendered from a ProgressionState.

    When ``on_debug_cycle`` is given, three quick clicks on the mascot call it.
    """

    def __init__(
        self,
        *,
        on_debug_cycle: Optional[Callable[[], None]] = None,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.setObjectName("tierCard")
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)
        self._on_debug_cycle = on_debug_cycle
        self._clicks = 0
        self._click_timer = QElapsedTimer()

        self._mascot = QLabel()
        self._mascot.setFixedSize(64, 64)
        self._mascot.setAlignment(Qt.AlignCenter)
        self._mascot.setStyleSheet("font-size: 40px;")
        self._mascot.mousePressEvent = self._on_mascot_pressed

        self._name = QLabel()
        self._name.setObjectName("tierName")
        self._orders = QLabel()
        self._orders.setObjectName("mutedText")

        info = QVBoxLayout()
        info.setSpacing(2)
        info.addWidget(self._name)
        info.addWidget(self._orders)

        header = QHBoxLayout()
        header.setSpacing(14)
        header.addWidget(self._mascot, 0)
        header.addLayout(info, 1)

        self._progress_label = QLabel()
        self._progress_label.setObjectName("mutedText")
        self._remaining_label = QLabel()
        self._remaining_label.setObjectName("accentText")
        progress_row = QHBoxLayout()
        progress_row.addWidget(self._progress_label, 1)
        progress_row.addWidget(self._remaining_label, 0, Qt.AlignRight)

        self._bar = QProgressBar()
        self._bar.setTextVisible(False)
        self._bar.setFixedHeight(10)
        self._bar.setRange(0, 100)

        self._top_note = QLabel("You've reached the highest tier! Enjoy VIP perks.")
        self._top_note.setObjectName("topTierNote")
        self._top_note.setWordWrap(True)

        self._perks = QLabel()
        self._perks.setObjectName("mutedText")
        self._perks.setWordWrap(True)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(20, 18, 20, 18)
        layout.setSpacing(10)
        layout.addLayout(header)
        layout.addLayout(progress_row)
        layout.addWidget(self._bar)
        layout.addWidget(self._top_note)
        layout.addWidget(self._perks)

    def set_state(self, state: ProgressionState) -> None:
        tier = state.current_tier
        mascot_path = _ASSETS_DIR / tier.mascot if tier.mascot else None
        if mascot_path is not None and mascot_path.exists():
            self._mascot.setPixmap(QIcon(str(mascot_path)).pixmap(QSize(60, 60)))
        else:
            self._mascot.setText(tier.emoji or tier.name[:1])

        self._name.setText(tier.name if not state.is_top_tier else f"{tier.name}  •  MAX")
        self._orders.setText(f"{_plural(state.completed_orders, 'order')} completed")

        has_next = state.next_tier is not None
        self._progress_label.setVisible(has_next)
        self._remaining_label.setVisible(has_next)
        self._bar.setVisible(has_next)
        self._top_note.setVisible(not has_next)
        if has_next:
            self._progress_label.setText(f"Progress to {state.next_tier_name}")
            self._remaining_label.setText(f"{_plural(state.orders_remaining, 'order')} left")
            self._bar.setValue(int(state.progress_percent))

        self._perks.setText(" · ".join(tier.perks))
        self._perks.setVisible(bool(tier.perks))
        self.setToolTip(f"{tier.name}: {state.progress_percent:.0f}%")

    def _on_mascot_pressed(self, event) -> None:
        if self._on_debug_cycle is None:
            return
        if not self._click_timer.isValid() or self._click_timer.elapsed() > _TRIPLE_CLICK_MS:
            self._clicks = 0
        self._click_timer.start()
        self._clicks += 1
        if self._clicks >= 3:
            self._clicks = 0
            self._on_debug_cycle()

from __future__ import annotations

import logging
import os
from datetime import datetime
from typing import Callable, Optional

from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QScrollArea,
    QVBoxLayout,
    QWidget,
)

from rescuebag.core.engine import TierEngine
from rescuebag.core.progression import ProgressionState
from rescuebag.core.shops import ShopRepository
from rescuebag.ui.colors import StatusColors
from rescuebag.ui.models import ShopState
from rescuebag.ui.tier_card import TierProgressCard

logger = logging.getLogger(__name__)

_REFRESH_MS = 60_000


def debug_enabled() -> bool:
    return os.environ.get("RESCUEBAG_DEBUG") == "1"


class ShopRow(QFrame):
    """One shop in the list: status dot, today's hours, bags left, Reserve."""

    def __init__(self, on_reserve: Callable[[str], None], parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setObjectName("shopRow")
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)
        self._on_reserve = on_reserve
        self._shop_id = ""

        self._dot = QLabel("●")
        self._name = QLabel()
        self._name.setStyleSheet("font-weight: 700; font-size: 14px;")
        self._details = QLabel()
        self._details.setObjectName("mutedText")
        self._reserve = QPushButton("Reserve")
        self._reserve.setCursor(Qt.CursorShape.PointingHandCursor)
        self._reserve.clicked.connect(lambda: self._on_reserve(self._shop_id))

        text = QVBoxLayout()
        text.setSpacing(2)
        text.addWidget(self._name)
        text.addWidget(self._details)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(14, 10, 14, 10)
        layout.setSpacing(12)
        layout.addWidget(self._dot, 0)
        layout.addLayout(text, 1)
        layout.addWidget(self._reserve, 0)

    def set_state(self, state: ShopState) -> None:
        self._shop_id = state.shop.id
        if state.is_open:
            color, status = StatusColors.OPEN, "Open"
        else:
            color, status = StatusColors.CLOSED, "Closed"
        if state.bags_left == 0:
            color = StatusColors.SOLD_OUT
        self._dot.setStyleSheet(f"color: {color}; font-size: 16px;")
        self._name.setText(state.shop.name)
        bags = "Sold out" if state.bags_left == 0 else f"{state.bags_left} left"
        self._details.setText(f"{status} · {state.hours_label} · {bags}")
        self._reserve.setEnabled(state.can_reserve)


class MainWindow(QMainWindow):
    """Loyalty card on top, shop list below.

    Availability is re-evaluated on every refresh and once a minute; the
    tier card re-renders whenever the engine evaluates.
    """

    def __init__(self, engine: TierEngine, shops: ShopRepository) -> None:
        super().__init__()
        self._engine = engine
        self._shops = shops
        self._debug = debug_enabled()
        self._rows: list[ShopRow] = []
        self._pending_pickups = 0

        self.setWindowTitle("Rescue Bag")
        self._build_ui()

        self._engine.add_listener(self._on_state_changed)
        self._refresh_shops()

        self._timer = QTimer(self)
        self._timer.setInterval(_REFRESH_MS)
        self._timer.timeout.connect(self._refresh_shops)
        self._timer.start()

    def _build_ui(self) -> None:
        central = QWidget()
        layout = QVBoxLayout(central)
        layout.setContentsMargins(18, 18, 18, 18)
        layout.setSpacing(14)

        if self._debug:
            layout.addWidget(self._build_debug_menu())

        self._tier_card = TierProgressCard(on_debug_cycle=self._engine.cycle_debug if self._debug else None)
        layout.addWidget(self._tier_card)

        actions = QHBoxLayout()
        self._pickup_btn = QPushButton("Complete pickup")
        self._pickup_btn.setObjectName("secondaryButton")
        self._pickup_btn.setEnabled(False)
        self._pickup_btn.clicked.connect(self._complete_pickup)
        self._status = QLabel("")
        self._status.setObjectName("mutedText")
        actions.addWidget(self._status, 1)
        actions.addWidget(self._pickup_btn, 0)
        layout.addLayout(actions)

        heading = QLabel("Mystery bags near you")
        heading.setStyleSheet("font-weight: 800; font-size: 16px;")
        layout.addWidget(heading)

        self._list_container = QWidget()
        self._list_layout = QVBoxLayout(self._list_container)
        self._list_layout.setContentsMargins(0, 0, 0, 0)
        self._list_layout.setSpacing(8)
        self._list_layout.addStretch(1)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setWidget(self._list_container)
        layout.addWidget(scroll, 1)

        self.setCentralWidget(central)
        self.resize(440, 780)

    def _build_debug_menu(self) -> QWidget:
        box = QFrame()
        row = QHBoxLayout(box)
        row.setContentsMargins(0, 0, 0, 0)
        row.setSpacing(6)
        label = QLabel("Dev:")
        label.setObjectName("mutedText")
        row.addWidget(label)
        for tier in self._engine.tiers.all():
            btn = QPushButton(f"{tier.emoji} {tier.name}".strip())
            btn.setObjectName("secondaryButton")
            btn.clicked.connect(lambda checked=False, n=tier.min_orders: self._engine.set_completed_orders(n))
            row.addWidget(btn)
        row.addStretch(1)
        return box

    def _on_state_changed(self, state: ProgressionState) -> None:
        self._tier_card.set_state(state)

    def _refresh_shops(self) -> None:
        now = datetime.now()
        states = [ShopState.from_shop(shop, now) for shop in self._shops.all()]
        while len(self._rows) < len(states):
            row = ShopRow(on_reserve=self._reserve)
            self._list_layout.insertWidget(self._list_layout.count() - 1, row)
            self._rows.append(row)
        for row, state in zip(self._rows, states):
            row.show()
            row.set_state(state)
        for row in self._rows[len(states):]:
            row.hide()

    def _reserve(self, shop_id: str) -> None:
        shop = self._shops.get(shop_id)
        if not shop.can_reserve(datetime.now()):
            self._status.setText(f"{shop.name} is not taking reservations right now")
            self._refresh_shops()
            return
        self._pending_pickups += 1
        self._pickup_btn.setEnabled(True)
        self._status.setText(f"Reserved a bag at {shop.name}")
        logger.info("Reserved a bag at %s", shop_id)

    def _complete_pickup(self) -> None:
        if self._pending_pickups <= 0:
            return
        self._pending_pickups -= 1
        self._pickup_btn.setEnabled(self._pending_pickups > 0)
        self._status.setText("Pickup complete. Thanks for rescuing food!")
        self._engine.increment_completed_orders()

    def closeEvent(self, event: QCloseEvent) -> None:
        """Persist progress when closing the app."""
        self._timer.stop()
        self._engine.remove_listener(self._on_state_changed)
        self._engine.save()
        super().closeEvent(event)

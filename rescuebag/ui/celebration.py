"""Tier-unlock celebration: confetti overlay, vibration and unlock overlay."""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from PySide6.QtCore import QEvent, QRectF, QSize, Qt, QTimer, Signal
from PySide6.QtGui import QColor, QIcon, QPainter
from PySide6.QtWidgets import (
    QFrame,
    QGraphicsDropShadowEffect,
    QGridLayout,
    QLabel,
    QPushButton,
    QSizePolicy,
    QVBoxLayout,
    QWidget,
)

from rescuebag.core.engine import UnlockInfo
from rescuebag.core.tiers import Burst

logger = logging.getLogger(__name__)

_ASSETS_DIR = Path(__file__).resolve().parent.parent / "assets"
_FRAME_MS = 16
_GRAVITY = 0.35
_DRAG = 0.97


@dataclass
class _Particle:
    x: float
    y: float
    vx: float
    vy: float
    color: QColor
    size: float
    spin: float
    rotation: float
    ttl: int


class ConfettiOverlay(QWidget):
    """Transparent, click-through layer that animates confetti particles."""

    def __init__(self, parent: QWidget) -> None:
        super().__init__(parent)
        self.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents, True)
        self.setAttribute(Qt.WidgetAttribute.WA_NoSystemBackground, True)
        self.setStyleSheet("background: transparent;")
        self._particles: List[_Particle] = []
        self._timer = QTimer(self)
        self._timer.setInterval(_FRAME_MS)
        self._timer.timeout.connect(self._step)
        self.hide()

    @property
    def particle_count(self) -> int:
        return len(self._particles)

    def burst(self, burst: Burst, colors: List[str]) -> None:
        parent = self.parentWidget()
        if parent is not None:
            self.setGeometry(parent.rect())
        palette = [QColor(c) for c in colors] or [QColor("#FFB800")]
        ox = burst.origin_x * self.width()
        oy = burst.origin_y * self.height()
        for _ in range(max(0, burst.particle_count)):
            direction = math.radians(burst.angle + random.uniform(-burst.spread / 2, burst.spread / 2))
            speed = random.uniform(0.5, 1.0) * 22.0 * burst.scalar
            self._particles.append(
                _Particle(
                    x=ox,
                    y=oy,
                    vx=math.cos(direction) * speed,
                    vy=-math.sin(direction) * speed,
                    color=random.choice(palette),
                    size=random.uniform(5.0, 9.0) * burst.scalar,
                    spin=random.uniform(-12.0, 12.0),
                    rotation=random.uniform(0.0, 360.0),
                    ttl=random.randint(90, 160),
                )
            )
        self.raise_()
        self.show()
        if not self._timer.isActive():
            self._timer.start()

    def _step(self) -> None:
        alive = []
        for p in self._particles:
            p.vx *= _DRAG
            p.vy = p.vy * _DRAG + _GRAVITY
            p.x += p.vx
            p.y += p.vy
            p.rotation += p.spin
            p.ttl -= 1
            if p.ttl > 0 and p.y < self.height() + 20:
                alive.append(p)
        self._particles = alive
        if not alive:
            self._timer.stop()
            self.hide()
        self.update()

    def paintEvent(self, event) -> None:
        if not self._particles:
            return
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing, True)
        painter.setPen(Qt.NoPen)
        for p in self._particles:
            painter.save()
            painter.translate(p.x, p.y)
            painter.rotate(p.rotation)
            color = QColor(p.color)
            color.setAlpha(max(0, min(255, p.ttl * 4)))
            painter.setBrush(color)
            painter.drawRect(QRectF(-p.size / 2, -p.size / 4, p.size, p.size / 2))
            painter.restore()


class TierUnlockOverlay(QWidget):
    """In-window overlay announcing a newly unlocked tier."""

    closed = Signal()

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        layout = QGridLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setRowStretch(0, 1)
        layout.setColumnStretch(0, 1)

        backdrop = QWidget(self)
        backdrop.setStyleSheet("background: rgba(0, 0, 0, 0.55);")
        backdrop.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        backdrop.mousePressEvent = lambda _e: self.dismiss()
        layout.addWidget(backdrop, 0, 0)

        container = QFrame(self)
        container.setObjectName("unlockContainer")
        container.setMinimumWidth(360)
        container.setMaximumWidth(480)
        shadow = QGraphicsDropShadowEffect(container)
        shadow.setBlurRadius(24)
        shadow.setOffset(0, 8)
        shadow.setColor(QColor(0, 0, 0, 90))
        container.setGraphicsEffect(shadow)

        inner = QVBoxLayout(container)
        inner.setContentsMargins(28, 28, 28, 28)
        inner.setSpacing(12)

        self._mascot = QLabel()
        self._mascot.setObjectName("unlockMascot")
        self._mascot.setAlignment(Qt.AlignCenter)
        self._mascot.setFixedHeight(112)
        inner.addWidget(self._mascot)

        self._title = QLabel()
        self._title.setObjectName("tierName")
        self._title.setAlignment(Qt.AlignCenter)
        self._title.setWordWrap(True)
        inner.addWidget(self._title)

        self._subtitle = QLabel()
        self._subtitle.setObjectName("mutedText")
        self._subtitle.setAlignment(Qt.AlignCenter)
        self._subtitle.setWordWrap(True)
        inner.addWidget(self._subtitle)

        self._perks = QLabel()
        self._perks.setObjectName("accentText")
        self._perks.setAlignment(Qt.AlignLeft | Qt.AlignVCenter)
        self._perks.setWordWrap(True)
        inner.addWidget(self._perks)

        close_btn = QPushButton("Let's go!")
        close_btn.setCursor(Qt.CursorShape.PointingHandCursor)
        close_btn.clicked.connect(self.dismiss)
        inner.addWidget(close_btn)

        layout.addWidget(container, 0, 0, 1, 1, Qt.AlignCenter)
        self.hide()

    def show_unlock(self, info: UnlockInfo) -> None:
        mascot_path = _ASSETS_DIR / info.mascot if info.mascot else None
        if mascot_path is not None and mascot_path.exists():
            self._mascot.setPixmap(QIcon(str(mascot_path)).pixmap(QSize(104, 104)))
        else:
            self._mascot.setText(info.emoji or "🎉")
            self._mascot.setStyleSheet("font-size: 72px;")
        self._title.setText(info.title or info.tier_name)
        self._subtitle.setText(info.subtitle)
        self._perks.setText("\n".join(f"• {perk}" for perk in info.perks))
        self._perks.setVisible(bool(info.perks))
        self._update_geometry()
        self.raise_()
        self.show()

    def dismiss(self) -> None:
        self.hide()
        self.closed.emit()

    def _update_geometry(self) -> None:
        parent = self.parentWidget()
        if parent is not None:
            self.setGeometry(parent.rect())

    def showEvent(self, event) -> None:
        super().showEvent(event)
        self._update_geometry()
        parent = self.parentWidget()
        if parent is not None:
            parent.installEventFilter(self)

    def hideEvent(self, event) -> None:
        parent = self.parentWidget()
        if parent is not None:
            parent.removeEventFilter(self)
        super().hideEvent(event)

    def eventFilter(self, obj: QWidget, event: QEvent) -> bool:
        if obj is self.parentWidget() and event.type() == QEvent.Type.Resize:
            self._update_geometry()
        return super().eventFilter(obj, event)


class QtCelebration:
    """Celebration hooks backed by widgets layered over ``host``."""

    def __init__(self, host: QWidget) -> None:
        self._host = host
        self._confetti = ConfettiOverlay(host)
        self._unlock = TierUnlockOverlay(host)

    @property
    def unlock_overlay(self) -> TierUnlockOverlay:
        return self._unlock

    def confetti(self, colors: List[str], bursts: List[Burst]) -> None:
        for burst in bursts:
            QTimer.singleShot(
                max(0, burst.delay_ms),
                lambda b=burst: self._confetti.burst(b, colors),
            )

    def vibrate(self, pattern: List[int]) -> None:
        # No haptics on desktop hosts.
        logger.debug("Vibration requested: %s", pattern)

    def open_unlock_modal(self, info: UnlockInfo) -> None:
        self._unlock.show_unlock(info)
        # Keep confetti above the overlay backdrop.
        self._confetti.raise_()

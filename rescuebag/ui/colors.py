"""Tier color tokens and the global stylesheet built from them."""

from __future__ import annotations

from typing import Mapping

from rescuebag.core.tiers import REQUIRED_THEME_TOKENS


class StatusColors:
    """Fixed colors that do not follow the tier theme."""

    OPEN = "#10B981"
    CLOSED = "#EF4444"
    SOLD_OUT = "#9CA3AF"


def blend_hex(a: str, b: str, t: float) -> str:
    """Blend two #RRGGBB colors. t=0 -> a, t=1 -> b."""
    try:
        a = a.strip()
        b = b.strip()
        if not (a.startswith("#") and b.startswith("#") and len(a) == 7 and len(b) == 7):
            return a
        t = max(0.0, min(1.0, float(t)))
        ar, ag, ab = int(a[1:3], 16), int(a[3:5], 16), int(a[5:7], 16)
        br, bg, bb = int(b[1:3], 16), int(b[3:5], 16), int(b[5:7], 16)
        r = int(ar + (br - ar) * t)
        g = int(ag + (bg - ag) * t)
        bl = int(ab + (bb - ab) * t)
        return f"#{r:02X}{g:02X}{bl:02X}"
    except ValueError:
        return a


def missing_tokens(theme: Mapping[str, str]) -> list[str]:
    return [token for token in REQUIRED_THEME_TOKENS if not theme.get(token)]


def build_stylesheet(theme: Mapping[str, str]) -> str:
    """Application-wide Qt stylesheet for a flat map of color tokens."""
    missing = missing_tokens(theme)
    if missing:
        raise ValueError(f"theme missing tokens: {', '.join(missing)}")
    c = dict(theme)
    primary_hover = blend_hex(c["primary"], c["foreground"], 0.12)
    primary_pressed = blend_hex(c["primary"], c["foreground"], 0.24)
    card_hover = blend_hex(c["card"], c["primary"], 0.06)
    return f"""
        QWidget {{
            background: {c['background']};
            color: {c['foreground']};
        }}
        QFrame#tierCard, QFrame#shopRow {{
            background: {c['card']};
            color: {c['card-contrast']};
            border: 1px solid {c['border']};
            border-radius: 16px;
        }}
        QFrame#shopRow:hover {{
            background: {card_hover};
        }}
        QLabel {{
            background: transparent;
        }}
        QLabel#tierName {{
            color: {c['card-contrast']};
            font-size: 18px;
            font-weight: 800;
        }}
        QLabel#mutedText {{
            color: {c['muted-contrast']};
            font-size: 12px;
        }}
        QLabel#accentText {{
            color: {c['accent']};
            font-weight: 700;
        }}
        QLabel#topTierNote {{
            background: {c['muted']};
            color: {c['foreground']};
            border-radius: 12px;
            padding: 10px;
        }}
        QProgressBar {{
            border: none;
            border-radius: 5px;
            background: {c['muted']};
        }}
        QProgressBar::chunk {{
            border-radius: 5px;
            background: {c['primary']};
        }}
        QPushButton {{
            background: {c['primary']};
            color: {c['primary-contrast']};
            border: none;
            border-radius: 14px;
            padding: 10px 16px;
            font-weight: 700;
        }}
        QPushButton:hover {{
            background: {primary_hover};
        }}
        QPushButton:pressed {{
            background: {primary_pressed};
        }}
        QPushButton:disabled {{
            background: {c['muted']};
            color: {c['muted-contrast']};
        }}
        QPushButton#secondaryButton {{
            background: {c['secondary']};
            color: {c['secondary-contrast']};
            border: 1px solid {c['border']};
        }}
        QScrollArea {{
            border: none;
        }}
    """

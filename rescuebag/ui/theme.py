"""Applies the active tier's color theme to the whole application."""

from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional

from PySide6.QtWidgets import QApplication

from rescuebag.ui.colors import build_stylesheet

logger = logging.getLogger(__name__)


class ThemeAdapter:
    """The one place that writes global presentation state.

    The tier engine hands over the theme as data; this adapter turns it into
    the application stylesheet and a ``tier`` property on the application.
    Re-applying the theme that is already active does nothing.
    """

    def __init__(self, app: QApplication) -> None:
        self._app = app
        self._active_key: Optional[str] = None
        self._active_theme: Dict[str, str] = {}

    @property
    def active_key(self) -> Optional[str]:
        return self._active_key

    @property
    def active_theme(self) -> Dict[str, str]:
        return dict(self._active_theme)

    def apply(self, tier_key: str, theme: Mapping[str, str]) -> None:
        if tier_key == self._active_key and dict(theme) == self._active_theme:
            return
        self._app.setStyleSheet(build_stylesheet(theme))
        self._app.setProperty("tier", tier_key)
        self._active_key = tier_key
        self._active_theme = dict(theme)
        logger.debug("Applied %s theme", tier_key)

    __call__ = apply

"""Application entry point and setup for the Rescue Bag client."""

import logging
import os
import sys

from PySide6.QtGui import QGuiApplication
from PySide6.QtWidgets import QApplication

from rescuebag.core.engine import TierEngine
from rescuebag.core.progress import ProgressStore
from rescuebag.core.shops import ShopRepository
from rescuebag.core.tiers import TierRepository
from rescuebag.ui.celebration import QtCelebration
from rescuebag.ui.main_window import MainWindow
from rescuebag.ui.theme import ThemeAdapter


def configure_logging() -> None:
    """Configure application-wide logging with a standard format."""
    level_name = os.environ.get("RESCUEBAG_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def run() -> None:
    """Initialize the application, load data, and start the main window."""
    configure_logging()
    app = QApplication(sys.argv)
    app.setApplicationName("Rescue Bag")
    app.setApplicationDisplayName("Rescue Bag")

    tiers = TierRepository()
    shops = ShopRepository()
    store = ProgressStore()
    logging.info("Loaded %d tiers and %d shops; storage at %s", len(tiers), len(shops.all()), store.file_path)

    engine = TierEngine(tiers, store, theme_sink=ThemeAdapter(app))
    window = MainWindow(engine=engine, shops=shops)
    engine.set_hooks(QtCelebration(window))
    # Initial load: applies the theme and settles the tier without celebrating.
    engine.evaluate()

    screen = QGuiApplication.primaryScreen()
    if screen is not None:
        geometry = screen.availableGeometry()
        window.move(geometry.center() - window.rect().center())
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    run()

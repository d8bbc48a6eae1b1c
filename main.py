"""
main.py – ItemDex application entry point.
Configures logging, bootstraps the PySide6 QApplication and launches the main
window.
"""

import logging
import os
import sys

from PySide6.QtWidgets import QApplication
from PySide6.QtCore import Qt
from main_window import MainWindow

# ── Logging ──────────────────────────────────────────────────────────────────
LOG_LEVEL: str = os.environ.get("ITEMDEX_LOG_LEVEL", "INFO").upper()
LOG_FORMAT: str = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def main() -> None:
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)

    QApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )

    app = QApplication(sys.argv)
    app.setApplicationName("ItemDex")
    app.setApplicationDisplayName("ItemDex – Item Catalogue")
    app.setOrganizationName("ItemDex")

    window = MainWindow()
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()

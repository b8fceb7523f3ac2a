"""Allow running Habito as a module: python -m habito."""

import logging
import os
import sys

from PyQt6.QtWidgets import QApplication

from .database.db import init_db
from .app import HabitoApp


def main() -> None:
    logging.basicConfig(
        level=os.environ.get("HABITO_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    init_db()

    app = QApplication(sys.argv)
    app.setApplicationName("Habito")
    app.setOrganizationName("Habito")

    window = HabitoApp()
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()

"""Allow running SmokeTimer as a module: python -m smoketimer."""

import logging
import sys

from PyQt6.QtWidgets import QApplication

from .app import SmokeTimerWindow
from .database.db import init_db
from .host import TimerHost
from .log import configure_logging
from .notifications.tray import TrayNotificationRenderer
from .settings import load_settings

logger = logging.getLogger(__name__)


def main() -> None:
    settings = load_settings()
    configure_logging(settings.log_level)
    init_db()

    app = QApplication(sys.argv)
    app.setApplicationName("SmokeTimer")
    app.setOrganizationName("SmokeTimer")
    # The timer keeps running in the tray after the window closes.
    app.setQuitOnLastWindowClosed(False)

    host = TimerHost(settings, TrayNotificationRenderer)
    tray = host.renderer
    tray.set_visible(settings.notifications_enabled)
    app.aboutToQuit.connect(host.shutdown)

    window = SmokeTimerWindow(host, settings, tray)
    window.show()

    host.begin()
    logger.info("SmokeTimer ready")

    sys.exit(app.exec())


if __name__ == "__main__":
    main()

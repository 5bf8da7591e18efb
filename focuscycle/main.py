"""Entry point of the Focus Cycle desktop client.

Wires settings, storage, identity and the session sink into the coordinator,
restores the last snapshot and starts the Qt event loop.
"""

from __future__ import annotations

import logging
import sys

from PyQt6.QtWidgets import QApplication

from focuscycle.core.config import AppSettings
from focuscycle.core.coordinator import SessionCoordinator
from focuscycle.core.identity import StoredIdentity
from focuscycle.data.sink import HttpSessionSink
from focuscycle.data.storage import Storage
from focuscycle.ui.main_window import MainWindow
from focuscycle.ui.styles import apply_theme


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def main() -> int:
    settings = AppSettings.from_env()
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)

    app = QApplication(sys.argv)
    apply_theme(app)

    storage = Storage(settings.db_path)
    storage.init_db()

    identity = StoredIdentity(storage)
    if settings.actor_id:
        identity.sign_in(settings.actor_id, settings.actor_token)

    sink = HttpSessionSink(settings.sessions_url, timeout=settings.sink_timeout)
    coordinator = SessionCoordinator(storage=storage, sink=sink, identity=identity)
    coordinator.restore()

    window = MainWindow(coordinator=coordinator, identity=identity)
    window.show()
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())

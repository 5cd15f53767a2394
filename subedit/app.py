"""QApplication bootstrap."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
import sys

from PySide6.QtWidgets import QApplication

from subedit import __version__
from subedit.config.settings import AppSettings
from subedit.core.document import DialogueLine, SubtitleDocument
from subedit.ui.main_window import EditorWindow


def _configure_startup_logger(settings: AppSettings) -> logging.Logger:
    logger = logging.getLogger("subedit")
    if logger.handlers:
        return logger

    logger.setLevel(logging.INFO)
    log_dir = settings.app_data_dir / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_dir / "subedit.log",
        maxBytes=512_000,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def _scratch_document() -> SubtitleDocument:
    return SubtitleDocument([
        DialogueLine(start_ms=0, end_ms=2000, text="First line"),
        DialogueLine(start_ms=2000, end_ms=4500, text="Second line"),
        DialogueLine(start_ms=4500, end_ms=7000, text="Third line"),
    ])


def run_app() -> int:
    """Initialize and run the application."""
    app = QApplication(sys.argv)
    app.setStyle("Fusion")
    app.setApplicationName("SubEdit")
    app.setOrganizationName("SubEdit")
    settings = AppSettings()
    logger = _configure_startup_logger(settings)
    logger.info("startup version=%s", __version__)

    window = EditorWindow(settings, _scratch_document())
    window.show()

    exit_code = app.exec()
    logger.info("exit code=%s", exit_code)
    return exit_code

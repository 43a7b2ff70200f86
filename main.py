"""TextCut application entry point."""

import logging
import os
import sys
from pathlib import Path

# Set platform-appropriate media backend
if sys.platform == "darwin":
    os.environ.setdefault("QT_MEDIA_BACKEND", "darwin")
elif sys.platform == "win32":
    os.environ.setdefault("QT_MEDIA_BACKEND", "windows")

from PySide6.QtWidgets import QApplication
from PySide6.QtGui import QColor, QPalette

from textcut.utils.config import APP_NAME, ORG_NAME
from textcut.utils.i18n import init_language
from textcut.services.settings_manager import SettingsManager
from textcut.ui.main_window import MainWindow


def _apply_dark_theme(app: QApplication) -> None:
    """Apply a dark color palette using the Fusion style."""
    app.setStyle("Fusion")
    palette = QPalette()

    palette.setColor(QPalette.ColorRole.Window, QColor(45, 45, 45))
    palette.setColor(QPalette.ColorRole.WindowText, QColor(212, 212, 212))
    palette.setColor(QPalette.ColorRole.Base, QColor(30, 30, 30))
    palette.setColor(QPalette.ColorRole.AlternateBase, QColor(45, 45, 45))
    palette.setColor(QPalette.ColorRole.Text, QColor(212, 212, 212))
    palette.setColor(QPalette.ColorRole.Button, QColor(55, 55, 55))
    palette.setColor(QPalette.ColorRole.ButtonText, QColor(212, 212, 212))

    # Transcript words are links; the caret block timecode uses the same colour
    palette.setColor(QPalette.ColorRole.Link, QColor(120, 180, 255))

    palette.setColor(QPalette.ColorRole.Highlight, QColor(60, 140, 220))
    palette.setColor(QPalette.ColorRole.HighlightedText, QColor(255, 255, 255))

    palette.setColor(QPalette.ColorGroup.Disabled, QPalette.ColorRole.Text, QColor(120, 120, 120))
    palette.setColor(QPalette.ColorGroup.Disabled, QPalette.ColorRole.ButtonText, QColor(120, 120, 120))

    app.setPalette(palette)


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    QApplication.setOrganizationName(ORG_NAME)
    QApplication.setApplicationName(APP_NAME)

    app = QApplication(sys.argv)
    _apply_dark_theme(app)

    # Initialize UI language from settings
    _settings = SettingsManager()
    init_language(_settings.get_ui_language())

    window = MainWindow()
    window.show()

    # Allow opening a media file via command-line argument
    if len(sys.argv) > 1:
        media_path = Path(sys.argv[1])
        if media_path.is_file():
            window.open_media(media_path)

    sys.exit(app.exec())


if __name__ == "__main__":
    main()

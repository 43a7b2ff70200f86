"""Transient status banner shown above the transcript."""

from __future__ import annotations

from PySide6.QtCore import QTimer
from PySide6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QMessageBox,
    QToolButton,
)

from textcut.errors import Severity
from textcut.utils.config import MESSAGE_HIDE_TIMEOUT_MS
from textcut.utils.i18n import tr

# 배경색, 글자색
_STYLES: dict[Severity, tuple[str, str]] = {
    Severity.INFO: ("#2d4a6b", "#e6eef7"),
    Severity.POSITIVE: ("#2f5d34", "#e8f5e9"),
    Severity.WARNING: ("#6b5a1e", "#fff8e1"),
    Severity.ERROR: ("#6b2424", "#ffebee"),
}


def auto_hides(severity: Severity) -> bool:
    """오류 배너는 사용자가 닫을 때까지 유지된다."""
    return severity is not Severity.ERROR


def banner_style(severity: Severity) -> str:
    background, foreground = _STYLES[severity]
    return (
        f"QFrame#messageBanner {{ background: {background}; border-radius: 4px; }}"
        f"QFrame#messageBanner QLabel {{ color: {foreground}; }}"
    )


class MessageBanner(QFrame):
    """4단계 심각도를 갖는 배너. ERROR 외에는 일정 시간 후 자동으로 숨겨진다."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("messageBanner")
        self._log = ""
        self.severity = Severity.INFO

        layout = QHBoxLayout(self)
        layout.setContentsMargins(8, 4, 4, 4)
        self._label = QLabel()
        self._label.setWordWrap(True)
        layout.addWidget(self._label, 1)

        self._log_button = QToolButton()
        self._log_button.setText(tr("Show log"))
        self._log_button.clicked.connect(self._show_log)
        layout.addWidget(self._log_button)

        close_button = QToolButton()
        close_button.setText("✕")
        close_button.setToolTip(tr("Close"))
        close_button.clicked.connect(self.hide_message)
        layout.addWidget(close_button)

        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(MESSAGE_HIDE_TIMEOUT_MS)
        self._timer.timeout.connect(self.hide_message)

        self.setVisible(False)

    def text(self) -> str:
        return self._label.text()

    def show_message(self, text: str, severity: Severity, log: str = "") -> None:
        self.severity = severity
        self._log = log
        self._label.setText(text)
        self.setStyleSheet(banner_style(severity))
        self._log_button.setVisible(bool(log) and severity in (Severity.WARNING, Severity.ERROR))
        self.setVisible(True)
        self._timer.stop()
        if auto_hides(severity):
            self._timer.start()

    def hide_message(self) -> None:
        self._timer.stop()
        self.setVisible(False)

    def _show_log(self) -> None:
        box = QMessageBox(self)
        box.setWindowTitle(tr("Detailed log"))
        box.setText(self._label.text())
        box.setDetailedText(self._log)
        box.setIcon(QMessageBox.Icon.Warning)
        box.exec()

"""스크립트 검색용 검색 바 위젯."""

from PySide6.QtCore import Signal
from PySide6.QtGui import QColor, QPalette
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QToolButton,
    QWidget,
)

from textcut.utils.config import SEARCH_MIN_LENGTH, SEARCH_TINT_FACTOR
from textcut.utils.i18n import tr


def search_tint(base: QColor, found: bool, factor: float = SEARCH_TINT_FACTOR) -> QColor:
    """검색 결과에 따라 입력창 배경색을 초록(찾음)/빨강(못 찾음) 방향으로 강조."""
    red, green, blue = base.red(), base.green(), base.blue()
    if found:
        green = min(255, int(green * factor))
    else:
        red = min(255, int(red * factor))
    return QColor(red, green, blue)


class SearchBar(QWidget):
    """스크립트 텍스트 검색 바.

    기능:
    - 최소 길이 이상의 검색어만 검색
    - 다음/이전 결과 이동 버튼
    - 결과에 따라 입력창 색 변경
    """

    # (검색어, 역방향 여부)
    search_requested = Signal(str, bool)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._build_ui()
        self._connect_signals()
        self._base_color = self._search_edit.palette().color(QPalette.ColorRole.Base)

    def _build_ui(self):
        """검색 아이콘, 입력창, 이전/다음 버튼 구성."""
        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(4)

        layout.addWidget(QLabel("🔍"))

        self._search_edit = QLineEdit()
        self._search_edit.setPlaceholderText(tr("Search transcript"))
        self._search_edit.setClearButtonEnabled(True)
        layout.addWidget(self._search_edit, 1)

        self._prev_button = QToolButton()
        self._prev_button.setText("▲")
        self._prev_button.setToolTip("Previous (Shift+F3)")
        layout.addWidget(self._prev_button)

        self._next_button = QToolButton()
        self._next_button.setText("▼")
        self._next_button.setToolTip("Next (F3)")
        layout.addWidget(self._next_button)

    def _connect_signals(self):
        self._search_edit.returnPressed.connect(self.search_next)
        self._search_edit.textChanged.connect(self._on_text_changed)
        self._next_button.clicked.connect(self.search_next)
        self._prev_button.clicked.connect(self.search_previous)

    def text(self) -> str:
        return self._search_edit.text()

    def search_next(self):
        self._request(backward=False)

    def search_previous(self):
        self._request(backward=True)

    def _request(self, backward: bool):
        text = self._search_edit.text()
        if len(text) >= SEARCH_MIN_LENGTH:
            self.search_requested.emit(text, backward)

    def _on_text_changed(self, text: str):
        """입력 중 검색: 최소 길이에 도달하면 캐럿 위치부터 앞으로 찾는다."""
        if len(text) < SEARCH_MIN_LENGTH:
            self.reset_tint()
        else:
            self.search_requested.emit(text, False)

    def show_result(self, found: bool):
        """검색 결과(찾음/못 찾음)를 입력창 색으로 표시."""
        palette = self._search_edit.palette()
        palette.setColor(QPalette.ColorRole.Base, search_tint(self._base_color, found))
        self._search_edit.setPalette(palette)

    def reset_tint(self):
        palette = self._search_edit.palette()
        palette.setColor(QPalette.ColorRole.Base, self._base_color)
        self._search_edit.setPalette(palette)

    def set_focus(self):
        self._search_edit.setFocus()
        self._search_edit.selectAll()

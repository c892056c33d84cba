"""Overlay window for recording notices and errors."""

from __future__ import annotations

try:
    from PySide6.QtCore import Qt, QTimer
    from PySide6.QtWidgets import QApplication, QLabel, QWidget, QVBoxLayout
except Exception:  # pragma: no cover
    Qt = None  # type: ignore
    QTimer = None  # type: ignore
    QApplication = None  # type: ignore
    QLabel = object  # type: ignore
    QWidget = object  # type: ignore
    QVBoxLayout = object  # type: ignore

NOTICE_STYLE = (
    "color: white; font-size: 16px; padding: 12px;"
    "background: rgba(0,0,0,190); border-radius: 10px;"
)
ERROR_STYLE = (
    "color: #FF6B6B; font-size: 16px; padding: 12px;"
    "background: rgba(0,0,0,210); border-radius: 10px;"
)


class OverlayWindow(QWidget):
    def __init__(self) -> None:
        if Qt is None:
            raise RuntimeError("PySide6 is not installed")
        super().__init__()
        self.setWindowFlags(
            Qt.WindowStaysOnTopHint | Qt.FramelessWindowHint | Qt.Tool
        )
        self.setAttribute(Qt.WA_TranslucentBackground, True)
        self.setAttribute(Qt.WA_ShowWithoutActivating, True)
        self.setFixedWidth(420)

        self._label = QLabel("")
        self._label.setWordWrap(True)
        self._label.setStyleSheet(NOTICE_STYLE)

        layout = QVBoxLayout()
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self._label)
        self.setLayout(layout)

        self._hide_timer: QTimer | None = None

    def show_notice(self, text: str, hide_after_ms: int = 1500) -> None:
        """Show a transient notice; ``hide_after_ms=0`` keeps it up."""
        self._label.setStyleSheet(NOTICE_STYLE)
        self._show_text(text)
        if hide_after_ms:
            self.hide_with_delay(hide_after_ms)

    def show_error(self, text: str, hide_after_ms: int = 3000) -> None:
        self._label.setStyleSheet(ERROR_STYLE)
        self._show_text(f"⚠️ {text}")
        self.hide_with_delay(hide_after_ms)

    def hide_with_delay(self, delay_ms: int = 400) -> None:
        self._cancel_hide_timer()
        if QTimer is not None:
            self._hide_timer = QTimer()
            self._hide_timer.setSingleShot(True)
            self._hide_timer.timeout.connect(self.hide)
            self._hide_timer.start(delay_ms)

    def _show_text(self, text: str) -> None:
        self._cancel_hide_timer()
        self._label.setText(text)
        self._place_bottom_right()
        self.show()

    def _place_bottom_right(self) -> None:
        if QApplication is None:
            return
        screen = QApplication.primaryScreen()
        if screen is None:
            return
        geom = screen.availableGeometry()
        self.adjustSize()
        x = geom.x() + geom.width() - self.width() - 24
        y = geom.y() + geom.height() - self.height() - 24
        self.move(x, y)

    def _cancel_hide_timer(self) -> None:
        if self._hide_timer is not None:
            self._hide_timer.stop()
            self._hide_timer = None

"""Application entrypoint."""

from __future__ import annotations

import logging
import os
import sys
import threading

from auto_paste import ClipboardPasteService
from config import JsonConfigStore
from hotkey import GlobalHotkeyAdapter
from models import SessionState
from overlay import OverlayWindow
from pipeline import PipelineOrchestrator
from recorder import SoundDeviceRecorder
from recording_controller import RecordingController
from refiner import DashscopeRefiner
from transcriber import GoogleSpeechTranscriber

try:
    from PySide6.QtCore import QObject, Signal, QSize
    from PySide6.QtGui import QAction, QIcon, QPixmap, QPainter, QColor, QBrush
    from PySide6.QtWidgets import QApplication, QInputDialog, QMenu, QMessageBox, QSystemTrayIcon
except Exception as exc:  # pragma: no cover
    raise SystemExit(f"PySide6 is required to run the desktop app: {exc}")

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("requests").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def _create_icon(color: str = "#888888", size: int = 22) -> QIcon:
    """Generate a simple circular tray icon with the given color."""
    pixmap = QPixmap(QSize(size, size))
    pixmap.fill(QColor(0, 0, 0, 0))
    painter = QPainter(pixmap)
    painter.setRenderHint(QPainter.Antialiasing, True)
    painter.setBrush(QBrush(QColor(color)))
    painter.setPen(QColor(color))
    painter.drawEllipse(2, 2, size - 4, size - 4)
    painter.end()
    return QIcon(pixmap)


STATE_ICONS = {
    SessionState.IDLE.value: ("#888888", "Voice Refine: Ready"),
    SessionState.RECORDING.value: ("#FF4444", "Voice Refine: Recording..."),
    SessionState.PROCESSING.value: ("#3A8DFF", "Voice Refine: Processing..."),
}


class UIBridge(QObject):
    notice_signal = Signal(str)
    error_signal = Signal(str)
    state_signal = Signal(str, str)  # from_state, to_state


class App:
    def __init__(self) -> None:
        self.app = QApplication(sys.argv)
        self.app.setQuitOnLastWindowClosed(False)
        self.config_store = JsonConfigStore()
        self.overlay = OverlayWindow()
        self.ui = UIBridge()
        self.ui.notice_signal.connect(self.overlay.show_notice)
        self.ui.error_signal.connect(self.overlay.show_error)
        self.ui.state_signal.connect(self._on_state_change_ui)

        pipeline = PipelineOrchestrator(
            transcriber=GoogleSpeechTranscriber(),
            refiner=DashscopeRefiner(),
            sink=ClipboardPasteService(),
        )
        self.controller = RecordingController(
            recorder=SoundDeviceRecorder(),
            pipeline=pipeline,
            config_source=self.config_store.load_config,
            on_state_change=self._on_state_change,
            on_notice=self.ui.notice_signal.emit,
            on_error=self._on_error,
        )
        self.hotkey = GlobalHotkeyAdapter(hotkey_name=self.config_store.get_hotkey())

        self.tray = QSystemTrayIcon()
        self._on_state_change_ui("", SessionState.IDLE.value)
        self._setup_menu()
        self.tray.show()

    def _setup_menu(self) -> None:
        menu = QMenu()

        toggle_action = QAction("Start / Stop Recording", menu)
        toggle_action.triggered.connect(self._toggle)
        menu.addAction(toggle_action)

        menu.addSeparator()
        for title, handler in (
            ("Set Speech API Key", self._set_speech_key),
            ("Set Generative API Key", self._set_llm_key),
            ("Set Language Code", self._set_language),
        ):
            action = QAction(title, menu)
            action.triggered.connect(handler)
            menu.addAction(action)

        menu.addSeparator()
        quit_action = QAction("Quit", menu)
        quit_action.triggered.connect(self.quit)
        menu.addAction(quit_action)

        self.tray.setContextMenu(menu)

    def _set_speech_key(self) -> None:
        value, ok = QInputDialog.getText(None, "Speech API Key", "Google Cloud Speech-to-Text API key")
        if ok:
            self.config_store.set_speech_api_key(value)
            QMessageBox.information(None, "Saved", "Speech API key saved.")

    def _set_llm_key(self) -> None:
        value, ok = QInputDialog.getText(None, "Generative API Key", "DashScope API key")
        if ok:
            self.config_store.set_llm_api_key(value)
            QMessageBox.information(None, "Saved", "Generative API key saved.")

    def _set_language(self) -> None:
        value, ok = QInputDialog.getText(
            None,
            "Language Code",
            "Language code for speech-to-text (e.g., en-US)",
            text=self.config_store.get_language_code(),
        )
        if ok and value.strip():
            self.config_store.set_language_code(value)

    # ------------------------------------------------------------------
    # Callbacks (called from worker threads → emit signals for UI thread)
    # ------------------------------------------------------------------

    def _on_state_change(self, from_state: SessionState, to_state: SessionState) -> None:
        self.ui.state_signal.emit(from_state.value, to_state.value)

    def _on_error(self, code: str, message: str) -> None:
        self.ui.error_signal.emit(message)

    def _on_state_change_ui(self, from_state: str, to_state: str) -> None:
        color, tooltip = STATE_ICONS[to_state]
        self.tray.setIcon(_create_icon(color))
        self.tray.setToolTip(tooltip)

    # ------------------------------------------------------------------
    # Triggers
    # ------------------------------------------------------------------

    def _toggle(self) -> None:
        # stop() waits for capture confirmation and the network calls,
        # so keep it off the Qt and pynput threads.
        threading.Thread(target=self.controller.toggle, daemon=True).start()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def run(self) -> int:
        try:
            self.hotkey.start(on_toggle=self._toggle)
        except Exception as exc:
            logger.warning("Hotkey disabled: %s", exc)
            self.overlay.show_error(f"Hotkey disabled: {exc}")
        return self.app.exec()

    def quit(self) -> None:
        self.hotkey.stop()
        self.controller.cancel("app quit")
        self.app.quit()


def main() -> int:
    setup_logging(os.getenv("VOICE_REFINE_LOG_LEVEL", "INFO"))
    app = App()
    return app.run()


if __name__ == "__main__":
    raise SystemExit(main())

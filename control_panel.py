"""Start / Stop / Play window."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from models import ConnectionState, StateSnapshot

try:
    from PySide6.QtCore import Qt
    from PySide6.QtWidgets import QLabel, QPushButton, QVBoxLayout, QWidget
except Exception:  # pragma: no cover
    Qt = None  # type: ignore
    QLabel = object  # type: ignore
    QPushButton = object  # type: ignore
    QVBoxLayout = object  # type: ignore
    QWidget = object  # type: ignore


@dataclass(frozen=True)
class ButtonStates:
    start_enabled: bool
    stop_enabled: bool
    play_enabled: bool


def button_states(snapshot: StateSnapshot) -> ButtonStates:
    return ButtonStates(
        start_enabled=not snapshot.is_recording,
        stop_enabled=snapshot.is_recording,
        play_enabled=snapshot.artifact_exists,
    )


_CONNECTION_LABELS = {
    ConnectionState.DISCONNECTED: "Not connected",
    ConnectionState.CONNECTING: "Connecting...",
    ConnectionState.CONNECTED: "Connected",
    ConnectionState.CLOSED: "Connection closed",
}


class ControlPanel(QWidget):
    def __init__(
        self,
        on_start: Callable[[], None],
        on_stop: Callable[[], None],
        on_play: Callable[[], None],
    ) -> None:
        if Qt is None:
            raise RuntimeError("PySide6 is not installed")
        super().__init__()
        self.setWindowTitle("Remote Recorder")
        self.setFixedWidth(260)

        self._start_button = QPushButton("Start Recording")
        self._stop_button = QPushButton("Stop Recording")
        self._play_button = QPushButton("Play Recording")
        self._start_button.clicked.connect(on_start)
        self._stop_button.clicked.connect(on_stop)
        self._play_button.clicked.connect(on_play)

        self._status = QLabel("")
        self._status.setAlignment(Qt.AlignCenter)
        self._status.setStyleSheet("color: #888888; font-size: 12px;")

        layout = QVBoxLayout()
        layout.setContentsMargins(16, 16, 16, 16)
        layout.setSpacing(12)
        layout.addWidget(self._start_button)
        layout.addWidget(self._stop_button)
        layout.addWidget(self._play_button)
        layout.addWidget(self._status)
        self.setLayout(layout)

    def render(self, snapshot: StateSnapshot) -> None:
        """Apply a state snapshot to the buttons. Must run on the Qt thread."""
        states = button_states(snapshot)
        self._start_button.setEnabled(states.start_enabled)
        self._stop_button.setEnabled(states.stop_enabled)
        self._play_button.setEnabled(states.play_enabled)
        self._status.setText(_CONNECTION_LABELS[snapshot.connection_state])

"""Application entrypoint."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, List, Optional

from app_state import AppState
from command_channel import CommandChannel
from config import JsonConfigStore
from control_panel import ControlPanel
from models import AudioArtifact, StateSnapshot
from player import SoundDevicePlayer
from recorder import SoundDeviceRecorder
from recording_controller import RecordingController
from uploader import HttpUploader

try:
    from PySide6.QtCore import QObject, Signal
    from PySide6.QtWidgets import QApplication
except Exception as exc:  # pragma: no cover
    raise SystemExit(f"PySide6 is required to run the desktop app: {exc}")

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
SHUTDOWN_UPLOAD_TIMEOUT_S = 10.0


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Remote-controlled audio recorder")
    parser.add_argument("--command-url", help="WebSocket command server URL")
    parser.add_argument("--upload-url", help="HTTP endpoint receiving the recording")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING or ERROR")
    return parser.parse_args(argv)


class UIBridge(QObject):
    invoke_signal = Signal(object)  # zero-arg callable to run on the UI thread
    state_signal = Signal(object)  # StateSnapshot


class App:
    def __init__(self, args: argparse.Namespace) -> None:
        self.app = QApplication(sys.argv[:1])
        self.config_store = JsonConfigStore()
        setup_logging(args.log_level or self.config_store.get_log_level())

        self.ui = UIBridge()
        self.ui.invoke_signal.connect(self._invoke_ui)
        self.ui.state_signal.connect(self._on_state_ui)

        self.state = AppState()
        self.player = SoundDevicePlayer()
        self.controller = RecordingController(
            recorder=SoundDeviceRecorder(),
            player=self.player,
            uploader=HttpUploader(args.upload_url or self.config_store.get_upload_url()),
            artifact=AudioArtifact.at(self.config_store.artifact_path()),
            state=self.state,
        )
        self.channel = CommandChannel(
            args.command_url or self.config_store.get_command_url(),
            state=self.state,
            dispatch=self._dispatch,
        )
        self.channel.on_message(self.controller.handle_command)

        self.panel = ControlPanel(
            on_start=self.controller.start_recording,
            on_stop=self.controller.stop_recording,
            on_play=self.controller.play_recording,
        )
        self.state.subscribe(self._on_state_change)
        self.panel.render(self.state.snapshot())
        self.app.aboutToQuit.connect(self.quit)

    # ------------------------------------------------------------------
    # Called from worker threads → emit signals for UI thread
    # ------------------------------------------------------------------

    def _dispatch(self, fn: Callable[[], None]) -> None:
        self.ui.invoke_signal.emit(fn)

    def _on_state_change(self, snapshot: StateSnapshot) -> None:
        self.ui.state_signal.emit(snapshot)

    # ------------------------------------------------------------------
    # UI thread handlers (safe for Qt)
    # ------------------------------------------------------------------

    def _invoke_ui(self, fn: Callable[[], None]) -> None:
        fn()

    def _on_state_ui(self, snapshot: StateSnapshot) -> None:
        # queued signals can lag; always draw the latest state
        self.panel.render(self.state.snapshot())

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def run(self) -> int:
        logger.info("AudioRecorder initialized, artifact at %s", self.controller.artifact.path)
        self.panel.show()
        self.channel.connect()
        return self.app.exec()

    def quit(self) -> None:
        self.controller.shutdown(upload_timeout_s=SHUTDOWN_UPLOAD_TIMEOUT_S)
        self.player.stop()
        self.channel.close()


def main(argv: Optional[List[str]] = None) -> int:
    app = App(parse_args(argv))
    return app.run()


if __name__ == "__main__":
    raise SystemExit(main())

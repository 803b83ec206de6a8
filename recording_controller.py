"""State-machine based record/stop/upload orchestration."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from app_state import AppState, Listener
from errors import CaptureError, PlaybackError, RecorderAppError
from interfaces import Player, Recorder, Uploader
from models import AudioArtifact, Command, RecordingState, StateSnapshot, UploadResult

logger = logging.getLogger(__name__)

StateCallback = Callable[[RecordingState, RecordingState], None]
ErrorCallback = Callable[[str, str], None]
UploadCallback = Callable[[UploadResult], None]


class RecordingController:
    def __init__(
        self,
        recorder: Recorder,
        player: Player,
        uploader: Uploader,
        artifact: AudioArtifact,
        state: Optional[AppState] = None,
        on_state_change: Optional[StateCallback] = None,
        on_error: Optional[ErrorCallback] = None,
        on_upload_complete: Optional[UploadCallback] = None,
    ) -> None:
        self._recorder = recorder
        self._player = player
        self._uploader = uploader
        self._artifact = artifact
        self._app_state = state or AppState()
        self._on_state_change = on_state_change
        self._on_error = on_error
        self._on_upload_complete = on_upload_complete

        self._lock = threading.RLock()
        self._state = RecordingState.IDLE
        self._app_state.update(
            recording_state=self._state,
            artifact_exists=self._artifact.exists,
        )

    @property
    def state(self) -> RecordingState:
        return self._state

    @property
    def artifact(self) -> AudioArtifact:
        return self._artifact

    def snapshot(self) -> StateSnapshot:
        return self._app_state.snapshot()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        return self._app_state.subscribe(listener)

    def handle_command(self, text: str) -> None:
        if text == Command.START_RECORDING.value:
            logger.info("Received startRecording command")
            self.start_recording()
        elif text == Command.STOP_RECORDING.value:
            logger.info("Received stopRecording command")
            self.stop_recording()
        else:
            logger.warning("Unknown command received: %s", text)

    def start_recording(self) -> None:
        with self._lock:
            if self._state == RecordingState.RECORDING:
                logger.info("Already recording, start ignored")
                return
            logger.info("Starting recording")
            try:
                self._recorder.start(self._artifact.path)
            except CaptureError as exc:
                self._report(exc)
                return
            self._artifact.exists = False
            self._transition(RecordingState.RECORDING)
            logger.info("Recording started")

    def stop_recording(self) -> None:
        with self._lock:
            if self._state != RecordingState.RECORDING:
                logger.info("Not recording, stop ignored")
                return
            logger.info("Stopping recording")
            try:
                self._recorder.stop()
            except CaptureError as exc:
                self._report(exc)
                self._artifact.exists = False
                self._transition(RecordingState.IDLE)
                return
            self._artifact.exists = True
            self._transition(RecordingState.STOPPED)
            logger.info("Recording stopped")
            path = self._artifact.path

        self._uploader.submit(path, self._on_upload_complete)

    def shutdown(self, upload_timeout_s: Optional[float] = None) -> None:
        """Stop any running capture and wait for its upload to finish."""
        self.stop_recording()
        self._uploader.join(upload_timeout_s)

    def play_recording(self) -> None:
        with self._lock:
            if not self._artifact.exists:
                logger.info("No recording to play")
                return
            path = self._artifact.path
        logger.info("Playing recording")
        try:
            self._player.play(path)
        except PlaybackError as exc:
            self._report(exc)
            return
        logger.info("Playback started")

    def _report(self, exc: RecorderAppError) -> None:
        logger.error("%s: %s", exc.code, exc)
        if self._on_error:
            self._on_error(exc.code, str(exc))

    def _transition(self, to_state: RecordingState) -> None:
        from_state = self._state
        self._state = to_state
        self._app_state.update(
            recording_state=to_state,
            artifact_exists=self._artifact.exists,
        )
        if from_state != to_state and self._on_state_change:
            self._on_state_change(from_state, to_state)

"""Shared error codes, messages and exception types."""

from __future__ import annotations

CONNECTION_ERROR = "CONNECTION_ERROR"
CAPTURE_ERROR = "CAPTURE_ERROR"
UPLOAD_ERROR = "UPLOAD_ERROR"
PLAYBACK_ERROR = "PLAYBACK_ERROR"

ERROR_MESSAGES = {
    CONNECTION_ERROR: "Command server connection failed.",
    CAPTURE_ERROR: "Microphone capture failed.",
    UPLOAD_ERROR: "Audio upload failed.",
    PLAYBACK_ERROR: "Playback failed.",
}


class RecorderAppError(Exception):
    code = ""

    def __init__(self, message: str = "") -> None:
        super().__init__(message or ERROR_MESSAGES.get(self.code, ""))


class ChannelError(RecorderAppError):
    code = CONNECTION_ERROR


class CaptureError(RecorderAppError):
    code = CAPTURE_ERROR


class UploadError(RecorderAppError):
    code = UPLOAD_ERROR


class PlaybackError(RecorderAppError):
    code = PLAYBACK_ERROR

"""Core data models for the app."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


class RecordingState(str, Enum):
    IDLE = "IDLE"
    RECORDING = "RECORDING"
    STOPPED = "STOPPED"


class ConnectionState(str, Enum):
    DISCONNECTED = "DISCONNECTED"
    CONNECTING = "CONNECTING"
    CONNECTED = "CONNECTED"
    CLOSED = "CLOSED"


class Command(str, Enum):
    START_RECORDING = "startRecording"
    STOP_RECORDING = "stopRecording"


@dataclass
class AudioArtifact:
    path: Path
    exists: bool = False

    @classmethod
    def at(cls, path: Path) -> "AudioArtifact":
        """Build an artifact whose flag reflects the file on disk."""
        return cls(path=path, exists=path.exists())


@dataclass(frozen=True)
class StateSnapshot:
    recording_state: RecordingState = RecordingState.IDLE
    artifact_exists: bool = False
    connection_state: ConnectionState = ConnectionState.DISCONNECTED

    @property
    def is_recording(self) -> bool:
        return self.recording_state == RecordingState.RECORDING


@dataclass
class UploadResult:
    success: bool
    status_code: Optional[int] = None
    error: str = ""

"""Protocol interfaces used by RecordingController and CommandChannel."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Protocol

from models import UploadResult

Dispatch = Callable[[Callable[[], None]], None]


class Recorder(Protocol):
    def start(self, path: Path) -> None: ...

    def stop(self) -> None: ...


class Player(Protocol):
    def play(self, path: Path) -> None: ...


class Uploader(Protocol):
    def submit(
        self,
        artifact_path: Path,
        on_complete: Callable[[UploadResult], None] | None = None,
    ) -> None: ...

    def join(self, timeout: float | None = None) -> None: ...

"""Microphone recorder adapter."""

from __future__ import annotations

import logging
import threading
import wave
from pathlib import Path
from typing import Any, List, Optional

from errors import CaptureError

try:
    import numpy as np
except Exception:  # pragma: no cover
    np = None  # type: ignore

try:
    import sounddevice as sd
except Exception:  # pragma: no cover
    sd = None  # type: ignore

logger = logging.getLogger(__name__)

SAMPLE_WIDTH = 2  # int16


class SoundDeviceRecorder:
    """Captures int16 PCM from the default input and writes it as WAV on stop."""

    def __init__(
        self,
        sample_rate: int = 44100,
        channels: int = 2,
        chunk_ms: int = 100,
    ) -> None:
        self.sample_rate = sample_rate
        self.channels = channels
        self.chunk_ms = chunk_ms
        self._stream: Any = None
        self._running = False
        self._lock = threading.Lock()
        self._blocks: List[bytes] = []
        self._path: Optional[Path] = None

    @property
    def running(self) -> bool:
        return self._running

    def start(self, path: Path) -> None:
        with self._lock:
            if self._running:
                return
            if sd is None:
                raise CaptureError("sounddevice is not installed")
            self._path = path
            self._blocks = []
            blocksize = int(self.sample_rate * (self.chunk_ms / 1000.0))
            try:
                self._stream = sd.InputStream(
                    samplerate=self.sample_rate,
                    channels=self.channels,
                    dtype="int16",
                    blocksize=blocksize,
                    callback=self._on_audio,
                )
                self._stream.start()
            except Exception as exc:
                self._stream = None
                raise CaptureError(f"input stream failed: {exc}") from exc
            self._running = True
            logger.debug("Capture started: %s Hz, %s ch -> %s", self.sample_rate, self.channels, path)

    def stop(self) -> None:
        with self._lock:
            if not self._running:
                return
            self._running = False
            stream, self._stream = self._stream, None
            try:
                if stream is not None:
                    stream.stop()
                    stream.close()
            except Exception as exc:
                raise CaptureError(f"input stream close failed: {exc}") from exc
            self._write_artifact()

    def _on_audio(self, indata: Any, frames: int, time_info: Any, status: Any) -> None:
        if not self._running:
            return
        if status:
            logger.debug("Input stream status: %s", status)
        if np is None:
            return
        self._blocks.append(np.asarray(indata, dtype=np.int16).tobytes())

    def _write_artifact(self) -> None:
        if self._path is None:
            return
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with wave.open(str(self._path), "wb") as wf:
                wf.setnchannels(self.channels)
                wf.setsampwidth(SAMPLE_WIDTH)
                wf.setframerate(self.sample_rate)
                wf.writeframes(b"".join(self._blocks))
        except (OSError, wave.Error) as exc:
            raise CaptureError(f"writing {self._path} failed: {exc}") from exc
        finally:
            self._blocks = []
        logger.debug("Capture written to %s", self._path)

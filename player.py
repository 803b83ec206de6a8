"""Playback adapter for the recorded artifact."""

from __future__ import annotations

import logging
import wave
from pathlib import Path

from errors import PlaybackError

try:
    import numpy as np
except Exception:  # pragma: no cover
    np = None  # type: ignore

try:
    import sounddevice as sd
except Exception:  # pragma: no cover
    sd = None  # type: ignore

logger = logging.getLogger(__name__)


class SoundDevicePlayer:
    def play(self, path: Path) -> None:
        """Start non-blocking playback of a 16-bit WAV file."""
        if sd is None or np is None:
            raise PlaybackError("sounddevice/numpy is not installed")
        try:
            with wave.open(str(path), "rb") as wf:
                channels = wf.getnchannels()
                sample_rate = wf.getframerate()
                pcm = wf.readframes(wf.getnframes())
        except (OSError, EOFError, wave.Error) as exc:
            raise PlaybackError(f"cannot open {path}: {exc}") from exc

        samples = np.frombuffer(pcm, dtype=np.int16)
        if channels > 1:
            samples = samples.reshape(-1, channels)
        try:
            sd.play(samples, sample_rate, blocking=False)
        except Exception as exc:
            raise PlaybackError(f"output stream failed: {exc}") from exc
        logger.debug("Playing %s (%s Hz, %s ch)", path, sample_rate, channels)

    def stop(self) -> None:
        if sd is not None:
            sd.stop()

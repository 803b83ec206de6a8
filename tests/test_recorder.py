"""Tests for SoundDeviceRecorder."""

from __future__ import annotations

import wave
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from errors import CaptureError
from recorder import SoundDeviceRecorder


# ---------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------

class _FakeNp:
    """Minimal numpy stand-in so recorder._on_audio doesn't bail."""

    class int16:
        pass

    @staticmethod
    def asarray(data, dtype=None):
        return data


class _FakeAudioInput:
    """Fake audio input similar to what sounddevice callback provides."""

    def __init__(self, n_frames: int = 441, channels: int = 2) -> None:
        self._data = b"\x01\x00" * n_frames * channels

    def tobytes(self) -> bytes:
        return self._data


# ---------------------------------------------------------------
# Basic start / stop
# ---------------------------------------------------------------

@patch("recorder.sd")
def test_start_creates_stream_and_stop_closes_it(mock_sd: MagicMock, tmp_path: Path) -> None:
    mock_stream = MagicMock()
    mock_sd.InputStream.return_value = mock_stream

    recorder = SoundDeviceRecorder()
    recorder.start(tmp_path / "recording.m4a")

    mock_sd.InputStream.assert_called_once()
    assert mock_sd.InputStream.call_args.kwargs["samplerate"] == 44100
    assert mock_sd.InputStream.call_args.kwargs["channels"] == 2
    assert mock_sd.InputStream.call_args.kwargs["dtype"] == "int16"
    mock_stream.start.assert_called_once()
    assert recorder.running is True

    recorder.stop()
    mock_stream.stop.assert_called_once()
    mock_stream.close.assert_called_once()
    assert recorder.running is False


@patch("recorder.sd")
def test_start_is_idempotent(mock_sd: MagicMock, tmp_path: Path) -> None:
    mock_sd.InputStream.return_value = MagicMock()

    recorder = SoundDeviceRecorder()
    recorder.start(tmp_path / "recording.m4a")
    recorder.start(tmp_path / "recording.m4a")  # second call should be no-op

    assert mock_sd.InputStream.call_count == 1
    recorder.stop()


@patch("recorder.sd")
def test_stop_is_idempotent(mock_sd: MagicMock, tmp_path: Path) -> None:
    mock_stream = MagicMock()
    mock_sd.InputStream.return_value = mock_stream

    recorder = SoundDeviceRecorder()
    recorder.start(tmp_path / "recording.m4a")
    recorder.stop()
    recorder.stop()

    mock_stream.close.assert_called_once()


# ---------------------------------------------------------------
# Artifact written on stop
# ---------------------------------------------------------------

@patch("recorder.np", _FakeNp())
@patch("recorder.sd")
def test_stop_writes_wav_artifact(mock_sd: MagicMock, tmp_path: Path) -> None:
    mock_sd.InputStream.return_value = MagicMock()
    path = tmp_path / "nested" / "recording.m4a"

    recorder = SoundDeviceRecorder(sample_rate=44100, channels=2)
    recorder.start(path)
    recorder._on_audio(_FakeAudioInput(441), frames=441, time_info=None, status=None)
    recorder._on_audio(_FakeAudioInput(441), frames=441, time_info=None, status=None)
    recorder.stop()

    with wave.open(str(path), "rb") as wf:
        assert wf.getnchannels() == 2
        assert wf.getsampwidth() == 2
        assert wf.getframerate() == 44100
        assert wf.getnframes() == 882


@patch("recorder.np", _FakeNp())
@patch("recorder.sd")
def test_new_session_overwrites_artifact(mock_sd: MagicMock, tmp_path: Path) -> None:
    mock_sd.InputStream.return_value = MagicMock()
    path = tmp_path / "recording.m4a"

    recorder = SoundDeviceRecorder()
    recorder.start(path)
    recorder._on_audio(_FakeAudioInput(441), frames=441, time_info=None, status=None)
    recorder.stop()
    recorder.start(path)
    recorder.stop()

    with wave.open(str(path), "rb") as wf:
        assert wf.getnframes() == 0


@patch("recorder.np", _FakeNp())
@patch("recorder.sd")
def test_callback_after_stop_is_noop(mock_sd: MagicMock, tmp_path: Path) -> None:
    mock_sd.InputStream.return_value = MagicMock()

    recorder = SoundDeviceRecorder()
    recorder.start(tmp_path / "recording.m4a")
    recorder.stop()
    recorder._on_audio(_FakeAudioInput(441), frames=441, time_info=None, status=None)

    assert recorder._blocks == []


# ---------------------------------------------------------------
# Failures
# ---------------------------------------------------------------

def test_start_raises_without_sounddevice(monkeypatch, tmp_path: Path) -> None:  # noqa: ANN001
    import recorder as rec_mod
    monkeypatch.setattr(rec_mod, "sd", None)

    recorder = SoundDeviceRecorder()
    with pytest.raises(CaptureError, match="sounddevice is not installed"):
        recorder.start(tmp_path / "recording.m4a")


@patch("recorder.sd")
def test_stream_open_failure_raises_capture_error(mock_sd: MagicMock, tmp_path: Path) -> None:
    mock_sd.InputStream.side_effect = Exception("Invalid number of channels")

    recorder = SoundDeviceRecorder()
    with pytest.raises(CaptureError, match="Invalid number of channels"):
        recorder.start(tmp_path / "recording.m4a")
    assert recorder.running is False

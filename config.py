"""Simple JSON-based config store."""

from __future__ import annotations

import json
from pathlib import Path

DEFAULT_COMMAND_URL = "ws://localhost:3002"
DEFAULT_UPLOAD_URL = "http://localhost:3002/audiodata"
DEFAULT_LOG_LEVEL = "INFO"
# Fixed name the server side expects; the recorder writes 16-bit WAV into it.
ARTIFACT_NAME = "recording.m4a"


class JsonConfigStore:
    def __init__(self, path: Path | None = None) -> None:
        self._path = path or Path.home() / ".config" / "remote_recorder" / "config.json"
        self._path.parent.mkdir(parents=True, exist_ok=True)

    def get_command_url(self) -> str:
        data = self._read_all()
        return str(data.get("command_url", DEFAULT_COMMAND_URL))

    def set_command_url(self, url: str) -> None:
        data = self._read_all()
        data["command_url"] = url
        self._write_all(data)

    def get_upload_url(self) -> str:
        data = self._read_all()
        return str(data.get("upload_url", DEFAULT_UPLOAD_URL))

    def set_upload_url(self, url: str) -> None:
        data = self._read_all()
        data["upload_url"] = url
        self._write_all(data)

    def get_data_dir(self) -> Path:
        data = self._read_all()
        value = data.get("data_dir")
        if value:
            return Path(str(value)).expanduser()
        return Path.home() / ".local" / "share" / "remote_recorder"

    def set_data_dir(self, path: Path) -> None:
        data = self._read_all()
        data["data_dir"] = str(path)
        self._write_all(data)

    def get_log_level(self) -> str:
        data = self._read_all()
        return str(data.get("log_level", DEFAULT_LOG_LEVEL)).upper()

    def set_log_level(self, level: str) -> None:
        data = self._read_all()
        data["log_level"] = level
        self._write_all(data)

    def artifact_path(self) -> Path:
        """Location of the single recording file, overwritten each session."""
        return self.get_data_dir() / ARTIFACT_NAME

    def _read_all(self) -> dict:
        if not self._path.exists():
            return {}
        try:
            return json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError):
            return {}

    def _write_all(self, data: dict) -> None:
        self._path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")

from __future__ import annotations

from pathlib import Path

from config import JsonConfigStore


def test_config_defaults(tmp_path: Path) -> None:
    store = JsonConfigStore(path=tmp_path / "config.json")

    assert store.get_command_url() == "ws://localhost:3002"
    assert store.get_upload_url() == "http://localhost:3002/audiodata"
    assert store.get_log_level() == "INFO"
    assert store.artifact_path().name == "recording.m4a"


def test_config_read_write(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    store = JsonConfigStore(path=path)

    store.set_command_url("ws://recorder.local:4000")
    store.set_upload_url("http://recorder.local:4000/uploadAudio")
    store.set_data_dir(tmp_path / "data")
    store.set_log_level("debug")

    reloaded = JsonConfigStore(path=path)
    assert reloaded.get_command_url() == "ws://recorder.local:4000"
    assert reloaded.get_upload_url() == "http://recorder.local:4000/uploadAudio"
    assert reloaded.artifact_path() == tmp_path / "data" / "recording.m4a"
    assert reloaded.get_log_level() == "DEBUG"


def test_config_invalid_json_fallback(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{invalid", encoding="utf-8")

    store = JsonConfigStore(path=path)
    assert store.get_command_url() == "ws://localhost:3002"
    assert store.get_upload_url() == "http://localhost:3002/audiodata"

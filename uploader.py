"""One-shot multipart upload of the recorded artifact."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Callable, Optional

import requests

from errors import UploadError
from models import UploadResult

logger = logging.getLogger(__name__)

FIELD_NAME = "audio"
UPLOAD_FILENAME = "recording.m4a"
UPLOAD_CONTENT_TYPE = "audio/m4a"

CompletionCallback = Callable[[UploadResult], None]


def build_request(url: str, payload: bytes) -> requests.PreparedRequest:
    """Single-part multipart/form-data POST carrying ``payload`` as ``audio``."""
    files = {FIELD_NAME: (UPLOAD_FILENAME, payload, UPLOAD_CONTENT_TYPE)}
    return requests.Request("POST", url, files=files).prepare()


class HttpUploader:
    """Posts the artifact on a background thread and logs the outcome.

    The file is read when ``submit`` is called, so a later session that
    overwrites the artifact does not change what an in-flight upload sends.
    Nothing is retried and the caller never waits for the result.
    """

    def __init__(
        self,
        url: str,
        session: Optional[requests.Session] = None,
        timeout_s: Optional[float] = None,
    ) -> None:
        self.url = url
        self._session = session or requests.Session()
        self._timeout_s = timeout_s
        self._thread: Optional[threading.Thread] = None

    def submit(
        self,
        artifact_path: Path,
        on_complete: Optional[CompletionCallback] = None,
    ) -> None:
        logger.info("Uploading %s to %s", artifact_path, self.url)
        try:
            payload = self._read(artifact_path)
        except UploadError as exc:
            logger.error("Error reading audio file: %s", exc)
            if on_complete:
                on_complete(UploadResult(success=False, error=str(exc)))
            return

        request = build_request(self.url, payload)
        self._thread = threading.Thread(
            target=self._send,
            args=(request, on_complete),
            daemon=True,
        )
        self._thread.start()

    def join(self, timeout: Optional[float] = None) -> None:
        """Wait for the most recent upload; used by tests and shutdown."""
        if self._thread is not None:
            self._thread.join(timeout)

    def _read(self, artifact_path: Path) -> bytes:
        try:
            return artifact_path.read_bytes()
        except OSError as exc:
            raise UploadError(f"cannot read {artifact_path}: {exc}") from exc

    def _send(
        self,
        request: requests.PreparedRequest,
        on_complete: Optional[CompletionCallback],
    ) -> None:
        try:
            response = self._session.send(request, timeout=self._timeout_s)
        except requests.RequestException as exc:
            logger.error("Error uploading audio file: %s", exc)
            result = UploadResult(success=False, error=str(exc))
        else:
            logger.info("Audio file uploaded (HTTP %s)", response.status_code)
            result = UploadResult(success=True, status_code=response.status_code)
        if on_complete:
            on_complete(result)

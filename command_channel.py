"""Persistent WebSocket command channel."""

from __future__ import annotations

import functools
import logging
import threading
from typing import Any, Callable, List, Optional

from websockets.exceptions import ConnectionClosedOK, WebSocketException
from websockets.sync.client import connect as ws_connect

from app_state import AppState
from errors import ChannelError
from interfaces import Dispatch
from models import ConnectionState

logger = logging.getLogger(__name__)

MessageHandler = Callable[[str], None]

_TRANSPORT_ERRORS = (OSError, TimeoutError, WebSocketException)


def call_now(fn: Callable[[], None]) -> None:
    fn()


class CommandChannel:
    """Single long-lived connection to the command server.

    ``connect`` returns immediately; the handshake and the receive loop run
    on one daemon thread. Each inbound text frame is handed to the
    registered handlers through ``dispatch``, which the desktop app points
    at the Qt main thread. Failures are logged and end the connection; there
    is no reconnect.
    """

    def __init__(
        self,
        url: str,
        state: Optional[AppState] = None,
        dispatch: Optional[Dispatch] = None,
        open_timeout_s: float = 10.0,
        ping_timeout_s: float = 5.0,
    ) -> None:
        self.url = url
        self._state = state or AppState()
        self._dispatch = dispatch or call_now
        self._open_timeout_s = open_timeout_s
        self._ping_timeout_s = ping_timeout_s
        self._handlers: List[MessageHandler] = []
        self._lock = threading.Lock()
        self._ws: Any = None
        # bumped by connect() and close(); a worker whose number is stale
        # must not touch the socket slot or the connection state
        self._generation = 0
        self._thread: Optional[threading.Thread] = None

    @property
    def state(self) -> ConnectionState:
        return self._state.snapshot().connection_state

    def on_message(self, handler: MessageHandler) -> None:
        self._handlers.append(handler)

    def connect(self) -> None:
        with self._lock:
            if self.state in (ConnectionState.CONNECTING, ConnectionState.CONNECTED):
                return
            self._generation += 1
            self._set_state(ConnectionState.CONNECTING)
            self._thread = threading.Thread(
                target=self._run,
                args=(self._generation,),
                daemon=True,
            )
            self._thread.start()

    def send(self, text: str) -> bool:
        ws = self._ws
        if ws is None or self.state != ConnectionState.CONNECTED:
            logger.warning("Cannot send %r: channel is %s", text, self.state.value)
            return False
        logger.info("Sending message: %s", text)
        try:
            ws.send(text)
        except _TRANSPORT_ERRORS as exc:
            logger.error("WebSocket sending error: %s", exc)
            return False
        return True

    def close(self) -> None:
        with self._lock:
            self._generation += 1
            ws, self._ws = self._ws, None
            self._set_state(ConnectionState.CLOSED)
        if ws is not None:
            self._close_socket(ws)

    def join(self, timeout: Optional[float] = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)

    # ------------------------------------------------------------------
    # Worker thread
    # ------------------------------------------------------------------

    def _run(self, generation: int) -> None:
        try:
            ws = self._open()
        except ChannelError as exc:
            logger.error("%s", exc)
            self._finish(generation)
            return
        with self._lock:
            if generation != self._generation:
                stale = True
            else:
                stale = False
                self._ws = ws
                self._set_state(ConnectionState.CONNECTED)
        if stale:
            logger.info("Connection to %s superseded, dropping it", self.url)
            self._close_socket(ws)
            return
        logger.info("Connected to %s", self.url)
        self._ping(ws)
        self._receive_loop(ws)
        self._finish(generation)

    def _finish(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self._ws = None
            self._set_state(ConnectionState.CLOSED)

    def _open(self) -> Any:
        logger.info("Connecting to %s", self.url)
        try:
            return ws_connect(self.url, open_timeout=self._open_timeout_s)
        except _TRANSPORT_ERRORS as exc:
            raise ChannelError(f"cannot connect to {self.url}: {exc}") from exc

    def _close_socket(self, ws: Any) -> None:
        try:
            ws.close()
        except _TRANSPORT_ERRORS as exc:
            logger.warning("WebSocket close error: %s", exc)

    def _ping(self, ws: Any) -> None:
        try:
            pong = ws.ping()
            if pong.wait(self._ping_timeout_s):
                logger.info("WebSocket ping successful")
            else:
                logger.warning("WebSocket ping timed out")
        except _TRANSPORT_ERRORS as exc:
            logger.warning("WebSocket ping error: %s", exc)

    def _receive_loop(self, ws: Any) -> None:
        while True:
            try:
                message = ws.recv()
            except ConnectionClosedOK:
                logger.info("Command channel closed")
                return
            except _TRANSPORT_ERRORS as exc:
                logger.error("Failed to receive message: %s", exc)
                return
            self._handle_message(message)

    def _handle_message(self, message: str | bytes) -> None:
        if isinstance(message, (bytes, bytearray)):
            logger.info("Received binary message (%d bytes), ignored", len(message))
            return
        logger.info("Received text message: %s", message)
        for handler in list(self._handlers):
            self._dispatch(functools.partial(handler, message))

    def _set_state(self, to_state: ConnectionState) -> None:
        self._state.update(connection_state=to_state)

"""WebSocket transport.

One WebSocket connection carries the whole conversation with the service:
each command is sent as one text frame, and every frame the service sends
back is surfaced as text. The synchronous ``websockets`` client runs its
own background I/O, which allows one thread to block in :meth:`recv` while
another thread calls :meth:`send`.
"""

from __future__ import annotations

import logging
from typing import Optional

from websockets.exceptions import ConnectionClosed, WebSocketException
from websockets.protocol import State
from websockets.sync.client import ClientConnection, connect

from ..endpoint import Endpoint
from .base import (
    ConnectError,
    Transport,
    TransportClosed,
    TransportWriteError,
    as_text,
)


log = logging.getLogger(__name__)

schemes = ('ws', 'wss')


def _describe(error: ConnectionClosed) -> str:
    text = str(error)
    if text:
        return 'connection closed: ' + text
    return 'connection closed'


class Connection(Transport):
    """A WebSocket connection to an Orion endpoint."""

    def __init__(self, endpoint: Endpoint, **options):
        Transport.__init__(self, endpoint)
        self.options = options
        self.websocket: Optional[ClientConnection] = None

    def open(self, timeout=None) -> None:
        if self.websocket is not None:
            raise RuntimeError('connection already opened: ' + str(self.endpoint))

        url = self.endpoint.url
        log.debug("dialing %s", url)

        try:
            self.websocket = connect(url, open_timeout=timeout, **self.options)
        except (OSError, WebSocketException) as e:
            raise ConnectError(f"{url}: {e}") from e

        log.debug("connected to %s", url)

    def close(self) -> None:
        websocket = self.websocket
        if websocket is None:
            return
        websocket.close()

    def send(self, frame: str) -> None:
        websocket = self.websocket
        if websocket is None:
            raise TransportClosed('connection is not open')

        try:
            websocket.send(frame)
        except ConnectionClosed as e:
            raise TransportClosed(_describe(e)) from e
        except (OSError, WebSocketException) as e:
            raise TransportWriteError(str(e)) from e

    def recv(self) -> str:
        websocket = self.websocket
        if websocket is None:
            raise TransportClosed('connection is not open')

        try:
            message = websocket.recv()
        except ConnectionClosed as e:
            raise TransportClosed(_describe(e)) from e

        return as_text(message)

    @property
    def is_open(self) -> bool:
        return self.websocket is not None and self.websocket.state is State.OPEN

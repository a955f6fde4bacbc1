"""Transport interface.

This is the (small) contract that transport implementations should follow.
It lives outside :mod:`orion.protocol` so the protocol remains transport-agnostic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..endpoint import Endpoint


# Transport agnostic exceptions

class TransportError(Exception):
    """Base class for all transport-layer errors."""


class TransportConnectionError(TransportError):
    """The transport could not establish or maintain a connection."""


class ConnectError(TransportConnectionError):
    """The endpoint could not be dialed."""


class TransportClosed(TransportError):
    """The connection is closed, locally or by the peer."""


class TransportWriteError(TransportError):
    """A frame could not be written to an open connection."""


class Transport(ABC):
    """Minimal contract for a duplex, message-framed connection.

    One thread may block in :meth:`recv` while another calls :meth:`send`;
    implementations must support exactly that pairing (one reader, one
    writer) without further locking by the caller.
    """

    def __init__(self, endpoint: Endpoint):
        self.endpoint = endpoint

    @abstractmethod
    def open(self, timeout=None) -> None:
        """Establish the connection, raising :class:`ConnectError` on failure."""

    @abstractmethod
    def close(self) -> None:
        """Tear down the connection. Calling this more than once is harmless."""

    @abstractmethod
    def send(self, frame: str) -> None:
        """Write *frame* as one complete message."""

    @abstractmethod
    def recv(self) -> str:
        """Block until the next message arrives and return it as text.

        Raises :class:`TransportClosed` once the connection is gone.
        """

    @property
    def is_open(self) -> bool:
        """Whether the transport is currently connected."""
        return False

    def __repr__(self):
        return '<%s %s>' % (type(self).__name__, self.endpoint)


def as_text(message) -> str:
    """ Inbound messages are surfaced as text; binary frames are decoded as
        UTF-8, with undecodable bytes replaced.
    """

    if isinstance(message, str):
        return message
    return bytes(message).decode('utf-8', errors='replace')

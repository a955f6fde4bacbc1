"""Transport layer implementations.

The transport is chosen by the scheme of the endpoint URL:

    ws://, wss://     WebSocket (the native Orion transport)
    tcp://            ZeroMQ DEALER socket
"""

from __future__ import annotations

from .base import (
    ConnectError,
    Transport,
    TransportClosed,
    TransportConnectionError,
    TransportError,
    TransportWriteError,
)
from . import websocket
from . import zmq
from ..endpoint import Endpoint


backends = dict()

for _backend in (websocket, zmq):
    for _scheme in _backend.schemes:
        backends[_scheme] = _backend.Connection


def dial(endpoint, timeout=None, **options) -> Transport:
    """ Open a connection to *endpoint*, which may be a URL string or an
        :class:`orion.endpoint.Endpoint`. Any failure to connect, including
        an unsupported scheme, raises :class:`ConnectError`; nothing is
        retried. Additional keyword *options* are passed to the transport.
    """

    endpoint = Endpoint.parse(endpoint)

    try:
        backend = backends[endpoint.scheme]
    except KeyError:
        raise ConnectError(f"{endpoint}: unsupported scheme {endpoint.scheme!r}")

    connection = backend(endpoint, **options)
    connection.open(timeout)
    return connection

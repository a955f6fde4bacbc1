"""ZeroMQ duplex transport.

A DEALER socket connected to a single peer. ZeroMQ sockets are not
thread-safe, so the socket is owned by a dedicated I/O thread: outbound
frames are handed over through a queue plus an inproc PAIR signal, and
inbound messages are handed back through another queue. Reconnection is
disabled; once the peer goes away the connection stays closed.
"""

from __future__ import annotations

import atexit
import itertools
import logging
import queue
import threading
import weakref
from typing import Optional, Sequence

import zmq
from zmq.utils.monitor import recv_monitor_message

from ...endpoint import Endpoint
from ..base import (
    ConnectError,
    Transport,
    TransportClosed,
    TransportWriteError,
)
from .framing import from_frames, to_frames


log = logging.getLogger(__name__)

schemes = ('tcp',)

zmq_context = zmq.Context()

_monitored = zmq.EVENT_CONNECTED | zmq.EVENT_CLOSED | zmq.EVENT_CONNECT_RETRIED | zmq.EVENT_DISCONNECTED
_ids = itertools.count()
_open = weakref.WeakSet()

# Placed in the inbox once the connection is gone.
_closed_marker = object()


class PendingSend:
    """Synchronization between a sending thread and the I/O thread."""

    def __init__(self, frames: Sequence[bytes]):
        self.frames = frames
        self.error: Optional[Exception] = None
        self.done_event = threading.Event()

    def wait(self, timeout: Optional[float] = None) -> bool:
        return self.done_event.wait(timeout)

    def _complete(self, error: Optional[Exception] = None) -> None:
        self.error = error
        self.done_event.set()


class Connection(Transport):
    """Exchange frames with a ZeroMQ peer via a DEALER socket. Keyword
    *options* name additional socket options, for example ``SNDHWM=100``.
    """

    def __init__(self, endpoint: Endpoint, **options):
        Transport.__init__(self, endpoint)
        self.options = options

        self._sockopts = list()
        for name, value in options.items():
            try:
                option = getattr(zmq, name.upper())
            except AttributeError:
                raise ValueError("unknown ZeroMQ socket option: " + name)
            self._sockopts.append((option, value))

        self.socket = None
        self.reason = 'connection is not open'

        self._outbox = queue.SimpleQueue()
        self._inbox = queue.SimpleQueue()
        self._lock = threading.Lock()
        self._closed = threading.Event()
        self._monitor = None
        self._signal_rx = None
        self._signal_tx = None
        self._thread = None

    def open(self, timeout=None) -> None:
        if self.socket is not None:
            raise RuntimeError('connection already opened: ' + str(self.endpoint))

        address = self.endpoint.address
        log.debug("dialing %s", address)

        socket = zmq_context.socket(zmq.DEALER)
        socket.setsockopt(zmq.LINGER, 0)
        socket.setsockopt(zmq.RECONNECT_IVL, -1)
        for option, value in self._sockopts:
            socket.setsockopt(option, value)
        monitor = socket.get_monitor_socket(_monitored)

        try:
            socket.connect(address)
            self._await_connected(monitor, timeout)
        except (zmq.ZMQError, ConnectError) as e:
            socket.disable_monitor()
            monitor.close()
            socket.close()
            if isinstance(e, ConnectError):
                raise
            raise ConnectError(f"{address}: {e}") from e

        self.socket = socket
        self._monitor = monitor

        internal = f"inproc://orion.zmq.Connection:signal:{next(_ids)}"
        self._signal_rx = zmq_context.socket(zmq.PAIR)
        self._signal_rx.bind(internal)
        self._signal_tx = zmq_context.socket(zmq.PAIR)
        self._signal_tx.connect(internal)

        self.reason = 'connection closed'
        _open.add(self)

        self._thread = threading.Thread(target=self.run, daemon=True)
        self._thread.start()

        log.debug("connected to %s", address)

    def _await_connected(self, monitor, timeout) -> None:
        """Block until the monitor reports the outcome of the connect."""

        address = self.endpoint.address
        poller = zmq.Poller()
        poller.register(monitor, zmq.POLLIN)

        if timeout is None:
            wait = None
        else:
            wait = int(timeout * 1000)

        while True:
            if not poller.poll(wait):
                raise ConnectError(f"{address}: no connection within {timeout:.2f} sec")

            event = recv_monitor_message(monitor)
            if event['event'] == zmq.EVENT_CONNECTED:
                return
            if event['event'] in (zmq.EVENT_CLOSED, zmq.EVENT_CONNECT_RETRIED):
                raise ConnectError(f"{address}: connection refused")

    # --- called from any thread ---

    def send(self, frame: str) -> None:
        pending = PendingSend(to_frames(self.endpoint.path, frame))

        with self._lock:
            if self.socket is None or self._closed.is_set():
                raise TransportClosed(self.reason)
            self._outbox.put(pending)
            self._signal_tx.send(b"")

        pending.wait()
        if pending.error is None:
            return

        if isinstance(pending.error, TransportClosed):
            raise pending.error
        raise TransportWriteError(str(pending.error)) from pending.error

    def recv(self) -> str:
        if self.socket is None:
            raise TransportClosed(self.reason)

        message = self._inbox.get()
        if message is _closed_marker:
            # Leave the marker for any later caller.
            self._inbox.put(message)
            raise TransportClosed(self.reason)

        return message

    def close(self) -> None:
        self._shutdown('connection closed')

    @property
    def is_open(self) -> bool:
        return self.socket is not None and not self._closed.is_set()

    def _shutdown(self, reason: str) -> None:
        with self._lock:
            if self.socket is None or self._closed.is_set():
                return
            self.reason = reason
            self._closed.set()
            self._signal_tx.send(b"")

        self._inbox.put(_closed_marker)
        log.debug("%s: %s", self.endpoint.address, reason)

    # --- I/O thread ---

    def _handle_outgoing(self) -> None:
        # Clear one signal and send at most one frame.
        self._signal_rx.recv(flags=zmq.NOBLOCK)

        try:
            pending: PendingSend = self._outbox.get(block=False)
        except queue.Empty:
            return

        try:
            self.socket.send_multipart(pending.frames, flags=zmq.NOBLOCK)
        except zmq.ZMQError as e:
            pending._complete(e)
        else:
            pending._complete()

    def _handle_event(self) -> None:
        event = recv_monitor_message(self._monitor)
        if event['event'] == zmq.EVENT_DISCONNECTED:
            self._shutdown('connection closed by peer')

    def run(self) -> None:
        poller = zmq.Poller()
        poller.register(self.socket, zmq.POLLIN)
        poller.register(self._signal_rx, zmq.POLLIN)
        poller.register(self._monitor, zmq.POLLIN)

        while not self._closed.is_set():
            for active, _flag in poller.poll(1000):
                if active == self._signal_rx:
                    self._handle_outgoing()
                elif active == self.socket:
                    parts = self.socket.recv_multipart()
                    self._inbox.put(from_frames(parts))
                elif active == self._monitor:
                    self._handle_event()

        self._teardown()

    def _teardown(self) -> None:
        with self._lock:
            while True:
                try:
                    pending = self._outbox.get(block=False)
                except queue.Empty:
                    break
                pending._complete(TransportClosed(self.reason))

            self.socket.disable_monitor()
            self._monitor.close()
            self.socket.close()
            self._signal_tx.close()
            self._signal_rx.close()


def _cleanup() -> None:
    for connection in list(_open):
        connection.close()
        thread = connection._thread
        if thread is not None:
            thread.join(1)


atexit.register(_cleanup)

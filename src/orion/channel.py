""" The :class:`Channel` pairs an open transport with a background receiver.
    Commands are sent from the caller's thread; everything the service sends
    back is drained by a dedicated thread and handed to the sink, with no
    attempt to relate a reply to the command that prompted it.
"""

import logging
import threading

from . import protocol
from .sink import console
from .transport import TransportError


log = logging.getLogger(__name__)

# Prefixes of the lines written to the sink.

RECEIVED = 'Received: '
READ_ERROR = 'Read error: '
WRITE_ERROR = 'Write error: '
ENCODE_ERROR = 'JSON encode error: '
CONNECT_ERROR = 'Connection error: '


class Channel:
    """ Send commands over, and drain messages from, a single open
        :class:`orion.transport.Transport`.

        The receive half runs on a daemon thread once :func:`start` is
        called. It sets the :attr:`ready` event as soon as it is draining the
        connection; callers that want to see every reply should wait for it
        (see :func:`wait_ready`) before sending anything. The receive half has
        two states, listening and terminated: the first read failure,
        including the peer closing the connection, is reported to the sink
        and the thread exits for good, setting the :attr:`terminated` event.

        The send half is :func:`send`. Failures to encode or to write a
        command are reported to the sink and the command is dropped; nothing
        is retried, and nothing is raised to the caller.

        :ivar transport: The open connection; the receive thread is its only
            reader, and writers take turns via an internal lock.
        :ivar sink: Callable accepting one line of text.
        :ivar error: The exception that ended the receive half, if any.
    """

    def __init__(self, transport, sink=None):

        if sink is None:
            sink = console

        self.transport = transport
        self.sink = sink
        self.error = None

        self.ready = threading.Event()
        self.terminated = threading.Event()

        self._closed = False
        self._write_lock = threading.Lock()
        self.thread = None


    def __enter__(self):
        self.start()
        return self


    def __exit__(self, *exc_info):
        self.close()
        self.join(1)


    @property
    def endpoint(self):
        return self.transport.endpoint


    @property
    def alive(self):
        """ True until the channel is closed or the receive half terminates.
        """

        return self._closed == False and self.terminated.is_set() == False


    def start(self):
        """ Start the background receive thread. Calling this more than once
            has no further effect.
        """

        if self.thread is not None:
            return

        name = 'orion.Channel:%s' % (self.transport.endpoint)
        self.thread = threading.Thread(target=self.run, name=name)
        self.thread.daemon = True
        self.thread.start()


    def run(self):
        """ Body of the receive thread: report every inbound message until
            the first read failure.
        """

        log.debug("receiving from %s", self.transport.endpoint)
        self.ready.set()

        try:
            while True:
                try:
                    message = self.transport.recv()
                except TransportError as e:
                    self.error = e
                    self.report(READ_ERROR + str(e))
                    break
                except Exception as e:
                    log.exception("unexpected failure receiving from %s", self.transport.endpoint)
                    self.error = e
                    self.report(READ_ERROR + str(e))
                    break

                self.report(RECEIVED + message)
        finally:
            self.terminated.set()
            log.debug("stopped receiving from %s", self.transport.endpoint)


    def report(self, line):
        """ Hand one line of text to the sink. A failing sink is logged and
            otherwise ignored, so that it cannot stop the receive half.
        """

        try:
            self.sink(line)
        except Exception:
            log.warning("sink failed to accept %r", line, exc_info=True)


    def send(self, command):
        """ Encode *command* (a :class:`orion.protocol.Command`) and write it
            to the connection as a single frame. Returns True if the frame
            was written; False if the command could not be encoded or
            written, in which case the failure has already been reported to
            the sink. No reply is awaited.
        """

        try:
            frame = protocol.encode(command)
        except protocol.EncodeError as e:
            self.report(ENCODE_ERROR + str(e))
            return False

        with self._write_lock:
            try:
                self.transport.send(frame)
            except TransportError as e:
                self.report(WRITE_ERROR + str(e))
                return False

        log.debug("sent %s to %s", command.method, self.transport.endpoint)
        return True


    def wait_ready(self, timeout=None):
        """ Block until the receive half is draining the connection. Returns
            False if the *timeout* (in seconds) expired first.
        """

        return self.ready.wait(timeout)


    def wait(self, timeout=None):
        """ Block until the receive half terminates. Returns False if the
            *timeout* (in seconds) expired first.
        """

        return self.terminated.wait(timeout)


    def join(self, timeout=None):
        thread = self.thread
        if thread is not None:
            thread.join(timeout)


    def close(self):
        """ Close the connection. The receive half observes the closure as a
            read failure and terminates.
        """

        if self._closed:
            return

        self._closed = True
        self.transport.close()


# end of class Channel


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:

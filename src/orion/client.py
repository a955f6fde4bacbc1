""" Implementation of the top-level :func:`connect` and :func:`run` methods.
    These are intended to be the principal entry points for users
    interacting with an Orion service.
"""

import logging
import threading

from . import config
from . import transport
from .channel import Channel
from .endpoint import Endpoint


log = logging.getLogger(__name__)

_active = None
_active_lock = threading.Lock()


def _clear():
    """ Forget the cached :class:`Channel`, if any, and return it; this does
        not close the channel.
    """

    global _active

    with _active_lock:
        existing = _active
        _active = None

    return existing



def connect(endpoint=None, sink=None, timeout=None, **options):
    """ Connect to *endpoint* and return a started :class:`Channel`. The
        *endpoint* may be a URL or an :class:`orion.endpoint.Endpoint`; if
        it is not specified, :func:`orion.config.url` is used. Inbound
        messages and failure reports are written to *sink*, which defaults
        to standard output. The *timeout* bounds the dial, and defaults to
        :func:`orion.config.open_timeout`.

        At most one connection is opened per process. Once a dial has
        succeeded, calling :func:`connect` again for the same endpoint
        returns that same channel without dialing, even after it has been
        closed; asking for a different endpoint raises RuntimeError. There
        is no reconnection: check :attr:`Channel.alive` to tell whether the
        connection is still usable.

        If the endpoint cannot be reached :class:`orion.transport.ConnectError`
        is raised; nothing is retried.
    """

    global _active

    if endpoint is None:
        endpoint = config.url()

    endpoint = Endpoint.parse(endpoint)

    if timeout is None:
        timeout = config.open_timeout()

    with _active_lock:
        channel = _active

        if channel is not None:
            if channel.endpoint.url == endpoint.url:
                return channel
            raise RuntimeError('only one connection per process, already made to ' + str(channel.endpoint))

        connection = transport.dial(endpoint, timeout, **options)
        channel = Channel(connection, sink)
        channel.start()
        _active = channel

    ready_timeout = config.ready_timeout()

    if channel.wait_ready(ready_timeout) == False:
        log.warning("receiver for %s not ready after %.2f sec", endpoint, ready_timeout)

    return channel



def run(command, endpoint=None, sink=None, timeout=None):
    """ Connect, send a single *command*, and block until the connection
        ends, reporting every inbound message to the *sink* along the way.
        Returns the :class:`Channel`, already terminated. Connection failures
        raise :class:`orion.transport.ConnectError` before the command is
        encoded.
    """

    channel = connect(endpoint, sink, timeout)
    channel.send(command)
    channel.wait()
    return channel


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:

import queue
import socket
import threading

import pytest
import zmq
from websockets.exceptions import ConnectionClosed
from websockets.sync.server import serve

import orion


EXAMPLE_FRAME = '{"method":"insertMany","value":[{"id":1,"test":"test","cool":1},{"id":2,"test":"test2","cool":2}]}'
ROUTE = '/test_db@12345/users'


class Collector:
    """ A sink that keeps every line it receives, in order. Tests block via
        :func:`wait` until a given number of lines have arrived from a
        background thread.
    """

    def __init__(self):
        self.lines = list()
        self.condition = threading.Condition()


    def __call__(self, line):
        with self.condition:
            self.lines.append(line)
            self.condition.notify_all()


    def __len__(self):
        with self.condition:
            return len(self.lines)


    def wait(self, count=1, timeout=None):
        with self.condition:
            return self.condition.wait_for(lambda: len(self.lines) >= count, timeout)


    def matching(self, prefix):
        with self.condition:
            return [line for line in self.lines if line.startswith(prefix)]



class WebSocketPeer:
    """ Stand-in for an Orion service. Every frame received is kept in
        *received*, the request path of every connection in *paths*.
        Behavior is tuned per test: *greeting* messages are sent as soon as
        a client connects, *hangup* closes the connection right after the
        greeting, and *reply*, if set, maps each received frame to a
        response.
    """

    def __init__(self):
        self.received = Collector()
        self.paths = list()
        self.greeting = list()
        self.hangup = False
        self.reply = None
        self.port = None


    def url(self, route=ROUTE):
        return 'ws://127.0.0.1:%d%s' % (self.port, route)


    def handler(self, websocket):

        self.paths.append(websocket.request.path)

        for message in self.greeting:
            websocket.send(message)

        if self.hangup:
            websocket.close()
            return

        try:
            for frame in websocket:
                self.received(frame)
                if self.reply is not None:
                    websocket.send(self.reply(frame))
        except ConnectionClosed:
            pass



class MemoryTransport(orion.transport.Transport):
    """ In-process transport: inbound messages are queued by the test via
        :func:`feed`, outbound frames are kept in *sent*. An exception fed
        to the inbox is raised by :func:`recv` in place of a message.
    """

    def __init__(self, url='ws://memory' + ROUTE):
        orion.transport.Transport.__init__(self, orion.Endpoint.parse(url))
        self.inbox = queue.SimpleQueue()
        self.sent = list()
        self.closed = False
        self.write_error = None


    def open(self, timeout=None):
        pass


    def feed(self, message):
        self.inbox.put(message)


    def hangup(self):
        self.closed = True
        self.inbox.put(None)


    def close(self):
        if self.closed:
            return
        self.hangup()


    def send(self, frame):
        if self.closed:
            raise orion.transport.TransportClosed('connection closed')
        if self.write_error is not None:
            raise self.write_error
        self.sent.append(frame)


    def recv(self):
        message = self.inbox.get()
        if message is None:
            self.inbox.put(None)
            raise orion.transport.TransportClosed('connection closed')
        if isinstance(message, Exception):
            raise message
        return message


    @property
    def is_open(self):
        return not self.closed



@pytest.fixture(autouse=True)
def clean_state():

    orion.config.reset()
    yield

    channel = orion.client._clear()
    if channel is not None:
        channel.close()
        channel.join(2)

    orion.config.reset()


@pytest.fixture
def ws_peer():

    peer = WebSocketPeer()
    server = serve(peer.handler, '127.0.0.1', 0)
    peer.port = server.socket.getsockname()[1]

    thread = threading.Thread(target=server.serve_forever)
    thread.daemon = True
    thread.start()

    yield peer

    server.shutdown()
    thread.join(5)


@pytest.fixture
def unreachable_url():

    # Bind to get a free port, then release it; nothing listens there.
    probe = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    probe.bind(('127.0.0.1', 0))
    port = probe.getsockname()[1]
    probe.close()

    return 'ws://127.0.0.1:%d%s' % (port, ROUTE)


@pytest.fixture
def memory_transport():
    return MemoryTransport()


@pytest.fixture
def router():

    context = zmq.Context.instance()
    router = context.socket(zmq.ROUTER)
    router.setsockopt(zmq.LINGER, 0)
    port = router.bind_to_random_port('tcp://127.0.0.1')

    yield router, port

    router.close()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:

""" Command-line entry point: connect to an Orion endpoint, send one command,
    and print whatever the service sends back until the connection ends.

    Without ``--method`` the example command is sent::

        {"method":"insertMany","value":[{"id":1,"test":"test","cool":1},{"id":2,"test":"test2","cool":2}]}
"""

import argparse
import logging
import threading

from . import client
from . import config
from . import json
from . import protocol
from . import sink as sinks
from .channel import CONNECT_ERROR, RECEIVED
from .transport import ConnectError


log = logging.getLogger(__name__)


def example_command():
    """ The command sent when none is specified on the command line.
    """

    records = list()
    records.append({'id': 1, 'test': 'test', 'cool': 1})
    records.append({'id': 2, 'test': 'test2', 'cool': 2})

    return protocol.factory.insert_many(records)



def timeout(text):
    """ Argument type for the timeout options.
    """

    try:
        return config.seconds(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError('invalid timeout %r: %s' % (text, e))



def parse_arguments(args=None):

    parser = argparse.ArgumentParser(prog='orion',
        description='Send one command to an Orion service and print its replies.')

    parser.add_argument('--url', default=None,
        help='endpoint to connect to, default %s (or $ORION_URL)' % (config.DEFAULT_URL))
    parser.add_argument('--method', default=None,
        help='command to send, for example insertMany or search')
    parser.add_argument('--value', default=None,
        help='JSON payload for the command')
    parser.add_argument('--open-timeout', type=timeout, default=None,
        help='seconds to wait for the connection (or $ORION_OPEN_TIMEOUT)')
    parser.add_argument('--ready-timeout', type=timeout, default=None,
        help='seconds to wait for the receiver to start (or $ORION_READY_TIMEOUT)')
    parser.add_argument('--once', action='store_true',
        help='disconnect after the first message received after the send')
    parser.add_argument('-v', '--verbose', action='store_true',
        help='log connection activity to stderr')

    arguments = parser.parse_args(args)

    if arguments.value is not None and arguments.method is None:
        parser.error('--value requires --method')

    # Malformed environment settings are reported as argument errors.

    try:
        if arguments.open_timeout is None:
            config.open_timeout()
        if arguments.ready_timeout is None:
            config.ready_timeout()
    except ValueError as e:
        parser.error(str(e))

    if arguments.method is None:
        arguments.command = example_command()
    else:
        value = None
        if arguments.value is not None:
            try:
                value = json.loads(arguments.value)
            except json.errors as e:
                parser.error('--value is not valid JSON: %s' % (e))

        arguments.command = protocol.command.command(arguments.method, value)

    return arguments



def main(args=None, sink=None):
    """ Run the command-line client; *args* defaults to ``sys.argv[1:]``.
        Returns the process exit status: 1 if the endpoint could not be
        reached, 130 if interrupted, otherwise 0 once the connection ends.
    """

    arguments = parse_arguments(args)

    if arguments.verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    logging.basicConfig(level=level, format='%(asctime)s %(name)s %(levelname)s: %(message)s')

    if sink is None:
        sink = sinks.console

    if arguments.ready_timeout is not None:
        config.ready_timeout(arguments.ready_timeout)

    sent = threading.Event()
    replied = threading.Event()

    def forward(line):
        sink(line)
        if sent.is_set() and line.startswith(RECEIVED):
            replied.set()

    try:
        channel = client.connect(arguments.url, forward, arguments.open_timeout)
    except ConnectError as e:
        sink(CONNECT_ERROR + str(e))
        return 1

    try:
        sent.set()
        channel.send(arguments.command)

        while channel.wait(0.1) == False:
            if arguments.once and replied.is_set():
                channel.close()

    except KeyboardInterrupt:
        channel.close()
        return 130

    return 0


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:

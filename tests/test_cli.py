import pytest

import orion
from orion import cli
from orion.channel import CONNECT_ERROR, READ_ERROR, RECEIVED

from conftest import EXAMPLE_FRAME, Collector


def test_default_command():

    arguments = cli.parse_arguments([])
    assert arguments.url is None
    assert arguments.once == False
    assert orion.protocol.encode(arguments.command) == EXAMPLE_FRAME


def test_explicit_command():

    arguments = cli.parse_arguments(['--method', 'search', '--value', '{"id": 2}'])
    assert isinstance(arguments.command, orion.protocol.Search)
    assert arguments.command.query == {'id': 2}

    arguments = cli.parse_arguments(['--method', 'get', '--value', 'false'])
    assert isinstance(arguments.command, orion.protocol.Get)
    assert arguments.command.flat == False

    # Without --value the payload is null, sent as given.

    arguments = cli.parse_arguments(['--method', 'get'])
    assert orion.protocol.encode(arguments.command) == '{"method":"get","value":null}'

    arguments = cli.parse_arguments(['--method', 'compact', '--value', '[1, 2]'])
    assert isinstance(arguments.command, orion.protocol.Opaque)
    assert arguments.command.value == [1, 2]


def test_invalid_arguments():

    with pytest.raises(SystemExit):
        cli.parse_arguments(['--value', '{}'])

    with pytest.raises(SystemExit):
        cli.parse_arguments(['--method', 'search', '--value', '{not json'])


def test_invalid_timeouts(monkeypatch, capsys):

    for option in ('--open-timeout', '--ready-timeout'):
        for value in ('-1', 'soon', 'nan'):
            with pytest.raises(SystemExit) as raised:
                cli.parse_arguments([option, value])
            assert raised.value.code == 2

    capsys.readouterr()

    monkeypatch.setenv('ORION_OPEN_TIMEOUT', 'soon')

    with pytest.raises(SystemExit) as raised:
        cli.main([])

    assert raised.value.code == 2
    assert 'ORION_OPEN_TIMEOUT' in capsys.readouterr().err

    # An explicit option takes the place of the environment.

    arguments = cli.parse_arguments(['--open-timeout', '1.5'])
    assert arguments.open_timeout == 1.5

    orion.config.reset()
    monkeypatch.delenv('ORION_OPEN_TIMEOUT')
    monkeypatch.setenv('ORION_READY_TIMEOUT', '-2')

    with pytest.raises(SystemExit):
        cli.parse_arguments([])


def test_unreachable_is_fatal(unreachable_url, monkeypatch):
    """ A dial failure ends the run with a single report, before any command
        is encoded or sent.
    """

    def encode(command):
        raise AssertionError('nothing should be encoded')

    monkeypatch.setattr(orion.protocol, 'encode', encode)

    collector = Collector()
    status = cli.main(['--url', unreachable_url], sink=collector)

    assert status == 1
    assert len(collector) == 1
    assert collector.lines[0].startswith(CONNECT_ERROR)


def test_once(ws_peer):

    ws_peer.reply = lambda frame: '{"type":"insertMany","message":"insertMany()"}'

    collector = Collector()
    status = cli.main(['--url', ws_peer.url(), '--once', '--ready-timeout', '2'], sink=collector)

    assert status == 0
    assert ws_peer.received.wait(1, 5) == True
    assert ws_peer.received.lines == [EXAMPLE_FRAME]

    received = collector.matching(RECEIVED)
    assert RECEIVED + '{"type":"insertMany","message":"insertMany()"}' in received
    assert orion.config.ready_timeout() == 2.0


def test_runs_until_peer_hangs_up(ws_peer):

    ws_peer.greeting = ['bye']
    ws_peer.hangup = True

    collector = Collector()
    status = cli.main(['--url', ws_peer.url()], sink=collector)

    assert status == 0
    assert RECEIVED + 'bye' in collector.lines
    assert len(collector.matching(READ_ERROR)) == 1


def test_environment_url(ws_peer, monkeypatch):

    monkeypatch.setenv('ORION_URL', ws_peer.url())
    ws_peer.hangup = True

    status = cli.main([], sink=Collector())

    assert status == 0
    assert ws_peer.paths == ['/test_db@12345/users']


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:

""" End-to-end exercises over a real ZeroMQ socket pair, using the toy
    server started by the toy_server() fixture in conftest.py.
"""

import pytest

import graphwire
from graphwire import TransactionState
from graphwire.errors import AuthenticationFailed, ServerFailure, TransportFailure
from graphwire.protocol import factory
from graphwire.transport.base import TransportConnectionError, TransportTimeout
from graphwire.transport.zmq.request import Stream, parse_address


def test_parse_address():

    assert parse_address('localhost:7000') == ('localhost', 7000)
    assert parse_address('tcp://db.example.com:7001') == ('db.example.com', 7001)
    assert parse_address('[::1]:7002') == ('::1', 7002)
    assert parse_address('localhost') == ('localhost', 7687)

    with pytest.raises(TransportConnectionError):
        parse_address('localhost:bolt')


def test_return_one(graph):

    rows = list()

    with graph.connect() as connection:
        assert connection.server == 'Toy/1.0'

        result = connection.run('RETURN 1', consumer=rows.append)
        connection.sync()

    assert rows == [[1]]
    assert result.success
    assert result.keys == ('1',)


def test_bad_password(toy_server):

    address = '127.0.0.1:%d' % (toy_server.port)

    with pytest.raises(AuthenticationFailed):
        graphwire.connect(address, 'neo4j', 'guess', timeout=5)


def test_pipelined_transaction(graph, toy_server):

    rows = list()

    with graph.connect() as connection:
        connection.begin()
        connection.run('CREATE (a:Person {name: $name})', {'name': 'Alice'})
        connection.run('CREATE (a:Person {name: $name})', {'name': 'Bob'})
        connection.run('UNWIND range(1, 3) AS n RETURN n', consumer=rows.append)

        assert connection.pending == 8
        assert {'name': 'Alice'} not in toy_server.committed

        connection.commit()

        assert connection.state is TransactionState.IDLE
        assert connection.pending == 0

    assert rows == [[1], [2], [3]]
    assert {'name': 'Alice'} in toy_server.committed
    assert {'name': 'Bob'} in toy_server.committed


def test_rolled_back_transaction(graph, toy_server):

    with graph.connect() as connection:
        with pytest.raises(KeyError):
            with connection.transaction():
                connection.run('CREATE (a:Person {name: $name})', {'name': 'Carol'})
                raise KeyError('abandon')

        assert connection.state is TransactionState.IDLE

    assert {'name': 'Carol'} not in toy_server.committed


def test_failure_then_reset(graph):

    with graph.connect() as connection:
        broken = connection.run('RETRUN 1')
        skipped = connection.run('RETURN 1')
        connection.sync()

        assert broken.summary.failed
        assert broken.summary.code == 'Neo.ClientError.Statement.SyntaxError'
        assert skipped.summary.was_ignored
        assert connection.invalidated

        connection.reset()
        assert connection.invalidated == False

        rows = list()
        connection.run('RETURN $x', {'x': 42}, consumer=rows.append)
        connection.sync()

        assert rows == [[42]]


def test_failed_commit_then_rollback(graph, toy_server):

    with graph.connect() as connection:
        connection.begin()
        connection.run('NOT A STATEMENT')

        with pytest.raises(ServerFailure):
            connection.commit()

        connection.rollback()

        # Auto-commit again: this must not land in the abandoned transaction.
        connection.run('CREATE (a:Person {name: $name})', {'name': 'Dave'})
        connection.sync()

    assert {'name': 'Dave'} in toy_server.committed
    assert all({'name': 'Dave'} not in pending for pending in toy_server.transactions.values())


def test_values_round_trip(graph):

    value = [1, -2, 'text', None, True, 1.5, {'nested': ['a', 2]}]
    rows = list()

    with graph.connect() as connection:
        connection.run('RETURN $x', {'x': value}, consumer=rows.append)
        connection.sync()

        with pytest.raises(TypeError):
            connection.run('RETURN $x', {'x': b'\x00\x01'})

        assert connection.pending == 0

    assert rows == [[value]]


def test_receive_timeout(toy_server):

    stream = Stream('127.0.0.1', toy_server.port, timeout=5)

    try:
        with pytest.raises(TransportTimeout):
            stream.receive_next(timeout=0.05)

        stream.send(factory.reset())
        stream.flush()
        response = stream.receive_next()
        assert response.is_summary
    finally:
        stream.close()

    assert stream.is_open == False
    stream.close()


def test_nothing_listening():
    """ Connecting a DEALER socket never fails outright; a dead server
        shows up as a handshake that is never answered.
    """

    with pytest.raises(TransportFailure) as caught:
        graphwire.connect('127.0.0.1:17786', 'neo4j', 'secret', timeout=0.2)

    assert isinstance(caught.value.__cause__, TransportTimeout)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:

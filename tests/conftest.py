import pytest

import graphwire

import scripted
import toyserver


@pytest.fixture
def transport():
    """ A scripted transport primed to accept the handshake. """

    return scripted.ScriptedTransport(scripted.success(server='Scripted/1.0'))


@pytest.fixture
def connection(transport):

    connection = graphwire.Connection(transport, 'neo4j', 'secret')

    # The handshake is not interesting to individual tests.
    transport.sent = list()
    transport.flushes = 0

    yield connection

    connection.close()


@pytest.fixture(scope="module")
def toy_server():

    server = toyserver.ToyServer('127.0.0.1')

    yield server

    server.stop()


@pytest.fixture
def graph(toy_server):
    return graphwire.Graph('127.0.0.1:%d' % (toy_server.port), 'neo4j', 'secret', timeout=5)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:

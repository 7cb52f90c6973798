import pytest

from graphwire.errors import ConnectionClosed, ProtocolViolation, TransportFailure
from graphwire.protocol import factory, fields
from graphwire.protocol.handler import Capture, Silent, Streaming
from graphwire.transport.base import TransportConnectionError
from graphwire.transport.session import Pipeline

from scripted import ScriptedTransport, failure, ignored, record, success


def test_enqueue_does_not_touch_transport():

    transport = ScriptedTransport()
    pipeline = Pipeline(transport)

    pipeline.enqueue(factory.run('RETURN 1'), Capture())
    pipeline.enqueue(factory.pull_all(), Streaming())

    assert transport.queued == []
    assert transport.sent == []
    assert transport.flushes == 0
    assert pipeline.pending == 2
    assert pipeline.unsent == 2


def test_flush_routes_in_order():

    transport = ScriptedTransport(
        success(fields=['n']),
        record(1),
        record(2),
        success(),
        failure('Neo.ClientError.Statement.SyntaxError', 'bad'),
    )
    pipeline = Pipeline(transport)

    header = Capture()
    rows = list()
    stream = Streaming(rows.append)
    last = Capture()

    pipeline.enqueue(factory.run('UNWIND [1, 2] AS n RETURN n'), header)
    pipeline.enqueue(factory.pull_all(), stream)
    pipeline.enqueue(factory.run('garbage'), last)

    dispatched = pipeline.flush()

    assert dispatched == 3
    assert transport.flushes == 1
    assert transport.signatures() == [fields.RUN, fields.PULL_ALL, fields.RUN]

    assert header.summary.metadata == {'fields': ['n']}
    assert rows == [[1], [2]]
    assert stream.summary.succeeded
    assert last.summary.failed
    assert last.summary.code == 'Neo.ClientError.Statement.SyntaxError'

    assert pipeline.pending == 0
    assert pipeline.head() is None
    assert transport.script == []


def test_flush_with_nothing_queued():

    transport = ScriptedTransport()
    pipeline = Pipeline(transport)

    assert pipeline.flush() == 0
    assert transport.flushes == 0


def test_listener_sees_every_summary():

    seen = list()
    transport = ScriptedTransport(success(), ignored(), failure('X', 'y'))
    pipeline = Pipeline(transport, listener=seen.append)

    for _ in range(3):
        pipeline.enqueue(factory.reset(), Silent())

    pipeline.flush()

    assert [summary.signature for summary in seen] == [fields.SUCCESS, fields.IGNORED, fields.FAILURE]


def test_requests_enqueued_during_flush_are_deferred():

    transport = ScriptedTransport(success(), success())
    pipeline = Pipeline(transport)

    follow_up = Capture()

    def on_complete(summary):
        pipeline.enqueue(factory.reset(), follow_up)

    pipeline.enqueue(factory.discard_all(), Streaming(on_complete=on_complete))

    assert pipeline.flush() == 1
    assert transport.signatures() == [fields.DISCARD_ALL]
    assert follow_up.summary is None
    assert pipeline.pending == 1
    assert pipeline.unsent == 1

    assert pipeline.flush() == 1
    assert transport.signatures() == [fields.DISCARD_ALL, fields.RESET]
    assert follow_up.summary.succeeded
    assert pipeline.pending == 0


def test_flush_from_handler():

    transport = ScriptedTransport(success(), success(), success())
    pipeline = Pipeline(transport)

    def on_complete(summary):
        pipeline.enqueue(factory.reset(), Capture())
        pipeline.flush()

    stranded = Capture()
    pipeline.enqueue(factory.discard_all(), Streaming(on_complete=on_complete))
    pipeline.enqueue(factory.reset(), stranded)

    with pytest.raises(RuntimeError):
        pipeline.flush()

    assert transport.received == 1
    assert transport.signatures() == [fields.DISCARD_ALL, fields.RESET]
    assert stranded.summary.code == fields.PROTOCOL_VIOLATION
    assert pipeline.closed


def test_transport_failure_mid_flush():
    """ Three requests go out, one summary comes back, then the network
        fails. The two handlers still waiting must each get exactly one
        synthetic failure, and the pipeline must refuse further work.
    """

    error = TransportConnectionError('connection reset by peer')
    transport = ScriptedTransport(success(), error)
    pipeline = Pipeline(transport)

    handlers = [Capture(), Capture(), Capture()]
    for handler in handlers:
        pipeline.enqueue(factory.reset(), handler)

    with pytest.raises(TransportFailure) as caught:
        pipeline.flush()

    assert caught.value.__cause__ is error

    first, second, third = handlers
    assert first.summary.succeeded
    assert first.summary.synthetic == False

    for handler in (second, third):
        assert handler.summary.failed
        assert handler.summary.synthetic == True
        assert handler.summary.code == fields.TRANSPORT_FAILURE

    assert pipeline.closed
    assert pipeline.pending == 0
    assert transport.is_open == False

    with pytest.raises(ConnectionClosed):
        pipeline.enqueue(factory.reset(), Capture())

    with pytest.raises(ConnectionClosed):
        pipeline.flush()


def test_protocol_violation_closes():

    transport = ScriptedTransport(success(), record(1), success(), success())
    pipeline = Pipeline(transport)

    first = Capture()
    commit = Capture()
    last = Silent()
    stranded = Capture()

    pipeline.enqueue(factory.run('BEGIN'), first)
    pipeline.enqueue(factory.run('COMMIT'), commit)
    pipeline.enqueue(factory.discard_all(), last)

    with pytest.raises(ProtocolViolation):
        pipeline.flush()

    assert first.summary.succeeded
    assert commit.summary.failed
    assert commit.summary.code == fields.PROTOCOL_VIOLATION
    assert pipeline.closed
    assert transport.is_open == False

    with pytest.raises(ConnectionClosed):
        pipeline.enqueue(factory.reset(), stranded)


def test_consumer_error_closes():

    transport = ScriptedTransport(record(1), success())
    pipeline = Pipeline(transport)

    def consumer(values):
        raise KeyError('boom')

    pipeline.enqueue(factory.pull_all(), Streaming(consumer))

    with pytest.raises(KeyError):
        pipeline.flush()

    assert pipeline.closed


def test_discard():

    transport = ScriptedTransport()
    pipeline = Pipeline(transport)

    handlers = [Capture(), Capture()]
    for handler in handlers:
        pipeline.enqueue(factory.pull_all(), handler)

    assert pipeline.discard() == 2
    assert pipeline.pending == 0
    assert transport.sent == []

    for handler in handlers:
        assert handler.summary.was_ignored
        assert handler.summary.synthetic


def test_close():

    transport = ScriptedTransport()
    pipeline = Pipeline(transport)

    handler = Capture()
    pipeline.enqueue(factory.reset(), handler)

    pipeline.close()
    pipeline.close()

    assert pipeline.closed
    assert handler.summary.was_ignored
    assert transport.is_open == False


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:

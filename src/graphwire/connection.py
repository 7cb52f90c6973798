""" The :class:`Connection` is the transaction-oriented face of a single
    server session. Each public method turns into a short, fixed sequence of
    protocol requests on the connection's :class:`Pipeline`; only the methods
    that need a definitive outcome (commit, rollback, reset, sync) wait for
    the server.

    A typical exchange pipelines everything up to the commit::

        connection.begin()
        connection.run("CREATE (a:Person {name: $name})", {'name': 'Alice'})
        connection.run("MATCH (a:Person) RETURN a.name", consumer=print)
        connection.commit()

    A Connection is not thread-safe. Callers sharing one across threads must
    provide their own locking.
"""

import contextlib
import enum

import structlog

from . import config
from .errors import (
    AuthenticationFailed,
    ConnectionClosed,
    ServerFailure,
    TransactionStateError,
)
from .protocol import factory
from .protocol.handler import Capture, Silent, Streaming
from .transport.session import Pipeline


logger = structlog.get_logger()


class TransactionState(enum.Enum):
    IDLE = 'Idle'
    ACTIVE = 'Active'



class Result:
    """ Handle on the outcome of :func:`Connection.run`. Nothing is known
        until a flush has dispatched the statement's responses; after that
        the column names, the number of records streamed, and the summary
        are available here.
    """

    def __init__(self, statement, header, stream):

        self.statement = statement
        self._header = header
        self._stream = stream


    def __repr__(self):
        return 'Result(%r, %r)' % (self.statement, self.summary)


    @property
    def done(self):
        return self._stream.done

    @property
    def keys(self):
        return self._stream.keys

    @property
    def count(self):
        return self._stream.count

    @property
    def summary(self):
        return self._stream.summary

    @property
    def success(self):
        summary = self._stream.summary
        return summary is not None and summary.succeeded


    def raise_for_failure(self):
        """ Raise :class:`ServerFailure` if the statement failed. Raises
            RuntimeError if the statement has not been dispatched yet.
        """

        if self._stream.summary is None:
            raise RuntimeError('result is not available until the connection is flushed')

        self._stream.summary.raise_for_failure()


# end of class Result



class Connection:
    """ A single authenticated session over an open *transport*. The
        handshake happens here: the INIT request is flushed immediately, and
        :class:`AuthenticationFailed` is raised, with the transport closed,
        if the server rejects the credentials.

        :ivar state: The local :class:`TransactionState`.
        :ivar invalidated: True if the server reported a failure that has
            not yet been cleared with :func:`rollback` or :func:`reset`.
        :ivar unresolved: True if a COMMIT was not confirmed by the server, which
            may still hold that transaction open; the next :func:`rollback`
            rolls it back even though the local state is Idle.
        :ivar server: The server agent string from the handshake, if any.
    """

    def __init__(self, transport, user, password, settings=None):

        if settings is None:
            settings = config.Settings()

        self.settings = settings
        self.state = TransactionState.IDLE
        self.invalidated = False
        self.unresolved = False
        self.failure = None

        self.pipeline = Pipeline(transport, listener=self._observe)

        handshake = Capture()
        self.pipeline.enqueue(factory.init(settings.user_agent, user, password), handshake)
        self.pipeline.flush()

        if handshake.summary.failed:
            self.pipeline.close()
            logger.warning("Authentication failed", user=user, code=handshake.summary.code)
            raise AuthenticationFailed(handshake.summary.code, handshake.summary.message)

        self.invalidated = False
        self.failure = None
        self.server = handshake.summary.metadata.get('server')

        logger.info("Connection established", user=user, server=self.server)


    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


    def __repr__(self):
        return 'Connection(state=%s, pending=%d, closed=%r)' % (self.state.value, self.pipeline.pending, self.closed)


    @property
    def closed(self):
        return self.pipeline.closed

    @property
    def pending(self):
        """ Number of requests not yet answered by the server. """
        return self.pipeline.pending


    def _observe(self, summary):
        """ Every summary read from the wire passes through here. A failure
            leaves the server refusing further work until it is
            acknowledged, whether or not a transaction is active.
        """

        if summary.failed:
            if self.failure is None:
                self.failure = summary
            self.invalidated = True


    def begin(self):
        """ Open an explicit transaction. Nothing is sent until the next
            flush; statements run after this call are pipelined behind the
            BEGIN.
        """

        if self.state is TransactionState.ACTIVE:
            raise TransactionStateError('a transaction is already active')

        if self.invalidated:
            raise TransactionStateError('the server reported a failure; call reset() or rollback() first')

        if self.unresolved:
            raise TransactionStateError('the last commit was not confirmed; call rollback() or reset() first')

        self.pipeline.enqueue(factory.run('BEGIN'), Silent())
        self.pipeline.enqueue(factory.discard_all(), Silent())
        self.state = TransactionState.ACTIVE


    def run(self, statement, parameters=None, consumer=None, on_complete=None):
        """ Queue a *statement* with its *parameters*, and a PULL_ALL to
            stream its records. Each record, a list of values, is handed to
            *consumer* as it arrives; *on_complete* receives the final
            :class:`Summary`. Valid in any state: outside an explicit
            transaction the server commits the statement on its own.

            Returns a :class:`Result` that fills in once flushed.
        """

        request = factory.run(statement, parameters)

        header = Capture()
        stream = Streaming(consumer, on_complete, header=header)

        self.pipeline.enqueue(request, header)
        self.pipeline.enqueue(factory.pull_all(), stream)

        return Result(statement, header, stream)


    def commit(self):
        """ Commit the active transaction and wait for the outcome. Raises
            :class:`ServerFailure` if the server did not commit; the local
            state is Idle either way.
        """

        if self.state is TransactionState.IDLE:
            raise TransactionStateError('no active transaction to commit')

        if self.invalidated:
            raise TransactionStateError('the transaction failed; call rollback() or reset()')

        outcome = Capture()
        self.pipeline.enqueue(factory.run('COMMIT'), outcome)
        self.pipeline.enqueue(factory.discard_all(), Silent())

        try:
            self.pipeline.flush()
        finally:
            self.state = TransactionState.IDLE

        if not outcome.summary.succeeded:
            self.unresolved = True

        self._raise_unless_succeeded(outcome.summary, 'COMMIT')


    def rollback(self):
        """ Roll back the active transaction and wait for the outcome. If
            the server reported a failure since the last acknowledgement,
            the failure is acknowledged first.

            A transaction whose COMMIT was not confirmed is rolled back here
            too. With no transaction and nothing to acknowledge this is a
            no-op.
        """

        if self.state is TransactionState.IDLE and not (self.invalidated or self.unresolved):
            logger.debug("rollback() with no active transaction")
            return

        if self.invalidated:
            self.invalidated = False
            self.failure = None
            self.pipeline.enqueue(factory.ack_failure(), Capture())

        outcome = None
        if self.state is TransactionState.ACTIVE or self.unresolved:
            self.unresolved = False
            outcome = Capture()
            self.pipeline.enqueue(factory.run('ROLLBACK'), outcome)
            self.pipeline.enqueue(factory.discard_all(), Silent())

        try:
            self.pipeline.flush()
        finally:
            self.state = TransactionState.IDLE

        if outcome is not None:
            outcome.summary.raise_for_failure()


    def reset(self):
        """ Return the session to a clean state. Requests still waiting to
            be sent are dropped (their handlers see an IGNORED summary), the
            server discards any transaction and failure, and the local state
            becomes Idle.

            On a closed connection the local state is still cleared before
            :class:`ConnectionClosed` is raised.
        """

        self.state = TransactionState.IDLE
        self.pipeline.discard()

        if self.pipeline.closed:
            raise ConnectionClosed('cannot reset: connection is closed')

        self.invalidated = False
        self.unresolved = False
        self.failure = None

        outcome = Capture()
        self.pipeline.enqueue(factory.reset(), outcome)
        self.pipeline.flush()

        outcome.summary.raise_for_failure()


    def sync(self):
        """ Send everything queued and wait for every response. Returns the
            number of requests dispatched.
        """

        return self.pipeline.flush()


    def close(self):
        self.pipeline.close()
        self.state = TransactionState.IDLE


    @contextlib.contextmanager
    def transaction(self):
        """ Run the body of a ``with`` block in an explicit transaction:
            commit when the block completes, roll back if it raises. A
            commit the server refuses, or a body whose statements failed, is
            rolled back before the :class:`ServerFailure` propagates.
        """

        self.begin()

        try:
            yield self
        except BaseException:
            if self.state is TransactionState.ACTIVE and not self.closed:
                self.rollback()
            raise

        if self.state is not TransactionState.ACTIVE:
            return

        # A statement in the body failed; the server will not commit.
        if self.invalidated:
            failure = self.failure
            self.rollback()
            raise ServerFailure(failure.code, failure.message)

        try:
            self.commit()
        except ServerFailure:
            if not self.closed:
                self.rollback()
            raise


    def _raise_unless_succeeded(self, summary, what):

        if summary.succeeded:
            return

        if summary.failed:
            raise ServerFailure(summary.code, summary.message)

        # IGNORED: an earlier request in the same batch failed.

        failure = self.failure
        if failure is not None:
            raise ServerFailure(failure.code, failure.message)

        raise ServerFailure('Graphwire.Ignored', '%s was ignored by the server' % (what))


# end of class Connection


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:

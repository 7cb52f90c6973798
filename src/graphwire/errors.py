""" Exceptions raised by the session and transaction layers. Errors raised
    by a transport backend live in :mod:`graphwire.transport.base`; the
    dispatcher wraps those in :class:`TransportFailure` before they reach
    the caller.
"""


class GraphwireError(Exception):
    """ Base class for all errors raised above the transport layer.
    """


class ConnectionClosed(GraphwireError):
    """ The connection was closed, either explicitly or because of a fatal
        error, and can no longer accept requests.
    """


class ProtocolViolation(GraphwireError):
    """ A response arrived that the receiving handler cannot accept, such as
        a record for a control message. Request/response ordering can no
        longer be trusted once this is raised.
    """


class TransportFailure(GraphwireError):
    """ The transport failed in the middle of a flush. """


class TransactionStateError(GraphwireError):
    """ An operation was invoked in a transaction state that does not
        allow it; for example, a commit with no active transaction.
    """


class ServerFailure(GraphwireError):
    """ The server answered a request with a FAILURE summary. The *code* and
        *message* are exactly as reported by the server.
    """

    def __init__(self, code, message):
        self.code = code
        self.message = message
        super().__init__('%s: %s' % (code, message))


class AuthenticationFailed(ServerFailure):
    """ The server rejected the credentials offered during the handshake.
    """


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:

""" Python client for a pipelined graph database wire protocol. Statements
    and transaction control requests are queued locally and sent in batches;
    responses are routed back, strictly in order, to the handler that issued
    each request.
"""

# Submodules used by multiple other components.

from . import errors
from . import config
from . import protocol
from . import transport

# Primary public-facing interfaces.

from .connection import Connection, Result, TransactionState
from .graph import Graph, connect
from .protocol import parameters
from .errors import (
    GraphwireError,
    AuthenticationFailed,
    ConnectionClosed,
    ProtocolViolation,
    ServerFailure,
    TransactionStateError,
    TransportFailure,
)

__version__ = config.version

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:

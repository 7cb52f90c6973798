""" Implementation of the top-level :func:`connect` method, and the
    :class:`Graph` that holds everything needed to open a connection. This
    is intended to be the principal entry point for users.
"""

from . import config
from . import transport
from .connection import Connection


class Graph:
    """ Connection details for a single server: its *address*, given as
        ``host:port``, and the credentials to authenticate with. Additional
        keyword arguments are :class:`graphwire.config.Settings` overrides.

        Each call to :func:`connect` opens a new, independent
        :class:`Connection`; nothing is shared or pooled between them.
    """

    def __init__(self, address, user=None, password='', **settings):

        if not address:
            raise ValueError('the server address must be specified')

        self.address = str(address)
        self.settings = config.Settings(**settings)
        self.user = user if user is not None else self.settings.user
        self.password = password


    def __repr__(self):
        return 'Graph(%r, user=%r)' % (self.address, self.user)


    def connect(self):
        """ Open a transport to the server, authenticate, and return the
            resulting :class:`Connection`.
        """

        stream = transport.connect(self.address, backend=self.settings.transport, timeout=self.settings.timeout)
        return Connection(stream, self.user, self.password, self.settings)


# end of class Graph



def connect(address, user=None, password='', **settings):
    """ Shorthand for ``Graph(address, user, password, **settings).connect()``.
    """

    return Graph(address, user, password, **settings).connect()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:

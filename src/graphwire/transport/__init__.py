"""Transport layer implementations."""

from .base import (
    Transport,
    TransportError,
    TransportTimeout,
    TransportConnectionError,
    TransportPortError,
)
from .. import config

_BACKEND = config.Settings.transport

if _BACKEND == "zmq":
    from . import zmq
# Further backends register here, keyed by their GRAPHWIRE_TRANSPORT name.
else:
    raise ImportError(f"unknown GRAPHWIRE_TRANSPORT backend: {_BACKEND!r}")

from . import session

backends = {
    "zmq": zmq.connect,
}


def connect(address, backend=None, **settings) -> Transport:
    """Open a :class:`Transport` to *address* using the named *backend*,
    which defaults to the process-wide GRAPHWIRE_TRANSPORT setting."""

    if backend is None:
        backend = _BACKEND

    try:
        opener = backends[backend]
    except KeyError:
        raise ValueError(f"unknown transport backend: {backend!r}") from None

    return opener(address, **settings)

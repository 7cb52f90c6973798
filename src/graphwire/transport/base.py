"""What the session layer needs from a wire-level transport.

A transport carries already-built :class:`Request` objects out and hands
decoded :class:`Response` objects back, nothing more: pairing responses with
the requests that caused them is the job of
:class:`graphwire.transport.session.Pipeline`. Writes are deferred, so a
whole batch of requests can go out in one :meth:`Transport.flush`.

Backends report trouble with the :class:`TransportError` family below; the
pipeline converts any of them into :class:`graphwire.errors.TransportFailure`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ..protocol.message import Request, Response


class TransportError(Exception):
    """The transport can no longer be trusted to deliver responses."""


class TransportTimeout(TransportError):
    """No response arrived within the receive timeout."""


class TransportConnectionError(TransportError):
    """The peer could not be reached, or the socket failed mid-exchange."""


class TransportPortError(TransportError):
    """A server socket found no port it could bind."""


class Transport(ABC):
    """A single ordered, bidirectional message stream to one server.

    Requests passed to :meth:`send` stay local until :meth:`flush`.
    :meth:`receive_next` yields responses in the order the server sent
    them, which for this protocol is the order of the requests.
    """

    @abstractmethod
    def close(self) -> None:
        """Release the connection. Closing twice is harmless."""

    @abstractmethod
    def send(self, msg: Request) -> None:
        """Queue *msg* behind any requests not yet flushed."""

    @abstractmethod
    def flush(self) -> None:
        """Write every queued request to the wire, in order."""

    @abstractmethod
    def receive_next(self, timeout: Optional[float] = None) -> Response:
        """Return the next response, waiting at most *timeout* seconds,
        or the backend's own default if *timeout* is None."""

    @property
    def is_open(self) -> bool:
        """False once the transport has been closed."""
        return False

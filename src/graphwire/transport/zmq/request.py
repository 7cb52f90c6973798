"""ZeroMQ request/response transport.

The client side is a DEALER socket wrapped as a :class:`Stream`, which
implements the :class:`graphwire.transport.base.Transport` contract: requests
are held locally until a flush, and responses are read back one at a time,
in order, by the caller's own thread.

The server side is a ROUTER socket wrapped as a :class:`Server`, handling
requests on a background thread. It exists for local development and
integration testing; subclasses override :func:`Server.req_handler` to
decide what to send back.
"""

from __future__ import annotations

import atexit
import socket as pysocket
import threading
import uuid
from typing import Iterable, List, Optional, Tuple

import structlog
import zmq

from ...protocol import fields
from ...protocol.message import Request, Response
from ..base import (
    Transport,
    TransportConnectionError,
    TransportError,
    TransportPortError,
    TransportTimeout,
)
from .framing import from_frames, to_frames


logger = structlog.get_logger()

default_port = 7687
minimum_port = 17687
maximum_port = 17787
zmq_context = zmq.Context()


def parse_address(address: str) -> Tuple[str, int]:
    """Split ``host:port`` into its parts; the port defaults to 7687."""

    address = address.strip()
    if address.startswith("tcp://"):
        address = address[6:]

    host, sep, port = address.rpartition(":")
    if not sep:
        return address, default_port

    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]

    try:
        return host, int(port)
    except ValueError as exc:
        raise TransportConnectionError(f"invalid port in address {address!r}") from exc


class Stream(Transport):
    """Issue requests via a ZeroMQ DEALER socket and receive responses.

    Maintains a persistent connection to a single server. Nothing is
    written until :meth:`flush`; :meth:`receive_next` blocks for at most
    *timeout* seconds.
    """

    timeout = 60.0

    def __init__(self, address: str, port: int, timeout: Optional[float] = None):
        self.address = address
        self.port = int(port)

        if timeout is not None:
            self.timeout = float(timeout)

        server = f"tcp://{address}:{self.port}"
        identity = f"graphwire.Stream.{uuid.uuid4().hex}".encode()

        try:
            self.socket = zmq_context.socket(zmq.DEALER)
            self.socket.setsockopt(zmq.LINGER, 0)
            self.socket.identity = identity
            self.socket.connect(server)
        except zmq.ZMQError as exc:
            raise TransportConnectionError(f"cannot connect to {server}: {exc}") from exc

        self._outbox: List[Tuple[bytes, ...]] = []
        self._poller = zmq.Poller()
        self._poller.register(self.socket, zmq.POLLIN)
        self._open = True

        logger.debug("Stream connected", server=server)

    @classmethod
    def connect(cls, address: str, timeout: Optional[float] = None, **_settings) -> "Stream":
        host, port = parse_address(address)
        return cls(host, port, timeout=timeout)

    @property
    def is_open(self) -> bool:
        return self._open

    def close(self) -> None:
        if not self._open:
            return

        self._open = False
        self._outbox.clear()
        self._poller.unregister(self.socket)
        self.socket.close(linger=0)
        logger.debug("Stream closed", address=self.address, port=self.port)

    def send(self, msg: Request) -> None:
        if not self._open:
            raise TransportConnectionError("stream is closed")
        self._outbox.append(to_frames(msg))

    def flush(self) -> None:
        if not self._open:
            raise TransportConnectionError("stream is closed")

        outbox = self._outbox
        self._outbox = []

        try:
            for frames in outbox:
                self.socket.send_multipart(frames)
        except zmq.ZMQError as exc:
            raise TransportConnectionError(f"send failed: {exc}") from exc

    def receive_next(self, timeout: Optional[float] = None) -> Response:
        if not self._open:
            raise TransportConnectionError("stream is closed")

        if timeout is None:
            timeout = self.timeout

        try:
            ready = dict(self._poller.poll(int(timeout * 1000)))
            if self.socket not in ready:
                raise TransportTimeout(
                    f"{self.address}:{self.port}: no response in {timeout:.2f} sec"
                )
            parts = self.socket.recv_multipart()
        except zmq.ZMQError as exc:
            raise TransportConnectionError(f"receive failed: {exc}") from exc

        try:
            _prefix, msg = from_frames(parts, Response)
        except ValueError as exc:
            raise TransportError(f"undecodable response: {exc}") from exc

        return msg


# end of class Stream



class Server:
    """Receive requests via a ZeroMQ ROUTER socket, respond to them.

    The default behavior is to listen on our locally known fully qualified
    domain name, on the first available port in the default range. The
    *avoid* set enumerates port numbers that should not be automatically
    assigned; this is ignored if a fixed *port* is specified.

    Requests are handled one at a time, in arrival order, on a single
    background thread; a client pipelining several requests therefore gets
    its responses back in the order it sent them.
    """

    poll_interval = 0.1

    def __init__(self, address: Optional[str] = None, port: Optional[int] = None, avoid: Optional[set] = None):
        self.address = address or pysocket.getfqdn()
        self.port = int(port) if port is not None else None
        self.avoid = set(avoid or set())

        self.socket = zmq_context.socket(zmq.ROUTER)
        self.socket.setsockopt(zmq.LINGER, 0)

        if self.port is None:
            self.port = self._bind_any()
        else:
            try:
                self.socket.bind(f"tcp://{self.address}:{self.port}")
            except zmq.ZMQError as exc:
                self.socket.close(linger=0)
                raise TransportPortError(
                    f"port already in use: {self.port}"
                ) from exc

        self.shutdown = False
        self.thread = threading.Thread(target=self.run, daemon=True)
        self.thread.start()

        logger.info("Server listening", address=self.address, port=self.port)

    def _bind_any(self) -> int:
        for port in range(minimum_port, maximum_port + 1):
            if port in self.avoid:
                continue
            try:
                self.socket.bind(f"tcp://{self.address}:{port}")
                return port
            except zmq.ZMQError:
                continue

        self.socket.close(linger=0)
        raise TransportPortError(
            f"no ports available in range {minimum_port}:{maximum_port}"
        )

    # --- request handling hooks ---
    def req_handler(self, request: Request, peer: bytes) -> Iterable[Response]:
        """Override in subclasses.

        Return the responses for *request*, in order: zero or more RECORD
        messages followed by one summary. The *peer* is the identity of the
        client that sent the request, for servers that keep per-client
        state.
        """

        # Default: acknowledge everything, stream nothing.
        return (Response(fields.SUCCESS, {}),)

    # --- internal ---
    def _req_incoming(self, parts: List[bytes]) -> None:
        try:
            prefix, request = from_frames(parts, Request)
        except ValueError as exc:
            logger.warning("Dropping undecodable request", error=str(exc))
            return

        peer = prefix[0] if prefix else b""

        try:
            responses = list(self.req_handler(request, peer))
        except Exception as exc:
            logger.exception("Request handler failed", request=repr(request))
            responses = [Response(fields.FAILURE, {
                "code": "Graphwire.ServerError",
                "message": f"{type(exc).__name__}: {exc}",
            })]

        for response in responses:
            self.socket.send_multipart(to_frames(response, prefix))

    def run(self) -> None:
        poller = zmq.Poller()
        poller.register(self.socket, zmq.POLLIN)

        while not self.shutdown:
            for active, _flag in poller.poll(int(self.poll_interval * 1000)):
                if active == self.socket:
                    parts = self.socket.recv_multipart()
                    self._req_incoming(parts)

        self.socket.close(linger=0)

    def stop(self) -> None:
        """Stop the background thread and release the socket."""

        self.shutdown = True
        self.thread.join()


# end of class Server


def _cleanup() -> None:
    try:
        zmq_context.destroy(linger=0)
    except zmq.ZMQError:
        pass


atexit.register(_cleanup)

"""Transport-agnostic session layer.

The :class:`Pipeline` pairs every outgoing request with the handler that
will receive its responses. Requests accumulate without touching the wire
until :meth:`Pipeline.flush`, which sends them all and then reads responses
back until each handler has seen its summary.

Responses carry no request identifier: the n-th summary read belongs to the
n-th request sent. The queue is therefore an explicit arena with a front
index (the oldest request still waiting for its summary) and a sent index
(the first request not yet handed to the transport).
"""

from __future__ import annotations

from typing import Callable, List, Optional

import structlog

from ..errors import ConnectionClosed, TransportFailure
from ..protocol.factory import describe
from ..protocol.fields import PROTOCOL_VIOLATION, TRANSPORT_FAILURE
from ..protocol.handler import ResponseHandler
from ..protocol.message import Request, Response, Summary
from .base import Transport, TransportError


logger = structlog.get_logger()


class PendingRequest:
    """A queued request and the handler that owns its responses."""

    __slots__ = ("request", "handler")

    def __init__(self, request: Request, handler: ResponseHandler):
        self.request = request
        self.handler = handler

    def __repr__(self):
        return f"PendingRequest({self.request!r}, {self.handler!r})"


class Pipeline:
    """Client-side request/response pattern logic.

    A single pipeline belongs to a single connection and must only be used
    from one thread at a time. The optional *listener* is called with every
    summary read from the wire, after the owning handler has seen it.
    """

    def __init__(self, transport: Transport, listener: Optional[Callable[[Summary], None]] = None):
        self.transport = transport
        self.listener = listener

        self._entries: List[Optional[PendingRequest]] = []
        self._front = 0
        self._sent = 0
        self._closed = False
        self._flushing = False

    def __len__(self) -> int:
        return self.pending

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        """Number of requests still waiting for their summary."""
        return len(self._entries) - self._front

    @property
    def unsent(self) -> int:
        """Number of requests not yet handed to the transport."""
        return len(self._entries) - self._sent

    def head(self) -> Optional[PendingRequest]:
        """Return the request that the next response belongs to."""
        if self._front < len(self._entries):
            return self._entries[self._front]
        return None

    def enqueue(self, request: Request, handler: ResponseHandler) -> PendingRequest:
        if self._closed:
            raise ConnectionClosed(f"cannot enqueue {request.signature}: connection is closed")

        entry = PendingRequest(request, handler)
        self._entries.append(entry)
        logger.debug(f"C: {request.signature}", fields=describe(request))
        return entry

    def flush(self) -> int:
        """Send every queued request, then block until each request queued
        at the start of this call has received its summary. Requests
        enqueued by a handler while the flush is in progress wait for the
        next flush. A handler that calls flush itself gets RuntimeError,
        which aborts the outer flush like any other handler error.

        Returns the number of summaries dispatched.
        """

        if self._closed:
            raise ConnectionClosed("cannot flush: connection is closed")

        # The outer flush owns _front until its batch is dispatched.
        if self._flushing:
            raise RuntimeError("cannot flush from inside a response handler")

        start = self._front
        end = len(self._entries)

        self._flushing = True
        try:
            try:
                if self._sent < end:
                    for entry in self._entries[self._sent:end]:
                        self.transport.send(entry.request)
                    self._sent = end
                    self.transport.flush()

                while self._front < end:
                    self._dispatch(self.transport.receive_next())

            except TransportError as exc:
                logger.error("Transport failed during flush", error=str(exc), pending=self.pending)
                self._abandon(Summary.failure(TRANSPORT_FAILURE, str(exc), synthetic=True))
                raise TransportFailure(str(exc)) from exc

            except Exception as exc:
                # Whatever was still unread belongs to requests we can no
                # longer line up with their responses.
                logger.error("Dispatch aborted", error=repr(exc), pending=self.pending)
                self._abandon(Summary.failure(PROTOCOL_VIOLATION, str(exc), synthetic=True))
                raise

        finally:
            self._flushing = False

        self._compact()
        return end - start

    def discard(self) -> int:
        """Drop every request not yet handed to the transport. Each dropped
        handler receives a synthetic IGNORED summary. Returns the number of
        requests dropped.
        """

        if self._flushing:
            raise RuntimeError("cannot discard requests during a flush")

        dropped = self._entries[self._sent:]
        del self._entries[self._sent:]
        self._front = min(self._front, self._sent)

        for entry in dropped:
            self._notify(entry, Summary.ignored(synthetic=True))

        if dropped:
            logger.debug("Discarded unsent requests", count=len(dropped))

        self._compact()
        return len(dropped)

    def close(self) -> None:
        """Close the pipeline and its transport. Requests still waiting for
        a summary receive a synthetic IGNORED summary. Idempotent.
        """

        if self._closed:
            return

        self._abandon(Summary.ignored(synthetic=True))

    # --- internal ---
    def _dispatch(self, response: Response) -> None:
        entry = self._entries[self._front]

        if response.is_record:
            values = response.fields[0] if response.fields else []
            logger.debug("S: RECORD", values=values)
            entry.handler.on_record(list(values))
            return

        summary = Summary.from_response(response)
        logger.debug(f"S: {summary.signature}", metadata=summary.metadata)

        # The handler is no longer addressable once it has its summary.
        self._entries[self._front] = None
        self._front += 1

        entry.handler.on_summary(summary)

        if self.listener is not None:
            self.listener(summary)

    def _abandon(self, summary: Summary) -> None:
        remaining = [entry for entry in self._entries[self._front:] if entry is not None]

        self._entries = []
        self._front = 0
        self._sent = 0
        self._closed = True

        for entry in remaining:
            self._notify(entry, summary)

        self.transport.close()

    def _notify(self, entry: PendingRequest, summary: Summary) -> None:
        try:
            entry.handler.on_summary(summary)
        except Exception:
            logger.exception("Handler failed on synthetic summary", request=repr(entry.request))

    def _compact(self) -> None:
        if self._front == 0:
            return

        del self._entries[:self._front]
        self._sent -= self._front
        self._front = 0

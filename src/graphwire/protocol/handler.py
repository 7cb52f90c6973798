""" Response handlers receive whatever the server sends back for a single
    request: zero or more records, then exactly one summary. The set of
    handler behaviors is small and fixed, so rather than accept arbitrary
    callback objects the dispatcher works with the three variants defined
    here.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, List, Optional, Sequence

from ..errors import ProtocolViolation
from .message import Summary, keys_of


class ResponseHandler(ABC):
    """ Contract between the dispatcher and the issuer of a request.
    """

    @abstractmethod
    def on_record(self, values: List[Any]) -> None:
        """ Accept one row of result data. """

    @abstractmethod
    def on_summary(self, summary: Summary) -> None:
        """ Accept the terminal summary; called exactly once. """


class Silent(ResponseHandler):
    """ Discard everything. Used for control messages whose outcome the
        issuer has no need to inspect, such as the DISCARD_ALL that follows
        a RUN "BEGIN".
    """

    def on_record(self, values):
        pass

    def on_summary(self, summary):
        pass

    def __repr__(self):
        return 'Silent()'


class Capture(ResponseHandler):
    """ Keep the summary so the issuer can inspect it after the flush that
        dispatched it. Records are not expected; receiving one means the
        request/response correlation has been lost.

        :ivar summary: The :class:`Summary`, or None until it arrives.
    """

    def __init__(self):
        self.summary: Optional[Summary] = None

    def on_record(self, values):
        raise ProtocolViolation('unexpected record for a control message: ' + repr(values))

    def on_summary(self, summary):
        self.summary = summary

    @property
    def done(self) -> bool:
        return self.summary is not None

    def __repr__(self):
        return 'Capture(%r)' % (self.summary,)


class Streaming(ResponseHandler):
    """ Forward each record to the *consumer* in arrival order, then report
        end-of-stream to *on_complete* with the summary.

        A PULL_ALL is always preceded by the RUN that produced its records.
        If the :class:`Capture` for that RUN is supplied as *header*, its
        column names become :attr:`keys`, and a RUN failure is reported at
        end-of-stream in place of the IGNORED summary the server sends for
        the PULL_ALL.
    """

    def __init__(self,
                 consumer: Optional[Callable[[List[Any]], Any]] = None,
                 on_complete: Optional[Callable[[Summary], Any]] = None,
                 header: Optional[Capture] = None):

        self.consumer = consumer
        self.on_complete = on_complete
        self.header = header
        self.count = 0
        self.summary: Optional[Summary] = None

    @property
    def keys(self) -> Sequence[str]:
        if self.header is None:
            return ()
        return keys_of(self.header.summary)

    @property
    def done(self) -> bool:
        return self.summary is not None

    def on_record(self, values):
        self.count += 1
        if self.consumer is not None:
            self.consumer(values)

    def on_summary(self, summary):
        header = self.header

        if header is not None and header.summary is not None and header.summary.failed:
            summary = header.summary

        self.summary = summary

        if self.on_complete is not None:
            self.on_complete(summary)

    def __repr__(self):
        return 'Streaming(count=%d, summary=%r)' % (self.count, self.summary)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:

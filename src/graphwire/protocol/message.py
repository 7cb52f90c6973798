""" A class representation of a protocol message, including subclasses for
    requests, responses, and the terminal summary of a response.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..errors import ServerFailure
from . import fields


class Message:
    """ The :class:`Message` provides a very thin encapsulation of what it
        means to be a message on the wire: a *signature* naming the message
        type, and an ordered sequence of *fields*. The fields are whatever
        the signature calls for; a RUN request carries a statement and a
        parameter mapping, a RECORD carries a list of values, a SUCCESS
        carries a metadata mapping, and so on.

        :ivar signature: One of the names in :mod:`graphwire.protocol.fields`.
        :ivar fields: A tuple of protocol-transmissible values.
    """

    valid_types = fields.REQUESTS | fields.RESPONSES

    def __init__(self, signature: str, *fields_: Any):

        if signature not in self.valid_types:
            raise ValueError('invalid message signature: ' + repr(signature))

        self.signature = signature
        self.fields = tuple(fields_)


    def __eq__(self, other):
        if not isinstance(other, Message):
            return NotImplemented
        return self.signature == other.signature and self.fields == other.fields


    def __repr__(self):
        return '%s%r' % (self.signature, self.fields)


# end of class Message



class Request(Message):
    """ A message sent by the client. """

    valid_types = fields.REQUESTS


class Response(Message):
    """ A message sent by the server in answer to a :class:`Request`: zero
        or more RECORD messages followed by exactly one summary.
    """

    valid_types = fields.RESPONSES

    @property
    def is_record(self) -> bool:
        return self.signature == fields.RECORD

    @property
    def is_summary(self) -> bool:
        return self.signature in fields.SUMMARIES


# end of class Response



class Summary:
    """ The terminal outcome of a single request. A summary is either a
        success, with the metadata the server returned, a failure, with the
        server's *code* and *message*, or an ignored request. Summaries
        generated locally, rather than read from the wire, are marked as
        *synthetic*.
    """

    def __init__(self, signature: str, metadata: Optional[Dict[str, Any]] = None, synthetic: bool = False):

        if signature not in fields.SUMMARIES:
            raise ValueError('not a summary signature: ' + repr(signature))

        self.signature = signature
        self.metadata = dict(metadata or {})
        self.synthetic = synthetic


    def __repr__(self):
        synthetic = ' (synthetic)' if self.synthetic else ''
        return 'Summary(%s %r%s)' % (self.signature, self.metadata, synthetic)


    @classmethod
    def from_response(cls, response: Response) -> 'Summary':
        """ Build a summary from a decoded summary :class:`Response`.
        """

        if not response.is_summary:
            raise ValueError('not a summary message: ' + repr(response))

        metadata = response.fields[0] if response.fields else None
        return cls(response.signature, metadata)


    @classmethod
    def success(cls, metadata=None) -> 'Summary':
        return cls(fields.SUCCESS, metadata)


    @classmethod
    def failure(cls, code: str, message: str, synthetic: bool = False) -> 'Summary':
        return cls(fields.FAILURE, {'code': code, 'message': message}, synthetic)


    @classmethod
    def ignored(cls, synthetic: bool = False) -> 'Summary':
        return cls(fields.IGNORED, synthetic=synthetic)


    @property
    def succeeded(self) -> bool:
        return self.signature == fields.SUCCESS

    @property
    def failed(self) -> bool:
        return self.signature == fields.FAILURE

    @property
    def was_ignored(self) -> bool:
        return self.signature == fields.IGNORED

    @property
    def code(self) -> Optional[str]:
        return self.metadata.get('code')

    @property
    def message(self) -> Optional[str]:
        return self.metadata.get('message')


    def raise_for_failure(self) -> None:
        """ Raise :class:`graphwire.errors.ServerFailure` if this summary
            reports a failure; otherwise do nothing.
        """

        if self.failed:
            raise ServerFailure(self.code, self.message)


# end of class Summary


def keys_of(summary: Optional[Summary]) -> Sequence[str]:
    """ Return the column names announced by the SUCCESS summary of a RUN,
        or an empty tuple if there are none.
    """

    if summary is None or not summary.succeeded:
        return ()

    return tuple(summary.metadata.get('fields', ()))


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:

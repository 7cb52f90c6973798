from . import fields
from . import message
from . import values
from . import factory
from . import handler

from .message import Message, Request, Response, Summary
from .handler import ResponseHandler, Silent, Capture, Streaming
from .values import parameters

PROTOCOL_VERSION = '1'


"""
graphwire Protocol Layer
========================

This package defines the transport-agnostic message model used by
graphwire: what a request is, what the server can send back, and who
receives it.

The protocol layer MUST NOT depend on any transport implementation.

---------------------------------------------------------------------

Layer Architecture Overview
---------------------------

User Code
    │
    ▼
Connection (connection.py)
    Transaction-oriented API
    - begin() / run() / commit() / rollback() / reset() / sync()

    │
    ▼
Pipeline (transport/session.py)
    Pending request queue and response dispatch
    - enqueue()
    - flush()

    │
    ▼
Response Handlers (handler.py)
    Silent / Capture / Streaming

    │
    ▼
Message Model (message.py, factory.py, values.py)
    Request, Response, Summary, parameter mappings

    │
    ▼
Field Vocabulary (fields.py)
    Canonical message signatures

---------------------------------------------------------------------

Below the Protocol Layer (for context)
--------------------------------------

Codec / Framing Layer
    Maps Message <-> wire frames

Transport Layer
    Moves bytes
    - ZeroMQ

---------------------------------------------------------------------

Design Principles
-----------------

1. Strict ordering
   Responses are matched to requests by position alone; the n-th summary
   read belongs to the n-th request sent.

2. Explicit flush points
   Nothing touches the wire until a flush. Pipelining depth is whatever
   was enqueued since the last one.

3. Layer Isolation
   Dependencies only flow downward:
       Connection -> Pipeline -> Transport
   Never upward.

---------------------------------------------------------------------
"""


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:

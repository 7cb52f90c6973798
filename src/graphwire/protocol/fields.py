"""Protocol constants.

Message signatures are kept by name in one place to avoid stringly-typed
message handling; the single-byte tags are only needed by the framing layer.
"""

# Request signatures
INIT = "INIT"
ACK_FAILURE = "ACK_FAILURE"
RESET = "RESET"
RUN = "RUN"
DISCARD_ALL = "DISCARD_ALL"
PULL_ALL = "PULL_ALL"

# Response signatures
SUCCESS = "SUCCESS"
RECORD = "RECORD"
IGNORED = "IGNORED"
FAILURE = "FAILURE"

REQUESTS = frozenset((INIT, ACK_FAILURE, RESET, RUN, DISCARD_ALL, PULL_ALL))
SUMMARIES = frozenset((SUCCESS, IGNORED, FAILURE))
RESPONSES = SUMMARIES | {RECORD}

TAGS = {
    INIT: 0x01,
    ACK_FAILURE: 0x0E,
    RESET: 0x0F,
    RUN: 0x10,
    DISCARD_ALL: 0x2F,
    PULL_ALL: 0x3F,
    SUCCESS: 0x70,
    RECORD: 0x71,
    IGNORED: 0x7E,
    FAILURE: 0x7F,
}

SIGNATURES = {tag: name for name, tag in TAGS.items()}

# Failure codes for summaries generated locally rather than by the server.
TRANSPORT_FAILURE = "Graphwire.TransportFailure"
PROTOCOL_VIOLATION = "Graphwire.ProtocolViolation"

"""Convenience constructors for protocol requests."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from .fields import ACK_FAILURE, DISCARD_ALL, INIT, PULL_ALL, RESET, RUN
from .message import Request
from .values import parameters as _parameters


def init(user_agent: str, user: str, password: str) -> Request:
    auth = {"scheme": "basic", "principal": user, "credentials": password}
    return Request(INIT, user_agent, auth)


def run(statement: str, parameters: Optional[Mapping[str, Any]] = None) -> Request:
    if not isinstance(statement, str):
        raise TypeError(f"statement must be str, not {type(statement).__name__}")
    return Request(RUN, statement, _parameters(parameters))


def pull_all() -> Request:
    return Request(PULL_ALL)


def discard_all() -> Request:
    return Request(DISCARD_ALL)


def reset() -> Request:
    return Request(RESET)


def ack_failure() -> Request:
    return Request(ACK_FAILURE)


def describe(request: Request) -> tuple:
    """Return the fields of *request* with any credentials masked, for
    logging purposes."""

    if request.signature != INIT:
        return request.fields

    user_agent, auth = request.fields
    return (user_agent, dict(auth, credentials="..."))

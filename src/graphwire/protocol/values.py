"""Protocol-transmissible values and parameter mappings.

Only a small set of Python types can be put on the wire: None, bool, int
(signed 64-bit), float, str, lists of values and str-keyed mappings of
values. :func:`cast` normalizes anything else that has an obvious
equivalent (tuples and sets become lists) and rejects the rest.

Byte strings are rejected: message fields travel as JSON, which has no
binary type, and a byte string would come back as text.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


def cast(value: Any) -> Any:
    """Return *value* as a protocol-transmissible value."""

    if value is None or isinstance(value, (bool, float, str)):
        return value

    if isinstance(value, int):
        if value < INT64_MIN or value > INT64_MAX:
            raise ValueError(f"integer out of 64-bit range: {value}")
        return value

    if isinstance(value, (bytes, bytearray, memoryview)):
        raise TypeError(f"cannot transmit {type(value).__name__}: message fields have no binary type")

    if isinstance(value, (list, tuple, set, frozenset)):
        return [cast(item) for item in value]

    if isinstance(value, Mapping):
        mapping = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise TypeError(f"mapping keys must be str, not {type(key).__name__}")
            mapping[key] = cast(item)
        return mapping

    raise TypeError(f"cannot transmit values of type {type(value).__name__}")


def parameters(mapping: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> Dict[str, Any]:
    """Build a fresh parameter mapping for a single statement.

    Keyword arguments take precedence over entries in *mapping*::

        >>> parameters({'name': 'Alice'}, age=33)
        {'name': 'Alice', 'age': 33}
    """

    combined: Dict[str, Any] = {}
    if mapping is not None:
        combined.update(mapping)
    combined.update(kwargs)
    return cast(combined)

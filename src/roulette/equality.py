"""Structural equality for collection items.

Items are compared through a tagged value model:

- ``None``
- primitives: ``bool``, numbers (``int`` and ``float``), ``str``, ``bytes``
- sequences: ``list`` and ``tuple``, compared position by position
- keyed structures: any ``Mapping``, compared key by key regardless of order

Values of different kinds are never equal, so ``1`` differs from ``"1"`` and
``True`` differs from ``1``. Anything outside the model is equal only to a
value of the same type that compares ``==``. Every value equals itself, and
any NaN equals any other NaN.
"""

import math
from collections.abc import Hashable, Mapping
from typing import Any, Protocol

NONE = "none"
BOOL = "bool"
NUMBER = "number"
STR = "str"
BYTES = "bytes"
SEQUENCE = "sequence"
MAPPING = "mapping"
OTHER = "other"


class Equivalence(Protocol):
    """A reflexive, symmetric predicate deciding whether two items are the same."""

    def __call__(self, a: Any, b: Any, /) -> bool: ...


def _is_nan(value: Any) -> bool:
    return isinstance(value, float) and math.isnan(value)


def kind_of(value: Any) -> str:
    """Return the tag of ``value`` in the value model."""
    if value is None:
        return NONE
    # bool is a subclass of int, so it has to be tested first.
    if isinstance(value, bool):
        return BOOL
    if isinstance(value, (int, float)):
        return NUMBER
    if isinstance(value, str):
        return STR
    if isinstance(value, (bytes, bytearray)):
        return BYTES
    if isinstance(value, (list, tuple)):
        return SEQUENCE
    if isinstance(value, Mapping):
        return MAPPING
    return OTHER


def deep_equal(a: Any, b: Any) -> bool:
    """Recursively compare two values by structure.

    >>> deep_equal({"a": 1, "b": 2}, {"b": 2, "a": 1})
    True
    >>> deep_equal([1, 2], [2, 1])
    False
    >>> deep_equal(1, "1")
    False
    """
    if a is b:
        return True

    kind = kind_of(a)
    if kind != kind_of(b):
        return False

    if kind == NONE:
        return True
    if kind == NUMBER and _is_nan(a) and _is_nan(b):
        return True
    if kind == SEQUENCE:
        if len(a) != len(b):
            return False
        return all(deep_equal(x, y) for x, y in zip(a, b))
    if kind == MAPPING:
        if a.keys() != b.keys():
            return False
        return all(deep_equal(a[key], b[key]) for key in a)
    if kind == OTHER and type(a) is not type(b):
        return False
    return bool(a == b)


def fingerprint(value: Any) -> Hashable:
    """Build a hashable key that agrees with :func:`deep_equal`.

    Two values that are deep-equal always have equal fingerprints, which lets a
    dict stand in for a linear scan when looking items up.

    Raises:
        TypeError: if ``value`` contains something outside the value model that
            is not hashable.
    """
    kind = kind_of(value)
    if kind == NONE:
        return (NONE,)
    if kind == SEQUENCE:
        return (SEQUENCE, tuple(fingerprint(x) for x in value))
    if kind == MAPPING:
        return (
            MAPPING,
            frozenset((key, fingerprint(item)) for key, item in value.items()),
        )
    if kind == BYTES:
        return (BYTES, bytes(value))
    if kind == NUMBER and _is_nan(value):
        return (NUMBER, "nan")
    if kind == OTHER:
        hash(value)
        return (OTHER, type(value), value)
    return (kind, value)

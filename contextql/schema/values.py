"""Classification of arbitrary Python values before escaping.

Escapers never branch on ``isinstance`` chains of their own; they call
:func:`classify` once and match on the resulting :class:`ValueKind`.  The
order of the checks below matters: ``bool`` before numbers, trusted wrappers
before everything that could also describe them, and text/bytes/mappings
before the generic iterable test.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel

from contextql.trust import SqlFragment, SqlId, TrustPolicy

_TEXTUAL = (str, bytes, bytearray, memoryview)


class ValueKind(str, Enum):
    """The closed set of shapes a value can take."""

    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    TEXT = "text"
    DATETIME = "datetime"
    BLOB = "blob"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    FRAGMENT = "fragment"
    IDENTIFIER = "identifier"
    OTHER = "other"


def is_series(value: Any) -> bool:
    """Return ``True`` for iterables that render as comma-separated lists."""
    if isinstance(value, (_TEXTUAL, Mapping, BaseModel, SqlFragment, SqlId)):
        return False
    return isinstance(value, Iterable)


def classify(value: Any, trust: TrustPolicy) -> ValueKind:
    """Return the :class:`ValueKind` of ``value``.

    ``SqlFragment`` and ``SqlId`` instances that ``trust`` does not vouch
    for are classified as :attr:`ValueKind.OTHER`.
    """
    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, (SqlFragment, SqlId)):
        if not trust.is_trusted(value):
            return ValueKind.OTHER
        return ValueKind.FRAGMENT if isinstance(value, SqlFragment) else ValueKind.IDENTIFIER
    if isinstance(value, (int, float, Decimal)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.TEXT
    if isinstance(value, datetime):
        return ValueKind.DATETIME
    if isinstance(value, (bytes, bytearray, memoryview)):
        return ValueKind.BLOB
    if isinstance(value, (Mapping, BaseModel)):
        return ValueKind.MAPPING
    if is_series(value):
        return ValueKind.SEQUENCE
    return ValueKind.OTHER

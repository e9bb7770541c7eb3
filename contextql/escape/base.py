"""Value escaping abstractions shared by the dialect escapers.

The Template Method pattern is used:

- :class:`ValueEscaper` classifies a value and owns the rules that do not
  depend on the dialect: ``NULL``, booleans, numbers, dates, sequences,
  mappings and plain objects.
- Dialect subclasses supply string quoting, identifier quoting, blob
  literals and the delimited (inside an open quote) rendering.
"""
from __future__ import annotations

import math
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any

from pydantic import BaseModel

from contextql.lex.patterns import TIME_ZONE_OFFSET
from contextql.schema.options import DEFAULT_OPTIONS, EscapeOptions
from contextql.schema.values import ValueKind, classify, is_series
from contextql.trust import SqlFragment, SqlId, TrustPolicy, default_minter

# ---------------------------------------------------------------------------
# Dialect-independent helpers
# ---------------------------------------------------------------------------


def number_text(value: int | float | Decimal) -> str:
    """Return the SQL text of a number.

    Conversion goes through the base type so that a subclass overriding
    ``__str__`` or ``__repr__`` cannot inject text.
    """
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        return float.__repr__(value)
    if isinstance(value, Decimal):
        if value.is_nan():
            return "NaN"
        if value.is_infinite():
            return "-Infinity" if value.is_signed() else "Infinity"
        return Decimal.__str__(value)
    return int.__repr__(value)


def convert_timezone(time_zone: str) -> int | None:
    """Return the UTC offset in minutes named by ``time_zone``.

    ``"Z"`` is zero; ``"+05:30"``, ``"-0800"``, ``" 01"`` and the like are
    parsed (a space counts as ``+``).  Returns ``None`` for names that carry
    no offset; callers treat those as UTC.
    """
    if time_zone == "Z":
        return 0
    match = TIME_ZONE_OFFSET.search(time_zone)
    if match is None:
        return None
    sign, hours, minutes = match.groups()
    offset = int(hours) * 60 + int(minutes or 0)
    return -offset if sign == "-" else offset


def format_date(value: datetime, time_zone: str = "local") -> str | None:
    """Return ``YYYY-MM-DD HH:MM:SS.mmm`` for ``value`` seen from ``time_zone``.

    Naive datetimes are taken to be host-local time.  Returns ``None`` for
    datetimes that do not compare equal to themselves (NaT sentinels) and
    for those that leave the representable range once shifted.
    """
    if value != value:
        return None
    try:
        if time_zone == "local":
            fields = value if value.tzinfo is None else value.astimezone()
        else:
            fields = value.astimezone(timezone.utc)
            offset = convert_timezone(time_zone)
            if offset:
                fields += timedelta(minutes=offset)
    except OverflowError:
        return None
    return (
        f"{fields.year:04d}-{fields.month:02d}-{fields.day:02d} "
        f"{fields.hour:02d}:{fields.minute:02d}:{fields.second:02d}."
        f"{fields.microsecond // 1000:03d}"
    )


def escape_series(
    series: Iterable[Any],
    escape_one: Callable[[Any], str],
    nests: bool,
) -> str:
    """Join escaped elements of ``series`` with ``", "``.

    Args:
        series: The elements to render.
        escape_one: Renders a single non-sequence element.
        nests: If ``True``, an element that is itself a sequence becomes a
            parenthesized group ``(a, b)``.  Sequences inside a group, and
            all nested sequences when ``nests`` is ``False``, are flattened.
    """
    parts = []
    for element in series:
        if is_series(element):
            inner = escape_series(element, escape_one, nests=False)
            parts.append(f"({inner})" if nests else inner)
        else:
            parts.append(escape_one(element))
    return ", ".join(parts)


def public_attributes(value: Any) -> dict[str, Any] | None:
    """Return the public, non-callable instance attributes of a plain object.

    Returns ``None`` when the object has none to offer.
    """
    if callable(value) or isinstance(value, (SqlFragment, SqlId)):
        return None
    try:
        attributes = vars(value)
    except TypeError:
        return None
    public = {
        name: attr
        for name, attr in attributes.items()
        if not name.startswith("_") and not callable(attr)
    }
    return public or None


# ---------------------------------------------------------------------------
# Escaper ABC
# ---------------------------------------------------------------------------


class ValueEscaper(ABC):
    """Renders Python values as SQL text for one dialect.

    Args:
        trust: Decides which ``SqlFragment`` / ``SqlId`` values are trusted.
    """

    def __init__(self, trust: TrustPolicy = default_minter) -> None:
        self.trust = trust

    # ------------------------------------------------------------------
    # Dialect hooks
    # ------------------------------------------------------------------

    @abstractmethod
    def quote_string(self, text: str) -> str:
        """Return ``text`` as a complete string literal."""

    @abstractmethod
    def quote_blob(self, data: bytes) -> str:
        """Return ``data`` as a complete binary literal expression."""

    @abstractmethod
    def escape_id(self, value: Any, forbid_qualified: bool = False) -> str:
        """Return ``value`` as a quoted (possibly dot-qualified) identifier.

        Args:
            value: Identifier text, a trusted ``SqlId``, a trusted
                ``SqlFragment`` that is already a quoted identifier, or a
                sequence of those.
            forbid_qualified: Keep ``.`` inside a single identifier.

        Raises:
            MalformedIdentifierError: If a trusted fragment is not shaped
                like a quoted identifier.
        """

    @abstractmethod
    def escape_delimited(
        self,
        value: Any,
        delimiter: str,
        options: EscapeOptions | None = None,
    ) -> str:
        """Return raw text to splice inside the construct opened by ``delimiter``.

        Raises:
            UnescapableDelimiterError: If ``delimiter`` is not recognised.
            MergeHazardError: If the text would close the construct early.
        """

    # ------------------------------------------------------------------
    # Free-standing escaping
    # ------------------------------------------------------------------

    def escape(self, value: Any, options: EscapeOptions | None = None) -> str:
        """Return ``value`` as a self-contained SQL expression.

        Args:
            value: Any Python value.
            options: Escaping options; defaults to :data:`DEFAULT_OPTIONS`.

        Returns:
            SQL text that can stand between tokens at statement top level.
        """
        options = options or DEFAULT_OPTIONS
        kind = classify(value, self.trust)

        if kind is ValueKind.NULL:
            return "NULL"
        if kind is ValueKind.BOOL:
            return "true" if value else "false"
        if kind is ValueKind.NUMBER:
            return number_text(value)
        if kind is ValueKind.TEXT:
            return self.quote_string(value)
        if kind is ValueKind.DATETIME:
            formatted = format_date(value, options.time_zone)
            return "NULL" if formatted is None else self.quote_string(formatted)
        if kind is ValueKind.BLOB:
            return self.quote_blob(bytes(value))
        if kind is ValueKind.FRAGMENT:
            return value.content
        if kind is ValueKind.IDENTIFIER:
            return self.escape_id(value)

        stringified = self._stringified(options)
        if kind is ValueKind.SEQUENCE:
            return escape_series(value, lambda el: self.escape(el, stringified), nests=True)
        if options.stringify_objects:
            return self.quote_string(str(value))
        if kind is ValueKind.MAPPING:
            pairs = dict(value) if isinstance(value, BaseModel) else value
            return self._assignments(pairs, stringified)
        attributes = public_attributes(value)
        if attributes is None:
            return self.quote_string(str(value))
        return self._assignments(attributes, stringified)

    def _assignments(self, pairs: Any, options: EscapeOptions) -> str:
        return ", ".join(
            f"{self.escape_id(key)} = {self.escape(item, options)}"
            for key, item in pairs.items()
            if not callable(item)
        )

    @staticmethod
    def _stringified(options: EscapeOptions) -> EscapeOptions:
        if options.stringify_objects:
            return options
        return options.model_copy(update={"stringify_objects": True})

    # ------------------------------------------------------------------
    # Delimited escaping
    # ------------------------------------------------------------------

    def delimited_text(self, value: Any, options: EscapeOptions) -> str:
        """Reduce ``value`` to the text spliced inside an open quote.

        The result is unescaped; the dialect applies its quoting convention.
        """
        kind = classify(value, self.trust)
        if kind is ValueKind.NULL:
            return ""
        if kind is ValueKind.BOOL:
            return "true" if value else "false"
        if kind is ValueKind.NUMBER:
            return number_text(value)
        if kind is ValueKind.TEXT:
            return value
        if kind is ValueKind.DATETIME:
            return format_date(value, options.time_zone) or ""
        if kind is ValueKind.BLOB:
            return bytes(value).decode("latin-1")
        if kind in (ValueKind.FRAGMENT, ValueKind.IDENTIFIER):
            return value.content
        if kind is ValueKind.SEQUENCE:
            return escape_series(
                value, lambda el: self.delimited_text(el, options), nests=False
            )
        return str(value)

    def is_trusted_fragment(self, value: Any) -> bool:
        return isinstance(value, SqlFragment) and self.trust.is_trusted(value)

    def identifier_text(self, value: Any) -> tuple[str, bool]:
        """Return ``(name, splittable)`` for a non-fragment identifier value.

        Trusted ``SqlId`` values are never split on ``.``.
        """
        if isinstance(value, SqlId) and self.trust.is_trusted(value):
            return value.content, False
        return str(value), True

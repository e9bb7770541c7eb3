"""Postgres value escaper.

Free-standing strings use the standard ``'...'`` form when the only
special character is ``'``, and the C-style ``E'...'`` form otherwise.
Inside an open quote the escaping convention follows the quote's prefix
(``E'``, ``U&'``, ``B'``, ``X'``, dollar tags, ...).

Postgres text values cannot contain NUL.  Where an escape syntax exists
(``E'...'``, ``U&'...'``) NUL is spelled out so the server rejects it;
contexts with no escapes refuse to embed it.
"""
from __future__ import annotations

import re
from typing import Any

from contextql.errors import (
    MalformedIdentifierError,
    MergeHazardError,
    UnescapableDelimiterError,
    UnrepresentableCharacterError,
)
from contextql.escape.base import ValueEscaper, escape_series
from contextql.lex.patterns import PG_DOLLAR_TAG, PG_ID, PG_QUAL_ID, STRING_META_CHARS
from contextql.schema.options import DEFAULT_OPTIONS, EscapeOptions
from contextql.schema.values import ValueKind, classify, is_series

PG_E_CHARS_ESCAPE_MAP = {
    # Hex, not octal, so a following digit cannot extend the escape.
    "\0": "\\x00",
    "\b": "\\b",
    "\t": "\\t",
    "\n": "\\n",
    "\r": "\\r",
    "\x1a": "\\x1a",
    '"': '\\"',
    "$": "\\$",
    # Doubling also works if the string turns out not to be an E string.
    "'": "''",
    "\\": "\\\\",
}

PG_U_CHARS_ESCAPE_MAP = {
    "\0": "\\0000",
    "\b": "\\0008",
    "\t": "\\0009",
    "\n": "\\000a",
    "\r": "\\000d",
    "\x1a": "\\001a",
    '"': "\\0022",
    "$": "\\0024",
    "'": "\\0027",
    "\\": "\\005c",
}

#: Opening and closing quotes of a rendered identifier.
_ID_DELIMITERS = re.compile(r'^(?:[Uu]&)?"|"$')

_HEX_TO_BITS = {digit: format(int(digit, 16), "04b") for digit in "0123456789abcdef"}


def _escape_body(text: str, escape_map: dict[str, str]) -> str:
    return STRING_META_CHARS.sub(lambda m: escape_map[m.group()], text)


def escape_e_body(text: str) -> str:
    """Apply the ``E'...'`` escape map without adding quotes."""
    return _escape_body(text, PG_E_CHARS_ESCAPE_MAP)


def escape_u_body(text: str) -> str:
    """Apply the ``U&'...'`` / ``U&"..."`` escape map without adding quotes."""
    return _escape_body(text, PG_U_CHARS_ESCAPE_MAP)


def reject_nul(text: str, delimiter: str) -> str:
    if "\0" in text:
        raise UnrepresentableCharacterError("\0", delimiter)
    return text


def double_quotes(text: str, quote: str = "'", delimiter: str | None = None) -> str:
    """Double every ``quote`` in ``text``; NUL has no spelling here."""
    return reject_nul(text, delimiter or quote).replace(quote, quote * 2)


def hex_to_bits(hex_digits: str) -> str:
    return "".join(_HEX_TO_BITS[digit] for digit in hex_digits)


def check_dollar_embedding(text: str, tag: str) -> str:
    """Return ``text`` if it can sit between ``tag`` delimiters unchanged.

    Raises:
        MergeHazardError: If ``text`` contains ``tag``, or its tail from the
            last ``$`` could combine with the closing tag.
    """
    hazard = tag in text
    if not hazard:
        last_dollar = text.rfind("$")
        hazard = last_dollar >= 0 and tag.startswith(text[last_dollar:])
    if hazard:
        raise MergeHazardError(
            f"Cannot embed {text!r} between {tag}", delimiter=tag, text=text
        )
    return text


class PostgresEscaper(ValueEscaper):
    """Escapes values for Postgres."""

    def quote_string(self, text: str) -> str:
        if not STRING_META_CHARS.search(text.replace("'", "")):
            return f"'{double_quotes(text)}'"
        return f"E'{escape_e_body(text)}'"

    def quote_blob(self, data: bytes) -> str:
        return f"decode('{data.hex()}', 'hex')"

    def escape_id(
        self,
        value: Any,
        forbid_qualified: bool = False,
        unicode: bool = False,
    ) -> str:
        """Return ``value`` as a quoted identifier.

        Args:
            value: See :meth:`ValueEscaper.escape_id`.
            forbid_qualified: Keep ``.`` inside a single identifier.
            unicode: Render ``U&"..."`` identifiers with unicode escapes.
        """
        if self.is_trusted_fragment(value):
            content = value.content
            grammar = PG_ID if forbid_qualified else PG_QUAL_ID
            if grammar.fullmatch(content):
                return content
            raise MalformedIdentifierError(content, forbid_qualified)
        if is_series(value):
            return escape_series(
                value,
                lambda el: self.escape_id(el, forbid_qualified, unicode),
                nests=False,
            )
        name, splittable = self.identifier_text(value)
        if unicode:
            escaped, opener = escape_u_body(name), 'u&"'
        else:
            escaped, opener = double_quotes(name, '"'), '"'
        if splittable and not forbid_qualified:
            escaped = escaped.replace(".", f'".{opener}')
        return f'{opener}{escaped}"'

    def escape_delimited(
        self,
        value: Any,
        delimiter: str,
        options: EscapeOptions | None = None,
    ) -> str:
        options = options or DEFAULT_OPTIONS
        kind = delimiter.lower()

        if kind in ('"', 'u&"'):
            quoted = self.escape_id(value, options.forbid_qualified, unicode=kind != '"')
            return _ID_DELIMITERS.sub("", quoted)

        if classify(value, self.trust) is ValueKind.BLOB and kind in ("x'", "b'"):
            hex_digits = bytes(value).hex()
            return hex_digits if kind == "x'" else hex_to_bits(hex_digits)

        text = self.delimited_text(value, options)
        if kind in ("'", "b'", "x'"):
            return double_quotes(text, delimiter=delimiter)
        if kind == "e'":
            return escape_e_body(text)
        if kind == "e":
            return f"'{escape_e_body(text)}'"
        if kind == "u&'":
            return escape_u_body(text)
        if PG_DOLLAR_TAG.fullmatch(delimiter):
            return check_dollar_embedding(reject_nul(text, delimiter), delimiter)
        raise UnescapableDelimiterError(delimiter)


#: Shared escaper trusting fragments minted by the default minter.
default_escaper = PostgresEscaper()

escape = default_escaper.escape
escape_delimited = default_escaper.escape_delimited
escape_id = default_escaper.escape_id

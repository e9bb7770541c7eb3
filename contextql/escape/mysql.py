"""MySQL value escaper.

Strings use backslash escapes inside single quotes; identifiers are quoted
with backticks.  Blobs become hex literals (``X'00ff'``).
"""
from __future__ import annotations

from typing import Any

from contextql.errors import MalformedIdentifierError, UnescapableDelimiterError
from contextql.escape.base import ValueEscaper, escape_series
from contextql.lex.patterns import MYSQL_ID, MYSQL_QUAL_ID, STRING_META_CHARS
from contextql.schema.options import DEFAULT_OPTIONS, EscapeOptions
from contextql.schema.values import is_series

MYSQL_CHARS_ESCAPE_MAP = {
    "\0": "\\0",
    "\b": "\\b",
    "\t": "\\t",
    "\n": "\\n",
    "\r": "\\r",
    # Windows end-of-file
    "\x1a": "\\Z",
    '"': '\\"',
    "$": "\\$",
    "'": "\\'",
    "\\": "\\\\",
}


def escape_string_body(text: str) -> str:
    """Apply the MySQL string escape map without adding quotes."""
    return STRING_META_CHARS.sub(lambda m: MYSQL_CHARS_ESCAPE_MAP[m.group()], text)


class MySQLEscaper(ValueEscaper):
    """Escapes values for MySQL and MariaDB."""

    def quote_string(self, text: str) -> str:
        return f"'{escape_string_body(text)}'"

    def quote_blob(self, data: bytes) -> str:
        return f"X'{data.hex()}'"

    def escape_id(self, value: Any, forbid_qualified: bool = False) -> str:
        if self.is_trusted_fragment(value):
            content = value.content
            grammar = MYSQL_ID if forbid_qualified else MYSQL_QUAL_ID
            if grammar.fullmatch(content):
                return content
            raise MalformedIdentifierError(content, forbid_qualified)
        if is_series(value):
            return escape_series(
                value, lambda el: self.escape_id(el, forbid_qualified), nests=False
            )
        name, splittable = self.identifier_text(value)
        escaped = name.replace("`", "``")
        if splittable and not forbid_qualified:
            escaped = escaped.replace(".", "`.`")
        return f"`{escaped}`"

    def escape_delimited(
        self,
        value: Any,
        delimiter: str,
        options: EscapeOptions | None = None,
    ) -> str:
        options = options or DEFAULT_OPTIONS
        if delimiter == "`":
            return self.escape_id(value, options.forbid_qualified)[1:-1]
        if delimiter in ("'", '"'):
            return escape_string_body(self.delimited_text(value, options))
        raise UnescapableDelimiterError(delimiter)


#: Shared escaper trusting fragments minted by the default minter.
default_escaper = MySQLEscaper()

escape = default_escaper.escape
escape_delimited = default_escaper.escape_delimited
escape_id = default_escaper.escape_id

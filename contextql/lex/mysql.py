"""Lexer for the MySQL family of dialects.

Recognised constructs:

- ``-- `` (two dashes and whitespace) and ``#`` line comments, ``/* */``
  block comments (no nesting).  A comment must end inside the chunk that
  opens it; otherwise a value spliced after the chunk would land inside
  the comment.
- ``'...'`` and ``"..."`` strings, ```...``` identifiers.  Bodies allow the
  doubled delimiter and a backslash followed by any character.
"""
from __future__ import annotations

from contextql.errors import LexError, UnterminatedConstructError
from contextql.lex.base import Lexer
from contextql.lex.patterns import (
    MYSQL_DELIMITED_BODIES,
    MYSQL_IDENTIFIER_DELIMITERS,
    MYSQL_PREFIX_BEFORE_DELIMITER,
    MYSQL_STRING_DELIMITERS,
)
from contextql.schema.state import Identifier, SlotContext, StringLiteral


class MySQLLexer(Lexer):
    """Tracks MySQL quoting context across literal chunks."""

    def advance(self, state: SlotContext, text: str, pos: int) -> tuple[SlotContext, int]:
        if state is None:
            return self._advance_top_level(text, pos)
        return self._advance_delimited(state, text, pos)

    @staticmethod
    def _advance_top_level(text: str, pos: int) -> tuple[SlotContext, int]:
        end = MYSQL_PREFIX_BEFORE_DELIMITER.match(text, pos).end()
        if end == len(text):
            return None, end
        char = text[end]
        if char in MYSQL_STRING_DELIMITERS:
            return StringLiteral(char), end + 1
        if char in MYSQL_IDENTIFIER_DELIMITERS:
            return Identifier(char), end + 1
        # The prefix pattern only stops early at a comment it cannot close.
        rest = text[end:]
        if rest.startswith("/*"):
            raise UnterminatedConstructError(
                f"Unterminated block comment: {rest}", delimiter="/*"
            )
        raise UnterminatedConstructError(
            f"Unterminated line comment: {rest}", delimiter=rest[:2] if char == "-" else "#"
        )

    @staticmethod
    def _advance_delimited(state: SlotContext, text: str, pos: int) -> tuple[SlotContext, int]:
        delimiter = state.delimiter
        end = MYSQL_DELIMITED_BODIES[delimiter].match(text, pos).end()
        if end == len(text):
            return state, end
        if text[end] == delimiter:
            return None, end + 1
        # Only a backslash with nothing after it stops the body short.
        raise LexError(
            f"Incomplete escape sequence in {delimiter} delimited string at `{text[pos:]}`"
        )


def make_lexer() -> MySQLLexer:
    """Return a fresh MySQL lexer."""
    return MySQLLexer()

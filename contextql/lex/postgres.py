"""Lexer for the Postgres family of dialects.

Recognised constructs (see "Lexical Structure" in the Postgres manual):

======================  =================================================
``-- ...``              line comment
``/* ... */``           block comment; nests: ``/* /* */ still */``
``"..."``               identifier
``U&"..."``             identifier with unicode escapes
``'...'``               string
``E'...'``              string with C-style escapes
``U&'...'``             string with unicode escapes
``B'...'``, ``X'...'``  bit strings
``$$...$$``             dollar-quoted string; also ``$tag$...$tag$``
======================  =================================================

An ``E'...'`` string may be continued by a plain ``'...'`` after whitespace
containing a newline, and the continuation inherits the C-style escaping.
The lexer models this with the :class:`EscapeContinuation` state.
"""
from __future__ import annotations

from contextql.errors import LexError, MergeHazardError, UnterminatedConstructError
from contextql.lex.base import Lexer
from contextql.lex.patterns import (
    PG_BLOCK_COMMENT_TOKEN,
    PG_DELIMITED_BODIES,
    PG_ESC_STRING_CONTINUATION,
    PG_LINE_COMMENT_BODY,
    PG_TOP_LEVEL_DELIMITER,
)
from contextql.schema.state import (
    BlockComment,
    DollarQuote,
    EscapeContinuation,
    Identifier,
    LexState,
    LineComment,
    SlotContext,
    StringLiteral,
)


def _open(delimiter: str) -> LexState:
    """Return the state opened by a top-level delimiter match."""
    if delimiter == "--":
        return LineComment(delimiter)
    if delimiter == "/*":
        return BlockComment()
    if delimiter.startswith("$"):
        return DollarQuote(delimiter)
    if delimiter.endswith('"'):
        return Identifier(delimiter)
    return StringLiteral(delimiter)


class PostgresLexer(Lexer):
    """Tracks Postgres quoting context across literal chunks."""

    def advance(self, state: SlotContext, text: str, pos: int) -> tuple[SlotContext, int]:
        if state is None:
            match = PG_TOP_LEVEL_DELIMITER.search(text, pos)
            if match is None:
                return None, len(text)
            if match.group("word"):
                return None, match.end()
            return _open(match.group()), match.end()
        if isinstance(state, LineComment):
            return self._line_comment(text, pos)
        if isinstance(state, BlockComment):
            return self._block_comment(state, text, pos)
        if isinstance(state, DollarQuote):
            return self._dollar_quote(state, text, pos)
        if isinstance(state, EscapeContinuation):
            return self._continuation(state, text, pos)
        return self._quoted(state, text, pos)

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    @staticmethod
    def _line_comment(text: str, pos: int) -> tuple[SlotContext, int]:
        end = PG_LINE_COMMENT_BODY.match(text, pos).end()
        if end < len(text):
            return None, end
        raise UnterminatedConstructError(
            f"Unterminated line comment: --{text[pos:]}", delimiter="--"
        )

    @staticmethod
    def _block_comment(state: BlockComment, text: str, pos: int) -> tuple[SlotContext, int]:
        depth = state.depth
        cursor = pos
        while depth:
            token = PG_BLOCK_COMMENT_TOKEN.search(text, cursor)
            if token is None:
                raise UnterminatedConstructError(
                    f"Unterminated block comment: /*{text[pos:]}", delimiter="/*"
                )
            cursor = token.end()
            depth += 1 if token.group() == "/*" else -1
        return None, cursor

    # ------------------------------------------------------------------
    # Quoted constructs
    # ------------------------------------------------------------------

    @staticmethod
    def _quoted(state: LexState, text: str, pos: int) -> tuple[SlotContext, int]:
        match = PG_DELIMITED_BODIES[state.kind].match(text, pos)
        if match.group(1):
            if state.kind == "e'":
                return EscapeContinuation(), match.end()
            return None, match.end()
        if match.end() == len(text):
            return state, match.end()
        raise LexError(
            f"Incomplete escape sequence in {state.delimiter} delimited string "
            f"at `{text[pos:]}`"
        )

    @staticmethod
    def _dollar_quote(state: DollarQuote, text: str, pos: int) -> tuple[SlotContext, int]:
        tag = state.tag
        close = text.find(tag, pos)
        if close >= 0:
            return None, close + len(tag)
        last_dollar = text.rfind("$", pos)
        if last_dollar >= 0:
            suffix = text[last_dollar:]
            if tag.startswith(suffix):
                raise MergeHazardError(
                    f"merge hazard '{suffix}' at end of {tag} delimited string",
                    delimiter=tag,
                    text=suffix,
                )
        return state, len(text)

    def _continuation(
        self, state: EscapeContinuation, text: str, pos: int
    ) -> tuple[SlotContext, int]:
        match = PG_ESC_STRING_CONTINUATION.match(text, pos)
        opener = match.group(1)
        if not match.group():
            return None, pos
        if opener is None:
            return state, match.end()
        if opener == "'":
            return StringLiteral("e'"), match.end()
        # A comment between continued strings must close inside this chunk.
        inner: SlotContext = _open(opener)
        cursor = match.end()
        while inner is not None:
            if cursor == len(text):
                raise UnterminatedConstructError(
                    f"Unterminated {inner.description}: {opener}{text[match.end():]}",
                    delimiter=opener,
                )
            inner, cursor = self.advance(inner, text, cursor)
        return state, cursor


def make_lexer() -> PostgresLexer:
    """Return a fresh Postgres lexer."""
    return PostgresLexer()

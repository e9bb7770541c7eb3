"""Postgres dialect."""

from __future__ import annotations

from contextql.compile.base import SQLDialect
from contextql.errors import AmbiguousContinuationError
from contextql.escape.postgres import PostgresEscaper
from contextql.lex.patterns import PG_CONTINUATION_GAP
from contextql.lex.postgres import PostgresLexer


class PostgresDialect(SQLDialect):
    """Contextual escaping for Postgres.

    Postgres joins string constants separated by whitespace that contains a
    newline, and the joined parts share the first part's escaping
    convention.  A free-standing string value followed by such a gap cannot
    be combined safely with the text after it, so the dialect rejects it.
    """

    lexer_class = PostgresLexer
    escaper_class = PostgresEscaper

    @property
    def dialect_name(self) -> str:
        return "postgres"

    def escape_id(
        self,
        value: object,
        forbid_qualified: bool = False,
        unicode: bool = False,
    ) -> str:
        return self.escaper.escape_id(value, forbid_qualified, unicode)

    def check_free_standing(self, escaped: str, following: str, value_follows: bool) -> None:
        if not escaped.endswith("'"):
            return
        gap = PG_CONTINUATION_GAP.match(following)
        if gap is None:
            return
        end = gap.end()
        continued = following.startswith("'", end) if end < len(following) else value_follows
        if continued:
            raise AmbiguousContinuationError(
                f"Potential for ambiguous string continuation at {following!r}"
            )

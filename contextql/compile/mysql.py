"""MySQL dialect."""

from __future__ import annotations

from contextql.compile.base import SQLDialect
from contextql.escape.mysql import MySQLEscaper
from contextql.lex.mysql import MySQLLexer


class MySQLDialect(SQLDialect):
    """Contextual escaping for MySQL and MariaDB.

    Strings take backslash escapes (``'it\\'s'``), identifiers are quoted
    with backticks, and ``#`` starts a line comment.  Note that ``--`` only
    starts a comment when followed by whitespace, so ``1--1`` is arithmetic.
    """

    lexer_class = MySQLLexer
    escaper_class = MySQLEscaper

    @property
    def dialect_name(self) -> str:
        return "mysql"

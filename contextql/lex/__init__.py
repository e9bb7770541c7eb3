"""contextQL lexing layer: literal SQL chunks → slot contexts."""
from contextql.lex.base import Lexer
from contextql.lex.mysql import MySQLLexer
from contextql.lex.postgres import PostgresLexer

__all__ = [
    "Lexer",
    "MySQLLexer",
    "PostgresLexer",
]

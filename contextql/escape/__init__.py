"""contextQL escaping layer: Python values → dialect SQL text."""
from contextql.escape.base import ValueEscaper
from contextql.escape.mysql import MySQLEscaper
from contextql.escape.postgres import PostgresEscaper

__all__ = [
    "ValueEscaper",
    "MySQLEscaper",
    "PostgresEscaper",
]

"""contextQL – contextual escaping for SQL templates.

Values go where the SQL text puts them, and nowhere else.

Public API
----------
``mysql``, ``pg``
    Template tags that escape each value for the lexical context it lands
    in (top level, inside a string, inside a quoted identifier, inside a
    dollar quote, ...) and return a trusted ``SqlFragment``::

        from contextql import pg

        query = pg(t"SELECT * FROM {SqlId.escape(table)} WHERE name = {name}")
        cursor.execute(str(query))

``SqlFragment``, ``SqlId``, ``Minter``
    Trusted values.  Fragments returned by a tag are spliced verbatim into
    other templates; ``SqlId.escape(name)`` marks text as one identifier.

Re-exported types
-----------------
``EscapeOptions``, ``SqlTag``, ``TemplateBuilder``, ``DialectRegistry``,
``MySQLDialect``, ``PostgresDialect``, and all error classes.

Extensibility
-------------
New dialects can be registered via::

    from contextql.compile.registry import DialectRegistry

    @DialectRegistry.register("sqlite")
    class SQLiteDialect(SQLDialect):
        ...

After registration, ``SqlTag("sqlite")`` picks it up.
"""

from __future__ import annotations

from contextql.compile.base import SQLDialect
from contextql.compile.builder import TemplateBuilder
from contextql.compile.mysql import MySQLDialect
from contextql.compile.postgres import PostgresDialect
from contextql.compile.registry import DialectRegistry
from contextql.compile.template import SqlTag
from contextql.errors import (
    AmbiguousContinuationError,
    ContextQLError,
    EscapeError,
    LexError,
    MalformedIdentifierError,
    MergeHazardError,
    TemplateArityError,
    UnescapableDelimiterError,
    UnknownDialectError,
    UnrepresentableCharacterError,
    UnterminatedConstructError,
)
from contextql.schema.options import EscapeOptions
from contextql.trust import Minter, SqlFragment, SqlId, TrustPolicy, default_minter

# ---------------------------------------------------------------------------
# Register built-in dialects with DialectRegistry
# ---------------------------------------------------------------------------

DialectRegistry.register_class("mysql", MySQLDialect)
DialectRegistry.register_class("postgres", PostgresDialect, aliases=("pg",))

mysql = SqlTag("mysql")
pg = SqlTag("postgres")

__all__ = [
    # Template tags
    "mysql",
    "pg",
    "SqlTag",
    # Trusted values
    "SqlFragment",
    "SqlId",
    "Minter",
    "TrustPolicy",
    "default_minter",
    # Options
    "EscapeOptions",
    # Dialects
    "SQLDialect",
    "MySQLDialect",
    "PostgresDialect",
    "DialectRegistry",
    "TemplateBuilder",
    # Errors
    "ContextQLError",
    "LexError",
    "UnterminatedConstructError",
    "AmbiguousContinuationError",
    "MergeHazardError",
    "EscapeError",
    "MalformedIdentifierError",
    "UnescapableDelimiterError",
    "UnrepresentableCharacterError",
    "TemplateArityError",
    "UnknownDialectError",
]

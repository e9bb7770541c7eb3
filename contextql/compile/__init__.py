"""contextQL interpolation layer: literal chunks + values → SqlFragment."""
from contextql.compile.base import SQLDialect
from contextql.compile.builder import TemplateBuilder
from contextql.compile.mysql import MySQLDialect
from contextql.compile.postgres import PostgresDialect
from contextql.compile.registry import DialectRegistry
from contextql.compile.template import SqlTag

__all__ = [
    "SQLDialect",
    "TemplateBuilder",
    "MySQLDialect",
    "PostgresDialect",
    "DialectRegistry",
    "SqlTag",
]

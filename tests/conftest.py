"""Shared pytest fixtures for contextQL unit and integration tests."""
from __future__ import annotations

import pytest

from contextql import MySQLDialect, PostgresDialect
from contextql.lex.mysql import MySQLLexer
from contextql.lex.postgres import PostgresLexer
from contextql.trust import Minter


@pytest.fixture()
def minter() -> Minter:
    """A fresh minter whose output no other minter trusts."""
    return Minter()


@pytest.fixture()
def mysql_lexer() -> MySQLLexer:
    return MySQLLexer()


@pytest.fixture()
def pg_lexer() -> PostgresLexer:
    return PostgresLexer()


@pytest.fixture(scope="session")
def mysql_dialect() -> MySQLDialect:
    return MySQLDialect()


@pytest.fixture(scope="session")
def pg_dialect() -> PostgresDialect:
    return PostgresDialect()

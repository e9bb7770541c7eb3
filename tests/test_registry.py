"""Unit tests for DialectRegistry and the error hierarchy."""

from __future__ import annotations

import pytest

from contextql import DialectRegistry, MySQLDialect, PostgresDialect, SqlTag
from contextql.compile.registry import DialectRegistry as RegistryFromModule
from contextql.errors import ContextQLError, UnknownDialectError, UnterminatedConstructError
from contextql.trust import Minter


class _SkeletonDialect(MySQLDialect):
    @property
    def dialect_name(self) -> str:
        return "skeleton"


@pytest.fixture()
def skeleton_registered():
    DialectRegistry.register("skeleton", "skel")(_SkeletonDialect)
    yield
    DialectRegistry._dialects.pop("skeleton", None)
    DialectRegistry._aliases.pop("skel", None)


def test_builtin_dialects_are_registered():
    assert {"mysql", "postgres"} <= set(DialectRegistry.registered_targets())
    assert DialectRegistry is RegistryFromModule


def test_alias_resolves_to_postgres():
    assert isinstance(DialectRegistry.create("pg"), PostgresDialect)
    assert DialectRegistry.resolve("postgres") is PostgresDialect


def test_create_passes_trust_policy():
    minter = Minter()
    assert DialectRegistry.create("mysql", minter).trust is minter


def test_unknown_dialect():
    with pytest.raises(UnknownDialectError, match="Unsupported dialect target: 'oracle'") as exc:
        DialectRegistry.create("oracle")
    assert isinstance(exc.value, LookupError)
    assert "mysql" in exc.value.details["registered"]


def test_custom_dialect_registration(skeleton_registered):
    tag = SqlTag("skel")
    assert tag.dialect.dialect_name == "skeleton"
    assert str(tag(["SELECT ", ""], "x")) == "SELECT 'x'"


def test_error_response_shape():
    error = UnterminatedConstructError("Unclosed quoted string: '", delimiter="'")
    assert isinstance(error, ContextQLError)
    assert error.to_error_response() == {
        "error": "UNTERMINATED",
        "message": "Unclosed quoted string: '",
        "details": {"delimiter": "'"},
    }

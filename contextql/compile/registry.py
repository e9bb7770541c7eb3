"""Dialect registry (Open/Closed Principle).

``DialectRegistry``
    Central registry for :class:`~contextql.compile.base.SQLDialect`
    implementations.  Register a dialect once; ``SqlTag`` and
    ``TemplateBuilder`` look it up by name.

Usage::

    from contextql.compile.registry import DialectRegistry

    @DialectRegistry.register("sqlite")
    class SQLiteDialect(SQLDialect):
        ...
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import ClassVar

from contextql.compile.base import SQLDialect
from contextql.errors import UnknownDialectError
from contextql.trust import TrustPolicy, default_minter

logger = logging.getLogger(__name__)


class DialectRegistry:
    """Registry mapping dialect target names to :class:`SQLDialect` classes.

    Example::

        DialectRegistry.register_class("postgres", PostgresDialect, aliases=("pg",))
        dialect = DialectRegistry.create("pg")
    """

    _dialects: ClassVar[dict[str, type[SQLDialect]]] = {}
    _aliases: ClassVar[dict[str, str]] = {}

    @classmethod
    def register(
        cls, name: str, *aliases: str
    ) -> Callable[[type[SQLDialect]], type[SQLDialect]]:
        """Decorator that registers a dialect class under ``name``.

        Args:
            name: The dialect target name (e.g. ``"postgres"``).
            *aliases: Other names that resolve to ``name``.

        Returns:
            A decorator that registers and returns the dialect class.
        """

        def decorator(dialect_cls: type[SQLDialect]) -> type[SQLDialect]:
            cls.register_class(name, dialect_cls, aliases)
            return dialect_cls

        return decorator

    @classmethod
    def register_class(
        cls,
        name: str,
        dialect_cls: type[SQLDialect],
        aliases: tuple[str, ...] = (),
    ) -> None:
        """Register a dialect class without using the decorator form."""
        cls._dialects[name] = dialect_cls
        for alias in aliases:
            cls._aliases[alias] = name
        logger.debug("Registered dialect %r as %s", name, dialect_cls.__name__)

    @classmethod
    def resolve(cls, name: str) -> type[SQLDialect]:
        """Return the dialect class registered for ``name`` or one of its aliases.

        Raises:
            UnknownDialectError: If nothing is registered under ``name``.
        """
        dialect_cls = cls._dialects.get(cls._aliases.get(name, name))
        if dialect_cls is None:
            raise UnknownDialectError(name, cls.registered_targets())
        return dialect_cls

    @classmethod
    def create(cls, name: str, trust: TrustPolicy = default_minter) -> SQLDialect:
        """Instantiate the dialect registered for ``name``.

        Args:
            name: The dialect target name or alias.
            trust: The trust collaborator handed to the dialect.

        Returns:
            A fresh :class:`SQLDialect` instance.

        Raises:
            UnknownDialectError: If no dialect is registered for ``name``.
        """
        return cls.resolve(name)(trust)

    @classmethod
    def registered_targets(cls) -> list[str]:
        """Return the sorted list of registered dialect target names."""
        return sorted(cls._dialects)

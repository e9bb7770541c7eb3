"""Dialect abstraction: the SQLDialect ABC.

The Template Method pattern is used:

- ``TemplateBuilder`` owns the interpolation algorithm.
- ``SQLDialect`` subclasses plug in the dialect-specific steps: which lexer
  tracks quoting context, which escaper renders values, and any extra check
  on free-standing output (Postgres string continuation).
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar

from contextql.escape.base import ValueEscaper
from contextql.lex.base import Lexer
from contextql.schema.options import EscapeOptions
from contextql.trust import TrustPolicy, default_minter


class SQLDialect(ABC):
    """Abstract base for a SQL dialect.

    Args:
        trust: The trust collaborator used to recognise trusted fragments
            and identifiers among the values.
    """

    lexer_class: ClassVar[type[Lexer]]
    escaper_class: ClassVar[type[ValueEscaper]]

    def __init__(self, trust: TrustPolicy = default_minter) -> None:
        self.trust = trust
        self.escaper = self.escaper_class(trust)

    @property
    @abstractmethod
    def dialect_name(self) -> str:
        """Return the canonical dialect name (``'mysql'`` or ``'postgres'``)."""

    @classmethod
    def make_lexer(cls) -> Lexer:
        """Return a fresh lexer for this dialect."""
        return cls.lexer_class()

    def escape(self, value: Any, options: EscapeOptions | None = None) -> str:
        return self.escaper.escape(value, options)

    def escape_delimited(
        self,
        value: Any,
        delimiter: str,
        options: EscapeOptions | None = None,
    ) -> str:
        return self.escaper.escape_delimited(value, delimiter, options)

    def escape_id(self, value: Any, forbid_qualified: bool = False) -> str:
        return self.escaper.escape_id(value, forbid_qualified)

    def check_free_standing(self, escaped: str, following: str, value_follows: bool) -> None:
        """Reject free-standing output whose meaning depends on what follows.

        Args:
            escaped: The escaped value text.
            following: The literal chunk right after the value.
            value_follows: ``True`` if another value is spliced after
                ``following``.

        Raises:
            LexError: If the combination is ambiguous.  The default accepts
                everything.
        """

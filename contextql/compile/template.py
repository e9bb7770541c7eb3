"""Template tags: the ``mysql`` / ``pg`` callables.

A tag accepts any of:

- a template string object (Python 3.14 ``string.templatelib.Template``,
  or anything with ``.strings`` and ``.values``)::

      pg(t"SELECT * FROM t WHERE name = {name}")

- a sequence of literal chunks followed by the values::

      pg(["SELECT * FROM t WHERE name = ", ""], name)

- a single literal string with no values::

      pg("SELECT 1")

Interpolation conversions (``!r``) and format specs are ignored; every
value is escaped for its context as-is.
"""
from __future__ import annotations

from typing import Any

from contextql.compile.base import SQLDialect
from contextql.compile.builder import TemplateBuilder
from contextql.compile.registry import DialectRegistry
from contextql.schema.options import DEFAULT_OPTIONS, EscapeOptions
from contextql.trust import SqlFragment, TrustPolicy, default_minter


def split_template(template: Any, values: tuple[Any, ...]) -> tuple[tuple[str, ...], tuple[Any, ...]]:
    """Return ``(chunks, values)`` for the accepted template forms."""
    if isinstance(template, str):
        return (template,), values
    if hasattr(template, "strings") and hasattr(template, "values"):
        if values:
            raise TypeError("A template object carries its own values.")
        return tuple(template.strings), tuple(template.values)
    return tuple(template), values


class SqlTag:
    """Contextually escaping SQL template tag for one dialect.

    Args:
        dialect: A registered dialect name (``"mysql"``, ``"postgres"``,
            ``"pg"``) or a :class:`SQLDialect` instance.
        options: Options applied to every call.
        minter: Trust collaborator for recognising trusted values and
            certifying output.
    """

    def __init__(
        self,
        dialect: str | SQLDialect,
        options: EscapeOptions | None = None,
        minter: TrustPolicy = default_minter,
    ) -> None:
        if isinstance(dialect, str):
            dialect = DialectRegistry.create(dialect, minter)
        self.dialect = dialect
        self.options = options or DEFAULT_OPTIONS
        self._builder = TemplateBuilder(dialect, minter)

    def __call__(self, template: Any, *values: Any) -> SqlFragment:
        chunks, values = split_template(template, values)
        return self._builder.build(chunks, values, self.options)

    def __repr__(self) -> str:
        return f"SqlTag({self.dialect.dialect_name!r}, {self.options!r})"

    def with_options(self, **overrides: Any) -> SqlTag:
        """Return a tag for the same dialect with ``overrides`` applied.

        Raises:
            pydantic.ValidationError: For unknown option names or bad values.
        """
        return SqlTag(self.dialect, self.options.merged(**overrides), self._builder.minter)

    # ------------------------------------------------------------------
    # Direct escaping
    # ------------------------------------------------------------------

    def escape(self, value: Any) -> str:
        """Escape ``value`` free-standing with this tag's options."""
        return self.dialect.escape(value, self.options)

    def escape_id(self, value: Any) -> str:
        """Escape ``value`` as an identifier with this tag's options."""
        return self.dialect.escape_id(value, self.options.forbid_qualified)

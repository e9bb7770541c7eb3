"""Trusted SQL values and the collaborator that certifies them.

``SqlFragment``
    Raw SQL text that has been vetted (typically the output of a
    ``mysql``/``pg`` template).  Spliced verbatim, never re-escaped.

``SqlId``
    Text that is to be used as exactly one identifier.  Escaped only as an
    identifier, never as a string.

Both types are plain value objects.  Whether one may be trusted is decided
by a :class:`TrustPolicy`; the default :class:`Minter` brands every object it
creates with a private token so that instances built directly are not
mistaken for vetted ones::

    minter = Minter()
    frag = minter.mint("NOW()")
    assert minter.is_trusted(frag)
    assert not minter.is_trusted(SqlFragment("NOW()"))
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True)
class SqlFragment:
    """A chunk of SQL text.

    Attributes:
        content: The raw SQL text.
    """

    content: str
    _brand: object | None = field(default=None, repr=False, compare=False)

    def __str__(self) -> str:
        return self.content


@dataclass(frozen=True)
class SqlId:
    """A single SQL identifier, stored unquoted.

    Attributes:
        content: The identifier text, e.g. ``O'Reilly "quoted"``.
    """

    content: str
    _brand: object | None = field(default=None, repr=False, compare=False)

    def __str__(self) -> str:
        return self.content

    @classmethod
    def escape(cls, name: str, minter: Minter | None = None) -> SqlId:
        """Return a trusted identifier for ``name``.

        The name is never split on ``.``; ``SqlId.escape("a.b")`` names one
        identifier containing a dot.
        """
        return (minter or default_minter).mint_id(str(name))


@runtime_checkable
class TrustPolicy(Protocol):
    """The two capabilities the escaping core needs from the trust layer."""

    def is_trusted(self, value: Any) -> bool:
        """Return ``True`` if ``value`` is a certified fragment or identifier."""

    def mint(self, text: str) -> SqlFragment:
        """Certify ``text`` as trusted SQL."""


class Minter:
    """Default :class:`TrustPolicy` backed by a private brand object.

    Separate ``Minter`` instances do not trust each other's output.
    """

    def __init__(self) -> None:
        self._brand = object()

    def is_trusted(self, value: Any) -> bool:
        return (
            isinstance(value, (SqlFragment, SqlId))
            and value._brand is self._brand
        )

    def mint(self, text: str) -> SqlFragment:
        return SqlFragment(str(text), self._brand)

    def mint_id(self, name: str) -> SqlId:
        """Certify ``name`` as a single identifier."""
        return SqlId(str(name), self._brand)


#: Process-wide minter used by the ``mysql`` / ``pg`` tags.
default_minter = Minter()

"""Lexical states carried by a dialect lexer between literal chunks.

A lexer is always in exactly one state.  ``None`` stands for the top level
of a statement; every other state is one of the frozen dataclasses below.
The state in effect at the end of a chunk is the *slot context* of the value
that follows it.

Each state records the ``delimiter`` text that opened it exactly as written
(``E'``, ``u&"``, ``$body$``, ...).  :attr:`LexState.kind` is the
case-folded form used for dispatch.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional


@dataclass(frozen=True)
class LexState:
    """Base class for all open lexical contexts."""

    delimiter: str

    #: Human-readable name used in error messages.
    description: ClassVar[str] = "construct"
    #: ``True`` if end of input may be reached in this state.
    ends_cleanly: ClassVar[bool] = False
    #: ``True`` if values spliced in this state carry their own delimiters.
    self_delimiting: ClassVar[bool] = False

    @property
    def kind(self) -> str:
        return self.delimiter.lower()


@dataclass(frozen=True)
class LineComment(LexState):
    """``-- ...`` or ``# ...`` up to the next line break."""

    description: ClassVar[str] = "line comment"


@dataclass(frozen=True)
class BlockComment(LexState):
    """``/* ... */``; ``depth`` counts open nested comments (Postgres)."""

    delimiter: str = "/*"
    depth: int = 1

    description: ClassVar[str] = "block comment"


@dataclass(frozen=True)
class StringLiteral(LexState):
    """A quoted string: ``'``, ``"`` (MySQL), ``E'``, ``U&'``, ``B'``, ``X'``."""

    description: ClassVar[str] = "quoted string"


@dataclass(frozen=True)
class Identifier(LexState):
    """A quoted identifier: ``` ` ``` (MySQL), ``"`` or ``U&"`` (Postgres)."""

    description: ClassVar[str] = "quoted identifier"


@dataclass(frozen=True)
class DollarQuote(LexState):
    """A Postgres dollar-quoted string such as ``$body$...$body$``."""

    description: ClassVar[str] = "dollar-quoted string"

    @property
    def tag(self) -> str:
        return self.delimiter

    @property
    def kind(self) -> str:
        # Tags are case sensitive.
        return self.delimiter


@dataclass(frozen=True)
class EscapeContinuation(LexState):
    """An ``E'...'`` string just closed and may be continued.

    Postgres joins two string constants separated by whitespace containing a
    newline; only the first may carry the ``E`` prefix, so a ``'...'`` that
    follows is read with C-style escapes.
    """

    delimiter: str = "e"

    description: ClassVar[str] = "escape string continuation"
    ends_cleanly: ClassVar[bool] = True
    self_delimiting: ClassVar[bool] = True


#: The context of one interpolation slot; ``None`` is the top level.
SlotContext = Optional[LexState]

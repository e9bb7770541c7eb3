"""Lexer abstraction shared by the dialect lexers.

The Template Method pattern is used:

- :class:`Lexer` owns the chunk loop, the end-of-input check and the
  sticky-failure behaviour.
- Dialect subclasses implement :meth:`Lexer.advance`, which consumes a
  prefix of the text from a given state and returns the next state.

A lexer is fed literal chunks in order::

    lexer = MySQLLexer()
    lexer.feed("SELECT '")      # -> StringLiteral("'")
    lexer.feed("' FROM t")      # -> None
    lexer.feed(None)            # end of input; raises if a state is open
"""
from __future__ import annotations

from abc import ABC, abstractmethod

from contextql.errors import ContextQLError, UnterminatedConstructError
from contextql.schema.state import SlotContext


class Lexer(ABC):
    """Incremental scanner that reports the open context after each chunk."""

    def __init__(self) -> None:
        self._state: SlotContext = None
        self._failure: ContextQLError | None = None

    @property
    def state(self) -> SlotContext:
        """The context in effect after the last chunk fed."""
        return self._state

    def feed(self, chunk: str | None) -> SlotContext:
        """Consume one literal chunk and return the context after it.

        Args:
            chunk: The next literal text, or ``None`` to signal end of input.

        Returns:
            The open :class:`~contextql.schema.state.LexState`, or ``None``
            at top level.

        Raises:
            LexError: If the text cannot be tokenized, or if end of input is
                signalled while a construct is open.  Once raised, every
                later call raises the same error.
        """
        if self._failure is not None:
            raise self._failure
        try:
            if chunk is None:
                self._finish()
            else:
                self._state = self.transition(self._state, str(chunk))
        except ContextQLError as exc:
            self._failure = exc
            raise
        return self._state

    def transition(self, state: SlotContext, text: str) -> SlotContext:
        """Return the state reached by scanning ``text`` from ``state``.

        Does not touch the lexer's own state.
        """
        pos = 0
        while pos < len(text):
            state, pos = self.advance(state, text, pos)
        return state

    @abstractmethod
    def advance(self, state: SlotContext, text: str, pos: int) -> tuple[SlotContext, int]:
        """Consume at least one step of ``text`` starting at ``pos``.

        Args:
            state: The state in effect at ``pos``.
            text: The chunk being scanned.
            pos: Offset of the first unconsumed character.

        Returns:
            ``(new_state, new_pos)``; ``new_pos`` must be greater than ``pos``
            unless ``new_state`` differs from ``state``.
        """

    def _finish(self) -> None:
        state = self._state
        if state is not None and not state.ends_cleanly:
            raise UnterminatedConstructError(
                f"Unclosed {state.description}: {state.delimiter}",
                delimiter=state.delimiter,
            )

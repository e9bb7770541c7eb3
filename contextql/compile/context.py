"""Static analysis value object.

Packages the lexed slot contexts of one literal-chunk sequence so that the
analysis can be memoized and shared between calls.
"""
from __future__ import annotations

from dataclasses import dataclass

from contextql.schema.state import SlotContext


@dataclass(frozen=True)
class StaticAnalysis:
    """Immutable result of lexing one literal-chunk sequence.

    Attributes:
        chunks: The literal chunks, in order.
        contexts: The context in effect at each slot; one fewer than
            ``chunks``.
    """

    chunks: tuple[str, ...]
    contexts: tuple[SlotContext, ...]

    @property
    def slot_count(self) -> int:
        return len(self.contexts)

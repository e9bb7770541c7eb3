"""Core interpolation logic: literal chunks + values → trusted SQL.

``TemplateBuilder`` drives the algorithm; all dialect-specific behaviour is
delegated to the injected ``SQLDialect``.

Algorithm
---------
1. Static analysis: lex every literal chunk with a fresh lexer and record
   the context at each slot.  The result depends only on the dialect and
   the chunks, so it is memoized.
2. For each slot, escape the value for its context.  Values at top level
   are escaped free-standing and then set off from neighbouring quotes they
   could fuse with (``'a'`` next to ``'b'`` would read as ``'a''b'``).
3. Join everything and mint the text as a trusted ``SqlFragment``.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Iterable, Sequence
from typing import Any

from contextql.compile.base import SQLDialect
from contextql.compile.context import StaticAnalysis
from contextql.errors import TemplateArityError
from contextql.lex.patterns import QUOTE_CHARS
from contextql.schema.options import DEFAULT_OPTIONS, EscapeOptions
from contextql.trust import SqlFragment, TrustPolicy

logger = logging.getLogger(__name__)

#: Number of distinct (dialect, chunks) analyses kept in memory.
ANALYSIS_CACHE_SIZE = 512


@functools.lru_cache(maxsize=ANALYSIS_CACHE_SIZE)
def _analyze(dialect_cls: type[SQLDialect], chunks: tuple[str, ...]) -> StaticAnalysis:
    lexer = dialect_cls.make_lexer()
    contexts = tuple(lexer.feed(chunk) for chunk in chunks)
    lexer.feed(None)
    logger.debug(
        "Analyzed %d chunk(s) for %s: %s",
        len(chunks),
        dialect_cls.__name__,
        [ctx.delimiter if ctx is not None else None for ctx in contexts[:-1]],
    )
    # The context after the last chunk has no slot.
    return StaticAnalysis(chunks=chunks, contexts=contexts[:-1])


def set_off(before: str, escaped: str, after: str) -> str:
    """Pad ``escaped`` so its quotes cannot merge with its neighbours.

    Args:
        before: The last character of the output so far (or ``""``).
        escaped: The escaped value text.
        after: The literal text that follows the value.
    """
    if not escaped:
        return escaped
    head, tail = escaped[0], escaped[-1]
    if head in QUOTE_CHARS and before == head:
        escaped = f" {escaped}"
    if tail in QUOTE_CHARS and after.startswith(tail):
        escaped = f"{escaped} "
    return escaped


class TemplateBuilder:
    """Interpolates values into literal SQL chunks for one dialect.

    Args:
        dialect: The dialect that lexes chunks and escapes values.
        minter: Certifies the finished text.  Defaults to the dialect's
            trust collaborator.
    """

    def __init__(self, dialect: SQLDialect, minter: TrustPolicy | None = None) -> None:
        self.dialect = dialect
        self.minter = minter or dialect.trust

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def analyze(self, chunks: Iterable[str]) -> StaticAnalysis:
        """Return the slot contexts for ``chunks``.

        Raises:
            LexError: If the chunks cannot be lexed or leave a construct
                open at the end.  Raised again on every call for the same
                chunks.
        """
        return _analyze(type(self.dialect), tuple(str(chunk) for chunk in chunks))

    def build(
        self,
        chunks: Sequence[str],
        values: Sequence[Any],
        options: EscapeOptions | None = None,
    ) -> SqlFragment:
        """Interpolate ``values`` between ``chunks`` and mint the result.

        Args:
            chunks: Literal SQL text; one more than ``values``.
            values: Untrusted values, one per gap between chunks.
            options: Escaping options; defaults to :data:`DEFAULT_OPTIONS`.

        Returns:
            A trusted ``SqlFragment``.

        Raises:
            TemplateArityError: If ``len(chunks) != len(values) + 1``.
            LexError: If the chunks cannot be lexed.
            EscapeError: If a value cannot be escaped for its context.
            MergeHazardError: If a value would close a dollar quote.
        """
        values = tuple(values)
        if len(chunks) != len(values) + 1:
            raise TemplateArityError(len(chunks), len(values))

        analysis = self.analyze(chunks)
        options = options or DEFAULT_OPTIONS
        parts = [analysis.chunks[0]]
        last_char = analysis.chunks[0][-1:]

        for index, (context, value) in enumerate(zip(analysis.contexts, values)):
            after = analysis.chunks[index + 1]
            if context is None:
                escaped = self.dialect.escape(value, options)
                self.dialect.check_free_standing(escaped, after, index + 1 < len(values))
                escaped = set_off(last_char, escaped, after)
            else:
                escaped = self.dialect.escape_delimited(value, context.delimiter, options)
                if context.self_delimiting:
                    escaped = set_off(last_char, escaped, after)
            parts.append(escaped)
            parts.append(after)
            last_char = (escaped + after)[-1:] or last_char

        return self.minter.mint("".join(parts))

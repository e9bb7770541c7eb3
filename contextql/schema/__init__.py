"""contextQL schema types: lexer states, value kinds, escaping options."""
from contextql.schema.options import DEFAULT_OPTIONS, EscapeOptions
from contextql.schema.state import (
    BlockComment,
    DollarQuote,
    EscapeContinuation,
    Identifier,
    LexState,
    LineComment,
    SlotContext,
    StringLiteral,
)
from contextql.schema.values import ValueKind, classify, is_series

__all__ = [
    "DEFAULT_OPTIONS",
    "EscapeOptions",
    "BlockComment",
    "DollarQuote",
    "EscapeContinuation",
    "Identifier",
    "LexState",
    "LineComment",
    "SlotContext",
    "StringLiteral",
    "ValueKind",
    "classify",
    "is_series",
]

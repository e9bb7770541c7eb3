"""Custom exception hierarchy for contextQL.

All public errors inherit from ContextQLError so callers can catch the base
class for any contextQL-specific failure.  Every error carries a
machine-readable ``code`` and a ``details`` dict.
"""
from __future__ import annotations

from typing import Any


class ContextQLError(Exception):
    """Base exception for all contextQL errors.

    Args:
        message: Human-readable description.
        code: Machine-readable error code (e.g. ``UNTERMINATED``).
        details: Extra context about the failure.
    """

    default_code = "CONTEXTQL_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code or self.default_code
        self.details: dict[str, Any] = details or {}

    def to_error_response(self) -> dict[str, Any]:
        """Returns a structured error response."""
        return {
            "error": self.code,
            "message": str(self),
            "details": self.details,
        }


class LexError(ContextQLError):
    """Raised when literal SQL text cannot be tokenized safely."""

    default_code = "LEX_ERROR"


class UnterminatedConstructError(LexError):
    """Raised when a string, identifier, or comment is left open.

    Args:
        message: Human-readable description.
        delimiter: The delimiter that opened the construct.
    """

    default_code = "UNTERMINATED"

    def __init__(self, message: str, delimiter: str | None = None) -> None:
        super().__init__(message, details={"delimiter": delimiter})
        self.delimiter = delimiter


class AmbiguousContinuationError(LexError):
    """Raised when adjacent string literals could be joined with an
    escaping convention that cannot be decided from the literal text."""

    default_code = "AMBIGUOUS_CONTINUATION"


class MergeHazardError(ContextQLError):
    """Raised when text at a boundary could fuse into a different token.

    Args:
        message: Human-readable description.
        delimiter: The quoting delimiter involved (e.g. ``$foo$``).
        text: The offending text.
    """

    default_code = "MERGE_HAZARD"

    def __init__(
        self,
        message: str,
        delimiter: str | None = None,
        text: str | None = None,
    ) -> None:
        super().__init__(message, details={"delimiter": delimiter, "text": text})
        self.delimiter = delimiter
        self.text = text


class EscapeError(ContextQLError):
    """Raised when a value cannot be escaped for the requested context."""

    default_code = "ESCAPE_ERROR"


class MalformedIdentifierError(EscapeError):
    """Raised when a value used as an identifier is not shaped like one."""

    default_code = "MALFORMED_IDENTIFIER"

    def __init__(self, identifier: str, forbid_qualified: bool = False) -> None:
        super().__init__(
            f"Expected id, got {identifier}",
            details={"identifier": identifier, "forbid_qualified": forbid_qualified},
        )
        self.identifier = identifier


class UnescapableDelimiterError(EscapeError):
    """Raised when a splice delimiter is not one the escaper recognizes."""

    default_code = "UNESCAPABLE_DELIMITER"

    def __init__(self, delimiter: str) -> None:
        super().__init__(
            f"Cannot escape with {delimiter}",
            details={"delimiter": delimiter},
        )
        self.delimiter = delimiter


class UnrepresentableCharacterError(EscapeError):
    """Raised when text holds a character the target context cannot spell.

    Postgres has no way to write NUL inside a standard string, a bit string,
    a plain quoted identifier or a dollar-quoted body.
    """

    default_code = "UNREPRESENTABLE_CHARACTER"

    def __init__(self, char: str, delimiter: str) -> None:
        super().__init__(
            f"Cannot represent {char!r} inside {delimiter} delimited text",
            details={"char": char, "delimiter": delimiter},
        )
        self.char = char
        self.delimiter = delimiter


class TemplateArityError(ContextQLError, ValueError):
    """Raised when the number of values does not fit the literal chunks."""

    default_code = "ARITY"

    def __init__(self, n_chunks: int, n_values: int) -> None:
        super().__init__(
            f"Expected {n_chunks - 1} value(s) for {n_chunks} literal chunk(s), "
            f"got {n_values}.",
            details={"chunks": n_chunks, "values": n_values},
        )


class UnknownDialectError(ContextQLError, LookupError):
    """Raised when no dialect is registered under a name."""

    default_code = "UNKNOWN_DIALECT"

    def __init__(self, name: str, registered: list[str]) -> None:
        super().__init__(
            f"Unsupported dialect target: '{name}'. Registered targets: {registered}.",
            details={"name": name, "registered": registered},
        )

"""Test fixtures: sample values and template helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

#: Characters that some quoting convention must rewrite.
META_CHARS = "\0\b\t\n\r\x1a\"'\\$"

#: Awkward identifier text: both quote styles plus a space.
OREILLY = 'O\'Reilly the "Unescaped"'


@dataclass(frozen=True)
class FakeTemplate:
    """Duck-typed stand-in for ``string.templatelib.Template``."""

    strings: tuple[str, ...]
    values: tuple[Any, ...]


def chunks(text: str) -> list[str]:
    """Split ``text`` on ``{}`` placeholders into literal chunks."""
    return text.split("{}")


def render(tag: Any, text: str, *values: Any) -> str:
    """Interpolate ``values`` into the ``{}`` placeholders of ``text``."""
    return str(tag(chunks(text), *values))

"""Compiled pattern tables for the dialect lexers and escapers.

All patterns are applied with ``pattern.match(text, pos)`` (anchored at
``pos``) unless noted otherwise.  Body patterns have an outer Kleene star
and so always match, possibly the empty string.
"""
from __future__ import annotations

import re

# ---------------------------------------------------------------------------
# MySQL
# ---------------------------------------------------------------------------

_MYSQL_WSP = r"[\t\r\n ]"

#: Run of inert text before the next quote character.  Comments are only
#: consumed when they end inside the text; an unfinished comment stops the
#: match at its first character.
MYSQL_PREFIX_BEFORE_DELIMITER = re.compile(
    r"(?:"
    rf"--(?={_MYSQL_WSP})[^\r\n]*[\r\n]"
    r"|#[^\r\n]*[\r\n]"
    r"|/\*[\s\S]*?\*/"
    rf"|[^'\"`\-/#]|-(?!-{_MYSQL_WSP})|/(?!\*)"
    r")*"
)

#: Quote characters that open a delimited construct at MySQL top level.
MYSQL_STRING_DELIMITERS = frozenset("'\"")
MYSQL_IDENTIFIER_DELIMITERS = frozenset("`")

MYSQL_DELIMITED_BODIES: dict[str, re.Pattern[str]] = {
    "'": re.compile(r"(?:[^'\\]|\\[\s\S]|'')*"),
    '"': re.compile(r'(?:[^"\\]|\\[\s\S]|"")*'),
    "`": re.compile(r"(?:[^`\\]|\\[\s\S]|``)*"),
}

_MYSQL_ID = r"`(?:[^`]|``)+`"
MYSQL_ID = re.compile(_MYSQL_ID)
MYSQL_QUAL_ID = re.compile(rf"{_MYSQL_ID}(?:\.{_MYSQL_ID})*")

# ---------------------------------------------------------------------------
# Postgres
# ---------------------------------------------------------------------------

#: Start of the next comment, quoted construct or dollar quote.  Used with
#: ``search``.  Unquoted identifiers match as group ``word`` and are inert, so
#: the ``$`` in ``a$b$c`` opens nothing while ``1$a$`` opens a dollar quote.
PG_TOP_LEVEL_DELIMITER = re.compile(
    r"--"
    r"|/\*"
    r"|\$(?:[a-zA-Z_][a-zA-Z_0-9]*)?\$"
    r'|(?:[Uu]&)?"'
    r"|(?:[Uu]&|[EeBbXx])?'"
    r"|(?P<word>[^\W\d][\w$]*)"
)

PG_LINE_COMMENT_BODY = re.compile(r"[^\r\n]*")

#: Used with ``search`` to find the next nesting change.
PG_BLOCK_COMMENT_TOKEN = re.compile(r"\*/|/\*")

_PG_SIMPLE_DQ_BODY = re.compile(r'(?:[^"]|"")*(")?')
_PG_ESC_DQ_BODY = re.compile(r'(?:[^"\\]|""|\\[\s\S])*(")?')
_PG_SIMPLE_SQ_BODY = re.compile(r"(?:[^']|'')*(')?")
_PG_ESC_SQ_BODY = re.compile(r"(?:[^'\\]|''|\\[\s\S])*(')?")

#: Body patterns keyed by case-folded delimiter.  Group 1 is the closing
#: quote when the construct ends inside the text.
PG_DELIMITED_BODIES: dict[str, re.Pattern[str]] = {
    '"': _PG_SIMPLE_DQ_BODY,
    'u&"': _PG_ESC_DQ_BODY,
    "'": _PG_SIMPLE_SQ_BODY,
    "b'": _PG_SIMPLE_SQ_BODY,
    "x'": _PG_SIMPLE_SQ_BODY,
    "e'": _PG_ESC_SQ_BODY,
    "u&'": _PG_ESC_SQ_BODY,
}

#: Whitespace, then optionally what keeps an ``E'...'`` continuation alive.
PG_ESC_STRING_CONTINUATION = re.compile(r"[\t\n\r ]*(/\*|--|')?")

_PG_ID = r'(?:"(?:[^"]|"")+"|[Uu]&"(?:[^"\\]|""|\\[\s\S])+")'
PG_ID = re.compile(_PG_ID)
PG_QUAL_ID = re.compile(rf"{_PG_ID}(?:\.{_PG_ID})*")

#: A well-formed dollar-quote tag, ``$$`` or ``$name$``.
PG_DOLLAR_TAG = re.compile(r"\$(?:[a-zA-Z_][a-zA-Z_0-9]*)?\$")

# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------

#: Characters that any dialect's string escaping may need to rewrite.
STRING_META_CHARS = re.compile("[\x00\b\t\n\r\x1a\"'\\\\$]")

#: Leading offset in a time zone name such as ``+05:30`` or ``-08``.
TIME_ZONE_OFFSET = re.compile(r"([+\-\s])(\d\d):?(\d\d)?")

#: Whitespace that joins two Postgres string constants: it must hold a line
#: break, and ``--`` comments count as whitespace.
PG_CONTINUATION_GAP = re.compile(
    r"[\t\f ]*(?:--[^\r\n]*)?[\r\n](?:[\t\n\r\f ]|--[^\r\n]*)*"
)

QUOTE_CHARS = frozenset("'\"`")

"""Unit tests for the Postgres value escaper."""

from __future__ import annotations

import pytest

from contextql.errors import (
    MalformedIdentifierError,
    MergeHazardError,
    UnescapableDelimiterError,
    UnrepresentableCharacterError,
)
from contextql.escape.postgres import escape, escape_delimited, escape_id
from contextql.lex.postgres import make_lexer
from contextql.schema.options import EscapeOptions
from contextql.schema.state import EscapeContinuation
from contextql.trust import SqlId, default_minter
from tests.fixtures import META_CHARS, OREILLY

# ---------------------------------------------------------------------------
# Free-standing
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("foo", "'foo'"),
        ("it's", "'it''s'"),
        ("a\\b", r"E'a\\b'"),
        ("a\nb'", r"E'a\nb'''"),
        ("a$b", r"E'a\$b'"),
        ("a\0b", r"E'a\x00b'"),
        (b"\x01\xff", "decode('01ff', 'hex')"),
        (None, "NULL"),
        ([1, [2, "x"]], "1, (2, 'x')"),
    ],
)
def test_escape(value, expected):
    assert escape(value) == expected


def test_escape_string_meta_chars():
    assert escape(META_CHARS) == r"""E'\x00\b\t\n\r\x1a\"''\\\$'"""


def test_escape_trusted_identifier_is_not_split():
    assert escape(SqlId.escape("a.b")) == '"a.b"'


# ---------------------------------------------------------------------------
# Identifiers
# ---------------------------------------------------------------------------


def test_escape_id_doubles_quotes():
    assert escape_id(OREILLY) == '"O\'Reilly the ""Unescaped"""'


def test_escape_id_qualified():
    assert escape_id("a.b") == '"a"."b"'
    assert escape_id("a.b", True) == '"a.b"'


def test_escape_id_unicode():
    assert escape_id("a.b", unicode=True) == 'u&"a".u&"b"'
    assert escape_id(OREILLY, unicode=True) == r'u&"O\0027Reilly the \0022Unescaped\0022"'


def test_escape_id_keeps_nul_visible():
    assert escape_id("a\0b", unicode=True) == r'u&"a\0000b"'
    with pytest.raises(UnrepresentableCharacterError):
        escape_id("a\0b")


def test_escape_id_series():
    assert escape_id(["a", "b"]) == '"a", "b"'


def test_escape_id_trusted_fragment():
    assert escape_id(default_minter.mint('"a"."b"')) == '"a"."b"'
    assert escape_id(default_minter.mint('U&"a\\0041"'), True) == 'U&"a\\0041"'


def test_escape_id_rejects_qualified_fragment_when_forbidden():
    with pytest.raises(MalformedIdentifierError, match='Expected id, got "a"."b"'):
        escape_id(default_minter.mint('"a"."b"'), True)


# ---------------------------------------------------------------------------
# Delimited
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("metachar", "plain", "unicode", "escaped"),
    [
        ("'", "''", r"\0027", "''"),
        ('"', '"', r"\0022", r"\""),
        ("\\", "\\", r"\005c", r"\\"),
        ("\n", "\n", r"\000a", r"\n"),
        ("$", "$", r"\0024", r"\$"),
    ],
)
def test_escape_delimited_meta_chars(metachar, plain, unicode, escaped):
    assert escape_delimited(metachar, "'") == plain
    assert escape_delimited(metachar, "u&'") == unicode
    assert escape_delimited(metachar, "E'") == escaped


def test_escape_delimited_spells_out_nul_where_escapes_exist():
    assert escape_delimited("adm\0in", "E'") == r"adm\x00in"
    assert escape_delimited("adm\0in", "e") == r"'adm\x00in'"
    assert escape_delimited("adm\0in", "U&'") == r"adm\0000in"
    assert escape_delimited("adm\0in", 'U&"') == r"adm\0000in"


@pytest.mark.parametrize("delimiter", ["'", "b'", "X'", '"', "$$", "$foo$"])
def test_escape_delimited_rejects_nul_without_escapes(delimiter):
    with pytest.raises(UnrepresentableCharacterError, match="Cannot represent") as exc:
        escape_delimited("adm\0in", delimiter)
    assert exc.value.code == "UNREPRESENTABLE_CHARACTER"


def test_escape_delimited_identifiers():
    assert escape_delimited(OREILLY, '"') == 'O\'Reilly the ""Unescaped""'
    assert escape_delimited(OREILLY, 'U&"') == r"O\0027Reilly the \0022Unescaped\0022"
    assert escape_delimited("a.b", '"') == 'a"."b'
    assert escape_delimited("a.b", '"', EscapeOptions(forbid_qualified=True)) == "a.b"


def test_escape_delimited_blobs():
    data = b"\x0f\xa0"
    assert escape_delimited(data, "X'") == "0fa0"
    assert escape_delimited(data, "b'") == "0000111110100000"
    assert escape_delimited(data, "'") == "\x0f\xa0"
    assert escape_delimited(data, "u&'") == "\x0f\xa0"


def test_escape_delimited_continuation_is_self_delimited():
    assert escape_delimited("haven't", "e") == "'haven''t'"


@pytest.mark.parametrize("text", ["x", "x$bar$x", "$bar$x", "$$x", "$fOo$x", "x$foox"])
def test_escape_delimited_dollar_quote(text):
    assert escape_delimited(text, "$foo$") == text


@pytest.mark.parametrize(
    ("text", "tag"),
    [
        ("$$", "$$"),
        ("x$$x", "$$"),
        ("x$", "$$"),
        ("$foo$", "$foo$"),
        ("x$foo$x", "$foo$"),
        ("x$fo", "$foo$"),
    ],
)
def test_escape_delimited_dollar_quote_hazard(text, tag):
    with pytest.raises(MergeHazardError, match="Cannot embed "):
        escape_delimited(text, tag)


@pytest.mark.parametrize("delimiter", ["q'", "$foo", "`"])
def test_escape_delimited_unknown_delimiter(delimiter):
    with pytest.raises(UnescapableDelimiterError, match="Cannot escape with"):
        escape_delimited("x", delimiter)


@pytest.mark.parametrize(
    ("opener", "closer"),
    [("'", "'"), ("E'", "'"), ("U&'", "'"), ('"', '"'), ('U&"', '"'), ("$q$", "$q$")],
)
def test_escaped_text_stays_inside_its_quotes(opener, closer):
    hostile = f"{META_CHARS} {closer} -- x\n{closer}; DROP TABLE t; $"
    if opener in ("'", '"', "$q$"):
        hostile = hostile.replace("\0", "")
    if opener.startswith("$"):
        hostile = hostile.replace("$", "")
    lexer = make_lexer()
    state = lexer.feed(f"SELECT {opener}{escape_delimited(hostile, opener)}{closer}")
    assert state is None or state == EscapeContinuation()

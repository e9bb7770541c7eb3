"""Unit tests for the Postgres lexer."""

from __future__ import annotations

import re

import pytest

from contextql.errors import LexError, MergeHazardError, UnterminatedConstructError
from contextql.lex.postgres import PostgresLexer, make_lexer
from contextql.schema.state import (
    DollarQuote,
    EscapeContinuation,
    Identifier,
    StringLiteral,
)


def _contexts(*chunks: str) -> list:
    lexer = make_lexer()
    contexts = [lexer.feed(chunk) for chunk in chunks]
    lexer.feed(None)
    return contexts


@pytest.mark.parametrize(
    ("chunk", "expected"),
    [
        ("SELECT '", StringLiteral("'")),
        ("SELECT E'", StringLiteral("E'")),
        ("SELECT e'", StringLiteral("e'")),
        ("SELECT U&'", StringLiteral("U&'")),
        ("SELECT B'", StringLiteral("B'")),
        ("SELECT x'", StringLiteral("x'")),
        ('SELECT "', Identifier('"')),
        ('SELECT u&"', Identifier('u&"')),
        ("SELECT $$", DollarQuote("$$")),
        ("SELECT $body$", DollarQuote("$body$")),
    ],
)
def test_delimiter_opens_context(pg_lexer: PostgresLexer, chunk: str, expected):
    assert pg_lexer.feed(chunk) == expected


def test_prefix_case_is_preserved_but_kind_is_folded(pg_lexer: PostgresLexer):
    state = pg_lexer.feed("SELECT U&'")
    assert state.delimiter == "U&'"
    assert state.kind == "u&'"


def test_hash_is_not_a_comment(pg_lexer: PostgresLexer):
    assert pg_lexer.feed("SELECT 1 # '") == StringLiteral("'")


def test_line_comment_hides_quotes(pg_lexer: PostgresLexer):
    assert pg_lexer.feed("SELECT 1 --it's\n, ") is None


def test_block_comments_nest(pg_lexer: PostgresLexer):
    assert pg_lexer.feed("SELECT /* /* ' */ still ' */ '") == StringLiteral("'")


def test_unclosed_nested_block_comment(pg_lexer: PostgresLexer):
    with pytest.raises(UnterminatedConstructError, match="Unterminated block comment"):
        pg_lexer.feed("SELECT /* /* */ '")


def test_line_comment_must_end_inside_chunk(pg_lexer: PostgresLexer):
    with pytest.raises(UnterminatedConstructError, match="Unterminated line comment: --x"):
        pg_lexer.feed("SELECT 1 --x")


def test_simple_string_ignores_backslash(pg_lexer: PostgresLexer):
    assert pg_lexer.feed("SELECT 'a\\' ") is None


def test_escape_string_honours_backslash(pg_lexer: PostgresLexer):
    assert pg_lexer.feed("SELECT E'a\\' ") == StringLiteral("E'")


def test_incomplete_escape_in_escape_string(pg_lexer: PostgresLexer):
    with pytest.raises(LexError, match="Incomplete escape sequence in E'"):
        pg_lexer.feed("SELECT E'a\\")


def test_identifier_allows_doubled_quote(pg_lexer: PostgresLexer):
    assert pg_lexer.feed('SELECT "a""b') == Identifier('"')


def test_dollar_inside_identifier_is_not_a_quote(pg_lexer: PostgresLexer):
    assert pg_lexer.feed("SELECT a$b$c, ") is None


def test_identifier_with_dollars_then_string(pg_lexer: PostgresLexer):
    assert pg_lexer.feed("SELECT _x$1$ 'a") == StringLiteral("'")


@pytest.mark.parametrize("text", ["SELECT 1$a$ ", "SELECT ($a$", "SELECT 1 $a$"])
def test_dollar_after_non_identifier_opens_quote(text):
    assert PostgresLexer().feed(text) == DollarQuote("$a$")


def test_prefix_letter_inside_identifier_is_not_a_prefix(pg_lexer: PostgresLexer):
    assert pg_lexer.feed("SELECT xe'") == StringLiteral("'")


def test_dollar_quote_closes_on_same_tag():
    assert _contexts("SELECT $foo$ it's $foo$, ", "") == [None, None]


def test_dollar_quote_tag_is_case_sensitive(pg_lexer: PostgresLexer):
    assert pg_lexer.feed("SELECT $foo$ $Foo$, ") == DollarQuote("$foo$")


def test_dollar_quote_spans_chunks():
    assert _contexts("SELECT $$", "$$") == [DollarQuote("$$"), None]


@pytest.mark.parametrize(
    ("chunk", "suffix"),
    [
        ("SELECT $foo$ x$fo", "$fo"),
        ("SELECT $foo$ x$", "$"),
        ("SELECT $$ x$", "$"),
    ],
)
def test_dollar_quote_merge_hazard(pg_lexer: PostgresLexer, chunk: str, suffix: str):
    with pytest.raises(MergeHazardError, match=re.escape(f"merge hazard '{suffix}' at end of")):
        pg_lexer.feed(chunk)


def test_escape_string_close_enters_continuation(pg_lexer: PostgresLexer):
    assert pg_lexer.feed("SELECT E'a' ") == EscapeContinuation()


def test_continuation_reopens_escape_string(pg_lexer: PostgresLexer):
    assert pg_lexer.feed("SELECT E'a'\n  '") == StringLiteral("e'")


def test_continuation_survives_comments(pg_lexer: PostgresLexer):
    assert pg_lexer.feed("SELECT E'a' -- note\n /* more */ ") == EscapeContinuation()


def test_continuation_ends_at_other_text(pg_lexer: PostgresLexer):
    assert pg_lexer.feed("SELECT E'a', ") is None


def test_comment_in_continuation_must_close(pg_lexer: PostgresLexer):
    with pytest.raises(UnterminatedConstructError, match="Unterminated block comment"):
        pg_lexer.feed("SELECT E'a' /* open")


def test_plain_string_close_does_not_continue(pg_lexer: PostgresLexer):
    assert pg_lexer.feed("SELECT 'a' ") is None


def test_continuation_at_end_of_input_is_clean(pg_lexer: PostgresLexer):
    assert pg_lexer.feed("SELECT E'a'") == EscapeContinuation()
    assert pg_lexer.feed(None) == EscapeContinuation()


def test_end_of_input_inside_dollar_quote(pg_lexer: PostgresLexer):
    pg_lexer.feed("SELECT $tag$")
    with pytest.raises(UnterminatedConstructError, match=r"Unclosed dollar-quoted string: \$tag\$"):
        pg_lexer.feed(None)


def test_failure_is_sticky(pg_lexer: PostgresLexer):
    with pytest.raises(MergeHazardError) as first:
        pg_lexer.feed("SELECT $$ x$")
    with pytest.raises(MergeHazardError) as second:
        pg_lexer.feed("SELECT 1")
    assert str(second.value) == str(first.value)


def test_relexing_gives_same_contexts():
    chunks = ("SELECT u&\"", "\", E'", "' ", "")
    first = _contexts(*chunks)
    assert first == _contexts(*chunks)
    assert first == [Identifier('u&"'), StringLiteral("E'"), EscapeContinuation(), EscapeContinuation()]

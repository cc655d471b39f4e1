"""Unit tests for ClauseRegistry and the keyword lookup tables."""

from __future__ import annotations

import pytest

from chainql.compile.clauses import (
    CLAUSE_SPECS,
    KEYWORD_TEXT,
    ClauseBucket,
    ClauseKind,
    ClauseRegistry,
    Keyword,
)
from chainql.errors import BuilderStateError


def test_every_clause_and_keyword_has_a_rendering():
    assert set(CLAUSE_SPECS) == set(ClauseKind)
    assert set(KEYWORD_TEXT) == set(Keyword)


def test_multi_word_keywords():
    assert CLAUSE_SPECS[ClauseKind.GROUP_BY].keyword == "GROUP BY"
    assert CLAUSE_SPECS[ClauseKind.SELECT_DISTINCT].keyword == "SELECT DISTINCT"
    assert KEYWORD_TEXT[Keyword.IS_NOT_NULL] == "IS NOT NULL"


def test_cross_join_is_not_rendered_as_right_join():
    assert KEYWORD_TEXT[Keyword.CROSS_JOIN] == "CROSS JOIN"


def test_render_follows_enumeration_order():
    reg = ClauseRegistry()
    reg.open(ClauseKind.WHERE)
    reg.append('"a"', "=", "1")
    reg.open(ClauseKind.FROM)
    reg.append('"t"')
    reg.open(ClauseKind.SELECT)
    reg.append('"a"', '"b"')
    assert reg.render() == 'SELECT "a" , "b" FROM "t" WHERE "a" = 1'


def test_opened_empty_clause_renders_keyword_only():
    reg = ClauseRegistry()
    reg.open(ClauseKind.SELECT)
    assert reg.render() == "SELECT"


def test_reopening_replaces_bucket():
    reg = ClauseRegistry()
    reg.open(ClauseKind.SELECT)
    reg.append('"a"')
    reg.open(ClauseKind.SELECT)
    reg.append('"b"')
    assert reg.render() == 'SELECT "b"'


def test_append_without_open_clause_raises():
    with pytest.raises(BuilderStateError):
        ClauseRegistry().append('"a"')


def test_append_to_unopened_clause_raises():
    reg = ClauseRegistry()
    reg.open(ClauseKind.SELECT)
    with pytest.raises(BuilderStateError) as exc_info:
        reg.append_to(ClauseKind.ORDER_BY, "DESC")
    assert exc_info.value.clause == "ORDER_BY"


def test_append_to_keeps_current_clause():
    reg = ClauseRegistry()
    reg.open(ClauseKind.FROM)
    reg.append('"a"')
    reg.open(ClauseKind.WHERE)
    reg.append_to(ClauseKind.FROM, "LEFT JOIN", '"b"')
    reg.append('"x"', "IS NULL")
    assert reg.current is ClauseKind.WHERE
    assert reg.tokens(ClauseKind.FROM) == ['"a"', "LEFT JOIN", '"b"']
    assert reg.tokens(ClauseKind.WHERE) == ['"x"', "IS NULL"]


def test_tokens_returns_copy():
    reg = ClauseRegistry()
    reg.open(ClauseKind.SELECT)
    reg.tokens(ClauseKind.SELECT).append("x")
    assert reg.tokens(ClauseKind.SELECT) == []


class TestOrderByDirections:
    def test_direction_joins_its_expression(self):
        bucket = ClauseBucket(ClauseKind.ORDER_BY, ['"a"', "DESC", '"b"', "ASC", '"c"'])
        assert bucket.render() == 'ORDER BY "a" DESC , "b" ASC , "c"'

    def test_other_clauses_are_plain_joins(self):
        bucket = ClauseBucket(ClauseKind.GROUP_BY, ['"a"', '"b"'])
        assert bucket.render() == 'GROUP BY "a" , "b"'

    def test_quoted_desc_identifier_is_not_a_direction(self):
        bucket = ClauseBucket(ClauseKind.ORDER_BY, ['"a"', '"DESC"'])
        assert bucket.render() == 'ORDER BY "a" , "DESC"'

"""Clause buckets and the keyword lookup tables.

A statement is assembled into one bucket per SQL clause.  Buckets render in
the fixed order of :class:`ClauseKind` no matter which order they were opened
in; tokens inside a bucket render in append order, joined by the clause's
delimiter.

Keyword text lives in lookup tables (:data:`CLAUSE_SPECS`,
:data:`KEYWORD_TEXT`) rather than on the enum members, so multi-word
keywords such as ``GROUP BY`` need no per-member overrides.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from chainql.compile.formatter import LIST_DELIMITER
from chainql.errors import BuilderStateError


class ClauseKind(str, Enum):
    """Top-level clauses, declared in render order."""

    WITH = "WITH"
    SELECT = "SELECT"
    SELECT_DISTINCT = "SELECT_DISTINCT"
    CALL = "CALL"
    FROM = "FROM"
    WHERE = "WHERE"
    GROUP_BY = "GROUP_BY"
    HAVING = "HAVING"
    ORDER_BY = "ORDER_BY"
    OFFSET = "OFFSET"
    LIMIT = "LIMIT"


@dataclass(frozen=True)
class ClauseSpec:
    """Rendered keyword and token delimiter of one clause."""

    keyword: str
    delimiter: str


CLAUSE_SPECS: dict[ClauseKind, ClauseSpec] = {
    ClauseKind.WITH: ClauseSpec("WITH", LIST_DELIMITER),
    ClauseKind.SELECT: ClauseSpec("SELECT", LIST_DELIMITER),
    ClauseKind.SELECT_DISTINCT: ClauseSpec("SELECT DISTINCT", LIST_DELIMITER),
    ClauseKind.CALL: ClauseSpec("CALL", " "),
    ClauseKind.FROM: ClauseSpec("FROM", " "),
    ClauseKind.WHERE: ClauseSpec("WHERE", " "),
    ClauseKind.GROUP_BY: ClauseSpec("GROUP BY", LIST_DELIMITER),
    ClauseKind.HAVING: ClauseSpec("HAVING", " "),
    ClauseKind.ORDER_BY: ClauseSpec("ORDER BY", LIST_DELIMITER),
    ClauseKind.OFFSET: ClauseSpec("OFFSET", " "),
    ClauseKind.LIMIT: ClauseSpec("LIMIT", " "),
}


class Keyword(str, Enum):
    """Keywords and operators appended inside a clause."""

    INNER_JOIN = "INNER_JOIN"
    OUTER_JOIN = "OUTER_JOIN"
    LEFT_JOIN = "LEFT_JOIN"
    RIGHT_JOIN = "RIGHT_JOIN"
    CROSS_JOIN = "CROSS_JOIN"
    ON = "ON"
    USING = "USING"
    AND = "AND"
    OR = "OR"
    BETWEEN = "BETWEEN"
    EXISTS = "EXISTS"
    NOT = "NOT"
    IN = "IN"
    LIKE = "LIKE"
    EQUAL = "EQUAL"
    GREATER_THAN = "GREATER_THAN"
    GREATER_THAN_OR_EQUAL = "GREATER_THAN_OR_EQUAL"
    LESS_THAN = "LESS_THAN"
    LESS_THAN_OR_EQUAL = "LESS_THAN_OR_EQUAL"
    IS_NULL = "IS_NULL"
    IS_NOT_NULL = "IS_NOT_NULL"
    ASC = "ASC"
    DESC = "DESC"


KEYWORD_TEXT: dict[Keyword, str] = {
    Keyword.INNER_JOIN: "INNER JOIN",
    Keyword.OUTER_JOIN: "OUTER JOIN",
    Keyword.LEFT_JOIN: "LEFT JOIN",
    Keyword.RIGHT_JOIN: "RIGHT JOIN",
    Keyword.CROSS_JOIN: "CROSS JOIN",
    Keyword.ON: "ON",
    Keyword.USING: "USING",
    Keyword.AND: "AND",
    Keyword.OR: "OR",
    Keyword.BETWEEN: "BETWEEN",
    Keyword.EXISTS: "EXISTS",
    Keyword.NOT: "NOT",
    Keyword.IN: "IN",
    Keyword.LIKE: "LIKE",
    Keyword.EQUAL: "=",
    Keyword.GREATER_THAN: ">",
    Keyword.GREATER_THAN_OR_EQUAL: ">=",
    Keyword.LESS_THAN: "<",
    Keyword.LESS_THAN_OR_EQUAL: "<=",
    Keyword.IS_NULL: "IS NULL",
    Keyword.IS_NOT_NULL: "IS NOT NULL",
    Keyword.ASC: "ASC",
    Keyword.DESC: "DESC",
}

_DIRECTIONS = frozenset({KEYWORD_TEXT[Keyword.ASC], KEYWORD_TEXT[Keyword.DESC]})


@dataclass
class ClauseBucket:
    """Ordered tokens of one clause."""

    kind: ClauseKind
    tokens: list[str] = field(default_factory=list)

    @property
    def delimiter(self) -> str:
        return CLAUSE_SPECS[self.kind].delimiter

    def render(self) -> str:
        """Return the keyword followed by the joined tokens."""
        parts = [CLAUSE_SPECS[self.kind].keyword]
        body = self._join()
        if body:
            parts.append(body)
        return " ".join(parts)

    def _join(self) -> str:
        if self.kind is not ClauseKind.ORDER_BY:
            return self.delimiter.join(self.tokens)
        # A direction belongs to the preceding expression, not to the list.
        out = ""
        for i, token in enumerate(self.tokens):
            if i == 0:
                out = token
            elif token in _DIRECTIONS:
                out = f"{out} {token}"
            else:
                out = f"{out}{self.delimiter}{token}"
        return out


class ClauseRegistry:
    """Holds the clause buckets of one statement and the current clause.

    ``open`` starts (or restarts) a clause and makes it current; ``append``
    writes to the current clause; ``append_to`` writes to a named clause and
    leaves the current one alone, which lets ``FROM`` collect join fragments
    while another clause is being filled.
    """

    def __init__(self) -> None:
        self._buckets: dict[ClauseKind, ClauseBucket] = {}
        self._current: ClauseKind | None = None

    @property
    def current(self) -> ClauseKind | None:
        return self._current

    def is_open(self, kind: ClauseKind) -> bool:
        return kind in self._buckets

    def tokens(self, kind: ClauseKind) -> list[str]:
        """Return a copy of the tokens collected for ``kind``."""
        bucket = self._buckets.get(kind)
        return list(bucket.tokens) if bucket else []

    def open(self, kind: ClauseKind) -> None:
        self._buckets[kind] = ClauseBucket(kind)
        self._current = kind

    def require_current(self) -> ClauseKind:
        """Return the current clause.

        Raises:
            BuilderStateError: If no clause has been opened yet.
        """
        if self._current is None:
            raise BuilderStateError(
                "No clause is open; call a clause method such as SELECT() or WHERE() first."
            )
        return self._current

    def append(self, *tokens: str) -> None:
        self._buckets[self.require_current()].tokens.extend(tokens)

    def append_to(self, kind: ClauseKind, *tokens: str) -> None:
        bucket = self._buckets.get(kind)
        if bucket is None:
            raise BuilderStateError(
                f"Clause {CLAUSE_SPECS[kind].keyword} is not open; call {kind.value}() first.",
                clause=kind.value,
            )
        bucket.tokens.extend(tokens)

    def render(self) -> str:
        """Concatenate every opened clause in canonical order."""
        return " ".join(
            self._buckets[kind].render() for kind in ClauseKind if kind in self._buckets
        )

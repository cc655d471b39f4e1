"""Fluent SQL statement builder.

``SQLStringBuilder`` is the aggregate root of the package.  It owns a
:class:`~chainql.compile.clauses.ClauseRegistry` for the statement text and,
once the first placeholder is declared, a
:class:`~chainql.compile.parameters.ParameterTable` for its values::

    query = (
        SQLStringBuilder()
        .SELECT().columns()
        .FROM().table("public", "t")
        .WHERE().column("t", "v").equals().query_param()
    )
    str(query)                          # SELECT * FROM "public"."t" WHERE "t"."v" = $$1
    query.set_query_params_positionally(42).get_compiled()
                                        # SELECT * FROM "public"."t" WHERE "t"."v" = 42

Naming
------
Methods that write SQL keywords keep the keyword's upper-case spelling
(``SELECT()``, ``LEFT_JOIN()``, ``IS_NULL()``).  Methods that write values,
identifiers or calls are snake_case (``column()``, ``scalar()``,
``scalar_function()``).  Every mutating method returns the builder.

Clause targeting
----------------
Clause initializers open a clause and make it *current*; fragments are
appended to the current clause.  Join keywords, ``ON`` and ``USING`` always
go to ``FROM``, and ``ASC`` / ``DESC`` always go to ``ORDER BY``, without
changing the current clause.

Caching
-------
The raw statement is rendered on first request and cached; any structural
change drops the cache.  The compiled statement is recomputed whenever the
statement or an injected value changed since the last successful compile.
"""
from __future__ import annotations

from typing import Any

from chainql.compile import formatter as fmt
from chainql.compile.clauses import KEYWORD_TEXT, ClauseKind, ClauseRegistry, Keyword
from chainql.compile.merger import merge_subquery
from chainql.compile.parameters import ParameterTable, is_ordinal_reference
from chainql.compile.renderer import compile_statement, prettify
from chainql.errors import InvalidArgumentError, ParameterOverflowError, ReferenceNotFoundError
from chainql.schema.operands import ColumnOperand, ParamOperand, ValueOperand
from chainql.schema.settings import DEFAULT_SETTINGS, BuilderSettings


class SQLStringBuilder:
    """Accumulates SQL fragments into clauses and renders one statement.

    Args:
        settings: Placeholder marker settings; defaults to
            :data:`~chainql.schema.settings.DEFAULT_SETTINGS`.
    """

    def __init__(self, settings: BuilderSettings | None = None) -> None:
        self._settings = settings or DEFAULT_SETTINGS
        self._registry = ClauseRegistry()
        self._parameters: ParameterTable | None = None
        self._raw: str | None = None
        self._compiled: str | None = None
        self._dirty = True

    # ------------------------------------------------------------------
    # Static helpers
    # ------------------------------------------------------------------

    @staticmethod
    def identifier(name: Any, *qualifiers: Any) -> str:
        """Return a quoted identifier, qualifiers first: ``"db"."schema"."name"``."""
        return fmt.qualify(*(str(q) for q in qualifiers), str(name))

    @staticmethod
    def varchar(value: Any) -> str:
        """Return ``value`` as a quoted string literal cast to ``TEXT``."""
        return fmt.cast(fmt.quote_literal(fmt.escape_chars(str(value))), "TEXT")

    @staticmethod
    def cast(value: Any, type_: str) -> str:
        return fmt.cast(str(value), type_)

    @staticmethod
    def block(text: Any) -> str:
        return fmt.group(str(text))

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def settings(self) -> BuilderSettings:
        return self._settings

    @property
    def current_clause(self) -> ClauseKind | None:
        return self._registry.current

    @property
    def parameter_table(self) -> ParameterTable | None:
        """The parameter table, or ``None`` before the first placeholder."""
        return self._parameters

    @property
    def parameter_count(self) -> int:
        return self._parameters.slot_count if self._parameters else 0

    @property
    def parameter_references(self) -> dict[str, list[int]]:
        return self._parameters.references if self._parameters else {}

    @property
    def parameter_injections(self) -> list[str | None]:
        return self._parameters.injections if self._parameters else []

    @property
    def is_dirty(self) -> bool:
        """True when the compiled statement is out of date."""
        return self._dirty

    # ------------------------------------------------------------------
    # Clause initializers
    # ------------------------------------------------------------------

    def WITH(self) -> SQLStringBuilder:
        return self._open(ClauseKind.WITH)

    def SELECT(self) -> SQLStringBuilder:
        return self._open(ClauseKind.SELECT)

    def SELECT_DISTINCT(self) -> SQLStringBuilder:
        return self._open(ClauseKind.SELECT_DISTINCT)

    def CALL(self) -> SQLStringBuilder:
        return self._open(ClauseKind.CALL)

    def FROM(self) -> SQLStringBuilder:
        return self._open(ClauseKind.FROM)

    def WHERE(self) -> SQLStringBuilder:
        return self._open(ClauseKind.WHERE)

    def GROUP_BY(self) -> SQLStringBuilder:
        return self._open(ClauseKind.GROUP_BY)

    def HAVING(self) -> SQLStringBuilder:
        return self._open(ClauseKind.HAVING)

    def ORDER_BY(self) -> SQLStringBuilder:
        return self._open(ClauseKind.ORDER_BY)

    def OFFSET(self, offset: int) -> SQLStringBuilder:
        self._open(ClauseKind.OFFSET)
        return self._append(str(offset))

    def LIMIT(self, limit: int) -> SQLStringBuilder:
        self._open(ClauseKind.LIMIT)
        return self._append(str(limit))

    # ------------------------------------------------------------------
    # Clause continuations
    # ------------------------------------------------------------------

    def CTE(self, sub_query: SQLStringBuilder, alias: str) -> SQLStringBuilder:
        """Append ``"alias" AS ( <sub_query> )`` to the current clause."""
        self._registry.require_current()
        text = self._parse_sub_query(sub_query)
        return self._append(fmt.alias_prefix(fmt.group(text), alias))

    def INNER_JOIN(self) -> SQLStringBuilder:
        return self._append_to(ClauseKind.FROM, KEYWORD_TEXT[Keyword.INNER_JOIN])

    def OUTER_JOIN(self) -> SQLStringBuilder:
        return self._append_to(ClauseKind.FROM, KEYWORD_TEXT[Keyword.OUTER_JOIN])

    def LEFT_JOIN(self) -> SQLStringBuilder:
        return self._append_to(ClauseKind.FROM, KEYWORD_TEXT[Keyword.LEFT_JOIN])

    def RIGHT_JOIN(self) -> SQLStringBuilder:
        return self._append_to(ClauseKind.FROM, KEYWORD_TEXT[Keyword.RIGHT_JOIN])

    def CROSS_JOIN(self) -> SQLStringBuilder:
        return self._append_to(ClauseKind.FROM, KEYWORD_TEXT[Keyword.CROSS_JOIN])

    def ON(self) -> SQLStringBuilder:
        return self._append_to(ClauseKind.FROM, KEYWORD_TEXT[Keyword.ON])

    def USING(self, *columns: str) -> SQLStringBuilder:
        """Append ``USING ( "a" , "b" )`` to ``FROM``."""
        if not columns:
            raise InvalidArgumentError("USING() needs at least one column.")
        return self._append_to(
            ClauseKind.FROM,
            KEYWORD_TEXT[Keyword.USING],
            fmt.group_list(fmt.quote_identifier(c) for c in columns),
        )

    # ------------------------------------------------------------------
    # Predicates and operators
    # ------------------------------------------------------------------

    def NOT(self) -> SQLStringBuilder:
        return self._keyword(Keyword.NOT)

    def AND(self) -> SQLStringBuilder:
        return self._keyword(Keyword.AND)

    def OR(self) -> SQLStringBuilder:
        return self._keyword(Keyword.OR)

    def BETWEEN(self) -> SQLStringBuilder:
        return self._keyword(Keyword.BETWEEN)

    def LIKE(self) -> SQLStringBuilder:
        return self._keyword(Keyword.LIKE)

    def IS_NULL(self) -> SQLStringBuilder:
        return self._keyword(Keyword.IS_NULL)

    def IS_NOT_NULL(self) -> SQLStringBuilder:
        return self._keyword(Keyword.IS_NOT_NULL)

    def EXISTS(self, sub_query: SQLStringBuilder) -> SQLStringBuilder:
        self._registry.require_current()
        text = self._parse_sub_query(sub_query)
        return self._append(KEYWORD_TEXT[Keyword.EXISTS], fmt.group(text))

    def IN(self, *args: Any) -> SQLStringBuilder:
        """Append an ``IN`` predicate.

        ``IN(sub_query)`` embeds another builder, ``IN(n)`` declares ``n``
        fresh ordinal placeholders and ``IN("a", "b")`` declares one
        placeholder per reference::

            .WHERE().column("id").IN(3)     # WHERE "id" IN ( $$1 , $$2 , $$3 )

        Raises:
            InvalidArgumentError: If no argument is given or the count is
                not positive.
        """
        if not args:
            raise InvalidArgumentError("IN() needs a subquery, a count or references.")
        self._registry.require_current()

        first = args[0]
        if len(args) == 1 and isinstance(first, SQLStringBuilder):
            text = self._parse_sub_query(first)
            return self._append(KEYWORD_TEXT[Keyword.IN], fmt.group(text))

        if len(args) == 1 and is_ordinal_reference(first):
            if first < 1:
                raise InvalidArgumentError(f"IN() needs a positive count, got {first}.")
            references: tuple[Any, ...] = (None,) * first
        else:
            references = args

        table = self._params()
        markers = table.allocate_all(references)
        return self._append(KEYWORD_TEXT[Keyword.IN], fmt.group_list(markers))

    def equals(self) -> SQLStringBuilder:
        return self._keyword(Keyword.EQUAL)

    def greater_than(self) -> SQLStringBuilder:
        return self._keyword(Keyword.GREATER_THAN)

    def greater_than_or_equals(self) -> SQLStringBuilder:
        return self._keyword(Keyword.GREATER_THAN_OR_EQUAL)

    def less_than(self) -> SQLStringBuilder:
        return self._keyword(Keyword.LESS_THAN)

    def less_than_or_equals(self) -> SQLStringBuilder:
        return self._keyword(Keyword.LESS_THAN_OR_EQUAL)

    # ------------------------------------------------------------------
    # Ordering
    # ------------------------------------------------------------------

    def ASC(self) -> SQLStringBuilder:
        return self._append_to(ClauseKind.ORDER_BY, KEYWORD_TEXT[Keyword.ASC])

    def DESC(self) -> SQLStringBuilder:
        return self._append_to(ClauseKind.ORDER_BY, KEYWORD_TEXT[Keyword.DESC])

    # ------------------------------------------------------------------
    # Values and objects
    # ------------------------------------------------------------------

    def scalar(self, value: Any) -> SQLStringBuilder:
        """Append a literal; strings are quoted and escaped."""
        return self._append(fmt.scalar_literal(value))

    def ordinal(self, number: int | float) -> SQLStringBuilder:
        return self._append(str(number))

    def column(self, *path: str, alias: str | None = None) -> SQLStringBuilder:
        """Append a column; leading parts of ``path`` qualify the last one.

        ``column("v")`` gives ``"v"``, ``column("t", "v", alias="x")`` gives
        ``"t"."v" AS "x"``.
        """
        return self._append(fmt.alias_suffix(self._column_path(path), alias))

    def column_cast(
        self, *path: str, cast_to: str, alias: str | None = None
    ) -> SQLStringBuilder:
        """Append a column wrapped in ``CAST( ... AS cast_to )``."""
        expr = fmt.cast(self._column_path(path), cast_to)
        return self._append(fmt.alias_suffix(expr, alias))

    def columns(self, qualifier: str | None = None) -> SQLStringBuilder:
        """Append ``*`` or ``"qualifier".*``."""
        return self._append(fmt.qualify(qualifier, "*") if qualifier else "*")

    def table(self, schema: str, table: str, alias: str | None = None) -> SQLStringBuilder:
        return self._append(fmt.alias_suffix(fmt.qualify(schema, table), alias))

    def sub_query(self, sub_query: SQLStringBuilder, alias: str | None = None) -> SQLStringBuilder:
        """Append ``( <sub_query> )``, optionally aliased.

        The subquery's placeholders become placeholders of this builder;
        ordinal ones are renumbered to follow this builder's ordinals.
        """
        self._registry.require_current()
        text = self._parse_sub_query(sub_query)
        return self._append(fmt.alias_suffix(fmt.group(text), alias))

    def raw(self, text: str) -> SQLStringBuilder:
        """Append ``text`` unchanged, for anything the builder does not cover."""
        return self._append(text)

    # ------------------------------------------------------------------
    # Calls
    # ------------------------------------------------------------------

    def void_procedure(self, name: str, *args: Any) -> SQLStringBuilder:
        self._registry.require_current()
        return self._append(fmt.call(name, self._arguments(args)))

    def scalar_function(self, name: str, alias: str | None, *args: Any) -> SQLStringBuilder:
        self._registry.require_current()
        return self._append(fmt.alias_suffix(fmt.call(name, self._arguments(args)), alias))

    def scalar_function_cast(
        self, name: str, alias: str | None, cast_to: str, *args: Any
    ) -> SQLStringBuilder:
        self._registry.require_current()
        expr = fmt.cast(fmt.call(name, self._arguments(args)), cast_to)
        return self._append(fmt.alias_suffix(expr, alias))

    def agg_function(
        self, name: str, alias: str | None, distinct: bool, argument: Any
    ) -> SQLStringBuilder:
        """Append ``name( [DISTINCT ]argument )``, optionally aliased."""
        self._registry.require_current()
        expr = fmt.aggregate(name, self._argument(argument), distinct)
        return self._append(fmt.alias_suffix(expr, alias))

    def agg_function_cast(
        self, name: str, alias: str | None, cast_to: str, distinct: bool, argument: Any
    ) -> SQLStringBuilder:
        self._registry.require_current()
        expr = fmt.cast(fmt.aggregate(name, self._argument(argument), distinct), cast_to)
        return self._append(fmt.alias_suffix(expr, alias))

    # ------------------------------------------------------------------
    # Query parameters
    # ------------------------------------------------------------------

    def query_param(self, reference: Any = None) -> SQLStringBuilder:
        """Append a placeholder.

        Args:
            reference: ``None`` declares the next ordinal (``$$1``, ``$$2``
                ...); an ``int`` reuses an ordinal already declared; anything
                else is a name (``$?name``).  Declaring a reference again binds
                one value to every occurrence.

        Raises:
            BuilderStateError: If no clause is open.
            InvalidArgumentError: If an ordinal was never declared or a name
                is empty or holds whitespace.
        """
        self._registry.require_current()
        return self._append(self._params().allocate(reference))

    def set_query_param(self, reference: Any, value: Any) -> SQLStringBuilder:
        """Inject ``value`` into every placeholder declared with ``reference``.

        ``int`` references address ordinals, anything else addresses names.

        Raises:
            ReferenceNotFoundError: If ``reference`` was never declared.
        """
        if self._parameters is None:
            raise ReferenceNotFoundError(reference)
        self._parameters.set(reference, value)
        self._dirty = True
        return self

    def set_query_params_positionally(self, *values: Any) -> SQLStringBuilder:
        """Replace all injected values by slot position.

        The first declared placeholder receives the first value and so on.
        Missing values leave their slots unset.

        Raises:
            ParameterOverflowError: If there are more values than
                placeholders.  Injected values are left as they were.
        """
        if self._parameters is None:
            if values:
                raise ParameterOverflowError(len(values), 0)
            return self
        self._parameters.set_positionally(*values)
        self._dirty = True
        return self

    def clear_query_params(self) -> SQLStringBuilder:
        if self._parameters is not None:
            self._parameters.clear()
        self._dirty = True
        return self

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def get_raw(self, pretty: bool = False) -> str:
        """Return the statement with placeholder markers in place.

        Args:
            pretty: Collapse markers to the display marker and tighten
                spacing.  For reading only.
        """
        if self._raw is None:
            self._raw = self._registry.render()
        return prettify(self._raw, self._settings) if pretty else self._raw

    def get_compiled(self, pretty: bool = False) -> str:
        """Return the statement with every placeholder replaced by its value.

        Raises:
            PositionOutOfBoundsError: More placeholders than slots.
            PlaceholderOrderError: Placeholders were declared out of
                statement order.
            MissingInjectionValueError: A placeholder has no value.
        """
        if self._dirty or self._compiled is None:
            compiled = compile_statement(self.get_raw(), self._parameters)
            self._compiled = compiled
            self._dirty = False
        return prettify(self._compiled, self._settings) if pretty else self._compiled

    def __str__(self) -> str:
        return self.get_raw()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.get_raw()!r})"

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _invalidate(self) -> None:
        self._raw = None
        self._dirty = True

    def _open(self, kind: ClauseKind) -> SQLStringBuilder:
        self._registry.open(kind)
        self._invalidate()
        return self

    def _append(self, *tokens: str) -> SQLStringBuilder:
        self._registry.append(*tokens)
        self._invalidate()
        return self

    def _append_to(self, kind: ClauseKind, *tokens: str) -> SQLStringBuilder:
        self._registry.append_to(kind, *tokens)
        self._invalidate()
        return self

    def _keyword(self, keyword: Keyword) -> SQLStringBuilder:
        return self._append(KEYWORD_TEXT[keyword])

    def _params(self) -> ParameterTable:
        if self._parameters is None:
            self._parameters = ParameterTable(self._settings)
        return self._parameters

    @staticmethod
    def _column_path(path: tuple[str, ...]) -> str:
        if not path:
            raise InvalidArgumentError("A column needs at least a name.")
        return fmt.qualify(*path)

    def _argument(self, arg: Any) -> str:
        if isinstance(arg, str):
            return arg
        if isinstance(arg, ParamOperand):
            return self._params().allocate(arg.param)
        if isinstance(arg, ValueOperand):
            return fmt.scalar_literal(arg.value)
        if isinstance(arg, ColumnOperand):
            return fmt.qualify(*arg.col.split(".", 1))
        return str(arg)

    def _arguments(self, args: tuple[Any, ...]) -> list[str]:
        params = [a.param for a in args if isinstance(a, ParamOperand)]
        markers = iter(self._params().allocate_all(params) if params else ())
        return [next(markers) if isinstance(a, ParamOperand) else self._argument(a) for a in args]

    def _parse_sub_query(self, sub_query: SQLStringBuilder) -> str:
        if not isinstance(sub_query, SQLStringBuilder):
            raise InvalidArgumentError(
                f"Expected a SQLStringBuilder subquery, got {type(sub_query).__name__}."
            )
        if sub_query is self:
            raise InvalidArgumentError("A builder cannot be embedded into itself.")
        child_raw = sub_query.get_raw()
        child_table = sub_query.parameter_table
        if child_table is None or child_table.slot_count == 0:
            return child_raw
        return merge_subquery(self._params(), child_raw, child_table)

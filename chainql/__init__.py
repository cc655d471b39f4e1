"""chainQL: fluent SQL statement assembly with tracked placeholders.

Chain fragments, render once, compile with values.

Public API
----------
``SQLStringBuilder``
    Accumulates clause fragments and placeholders, renders the raw statement
    and compiles it with injected values.

``BuilderSettings``
    Placeholder marker configuration.

Re-exported types
-----------------
``ClauseKind``, ``Keyword``, the call-argument operands and all error
classes.

Example::

    from chainql import SQLStringBuilder

    query = (
        SQLStringBuilder()
        .SELECT().columns()
        .FROM().table("public", "t")
        .WHERE().column("t", "v").equals().query_param()
    )
    query.set_query_params_positionally(42)
    query.get_compiled()   # SELECT * FROM "public"."t" WHERE "t"."v" = 42
"""

from __future__ import annotations

from chainql.builder import SQLStringBuilder
from chainql.compile.clauses import ClauseKind, Keyword
from chainql.errors import (
    BuilderStateError,
    ChainQLError,
    CompilationError,
    InvalidArgumentError,
    MissingInjectionValueError,
    ParameterError,
    ParameterOverflowError,
    PlaceholderOrderError,
    PositionOutOfBoundsError,
    ReferenceNotFoundError,
)
from chainql.schema.operands import ColumnOperand, ParamOperand, ValueOperand
from chainql.schema.settings import DEFAULT_SETTINGS, BuilderSettings

__all__ = [
    # Builder
    "SQLStringBuilder",
    "ClauseKind",
    "Keyword",
    # Settings
    "BuilderSettings",
    "DEFAULT_SETTINGS",
    # Call arguments
    "ColumnOperand",
    "ParamOperand",
    "ValueOperand",
    # Errors
    "ChainQLError",
    "BuilderStateError",
    "InvalidArgumentError",
    "ParameterError",
    "ReferenceNotFoundError",
    "ParameterOverflowError",
    "CompilationError",
    "PositionOutOfBoundsError",
    "MissingInjectionValueError",
    "PlaceholderOrderError",
]

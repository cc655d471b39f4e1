"""Typed operands accepted as procedure and function arguments.

Plain strings are taken as ready-made SQL fragments.  The models below let a
call argument carry something the builder has to render itself::

    from chainql import ColumnOperand, ParamOperand, SQLStringBuilder, ValueOperand

    query = SQLStringBuilder().CALL().void_procedure(
        SQLStringBuilder.identifier("archive", "ops"),
        ColumnOperand(col="orders.id"),
        ValueOperand(value="2024"),
        ParamOperand(param="tenant"),
    )
    # CALL "ops"."archive"( "orders"."id" , '2024' , $?tenant )
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

_FORBID = ConfigDict(extra="forbid", frozen=True)


class ColumnOperand(BaseModel):
    """A column reference: ``table.column`` or a bare ``column``."""

    model_config = _FORBID

    col: str


class ValueOperand(BaseModel):
    """A literal value rendered as an escaped scalar."""

    model_config = _FORBID

    value: Any


class ParamOperand(BaseModel):
    """A placeholder.

    ``None`` allocates the next ordinal, an ``int`` binds to that ordinal and
    any other value is used as a named reference.
    """

    model_config = _FORBID

    param: Any = None

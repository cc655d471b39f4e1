"""Test fixtures: builder factories for statements shared across test modules."""

from __future__ import annotations

from chainql.builder import SQLStringBuilder


def filtered_select() -> SQLStringBuilder:
    """``SELECT * FROM "public"."t" WHERE "t"."v" = $$1``."""
    return (
        SQLStringBuilder()
        .SELECT().columns()
        .FROM().table("public", "t")
        .WHERE().column("t", "v").equals().query_param()
    )


def customer_ids(ordinals: int = 2) -> SQLStringBuilder:
    """A subquery selecting customer ids with ``ordinals`` ordinal filters."""
    sub = (
        SQLStringBuilder()
        .SELECT().column("id")
        .FROM().table("sales", "customers")
        .WHERE()
    )
    for i in range(ordinals):
        if i:
            sub.AND()
        sub.column(f"f{i + 1}").equals().query_param()
    return sub


def tenant_orders() -> SQLStringBuilder:
    """A subquery filtered by the named ``tenant`` reference."""
    return (
        SQLStringBuilder()
        .SELECT().column("customer_id")
        .FROM().table("sales", "orders")
        .WHERE().column("tenant_id").equals().query_param("tenant")
    )

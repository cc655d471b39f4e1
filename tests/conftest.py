"""Shared pytest fixtures for chainQL unit tests."""
from __future__ import annotations

import pytest

from chainql.builder import SQLStringBuilder
from chainql.compile.parameters import ParameterTable
from chainql.schema.settings import BuilderSettings
from tests.fixtures import filtered_select


@pytest.fixture()
def builder() -> SQLStringBuilder:
    """An empty builder with default settings."""
    return SQLStringBuilder()


@pytest.fixture()
def select_with_param() -> SQLStringBuilder:
    """``SELECT * FROM "public"."t" WHERE "t"."v" = $$1``."""
    return filtered_select()


@pytest.fixture()
def table() -> ParameterTable:
    return ParameterTable()


@pytest.fixture(scope="session")
def at_settings() -> BuilderSettings:
    """Non-default markers: ``@@n`` for ordinals, ``@:name`` for names."""
    return BuilderSettings(ordinal_prefix="@@", named_prefix="@:")

"""Unit tests for ParameterTable."""

from __future__ import annotations

import pytest

from chainql.compile.parameters import ParameterTable, injection_text
from chainql.errors import InvalidArgumentError, ParameterOverflowError, ReferenceNotFoundError


def test_ordinal_allocation_counts_up(table: ParameterTable):
    assert table.allocate() == "$$1"
    assert table.allocate() == "$$2"
    assert table.slot_count == 2
    assert table.ordinal_count == 2
    assert table.references == {"$$1": [0], "$$2": [1]}
    assert table.injections == [None, None]


def test_named_reference_collects_slots(table: ParameterTable):
    assert table.allocate("tenant") == "$?tenant"
    table.allocate()
    assert table.allocate("tenant") == "$?tenant"
    assert table.slots_for("tenant") == [0, 2]
    assert table.ordinal_count == 1


def test_explicit_ordinal_does_not_advance_counter(table: ParameterTable):
    table.allocate()
    assert table.allocate(1) == "$$1"
    assert table.ordinal_count == 1
    assert table.slots_for(1) == [0, 1]


def test_undeclared_ordinal_is_rejected(table: ParameterTable):
    table.allocate()
    with pytest.raises(InvalidArgumentError):
        table.allocate(2)
    assert table.allocate() == "$$2"
    assert table.references == {"$$1": [0], "$$2": [1]}


class TestAllocateAll:
    def test_bad_reference_allocates_nothing(self, table: ParameterTable):
        with pytest.raises(InvalidArgumentError):
            table.allocate_all(["ok", "bad name"])
        assert table.slot_count == 0
        assert table.references == {}

    def test_ordinal_declared_earlier_in_the_batch(self, table: ParameterTable):
        assert table.allocate_all([None, 1, "x"]) == ["$$1", "$$1", "$?x"]
        assert table.slots_for(1) == [0, 1]

    def test_forward_ordinal_in_batch_is_rejected(self, table: ParameterTable):
        with pytest.raises(InvalidArgumentError):
            table.allocate_all([1, None])
        assert table.ordinal_count == 0


@pytest.mark.parametrize("reference", ["", "two words", "tab\there", 0, -3])
def test_invalid_references_are_rejected(table: ParameterTable, reference):
    with pytest.raises(InvalidArgumentError):
        table.allocate(reference)
    assert table.slot_count == 0


def test_set_fans_out_to_every_slot(table: ParameterTable):
    table.allocate("x")
    table.allocate()
    table.allocate("x")
    table.set("x", 7)
    assert table.injections == ["7", None, "7"]


def test_set_by_ordinal_number(table: ParameterTable):
    table.allocate()
    table.allocate()
    table.set(2, "b")
    assert table.injections == [None, "b"]


def test_set_unknown_reference_raises(table: ParameterTable):
    table.allocate()
    with pytest.raises(ReferenceNotFoundError) as exc_info:
        table.set("missing", 1)
    assert exc_info.value.reference == "missing"


def test_string_one_is_a_name_not_an_ordinal(table: ParameterTable):
    table.allocate()
    with pytest.raises(ReferenceNotFoundError):
        table.set("1", 5)


def test_set_positionally_replaces_all_values(table: ParameterTable):
    for _ in range(3):
        table.allocate()
    table.set(3, "old")
    table.set_positionally(10, 20)
    assert table.injections == ["10", "20", None]


def test_set_positionally_overflow_keeps_state(table: ParameterTable):
    table.allocate()
    table.allocate()
    table.set_positionally("a", "b")
    with pytest.raises(ParameterOverflowError) as exc_info:
        table.set_positionally(1, 2, 3)
    assert exc_info.value.supplied == 3
    assert exc_info.value.slot_count == 2
    assert table.injections == ["a", "b"]


def test_clear_keeps_structure(table: ParameterTable):
    table.allocate("x")
    table.allocate()
    table.set_positionally(1, 2)
    table.clear()
    assert table.injections == [None, None]
    assert table.references == {"$?x": [0], "$$1": [1]}


@pytest.mark.parametrize(
    ("value", "expected"),
    [(None, "NULL"), (True, "TRUE"), (False, "FALSE"), (3, "3"), ("Test", "Test")],
)
def test_injection_text(value, expected):
    assert injection_text(value) == expected


class TestAbsorb:
    def _parent(self) -> ParameterTable:
        parent = ParameterTable()
        parent.allocate("a")
        parent.allocate()
        return parent

    def _child(self) -> ParameterTable:
        child = ParameterTable()
        child.allocate()
        child.allocate("a")
        child.allocate()
        child.set("a", "shared")
        return child

    def test_slots_and_ordinals_are_offset(self):
        parent, child = self._parent(), self._child()
        offset = parent.absorb(child)
        assert offset == 1
        assert parent.references == {
            "$?a": [0, 3],
            "$$1": [1],
            "$$2": [2],
            "$$3": [4],
        }
        assert parent.slot_count == 5
        assert parent.ordinal_count == 3

    def test_child_injections_are_appended(self):
        parent, child = self._parent(), self._child()
        parent.absorb(child)
        assert parent.injections == [None, None, None, "shared", None]

    def test_child_is_left_unchanged(self):
        parent, child = self._parent(), self._child()
        parent.absorb(child)
        assert child.references == {"$$1": [0], "$?a": [1], "$$2": [2]}
        assert child.slot_count == 3
        assert child.ordinal_count == 2

    def test_shared_name_takes_one_value(self):
        parent, child = self._parent(), self._child()
        parent.absorb(child)
        parent.set("a", 9)
        assert parent.injections[0] == parent.injections[3] == "9"

"""Unit tests for jaded.parser.handles: allocation and LIFO registration."""
from __future__ import annotations

import pytest

from jaded.errors import RegistrationOrderError, UnknownReferenceError
from jaded.model.references import NULL_REFERENCE, StringReference
from jaded.parser.handles import HandleTable
from jaded.stream.markers import INITIAL_HANDLE, NULL_HANDLE


@pytest.fixture()
def table() -> HandleTable:
    return HandleTable()


class TestAllocation:
    def test_handles_are_incremented(self, table: HandleTable) -> None:
        assert table.next_handle() == INITIAL_HANDLE
        assert table.next_handle() == INITIAL_HANDLE + 1
        assert table.next_handle() == INITIAL_HANDLE + 2

    def test_allocated_handles_are_pending(self, table: HandleTable) -> None:
        a = table.next_handle()
        b = table.next_handle()
        assert table.pending == (a, b)
        assert table.pending_position(a) == 0
        assert table.pending_position(b) == 1
        assert table.pending_position(b + 1) is None


class TestRegistration:
    def test_register_pops_only_top(self, table: HandleTable) -> None:
        a = table.next_handle()
        b = table.next_handle()
        table.register(b, NULL_REFERENCE)
        assert table.pending == (a,)
        assert b in table
        assert a not in table

    def test_out_of_order_registration_fails(self, table: HandleTable) -> None:
        a = table.next_handle()
        b = table.next_handle()
        with pytest.raises(RegistrationOrderError) as exc_info:
            table.register(a, NULL_REFERENCE)
        assert exc_info.value.handle == a
        assert exc_info.value.pending == b
        assert table.pending == (a, b)

    def test_register_without_allocation_fails(self, table: HandleTable) -> None:
        with pytest.raises(RegistrationOrderError) as exc_info:
            table.register(INITIAL_HANDLE, NULL_REFERENCE)
        assert exc_info.value.pending is None

    def test_discard_pending(self, table: HandleTable) -> None:
        a = table.next_handle()
        table.next_handle()
        table.discard_pending()
        assert table.pending == ()
        assert table.pending_position(a) is None
        assert table.next_handle() == INITIAL_HANDLE + 2


class TestLookup:
    def test_get_registered(self, table: HandleTable) -> None:
        handle = table.next_handle()
        table.register(handle, StringReference("x"))
        assert table.get(handle) == StringReference("x")
        assert len(table) == 1

    def test_null_handle_is_always_null(self, table: HandleTable) -> None:
        assert table.get(NULL_HANDLE) is NULL_REFERENCE
        assert NULL_HANDLE in table
        assert len(table) == 0

    def test_unknown_handle(self, table: HandleTable) -> None:
        with pytest.raises(UnknownReferenceError) as exc_info:
            table.get(INITIAL_HANDLE + 5)
        assert exc_info.value.handle == INITIAL_HANDLE + 5


class TestReset:
    def test_reset_clears_entries_and_counter(self, table: HandleTable) -> None:
        handle = table.next_handle()
        table.register(handle, StringReference("x"))
        table.reset()
        assert handle not in table
        assert table.next_value == INITIAL_HANDLE
        assert table.next_handle() == INITIAL_HANDLE

"""
Tests for the SAL machine's state components: memory, registers, ALU
and symbol table. No instruction execution here.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from sal_sim import alu
from sal_sim.errors import (
    OutOfBounds, ProgramTooLarge, UnknownSymbol, AddressSpaceExhausted,
)
from sal_sim.memory import Memory, EMPTY, MEMORY_SIZE, DATA_START
from sal_sim.regs import Registers
from sal_sim.symbols import SymbolTable


# ─── Memory ─────────────────────

class TestMemory:
    def test_fresh_memory_is_empty(self):
        mem = Memory()
        assert len(mem) == MEMORY_SIZE
        assert mem.read(0) == EMPTY
        assert mem.read(255) == EMPTY
        assert mem.used_cells() == {}

    def test_write_then_read(self):
        mem = Memory()
        mem.write(130, "42")
        assert mem.read(130) == "42"

    @pytest.mark.parametrize("addr", [-1, 256, 1000])
    def test_read_out_of_bounds(self, addr):
        with pytest.raises(OutOfBounds):
            Memory().read(addr)

    @pytest.mark.parametrize("addr", [-1, 256])
    def test_write_out_of_bounds(self, addr):
        with pytest.raises(OutOfBounds):
            Memory().write(addr, "1")

    def test_non_integer_address_rejected(self):
        with pytest.raises(OutOfBounds):
            Memory().read("3")

    def test_load_program_places_lines_by_index(self):
        mem = Memory()
        mem.load_program(["LDI 5", "XCH", "HLT"])
        assert mem.read(0) == "LDI 5"
        assert mem.read(1) == "XCH"
        assert mem.read(2) == "HLT"
        assert mem.read(3) == EMPTY

    def test_load_program_full_memory(self):
        mem = Memory()
        mem.load_program(["HLT"] * MEMORY_SIZE)
        assert mem.read(255) == "HLT"

    def test_load_program_too_large_writes_nothing(self):
        mem = Memory()
        with pytest.raises(ProgramTooLarge):
            mem.load_program(["HLT"] * (MEMORY_SIZE + 1))
        assert mem.used_cells() == {}

    def test_program_too_large_is_out_of_bounds(self):
        assert issubclass(ProgramTooLarge, OutOfBounds)
        assert ProgramTooLarge("x").kind == 'OutOfBounds'

    def test_used_cells_in_address_order(self):
        mem = Memory()
        mem.write(200, "7")
        mem.write(3, "HLT")
        mem.write(128, "0")
        assert list(mem.used_cells().items()) == [
            (3, "HLT"), (128, "0"), (200, "7")]

    def test_stored_zero_text_is_not_empty(self):
        """STR writes '0' as text, which must still show up in dumps."""
        mem = Memory()
        mem.write(128, "0")
        assert 128 in mem.used_cells()

    def test_clear(self):
        mem = Memory()
        mem.load_program(["HLT"])
        mem.clear()
        assert mem.used_cells() == {}

    def test_dump_marks_regions(self):
        mem = Memory()
        mem.write(127, "HLT")
        text = mem.dump(126, 3)
        lines = text.split("\n")
        assert lines[0] == "126 P  -"
        assert lines[1] == "127 P  HLT"
        assert lines[2] == "128 D  -"


# ─── Registers ─────────────────────

class TestRegisters:
    def test_power_on_state(self):
        r = Registers()
        assert r.accumulator == 0
        assert r.data_register == 0
        assert r.program_counter == 0
        assert r.zero_bit is False
        assert r.overflow_bit is False

    def test_exchange(self):
        r = Registers()
        r.accumulator = 7
        r.data_register = -2
        r.exchange()
        assert (r.accumulator, r.data_register) == (-2, 7)

    def test_set_flags(self):
        r = Registers()
        r.set_flags(True, False)
        assert r.zero_bit and not r.overflow_bit
        r.set_flags(0, 1)
        assert r.zero_bit is False and r.overflow_bit is True

    def test_display(self):
        r = Registers()
        r.accumulator = 3
        r.data_register = 4
        r.program_counter = 9
        r.zero_bit = True
        assert r.display() == "PC=  9 A=3 B=4 [Z.]"

    def test_reset(self):
        r = Registers()
        r.accumulator = 1
        r.program_counter = 50
        r.overflow_bit = True
        r.instructions_executed = 12
        r.reset()
        assert r.accumulator == 0
        assert r.program_counter == 0
        assert r.overflow_bit is False
        assert r.instructions_executed == 0

    def test_no_stray_attributes(self):
        with pytest.raises(AttributeError):
            Registers().carry = 1


# ─── ALU ─────────────────────

class TestALU:
    def test_add_in_range(self):
        assert alu.add32(2, 3) == (5, False, False)

    def test_add_zero_result(self):
        assert alu.add32(5, -5) == (0, True, False)

    def test_add_max_boundary_no_overflow(self):
        assert alu.add32(alu.INT32_MAX - 1, 1) == (alu.INT32_MAX, False, False)

    def test_add_overflow_keeps_raw_result(self):
        result, zero, overflow = alu.add32(alu.INT32_MAX, 1)
        assert result == 2 ** 31
        assert overflow is True
        assert zero is False

    def test_sub_min_boundary_no_overflow(self):
        assert alu.sub32(alu.INT32_MIN + 1, 1) == (alu.INT32_MIN, False, False)

    def test_sub_underflow(self):
        result, zero, overflow = alu.sub32(alu.INT32_MIN, 1)
        assert result == -2 ** 31 - 1
        assert overflow is True

    def test_sub_zero(self):
        assert alu.sub32(9, 9) == (0, True, False)

    def test_in_int32(self):
        assert alu.in_int32(alu.INT32_MIN)
        assert alu.in_int32(alu.INT32_MAX)
        assert not alu.in_int32(alu.INT32_MAX + 1)
        assert not alu.in_int32(alu.INT32_MIN - 1)


# ─── Symbol table ─────────────────────

class TestSymbolTable:
    def test_first_symbol_at_data_start(self):
        st = SymbolTable()
        assert st.declare("x") == DATA_START
        assert st.resolve("x") == DATA_START

    def test_addresses_grow_upward(self):
        st = SymbolTable()
        assert [st.declare(n) for n in ("a", "b", "c")] == [128, 129, 130]
        assert st.next_available_address == 131

    def test_redeclare_rebinds_to_new_address(self):
        st = SymbolTable()
        first = st.declare("x")
        second = st.declare("x")
        assert second == first + 1
        assert st.resolve("x") == second
        assert len(st) == 1

    def test_resolve_unknown(self):
        with pytest.raises(UnknownSymbol) as exc:
            SymbolTable().resolve("nope")
        assert exc.value.symbol == "nope"
        assert exc.value.kind == 'UnknownSymbol'

    def test_exhaustion(self):
        st = SymbolTable()
        for i in range(MEMORY_SIZE - DATA_START):
            st.declare(f"v{i}")
        assert st.next_available_address == MEMORY_SIZE
        with pytest.raises(AddressSpaceExhausted):
            st.declare("overflow")
        assert "overflow" not in st
        assert st.next_available_address == MEMORY_SIZE

    def test_as_dict_preserves_declaration_order(self):
        st = SymbolTable()
        st.declare("b")
        st.declare("a")
        assert list(st.as_dict().items()) == [("b", 128), ("a", 129)]

    def test_reset(self):
        st = SymbolTable()
        st.declare("x")
        st.reset()
        assert len(st) == 0
        assert st.next_available_address == DATA_START

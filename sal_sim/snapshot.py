"""
SAL Simulator - State Snapshots + Diagnostic Dump

A Snapshot is a frozen copy of everything the diagnostic dump shows:
registers, flags, every non-empty memory cell and the symbol table.
The machine produces them; the driver renders them as text (the
classic three-section dump) or JSON.
"""

import json
from dataclasses import dataclass, field
from typing import Dict, Union


@dataclass(frozen=True)
class Snapshot:
    accumulator: int
    data_register: int
    program_counter: int
    zero_bit: bool
    overflow_bit: bool
    memory: Dict[int, Union[str, int]] = field(default_factory=dict)
    symbols: Dict[str, int] = field(default_factory=dict)
    state: str = 'READY'
    instructions_executed: int = 0

    def to_dict(self) -> dict:
        return {
            'state': self.state,
            'registers': {
                'accumulator': self.accumulator,
                'data_register': self.data_register,
                'program_counter': self.program_counter,
            },
            'flags': {
                'zero': self.zero_bit,
                'overflow': self.overflow_bit,
            },
            'instructions_executed': self.instructions_executed,
            'memory': {str(addr): word for addr, word in self.memory.items()},
            'symbols': dict(self.symbols),
        }


def _bool(value: bool) -> str:
    return 'true' if value else 'false'


def format_registers(snap: Snapshot) -> str:
    return '\n'.join([
        "Registers and Flags:",
        f"Accumulator: {snap.accumulator}",
        f"Data Register: {snap.data_register}",
        f"Program Counter: {snap.program_counter}",
        f"Zero Bit: {_bool(snap.zero_bit)}",
        f"Overflow Bit: {_bool(snap.overflow_bit)}",
    ])


def format_memory(snap: Snapshot) -> str:
    lines = ["Memory:"]
    for addr, word in snap.memory.items():
        lines.append(f"Address {addr}: {word}")
    return '\n'.join(lines)


def format_symbols(snap: Snapshot) -> str:
    lines = ["Symbols Table(Symbol:Address):"]
    for name, addr in snap.symbols.items():
        lines.append(f"{name}: {addr}")
    return '\n'.join(lines)


def format_snapshot(snap: Snapshot) -> str:
    """Full diagnostic dump: registers/flags, memory, symbols."""
    return '\n'.join([
        format_registers(snap),
        format_memory(snap),
        format_symbols(snap),
    ])


def snapshot_to_json(snap: Snapshot) -> str:
    return json.dumps(snap.to_dict(), indent=2, ensure_ascii=False)

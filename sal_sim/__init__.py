"""
SAL Machine Simulator
=====================
An instruction-set simulator for SAL, a single-accumulator machine with
256 words of memory, two registers (A and B), zero/overflow flags and a
symbol table for named data variables.

Architecture:
    ┌───────────┐    ┌──────────┐    ┌───────────┐    ┌──────────────┐
    │ .sal file │───>│  Loader  │───>│  Memory   │───>│   Decoder    │
    │ (lines)   │    │ (lines)  │    │ (256 wds) │    │ (Instruction)│
    └───────────┘    └──────────┘    └───────────┘    └──────┬───────┘
                                           ^                 v
                                           │          ┌──────────────┐
                                           └──────────│  SALMachine  │
                                                      │ (dispatch)   │
                                                      └──────────────┘

    - loader.py:   reads program text into lines
    - memory.py:   flat word memory, program region 0-127, data 128-255
    - regs.py:     A, B, PC, zero and overflow flags
    - symbols.py:  symbol -> data address allocator
    - decoder.py:  opcode table, text word -> Instruction
    - alu.py:      ADD/SUB with signed 32-bit overflow detection
    - machine.py:  fetch/decode/execute, step and batched run modes
    - snapshot.py: state snapshots and the diagnostic dump
"""

__version__ = "1.0.0"

from typing import Callable, Iterable, Optional

from .errors import (
    SALError, OutOfBounds, ProgramTooLarge, UnknownSymbol,
    AddressSpaceExhausted, InvalidOpcode, MalformedOperand, CorruptData,
    ProgramFileNotFound, ProgramEncodingError,
)
from .decoder import Opcode, Instruction, OPCODES, decode_word
from .memory import Memory, EMPTY, MEMORY_SIZE, PROGRAM_SIZE, DATA_START
from .regs import Registers
from .symbols import SymbolTable
from .machine import SALMachine, MachineState, BATCH_LIMIT
from .snapshot import Snapshot, format_snapshot, snapshot_to_json
from .loader import read_program


def run_program(lines: Iterable[str], *,
                confirm: Optional[Callable[[Snapshot], bool]] = None,
                batch_size: int = BATCH_LIMIT) -> SALMachine:
    """Load and run a program in bounded-run mode.

    Full pipeline: lines -> Memory -> SALMachine.run().

    Args:
        lines: Program lines, line i goes to address i.
        confirm: Called with a Snapshot at every batch boundary; return
            True to keep going. Without it the run stops after the first
            batch.
        batch_size: Instructions per batch (default 1000).

    Returns:
        The machine, in state HALTED, STOPPED or FAULTED.
    """
    vm = SALMachine(batch_size=batch_size)
    vm.load(lines)
    vm.run(confirm=confirm)
    return vm

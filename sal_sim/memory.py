"""
SAL Simulator - 256-Word Memory

Memory map:
  0-127    Program (one instruction line per word, loaded at address 0)
  128-255  Data (symbol storage, allocated upward from DATA_START)

Instructions and data share one address space. A word is whatever was
last written there: a program line, the decimal text stored by STR, or
the EMPTY placeholder for a cell nothing has touched. EMPTY is int zero
so it can never be mistaken for instruction text.
"""

import logging
from collections import OrderedDict
from typing import Dict, Iterable, Union

from .errors import OutOfBounds, ProgramTooLarge

log = logging.getLogger(__name__)

MEMORY_SIZE = 256
PROGRAM_SIZE = 128
DATA_START = PROGRAM_SIZE

# Placeholder held by cells nothing has written
EMPTY = 0

Word = Union[str, int]


class Memory:
    """Flat word-addressable memory.

    All access goes through read()/write(), which reject any address
    outside [0, MEMORY_SIZE - 1] instead of wrapping.
    """

    def __init__(self, size: int = MEMORY_SIZE):
        self.size = size
        self._words = [EMPTY] * size

    def _check(self, addr) -> int:
        if isinstance(addr, bool) or not isinstance(addr, int):
            raise OutOfBounds(f"Address must be an integer, got {addr!r}")
        if not 0 <= addr < self.size:
            raise OutOfBounds(
                f"Address {addr} outside memory [0, {self.size - 1}]")
        return addr

    # --- Core read/write ---

    def read(self, addr: int) -> Word:
        """Return the word stored at addr."""
        return self._words[self._check(addr)]

    def write(self, addr: int, value: Word):
        """Overwrite the word at addr."""
        self._words[self._check(addr)] = value

    # --- Bulk load ---

    def load_program(self, lines: Iterable[str]):
        """Load program lines verbatim, line i at address i.

        The whole program is checked against the memory size before any
        word is written, so a rejected program leaves memory untouched.
        """
        lines = list(lines)
        if len(lines) > self.size:
            raise ProgramTooLarge(
                f"Program has {len(lines)} lines, memory holds {self.size}")
        if len(lines) > PROGRAM_SIZE:
            log.warning("Program is %d lines; lines past %d overlap data "
                        "memory", len(lines), PROGRAM_SIZE - 1)
        for addr, line in enumerate(lines):
            self._words[addr] = line
        log.debug("Loaded %d program words", len(lines))

    def clear(self):
        """Reset every cell to EMPTY."""
        self._words = [EMPTY] * self.size

    # --- Inspection ---

    def used_cells(self) -> Dict[int, Word]:
        """Return {addr: word} for every cell that is not EMPTY, in address order."""
        return OrderedDict(
            (addr, word) for addr, word in enumerate(self._words)
            if word != EMPTY
        )

    def dump(self, start: int = 0, length: int = 16) -> str:
        """Produce a listing of a memory range for debugging."""
        lines = []
        for addr in range(start, min(start + length, self.size)):
            word = self._words[addr]
            text = '-' if word == EMPTY else str(word)
            region = 'P' if addr < PROGRAM_SIZE else 'D'
            lines.append(f'{addr:3d} {region}  {text}')
        return '\n'.join(lines)

    def __len__(self) -> int:
        return self.size

"""
SAL Simulator - Instruction Decoder

Turns one memory word (a line of program text) into an Instruction.
The word is split on whitespace: the first token is the opcode, the
rest are operands. Opcodes are case-sensitive.

Operand kinds:
  INH      Inherent (no operand)             e.g. ADD, XCH, HLT
  SYM      Symbol name (identifier)          e.g. DEC sum, LDA sum
  IMM      Immediate integer, may be signed  e.g. LDI -5
  ADDR     Absolute program address          e.g. JMP 4, JZS 10

Malformed words raise instead of falling back to a default: a missing,
extra or wrongly typed operand is MalformedOperand, an unknown first
token (or an empty cell) is InvalidOpcode.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from .errors import InvalidOpcode, MalformedOperand

__all__ = ['Opcode', 'Instruction', 'OPCODES', 'decode_word', 'parse_int',
           'INH', 'SYM', 'IMM', 'ADDR']


# ──────────────────────────────────────────────
# Operand kind constants
# ──────────────────────────────────────────────

INH  = 'INH'
SYM  = 'SYM'
IMM  = 'IMM'
ADDR = 'ADDR'

_INT_RE = re.compile(r'[+-]?\d+')
_SYMBOL_RE = re.compile(r'[A-Za-z_][A-Za-z0-9_]*')


class Opcode(Enum):
    DEC = 'DEC'
    LDA = 'LDA'
    LDI = 'LDI'
    STR = 'STR'
    XCH = 'XCH'
    JMP = 'JMP'
    JZS = 'JZS'
    JVS = 'JVS'
    ADD = 'ADD'
    SUB = 'SUB'
    HLT = 'HLT'


# ──────────────────────────────────────────────
# Opcode table
# ──────────────────────────────────────────────
# Format: mnemonic -> (opcode, operand_kind)

OPCODES = {
    # ── Data ──
    'DEC': (Opcode.DEC, SYM),
    'LDA': (Opcode.LDA, SYM),
    'LDI': (Opcode.LDI, IMM),
    'STR': (Opcode.STR, SYM),
    'XCH': (Opcode.XCH, INH),

    # ── Control flow ──
    'JMP': (Opcode.JMP, ADDR),
    'JZS': (Opcode.JZS, ADDR),
    'JVS': (Opcode.JVS, ADDR),

    # ── Arithmetic ──
    'ADD': (Opcode.ADD, INH),
    'SUB': (Opcode.SUB, INH),

    # ── Control ──
    'HLT': (Opcode.HLT, INH),
}


@dataclass(frozen=True)
class Instruction:
    """A decoded instruction: opcode plus at most one operand."""
    opcode: Opcode
    operand: Optional[Union[str, int]] = None

    @property
    def operand_kind(self) -> str:
        return OPCODES[self.opcode.value][1]

    def __str__(self) -> str:
        if self.operand is None:
            return self.opcode.value
        return f"{self.opcode.value} {self.operand}"


def parse_int(text: str) -> Optional[int]:
    """Parse a strict decimal integer ('-12', '+3', '40'); None otherwise."""
    text = text.strip()
    if not _INT_RE.fullmatch(text):
        return None
    return int(text)


def decode_word(word, address: Optional[int] = None) -> Instruction:
    """Decode a memory word into an Instruction.

    address is only used to label error messages.
    """
    if not isinstance(word, str):
        raise InvalidOpcode(f"Not an instruction: {word!r}", address)

    tokens = word.split()
    if not tokens:
        raise InvalidOpcode("Empty instruction", address)

    mnem, args = tokens[0], tokens[1:]
    if mnem not in OPCODES:
        raise InvalidOpcode(f"Unknown opcode: {mnem}", address)

    opcode, kind = OPCODES[mnem]

    if kind == INH:
        if args:
            raise MalformedOperand(
                f"{mnem} takes no operand, got: {' '.join(args)}", address)
        return Instruction(opcode)

    if len(args) != 1:
        raise MalformedOperand(
            f"{mnem} takes exactly one operand, got {len(args)}", address)
    arg = args[0]

    if kind == SYM:
        if not _SYMBOL_RE.fullmatch(arg):
            raise MalformedOperand(f"{mnem}: bad symbol name '{arg}'", address)
        return Instruction(opcode, arg)

    value = parse_int(arg)
    if value is None:
        what = 'literal' if kind == IMM else 'address'
        raise MalformedOperand(f"{mnem}: {what} is not an integer: '{arg}'",
                               address)
    return Instruction(opcode, value)

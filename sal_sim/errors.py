"""
SAL Simulator - Machine Faults

Every error the simulator can raise derives from SALError. The machine
never recovers from one of these: the current run ends FAULTED with the
error attached, and the driver decides what to do with the process.

Error kinds:
  OutOfBounds            address outside memory (ProgramTooLarge is a
                         load-time special case)
  UnknownSymbol          LDA/STR on a name that was never declared
  AddressSpaceExhausted  DEC with no data memory left
  InvalidOpcode          first token of a word is not an opcode
  MalformedOperand       wrong operand count or type for an opcode
  CorruptData            non-integer word read where a number is expected
  FileNotFound           program file missing (loader only, not core)
  FileNotReadable        program file is not UTF-8 text (loader only)
"""

from typing import Optional

__all__ = [
    'SALError', 'OutOfBounds', 'ProgramTooLarge', 'UnknownSymbol',
    'AddressSpaceExhausted', 'InvalidOpcode', 'MalformedOperand',
    'CorruptData', 'ProgramFileNotFound', 'ProgramEncodingError',
]


class SALError(Exception):
    """Base class for simulator faults."""

    kind = 'SALError'

    def __init__(self, message: str, address: Optional[int] = None):
        self.address = address
        super().__init__(f"Address {address}: {message}"
                         if address is not None else message)


class OutOfBounds(SALError):
    kind = 'OutOfBounds'


class ProgramTooLarge(OutOfBounds):
    """Raised before load when a program has more lines than memory words."""


class UnknownSymbol(SALError):
    kind = 'UnknownSymbol'

    def __init__(self, symbol: str, address: Optional[int] = None):
        self.symbol = symbol
        super().__init__(f"Unknown symbol: '{symbol}'", address)


class AddressSpaceExhausted(SALError):
    kind = 'AddressSpaceExhausted'


class InvalidOpcode(SALError):
    kind = 'InvalidOpcode'


class MalformedOperand(SALError):
    kind = 'MalformedOperand'


class CorruptData(SALError):
    kind = 'CorruptData'


class ProgramFileNotFound(SALError):
    kind = 'FileNotFound'

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"File '{path}' not found.")


class ProgramEncodingError(SALError):
    """Raised by the loader when a program file is not UTF-8 text."""
    kind = 'FileNotReadable'

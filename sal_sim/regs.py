"""
SAL Simulator - Register Set + Status Flags

Register model:
  accumulator      register A, target of loads and arithmetic
  data_register    register B, second ALU operand (filled via XCH)
  program_counter  index of the word to fetch next (0-based)
  zero_bit         last ADD/SUB result was exactly 0
  overflow_bit     last ADD/SUB result left the signed 32-bit range

Only ADD and SUB touch the flags. The registers hold Python ints and
are never clamped: an overflowing result is flagged and kept as-is.
"""


class Registers:
    """SAL register file."""

    __slots__ = ('accumulator', 'data_register', 'program_counter',
                 'zero_bit', 'overflow_bit', 'instructions_executed')

    def __init__(self):
        self.accumulator: int = 0
        self.data_register: int = 0
        self.program_counter: int = 0
        self.zero_bit: bool = False
        self.overflow_bit: bool = False
        self.instructions_executed: int = 0

    def set_flags(self, zero: bool, overflow: bool):
        """Set Z and V together, as ADD/SUB do."""
        self.zero_bit = bool(zero)
        self.overflow_bit = bool(overflow)

    def exchange(self):
        """Swap A and B."""
        self.accumulator, self.data_register = (
            self.data_register, self.accumulator)

    # --- Display ---

    def display(self) -> str:
        """One-line register summary for traces."""
        flags = ('Z' if self.zero_bit else '.') + \
                ('V' if self.overflow_bit else '.')
        return (f"PC={self.program_counter:3d} A={self.accumulator} "
                f"B={self.data_register} [{flags}]")

    def reset(self):
        """Reset to power-on state."""
        self.accumulator = 0
        self.data_register = 0
        self.program_counter = 0
        self.zero_bit = False
        self.overflow_bit = False
        self.instructions_executed = 0

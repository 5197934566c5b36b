"""
SAL Simulator - Main Machine Class

This is the top-level class that integrates:
  - Registers and flags (regs.py)
  - 256-word memory (memory.py)
  - Symbol table (symbols.py)
  - Instruction decoder (decoder.py)
  - ALU operations (alu.py)

Execution model:
  1. Fetch the word at PC
  2. Decode it into an Instruction
  3. Execute the opcode handler -> update registers, memory, symbols
  4. Advance PC by one (jumps store target - 1 to land on target)

Machine states:
  READY              idle, a step or run may start
  RUNNING            inside step() or run()
  AWAITING_CONTINUE  run() hit a batch boundary and is asking to go on
  HALTED             HLT executed (sticky)
  STOPPED            run() was told not to continue; program not finished
  FAULTED            a SALError ended the run (sticky, error in .fault)

Every read, decode and operand resolution happens before any register or
memory write, so a faulting step leaves the machine as it found it.
"""

import logging
from enum import Enum
from typing import Callable, Iterable, List, Optional

from . import alu
from .decoder import Instruction, Opcode, decode_word, parse_int
from .errors import CorruptData, SALError
from .memory import EMPTY, MEMORY_SIZE, Memory
from .regs import Registers
from .snapshot import Snapshot
from .symbols import SymbolTable

log = logging.getLogger(__name__)

BATCH_LIMIT = 1000


class MachineState(Enum):
    READY = 'READY'
    RUNNING = 'RUNNING'
    AWAITING_CONTINUE = 'AWAITING_CONTINUE'
    HALTED = 'HALTED'
    STOPPED = 'STOPPED'
    FAULTED = 'FAULTED'


TERMINAL_STATES = (MachineState.HALTED, MachineState.FAULTED)


class SALMachine:
    """SAL accumulator machine.

    Usage:
        vm = SALMachine()
        vm.load(["LDI 5", "XCH", "LDI 3", "ADD", "HLT"])
        state = vm.run()
        print(vm.regs.accumulator)  # 8

    run() pauses every batch_size instructions and calls
    confirm(snapshot); a falsy answer (or no callback) stops the run.
    """

    def __init__(self, batch_size: int = BATCH_LIMIT,
                 memory_size: int = MEMORY_SIZE):
        if batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        self.batch_size = batch_size

        # Core components
        self.regs = Registers()
        self.mem = Memory(memory_size)
        self.symbols = SymbolTable(memory_size=memory_size)

        self.state = MachineState.READY
        self.fault: Optional[SALError] = None
        self._program: List[str] = []

        # Trace output
        self._trace = False
        self._trace_output: List[str] = []

        # Instruction dispatch table (built in _build_dispatch)
        self._dispatch = self._build_dispatch()

    # ══════════════════════════════════════════════
    # Loading
    # ══════════════════════════════════════════════

    def load(self, lines: Iterable[str]):
        """Load a program and reset the machine to run it from address 0."""
        lines = list(lines)
        # Load into fresh memory first so a rejected program leaves this one intact
        mem = Memory(self.mem.size)
        mem.load_program(lines)
        self.mem = mem
        self._program = lines
        self._reset_state()
        log.info("Program loaded: %d words", len(lines))

    # ══════════════════════════════════════════════
    # Execution
    # ══════════════════════════════════════════════

    def step(self) -> MachineState:
        """Execute one instruction and return the resulting state."""
        if self.state in TERMINAL_STATES:
            log.warning("step() ignored: machine is %s", self.state.value)
            return self.state

        self.state = MachineState.RUNNING
        try:
            self._cycle()
        except _HaltException:
            self._halt()
        except SALError as e:
            self._set_fault(e)
        else:
            self.state = MachineState.READY
        return self.state

    def run(self, confirm: Optional[Callable[[Snapshot], bool]] = None,
            batch_size: Optional[int] = None) -> MachineState:
        """Run until HLT, a fault, or a declined batch boundary.

        Returns HALTED, FAULTED or STOPPED.
        """
        if self.state in TERMINAL_STATES:
            log.warning("run() ignored: machine is %s", self.state.value)
            return self.state
        if batch_size is None:
            batch_size = self.batch_size

        self.state = MachineState.RUNNING
        count = 0
        while True:
            try:
                self._cycle()
            except _HaltException:
                self._halt()
                return self.state
            except SALError as e:
                self._set_fault(e)
                return self.state

            count += 1
            if count < batch_size:
                continue

            self.state = MachineState.AWAITING_CONTINUE
            log.info("Batch of %d instructions done at PC=%d",
                     count, self.regs.program_counter)
            if confirm is None or not confirm(self.snapshot()):
                self.state = MachineState.STOPPED
                log.info("Run stopped by caller")
                return self.state
            self.state = MachineState.RUNNING
            count = 0

    def _cycle(self):
        """Fetch, decode, execute, advance PC."""
        pc = self.regs.program_counter
        insn = decode_word(self.mem.read(pc), pc)

        if self._trace:
            self._trace_output.append(
                f"[{pc:3d}] {str(insn):12s} {self.regs.display()}")
        log.debug("%3d: %s", pc, insn)

        try:
            self._dispatch[insn.opcode](insn)
        except _HaltException:
            self.regs.instructions_executed += 1
            raise
        self.regs.instructions_executed += 1
        self.regs.program_counter += 1

    def _halt(self):
        self.state = MachineState.HALTED
        log.info("HLT at PC=%d after %d instructions",
                 self.regs.program_counter, self.regs.instructions_executed)

    def _set_fault(self, err: SALError):
        self.fault = err
        self.state = MachineState.FAULTED
        log.error("Fault at PC=%d: %s: %s",
                  self.regs.program_counter, err.kind, err)

    # ══════════════════════════════════════════════
    # Instruction handlers
    # ══════════════════════════════════════════════

    def _build_dispatch(self) -> dict:
        """Build opcode -> handler dispatch table."""
        return {
            # ── Data ──
            Opcode.DEC: self._op_dec,
            Opcode.LDA: self._op_lda,
            Opcode.LDI: self._op_ldi,
            Opcode.STR: self._op_str,
            Opcode.XCH: self._op_xch,

            # ── Control flow ──
            Opcode.JMP: self._op_jmp,
            Opcode.JZS: self._op_jzs,
            Opcode.JVS: self._op_jvs,

            # ── Arithmetic ──
            Opcode.ADD: self._op_add,
            Opcode.SUB: self._op_sub,

            # ── Control ──
            Opcode.HLT: self._op_hlt,
        }

    # ── Data handlers ──

    def _op_dec(self, insn: Instruction):
        self.symbols.declare(insn.operand)

    def _op_lda(self, insn: Instruction):
        addr = self.symbols.resolve(insn.operand)
        self.regs.accumulator = self._read_number(addr)

    def _op_ldi(self, insn: Instruction):
        self.regs.accumulator = insn.operand

    def _op_str(self, insn: Instruction):
        addr = self.symbols.resolve(insn.operand)
        self.mem.write(addr, str(self.regs.accumulator))

    def _op_xch(self, insn: Instruction):
        self.regs.exchange()

    def _read_number(self, addr: int) -> int:
        """Read a data word as an integer. EMPTY cells read as 0."""
        word = self.mem.read(addr)
        if word == EMPTY:
            return 0
        value = parse_int(word) if isinstance(word, str) else None
        if value is None:
            raise CorruptData(f"Not an integer: {word!r}", addr)
        return value

    # ── Control flow handlers ──

    def _jump(self, target: int):
        # PC is incremented after every instruction
        self.regs.program_counter = target - 1

    def _op_jmp(self, insn: Instruction):
        self._jump(insn.operand)

    def _op_jzs(self, insn: Instruction):
        if self.regs.zero_bit:
            self._jump(insn.operand)

    def _op_jvs(self, insn: Instruction):
        if self.regs.overflow_bit:
            self._jump(insn.operand)

    # ── Arithmetic handlers ──

    def _op_add(self, insn: Instruction):
        result, zero, overflow = alu.add32(self.regs.accumulator,
                                           self.regs.data_register)
        self.regs.accumulator = result
        self.regs.set_flags(zero, overflow)

    def _op_sub(self, insn: Instruction):
        result, zero, overflow = alu.sub32(self.regs.accumulator,
                                           self.regs.data_register)
        self.regs.accumulator = result
        self.regs.set_flags(zero, overflow)

    # ── Control ──

    def _op_hlt(self, insn: Instruction):
        raise _HaltException("HLT")

    # ══════════════════════════════════════════════
    # Inspection
    # ══════════════════════════════════════════════

    def snapshot(self) -> Snapshot:
        """Copy of the state the diagnostic dump shows."""
        return Snapshot(
            accumulator=self.regs.accumulator,
            data_register=self.regs.data_register,
            program_counter=self.regs.program_counter,
            zero_bit=self.regs.zero_bit,
            overflow_bit=self.regs.overflow_bit,
            memory=self.mem.used_cells(),
            symbols=self.symbols.as_dict(),
            state=self.state.value,
            instructions_executed=self.regs.instructions_executed,
        )

    # ══════════════════════════════════════════════
    # Trace / Debug
    # ══════════════════════════════════════════════

    def enable_trace(self, enable: bool = True):
        """Enable instruction trace recording."""
        self._trace = enable

    def get_trace(self) -> str:
        return '\n'.join(self._trace_output)

    def clear_trace(self):
        self._trace_output.clear()

    def reset(self):
        """Reset registers, symbols and memory, then reload the program."""
        self.mem.clear()
        self.mem.load_program(self._program)
        self._reset_state()

    def _reset_state(self):
        self.regs.reset()
        self.symbols.reset()
        self._trace_output.clear()
        self.fault = None
        self.state = MachineState.READY


# Internal exception for flow control
class _HaltException(Exception):
    pass

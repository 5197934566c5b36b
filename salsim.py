#!/usr/bin/env python3
"""
salsim - SAL Machine Simulator CLI

Usage:
    python salsim.py [program.sal] [--batch-size 1000] [--dump-format text|json]
                     [--trace] [-v] [-q] [--log-file PATH]

Loads a SAL program and drops into the command prompt:
    s / step   execute one instruction and print the state dump
    a / run    run in batches of --batch-size, asking to continue between them
    q / quit   exit

If no program is given on the command line, the filename is prompted for.

Exit status:
    0    quit, end of input, or HLT reached
    1    program file missing, not UTF-8 text, or too large
    2    machine fault (dump and fault kind are printed)
    130  interrupted

Examples:
    python salsim.py examples/sum.sal
    python salsim.py examples/countdown.sal --batch-size 50 -v
    python salsim.py examples/overflow.sal --dump-format json
"""

import argparse
import logging
import sys
import os
from pathlib import Path
from typing import Callable, Optional

# Allow running from project root without installing
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from sal_sim import __version__
from sal_sim.errors import ProgramEncodingError, ProgramFileNotFound, ProgramTooLarge
from sal_sim.loader import read_program
from sal_sim.machine import BATCH_LIMIT, MachineState, SALMachine
from sal_sim.snapshot import Snapshot, format_snapshot, snapshot_to_json

log = logging.getLogger('salsim')

EXIT_OK = 0
EXIT_LOAD_ERROR = 1
EXIT_FAULT = 2
EXIT_INTERRUPTED = 130

COMMAND_PROMPT = ("Enter command ('s' to execute single instruction, "
                  "'a' to execute all instructions, 'q' to quit):")
CONTINUE_PROMPT = ("Maximum instruction count reached. "
                   "Do you want to continue execution? (y/n): ")
INVALID_COMMAND = "Invalid command. Please enter 's', 'a', or 'q'."

STEP_COMMANDS = ('s', 'step')
RUN_COMMANDS = ('a', 'run')
QUIT_COMMANDS = ('q', 'quit')
YES_ANSWERS = ('y', 'yes')


class Session:
    """Interactive command loop around one loaded machine.

    input_fn behaves like the builtin input(): it receives the prompt and
    returns a line, raising EOFError when input runs out.
    """

    def __init__(self, vm: SALMachine, *,
                 input_fn: Callable[[str], str] = input,
                 out=None, dump_format: str = 'text'):
        self.vm = vm
        self.input_fn = input_fn
        self.out = out if out is not None else sys.stdout
        self.dump_format = dump_format

    def _print(self, text: str = ''):
        print(text, file=self.out)

    def _ask(self, prompt: str) -> Optional[str]:
        try:
            return self.input_fn(prompt)
        except EOFError:
            return None

    def print_dump(self, snap: Optional[Snapshot] = None):
        if snap is None:
            snap = self.vm.snapshot()
        if self.dump_format == 'json':
            self._print(snapshot_to_json(snap))
        else:
            self._print(format_snapshot(snap))

    def confirm(self, snap: Snapshot) -> bool:
        """Batch-boundary callback for SALMachine.run()."""
        self.print_dump(snap)
        answer = self._ask(CONTINUE_PROMPT)
        return answer is not None and answer.strip().lower() in YES_ANSWERS

    def report_fault(self) -> int:
        err = self.vm.fault
        self.print_dump()
        self._print(f"Fault ({err.kind}): {err}")
        return EXIT_FAULT

    def _finish(self, state: MachineState) -> Optional[int]:
        """Handle the state a step/run ended in; return an exit code to stop."""
        if state is MachineState.FAULTED:
            return self.report_fault()
        self.print_dump()
        if state is MachineState.HALTED:
            self._print("Program Terminated")
            return EXIT_OK
        return None

    def loop(self) -> int:
        """Read commands until quit, HLT, a fault, or end of input."""
        while True:
            self._print(COMMAND_PROMPT)
            command = self._ask("> ")
            if command is None:
                return EXIT_OK
            command = command.strip().lower()

            if command in STEP_COMMANDS:
                code = self._finish(self.vm.step())
            elif command in RUN_COMMANDS:
                code = self._finish(self.vm.run(confirm=self.confirm))
            elif command in QUIT_COMMANDS:
                return EXIT_OK
            else:
                self._print(INVALID_COMMAND)
                continue

            if code is not None:
                return code


def setup_logging(args):
    """Configure logging from -v/-q/--log-file."""
    if args.quiet:
        level = logging.ERROR
    elif args.verbose == 0:
        level = logging.WARNING
    elif args.verbose == 1:
        level = logging.INFO
    else:  # -vv or more
        level = logging.DEBUG

    handlers = []

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
    handlers.append(console)

    if args.log_file:
        log_path = Path(args.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        ))
        handlers.append(file_handler)

    logging.basicConfig(
        level=logging.DEBUG if args.log_file else level,
        handlers=handlers,
        force=True
    )


def positive_int(value: str) -> int:
    n = int(value)
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer: {value}")
    return n


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="salsim",
        description="SAL accumulator machine simulator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="commands at the prompt: s/step, a/run, q/quit",
    )
    parser.add_argument("program", nargs="?",
                        help="SAL program file (prompted for if omitted)")
    parser.add_argument("--batch-size", type=positive_int, default=BATCH_LIMIT,
                        help=f"Instructions per run batch (default: {BATCH_LIMIT})")
    parser.add_argument("--dump-format", choices=["text", "json"], default="text",
                        help="State dump format (default: text)")
    parser.add_argument("--trace", action="store_true",
                        help="Print the instruction trace when the session ends")
    parser.add_argument("--verbose", "-v", action="count", default=0,
                        help="Increase log verbosity (-v, -vv)")
    parser.add_argument("--quiet", "-q", action="store_true",
                        help="Only log errors")
    parser.add_argument("--log-file", type=str,
                        help="Write a DEBUG log to this file")
    parser.add_argument("--version", action="version",
                        version=f"salsim {__version__}")
    return parser


def main(argv=None, *, input_fn: Callable[[str], str] = input, out=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args)
    out = out if out is not None else sys.stdout

    file_name = args.program
    if not file_name:
        try:
            file_name = input_fn("Enter the filename: ").strip()
        except EOFError:
            print("Error: no program file given", file=sys.stderr)
            return EXIT_LOAD_ERROR
        except KeyboardInterrupt:
            log.warning("Interrupted by user")
            return EXIT_INTERRUPTED

    vm = SALMachine(batch_size=args.batch_size)
    try:
        vm.load(read_program(file_name))
    except ProgramFileNotFound as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_LOAD_ERROR
    except ProgramTooLarge as e:
        print(f"Error: program too large: {e}", file=sys.stderr)
        return EXIT_LOAD_ERROR
    except ProgramEncodingError as e:
        print(f"Error reading {file_name}: {e}", file=sys.stderr)
        return EXIT_LOAD_ERROR
    except OSError as e:
        print(f"Error reading {file_name}: {e}", file=sys.stderr)
        return EXIT_LOAD_ERROR

    vm.enable_trace(args.trace)

    session = Session(vm, input_fn=input_fn, out=out,
                      dump_format=args.dump_format)
    try:
        code = session.loop()
    except KeyboardInterrupt:
        log.warning("Interrupted by user")
        return EXIT_INTERRUPTED

    if args.trace:
        print("Trace:", file=out)
        print(vm.get_trace(), file=out)
    return code


if __name__ == "__main__":
    sys.exit(main())

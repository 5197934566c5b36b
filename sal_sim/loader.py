"""
SAL Simulator - Program File Loader

Reads a SAL program file into a list of instruction lines, one per
line, surrounding whitespace stripped. Blank lines are kept so that
line i of the file is always memory address i. Whether the program
fits in memory is checked when it is loaded into a Memory.
"""

import logging
from pathlib import Path
from typing import List, Union

from .errors import ProgramEncodingError, ProgramFileNotFound

log = logging.getLogger(__name__)


def read_program(path: Union[str, Path]) -> List[str]:
    """Read a program file.

    Raises ProgramFileNotFound if the file is missing and
    ProgramEncodingError if it is not UTF-8 text.
    """
    p = Path(path)
    try:
        text = p.read_text(encoding='utf-8')
    except FileNotFoundError:
        raise ProgramFileNotFound(str(path)) from None
    except UnicodeDecodeError as e:
        raise ProgramEncodingError(
            f"{p.name}: not UTF-8 text (byte {e.start}: {e.reason})") from None

    lines = [line.strip() for line in text.splitlines()]
    log.info("Read %d lines from %s", len(lines), p)
    return lines

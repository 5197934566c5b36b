"""
SAL Simulator - Symbol Table

Maps declared variable names to data addresses. Addresses are handed
out from DATA_START upward and never reused. Declaring a name twice
binds it to a fresh address; whatever was stored at the old address is
no longer reachable through that name.
"""

import logging
from collections import OrderedDict
from typing import Dict

from .errors import AddressSpaceExhausted, UnknownSymbol
from .memory import DATA_START, MEMORY_SIZE

log = logging.getLogger(__name__)


class SymbolTable:
    """name -> data address, with a monotonic allocator."""

    def __init__(self, data_start: int = DATA_START,
                 memory_size: int = MEMORY_SIZE):
        self.data_start = data_start
        self.memory_size = memory_size
        self._symbols: Dict[str, int] = OrderedDict()
        self._next = data_start

    @property
    def next_available_address(self) -> int:
        return self._next

    def declare(self, name: str) -> int:
        """Allocate the next data address and bind name to it."""
        if self._next >= self.memory_size:
            raise AddressSpaceExhausted(
                f"No data memory left to declare '{name}' "
                f"({self._next - self.data_start} symbols allocated)")
        addr = self._next
        if name in self._symbols:
            log.debug("Rebinding %s: %d -> %d", name, self._symbols[name], addr)
        self._symbols[name] = addr
        self._next += 1
        return addr

    def resolve(self, name: str) -> int:
        """Return the address bound to name."""
        try:
            return self._symbols[name]
        except KeyError:
            raise UnknownSymbol(name) from None

    def items(self):
        return self._symbols.items()

    def as_dict(self) -> Dict[str, int]:
        return OrderedDict(self._symbols)

    def reset(self):
        self._symbols.clear()
        self._next = self.data_start

    def __contains__(self, name) -> bool:
        return name in self._symbols

    def __len__(self) -> int:
        return len(self._symbols)

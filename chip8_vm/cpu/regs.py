"""
CHIP-8 VM — CPU Register Set + Call Stack

Register model:
  V0–VF — sixteen 8-bit general registers. VF doubles as the flag
          register: ADD/SUB/SHIFT/DRW overwrite it with their outcome.
  I     — 16-bit index register (memory address for DRW, BCD, FX55/FX65)
  PC    — program counter, kept inside the 4 KB address space

The call stack is its own bounded object. It holds 16 return addresses
and reports overflow/underflow instead of indexing past its capacity.
"""

from typing import List

from ..config import (
    ADDRESS_MASK, FLAG_REGISTER, INSTRUCTION_SIZE, PROGRAM_BASE, REGISTER_COUNT,
    STACK_DEPTH,
)
from ..errors import StackOverflow, StackUnderflow


class Registers:
    """V0–VF, I and PC."""

    __slots__ = ('V', '_I', '_PC')

    def __init__(self):
        self.V: List[int] = [0] * REGISTER_COUNT
        self._I: int = 0
        self._PC: int = PROGRAM_BASE

    def reset(self):
        self.V[:] = [0] * REGISTER_COUNT
        self._I = 0
        self._PC = PROGRAM_BASE

    @property
    def I(self) -> int:
        return self._I

    @I.setter
    def I(self, value: int):
        self._I = value & 0xFFFF

    @property
    def PC(self) -> int:
        return self._PC

    @PC.setter
    def PC(self, value: int):
        self._PC = value & ADDRESS_MASK

    # --- V register access ---

    def set(self, index: int, value: int):
        self.V[index] = value & 0xFF

    @property
    def VF(self) -> int:
        return self.V[FLAG_REGISTER]

    @VF.setter
    def VF(self, value: int):
        self.V[FLAG_REGISTER] = value & 0xFF

    def advance(self, count: int = 1):
        """Move PC past `count` two-byte instructions."""
        self.PC = self._PC + INSTRUCTION_SIZE * count

    # --- Display ---

    def display(self) -> str:
        """One-line register dump for log messages."""
        regs = ' '.join(f'V{i:X}={v:02X}' for i, v in enumerate(self.V))
        return f"PC={self._PC:03X} I={self._I:04X} {regs}"


class CallStack:
    """Fixed-capacity return-address stack, 0 <= SP <= depth."""

    __slots__ = ('_slots', '_sp', 'depth')

    def __init__(self, depth: int = STACK_DEPTH):
        self.depth = depth
        self._slots: List[int] = [0] * depth
        self._sp: int = 0

    def reset(self):
        self._slots[:] = [0] * self.depth
        self._sp = 0

    @property
    def SP(self) -> int:
        return self._sp

    def __len__(self) -> int:
        return self._sp

    def push(self, address: int):
        if self._sp >= self.depth:
            raise StackOverflow(
                f"Call stack overflow: {self.depth} return addresses already pushed")
        self._slots[self._sp] = address & ADDRESS_MASK
        self._sp += 1

    def pop(self) -> int:
        if self._sp == 0:
            raise StackUnderflow("Return with empty call stack")
        self._sp -= 1
        return self._slots[self._sp]

    def entries(self) -> List[int]:
        """Live return addresses, oldest first."""
        return self._slots[:self._sp]

"""
CHIP-8 VM — Exception Taxonomy

  Chip8Error
   ├─ OversizeProgram       rejected at load time, nothing executed
   ├─ MachineFault          fatal for the current run
   │   ├─ StackOverflow
   │   ├─ StackUnderflow
   │   └─ EntropyUnavailable
   └─ MachineHalted         step() after a fault, before reload/reset

Unrecognized opcodes are NOT exceptions: they are reported through
Signal.UNRECOGNIZED_OPCODE and leave the machine untouched.
"""

from typing import Optional


class Chip8Error(Exception):
    """Base for everything the VM raises."""
    pass


class OversizeProgram(Chip8Error):
    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(
            f"Program image is {size} bytes, only {limit} fit above $200")


class MachineFault(Chip8Error):
    """Fatal condition raised while executing an instruction."""

    def __init__(self, message: str, pc: Optional[int] = None,
                 word: Optional[int] = None):
        self.message = message
        self.pc = None
        self.word = None
        super().__init__(message)
        if pc is not None and word is not None:
            self.locate(pc, word)

    def locate(self, pc: int, word: int):
        """Attach the faulting PC and instruction word (first call wins)."""
        if self.pc is not None:
            return
        self.pc = pc
        self.word = word
        self.args = (f"{self.message} (PC=${pc:03X} op=${word:04X})",)


class StackOverflow(MachineFault):
    pass


class StackUnderflow(MachineFault):
    pass


class EntropyUnavailable(MachineFault):
    pass


class MachineHalted(Chip8Error):
    """The machine faulted earlier; load or reset before stepping again."""

    def __init__(self, fault: MachineFault):
        self.fault = fault
        super().__init__(f"Machine halted after fault: {fault}")

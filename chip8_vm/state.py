"""
CHIP-8 VM — Machine State

One object owns every piece of storage: memory, registers, call stack,
timers, keypad and framebuffer. It has no behaviour beyond construction
and reset; the executor mutates it through an exclusive reference.
"""

from .config import DEFAULT_CONFIG, MachineConfig
from .cpu.regs import CallStack, Registers
from .mem.memory import Memory
from .periph.display import Framebuffer
from .periph.keypad import Keypad
from .periph.timer import TimerPeripheral


class MachineState:

    def __init__(self, config: MachineConfig = DEFAULT_CONFIG):
        self.config = config
        self.regs = Registers()
        self.stack = CallStack()
        self.mem = Memory(protect_font=config.protect_font)
        self.timers = TimerPeripheral()
        self.keypad = Keypad()
        self.display = Framebuffer()

    def reset(self):
        """Return every component to its power-on contents, in place."""
        self.regs.reset()
        self.stack.reset()
        self.mem.reset()
        self.timers.reset()
        self.keypad.reset()
        self.display.clear()

    def snapshot(self) -> tuple:
        """Hashable copy of the CPU-visible state (memory, V, I, PC, stack)."""
        return (
            self.mem.snapshot(),
            tuple(self.regs.V),
            self.regs.I,
            self.regs.PC,
            self.stack.SP,
            tuple(self.stack.entries()),
        )

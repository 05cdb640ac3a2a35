"""
CHIP-8 Virtual Machine
======================
An interpreter core for the CHIP-8 instruction set: 4 KB memory, V0–VF,
I, a 16-level call stack, delay/sound timers, a 64×32 monochrome display
and a 16-key hex keypad.

Architecture:
    ┌────────┐    ┌─────────┐    ┌──────────┐    ┌──────────────┐
    │ Memory │───>│ Decoder │───>│ Executor │───>│ MachineState │
    │ (word) │    │ (Instr) │    │ (handler)│    │  + Signals   │
    └────────┘    └─────────┘    └──────────┘    └──────────────┘

    - cpu/decoder.py:  opcode table keyed by (family, selector)
    - cpu/executor.py: Op -> transition function dispatch
    - cpu/alu.py:      8-bit arithmetic with VF outcome
    - periph/*:        timers, keypad, framebuffer
    - emu.py:          host-facing facade (load/step/tick/set_key/frame)

The host drives everything: it loads an image, calls step() and
tick_timers() at its own pace, forwards key events and presents frames.
"""

__version__ = "0.1.0"

from .config import MachineConfig, DEFAULT_CONFIG
from .cpu.decoder import Instruction, Op, decode
from .emu import Chip8Emulator, StopReason
from .entropy import EntropySource, FixedEntropy, SeededEntropy, SystemEntropy
from .errors import (
    Chip8Error, EntropyUnavailable, MachineFault, MachineHalted,
    OversizeProgram, StackOverflow, StackUnderflow,
)
from .periph.display import Frame
from .signals import Signal
from .state import MachineState

__all__ = [
    "Chip8Emulator", "StopReason", "MachineConfig", "DEFAULT_CONFIG",
    "MachineState", "Instruction", "Op", "decode", "Signal", "Frame",
    "EntropySource", "FixedEntropy", "SeededEntropy", "SystemEntropy",
    "Chip8Error", "EntropyUnavailable", "MachineFault", "MachineHalted",
    "OversizeProgram", "StackOverflow", "StackUnderflow",
]

"""
CHIP-8 VM — Main Emulator Class

Integrates:
  - MachineState (registers, call stack, memory, timers, keypad, display)
  - Decoder (decoder.py) and executor dispatch (executor.py)
  - An injected EntropySource for RND

Execution model, one step():
  1. Fetch the big-endian word at PC
  2. Decode it into an Instruction
  3. Execute: mutate state, collect Signals
  4. Return the Signals to the host

The host owns pacing. It calls step() as often as it likes, tick_timers()
at its own cadence (usually 60 Hz), set_key() on keyboard events and
frame() when it wants to present the display.

Termination reasons for run():
  - TIMEOUT:         instruction budget used up
  - AWAITING_INPUT:  FX0A is waiting for a key
  - ILLEGAL:         unrecognized opcode (PC does not move past it)
  - ERROR:           fatal MachineFault, kept on emu.fault
"""

import logging
from enum import Enum
from typing import Optional, Union

import numpy as np

from .config import DEFAULT_CONFIG, MachineConfig
from .cpu.decoder import decode_at
from .cpu.executor import execute
from .entropy import EntropySource, SystemEntropy
from .errors import MachineFault, MachineHalted
from .periph.display import Frame
from .signals import Signal
from .state import MachineState

log = logging.getLogger(__name__)


class StopReason(Enum):
    TIMEOUT = 'TIMEOUT'
    AWAITING_INPUT = 'AWAITING_INPUT'
    ILLEGAL = 'ILLEGAL'
    ERROR = 'ERROR'


class Chip8Emulator:
    """CHIP-8 virtual machine.

    Usage:
        emu = Chip8Emulator()
        emu.load_program(rom_bytes)
        while running:
            signals = emu.step()
            if Signal.REDRAW in signals:
                present(emu.frame().pixels)
    """

    DEFAULT_MAX_INSTRUCTIONS = 1_000_000

    def __init__(self, config: Optional[MachineConfig] = None,
                 entropy: Optional[EntropySource] = None):
        self.config = config or DEFAULT_CONFIG
        self.entropy = entropy if entropy is not None else SystemEntropy()
        self._program = b''
        self.fault: Optional[MachineFault] = None
        self.instructions_executed = 0
        self.state = MachineState(self.config)

    # ══════════════════════════════════════════════
    # Loading
    # ══════════════════════════════════════════════

    def load_program(self, data: Union[bytes, bytearray, memoryview]):
        """Reinitialize the machine and copy `data` to $200.

        Raises OversizeProgram (before touching the current state) when
        the image does not fit.
        """
        state = MachineState(self.config)
        state.mem.load_program(data)
        self._program = bytes(data)
        self._install(state)
        log.info(f"Loaded {len(self._program)}-byte program at $200")

    def reset(self):
        """Power-cycle in place and reload the current program."""
        self.state.reset()
        self.state.mem.load_program(self._program)
        self._install(self.state)
        log.info("Machine reset")

    def _install(self, state: MachineState):
        self.state = state
        self.fault = None
        self.instructions_executed = 0

    # ══════════════════════════════════════════════
    # Execution
    # ══════════════════════════════════════════════

    def step(self) -> Signal:
        """Execute one instruction and return its Signals.

        MachineFaults propagate to the caller and halt the machine.
        """
        if self.fault is not None:
            raise MachineHalted(self.fault)

        state = self.state
        ins = decode_at(state.mem, state.regs.PC)
        if log.isEnabledFor(logging.DEBUG):
            log.debug(f"${state.regs.PC:03X}: {ins}  {state.regs.display()}")

        try:
            signals = execute(state, ins, self.entropy)
        except MachineFault as fault:
            self.fault = fault
            log.error(f"Machine fault: {fault}")
            raise

        if not signals & (Signal.AWAITING_INPUT | Signal.UNRECOGNIZED_OPCODE):
            self.instructions_executed += 1
        return signals

    def run(self, max_instructions: Optional[int] = None) -> StopReason:
        """Step until a stop condition. No wall-clock pacing."""
        if max_instructions is None:
            max_instructions = self.DEFAULT_MAX_INSTRUCTIONS

        for _ in range(max_instructions):
            try:
                signals = self.step()
            except MachineFault:
                return StopReason.ERROR
            if Signal.UNRECOGNIZED_OPCODE in signals:
                return StopReason.ILLEGAL
            if Signal.AWAITING_INPUT in signals:
                return StopReason.AWAITING_INPUT

        return StopReason.TIMEOUT

    def tick_timers(self) -> Signal:
        """Decrement delay and sound timers once."""
        return self.state.timers.tick()

    # ══════════════════════════════════════════════
    # Host I/O
    # ══════════════════════════════════════════════

    def set_key(self, index: int, pressed: bool):
        """Update key `index` (0–15) in the keymask."""
        self.state.keypad.set_key(index, pressed)

    @property
    def awaiting_input(self) -> bool:
        return self.state.keypad.waiting

    @property
    def pixels(self) -> np.ndarray:
        """Read-only view of the 64×32 display."""
        return self.state.display.pixels

    def frame(self) -> Frame:
        """Pixel snapshot plus dirty flag. Reading clears the flag."""
        return self.state.display.consume()

    @property
    def halted(self) -> bool:
        return self.fault is not None

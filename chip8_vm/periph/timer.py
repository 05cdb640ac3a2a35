"""
CHIP-8 VM — Delay / Sound Timers

Two independent 8-bit countdown registers. The host calls tick() at its
own cadence (conventionally 60 Hz); nothing in step() touches them
except FX07/FX15/FX18.

  DT — delay timer, readable by programs (FX07)
  ST — sound timer, tone plays while non-zero. The 1 → 0 transition
       raises exactly one BEEP signal.
"""

from ..signals import Signal


class TimerPeripheral:
    """Delay and sound countdown pair."""

    def __init__(self):
        self.reset()

    def reset(self):
        self._delay = 0
        self._sound = 0
        self.ticks = 0

    @property
    def delay(self) -> int:
        return self._delay

    @delay.setter
    def delay(self, value: int):
        self._delay = value & 0xFF

    @property
    def sound(self) -> int:
        return self._sound

    @sound.setter
    def sound(self, value: int):
        self._sound = value & 0xFF

    @property
    def sound_active(self) -> bool:
        return self._sound > 0

    def tick(self) -> Signal:
        """Decrement both timers toward zero."""
        self.ticks += 1
        signals = Signal.NONE
        if self._delay > 0:
            self._delay -= 1
        if self._sound > 0:
            self._sound -= 1
            if self._sound == 0:
                signals |= Signal.BEEP
        return signals

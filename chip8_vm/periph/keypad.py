"""
CHIP-8 VM — Hex Keypad

Sixteen keys, 0–F, held state kept as a 16-bit mask (bit n = key n).
Only the host writes it, through set_key(). The executor reads it for
EX9E/EXA1 and uses the wait latch for FX0A:

  1. FX0A arms the latch and the step returns AWAITING_INPUT.
  2. A released → pressed transition while armed is latched.
  3. The next FX0A step takes the latched key and completes.
"""

import logging
from typing import Optional

from ..config import KEY_COUNT

log = logging.getLogger(__name__)


class Keypad:
    def __init__(self):
        self.reset()

    def reset(self):
        """Release every key and drop any armed wait."""
        self.mask: int = 0
        self.waiting: bool = False
        self._pending: Optional[int] = None

    @staticmethod
    def _check(index: int):
        if not 0 <= index < KEY_COUNT:
            raise ValueError(f"Key index must be 0..{KEY_COUNT - 1}, got {index}")

    def set_key(self, index: int, pressed: bool):
        self._check(index)
        bit = 1 << index
        was_down = bool(self.mask & bit)
        if pressed:
            self.mask |= bit
            if not was_down and self.waiting and self._pending is None:
                self._pending = index
                log.debug(f"Key {index:X} latched for FX0A")
        else:
            self.mask &= ~bit & 0xFFFF

    def is_pressed(self, index: int) -> bool:
        return bool(self.mask & (1 << (index & 0xF)))

    def arm_wait(self):
        self.waiting = True

    def take_pending(self) -> Optional[int]:
        """Latched key, if any. Disarms the wait when a key is returned."""
        key = self._pending
        if key is not None:
            self._pending = None
            self.waiting = False
        return key

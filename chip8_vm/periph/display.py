"""
CHIP-8 VM — 64×32 Monochrome Framebuffer

Pixels are a (32, 64) numpy uint8 array of 0/1, row-major (y, x). Only CLS
and DRW modify it. Sprites are 8 pixels wide, one byte per row, MSB on the
left, XOR-blitted with wraparound on both axes.

The host reads frames through consume(), which returns a copy of the
pixels together with the dirty flag and clears that flag.
"""

import dataclasses
from typing import Sequence

import numpy as np

from ..config import DISPLAY_HEIGHT, DISPLAY_WIDTH, SPRITE_WIDTH


@dataclasses.dataclass(frozen=True)
class Frame:
    pixels: np.ndarray
    dirty: bool


class Framebuffer:
    def __init__(self, width: int = DISPLAY_WIDTH, height: int = DISPLAY_HEIGHT):
        self.width = width
        self.height = height
        self._buffer = np.zeros((height, width), dtype=np.uint8)
        self.dirty = False

    @property
    def pixels(self) -> np.ndarray:
        """Read-only view of the live buffer."""
        view = self._buffer.view()
        view.flags.writeable = False
        return view

    def clear(self):
        self._buffer.fill(0)
        self.dirty = True

    def blit(self, x: int, y: int, rows: Sequence[int]) -> bool:
        """XOR an 8-wide sprite at (x, y). Returns True on any 1 → 0 pixel."""
        self.dirty = True
        if len(rows) == 0:
            return False
        sprite = np.unpackbits(np.frombuffer(bytes(rows), dtype=np.uint8)).reshape(-1, SPRITE_WIDTH)
        ys = (y + np.arange(sprite.shape[0])) % self.height
        xs = (x + np.arange(SPRITE_WIDTH)) % self.width
        window = np.ix_(ys, xs)
        current = self._buffer[window]
        collision = bool(np.any(current & sprite))
        self._buffer[window] = current ^ sprite
        return collision

    def get_pixel(self, x: int, y: int) -> int:
        return int(self._buffer[y % self.height, x % self.width])

    def consume(self) -> Frame:
        """Snapshot the pixels and clear the dirty flag."""
        frame = Frame(pixels=self._buffer.copy(), dirty=self.dirty)
        self.dirty = False
        return frame

    def render_text(self, on: str = '#', off: str = '.') -> str:
        return '\n'.join(
            ''.join(on if px else off for px in row) for row in self._buffer)

"""
CHIP-8 VM — 4 KB Memory with Region Routing

Memory map:
  $000–$04F  FONT      built-in hex glyphs, seeded at init
  $050–$1FF  RESERVED  interpreter area, zero
  $200–$FFF  PROGRAM   program image + working storage

Addresses wrap modulo 4096 (12-bit bus). Program images only ever land at
$200 and above, so loading can never clobber the font. Every
instruction-driven write is routed through the region map; FONT is
read-only while font protection is on.
"""

import logging
from dataclasses import dataclass
from typing import Tuple, Union

from ..config import (
    ADDRESS_MASK, FONT_BASE, FONT_END, FONT_GLYPHS, MAX_PROGRAM_SIZE,
    MEMORY_SIZE, PROGRAM_BASE,
)
from ..errors import OversizeProgram

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class MemoryRegion:
    """Half-open address range [start, stop) with a write policy."""
    name: str
    start: int
    stop: int
    writable: bool = True

    def __contains__(self, addr: int) -> bool:
        return self.start <= addr < self.stop


def build_regions(protect_font: bool) -> Tuple[MemoryRegion, ...]:
    return (
        MemoryRegion('FONT', FONT_BASE, FONT_END, writable=not protect_font),
        MemoryRegion('RESERVED', FONT_END, PROGRAM_BASE),
        MemoryRegion('PROGRAM', PROGRAM_BASE, MEMORY_SIZE),
    )


class Memory:
    """4096 byte-addressable cells, big-endian 16-bit access."""

    def __init__(self, protect_font: bool = True):
        self._mem = bytearray(MEMORY_SIZE)
        self.protect_font = protect_font
        self.regions = build_regions(protect_font)
        self.seed_font()

    def seed_font(self):
        self._mem[FONT_BASE:FONT_END] = FONT_GLYPHS

    def reset(self):
        """Zero every cell and reseed the font."""
        self._mem[:] = bytes(MEMORY_SIZE)
        self.seed_font()

    def region_of(self, addr: int) -> MemoryRegion:
        addr &= ADDRESS_MASK
        for region in self.regions:
            if addr in region:
                return region
        raise ValueError(f"No region for ${addr:03X}")

    # --- Core read/write ---

    def read8(self, addr: int) -> int:
        return self._mem[addr & ADDRESS_MASK]

    def write8(self, addr: int, value: int):
        """Write one byte. Writes into a read-only region are dropped."""
        addr &= ADDRESS_MASK
        region = self.region_of(addr)
        if not region.writable:
            log.debug(f"Dropped write ${value & 0xFF:02X} to {region.name} cell ${addr:03X}")
            return
        self._mem[addr] = value & 0xFF

    def read16(self, addr: int) -> int:
        """Read an instruction word (most-significant byte first)."""
        return (self.read8(addr) << 8) | self.read8(addr + 1)

    def read_block(self, addr: int, length: int) -> bytes:
        return bytes(self.read8(addr + i) for i in range(length))

    # --- Bulk load ---

    def load_program(self, data: Union[bytes, bytearray, memoryview]):
        """Copy a program image verbatim to $200.

        Raises OversizeProgram instead of truncating.
        """
        data = bytes(data)
        if len(data) > MAX_PROGRAM_SIZE:
            raise OversizeProgram(len(data), MAX_PROGRAM_SIZE)
        self._mem[PROGRAM_BASE:PROGRAM_BASE + len(data)] = data

    def snapshot(self) -> bytes:
        """Copy of all 4096 bytes."""
        return bytes(self._mem)

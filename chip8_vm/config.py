"""
CHIP-8 VM — Memory Map / Machine Configuration
==============================================

Fixed machine geometry lives here as module constants. Behaviour that
differs between historical interpreters ("quirks") is grouped in
MachineConfig so a host can pick the flavour it needs per emulator.

Memory map:
  $000–$04F  Built-in hex font (16 glyphs × 5 bytes)
  $050–$1FF  Reserved (interpreter area on the original hardware)
  $200–$FFF  Program image + working RAM
"""

from dataclasses import dataclass


# =============================================================================
#  MEMORY
# =============================================================================
MEMORY_SIZE = 0x1000          # 4 KB
ADDRESS_MASK = 0x0FFF
PROGRAM_BASE = 0x200
MAX_PROGRAM_SIZE = MEMORY_SIZE - PROGRAM_BASE   # 3584 bytes


# =============================================================================
#  CPU
# =============================================================================
REGISTER_COUNT = 16
FLAG_REGISTER = 0xF           # VF
STACK_DEPTH = 16
INSTRUCTION_SIZE = 2


# =============================================================================
#  PERIPHERALS
# =============================================================================
DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32
SPRITE_WIDTH = 8
KEY_COUNT = 16


# =============================================================================
#  FONT
# =============================================================================
FONT_BASE = 0x000
GLYPH_SIZE = 5

FONT_GLYPHS = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])

FONT_END = FONT_BASE + len(FONT_GLYPHS)   # exclusive


@dataclass(frozen=True)
class MachineConfig:
    """Interpreter quirks.

    sprite_height_bias: DXYN draws N + bias rows. The default of 1 reads
        N+1 bytes from I; set 0 for the COSMAC VIP row count.
    shift_uses_vy: 8XY6/8XYE shift VY into VX instead of shifting VX.
    protect_font: drop instruction writes into the font glyph region.
    """
    sprite_height_bias: int = 1
    shift_uses_vy: bool = False
    protect_font: bool = True


DEFAULT_CONFIG = MachineConfig()

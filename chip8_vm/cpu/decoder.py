"""
CHIP-8 VM — Instruction Decoder / Opcode Table

Every instruction is one big-endian 16-bit word. Operand fields:

  FXYN    F   = family      bits 12–15
          X   = register    bits 8–11
          Y   = register    bits 4–7
          N   = 4-bit imm   bits 0–3
          NN  = 8-bit imm   bits 0–7
          NNN = address     bits 0–11

The opcode table is keyed by (family, selector). Family $0 selects on
all twelve low bits, $E and $F on the low byte, $8 on the low nibble; every
other family has a single meaning and uses selector None. A word with no
table entry decodes to Op.UNRECOGNIZED, never to some default instruction.
"""

from dataclasses import dataclass
from enum import Enum


class Op(Enum):
    CLS = 'CLS'
    RET = 'RET'
    JP = 'JP'
    CALL = 'CALL'
    SE_BYTE = 'SE_BYTE'
    SNE_BYTE = 'SNE_BYTE'
    SE_REG = 'SE_REG'
    LD_BYTE = 'LD_BYTE'
    ADD_BYTE = 'ADD_BYTE'
    LD_REG = 'LD_REG'
    OR = 'OR'
    AND = 'AND'
    XOR = 'XOR'
    ADD_REG = 'ADD_REG'
    SUB = 'SUB'
    SHR = 'SHR'
    SUBN = 'SUBN'
    SHL = 'SHL'
    SNE_REG = 'SNE_REG'
    LD_I = 'LD_I'
    JP_V0 = 'JP_V0'
    RND = 'RND'
    DRW = 'DRW'
    SKP = 'SKP'
    SKNP = 'SKNP'
    LD_VX_DT = 'LD_VX_DT'
    LD_VX_K = 'LD_VX_K'
    LD_DT_VX = 'LD_DT_VX'
    LD_ST_VX = 'LD_ST_VX'
    ADD_I = 'ADD_I'
    LD_F = 'LD_F'
    LD_B = 'LD_B'
    LD_MEM_REGS = 'LD_MEM_REGS'
    LD_REGS_MEM = 'LD_REGS_MEM'
    UNRECOGNIZED = 'UNRECOGNIZED'


# ──────────────────────────────────────────────
# Selector extraction per family
# ──────────────────────────────────────────────

SELECT_ADDRESS = 'address'
SELECT_LOW_BYTE = 'low_byte'
SELECT_LOW_NIBBLE = 'low_nibble'

# System words carry no register field: 00E0 and 00EE match on all 12 bits.
FAMILY_SELECTOR = {
    0x0: SELECT_ADDRESS,
    0x8: SELECT_LOW_NIBBLE,
    0xE: SELECT_LOW_BYTE,
    0xF: SELECT_LOW_BYTE,
}


# ──────────────────────────────────────────────
# Opcode table — (family, selector) -> Op
# ──────────────────────────────────────────────

OPCODES = {
    # ── System ──
    (0x0, 0x0E0): Op.CLS,
    (0x0, 0x0EE): Op.RET,

    # ── Flow control ──
    (0x1, None): Op.JP,
    (0x2, None): Op.CALL,
    (0x3, None): Op.SE_BYTE,
    (0x4, None): Op.SNE_BYTE,
    (0x5, None): Op.SE_REG,

    # ── Immediate ──
    (0x6, None): Op.LD_BYTE,
    (0x7, None): Op.ADD_BYTE,

    # ── Register ALU ──
    (0x8, 0x0): Op.LD_REG,
    (0x8, 0x1): Op.OR,
    (0x8, 0x2): Op.AND,
    (0x8, 0x3): Op.XOR,
    (0x8, 0x4): Op.ADD_REG,
    (0x8, 0x5): Op.SUB,
    (0x8, 0x6): Op.SHR,
    (0x8, 0x7): Op.SUBN,
    (0x8, 0xE): Op.SHL,

    (0x9, None): Op.SNE_REG,
    (0xA, None): Op.LD_I,
    (0xB, None): Op.JP_V0,
    (0xC, None): Op.RND,
    (0xD, None): Op.DRW,

    # ── Keypad ──
    (0xE, 0x9E): Op.SKP,
    (0xE, 0xA1): Op.SKNP,

    # ── Timers / index / memory ──
    (0xF, 0x07): Op.LD_VX_DT,
    (0xF, 0x0A): Op.LD_VX_K,
    (0xF, 0x15): Op.LD_DT_VX,
    (0xF, 0x18): Op.LD_ST_VX,
    (0xF, 0x1E): Op.ADD_I,
    (0xF, 0x29): Op.LD_F,
    (0xF, 0x33): Op.LD_B,
    (0xF, 0x55): Op.LD_MEM_REGS,
    (0xF, 0x65): Op.LD_REGS_MEM,
}


@dataclass(frozen=True)
class Instruction:
    """A decoded instruction word. Fields are always populated, whatever the op."""
    op: Op
    word: int
    x: int
    y: int
    n: int
    nn: int
    nnn: int

    @property
    def family(self) -> int:
        return self.word >> 12

    @property
    def recognized(self) -> bool:
        return self.op is not Op.UNRECOGNIZED

    def __str__(self) -> str:
        return f"{self.word:04X} {self.op.value}"


def selector_for(word: int):
    """Sub-selector used to look the word up in OPCODES."""
    kind = FAMILY_SELECTOR.get(word >> 12)
    if kind == SELECT_ADDRESS:
        return word & 0x0FFF
    if kind == SELECT_LOW_BYTE:
        return word & 0x00FF
    if kind == SELECT_LOW_NIBBLE:
        return word & 0x000F
    return None


def decode(word: int) -> Instruction:
    """Decode a 16-bit instruction word. Total over 0x0000–0xFFFF."""
    if not 0 <= word <= 0xFFFF:
        raise ValueError(f"Instruction word out of range: {word:#x}")
    family = word >> 12
    op = OPCODES.get((family, selector_for(word)), Op.UNRECOGNIZED)
    return Instruction(
        op=op,
        word=word,
        x=(word >> 8) & 0xF,
        y=(word >> 4) & 0xF,
        n=word & 0x000F,
        nn=word & 0x00FF,
        nnn=word & 0x0FFF,
    )


def decode_at(memory, pc: int) -> Instruction:
    """Fetch the word at PC (big-endian) and decode it."""
    return decode(memory.read16(pc))

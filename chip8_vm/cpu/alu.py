"""
CHIP-8 VM — 8-bit ALU helpers

Each function returns (result_byte, vf_bit). The executor writes the
result to VX first and VF second, so the flag survives when X == F.

  add8:  VF = 1 iff a + b > 255
  sub8:  VF = 1 iff a >= b   (NOT borrow)
  shr8:  VF = bit 0 of the operand before the shift
  shl8:  VF = bit 7 of the operand before the shift
"""


def add8(a: int, b: int) -> tuple:
    result = a + b
    return (result & 0xFF, 1 if result > 0xFF else 0)


def sub8(a: int, b: int) -> tuple:
    """a - b modulo 256, flag set when no borrow occurred."""
    return ((a - b) & 0xFF, 1 if a >= b else 0)


def shr8(val: int) -> tuple:
    return ((val >> 1) & 0x7F, val & 0x01)


def shl8(val: int) -> tuple:
    return ((val << 1) & 0xFF, (val >> 7) & 0x01)


def bcd3(val: int) -> tuple:
    """Hundreds, tens and ones digits of an 8-bit value."""
    val &= 0xFF
    return (val // 100, (val // 10) % 10, val % 10)

"""
CHIP-8 VM — Instruction Execution

execute(state, ins, entropy) applies one decoded instruction to the
MachineState and returns the Signal set it produced.

PC rules, uniform across the instruction set:
  - ordinary instructions:   PC += 2
  - skips:                   PC += 4 when the condition holds, else PC += 2
  - JP / JP_V0 / CALL / RET: PC set directly, no extra advance
  - FX0A with no key yet:    PC unchanged, AWAITING_INPUT
  - unrecognized word:       PC unchanged, UNRECOGNIZED_OPCODE

VF is always written after the destination register, so the flag value
wins when the destination is VF itself.

Handler signature: handler(state, ins, entropy) -> Signal
"""

import functools
import logging
from typing import Callable, Dict, Optional

from ..config import FONT_BASE, GLYPH_SIZE
from ..entropy import EntropySource
from ..errors import EntropyUnavailable, MachineFault
from ..signals import Signal
from . import alu
from .decoder import Instruction, Op

log = logging.getLogger(__name__)


def _advances(handler):
    """Mark a handler as an ordinary instruction: PC += 2 after it runs."""
    @functools.wraps(handler)
    def wrapper(state, ins, entropy):
        signals = handler(state, ins, entropy)
        state.regs.advance()
        return signals or Signal.NONE
    return wrapper


def _skip_if(state, condition: bool) -> Signal:
    state.regs.advance(2 if condition else 1)
    return Signal.NONE


# ══════════════════════════════════════════════
# System / flow control
# ══════════════════════════════════════════════

@_advances
def _op_cls(state, ins, entropy):
    state.display.clear()
    return Signal.REDRAW


def _op_ret(state, ins, entropy):
    state.regs.PC = state.stack.pop()
    return Signal.NONE


def _op_jp(state, ins, entropy):
    state.regs.PC = ins.nnn
    return Signal.NONE


def _op_call(state, ins, entropy):
    """Push the address of the following instruction, then jump."""
    state.stack.push(state.regs.PC + 2)
    state.regs.PC = ins.nnn
    return Signal.NONE


def _op_jp_v0(state, ins, entropy):
    state.regs.PC = ins.nnn + state.regs.V[0]
    return Signal.NONE


# ── Skips ──

def _op_se_byte(state, ins, entropy):
    return _skip_if(state, state.regs.V[ins.x] == ins.nn)


def _op_sne_byte(state, ins, entropy):
    return _skip_if(state, state.regs.V[ins.x] != ins.nn)


def _op_se_reg(state, ins, entropy):
    return _skip_if(state, state.regs.V[ins.x] == state.regs.V[ins.y])


def _op_sne_reg(state, ins, entropy):
    return _skip_if(state, state.regs.V[ins.x] != state.regs.V[ins.y])


def _op_skp(state, ins, entropy):
    return _skip_if(state, state.keypad.is_pressed(state.regs.V[ins.x] & 0xF))


def _op_sknp(state, ins, entropy):
    return _skip_if(state, not state.keypad.is_pressed(state.regs.V[ins.x] & 0xF))


# ══════════════════════════════════════════════
# Register loads / ALU
# ══════════════════════════════════════════════

@_advances
def _op_ld_byte(state, ins, entropy):
    state.regs.set(ins.x, ins.nn)


@_advances
def _op_add_byte(state, ins, entropy):
    """7XNN: wrapping add, VF untouched."""
    state.regs.set(ins.x, state.regs.V[ins.x] + ins.nn)


@_advances
def _op_ld_reg(state, ins, entropy):
    state.regs.set(ins.x, state.regs.V[ins.y])


@_advances
def _op_or(state, ins, entropy):
    state.regs.set(ins.x, state.regs.V[ins.x] | state.regs.V[ins.y])


@_advances
def _op_and(state, ins, entropy):
    state.regs.set(ins.x, state.regs.V[ins.x] & state.regs.V[ins.y])


@_advances
def _op_xor(state, ins, entropy):
    state.regs.set(ins.x, state.regs.V[ins.x] ^ state.regs.V[ins.y])


def _store_with_flag(state, x: int, outcome: tuple):
    result, flag = outcome
    state.regs.set(x, result)
    state.regs.VF = flag


@_advances
def _op_add_reg(state, ins, entropy):
    _store_with_flag(state, ins.x, alu.add8(state.regs.V[ins.x], state.regs.V[ins.y]))


@_advances
def _op_sub(state, ins, entropy):
    _store_with_flag(state, ins.x, alu.sub8(state.regs.V[ins.x], state.regs.V[ins.y]))


@_advances
def _op_subn(state, ins, entropy):
    _store_with_flag(state, ins.x, alu.sub8(state.regs.V[ins.y], state.regs.V[ins.x]))


def _shift_source(state, ins) -> int:
    return state.regs.V[ins.y if state.config.shift_uses_vy else ins.x]


@_advances
def _op_shr(state, ins, entropy):
    _store_with_flag(state, ins.x, alu.shr8(_shift_source(state, ins)))


@_advances
def _op_shl(state, ins, entropy):
    _store_with_flag(state, ins.x, alu.shl8(_shift_source(state, ins)))


@_advances
def _op_rnd(state, ins, entropy):
    """CXNN: VX = random byte AND NN."""
    if entropy is None:
        raise EntropyUnavailable("No entropy source attached")
    state.regs.set(ins.x, entropy.next_byte() & ins.nn)


# ══════════════════════════════════════════════
# Index register / memory
# ══════════════════════════════════════════════

@_advances
def _op_ld_i(state, ins, entropy):
    state.regs.I = ins.nnn


@_advances
def _op_add_i(state, ins, entropy):
    state.regs.I = state.regs.I + state.regs.V[ins.x]


@_advances
def _op_ld_f(state, ins, entropy):
    state.regs.I = FONT_BASE + GLYPH_SIZE * (state.regs.V[ins.x] & 0xF)


@_advances
def _op_ld_b(state, ins, entropy):
    base = state.regs.I
    for offset, digit in enumerate(alu.bcd3(state.regs.V[ins.x])):
        state.mem.write8(base + offset, digit)


@_advances
def _op_ld_mem_regs(state, ins, entropy):
    """FX55: memory[I + k] = Vk for k in 0..X. I is left unchanged."""
    base = state.regs.I
    for k in range(ins.x + 1):
        state.mem.write8(base + k, state.regs.V[k])


@_advances
def _op_ld_regs_mem(state, ins, entropy):
    """FX65: Vk = memory[I + k] for k in 0..X. I is left unchanged."""
    base = state.regs.I
    for k in range(ins.x + 1):
        state.regs.set(k, state.mem.read8(base + k))


# ══════════════════════════════════════════════
# Timers / keypad
# ══════════════════════════════════════════════

@_advances
def _op_ld_vx_dt(state, ins, entropy):
    state.regs.set(ins.x, state.timers.delay)


@_advances
def _op_ld_dt_vx(state, ins, entropy):
    state.timers.delay = state.regs.V[ins.x]


@_advances
def _op_ld_st_vx(state, ins, entropy):
    state.timers.sound = state.regs.V[ins.x]


def _op_ld_vx_k(state, ins, entropy):
    """FX0A: suspend until the host reports a key-down, then VX = key."""
    key = state.keypad.take_pending()
    if key is None:
        state.keypad.arm_wait()
        return Signal.AWAITING_INPUT
    state.regs.set(ins.x, key)
    state.regs.advance()
    return Signal.NONE


# ══════════════════════════════════════════════
# Display
# ══════════════════════════════════════════════

@_advances
def _op_drw(state, ins, entropy):
    """DXYN: XOR N + bias rows from I at (VX, VY); VF = collision."""
    height = ins.n + state.config.sprite_height_bias
    rows = state.mem.read_block(state.regs.I, height)
    x = state.regs.V[ins.x] % state.display.width
    y = state.regs.V[ins.y] % state.display.height
    collision = state.display.blit(x, y, rows)
    state.regs.VF = 1 if collision else 0
    return Signal.REDRAW


# ══════════════════════════════════════════════
# Unrecognized
# ══════════════════════════════════════════════

def _op_unrecognized(state, ins, entropy):
    """Report and leave everything, PC included, as it was."""
    log.warning(f"Unrecognized opcode ${ins.word:04X} at ${state.regs.PC:03X}")
    return Signal.UNRECOGNIZED_OPCODE


DISPATCH: Dict[Op, Callable] = {
    Op.CLS: _op_cls,
    Op.RET: _op_ret,
    Op.JP: _op_jp,
    Op.CALL: _op_call,
    Op.SE_BYTE: _op_se_byte,
    Op.SNE_BYTE: _op_sne_byte,
    Op.SE_REG: _op_se_reg,
    Op.LD_BYTE: _op_ld_byte,
    Op.ADD_BYTE: _op_add_byte,
    Op.LD_REG: _op_ld_reg,
    Op.OR: _op_or,
    Op.AND: _op_and,
    Op.XOR: _op_xor,
    Op.ADD_REG: _op_add_reg,
    Op.SUB: _op_sub,
    Op.SHR: _op_shr,
    Op.SUBN: _op_subn,
    Op.SHL: _op_shl,
    Op.SNE_REG: _op_sne_reg,
    Op.LD_I: _op_ld_i,
    Op.JP_V0: _op_jp_v0,
    Op.RND: _op_rnd,
    Op.DRW: _op_drw,
    Op.SKP: _op_skp,
    Op.SKNP: _op_sknp,
    Op.LD_VX_DT: _op_ld_vx_dt,
    Op.LD_VX_K: _op_ld_vx_k,
    Op.LD_DT_VX: _op_ld_dt_vx,
    Op.LD_ST_VX: _op_ld_st_vx,
    Op.ADD_I: _op_add_i,
    Op.LD_F: _op_ld_f,
    Op.LD_B: _op_ld_b,
    Op.LD_MEM_REGS: _op_ld_mem_regs,
    Op.LD_REGS_MEM: _op_ld_regs_mem,
    Op.UNRECOGNIZED: _op_unrecognized,
}

_missing = set(Op) - set(DISPATCH)
if _missing:
    raise RuntimeError(f"No handler for {sorted(op.value for op in _missing)}")


def execute(state, ins: Instruction, entropy: Optional[EntropySource] = None) -> Signal:
    """Apply one instruction to `state`. MachineFaults carry PC and word."""
    pc = state.regs.PC
    try:
        return DISPATCH[ins.op](state, ins, entropy)
    except MachineFault as fault:
        fault.locate(pc, ins.word)
        raise

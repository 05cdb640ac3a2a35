"""
Decoder tests — totality over every 16-bit word, field extraction, and
the (family, selector) table.
"""

import pytest

from chip8_vm.cpu.decoder import OPCODES, Op, decode, selector_for
from chip8_vm.mem.memory import Memory
from chip8_vm.cpu.decoder import decode_at


class TestDecodeTotality:

    def test_every_word_decodes(self):
        """All 65536 words decode, deterministically, with exact fields."""
        recognized = 0
        for word in range(0x10000):
            ins = decode(word)
            assert ins == decode(word)
            assert ins.word == word
            assert ins.family == word >> 12
            assert ins.x == (word >> 8) & 0xF
            assert ins.y == (word >> 4) & 0xF
            assert ins.n == word & 0xF
            assert ins.nn == word & 0xFF
            assert ins.nnn == word & 0xFFF
            assert isinstance(ins.op, Op)
            if ins.recognized:
                recognized += 1
        # 12 single-meaning families × 4096 + 8XY? (9 × 256)
        # + 00E0/00EE + EX9E/EXA1 (2 × 16) + FX?? (9 × 16)
        assert recognized == 12 * 4096 + 9 * 256 + 2 + 2 * 16 + 9 * 16

    def test_out_of_range(self):
        with pytest.raises(ValueError):
            decode(0x10000)
        with pytest.raises(ValueError):
            decode(-1)


class TestDecodeTable:

    @pytest.mark.parametrize("word, op", [
        (0x00E0, Op.CLS),
        (0x00EE, Op.RET),
        (0x1ABC, Op.JP),
        (0x2ABC, Op.CALL),
        (0x3A12, Op.SE_BYTE),
        (0x4A12, Op.SNE_BYTE),
        (0x5AB0, Op.SE_REG),
        (0x6A12, Op.LD_BYTE),
        (0x7A12, Op.ADD_BYTE),
        (0x8AB0, Op.LD_REG),
        (0x8AB1, Op.OR),
        (0x8AB2, Op.AND),
        (0x8AB3, Op.XOR),
        (0x8AB4, Op.ADD_REG),
        (0x8AB5, Op.SUB),
        (0x8AB6, Op.SHR),
        (0x8AB7, Op.SUBN),
        (0x8ABE, Op.SHL),
        (0x9AB0, Op.SNE_REG),
        (0xA123, Op.LD_I),
        (0xB123, Op.JP_V0),
        (0xCA12, Op.RND),
        (0xDAB5, Op.DRW),
        (0xEA9E, Op.SKP),
        (0xEAA1, Op.SKNP),
        (0xFA07, Op.LD_VX_DT),
        (0xFA0A, Op.LD_VX_K),
        (0xFA15, Op.LD_DT_VX),
        (0xFA18, Op.LD_ST_VX),
        (0xFA1E, Op.ADD_I),
        (0xFA29, Op.LD_F),
        (0xFA33, Op.LD_B),
        (0xFA55, Op.LD_MEM_REGS),
        (0xFA65, Op.LD_REGS_MEM),
    ])
    def test_known_words(self, word, op):
        assert decode(word).op is op

    @pytest.mark.parametrize("word", [
        0x0000, 0x00E1, 0x0123, 0x0FFF,      # 0NNN machine calls are not supported
        0x01E0, 0x0FE0, 0x01EE, 0x0FEE,      # system words need X == Y == 0
        0x8AB8, 0x8ABF,
        0xEA9F, 0xE0A0,
        0xFA00, 0xFA30, 0xFAFF,
    ])
    def test_unrecognized_words(self, word):
        ins = decode(word)
        assert ins.op is Op.UNRECOGNIZED
        assert not ins.recognized

    def test_selectors(self):
        assert selector_for(0x00EE) == 0x0EE
        assert selector_for(0x0FEE) == 0xFEE
        assert selector_for(0x8AB4) == 0x4
        assert selector_for(0xEA9E) == 0x9E
        assert selector_for(0xFA65) == 0x65
        assert selector_for(0x1234) is None

    def test_table_has_one_entry_per_op(self):
        ops = list(OPCODES.values())
        assert len(ops) == len(set(ops))
        assert set(ops) | {Op.UNRECOGNIZED} == set(Op)

    def test_str(self):
        assert str(decode(0x8AB4)) == "8AB4 ADD_REG"


class TestFetch:

    def test_big_endian_fetch(self):
        mem = Memory()
        mem.load_program(bytes([0x12, 0x34]))
        assert decode_at(mem, 0x200).word == 0x1234

    def test_fetch_wraps_at_end_of_memory(self):
        mem = Memory(protect_font=False)
        mem.write8(0xFFF, 0xA1)
        mem.write8(0x000, 0x23)
        assert decode_at(mem, 0xFFF).word == 0xA123

"""
Unit tests for the building blocks: ALU helpers, registers, call stack,
memory, timers, keypad, framebuffer and entropy sources.
"""

import pytest

from chip8_vm import EntropyUnavailable, FixedEntropy, SeededEntropy, Signal, SystemEntropy
from chip8_vm.config import FONT_GLYPHS, MAX_PROGRAM_SIZE
from chip8_vm.cpu import alu
from chip8_vm.cpu.regs import CallStack, Registers
from chip8_vm.errors import OversizeProgram, StackOverflow, StackUnderflow
from chip8_vm.mem.memory import Memory
from chip8_vm.periph.display import Framebuffer
from chip8_vm.periph.keypad import Keypad
from chip8_vm.periph.timer import TimerPeripheral


class TestAlu:

    def test_add8(self):
        assert alu.add8(0xFF, 0x02) == (0x01, 1)
        assert alu.add8(0x01, 0x01) == (0x02, 0)
        assert alu.add8(0x80, 0x80) == (0x00, 1)
        assert alu.add8(0xFF, 0x00) == (0xFF, 0)

    def test_sub8(self):
        assert alu.sub8(0x05, 0x09) == (0xFC, 0)
        assert alu.sub8(0x09, 0x05) == (0x04, 1)
        assert alu.sub8(0x00, 0x00) == (0x00, 1)
        assert alu.sub8(0x00, 0xFF) == (0x01, 0)

    def test_shifts(self):
        assert alu.shr8(0x01) == (0x00, 1)
        assert alu.shr8(0xFE) == (0x7F, 0)
        assert alu.shl8(0x80) == (0x00, 1)
        assert alu.shl8(0x7F) == (0xFE, 0)

    def test_bcd3(self):
        assert alu.bcd3(157) == (1, 5, 7)
        assert alu.bcd3(0) == (0, 0, 0)
        assert alu.bcd3(255) == (2, 5, 5)
        assert alu.bcd3(40) == (0, 4, 0)


class TestRegisters:

    def test_power_on(self):
        regs = Registers()
        assert regs.V == [0] * 16
        assert regs.I == 0
        assert regs.PC == 0x200

    def test_masks(self):
        regs = Registers()
        regs.set(3, 0x1FF)
        regs.I = 0x12345
        regs.PC = 0x1202
        assert regs.V[3] == 0xFF
        assert regs.I == 0x2345
        assert regs.PC == 0x202

    def test_display(self):
        regs = Registers()
        regs.VF = 1
        assert regs.display().startswith("PC=200 I=0000 V0=00")
        assert regs.display().endswith("VF=01")

    def test_reset(self):
        regs = Registers()
        regs.set(5, 9)
        regs.I = 0x300
        regs.advance(3)
        regs.reset()
        assert regs.V == [0] * 16
        assert (regs.I, regs.PC) == (0, 0x200)


class TestCallStack:

    def test_lifo(self):
        stack = CallStack()
        stack.push(0x202)
        stack.push(0x304)
        assert stack.SP == 2
        assert stack.pop() == 0x304
        assert stack.pop() == 0x202
        assert len(stack) == 0

    def test_bounds(self):
        stack = CallStack()
        for k in range(16):
            stack.push(0x200 + 2 * k)
        with pytest.raises(StackOverflow):
            stack.push(0x400)
        assert stack.SP == 16
        assert stack.entries()[-1] == 0x21E
        for _ in range(16):
            stack.pop()
        with pytest.raises(StackUnderflow):
            stack.pop()
        assert stack.SP == 0

    def test_reset(self):
        stack = CallStack()
        stack.push(0x202)
        stack.push(0x204)
        stack.reset()
        assert stack.SP == 0
        assert stack.entries() == []


class TestMemory:

    def test_font_seeded(self):
        mem = Memory()
        assert mem.read_block(0, 80) == FONT_GLYPHS
        assert mem.region_of(0x04F).name == 'FONT'
        assert mem.region_of(0x050).name == 'RESERVED'
        assert mem.region_of(0x200).name == 'PROGRAM'

    def test_address_wrap(self):
        mem = Memory()
        mem.write8(0x1300, 0x42)
        assert mem.read8(0x300) == 0x42
        assert mem.read8(0x1000) == mem.read8(0x000)

    def test_load_limits(self):
        mem = Memory()
        with pytest.raises(OversizeProgram) as exc:
            mem.load_program(bytes(MAX_PROGRAM_SIZE + 1))
        assert exc.value.size == MAX_PROGRAM_SIZE + 1
        assert exc.value.limit == 3584
        mem.load_program(b"\x01\x02")
        assert mem.read_block(0x200, 2) == b"\x01\x02"

    def test_font_region_follows_protection(self):
        mem = Memory()
        assert not mem.region_of(0x000).writable
        mem.write8(0x000, 0xAA)
        assert mem.read8(0x000) == FONT_GLYPHS[0]

        mem = Memory(protect_font=False)
        assert mem.region_of(0x000).writable
        mem.write8(0x000, 0xAA)
        assert mem.read8(0x000) == 0xAA

    def test_reset(self):
        mem = Memory(protect_font=False)
        mem.write8(0x000, 0xAA)
        mem.load_program(b"\x12\x34")
        mem.reset()
        assert mem.read_block(0, 80) == FONT_GLYPHS
        assert mem.read16(0x200) == 0


class TestTimer:

    def test_tick_to_zero(self):
        t = TimerPeripheral()
        t.delay = 2
        t.sound = 1
        assert t.tick() == Signal.BEEP
        assert t.tick() == Signal.NONE
        assert (t.delay, t.sound) == (0, 0)
        assert t.ticks == 2

    def test_eight_bit(self):
        t = TimerPeripheral()
        t.delay = 0x1FF
        assert t.delay == 0xFF

    def test_reset(self):
        t = TimerPeripheral()
        t.delay = 5
        t.sound = 7
        t.tick()
        t.reset()
        assert (t.delay, t.sound, t.ticks) == (0, 0, 0)
        assert not t.sound_active


class TestKeypad:

    def test_mask(self):
        k = Keypad()
        k.set_key(0, True)
        k.set_key(0xF, True)
        assert k.mask == 0x8001
        k.set_key(0, False)
        assert k.mask == 0x8000
        assert k.is_pressed(0xF)
        assert not k.is_pressed(0)

    def test_latch_only_when_armed(self):
        k = Keypad()
        k.set_key(3, True)
        assert k.take_pending() is None
        k.arm_wait()
        k.set_key(4, True)
        k.set_key(5, True)
        assert k.take_pending() == 4
        assert not k.waiting

    def test_reset(self):
        k = Keypad()
        k.set_key(2, True)
        k.arm_wait()
        k.set_key(6, True)
        k.reset()
        assert k.mask == 0
        assert not k.waiting
        assert k.take_pending() is None


class TestFramebuffer:

    def test_blit_and_collision(self):
        fb = Framebuffer()
        assert not fb.blit(0, 0, [0xFF])
        assert fb.pixels[0].sum() == 8
        assert fb.blit(4, 0, [0x80])
        assert fb.get_pixel(4, 0) == 0

    def test_render_text(self):
        fb = Framebuffer()
        fb.blit(0, 0, [0xA0])
        first = fb.render_text().splitlines()[0]
        assert first.startswith("#.#.....")
        assert len(first) == 64


class TestEntropy:

    def test_fixed_sequence(self):
        src = FixedEntropy([1, 2])
        assert [src.next_byte(), src.next_byte()] == [1, 2]
        assert src.remaining == 0
        with pytest.raises(EntropyUnavailable):
            src.next_byte()

    def test_fixed_cycle(self):
        src = FixedEntropy([9], cycle=True)
        assert [src.next_byte() for _ in range(3)] == [9, 9, 9]

    def test_seeded_reproducible(self):
        a = SeededEntropy(1234)
        b = SeededEntropy(1234)
        assert [a.next_byte() for _ in range(8)] == [b.next_byte() for _ in range(8)]

    def test_system_range(self):
        assert 0 <= SystemEntropy().next_byte() <= 0xFF

    def test_system_failure_maps_to_fatal(self, monkeypatch):
        def broken(n):
            raise OSError("no entropy device")
        monkeypatch.setattr("chip8_vm.entropy.os.urandom", broken)
        with pytest.raises(EntropyUnavailable):
            SystemEntropy().next_byte()

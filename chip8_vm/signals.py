"""Side-effect signals reported to the host by step() and tick_timers()."""

from enum import Flag, auto


class Signal(Flag):
    NONE = 0
    REDRAW = auto()
    BEEP = auto()
    AWAITING_INPUT = auto()
    UNRECOGNIZED_OPCODE = auto()

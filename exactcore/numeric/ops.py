"""Standard rounding directions and operation codes, shared by the arithmetics."""

from enum import IntEnum, unique

class RM(IntEnum):
    ROUND_DOWN = 3
    RTN = 3
    ROUND_UP = 2
    RTP = 2

@unique
class OP(IntEnum):
    add = 0
    sub = 1
    mul = 2

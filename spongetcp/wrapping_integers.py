"""32-bit wrapping sequence numbers and conversion to and from absolute 64-bit numbers."""

from __future__ import annotations

from dataclasses import dataclass

_MOD = 1 << 32
_MASK = _MOD - 1
_HALF = 1 << 31


@dataclass(frozen=True)
class WrappingInt32:
    """A 32-bit integer that wraps around, used for TCP seqnos and acknos."""

    raw_value: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "raw_value", int(self.raw_value) & _MASK)

    def __add__(self, other: int) -> WrappingInt32:
        """Step ``other`` places past this point."""
        if isinstance(other, WrappingInt32) or not isinstance(other, int):
            return NotImplemented
        return WrappingInt32(self.raw_value + other)

    def __sub__(self, other):
        """Offset to another WrappingInt32 (signed 32-bit), or step back by an int."""
        if isinstance(other, WrappingInt32):
            diff = (self.raw_value - other.raw_value) & _MASK
            return diff - _MOD if diff >= _HALF else diff
        if isinstance(other, int):
            return WrappingInt32(self.raw_value - other)
        return NotImplemented

    def __str__(self) -> str:
        return str(self.raw_value)


def wrap(n: int, isn: WrappingInt32) -> WrappingInt32:
    """Convert an absolute sequence number into a relative 32-bit one."""
    return isn + n


def unwrap(n: WrappingInt32, isn: WrappingInt32, checkpoint: int) -> int:
    """Convert a relative sequence number into the absolute one nearest ``checkpoint``."""
    offset = (n.raw_value - isn.raw_value) & _MASK
    if offset < checkpoint:
        epoch = (checkpoint - offset + _HALF) // _MOD
        return epoch * _MOD + offset
    return offset
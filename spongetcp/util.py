"""Miscellaneous helpers: the Internet checksum, timing, randomness and hex dumps."""

from __future__ import annotations

import os
import random
import sys
import time
from typing import TextIO

_PROGRAM_START = time.monotonic()
_MASK32 = 0xFFFFFFFF
_MT19937_STATE_WORDS = 624


def timestamp_ms() -> int:
    """Milliseconds elapsed since this module was first loaded."""
    return int((time.monotonic() - _PROGRAM_START) * 1000)


def get_random_generator() -> random.Random:
    """A Mersenne Twister generator seeded with a full state's worth of entropy."""
    seed = int.from_bytes(os.urandom(4 * _MT19937_STATE_WORDS), "big")
    return random.Random(seed)


class InternetChecksum:
    """The Internet checksum (one's complement sum of 16-bit words).

    Data may be added in pieces of any length; odd-length pieces are handled
    by tracking which half of a 16-bit word the next byte belongs to.
    The result is in host byte order.
    """

    def __init__(self, initial_sum: int = 0) -> None:
        self._sum = initial_sum & _MASK32
        self._odd = False

    def add(self, data) -> None:
        """Add bytes (or anything convertible with ``bytes()``) to the sum."""
        for byte in bytes(data):
            self._sum = (self._sum + (byte if self._odd else byte << 8)) & _MASK32
            self._odd = not self._odd

    def value(self) -> int:
        """The checksum of everything added so far."""
        total = self._sum
        while total > 0xFFFF:
            total = (total >> 16) + (total & 0xFFFF)
        return ~total & 0xFFFF


def _printable(byte: int) -> str:
    return chr(byte) if 0x20 <= byte < 0x7F else "."


def hexdump(data, indent: int = 0, file: TextIO | None = None) -> None:
    """Write a hex dump of ``data`` to ``file`` (standard output by default)."""
    out = sys.stdout if file is None else file
    raw = bytes(data)
    prefix = " " * indent
    parts: list[str] = []
    chars = ""
    for printed, byte in enumerate(raw):
        if printed & 0xF == 0:
            if printed:
                parts.append("    " + chars + "\n")
                chars = ""
            parts.append(f"{prefix}{printed:08x}:    ")
        elif printed & 1 == 0:
            parts.append(" ")
        parts.append(f"{byte:02x}")
        chars += _printable(byte)
    remainder = (16 - (len(raw) & 0xF)) % 16
    parts.append(" " * (2 * remainder + remainder // 2 + 4) + (chars or " "))
    parts.append("\n\n")
    out.write("".join(parts))
    out.flush()
"""Network-byte-order parsing and unparsing of integers."""

from __future__ import annotations

from enum import Enum

from spongetcp.buffer import Buffer


class ParseResult(Enum):
    """Outcome of parsing a datagram, segment, frame or message."""

    NO_ERROR = 0
    BAD_CHECKSUM = 1
    PACKET_TOO_SHORT = 2
    WRONG_IP_VERSION = 3
    HEADER_TOO_SHORT = 4
    TRUNCATED_PACKET = 5
    UNSUPPORTED = 6


_NAMES = {
    ParseResult.NO_ERROR: "NoError",
    ParseResult.BAD_CHECKSUM: "BadChecksum",
    ParseResult.PACKET_TOO_SHORT: "PacketTooShort",
    ParseResult.WRONG_IP_VERSION: "WrongIPVersion",
    ParseResult.HEADER_TOO_SHORT: "HeaderTooShort",
    ParseResult.TRUNCATED_PACKET: "TruncatedPacket",
    ParseResult.UNSUPPORTED: "Unsupported",
}


def as_string(result: ParseResult) -> str:
    """Human-readable name of a ParseResult."""
    return _NAMES[result]


class ParseError(Exception):
    """Raised when parsing fails; carries the ParseResult."""

    def __init__(self, result: ParseResult) -> None:
        super().__init__(as_string(result))
        self.result = result


class NetParser:
    """Reads big-endian integers from a Buffer, recording the first error.

    Once an error is recorded, further reads return 0 and consume nothing.
    """

    def __init__(self, buffer) -> None:
        self._buffer = Buffer(buffer)
        self._error = ParseResult.NO_ERROR

    def buffer(self) -> Buffer:
        """The unparsed remainder."""
        return Buffer(self._buffer)

    def get_error(self) -> ParseResult:
        return self._error

    def set_error(self, result: ParseResult) -> None:
        self._error = result

    def error(self) -> bool:
        return self._error is not ParseResult.NO_ERROR

    def _check_size(self, size: int) -> None:
        if size > len(self._buffer):
            self.set_error(ParseResult.PACKET_TOO_SHORT)

    def _parse_int(self, size: int) -> int:
        self._check_size(size)
        if self.error():
            return 0
        value = int.from_bytes(self._buffer[:size], "big")
        self._buffer.remove_prefix(size)
        return value

    def u32(self) -> int:
        return self._parse_int(4)

    def u16(self) -> int:
        return self._parse_int(2)

    def u8(self) -> int:
        return self._parse_int(1)

    def remove_prefix(self, n: int) -> None:
        """Skip ``n`` bytes."""
        self._check_size(n)
        if self.error():
            return
        self._buffer.remove_prefix(n)


def _unparse(value: int, size: int) -> bytes:
    return (value & ((1 << (8 * size)) - 1)).to_bytes(size, "big")


def unparse_u32(value: int) -> bytes:
    """Encode a 32-bit integer in network byte order."""
    return _unparse(value, 4)


def unparse_u16(value: int) -> bytes:
    """Encode a 16-bit integer in network byte order."""
    return _unparse(value, 2)


def unparse_u8(value: int) -> bytes:
    """Encode an 8-bit integer."""
    return _unparse(value, 1)
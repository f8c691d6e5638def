"""The TCP segment header (options are not supported)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

from spongetcp.parser import (
    NetParser,
    ParseError,
    ParseResult,
    unparse_u8,
    unparse_u16,
    unparse_u32,
)
from spongetcp.wrapping_integers import WrappingInt32

_URG = 0b0010_0000
_ACK = 0b0001_0000
_PSH = 0b0000_1000
_RST = 0b0000_0100
_SYN = 0b0000_0010
_FIN = 0b0000_0001


def _bool(flag: bool) -> str:
    return "true" if flag else "false"


@dataclass(eq=False)
class TCPHeader:
    """The fields of a TCP header."""

    LENGTH: ClassVar[int] = 20

    sport: int = 0
    dport: int = 0
    seqno: WrappingInt32 = field(default_factory=WrappingInt32)
    ackno: WrappingInt32 = field(default_factory=WrappingInt32)
    doff: int = LENGTH // 4
    urg: bool = False
    ack: bool = False
    psh: bool = False
    rst: bool = False
    syn: bool = False
    fin: bool = False
    win: int = 0
    cksum: int = 0
    uptr: int = 0

    def parse(self, parser: NetParser) -> None:
        """Fill the fields from ``parser``, skipping any options.

        Raises ParseError on a short header or too little data.
        """
        self.sport = parser.u16()
        self.dport = parser.u16()
        self.seqno = WrappingInt32(parser.u32())
        self.ackno = WrappingInt32(parser.u32())
        self.doff = parser.u8() >> 4

        flags = parser.u8()
        self.urg = bool(flags & _URG)
        self.ack = bool(flags & _ACK)
        self.psh = bool(flags & _PSH)
        self.rst = bool(flags & _RST)
        self.syn = bool(flags & _SYN)
        self.fin = bool(flags & _FIN)

        self.win = parser.u16()
        self.cksum = parser.u16()
        self.uptr = parser.u16()

        if self.doff < 5:
            raise ParseError(ParseResult.HEADER_TOO_SHORT)

        parser.remove_prefix(self.doff * 4 - self.LENGTH)
        if parser.error():
            raise ParseError(parser.get_error())

    def serialize(self) -> bytes:
        """Encode the header (the checksum field is written as is)."""
        if self.doff < 5:
            raise ValueError("TCP header too short")
        flags = (
            (_URG if self.urg else 0)
            | (_ACK if self.ack else 0)
            | (_PSH if self.psh else 0)
            | (_RST if self.rst else 0)
            | (_SYN if self.syn else 0)
            | (_FIN if self.fin else 0)
        )
        encoded = b"".join(
            (
                unparse_u16(self.sport),
                unparse_u16(self.dport),
                unparse_u32(self.seqno.raw_value),
                unparse_u32(self.ackno.raw_value),
                unparse_u8(self.doff << 4),
                unparse_u8(flags),
                unparse_u16(self.win),
                unparse_u16(self.cksum),
                unparse_u16(self.uptr),
            )
        )
        size = 4 * self.doff
        return encoded[:size].ljust(size, b"\x00")

    def to_string(self) -> str:
        """Multi-line, human-readable dump of every field (numbers in hex)."""
        return (
            f"TCP source port: {self.sport:x}\n"
            f"TCP dest port: {self.dport:x}\n"
            f"TCP seqno: {self.seqno.raw_value:x}\n"
            f"TCP ackno: {self.ackno.raw_value:x}\n"
            f"TCP doff: {self.doff:x}\n"
            f"Flags: urg: {_bool(self.urg)} ack: {_bool(self.ack)} psh: {_bool(self.psh)}"
            f" rst: {_bool(self.rst)} syn: {_bool(self.syn)} fin: {_bool(self.fin)}\n"
            f"TCP winsize: {self.win:x}\n"
            f"TCP cksum: {self.cksum:x}\n"
            f"TCP uptr: {self.uptr:x}\n"
        )

    def summary(self) -> str:
        """One-line summary of flags, sequence numbers and window."""
        flags = (
            ("S" if self.syn else "")
            + ("A" if self.ack else "")
            + ("R" if self.rst else "")
            + ("F" if self.fin else "")
        )
        return f"Header(flags={flags},seqno={self.seqno},ack={self.ackno},win={self.win})"

    def __eq__(self, other) -> bool:
        """Compare all fields except the ports and the checksum."""
        if not isinstance(other, TCPHeader):
            return NotImplemented
        return (
            self.seqno == other.seqno
            and self.ackno == other.ackno
            and self.doff == other.doff
            and self.urg == other.urg
            and self.ack == other.ack
            and self.psh == other.psh
            and self.rst == other.rst
            and self.syn == other.syn
            and self.fin == other.fin
            and self.win == other.win
            and self.uptr == other.uptr
        )

    __hash__ = None  # type: ignore[assignment]
"""A TCP segment: header plus payload."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from spongetcp.buffer import Buffer, BufferList
from spongetcp.parser import NetParser, ParseError, ParseResult
from spongetcp.tcp_header import TCPHeader
from spongetcp.util import InternetChecksum


@dataclass
class TCPSegment:
    """A TCP header and its payload (held as a Buffer)."""

    header: TCPHeader = field(default_factory=TCPHeader)
    payload: Buffer = field(default_factory=Buffer)

    def __post_init__(self) -> None:
        if not isinstance(self.payload, Buffer):
            self.payload = Buffer(self.payload)

    def parse(self, data, datagram_layer_checksum: int = 0) -> None:
        """Parse the segment from ``data``, verifying the checksum.

        ``datagram_layer_checksum`` is the pseudo-header sum from the layer below.
        Raises ParseError on a bad checksum or malformed header.
        """
        buffer = Buffer(data) if isinstance(data, Buffer) else Buffer(bytes(data))
        check = InternetChecksum(datagram_layer_checksum)
        check.add(buffer)
        if check.value():
            raise ParseError(ParseResult.BAD_CHECKSUM)

        parser = NetParser(buffer)
        try:
            self.header.parse(parser)
        except ParseError as exc:
            if parser.error():
                raise ParseError(parser.get_error()) from exc
            raise
        self.payload = parser.buffer()

    def serialize(self, datagram_layer_checksum: int = 0) -> BufferList:
        """Encode the segment, computing the checksum over header and payload."""
        header_out = replace(self.header, cksum=0)
        check = InternetChecksum(datagram_layer_checksum)
        check.add(header_out.serialize())
        check.add(self.payload)
        header_out.cksum = check.value()

        result = BufferList(header_out.serialize())
        result.append(self.payload)
        return result

    def length_in_sequence_space(self) -> int:
        """Payload length, plus one each for SYN and FIN."""
        return len(self.payload) + int(self.header.syn) + int(self.header.fin)
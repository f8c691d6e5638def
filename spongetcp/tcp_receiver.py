"""The receiving half of a TCP endpoint."""

from __future__ import annotations

import logging
from typing import Optional

from spongetcp.byte_stream import ByteStream
from spongetcp.stream_reassembler import StreamReassembler
from spongetcp.tcp_segment import TCPSegment
from spongetcp.wrapping_integers import WrappingInt32, unwrap

_log = logging.getLogger(__name__)


class TCPReceiver:
    """Reassembles inbound segments into a ByteStream and computes ackno and window."""

    def __init__(self, capacity: int) -> None:
        self._reassembler = StreamReassembler(capacity)
        self._capacity = capacity
        self._isn: Optional[WrappingInt32] = None

    def segment_received(self, seg: TCPSegment) -> None:
        """Handle an inbound segment."""
        header = seg.header
        _log.debug("segment received: %s", header.summary())
        if header.syn:
            self._isn = header.seqno
        if self._isn is None or self.stream_out().eof():
            return
        if len(seg.payload):
            abs_seqno = unwrap(
                header.seqno + (1 if header.syn else 0),
                self._isn,
                self.stream_out().bytes_written(),
            )
            self._reassembler.push_substring(bytes(seg.payload), abs_seqno - 1, header.fin)
        if header.fin and self._reassembler.empty():
            self.stream_out().end_input()

    def ackno(self) -> Optional[WrappingInt32]:
        """Sequence number of the first byte not yet received, or None before SYN."""
        if self._isn is None:
            return None
        stream = self.stream_out()
        return self._isn + stream.bytes_written() + (2 if stream.input_ended() else 1)

    def window_size(self) -> int:
        """Capacity minus the bytes assembled but not yet read."""
        return self._capacity - self.stream_out().buffer_size()

    def unassembled_bytes(self) -> int:
        return self._reassembler.unassembled_bytes()

    def stream_out(self) -> ByteStream:
        return self._reassembler.stream_out()
"""The sending half of a TCP endpoint."""

from __future__ import annotations

import logging
import secrets
from collections import deque
from dataclasses import replace
from typing import Optional

from spongetcp.buffer import Buffer
from spongetcp.byte_stream import ByteStream
from spongetcp.tcp_config import TCPConfig
from spongetcp.tcp_segment import TCPSegment
from spongetcp.wrapping_integers import WrappingInt32, unwrap, wrap

_log = logging.getLogger(__name__)

_U64_MASK = (1 << 64) - 1


def _copy_segment(seg: TCPSegment) -> TCPSegment:
    return TCPSegment(replace(seg.header), Buffer(seg.payload))


class TCPSender:
    """Splits an outbound ByteStream into segments and retransmits them as needed.

    Tracks the segments in flight and runs the retransmission timer with
    exponential backoff.
    """

    def __init__(
        self,
        capacity: int = TCPConfig.DEFAULT_CAPACITY,
        retx_timeout: int = TCPConfig.TIMEOUT_DFLT,
        fixed_isn: Optional[WrappingInt32] = None,
    ) -> None:
        self._isn = fixed_isn if fixed_isn is not None else WrappingInt32(secrets.randbits(32))
        self._segments_out: deque[TCPSegment] = deque()
        self._outstanding: deque[TCPSegment] = deque()
        self._bytes_in_flight = 0
        self._initial_retransmission_timeout = retx_timeout
        self._rto = retx_timeout
        self._stream = ByteStream(capacity)
        self._next_seqno = 0
        self._initial_window_zero = False
        self._window_size = 1
        self._left_window_size = 1
        self._consecutive_retransmissions = 0
        self._last_tick = 0
        self._syn_sent = False
        self._fin_sent = False

    def stream_in(self) -> ByteStream:
        """The outgoing stream that the application writes into."""
        return self._stream

    def _nothing_to_send(self) -> bool:
        stream = self._stream
        return (
            (self._syn_sent and stream.buffer_empty() and not stream.eof())
            or self._fin_sent
            or self._left_window_size == 0
            or self._bytes_in_flight > self._window_size
        )

    def fill_window(self) -> None:
        """Send segments to fill as much of the window as possible."""
        while not self._nothing_to_send():
            seg = TCPSegment()
            if not self._syn_sent:
                seg.header.syn = True
                self._syn_sent = True

            exceeds_window = self._left_window_size > TCPConfig.MAX_PAYLOAD_SIZE
            seg.payload = Buffer(
                self._stream.read(min(self._left_window_size, TCPConfig.MAX_PAYLOAD_SIZE))
            )
            self._left_window_size = (
                self._left_window_size - seg.length_in_sequence_space()
            ) & _U64_MASK

            if self._stream.eof() and self._left_window_size > 0:
                seg.header.fin = True
                self._left_window_size -= 1
                self._fin_sent = True

            length = seg.length_in_sequence_space()
            if length == 0:
                return

            self._bytes_in_flight += length
            seg.header.seqno = self.next_seqno()
            self._outstanding.append(seg)
            self._segments_out.append(_copy_segment(seg))
            self._next_seqno += length
            _log.debug(
                "sent %s (%d payload bytes); %d bytes in flight",
                seg.header.summary(),
                len(seg.payload),
                self._bytes_in_flight,
            )

            if not exceeds_window:
                return

    def ack_received(self, ackno: WrappingInt32, window_size: int) -> None:
        """Process the receiver's acknowledgment number and advertised window."""
        absolute_ackno = unwrap(ackno, self._isn, self._next_seqno)
        _log.debug("ack received: %d, window %d", absolute_ackno, window_size)
        if absolute_ackno > self._next_seqno:
            return

        # A zero window is treated as a window of one so that probes keep flowing.
        self._initial_window_zero = window_size == 0
        self._window_size = 1 if self._initial_window_zero else window_size
        self._left_window_size = self._window_size

        self._rto = self._initial_retransmission_timeout
        self._consecutive_retransmissions = 0

        still_outstanding: deque[TCPSegment] = deque()
        for seg in self._outstanding:
            start = unwrap(seg.header.seqno, self._isn, self._next_seqno)
            if start + seg.length_in_sequence_space() <= absolute_ackno:
                self._bytes_in_flight -= seg.length_in_sequence_space()
                self._last_tick = 0
            else:
                still_outstanding.append(seg)
        self._outstanding = still_outstanding

    def tick(self, ms_since_last_tick: int) -> None:
        """Advance the retransmission timer; retransmit the oldest segment on expiry."""
        if not self._outstanding:
            return
        self._last_tick += ms_since_last_tick
        if self._last_tick < self._rto:
            return

        self._segments_out.append(_copy_segment(self._outstanding[0]))
        _log.debug("timer expired after %d ms; retransmitting", self._last_tick)

        if self._window_size != 0 and not self._initial_window_zero:
            self._consecutive_retransmissions += 1
            self._rto *= 2

        self._last_tick = 0

    def send_empty_segment(self) -> None:
        """Queue a segment with no payload and no flags (e.g. for a bare ACK)."""
        seg = TCPSegment()
        seg.header.seqno = self.next_seqno()
        self._segments_out.append(seg)

    def bytes_in_flight(self) -> int:
        """Sequence numbers sent but not yet acknowledged (SYN and FIN count one each)."""
        return self._bytes_in_flight

    def consecutive_retransmissions(self) -> int:
        return self._consecutive_retransmissions

    def segments_out(self) -> deque[TCPSegment]:
        """Queue of segments waiting to be sent by the connection."""
        return self._segments_out

    def next_seqno_absolute(self) -> int:
        return self._next_seqno

    def next_seqno(self) -> WrappingInt32:
        return wrap(self._next_seqno, self._isn)
"""Reassembly of possibly out-of-order, overlapping substrings into a byte stream."""

from __future__ import annotations

from spongetcp.byte_stream import ByteStream


class StreamReassembler:
    """Assembles indexed substrings of a stream into an in-order ByteStream.

    ``capacity`` bounds the bytes held both in the output stream and among
    the substrings waiting to be assembled; bytes beyond it are discarded.
    """

    def __init__(self, capacity: int) -> None:
        self._output = ByteStream(capacity)
        self._capacity = capacity
        self._last_applied = -1
        self._unassembled: dict[int, int] = {}
        self._reach_eof = False

    def push_substring(self, data, index: int, eof: bool) -> None:
        """Accept ``data`` starting at stream ``index``; write what is now contiguous.

        ``eof`` marks the last byte of ``data`` as the last byte of the stream.
        """
        data = bytes(data)
        if eof:
            self._reach_eof = True

        last = self._last_applied
        target = last
        apply_start = 0
        pending = self._unassembled
        for i in range(max(0, last + 1 - index), len(data)):
            stream_index = index + i
            pending.pop(stream_index, None)
            if len(pending) + self._output.buffer_size() + target - last == self._capacity:
                highest = max(pending, default=-1)
                if highest > stream_index:
                    del pending[highest]
                    self._reach_eof = False
                else:
                    break
            if stream_index == target + 1:
                if target == last:
                    apply_start = i
                target += 1
            else:
                pending[stream_index] = data[i]

        direct = target - last
        tail = bytearray()
        next_index = target + 1
        while next_index <= self._capacity and next_index in pending:
            tail.append(pending.pop(next_index))
            next_index += 1
        target += len(tail)

        if target > last:
            self._output.write(data[apply_start : apply_start + direct] + bytes(tail))
            self._last_applied = target

        if not pending and self._reach_eof:
            self._output.end_input()

    def stream_out(self) -> ByteStream:
        """The reassembled in-order stream."""
        return self._output

    def unassembled_bytes(self) -> int:
        """Number of bytes stored but not yet assembled."""
        return len(self._unassembled)

    def empty(self) -> bool:
        """True when nothing is buffered, assembled or not."""
        return self._output.buffer_empty() and not self._unassembled
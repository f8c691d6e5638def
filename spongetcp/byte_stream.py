"""A flow-controlled, in-memory, in-order byte stream."""

from __future__ import annotations


def _nonnegative(length: int) -> int:
    if length < 0:
        raise ValueError("length must not be negative")
    return length


class ByteStream:
    """Bytes are written on the input side and read from the output side.

    The stream holds at most ``capacity`` bytes at a time; the writer can end
    the input, after which the reader sees end-of-file once the buffer drains.
    """

    def __init__(self, capacity: int) -> None:
        self._capacity = _nonnegative(capacity)
        self._buffer = bytearray()
        self._bytes_written = 0
        self._bytes_read = 0
        self._input_ended = False
        self._error = False

    # writer side

    def write(self, data) -> int:
        """Write as much of ``data`` as fits; return the number of bytes accepted."""
        accepted = memoryview(data).cast("B")[: self.remaining_capacity()]
        self._buffer += accepted
        self._bytes_written += len(accepted)
        return len(accepted)

    def remaining_capacity(self) -> int:
        """Number of additional bytes the stream has room for."""
        return self._capacity - len(self._buffer)

    def end_input(self) -> None:
        """Signal that no more bytes will be written."""
        self._input_ended = True

    def set_error(self) -> None:
        """Mark the stream as having suffered an error."""
        self._error = True

    # reader side

    def peek_output(self, length: int) -> bytes:
        """Copy up to ``length`` bytes from the front of the buffer."""
        return bytes(self._buffer[: _nonnegative(length)])

    def pop_output(self, length: int) -> None:
        """Discard up to ``length`` bytes from the front of the buffer."""
        count = min(_nonnegative(length), len(self._buffer))
        del self._buffer[:count]
        self._bytes_read += count

    def read(self, length: int) -> bytes:
        """Copy and then remove up to ``length`` bytes."""
        data = self.peek_output(length)
        self.pop_output(len(data))
        return data

    def input_ended(self) -> bool:
        return self._input_ended

    def error(self) -> bool:
        return self._error

    def buffer_size(self) -> int:
        return len(self._buffer)

    def buffer_empty(self) -> bool:
        return not self._buffer

    def eof(self) -> bool:
        """True once input has ended and every byte has been read."""
        return self._input_ended and not self._buffer

    # accounting

    def bytes_written(self) -> int:
        return self._bytes_written

    def bytes_read(self) -> int:
        return self._bytes_read

    def __repr__(self) -> str:
        return (
            f"ByteStream(capacity={self._capacity}, buffered={len(self._buffer)}, "
            f"written={self._bytes_written}, read={self._bytes_read}, "
            f"input_ended={self._input_ended})"
        )
"""A reference-counted handle to an operating-system file descriptor."""

from __future__ import annotations

import logging
import os
from typing import Optional

from spongetcp.buffer import BufferViewList

_log = logging.getLogger(__name__)

_BUFFER_SIZE = 1024 * 1024


class _FDWrapper:
    """The shared state behind one kernel file descriptor; closes it when collected."""

    __slots__ = ("fd", "eof", "closed", "read_count", "write_count")

    def __init__(self, fd: int) -> None:
        if fd < 0:
            raise ValueError(f"invalid fd number:{fd}")
        self.fd = fd
        self.eof = False
        self.closed = False
        self.read_count = 0
        self.write_count = 0

    def close(self) -> None:
        os.close(self.fd)
        self.eof = self.closed = True

    def __del__(self) -> None:
        if getattr(self, "closed", True):
            return
        try:
            self.close()
        except OSError as exc:
            _log.warning("error closing file descriptor %d: %s", self.fd, exc)


def _as_view_list(data) -> BufferViewList:
    if isinstance(data, BufferViewList):
        return BufferViewList(b"".join(data.views()))
    return BufferViewList(data)


class FileDescriptor:
    """A handle on a file descriptor, shared by its duplicates.

    Tracks end-of-file and the number of reads and writes; the descriptor
    is closed explicitly, on leaving a ``with`` block, or when the last
    handle is collected.
    """

    def __init__(self, fd: int) -> None:
        self._internal = _FDWrapper(fd)

    def duplicate(self) -> FileDescriptor:
        """Another handle on the same descriptor, sharing its state."""
        dup = FileDescriptor.__new__(FileDescriptor)
        dup._internal = self._internal
        return dup

    def _register_read(self) -> None:
        self._internal.read_count += 1

    def _register_write(self) -> None:
        self._internal.write_count += 1

    def read(self, limit: Optional[int] = None) -> bytes:
        """Read up to ``limit`` bytes (at most 1 MiB at once); fewer may be returned."""
        size = _BUFFER_SIZE if limit is None else min(_BUFFER_SIZE, limit)
        if size < 0:
            raise ValueError("limit must not be negative")
        data = os.read(self.fd_num(), size)
        if size > 0 and not data:
            self._internal.eof = True
        if len(data) > size:
            raise RuntimeError("read() read more than requested")
        self._register_read()
        return data

    def write(self, data, write_all: bool = True) -> int:
        """Write ``data``; with ``write_all``, keep going until all of it is written.

        Returns the number of bytes written.
        """
        buffer = _as_view_list(data)
        total = 0
        while True:
            written = os.writev(self.fd_num(), buffer.views())
            if written == 0 and len(buffer) != 0:
                raise RuntimeError("write returned 0 given non-empty input buffer")
            if written > len(buffer):
                raise RuntimeError("write wrote more than length of input buffer")
            self._register_write()
            buffer.remove_prefix(written)
            total += written
            if not (write_all and len(buffer)):
                return total

    def close(self) -> None:
        """Close the underlying descriptor (for every duplicate)."""
        self._internal.close()

    def set_blocking(self, blocking_state: bool) -> None:
        os.set_blocking(self.fd_num(), blocking_state)

    def fd_num(self) -> int:
        return self._internal.fd

    def eof(self) -> bool:
        return self._internal.eof

    def closed(self) -> bool:
        return self._internal.closed

    def read_count(self) -> int:
        return self._internal.read_count

    def write_count(self) -> int:
        return self._internal.write_count

    def __enter__(self) -> FileDescriptor:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if not self.closed():
            self.close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(fd={self.fd_num()}, closed={self.closed()})"
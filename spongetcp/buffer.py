"""Read-only byte strings that can cheaply discard bytes from the front."""

from __future__ import annotations

from collections import deque
from typing import Iterable


class Buffer:
    """An immutable byte string with a movable start.

    Copies made with ``Buffer(other)`` share the underlying bytes but keep
    their own starting offset.
    """

    __slots__ = ("_storage", "_offset")

    def __init__(self, data=b"") -> None:
        if isinstance(data, Buffer):
            self._storage = data._storage
            self._offset = data._offset
        else:
            self._storage = bytes(data)
            self._offset = 0

    def _view(self) -> memoryview:
        return memoryview(self._storage)[self._offset :]

    def __bytes__(self) -> bytes:
        return self._storage[self._offset :]

    def __len__(self) -> int:
        return len(self._storage) - self._offset

    def __getitem__(self, index):
        if isinstance(index, slice):
            return bytes(self)[index]
        length = len(self)
        if index < 0:
            index += length
        if not 0 <= index < length:
            raise IndexError("Buffer index out of range")
        return self._storage[self._offset + index]

    def __eq__(self, other) -> bool:
        if isinstance(other, Buffer):
            return self._view() == other._view()
        if isinstance(other, (bytes, bytearray, memoryview)):
            return self._view() == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Buffer({bytes(self)!r})"

    def copy(self) -> bytes:
        """Return the contents as a new bytes object."""
        return bytes(self)

    def remove_prefix(self, n: int) -> None:
        """Discard the first ``n`` bytes."""
        if n < 0 or n > len(self):
            raise IndexError("Buffer.remove_prefix")
        self._offset += n
        if self._offset == len(self._storage):
            self._storage = b""
            self._offset = 0


class BufferList:
    """A sequence of Buffers treated as one discontiguous byte string."""

    def __init__(self, data=None) -> None:
        self._buffers: deque[Buffer] = deque()
        if data is not None:
            self.append(data)

    def buffers(self) -> tuple[Buffer, ...]:
        """The component Buffers, in order."""
        return tuple(Buffer(buf) for buf in self._buffers)

    def append(self, other) -> None:
        """Append a BufferList, Buffer or bytes-like object."""
        if isinstance(other, BufferList):
            self._buffers.extend(Buffer(buf) for buf in other._buffers)
        else:
            self._buffers.append(Buffer(other))

    def to_buffer(self) -> Buffer:
        """Convert to a single Buffer; only possible with at most one component."""
        if not self._buffers:
            return Buffer()
        if len(self._buffers) == 1:
            return Buffer(self._buffers[0])
        raise ValueError(
            "BufferList: please use concatenate() to combine a multi-Buffer BufferList into one Buffer"
        )

    def remove_prefix(self, n: int) -> None:
        """Discard the first ``n`` bytes across component Buffers."""
        while n > 0:
            if not self._buffers:
                raise IndexError("BufferList.remove_prefix")
            front = self._buffers[0]
            if n < len(front):
                front.remove_prefix(n)
                n = 0
            else:
                n -= len(front)
                self._buffers.popleft()

    def __len__(self) -> int:
        return sum(len(buf) for buf in self._buffers)

    def concatenate(self) -> bytes:
        """Join all components into one bytes object."""
        return b"".join(bytes(buf) for buf in self._buffers)

    def __repr__(self) -> str:
        return f"BufferList({[bytes(buf) for buf in self._buffers]!r})"


class BufferViewList:
    """A non-owning view of a discontiguous byte string."""

    def __init__(self, data) -> None:
        self._views: deque[memoryview] = deque()
        if isinstance(data, BufferList):
            self._views.extend(buf._view() for buf in data._buffers)
        elif isinstance(data, Buffer):
            self._views.append(data._view())
        elif isinstance(data, str):
            self._views.append(memoryview(data.encode()))
        else:
            self._views.append(memoryview(data).cast("B"))

    def remove_prefix(self, n: int) -> None:
        """Discard the first ``n`` bytes across views."""
        while n > 0:
            if not self._views:
                raise IndexError("BufferViewList.remove_prefix")
            front = self._views[0]
            if n < len(front):
                self._views[0] = front[n:]
                n = 0
            else:
                n -= len(front)
                self._views.popleft()

    def __len__(self) -> int:
        return sum(len(view) for view in self._views)

    def views(self) -> tuple[memoryview, ...]:
        """The component views, suitable for scatter/gather writes."""
        return tuple(self._views)

    def _iter_bytes(self) -> Iterable[bytes]:
        return (bytes(view) for view in self._views)
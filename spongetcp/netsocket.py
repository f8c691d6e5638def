"""Network sockets built on FileDescriptor: UDP, TCP and Unix-domain streams."""

from __future__ import annotations

import socket
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

from spongetcp.address import Address
from spongetcp.buffer import BufferViewList
from spongetcp.file_descriptor import FileDescriptor

_MSG_TRUNC = getattr(socket, "MSG_TRUNC", 0)


def _as_view_list(payload) -> BufferViewList:
    if isinstance(payload, BufferViewList):
        return payload
    return BufferViewList(payload)


class Socket(FileDescriptor):
    """A socket owned through a FileDescriptor.

    With no ``fd`` a new socket of ``domain`` and ``sock_type`` is created;
    otherwise ``fd`` is taken over and checked to be of that domain and type.
    """

    def __init__(self, domain: int, sock_type: int, fd: Optional[FileDescriptor] = None) -> None:
        if fd is None:
            super().__init__(socket.socket(domain, sock_type).detach())
            return
        self._internal = fd.duplicate()._internal
        with self._borrowed() as sock:
            if sock.family != domain:
                raise RuntimeError("socket domain mismatch")
            if sock.type != sock_type:
                raise RuntimeError("socket type mismatch")

    @contextmanager
    def _borrowed(self) -> Iterator[socket.socket]:
        sock = socket.socket(fileno=self.fd_num())
        try:
            yield sock
        finally:
            sock.detach()

    def bind(self, address: Address) -> None:
        """Bind to a local address, usually before listening."""
        with self._borrowed() as sock:
            sock.bind(address.sockaddr())

    def connect(self, address: Address) -> None:
        """Connect to a peer address."""
        with self._borrowed() as sock:
            sock.connect(address.sockaddr())

    def shutdown(self, how: int) -> None:
        """Shut down reading, writing or both (SHUT_RD, SHUT_WR, SHUT_RDWR)."""
        with self._borrowed() as sock:
            sock.shutdown(how)
        if how == socket.SHUT_RD:
            self._register_read()
        elif how == socket.SHUT_WR:
            self._register_write()
        elif how == socket.SHUT_RDWR:
            self._register_read()
            self._register_write()
        else:
            raise ValueError("Socket.shutdown() called with invalid `how`")

    def local_address(self) -> Address:
        with self._borrowed() as sock:
            return Address.from_sockaddr(sock.getsockname())

    def peer_address(self) -> Address:
        with self._borrowed() as sock:
            return Address.from_sockaddr(sock.getpeername())

    def set_reuseaddr(self) -> None:
        """Allow the local address to be reused sooner."""
        with self._borrowed() as sock:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

    def _sendmsg(self, payload, destination: Optional[Address]) -> None:
        views = _as_view_list(payload)
        with self._borrowed() as sock:
            if destination is None:
                sent = sock.sendmsg(views.views())
            else:
                sent = sock.sendmsg(views.views(), [], 0, destination.sockaddr())
        if sent != len(views):
            raise RuntimeError("datagram payload too big for sendmsg()")
        self._register_write()


@dataclass
class ReceivedDatagram:
    """A received datagram and the address it came from."""

    source_address: Address
    payload: bytes


class UDPSocket(Socket):
    """An IPv4 UDP socket."""

    def __init__(self) -> None:
        super().__init__(socket.AF_INET, socket.SOCK_DGRAM)

    @classmethod
    def _from_fd(cls, fd: FileDescriptor) -> UDPSocket:
        obj = cls.__new__(cls)
        Socket.__init__(obj, socket.AF_INET, socket.SOCK_DGRAM, fd)
        return obj

    def recv(self, mtu: int = 65536) -> ReceivedDatagram:
        """Receive one datagram; raises RuntimeError if it is larger than ``mtu``."""
        buffer = bytearray(mtu)
        with self._borrowed() as sock:
            length, source = sock.recvfrom_into(buffer, mtu, _MSG_TRUNC)
        if length > mtu:
            raise RuntimeError("recvfrom (oversized datagram)")
        self._register_read()
        return ReceivedDatagram(Address.from_sockaddr(source), bytes(buffer[:length]))

    def sendto(self, destination: Address, payload) -> None:
        """Send a datagram to ``destination``."""
        self._sendmsg(payload, destination)

    def send(self, payload) -> None:
        """Send a datagram to the connected peer."""
        self._sendmsg(payload, None)


class TCPSocket(Socket):
    """An IPv4 TCP socket."""

    def __init__(self) -> None:
        super().__init__(socket.AF_INET, socket.SOCK_STREAM)

    @classmethod
    def _from_fd(cls, fd: FileDescriptor) -> TCPSocket:
        obj = cls.__new__(cls)
        Socket.__init__(obj, socket.AF_INET, socket.SOCK_STREAM, fd)
        return obj

    def listen(self, backlog: int = 16) -> None:
        """Mark the socket as accepting connections."""
        with self._borrowed() as sock:
            sock.listen(backlog)

    def accept(self) -> TCPSocket:
        """Wait for and return a new connection."""
        self._register_read()
        with self._borrowed() as sock:
            conn, _ = sock.accept()
        return TCPSocket._from_fd(FileDescriptor(conn.detach()))


class LocalStreamSocket(Socket):
    """A Unix-domain stream socket taken over from an existing descriptor."""

    def __init__(self, fd: FileDescriptor) -> None:
        super().__init__(socket.AF_UNIX, socket.SOCK_STREAM, fd)
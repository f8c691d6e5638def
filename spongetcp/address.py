"""IPv4 socket addresses and name resolution."""

from __future__ import annotations

import ipaddress
import socket

_AI_ALL = getattr(socket, "AI_ALL", 0)
_NUMERIC_NAMEINFO = socket.NI_NUMERICHOST | socket.NI_NUMERICSERV


class AddressError(OSError):
    """Raised when an address cannot be resolved or converted."""


class Address:
    """An immutable socket address, by default resolved as IPv4.

    ``Address(host, port)`` with an integer port takes a numeric dotted-quad
    host and does no lookups; ``Address(hostname, service)`` with a string
    service resolves both names.
    """

    __slots__ = ("_family", "_sockaddr")

    def __init__(self, host: str, service: int | str = 0) -> None:
        if isinstance(service, int):
            if not 0 <= service <= 0xFFFF:
                raise ValueError(f"port out of range: {service}")
            flags = socket.AI_NUMERICHOST | socket.AI_NUMERICSERV
        else:
            flags = _AI_ALL
        try:
            results = socket.getaddrinfo(host, service, socket.AF_INET, 0, 0, flags)
        except socket.gaierror as exc:
            raise AddressError(f"getaddrinfo({host}, {service}): {exc.strerror}") from exc
        if not results:
            raise AddressError("getaddrinfo returned successfully but with no results")
        family, _, _, _, sockaddr = results[0]
        self._family = family
        self._sockaddr = tuple(sockaddr)

    @classmethod
    def from_sockaddr(cls, sockaddr: tuple) -> Address:
        """Build from a socket-module address tuple (IPv4 or IPv6)."""
        sockaddr = tuple(sockaddr)
        if len(sockaddr) == 2:
            family = socket.AF_INET
        elif len(sockaddr) == 4:
            family = socket.AF_INET6
        else:
            raise AddressError("invalid sockaddr size")
        address = cls.__new__(cls)
        address._family = family
        address._sockaddr = sockaddr
        return address

    @classmethod
    def from_ipv4_numeric(cls, ip_address: int) -> Address:
        """Build an IPv4 address (port 0) from its 32-bit numeric value."""
        return cls.from_sockaddr((str(ipaddress.IPv4Address(ip_address)), 0))

    def ip_port(self) -> tuple[str, int]:
        """Numeric host string and port number."""
        try:
            host, port = socket.getnameinfo(self._sockaddr, _NUMERIC_NAMEINFO)
        except socket.gaierror as exc:
            raise AddressError(f"getnameinfo: {exc.strerror}") from exc
        return host, int(port)

    def ip(self) -> str:
        return self.ip_port()[0]

    def port(self) -> int:
        return self.ip_port()[1]

    def ipv4_numeric(self) -> int:
        """The IPv4 address as an integer in host byte order."""
        if self._family != socket.AF_INET:
            raise AddressError("ipv4_numeric called on non-IPV4 address")
        return int(ipaddress.IPv4Address(self._sockaddr[0]))

    def sockaddr(self) -> tuple:
        """The address as a socket-module tuple."""
        return self._sockaddr

    def __str__(self) -> str:
        host, port = self.ip_port()
        return f"{host}:{port}"

    def __repr__(self) -> str:
        return f"Address({self._sockaddr!r})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Address):
            return NotImplemented
        return self._family == other._family and self._sockaddr == other._sockaddr

    def __hash__(self) -> int:
        return hash((self._family, self._sockaddr))
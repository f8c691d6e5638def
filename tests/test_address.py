import pytest

from spongetcp.address import Address, AddressError


def test_numeric_address_ip_and_port():
    address = Address("1.2.3.4", 80)
    assert address.ip_port() == ("1.2.3.4", 80)
    assert address.ip() == "1.2.3.4"
    assert address.port() == 80
    assert str(address) == "1.2.3.4:80"


def test_default_port_is_zero():
    assert Address("10.0.0.1").port() == 0


def test_string_service_is_resolved():
    address = Address("127.0.0.1", "80")
    assert address.ip() == "127.0.0.1"
    assert address.port() == 80


def test_ipv4_numeric_value():
    assert Address("1.2.3.4", 0).ipv4_numeric() == 0x01020304


def test_from_ipv4_numeric_gives_dotted_quad():
    assert Address.from_ipv4_numeric(0x7F000001).ip() == "127.0.0.1"


@pytest.mark.parametrize("value", [0, 1, 0x0A000001, 0xC0A80001, 0xFFFFFFFF])
def test_numeric_round_trip(value):
    assert Address.from_ipv4_numeric(value).ipv4_numeric() == value


def test_equality_and_hash():
    first = Address("1.2.3.4", 80)
    second = Address.from_sockaddr(("1.2.3.4", 80))
    assert first == second
    assert hash(first) == hash(second)
    assert (first == Address("1.2.3.4", 81)) is False
    assert first.sockaddr() == ("1.2.3.4", 80)


def test_bad_numeric_host_raises():
    with pytest.raises(AddressError):
        Address("not-an-address", 0)


def test_port_out_of_range_raises():
    with pytest.raises(ValueError):
        Address("1.2.3.4", 70000)


def test_ipv6_address_has_no_ipv4_numeric():
    address = Address.from_sockaddr(("::1", 0, 0, 0))
    with pytest.raises(AddressError):
        address.ipv4_numeric()


def test_invalid_sockaddr_raises():
    with pytest.raises(AddressError):
        Address.from_sockaddr(("1.2.3.4",))
import pytest

from spongetcp.buffer import Buffer
from spongetcp.parser import (
    NetParser,
    ParseError,
    ParseResult,
    as_string,
    unparse_u8,
    unparse_u16,
    unparse_u32,
)


def test_unparse_is_big_endian():
    assert unparse_u32(0x01020304) == b"\x01\x02\x03\x04"
    assert unparse_u16(0xABCD) == b"\xab\xcd"
    assert unparse_u8(0x7F) == b"\x7f"


def test_unparse_truncates_to_width():
    assert unparse_u16(0x12345) == unparse_u16(0x2345)
    assert len(unparse_u8(0x1FF)) == 1


@pytest.mark.parametrize(
    "values", [(0, 0, 0), (0xFFFFFFFF, 0xFFFF, 0xFF), (1 << 31, 443, 5), (123456789, 8080, 200)]
)
def test_round_trip(values):
    a, b, c = values
    parser = NetParser(unparse_u32(a) + unparse_u16(b) + unparse_u8(c))
    assert parser.u32() == a
    assert parser.u16() == b
    assert parser.u8() == c
    assert not parser.error()
    assert len(parser.buffer()) == 0


def test_parser_accepts_buffer():
    buf = Buffer(b"\x00" + unparse_u16(77))
    buf.remove_prefix(1)
    assert NetParser(buf).u16() == 77


def test_short_packet_sets_sticky_error():
    parser = NetParser(b"\x01")
    assert parser.u16() == 0
    assert parser.error()
    assert parser.get_error() is ParseResult.PACKET_TOO_SHORT
    assert parser.u8() == 0
    assert len(parser.buffer()) == 1


def test_remove_prefix():
    parser = NetParser(b"skipdata")
    parser.remove_prefix(4)
    assert parser.buffer() == b"data"
    parser.remove_prefix(10)
    assert parser.get_error() is ParseResult.PACKET_TOO_SHORT
    assert parser.buffer() == b"data"


def test_buffer_is_a_copy():
    parser = NetParser(unparse_u16(1) + unparse_u16(2))
    snapshot = parser.buffer()
    parser.u16()
    assert snapshot == unparse_u16(1) + unparse_u16(2)
    assert parser.buffer() == unparse_u16(2)


def test_set_error():
    parser = NetParser(b"abcd")
    parser.set_error(ParseResult.BAD_CHECKSUM)
    assert parser.error()
    assert parser.u8() == 0


@pytest.mark.parametrize(
    "result, name",
    [
        (ParseResult.NO_ERROR, "NoError"),
        (ParseResult.BAD_CHECKSUM, "BadChecksum"),
        (ParseResult.PACKET_TOO_SHORT, "PacketTooShort"),
        (ParseResult.WRONG_IP_VERSION, "WrongIPVersion"),
        (ParseResult.HEADER_TOO_SHORT, "HeaderTooShort"),
        (ParseResult.TRUNCATED_PACKET, "TruncatedPacket"),
    ],
)
def test_as_string(result, name):
    assert as_string(result) == name


def test_parse_error_carries_result():
    err = ParseError(ParseResult.HEADER_TOO_SHORT)
    assert err.result is ParseResult.HEADER_TOO_SHORT
    assert str(err) == "HeaderTooShort"
    assert isinstance(err, Exception)
import pytest

from spongetcp.parser import NetParser, ParseError, ParseResult
from spongetcp.tcp_header import TCPHeader
from spongetcp.wrapping_integers import WrappingInt32


def _sample():
    return TCPHeader(
        sport=1234,
        dport=80,
        seqno=WrappingInt32(0xDEADBEEF),
        ackno=WrappingInt32(42),
        syn=True,
        ack=True,
        win=4096,
        cksum=0xABCD,
        uptr=7,
    )


def _parse(data):
    header = TCPHeader()
    parser = NetParser(data)
    header.parse(parser)
    return header, parser


def test_serialize_length_is_header_length():
    assert len(_sample().serialize()) == TCPHeader.LENGTH


def test_serialize_wire_layout():
    wire = _sample().serialize()
    assert int.from_bytes(wire[0:2], "big") == 1234
    assert int.from_bytes(wire[2:4], "big") == 80
    assert int.from_bytes(wire[4:8], "big") == 0xDEADBEEF
    assert int.from_bytes(wire[8:12], "big") == 42
    assert wire[12] >> 4 == 5
    assert int.from_bytes(wire[14:16], "big") == 4096
    assert int.from_bytes(wire[16:18], "big") == 0xABCD
    assert int.from_bytes(wire[18:20], "big") == 7


@pytest.mark.parametrize(
    "flag, bit",
    [("urg", 0x20), ("ack", 0x10), ("psh", 0x08), ("rst", 0x04), ("syn", 0x02), ("fin", 0x01)],
)
def test_flag_bits(flag, bit):
    header = TCPHeader(**{flag: True})
    assert header.serialize()[13] == bit
    parsed, _ = _parse(header.serialize())
    assert getattr(parsed, flag) is True


def test_round_trip_keeps_all_fields():
    original = _sample()
    parsed, parser = _parse(original.serialize())
    assert parsed == original
    assert parsed.sport == original.sport
    assert parsed.dport == original.dport
    assert parsed.cksum == original.cksum
    assert len(parser.buffer()) == 0


def test_round_trip_leaves_payload_in_parser():
    parsed, parser = _parse(_sample().serialize() + b"payload")
    assert parsed == _sample()
    assert bytes(parser.buffer()) == b"payload"


def test_options_are_skipped():
    header = _sample()
    header.doff = 6
    wire = header.serialize()
    assert len(wire) == 24
    assert wire[20:] == b"\x00\x00\x00\x00"
    parsed, parser = _parse(wire + b"xyz")
    assert parsed.doff == 6
    assert bytes(parser.buffer()) == b"xyz"


def test_options_missing_is_packet_too_short():
    header = _sample()
    header.doff = 6
    wire = header.serialize()[:20]
    with pytest.raises(ParseError) as info:
        _parse(wire)
    assert info.value.result is ParseResult.PACKET_TOO_SHORT


def test_small_doff_is_header_too_short():
    wire = bytearray(_sample().serialize())
    wire[12] = 4 << 4
    with pytest.raises(ParseError) as info:
        _parse(bytes(wire))
    assert info.value.result is ParseResult.HEADER_TOO_SHORT


def test_truncated_data_fails_to_parse():
    with pytest.raises(ParseError) as info:
        _parse(_sample().serialize()[:10])
    assert info.value.result is ParseResult.HEADER_TOO_SHORT


def test_serialize_rejects_short_doff():
    with pytest.raises(ValueError, match="TCP header too short"):
        TCPHeader(doff=4).serialize()


def test_equality_ignores_ports_and_checksum():
    a = _sample()
    b = _sample()
    b.sport, b.dport, b.cksum = 1, 2, 3
    assert a == b
    b.win = 1
    assert a != b


def test_equality_checks_flags():
    a = _sample()
    b = _sample()
    b.fin = True
    assert a != b


def test_summary():
    header = TCPHeader(syn=True, ack=True, seqno=WrappingInt32(5), ackno=WrappingInt32(7), win=100)
    assert header.summary() == "Header(flags=SA,seqno=5,ack=7,win=100)"


def test_summary_all_flags_order():
    header = TCPHeader(syn=True, ack=True, rst=True, fin=True)
    assert header.summary().startswith("Header(flags=SARF,")


def test_to_string_uses_hex_and_words():
    text = _sample().to_string()
    lines = text.splitlines()
    assert lines[0] == f"TCP source port: {1234:x}"
    assert lines[2] == "TCP seqno: deadbeef"
    assert "syn: true" in lines[5]
    assert "fin: false" in lines[5]
    assert text.endswith("\n")
    assert len(lines) == 9
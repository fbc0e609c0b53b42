import pytest

from spongewire.ipv4 import IPv4Header
from spongewire.parsing import ByteReader, ParseError, ParseResult, internet_checksum
from spongewire.tcp import TCPHeader, TCPSegment


def make_segment(payload=b"hello", **header_fields):
    header = TCPHeader(sport=1234, dport=80, seqno=0xDEADBEEF, ackno=42, win=1000, **header_fields)
    return TCPSegment(header=header, payload=payload)


def test_segment_round_trip():
    seg = make_segment(ack=True, psh=True, fin=True)
    wire = seg.serialize()
    parsed = TCPSegment.parse(wire)
    assert parsed.header == seg.header
    assert parsed.header.sport == seg.header.sport
    assert parsed.header.dport == seg.header.dport
    assert parsed.payload == seg.payload
    assert parsed.serialize() == wire


def test_serialized_checksum_verifies():
    wire = make_segment().serialize()
    assert internet_checksum(wire) == 0


def test_corrupted_segment_rejected():
    wire = bytearray(make_segment().serialize())
    wire[-1] ^= 0x01
    with pytest.raises(ParseError) as info:
        TCPSegment.parse(bytes(wire))
    assert info.value.result is ParseResult.BAD_CHECKSUM


def test_pseudo_header_checksum_is_required():
    ip = IPv4Header(src=0x0A000001, dst=0x0A000002)
    seg = make_segment(syn=True)
    ip.len = ip.hlen * 4 + seg.header.doff * 4 + len(seg.payload)
    wire = seg.serialize(ip.pseudo_cksum())
    parsed = TCPSegment.parse(wire, ip.pseudo_cksum())
    assert parsed.payload == seg.payload
    with pytest.raises(ParseError) as info:
        TCPSegment.parse(wire)
    assert info.value.result is ParseResult.BAD_CHECKSUM


def test_header_parse_doff_too_small():
    wire = bytearray(TCPHeader().serialize())
    wire[12] = 4 << 4
    with pytest.raises(ParseError) as info:
        TCPHeader.parse(ByteReader(bytes(wire)))
    assert info.value.result is ParseResult.HEADER_TOO_SHORT


def test_header_parse_too_little_data():
    with pytest.raises(ParseError) as info:
        TCPHeader.parse(ByteReader(bytes(10)))
    assert info.value.result is ParseResult.PACKET_TOO_SHORT


def test_header_parse_doff_beyond_data():
    wire = bytearray(TCPHeader().serialize())
    wire[12] = 8 << 4
    with pytest.raises(ParseError) as info:
        TCPHeader.parse(ByteReader(bytes(wire)))
    assert info.value.result is ParseResult.PACKET_TOO_SHORT


def test_serialize_rejects_short_doff():
    with pytest.raises(ValueError):
        TCPHeader(doff=4).serialize()


def test_options_are_skipped():
    seg = make_segment(payload=b"data", doff=6)
    wire = seg.serialize()
    assert len(wire) == 4 * 6 + len(b"data")
    parsed = TCPSegment.parse(wire)
    assert parsed.header.doff == 6
    assert parsed.payload == b"data"


def test_all_flags_round_trip():
    header = TCPHeader(urg=True, ack=True, psh=True, rst=True, syn=True, fin=True, uptr=9)
    parsed = TCPHeader.parse(ByteReader(header.serialize()))
    assert parsed == header
    assert all((parsed.urg, parsed.ack, parsed.psh, parsed.rst, parsed.syn, parsed.fin))


def test_header_length_matches_constant():
    assert len(TCPHeader().serialize()) == TCPHeader.LENGTH


def test_length_in_sequence_space():
    seg = make_segment(payload=b"abc", syn=True, fin=True)
    assert seg.length_in_sequence_space() == len(b"abc") + 2
    assert make_segment(payload=b"abc").length_in_sequence_space() == len(b"abc")


def test_summary():
    header = TCPHeader(syn=True, ack=True, seqno=1, ackno=2, win=3)
    assert header.summary() == "Header(flags=SA,seqno=1,ack=2,win=3)"


def test_equality_ignores_ports_and_checksum():
    a = TCPHeader(sport=1, dport=2, cksum=3, seqno=10)
    b = TCPHeader(sport=4, dport=5, cksum=6, seqno=10)
    assert a == b
    assert a != TCPHeader(seqno=10, fin=True)


def test_str_lists_fields():
    lines = str(TCPHeader(syn=True)).splitlines()
    assert len(lines) == 9
    assert lines[0].startswith("TCP source port: ")
    assert "syn: true" in lines[5]
    assert "fin: false" in lines[5]
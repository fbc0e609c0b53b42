import pytest

from spongewire.ethernet import (
    ETHERNET_BROADCAST,
    EthernetFrame,
    EthernetHeader,
    format_ethernet_address,
)
from spongewire.parsing import ParseError, ParseResult

LOCAL = bytes.fromhex("020000000001")
OTHER = bytes.fromhex("0200000000aa")


def test_format_broadcast():
    assert format_ethernet_address(ETHERNET_BROADCAST) == "ff:ff:ff:ff:ff:ff"


def test_format_pads_with_zeros():
    assert format_ethernet_address(LOCAL) == "02:00:00:00:00:01"


def test_format_rejects_wrong_length():
    with pytest.raises(ValueError):
        format_ethernet_address(b"\x01\x02")


def test_header_serialize_layout():
    header = EthernetHeader(dst=ETHERNET_BROADCAST, src=LOCAL, type=EthernetHeader.TYPE_ARP)
    wire = header.serialize()
    assert len(wire) == EthernetHeader.LENGTH
    assert wire == ETHERNET_BROADCAST + LOCAL + bytes.fromhex("0806")


def test_header_round_trip():
    header = EthernetHeader(dst=OTHER, src=LOCAL, type=EthernetHeader.TYPE_IPV4)
    frame = EthernetFrame.parse(header.serialize())
    assert frame.header == header
    assert frame.payload == b""


def test_header_too_short():
    with pytest.raises(ParseError) as exc:
        EthernetFrame.parse(bytes(EthernetHeader.LENGTH - 1))
    assert exc.value.result is ParseResult.PACKET_TOO_SHORT


@pytest.mark.parametrize(
    "eth_type, expected",
    [
        (EthernetHeader.TYPE_IPV4, "IPv4"),
        (EthernetHeader.TYPE_ARP, "ARP"),
        (0x1234, "[unknown type 1234!]"),
    ],
)
def test_header_str(eth_type, expected):
    header = EthernetHeader(dst=ETHERNET_BROADCAST, src=LOCAL, type=eth_type)
    assert str(header) == f"dst=ff:ff:ff:ff:ff:ff, src=02:00:00:00:00:01, type={expected}"


def test_header_rejects_bad_address():
    with pytest.raises(ValueError):
        EthernetHeader(dst=b"\x00" * 5, src=LOCAL, type=0)


def test_header_rejects_bad_type():
    with pytest.raises(ValueError):
        EthernetHeader(dst=LOCAL, src=LOCAL, type=0x10000)


def test_frame_round_trip_with_payload():
    frame = EthernetFrame(
        header=EthernetHeader(dst=OTHER, src=LOCAL, type=EthernetHeader.TYPE_IPV4),
        payload=b"some datagram bytes",
    )
    wire = frame.serialize()
    assert len(wire) == EthernetHeader.LENGTH + len(b"some datagram bytes")
    assert EthernetFrame.parse(wire) == frame


def test_default_frame_is_all_zero_header():
    frame = EthernetFrame(header=EthernetHeader())
    assert frame.serialize() == bytes(EthernetHeader.LENGTH)
"""Ethernet addresses, headers and frames."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from spongewire.parsing import ByteReader, ParseError, ParseResult

ETHERNET_ADDRESS_LENGTH = 6
ETHERNET_BROADCAST = b"\xff" * ETHERNET_ADDRESS_LENGTH


def _check_address(address: bytes, field: str) -> bytes:
    address = bytes(address)
    if len(address) != ETHERNET_ADDRESS_LENGTH:
        raise ValueError(f"{field} must be {ETHERNET_ADDRESS_LENGTH} bytes, got {len(address)}")
    return address


def format_ethernet_address(address: bytes) -> str:
    """Return ``address`` as colon-separated lower-case hex, e.g. ``ff:ff:ff:ff:ff:ff``."""
    address = _check_address(address, "Ethernet address")
    return ":".join(f"{byte:02x}" for byte in address)


def _read_address(reader: ByteReader) -> bytes:
    return bytes(reader.u8() for _ in range(ETHERNET_ADDRESS_LENGTH))


@dataclass
class EthernetHeader:
    """Ethernet frame header: destination, source and EtherType."""

    LENGTH: ClassVar[int] = 14
    TYPE_IPV4: ClassVar[int] = 0x0800
    TYPE_ARP: ClassVar[int] = 0x0806

    dst: bytes = bytes(ETHERNET_ADDRESS_LENGTH)
    src: bytes = bytes(ETHERNET_ADDRESS_LENGTH)
    type: int = 0

    def __post_init__(self) -> None:
        self.dst = _check_address(self.dst, "dst")
        self.src = _check_address(self.src, "src")
        if not 0 <= self.type <= 0xFFFF:
            raise ValueError(f"type out of range: {self.type}")

    @classmethod
    def parse(cls, reader: ByteReader) -> EthernetHeader:
        """Read a header from ``reader``; raise ParseError if there is too little data."""
        if len(reader) < cls.LENGTH:
            raise ParseError(ParseResult.PACKET_TOO_SHORT)
        dst = _read_address(reader)
        src = _read_address(reader)
        return cls(dst=dst, src=src, type=reader.u16())

    def serialize(self) -> bytes:
        """Return the header in wire format."""
        return self.dst + self.src + self.type.to_bytes(2, "big")

    def __str__(self) -> str:
        if self.type == self.TYPE_IPV4:
            type_name = "IPv4"
        elif self.type == self.TYPE_ARP:
            type_name = "ARP"
        else:
            type_name = f"[unknown type {self.type:x}!]"
        return (
            f"dst={format_ethernet_address(self.dst)}, "
            f"src={format_ethernet_address(self.src)}, type={type_name}"
        )


@dataclass
class EthernetFrame:
    """An Ethernet header followed by its payload."""

    header: EthernetHeader
    payload: bytes = b""

    @classmethod
    def parse(cls, data: bytes) -> EthernetFrame:
        """Parse a whole frame; raise ParseError on failure."""
        reader = ByteReader(data)
        header = EthernetHeader.parse(reader)
        return cls(header=header, payload=reader.remaining())

    def serialize(self) -> bytes:
        """Return the frame in wire format."""
        return self.header.serialize() + bytes(self.payload)
"""IPv4 headers and datagrams."""

from __future__ import annotations

import dataclasses
import ipaddress
import struct
from dataclasses import dataclass, field
from typing import ClassVar

from spongewire.parsing import ByteReader, ParseError, ParseResult, internet_checksum

_FIXED_FORMAT = struct.Struct(">BBHHHBBHII")

_BOOL_TEXT = {True: "true", False: "false"}


def format_ipv4(address: int) -> str:
    """Return a numeric IPv4 address in dotted-quad form."""
    return str(ipaddress.IPv4Address(address))


@dataclass
class IPv4Header:
    """IPv4 datagram header (options are skipped when parsing, zero-filled when serializing)."""

    LENGTH: ClassVar[int] = 20
    DEFAULT_TTL: ClassVar[int] = 128
    PROTO_TCP: ClassVar[int] = 6

    ver: int = 4
    hlen: int = 5
    tos: int = 0
    len: int = 0
    id: int = 0
    df: bool = True
    mf: bool = False
    offset: int = 0
    ttl: int = 128
    proto: int = 6
    cksum: int = 0
    src: int = 0
    dst: int = 0

    @classmethod
    def parse(cls, reader: ByteReader) -> IPv4Header:
        """Read a header from ``reader``; raise ParseError if it is malformed."""
        original = reader.remaining()
        data_size = len(original)
        if data_size < cls.LENGTH:
            raise ParseError(ParseResult.PACKET_TOO_SHORT)

        first_byte = reader.u8()
        tos = reader.u8()
        length = reader.u16()
        ident = reader.u16()
        fo_val = reader.u16()
        header = cls(
            ver=first_byte >> 4,
            hlen=first_byte & 0x0F,
            tos=tos,
            len=length,
            id=ident,
            df=bool(fo_val & 0x4000),
            mf=bool(fo_val & 0x2000),
            offset=fo_val & 0x1FFF,
            ttl=reader.u8(),
            proto=reader.u8(),
            cksum=reader.u16(),
            src=reader.u32(),
            dst=reader.u32(),
        )

        if data_size < 4 * header.hlen:
            raise ParseError(ParseResult.PACKET_TOO_SHORT)
        if header.ver != 4:
            raise ParseError(ParseResult.WRONG_IP_VERSION)
        if header.hlen < 5:
            raise ParseError(ParseResult.HEADER_TOO_SHORT)
        if data_size != header.len:
            raise ParseError(ParseResult.TRUNCATED_PACKET)

        reader.remove_prefix(4 * header.hlen - cls.LENGTH)

        if internet_checksum(original[: 4 * header.hlen]):
            raise ParseError(ParseResult.BAD_CHECKSUM)
        return header

    def serialize(self) -> bytes:
        """Return the header in wire format; the checksum field is written as it stands."""
        if self.ver != 4:
            raise ValueError("wrong IP version")
        if 4 * self.hlen < self.LENGTH:
            raise ValueError("IP header too short")
        first_byte = ((self.ver << 4) | (self.hlen & 0x0F)) & 0xFF
        fo_val = (0x4000 if self.df else 0) | (0x2000 if self.mf else 0) | (self.offset & 0x1FFF)
        fixed = _FIXED_FORMAT.pack(
            first_byte,
            self.tos,
            self.len,
            self.id,
            fo_val,
            self.ttl,
            self.proto,
            self.cksum,
            self.src,
            self.dst,
        )
        return fixed.ljust(4 * self.hlen, b"\x00")

    def payload_length(self) -> int:
        """Length of the payload as advertised by the header."""
        return (self.len - 4 * self.hlen) & 0xFFFF

    def pseudo_cksum(self) -> int:
        """The pseudo-header's contribution to an encapsulated TCP checksum."""
        total = (self.src >> 16) + (self.src & 0xFFFF)
        total += (self.dst >> 16) + (self.dst & 0xFFFF)
        total += self.proto
        total += self.payload_length()
        return total & 0xFFFFFFFF

    def summary(self) -> str:
        """Return a one-line summary of the header."""
        ttl_part = "" if self.ttl >= 10 else f"ttl={self.ttl}, "
        return (
            f"IPv{self.ver:x}, len={self.len:x}, protocol={self.proto:x}, {ttl_part}"
            f"src={format_ipv4(self.src)}, dst={format_ipv4(self.dst)}"
        )

    def __str__(self) -> str:
        lines = [
            f"IP version: {self.ver:x}",
            f"IP hdr len: {self.hlen:x}",
            f"IP tos: {self.tos:x}",
            f"IP dgram len: {self.len:x}",
            f"IP id: {self.id:x}",
            f"Flags: df: {_BOOL_TEXT[bool(self.df)]} mf: {_BOOL_TEXT[bool(self.mf)]}",
            f"Offset: {self.offset:x}",
            f"TTL: {self.ttl:x}",
            f"Protocol: {self.proto:x}",
            f"Checksum: {self.cksum:x}",
            f"Src addr: {self.src:x}",
            f"Dst addr: {self.dst:x}",
        ]
        return "\n".join(lines) + "\n"


@dataclass
class IPv4Datagram:
    """An IPv4 header followed by its payload."""

    header: IPv4Header = field(default_factory=IPv4Header)
    payload: bytes = b""

    @classmethod
    def parse(cls, data: bytes) -> IPv4Datagram:
        """Parse a whole datagram; raise ParseError on failure."""
        reader = ByteReader(data)
        header = IPv4Header.parse(reader)
        payload = reader.remaining()
        if len(payload) != header.payload_length():
            raise ParseError(ParseResult.PACKET_TOO_SHORT)
        return cls(header=header, payload=payload)

    def serialize(self) -> bytes:
        """Return the datagram in wire format with a freshly computed header checksum."""
        payload = bytes(self.payload)
        if len(payload) != self.header.payload_length():
            raise ValueError("IPv4 datagram payload is wrong size")
        zeroed = dataclasses.replace(self.header, cksum=0)
        header_out = dataclasses.replace(zeroed, cksum=internet_checksum(zeroed.serialize()))
        return header_out.serialize() + payload
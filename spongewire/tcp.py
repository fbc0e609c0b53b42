"""TCP headers and segments."""

from __future__ import annotations

import dataclasses
import struct
from dataclasses import dataclass, field
from typing import ClassVar

from spongewire.parsing import ByteReader, ParseError, ParseResult, internet_checksum

_FIXED_FORMAT = struct.Struct(">HHIIBBHHH")

_URG = 0b0010_0000
_ACK = 0b0001_0000
_PSH = 0b0000_1000
_RST = 0b0000_0100
_SYN = 0b0000_0010
_FIN = 0b0000_0001

_BOOL_TEXT = {True: "true", False: "false"}


@dataclass(eq=False)
class TCPHeader:
    """TCP segment header (options are skipped when parsing, zero-filled when serializing)."""

    LENGTH: ClassVar[int] = 20

    sport: int = 0
    dport: int = 0
    seqno: int = 0
    ackno: int = 0
    doff: int = 5
    urg: bool = False
    ack: bool = False
    psh: bool = False
    rst: bool = False
    syn: bool = False
    fin: bool = False
    win: int = 0
    cksum: int = 0
    uptr: int = 0

    @classmethod
    def parse(cls, reader: ByteReader) -> TCPHeader:
        """Read a header from ``reader``; raise ParseError if it is malformed."""
        sport = reader.u16()
        dport = reader.u16()
        seqno = reader.u32()
        ackno = reader.u32()
        doff = reader.u8() >> 4
        flags = reader.u8()
        header = cls(
            sport=sport,
            dport=dport,
            seqno=seqno,
            ackno=ackno,
            doff=doff,
            urg=bool(flags & _URG),
            ack=bool(flags & _ACK),
            psh=bool(flags & _PSH),
            rst=bool(flags & _RST),
            syn=bool(flags & _SYN),
            fin=bool(flags & _FIN),
            win=reader.u16(),
            cksum=reader.u16(),
            uptr=reader.u16(),
        )
        if header.doff < 5:
            raise ParseError(ParseResult.HEADER_TOO_SHORT)
        reader.remove_prefix(4 * header.doff - cls.LENGTH)
        return header

    def serialize(self) -> bytes:
        """Return the header in wire format; the checksum field is written as it stands."""
        if self.doff < 5:
            raise ValueError("TCP header too short")
        flags = (
            (_URG if self.urg else 0)
            | (_ACK if self.ack else 0)
            | (_PSH if self.psh else 0)
            | (_RST if self.rst else 0)
            | (_SYN if self.syn else 0)
            | (_FIN if self.fin else 0)
        )
        fixed = _FIXED_FORMAT.pack(
            self.sport,
            self.dport,
            self.seqno & 0xFFFFFFFF,
            self.ackno & 0xFFFFFFFF,
            (self.doff << 4) & 0xFF,
            flags,
            self.win,
            self.cksum,
            self.uptr,
        )
        return fixed.ljust(4 * self.doff, b"\x00")

    def summary(self) -> str:
        """Return a one-line summary of flags, numbers and window."""
        flags = "".join(
            letter for letter, on in (("S", self.syn), ("A", self.ack), ("R", self.rst), ("F", self.fin)) if on
        )
        return f"Header(flags={flags},seqno={self.seqno},ack={self.ackno},win={self.win})"

    def __str__(self) -> str:
        flag_text = " ".join(
            f"{name}: {_BOOL_TEXT[bool(value)]}"
            for name, value in (
                ("urg", self.urg),
                ("ack", self.ack),
                ("psh", self.psh),
                ("rst", self.rst),
                ("syn", self.syn),
                ("fin", self.fin),
            )
        )
        lines = [
            f"TCP source port: {self.sport:x}",
            f"TCP dest port: {self.dport:x}",
            f"TCP seqno: {self.seqno:x}",
            f"TCP ackno: {self.ackno:x}",
            f"TCP doff: {self.doff:x}",
            f"Flags: {flag_text}",
            f"TCP winsize: {self.win:x}",
            f"TCP cksum: {self.cksum:x}",
            f"TCP uptr: {self.uptr:x}",
        ]
        return "\n".join(lines) + "\n"

    def __eq__(self, other: object) -> bool:
        """Compare all fields except ports and checksum."""
        if not isinstance(other, TCPHeader):
            return NotImplemented
        return (
            self.seqno == other.seqno
            and self.ackno == other.ackno
            and self.doff == other.doff
            and self.urg == other.urg
            and self.ack == other.ack
            and self.psh == other.psh
            and self.rst == other.rst
            and self.syn == other.syn
            and self.fin == other.fin
            and self.win == other.win
            and self.uptr == other.uptr
        )

    __hash__ = None  # type: ignore[assignment]


@dataclass
class TCPSegment:
    """A TCP header followed by its payload."""

    header: TCPHeader = field(default_factory=TCPHeader)
    payload: bytes = b""

    @classmethod
    def parse(cls, data: bytes, datagram_layer_checksum: int = 0) -> TCPSegment:
        """Parse a segment, verifying the checksum against the lower layer's pseudo-sum."""
        data = bytes(data)
        if internet_checksum(data, datagram_layer_checksum):
            raise ParseError(ParseResult.BAD_CHECKSUM)
        reader = ByteReader(data)
        header = TCPHeader.parse(reader)
        return cls(header=header, payload=reader.remaining())

    def serialize(self, datagram_layer_checksum: int = 0) -> bytes:
        """Return the segment in wire format with a freshly computed checksum."""
        payload = bytes(self.payload)
        zeroed = dataclasses.replace(self.header, cksum=0)
        cksum = internet_checksum(zeroed.serialize() + payload, datagram_layer_checksum)
        return dataclasses.replace(zeroed, cksum=cksum).serialize() + payload

    def length_in_sequence_space(self) -> int:
        """Payload length plus one for SYN and one for FIN."""
        return len(self.payload) + int(self.header.syn) + int(self.header.fin)
"""ARP messages for Ethernet/IPv4."""

from __future__ import annotations

import ipaddress
import struct
from dataclasses import dataclass
from typing import ClassVar

from spongewire.ethernet import (
    ETHERNET_ADDRESS_LENGTH,
    EthernetHeader,
    _check_address,
    _read_address,
    format_ethernet_address,
)
from spongewire.parsing import ByteReader, ParseError, ParseResult

_IPV4_ADDRESS_LENGTH = 4
_WIRE_FORMAT = struct.Struct(">HHBBH6sI6sI")


@dataclass
class ARPMessage:
    """An ARP request or reply; use it to parse a message or to build one."""

    LENGTH: ClassVar[int] = 28
    TYPE_ETHERNET: ClassVar[int] = 1
    OPCODE_REQUEST: ClassVar[int] = 1
    OPCODE_REPLY: ClassVar[int] = 2

    hardware_type: int = 1
    protocol_type: int = EthernetHeader.TYPE_IPV4
    hardware_address_size: int = ETHERNET_ADDRESS_LENGTH
    protocol_address_size: int = _IPV4_ADDRESS_LENGTH
    opcode: int = 0
    sender_ethernet_address: bytes = bytes(ETHERNET_ADDRESS_LENGTH)
    sender_ip_address: int = 0
    target_ethernet_address: bytes = bytes(ETHERNET_ADDRESS_LENGTH)
    target_ip_address: int = 0

    def __post_init__(self) -> None:
        self.sender_ethernet_address = _check_address(
            self.sender_ethernet_address, "sender_ethernet_address"
        )
        self.target_ethernet_address = _check_address(
            self.target_ethernet_address, "target_ethernet_address"
        )

    @classmethod
    def parse(cls, data: bytes) -> ARPMessage:
        """Parse a message; raise ParseError if it is short or unsupported."""
        reader = ByteReader(data)
        if len(reader) < cls.LENGTH:
            raise ParseError(ParseResult.PACKET_TOO_SHORT)
        message = cls(
            hardware_type=reader.u16(),
            protocol_type=reader.u16(),
            hardware_address_size=reader.u8(),
            protocol_address_size=reader.u8(),
            opcode=reader.u16(),
        )
        if not message.supported():
            raise ParseError(ParseResult.UNSUPPORTED)
        message.sender_ethernet_address = _read_address(reader)
        message.sender_ip_address = reader.u32()
        message.target_ethernet_address = _read_address(reader)
        message.target_ip_address = reader.u32()
        return message

    def supported(self) -> bool:
        """Is this an Ethernet/IPv4 request or reply?"""
        return (
            self.hardware_type == self.TYPE_ETHERNET
            and self.protocol_type == EthernetHeader.TYPE_IPV4
            and self.hardware_address_size == ETHERNET_ADDRESS_LENGTH
            and self.protocol_address_size == _IPV4_ADDRESS_LENGTH
            and self.opcode in (self.OPCODE_REQUEST, self.OPCODE_REPLY)
        )

    def serialize(self) -> bytes:
        """Return the message in wire format."""
        if not self.supported():
            raise ValueError(
                "unsupported ARP field combination (must be Ethernet/IP, and request or reply)"
            )
        return _WIRE_FORMAT.pack(
            self.hardware_type,
            self.protocol_type,
            self.hardware_address_size,
            self.protocol_address_size,
            self.opcode,
            self.sender_ethernet_address,
            self.sender_ip_address,
            self.target_ethernet_address,
            self.target_ip_address,
        )

    def __str__(self) -> str:
        if self.opcode == self.OPCODE_REQUEST:
            opcode_name = "REQUEST"
        elif self.opcode == self.OPCODE_REPLY:
            opcode_name = "REPLY"
        else:
            opcode_name = "(unknown type)"
        return (
            f"opcode={opcode_name}, "
            f"sender={format_ethernet_address(self.sender_ethernet_address)}"
            f"/{ipaddress.IPv4Address(self.sender_ip_address)}, "
            f"target={format_ethernet_address(self.target_ethernet_address)}"
            f"/{ipaddress.IPv4Address(self.target_ip_address)}"
        )
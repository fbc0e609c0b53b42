"""Endpoint addresses and configuration for TCP connections and their adapters."""

from __future__ import annotations

import socket
from dataclasses import dataclass, field
from typing import ClassVar, Optional, Union


def _resolve(host: str) -> str:
    """Return ``host`` as a dotted-quad IPv4 address, resolving names if needed."""
    try:
        return socket.inet_ntoa(socket.inet_aton(host))
    except OSError:
        pass
    try:
        return socket.gethostbyname(host)
    except OSError as exc:
        raise ValueError(f"cannot resolve host {host!r}") from exc


@dataclass(frozen=True)
class Address:
    """An IPv4 host and port; the host is normalised to dotted-quad form."""

    host: str = "0"
    port: int = 0

    def __post_init__(self) -> None:
        port: Union[int, str] = self.port
        port = int(port)
        if not 0 <= port <= 0xFFFF:
            raise ValueError(f"port out of range: {port}")
        object.__setattr__(self, "port", port)
        object.__setattr__(self, "host", _resolve(str(self.host)))

    def ipv4_numeric(self) -> int:
        """Return the IPv4 address as a 32-bit integer."""
        return int.from_bytes(socket.inet_aton(self.host), "big")

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


@dataclass
class TCPConfig:
    """Settings for a TCP sender and receiver."""

    DEFAULT_CAPACITY: ClassVar[int] = 64000
    MAX_PAYLOAD_SIZE: ClassVar[int] = 1000
    TIMEOUT_DFLT: ClassVar[int] = 1000
    MAX_RETX_ATTEMPTS: ClassVar[int] = 8

    rt_timeout: int = 1000
    recv_capacity: int = 64000
    send_capacity: int = 64000
    fixed_isn: Optional[int] = None


@dataclass
class FdAdapterConfig:
    """Settings shared by the datagram adapters."""

    source: Address = field(default_factory=Address)
    destination: Address = field(default_factory=Address)
    loss_rate_dn: int = 0
    loss_rate_up: int = 0
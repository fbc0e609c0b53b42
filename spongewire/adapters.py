"""Adapters that carry TCP segments over UDP or inside IPv4 datagrams."""

from __future__ import annotations

import random
from typing import Any, Optional

from spongewire.config import Address, FdAdapterConfig
from spongewire.ipv4 import IPv4Datagram, IPv4Header, format_ipv4
from spongewire.parsing import ParseError
from spongewire.tcp import TCPSegment

_MAX_DATAGRAM = 65536


class FdAdapterBase:
    """Configuration and listening state shared by all adapters."""

    def __init__(self, config: Optional[FdAdapterConfig] = None) -> None:
        self.config = config if config is not None else FdAdapterConfig()
        self.listening = False
        self.elapsed_ms = 0

    def tick(self, ms_since_last_tick: int) -> None:
        """Record the time that has passed since the last tick."""
        if ms_since_last_tick < 0:
            raise ValueError("elapsed time cannot be negative")
        self.elapsed_ms += ms_since_last_tick


class TCPOverUDPSocketAdapter(FdAdapterBase):
    """Reads and writes TCP segments as UDP payloads on ``sock``."""

    def __init__(self, sock: Any, config: Optional[FdAdapterConfig] = None) -> None:
        super().__init__(config)
        self.sock = sock

    def read(self) -> Optional[TCPSegment]:
        """Receive one datagram; return its segment, or None if invalid or unrelated."""
        data, (host, port) = self.sock.recvfrom(_MAX_DATAGRAM)[:2]
        source = Address(host, port)

        if not self.listening and source != self.config.destination:
            return None

        try:
            seg = TCPSegment.parse(data, 0)
        except ParseError:
            return None

        if self.listening:
            if seg.header.syn and not seg.header.rst:
                self.config.destination = source
                self.listening = False
            else:
                return None
        return seg

    def write(self, seg: TCPSegment) -> None:
        """Stamp the configured ports on ``seg`` and send it to the destination."""
        seg.header.sport = self.config.source.port
        seg.header.dport = self.config.destination.port
        destination = self.config.destination
        self.sock.sendto(seg.serialize(0), (destination.host, destination.port))


class TCPOverIPv4Adapter(FdAdapterBase):
    """Converts between TCP segments and IPv4 datagrams carrying them."""

    def unwrap_tcp_in_ip(self, ip_dgram: IPv4Datagram) -> Optional[TCPSegment]:
        """Return the TCP segment in ``ip_dgram``, or None if invalid or unrelated."""
        header = ip_dgram.header
        cfg = self.config

        if not self.listening and header.dst != cfg.source.ipv4_numeric():
            return None
        if not self.listening and header.src != cfg.destination.ipv4_numeric():
            return None
        if header.proto != IPv4Header.PROTO_TCP:
            return None

        try:
            seg = TCPSegment.parse(ip_dgram.payload, header.pseudo_cksum())
        except ParseError:
            return None

        if seg.header.dport != cfg.source.port:
            return None

        if self.listening:
            if seg.header.syn and not seg.header.rst:
                cfg.source = Address(format_ipv4(header.dst), cfg.source.port)
                cfg.destination = Address(format_ipv4(header.src), seg.header.sport)
                self.listening = False
            else:
                return None

        if seg.header.sport != cfg.destination.port:
            return None
        return seg

    def wrap_tcp_in_ip(self, seg: TCPSegment) -> IPv4Datagram:
        """Stamp the configured ports on ``seg`` and wrap it in an IPv4 datagram."""
        cfg = self.config
        seg.header.sport = cfg.source.port
        seg.header.dport = cfg.destination.port

        header = IPv4Header(src=cfg.source.ipv4_numeric(), dst=cfg.destination.ipv4_numeric())
        header.len = 4 * header.hlen + 4 * seg.header.doff + len(seg.payload)
        return IPv4Datagram(header=header, payload=seg.serialize(header.pseudo_cksum()))


class LossyFdAdapter:
    """Wraps an adapter and randomly drops reads and writes at the configured loss rates.

    Loss rates are out of 65536: a rate of ``n`` drops a segment with probability ``n / 65536``.
    """

    def __init__(self, adapter: Any, rng: Optional[random.Random] = None) -> None:
        self.adapter = adapter
        self._rng = rng if rng is not None else random.Random()

    def _should_drop(self, uplink: bool) -> bool:
        cfg = self.adapter.config
        loss = cfg.loss_rate_up if uplink else cfg.loss_rate_dn
        return loss != 0 and self._rng.getrandbits(16) < loss

    def read(self) -> Optional[TCPSegment]:
        """Read from the wrapped adapter, possibly discarding what arrived."""
        seg = self.adapter.read()
        if self._should_drop(False):
            return None
        return seg

    def write(self, seg: TCPSegment) -> None:
        """Write through the wrapped adapter unless the segment is dropped."""
        if self._should_drop(True):
            return
        self.adapter.write(seg)

    def tick(self, ms_since_last_tick: int) -> None:
        """Pass elapsed time on to the wrapped adapter."""
        self.adapter.tick(ms_since_last_tick)

    @property
    def config(self) -> FdAdapterConfig:
        """The wrapped adapter's configuration."""
        return self.adapter.config

    @config.setter
    def config(self, value: FdAdapterConfig) -> None:
        self.adapter.config = value

    @property
    def listening(self) -> bool:
        """The wrapped adapter's listening flag."""
        return self.adapter.listening

    @listening.setter
    def listening(self, value: bool) -> None:
        self.adapter.listening = value
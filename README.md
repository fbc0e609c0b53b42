# spongewire

Building blocks for a small user-space TCP stack. The package has parsers and
serializers for Ethernet frames, ARP messages, IPv4 datagrams and TCP
segments. It also has adapters that carry TCP segments over UDP or inside IPv4
datagrams, and a way to summarise a TCP connection's state. The package uses
only the standard library.

## Install

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `spongewire.parsing`
  - `ByteReader` reads big-endian `u8`, `u16` and `u32` values.
  - `remove_prefix` skips bytes, `remaining` returns what has not been read,
    and `len()` gives the number of bytes left.
  - `ParseResult` names the reasons a parse can fail.
  - `ParseError`, a `ValueError`, carries that reason in `result`.
  - `internet_checksum(data, initial=0)` computes the 16-bit ones-complement
    checksum.
- `spongewire.ethernet`
  - `EthernetHeader` and `EthernetFrame`, each with `parse` and `serialize`.
  - `format_ethernet_address`, which gives the `aa:bb:cc:dd:ee:ff` form.
  - `ETHERNET_BROADCAST`.
- `spongewire.arp`
  - `ARPMessage`, which handles Ethernet/IPv4 requests and replies.
  - `supported()` checks the fields. `serialize()` raises `ValueError` when
    they are not supported, and `parse()` raises `ParseError(UNSUPPORTED)`.
- `spongewire.ipv4`
  - `IPv4Header` has `parse`, `serialize`, `payload_length`, `pseudo_cksum`
    and `summary`.
  - `IPv4Datagram` recomputes the header checksum on `serialize`.
  - `format_ipv4` gives the dotted-quad form of a numeric address.
- `spongewire.tcp`
  - `TCPHeader`. Its equality ignores the ports and the checksum.
  - `TCPSegment`. Its `parse` and `serialize` take the lower layer's
    pseudo-header sum, and `length_in_sequence_space` counts SYN and FIN as
    one each.
- `spongewire.config`
  - `Address`, a frozen IPv4 host and port. Host names are resolved to
    dotted-quad form.
  - `TCPConfig` and `FdAdapterConfig`.
- `spongewire.adapters`
  - `FdAdapterBase` holds `config`, `listening` and the `elapsed_ms` that
    `tick` adds to.
  - `TCPOverUDPSocketAdapter` wraps any object with `recvfrom` and `sendto`.
  - `TCPOverIPv4Adapter` has `wrap_tcp_in_ip` and `unwrap_tcp_in_ip`.
  - `LossyFdAdapter` drops reads and writes at random, at the loss rates in
    the configuration. A rate of `n` means a probability of `n / 65536`. An
    optional `random.Random` can be passed to make the drops reproducible.
- `spongewire.state`
  - `State` lists the official TCP state names.
  - `ReceiverSummary` and `SenderSummary` are string enums.
  - `receiver_summary` and `sender_summary` accept any objects that have the
    attributes they read.
  - `TCPState` has `from_state`, `from_parts` and `name`.

## Example

```python
from spongewire.tcp import TCPSegment
from spongewire.ipv4 import IPv4Datagram
from spongewire.config import Address, FdAdapterConfig
from spongewire.adapters import TCPOverIPv4Adapter

adapter = TCPOverIPv4Adapter()
adapter.config = FdAdapterConfig(
    source=Address("10.0.0.1", 4000),
    destination=Address("10.0.0.2", 80),
)

segment = TCPSegment()
segment.header.syn = True
segment.payload = b"hello"

datagram = adapter.wrap_tcp_in_ip(segment)
wire = datagram.serialize()

parsed = IPv4Datagram.parse(wire)
print(parsed.header.summary())
```

Parsing a malformed packet raises `ParseError`. Its `result` attribute is a
`ParseResult` that names the reason, such as a short packet or a bad checksum.
Serializing an inconsistent header raises `ValueError`.

Adapters return `None` from `read` and `unwrap_tcp_in_ip` when a segment is
invalid or belongs to another connection. While an adapter is listening, the
first SYN without RST sets its destination and ends listening.

## What this package does not do

The package has no TCP sender, receiver or connection state machine. It has no
socket object that runs a connection on a thread. It has no TUN or TAP device
access and no network interface that resolves addresses with ARP. There is no
command-line program. The state summaries describe sender and receiver objects
that you provide.
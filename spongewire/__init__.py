"""Ethernet, ARP, IPv4 and TCP wire formats, TCP-over-UDP/IPv4 adapters and TCP state summaries."""

__version__ = "0.1.0"
"""Summaries of a TCP connection's state and the official TCP state names."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any


class State(enum.Enum):
    """Official state names from the TCP specification."""

    LISTEN = 0
    SYN_RCVD = 1
    SYN_SENT = 2
    ESTABLISHED = 3
    CLOSE_WAIT = 4
    LAST_ACK = 5
    FIN_WAIT_1 = 6
    FIN_WAIT_2 = 7
    CLOSING = 8
    TIME_WAIT = 9
    CLOSED = 10
    RESET = 11


class ReceiverSummary(str, enum.Enum):
    """What a receiver's state looks like from outside."""

    ERROR = "error (connection was reset)"
    LISTEN = "waiting for SYN: ackno is empty"
    SYN_RECV = "SYN received (ackno exists), and input to stream hasn't ended"
    FIN_RECV = "input to stream has ended"


class SenderSummary(str, enum.Enum):
    """What a sender's state looks like from outside."""

    ERROR = "error (connection was reset)"
    CLOSED = "waiting for stream to begin (no SYN sent)"
    SYN_SENT = "stream started but nothing acknowledged"
    SYN_ACKED = "stream ongoing"
    FIN_SENT = "stream finished (FIN sent) but not fully acknowledged"
    FIN_ACKED = "stream finished and fully acknowledged"


def receiver_summary(receiver: Any) -> ReceiverSummary:
    """Summarise a receiver exposing ``stream_out`` (with ``error``, ``input_ended``) and ``ackno``."""
    stream = receiver.stream_out
    if stream.error:
        return ReceiverSummary.ERROR
    if receiver.ackno is None:
        return ReceiverSummary.LISTEN
    if stream.input_ended:
        return ReceiverSummary.FIN_RECV
    return ReceiverSummary.SYN_RECV


def sender_summary(sender: Any) -> SenderSummary:
    """Summarise a sender exposing ``stream_in``, ``next_seqno_absolute`` and ``bytes_in_flight``."""
    stream = sender.stream_in
    if stream.error:
        return SenderSummary.ERROR
    if sender.next_seqno_absolute == 0:
        return SenderSummary.CLOSED
    if sender.next_seqno_absolute == sender.bytes_in_flight:
        return SenderSummary.SYN_SENT
    if not stream.eof:
        return SenderSummary.SYN_ACKED
    if sender.next_seqno_absolute < stream.bytes_written + 2:
        return SenderSummary.SYN_ACKED
    if sender.bytes_in_flight:
        return SenderSummary.FIN_SENT
    return SenderSummary.FIN_ACKED


@dataclass(frozen=True)
class TCPState:
    """A connection's sender and receiver summaries plus its active and linger flags."""

    sender: SenderSummary
    receiver: ReceiverSummary
    active: bool = True
    linger_after_streams_finish: bool = True

    @classmethod
    def from_state(cls, state: State) -> TCPState:
        """The summary that corresponds to an official TCP state."""
        return _OFFICIAL[state]

    @classmethod
    def from_parts(cls, sender: Any, receiver: Any, active: bool, linger: bool) -> TCPState:
        """Summarise a live sender and receiver with the connection's flags."""
        return cls(
            sender=sender_summary(sender),
            receiver=receiver_summary(receiver),
            active=active,
            linger_after_streams_finish=linger if active else False,
        )

    def name(self) -> str:
        """Describe the state in one line."""
        return (
            f"sender=`{self.sender.value}`, receiver=`{self.receiver.value}`, "
            f"active={int(self.active)}, "
            f"linger_after_streams_finish={int(self.linger_after_streams_finish)}"
        )


_S = SenderSummary
_R = ReceiverSummary

_OFFICIAL = {
    State.LISTEN: TCPState(_S.CLOSED, _R.LISTEN),
    State.SYN_RCVD: TCPState(_S.SYN_SENT, _R.SYN_RECV),
    State.SYN_SENT: TCPState(_S.SYN_SENT, _R.LISTEN),
    State.ESTABLISHED: TCPState(_S.SYN_ACKED, _R.SYN_RECV),
    State.CLOSE_WAIT: TCPState(_S.SYN_ACKED, _R.FIN_RECV, True, False),
    State.LAST_ACK: TCPState(_S.FIN_SENT, _R.FIN_RECV, True, False),
    State.CLOSING: TCPState(_S.FIN_SENT, _R.FIN_RECV),
    State.FIN_WAIT_1: TCPState(_S.FIN_SENT, _R.SYN_RECV),
    State.FIN_WAIT_2: TCPState(_S.FIN_ACKED, _R.SYN_RECV),
    State.TIME_WAIT: TCPState(_S.FIN_ACKED, _R.FIN_RECV),
    State.RESET: TCPState(_S.ERROR, _R.ERROR, False, False),
    State.CLOSED: TCPState(_S.FIN_ACKED, _R.FIN_RECV, False, False),
}
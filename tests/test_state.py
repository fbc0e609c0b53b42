from types import SimpleNamespace

import pytest

from spongewire.state import (
    ReceiverSummary,
    SenderSummary,
    State,
    TCPState,
    receiver_summary,
    sender_summary,
)


def _receiver(error=False, ackno=None, input_ended=False):
    return SimpleNamespace(stream_out=SimpleNamespace(error=error, input_ended=input_ended), ackno=ackno)


def _sender(next_seqno, in_flight, eof=False, written=0, error=False):
    return SimpleNamespace(
        stream_in=SimpleNamespace(error=error, eof=eof, bytes_written=written),
        next_seqno_absolute=next_seqno,
        bytes_in_flight=in_flight,
    )


@pytest.mark.parametrize(
    "state, sender, receiver",
    [
        (State.LISTEN, SenderSummary.CLOSED, ReceiverSummary.LISTEN),
        (State.SYN_SENT, SenderSummary.SYN_SENT, ReceiverSummary.LISTEN),
        (State.ESTABLISHED, SenderSummary.SYN_ACKED, ReceiverSummary.SYN_RECV),
        (State.FIN_WAIT_2, SenderSummary.FIN_ACKED, ReceiverSummary.SYN_RECV),
        (State.RESET, SenderSummary.ERROR, ReceiverSummary.ERROR),
    ],
)
def test_official_state_summaries(state, sender, receiver):
    summary = TCPState.from_state(state)
    assert summary.sender == sender
    assert summary.receiver == receiver


def test_official_states_are_distinct():
    assert len({TCPState.from_state(state) for state in State}) == len(State)


def test_closed_name():
    assert TCPState.from_state(State.CLOSED).name() == (
        "sender=`stream finished and fully acknowledged`, receiver=`input to stream has ended`, "
        "active=0, linger_after_streams_finish=0"
    )


def test_receiver_summary_branches():
    assert receiver_summary(_receiver(error=True, ackno=5)) == ReceiverSummary.ERROR
    assert receiver_summary(_receiver()) == ReceiverSummary.LISTEN
    assert receiver_summary(_receiver(ackno=5, input_ended=True)) == ReceiverSummary.FIN_RECV
    assert receiver_summary(_receiver(ackno=5)) == ReceiverSummary.SYN_RECV


def test_sender_summary_branches():
    assert sender_summary(_sender(3, 1, error=True)) == SenderSummary.ERROR
    assert sender_summary(_sender(0, 0)) == SenderSummary.CLOSED
    assert sender_summary(_sender(1, 1)) == SenderSummary.SYN_SENT
    assert sender_summary(_sender(5, 2)) == SenderSummary.SYN_ACKED
    assert sender_summary(_sender(4, 0, eof=True, written=3)) == SenderSummary.SYN_ACKED
    assert sender_summary(_sender(5, 1, eof=True, written=3)) == SenderSummary.FIN_SENT
    assert sender_summary(_sender(5, 0, eof=True, written=3)) == SenderSummary.FIN_ACKED


def test_from_parts_matches_official_states():
    syn_sent = TCPState.from_parts(_sender(1, 1), _receiver(), True, True)
    assert syn_sent == TCPState.from_state(State.SYN_SENT)
    established = TCPState.from_parts(_sender(5, 2), _receiver(ackno=5), True, True)
    assert established == TCPState.from_state(State.ESTABLISHED)
    assert established != TCPState.from_state(State.CLOSE_WAIT)


def test_inactive_forces_no_linger():
    closed = TCPState.from_parts(
        _sender(5, 0, eof=True, written=3), _receiver(ackno=5, input_ended=True), False, True
    )
    assert closed.linger_after_streams_finish is False
    assert closed == TCPState.from_state(State.CLOSED)
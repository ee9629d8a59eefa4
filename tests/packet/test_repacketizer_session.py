"""Session bookkeeping checked against the fake library."""

import pytest

from opuskit.native.errors import ErrorKind, OpusError
from opuskit.packet import Repacketizer


def _kind(excinfo):
    return excinfo.value.kind


def test_cat_chains_and_counts(fake_lib):
    with Repacketizer() as rp:
        session = rp.begin()
        assert session.cat(b"\x01").cat(b"\x02") is session
        assert session.get_nb_frames() == 2
        assert session.to_bytes() == b"\x00\x01"
        assert session.range_to_bytes(1, 2) == b"\x01"


def test_begin_makes_earlier_sessions_stale(fake_lib):
    with Repacketizer() as rp:
        first = rp.begin()
        first.cat(b"\x01")
        second = rp.begin()
        assert first.stale and not second.stale
        with pytest.raises(OpusError) as excinfo:
            first.cat(b"\x02")
        assert _kind(excinfo) is ErrorKind.INVALID_STATE
        with pytest.raises(OpusError) as excinfo:
            first.get_nb_frames()
        assert _kind(excinfo) is ErrorKind.INVALID_STATE
        assert second.get_nb_frames() == 0
        assert rp.generation == 2


def test_closed_session_refuses_work(fake_lib):
    with Repacketizer() as rp:
        with rp.begin() as session:
            session.cat(b"\x01")
        with pytest.raises(OpusError) as excinfo:
            session.out(bytearray(8))
        assert _kind(excinfo) is ErrorKind.INVALID_STATE
        assert excinfo.value.function == "opus_repacketizer_out"


def test_mutating_a_borrowed_packet_invalidates_output(fake_lib):
    packet = bytearray(b"\x01\x02\x03")
    with Repacketizer() as rp, rp.begin() as session:
        session.cat(packet)
        packet[1] = 0xFF
        with pytest.raises(OpusError) as excinfo:
            session.to_bytes()
        assert _kind(excinfo) is ErrorKind.INVALID_STATE
        with pytest.raises(OpusError):
            session.out_range(0, 1, bytearray(8))


def test_closing_the_repacketizer_invalidates_sessions(fake_lib):
    rp = Repacketizer()
    session = rp.begin()
    rp.close()
    assert session.stale
    with pytest.raises(OpusError) as excinfo:
        session.cat(b"\x01")
    assert _kind(excinfo) is ErrorKind.INVALID_STATE
    assert len(fake_lib.destroyed) == 1


def test_native_errors_propagate(fake_lib):
    with Repacketizer() as rp, rp.begin() as session:
        with pytest.raises(OpusError) as excinfo:
            session.cat(b"")
        assert _kind(excinfo) is ErrorKind.INVALID_PACKET
        assert session.get_nb_frames() == 0
        session.cat(b"\x01").cat(b"\x02")
        with pytest.raises(OpusError) as excinfo:
            session.out(bytearray(1))
        assert _kind(excinfo) is ErrorKind.BUFFER_TOO_SMALL
        with pytest.raises(OpusError) as excinfo:
            session.out_range(1, 3, bytearray(8))
        assert _kind(excinfo) is ErrorKind.BAD_ARG


def test_negative_range_is_a_length_violation(fake_lib):
    with Repacketizer() as rp, rp.begin() as session:
        session.cat(b"\x01")
        with pytest.raises(OverflowError):
            session.out_range(-1, 1, bytearray(8))


def test_combine(fake_lib):
    with Repacketizer() as rp:
        buffer = bytearray(8)
        assert rp.combine([b"\x01", b"\x02", b"\x03"], buffer) == 3
        assert bytes(buffer[:3]) == b"\x00\x01\x02"
        assert rp.split(b"\x01") == [b"\x00"]

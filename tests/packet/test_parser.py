import numpy as np
import pytest

from opuskit.codec import Bandwidth, Channels
from opuskit.native.errors import ErrorKind, OpusError
from opuskit.packet import (
    get_bandwidth,
    get_nb_channels,
    get_nb_frames,
    get_nb_samples,
    get_samples_per_frame,
    multistream_pad,
    multistream_unpad,
    pad,
    parse,
    unpad,
)

MONO_SILENCE = bytes([248, 255, 254])
STEREO_SILENCE = bytes([252, 255, 254])
TWO_FRAMES = bytes([249, 255, 254, 255, 254])


@pytest.mark.parametrize(
    "query, args",
    [
        (get_bandwidth, ()),
        (get_nb_channels, ()),
        (get_nb_frames, ()),
        (get_nb_samples, (48000,)),
        (get_samples_per_frame, (48000,)),
        (parse, ()),
    ],
)
def test_empty_packet_is_rejected_before_the_native_call(fake_lib, query, args):
    with pytest.raises(OpusError) as excinfo:
        query(b"", *args)
    assert excinfo.value.kind is ErrorKind.BAD_ARG


def test_toc_queries(native):
    assert get_bandwidth(MONO_SILENCE) is Bandwidth.FULLBAND
    assert get_nb_channels(MONO_SILENCE) is Channels.MONO
    assert get_nb_channels(STEREO_SILENCE) is Channels.STEREO
    assert get_nb_frames(MONO_SILENCE) == 1
    assert get_nb_frames(TWO_FRAMES) == 2
    assert get_samples_per_frame(MONO_SILENCE, 48000) == 960
    assert get_samples_per_frame(MONO_SILENCE, 8000) == 160
    assert get_nb_samples(TWO_FRAMES, 48000) == 1920


def test_parse_returns_views_into_the_packet(native):
    data = bytearray(TWO_FRAMES)
    packet = parse(data)
    assert packet.toc == 249
    assert packet.nb_frames == 2
    assert packet.frame_ranges == ((1, 3), (3, 5))
    assert packet.payload_offset == 1
    assert [bytes(frame) for frame in packet.frames] == [b"\xff\xfe", b"\xff\xfe"]

    data[3] = 0x47
    assert bytes(packet.frames[1]) == b"\x47\xfe"


def test_parse_accepts_numpy_input(native):
    packet = parse(np.frombuffer(MONO_SILENCE, dtype=np.uint8))
    assert packet.toc == 248
    assert bytes(packet.payload) == b"\xff\xfe"


def test_parse_rejects_truncated_packet(native):
    with pytest.raises(OpusError) as excinfo:
        parse(bytes([249, 255, 254, 255]))
    assert excinfo.value.kind is ErrorKind.INVALID_PACKET
    assert excinfo.value.function == "opus_packet_parse"


def test_pad_and_unpad_in_place(native):
    buffer = bytearray(16)
    buffer[:3] = MONO_SILENCE
    assert pad(buffer, 3) == 16
    assert get_nb_frames(buffer) == 1
    assert unpad(buffer) == 3
    assert bytes(buffer[:3]) == MONO_SILENCE


def test_pad_rejects_shrinking(native):
    with pytest.raises(OpusError) as excinfo:
        pad(bytearray(MONO_SILENCE), 4)
    assert excinfo.value.kind is ErrorKind.BAD_ARG


def test_multistream_pad_and_unpad(native):
    buffer = bytearray(12)
    buffer[:3] = MONO_SILENCE
    assert multistream_pad(buffer, 3, 1) == 12
    assert multistream_unpad(buffer, 1) == 3
    assert bytes(buffer[:3]) == MONO_SILENCE


def test_multistream_stream_count_is_validated(fake_lib):
    with pytest.raises(OpusError) as excinfo:
        multistream_unpad(bytearray(MONO_SILENCE), 256)
    assert excinfo.value.kind is ErrorKind.BAD_ARG


def test_pad_requires_writable_buffer(fake_lib):
    with pytest.raises(OpusError):
        pad(MONO_SILENCE, 3)

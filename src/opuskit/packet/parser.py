"""Stateless inspection and in-place padding of Opus packets.

Every function accepts any bytes-like packet (``bytes``, ``bytearray``,
``memoryview`` or a ``uint8`` array). The queries only look at the TOC byte
and the packet length; :func:`parse` walks the whole framing and returns
views into the caller's buffer.
"""

from __future__ import annotations

import ctypes
from dataclasses import dataclass
from typing import Any, Tuple

import numpy as np

from ..codec.buffers import as_input, as_output, pointer
from ..codec.control import int32_arg, u8_arg
from ..codec.types import Bandwidth, Channels
from ..native import constants as c
from ..native.errors import OpusError, bad_arg, check
from ..native.lengths import buffer_len, check_len
from ..native.loader import get_backend


def _packet(packet: Any, function: str) -> np.ndarray:
    data = as_input(packet, np.uint8, function)
    if not len(data):
        raise bad_arg(function)
    return data


@dataclass(frozen=True, eq=False)
class Packet:
    """Result of :func:`parse`.

    ``frames`` are slices of ``data``; nothing is copied, so they stay valid
    only as long as the caller leaves the parsed buffer alone.
    """

    data: memoryview
    toc: int
    frames: Tuple[memoryview, ...]
    frame_ranges: Tuple[Tuple[int, int], ...]
    payload_offset: int

    @property
    def nb_frames(self) -> int:
        return len(self.frames)

    @property
    def payload(self) -> memoryview:
        return self.data[self.payload_offset:]

    def __repr__(self) -> str:
        sizes = [end - start for start, end in self.frame_ranges]
        return f"Packet(toc=0x{self.toc:02x}, frames={sizes}, payload_offset={self.payload_offset})"


def get_bandwidth(packet: Any) -> Bandwidth:
    function = "opus_packet_get_bandwidth"
    data = _packet(packet, function)
    code = check(function, get_backend().opus_packet_get_bandwidth(pointer(data)))
    return Bandwidth.from_raw(code, function)


def get_nb_channels(packet: Any) -> Channels:
    function = "opus_packet_get_nb_channels"
    data = _packet(packet, function)
    code = check(function, get_backend().opus_packet_get_nb_channels(pointer(data)))
    return Channels.from_raw(code, function)


def get_nb_frames(packet: Any) -> int:
    function = "opus_packet_get_nb_frames"
    data = _packet(packet, function)
    return check(function, get_backend().opus_packet_get_nb_frames(pointer(data), buffer_len(data)))


def get_nb_samples(packet: Any, sample_rate: int) -> int:
    """Total samples per channel in *packet* when decoded at *sample_rate*."""

    function = "opus_packet_get_nb_samples"
    data = _packet(packet, function)
    rate = int32_arg(sample_rate, function)
    code = get_backend().opus_packet_get_nb_samples(pointer(data), buffer_len(data), rate)
    return check(function, code)


def get_samples_per_frame(packet: Any, sample_rate: int) -> int:
    function = "opus_packet_get_samples_per_frame"
    data = _packet(packet, function)
    rate = int32_arg(sample_rate, function)
    code = get_backend().opus_packet_get_samples_per_frame(pointer(data), rate)
    return check(function, code)


def parse(packet: Any) -> Packet:
    """Split *packet* into its TOC byte and frame views.

    >>> parse(b"\\xf9\\xff\\xfe\\xff\\xfe").frame_ranges
    ((1, 3), (3, 5))
    """

    function = "opus_packet_parse"
    data = _packet(packet, function)
    toc = ctypes.c_ubyte(0)
    starts = (ctypes.POINTER(ctypes.c_ubyte) * c.MAX_FRAMES)()
    sizes = (ctypes.c_int16 * c.MAX_FRAMES)()
    payload_offset = ctypes.c_int(0)
    count = check(
        function,
        get_backend().opus_packet_parse(
            pointer(data),
            buffer_len(data),
            ctypes.byref(toc),
            starts,
            sizes,
            ctypes.byref(payload_offset),
        ),
    )

    base = data.ctypes.data
    view = memoryview(data)
    ranges = []
    for index in range(count):
        start = ctypes.cast(starts[index], ctypes.c_void_p).value - base
        end = start + sizes[index]
        if start < 0 or end > len(view):
            raise OpusError(function, c.OPUS_INTERNAL_ERROR)
        ranges.append((start, end))
    return Packet(
        data=view,
        toc=toc.value,
        frames=tuple(view[start:end] for start, end in ranges),
        frame_ranges=tuple(ranges),
        payload_offset=payload_offset.value,
    )


def pad(buffer: Any, prev_len: int) -> int:
    """Grow the packet in the first *prev_len* bytes of *buffer* to fill all of it.

    Returns the new packet length, which is ``len(buffer)``.
    """

    function = "opus_packet_pad"
    out = as_output(buffer, np.uint8, function)
    new_len = buffer_len(out)
    check(function, get_backend().opus_packet_pad(pointer(out), check_len(prev_len), new_len))
    return new_len


def unpad(buffer: Any) -> int:
    """Strip all padding from the packet filling *buffer*; returns the new length."""

    function = "opus_packet_unpad"
    out = as_output(buffer, np.uint8, function)
    return check(function, get_backend().opus_packet_unpad(pointer(out), buffer_len(out)))


def multistream_pad(buffer: Any, prev_len: int, nb_streams: int) -> int:
    function = "opus_multistream_packet_pad"
    out = as_output(buffer, np.uint8, function)
    streams = u8_arg(nb_streams, function)
    new_len = buffer_len(out)
    code = get_backend().opus_multistream_packet_pad(pointer(out), check_len(prev_len), new_len, streams)
    check(function, code)
    return new_len


def multistream_unpad(buffer: Any, nb_streams: int) -> int:
    function = "opus_multistream_packet_unpad"
    out = as_output(buffer, np.uint8, function)
    streams = u8_arg(nb_streams, function)
    code = get_backend().opus_multistream_packet_unpad(pointer(out), buffer_len(out), streams)
    return check(function, code)


__all__ = [
    "Packet",
    "get_bandwidth",
    "get_nb_channels",
    "get_nb_frames",
    "get_nb_samples",
    "get_samples_per_frame",
    "multistream_pad",
    "multistream_unpad",
    "pad",
    "parse",
    "unpad",
]

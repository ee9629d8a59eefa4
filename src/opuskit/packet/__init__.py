"""Packet inspection, padding and repacketization."""

from .parser import (
    Packet,
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
from .repacketizer import Repacketizer, RepacketizerSession

__all__ = [
    "Packet",
    "Repacketizer",
    "RepacketizerSession",
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

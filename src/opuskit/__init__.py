"""Typed, memory-safe bindings for the libopus audio codec."""

from .codec import (
    SAMPLE_RATES,
    Application,
    Bandwidth,
    Bitrate,
    Channels,
    Decoder,
    Encoder,
    FrameSize,
    MultistreamDecoder,
    MultistreamEncoder,
    Signal,
    SoftClip,
)
from .config import OpusKitConfig
from .exceptions import (
    BackendUnavailableError,
    ConcurrentAccessError,
    ConfigurationError,
    OpusKitError,
)
from .native import ErrorKind, OpusError, load_backend, version
from .packet import Packet, Repacketizer, RepacketizerSession

__all__ = [
    "SAMPLE_RATES",
    "Application",
    "BackendUnavailableError",
    "Bandwidth",
    "Bitrate",
    "Channels",
    "ConcurrentAccessError",
    "ConfigurationError",
    "Decoder",
    "Encoder",
    "ErrorKind",
    "FrameSize",
    "MultistreamDecoder",
    "MultistreamEncoder",
    "OpusError",
    "OpusKitConfig",
    "OpusKitError",
    "Packet",
    "Repacketizer",
    "RepacketizerSession",
    "Signal",
    "SoftClip",
    "load_backend",
    "version",
]

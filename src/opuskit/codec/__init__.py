"""Codec handles and typed control parameters."""

from .control import ControlChannel, CtlDirection, CtlRequest
from .decoder import Decoder
from .encoder import Encoder
from .multistream import MultistreamDecoder, MultistreamEncoder
from .softclip import SoftClip
from .types import SAMPLE_RATES, Application, Bandwidth, Bitrate, Channels, FrameSize, Signal

__all__ = [
    "SAMPLE_RATES",
    "Application",
    "Bandwidth",
    "Bitrate",
    "Channels",
    "ControlChannel",
    "CtlDirection",
    "CtlRequest",
    "Decoder",
    "Encoder",
    "FrameSize",
    "MultistreamDecoder",
    "MultistreamEncoder",
    "Signal",
    "SoftClip",
]

"""Typed codec parameters and their raw libopus encodings."""

from __future__ import annotations

import numbers
from dataclasses import dataclass
from enum import IntEnum
from typing import Type, TypeVar

from ..native import constants as c
from ..native.errors import bad_arg

E = TypeVar("E", bound="_RawEnum")


class _RawEnum(IntEnum):
    """IntEnum whose values are the raw libopus integers."""

    @classmethod
    def from_raw(cls: Type[E], raw: int, what: str) -> E:
        """Decode *raw*, rejecting anything outside the declared set as ``BAD_ARG``."""

        try:
            return cls(raw)
        except ValueError:
            raise bad_arg(what) from None

    @classmethod
    def coerce(cls: Type[E], value: object, what: str) -> E:
        """Accept a member or its raw integer; reject anything else as ``BAD_ARG``."""

        if isinstance(value, cls):
            return value
        if isinstance(value, bool) or not isinstance(value, numbers.Integral):
            raise bad_arg(what)
        return cls.from_raw(int(value), what)

    @property
    def raw(self) -> int:
        return int(self)


class Application(_RawEnum):
    """Intended application, a hint for the encoder's mode decisions."""

    VOIP = c.OPUS_APPLICATION_VOIP
    AUDIO = c.OPUS_APPLICATION_AUDIO
    LOW_DELAY = c.OPUS_APPLICATION_RESTRICTED_LOWDELAY


class Channels(_RawEnum):
    MONO = 1
    STEREO = 2


class Bandwidth(_RawEnum):
    """Audio bandpass."""

    AUTO = c.OPUS_AUTO
    NARROWBAND = c.OPUS_BANDWIDTH_NARROWBAND  # 4 kHz
    MEDIUMBAND = c.OPUS_BANDWIDTH_MEDIUMBAND  # 6 kHz
    WIDEBAND = c.OPUS_BANDWIDTH_WIDEBAND  # 8 kHz
    SUPERWIDEBAND = c.OPUS_BANDWIDTH_SUPERWIDEBAND  # 12 kHz
    FULLBAND = c.OPUS_BANDWIDTH_FULLBAND  # 20 kHz

    @classmethod
    def default(cls) -> "Bandwidth":
        return cls.AUTO


class Signal(_RawEnum):
    """Signal type hint: voice biases towards LPC/hybrid, music towards MDCT."""

    AUTO = c.OPUS_AUTO
    VOICE = c.OPUS_SIGNAL_VOICE
    MUSIC = c.OPUS_SIGNAL_MUSIC

    @classmethod
    def default(cls) -> "Signal":
        return cls.AUTO


class FrameSize(_RawEnum):
    """Expert frame duration; ``ARG`` takes the size from each encode call."""

    ARG = c.OPUS_FRAMESIZE_ARG
    MS2_5 = c.OPUS_FRAMESIZE_2_5_MS
    MS5 = c.OPUS_FRAMESIZE_5_MS
    MS10 = c.OPUS_FRAMESIZE_10_MS
    MS20 = c.OPUS_FRAMESIZE_20_MS
    MS40 = c.OPUS_FRAMESIZE_40_MS
    MS60 = c.OPUS_FRAMESIZE_60_MS
    MS80 = c.OPUS_FRAMESIZE_80_MS
    MS100 = c.OPUS_FRAMESIZE_100_MS
    MS120 = c.OPUS_FRAMESIZE_120_MS

    @classmethod
    def default(cls) -> "FrameSize":
        return cls.ARG


@dataclass(frozen=True)
class Bitrate:
    """Encoder bitrate: an explicit bits/second value, ``MAX`` or ``AUTO``.

    Use :attr:`Bitrate.AUTO`, :attr:`Bitrate.MAX` or :meth:`Bitrate.bits`.
    Any raw value other than the two sentinels decodes to an explicit
    bitrate; the range check is left to libopus.
    """

    raw: int

    AUTO = None  # type: Bitrate  # assigned below
    MAX = None  # type: Bitrate

    @classmethod
    def bits(cls, value: int) -> "Bitrate":
        return cls(int(value))

    @classmethod
    def from_raw(cls, raw: int) -> "Bitrate":
        return cls(int(raw))

    @classmethod
    def default(cls) -> "Bitrate":
        return cls.AUTO

    @property
    def is_auto(self) -> bool:
        return self.raw == c.OPUS_AUTO

    @property
    def is_max(self) -> bool:
        return self.raw == c.OPUS_BITRATE_MAX

    def __repr__(self) -> str:
        if self.is_auto:
            return "Bitrate.AUTO"
        if self.is_max:
            return "Bitrate.MAX"
        return f"Bitrate.bits({self.raw})"


Bitrate.AUTO = Bitrate(c.OPUS_AUTO)
Bitrate.MAX = Bitrate(c.OPUS_BITRATE_MAX)


SAMPLE_RATES = (8000, 12000, 16000, 24000, 48000)
"""Sample rates accepted by encoders and decoders."""


__all__ = [
    "Application",
    "Bandwidth",
    "Bitrate",
    "Channels",
    "FrameSize",
    "SAMPLE_RATES",
    "Signal",
]

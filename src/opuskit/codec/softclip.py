"""Soft clipping of float PCM into the [-1, 1] range."""

from __future__ import annotations

import ctypes
from typing import Any

import numpy as np

from ..native.lengths import buffer_len
from ..native.loader import get_backend
from .buffers import as_output, pointer
from .types import Channels


class SoftClip:
    """Stateful soft clipper.

    The two-float clip memory carries across calls, so one instance should
    follow one continuous signal.
    """

    def __init__(self, channels: Channels) -> None:
        self._lib = get_backend()
        self._channels = Channels.coerce(channels, "opus_pcm_soft_clip")
        self._memory = (ctypes.c_float * 2)()

    @property
    def channels(self) -> Channels:
        return self._channels

    @property
    def memory(self) -> tuple:
        return tuple(self._memory)

    def apply(self, signal: Any) -> None:
        """Clip the interleaved ``float32`` *signal* in place."""

        samples = as_output(signal, np.float32, "opus_pcm_soft_clip")
        frame_size = buffer_len(samples) // self._channels.raw
        self._lib.opus_pcm_soft_clip(pointer(samples), frame_size, self._channels.raw, self._memory)


__all__ = ["SoftClip"]

"""Single-stream Opus decoder."""

from __future__ import annotations

from typing import Any

import numpy as np

from ..native import constants as c
from ..native.errors import bad_arg, check
from ..native.lengths import buffer_len, check_len
from ..native.loader import get_backend
from .buffers import as_input, as_output, pointer
from .control import ControlChannel, int32_arg
from .ctls import DecoderCtls, GenericCtls
from .handles import NativeHandle, create_native
from .types import Channels


class DecodingHandle(NativeHandle):
    """Shared packet-to-PCM transforms for single and multistream decoders.

    An empty *packet* signals a lost packet: libopus is handed a null
    pointer and fills *output* with concealment (or, with ``fec=True``,
    with the forward error correction data of the next packet).
    """

    _decode_function = ""
    _decode_float_function = ""
    _channel_count: int

    def _decode(self, function: str, dtype: Any, packet: Any, output: Any, fec: bool) -> int:
        data = as_input(packet, np.uint8, function)
        out = as_output(output, dtype, function)
        length = buffer_len(data)
        frame_size = buffer_len(out) // self._channel_count
        source = pointer(data) if length else None
        decode = getattr(self._lib, function)
        with self._claim(function) as ptr:
            code = decode(ptr, source, length, pointer(out), frame_size, 1 if fec else 0)
        return check(function, code)

    def decode(self, packet: Any, output: Any, fec: bool = False) -> int:
        """Decode into an ``int16`` buffer; returns samples decoded *per channel*."""
        return self._decode(self._decode_function, np.int16, packet, output, fec)

    def decode_float(self, packet: Any, output: Any, fec: bool = False) -> int:
        """Decode into a ``float32`` buffer; returns samples decoded *per channel*."""
        return self._decode(self._decode_float_function, np.float32, packet, output, fec)

    def decode_to_array(
        self, packet: Any, fec: bool = False, frame_size: int = c.MAX_FRAME_SAMPLES
    ) -> np.ndarray:
        """Decode into a new ``int16`` array truncated to the decoded samples.

        *frame_size* is the per-channel capacity and defaults to the longest
        possible packet (120 ms at 48 kHz).
        """

        out = np.zeros(check_len(frame_size) * self._channel_count, dtype=np.int16)
        decoded = self.decode(packet, out, fec)
        return out[: decoded * self._channel_count]

    def decode_float_to_array(
        self, packet: Any, fec: bool = False, frame_size: int = c.MAX_FRAME_SAMPLES
    ) -> np.ndarray:
        out = np.zeros(check_len(frame_size) * self._channel_count, dtype=np.float32)
        decoded = self.decode_float(packet, out, fec)
        return out[: decoded * self._channel_count]


class Decoder(GenericCtls, DecoderCtls, DecodingHandle):
    """An Opus decoder with associated state."""

    _destroy_function = "opus_decoder_destroy"
    _decode_function = "opus_decode"
    _decode_float_function = "opus_decode_float"

    def __init__(self, sample_rate: int, channels: Channels) -> None:
        function = "opus_decoder_create"
        library = get_backend()
        channels = Channels.coerce(channels, function)
        ptr = create_native(
            function,
            library.opus_decoder_create,
            int32_arg(sample_rate, function),
            channels.raw,
        )
        super().__init__(library, ptr)
        self._channels = channels
        self._channel_count = channels.raw
        self._control = ControlChannel(self, "opus_decoder_ctl")

    @property
    def channels(self) -> Channels:
        return self._channels

    def get_nb_samples(self, packet: Any) -> int:
        """Number of samples per channel in *packet* at this decoder's rate."""

        function = "opus_decoder_get_nb_samples"
        data = as_input(packet, np.uint8, function)
        if not len(data):
            raise bad_arg(function)
        with self._claim(function) as ptr:
            code = self._lib.opus_decoder_get_nb_samples(ptr, pointer(data), buffer_len(data))
        return check(function, code)

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"<Decoder channels={self._channels.name} {state}>"


__all__ = ["Decoder", "DecodingHandle"]

"""Single-stream Opus encoder."""

from __future__ import annotations

from typing import Any

import numpy as np

from ..native.errors import check
from ..native.lengths import buffer_len, check_len
from ..native.loader import get_backend
from .buffers import as_input, as_output, pointer
from .control import ControlChannel, int32_arg
from .ctls import EncoderCtls, GenericCtls
from .handles import NativeHandle, create_native
from .types import Application, Channels


class EncodingHandle(NativeHandle):
    """Shared PCM-to-packet transforms for single and multistream encoders."""

    _encode_function = ""
    _encode_float_function = ""
    _channel_count: int

    def _encode(self, function: str, dtype: Any, pcm: Any, output: Any) -> int:
        samples = as_input(pcm, dtype, function)
        out = as_output(output, np.uint8, function)
        frame_size = buffer_len(samples) // self._channel_count
        encode = getattr(self._lib, function)
        with self._claim(function) as ptr:
            code = encode(ptr, pointer(samples), frame_size, pointer(out), buffer_len(out))
        return check(function, code)

    def encode(self, pcm: Any, output: Any) -> int:
        """Encode interleaved ``int16`` samples into *output*; returns the packet length.

        The number of samples per channel must be a valid Opus frame size for
        the sample rate (2.5, 5, 10, 20, 40, 60, 80, 100 or 120 ms).
        """
        return self._encode(self._encode_function, np.int16, pcm, output)

    def encode_float(self, pcm: Any, output: Any) -> int:
        """Encode interleaved ``float32`` samples in ``[-1, 1]`` into *output*."""
        return self._encode(self._encode_float_function, np.float32, pcm, output)

    def encode_to_bytes(self, pcm: Any, max_size: int) -> bytes:
        """Encode into a fresh buffer of *max_size* bytes, truncated to the result."""

        buffer = bytearray(check_len(max_size))
        length = self.encode(pcm, buffer)
        del buffer[length:]
        return bytes(buffer)

    def encode_float_to_bytes(self, pcm: Any, max_size: int) -> bytes:
        buffer = bytearray(check_len(max_size))
        length = self.encode_float(pcm, buffer)
        del buffer[length:]
        return bytes(buffer)


class Encoder(GenericCtls, EncoderCtls, EncodingHandle):
    """An Opus encoder with associated state.

    Examples
    --------
    >>> with Encoder(48000, Channels.MONO, Application.AUDIO) as enc:
    ...     enc.encode_to_bytes(np.zeros(960, dtype=np.int16), 256)
    b'\\xf8\\xff\\xfe'
    """

    _destroy_function = "opus_encoder_destroy"
    _encode_function = "opus_encode"
    _encode_float_function = "opus_encode_float"

    def __init__(self, sample_rate: int, channels: Channels, application: Application) -> None:
        function = "opus_encoder_create"
        library = get_backend()
        channels = Channels.coerce(channels, function)
        application = Application.coerce(application, function)
        ptr = create_native(
            function,
            library.opus_encoder_create,
            int32_arg(sample_rate, function),
            channels.raw,
            application.raw,
        )
        super().__init__(library, ptr)
        self._channels = channels
        self._channel_count = channels.raw
        self._control = ControlChannel(self, "opus_encoder_ctl")

    @property
    def channels(self) -> Channels:
        return self._channels

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"<Encoder channels={self._channels.name} {state}>"


__all__ = ["Encoder", "EncodingHandle"]

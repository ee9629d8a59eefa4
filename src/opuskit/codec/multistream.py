"""Multistream encoder and decoder: up to 255 channels split over Opus streams.

A mapping byte per output channel selects the decoded stream channel that
feeds it (255 means silence). The first ``coupled_streams`` streams are
stereo, the rest mono.
"""

from __future__ import annotations

import ctypes
import numbers
from typing import Any, Sequence

from ..native.errors import bad_arg
from ..native.loader import NativeLibrary, get_backend
from .control import ControlChannel, int32_arg, u8_arg
from .ctls import DecoderCtls, EncoderCtls, GenericCtls
from .decoder import DecodingHandle
from .encoder import EncodingHandle
from .handles import create_native
from .types import Application


def _mapping(mapping: Any, what: str) -> bytes:
    if isinstance(mapping, numbers.Integral):
        raise bad_arg(what)
    try:
        data = bytes(mapping)
    except (TypeError, ValueError):
        raise bad_arg(what) from None
    if not data:
        raise bad_arg(what)
    return data


class _MultistreamTopology:
    _streams: int
    _coupled_streams: int
    _mapping: bytes

    @property
    def streams(self) -> int:
        return self._streams

    @property
    def coupled_streams(self) -> int:
        return self._coupled_streams

    @property
    def mapping(self) -> bytes:
        return self._mapping

    @property
    def channels(self) -> int:
        return len(self._mapping)


class MultistreamEncoder(GenericCtls, EncoderCtls, _MultistreamTopology, EncodingHandle):
    """Combine individual Opus streams into a single packet."""

    _destroy_function = "opus_multistream_encoder_destroy"
    _encode_function = "opus_multistream_encode"
    _encode_float_function = "opus_multistream_encode_float"

    def __init__(
        self,
        sample_rate: int,
        streams: int,
        coupled_streams: int,
        mapping: Sequence[int],
        application: Application,
    ) -> None:
        function = "opus_multistream_encoder_create"
        library = get_backend()
        streams = u8_arg(streams, function)
        coupled_streams = u8_arg(coupled_streams, function)
        mapping_bytes = _mapping(mapping, function)
        application = Application.coerce(application, function)
        native_mapping = (ctypes.c_ubyte * len(mapping_bytes)).from_buffer_copy(mapping_bytes)
        ptr = create_native(
            function,
            library.opus_multistream_encoder_create,
            int32_arg(sample_rate, function),
            len(mapping_bytes),
            streams,
            coupled_streams,
            native_mapping,
            application.raw,
        )
        self._attach(library, ptr, streams, coupled_streams, mapping_bytes)

    def _attach(self, library: NativeLibrary, ptr: int, streams: int, coupled: int, mapping: bytes) -> None:
        EncodingHandle.__init__(self, library, ptr)
        self._streams = streams
        self._coupled_streams = coupled
        self._mapping = mapping
        self._channel_count = len(mapping)
        self._control = ControlChannel(self, "opus_multistream_encoder_ctl")

    @classmethod
    def surround(
        cls,
        sample_rate: int,
        channels: int,
        mapping_family: int,
        application: Application,
    ) -> "MultistreamEncoder":
        """Create an encoder for a standard surround layout.

        libopus chooses the stream split and channel mapping for
        *mapping_family* (0: mono/stereo, 1: Vorbis order up to 8 channels,
        255: independent channels); they are exposed as :attr:`streams`,
        :attr:`coupled_streams` and :attr:`mapping`.
        """

        function = "opus_multistream_surround_encoder_create"
        library = get_backend()
        channels = u8_arg(channels, function)
        if channels == 0:
            raise bad_arg(function)
        application = Application.coerce(application, function)
        streams = ctypes.c_int(0)
        coupled = ctypes.c_int(0)
        native_mapping = (ctypes.c_ubyte * channels)()
        ptr = create_native(
            function,
            library.opus_multistream_surround_encoder_create,
            int32_arg(sample_rate, function),
            channels,
            int32_arg(mapping_family, function),
            ctypes.byref(streams),
            ctypes.byref(coupled),
            native_mapping,
            application.raw,
        )
        encoder = cls.__new__(cls)
        encoder._attach(library, ptr, streams.value, coupled.value, bytes(native_mapping))
        return encoder

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return (
            f"<MultistreamEncoder streams={self._streams} coupled={self._coupled_streams} "
            f"channels={self.channels} {state}>"
        )


class MultistreamDecoder(GenericCtls, DecoderCtls, _MultistreamTopology, DecodingHandle):
    """Decode multistream packets into up to 255 channels."""

    _destroy_function = "opus_multistream_decoder_destroy"
    _decode_function = "opus_multistream_decode"
    _decode_float_function = "opus_multistream_decode_float"

    def __init__(self, sample_rate: int, streams: int, coupled_streams: int, mapping: Sequence[int]) -> None:
        function = "opus_multistream_decoder_create"
        library = get_backend()
        streams = u8_arg(streams, function)
        coupled_streams = u8_arg(coupled_streams, function)
        mapping_bytes = _mapping(mapping, function)
        native_mapping = (ctypes.c_ubyte * len(mapping_bytes)).from_buffer_copy(mapping_bytes)
        ptr = create_native(
            function,
            library.opus_multistream_decoder_create,
            int32_arg(sample_rate, function),
            len(mapping_bytes),
            streams,
            coupled_streams,
            native_mapping,
        )
        super().__init__(library, ptr)
        self._streams = streams
        self._coupled_streams = coupled_streams
        self._mapping = mapping_bytes
        self._channel_count = len(mapping_bytes)
        self._control = ControlChannel(self, "opus_multistream_decoder_ctl")

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return (
            f"<MultistreamDecoder streams={self._streams} coupled={self._coupled_streams} "
            f"channels={self.channels} {state}>"
        )


__all__ = ["MultistreamDecoder", "MultistreamEncoder"]

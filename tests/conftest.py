"""Shared fixtures: an in-process stand-in for libopus and the real library."""

from __future__ import annotations

import ctypes
import itertools
from typing import Callable, Dict, List, Optional, Tuple

import pytest

from opuskit.codec import control as ctl
from opuskit.codec.types import SAMPLE_RATES
from opuskit.exceptions import BackendUnavailableError
from opuskit.native import constants as c
from opuskit.native.loader import install_backend, load_backend, reset_backend

_MESSAGES = {
    c.OPUS_OK: "success",
    c.OPUS_BAD_ARG: "invalid argument",
    c.OPUS_BUFFER_TOO_SMALL: "buffer too small",
    c.OPUS_INTERNAL_ERROR: "internal error",
    c.OPUS_INVALID_PACKET: "corrupted stream",
    c.OPUS_UNIMPLEMENTED: "request not implemented",
    c.OPUS_INVALID_STATE: "invalid state",
    c.OPUS_ALLOC_FAIL: "memory allocation failed",
}


def _getter_for_setter() -> Dict[int, int]:
    requests = [value for value in vars(ctl).values() if isinstance(value, ctl.CtlRequest)]
    by_name = {request.name: request for request in requests}
    pairs = {}
    for request in requests:
        if request.direction is ctl.CtlDirection.SET:
            getter = by_name.get(request.name.replace("_SET_", "_GET_"))
            if getter is not None:
                pairs[request.request_id] = getter.request_id
    return pairs


class FakeLibrary:
    """Records calls and stores control values per handle instead of coding audio.

    Setters store the raw value under the matching getter, so a set followed
    by a get round-trips through the real ctypes payloads.
    """

    origin = "fake"

    def __init__(self) -> None:
        self._ids = itertools.count(0x1000, 0x10)
        self._pairs = _getter_for_setter()
        self.live: Dict[int, str] = {}
        self.destroyed: List[int] = []
        self.values: Dict[Tuple[int, int], int] = {}
        self.ctl_calls: List[Tuple[int, int]] = []
        self.ctl_result = c.OPUS_OK
        self.ctl_hook: Optional[Callable[[], None]] = None
        self.frames: Dict[int, int] = {}
        self.encoded: List[List[float]] = []

    def strerror(self, code: int) -> str:
        return _MESSAGES.get(code, "unknown error")

    def version_string(self) -> str:
        return "libopus 1.4-fake"

    def inject(self, handle, request: ctl.CtlRequest, raw: int) -> None:
        self.values[(handle._ptr, request.request_id)] = raw

    # -- handles ------------------------------------------------------------

    def _create(self, kind: str, error) -> int:
        ptr = next(self._ids)
        self.live[ptr] = kind
        error._obj.value = c.OPUS_OK
        return ptr

    def _destroy(self, ptr: int) -> None:
        del self.live[ptr]
        self.destroyed.append(ptr)

    def opus_encoder_create(self, sample_rate, channels, application, error):
        if sample_rate not in SAMPLE_RATES or channels not in (1, 2):
            error._obj.value = c.OPUS_BAD_ARG
            return None
        return self._create("encoder", error)

    def opus_decoder_create(self, sample_rate, channels, error):
        if sample_rate not in SAMPLE_RATES or channels not in (1, 2):
            error._obj.value = c.OPUS_BAD_ARG
            return None
        return self._create("decoder", error)

    def opus_multistream_decoder_create(self, sample_rate, channels, streams, coupled, mapping, error):
        if sample_rate not in SAMPLE_RATES or streams < 1 or coupled > streams:
            error._obj.value = c.OPUS_BAD_ARG
            return None
        return self._create("multistream_decoder", error)

    opus_encoder_destroy = _destroy
    opus_decoder_destroy = _destroy
    opus_multistream_decoder_destroy = _destroy
    opus_repacketizer_destroy = _destroy

    def _ctl(self, handle, request, *payload) -> int:
        ptr, request_id = handle.value, request.value
        self.ctl_calls.append((ptr, request_id))
        if self.ctl_hook is not None:
            self.ctl_hook()
        if self.ctl_result != c.OPUS_OK:
            return self.ctl_result
        if payload and isinstance(payload[0], ctypes.c_int32):
            self.values[(ptr, self._pairs.get(request_id, request_id))] = payload[0].value
        elif payload:
            payload[0]._obj.value = self.values.get((ptr, request_id), 0)
        return c.OPUS_OK

    opus_encoder_ctl = _ctl
    opus_decoder_ctl = _ctl
    opus_multistream_decoder_ctl = _ctl

    # -- encoding: records the samples it receives, emits a one-byte packet --

    def opus_encode(self, ptr, pcm, frame_size, data, max_data_bytes):
        self.encoded.append([pcm[index] for index in range(frame_size)])
        if max_data_bytes < 1:
            return c.OPUS_BUFFER_TOO_SMALL
        data[0] = 0xF8
        return 1

    opus_encode_float = opus_encode

    # -- repacketizer: one frame per packet, output byte i is i -------------

    def opus_repacketizer_create(self):
        ptr = next(self._ids)
        self.live[ptr] = "repacketizer"
        self.frames[ptr] = 0
        return ptr

    def opus_repacketizer_init(self, ptr):
        self.frames[ptr] = 0
        return ptr

    def opus_repacketizer_cat(self, ptr, data, length):
        if length < 1:
            return c.OPUS_INVALID_PACKET
        self.frames[ptr] += 1
        return c.OPUS_OK

    def opus_repacketizer_get_nb_frames(self, ptr):
        return self.frames[ptr]

    def opus_repacketizer_out_range(self, ptr, begin, end, data, maxlen):
        if begin < 0 or begin >= end or end > self.frames[ptr]:
            return c.OPUS_BAD_ARG
        if maxlen < end - begin:
            return c.OPUS_BUFFER_TOO_SMALL
        for index in range(end - begin):
            data[index] = begin + index
        return end - begin

    def opus_repacketizer_out(self, ptr, data, maxlen):
        return self.opus_repacketizer_out_range(ptr, 0, self.frames[ptr], data, maxlen)


@pytest.fixture
def fake_lib():
    lib = FakeLibrary()
    install_backend(lib)
    yield lib
    reset_backend()


@pytest.fixture
def native():
    reset_backend()
    try:
        lib = load_backend()
    except BackendUnavailableError as exc:
        pytest.skip(f"libopus unavailable: {exc}")
    yield lib
    reset_backend()

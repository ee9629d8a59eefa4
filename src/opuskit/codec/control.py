"""Typed get/set protocol over the variadic ``*_ctl`` entry points.

libopus multiplexes every codec parameter through one call per handle kind,
``opus_<kind>_ctl(handle, request, ...)``, where the trailing argument is an
input value, an output pointer, or nothing. Here each request is a
:class:`CtlRequest` that knows its selector and how to move between the raw
integer and the typed value, and :class:`ControlChannel` is the one place
where a request is dispatched, checked and decoded.
"""

from __future__ import annotations

import ctypes
import enum
import numbers
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Optional

from ..native import constants as c
from ..native.errors import bad_arg, check
from ..native.lengths import INT32_MAX
from .types import Application, Bandwidth, Bitrate, Channels, FrameSize, Signal

if TYPE_CHECKING:  # pragma: no cover - typing hints only
    from .handles import NativeHandle

INT32_MIN = -INT32_MAX - 1


class CtlDirection(enum.Enum):
    GET = "get"
    SET = "set"
    ACTION = "action"


@dataclass(frozen=True)
class CtlRequest:
    """One control request: selector plus the rules for its payload."""

    name: str
    request_id: int
    direction: CtlDirection
    encode: Optional[Callable[[Any, str], int]] = None
    decode: Optional[Callable[[int, str], Any]] = None
    out_type: Any = ctypes.c_int32


def _getter(name: str, request_id: int, decode: Callable[[int, str], Any], out_type: Any = ctypes.c_int32) -> CtlRequest:
    return CtlRequest(name, request_id, CtlDirection.GET, decode=decode, out_type=out_type)


def _setter(name: str, request_id: int, encode: Callable[[Any, str], int]) -> CtlRequest:
    return CtlRequest(name, request_id, CtlDirection.SET, encode=encode)


# -- payload rules ---------------------------------------------------------


def int32_arg(value: Any, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise bad_arg(what)
    if not INT32_MIN <= value <= INT32_MAX:
        raise bad_arg(what)
    return int(value)


def u8_arg(value: Any, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral) or not 0 <= value <= 255:
        raise bad_arg(what)
    return int(value)


def _raw_to_int(raw: int, what: str) -> int:
    return int(raw)


def _raw_to_uint(raw: int, what: str) -> int:
    if raw < 0:
        raise bad_arg(what)
    return int(raw)


def _bool_to_raw(value: Any, what: str) -> int:
    return 1 if value else 0


def _raw_to_bool(raw: int, what: str) -> bool:
    return raw != 0


def _enum_to_raw(enum_type: Any) -> Callable[[Any, str], int]:
    def encode(value: Any, what: str) -> int:
        if not isinstance(value, enum_type):
            raise bad_arg(what)
        return value.raw

    return encode


def _bitrate_to_raw(value: Any, what: str) -> int:
    if not isinstance(value, Bitrate):
        raise bad_arg(what)
    return int32_arg(value.raw, what)


def _raw_to_bitrate(raw: int, what: str) -> Bitrate:
    return Bitrate.from_raw(raw)


def _force_channels_to_raw(value: Optional[Channels], what: str) -> int:
    if value is None:
        return c.OPUS_AUTO
    if not isinstance(value, Channels):
        raise bad_arg(what)
    return value.raw


def _raw_to_force_channels(raw: int, what: str) -> Optional[Channels]:
    if raw == c.OPUS_AUTO:
        return None
    return Channels.from_raw(raw, what)


# -- generic requests (every handle kind) -----------------------------------

RESET_STATE = CtlRequest("OPUS_RESET_STATE", c.OPUS_RESET_STATE, CtlDirection.ACTION)
GET_FINAL_RANGE = _getter("OPUS_GET_FINAL_RANGE_REQUEST", c.OPUS_GET_FINAL_RANGE_REQUEST, _raw_to_int, ctypes.c_uint32)
GET_BANDWIDTH = _getter("OPUS_GET_BANDWIDTH_REQUEST", c.OPUS_GET_BANDWIDTH_REQUEST, Bandwidth.from_raw)
GET_SAMPLE_RATE = _getter("OPUS_GET_SAMPLE_RATE_REQUEST", c.OPUS_GET_SAMPLE_RATE_REQUEST, _raw_to_uint)
SET_PHASE_INVERSION_DISABLED = _setter(
    "OPUS_SET_PHASE_INVERSION_DISABLED_REQUEST", c.OPUS_SET_PHASE_INVERSION_DISABLED_REQUEST, _bool_to_raw
)
GET_PHASE_INVERSION_DISABLED = _getter(
    "OPUS_GET_PHASE_INVERSION_DISABLED_REQUEST", c.OPUS_GET_PHASE_INVERSION_DISABLED_REQUEST, _raw_to_bool
)
GET_IN_DTX = _getter("OPUS_GET_IN_DTX_REQUEST", c.OPUS_GET_IN_DTX_REQUEST, _raw_to_bool)

# -- encoder requests ------------------------------------------------------

SET_COMPLEXITY = _setter("OPUS_SET_COMPLEXITY_REQUEST", c.OPUS_SET_COMPLEXITY_REQUEST, int32_arg)
GET_COMPLEXITY = _getter("OPUS_GET_COMPLEXITY_REQUEST", c.OPUS_GET_COMPLEXITY_REQUEST, _raw_to_int)
SET_BITRATE = _setter("OPUS_SET_BITRATE_REQUEST", c.OPUS_SET_BITRATE_REQUEST, _bitrate_to_raw)
GET_BITRATE = _getter("OPUS_GET_BITRATE_REQUEST", c.OPUS_GET_BITRATE_REQUEST, _raw_to_bitrate)
SET_VBR = _setter("OPUS_SET_VBR_REQUEST", c.OPUS_SET_VBR_REQUEST, _bool_to_raw)
GET_VBR = _getter("OPUS_GET_VBR_REQUEST", c.OPUS_GET_VBR_REQUEST, _raw_to_bool)
SET_VBR_CONSTRAINT = _setter("OPUS_SET_VBR_CONSTRAINT_REQUEST", c.OPUS_SET_VBR_CONSTRAINT_REQUEST, _bool_to_raw)
GET_VBR_CONSTRAINT = _getter("OPUS_GET_VBR_CONSTRAINT_REQUEST", c.OPUS_GET_VBR_CONSTRAINT_REQUEST, _raw_to_bool)
SET_FORCE_CHANNELS = _setter(
    "OPUS_SET_FORCE_CHANNELS_REQUEST", c.OPUS_SET_FORCE_CHANNELS_REQUEST, _force_channels_to_raw
)
GET_FORCE_CHANNELS = _getter(
    "OPUS_GET_FORCE_CHANNELS_REQUEST", c.OPUS_GET_FORCE_CHANNELS_REQUEST, _raw_to_force_channels
)
SET_MAX_BANDWIDTH = _setter(
    "OPUS_SET_MAX_BANDWIDTH_REQUEST", c.OPUS_SET_MAX_BANDWIDTH_REQUEST, _enum_to_raw(Bandwidth)
)
GET_MAX_BANDWIDTH = _getter("OPUS_GET_MAX_BANDWIDTH_REQUEST", c.OPUS_GET_MAX_BANDWIDTH_REQUEST, Bandwidth.from_raw)
SET_BANDWIDTH = _setter("OPUS_SET_BANDWIDTH_REQUEST", c.OPUS_SET_BANDWIDTH_REQUEST, _enum_to_raw(Bandwidth))
SET_SIGNAL = _setter("OPUS_SET_SIGNAL_REQUEST", c.OPUS_SET_SIGNAL_REQUEST, _enum_to_raw(Signal))
GET_SIGNAL = _getter("OPUS_GET_SIGNAL_REQUEST", c.OPUS_GET_SIGNAL_REQUEST, Signal.from_raw)
SET_APPLICATION = _setter("OPUS_SET_APPLICATION_REQUEST", c.OPUS_SET_APPLICATION_REQUEST, _enum_to_raw(Application))
GET_APPLICATION = _getter("OPUS_GET_APPLICATION_REQUEST", c.OPUS_GET_APPLICATION_REQUEST, Application.from_raw)
GET_LOOKAHEAD = _getter("OPUS_GET_LOOKAHEAD_REQUEST", c.OPUS_GET_LOOKAHEAD_REQUEST, _raw_to_int)
SET_INBAND_FEC = _setter("OPUS_SET_INBAND_FEC_REQUEST", c.OPUS_SET_INBAND_FEC_REQUEST, _bool_to_raw)
GET_INBAND_FEC = _getter("OPUS_GET_INBAND_FEC_REQUEST", c.OPUS_GET_INBAND_FEC_REQUEST, _raw_to_bool)
SET_PACKET_LOSS_PERC = _setter("OPUS_SET_PACKET_LOSS_PERC_REQUEST", c.OPUS_SET_PACKET_LOSS_PERC_REQUEST, int32_arg)
GET_PACKET_LOSS_PERC = _getter("OPUS_GET_PACKET_LOSS_PERC_REQUEST", c.OPUS_GET_PACKET_LOSS_PERC_REQUEST, _raw_to_int)
SET_DTX = _setter("OPUS_SET_DTX_REQUEST", c.OPUS_SET_DTX_REQUEST, _bool_to_raw)
GET_DTX = _getter("OPUS_GET_DTX_REQUEST", c.OPUS_GET_DTX_REQUEST, _raw_to_bool)
SET_LSB_DEPTH = _setter("OPUS_SET_LSB_DEPTH_REQUEST", c.OPUS_SET_LSB_DEPTH_REQUEST, int32_arg)
GET_LSB_DEPTH = _getter("OPUS_GET_LSB_DEPTH_REQUEST", c.OPUS_GET_LSB_DEPTH_REQUEST, _raw_to_int)
SET_EXPERT_FRAME_DURATION = _setter(
    "OPUS_SET_EXPERT_FRAME_DURATION_REQUEST", c.OPUS_SET_EXPERT_FRAME_DURATION_REQUEST, _enum_to_raw(FrameSize)
)
GET_EXPERT_FRAME_DURATION = _getter(
    "OPUS_GET_EXPERT_FRAME_DURATION_REQUEST", c.OPUS_GET_EXPERT_FRAME_DURATION_REQUEST, FrameSize.from_raw
)
SET_PREDICTION_DISABLED = _setter(
    "OPUS_SET_PREDICTION_DISABLED_REQUEST", c.OPUS_SET_PREDICTION_DISABLED_REQUEST, _bool_to_raw
)
GET_PREDICTION_DISABLED = _getter(
    "OPUS_GET_PREDICTION_DISABLED_REQUEST", c.OPUS_GET_PREDICTION_DISABLED_REQUEST, _raw_to_bool
)

# -- decoder requests ------------------------------------------------------

SET_GAIN = _setter("OPUS_SET_GAIN_REQUEST", c.OPUS_SET_GAIN_REQUEST, int32_arg)
GET_GAIN = _getter("OPUS_GET_GAIN_REQUEST", c.OPUS_GET_GAIN_REQUEST, _raw_to_int)
GET_LAST_PACKET_DURATION = _getter(
    "OPUS_GET_LAST_PACKET_DURATION_REQUEST", c.OPUS_GET_LAST_PACKET_DURATION_REQUEST, _raw_to_uint
)
GET_PITCH = _getter("OPUS_GET_PITCH_REQUEST", c.OPUS_GET_PITCH_REQUEST, _raw_to_int)


class ControlChannel:
    """Dispatches :class:`CtlRequest` objects against one handle."""

    def __init__(self, handle: "NativeHandle", function: str) -> None:
        self._handle = handle
        self._function = function

    def _label(self, request: CtlRequest) -> str:
        return f"{self._function}({request.name})"

    def _call(self, request: CtlRequest, *payload: Any) -> int:
        label = self._label(request)
        ctl = getattr(self._handle._lib, self._function)
        with self._handle._claim(label) as ptr:
            code = ctl(ctypes.c_void_p(ptr), ctypes.c_int(request.request_id), *payload)
        return check(label, code)

    def get(self, request: CtlRequest) -> Any:
        if request.direction is not CtlDirection.GET:
            raise ValueError(f"{request.name} is not a get request")
        out = request.out_type(0)
        self._call(request, ctypes.byref(out))
        return request.decode(out.value, self._label(request))

    def set(self, request: CtlRequest, value: Any) -> None:
        if request.direction is not CtlDirection.SET:
            raise ValueError(f"{request.name} is not a set request")
        raw = request.encode(value, self._label(request))
        self._call(request, ctypes.c_int32(raw))

    def invoke(self, request: CtlRequest) -> None:
        if request.direction is not CtlDirection.ACTION:
            raise ValueError(f"{request.name} takes a payload")
        self._call(request)


__all__ = ["ControlChannel", "CtlDirection", "CtlRequest", "int32_arg", "u8_arg"]

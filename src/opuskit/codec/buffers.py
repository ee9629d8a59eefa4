"""Adapters between Python buffers and native pointers."""

from __future__ import annotations

import ctypes
from typing import Any

import numpy as np

from ..native.errors import bad_arg

_CTYPES = {
    np.dtype(np.uint8): ctypes.c_ubyte,
    np.dtype(np.int16): ctypes.c_int16,
    np.dtype(np.float32): ctypes.c_float,
}

_BYTES_LIKE = (bytes, bytearray, memoryview)


def as_input(data: Any, dtype: Any, function: str) -> np.ndarray:
    """Return a flat, contiguous view (or copy) of *data* as *dtype*.

    Bytes-like objects are reinterpreted in place. Arrays must already carry
    *dtype*. Other sequences are converted only when every value fits: integer
    targets take integers within range, float targets take any real number.
    Anything else is ``BAD_ARG``.
    """

    target = np.dtype(dtype)
    try:
        if isinstance(data, _BYTES_LIKE):
            return np.frombuffer(data, dtype=target)
        if isinstance(data, np.ndarray):
            if data.dtype != target:
                raise bad_arg(function)
            return np.ascontiguousarray(data).reshape(-1)
        values = np.asarray(data)
    except (TypeError, ValueError):
        raise bad_arg(function) from None

    if values.size == 0:
        return np.zeros(0, dtype=target)
    if values.dtype.kind in "iu":
        if target.kind in "iu":
            limits = np.iinfo(target)
            if values.min() < limits.min or values.max() > limits.max:
                raise bad_arg(function)
    elif values.dtype.kind != "f" or target.kind != "f":
        raise bad_arg(function)
    return np.ascontiguousarray(values, dtype=target).reshape(-1)


def as_output(buffer: Any, dtype: Any, function: str) -> np.ndarray:
    """Return a writable flat view of *buffer*; never copies."""

    if isinstance(buffer, np.ndarray):
        if buffer.dtype != np.dtype(dtype) or not buffer.flags.c_contiguous:
            raise bad_arg(function)
        view = buffer.reshape(-1)
    else:
        try:
            view = np.frombuffer(buffer, dtype=dtype)
        except (TypeError, ValueError):
            raise bad_arg(function) from None
    if not view.flags.writeable:
        raise bad_arg(function)
    return view


def pointer(array: np.ndarray) -> Any:
    """Typed ctypes pointer to the first element of *array*."""

    return array.ctypes.data_as(ctypes.POINTER(_CTYPES[array.dtype]))


__all__ = ["as_input", "as_output", "pointer"]

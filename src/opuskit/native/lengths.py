"""Conversion of Python sizes into the native ``int`` parameter type."""

from __future__ import annotations

from typing import Sized

INT32_MAX = 2**31 - 1


def check_len(value: int) -> int:
    """Return *value* if it is representable as a non-negative native ``int``.

    Anything else is a programming error on the caller's side (a buffer that
    could never be described to libopus), so this raises :class:`OverflowError`
    rather than an :class:`~opuskit.native.errors.OpusError`.
    """

    if value < 0 or value > INT32_MAX:
        raise OverflowError(f"length out of range: {value}")
    return int(value)


def buffer_len(buffer: Sized) -> int:
    """Return ``len(buffer)`` checked with :func:`check_len`."""

    return check_len(len(buffer))


__all__ = ["INT32_MAX", "buffer_len", "check_len"]

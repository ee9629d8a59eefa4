"""Translation of native status codes into typed exceptions."""

from __future__ import annotations

from enum import IntEnum

from ..exceptions import OpusKitError
from . import constants as c


class ErrorKind(IntEnum):
    """Closed classification of libopus status codes."""

    BAD_ARG = c.OPUS_BAD_ARG
    BUFFER_TOO_SMALL = c.OPUS_BUFFER_TOO_SMALL
    INTERNAL_ERROR = c.OPUS_INTERNAL_ERROR
    INVALID_PACKET = c.OPUS_INVALID_PACKET
    UNIMPLEMENTED = c.OPUS_UNIMPLEMENTED
    INVALID_STATE = c.OPUS_INVALID_STATE
    ALLOC_FAIL = c.OPUS_ALLOC_FAIL
    UNKNOWN = -8

    @classmethod
    def from_code(cls, code: int) -> "ErrorKind":
        """Classify *code*; anything outside the known set is ``UNKNOWN``."""

        try:
            return cls(code)
        except ValueError:
            return cls.UNKNOWN

    def description(self) -> str:
        """Human-readable string for this kind, as reported by libopus."""

        from .loader import get_backend

        return get_backend().strerror(int(self))


class OpusError(OpusKitError):
    """An error reported by (or on behalf of) the native engine.

    ``function`` names the native call that failed. For control requests it
    has the form ``"opus_encoder_ctl(OPUS_SET_BITRATE_REQUEST)"`` so the
    failing parameter is visible without inspecting internal state.
    """

    def __init__(self, function: str, code: int) -> None:
        self._function = function
        self._code = int(code)
        self._kind = ErrorKind.from_code(code)
        self._description = self._kind.description()
        super().__init__(function, self._kind)

    @property
    def function(self) -> str:
        return self._function

    @property
    def kind(self) -> ErrorKind:
        return self._kind

    @property
    def code(self) -> int:
        """Raw status code as returned by the native call."""
        return self._code

    @property
    def description(self) -> str:
        return self._description

    def __str__(self) -> str:
        return f"{self._function}: {self._description}"

    def __repr__(self) -> str:
        return f"OpusError(function={self._function!r}, kind={self._kind.name})"


def check(function: str, code: int) -> int:
    """Raise :class:`OpusError` for a negative *code*, else return it."""

    if code < 0:
        raise OpusError(function, code)
    return code


def bad_arg(function: str) -> OpusError:
    """Build a ``BAD_ARG`` error for a value rejected on the Python side."""

    return OpusError(function, c.OPUS_BAD_ARG)


__all__ = ["ErrorKind", "OpusError", "bad_arg", "check"]

"""Native boundary: provider loading, length checks and status translation."""

from .errors import ErrorKind, OpusError, bad_arg, check
from .lengths import INT32_MAX, buffer_len, check_len
from .loader import (
    NativeLibrary,
    get_backend,
    install_backend,
    load_backend,
    reset_backend,
    version,
)

__all__ = [
    "INT32_MAX",
    "ErrorKind",
    "NativeLibrary",
    "OpusError",
    "bad_arg",
    "buffer_len",
    "check",
    "check_len",
    "get_backend",
    "install_backend",
    "load_backend",
    "reset_backend",
    "version",
]

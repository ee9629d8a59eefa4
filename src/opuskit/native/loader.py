"""Native provider selection and ctypes prototypes for libopus.

Every handle in opuskit talks to libopus through a single
:class:`NativeLibrary` chosen once per process by :func:`load_backend`.
Providers only differ in how the shared library is located; the prototypes
declared here are identical for all of them.
"""

from __future__ import annotations

import ctypes
import ctypes.util
import importlib
import logging
import threading
from typing import Callable, Dict, List, Optional, Tuple

from ..config import OpusKitConfig
from ..exceptions import BackendUnavailableError, ConfigurationError

logger = logging.getLogger(__name__)

c_int = ctypes.c_int
c_int16 = ctypes.c_int16
c_int32 = ctypes.c_int32
c_float = ctypes.c_float
c_void_p = ctypes.c_void_p
u8_p = ctypes.POINTER(ctypes.c_ubyte)
i16_p = ctypes.POINTER(ctypes.c_int16)
f32_p = ctypes.POINTER(ctypes.c_float)
int_p = ctypes.POINTER(ctypes.c_int)

# ``None`` argtypes marks a variadic control entry point.
_PROTOTYPES: Dict[str, Tuple[object, Optional[List[object]]]] = {
    "opus_strerror": (ctypes.c_char_p, [c_int]),
    "opus_get_version_string": (ctypes.c_char_p, []),
    # encoder
    "opus_encoder_create": (c_void_p, [c_int32, c_int, c_int, int_p]),
    "opus_encoder_destroy": (None, [c_void_p]),
    "opus_encode": (c_int32, [c_void_p, i16_p, c_int, u8_p, c_int32]),
    "opus_encode_float": (c_int32, [c_void_p, f32_p, c_int, u8_p, c_int32]),
    "opus_encoder_ctl": (c_int, None),
    # decoder
    "opus_decoder_create": (c_void_p, [c_int32, c_int, int_p]),
    "opus_decoder_destroy": (None, [c_void_p]),
    "opus_decode": (c_int, [c_void_p, u8_p, c_int32, i16_p, c_int, c_int]),
    "opus_decode_float": (c_int, [c_void_p, u8_p, c_int32, f32_p, c_int, c_int]),
    "opus_decoder_ctl": (c_int, None),
    "opus_decoder_get_nb_samples": (c_int, [c_void_p, u8_p, c_int32]),
    # packet analysis
    "opus_packet_get_bandwidth": (c_int, [u8_p]),
    "opus_packet_get_nb_channels": (c_int, [u8_p]),
    "opus_packet_get_nb_frames": (c_int, [u8_p, c_int32]),
    "opus_packet_get_nb_samples": (c_int, [u8_p, c_int32, c_int32]),
    "opus_packet_get_samples_per_frame": (c_int, [u8_p, c_int32]),
    "opus_packet_parse": (c_int, [u8_p, c_int32, u8_p, ctypes.POINTER(u8_p), ctypes.POINTER(c_int16), int_p]),
    "opus_packet_pad": (c_int, [u8_p, c_int32, c_int32]),
    "opus_packet_unpad": (c_int32, [u8_p, c_int32]),
    "opus_multistream_packet_pad": (c_int, [u8_p, c_int32, c_int32, c_int]),
    "opus_multistream_packet_unpad": (c_int32, [u8_p, c_int32, c_int]),
    "opus_pcm_soft_clip": (None, [f32_p, c_int, c_int, f32_p]),
    # repacketizer
    "opus_repacketizer_create": (c_void_p, []),
    "opus_repacketizer_destroy": (None, [c_void_p]),
    "opus_repacketizer_init": (c_void_p, [c_void_p]),
    "opus_repacketizer_cat": (c_int, [c_void_p, u8_p, c_int32]),
    "opus_repacketizer_get_nb_frames": (c_int, [c_void_p]),
    "opus_repacketizer_out": (c_int32, [c_void_p, u8_p, c_int32]),
    "opus_repacketizer_out_range": (c_int32, [c_void_p, c_int, c_int, u8_p, c_int32]),
    # multistream
    "opus_multistream_encoder_create": (c_void_p, [c_int32, c_int, c_int, c_int, u8_p, c_int, int_p]),
    "opus_multistream_surround_encoder_create": (
        c_void_p,
        [c_int32, c_int, c_int, int_p, int_p, u8_p, c_int, int_p],
    ),
    "opus_multistream_encoder_destroy": (None, [c_void_p]),
    "opus_multistream_encode": (c_int, [c_void_p, i16_p, c_int, u8_p, c_int32]),
    "opus_multistream_encode_float": (c_int, [c_void_p, f32_p, c_int, u8_p, c_int32]),
    "opus_multistream_encoder_ctl": (c_int, None),
    "opus_multistream_decoder_create": (c_void_p, [c_int32, c_int, c_int, c_int, u8_p, int_p]),
    "opus_multistream_decoder_destroy": (None, [c_void_p]),
    "opus_multistream_decode": (c_int, [c_void_p, u8_p, c_int32, i16_p, c_int, c_int]),
    "opus_multistream_decode_float": (c_int, [c_void_p, u8_p, c_int32, f32_p, c_int, c_int]),
    "opus_multistream_decoder_ctl": (c_int, None),
}


class NativeLibrary:
    """A loaded libopus with typed entry points bound as attributes."""

    def __init__(self, cdll: ctypes.CDLL, origin: str) -> None:
        self.origin = origin
        missing = []
        for name, (restype, argtypes) in _PROTOTYPES.items():
            # item access yields a private function object, so prototypes set
            # here never leak into another user of the same CDLL
            try:
                func = cdll[name]
            except AttributeError:
                missing.append(name)
                continue
            func.restype = restype
            if argtypes is not None:
                func.argtypes = argtypes
            setattr(self, name, func)
        if missing:
            raise BackendUnavailableError(
                f"libopus at {origin} is missing symbols: {', '.join(missing)}"
            )

    def strerror(self, code: int) -> str:
        # libopus returns a static ASCII string for every input
        return self.opus_strerror(code).decode("ascii")

    def version_string(self) -> str:
        return self.opus_get_version_string().decode("ascii")

    def __repr__(self) -> str:
        return f"NativeLibrary(origin={self.origin!r})"


def _load_system(config: OpusKitConfig) -> Tuple[ctypes.CDLL, str]:
    location = ctypes.util.find_library("opus")
    if location is None:
        raise BackendUnavailableError(
            "libopus could not be found. Install it or point OPUSKIT_LIBRARY at the shared library."
        )
    return _open(location), location


def _load_path(config: OpusKitConfig) -> Tuple[ctypes.CDLL, str]:
    if not config.library_path:
        raise ConfigurationError("backend 'path' requires OPUSKIT_LIBRARY to be set")
    return _open(config.library_path), config.library_path


def _load_opuslib(config: OpusKitConfig) -> Tuple[ctypes.CDLL, str]:
    try:
        module = importlib.import_module("opuslib.api")
    except ModuleNotFoundError as exc:
        raise BackendUnavailableError(
            "opuslib is not installed. Install the 'opuslib' extra to use this backend."
        ) from exc
    except Exception as exc:  # opuslib raises a bare Exception when libopus is absent
        raise BackendUnavailableError(f"opuslib failed to load libopus: {exc}") from exc
    return module.libopus, "opuslib"


def _open(location: str) -> ctypes.CDLL:
    try:
        return ctypes.CDLL(location)
    except OSError as exc:
        raise BackendUnavailableError(f"failed to load libopus from {location}: {exc}") from exc


_PROVIDERS: Dict[str, Callable[[OpusKitConfig], Tuple[ctypes.CDLL, str]]] = {
    "system": _load_system,
    "path": _load_path,
    "opuslib": _load_opuslib,
}

_backend: Optional[NativeLibrary] = None
_backend_lock = threading.Lock()


def load_backend(config: Optional[OpusKitConfig] = None) -> NativeLibrary:
    """Load libopus through the configured provider and make it current."""

    global _backend
    cfg = config or OpusKitConfig.from_env()
    cdll, origin = _PROVIDERS[cfg.backend](cfg)
    library = NativeLibrary(cdll, origin)
    logger.debug("loaded libopus (%s backend) from %s", cfg.backend, origin)
    with _backend_lock:
        _backend = library
    return library


def get_backend() -> NativeLibrary:
    """Return the current library, loading it from the environment on first use."""

    with _backend_lock:
        backend = _backend
    if backend is None:
        backend = load_backend()
    return backend


def install_backend(library: NativeLibrary) -> None:
    """Replace the process-wide library (embedding, tests)."""

    global _backend
    with _backend_lock:
        _backend = library


def reset_backend() -> None:
    global _backend
    with _backend_lock:
        _backend = None


def version() -> str:
    """Return the libopus version string.

    A ``"-fixed"`` substring identifies a fixed-point build.
    """

    return get_backend().version_string()


__all__ = [
    "NativeLibrary",
    "get_backend",
    "install_backend",
    "load_backend",
    "reset_backend",
    "version",
]

"""Ownership and exclusive access for opaque native engine pointers."""

from __future__ import annotations

import ctypes
import logging
import threading
import weakref
from contextlib import contextmanager
from typing import Any, Callable, Iterator

from ..exceptions import ConcurrentAccessError
from ..native import constants as c
from ..native.errors import OpusError
from ..native.loader import NativeLibrary

logger = logging.getLogger(__name__)


def create_native(function: str, create: Callable[..., Any], *args: Any) -> int:
    """Call a ``*_create`` entry point that reports failure through ``int *error``.

    A null pointer without an error code is reported as ``ALLOC_FAIL``.
    """

    error = ctypes.c_int(c.OPUS_OK)
    ptr = create(*args, ctypes.byref(error))
    if error.value != c.OPUS_OK:
        raise OpusError(function, error.value)
    if not ptr:
        raise OpusError(function, c.OPUS_ALLOC_FAIL)
    return ptr


def _teardown(destroy: Callable[[int], None], ptr: int, name: str) -> None:
    destroy(ptr)
    logger.debug("destroyed %s at 0x%x", name, ptr)


class NativeHandle:
    """Base class for objects owning exactly one native engine instance.

    The native state is torn down exactly once: by :meth:`close`, by leaving
    a ``with`` block, or when the object is garbage collected. A handle may be
    passed between threads, but only one call may be in flight at a time;
    a second concurrent caller gets :class:`ConcurrentAccessError`.
    """

    _destroy_function = ""

    def __init__(self, library: NativeLibrary, ptr: int) -> None:
        self._lib = library
        self._ptr = ptr
        self._lock = threading.Lock()
        self._finalizer = weakref.finalize(
            self,
            _teardown,
            getattr(library, self._destroy_function),
            ptr,
            type(self).__name__,
        )
        logger.debug("created %s at 0x%x", type(self).__name__, ptr)

    @contextmanager
    def _claim(self, function: str) -> Iterator[int]:
        """Exclusive access to the live native pointer for one call."""

        if not self._lock.acquire(blocking=False):
            raise ConcurrentAccessError(type(self).__name__, function)
        try:
            if not self._finalizer.alive:
                raise OpusError(function, c.OPUS_INVALID_STATE)
            yield self._ptr
        finally:
            self._lock.release()

    @property
    def closed(self) -> bool:
        return not self._finalizer.alive

    def close(self) -> None:
        """Destroy the native instance. Calling this more than once is harmless."""

        if self.closed:
            return
        with self._claim(self._destroy_function):
            self._finalizer()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


__all__ = ["NativeHandle", "create_native"]

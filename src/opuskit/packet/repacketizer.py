"""Merge and split Opus packets without re-encoding.

A :class:`Repacketizer` has a single native accumulation buffer. Each call
to :meth:`Repacketizer.begin` resets it and hands out a
:class:`RepacketizerSession`; sessions from earlier ``begin`` calls are stale
and refuse every operation. The native state keeps pointers into the packets
passed to :meth:`RepacketizerSession.cat`, so the session holds on to them
and checks, before emitting, that none was modified in the meantime.
"""

from __future__ import annotations

import logging
import zlib
from contextlib import contextmanager
from typing import Any, Iterable, Iterator, List, Optional, Tuple

import numpy as np

from ..codec.buffers import as_input, as_output, pointer
from ..codec.handles import NativeHandle
from ..native import constants as c
from ..native.errors import OpusError, check
from ..native.lengths import buffer_len, check_len
from ..native.loader import get_backend

logger = logging.getLogger(__name__)


class Repacketizer(NativeHandle):
    """Owner of one native repacketizer.

    >>> with Repacketizer() as rp:
    ...     rp.begin().cat(b"\\xf8\\xff\\xfe").cat(b"\\xf8\\x47\\x47").to_bytes()
    b'\\xf9\\xff\\xfeGG'
    """

    _destroy_function = "opus_repacketizer_destroy"

    def __init__(self) -> None:
        library = get_backend()
        ptr = library.opus_repacketizer_create()
        if not ptr:
            raise OpusError("opus_repacketizer_create", c.OPUS_ALLOC_FAIL)
        super().__init__(library, ptr)
        self._generation = 0

    @property
    def generation(self) -> int:
        """Number of sessions started so far."""
        return self._generation

    def begin(self) -> "RepacketizerSession":
        """Reset the accumulated frames and start a new session."""

        with self._claim("opus_repacketizer_init") as ptr:
            self._lib.opus_repacketizer_init(ptr)
            self._generation += 1
            generation = self._generation
        logger.debug("repacketizer session %d started", generation)
        return RepacketizerSession(self, generation)

    @contextmanager
    def _claim_session(self, generation: int, function: str) -> Iterator[int]:
        with self._claim(function) as ptr:
            if generation != self._generation:
                raise OpusError(function, c.OPUS_INVALID_STATE)
            yield ptr

    def combine(self, packets: Iterable[Any], buffer: Any) -> int:
        """Merge every frame of *packets* into one packet written to *buffer*.

        Returns the length of the merged packet.
        """

        with self.begin() as session:
            for packet in packets:
                session.cat(packet)
            return session.out(buffer)

    def split(self, packet: Any) -> List[bytes]:
        """Return one single-frame packet for every frame in *packet*."""

        with self.begin() as session:
            session.cat(packet)
            return [session.range_to_bytes(index, index + 1) for index in range(session.get_nb_frames())]

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"<Repacketizer generation={self._generation} {state}>"


class RepacketizerSession:
    """One accumulation of frames on a :class:`Repacketizer`."""

    def __init__(self, owner: Repacketizer, generation: int) -> None:
        self._owner = owner
        self._generation = generation
        self._borrowed: List[Tuple[np.ndarray, int]] = []
        self._released = False

    @contextmanager
    def _active(self, function: str) -> Iterator[int]:
        if self._released:
            raise OpusError(function, c.OPUS_INVALID_STATE)
        with self._owner._claim_session(self._generation, function) as ptr:
            yield ptr

    def _verify(self, function: str) -> None:
        for data, crc in self._borrowed:
            if zlib.crc32(data) != crc:
                raise OpusError(function, c.OPUS_INVALID_STATE)

    @property
    def stale(self) -> bool:
        """True once the session was closed or superseded by a newer ``begin``."""

        return self._released or self._owner.closed or self._generation != self._owner.generation

    def cat(self, packet: Any) -> "RepacketizerSession":
        """Append the frames of *packet*; returns the session for chaining.

        All packets of a session must share the same TOC configuration and
        the total may not exceed 120 ms, otherwise ``INVALID_PACKET``.
        """

        function = "opus_repacketizer_cat"
        data = as_input(packet, np.uint8, function)
        with self._active(function) as ptr:
            check(function, self._owner._lib.opus_repacketizer_cat(ptr, pointer(data), buffer_len(data)))
        self._borrowed.append((data, zlib.crc32(data)))
        return self

    def get_nb_frames(self) -> int:
        function = "opus_repacketizer_get_nb_frames"
        with self._active(function) as ptr:
            return self._owner._lib.opus_repacketizer_get_nb_frames(ptr)

    def out(self, buffer: Any) -> int:
        """Write every accumulated frame as one packet into *buffer*.

        Returns the packet length; ``BUFFER_TOO_SMALL`` if it does not fit.
        """

        function = "opus_repacketizer_out"
        out = as_output(buffer, np.uint8, function)
        with self._active(function) as ptr:
            self._verify(function)
            code = self._owner._lib.opus_repacketizer_out(ptr, pointer(out), buffer_len(out))
        return check(function, code)

    def out_range(self, begin: int, end: int, buffer: Any) -> int:
        """Write frames ``begin`` up to (excluding) ``end`` as one packet into *buffer*."""

        function = "opus_repacketizer_out_range"
        out = as_output(buffer, np.uint8, function)
        with self._active(function) as ptr:
            self._verify(function)
            code = self._owner._lib.opus_repacketizer_out_range(
                ptr, check_len(begin), check_len(end), pointer(out), buffer_len(out)
            )
        return check(function, code)

    def _capacity(self) -> int:
        # frames never grow; each may gain a two byte length field plus TOC and count bytes
        return sum(len(data) for data, _ in self._borrowed) + 2 * c.MAX_FRAMES + 2

    def to_bytes(self, max_size: Optional[int] = None) -> bytes:
        """Like :meth:`out` into a fresh buffer, returned truncated to the packet."""

        buffer = bytearray(check_len(self._capacity() if max_size is None else max_size))
        length = self.out(buffer)
        del buffer[length:]
        return bytes(buffer)

    def range_to_bytes(self, begin: int, end: int, max_size: Optional[int] = None) -> bytes:
        buffer = bytearray(check_len(self._capacity() if max_size is None else max_size))
        length = self.out_range(begin, end, buffer)
        del buffer[length:]
        return bytes(buffer)

    def close(self) -> None:
        """Release the borrowed packets; the session cannot be used afterwards."""

        self._borrowed.clear()
        self._released = True

    def __enter__(self):
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "stale" if self.stale else "active"
        return f"<RepacketizerSession generation={self._generation} packets={len(self._borrowed)} {state}>"


__all__ = ["Repacketizer", "RepacketizerSession"]

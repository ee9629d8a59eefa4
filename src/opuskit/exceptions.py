"""Custom exception hierarchy for the opuskit binding layer."""
from __future__ import annotations

from dataclasses import dataclass


class OpusKitError(Exception):
    """Base class for all opuskit errors."""


class ConfigurationError(OpusKitError):
    """Raised when user-supplied configuration is invalid."""


class BackendUnavailableError(ConfigurationError):
    """Raised when no native libopus provider can be loaded."""


@dataclass
class ConcurrentAccessError(OpusKitError):
    """Raised when a native handle is entered while another call is in flight."""

    handle: str
    function: str

    def __str__(self) -> str:
        return f"{self.function}: {self.handle} is already in use by another caller"


__all__ = [
    "BackendUnavailableError",
    "ConcurrentAccessError",
    "ConfigurationError",
    "OpusKitError",
]

"""Runtime configuration for opuskit."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .exceptions import ConfigurationError

BACKEND_ENV = "OPUSKIT_BACKEND"
LIBRARY_ENV = "OPUSKIT_LIBRARY"
LOG_LEVEL_ENV = "OPUSKIT_LOG_LEVEL"

DEFAULT_BACKEND = "system"
DEFAULT_LOG_LEVEL = "INFO"

BACKENDS = frozenset({"system", "path", "opuslib"})
LOG_LEVELS = frozenset({"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"})


@dataclass(frozen=True)
class OpusKitConfig:
    """Which native provider to load and how chatty to be about it."""

    backend: str = DEFAULT_BACKEND
    library_path: Optional[str] = None
    log_level: str = DEFAULT_LOG_LEVEL

    def __post_init__(self) -> None:
        object.__setattr__(self, "backend", self.backend.lower())
        object.__setattr__(self, "log_level", self.log_level.upper())
        if self.backend not in BACKENDS:
            choices = ", ".join(sorted(BACKENDS))
            raise ConfigurationError(f"unknown backend {self.backend!r}; expected one of: {choices}")
        if self.backend == "path" and not self.library_path:
            raise ConfigurationError(f"backend 'path' requires {LIBRARY_ENV} to be set")
        if self.log_level not in LOG_LEVELS:
            raise ConfigurationError(f"invalid log level: {self.log_level!r}")

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "OpusKitConfig":
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise ConfigurationError("configuration must be a mapping")
        library_path = data.get("library_path")
        backend = data.get("backend") or ("path" if library_path else DEFAULT_BACKEND)
        return cls(
            backend=str(backend),
            library_path=str(library_path) if library_path else None,
            log_level=str(data.get("log_level") or DEFAULT_LOG_LEVEL),
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "OpusKitConfig":
        """Build a configuration from ``OPUSKIT_*`` environment variables.

        Setting only ``OPUSKIT_LIBRARY`` selects the ``path`` backend.
        """

        env = os.environ if environ is None else environ
        return cls.from_dict(
            {
                "backend": env.get(BACKEND_ENV),
                "library_path": env.get(LIBRARY_ENV),
                "log_level": env.get(LOG_LEVEL_ENV),
            }
        )


__all__ = [
    "BACKENDS",
    "BACKEND_ENV",
    "DEFAULT_BACKEND",
    "DEFAULT_LOG_LEVEL",
    "LIBRARY_ENV",
    "LOG_LEVEL_ENV",
    "OpusKitConfig",
]

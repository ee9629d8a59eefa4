"""Logging utilities for opuskit."""

from __future__ import annotations

import logging
import os
from typing import Optional

from ..config import DEFAULT_LOG_LEVEL, LOG_LEVEL_ENV


def configure_logging(level: Optional[str] = None) -> None:
    """Configure the root logger for command line use."""
    log_level = (level or os.getenv(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL).upper()
    logging.basicConfig(level=getattr(logging, log_level, logging.INFO))

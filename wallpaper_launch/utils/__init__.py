"""Utility helpers for the launcher."""

from .binaries import Binaries, require_binary
from .logging import configure_logging

__all__ = ["Binaries", "configure_logging", "require_binary"]

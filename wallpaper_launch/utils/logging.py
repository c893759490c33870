"""
Logging helpers for wallpaper-launch.

Status lines and diagnostics go through the standard ``logging`` module so the
driver can switch verbosity without touching the launch logic.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

DEFAULT_FORMAT = "[%(asctime)s] %(levelname)-8s %(name)s: %(message)s"


def configure_logging(level: int = logging.INFO, format: Optional[str] = None) -> None:
    """
    Send launcher log records to stdout at ``level``.

    When a handler is already installed (pytest, an embedding script) only the
    level changes, so ``-v`` still takes effect.
    """

    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level)
        return

    logging.basicConfig(
        level=level,
        format=format or DEFAULT_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

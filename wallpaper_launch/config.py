"""
Launcher configuration.

Every filesystem location is derived from a single Steam install root so tests
can point the whole launcher at a temporary directory tree.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from .errors import ConfigurationError

ENV_STEAM_ROOT_VAR = "WALLPAPER_LAUNCH_STEAM_ROOT"

WALLPAPER_ENGINE_ID = 431960
SUPPORTED_ARCHES = ("64", "32")
DEFAULT_WINDOW_TIMEOUT = 20.0


class LaunchPathPolicy(str, Enum):
    """How each wallpaper instance is started."""

    AUTO_DETECT = "auto-detect"
    ALWAYS_DIRECT = "always-direct"


@dataclass(frozen=True)
class WindowWaitPolicy:
    """Upper bound for the window wait; ``timeout`` of ``None`` waits forever."""

    timeout: Optional[float] = DEFAULT_WINDOW_TIMEOUT

    @classmethod
    def bounded(cls, seconds: float) -> "WindowWaitPolicy":
        if not seconds > 0:
            raise ConfigurationError(f"window timeout must be a positive number of seconds, got {seconds!r}")
        return cls(timeout=float(seconds))

    @classmethod
    def unbounded(cls) -> "WindowWaitPolicy":
        return cls(timeout=None)

    @property
    def is_bounded(self) -> bool:
        return self.timeout is not None


def _default_steam_root() -> Path:
    env_root = os.environ.get(ENV_STEAM_ROOT_VAR)
    if env_root:
        return Path(env_root).expanduser()
    return Path.home() / ".steam" / "steam"


@dataclass(frozen=True)
class LaunchConfig:
    """Top level launcher configuration, built once at startup."""

    steam_root: Path
    app_id: int = WALLPAPER_ENGINE_ID
    width: int = 1920
    height: int = 1080
    poll_interval: float = 0.1
    window_timeout: Optional[float] = DEFAULT_WINDOW_TIMEOUT
    launch_path_policy: LaunchPathPolicy = LaunchPathPolicy.AUTO_DETECT
    # Proton exposes the real filesystem root as this drive.
    drive_prefix: str = "Z:"

    @classmethod
    def from_environment(cls, **overrides: Any) -> "LaunchConfig":
        steam_root = overrides.pop("steam_root", None)
        root = Path(steam_root).expanduser() if steam_root else _default_steam_root()
        return cls(steam_root=root, **overrides)

    # ------------------------------------------------------------------ paths

    @property
    def steamapps(self) -> Path:
        return self.steam_root / "steamapps"

    @property
    def common_dir(self) -> Path:
        return self.steamapps / "common"

    @property
    def compat_tools_dir(self) -> Path:
        return self.steam_root / "compatibilitytools.d"

    @property
    def compat_data_path(self) -> Path:
        return self.steamapps / "compatdata" / str(self.app_id)

    @property
    def workshop_content_path(self) -> Path:
        return self.steamapps / "workshop" / "content" / str(self.app_id)

    @property
    def renderer_dir(self) -> Path:
        return self.common_dir / "wallpaper_engine"

    # ------------------------------------------------------------------ helpers

    def renderer_executable(self, arch: str) -> Path:
        """
        Return the Wallpaper Engine executable for ``arch``.

        Raises :class:`ConfigurationError` when ``arch`` is not exactly ``"64"``
        or ``"32"`` or when the executable is not installed.
        """

        if arch not in SUPPORTED_ARCHES:
            raise ConfigurationError("arch must be 64 or 32")
        executable = self.renderer_dir / f"wallpaper{arch}.exe"
        if not executable.exists():
            raise ConfigurationError(f"Wallpaper Engine not found: {executable}")
        return executable

    def window_wait_policy(self) -> WindowWaitPolicy:
        if self.window_timeout is None:
            return WindowWaitPolicy.unbounded()
        return WindowWaitPolicy.bounded(self.window_timeout)

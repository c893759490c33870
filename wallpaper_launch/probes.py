"""
Liveness probes for Steam, Wallpaper Engine and its windows.

None of the external programs offer notifications, so every check is a one-off
query meant to be called from a polling loop.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Callable, Iterable, Sequence

import psutil

LOG = logging.getLogger(__name__)

RENDERER_IMAGE_NAMES = ("wallpaper32.exe", "wallpaper64.exe")
STEAM_WINDOW_CLASS = "steamwebhelper"

RunCallable = Callable[..., "subprocess.CompletedProcess[bytes]"]


class WindowProbe:
    """Query X11 windows through ``xdotool search``."""

    def __init__(self, xdotool: Path, run: RunCallable = subprocess.run) -> None:
        self.xdotool = xdotool
        self._run = run

    def _search(self, flag: str, pattern: str) -> bool:
        try:
            result = self._run(
                [str(self.xdotool), "search", flag, pattern],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError:
            LOG.debug("xdotool search %s %r could not be run", flag, pattern, exc_info=True)
            return False
        return result.returncode == 0

    def title_exists(self, title: str) -> bool:
        return self._search("--name", title)

    def class_exists(self, window_class: str) -> bool:
        return self._search("--class", window_class)

    def platform_is_running(self) -> bool:
        return self.class_exists(STEAM_WINDOW_CLASS)


def _process_matches(info: dict, image_names: Sequence[str]) -> bool:
    name = info.get("name") or ""
    cmdline = " ".join(info.get("cmdline") or ())
    return any(image in name or image in cmdline for image in image_names)


class RendererProcessProbe:
    """
    Report whether a Wallpaper Engine process exists.

    Under Proton the Windows image name only shows up in the command line, so
    both the process name and the full command line are inspected.
    """

    def __init__(
        self,
        image_names: Sequence[str] = RENDERER_IMAGE_NAMES,
        process_iter: Callable[..., Iterable[psutil.Process]] = psutil.process_iter,
    ) -> None:
        self.image_names = tuple(image_names)
        self._process_iter = process_iter

    def is_running(self) -> bool:
        for proc in self._process_iter(["name", "cmdline"]):
            if _process_matches(proc.info, self.image_names):
                return True
        return False

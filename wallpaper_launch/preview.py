"""
Terminal previews of workshop items, rendered with ``chafa``.
"""

from __future__ import annotations

import logging
import subprocess
import tempfile
from pathlib import Path
from typing import Callable, List, Optional

from .errors import ExecutionError

LOG = logging.getLogger(__name__)

CHAFA_ARGS = ("--symbols=block", "--fill=block", "--size=40x20")

RunCallable = Callable[..., "subprocess.CompletedProcess[bytes]"]


class PreviewRenderer:
    """
    Draw ``preview.jpg`` or the first frame of ``preview.gif`` in the terminal.

    GIFs go through ``magick`` first since chafa would otherwise animate them.
    """

    def __init__(self, chafa: Path, magick: Path, run: RunCallable = subprocess.run) -> None:
        self.chafa = chafa
        self.magick = magick
        self._run = run

    def _call(self, argv: List[str]) -> "subprocess.CompletedProcess[bytes]":
        try:
            return self._run(argv)
        except OSError as exc:
            raise ExecutionError(f"Failed to run {argv[0]}: {exc}") from exc

    def _chafa(self, image: Path) -> None:
        self._call([str(self.chafa), *CHAFA_ARGS, str(image)])

    def first_frame(self, gif: Path, target: Path) -> Optional[Path]:
        result = self._call([str(self.magick), f"{gif}[0]", str(target)])
        if result.returncode != 0:
            LOG.warning("magick could not extract the first frame of %s", gif)
            return None
        return target

    def show(self, directory: Path) -> None:
        jpg = directory / "preview.jpg"
        gif = directory / "preview.gif"

        if jpg.exists():
            self._chafa(jpg)
        elif gif.exists():
            with tempfile.TemporaryDirectory(prefix="wallpaper-preview-") as tmp:
                frame = self.first_frame(gif, Path(tmp) / "frame.png")
                if frame is not None:
                    self._chafa(frame)
        else:
            print(f"No preview image found in {directory}")

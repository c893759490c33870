"""
Lookup of the external binaries the launcher shells out to.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from ..errors import ExternalToolError

WhichCallable = Callable[[str], Optional[str]]


def require_binary(name: str, which: Optional[WhichCallable] = None) -> Path:
    """Return the absolute path of ``name`` on ``PATH`` or raise :class:`ExternalToolError`."""

    found = (which or shutil.which)(name)
    if not found:
        raise ExternalToolError(name)
    return Path(found)


@dataclass(frozen=True)
class Binaries:
    steam: Path
    xdotool: Path
    chafa: Optional[Path] = None
    magick: Optional[Path] = None

    @classmethod
    def locate(cls, *, preview: bool = True, which: Optional[WhichCallable] = None) -> "Binaries":
        """
        Resolve every binary needed for a run.

        ``chafa`` and ``magick`` are only required when previews are rendered.
        """

        return cls(
            steam=require_binary("steam", which),
            xdotool=require_binary("xdotool", which),
            chafa=require_binary("chafa", which) if preview else None,
            magick=require_binary("magick", which) if preview else None,
        )

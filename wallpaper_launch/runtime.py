"""
Direct invocation of the Proton runtime and the renderer control protocol.
"""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from .errors import ExecutionError

LOG = logging.getLogger(__name__)

PopenCallable = Callable[..., subprocess.Popen]

STOP_ARGS = ("-nobrowse", "-control", "stop")


def control_args(file_path: str, title: str, width: int, height: int) -> List[str]:
    """Arguments asking Wallpaper Engine to open ``file_path`` in a window named ``title``."""

    return [
        "-nobrowse",
        "-control",
        "openWallpaper",
        "-file",
        file_path,
        "-playInWindow",
        title,
        "-width",
        str(width),
        "-height",
        str(height),
    ]


@dataclass(frozen=True)
class LaunchEnvironment:
    """
    Variables Proton needs when it is not started by Steam itself.

    The value is handed to each spawned process explicitly; the launcher's own
    ``os.environ`` is left untouched.
    """

    proton_dir: Path
    compat_data_path: Path
    client_install_path: Path

    def variables(self) -> Dict[str, str]:
        return {
            "PROTON_DIR": str(self.proton_dir),
            "STEAM_COMPAT_DATA_PATH": str(self.compat_data_path),
            "STEAM_COMPAT_CLIENT_INSTALL_PATH": str(self.client_install_path),
        }

    def as_environ(self, base: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        environ = dict(os.environ if base is None else base)
        environ.update(self.variables())
        return environ


def spawn(
    argv: Sequence[str],
    *,
    env: Optional[Mapping[str, str]] = None,
    new_session: bool = False,
    popen: PopenCallable = subprocess.Popen,
) -> subprocess.Popen:
    """Start ``argv`` without waiting for it, mapping spawn failures to :class:`ExecutionError`."""

    LOG.debug("Spawning %s", " ".join(argv))
    try:
        return popen(
            list(argv),
            env=dict(env) if env is not None else None,
            start_new_session=new_session,
        )
    except OSError as exc:
        raise ExecutionError(f"Failed to run {argv[0]}: {exc}") from exc


class ProtonRuntime:
    """Run the renderer through ``<proton> run <exe>``, bypassing Steam."""

    def __init__(self, entry_point: Path, renderer_exe: Path, popen: PopenCallable = subprocess.Popen) -> None:
        self.entry_point = entry_point
        self.renderer_exe = renderer_exe
        self._popen = popen

    def run(self, args: Sequence[str], env: Optional[Mapping[str, str]] = None) -> subprocess.Popen:
        argv = [str(self.entry_point), "run", str(self.renderer_exe), *args]
        return spawn(argv, env=env, popen=self._popen)

    def stop(self, env: Optional[Mapping[str, str]] = None) -> subprocess.Popen:
        return self.run(STOP_ARGS, env=env)

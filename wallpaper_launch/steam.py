"""
Steam client command interface.

Commands are forwarded by the ``steam`` binary to the already running client;
see https://developer.valvesoftware.com/wiki/Command_line_options.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Callable, Mapping, Optional, Sequence

from .errors import ExecutionError
from .runtime import PopenCallable, spawn

LOG = logging.getLogger(__name__)

RunCallable = Callable[..., "subprocess.CompletedProcess[bytes]"]


class SteamClient:
    def __init__(
        self,
        steam_bin: Path,
        app_id: int,
        *,
        run: RunCallable = subprocess.run,
        popen: PopenCallable = subprocess.Popen,
    ) -> None:
        self.steam_bin = steam_bin
        self.app_id = app_id
        self._run = run
        self._popen = popen

    def _command(self, *args: str) -> int:
        argv = [str(self.steam_bin), *args]
        LOG.debug("Running %s", " ".join(argv))
        try:
            result = self._run(argv)
        except OSError as exc:
            raise ExecutionError(f"Failed to run {argv[0]}: {exc}") from exc
        return result.returncode

    def stop_app(self) -> int:
        return self._command("+app_stop", str(self.app_id))

    def set_compat_tool(self, internal_name: str) -> int:
        """Bind the compatibility tool ``internal_name`` to the app."""

        returncode = self._command("+app_change_compat_tool", str(self.app_id), internal_name)
        if returncode != 0:
            LOG.warning("steam +app_change_compat_tool exited with status %s", returncode)
        return returncode

    def launch_app(
        self, args: Sequence[str], env: Optional[Mapping[str, str]] = None
    ) -> subprocess.Popen:
        """Start the app through Steam in its own session so it outlives the launcher."""

        argv = [str(self.steam_bin), "-applaunch", str(self.app_id), *args]
        return spawn(argv, env=env, new_session=True, popen=self._popen)

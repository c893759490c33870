"""
Launch orchestration for a batch of wallpapers.

The orchestrator walks a fixed sequence of states::

    AWAITING_PLATFORM -> STOPPING_PRIOR_INSTANCE -> BINDING_COMPAT_TOOL
        -> (LAUNCHING -> AWAITING_WINDOW) per item -> FINAL_STOP -> DONE

Every wait is a cooperative polling loop on ``config.poll_interval``; nothing
runs concurrently because all instances share one renderer process and one
window namespace.  Spawned processes are never waited on.
"""

from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Callable, Optional, Sequence

from .compat import CompatTool, internal_identifier
from .config import LaunchConfig, LaunchPathPolicy, WindowWaitPolicy
from .content import ContentItem
from .errors import ConfigurationError, WindowTimeoutError
from .probes import RendererProcessProbe, WindowProbe
from .runtime import LaunchEnvironment, ProtonRuntime, control_args
from .steam import SteamClient

LOG = logging.getLogger(__name__)

__all__ = [
    "LaunchOrchestrator",
    "LaunchPath",
    "LaunchPathPolicy",
    "LaunchState",
    "WindowWaitPolicy",
]


class LaunchState(str, Enum):
    IDLE = "idle"
    AWAITING_PLATFORM = "awaiting-platform"
    STOPPING_PRIOR_INSTANCE = "stopping-prior-instance"
    BINDING_COMPAT_TOOL = "binding-compat-tool"
    LAUNCHING = "launching"
    AWAITING_WINDOW = "awaiting-window"
    FINAL_STOP = "final-stop"
    DONE = "done"


class LaunchPath(str, Enum):
    STEAM = "steam"
    DIRECT = "direct"


class LaunchOrchestrator:
    """
    Drive Wallpaper Engine through Steam/Proton for a list of workshop items.

    Parameters
    ----------
    config:
        Launcher configuration; supplies paths, dimensions and poll timing.
    tool:
        The resolved compatibility tool to bind to the render target.
    steam, runtime:
        Command wrappers for the Steam client and the Proton runtime.
    processes, windows:
        Liveness probes for the renderer process and its windows.
    presenter:
        Optional callback run before each item is launched.
    sleep, monotonic:
        Clock hooks, replaced by tests.
    """

    def __init__(
        self,
        config: LaunchConfig,
        tool: CompatTool,
        *,
        steam: SteamClient,
        runtime: ProtonRuntime,
        processes: RendererProcessProbe,
        windows: WindowProbe,
        launch_policy: Optional[LaunchPathPolicy] = None,
        wait_policy: Optional[WindowWaitPolicy] = None,
        presenter: Optional[Callable[[ContentItem], None]] = None,
        sleep: Callable[[float], None] = time.sleep,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config
        self.tool = tool
        self.steam = steam
        self.runtime = runtime
        self.processes = processes
        self.windows = windows
        self.launch_policy = launch_policy or config.launch_path_policy
        self.wait_policy = wait_policy or config.window_wait_policy()
        self.presenter = presenter
        self._sleep = sleep
        self._monotonic = monotonic
        self.environment = LaunchEnvironment(
            proton_dir=tool.path,
            compat_data_path=config.compat_data_path,
            client_install_path=config.steam_root,
        )
        self.state = LaunchState.IDLE

    # ------------------------------------------------------------------ helpers

    def _enter(self, state: LaunchState) -> None:
        LOG.debug("State %s -> %s", self.state.value, state.value)
        self.state = state

    # ------------------------------------------------------------------ steps

    def await_platform(self) -> None:
        """Block until the Steam client is up. There is no timeout."""

        self._enter(LaunchState.AWAITING_PLATFORM)
        if self.windows.platform_is_running():
            return
        LOG.info("Waiting for Steam to start...")
        LOG.info("You must do this manually.")
        while not self.windows.platform_is_running():
            self._sleep(self.config.poll_interval)

    def stop_prior_instance(self) -> int:
        """
        Stop Wallpaper Engine and wait until no instance is left.

        The stop command is repeated on every poll that still finds a process.
        Returns the number of stop commands sent.
        """

        self._enter(LaunchState.STOPPING_PRIOR_INSTANCE)
        self.steam.stop_app()
        sent = 1
        while self.processes.is_running():
            self.steam.stop_app()
            sent += 1
            self._sleep(self.config.poll_interval)
        LOG.debug("No Wallpaper Engine instance left after %d stop command(s)", sent)
        return sent

    def bind_compat_tool(self) -> str:
        self._enter(LaunchState.BINDING_COMPAT_TOOL)
        name = internal_identifier(self.tool)
        LOG.info("Setting compatibility tool for app %s to %s", self.config.app_id, name)
        self.steam.set_compat_tool(name)
        return name

    def select_launch_path(self) -> LaunchPath:
        """
        Steam performs the per-batch setup, so it starts the first instance.

        Once a renderer is running the remaining items talk to Proton directly.
        """

        if self.launch_policy is LaunchPathPolicy.ALWAYS_DIRECT:
            return LaunchPath.DIRECT
        if self.processes.is_running():
            return LaunchPath.DIRECT
        return LaunchPath.STEAM

    def launch(self, item: ContentItem) -> LaunchPath:
        self._enter(LaunchState.LAUNCHING)
        args = control_args(
            item.emulated_project_path(self.config.drive_prefix),
            item.window_title,
            self.config.width,
            self.config.height,
        )
        path = self.select_launch_path()
        env = self.environment.as_environ()
        LOG.info("Launching workshop item %s as %r via %s", item.identifier, item.window_title, path.value)
        if path is LaunchPath.STEAM:
            self.steam.launch_app(args, env=env)
        else:
            self.runtime.run(args, env=env)
        return path

    def await_window(self, item: ContentItem) -> None:
        self._enter(LaunchState.AWAITING_WINDOW)
        title = item.window_title
        timeout = self.wait_policy.timeout
        started = self._monotonic()
        while not self.windows.title_exists(title):
            if timeout is not None and self._monotonic() - started >= timeout:
                raise WindowTimeoutError(title, timeout)
            self._sleep(self.config.poll_interval)
        LOG.debug("Window %r is up", title)

    def final_stop(self) -> None:
        """Ask the renderer to stop drawing in the background; not awaited."""

        self._enter(LaunchState.FINAL_STOP)
        self.runtime.stop(env=self.environment.as_environ())

    # ------------------------------------------------------------------ public API

    def run(self, items: Sequence[ContentItem]) -> None:
        """
        Launch every item in order.

        Any error aborts the remaining batch; instances that already started
        keep running and the final stop is not sent.
        """

        if not items:
            raise ConfigurationError("no wallpapers provided")

        self.await_platform()
        self.stop_prior_instance()
        self.bind_compat_tool()

        for item in items:
            if self.presenter is not None:
                self.presenter(item)
            self.launch(item)
            self.await_window(item)

        self.final_stop()
        self._enter(LaunchState.DONE)

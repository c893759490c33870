"""Tests covering the xdotool and process probes, and the Steam/Proton wrappers."""

from __future__ import annotations

import subprocess
from pathlib import Path
from types import SimpleNamespace
from typing import List

import pytest

from wallpaper_launch.errors import ExecutionError
from wallpaper_launch.probes import RendererProcessProbe, WindowProbe
from wallpaper_launch.runtime import LaunchEnvironment, ProtonRuntime
from wallpaper_launch.steam import SteamClient


class RecordingRun:
    def __init__(self, returncode: int = 0) -> None:
        self.calls: List[List[str]] = []
        self.returncode = returncode

    def __call__(self, argv: List[str], **kwargs) -> subprocess.CompletedProcess:
        self.calls.append(argv)
        return subprocess.CompletedProcess(argv, self.returncode)


class RecordingPopen:
    def __init__(self) -> None:
        self.calls: List[dict] = []

    def __call__(self, argv: List[str], **kwargs) -> SimpleNamespace:
        self.calls.append({"argv": argv, **kwargs})
        return SimpleNamespace(args=argv)


def failing(*args, **kwargs):
    raise FileNotFoundError("no such file")


def test_window_probe_queries_title_and_class() -> None:
    run = RecordingRun()
    probe = WindowProbe(Path("/usr/bin/xdotool"), run=run)

    assert probe.title_exists("Wallpaper #3")
    assert probe.platform_is_running()
    assert run.calls == [
        ["/usr/bin/xdotool", "search", "--name", "Wallpaper #3"],
        ["/usr/bin/xdotool", "search", "--class", "steamwebhelper"],
    ]


def test_window_probe_failure_means_absent() -> None:
    assert not WindowProbe(Path("xdotool"), run=RecordingRun(returncode=1)).title_exists("x")
    assert not WindowProbe(Path("xdotool"), run=failing).class_exists("x")


def fake_processes(*entries):
    def process_iter(attrs):
        assert attrs == ["name", "cmdline"]
        return [SimpleNamespace(info=entry) for entry in entries]

    return process_iter


def test_renderer_probe_matches_command_line() -> None:
    probe = RendererProcessProbe(
        process_iter=fake_processes(
            {"name": "bash", "cmdline": ["bash"]},
            {"name": "wine64-preloader", "cmdline": ["Z:\\steam\\wallpaper_engine\\wallpaper64.exe", "-nobrowse"]},
        )
    )
    assert probe.is_running()


def test_renderer_probe_matches_name_and_handles_denied_cmdline() -> None:
    probe = RendererProcessProbe(process_iter=fake_processes({"name": "wallpaper32.exe", "cmdline": None}))
    assert probe.is_running()


def test_renderer_probe_absent() -> None:
    probe = RendererProcessProbe(process_iter=fake_processes({"name": "steam", "cmdline": ["steam"]}))
    assert not probe.is_running()


def test_steam_client_commands() -> None:
    run = RecordingRun()
    popen = RecordingPopen()
    steam = SteamClient(Path("/usr/bin/steam"), 431960, run=run, popen=popen)

    steam.stop_app()
    steam.set_compat_tool("proton_9")
    steam.launch_app(["-nobrowse"], env={"A": "1"})

    assert run.calls == [
        ["/usr/bin/steam", "+app_stop", "431960"],
        ["/usr/bin/steam", "+app_change_compat_tool", "431960", "proton_9"],
    ]
    assert popen.calls == [
        {
            "argv": ["/usr/bin/steam", "-applaunch", "431960", "-nobrowse"],
            "env": {"A": "1"},
            "start_new_session": True,
        }
    ]


def test_steam_client_spawn_failure_is_fatal() -> None:
    steam = SteamClient(Path("/missing/steam"), 431960, run=failing, popen=failing)

    with pytest.raises(ExecutionError):
        steam.set_compat_tool("proton_9")
    with pytest.raises(ExecutionError):
        steam.launch_app([])


def test_proton_runtime_run_and_stop() -> None:
    popen = RecordingPopen()
    runtime = ProtonRuntime(Path("/tools/proton"), Path("/we/wallpaper64.exe"), popen=popen)

    runtime.run(["-control", "openWallpaper"])
    runtime.stop()

    assert [call["argv"] for call in popen.calls] == [
        ["/tools/proton", "run", "/we/wallpaper64.exe", "-control", "openWallpaper"],
        ["/tools/proton", "run", "/we/wallpaper64.exe", "-nobrowse", "-control", "stop"],
    ]


def test_launch_environment_does_not_touch_base() -> None:
    base = {"PATH": "/usr/bin"}
    environment = LaunchEnvironment(Path("/tools/GE"), Path("/compat/431960"), Path("/steam"))

    merged = environment.as_environ(base)

    assert base == {"PATH": "/usr/bin"}
    assert merged == {
        "PATH": "/usr/bin",
        "PROTON_DIR": "/tools/GE",
        "STEAM_COMPAT_DATA_PATH": "/compat/431960",
        "STEAM_COMPAT_CLIENT_INSTALL_PATH": "/steam",
    }

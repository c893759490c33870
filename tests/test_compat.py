"""Tests covering compatibility tool lookup and internal name derivation."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from wallpaper_launch.compat import (
    CompatResolver,
    CompatTool,
    NameSource,
    derive_internal_name,
    internal_identifier,
    snake_case,
)
from wallpaper_launch.config import LaunchConfig
from wallpaper_launch.errors import ResolutionError


def make_tool_dir(base: Path, name: str) -> Path:
    path = base / name
    path.mkdir(parents=True)
    (path / "proton").write_text("#!/bin/sh\n")
    return path


def builtin(name: str) -> CompatTool:
    return CompatTool(name=name, path=Path("/unused") / name, builtin=True)


def test_user_installed_only(tmp_path: Path) -> None:
    config = LaunchConfig(steam_root=tmp_path)
    make_tool_dir(config.compat_tools_dir, "GE-Proton9-20")

    tool = CompatResolver(config).resolve("GE-Proton9-20")

    assert tool.builtin is False
    assert tool.path == config.compat_tools_dir / "GE-Proton9-20"
    assert internal_identifier(tool) == "GE-Proton9-20"
    assert derive_internal_name(tool).source is NameSource.VERBATIM


def test_vendor_only(tmp_path: Path) -> None:
    config = LaunchConfig(steam_root=tmp_path)
    make_tool_dir(config.common_dir, "Proton 9.0 (Beta)")

    tool = CompatResolver(config).resolve("Proton 9.0 (Beta)")

    assert tool.builtin is True
    assert tool.path == config.common_dir / "Proton 9.0 (Beta)"
    assert tool.runtime_entry == tool.path / "proton"
    assert tool.internal_name() == "proton_9"


def test_user_installed_overrides_vendor(tmp_path: Path) -> None:
    config = LaunchConfig(steam_root=tmp_path)
    make_tool_dir(config.common_dir, "Proton 10.0")
    make_tool_dir(config.compat_tools_dir, "Proton 10.0")

    tool = CompatResolver(config).resolve("Proton 10.0")

    assert tool.builtin is False
    assert tool.path == config.compat_tools_dir / "Proton 10.0"
    assert internal_identifier(tool) == "Proton 10.0"


def test_missing_tool_reports_name(tmp_path: Path) -> None:
    resolver = CompatResolver(LaunchConfig(steam_root=tmp_path))

    with pytest.raises(ResolutionError) as excinfo:
        resolver.resolve("Proton 1.0")

    assert excinfo.value.name == "Proton 1.0"
    assert "Proton 1.0" in str(excinfo.value)


def test_empty_name_is_not_resolved(tmp_path: Path) -> None:
    config = LaunchConfig(steam_root=tmp_path)
    config.common_dir.mkdir(parents=True)

    with pytest.raises(ResolutionError):
        CompatResolver(config).resolve("")


def test_snake_case() -> None:
    assert snake_case("Proton 9.0 (Beta)") == "proton_9_0_beta"
    assert snake_case("Proton Experimental") == "proton_experimental"
    assert snake_case("GE-Proton9-20") == "ge_proton9_20"
    assert snake_case("SteamLinuxRuntime") == "steam_linux_runtime"


@pytest.mark.parametrize(
    ("display_name", "expected"),
    [
        ("Proton Experimental", "proton_experimental"),
        ("Proton Hotfix", "proton_hotfix"),
        ("Proton 10.0", "proton_10"),
        ("Proton 9.0 (Beta)", "proton_9"),
        ("Proton 8.0", "proton_8"),
        ("Proton 4.11", "proton_411"),
        ("Proton 5.13", "proton_513"),
        ("Proton 3.7 Beta", "proton_37"),
    ],
)
def test_vendor_internal_names(display_name: str, expected: str) -> None:
    result = derive_internal_name(builtin(display_name))

    assert result.value == expected
    assert result.source is NameSource.DERIVED
    assert result.confident


@pytest.mark.parametrize(
    ("display_name", "expected"),
    [
        ("Proton EasyAntiCheat Runtime", "proton_easy_anti_cheat_runtime"),
        ("Proton BattlEye Runtime", "proton_battl_eye_runtime"),
        ("Proton 8.0 Hotfix", "proton_8_0_hotfix"),
        ("Proton Experimental Beta", "proton_experimental_beta"),
    ],
)
def test_multi_word_vendor_names_fall_back(display_name: str, expected: str) -> None:
    result = derive_internal_name(builtin(display_name))

    assert result.source is NameSource.FALLBACK
    assert result.value == expected


def test_unrecognised_vendor_name_falls_back(caplog: pytest.LogCaptureFixture) -> None:
    tool = builtin("Steam Linux Runtime 3.0 (sniper)")

    result = derive_internal_name(tool)
    assert result.source is NameSource.FALLBACK
    assert result.value == "steam_linux_runtime_3_0_sniper"
    assert not result.confident

    with caplog.at_level(logging.WARNING, logger="wallpaper_launch.compat"):
        assert internal_identifier(tool) == "steam_linux_runtime_3_0_sniper"
    assert any("internal name" in record.getMessage() for record in caplog.records)


def test_discover_lists_tools_with_override(tmp_path: Path) -> None:
    config = LaunchConfig(steam_root=tmp_path)
    make_tool_dir(config.common_dir, "Proton 9.0 (Beta)")
    make_tool_dir(config.common_dir, "Proton Experimental")
    make_tool_dir(config.compat_tools_dir, "Proton Experimental")
    make_tool_dir(config.compat_tools_dir, "GE-Proton9-20")
    (config.common_dir / "wallpaper_engine").mkdir()

    tools = CompatResolver(config).discover()

    assert [tool.name for tool in tools] == ["GE-Proton9-20", "Proton 9.0 (Beta)", "Proton Experimental"]
    assert [tool.builtin for tool in tools] == [False, True, False]

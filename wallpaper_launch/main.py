"""
Command line entrypoint.

Resolves the requested Proton build, validates the request, then hands the
batch to :class:`wallpaper_launch.orchestrator.LaunchOrchestrator`.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Iterable, Optional

from .compat import CompatResolver, derive_internal_name
from .config import LaunchConfig, LaunchPathPolicy
from .content import ContentItem, describe, load_project_info
from .errors import ConfigurationError, LaunchError
from .orchestrator import LaunchOrchestrator
from .preview import PreviewRenderer
from .probes import RendererProcessProbe, WindowProbe
from .runtime import ProtonRuntime
from .steam import SteamClient
from .utils.binaries import Binaries
from .utils.logging import configure_logging

LOG = logging.getLogger(__name__)


def parse_args(argv: Optional[Iterable[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="wallpaper-launch",
        description="Launch Wallpaper Engine wallpapers through Proton, one window each.",
    )
    parser.add_argument(
        "-p",
        "--proton-version",
        help=(
            'Proton version folder name (e.g. "Proton 10.0" or "GE-Proton7-55") under '
            "~/.steam/steam/compatibilitytools.d/ or ~/.steam/steam/steamapps/common/"
        ),
    )
    parser.add_argument("-a", "--arch", help="Wallpaper Engine architecture: 64 or 32")
    parser.add_argument(
        "-w",
        "--wallpaper-ids",
        nargs="+",
        action="extend",
        default=[],
        metavar="ID",
        help="workshop item ids to launch, in order",
    )
    parser.add_argument("--steam-root", default=None, help="Steam install root (default: ~/.steam/steam)")
    parser.add_argument("--width", type=int, default=1920, help="wallpaper window width")
    parser.add_argument("--height", type=int, default=1080, help="wallpaper window height")
    parser.add_argument(
        "--window-timeout",
        type=float,
        default=20.0,
        help="seconds to wait for each wallpaper window; 0 waits forever",
    )
    parser.add_argument(
        "--direct",
        action="store_true",
        help="always start wallpapers through Proton directly instead of Steam",
    )
    parser.add_argument("--no-preview", action="store_true", help="do not render previews in the terminal")
    parser.add_argument(
        "--list-compat-tools",
        action="store_true",
        help="list installed compatibility tools with their internal names and exit",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    args = parser.parse_args(argv)

    if not args.list_compat_tools:
        missing = [flag for flag, value in (("--proton-version", args.proton_version), ("--arch", args.arch)) if not value]
        if missing:
            parser.error(f"the following arguments are required: {', '.join(missing)}")
    if not args.window_timeout >= 0:
        parser.error("--window-timeout must be 0 (wait forever) or a positive number of seconds")
    return args


def build_config(args: argparse.Namespace) -> LaunchConfig:
    return LaunchConfig.from_environment(
        steam_root=args.steam_root,
        width=args.width,
        height=args.height,
        window_timeout=args.window_timeout if args.window_timeout > 0 else None,
        launch_path_policy=LaunchPathPolicy.ALWAYS_DIRECT if args.direct else LaunchPathPolicy.AUTO_DETECT,
    )


def list_compat_tools(resolver: CompatResolver) -> int:
    tools = resolver.discover()
    if not tools:
        LOG.warning(
            "No compatibility tools found under %s or %s",
            resolver.config.common_dir,
            resolver.config.compat_tools_dir,
        )
        return 1
    for tool in tools:
        internal = derive_internal_name(tool)
        kind = "builtin" if tool.builtin else "custom"
        print(f"{tool.name}\t{internal.value}\t{kind}\t{internal.source.value}")
    return 0


def make_presenter(preview: Optional[PreviewRenderer]):
    def present(item: ContentItem) -> None:
        print(f"\n# {item.window_title}")
        info = load_project_info(item.directory)
        if info is not None:
            text = describe(info)
            if text:
                print(text)
        if preview is not None:
            preview.show(item.directory)

    return present


def launch(args: argparse.Namespace) -> int:
    config = build_config(args)
    resolver = CompatResolver(config)

    if args.list_compat_tools:
        return list_compat_tools(resolver)

    tool = resolver.resolve(args.proton_version)
    LOG.info("Compatibility tool: %s (%s, builtin=%s)", tool.name, tool.path, tool.builtin)
    LOG.info("Internal name: %s", tool.internal_name())

    renderer_exe = config.renderer_executable(args.arch)

    if not args.wallpaper_ids:
        raise ConfigurationError("no wallpapers provided")

    binaries = Binaries.locate(preview=not args.no_preview)
    preview = None
    if binaries.chafa is not None and binaries.magick is not None:
        preview = PreviewRenderer(binaries.chafa, binaries.magick)

    orchestrator = LaunchOrchestrator(
        config,
        tool,
        steam=SteamClient(binaries.steam, config.app_id),
        runtime=ProtonRuntime(tool.runtime_entry, renderer_exe),
        processes=RendererProcessProbe(),
        windows=WindowProbe(binaries.xdotool),
        presenter=make_presenter(preview),
    )
    orchestrator.run(ContentItem.batch(args.wallpaper_ids, config))
    return 0


def main(argv: Optional[Iterable[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        return launch(args)
    except LaunchError as exc:
        LOG.error("%s", exc)
        return 1
    except KeyboardInterrupt:
        LOG.info("Launch interrupted by user.")
        return 130


if __name__ == "__main__":
    sys.exit(main())

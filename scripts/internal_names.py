"""Print the Steam internal names derived for Proton display names.

Useful when Valve ships a new Proton build and the naming heuristic needs to
be checked without touching a Steam installation.

Examples
--------
Check a few Valve builds::

    python scripts/internal_names.py "Proton 10.0" "Proton 9.0 (Beta)" "Proton 4.11"

Treat a name as a user-installed tool::

    python scripts/internal_names.py --custom GE-Proton9-20
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Iterable

from wallpaper_launch.compat import CompatTool, derive_internal_name, snake_case


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Derive Steam internal compatibility tool names")
    parser.add_argument("names", nargs="+", help="display names as shown in Steam")
    parser.add_argument(
        "--custom",
        action="store_true",
        help="treat the names as user-installed tools (compatibilitytools.d)",
    )
    return parser.parse_args(argv)


def main(argv: Iterable[str] | None = None) -> int:
    args = parse_args(argv)
    status = 0
    for name in args.names:
        tool = CompatTool(name=name, path=Path(name), builtin=not args.custom)
        result = derive_internal_name(tool)
        print(f"{name!r:32} {snake_case(name):32} {result.value:24} {result.source.value}")
        if not result.confident:
            status = 1
    return status


if __name__ == "__main__":
    sys.exit(main())

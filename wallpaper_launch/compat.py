"""
Proton compatibility tool resolution.

Steam knows a compatibility tool by two names: the folder name shown in its UI
(``Proton 9.0 (Beta)``, ``GE-Proton9-20``) and an internal identifier that the
``+app_change_compat_tool`` command expects.  User-installed tools under
``compatibilitytools.d`` use their folder name verbatim.  Valve's own Proton
builds under ``steamapps/common`` use slugs such as ``proton_9`` or
``proton_411`` which are not published anywhere; :func:`derive_internal_name`
reverse engineers them and may break on future Steam releases.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, List

from .config import LaunchConfig
from .errors import ResolutionError

LOG = logging.getLogger(__name__)

RUNTIME_ENTRY_NAME = "proton"

# Matched against the snake-cased display name.  Only the ``name`` group is
# kept.  A numbered release may end in a bare ``.0`` minor and a known
# qualifier such as ``(Beta)``, both discarded; a named release is one word.
INTERNAL_NAME_QUALIFIERS = ("beta",)

INTERNAL_NAME_PATTERN = re.compile(
    r"""
    ^(?P<name>
        proton_
        (?:
            \d+(?:_(?!0(?:_|$))\d+)?
          | [a-z][a-z0-9]*(?=$)
        )
    )
    (?:_0)?
    (?:_(?:%s))?
    $
    """
    % "|".join(INTERNAL_NAME_QUALIFIERS),
    re.VERBOSE,
)

_WORD_PATTERN = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z0-9]+|[A-Z]+[0-9]*")


def snake_case(text: str) -> str:
    """
    Lower snake-case transform for arbitrary human text.

    Words are split at every non-alphanumeric character and at camel-case
    humps: ``"Proton 9.0 (Beta)"`` becomes ``"proton_9_0_beta"``.
    """

    return "_".join(word.lower() for word in _WORD_PATTERN.findall(text))


class NameSource(str, Enum):
    """Where an internal identifier came from."""

    VERBATIM = "verbatim"
    DERIVED = "derived"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class InternalName:
    value: str
    source: NameSource

    @property
    def confident(self) -> bool:
        return self.source is not NameSource.FALLBACK


@dataclass(frozen=True)
class CompatTool:
    """A resolved compatibility tool installation."""

    name: str
    path: Path
    builtin: bool

    @property
    def runtime_entry(self) -> Path:
        return self.path / RUNTIME_ENTRY_NAME

    def internal_name(self) -> str:
        return internal_identifier(self)


def derive_internal_name(tool: CompatTool) -> InternalName:
    """
    Compute the identifier Steam uses to select ``tool``.

    Never raises: when the vendor naming grammar does not match, the plain
    snake-cased name is returned tagged as :attr:`NameSource.FALLBACK`.
    """

    if not tool.builtin:
        return InternalName(tool.name, NameSource.VERBATIM)

    snake = snake_case(tool.name)
    match = INTERNAL_NAME_PATTERN.match(snake)
    if match is None:
        return InternalName(snake, NameSource.FALLBACK)

    # ``proton`` keeps its separator, every other underscore goes.
    prefix, _, rest = match.group("name").partition("_")
    return InternalName(f"{prefix}_{rest.replace('_', '')}", NameSource.DERIVED)


def internal_identifier(tool: CompatTool) -> str:
    result = derive_internal_name(tool)
    if not result.confident:
        LOG.warning(
            "Could not derive Steam's internal name for %r; continuing with %r",
            tool.name,
            result.value,
        )
    return result.value


class CompatResolver:
    """
    Locate compatibility tools on disk.

    A folder found under ``compatibilitytools.d`` always wins over one with
    the same name under ``steamapps/common``.
    """

    def __init__(self, config: LaunchConfig) -> None:
        self.config = config

    def resolve(self, name: str) -> CompatTool:
        if not name:
            raise ResolutionError(name)

        vendor_dir = self.config.common_dir / name
        user_dir = self.config.compat_tools_dir / name

        if user_dir.exists():
            tool = CompatTool(name=name, path=user_dir, builtin=False)
        elif vendor_dir.exists():
            tool = CompatTool(name=name, path=vendor_dir, builtin=True)
        else:
            raise ResolutionError(name)

        LOG.debug("Resolved compatibility tool %r -> %s (builtin=%s)", name, tool.path, tool.builtin)
        return tool

    def discover(self) -> List[CompatTool]:
        """List every installed tool that ships a ``proton`` entry point."""

        found: Dict[str, CompatTool] = {}
        for base, builtin in ((self.config.common_dir, True), (self.config.compat_tools_dir, False)):
            if not base.is_dir():
                continue
            for entry in sorted(base.iterdir()):
                if not entry.is_dir() or not (entry / RUNTIME_ENTRY_NAME).exists():
                    continue
                found[entry.name] = CompatTool(name=entry.name, path=entry, builtin=builtin)
        return [found[name] for name in sorted(found)]

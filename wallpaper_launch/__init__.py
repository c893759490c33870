"""
wallpaper-launch package.

Launches Wallpaper Engine workshop items one after another through Steam's
Proton compatibility layer and waits for each wallpaper window to appear.
"""

from __future__ import annotations

from .compat import CompatResolver, CompatTool, InternalName, NameSource, derive_internal_name, internal_identifier
from .config import LaunchConfig, LaunchPathPolicy, WindowWaitPolicy
from .content import ContentItem
from .orchestrator import LaunchOrchestrator, LaunchState

__all__ = [
    "CompatResolver",
    "CompatTool",
    "ContentItem",
    "InternalName",
    "LaunchConfig",
    "LaunchOrchestrator",
    "LaunchPathPolicy",
    "LaunchState",
    "NameSource",
    "WindowWaitPolicy",
    "derive_internal_name",
    "internal_identifier",
]

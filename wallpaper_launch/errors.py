"""
Exception hierarchy shared by the resolver, the orchestrator and the CLI.
"""

from __future__ import annotations


class LaunchError(RuntimeError):
    """Base class for every fatal launcher error."""


class ResolutionError(LaunchError):
    """Raised when a compatibility tool folder cannot be found."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Proton folder not found: {name!r}")
        self.name = name


class ConfigurationError(LaunchError):
    """Raised for invalid user input or a missing renderer installation."""


class ExternalToolError(LaunchError):
    """Raised when a required binary is not on ``PATH``."""

    def __init__(self, tool: str) -> None:
        super().__init__(f"Required binary not found on PATH: {tool}")
        self.tool = tool


class ExecutionError(LaunchError):
    """Raised when Steam or Proton cannot be spawned."""


class WindowTimeoutError(LaunchError):
    """Raised when a wallpaper window does not show up within the bound."""

    def __init__(self, title: str, timeout: float) -> None:
        super().__init__(f"Window {title!r} did not appear within {timeout:.1f}s")
        self.title = title
        self.timeout = timeout

"""
Workshop items and their ``project.json`` metadata.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, ValidationError

from .config import LaunchConfig

LOG = logging.getLogger(__name__)

PROJECT_FILE_NAME = "project.json"


class ProjectInfo(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    model_config = ConfigDict(extra="ignore")


@dataclass(frozen=True)
class ContentItem:
    """One workshop item queued for launch."""

    index: int
    identifier: str
    directory: Path

    @classmethod
    def batch(cls, identifiers: Sequence[str], config: LaunchConfig) -> List["ContentItem"]:
        return [
            cls(index=index, identifier=str(identifier), directory=config.workshop_content_path / str(identifier))
            for index, identifier in enumerate(identifiers)
        ]

    @property
    def window_title(self) -> str:
        return f"Wallpaper #{self.index}"

    @property
    def project_file(self) -> Path:
        return self.directory / PROJECT_FILE_NAME

    def emulated_project_path(self, drive_prefix: str = "Z:") -> str:
        return f"{drive_prefix}{self.project_file}"


def load_project_info(directory: Path) -> Optional[ProjectInfo]:
    """Read ``project.json`` from ``directory``; missing or malformed files yield ``None``."""

    try:
        content = (directory / PROJECT_FILE_NAME).read_bytes()
    except OSError:
        LOG.debug("No readable %s in %s", PROJECT_FILE_NAME, directory)
        return None
    try:
        return ProjectInfo.model_validate_json(content)
    except (ValidationError, UnicodeDecodeError):
        LOG.debug("Ignoring malformed %s in %s", PROJECT_FILE_NAME, directory, exc_info=True)
        return None


def describe(info: ProjectInfo) -> str:
    lines: List[str] = []
    if info.title is not None:
        lines.append(f"## {info.title}")
    if info.description is not None:
        if info.title is not None:
            lines.append("")
        lines.append(info.description)
    return "\n".join(lines)

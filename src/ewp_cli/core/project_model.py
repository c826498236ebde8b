"""
Core project model for IAR Embedded Workbench project (.ewp) files.

Configuration and group blocks are kept as raw, uninterpreted XML so that a
decoded project can be written back without losing any of their content.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


# Project directory prefix for file paths
PROJECT_DIR = "$PROJ_DIR$"

# Path separator used by the toolchain
PATH_SEPARATOR = "\\"

logger = logging.getLogger(__name__)


class OpaqueBlock(BaseModel):
    """Raw inner XML of a configuration or group element."""

    raw_markup: str = ""


class FileEntry(BaseModel):
    """
    A single file reference in a project.

    ``exclusions`` is ``None`` when the file has no ``excluded`` element.
    An empty list means the element is present but names no configuration.
    """

    path: str
    exclusions: Optional[List[str]] = None

    @property
    def base_name(self) -> str:
        """Get the last segment of the path."""
        return file_base_name(self)

    @property
    def is_excluded(self) -> bool:
        return bool(self.exclusions)


def make_file_entry(name: str, *exclusions: str) -> FileEntry:
    """Create a file under the project directory with zero or more exclusions."""
    path = PROJECT_DIR + PATH_SEPARATOR + name
    return FileEntry(path=path, exclusions=list(exclusions) if exclusions else None)


def file_base_name(entry: FileEntry) -> str:
    """Get the name of the file without its directories."""
    return entry.path.split(PATH_SEPARATOR)[-1]


def file_sort_key(entry: FileEntry) -> str:
    """Files are ordered by their full path, not by base name."""
    return entry.path


class EwpProject(BaseModel):
    """
    Top-level project document.

    ``files`` stays sorted by full path after every ``insert_file`` call.
    Decoding keeps the order found in the source document.
    """

    file_version: int
    configurations: List[OpaqueBlock] = Field(default_factory=list)
    groups: List[OpaqueBlock] = Field(default_factory=list)
    files: List[FileEntry] = Field(default_factory=list)

    # Encoding named by the source's XML declaration, None if it had none
    encoding: Optional[str] = None

    def insert_file(self, entry: FileEntry) -> None:
        """
        Insert a file while maintaining file order.

        Duplicate paths are not rejected; check ``contains`` first when
        uniqueness matters.
        """
        if self.contains(entry):
            logger.warning("Inserting duplicate file path %s", entry.path)
        self.files.append(entry)
        self.files.sort(key=file_sort_key)

    def sort_files(self) -> None:
        """Re-sort the file list in place by full path."""
        self.files.sort(key=file_sort_key)

    def contains(self, entry: FileEntry) -> bool:
        """Check if a file with the same path is in the project."""
        for existing in self.files:
            if existing.path == entry.path:
                return True
        return False

    def find_file(self, path: str) -> Optional[FileEntry]:
        """Find the first file with the given path."""
        for existing in self.files:
            if existing.path == path:
                return existing
        return None

    def get_stats(self) -> Dict[str, Any]:
        """Get project statistics."""
        return {
            "file_version": self.file_version,
            "encoding": self.encoding,
            "file_count": len(self.files),
            "excluded_file_count": len([f for f in self.files if f.is_excluded]),
            "configuration_count": len(self.configurations),
            "group_count": len(self.groups),
        }

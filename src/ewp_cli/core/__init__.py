"""
Core project handling and representation modules.
"""

from .project_model import (
    PROJECT_DIR,
    PATH_SEPARATOR,
    EwpProject,
    FileEntry,
    OpaqueBlock,
    file_base_name,
    file_sort_key,
    make_file_entry,
)

__all__ = [
    "PROJECT_DIR",
    "PATH_SEPARATOR",
    "EwpProject",
    "FileEntry",
    "OpaqueBlock",
    "file_base_name",
    "file_sort_key",
    "make_file_entry",
]

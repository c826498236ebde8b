"""
EWP CLI: read and maintain IAR Embedded Workbench project files.
"""

from .core.project_model import (
    PROJECT_DIR,
    EwpProject,
    FileEntry,
    OpaqueBlock,
    file_base_name,
    file_sort_key,
    make_file_entry,
)
from .converters import decode, encode
from .exceptions import DecodeError, EncodeError, EwpError

__version__ = "0.1.0"

__all__ = [
    "PROJECT_DIR",
    "EwpProject",
    "FileEntry",
    "OpaqueBlock",
    "file_base_name",
    "file_sort_key",
    "make_file_entry",
    "decode",
    "encode",
    "DecodeError",
    "EncodeError",
    "EwpError",
]
